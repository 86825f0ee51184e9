BADGE_COLORS = [
    ("red", "แดง"),
    ("orange", "ส้ม"),
    ("yellow", "เหลือง"),
    ("green", "เขียว"),
    ("blue", "น้ำเงิน"),
    ("purple", "ม่วง"),
    ("pink", "ชมพู"),
]

BADGE_COLOR_KEYS = [key for key, _ in BADGE_COLORS]

# css classes used by the templates, one per palette key
BADGE_COLOR_CLASSES = {
    "red": "badge-red",
    "orange": "badge-orange",
    "yellow": "badge-yellow",
    "green": "badge-green",
    "blue": "badge-blue",
    "purple": "badge-purple",
    "pink": "badge-pink",
}

TAB_DEFAULT_BADGE_COLOR = "orange"
FESTIVAL_DEFAULT_BADGE_COLOR = "red"

BADGE_ICONS = ["🔥", "✨", "👑", "🌟", "💥", "🎁", "❤️", "🚀"]

SORT_OPTIONS = [
    ("popular", "ยอดนิยม"),
    ("price_asc", "ราคาต่ำ-สูง"),
    ("price_desc", "ราคาสูง-ต่ำ"),
    ("newest", "ใหม่ล่าสุด"),
    ("departure_date", "วันเดินทาง"),
]

TAB_DISPLAY_MODES = [
    ("tab", "แท็บหน้าแรก"),
    ("badge", "Badge ทุกหน้า"),
    ("period", "แสดงในรอบเดินทาง"),
    ("promotion", "แสดงในโปรโมชั่น"),
]

FESTIVAL_DISPLAY_MODES = [
    ("card", "แสดงบนการ์ดทัวร์"),
    ("period", "แสดงบนตารางรอบเดินทาง"),
]

COVER_POSITIONS = [
    ("left top", "ซ้ายบน"),
    ("top", "บน"),
    ("right top", "ขวาบน"),
    ("left center", "ซ้ายกลาง"),
    ("center", "กลาง"),
    ("right center", "ขวากลาง"),
    ("left bottom", "ซ้ายล่าง"),
    ("bottom", "ล่าง"),
    ("right bottom", "ขวาล่าง"),
]

DISPLAY_LIMIT_MIN = 1
DISPLAY_LIMIT_MAX = 50
DEFAULT_DISPLAY_LIMIT = 12

GENERIC_ERROR = "เกิดข้อผิดพลาด"
