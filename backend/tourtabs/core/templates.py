from datetime import date, datetime
from pathlib import Path

from fastapi.templating import Jinja2Templates

from tourtabs.core.constants import BADGE_COLOR_CLASSES, TAB_DEFAULT_BADGE_COLOR
from tourtabs.schemas.common import resolve_badge_color
from tourtabs.utils.flash import read_flash

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

THAI_MONTHS = ["ม.ค.", "ก.พ.", "มี.ค.", "เม.ย.", "พ.ค.", "มิ.ย.", "ก.ค.", "ส.ค.", "ก.ย.", "ต.ค.", "พ.ย.", "ธ.ค."]


def badge_class(color, default: str = TAB_DEFAULT_BADGE_COLOR) -> str:
    return BADGE_COLOR_CLASSES[resolve_badge_color(color, default)]


def thai_date(value) -> str:
    if not value:
        return "-"
    if isinstance(value, str):
        value = date.fromisoformat(value[:10])
    if isinstance(value, datetime):
        value = value.date()
    return f"{value.day} {THAI_MONTHS[value.month - 1]} {value.year + 543}"


def price(value) -> str:
    if not value:
        return "-"
    return f"฿{value:,.0f}"


def duration(tour) -> str:
    if not tour.days:
        return ""
    return f"{tour.days}D{tour.nights or 0}N"


templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["badge_class"] = badge_class
templates.env.filters["thai_date"] = thai_date
templates.env.filters["price"] = price
templates.env.filters["duration"] = duration
templates.env.globals["flash_messages"] = read_flash
