"""
Condition type registry.

Maps every condition type key to the shape of its value and to the input the
form should render for it. Select and multiselect inputs take their choices
from the reference bundle returned by ``GET /tour-tabs/condition-options``.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, field_validator


class InputKind(str, Enum):
    NUMBER = "number"
    BOOLEAN = "boolean"
    SELECT = "select"
    MULTISELECT = "multiselect"


@dataclass(frozen=True)
class ConditionTypeInfo:
    label: str
    kind: InputKind
    placeholder: Optional[str] = None


CONDITION_TYPES: Dict[str, ConditionTypeInfo] = {
    "price_min": ConditionTypeInfo("ราคาขั้นต่ำ", InputKind.NUMBER, "เช่น 10000"),
    "price_max": ConditionTypeInfo("ราคาสูงสุด", InputKind.NUMBER, "เช่น 50000"),
    "countries": ConditionTypeInfo("ประเทศ", InputKind.MULTISELECT),
    "regions": ConditionTypeInfo("ภูมิภาค", InputKind.MULTISELECT),
    "wholesalers": ConditionTypeInfo("Wholesaler", InputKind.MULTISELECT),
    "departure_within_days": ConditionTypeInfo("เดินทางภายใน (วัน)", InputKind.NUMBER, "เช่น 30"),
    "has_discount": ConditionTypeInfo("มีส่วนลด", InputKind.BOOLEAN),
    "discount_min_percent": ConditionTypeInfo("ส่วนลดขั้นต่ำ (%)", InputKind.NUMBER, "เช่น 10"),
    "discount_min_amount": ConditionTypeInfo("ส่วนลดรอบเดินทางขั้นต่ำ (บาท)", InputKind.NUMBER, "เช่น 2000"),
    "discount_total_min_amount": ConditionTypeInfo("ส่วนลดรวมขั้นต่ำ (บาท)", InputKind.NUMBER, "เช่น 1000"),
    "tour_type": ConditionTypeInfo("ประเภททัวร์", InputKind.SELECT),
    "min_days": ConditionTypeInfo("จำนวนวันขั้นต่ำ", InputKind.NUMBER, "เช่น 3"),
    "max_days": ConditionTypeInfo("จำนวนวันสูงสุด", InputKind.NUMBER, "เช่น 7"),
    "is_premium": ConditionTypeInfo("ทัวร์พรีเมียม", InputKind.BOOLEAN),
    "created_within_days": ConditionTypeInfo("สร้างภายใน (วัน)", InputKind.NUMBER, "เช่น 7"),
    "has_available_seats": ConditionTypeInfo("มีที่ว่าง", InputKind.BOOLEAN),
    "min_views": ConditionTypeInfo("ยอดเข้าชมขั้นต่ำ", InputKind.NUMBER, "เช่น 100"),
}

# multiselect types whose selections are numeric ids; the rest use string keys
NUMERIC_ID_TYPES = frozenset({"countries", "wholesalers"})

BOOLEAN_CHOICES = (("true", "ใช่"), ("false", "ไม่"))


class CountryOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name_en: str = ""
    name_th: Optional[str] = None
    iso2: Optional[str] = None

    @property
    def label(self) -> str:
        return self.name_th or self.name_en


class WholesalerOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    code: str = ""

    @property
    def label(self) -> str:
        return f"{self.name} ({self.code})" if self.code else self.name


class ConditionOptions(BaseModel):
    """Reference data for one builder page load. Read-only once fetched."""

    model_config = ConfigDict(frozen=True)

    countries: Tuple[CountryOption, ...] = ()
    regions: Dict[str, str] = {}
    wholesalers: Tuple[WholesalerOption, ...] = ()
    tour_types: Dict[str, str] = {}
    condition_types: Dict[str, str] = {}
    sort_options: Dict[str, str] = {}
    display_modes: Dict[str, str] = {}

    @field_validator(
        "regions", "tour_types", "condition_types", "sort_options", "display_modes",
        mode="before",
    )
    @classmethod
    def empty_list_as_mapping(cls, value: Any) -> Any:
        # the backend encodes an empty mapping as []
        if value is None or value == []:
            return {}
        return value

    @field_validator("countries", "wholesalers", mode="before")
    @classmethod
    def none_as_empty(cls, value: Any) -> Any:
        return () if value is None else value


@dataclass(frozen=True)
class InputDescriptor:
    type: str
    kind: InputKind
    label: str
    placeholder: Optional[str] = None
    choices: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)

    @property
    def multiple(self) -> bool:
        return self.kind is InputKind.MULTISELECT


def value_kind(type_key: str) -> Optional[InputKind]:
    info = CONDITION_TYPES.get(type_key)
    return info.kind if info else None


def type_label(type_key: str) -> str:
    info = CONDITION_TYPES.get(type_key)
    return info.label if info else type_key


def empty_value(type_key: str) -> Any:
    return [] if value_kind(type_key) is InputKind.MULTISELECT else None


def type_choices() -> Tuple[Tuple[str, str], ...]:
    return tuple((key, info.label) for key, info in CONDITION_TYPES.items())


def _reference_choices(type_key: str, options: ConditionOptions) -> Optional[Tuple[Tuple[str, str], ...]]:
    if type_key == "tour_type":
        source = options.tour_types
        return tuple((str(k), v) for k, v in source.items()) if source else None
    if type_key == "regions":
        source = options.regions
        return tuple((str(k), v) for k, v in source.items()) if source else None
    if type_key == "countries":
        return tuple((str(c.id), c.label) for c in options.countries) or None
    if type_key == "wholesalers":
        return tuple((str(w.id), w.label) for w in options.wholesalers) or None
    return None


def get_input(type_key: str, options: Optional[ConditionOptions] = None) -> Optional[InputDescriptor]:
    """
    Describe the input for ``type_key``.

    Returns None for unknown keys, and for select/multiselect types whose
    reference list is not available.
    """
    info = CONDITION_TYPES.get(type_key)
    if info is None:
        return None

    if info.kind is InputKind.NUMBER:
        return InputDescriptor(type_key, info.kind, info.label, info.placeholder)
    if info.kind is InputKind.BOOLEAN:
        return InputDescriptor(type_key, info.kind, info.label, choices=BOOLEAN_CHOICES)

    choices = _reference_choices(type_key, options) if options else None
    if not choices:
        return None
    return InputDescriptor(type_key, info.kind, info.label, choices=choices)
