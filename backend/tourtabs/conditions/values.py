"""
Condition value models.

One model class per value shape. A condition's type key decides which class
holds it, so a value is only ever read under the schema it was entered for.
"""
import logging
from decimal import Decimal, InvalidOperation
from typing import Any, ClassVar, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, ValidationError, ValidationInfo, field_validator

from tourtabs.conditions.schema import InputKind, NUMERIC_ID_TYPES, value_kind

logger = logging.getLogger(__name__)


def coerce_number(raw: Any) -> Optional[Union[int, float]]:
    if raw is None:
        return None
    if isinstance(raw, bool):
        raise ValueError("กรุณากรอกตัวเลข")
    if isinstance(raw, (int, float)):
        number = Decimal(str(raw))
    else:
        text = str(raw).strip().replace(",", "")
        if not text:
            return None
        try:
            number = Decimal(text)
        except InvalidOperation:
            raise ValueError("กรุณากรอกตัวเลข")
    if not number.is_finite():
        raise ValueError("กรุณากรอกตัวเลข")
    if number == number.to_integral_value():
        return int(number)
    return float(number)


def coerce_boolean(raw: Any) -> Optional[bool]:
    if raw is None or isinstance(raw, bool):
        return raw
    text = str(raw).strip().lower()
    if text == "":
        return None
    if text in ("true", "1"):
        return True
    if text in ("false", "0"):
        return False
    raise ValueError("กรุณาเลือก ใช่ หรือ ไม่")


def coerce_selection(type_key: str, raw: Any) -> Tuple[Union[int, str], ...]:
    if raw is None or raw == "":
        return ()
    items = raw if isinstance(raw, (list, tuple, set, frozenset)) else [raw]

    selected = []
    for item in items:
        if item is None or str(item).strip() == "":
            continue
        if type_key in NUMERIC_ID_TYPES:
            try:
                item = int(str(item).strip())
            except ValueError:
                raise ValueError("รหัสที่เลือกไม่ถูกต้อง")
        else:
            item = str(item).strip()
        if item not in selected:
            selected.append(item)
    return tuple(selected)


class BaseCondition(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: ClassVar[Optional[InputKind]] = None

    type: str

    @field_validator("type")
    @classmethod
    def type_matches_kind(cls, value: str) -> str:
        if value_kind(value) is not cls.kind:
            raise ValueError(f"{value!r} is not a {cls.kind.value if cls.kind else 'unknown'} condition")
        return value

    @property
    def is_empty(self) -> bool:
        return self.value is None

    def to_payload(self) -> dict:
        return {"type": self.type, "value": "" if self.value is None else self.value}


class NumberCondition(BaseCondition):
    kind: ClassVar[InputKind] = InputKind.NUMBER

    value: Optional[Union[int, float]] = None

    @field_validator("value", mode="before")
    @classmethod
    def parse_value(cls, value: Any) -> Any:
        return coerce_number(value)


class BooleanCondition(BaseCondition):
    kind: ClassVar[InputKind] = InputKind.BOOLEAN

    value: Optional[bool] = None

    @field_validator("value", mode="before")
    @classmethod
    def parse_value(cls, value: Any) -> Any:
        return coerce_boolean(value)


class SelectCondition(BaseCondition):
    kind: ClassVar[InputKind] = InputKind.SELECT

    value: Optional[str] = None

    @field_validator("value", mode="before")
    @classmethod
    def parse_value(cls, value: Any) -> Any:
        if value is None:
            return None
        return str(value).strip() or None


class MultiSelectCondition(BaseCondition):
    kind: ClassVar[InputKind] = InputKind.MULTISELECT

    value: Tuple[Union[int, str], ...] = ()

    @field_validator("value", mode="before")
    @classmethod
    def parse_value(cls, value: Any, info: ValidationInfo) -> Any:
        type_key = info.data.get("type")
        if type_key is None:
            return value
        return coerce_selection(type_key, value)

    @property
    def is_empty(self) -> bool:
        return not self.value

    def to_payload(self) -> dict:
        return {"type": self.type, "value": list(self.value)}


class UnknownCondition(BaseCondition):
    """A type key this dashboard does not know; kept as-is so saving does not drop it."""

    value: Any = None

    def to_payload(self) -> dict:
        return {"type": self.type, "value": self.value}


Condition = Union[NumberCondition, BooleanCondition, SelectCondition, MultiSelectCondition, UnknownCondition]

CONDITION_CLASSES = {
    InputKind.NUMBER: NumberCondition,
    InputKind.BOOLEAN: BooleanCondition,
    InputKind.SELECT: SelectCondition,
    InputKind.MULTISELECT: MultiSelectCondition,
}


def condition_class(type_key: str):
    return CONDITION_CLASSES.get(value_kind(type_key), UnknownCondition)


def empty_condition(type_key: str) -> Condition:
    return condition_class(type_key)(type=type_key)


def make_condition(type_key: str, value: Any) -> Condition:
    """Build the condition for ``type_key``, coercing ``value`` to its shape. Raises ValueError."""
    try:
        return condition_class(type_key)(type=type_key, value=value)
    except ValidationError as e:
        raise ValueError(e.errors()[0]["msg"].removeprefix("Value error, ")) from e


def parse_condition(raw: Any) -> Condition:
    """Read a condition stored by the backend. Never raises."""
    if isinstance(raw, BaseCondition):
        return raw
    if not isinstance(raw, dict):
        return UnknownCondition(type="", value=raw)

    type_key = str(raw.get("type") or "")
    try:
        return make_condition(type_key, raw.get("value"))
    except ValueError:
        logger.warning("Discarding unreadable value for condition %s: %r", type_key, raw.get("value"))
        return empty_condition(type_key)
