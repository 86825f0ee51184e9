from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Tuple
import json

from tourtabs.conditions.schema import InputKind, value_kind
from tourtabs.conditions.values import (
    Condition,
    NumberCondition,
    UnknownCondition,
    empty_condition,
    make_condition,
    parse_condition,
)

DEFAULT_CONDITION_TYPE = "price_min"


class ConditionRow(NamedTuple):
    """One condition row as submitted by the tab form."""
    type: str
    previous_type: str = ""
    values: Tuple[str, ...] = ()
    raw: str = ""


class TabRuleBuilder:
    """
    Ordered condition list of one tour tab while it is being edited.

    Entries are addressed by index. Changing an entry's type always replaces
    its value with the empty value of the new type.
    """

    def __init__(self, conditions: Iterable[Any] = ()):
        self._conditions: List[Condition] = [parse_condition(c) for c in conditions]

    def __len__(self) -> int:
        return len(self._conditions)

    def __iter__(self):
        return iter(tuple(self._conditions))

    @property
    def conditions(self) -> Tuple[Condition, ...]:
        return tuple(self._conditions)

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._conditions):
            raise IndexError(f"condition index {index} out of range")

    def add_condition(self) -> Condition:
        condition = empty_condition(DEFAULT_CONDITION_TYPE)
        self._conditions.append(condition)
        return condition

    def update_condition(self, index: int, field: str, value: Any) -> Condition:
        self._check_index(index)

        if field == "type":
            condition = empty_condition(str(value))
        elif field == "value":
            current = self._conditions[index]
            if isinstance(current, UnknownCondition):
                condition = UnknownCondition(type=current.type, value=value)
            else:
                condition = make_condition(current.type, value)
        else:
            raise ValueError(f"unknown condition field {field!r}")

        self._conditions[index] = condition
        return condition

    def remove_condition(self, index: int) -> Condition:
        self._check_index(index)
        return self._conditions.pop(index)

    def to_payload(self) -> List[dict]:
        return [c.to_payload() for c in self._conditions]

    def validate(self) -> Dict[str, str]:
        """Client-side checks on condition values, keyed ``conditions.<index>`` or ``conditions``."""
        errors: Dict[str, str] = {}
        numbers: Dict[str, List[float]] = {}

        for index, condition in enumerate(self._conditions):
            if not isinstance(condition, NumberCondition) or condition.value is None:
                continue
            if condition.value < 0:
                errors[f"conditions.{index}"] = "ค่าต้องไม่ติดลบ"
                continue
            if condition.type == "discount_min_percent" and condition.value > 100:
                errors[f"conditions.{index}"] = "ส่วนลดต้องไม่เกิน 100%"
                continue
            numbers.setdefault(condition.type, []).append(condition.value)

        # conditions are AND-combined, so the tightest bounds apply
        if numbers.get("price_min") and numbers.get("price_max"):
            if max(numbers["price_min"]) > min(numbers["price_max"]):
                errors["conditions"] = "ราคาขั้นต่ำต้องไม่มากกว่าราคาสูงสุด"
        if numbers.get("min_days") and numbers.get("max_days"):
            if max(numbers["min_days"]) > min(numbers["max_days"]):
                errors.setdefault("conditions", "จำนวนวันขั้นต่ำต้องไม่มากกว่าจำนวนวันสูงสุด")

        return errors

    @classmethod
    def from_form(cls, rows: Iterable[ConditionRow]) -> Tuple["TabRuleBuilder", Dict[str, str]]:
        """
        Rebuild the list from submitted rows.

        A row whose type differs from the type it was rendered with goes
        through a type change, so the value typed for the old type is dropped.
        Returns the builder and per-row coercion errors.
        """
        builder = cls()
        errors: Dict[str, str] = {}

        for row in rows:
            builder.add_condition()
            index = len(builder) - 1
            builder.update_condition(index, "type", row.previous_type or row.type)

            if row.previous_type and row.previous_type != row.type:
                builder.update_condition(index, "type", row.type)
                continue

            try:
                builder.update_condition(index, "value", _row_value(row))
            except ValueError as e:
                errors[f"conditions.{index}"] = str(e)

        return builder, errors


def _row_value(row: ConditionRow) -> Any:
    kind: Optional[InputKind] = value_kind(row.type)
    if kind is None:
        return json.loads(row.raw) if row.raw else None
    if kind is InputKind.MULTISELECT:
        return list(row.values)
    return row.values[0] if row.values else ""
