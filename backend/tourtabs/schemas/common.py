from typing import Any, Optional

from tourtabs.core.constants import BADGE_COLOR_KEYS


def clean_optional(value: Any) -> Optional[str]:
    """Trimmed string, or None for missing, empty and whitespace-only input."""
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def clean_badge_color(value: Any) -> Optional[str]:
    value = clean_optional(value)
    if value is None:
        return None
    value = value.lower()
    return value if value in BADGE_COLOR_KEYS else None


def resolve_badge_color(value: Any, default: str) -> str:
    return clean_badge_color(value) or default


def form_bool(value: Any) -> bool:
    # unchecked checkboxes are not submitted at all
    if isinstance(value, bool):
        return value
    return str(value or "").strip().lower() in ("1", "true", "on", "yes")
