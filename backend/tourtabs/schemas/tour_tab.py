from datetime import datetime
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from tourtabs.conditions.builder import TabRuleBuilder
from tourtabs.core.constants import (
    DEFAULT_DISPLAY_LIMIT,
    DISPLAY_LIMIT_MAX,
    DISPLAY_LIMIT_MIN,
    TAB_DEFAULT_BADGE_COLOR,
    TAB_DISPLAY_MODES,
)
from tourtabs.schemas.common import clean_badge_color, clean_optional, resolve_badge_color

SortBy = Literal["popular", "price_asc", "price_desc", "newest", "departure_date"]

TAB_DISPLAY_MODE_KEYS = [key for key, _ in TAB_DISPLAY_MODES]


class TourTab(BaseModel):
    id: int
    name: str
    slug: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[str] = None
    badge_text: Optional[str] = None
    badge_color: Optional[str] = None
    badge_icon: Optional[str] = None
    badge_expires_at: Optional[datetime] = None
    display_modes: List[str] = ["tab"]
    conditions: List[Any] = []
    display_limit: int = DEFAULT_DISPLAY_LIMIT
    sort_by: str = "popular"
    sort_order: int = 0
    is_active: bool = True

    @field_validator("conditions", "display_modes", mode="before")
    @classmethod
    def none_as_empty(cls, value):
        return [] if value is None else value

    @property
    def badge_color_key(self) -> str:
        return resolve_badge_color(self.badge_color, TAB_DEFAULT_BADGE_COLOR)

    def rule_builder(self) -> TabRuleBuilder:
        return TabRuleBuilder(self.conditions)


class TabDraft(BaseModel):
    """Tab form contents, normalized for ``POST /tour-tabs`` and ``PUT /tour-tabs/{id}``."""

    name: str = Field(..., min_length=1)
    slug: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[str] = None
    badge_text: Optional[str] = None
    badge_color: Optional[str] = TAB_DEFAULT_BADGE_COLOR
    badge_icon: Optional[str] = None
    badge_expires_at: Optional[datetime] = None
    display_modes: List[str] = ["tab"]
    conditions: List[dict] = []
    display_limit: int = Field(DEFAULT_DISPLAY_LIMIT, ge=DISPLAY_LIMIT_MIN, le=DISPLAY_LIMIT_MAX)
    sort_by: SortBy = "popular"
    sort_order: int = 0
    is_active: bool = True

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("slug", "description", "icon", "badge_text", "badge_icon", mode="before")
    @classmethod
    def normalize_optional(cls, value):
        return clean_optional(value)

    @field_validator("badge_color", mode="before")
    @classmethod
    def normalize_badge_color(cls, value):
        return clean_badge_color(value)

    @field_validator("badge_expires_at", mode="before")
    @classmethod
    def blank_datetime(cls, value):
        return clean_optional(value) if isinstance(value, str) else value

    @field_validator("display_modes", mode="before")
    @classmethod
    def known_display_modes(cls, value):
        modes = [value] if isinstance(value, str) else list(value or [])
        known = [m for m in TAB_DISPLAY_MODE_KEYS if m in modes]
        # a tab with no mode selected shows as a homepage tab
        return known or ["tab"]

    @classmethod
    def from_tab(cls, tab: TourTab) -> "TabDraft":
        return cls(**tab.model_dump(exclude={"id", "conditions"}), conditions=tab.rule_builder().to_payload())

    def with_conditions(self, builder: TabRuleBuilder) -> "TabDraft":
        return self.model_copy(update={"conditions": builder.to_payload()})

    def to_payload(self) -> dict:
        return self.model_dump(mode="json")

    def preview_payload(self) -> dict:
        return {
            "conditions": self.conditions,
            "sort_by": self.sort_by,
            "display_limit": self.display_limit,
        }
