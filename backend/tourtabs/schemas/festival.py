from datetime import date
from enum import Enum
from typing import List, Optional, Set

from pydantic import BaseModel, Field, field_validator, model_validator

from tourtabs.core.constants import COVER_POSITIONS, FESTIVAL_DEFAULT_BADGE_COLOR, FESTIVAL_DISPLAY_MODES
from tourtabs.schemas.common import clean_badge_color, clean_optional, resolve_badge_color

FESTIVAL_DISPLAY_MODE_KEYS = [key for key, _ in FESTIVAL_DISPLAY_MODES]
COVER_POSITION_KEYS = [key for key, _ in COVER_POSITIONS]
DEFAULT_COVER_POSITION = "center"


class AssetState(str, Enum):
    DRAFT = "draft"
    PERSISTED = "persisted"
    WITH_ASSETS = "with_assets"


def clean_cover_position(value) -> str:
    value = clean_optional(value)
    return value if value in COVER_POSITION_KEYS else DEFAULT_COVER_POSITION


def _date_part(value):
    if isinstance(value, str):
        return value[:10] or None
    return value


class FestivalHoliday(BaseModel):
    id: Optional[int] = None
    name: str
    slug: Optional[str] = None
    description: Optional[str] = None
    start_date: date
    end_date: date
    image_url: Optional[str] = None
    cover_image_url: Optional[str] = None
    cover_image_position: str = DEFAULT_COVER_POSITION
    badge_text: Optional[str] = None
    badge_color: Optional[str] = None
    badge_icon: Optional[str] = None
    display_modes: List[str] = []
    is_active: bool = True
    sort_order: int = 0
    tour_count: Optional[int] = None

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def date_part(cls, value):
        return _date_part(value)

    @field_validator("display_modes", mode="before")
    @classmethod
    def none_as_empty(cls, value):
        return [] if value is None else value

    @field_validator("cover_image_position", mode="before")
    @classmethod
    def known_position(cls, value):
        return clean_cover_position(value)

    @property
    def badge_color_key(self) -> str:
        return resolve_badge_color(self.badge_color, FESTIVAL_DEFAULT_BADGE_COLOR)

    @property
    def asset_state(self) -> AssetState:
        if self.id is None:
            return AssetState.DRAFT
        if self.image_url or self.cover_image_url:
            return AssetState.WITH_ASSETS
        return AssetState.PERSISTED

    @property
    def can_attach_assets(self) -> bool:
        return self.asset_state is not AssetState.DRAFT


class FestivalDraft(BaseModel):
    """Festival form contents, normalized for the create and update requests."""

    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    start_date: date
    end_date: date
    badge_text: Optional[str] = None
    badge_color: Optional[str] = FESTIVAL_DEFAULT_BADGE_COLOR
    badge_icon: Optional[str] = None
    display_modes: Set[str] = {"card"}
    is_active: bool = True
    sort_order: int = 0

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("description", "badge_text", "badge_icon", mode="before")
    @classmethod
    def normalize_optional(cls, value):
        return clean_optional(value)

    @field_validator("badge_color", mode="before")
    @classmethod
    def normalize_badge_color(cls, value):
        return clean_badge_color(value)

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def date_part(cls, value):
        return _date_part(value)

    @field_validator("display_modes", mode="before")
    @classmethod
    def known_display_modes(cls, value):
        modes = [value] if isinstance(value, str) else list(value or [])
        return {m for m in modes if m in FESTIVAL_DISPLAY_MODE_KEYS}

    @model_validator(mode="after")
    def dates_in_order(self):
        if self.start_date > self.end_date:
            raise ValueError("วันเริ่มต้นต้องไม่อยู่หลังวันสิ้นสุด")
        return self

    @classmethod
    def from_festival(cls, festival: FestivalHoliday) -> "FestivalDraft":
        return cls(**festival.model_dump(include=set(cls.model_fields)))

    def to_payload(self) -> dict:
        payload = self.model_dump(mode="json")
        payload["display_modes"] = sorted(self.display_modes)
        return payload


class FestivalPageSetting(BaseModel):
    id: Optional[int] = None
    cover_image_url: Optional[str] = None
    cover_image_position: str = DEFAULT_COVER_POSITION

    @field_validator("cover_image_position", mode="before")
    @classmethod
    def known_position(cls, value):
        return clean_cover_position(value)
