from datetime import date
from typing import Any, List, Optional

from pydantic import BaseModel, field_validator, model_validator


class TourSummary(BaseModel):
    id: int
    title: str
    tour_code: Optional[str] = None
    country: Any = None
    days: Optional[int] = None
    nights: Optional[int] = None
    price: Optional[float] = None
    departure_date: Optional[date] = None
    image_url: Optional[str] = None
    view_count: Optional[int] = None

    @field_validator("departure_date", mode="before")
    @classmethod
    def date_part(cls, value):
        # the backend sends either a date or a full timestamp
        if isinstance(value, str):
            return value[:10] or None
        return value

    @property
    def country_name(self) -> str:
        if isinstance(self.country, dict):
            return self.country.get("name") or self.country.get("name_th") or self.country.get("name_en") or ""
        return self.country or ""


class TabPreview(BaseModel):
    tours: List[TourSummary] = []
    total: Optional[int] = None

    @field_validator("tours", mode="before")
    @classmethod
    def none_as_empty(cls, value):
        return [] if value is None else value

    @property
    def is_empty(self) -> bool:
        return not self.tours


class FestivalPreview(BaseModel):
    total_count: int = 0
    preview_tours: List[TourSummary] = []

    @field_validator("preview_tours", mode="before")
    @classmethod
    def none_as_empty(cls, value):
        return [] if value is None else value

    @model_validator(mode="after")
    def count_covers_sample(self):
        if self.total_count < len(self.preview_tours):
            self.total_count = len(self.preview_tours)
        return self

    @property
    def is_empty(self) -> bool:
        return self.total_count == 0

    @property
    def is_truncated(self) -> bool:
        return self.total_count > len(self.preview_tours)

    @property
    def overflow_count(self) -> int:
        return self.total_count - len(self.preview_tours)

    @property
    def overflow_label(self) -> str:
        return f"+{self.overflow_count} อื่นๆ" if self.is_truncated else ""
