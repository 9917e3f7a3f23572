"""Journal request/response schemas."""

from __future__ import annotations

from datetime import date
from typing import Literal, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator, model_validator

from soul_log.domains.journal.constants import (
    CATEGORIES_BY_TYPE,
    DEFAULT_HYDRATION_GOAL,
    ENTRY_TYPE_MIND,
    MAX_CONTENT_LENGTH,
)

EntryTypeName = Literal["mind", "body", "soul"]


class JournalEntryCreate(BaseModel):
    type: EntryTypeName
    category: Optional[str] = Field(default=None, max_length=32)
    mood: Optional[str] = Field(default=None, max_length=32)
    content: str = Field(min_length=1, max_length=MAX_CONTENT_LENGTH)

    @field_validator("content")
    @classmethod
    def _content_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("content must not be blank")
        return value

    @model_validator(mode="after")
    def _category_matches_type(self):
        # Mind entries may send the mood under either key.
        if self.type == ENTRY_TYPE_MIND and not self.category:
            self.category = self.mood
        allowed = CATEGORIES_BY_TYPE[self.type]
        if self.category not in allowed:
            raise ValueError(f"category must be one of {', '.join(allowed)} for {self.type} entries")
        return self


class JournalEntryListFilter(BaseModel):
    type: Optional[Literal["all", "mind", "body", "soul"]] = None
    q: Optional[str] = Field(default=None, max_length=200)

    @property
    def entry_type(self) -> Optional[str]:
        return None if self.type in (None, "all") else self.type

    @property
    def search_text(self) -> Optional[str]:
        return self.q.strip() if self.q and self.q.strip() else None


class JournalClearParams(BaseModel):
    type: Optional[EntryTypeName] = None


class JournalStatsParams(BaseModel):
    reference_date: Optional[date] = None
    tz: Optional[str] = None
    hydration_progress: int = Field(default=0, ge=0)
    hydration_goal: int = Field(default=DEFAULT_HYDRATION_GOAL, ge=0)

    @field_validator("tz")
    @classmethod
    def _known_timezone(cls, value: Optional[str]) -> Optional[str]:
        if not value:
            return None
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError, OSError):
            raise ValueError(f"unknown time zone: {value}")
        return value

    @property
    def zone(self) -> Optional[ZoneInfo]:
        return ZoneInfo(self.tz) if self.tz else None


class JournalEntryResponse(BaseModel):
    id: int
    type: str
    category: str
    title: str
    content: str
    created_at: str


class JournalExportItem(BaseModel):
    id: int
    type: str
    title: str
    content: str
    date: str
