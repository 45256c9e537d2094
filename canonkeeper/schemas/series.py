"""Request/response schemas for series and books."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from canonkeeper.schemas.enums import BookStatus, ContentRating, Pacing, SeriesStatus, TargetAudience, Tone


class CamelModel(BaseModel):
    """Base for every wire schema: camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# ─── Series ───────────────────────────────────────────────────────────────────

class SeriesCreate(CamelModel):
    author_id: Optional[str] = None  # Defaults to the authenticated author
    title: str = Field(min_length=1)
    genre: str = Field(min_length=1)
    description: Optional[str] = None
    premise: Optional[str] = None
    subgenres: List[str] = Field(default_factory=list)
    target_book_count: int = Field(default=1, ge=1)
    tone: Tone = Tone.balanced
    pacing: Pacing = Pacing.moderate
    target_audience: TargetAudience = TargetAudience.adult
    content_rating: ContentRating = ContentRating.teen
    themes: List[str] = Field(default_factory=list, description="Primary themes")
    secondary_themes: List[str] = Field(default_factory=list)
    recurring_motifs: List[str] = Field(default_factory=list)
    main_conflict: Optional[str] = None
    series_arc_summary: Optional[str] = None
    planned_ending: Optional[str] = None
    metadata: dict = Field(default_factory=dict)


class SeriesUpdate(CamelModel):
    """Any subset of the mutable series fields. Series metadata carries no continuity rules."""
    title: Optional[str] = Field(default=None, min_length=1)
    genre: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    premise: Optional[str] = None
    subgenres: Optional[List[str]] = None
    target_book_count: Optional[int] = Field(default=None, ge=1)
    series_status: Optional[SeriesStatus] = None
    tone: Optional[Tone] = None
    pacing: Optional[Pacing] = None
    target_audience: Optional[TargetAudience] = None
    content_rating: Optional[ContentRating] = None
    themes: Optional[List[str]] = None
    secondary_themes: Optional[List[str]] = None
    recurring_motifs: Optional[List[str]] = None
    main_conflict: Optional[str] = None
    series_arc_summary: Optional[str] = None
    planned_ending: Optional[str] = None
    metadata: Optional[dict] = None


class SeriesOut(CamelModel):
    id: str
    author_id: str
    title: str
    genre: str
    description: Optional[str] = None
    premise: Optional[str] = None
    subgenres: List[str] = Field(default_factory=list)
    target_book_count: int
    current_book_count: int
    series_status: SeriesStatus
    tone: Tone
    pacing: Pacing
    target_audience: TargetAudience
    content_rating: ContentRating
    themes: List[str] = Field(default_factory=list, validation_alias="primary_themes")
    secondary_themes: List[str] = Field(default_factory=list)
    recurring_motifs: List[str] = Field(default_factory=list)
    main_conflict: Optional[str] = None
    series_arc_summary: Optional[str] = None
    planned_ending: Optional[str] = None
    metadata: dict = Field(default_factory=dict, validation_alias="metadata_")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SeriesSummary(SeriesOut):
    """Series with the lightweight counts shown in an author's series list."""
    book_count: int = 0
    character_count: int = 0
    world_element_count: int = 0
    total_word_count: int = 0
    pending_violations: int = 0


# ─── Books ────────────────────────────────────────────────────────────────────

class BookCreate(CamelModel):
    author_id: Optional[str] = None
    book_number: int = Field(ge=1)
    title: str = Field(min_length=1)
    subtitle: Optional[str] = None
    book_premise: Optional[str] = None
    book_conflict: Optional[str] = None
    book_arc_summary: Optional[str] = None
    status: BookStatus = BookStatus.planning
    target_word_count: Optional[int] = Field(default=None, ge=0)
    timeline_start: Optional[float] = None
    timeline_end: Optional[float] = None
    time_skip_from_previous: Optional[float] = None

    @model_validator(mode="after")
    def check_window(self):
        if self.timeline_start is not None and self.timeline_end is not None and self.timeline_end < self.timeline_start:
            raise ValueError("timelineEnd must not precede timelineStart")
        return self


class BookUpdate(CamelModel):
    book_number: Optional[int] = Field(default=None, ge=1)
    title: Optional[str] = Field(default=None, min_length=1)
    subtitle: Optional[str] = None
    book_premise: Optional[str] = None
    book_conflict: Optional[str] = None
    book_arc_summary: Optional[str] = None
    status: Optional[BookStatus] = None
    target_word_count: Optional[int] = Field(default=None, ge=0)
    current_word_count: Optional[int] = Field(default=None, ge=0)
    current_chapter_count: Optional[int] = Field(default=None, ge=0)
    timeline_start: Optional[float] = None
    timeline_end: Optional[float] = None
    time_skip_from_previous: Optional[float] = None


class BookOut(CamelModel):
    id: str
    series_id: str
    author_id: str
    book_number: int
    title: str
    subtitle: Optional[str] = None
    book_premise: Optional[str] = None
    book_conflict: Optional[str] = None
    book_arc_summary: Optional[str] = None
    status: BookStatus
    target_word_count: Optional[int] = None
    current_word_count: int = 0
    current_chapter_count: int = 0
    timeline_start: Optional[float] = None
    timeline_end: Optional[float] = None
    time_skip_from_previous: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
