"""Schemas for violations, continuity notes, write results and the series overview."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from canonkeeper.schemas.entities import CharacterOut, WorldElementOut
from canonkeeper.schemas.enums import EntityType, NotePriority, NoteType, RuleCategory, Severity, ViolationStatus
from canonkeeper.schemas.series import BookOut, CamelModel, SeriesOut


# ─── Violations ───────────────────────────────────────────────────────────────

class ViolationOut(CamelModel):
    id: str
    series_id: str
    subject_type: EntityType
    subject_id: Optional[str] = None
    attribute: Optional[str] = None
    category: RuleCategory
    severity: Severity
    description: str
    book_number: Optional[int] = None
    status: ViolationStatus
    resolution_note: Optional[str] = None
    created_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None


class ViolationUpdate(CamelModel):
    """Human review of a recorded violation."""
    status: ViolationStatus
    resolution_note: Optional[str] = None


# ─── Continuity notes ─────────────────────────────────────────────────────────

class NoteCreate(CamelModel):
    author_id: Optional[str] = None
    note_type: NoteType = NoteType.reminder
    title: str = Field(min_length=1)
    content: str = Field(min_length=1)
    subject_type: Optional[EntityType] = None
    subject_id: Optional[str] = None
    referenced_book: Optional[int] = Field(default=None, ge=1)
    priority: NotePriority = NotePriority.medium


class NoteUpdate(CamelModel):
    note_type: Optional[NoteType] = None
    title: Optional[str] = Field(default=None, min_length=1)
    content: Optional[str] = Field(default=None, min_length=1)
    priority: Optional[NotePriority] = None
    is_resolved: Optional[bool] = None
    resolution: Optional[str] = None


class NoteOut(CamelModel):
    id: str
    series_id: str
    author_id: str
    note_type: NoteType
    title: str
    content: str
    subject_type: Optional[EntityType] = None
    subject_id: Optional[str] = None
    referenced_book: Optional[int] = None
    priority: NotePriority
    is_resolved: bool = False
    resolution: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ─── Write results ────────────────────────────────────────────────────────────
# Soft violations are not errors: they come back next to the written entity.

class BookWriteResult(CamelModel):
    book: BookOut
    violations: List[ViolationOut] = Field(default_factory=list)


class CharacterWriteResult(CamelModel):
    character: CharacterOut
    violations: List[ViolationOut] = Field(default_factory=list)


class WorldElementWriteResult(CamelModel):
    world_element: WorldElementOut
    violations: List[ViolationOut] = Field(default_factory=list)


# ─── Overview ─────────────────────────────────────────────────────────────────

class SeriesOverview(CamelModel):
    series: SeriesOut
    books: List[BookOut] = Field(default_factory=list)
    character_count: int = 0
    world_element_count: int = 0
    active_arc_count: int = 0
    total_word_count: int = 0
    continuity_notes: List[NoteOut] = Field(default_factory=list)
    pending_violations: int = 0
