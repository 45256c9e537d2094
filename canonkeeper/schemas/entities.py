"""Request/response schemas for characters and world elements."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from canonkeeper.schemas.enums import (
    ArcStatus,
    CanonLockLevel,
    CharacterAttribute,
    CharacterRole,
    CharacterStatus,
    WorldElementAttribute,
    WorldElementType,
)
from canonkeeper.schemas.series import CamelModel


class CorePersonality(CamelModel):
    traits: List[str] = Field(default_factory=list)
    values: List[str] = Field(default_factory=list)
    fears: List[str] = Field(default_factory=list)
    desires: List[str] = Field(default_factory=list)


class PhysicalDescription(CamelModel):
    height: Optional[str] = None
    build: Optional[str] = None
    hair_color: Optional[str] = None
    eye_color: Optional[str] = None
    skin_tone: Optional[str] = None
    distinguishing_features: List[str] = Field(default_factory=list)


# ─── Characters ───────────────────────────────────────────────────────────────

class CharacterCreate(CamelModel):
    series_id: str
    author_id: Optional[str] = None
    name: str = Field(min_length=1)
    aliases: List[str] = Field(default_factory=list)
    title: Optional[str] = None
    character_role: CharacterRole = CharacterRole.supporting
    current_status: CharacterStatus = CharacterStatus.alive
    first_appears_book: int = Field(default=1, ge=1)
    core_personality: CorePersonality = Field(default_factory=CorePersonality)
    backstory: Optional[str] = None
    motivation: Optional[str] = None
    fatal_flaw: Optional[str] = None
    physical_description: PhysicalDescription = Field(default_factory=PhysicalDescription)
    age_at_series_start: Optional[int] = Field(default=None, ge=0)
    dialogue_style: Optional[str] = None
    arc_status: Optional[ArcStatus] = None
    canon_lock_level: CanonLockLevel = CanonLockLevel.none
    locked_attributes: List[CharacterAttribute] = Field(default_factory=list)
    book_context: Optional[int] = Field(default=None, ge=1, description="Book being edited, if any")


class CharacterUpdate(CamelModel):
    """Partial update. ``physicalDescription`` is merged field by field."""
    name: Optional[str] = Field(default=None, min_length=1)
    aliases: Optional[List[str]] = None
    title: Optional[str] = None
    character_role: Optional[CharacterRole] = None
    current_status: Optional[CharacterStatus] = None
    status_change_reason: Optional[str] = None
    first_appears_book: Optional[int] = Field(default=None, ge=1)
    core_personality: Optional[CorePersonality] = None
    backstory: Optional[str] = None
    motivation: Optional[str] = None
    fatal_flaw: Optional[str] = None
    physical_description: Optional[PhysicalDescription] = None
    age_at_series_start: Optional[int] = Field(default=None, ge=0)
    dialogue_style: Optional[str] = None
    arc_status: Optional[ArcStatus] = None
    canon_lock_level: Optional[CanonLockLevel] = None
    locked_attributes: Optional[List[CharacterAttribute]] = None
    book_context: Optional[int] = Field(default=None, ge=1, description="Book being edited, if any")


class CharacterOut(CamelModel):
    id: str
    series_id: str
    author_id: str
    name: str
    aliases: List[str] = Field(default_factory=list)
    title: Optional[str] = None
    character_role: CharacterRole
    current_status: CharacterStatus
    status_changed_at: Optional[datetime] = None
    status_change_reason: Optional[str] = None
    first_appears_book: int
    core_personality: CorePersonality = Field(default_factory=CorePersonality)
    backstory: Optional[str] = None
    motivation: Optional[str] = None
    fatal_flaw: Optional[str] = None
    physical_description: PhysicalDescription = Field(default_factory=PhysicalDescription)
    age_at_series_start: Optional[int] = None
    dialogue_style: Optional[str] = None
    arc_status: Optional[ArcStatus] = None
    canon_lock_level: CanonLockLevel
    locked_attributes: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ─── World elements ───────────────────────────────────────────────────────────

class WorldElementCreate(CamelModel):
    series_id: str
    author_id: Optional[str] = None
    element_type: WorldElementType
    name: str = Field(min_length=1)
    aliases: List[str] = Field(default_factory=list)
    short_description: Optional[str] = None
    full_description: Optional[str] = None
    category: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    rules: List[str] = Field(default_factory=list)
    introduced_in_book: Optional[int] = Field(default=None, ge=1)
    is_active: bool = True
    destroyed_in_book: Optional[int] = Field(default=None, ge=1)
    arc_status: Optional[ArcStatus] = None
    canon_lock_level: CanonLockLevel = CanonLockLevel.none
    locked_attributes: List[WorldElementAttribute] = Field(default_factory=list)
    book_context: Optional[int] = Field(default=None, ge=1)


class WorldElementUpdate(CamelModel):
    element_type: Optional[WorldElementType] = None
    name: Optional[str] = Field(default=None, min_length=1)
    aliases: Optional[List[str]] = None
    short_description: Optional[str] = None
    full_description: Optional[str] = None
    category: Optional[str] = None
    tags: Optional[List[str]] = None
    rules: Optional[List[str]] = None
    introduced_in_book: Optional[int] = Field(default=None, ge=1)
    is_active: Optional[bool] = None
    destroyed_in_book: Optional[int] = Field(default=None, ge=1)
    arc_status: Optional[ArcStatus] = None
    canon_lock_level: Optional[CanonLockLevel] = None
    locked_attributes: Optional[List[WorldElementAttribute]] = None
    book_context: Optional[int] = Field(default=None, ge=1)


class WorldElementOut(CamelModel):
    id: str
    series_id: str
    author_id: str
    element_type: WorldElementType
    name: str
    aliases: List[str] = Field(default_factory=list)
    short_description: Optional[str] = None
    full_description: Optional[str] = None
    category: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    rules: List[str] = Field(default_factory=list)
    introduced_in_book: Optional[int] = None
    is_active: bool = True
    destroyed_in_book: Optional[int] = None
    arc_status: Optional[ArcStatus] = None
    canon_lock_level: CanonLockLevel
    locked_attributes: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
