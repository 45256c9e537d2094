from datetime import datetime
from typing import List, Optional
from sqlalchemy import String, DateTime, ForeignKey, Text, JSON, Integer, Float, Boolean, UniqueConstraint, Index
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.sql import func

class Base(DeclarativeBase):
    pass

class Series(Base):
    __tablename__ = "series"

    id: Mapped[str] = mapped_column(String, primary_key=True, index=True) # Using UUID strings
    author_id: Mapped[str] = mapped_column(String, index=True)
    title: Mapped[str] = mapped_column(String)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    premise: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    genre: Mapped[str] = mapped_column(String)
    subgenres: Mapped[list] = mapped_column(JSON, default=list)

    target_book_count: Mapped[int] = mapped_column(Integer, default=1)
    current_book_count: Mapped[int] = mapped_column(Integer, default=0) # Maintained by the engine on book creation
    series_status: Mapped[str] = mapped_column(String, default="planning")

    primary_themes: Mapped[list] = mapped_column(JSON, default=list)
    secondary_themes: Mapped[list] = mapped_column(JSON, default=list)
    recurring_motifs: Mapped[list] = mapped_column(JSON, default=list)
    main_conflict: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    series_arc_summary: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    planned_ending: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    tone: Mapped[str] = mapped_column(String, default="balanced")
    pacing: Mapped[str] = mapped_column(String, default="moderate")
    target_audience: Mapped[str] = mapped_column(String, default="adult")
    content_rating: Mapped[str] = mapped_column(String, default="teen")
    # Free-form author data; "metadata" is reserved on declarative classes
    metadata_: Mapped[dict] = mapped_column("metadata", JSON, default=dict)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships: a series owns everything authored inside it
    books: Mapped[List["Book"]] = relationship("Book", back_populates="series", cascade="all, delete-orphan", order_by="Book.book_number")
    characters: Mapped[List["Character"]] = relationship("Character", back_populates="series", cascade="all, delete-orphan")
    world_elements: Mapped[List["WorldElement"]] = relationship("WorldElement", back_populates="series", cascade="all, delete-orphan")
    notes: Mapped[List["ContinuityNote"]] = relationship("ContinuityNote", back_populates="series", cascade="all, delete-orphan")
    violations: Mapped[List["Violation"]] = relationship("Violation", back_populates="series", cascade="all, delete-orphan")

class Book(Base):
    __tablename__ = "books"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    series_id: Mapped[str] = mapped_column(ForeignKey("series.id", ondelete="CASCADE"), index=True)
    author_id: Mapped[str] = mapped_column(String)
    book_number: Mapped[int] = mapped_column(Integer) # Unique per series, gaps allowed

    title: Mapped[str] = mapped_column(String)
    subtitle: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    book_premise: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    book_conflict: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    book_arc_summary: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String, default="planning")

    target_word_count: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    current_word_count: Mapped[int] = mapped_column(Integer, default=0)
    current_chapter_count: Mapped[int] = mapped_column(Integer, default=0)

    # In-universe time window; a negative skip marks an explicit jump backwards
    timeline_start: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    timeline_end: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    time_skip_from_previous: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    series: Mapped["Series"] = relationship("Series", back_populates="books")

    __table_args__ = (
        UniqueConstraint("series_id", "book_number", name="uix_book_series_number"),
    )

class Character(Base):
    __tablename__ = "characters"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    series_id: Mapped[str] = mapped_column(ForeignKey("series.id", ondelete="CASCADE"), index=True)
    author_id: Mapped[str] = mapped_column(String)

    name: Mapped[str] = mapped_column(String)
    aliases: Mapped[list] = mapped_column(JSON, default=list)
    title: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    character_role: Mapped[str] = mapped_column(String, default="supporting")

    current_status: Mapped[str] = mapped_column(String, default="alive")
    status_changed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    status_change_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    first_appears_book: Mapped[int] = mapped_column(Integer, default=1)

    core_personality: Mapped[dict] = mapped_column(JSON, default=dict) # traits / values / fears / desires
    backstory: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    motivation: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    fatal_flaw: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    physical_description: Mapped[dict] = mapped_column(JSON, default=dict) # camelCase keys: eyeColor, hairColor, ...
    age_at_series_start: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    dialogue_style: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    arc_status: Mapped[Optional[str]] = mapped_column(String, nullable=True)

    canon_lock_level: Mapped[str] = mapped_column(String, default="none")
    locked_attributes: Mapped[list] = mapped_column(JSON, default=list)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    series: Mapped["Series"] = relationship("Series", back_populates="characters")

class WorldElement(Base):
    __tablename__ = "world_elements"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    series_id: Mapped[str] = mapped_column(ForeignKey("series.id", ondelete="CASCADE"), index=True)
    author_id: Mapped[str] = mapped_column(String)

    element_type: Mapped[str] = mapped_column(String)
    name: Mapped[str] = mapped_column(String)
    aliases: Mapped[list] = mapped_column(JSON, default=list)
    short_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    full_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    category: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    tags: Mapped[list] = mapped_column(JSON, default=list)
    rules: Mapped[list] = mapped_column(JSON, default=list)

    introduced_in_book: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    destroyed_in_book: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    arc_status: Mapped[Optional[str]] = mapped_column(String, nullable=True)

    canon_lock_level: Mapped[str] = mapped_column(String, default="none")
    locked_attributes: Mapped[list] = mapped_column(JSON, default=list)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    series: Mapped["Series"] = relationship("Series", back_populates="world_elements")

class ContinuityNote(Base):
    """Author-written annotation. Never created or changed by the engine."""
    __tablename__ = "continuity_notes"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    series_id: Mapped[str] = mapped_column(ForeignKey("series.id", ondelete="CASCADE"), index=True)
    author_id: Mapped[str] = mapped_column(String)

    note_type: Mapped[str] = mapped_column(String, default="reminder")
    title: Mapped[str] = mapped_column(String)
    content: Mapped[str] = mapped_column(Text)
    subject_type: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    subject_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    referenced_book: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    priority: Mapped[str] = mapped_column(String, default="medium")

    is_resolved: Mapped[bool] = mapped_column(Boolean, default=False)
    resolution: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    series: Mapped["Series"] = relationship("Series", back_populates="notes")

class Violation(Base):
    """Soft continuity finding recorded alongside an accepted write.

    Append-only from the engine's side; only a human changes ``status``.
    """
    __tablename__ = "violations"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    series_id: Mapped[str] = mapped_column(ForeignKey("series.id", ondelete="CASCADE"))
    subject_type: Mapped[str] = mapped_column(String)
    subject_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    attribute: Mapped[Optional[str]] = mapped_column(String, nullable=True)

    category: Mapped[str] = mapped_column(String)
    severity: Mapped[str] = mapped_column(String)
    description: Mapped[str] = mapped_column(Text)
    book_number: Mapped[Optional[int]] = mapped_column(Integer, nullable=True) # Book context of the edit, if any

    status: Mapped[str] = mapped_column(String, default="pending")
    resolution_note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    resolved_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    series: Mapped["Series"] = relationship("Series", back_populates="violations")

    __table_args__ = (
        Index("ix_violations_series_status", "series_id", "status"),
    )
