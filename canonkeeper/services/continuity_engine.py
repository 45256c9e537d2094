"""
Continuity Engine facade.

The only surface the web layer talks to. Every Book / Character / WorldElement
write runs the same three-stage pipeline inside one transaction:

    snapshot stored row -> evaluate (lock policy + continuity rules) -> persist

A hard finding raises :class:`ContinuityViolation` and the transaction rolls
back, so neither the entity nor any violation row is written. Soft findings
are stored as pending violations next to the accepted write and returned to
the caller.

The engine keeps no state between calls: each operation opens its own session
from the factory it was given, and is retried from scratch on
:class:`ConflictRetryable`.
"""

from __future__ import annotations

import dataclasses
import time
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Iterable, List, Optional, Sequence, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from canonkeeper.errors import ContinuityViolation, ValidationError
from canonkeeper.models import Book, Character, ContinuityNote, Series, WorldElement
from canonkeeper.schemas import (
    BookCreate,
    BookOut,
    BookUpdate,
    BookWriteResult,
    CharacterCreate,
    CharacterOut,
    CharacterUpdate,
    CharacterWriteResult,
    EntityType,
    NoteCreate,
    NoteOut,
    NoteUpdate,
    SeriesCreate,
    SeriesOut,
    SeriesOverview,
    SeriesSummary,
    SeriesUpdate,
    ViolationOut,
    ViolationStatus,
    ViolationUpdate,
    WorldElementCreate,
    WorldElementOut,
    WorldElementUpdate,
    WorldElementWriteResult,
)
from canonkeeper.services import series_aggregator
from canonkeeper.services.continuity_checker import Evaluation, Finding, ProposedChange, evaluate
from canonkeeper.services.entity_store import EntityStore, new_id
from canonkeeper.services.snapshots import (
    BOOK_COLUMNS,
    CHARACTER_COLUMNS,
    PHYSICAL_ATTRIBUTES,
    WORLD_ELEMENT_COLUMNS,
    EntitySnapshot,
    SeriesFacts,
    book_facts,
    book_snapshot,
    character_facts,
    character_snapshot,
    diff_facts,
    series_facts,
    world_element_facts,
    world_element_snapshot,
)
from canonkeeper.utils.logging_config import SeriesAdapter, get_logger
from canonkeeper.utils.retry import run_retryable

logger = get_logger("canonkeeper.engine")

T = TypeVar("T")

# Series fields whose wire name differs from the column
SERIES_FIELD_COLUMNS = {"themes": "primary_themes", "metadata": "metadata_"}
SERIES_LIST_FIELDS = ("subgenres", "themes", "secondary_themes", "recurring_motifs")

REQUIRED_CHARACTER_ATTRIBUTES = ("name", "characterRole", "currentStatus", "firstAppearsBook")
REQUIRED_WORLD_ELEMENT_ATTRIBUTES = ("name", "elementType", "isActive")


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _require_text(value: Optional[str], field: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(f"{field} is required", field=field)
    return value.strip()


def _resolve_author(body_author: Optional[str], authenticated_author: Optional[str]) -> str:
    if body_author and authenticated_author and body_author != authenticated_author:
        raise ValidationError("authorId does not match the authenticated author", field="authorId")
    author = body_author or authenticated_author
    if not author:
        raise ValidationError("authorId is required", field="authorId")
    return author


def _clean_names(aliases: Iterable[str]) -> List[str]:
    seen, cleaned = set(), []
    for alias in aliases or ():
        alias = " ".join(alias.split())
        if alias and alias.casefold() not in seen:
            seen.add(alias.casefold())
            cleaned.append(alias)
    return cleaned


class ContinuityEngine:
    """Public continuity operations. Construct one per request or share it freely."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    # ------------------------------------------------------------------
    # Plumbing
    # ------------------------------------------------------------------

    async def _run(self, operation: str, work: Callable[[EntityStore], Awaitable[T]]) -> T:
        """Run ``work`` in its own transaction, with timeout and bounded retry."""

        async def attempt() -> T:
            async with self._session_factory() as session:
                async with session.begin():
                    return await work(EntityStore(session))

        return await run_retryable(operation, attempt)

    async def _facts(self, store: EntityStore, series_id: str) -> SeriesFacts:
        return series_facts(
            series_id,
            await store.list_characters(series_id),
            await store.list_world_elements(series_id),
            await store.list_books(series_id),
        )

    def _decide(self, change: ProposedChange, evaluation: Evaluation, operation: str) -> None:
        """Log and raise ContinuityViolation when any finding is hard."""
        log = SeriesAdapter(logger, change.subject.series_id)
        label = change.proposed.label
        if evaluation.rejected:
            log.warning(
                "%s rejected for %s: %s", operation, label, "; ".join(f.description for f in evaluation.hard),
                extra={
                    "event_type": "write_rejected",
                    "entity_type": change.subject.entity_type.value,
                    "entity_id": change.subject.entity_id,
                    "metadata": [f.to_dict() for f in evaluation.hard],
                },
            )
            raise ContinuityViolation(
                f"{label}: change rejected by continuity rules: "
                + "; ".join(f.description for f in evaluation.hard),
                evaluation.hard,
            )

    async def _record(self, store: EntityStore, series_id: str, entity_id: str,
                      findings: Sequence[Finding], operation: str) -> List[ViolationOut]:
        """Store soft findings as pending violations against the written entity."""
        findings = [f if f.subject_id else dataclasses.replace(f, subject_id=entity_id) for f in findings]
        rows = await store.append_violations(series_id, findings)
        log = SeriesAdapter(logger, series_id)
        for row in rows:
            log.info(
                "%s recorded %s violation: %s", operation, row.category, row.description,
                extra={"event_type": "violation_recorded", "entity_type": row.subject_type, "entity_id": entity_id},
            )
        return [ViolationOut.model_validate(r) for r in rows]

    def _accepted(self, series_id: str, operation: str, entity_type: EntityType,
                  entity_id: str, started: float, soft_count: int) -> None:
        SeriesAdapter(logger, series_id).info(
            "%s accepted (%d soft violation(s))", operation, soft_count,
            extra={
                "event_type": "write_accepted",
                "entity_type": entity_type.value,
                "entity_id": entity_id,
                "duration_ms": round((time.monotonic() - started) * 1000, 2),
            },
        )

    # ------------------------------------------------------------------
    # Series (metadata only, no continuity rules)
    # ------------------------------------------------------------------

    async def create_series(self, data: SeriesCreate, author_id: Optional[str] = None) -> SeriesOut:
        author = _resolve_author(data.author_id, author_id)
        title = _require_text(data.title, "title")
        genre = _require_text(data.genre, "genre")

        async def work(store: EntityStore) -> SeriesOut:
            series = await store.add(Series(
                id=new_id(),
                author_id=author,
                title=title,
                genre=genre,
                description=data.description,
                premise=data.premise,
                subgenres=list(data.subgenres),
                target_book_count=data.target_book_count,
                current_book_count=0,
                series_status="planning",
                primary_themes=list(data.themes),
                secondary_themes=list(data.secondary_themes),
                recurring_motifs=list(data.recurring_motifs),
                main_conflict=data.main_conflict,
                series_arc_summary=data.series_arc_summary,
                planned_ending=data.planned_ending,
                tone=data.tone.value,
                pacing=data.pacing.value,
                target_audience=data.target_audience.value,
                content_rating=data.content_rating.value,
                metadata_=dict(data.metadata),
            ))
            SeriesAdapter(logger, series.id).info(
                "Series created: %s", series.title, extra={"event_type": "series_created"}
            )
            return SeriesOut.model_validate(series)

        return await self._run("create_series", work)

    async def update_series(self, series_id: str, data: SeriesUpdate) -> SeriesOut:
        fields = data.model_dump(mode="json", exclude_unset=True)
        for required in ("title", "genre"):
            if required in fields:
                fields[required] = _require_text(fields[required], required)
        for key in ("target_book_count", "series_status", "tone", "pacing", "target_audience", "content_rating"):
            if key in fields and fields[key] is None:
                raise ValidationError(f"{key} cannot be cleared", field=key)

        async def work(store: EntityStore) -> SeriesOut:
            series = await store.get_series(series_id)
            for key, value in fields.items():
                if value is None and key in SERIES_LIST_FIELDS:
                    value = []
                elif value is None and key == "metadata":
                    value = {}
                setattr(series, SERIES_FIELD_COLUMNS.get(key, key), value)
            series = await store.save(series)
            return SeriesOut.model_validate(series)

        return await self._run("update_series", work)

    async def delete_series(self, series_id: str) -> None:
        async def work(store: EntityStore) -> None:
            series = await store.get_series(series_id)
            await store.delete(series)
            SeriesAdapter(logger, series_id).info("Series deleted", extra={"event_type": "series_deleted"})

        await self._run("delete_series", work)

    async def get_series(self, series_id: str) -> SeriesOverview:
        return await self.get_series_overview(series_id)

    async def get_series_overview(self, series_id: str) -> SeriesOverview:
        async def work(store: EntityStore) -> SeriesOverview:
            return await series_aggregator.overview(store, series_id)

        return await self._run("get_series_overview", work)

    async def list_author_series(self, author_id: str) -> List[SeriesSummary]:
        async def work(store: EntityStore) -> List[SeriesSummary]:
            return [await series_aggregator.summary(store, s.id) for s in await store.list_author_series(author_id)]

        return await self._run("list_author_series", work)

    # ------------------------------------------------------------------
    # Books
    # ------------------------------------------------------------------

    async def create_book(self, series_id: str, data: BookCreate, author_id: Optional[str] = None) -> BookWriteResult:
        author = _resolve_author(data.author_id, author_id)
        title = _require_text(data.title, "title")
        _check_window(data.timeline_start, data.timeline_end)

        async def work(store: EntityStore) -> BookWriteResult:
            started = time.monotonic()
            series = await store.get_series(series_id)
            if await store.find_book_by_number(series_id, data.book_number):
                raise ValidationError(f"Book {data.book_number} already exists in this series", field="bookNumber")

            book = Book(
                id=new_id(),
                series_id=series_id,
                author_id=author,
                book_number=data.book_number,
                title=title,
                subtitle=data.subtitle,
                book_premise=data.book_premise,
                book_conflict=data.book_conflict,
                book_arc_summary=data.book_arc_summary,
                status=data.status.value,
                target_word_count=data.target_word_count,
                current_word_count=0,
                current_chapter_count=0,
                timeline_start=data.timeline_start,
                timeline_end=data.timeline_end,
                time_skip_from_previous=data.time_skip_from_previous,
            )
            change = ProposedChange(
                subject=EntitySnapshot(EntityType.book, None, series_id, facts={}),
                changes=tuple(diff_facts({}, book_facts(book))),
                book_context=data.book_number,
                creating=True,
            )
            evaluation = evaluate(change, await self._facts(store, series_id))
            self._decide(change, evaluation, "create_book")

            book = await store.add(book)
            series.current_book_count = (series.current_book_count or 0) + 1
            await store.save(series)
            violations = await self._record(store, series_id, book.id, evaluation.soft, "create_book")
            self._accepted(series_id, "create_book", EntityType.book, book.id, started, len(violations))
            return BookWriteResult(book=BookOut.model_validate(book), violations=violations)

        return await self._run("create_book", work)

    async def update_book(self, book_id: str, data: BookUpdate) -> BookWriteResult:
        fields = data.model_dump(mode="json", exclude_unset=True)
        if "title" in fields:
            fields["title"] = _require_text(fields["title"], "title")
        for key in ("book_number", "status", "current_word_count", "current_chapter_count"):
            if key in fields and fields[key] is None:
                raise ValidationError(f"{key} cannot be cleared", field=key)

        async def work(store: EntityStore) -> BookWriteResult:
            started = time.monotonic()
            book = await store.get_book(book_id)
            new_number = fields.get("book_number", book.book_number)
            if new_number != book.book_number and await store.find_book_by_number(book.series_id, new_number):
                raise ValidationError(f"Book {new_number} already exists in this series", field="bookNumber")

            before = book_facts(book)
            after = dict(before)
            for attr, column in BOOK_COLUMNS.items():
                if column in fields:
                    after[attr] = fields[column]
            _check_window(after["timelineStart"], after["timelineEnd"])

            change = ProposedChange(
                subject=book_snapshot(book),
                changes=tuple(diff_facts(before, after)),
                book_context=new_number,
            )
            evaluation = evaluate(change, await self._facts(store, book.series_id))
            self._decide(change, evaluation, "update_book")

            for key, value in fields.items():
                setattr(book, key, value)
            book = await store.save(book)
            violations = await self._record(store, book.series_id, book.id, evaluation.soft, "update_book")
            self._accepted(book.series_id, "update_book", EntityType.book, book.id, started, len(violations))
            return BookWriteResult(book=BookOut.model_validate(book), violations=violations)

        return await self._run("update_book", work)

    async def get_series_books(self, series_id: str) -> List[BookOut]:
        async def work(store: EntityStore) -> List[BookOut]:
            await store.get_series(series_id)
            return [BookOut.model_validate(b) for b in await store.list_books(series_id)]

        return await self._run("get_series_books", work)

    # ------------------------------------------------------------------
    # Characters
    # ------------------------------------------------------------------

    async def create_character(self, data: CharacterCreate, author_id: Optional[str] = None) -> CharacterWriteResult:
        author = _resolve_author(data.author_id, author_id)
        name = _require_text(data.name, "name")

        async def work(store: EntityStore) -> CharacterWriteResult:
            started = time.monotonic()
            await store.get_series(data.series_id)
            character = Character(
                id=new_id(),
                series_id=data.series_id,
                author_id=author,
                name=name,
                aliases=_clean_names(data.aliases),
                title=data.title,
                character_role=data.character_role.value,
                current_status=data.current_status.value,
                first_appears_book=data.first_appears_book,
                core_personality=data.core_personality.model_dump(mode="json"),
                backstory=data.backstory,
                motivation=data.motivation,
                fatal_flaw=data.fatal_flaw,
                physical_description=data.physical_description.model_dump(mode="json", by_alias=True, exclude_none=True),
                age_at_series_start=data.age_at_series_start,
                dialogue_style=data.dialogue_style,
                arc_status=data.arc_status.value if data.arc_status else None,
                canon_lock_level=data.canon_lock_level.value,
                locked_attributes=sorted({a.value for a in data.locked_attributes}),
            )
            change = ProposedChange(
                subject=EntitySnapshot(EntityType.character, None, data.series_id, facts={}),
                changes=tuple(diff_facts({}, character_facts(character))),
                book_context=data.book_context,
                creating=True,
            )
            evaluation = evaluate(change, await self._facts(store, data.series_id))
            self._decide(change, evaluation, "create_character")

            character = await store.add(character)
            violations = await self._record(store, character.series_id, character.id, evaluation.soft, "create_character")
            self._accepted(character.series_id, "create_character", EntityType.character, character.id,
                           started, len(violations))
            return CharacterWriteResult(character=CharacterOut.model_validate(character), violations=violations)

        return await self._run("create_character", work)

    async def update_character(self, character_id: str, data: CharacterUpdate) -> CharacterWriteResult:
        fields = data.model_dump(mode="json", exclude_unset=True, by_alias=True)
        for attr in REQUIRED_CHARACTER_ATTRIBUTES:
            if attr in fields and fields[attr] is None:
                raise ValidationError(f"{attr} cannot be cleared", field=attr)
        if "name" in fields:
            fields["name"] = _require_text(fields["name"], "name")
        if "aliases" in fields:
            fields["aliases"] = _clean_names(fields["aliases"] or [])

        async def work(store: EntityStore) -> CharacterWriteResult:
            started = time.monotonic()
            character = await store.get_character(character_id)
            before = character_facts(character)
            after = dict(before)
            for attr in CHARACTER_COLUMNS:
                if attr in fields:
                    after[attr] = fields[attr]
            if fields.get("corePersonality") is not None:
                # Partial personality updates keep the keys they do not mention
                after["corePersonality"] = {**(before["corePersonality"] or {}), **fields["corePersonality"]}
            physical = fields.get("physicalDescription") or {}
            for attr in PHYSICAL_ATTRIBUTES:
                if attr in physical:
                    after[attr] = physical[attr]

            # Locks are judged on the stored snapshot, so one update cannot unlock and edit at once
            change = ProposedChange(
                subject=character_snapshot(character),
                changes=tuple(diff_facts(before, after)),
                book_context=data.book_context,
            )
            evaluation = evaluate(change, await self._facts(store, character.series_id))
            self._decide(change, evaluation, "update_character")

            changed = change.attributes
            for attr, column in CHARACTER_COLUMNS.items():
                if attr in changed:
                    setattr(character, column, after[attr])
            if changed & set(PHYSICAL_ATTRIBUTES):
                merged = dict(character.physical_description or {})
                for attr in PHYSICAL_ATTRIBUTES:
                    if attr in changed:
                        merged[attr] = after[attr]
                character.physical_description = {k: v for k, v in merged.items() if v is not None}
            if "currentStatus" in changed:
                character.status_changed_at = _now()
            if "statusChangeReason" in fields:
                character.status_change_reason = fields["statusChangeReason"]
            _apply_lock_fields(character, fields)

            character = await store.save(character)
            violations = await self._record(store, character.series_id, character.id, evaluation.soft, "update_character")
            self._accepted(character.series_id, "update_character", EntityType.character, character.id,
                           started, len(violations))
            return CharacterWriteResult(character=CharacterOut.model_validate(character), violations=violations)

        return await self._run("update_character", work)

    async def get_character(self, character_id: str) -> CharacterOut:
        async def work(store: EntityStore) -> CharacterOut:
            return CharacterOut.model_validate(await store.get_character(character_id))

        return await self._run("get_character", work)

    async def get_series_characters(self, series_id: str) -> List[CharacterOut]:
        async def work(store: EntityStore) -> List[CharacterOut]:
            await store.get_series(series_id)
            return [CharacterOut.model_validate(c) for c in await store.list_characters(series_id)]

        return await self._run("get_series_characters", work)

    # ------------------------------------------------------------------
    # World elements
    # ------------------------------------------------------------------

    async def create_world_element(self, data: WorldElementCreate,
                                   author_id: Optional[str] = None) -> WorldElementWriteResult:
        author = _resolve_author(data.author_id, author_id)
        name = _require_text(data.name, "name")

        async def work(store: EntityStore) -> WorldElementWriteResult:
            started = time.monotonic()
            await store.get_series(data.series_id)
            element = WorldElement(
                id=new_id(),
                series_id=data.series_id,
                author_id=author,
                element_type=data.element_type.value,
                name=name,
                aliases=_clean_names(data.aliases),
                short_description=data.short_description,
                full_description=data.full_description,
                category=data.category,
                tags=list(data.tags),
                rules=list(data.rules),
                introduced_in_book=data.introduced_in_book,
                is_active=data.is_active,
                destroyed_in_book=data.destroyed_in_book,
                arc_status=data.arc_status.value if data.arc_status else None,
                canon_lock_level=data.canon_lock_level.value,
                locked_attributes=sorted({a.value for a in data.locked_attributes}),
            )
            change = ProposedChange(
                subject=EntitySnapshot(EntityType.world_element, None, data.series_id, facts={}),
                changes=tuple(diff_facts({}, world_element_facts(element))),
                book_context=data.book_context,
                creating=True,
            )
            evaluation = evaluate(change, await self._facts(store, data.series_id))
            self._decide(change, evaluation, "create_world_element")

            element = await store.add(element)
            violations = await self._record(store, element.series_id, element.id, evaluation.soft,
                                            "create_world_element")
            self._accepted(element.series_id, "create_world_element", EntityType.world_element, element.id,
                           started, len(violations))
            return WorldElementWriteResult(world_element=WorldElementOut.model_validate(element),
                                           violations=violations)

        return await self._run("create_world_element", work)

    async def update_world_element(self, element_id: str, data: WorldElementUpdate) -> WorldElementWriteResult:
        fields = data.model_dump(mode="json", exclude_unset=True, by_alias=True)
        for attr in REQUIRED_WORLD_ELEMENT_ATTRIBUTES:
            if attr in fields and fields[attr] is None:
                raise ValidationError(f"{attr} cannot be cleared", field=attr)
        if "name" in fields:
            fields["name"] = _require_text(fields["name"], "name")
        if "aliases" in fields:
            fields["aliases"] = _clean_names(fields["aliases"] or [])

        async def work(store: EntityStore) -> WorldElementWriteResult:
            started = time.monotonic()
            element = await store.get_world_element(element_id)
            before = world_element_facts(element)
            after = dict(before)
            for attr in WORLD_ELEMENT_COLUMNS:
                if attr in fields:
                    after[attr] = fields[attr]

            change = ProposedChange(
                subject=world_element_snapshot(element),
                changes=tuple(diff_facts(before, after)),
                book_context=data.book_context,
            )
            evaluation = evaluate(change, await self._facts(store, element.series_id))
            self._decide(change, evaluation, "update_world_element")

            for attr, column in WORLD_ELEMENT_COLUMNS.items():
                if attr in change.attributes:
                    setattr(element, column, after[attr])
            if "tags" in fields:
                element.tags = list(fields["tags"] or [])
            _apply_lock_fields(element, fields)

            element = await store.save(element)
            violations = await self._record(store, element.series_id, element.id, evaluation.soft,
                                            "update_world_element")
            self._accepted(element.series_id, "update_world_element", EntityType.world_element, element.id,
                           started, len(violations))
            return WorldElementWriteResult(world_element=WorldElementOut.model_validate(element),
                                           violations=violations)

        return await self._run("update_world_element", work)

    async def get_series_world_elements(self, series_id: str) -> List[WorldElementOut]:
        async def work(store: EntityStore) -> List[WorldElementOut]:
            await store.get_series(series_id)
            return [WorldElementOut.model_validate(w) for w in await store.list_world_elements(series_id)]

        return await self._run("get_series_world_elements", work)

    # ------------------------------------------------------------------
    # Violations (status changes are human actions)
    # ------------------------------------------------------------------

    async def list_violations(self, series_id: str, status: Optional[ViolationStatus] = None) -> List[ViolationOut]:
        async def work(store: EntityStore) -> List[ViolationOut]:
            await store.get_series(series_id)
            rows = await store.list_violations(series_id, status.value if status else None)
            return [ViolationOut.model_validate(r) for r in rows]

        return await self._run("list_violations", work)

    async def update_violation_status(self, violation_id: str, data: ViolationUpdate) -> ViolationOut:
        if data.status == ViolationStatus.pending:
            raise ValidationError("A violation can only be acknowledged or resolved", field="status")

        async def work(store: EntityStore) -> ViolationOut:
            violation = await store.get_violation(violation_id)
            violation.status = data.status.value
            if data.resolution_note is not None:
                violation.resolution_note = data.resolution_note
            violation.resolved_at = _now() if data.status == ViolationStatus.resolved else None
            violation = await store.save(violation)
            SeriesAdapter(logger, violation.series_id).info(
                "Violation %s marked %s", violation.id, violation.status,
                extra={"event_type": "violation_reviewed", "entity_id": violation.id},
            )
            return ViolationOut.model_validate(violation)

        return await self._run("update_violation_status", work)

    # ------------------------------------------------------------------
    # Continuity notes (never block writes)
    # ------------------------------------------------------------------

    async def create_note(self, series_id: str, data: NoteCreate, author_id: Optional[str] = None) -> NoteOut:
        author = _resolve_author(data.author_id, author_id)
        title = _require_text(data.title, "title")
        content = _require_text(data.content, "content")

        async def work(store: EntityStore) -> NoteOut:
            await store.get_series(series_id)
            note = await store.add(ContinuityNote(
                id=new_id(),
                series_id=series_id,
                author_id=author,
                note_type=data.note_type.value,
                title=title,
                content=content,
                subject_type=data.subject_type.value if data.subject_type else None,
                subject_id=data.subject_id,
                referenced_book=data.referenced_book,
                priority=data.priority.value,
                is_resolved=False,
            ))
            return NoteOut.model_validate(note)

        return await self._run("create_note", work)

    async def update_note(self, note_id: str, data: NoteUpdate) -> NoteOut:
        fields = data.model_dump(mode="json", exclude_unset=True)
        for key in ("title", "content"):
            if key in fields:
                fields[key] = _require_text(fields[key], key)
        for key in ("note_type", "priority", "is_resolved"):
            if key in fields and fields[key] is None:
                raise ValidationError(f"{key} cannot be cleared", field=key)

        async def work(store: EntityStore) -> NoteOut:
            note = await store.get_note(note_id)
            for key, value in fields.items():
                setattr(note, key, value)
            note = await store.save(note)
            return NoteOut.model_validate(note)

        return await self._run("update_note", work)

    async def list_notes(self, series_id: str, unresolved_only: bool = False) -> List[NoteOut]:
        async def work(store: EntityStore) -> List[NoteOut]:
            await store.get_series(series_id)
            return [NoteOut.model_validate(n) for n in await store.list_notes(series_id, unresolved_only)]

        return await self._run("list_notes", work)


def _check_window(start: Optional[float], end: Optional[float]) -> None:
    if start is not None and end is not None and end < start:
        raise ValidationError("timelineEnd must not precede timelineStart", field="timelineEnd")


def _apply_lock_fields(row: Any, fields: dict[str, Any]) -> None:
    if fields.get("canonLockLevel") is not None:
        row.canon_lock_level = fields["canonLockLevel"]
    if "lockedAttributes" in fields:
        row.locked_attributes = sorted(set(fields["lockedAttributes"] or []))
