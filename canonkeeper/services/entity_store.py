from __future__ import annotations

import uuid
from typing import Iterable, List, Optional, Sequence, TypeVar

from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from canonkeeper.errors import NotFound
from canonkeeper.models import Base, Book, Character, ContinuityNote, Series, Violation, WorldElement
from canonkeeper.schemas.enums import TERMINAL_ARC_STATUSES, ViolationStatus
from canonkeeper.services.continuity_checker import Finding

ModelT = TypeVar("ModelT", bound=Base)


def new_id() -> str:
    return str(uuid.uuid4())


class EntityStore:
    """
    Data access for one engine operation. Pure reads and writes, no rules.

    Bound to a single session; the caller owns the transaction.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    # ------------------------------------------------------------------
    # Generic helpers
    # ------------------------------------------------------------------

    async def _get(self, model: type[ModelT], entity_id: str, label: str) -> ModelT:
        row = await self.session.get(model, entity_id)
        if row is None:
            raise NotFound(label, entity_id)
        return row

    async def add(self, row: ModelT) -> ModelT:
        self.session.add(row)
        await self.session.flush()
        # Load server-side defaults (timestamps) so the row can be read outside the session
        await self.session.refresh(row)
        return row

    async def save(self, row: ModelT) -> ModelT:
        await self.session.flush()
        await self.session.refresh(row)
        return row

    async def delete(self, row: Base) -> None:
        await self.session.delete(row)
        await self.session.flush()

    # ------------------------------------------------------------------
    # Series
    # ------------------------------------------------------------------

    async def get_series(self, series_id: str) -> Series:
        return await self._get(Series, series_id, "Series")

    async def list_author_series(self, author_id: str) -> Sequence[Series]:
        result = await self.session.execute(
            select(Series).where(Series.author_id == author_id).order_by(desc(Series.updated_at))
        )
        return result.scalars().all()

    # ------------------------------------------------------------------
    # Books
    # ------------------------------------------------------------------

    async def get_book(self, book_id: str) -> Book:
        return await self._get(Book, book_id, "Book")

    async def list_books(self, series_id: str) -> Sequence[Book]:
        result = await self.session.execute(
            select(Book).where(Book.series_id == series_id).order_by(Book.book_number)
        )
        return result.scalars().all()

    async def find_book_by_number(self, series_id: str, book_number: int) -> Optional[Book]:
        result = await self.session.execute(
            select(Book).where(Book.series_id == series_id, Book.book_number == book_number)
        )
        return result.scalar_one_or_none()

    # ------------------------------------------------------------------
    # Characters / world elements
    # ------------------------------------------------------------------

    async def get_character(self, character_id: str) -> Character:
        return await self._get(Character, character_id, "Character")

    async def list_characters(self, series_id: str) -> Sequence[Character]:
        result = await self.session.execute(
            select(Character)
            .where(Character.series_id == series_id)
            .order_by(Character.character_role, Character.first_appears_book, Character.name)
        )
        return result.scalars().all()

    async def get_world_element(self, element_id: str) -> WorldElement:
        return await self._get(WorldElement, element_id, "WorldElement")

    async def list_world_elements(self, series_id: str) -> Sequence[WorldElement]:
        result = await self.session.execute(
            select(WorldElement)
            .where(WorldElement.series_id == series_id)
            .order_by(WorldElement.element_type, WorldElement.name)
        )
        return result.scalars().all()

    # ------------------------------------------------------------------
    # Notes
    # ------------------------------------------------------------------

    async def get_note(self, note_id: str) -> ContinuityNote:
        return await self._get(ContinuityNote, note_id, "ContinuityNote")

    async def list_notes(self, series_id: str, unresolved_only: bool = False) -> Sequence[ContinuityNote]:
        query = select(ContinuityNote).where(ContinuityNote.series_id == series_id)
        if unresolved_only:
            query = query.where(ContinuityNote.is_resolved.is_(False))
        result = await self.session.execute(query.order_by(desc(ContinuityNote.created_at)))
        return result.scalars().all()

    # ------------------------------------------------------------------
    # Violations
    # ------------------------------------------------------------------

    async def get_violation(self, violation_id: str) -> Violation:
        return await self._get(Violation, violation_id, "Violation")

    async def list_violations(self, series_id: str, status: Optional[str] = None) -> Sequence[Violation]:
        query = select(Violation).where(Violation.series_id == series_id)
        if status:
            query = query.where(Violation.status == status)
        result = await self.session.execute(query.order_by(Violation.created_at, Violation.id))
        return result.scalars().all()

    async def append_violations(self, series_id: str, findings: Iterable[Finding]) -> List[Violation]:
        rows = []
        for finding in findings:
            row = Violation(
                id=new_id(),
                series_id=series_id,
                subject_type=finding.subject_type.value,
                subject_id=finding.subject_id,
                attribute=finding.attribute,
                category=finding.category.value,
                severity=finding.severity.value,
                description=finding.description,
                book_number=finding.book_number,
                status=ViolationStatus.pending.value,
            )
            self.session.add(row)
            rows.append(row)
        if rows:
            await self.session.flush()
            for row in rows:
                await self.session.refresh(row)
        return rows

    # ------------------------------------------------------------------
    # Aggregates
    # ------------------------------------------------------------------

    async def count_characters(self, series_id: str) -> int:
        return await self._scalar(select(func.count(Character.id)).where(Character.series_id == series_id))

    async def count_world_elements(self, series_id: str) -> int:
        return await self._scalar(select(func.count(WorldElement.id)).where(WorldElement.series_id == series_id))

    async def count_active_arcs(self, series_id: str) -> int:
        terminal = list(TERMINAL_ARC_STATUSES)
        characters = await self._scalar(
            select(func.count(Character.id)).where(
                Character.series_id == series_id,
                Character.arc_status.is_not(None),
                Character.arc_status.not_in(terminal),
            )
        )
        elements = await self._scalar(
            select(func.count(WorldElement.id)).where(
                WorldElement.series_id == series_id,
                WorldElement.arc_status.is_not(None),
                WorldElement.arc_status.not_in(terminal),
            )
        )
        return characters + elements

    async def total_word_count(self, series_id: str) -> int:
        return await self._scalar(
            select(func.coalesce(func.sum(Book.current_word_count), 0)).where(Book.series_id == series_id)
        )

    async def count_pending_violations(self, series_id: str) -> int:
        return await self._scalar(
            select(func.count(Violation.id)).where(
                Violation.series_id == series_id,
                Violation.status == ViolationStatus.pending.value,
            )
        )

    async def _scalar(self, query) -> int:
        result = await self.session.execute(query)
        return int(result.scalar_one() or 0)
