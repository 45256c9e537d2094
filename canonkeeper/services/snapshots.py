"""Immutable views of stored rows, as read by the lock policy and the checker.

Facts are keyed by the public (camelCase) attribute names, the same names
authors use in ``lockedAttributes``, so the policy and the rules never touch
ORM objects directly.
"""

from __future__ import annotations

import dataclasses
from typing import Any, Iterable, Mapping, Optional

from canonkeeper.models import Book, Character, WorldElement
from canonkeeper.schemas.enums import CanonLockLevel, EntityType


PHYSICAL_ATTRIBUTES = ("height", "build", "hairColor", "eyeColor", "skinTone", "distinguishingFeatures")

# Public attribute name -> ORM column, for the attributes stored in their own column
CHARACTER_COLUMNS = {
    "name": "name",
    "aliases": "aliases",
    "title": "title",
    "characterRole": "character_role",
    "currentStatus": "current_status",
    "firstAppearsBook": "first_appears_book",
    "corePersonality": "core_personality",
    "backstory": "backstory",
    "motivation": "motivation",
    "fatalFlaw": "fatal_flaw",
    "ageAtSeriesStart": "age_at_series_start",
    "dialogueStyle": "dialogue_style",
    "arcStatus": "arc_status",
}

WORLD_ELEMENT_COLUMNS = {
    "name": "name",
    "aliases": "aliases",
    "elementType": "element_type",
    "shortDescription": "short_description",
    "fullDescription": "full_description",
    "category": "category",
    "rules": "rules",
    "introducedInBook": "introduced_in_book",
    "isActive": "is_active",
    "destroyedInBook": "destroyed_in_book",
    "arcStatus": "arc_status",
}

BOOK_COLUMNS = {
    "bookNumber": "book_number",
    "timelineStart": "timeline_start",
    "timelineEnd": "timeline_end",
    "timeSkipFromPrevious": "time_skip_from_previous",
}

# List-valued attributes whose order carries no meaning
SET_ATTRIBUTES = frozenset({"aliases", "rules", "distinguishingFeatures"})


@dataclasses.dataclass(frozen=True)
class EntitySnapshot:
    entity_type: EntityType
    entity_id: Optional[str]
    series_id: str
    facts: Mapping[str, Any]
    canon_lock_level: str = CanonLockLevel.none.value
    locked_attributes: frozenset[str] = frozenset()

    @property
    def label(self) -> str:
        name = self.facts.get("name")
        if name:
            return str(name)
        if self.entity_type == EntityType.book:
            return f"Book {self.facts.get('bookNumber')}"
        return self.entity_id or self.entity_type.value

    def with_facts(self, updates: Mapping[str, Any]) -> "EntitySnapshot":
        return dataclasses.replace(self, facts={**self.facts, **updates})


@dataclasses.dataclass(frozen=True)
class AttributeChange:
    attribute: str
    old: Any
    new: Any


@dataclasses.dataclass(frozen=True)
class IdentityClaim:
    """The names one Character or WorldElement answers to."""
    entity_type: EntityType
    entity_id: str
    label: str
    names: frozenset[str]


@dataclasses.dataclass(frozen=True)
class BookWindow:
    book_id: Optional[str]
    book_number: int
    start: Optional[float]
    end: Optional[float]
    skip: Optional[float] = None


@dataclasses.dataclass(frozen=True)
class SeriesFacts:
    """Everything already established in a series that a change is checked against."""
    series_id: str
    identities: tuple[IdentityClaim, ...] = ()
    books: tuple[BookWindow, ...] = ()

    @property
    def book_numbers(self) -> frozenset[int]:
        return frozenset(b.book_number for b in self.books)


def normalize_name(value: str) -> str:
    return " ".join(value.split()).casefold()


def identity_names(name: Optional[str], aliases: Iterable[str] = ()) -> frozenset[str]:
    names = [name] if name else []
    names.extend(a for a in aliases or () if a)
    return frozenset(normalize_name(n) for n in names if normalize_name(n))


def same_value(attribute: str, old: Any, new: Any) -> bool:
    if attribute in SET_ATTRIBUTES:
        return frozenset(old or ()) == frozenset(new or ())
    return old == new


def diff_facts(before: Mapping[str, Any], after: Mapping[str, Any]) -> list[AttributeChange]:
    """Attributes whose value differs between two fact maps, in ``after`` order."""
    return [
        AttributeChange(attribute=attr, old=before.get(attr), new=value)
        for attr, value in after.items()
        if not same_value(attr, before.get(attr), value)
    ]


# ---------------------------------------------------------------------------
# Row -> snapshot
# ---------------------------------------------------------------------------

def character_facts(character: Character) -> dict[str, Any]:
    facts = {attr: getattr(character, column) for attr, column in CHARACTER_COLUMNS.items()}
    physical = character.physical_description or {}
    for attr in PHYSICAL_ATTRIBUTES:
        facts[attr] = physical.get(attr)
    facts["aliases"] = list(facts["aliases"] or [])
    return facts


def world_element_facts(element: WorldElement) -> dict[str, Any]:
    facts = {attr: getattr(element, column) for attr, column in WORLD_ELEMENT_COLUMNS.items()}
    facts["aliases"] = list(facts["aliases"] or [])
    return facts


def book_facts(book: Book) -> dict[str, Any]:
    return {attr: getattr(book, column) for attr, column in BOOK_COLUMNS.items()}


def character_snapshot(character: Character) -> EntitySnapshot:
    return EntitySnapshot(
        entity_type=EntityType.character,
        entity_id=character.id,
        series_id=character.series_id,
        facts=character_facts(character),
        canon_lock_level=character.canon_lock_level,
        locked_attributes=frozenset(character.locked_attributes or ()),
    )


def world_element_snapshot(element: WorldElement) -> EntitySnapshot:
    return EntitySnapshot(
        entity_type=EntityType.world_element,
        entity_id=element.id,
        series_id=element.series_id,
        facts=world_element_facts(element),
        canon_lock_level=element.canon_lock_level,
        locked_attributes=frozenset(element.locked_attributes or ()),
    )


def book_snapshot(book: Book) -> EntitySnapshot:
    return EntitySnapshot(
        entity_type=EntityType.book,
        entity_id=book.id,
        series_id=book.series_id,
        facts=book_facts(book),
    )


def series_facts(
    series_id: str,
    characters: Iterable[Character],
    world_elements: Iterable[WorldElement],
    books: Iterable[Book],
) -> SeriesFacts:
    identities = [
        IdentityClaim(EntityType.character, c.id, c.name, identity_names(c.name, c.aliases))
        for c in characters
    ]
    identities.extend(
        IdentityClaim(EntityType.world_element, w.id, w.name, identity_names(w.name, w.aliases))
        for w in world_elements
    )
    windows = tuple(
        BookWindow(b.id, b.book_number, b.timeline_start, b.timeline_end, b.time_skip_from_previous)
        for b in sorted(books, key=lambda b: b.book_number)
    )
    return SeriesFacts(series_id=series_id, identities=tuple(identities), books=windows)
