"""
Continuity Checker

Evaluates a proposed change to a Book, Character or WorldElement against the
canon lock policy and against what is already established in the series.
Pure: it reads snapshots and returns findings, it never touches the store.

Per attribute the rules run in a fixed order:

1. hard lock      -> hard ``locked-attribute-mutation``, stop for this attribute
2. soft lock      -> soft ``locked-attribute-mutation``
3. identity       -> hard ``identity`` on a name/alias collision, stop
4. status         -> soft ``status-regression`` on a revival
5. first appearance (characters) -> hard ``timeline-overlap``

Book windows are checked once per change, after the per-attribute pass.
Every attribute is evaluated to completion; the change as a whole is rejected
when any finding is hard.
"""

from __future__ import annotations

import dataclasses
from typing import Any, Iterable, List, Optional

from canonkeeper.schemas.enums import BookAttribute, CharacterStatus, EntityType, RuleCategory, Severity
from canonkeeper.services.canon_lock import LockClassification, classify
from canonkeeper.services.snapshots import (
    AttributeChange,
    BookWindow,
    EntitySnapshot,
    SeriesFacts,
    identity_names,
    same_value,
)


IDENTITY_ATTRIBUTES = frozenset({"name", "aliases"})
TIMELINE_ATTRIBUTES = frozenset(a.value for a in BookAttribute)


@dataclasses.dataclass(frozen=True)
class Finding:
    """A continuity violation produced by the checker, before it is stored."""
    category: RuleCategory
    severity: Severity
    description: str
    subject_type: EntityType
    subject_id: Optional[str] = None
    attribute: Optional[str] = None
    book_number: Optional[int] = None

    @property
    def is_hard(self) -> bool:
        return self.severity == Severity.hard

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category.value,
            "severity": self.severity.value,
            "description": self.description,
            "subjectType": self.subject_type.value,
            "subjectId": self.subject_id,
            "attribute": self.attribute,
            "bookNumber": self.book_number,
        }


@dataclasses.dataclass(frozen=True)
class ProposedChange:
    """A write to one entity: its stored snapshot plus the attributes it touches.

    For a creation the subject carries no stored facts and ``creating`` is set,
    so lock rules (which only govern established facts) are skipped.
    """
    subject: EntitySnapshot
    changes: tuple[AttributeChange, ...]
    book_context: Optional[int] = None
    creating: bool = False

    @property
    def proposed(self) -> EntitySnapshot:
        return self.subject.with_facts({c.attribute: c.new for c in self.changes})

    @property
    def attributes(self) -> frozenset[str]:
        return frozenset(c.attribute for c in self.changes)


@dataclasses.dataclass
class Evaluation:
    findings: List[Finding] = dataclasses.field(default_factory=list)

    @property
    def hard(self) -> List[Finding]:
        return [f for f in self.findings if f.is_hard]

    @property
    def soft(self) -> List[Finding]:
        return [f for f in self.findings if not f.is_hard]

    @property
    def rejected(self) -> bool:
        return any(f.is_hard for f in self.findings)


def evaluate(change: ProposedChange, facts: SeriesFacts) -> Evaluation:
    """Evaluate every touched attribute of ``change`` against ``facts``."""
    evaluation = Evaluation()
    proposed = change.proposed

    for item in change.changes:
        if same_value(item.attribute, item.old, item.new):
            continue
        evaluation.findings.extend(_evaluate_attribute(change, proposed, item, facts))

    if change.subject.entity_type == EntityType.book and change.attributes & TIMELINE_ATTRIBUTES:
        evaluation.findings.extend(_check_book_timeline(change, proposed, facts))

    return evaluation


def _finding(change: ProposedChange, category: RuleCategory, severity: Severity,
             description: str, attribute: Optional[str] = None) -> Finding:
    return Finding(
        category=category,
        severity=severity,
        description=description,
        subject_type=change.subject.entity_type,
        subject_id=change.subject.entity_id,
        attribute=attribute,
        book_number=change.book_context,
    )


def _evaluate_attribute(change: ProposedChange, proposed: EntitySnapshot,
                        item: AttributeChange, facts: SeriesFacts) -> List[Finding]:
    found: List[Finding] = []
    label = proposed.label
    attr = item.attribute

    # 1-2. Canon locks
    if not change.creating:
        lock = classify(change.subject, attr)
        if lock == LockClassification.hard_locked:
            return [_finding(
                change, RuleCategory.locked_attribute_mutation, Severity.hard,
                f"{change.subject.label}: '{attr}' is hard-locked canon "
                f"({_show(item.old)} -> {_show(item.new)})",
                attr,
            )]
        if lock == LockClassification.soft_locked:
            found.append(_finding(
                change, RuleCategory.locked_attribute_mutation, Severity.soft,
                f"{change.subject.label}: soft-locked '{attr}' changed "
                f"({_show(item.old)} -> {_show(item.new)})",
                attr,
            ))

    # 3. Identity
    if attr in IDENTITY_ATTRIBUTES and proposed.entity_type in (EntityType.character, EntityType.world_element):
        claimed = identity_names(item.new) if attr == "name" else identity_names(None, item.new or ())
        collision = _identity_collision(proposed, claimed, facts)
        if collision:
            found.append(_finding(change, RuleCategory.identity, Severity.hard, collision, attr))
            return found

    # 4. Status regression
    if not change.creating:
        regression = _status_regression(change, item)
        if regression:
            found.append(_finding(change, RuleCategory.status_regression, Severity.soft, regression, attr))

    # 5. First appearance must point at a book that exists, not after the edit's book
    if attr == "firstAppearsBook" and proposed.entity_type == EntityType.character and facts.books:
        problem = _first_appearance_problem(item.new, change.book_context, facts)
        if problem:
            found.append(_finding(
                change, RuleCategory.timeline_overlap, Severity.hard, f"{label}: {problem}", attr,
            ))

    return found


def _identity_collision(proposed: EntitySnapshot, claimed: frozenset[str], facts: SeriesFacts) -> Optional[str]:
    if not claimed:
        return None
    for claim in facts.identities:
        if claim.entity_id == proposed.entity_id and claim.entity_type == proposed.entity_type:
            continue
        shared = claimed & claim.names
        if shared:
            kind = "character" if claim.entity_type == EntityType.character else "world element"
            return (
                f"'{sorted(shared)[0]}' is already used by {kind} '{claim.label}' in this series "
                f"(names and aliases are unique, case-insensitive)"
            )
    return None


def _status_regression(change: ProposedChange, item: AttributeChange) -> Optional[str]:
    label = change.subject.label
    if change.subject.entity_type == EntityType.character and item.attribute == "currentStatus":
        if item.old == CharacterStatus.deceased.value and item.new == CharacterStatus.alive.value:
            return f"{label} was deceased and is now alive; confirm the revival is intended"
    if change.subject.entity_type == EntityType.world_element and item.attribute == "isActive":
        destroyed_in = change.subject.facts.get("destroyedInBook")
        if item.old is False and item.new is True and destroyed_in is not None:
            return f"{label} was destroyed in Book {destroyed_in} and is active again"
    return None


def _first_appearance_problem(first_book: Any, book_context: Optional[int], facts: SeriesFacts) -> Optional[str]:
    if first_book is None:
        return None
    if first_book not in facts.book_numbers:
        known = ", ".join(str(n) for n in sorted(facts.book_numbers))
        return f"first appears in Book {first_book}, which does not exist in this series (books: {known})"
    if book_context is not None and first_book > book_context:
        return f"first appears in Book {first_book} but is being edited in Book {book_context}"
    return None


# ---------------------------------------------------------------------------
# Book timeline
# ---------------------------------------------------------------------------

def _check_book_timeline(change: ProposedChange, proposed: EntitySnapshot, facts: SeriesFacts) -> List[Finding]:
    number = proposed.facts.get("bookNumber")
    start = proposed.facts.get("timelineStart")
    end = proposed.facts.get("timelineEnd")
    skip = proposed.facts.get("timeSkipFromPrevious")
    if number is None or (start is None and end is None):
        return []

    attribute = next((a.value for a in BookAttribute if a.value in change.attributes), None)
    others = [
        b for b in facts.books
        if b.book_number != number and (change.subject.entity_id is None or b.book_id != change.subject.entity_id)
    ]
    findings: List[Finding] = []

    def hard(description: str) -> None:
        findings.append(_finding(change, RuleCategory.timeline_overlap, Severity.hard, description, attribute))

    predecessor = _neighbour(others, number, before=True)
    successor = _neighbour(others, number, before=False)

    if predecessor is not None and start is not None:
        bound = _lower_bound(predecessor.end, skip)
        if start < bound:
            hard(
                f"Book {number} starts at {start:g}, before Book {predecessor.book_number} ends at "
                f"{predecessor.end:g}" + (f" (allowed skip {skip:g})" if skip is not None else "")
            )

    if successor is not None and end is not None:
        bound = _lower_bound(end, successor.skip)
        if successor.start < bound:
            hard(
                f"Book {successor.book_number} starts at {successor.start:g}, before Book {number} "
                f"would end at {end:g}"
            )

    if start is not None and end is not None:
        for other in others:
            if other is predecessor or other is successor or other.start is None or other.end is None:
                continue
            if _overlaps(start, end, other.start, other.end):
                hard(
                    f"Book {number} ({start:g}-{end:g}) overlaps Book {other.book_number} "
                    f"({other.start:g}-{other.end:g})"
                )
    return findings


def _neighbour(books: Iterable[BookWindow], number: int, before: bool) -> Optional[BookWindow]:
    """Nearest book before ``number`` with a known end, or after it with a known start."""
    if before:
        candidates = [b for b in books if b.book_number < number and b.end is not None]
        return max(candidates, key=lambda b: b.book_number, default=None)
    candidates = [b for b in books if b.book_number > number and b.start is not None]
    return min(candidates, key=lambda b: b.book_number, default=None)


def _lower_bound(previous_end: float, skip: Optional[float]) -> float:
    # Only an explicit negative skip lets a book start before its predecessor ends
    if skip is None:
        return previous_end
    return previous_end + min(skip, 0)


def _overlaps(start: float, end: float, other_start: float, other_end: float) -> bool:
    # Half-open windows: touching end-to-start is not an overlap
    return start < other_end and other_start < end


def _show(value: Any) -> str:
    if value is None:
        return "unset"
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(str(v) for v in value) + "]"
    return repr(value) if isinstance(value, str) else str(value)
