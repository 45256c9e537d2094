"""Tests for the continuity checker.

The checker is pure, so these build snapshots and facts by hand:
- lock findings for soft and hard locked attributes
- name/alias identity collisions across characters and world elements
- status regressions (revivals, rebuilt world elements)
- book timeline windows, including explicit negative skips
"""

from canonkeeper.schemas.enums import EntityType, RuleCategory, Severity
from canonkeeper.services.continuity_checker import ProposedChange, evaluate
from canonkeeper.services.snapshots import (
    AttributeChange,
    BookWindow,
    EntitySnapshot,
    IdentityClaim,
    SeriesFacts,
    identity_names,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def character(facts=None, level="none", locked=(), entity_id="c-1"):
    base = {"name": "Vael", "aliases": [], "currentStatus": "alive", "firstAppearsBook": 1, "eyeColor": "amber"}
    base.update(facts or {})
    return EntitySnapshot(EntityType.character, entity_id, "s-1", base, level, frozenset(locked))


def update(subject, book_context=None, **changes):
    items = tuple(AttributeChange(attr, subject.facts.get(attr), new) for attr, new in changes.items())
    return ProposedChange(subject=subject, changes=items, book_context=book_context)


def create(entity_type, book_context=None, **facts):
    subject = EntitySnapshot(entity_type, None, "s-1", facts={})
    items = tuple(AttributeChange(attr, None, value) for attr, value in facts.items())
    return ProposedChange(subject=subject, changes=items, book_context=book_context, creating=True)


def claim(name, aliases=(), entity_type=EntityType.character, entity_id="other"):
    return IdentityClaim(entity_type, entity_id, name, identity_names(name, aliases))


def windows(*books):
    return tuple(BookWindow(f"b-{n}", n, start, end, skip) for n, start, end, skip in books)


NO_FACTS = SeriesFacts(series_id="s-1")


# ---------------------------------------------------------------------------
# Canon locks
# ---------------------------------------------------------------------------

class TestLocks:
    def test_hard_locked_change_is_rejected(self):
        evaluation = evaluate(update(character(level="hard", locked=["eyeColor"]), eyeColor="blue"), NO_FACTS)
        assert evaluation.rejected
        [finding] = evaluation.hard
        assert finding.category == RuleCategory.locked_attribute_mutation
        assert finding.attribute == "eyeColor"
        assert "'amber' -> 'blue'" in finding.description

    def test_soft_locked_change_yields_one_soft_finding(self):
        evaluation = evaluate(update(character(level="soft", locked=["eyeColor"]), eyeColor="blue"), NO_FACTS)
        assert not evaluation.rejected
        assert [f.category for f in evaluation.soft] == [RuleCategory.locked_attribute_mutation]

    def test_same_value_is_not_a_change(self):
        evaluation = evaluate(update(character(level="hard", locked=["eyeColor"]), eyeColor="amber"), NO_FACTS)
        assert evaluation.findings == []

    def test_reordered_aliases_are_not_a_change(self):
        subject = character({"aliases": ["Ash", "Ember"]}, level="hard", locked=["aliases"])
        assert evaluate(update(subject, aliases=["Ember", "Ash"]), NO_FACTS).findings == []
        assert evaluate(update(subject, aliases=["Ember"]), NO_FACTS).rejected

    def test_unlocked_attribute_on_locked_entity_is_free(self):
        evaluation = evaluate(update(character(level="hard", locked=["eyeColor"]), backstory="Exiled"), NO_FACTS)
        assert evaluation.findings == []

    def test_creation_skips_lock_rules(self):
        change = create(EntityType.character, name="Vael", eyeColor="amber")
        evaluation = evaluate(change, NO_FACTS)
        assert evaluation.findings == []

    def test_book_context_is_carried_on_findings(self):
        evaluation = evaluate(
            update(character(level="soft", locked=["eyeColor"]), book_context=2, eyeColor="blue"), NO_FACTS
        )
        assert evaluation.soft[0].book_number == 2


# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------

class TestIdentity:
    def test_name_collision_ignores_case(self):
        facts = SeriesFacts("s-1", identities=(claim("Vael", entity_id="c-1"),))
        evaluation = evaluate(create(EntityType.character, name="VAEL"), facts)
        assert evaluation.rejected
        assert evaluation.hard[0].category == RuleCategory.identity

    def test_alias_collides_with_existing_name(self):
        facts = SeriesFacts("s-1", identities=(claim("Ember Throne", entity_type=EntityType.world_element),))
        evaluation = evaluate(update(character(), aliases=["ember  throne"]), facts)
        assert evaluation.rejected
        assert "world element 'Ember Throne'" in evaluation.hard[0].description

    def test_entity_may_keep_its_own_name(self):
        facts = SeriesFacts("s-1", identities=(claim("Vael", aliases=["The Ash"], entity_id="c-1"),))
        evaluation = evaluate(update(character(), aliases=["The Ash", "Ashborn"]), facts)
        assert evaluation.findings == []

    def test_distinct_names_pass(self):
        facts = SeriesFacts("s-1", identities=(claim("Vael"),))
        assert evaluate(create(EntityType.character, name="Serin"), facts).findings == []


# ---------------------------------------------------------------------------
# Status regression
# ---------------------------------------------------------------------------

class TestStatusRegression:
    def test_revival_is_soft(self):
        subject = character({"currentStatus": "deceased"})
        evaluation = evaluate(update(subject, currentStatus="alive"), NO_FACTS)
        assert not evaluation.rejected
        [finding] = evaluation.soft
        assert finding.category == RuleCategory.status_regression
        assert finding.severity == Severity.soft

    def test_revival_under_soft_lock_still_yields_one_regression(self):
        subject = character({"currentStatus": "deceased"}, level="soft", locked=["currentStatus"])
        evaluation = evaluate(update(subject, currentStatus="alive"), NO_FACTS)
        categories = [f.category for f in evaluation.soft]
        assert categories.count(RuleCategory.status_regression) == 1
        assert RuleCategory.locked_attribute_mutation in categories

    def test_death_is_not_a_regression(self):
        evaluation = evaluate(update(character(), currentStatus="deceased"), NO_FACTS)
        assert evaluation.findings == []

    def test_destroyed_world_element_reactivated(self):
        subject = EntitySnapshot(
            EntityType.world_element, "w-1", "s-1",
            {"name": "Ember Throne", "aliases": [], "isActive": False, "destroyedInBook": 2},
        )
        evaluation = evaluate(update(subject, isActive=True), NO_FACTS)
        [finding] = evaluation.soft
        assert finding.category == RuleCategory.status_regression
        assert "Book 2" in finding.description


# ---------------------------------------------------------------------------
# First appearance
# ---------------------------------------------------------------------------

class TestFirstAppearance:
    def test_unknown_book_is_rejected(self):
        facts = SeriesFacts("s-1", books=windows((1, 0, 100, None)))
        evaluation = evaluate(update(character(), firstAppearsBook=4), facts)
        assert evaluation.hard[0].category == RuleCategory.timeline_overlap

    def test_after_book_context_is_rejected(self):
        facts = SeriesFacts("s-1", books=windows((1, 0, 100, None), (2, 100, 200, None)))
        evaluation = evaluate(update(character(), book_context=1, firstAppearsBook=2), facts)
        assert evaluation.rejected

    def test_series_without_books_is_not_checked(self):
        assert evaluate(create(EntityType.character, name="Serin", firstAppearsBook=3), NO_FACTS).findings == []


# ---------------------------------------------------------------------------
# Book timeline
# ---------------------------------------------------------------------------

class TestBookTimeline:
    def _new_book(self, number, start, end, skip=None):
        facts = {"bookNumber": number, "timelineStart": start, "timelineEnd": end}
        if skip is not None:
            facts["timeSkipFromPrevious"] = skip
        return create(EntityType.book, book_context=number, **facts)

    def test_start_before_previous_end_is_rejected(self):
        facts = SeriesFacts("s-1", books=windows((1, 0, 100, None)))
        evaluation = evaluate(self._new_book(2, 50, 150), facts)
        assert evaluation.rejected
        assert evaluation.hard[0].category == RuleCategory.timeline_overlap

    def test_start_equal_to_previous_end_is_allowed(self):
        facts = SeriesFacts("s-1", books=windows((1, 0, 100, None)))
        assert evaluate(self._new_book(2, 100, 150), facts).findings == []

    def test_negative_skip_allows_earlier_start(self):
        facts = SeriesFacts("s-1", books=windows((1, 0, 100, None)))
        assert evaluate(self._new_book(2, 60, 90, skip=-40), facts).findings == []

    def test_negative_skip_has_a_limit(self):
        facts = SeriesFacts("s-1", books=windows((1, 0, 100, None)))
        assert evaluate(self._new_book(2, 50, 90, skip=-40), facts).rejected

    def test_inserted_book_must_end_before_successor_starts(self):
        facts = SeriesFacts("s-1", books=windows((1, 0, 100, None), (3, 200, 300, None)))
        assert evaluate(self._new_book(2, 100, 250), facts).rejected
        assert evaluate(self._new_book(2, 100, 200), facts).findings == []

    def test_skip_cannot_land_inside_an_earlier_book(self):
        facts = SeriesFacts("s-1", books=windows((1, 0, 100, None), (2, 100, 200, None)))
        evaluation = evaluate(self._new_book(3, 90, 95, skip=-120), facts)
        [finding] = evaluation.hard
        assert "overlaps Book 1" in finding.description

    def test_book_without_window_is_not_checked(self):
        facts = SeriesFacts("s-1", books=windows((1, 0, 100, None)))
        change = create(EntityType.book, book_context=2, bookNumber=2)
        assert evaluate(change, facts).findings == []

    def test_update_ignores_the_book_itself(self):
        facts = SeriesFacts("s-1", books=windows((1, 0, 100, None), (2, 100, 200, None)))
        subject = EntitySnapshot(
            EntityType.book, "b-2", "s-1",
            {"bookNumber": 2, "timelineStart": 100, "timelineEnd": 200, "timeSkipFromPrevious": None},
        )
        assert evaluate(update(subject, timelineEnd=220), facts).findings == []
