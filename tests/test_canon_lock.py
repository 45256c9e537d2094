"""Tests for the canon lock policy (classify)."""

import pytest

from canonkeeper.schemas.enums import EntityType
from canonkeeper.services.canon_lock import LockClassification, classify
from canonkeeper.services.snapshots import EntitySnapshot


def _character(level, locked=()):
    return EntitySnapshot(
        entity_type=EntityType.character,
        entity_id="c-1",
        series_id="s-1",
        facts={"name": "Vael", "eyeColor": "amber"},
        canon_lock_level=level,
        locked_attributes=frozenset(locked),
    )


class TestClassify:
    def test_unlocked_entity_is_always_free(self):
        entity = _character("none", locked=["eyeColor"])
        assert classify(entity, "eyeColor") == LockClassification.free

    def test_attribute_outside_locked_set_is_free(self):
        entity = _character("hard", locked=["eyeColor"])
        assert classify(entity, "hairColor") == LockClassification.free

    @pytest.mark.parametrize("level,expected", [
        ("soft", LockClassification.soft_locked),
        ("hard", LockClassification.hard_locked),
    ])
    def test_locked_attribute_follows_entity_level(self, level, expected):
        entity = _character(level, locked=["eyeColor"])
        assert classify(entity, "eyeColor") == expected

    def test_unknown_attribute_name_is_free(self):
        entity = _character("hard", locked=["eyeColor"])
        assert classify(entity, "favouriteSong") == LockClassification.free

    def test_empty_locked_set_with_hard_level(self):
        assert classify(_character("hard"), "eyeColor") == LockClassification.free
