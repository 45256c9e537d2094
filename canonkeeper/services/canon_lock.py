"""Canon lock policy: how freely may an attribute of an established entity change?"""

from __future__ import annotations

from enum import Enum

from canonkeeper.schemas.enums import CanonLockLevel
from canonkeeper.services.snapshots import EntitySnapshot


class LockClassification(str, Enum):
    free = "free"
    soft_locked = "soft_locked"
    hard_locked = "hard_locked"


def classify(entity: EntitySnapshot, attribute: str) -> LockClassification:
    """Classify a write to ``attribute`` of ``entity``.

    Only attributes named in the entity's ``locked_attributes`` are governed;
    anything else, including names the entity type does not know, is free.
    """
    if entity.canon_lock_level == CanonLockLevel.none.value:
        return LockClassification.free
    if attribute not in entity.locked_attributes:
        return LockClassification.free
    if entity.canon_lock_level == CanonLockLevel.hard.value:
        return LockClassification.hard_locked
    return LockClassification.soft_locked
