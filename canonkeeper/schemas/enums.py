"""
Closed enumerations shared by the ORM layer, the request/response schemas
and the continuity rules.

Values are stored as plain strings in the database; the enums are the single
place that lists what a column may hold.
"""

from __future__ import annotations

from enum import Enum


# ─── Series / Book ────────────────────────────────────────────────────────────

class SeriesStatus(str, Enum):
    planning = "planning"
    active = "active"
    on_hold = "on_hold"
    completed = "completed"


class Tone(str, Enum):
    dark = "dark"
    light = "light"
    balanced = "balanced"
    epic = "epic"
    intimate = "intimate"


class Pacing(str, Enum):
    slow = "slow"
    moderate = "moderate"
    fast = "fast"


class TargetAudience(str, Enum):
    young_adult = "young_adult"
    adult = "adult"
    all_ages = "all_ages"


class ContentRating(str, Enum):
    general = "general"
    teen = "teen"
    mature = "mature"


class BookStatus(str, Enum):
    planning = "planning"
    outlining = "outlining"
    drafting = "drafting"
    revising = "revising"
    complete = "complete"
    published = "published"


# ─── Characters / World ───────────────────────────────────────────────────────

class CharacterRole(str, Enum):
    protagonist = "protagonist"
    antagonist = "antagonist"
    supporting = "supporting"
    minor = "minor"


class CharacterStatus(str, Enum):
    alive = "alive"
    deceased = "deceased"
    missing = "missing"
    unknown = "unknown"
    transformed = "transformed"


class WorldElementType(str, Enum):
    location = "location"
    artifact = "artifact"
    magic_system = "magic_system"
    faction = "faction"
    culture = "culture"
    technology = "technology"
    historical = "historical"
    custom = "custom"


class ArcStatus(str, Enum):
    setup = "setup"
    rising = "rising"
    climax = "climax"
    falling = "falling"
    resolved = "resolved"
    abandoned = "abandoned"


TERMINAL_ARC_STATUSES = frozenset({ArcStatus.resolved.value, ArcStatus.abandoned.value})


class CanonLockLevel(str, Enum):
    """How freely an entity's locked attributes may change once established."""
    none = "none"
    soft = "soft"
    hard = "hard"


class CharacterAttribute(str, Enum):
    """Character fields that can be named in ``lockedAttributes``.

    Physical-description fields are lockable one by one, so an author can
    pin a character's eye colour without freezing their whole appearance.
    """
    name = "name"
    aliases = "aliases"
    title = "title"
    character_role = "characterRole"
    current_status = "currentStatus"
    first_appears_book = "firstAppearsBook"
    core_personality = "corePersonality"
    backstory = "backstory"
    motivation = "motivation"
    fatal_flaw = "fatalFlaw"
    height = "height"
    build = "build"
    hair_color = "hairColor"
    eye_color = "eyeColor"
    skin_tone = "skinTone"
    distinguishing_features = "distinguishingFeatures"
    age_at_series_start = "ageAtSeriesStart"
    dialogue_style = "dialogueStyle"
    arc_status = "arcStatus"


class WorldElementAttribute(str, Enum):
    """World element fields that can be named in ``lockedAttributes``."""
    name = "name"
    aliases = "aliases"
    element_type = "elementType"
    short_description = "shortDescription"
    full_description = "fullDescription"
    category = "category"
    rules = "rules"
    introduced_in_book = "introducedInBook"
    is_active = "isActive"
    destroyed_in_book = "destroyedInBook"
    arc_status = "arcStatus"


class BookAttribute(str, Enum):
    """Book fields the timeline rule looks at. Books carry no lock level."""
    book_number = "bookNumber"
    timeline_start = "timelineStart"
    timeline_end = "timelineEnd"
    time_skip_from_previous = "timeSkipFromPrevious"


# ─── Continuity ───────────────────────────────────────────────────────────────

class EntityType(str, Enum):
    series = "series"
    book = "book"
    character = "character"
    world_element = "world_element"


class RuleCategory(str, Enum):
    identity = "identity"
    status_regression = "status-regression"
    timeline_overlap = "timeline-overlap"
    locked_attribute_mutation = "locked-attribute-mutation"


class Severity(str, Enum):
    soft = "soft"
    hard = "hard"


class ViolationStatus(str, Enum):
    pending = "pending"
    acknowledged = "acknowledged"
    resolved = "resolved"


class NoteType(str, Enum):
    reminder = "reminder"
    question = "question"
    todo = "todo"
    inconsistency = "inconsistency"
    idea = "idea"


class NotePriority(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"
    critical = "critical"
