# Wire schemas for the continuity engine
from .enums import (
    ArcStatus,
    BookAttribute,
    BookStatus,
    CanonLockLevel,
    CharacterAttribute,
    CharacterRole,
    CharacterStatus,
    ContentRating,
    EntityType,
    NotePriority,
    NoteType,
    Pacing,
    RuleCategory,
    SeriesStatus,
    Severity,
    TargetAudience,
    Tone,
    ViolationStatus,
    WorldElementAttribute,
    WorldElementType,
)

from .series import (
    CamelModel,
    SeriesCreate,
    SeriesUpdate,
    SeriesOut,
    SeriesSummary,
    BookCreate,
    BookUpdate,
    BookOut,
)

from .entities import (
    CorePersonality,
    PhysicalDescription,
    CharacterCreate,
    CharacterUpdate,
    CharacterOut,
    WorldElementCreate,
    WorldElementUpdate,
    WorldElementOut,
)

from .continuity import (
    ViolationOut,
    ViolationUpdate,
    NoteCreate,
    NoteUpdate,
    NoteOut,
    BookWriteResult,
    CharacterWriteResult,
    WorldElementWriteResult,
    SeriesOverview,
)

__all__ = [
    # Enums
    "ArcStatus",
    "BookAttribute",
    "BookStatus",
    "CanonLockLevel",
    "CharacterAttribute",
    "CharacterRole",
    "CharacterStatus",
    "ContentRating",
    "EntityType",
    "NotePriority",
    "NoteType",
    "Pacing",
    "RuleCategory",
    "SeriesStatus",
    "Severity",
    "TargetAudience",
    "Tone",
    "ViolationStatus",
    "WorldElementAttribute",
    "WorldElementType",
    # Series / books
    "CamelModel",
    "SeriesCreate",
    "SeriesUpdate",
    "SeriesOut",
    "SeriesSummary",
    "BookCreate",
    "BookUpdate",
    "BookOut",
    # Characters / world
    "CorePersonality",
    "PhysicalDescription",
    "CharacterCreate",
    "CharacterUpdate",
    "CharacterOut",
    "WorldElementCreate",
    "WorldElementUpdate",
    "WorldElementOut",
    # Continuity
    "ViolationOut",
    "ViolationUpdate",
    "NoteCreate",
    "NoteUpdate",
    "NoteOut",
    "BookWriteResult",
    "CharacterWriteResult",
    "WorldElementWriteResult",
    "SeriesOverview",
]
