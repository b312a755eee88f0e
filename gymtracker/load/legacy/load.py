import json
import logging
from collections.abc import Mapping, Sequence
from datetime import datetime, timezone
from enum import IntFlag
from typing import Any, BinaryIO

from gymtracker.models import (
    INVALID_TIMESTAMP,
    Exercise,
    ExerciseSet,
    Session,
    SessionCategory,
)
from gymtracker.utils.ids import IdGenerator, exercise_id, random_id

from .models import LegacyExercise, LegacySession

logger = logging.getLogger(__name__)

UNNAMED_EXERCISE = "Unnamed Exercise"

# Keys that only the old export format carries together.
LEGACY_MARKER_KEYS = ("StartTime", "Exercises", "Id")


class LegacySessionType(IntFlag):
    LEGS = 1
    CHEST = 2
    BACK = 4
    SHOULDERS = 8
    CORE = 16
    CROSSFIT = 32
    CARDIO = 64
    FULL_BODY = 128
    MOBILITY = 256
    ARMS = 512


# Checked in this order; the first set bit wins. Mobility has no counterpart
# and falls through to Mixed along with any unknown bits.
LEGACY_SESSION_TYPE_PRIORITY: list[tuple[LegacySessionType, SessionCategory]] = [
    (LegacySessionType.LEGS, SessionCategory.LEGS),
    (LegacySessionType.CHEST, SessionCategory.CHEST),
    (LegacySessionType.BACK, SessionCategory.BACK),
    (LegacySessionType.SHOULDERS, SessionCategory.SHOULDERS),
    (LegacySessionType.CORE, SessionCategory.CORE),
    (LegacySessionType.CROSSFIT, SessionCategory.CROSSFIT),
    (LegacySessionType.CARDIO, SessionCategory.CARDIO),
    (LegacySessionType.FULL_BODY, SessionCategory.FULL_BODY),
    (LegacySessionType.ARMS, SessionCategory.ARMS),
]


def map_legacy_session_type(code: int) -> SessionCategory | None:
    """Map a legacy bit-flag session type to a single category.

    Sessions tagged with several categories collapse to the lowest checked
    bit. 0 means no category; a code with none of the checked bits is Mixed.
    """
    if code == 0:
        return None
    for flag, category in LEGACY_SESSION_TYPE_PRIORITY:
        if code & flag:
            return category
    return SessionCategory.MIXED


def parse_legacy_timestamp(value: str | None) -> datetime:
    """Parse an ISO-8601 timestamp from an old export.

    Naive timestamps are read as local time. Unparseable values return
    INVALID_TIMESTAMP instead of raising.
    """
    if not value:
        return INVALID_TIMESTAMP
    try:
        parsed = datetime.fromisoformat(value.strip())
        if parsed.tzinfo is None:
            parsed = parsed.astimezone()
        return parsed.astimezone(timezone.utc)
    except (ValueError, OverflowError):
        logger.warning(f"Unparseable legacy timestamp: {value!r}")
        return INVALID_TIMESTAMP


def _positive_or_none(value: float) -> float | None:
    # Old exports use 0 or negative numbers for "not recorded".
    return value if value > 0 else None


def convert_legacy_exercise(
    legacy: LegacyExercise, id_generator: IdGenerator = random_id
) -> Exercise:
    """Convert a legacy exercise, expanding its set count into identical sets.

    Uncatalogued names get an ID from id_generator.
    """
    notes = legacy.notes or None
    reps = _positive_or_none(round(legacy.reps))
    weight = _positive_or_none(legacy.weight)
    sets = [
        ExerciseSet(reps=reps, weight=weight, notes=notes)
        for _ in range(max(legacy.set_count, 0))
    ]
    name = legacy.name or UNNAMED_EXERCISE
    return Exercise(
        id=exercise_id(name, id_generator), name=name, sets=sets, notes=notes
    )


def convert_legacy_session(
    legacy: LegacySession | Mapping[str, Any],
    id_generator: IdGenerator,
    exercise_id_generator: IdGenerator = random_id,
) -> Session:
    """Convert a session from the old export format.

    Every field is coerced leniently, so any record converts; a value that
    isn't an object at all converts as an empty record.

    Args:
        legacy: The legacy session, as a model or as a decoded JSON object.
        id_generator: Called exactly once to produce the new session's ID.
        exercise_id_generator: ID source for exercises not in the catalog.

    Returns:
        The converted session. Malformed timestamps become INVALID_TIMESTAMP;
        callers that need valid dates must check with is_valid_timestamp.
    """
    if not isinstance(legacy, LegacySession):
        if not isinstance(legacy, Mapping):
            logger.warning(f"Converting non-object legacy record as empty: {legacy!r}")
            legacy = {}
        legacy = LegacySession.model_validate(legacy)

    end_time = parse_legacy_timestamp(legacy.end_time) if legacy.end_time else None
    return Session(
        id=id_generator(),
        start_time=parse_legacy_timestamp(legacy.start_time),
        end_time=end_time,
        category=map_legacy_session_type(legacy.session_type),
        exercises=[
            convert_legacy_exercise(e, exercise_id_generator)
            for e in legacy.exercises
        ],
        notes=legacy.notes or None,
    )


def convert_legacy_sessions(
    items: Sequence[LegacySession | Mapping[str, Any]],
    id_generator: IdGenerator,
    exercise_id_generator: IdGenerator = random_id,
) -> list[Session]:
    sessions = [
        convert_legacy_session(item, id_generator, exercise_id_generator)
        for item in items
    ]
    logger.info(f"Converted {len(sessions)} legacy sessions")
    return sessions


def is_legacy_format(data: Any) -> bool:
    """Check whether decoded JSON looks like an old export.

    Only the first element is inspected: it must be an object carrying the
    start time, exercises and numeric ID keys of the old format.
    """
    if not isinstance(data, list) or len(data) == 0:
        return False
    first = data[0]
    return isinstance(first, Mapping) and all(
        key in first for key in LEGACY_MARKER_KEYS
    )


def load_sessions_from_file(file_obj: BinaryIO) -> Any:
    """Read an exported JSON file (either schema) from a file-like object.

    Returns the decoded payload, ready for SessionStore.import_sessions.
    """
    logger.info("Reading session export from file object")
    file_obj.seek(0)  # Ensure we're at the start
    try:
        data = json.loads(file_obj.read().decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.error(f"Failed to read session export: {type(e).__name__}: {str(e)}")
        raise ValueError(f"Invalid import file: {e}") from e
    if isinstance(data, list):
        logger.info(
            f"Read {len(data)} records "
            f"({'legacy' if is_legacy_format(data) else 'current'} format)"
        )
    return data
