"""Workout session models.

A session owns its exercises, and each exercise owns its sets. The JSON shape
uses camelCase keys so exports from earlier clients load without a mapping
step; Python attributes stay snake_case.
"""

from __future__ import annotations
from datetime import date, datetime, timezone
from enum import StrEnum
from typing import Annotated, Any
import logging
import zoneinfo

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

# Returned by lenient timestamp parsing when the input can't be read.
# Day 2 rather than datetime.min so local-time conversion can't overflow.
INVALID_TIMESTAMP = datetime(1, 1, 2, tzinfo=timezone.utc)


def is_valid_timestamp(value: datetime | None) -> bool:
    """Check that a timestamp is present and isn't the invalid-date sentinel."""
    return value is not None and value != INVALID_TIMESTAMP


class SessionCategory(StrEnum):
    """Category of a session, stored as its string token.

    Tokens are persisted, never positions, so reordering members is safe.
    """

    LEGS = "legs"
    CHEST = "chest"
    BACK = "back"
    ARMS = "arms"
    SHOULDERS = "shoulders"
    MIXED = "mixed"
    CORE = "core"
    CARDIO = "cardio"
    FULL_BODY = "fullBody"
    CROSSFIT = "crossFit"


_CATEGORY_TOKENS = frozenset(c.value for c in SessionCategory)

_CATEGORY_LABELS: dict[SessionCategory, str] = {
    SessionCategory.LEGS: "Legs",
    SessionCategory.CHEST: "Chest",
    SessionCategory.BACK: "Back",
    SessionCategory.ARMS: "Arms",
    SessionCategory.SHOULDERS: "Shoulders",
    SessionCategory.CORE: "Core",
    SessionCategory.CARDIO: "Cardio",
    SessionCategory.FULL_BODY: "Full Body",
    SessionCategory.CROSSFIT: "CrossFit",
    SessionCategory.MIXED: "Mixed",
}


def is_valid_session_category(value: Any) -> bool:
    """Check whether a value is one of the current category tokens."""
    return isinstance(value, str) and value in _CATEGORY_TOKENS


def to_session_category(value: Any) -> SessionCategory | None:
    """Convert a stored value to a category, or None if it isn't one."""
    if isinstance(value, SessionCategory):
        return value
    if is_valid_session_category(value):
        return SessionCategory(value)
    if value is not None:
        logger.warning(f"Ignoring unrecognized session category: {value!r}")
    return None


def get_session_categories_with_labels() -> list[tuple[SessionCategory, str]]:
    """Get every category with its display label, in display order."""
    return list(_CATEGORY_LABELS.items())


def get_session_category_label(category: SessionCategory) -> str:
    return _CATEGORY_LABELS.get(category, str(category))


def ensure_aware(value: Any) -> Any:
    """Attach the machine's local timezone to naive datetimes."""
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value)
        except ValueError:
            # Let pydantic report the bad value.
            return value
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.astimezone()
    return value


Timestamp = Annotated[datetime, BeforeValidator(ensure_aware)]
OptionalCategory = Annotated[
    SessionCategory | None, BeforeValidator(to_session_category)
]


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> dict[str, Any]:
        """Dump to the persisted JSON shape (camelCase, unset optionals dropped)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ExerciseSet(_CamelModel):
    """One performed set. Every field is optional; none depends on another."""

    reps: int | None = None
    weight: float | None = None  # unit-less at this layer
    duration: float | None = None  # in seconds
    distance: float | None = None  # in meters
    notes: str | None = None

    def volume(self) -> float:
        """Calculate volume (weight × reps) for this set."""
        if self.weight is not None and self.reps is not None:
            return self.weight * self.reps
        return 0.0


class Exercise(_CamelModel):
    """An exercise within a session. Sets keep the order they were performed in."""

    id: str
    name: str
    sets: list[ExerciseSet] = []
    notes: str | None = None

    def total_volume(self) -> float:
        """Calculate total volume for this exercise."""
        return sum(s.volume() for s in self.sets)

    def total_reps(self) -> int:
        """Count total reps across all sets."""
        return sum(s.reps or 0 for s in self.sets)


class Session(_CamelModel):
    """A workout session.

    A session without an end time is active. The calendar date a session
    belongs to is always derived from ``start_time``; it is never stored.
    """

    id: str
    start_time: Timestamp
    end_time: Timestamp | None = None
    category: OptionalCategory = Field(default=None, alias="sessionType")
    exercises: list[Exercise] = []
    notes: str | None = None

    @property
    def is_active(self) -> bool:
        return self.end_time is None

    def same_identity(self, other: Session) -> bool:
        """Check whether two sessions share an identifier."""
        return self.id == other.id

    def find_exercise(self, exercise_id: str) -> Exercise | None:
        """Get the first exercise (in insertion order) with the given ID."""
        return next((e for e in self.exercises if e.id == exercise_id), None)

    def total_volume(self) -> float:
        """Calculate total volume (weight × reps) for the session."""
        return sum(e.total_volume() for e in self.exercises)

    def total_sets(self) -> int:
        return sum(len(e.sets) for e in self.exercises)

    def duration_seconds(self) -> int | None:
        """Calculate session duration in seconds, or None while it's active."""
        if self.end_time is None:
            return None
        return int((self.end_time - self.start_time).total_seconds())

    def local_date(self, user_timezone: str | None = None) -> date:
        """Get the calendar date of the start time in local time.

        If user_timezone is None, the machine's local timezone is used.
        """
        tz = zoneinfo.ZoneInfo(user_timezone) if user_timezone else None
        return self.start_time.astimezone(tz).date()

