"""Models for the previous export schema.

Old exports store PascalCase keys, a numeric session ID, a bit-flag session
type, and one reps/weight value per exercise together with a set count.
Every field may be null, missing or of the wrong type in real exports, so
each one is coerced rather than rejected.
"""

from collections.abc import Mapping
from typing import Annotated, Any
import math

from pydantic import AliasChoices, BaseModel, BeforeValidator, Field


def to_number(v: Any) -> float:
    """Read a numeric field; null, blank or unreadable values count as 0."""
    try:
        number = float(v)
    except (TypeError, ValueError, OverflowError):
        return 0
    return number if math.isfinite(number) else 0


def to_count(v: Any) -> int:
    return int(to_number(v))


def to_text(v: Any) -> str | None:
    """Keep strings, stringify numbers, and drop anything else."""
    if isinstance(v, str):
        return v
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return str(v)
    return None


def to_identifier(v: Any) -> int | str | None:
    if isinstance(v, (int, str)) and not isinstance(v, bool):
        return v
    return None


def to_object_list(v: Any) -> list[Any]:
    """Keep the object entries of a list; a non-list value is empty."""
    if not isinstance(v, list):
        return []
    return [item for item in v if isinstance(item, (Mapping, BaseModel))]


LegacyNumber = Annotated[float, BeforeValidator(to_number)]
LegacyCount = Annotated[int, BeforeValidator(to_count)]
LegacyText = Annotated[str | None, BeforeValidator(to_text)]
LegacyId = Annotated[int | str | None, BeforeValidator(to_identifier)]


class LegacyExercise(BaseModel):
    id: LegacyId = Field(default=None, validation_alias=AliasChoices("id", "Id"))
    name: LegacyText = Field(
        default=None, validation_alias=AliasChoices("name", "Name")
    )
    set_count: LegacyCount = Field(
        default=0, validation_alias=AliasChoices("set_count", "Sets", "setCount")
    )
    # Some exports carry fractional reps; they're rounded on conversion.
    reps: LegacyNumber = Field(
        default=0, validation_alias=AliasChoices("reps", "Reps")
    )
    weight: LegacyNumber = Field(
        default=0, validation_alias=AliasChoices("weight", "Weight")
    )
    notes: LegacyText = Field(
        default=None, validation_alias=AliasChoices("notes", "Notes", "note")
    )


class LegacySession(BaseModel):
    id: LegacyId = Field(default=None, validation_alias=AliasChoices("id", "Id"))
    # Timestamps stay as strings; the converter parses them leniently.
    start_time: LegacyText = Field(
        default=None, validation_alias=AliasChoices("start_time", "StartTime")
    )
    end_time: LegacyText = Field(
        default=None, validation_alias=AliasChoices("end_time", "EndTime")
    )
    notes: LegacyText = Field(
        default=None, validation_alias=AliasChoices("notes", "Notes")
    )
    session_type: LegacyCount = Field(
        default=0, validation_alias=AliasChoices("session_type", "SessionType")
    )
    exercises: Annotated[
        list[LegacyExercise], BeforeValidator(to_object_list)
    ] = Field(default=[], validation_alias=AliasChoices("exercises", "Exercises"))
    # Carried by old exports but not used by the conversion.
    duration: Any = Field(
        default=None, validation_alias=AliasChoices("duration", "Duration")
    )
    schema_version: Any = Field(
        default=None, validation_alias=AliasChoices("schema_version", "SchemaVersion")
    )
