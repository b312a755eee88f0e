from .models import LegacySession, LegacyExercise
from .load import (
    LegacySessionType,
    UNNAMED_EXERCISE,
    convert_legacy_session,
    convert_legacy_sessions,
    is_legacy_format,
    load_sessions_from_file,
    map_legacy_session_type,
    parse_legacy_timestamp,
)

__all__ = [
    "LegacySession",
    "LegacyExercise",
    "LegacySessionType",
    "UNNAMED_EXERCISE",
    "convert_legacy_session",
    "convert_legacy_sessions",
    "is_legacy_format",
    "load_sessions_from_file",
    "map_legacy_session_type",
    "parse_legacy_timestamp",
]
