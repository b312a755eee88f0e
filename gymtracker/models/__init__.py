from .session import (
    Session,
    Exercise,
    ExerciseSet,
    SessionCategory,
    INVALID_TIMESTAMP,
    is_valid_timestamp,
    is_valid_session_category,
    to_session_category,
    get_session_categories_with_labels,
    get_session_category_label,
)

__all__ = [
    "Session",
    "Exercise",
    "ExerciseSet",
    "SessionCategory",
    "INVALID_TIMESTAMP",
    "is_valid_timestamp",
    "is_valid_session_category",
    "to_session_category",
    "get_session_categories_with_labels",
    "get_session_category_label",
]
