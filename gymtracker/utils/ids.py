"""Identifier policy for sessions and exercises.

Session IDs are always random. Exercise IDs come from the predefined catalog
when the name matches exactly; otherwise they're random too, so two custom
exercises with the same name typed on different days don't share an ID.
"""

import uuid
from typing import Callable

from gymtracker.config.exercises import get_predefined_exercise_by_name

IdGenerator = Callable[[], str]


def random_id() -> str:
    """Return a random 128-bit identifier as a string."""
    return str(uuid.uuid4())


def session_id(id_generator: IdGenerator = random_id) -> str:
    # No uniqueness check against stored sessions; collisions are negligible.
    return id_generator()


def exercise_id(name: str, id_generator: IdGenerator = random_id) -> str:
    """Get the ID for an exercise name.

    Uses the catalog ID if the name is a predefined exercise (exact,
    case-sensitive match), otherwise a freshly generated ID.
    """
    predefined = get_predefined_exercise_by_name(name)
    if predefined is not None:
        return predefined.id
    return id_generator()
