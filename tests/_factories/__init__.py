from .session import SessionFactory, ExerciseFactory, ExerciseSetFactory
from .legacy import LegacySessionFactory, LegacyExerciseFactory
from .clock import FakeClock, SequentialIds

__all__ = [
    "SessionFactory",
    "ExerciseFactory",
    "ExerciseSetFactory",
    "LegacySessionFactory",
    "LegacyExerciseFactory",
    "FakeClock",
    "SequentialIds",
]
