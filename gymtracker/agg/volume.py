from gymtracker.models import Session


def total_volume(sessions: list[Session]) -> float:
    """Calculate total volume (weight × reps) across sessions."""
    return sum(session.total_volume() for session in sessions)


def total_sets(sessions: list[Session]) -> int:
    return sum(session.total_sets() for session in sessions)
