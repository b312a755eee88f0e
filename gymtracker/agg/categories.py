from collections import Counter

from gymtracker.models import Session, SessionCategory


def sessions_per_category(
    sessions: list[Session],
) -> dict[SessionCategory | None, int]:
    """
    Count sessions by category.

    Uncategorized sessions are counted under None.
    """
    return dict(Counter(session.category for session in sessions))
