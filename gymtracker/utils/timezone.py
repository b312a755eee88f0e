"""Timezone utility functions for deriving local calendar dates of sessions."""

from datetime import date

from gymtracker.models import Session


def group_sessions_by_local_date(
    sessions: list[Session], user_timezone: str | None = None
) -> dict[date, list[Session]]:
    """
    Group sessions by the local calendar date of their start time.

    Sessions keep their relative order within each date. If user_timezone is
    None, the machine's local timezone is used.
    """
    grouped: dict[date, list[Session]] = {}
    for session in sessions:
        grouped.setdefault(session.local_date(user_timezone), []).append(session)
    return grouped


def local_dates_with_sessions(
    sessions: list[Session], user_timezone: str | None = None
) -> set[date]:
    return {session.local_date(user_timezone) for session in sessions}


def filter_sessions_by_local_date_range(
    sessions: list[Session], start: date, end: date, user_timezone: str | None = None
) -> list[Session]:
    """
    Filter sessions to those starting within [start, end] in the user's timezone.
    """
    return [
        session
        for session in sessions
        if start <= session.local_date(user_timezone) <= end
    ]
