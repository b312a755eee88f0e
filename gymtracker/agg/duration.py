from datetime import datetime

from gymtracker.models import is_valid_timestamp


def format_duration(start: datetime, end: datetime | None) -> str:
    """
    Format the time between two timestamps as "2h 30m" or "45m".

    Returns "N/A" when the end is missing or either timestamp is invalid.
    """
    if end is None or not is_valid_timestamp(start) or not is_valid_timestamp(end):
        return "N/A"
    minutes = int((end - start).total_seconds() // 60)
    hours, minutes = divmod(minutes, 60)
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"
