from .volume import total_volume, total_sets
from .categories import sessions_per_category
from .duration import format_duration

__all__ = [
    "total_volume",
    "total_sets",
    "sessions_per_category",
    "format_duration",
]
