"""Walk log entries and the read-only helpers built on them."""

from .models import BathroomActivity, WalkLog, WalkQuality
from .stats import WalkStats, compute_stats, filter_by_quality

__all__ = [
    "BathroomActivity",
    "WalkLog",
    "WalkQuality",
    "WalkStats",
    "compute_stats",
    "filter_by_quality",
]
