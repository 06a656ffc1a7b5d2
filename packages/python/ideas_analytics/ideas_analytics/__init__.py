"""Pure read-model aggregations over ideas and comments."""

from .categories import CATEGORY_CHART, ChartBar, category_chart, status_breakdown
from .leaderboard import (
    LeaderboardEntry,
    build_leaderboard,
    contributor_status,
    time_range_bounds,
)
from .metrics import Metrics, compute_metrics, recent_ideas, top_ideas
from .sla import SlaStatus, sla_status
from .threads import CommentThread, group_comments
from .tracker import StepState, TrackerStep, build_tracker
from .volume import VolumePoint, bucket_volume

__all__ = [
    "CATEGORY_CHART",
    "ChartBar",
    "CommentThread",
    "LeaderboardEntry",
    "Metrics",
    "SlaStatus",
    "StepState",
    "TrackerStep",
    "VolumePoint",
    "bucket_volume",
    "build_leaderboard",
    "build_tracker",
    "category_chart",
    "compute_metrics",
    "contributor_status",
    "group_comments",
    "recent_ideas",
    "sla_status",
    "status_breakdown",
    "time_range_bounds",
    "top_ideas",
]
