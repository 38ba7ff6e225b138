"""Score distributions over scenario playthrough paths.

Path enumeration, per-axis aggregation, percentiles and the bundle-level
badge score calculation.
"""

from storycompass.scoring.aggregate import AxisScoreAggregator, aggregate_path_scores
from storycompass.scoring.badges import BadgeScoreCalculator, calculate_badge_scores
from storycompass.scoring.paths import enumerate_paths
from storycompass.scoring.percentile import compute_percentile, compute_percentiles

__all__ = [
    "AxisScoreAggregator",
    "BadgeScoreCalculator",
    "aggregate_path_scores",
    "calculate_badge_scores",
    "compute_percentile",
    "compute_percentiles",
    "enumerate_paths",
]
