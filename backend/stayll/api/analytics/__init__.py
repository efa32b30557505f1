"""
Listing analytics package
"""

from .aggregator import AnalyticsAggregator, AnalyticsEvent, AnalyticsSnapshot
from .rollup import RollupCompiler, UserRollup, ListingBreakdown, DashboardSummary

__all__ = [
    "AnalyticsAggregator",
    "AnalyticsEvent",
    "AnalyticsSnapshot",
    "RollupCompiler",
    "UserRollup",
    "ListingBreakdown",
    "DashboardSummary",
]
