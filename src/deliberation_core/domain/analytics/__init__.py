from deliberation_core.domain.analytics.aggregator import AnalyticsAggregator
from deliberation_core.domain.analytics.date_range import (
    build_date_range,
    is_valid_preset,
    resolve_date_preset,
)
from deliberation_core.domain.analytics.models import (
    AnalyticsReport,
    AnalyticsSummary,
    CrossModeModeEntry,
    CrossModeModelEntry,
    DailyUsageEntry,
    DateRange,
    ExtendedAnalyticsSummary,
    ModeDistributionEntry,
    ResponseTimeEntry,
)

__all__ = [
    "AnalyticsAggregator",
    "AnalyticsReport",
    "AnalyticsSummary",
    "CrossModeModeEntry",
    "CrossModeModelEntry",
    "DailyUsageEntry",
    "DateRange",
    "ExtendedAnalyticsSummary",
    "ModeDistributionEntry",
    "ResponseTimeEntry",
    "build_date_range",
    "is_valid_preset",
    "resolve_date_preset",
]
