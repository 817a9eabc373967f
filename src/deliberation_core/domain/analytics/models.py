from datetime import datetime

from pydantic import Field

from deliberation_core.domain.ranking.models import WinRateEntry
from deliberation_core.domain.records import FrozenModel


class ResponseTimeEntry(FrozenModel):
    model: str
    avg_response_time_ms: int
    min_response_time_ms: int
    max_response_time_ms: int
    sample_count: int


class DailyUsageEntry(FrozenModel):
    date: str
    query_count: int


class AnalyticsSummary(FrozenModel):
    total_sessions: int
    total_queries: int
    avg_response_time_ms: int
    top_model: str | None = None


class ExtendedAnalyticsSummary(AnalyticsSummary):
    modes_used: int = 0
    most_active_mode: str | None = None
    most_active_mode_name: str | None = None


class ModeDistributionEntry(FrozenModel):
    mode: str
    name: str
    count: int
    percentage: float


class CrossModeModeEntry(FrozenModel):
    mode: str
    sessions: int
    avg_response_time_ms: int


class CrossModeModelEntry(FrozenModel):
    model: str
    modes: list[CrossModeModeEntry] = Field(default_factory=list)
    overall_score: int
    total_sessions: int


class DateRange(FrozenModel):
    """Resolved reporting window; ``from`` is None for the unbounded preset."""

    model_config = {"populate_by_name": True, "serialize_by_alias": True}

    from_: datetime | None = Field(default=None, alias="from")
    to: datetime
    preset: str


class AnalyticsReport(FrozenModel):
    win_rates: list[WinRateEntry] = Field(default_factory=list)
    response_times: list[ResponseTimeEntry] = Field(default_factory=list)
    daily_usage: list[DailyUsageEntry] = Field(default_factory=list)
    summary: AnalyticsSummary
    date_range: DateRange
