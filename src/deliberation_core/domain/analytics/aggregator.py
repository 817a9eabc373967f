"""Dashboard aggregates over persisted deliberation history.

Every method is a pure function of the rows it receives. The caller is
responsible for fetching rows already filtered to the reporting window.
"""

from collections.abc import Sequence
from datetime import UTC, datetime

from deliberation_core.domain.analytics.date_range import build_date_range
from deliberation_core.domain.analytics.models import (
    AnalyticsReport,
    AnalyticsSummary,
    CrossModeModeEntry,
    CrossModeModelEntry,
    DailyUsageEntry,
    ExtendedAnalyticsSummary,
    ModeDistributionEntry,
    ResponseTimeEntry,
)
from deliberation_core.domain.errors import ConfigurationError
from deliberation_core.domain.modes import mode_display_name
from deliberation_core.domain.ranking import RankingAggregator, WinRateEntry
from deliberation_core.domain.records import (
    CrossModeRow,
    LabelMapRow,
    MessageDateRow,
    ModeCount,
    RankingRow,
    ResponseTimeRow,
)
from deliberation_core.shared.constants import LEADERBOARD_TIME_CAP_MS
from deliberation_core.shared.logging import get_contextual_logger
from deliberation_core.shared.statistics import round_half_up, safe_ratio


def _utc_date(moment: datetime) -> str:
    # Naive timestamps are stored in UTC
    if moment.tzinfo is None:
        return moment.date().isoformat()
    return moment.astimezone(UTC).date().isoformat()


class _TimingStats:
    def __init__(self, first: int) -> None:
        self.total = first
        self.minimum = first
        self.maximum = first
        self.count = 1

    def add(self, value: int) -> None:
        self.total += value
        self.minimum = min(self.minimum, value)
        self.maximum = max(self.maximum, value)
        self.count += 1

    @property
    def average(self) -> float:
        return safe_ratio(self.total, self.count)


class AnalyticsAggregator:
    def __init__(self, leaderboard_time_cap_ms: int = LEADERBOARD_TIME_CAP_MS) -> None:
        if leaderboard_time_cap_ms <= 0:
            raise ConfigurationError(
                f"leaderboard_time_cap_ms must be positive, got {leaderboard_time_cap_ms}"
            )
        self.logger = get_contextual_logger("deliberation.analytics")
        self.leaderboard_time_cap_ms = leaderboard_time_cap_ms
        self.ranking = RankingAggregator()

    def daily_usage(self, rows: Sequence[MessageDateRow]) -> list[DailyUsageEntry]:
        counts: dict[str, int] = {}
        for row in rows:
            date = _utc_date(row.created_at)
            counts[date] = counts.get(date, 0) + 1

        return [
            DailyUsageEntry(date=date, query_count=count)
            for date, count in sorted(counts.items())
        ]

    def response_times(self, rows: Sequence[ResponseTimeRow]) -> list[ResponseTimeEntry]:
        grouped: dict[str, _TimingStats] = {}
        skipped = 0
        for row in rows:
            if row.response_time_ms is None:
                skipped += 1
                continue
            stats = grouped.get(row.model)
            if stats is None:
                grouped[row.model] = _TimingStats(row.response_time_ms)
            else:
                stats.add(row.response_time_ms)

        if skipped:
            self.logger.debug(f"Skipped {skipped} rows without a response time")

        entries = [
            ResponseTimeEntry(
                model=model,
                avg_response_time_ms=int(round_half_up(stats.average)),
                min_response_time_ms=stats.minimum,
                max_response_time_ms=stats.maximum,
                sample_count=stats.count,
            )
            for model, stats in grouped.items()
        ]
        return sorted(entries, key=lambda e: e.avg_response_time_ms)

    def win_rates(
        self,
        ranking_rows: Sequence[RankingRow],
        label_map_rows: Sequence[LabelMapRow],
    ) -> list[WinRateEntry]:
        return self.ranking.compute_win_rates(ranking_rows, label_map_rows)

    def summary(
        self,
        total_sessions: int,
        total_queries: int,
        response_times: Sequence[ResponseTimeEntry],
        win_rates: Sequence[WinRateEntry],
    ) -> AnalyticsSummary:
        """Headline numbers; the average is weighted by each model's sample count."""
        total_ms = sum(rt.avg_response_time_ms * rt.sample_count for rt in response_times)
        total_samples = sum(rt.sample_count for rt in response_times)

        return AnalyticsSummary(
            total_sessions=total_sessions,
            total_queries=total_queries,
            avg_response_time_ms=int(round_half_up(safe_ratio(total_ms, total_samples))),
            top_model=win_rates[0].model if win_rates else None,
        )

    def extended_summary(
        self,
        total_sessions: int,
        total_queries: int,
        response_times: Sequence[ResponseTimeEntry],
        win_rates: Sequence[WinRateEntry],
        mode_distribution: Sequence[ModeDistributionEntry],
    ) -> ExtendedAnalyticsSummary:
        base = self.summary(total_sessions, total_queries, response_times, win_rates)
        most_active = mode_distribution[0] if mode_distribution else None

        return ExtendedAnalyticsSummary(
            **base.model_dump(),
            modes_used=len(mode_distribution),
            most_active_mode=most_active.mode if most_active else None,
            most_active_mode_name=most_active.name if most_active else None,
        )

    def mode_distribution(
        self, mode_counts: Sequence[ModeCount]
    ) -> list[ModeDistributionEntry]:
        total = sum(mc.count for mc in mode_counts)
        if total == 0:
            return []

        entries = [
            ModeDistributionEntry(
                mode=mc.mode,
                name=mode_display_name(mc.mode),
                count=mc.count,
                percentage=mc.count / total,
            )
            for mc in mode_counts
        ]
        return sorted(entries, key=lambda e: e.count, reverse=True)

    def cross_mode_leaderboard(
        self, rows: Sequence[CrossModeRow]
    ) -> list[CrossModeModelEntry]:
        """Rank models by speed across every protocol they took part in.

        A model averaging ``leaderboard_time_cap_ms`` or slower scores 0,
        an instant model scores 100. Models without timings score 0.
        """
        grouped: dict[str, dict[str, _TimingStats]] = {}
        for row in rows:
            if not row.model or row.response_time_ms is None:
                continue
            by_mode = grouped.setdefault(row.model, {})
            stats = by_mode.get(row.mode)
            if stats is None:
                by_mode[row.mode] = _TimingStats(row.response_time_ms)
            else:
                stats.add(row.response_time_ms)

        entries: list[CrossModeModelEntry] = []
        for model, by_mode in grouped.items():
            modes = [
                CrossModeModeEntry(
                    mode=mode,
                    sessions=stats.count,
                    avg_response_time_ms=int(round_half_up(stats.average)),
                )
                for mode, stats in sorted(by_mode.items())
            ]
            total_sessions = sum(stats.count for stats in by_mode.values())
            total_ms = sum(stats.total for stats in by_mode.values())
            entries.append(
                CrossModeModelEntry(
                    model=model,
                    modes=modes,
                    overall_score=self._speed_score(safe_ratio(total_ms, total_sessions)),
                    total_sessions=total_sessions,
                )
            )

        return sorted(entries, key=lambda e: e.overall_score, reverse=True)

    def _speed_score(self, avg_response_ms: float) -> int:
        if avg_response_ms <= 0:
            return 0
        raw = 100 - (avg_response_ms / self.leaderboard_time_cap_ms) * 100
        return int(round_half_up(max(0.0, raw)))

    def build_report(
        self,
        preset: str,
        total_sessions: int,
        total_queries: int,
        ranking_rows: Sequence[RankingRow],
        label_map_rows: Sequence[LabelMapRow],
        response_time_rows: Sequence[ResponseTimeRow],
        message_dates: Sequence[MessageDateRow],
        now: datetime | None = None,
    ) -> AnalyticsReport:
        date_range = build_date_range(preset, now)
        win_rates = self.win_rates(ranking_rows, label_map_rows)
        response_times = self.response_times(response_time_rows)

        self.logger.debug(
            f"Built report for preset '{preset}' from {len(message_dates)} messages"
        )
        return AnalyticsReport(
            win_rates=win_rates,
            response_times=response_times,
            daily_usage=self.daily_usage(message_dates),
            summary=self.summary(
                total_sessions, total_queries, response_times, win_rates
            ),
            date_range=date_range,
        )
