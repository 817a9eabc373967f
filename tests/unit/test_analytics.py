"""Unit tests for dashboard analytics."""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from deliberation_core.domain.analytics import (
    AnalyticsAggregator,
    build_date_range,
    is_valid_preset,
    resolve_date_preset,
)
from deliberation_core.domain.errors import ConfigurationError, InvalidDatePresetError
from deliberation_core.domain.ranking import WinRateEntry
from deliberation_core.domain.records import (
    CrossModeRow,
    LabelMapRow,
    MessageDateRow,
    ModeCount,
    RankingRow,
    ResponseTimeRow,
)

NOW = datetime(2026, 3, 31, 12, 0, tzinfo=UTC)


@pytest.fixture()  # type: ignore[misc]
def aggregator() -> AnalyticsAggregator:
    return AnalyticsAggregator()


@pytest.fixture()  # type: ignore[misc]
def timing_rows() -> list[ResponseTimeRow]:
    return [
        ResponseTimeRow(model="a", response_time_ms=100),
        ResponseTimeRow(model="b", response_time_ms=50),
        ResponseTimeRow(model="a", response_time_ms=201),
        ResponseTimeRow(model="c", response_time_ms=None),
    ]


class TestModeDistribution:
    """Test protocol usage shares."""

    def test_shares_and_names(self, aggregator: AnalyticsAggregator) -> None:
        """Test percentages, display names and descending order."""
        counts = [
            ModeCount(mode="vote", count=2),
            ModeCount(mode="council", count=5),
            ModeCount(mode="jury", count=3),
        ]

        result = aggregator.mode_distribution(counts)

        assert [(e.mode, e.name, e.count) for e in result] == [
            ("council", "Council", 5),
            ("jury", "Jury", 3),
            ("vote", "Vote", 2),
        ]
        assert [e.percentage for e in result] == pytest.approx([0.5, 0.3, 0.2])

    def test_unregistered_mode_uses_its_id(self, aggregator: AnalyticsAggregator) -> None:
        """Test unknown protocols are labelled by their identifier."""
        result = aggregator.mode_distribution([ModeCount(mode="legacy", count=1)])

        assert result[0].name == "legacy"
        assert result[0].percentage == 1.0

    def test_zero_total(self, aggregator: AnalyticsAggregator) -> None:
        """Test no usage gives no entries."""
        assert aggregator.mode_distribution([ModeCount(mode="vote", count=0)]) == []
        assert aggregator.mode_distribution([]) == []


class TestResponseTimes:
    """Test per-model timing statistics."""

    def test_stats_and_order(
        self, aggregator: AnalyticsAggregator, timing_rows: list[ResponseTimeRow]
    ) -> None:
        """Test averages round half up and sort ascending."""
        result = aggregator.response_times(timing_rows)

        assert [e.model for e in result] == ["b", "a"]
        fast, slow = result
        assert fast.avg_response_time_ms == 50
        assert slow.avg_response_time_ms == 151
        assert (slow.min_response_time_ms, slow.max_response_time_ms) == (100, 201)
        assert slow.sample_count == 2

    def test_summary_is_sample_weighted(
        self, aggregator: AnalyticsAggregator, timing_rows: list[ResponseTimeRow]
    ) -> None:
        """Test the headline average weights each model by its samples."""
        win_rates = [WinRateEntry(model="a", wins=3, total_appearances=4, win_rate=0.75)]

        summary = aggregator.summary(10, 25, aggregator.response_times(timing_rows), win_rates)

        assert summary.avg_response_time_ms == 117
        assert summary.top_model == "a"
        assert (summary.total_sessions, summary.total_queries) == (10, 25)

    def test_empty_summary(self, aggregator: AnalyticsAggregator) -> None:
        """Test zeros and no top model without data."""
        summary = aggregator.summary(0, 0, [], [])

        assert summary.avg_response_time_ms == 0
        assert summary.top_model is None

    def test_extended_summary(
        self, aggregator: AnalyticsAggregator, timing_rows: list[ResponseTimeRow]
    ) -> None:
        """Test the extended summary adds the most active protocol."""
        distribution = aggregator.mode_distribution(
            [ModeCount(mode="jury", count=1), ModeCount(mode="debate", count=4)]
        )

        summary = aggregator.extended_summary(
            3, 5, aggregator.response_times(timing_rows), [], distribution
        )

        assert summary.modes_used == 2
        assert summary.most_active_mode == "debate"
        assert summary.most_active_mode_name == "Debate"
        assert summary.avg_response_time_ms == 117


class TestCrossModeLeaderboard:
    """Test the speed leaderboard across protocols."""

    def test_scores_and_modes(self, aggregator: AnalyticsAggregator) -> None:
        """Test speed scores against the 60 second cap."""
        rows = [
            CrossModeRow(model="m1", mode="vote", response_time_ms=30000),
            CrossModeRow(model="m1", mode="council", response_time_ms=20000),
            CrossModeRow(model="m1", mode="council", response_time_ms=40000),
            CrossModeRow(model="m2", mode="jury", response_time_ms=90000),
            CrossModeRow(model="m3", mode="jury", response_time_ms=None),
            CrossModeRow(model=None, mode="jury", response_time_ms=1000),
        ]

        result = aggregator.cross_mode_leaderboard(rows)

        assert [(e.model, e.overall_score, e.total_sessions) for e in result] == [
            ("m1", 50, 3),
            ("m2", 0, 1),
        ]
        assert [(m.mode, m.sessions, m.avg_response_time_ms) for m in result[0].modes] == [
            ("council", 2, 30000),
            ("vote", 1, 30000),
        ]

    def test_custom_cap(self) -> None:
        """Test the cap scales the score."""
        rows = [CrossModeRow(model="m1", mode="vote", response_time_ms=30000)]

        result = AnalyticsAggregator(leaderboard_time_cap_ms=120000).cross_mode_leaderboard(rows)

        assert result[0].overall_score == 75

    def test_zero_time_scores_zero(self, aggregator: AnalyticsAggregator) -> None:
        """Test a model with no measured time does not top the board."""
        rows = [CrossModeRow(model="m1", mode="vote", response_time_ms=0)]

        assert aggregator.cross_mode_leaderboard(rows)[0].overall_score == 0

    @pytest.mark.parametrize("cap", [0, -1])
    def test_invalid_cap(self, cap: int) -> None:
        """Test a non-positive cap is a configuration error."""
        with pytest.raises(ConfigurationError):
            AnalyticsAggregator(leaderboard_time_cap_ms=cap)


class TestDailyUsage:
    """Test per-day message counts."""

    def test_days_are_utc(self, aggregator: AnalyticsAggregator) -> None:
        """Test aware timestamps are converted and naive ones read as UTC."""
        rows = [
            MessageDateRow(
                created_at=datetime(2026, 3, 1, 23, 30, tzinfo=timezone(timedelta(hours=-2)))
            ),
            MessageDateRow(created_at=datetime(2026, 3, 2, 8, 0)),
            MessageDateRow.model_validate({"createdAt": "2026-03-01T12:00:00Z"}),
        ]

        result = aggregator.daily_usage(rows)

        assert [(e.date, e.query_count) for e in result] == [
            ("2026-03-01", 1),
            ("2026-03-02", 2),
        ]


class TestDatePresets:
    """Test reporting window resolution."""

    @pytest.mark.parametrize(("preset", "days"), [("7d", 7), ("30d", 30), ("90d", 90)])
    def test_bounded_presets(self, preset: str, days: int) -> None:
        """Test bounded presets count back from now."""
        assert resolve_date_preset(preset, NOW) == NOW - timedelta(days=days)

    def test_all_is_unbounded(self) -> None:
        """Test the all preset has no start."""
        assert resolve_date_preset("all", NOW) is None

    @pytest.mark.parametrize("preset", ["1y", "", "7D"])
    def test_invalid_preset(self, preset: str) -> None:
        """Test unknown presets are rejected."""
        assert is_valid_preset(preset) is False
        with pytest.raises(InvalidDatePresetError) as exc_info:
            resolve_date_preset(preset, NOW)

        assert exc_info.value.preset == preset

    def test_date_range_serializes_from(self) -> None:
        """Test the window start is exported under its public name."""
        date_range = build_date_range("all", NOW)

        assert date_range.model_dump() == {"from": None, "to": NOW, "preset": "all"}

    def test_default_now_is_aware(self) -> None:
        """Test the default reference time is UTC."""
        start = resolve_date_preset("7d")

        assert start is not None
        assert start.tzinfo is not None


class TestBuildReport:
    """Test the assembled dashboard report."""

    def test_report(
        self, aggregator: AnalyticsAggregator, timing_rows: list[ResponseTimeRow]
    ) -> None:
        """Test every section is filled from its rows."""
        report = aggregator.build_report(
            preset="30d",
            total_sessions=2,
            total_queries=3,
            ranking_rows=[
                RankingRow(
                    message_id="msg-1",
                    parsed_ranking=[{"label": "Response B", "position": 1}],
                )
            ],
            label_map_rows=[
                LabelMapRow(message_id="msg-1", label="Response A", model="a"),
                LabelMapRow(message_id="msg-1", label="Response B", model="b"),
            ],
            response_time_rows=timing_rows,
            message_dates=[MessageDateRow(created_at=NOW)],
            now=NOW,
        )

        assert report.date_range.from_ == NOW - timedelta(days=30)
        assert report.date_range.preset == "30d"
        assert report.summary.top_model == "b"
        assert report.summary.avg_response_time_ms == 117
        assert [w.model for w in report.win_rates] == ["b", "a"]
        assert [(d.date, d.query_count) for d in report.daily_usage] == [("2026-03-31", 1)]

    def test_invalid_preset(self, aggregator: AnalyticsAggregator) -> None:
        """Test the report rejects unknown presets."""
        with pytest.raises(InvalidDatePresetError):
            aggregator.build_report("1y", 0, 0, [], [], [], [], now=NOW)
