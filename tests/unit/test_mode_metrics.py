"""Unit tests for per-protocol metric routines."""

from collections.abc import Callable

import pytest
from pydantic import TypeAdapter

from deliberation_core.domain.errors import UnknownModeError
from deliberation_core.domain.metrics import (
    METRIC_ROUTINES,
    BlueprintMetrics,
    BrainstormMetrics,
    ChainMetrics,
    ConfidenceMetrics,
    CouncilMetrics,
    DebateMetrics,
    DecomposeMetrics,
    DelphiMetrics,
    FactCheckMetrics,
    JuryMetrics,
    ModeMetrics,
    ModeMetricsEngine,
    PeerReviewMetrics,
    RedTeamMetrics,
    SpecialistPanelMetrics,
    TournamentMetrics,
    VoteMetrics,
)
from deliberation_core.domain.modes import MODE_REGISTRY
from deliberation_core.domain.records import StageRecord

StageFactory = Callable[..., StageRecord]


def _compute(mode: str, stages: list[StageRecord]) -> ModeMetrics:
    return ModeMetricsEngine().compute_metrics(mode, stages)


def _pairs(entries: list, key: str, value: str = "count") -> list[tuple]:
    return [(getattr(e, key), getattr(e, value)) for e in entries]


class TestDispatch:
    """Test engine dispatch and defaults."""

    def test_every_registered_mode_has_a_routine(self) -> None:
        """Test the routine table covers the mode registry."""
        assert set(METRIC_ROUTINES) == set(MODE_REGISTRY)

    @pytest.mark.parametrize("mode", sorted(MODE_REGISTRY))
    def test_empty_stages_give_defaults(self, mode: str) -> None:
        """Test every routine tolerates empty input."""
        metrics = _compute(mode, [])

        assert metrics.kind == mode
        assert metrics == type(metrics)()

    def test_unknown_mode_falls_back_to_council(self) -> None:
        """Test unknown modes produce the council shell."""
        assert _compute("haiku_circle", []) == CouncilMetrics()

    def test_unknown_mode_strict(self) -> None:
        """Test strict mode rejects unknown modes."""
        with pytest.raises(UnknownModeError):
            ModeMetricsEngine().compute_metrics("haiku_circle", [], strict=True)

    def test_engine_level_strict_default(self) -> None:
        """Test the constructor default applies when no override is given."""
        with pytest.raises(UnknownModeError):
            ModeMetricsEngine(strict_modes=True).compute_metrics("nope", [])

        assert ModeMetricsEngine(strict_modes=True).compute_metrics(
            "nope", [], strict=False
        ) == CouncilMetrics()

    def test_foreign_stage_types_are_ignored(self, make_stage: StageFactory) -> None:
        """Test routines only read their own stage types."""
        stages = [make_stage("ranking", {"winner": "m1"})]

        assert _compute("vote", stages) == VoteMetrics()

    def test_non_object_payloads_are_ignored(self, make_stage: StageFactory) -> None:
        """Test list, string and null payloads are skipped."""
        stages = [
            make_stage("winner", ["m1"]),
            make_stage("winner", "m1"),
            make_stage("winner", None),
        ]

        assert _compute("vote", stages).winner_distribution == []

    def test_discriminated_union(self) -> None:
        """Test metrics round-trip through the kind discriminator."""
        adapter = TypeAdapter(ModeMetrics)

        parsed = adapter.validate_python({"kind": "jury", "juror_consensus_rate": 0.5})

        assert isinstance(parsed, JuryMetrics)

    def test_idempotent(self, make_stage: StageFactory) -> None:
        """Test recomputation over the same stages is identical."""
        stages = [make_stage("winner", {"winner": "m1"}), make_stage("winner", {"winner": "m2"})]

        assert _compute("vote", stages) == _compute("vote", stages)


class TestEvaluationFamily:
    """Test vote, jury, debate and delphi."""

    def test_vote(self, make_stage: StageFactory) -> None:
        """Test winner distribution, tiebreaker rate and margin."""
        stages = [
            make_stage("winner", {"winner": "m1", "tiebreaker": True}),
            make_stage("winner", {"winner": "m1"}),
            make_stage("winner", {"winner": "m2", "tiebreaker": "yes"}),
            make_stage("vote_tally", {"winMargin": 2}),
            make_stage("vote_tally", {"winMargin": 4}),
            make_stage("vote_tally", {"winMargin": "lots"}),
        ]

        metrics = _compute("vote", stages)

        assert isinstance(metrics, VoteMetrics)
        assert _pairs(metrics.winner_distribution, "model", "wins") == [("m1", 2), ("m2", 1)]
        assert metrics.tiebreaker_rate == pytest.approx(1 / 3)
        assert metrics.avg_win_margin == 3.0

    def test_vote_winner_falls_back_to_stage_model(self, make_stage: StageFactory) -> None:
        """Test the stage model is used when the payload names no winner."""
        metrics = _compute("vote", [make_stage("winner", {}, model="m9")])

        assert _pairs(metrics.winner_distribution, "model", "wins") == [("m9", 1)]

    def test_jury(self, make_stage: StageFactory) -> None:
        """Test verdicts, dimension averages and consensus."""
        stages = [
            make_stage("verdict", {"verdict": "approve"}),
            make_stage("verdict", {"verdict": "approve"}),
            make_stage("verdict", {"verdict": "reject"}),
            make_stage(
                "juror_summary",
                {"recommendation": "approve", "scores": {"accuracy": 8, "clarity": 6}},
            ),
            make_stage(
                "juror_summary",
                {"verdict": "approve", "dimensions": {"accuracy": 6, "clarity": "bad"}},
            ),
            make_stage("juror_summary", {"recommendation": "reject"}),
            make_stage("juror_summary", {"recommendation": "approve"}, message_id="msg-2"),
        ]

        metrics = _compute("jury", stages)

        assert isinstance(metrics, JuryMetrics)
        assert _pairs(metrics.verdict_distribution, "verdict") == [
            ("approve", 2),
            ("reject", 1),
        ]
        assert _pairs(metrics.dimension_averages, "dimension", "avg_score") == [
            ("accuracy", 7.0),
            ("clarity", 6.0),
        ]
        assert metrics.juror_consensus_rate == pytest.approx(2 / 3)

    def test_debate(self, make_stage: StageFactory) -> None:
        """Test revision decisions and word-count delta."""
        stages = [
            make_stage(
                "revision",
                {"decision": "revised", "originalWordCount": 100, "revisedWordCount": 130},
            ),
            make_stage(
                "revision",
                {"decision": "maintained", "original": "a b c", "revised": "a b"},
            ),
            make_stage("revision", {}),
            make_stage("vote_result", {"winner": "m2"}),
        ]

        metrics = _compute("debate", stages)

        assert isinstance(metrics, DebateMetrics)
        assert _pairs(metrics.revision_decision_dist, "decision") == [
            ("revised", 2),
            ("maintained", 1),
        ]
        assert _pairs(metrics.winner_distribution, "model", "wins") == [("m2", 1)]
        assert metrics.avg_word_count_delta == 15

    def test_delphi(self, make_stage: StageFactory) -> None:
        """Test convergence rounds and confidence buckets."""
        stages = [
            make_stage("round", {"confidence": 0.95}),
            make_stage("delphi_round", {"confidence": 0.8}),
            make_stage("round", {"confidence": 0.5}, message_id="msg-2"),
            make_stage("round", {"confidence": 0.92}, message_id="msg-2"),
            make_stage("round", {}, message_id="msg-2"),
            make_stage("convergence", {"totalRounds": 4}, message_id="msg-2"),
        ]

        metrics = _compute("delphi", stages)

        assert isinstance(metrics, DelphiMetrics)
        assert metrics.avg_convergence_rounds == 3.0
        assert _pairs(metrics.confidence_distribution, "bucket") == [
            ("High (≥90%)", 2),
            ("Medium (70-89%)", 1),
            ("Low (<70%)", 1),
        ]


class TestAlgorithmicFamily:
    """Test tournament, confidence-weighted and decompose."""

    def test_tournament(self, make_stage: StageFactory) -> None:
        """Test champions and matchup win rates."""
        stages = [
            make_stage("champion", {"champion": "m1"}),
            make_stage("final_result", {"winner": "m2"}),
            make_stage("champion", {"champion": "m1"}),
            make_stage("match_result", {"winner": "m1", "loser": "m2"}),
            make_stage("matchup", {"winner": "m1", "loser": "m3"}),
            make_stage("matchup", {"winner": "m2", "loser": "m1"}),
        ]

        metrics = _compute("tournament", stages)

        assert isinstance(metrics, TournamentMetrics)
        assert _pairs(metrics.champion_distribution, "model", "wins") == [("m1", 2), ("m2", 1)]
        assert [(e.model, e.matches) for e in metrics.matchup_win_rates] == [
            ("m1", 3),
            ("m2", 2),
            ("m3", 1),
        ]
        assert metrics.matchup_win_rates[0].win_rate == pytest.approx(2 / 3)
        assert metrics.matchup_win_rates[2].win_rate == 0.0

    def test_confidence_weighted(self, make_stage: StageFactory) -> None:
        """Test histogram, outlier rate and average confidence."""
        stages = [
            make_stage("response", {"confidence": 0.9}),
            make_stage("confidence_response", {"confidence": 0.8}),
            make_stage("response", {"confidence": 0.6}),
            make_stage("response", {"confidence": 0.3}),
            make_stage("response", {"confidence": "high"}),
            make_stage("outlier", {"isOutlier": True}),
            make_stage("outlier_detection", {"isOutlier": False}),
        ]

        metrics = _compute("confidence_weighted", stages)

        assert isinstance(metrics, ConfidenceMetrics)
        assert _pairs(metrics.confidence_histogram, "bucket") == [
            ("Very High (≥90%)", 1),
            ("High (75-89%)", 1),
            ("Medium (50-74%)", 1),
            ("Low (<50%)", 1),
        ]
        assert metrics.outlier_rate == 0.5
        assert metrics.avg_confidence == pytest.approx(0.65)

    def test_decompose(self, make_stage: StageFactory) -> None:
        """Test waves, task success and parallelism efficiency."""
        stages = [
            make_stage("plan", {"waveCount": 3}),
            make_stage("decomposition", {"waves": [["t1"], ["t2"]]}),
            make_stage("task_result", {"success": True}),
            make_stage("subtask", {"success": False}),
            make_stage("task_result", {}),
            make_stage("reassembly", {"parallelismEfficiency": 0.8}),
            make_stage("assembly", {"parallelismEfficiency": 0.6}),
        ]

        metrics = _compute("decompose", stages)

        assert isinstance(metrics, DecomposeMetrics)
        assert metrics.avg_wave_count == 2.5
        assert metrics.task_success_rate == pytest.approx(2 / 3)
        assert metrics.avg_parallelism_efficiency == 0.7


class TestAdversarialAndSequential:
    """Test red team and chain."""

    def test_red_team(self, make_stage: StageFactory) -> None:
        """Test severity distribution and defense acceptance."""
        stages = [
            make_stage("attack", {"severity": "high"}),
            make_stage("red_team_attack", {"severity": "high"}),
            make_stage("attack", {"severity": "low"}),
            make_stage("attack", {}),
            make_stage("judgment", {"defenseAccepted": True}),
            make_stage("red_team_judgment", {"verdict": "defense_accepted"}),
            make_stage("judgment", {"result": "fail"}),
            make_stage("defense", {"result": "pass"}),
        ]

        metrics = _compute("red_team", stages)

        assert isinstance(metrics, RedTeamMetrics)
        assert _pairs(metrics.severity_distribution, "severity") == [
            ("high", 2),
            ("low", 1),
            ("medium", 1),
        ]
        assert metrics.defense_accept_rate == 0.75

    def test_chain(self, make_stage: StageFactory) -> None:
        """Test word-count progression, mandates and skips."""
        stages = [
            make_stage(
                "chain_step",
                {"content": "one two three", "mandate": "expand"},
                stage_order=1,
            ),
            make_stage(
                "step",
                {"content": "a b c d e", "mandate": "expand", "skipped": True},
                stage_order=2,
            ),
            make_stage("improvement", {"content": "a b c", "mandate": "tighten"}, stage_order=2),
        ]

        metrics = _compute("chain", stages)

        assert isinstance(metrics, ChainMetrics)
        assert _pairs(metrics.avg_word_count_progression, "step", "avg_word_count") == [
            (1, 3),
            (2, 4),
        ]
        assert _pairs(metrics.mandate_distribution, "mandate") == [("expand", 2), ("tighten", 1)]
        assert metrics.skip_rate == pytest.approx(1 / 3)


class TestRoleBasedFamily:
    """Test specialist panel, blueprint and peer review."""

    def test_specialist_panel(self, make_stage: StageFactory) -> None:
        """Test roles from the stage column or the payload."""
        stages = [
            make_stage("analysis", {}, role="security"),
            make_stage("analysis", {"role": "security"}),
            make_stage("analysis", {"role": "ux"}),
            make_stage("synthesis", {}),
        ]

        metrics = _compute("specialist_panel", stages)

        assert isinstance(metrics, SpecialistPanelMetrics)
        assert _pairs(metrics.role_distribution, "role") == [("security", 2), ("ux", 1)]

    def test_blueprint(self, make_stage: StageFactory) -> None:
        """Test sections, document length and TODO markers."""
        stages = [
            make_stage("outline", {"sectionCount": 4}),
            make_stage("outline", {"sections": ["intro", "design"]}),
            make_stage("assembly", {"content": "word word TODO"}),
            make_stage("final_document", "plain text doc here"),
        ]

        metrics = _compute("blueprint", stages)

        assert isinstance(metrics, BlueprintMetrics)
        assert metrics.avg_section_count == 3.0
        assert metrics.avg_word_count == 4
        assert metrics.todo_marker_rate == 0.5

    def test_peer_review(self, make_stage: StageFactory) -> None:
        """Test finding severities, rubric averages and consensus."""
        stages = [
            make_stage(
                "review",
                {
                    "findings": [{"severity": "high"}, {"severity": "low"}, {}, "bogus"],
                    "rubricScores": {"rigor": 8},
                },
            ),
            make_stage("peer_review", {"scores": {"rigor": 6, "clarity": 9}}),
            make_stage("consolidation", {"consensusRate": 0.8}),
            make_stage("consolidated_report", {"agreement": 0.6}),
        ]

        metrics = _compute("peer_review", stages)

        assert isinstance(metrics, PeerReviewMetrics)
        assert _pairs(metrics.finding_severity_dist, "severity") == [
            ("high", 1),
            ("low", 1),
            ("info", 1),
        ]
        assert _pairs(metrics.rubric_score_averages, "criterion", "avg_score") == [
            ("clarity", 9.0),
            ("rigor", 7.0),
        ]
        assert metrics.consensus_rate == pytest.approx(0.7)


class TestCreativeAndVerification:
    """Test brainstorm and fact-check."""

    def test_brainstorm(self, make_stage: StageFactory) -> None:
        """Test idea counts and cluster score averages."""
        stages = [
            make_stage("ideation", {"ideas": ["a", "b", "c", "d"]}),
            make_stage("ideas", {"ideaCount": 6}),
            make_stage("clustering", {"scores": {"novelty": 8, "feasibility": 6}}),
            make_stage("cluster_scoring", {"clusterScores": {"novelty": 6}}),
        ]

        metrics = _compute("brainstorm", stages)

        assert isinstance(metrics, BrainstormMetrics)
        assert metrics.avg_idea_count == 5.0
        assert _pairs(metrics.cluster_score_averages, "dimension", "avg_score") == [
            ("novelty", 7.0),
            ("feasibility", 6.0),
        ]

    def test_fact_check(self, make_stage: StageFactory) -> None:
        """Test claim types, verdicts and agreement."""
        stages = [
            make_stage(
                "claim_extraction",
                {"claims": [{"type": "statistical"}, {"category": "factual"}, {}]},
            ),
            make_stage("verification", {"verdict": "supported", "agreementRate": 0.9}),
            make_stage("claim_verification", {"verdict": "refuted", "confidence": 0.5}),
            make_stage("verification", {}),
            make_stage("evidence_report", {"avgAgreementRate": 0.7}),
        ]

        metrics = _compute("fact_check", stages)

        assert isinstance(metrics, FactCheckMetrics)
        assert _pairs(metrics.claim_type_distribution, "type") == [
            ("factual", 2),
            ("statistical", 1),
        ]
        assert _pairs(metrics.verdict_distribution, "verdict") == [
            ("supported", 1),
            ("refuted", 1),
            ("unknown", 1),
        ]
        assert metrics.avg_agreement_rate == pytest.approx(0.7)
