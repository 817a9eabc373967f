"""Metric routines for role-based protocols: specialist panel, blueprint and peer review."""

from collections.abc import Sequence

from deliberation_core.domain.metrics.helpers import (
    RunningMean,
    ScoreAverages,
    Tally,
    count_words,
    filter_by_stage_type,
    rate,
)
from deliberation_core.domain.metrics.models import (
    BlueprintMetrics,
    CriterionAverage,
    PeerReviewMetrics,
    RoleCount,
    SeverityCount,
    SpecialistPanelMetrics,
)
from deliberation_core.domain.metrics.payloads import (
    ConsolidationPayload,
    DocumentPayload,
    FindingPayload,
    OutlinePayload,
    ReviewPayload,
    RolePayload,
)
from deliberation_core.domain.records import StageRecord
from deliberation_core.shared.statistics import round_half_up

TODO_MARKERS = ("TODO", "todo")


def compute_specialist_panel_metrics(
    stages: Sequence[StageRecord],
) -> SpecialistPanelMetrics:
    roles = Tally()
    for stage in stages:
        role = stage.role
        if role is None:
            payload = RolePayload.from_stage(stage)
            role = payload.role if payload is not None else None
        if role:
            roles.add(role)

    return SpecialistPanelMetrics(
        role_distribution=roles.to_list(
            lambda role, count: RoleCount(role=role, count=count)
        )
    )


def compute_blueprint_metrics(stages: Sequence[StageRecord]) -> BlueprintMetrics:
    outlines = filter_by_stage_type(stages, "outline")
    assemblies = filter_by_stage_type(stages, "assembly", "final_document")

    total_sections = 0.0
    for stage in outlines:
        outline = OutlinePayload.from_stage(stage)
        if outline is None:
            continue
        if outline.section_count > 0:
            total_sections += outline.section_count
        elif outline.sections is not None:
            total_sections += len(outline.sections)

    words = RunningMean()
    todo_documents = 0
    for stage in assemblies:
        if isinstance(stage.parsed_data, str):
            document_words = count_words(stage.parsed_data)
            if document_words > 0:
                words.add(document_words)
            continue

        document = DocumentPayload.from_stage(stage)
        if document is None or document.content is None:
            continue
        document_words = count_words(document.content)
        if document_words > 0:
            words.add(document_words)
        if any(marker in document.content for marker in TODO_MARKERS):
            todo_documents += 1

    # Sessions without an outline still count as one document session
    doc_sessions = len(outlines) or 1
    return BlueprintMetrics(
        avg_section_count=round_half_up(total_sections / doc_sessions, 1),
        avg_word_count=int(round_half_up(words.value)),
        todo_marker_rate=rate(todo_documents, words.count),
    )


def compute_peer_review_metrics(
    stages: Sequence[StageRecord],
) -> PeerReviewMetrics:
    reviews = filter_by_stage_type(stages, "review", "peer_review")
    consolidations = filter_by_stage_type(
        stages, "consolidation", "consolidated_report"
    )

    severities = Tally()
    rubric = ScoreAverages()
    for stage in reviews:
        review = ReviewPayload.from_stage(stage)
        if review is None:
            continue
        for item in review.findings or []:
            finding = FindingPayload.parse(item)
            if finding is not None:
                severities.add(
                    finding.severity if finding.severity is not None else "info"
                )
        rubric.add_scores(review.scores)

    consensus = RunningMean()
    for stage in consolidations:
        consolidation = ConsolidationPayload.from_stage(stage)
        if consolidation is not None and consolidation.consensus_rate > 0:
            consensus.add(consolidation.consensus_rate)

    return PeerReviewMetrics(
        finding_severity_dist=severities.to_list(
            lambda severity, count: SeverityCount(severity=severity, count=count)
        ),
        rubric_score_averages=rubric.to_list(
            lambda criterion, avg: CriterionAverage(criterion=criterion, avg_score=avg)
        ),
        consensus_rate=consensus.value,
    )
