from collections.abc import Sequence

from deliberation_core.domain.metrics.helpers import (
    RunningMean,
    Tally,
    filter_by_stage_type,
)
from deliberation_core.domain.metrics.models import (
    ClaimTypeCount,
    FactCheckMetrics,
    VerdictCount,
)
from deliberation_core.domain.metrics.payloads import (
    ClaimListPayload,
    ClaimPayload,
    EvidenceReportPayload,
    VerificationPayload,
)
from deliberation_core.domain.records import StageRecord
from deliberation_core.shared.statistics import round_half_up


def compute_fact_check_metrics(stages: Sequence[StageRecord]) -> FactCheckMetrics:
    claim_stages = filter_by_stage_type(stages, "claim_extraction", "claims")
    verifications = filter_by_stage_type(
        stages, "verification", "claim_verification"
    )
    reports = filter_by_stage_type(stages, "evidence_report", "final_report")

    claim_types = Tally()
    for stage in claim_stages:
        extraction = ClaimListPayload.from_stage(stage)
        if extraction is None:
            continue
        for item in extraction.claims or []:
            claim = ClaimPayload.parse(item)
            if claim is not None:
                claim_types.add(claim.type if claim.type is not None else "factual")

    verdicts = Tally()
    agreement = RunningMean()
    for stage in verifications:
        verification = VerificationPayload.from_stage(stage)
        if verification is None:
            continue
        verdicts.add(
            verification.verdict if verification.verdict is not None else "unknown"
        )
        if verification.agreement > 0:
            agreement.add(verification.agreement)

    # Report-level averages are folded in as one more sample each
    for stage in reports:
        report = EvidenceReportPayload.from_stage(stage)
        if report is not None and report.avg_agreement_rate > 0:
            agreement.add(report.avg_agreement_rate)

    return FactCheckMetrics(
        claim_type_distribution=claim_types.to_list(
            lambda claim_type, count: ClaimTypeCount(type=claim_type, count=count)
        ),
        verdict_distribution=verdicts.to_list(
            lambda verdict, count: VerdictCount(verdict=verdict, count=count)
        ),
        avg_agreement_rate=round_half_up(agreement.value, 3),
    )
