"""Typed views over the free-form ``parsed_data`` of a stage record.

Each metric routine reads stages through one of these models. Values of the
wrong type never raise: numbers fall back to 0, text to None, containers to
None. ``SOURCE_KEYS`` lists the persisted camelCase keys for a field in
priority order; the first key holding a non-null value wins.
"""

import math
from typing import Annotated, Any, ClassVar, Self

from pydantic import BaseModel, BeforeValidator, model_validator

from deliberation_core.domain.records import StageRecord


def safe_number(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    try:
        number = float(value)
    except OverflowError:
        return 0.0
    return number if math.isfinite(number) else 0.0


def _safe_text(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _present_text(value: Any) -> str | None:
    if value is None:
        return None
    return value if isinstance(value, str) else ""


def _safe_mapping(value: Any) -> dict[str, Any] | None:
    return value if isinstance(value, dict) else None


def _safe_list(value: Any) -> list[Any] | None:
    return value if isinstance(value, list) else None


def _safe_flag(value: Any) -> bool | None:
    return value if isinstance(value, bool) else None


SafeNumber = Annotated[float, BeforeValidator(safe_number)]
SafeText = Annotated[str | None, BeforeValidator(_safe_text)]
# None when absent, "" when present with a non-string value
PresentText = Annotated[str | None, BeforeValidator(_present_text)]
SafeMapping = Annotated[dict[str, Any] | None, BeforeValidator(_safe_mapping)]
SafeList = Annotated[list[Any] | None, BeforeValidator(_safe_list)]
SafeFlag = Annotated[bool | None, BeforeValidator(_safe_flag)]


def coalesce(data: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return None


class StagePayload(BaseModel):
    model_config = {"frozen": True, "extra": "ignore"}

    SOURCE_KEYS: ClassVar[dict[str, tuple[str, ...]]] = {}

    @model_validator(mode="before")
    @classmethod
    def _resolve_source_keys(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        resolved = {name: data.get(name) for name in cls.model_fields}
        for name, keys in cls.SOURCE_KEYS.items():
            resolved[name] = coalesce(data, *keys)
        return resolved

    @classmethod
    def parse(cls, value: Any) -> Self | None:
        if not isinstance(value, dict):
            return None
        return cls.model_validate(value)

    @classmethod
    def from_stage(cls, stage: StageRecord) -> Self | None:
        return cls.parse(stage.parsed_data)


# Vote / debate


class WinnerPayload(StagePayload):
    winner: PresentText = None
    tiebreaker: SafeFlag = None


class VoteTallyPayload(StagePayload):
    SOURCE_KEYS = {"win_margin": ("winMargin",)}

    win_margin: SafeNumber = 0.0


class RevisionPayload(StagePayload):
    SOURCE_KEYS = {
        "original_word_count": ("originalWordCount",),
        "revised_word_count": ("revisedWordCount",),
    }

    decision: SafeText = None
    original_word_count: SafeNumber = 0.0
    revised_word_count: SafeNumber = 0.0
    original: SafeText = None
    revised: SafeText = None


# Jury


class VerdictPayload(StagePayload):
    verdict: SafeText = None


class JurorScoresPayload(StagePayload):
    SOURCE_KEYS = {
        "scores": ("scores", "dimensions"),
        "recommendation": ("recommendation", "verdict"),
    }

    scores: SafeMapping = None
    recommendation: SafeText = None


# Tournament


class ChampionPayload(StagePayload):
    SOURCE_KEYS = {"champion": ("champion", "winner")}

    champion: PresentText = None


class MatchResultPayload(StagePayload):
    winner: SafeText = None
    loser: SafeText = None


# Delphi / confidence-weighted


class ConfidencePayload(StagePayload):
    confidence: SafeNumber = 0.0


class ConvergencePayload(StagePayload):
    SOURCE_KEYS = {"total_rounds": ("totalRounds", "rounds")}

    total_rounds: SafeNumber = 0.0


class OutlierPayload(StagePayload):
    SOURCE_KEYS = {"is_outlier": ("isOutlier",)}

    is_outlier: SafeFlag = None


# Red team


class AttackPayload(StagePayload):
    severity: SafeText = None


class DefenseOutcomePayload(StagePayload):
    SOURCE_KEYS = {"defense_accepted": ("defenseAccepted",)}

    defense_accepted: SafeFlag = None
    verdict: SafeText = None
    result: SafeText = None

    @property
    def accepted(self) -> bool:
        return (
            self.defense_accepted is True
            or self.verdict == "defense_accepted"
            or self.result == "pass"
        )


# Chain / blueprint


class ChainStepPayload(StagePayload):
    content: SafeText = None
    mandate: SafeText = None
    skipped: SafeFlag = None


class OutlinePayload(StagePayload):
    SOURCE_KEYS = {"section_count": ("sectionCount",)}

    section_count: SafeNumber = 0.0
    sections: SafeList = None


class DocumentPayload(StagePayload):
    content: SafeText = None


class RolePayload(StagePayload):
    role: SafeText = None


# Peer review


class FindingPayload(StagePayload):
    severity: SafeText = None


class ReviewPayload(StagePayload):
    SOURCE_KEYS = {"scores": ("scores", "rubricScores")}

    findings: SafeList = None
    scores: SafeMapping = None


class ConsolidationPayload(StagePayload):
    SOURCE_KEYS = {"consensus_rate": ("consensusRate", "agreement")}

    consensus_rate: SafeNumber = 0.0


# Decompose


class PlanPayload(StagePayload):
    SOURCE_KEYS = {"wave_count": ("waveCount", "waves")}

    wave_count: SafeNumber = 0.0
    waves: SafeList = None


class TaskResultPayload(StagePayload):
    success: SafeFlag = None


class ReassemblyPayload(StagePayload):
    SOURCE_KEYS = {"parallelism_efficiency": ("parallelismEfficiency",)}

    parallelism_efficiency: SafeNumber = 0.0


# Brainstorm


class IdeationPayload(StagePayload):
    SOURCE_KEYS = {"idea_count": ("ideaCount",)}

    ideas: SafeList = None
    idea_count: SafeNumber = 0.0


class ClusterScoresPayload(StagePayload):
    SOURCE_KEYS = {"scores": ("scores", "clusterScores")}

    scores: SafeMapping = None


# Fact-check


class ClaimListPayload(StagePayload):
    claims: SafeList = None


class ClaimPayload(StagePayload):
    SOURCE_KEYS = {"type": ("type", "category")}

    type: SafeText = None


class VerificationPayload(StagePayload):
    SOURCE_KEYS = {"agreement": ("agreementRate", "confidence")}

    verdict: SafeText = None
    agreement: SafeNumber = 0.0


class EvidenceReportPayload(StagePayload):
    SOURCE_KEYS = {"avg_agreement_rate": ("avgAgreementRate",)}

    avg_agreement_rate: SafeNumber = 0.0
