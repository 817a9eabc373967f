"""Registry of deliberation protocols.

Every protocol the engine understands is listed here once. Metrics dispatch,
mode distribution names and strict validation all read from this table.
"""

from typing import Literal

from pydantic import BaseModel

from deliberation_core.domain.errors import UnknownModeError

ModeFamily = Literal[
    "evaluation",
    "adversarial",
    "sequential",
    "role_based",
    "algorithmic",
    "creative",
    "verification",
]


class ModeDefinition(BaseModel):
    model_config = {"frozen": True}

    id: str
    name: str
    family: ModeFamily
    description: str
    min_models: int
    max_models: int
    requires_special_role: bool
    supports_multi_turn: bool
    estimated_duration_ms: int


MODE_REGISTRY: dict[str, ModeDefinition] = {
    mode.id: mode
    for mode in (
        ModeDefinition(
            id="council",
            name="Council",
            family="evaluation",
            description="Models answer, rank each other anonymously, then a chairman synthesizes.",
            min_models=3,
            max_models=7,
            requires_special_role=True,
            supports_multi_turn=True,
            estimated_duration_ms=120_000,
        ),
        ModeDefinition(
            id="vote",
            name="Vote",
            family="evaluation",
            description="Models answer, vote for the best, tiebreaker by chairman.",
            min_models=3,
            max_models=7,
            requires_special_role=True,
            supports_multi_turn=True,
            estimated_duration_ms=90_000,
        ),
        ModeDefinition(
            id="jury",
            name="Jury",
            family="evaluation",
            description="Models evaluate an existing answer on 5 dimensions, foreman delivers verdict.",
            min_models=4,
            max_models=7,
            requires_special_role=True,
            supports_multi_turn=False,
            estimated_duration_ms=90_000,
        ),
        ModeDefinition(
            id="debate",
            name="Debate",
            family="evaluation",
            description="Models answer, see others' responses, revise, then vote on revised answers.",
            min_models=3,
            max_models=6,
            requires_special_role=False,
            supports_multi_turn=False,
            estimated_duration_ms=180_000,
        ),
        ModeDefinition(
            id="delphi",
            name="Delphi",
            family="evaluation",
            description="Iterative anonymous rounds with statistical feedback until convergence.",
            min_models=4,
            max_models=8,
            requires_special_role=True,
            supports_multi_turn=False,
            estimated_duration_ms=300_000,
        ),
        ModeDefinition(
            id="red_team",
            name="Red Team",
            family="adversarial",
            description="Adversarial loop: generate, attack, defend, judge.",
            min_models=2,
            max_models=3,
            requires_special_role=False,
            supports_multi_turn=False,
            estimated_duration_ms=180_000,
        ),
        ModeDefinition(
            id="chain",
            name="Chain",
            family="sequential",
            description="Sequential improvement: draft, improve, refine, polish.",
            min_models=2,
            max_models=6,
            requires_special_role=False,
            supports_multi_turn=False,
            estimated_duration_ms=240_000,
        ),
        ModeDefinition(
            id="specialist_panel",
            name="Specialist Panel",
            family="role_based",
            description="Role-assigned expert analysis, cross-review, and synthesis.",
            min_models=3,
            max_models=7,
            requires_special_role=True,
            supports_multi_turn=False,
            estimated_duration_ms=150_000,
        ),
        ModeDefinition(
            id="blueprint",
            name="Blueprint",
            family="role_based",
            description="Outline, parallel section expansion, and assembly into a unified document.",
            min_models=2,
            max_models=8,
            requires_special_role=False,
            supports_multi_turn=False,
            estimated_duration_ms=300_000,
        ),
        ModeDefinition(
            id="peer_review",
            name="Peer Review",
            family="role_based",
            description="Independent reviews with scoring rubric, consolidated into a unified report.",
            min_models=3,
            max_models=7,
            requires_special_role=True,
            supports_multi_turn=False,
            estimated_duration_ms=150_000,
        ),
        ModeDefinition(
            id="tournament",
            name="Tournament",
            family="algorithmic",
            description="Bracket-style elimination: pairwise judging until a winner emerges.",
            min_models=5,
            max_models=9,
            requires_special_role=True,
            supports_multi_turn=False,
            estimated_duration_ms=180_000,
        ),
        ModeDefinition(
            id="confidence_weighted",
            name="Confidence-Weighted",
            family="algorithmic",
            description="Models answer with self-assessed confidence, weighted synthesis.",
            min_models=2,
            max_models=6,
            requires_special_role=False,
            supports_multi_turn=True,
            estimated_duration_ms=90_000,
        ),
        ModeDefinition(
            id="decompose",
            name="Decompose",
            family="algorithmic",
            description="Planner breaks question into sub-tasks, models solve parts, assembler reunifies.",
            min_models=2,
            max_models=6,
            requires_special_role=False,
            supports_multi_turn=False,
            estimated_duration_ms=180_000,
        ),
        ModeDefinition(
            id="brainstorm",
            name="Brainstorm",
            family="creative",
            description="Generate ideas freely, cluster, score, refine top cluster.",
            min_models=3,
            max_models=6,
            requires_special_role=False,
            supports_multi_turn=False,
            estimated_duration_ms=180_000,
        ),
        ModeDefinition(
            id="fact_check",
            name="Fact-Check",
            family="verification",
            description="Generate content, extract claims, independently verify, produce evidence report.",
            min_models=3,
            max_models=6,
            requires_special_role=False,
            supports_multi_turn=False,
            estimated_duration_ms=180_000,
        ),
    )
}


def get_mode_definition(mode: str) -> ModeDefinition | None:
    return MODE_REGISTRY.get(mode)


def is_valid_mode(mode: str) -> bool:
    return mode in MODE_REGISTRY


def require_mode(mode: str) -> ModeDefinition:
    """Strict lookup used where an unknown protocol must not be defaulted."""
    definition = MODE_REGISTRY.get(mode)
    if definition is None:
        raise UnknownModeError(mode)
    return definition


def modes_by_family(family: ModeFamily) -> list[ModeDefinition]:
    return [m for m in MODE_REGISTRY.values() if m.family == family]


def mode_ids() -> list[str]:
    return list(MODE_REGISTRY)


def mode_display_name(mode: str) -> str:
    definition = MODE_REGISTRY.get(mode)
    return definition.name if definition else mode


def validate_model_count(mode: str, model_count: int) -> tuple[bool, str | None]:
    definition = require_mode(mode)
    if model_count < definition.min_models:
        return (
            False,
            f"{definition.name} requires at least {definition.min_models} models, got {model_count}.",
        )
    if model_count > definition.max_models:
        return (
            False,
            f"{definition.name} allows at most {definition.max_models} models, got {model_count}.",
        )
    return True, None
