"""Structured judgment extraction from free-form model output.

Parsers never raise on malformed text. Missing markers fall back to the
documented defaults: an empty ranking, no winner, 0.5 confidence.
"""

import re
from collections.abc import Callable
from typing import cast

from deliberation_core.domain.errors import UnknownProtocolError
from deliberation_core.domain.judgments import (
    JURY_DIMENSIONS,
    ConfidenceJudgment,
    Judgment,
    RankingEntry,
    RankingJudgment,
    SynthesisJudgment,
    Verdict,
    VerdictJudgment,
    VoteJudgment,
    WinnerJudgment,
    WinnerSide,
)
from deliberation_core.domain.parsing.primitives import (
    find_all_in_order,
    find_first_match,
    find_last_match,
    slice_after_marker,
    slice_before_marker,
    slice_between_markers,
)
from deliberation_core.shared.constants import (
    DEFAULT_CONFIDENCE,
    RESPONSE_LABEL_PREFIX,
)
from deliberation_core.shared.logging import get_contextual_logger

logger = get_contextual_logger("deliberation.parser")

RANKING_MARKER = re.compile(r"FINAL\s+RANKING\s*:?", re.IGNORECASE)
RESPONSE_LABEL = re.compile(r"Response\s+([A-Z])\b")
# One numbered item; items may share a line ("1. Response C 2. Response A").
# The match stops at the first label, so commentary after it is dropped.
NUMBERED_ITEM = re.compile(r"\d+\.\s*\**\s*(?:(?!\d+\.\s)[^\n])*?Response\s+([A-Z])\b")

WINNER_DECISION = re.compile(r"WINNER:\s*\**\s*Response\s+([AB])\b", re.IGNORECASE)
WINNER_MARKER = re.compile(r"\s*WINNER:", re.IGNORECASE)
STANDALONE_AB = re.compile(r"\bResponse\s+([AB])\b", re.IGNORECASE)
REASONING_MARKER = re.compile(r"REASONING:", re.IGNORECASE)

CONFIDENCE_VALUE = re.compile(
    r"CONFIDENCE:\s*(\d+(?:\.\d+)?|\.\d+)\s*(%)?", re.IGNORECASE
)
CONFIDENCE_MARKER = re.compile(r"CONFIDENCE:", re.IGNORECASE)
CONFIDENCE_REASONING_MARKER = re.compile(r"CONFIDENCE_REASONING:", re.IGNORECASE)
RESPONSE_MARKER = re.compile(r"(?<![A-Z_])RESPONSE:", re.IGNORECASE)
RESPONSE_END = re.compile(r"\nCONFIDENCE:", re.IGNORECASE)

SYNTHESIS_MARKER = re.compile(r"SYNTHESIS:", re.IGNORECASE)
CALIBRATION_NOTES_MARKER = re.compile(
    r"CONFIDENCE\s+CALIBRATION\s+NOTES:", re.IGNORECASE
)

VOTE_DECISION = re.compile(r"VOTE:\s*Response\s+([A-Z])\b", re.IGNORECASE)
ANY_RESPONSE_LABEL = re.compile(r"Response\s+([A-Z])\b", re.IGNORECASE)

VERDICT_DECISION = re.compile(r"VERDICT:\s*(APPROVE|REVISE|REJECT)", re.IGNORECASE)
VERDICT_TAIL_LENGTH = 500
VERDICT_KEYWORDS: tuple[Verdict, ...] = ("APPROVE", "REJECT", "REVISE")


def _label(letter: str) -> str:
    return f"{RESPONSE_LABEL_PREFIX}{letter.upper()}"


def _to_entries(labels: list[str]) -> list[RankingEntry]:
    entries: list[RankingEntry] = []
    seen: set[str] = set()
    for label in labels:
        if label in seen:
            continue
        seen.add(label)
        entries.append(RankingEntry(label=label, position=len(entries) + 1))
    return entries


def _numbered_labels(section: str) -> list[str]:
    return [_label(letter) for letter in find_all_in_order(NUMBERED_ITEM, section, group=1)]


def _mentioned_labels(text: str) -> list[str]:
    return [_label(letter) for letter in find_all_in_order(RESPONSE_LABEL, text, group=1)]


def parse_ranking(text: str) -> RankingJudgment:
    if not text:
        return RankingJudgment()

    section = slice_after_marker(RANKING_MARKER, text)
    if section is not None:
        labels = _numbered_labels(section)
        if labels:
            return RankingJudgment(entries=_to_entries(labels))
        labels = _mentioned_labels(section)
        if labels:
            logger.debug("Ranking section has no numbered list, using mention order")
            return RankingJudgment(entries=_to_entries(labels))

    labels = _mentioned_labels(text)
    if labels:
        logger.debug("No usable FINAL RANKING section, scanning whole text")
    return RankingJudgment(entries=_to_entries(labels))


def parse_winner(text: str) -> WinnerJudgment:
    if not text:
        return WinnerJudgment()

    winner = None
    decision = find_last_match(WINNER_DECISION, text)
    if decision:
        winner = decision.group(1).upper()
    else:
        mention = find_first_match(STANDALONE_AB, text)
        if mention:
            winner = mention.group(1).upper()
            logger.debug(f"No WINNER marker, falling back to first mention: {winner}")

    return WinnerJudgment(
        winner=cast("WinnerSide | None", winner),
        reasoning=parse_reasoning(text),
    )


def parse_reasoning(text: str) -> str:
    if not text:
        return ""
    reasoning = slice_between_markers(REASONING_MARKER, WINNER_MARKER, text)
    if reasoning is None:
        return text.strip()
    return reasoning.strip()


def _interpret_confidence(raw: str, is_percentage: bool) -> float:
    value = float(raw)
    if is_percentage or value > 1.0:
        value = value / 100
    return max(0.0, min(1.0, value))


def parse_confidence(text: str) -> ConfidenceJudgment:
    if not text or not text.strip():
        return ConfidenceJudgment()

    confidence = DEFAULT_CONFIDENCE
    parsed_successfully = False
    match = find_first_match(CONFIDENCE_VALUE, text)
    if match:
        confidence = _interpret_confidence(match.group(1), bool(match.group(2)))
        parsed_successfully = True
    else:
        logger.debug(f"No CONFIDENCE value found, defaulting to {DEFAULT_CONFIDENCE}")

    reasoning = slice_after_marker(CONFIDENCE_REASONING_MARKER, text) or ""

    after_marker = slice_after_marker(RESPONSE_MARKER, text)
    response = (
        slice_before_marker(RESPONSE_END, after_marker)
        if after_marker is not None
        else None
    )
    if response is None:
        before = slice_before_marker(CONFIDENCE_MARKER, text)
        response = before if before is not None else text

    return ConfidenceJudgment(
        response=response.strip(),
        confidence=confidence,
        reasoning=reasoning.strip(),
        parsed_successfully=parsed_successfully,
    )


def parse_synthesis(text: str) -> SynthesisJudgment:
    if not text or not text.strip():
        return SynthesisJudgment()

    synthesis = slice_between_markers(SYNTHESIS_MARKER, CALIBRATION_NOTES_MARKER, text)
    if synthesis is None:
        before_notes = slice_before_marker(CALIBRATION_NOTES_MARKER, text)
        synthesis = before_notes if before_notes is not None else text

    notes = slice_after_marker(CALIBRATION_NOTES_MARKER, text) or ""
    return SynthesisJudgment(
        synthesis=synthesis.strip(), calibration_notes=notes.strip()
    )


def parse_vote(text: str) -> VoteJudgment:
    if not text:
        return VoteJudgment()

    decision = find_last_match(VOTE_DECISION, text)
    if decision:
        return VoteJudgment(voted_for=_label(decision.group(1)))

    mention = find_last_match(ANY_RESPONSE_LABEL, text)
    if mention:
        logger.debug("No VOTE marker, falling back to last response mention")
        return VoteJudgment(voted_for=_label(mention.group(1)))
    return VoteJudgment()


def _parse_dimension_score(dimension: str, text: str) -> int | None:
    table_row = re.compile(rf"\|\s*{dimension}\s*\|\s*(\d+)\s*\|", re.IGNORECASE)
    match = find_first_match(table_row, text)
    if match and 1 <= int(match.group(1)) <= 10:
        return int(match.group(1))

    inline = re.compile(
        rf"{dimension}\*?\*?[:\s—-]+\*?\*?(\d+)(?:/10)?", re.IGNORECASE
    )
    match = find_first_match(inline, text)
    if match and 1 <= int(match.group(1)) <= 10:
        return int(match.group(1))
    return None


def _parse_verdict_label(text: str) -> Verdict | None:
    decision = find_first_match(VERDICT_DECISION, text)
    if decision:
        return cast("Verdict", decision.group(1).upper())

    tail = text[-VERDICT_TAIL_LENGTH:]
    for keyword in VERDICT_KEYWORDS:
        if re.search(rf"\b{keyword}\b", tail, re.IGNORECASE):
            logger.debug(f"No VERDICT marker, found keyword {keyword} near end")
            return keyword
    return None


def parse_verdict(text: str) -> VerdictJudgment:
    if not text:
        return VerdictJudgment(scores=dict.fromkeys(JURY_DIMENSIONS))
    return VerdictJudgment(
        verdict=_parse_verdict_label(text),
        scores={dim: _parse_dimension_score(dim, text) for dim in JURY_DIMENSIONS},
    )


PARSE_PROTOCOLS: dict[str, Callable[[str], Judgment]] = {
    "ranking": parse_ranking,
    "winner": parse_winner,
    "confidence": parse_confidence,
    "synthesis": parse_synthesis,
    "vote": parse_vote,
    "verdict": parse_verdict,
}


class ResponseParser:
    """Dispatches raw model text to the parser registered for a protocol."""

    def __init__(self) -> None:
        self.logger = get_contextual_logger("deliberation.parser")

    @staticmethod
    def protocols() -> list[str]:
        return list(PARSE_PROTOCOLS)

    def parse(self, protocol: str, text: str | None) -> Judgment:
        parser = PARSE_PROTOCOLS.get(protocol)
        if parser is None:
            self.logger.warning(f"Rejected unknown parse protocol '{protocol}'")
            raise UnknownProtocolError(protocol)
        return parser(text if isinstance(text, str) else "")
