from deliberation_core.domain.parsing.response_parser import (
    PARSE_PROTOCOLS,
    ResponseParser,
    parse_confidence,
    parse_ranking,
    parse_reasoning,
    parse_synthesis,
    parse_verdict,
    parse_vote,
    parse_winner,
)

__all__ = [
    "PARSE_PROTOCOLS",
    "ResponseParser",
    "parse_confidence",
    "parse_ranking",
    "parse_reasoning",
    "parse_synthesis",
    "parse_verdict",
    "parse_vote",
    "parse_winner",
]
