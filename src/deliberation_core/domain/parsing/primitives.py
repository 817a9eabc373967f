"""Marker primitives shared by every protocol parser.

Each helper takes a compiled pattern and returns either a match, a slice of
the input, or ``None``. Parsers compose these instead of doing their own
string surgery.
"""

import re


def find_first_match(pattern: re.Pattern[str], text: str) -> re.Match[str] | None:
    return pattern.search(text)


def find_last_match(pattern: re.Pattern[str], text: str) -> re.Match[str] | None:
    last = None
    for last in pattern.finditer(text):
        pass
    return last


def find_all_in_order(
    pattern: re.Pattern[str], text: str, group: int = 0
) -> list[str]:
    return [match.group(group) for match in pattern.finditer(text)]


def slice_after_marker(marker: re.Pattern[str], text: str) -> str | None:
    """Return everything after the first marker, or None when it is absent."""
    match = marker.search(text)
    if match is None:
        return None
    return text[match.end() :]


def slice_before_marker(marker: re.Pattern[str], text: str) -> str | None:
    match = marker.search(text)
    if match is None:
        return None
    return text[: match.start()]


def slice_between_markers(
    start: re.Pattern[str], end: re.Pattern[str], text: str
) -> str | None:
    """Return the text after ``start`` up to the next ``end`` (or end of text).

    None when ``start`` is absent. The ``end`` marker is only searched for
    after the start marker.
    """
    after = slice_after_marker(start, text)
    if after is None:
        return None
    end_match = end.search(after)
    if end_match is None:
        return after
    return after[: end_match.start()]
