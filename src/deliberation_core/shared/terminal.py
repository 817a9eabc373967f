"""Terminal capability detection utilities."""

import os
import re
import sys
from typing import TextIO

ANSI_PATTERN = re.compile(r"\x1B\[[0-9;]*[mK]")


def should_use_color(stream: TextIO | None = None) -> bool:
    """Whether ANSI colors should be written to ``stream`` (stderr by default).

    ``NO_COLOR`` always wins, ``FORCE_COLOR`` colors even when piped.
    """
    if "NO_COLOR" in os.environ:
        return False
    if os.environ.get("FORCE_COLOR"):
        return True

    stream = stream or sys.stderr
    isatty = getattr(stream, "isatty", None)
    if isatty is None or not isatty():
        return False
    if os.environ.get("TERM", "").lower() == "dumb":
        return False

    if sys.platform.startswith("win"):
        return any(var in os.environ for var in ("WT_SESSION", "ANSICON"))
    return True


def strip_ansi_codes(text: str) -> str:
    return ANSI_PATTERN.sub("", text)
