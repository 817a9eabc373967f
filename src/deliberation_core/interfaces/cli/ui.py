import sys
from typing import TextIO

from colorama import Fore, Style

from deliberation_core.shared.terminal import should_use_color


class Display:
    """User-facing messages on stderr; stdout is reserved for JSON results."""

    def __init__(self, use_color: bool = True, stream: TextIO | None = None):
        self.stream = stream
        self.use_color = use_color and should_use_color(stream)

    def print(self, text: str, color: str | None = None) -> None:
        if color and self.use_color:
            text = f"{color}{text}{Style.RESET_ALL}"
        try:
            print(text, file=self.stream or sys.stderr)
        except BrokenPipeError:
            pass

    def error(self, text: str) -> None:
        self.print(text, Fore.RED)


_display = Display()


def configure_display(
    *, use_color: bool | None = None, stream: TextIO | None = None
) -> None:
    global _display  # noqa: PLW0603 - intentional module-level state
    _display = Display(use_color=use_color is not False, stream=stream)


def cli_error(text: str) -> None:
    _display.error(text)
