import logging
import os
import sys
from pathlib import Path
from typing import ClassVar, TextIO

from colorama import Fore, Style

from deliberation_core.shared.constants import DEFAULT_LOG_CACHE_SIZE
from deliberation_core.shared.logging.structured import (
    ContextFilter,
    JSONFormatter,
    build_context_parts,
)
from deliberation_core.shared.terminal import should_use_color, strip_ansi_codes

LEVELS = logging.getLevelNamesMapping()


class DuplicateFilter(logging.Filter):
    """Drops a record identical to one already emitted by the same logger.

    Metric routines run once per stage batch, so the same fallback notice can
    repeat hundreds of times. The cache keeps insertion order and sheds its
    oldest half when full.
    """

    def __init__(self, max_cache_size: int = DEFAULT_LOG_CACHE_SIZE) -> None:
        super().__init__()
        self.seen_messages: dict[str, None] = {}
        self.max_cache_size = max_cache_size

    def filter(self, record: logging.LogRecord) -> bool:
        key = f"{record.name}:{record.levelname}:{record.getMessage()[:200]}"
        if key in self.seen_messages:
            return False

        self.seen_messages[key] = None
        if len(self.seen_messages) > self.max_cache_size:
            for stale in list(self.seen_messages)[: len(self.seen_messages) // 2]:
                del self.seen_messages[stale]
        return True


class ColorFormatter(logging.Formatter):
    COLORS: ClassVar[dict[str, str]] = {
        "DEBUG": Fore.CYAN,
        "INFO": Fore.GREEN,
        "WARNING": Fore.YELLOW,
        "ERROR": Fore.RED,
        "CRITICAL": Fore.RED + Style.BRIGHT,
    }

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        include_module: bool = True,
        use_color: bool | None = None,
    ) -> None:
        super().__init__(fmt, datefmt)
        self.include_module = include_module
        self.use_color = use_color

    def _with_context(self, record: logging.LogRecord, message: str) -> str:
        parts = build_context_parts(record)
        if self.include_module and record.module:
            parts.append(record.module)
        if not parts:
            return message

        prefix = "[" + "] [".join(parts) + "] "
        # Keep a leading "[LEVEL]" in front of the context
        if message.startswith("["):
            level_end = message.find("]") + 1
            return f"{message[:level_end]} {prefix}{message[level_end:].lstrip()}"
        return prefix + message

    def format(self, record: logging.LogRecord) -> str:
        message = self._with_context(record, super().format(record))
        colored = self.use_color if self.use_color is not None else should_use_color(sys.stderr)
        if colored:
            return f"{self.COLORS.get(record.levelname, '')}{message}{Style.RESET_ALL}"
        return strip_ansi_codes(message)


def resolve_level(level: int | str) -> int:
    """Numeric level for ``level``; names are case-insensitive, unknown names mean INFO."""
    if isinstance(level, int):
        return level
    return LEVELS.get(level.upper(), logging.INFO)


def _validate_log_file_path(log_file: str | None) -> str | None:
    if not log_file:
        return None

    log_dir = Path(log_file).parent
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        print(f"Error with log file path: {e!s}", file=sys.stderr)
        return None

    if not os.access(log_dir, os.W_OK):
        print(
            f"Warning: Log directory {log_dir} is not writable. Logs will not be saved to file.",
            file=sys.stderr,
        )
        return None
    return log_file


def _create_file_handler(
    log_file: str, context_filter: logging.Filter
) -> logging.FileHandler | None:
    try:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
    except OSError as e:
        print(
            f"ERROR: Cannot open log file {log_file}: {e!s}. "
            "Continuing with console logging only.",
            file=sys.stderr,
        )
        return None

    # The file keeps everything; the console level only filters the terminal
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(JSONFormatter())
    file_handler.addFilter(context_filter)
    return file_handler


def setup_logging(
    log_file: str | None = None,
    level: int | str = logging.INFO,
    debug: bool = False,
    json_console: bool = False,
    include_module: bool = True,
    use_color: bool | None = None,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Route all records to stderr, plus an optional JSON log file.

    Priority for the console level: ``debug`` flag, then the ``LOG_LEVEL``
    environment variable, then ``level``. Calling this again replaces the
    handlers installed by the previous call.
    """
    log_file = _validate_log_file_path(log_file)

    env_level = os.environ.get("LOG_LEVEL")
    if debug:
        console_level = logging.DEBUG
    elif env_level:
        console_level = resolve_level(env_level)
    else:
        console_level = resolve_level(level)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    context_filter = ContextFilter()

    # stdout carries command results, so the console handler writes to stderr
    console_handler = logging.StreamHandler(stream or sys.stderr)
    console_handler.setLevel(console_level)
    if json_console:
        console_handler.setFormatter(JSONFormatter())
    else:
        console_handler.setFormatter(
            ColorFormatter(
                "[%(levelname)s] %(message)s",
                include_module=include_module,
                use_color=use_color,
            )
        )
    console_handler.addFilter(DuplicateFilter())
    console_handler.addFilter(context_filter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = _create_file_handler(log_file, context_filter)
        if file_handler:
            root_logger.addHandler(file_handler)
            root_logger.debug(f"Log file initialized at {log_file}")

    logger = logging.getLogger("deliberation")
    logger.setLevel(logging.DEBUG)
    logger.propagate = True
    return logger
