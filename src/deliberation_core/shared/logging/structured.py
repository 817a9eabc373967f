import contextvars
import json
import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import Any

from deliberation_core.shared.json_utils import sanitize_for_json

# Context field -> (variable, label used in console prefixes)
_CONTEXT_FIELDS: dict[str, tuple[contextvars.ContextVar[str | None], str]] = {
    "session_id": (contextvars.ContextVar("session_id", default=None), "session"),
    "mode": (contextvars.ContextVar("mode", default=None), "mode"),
    "phase": (contextvars.ContextVar("phase", default=None), "phase"),
}

# Attributes every LogRecord has; anything else on a record came from ``extra``
_STANDARD_RECORD_KEYS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime"}

_MAX_EXTRA_LENGTH = 500


def generate_session_id() -> str:
    return uuid.uuid4().hex[:8]


def get_context() -> dict[str, str]:
    """Context values currently set, without the empty ones."""
    return {
        key: value
        for key, (var, _label) in _CONTEXT_FIELDS.items()
        if (value := var.get())
    }


def build_context_parts(record: logging.LogRecord) -> list[str]:
    return [
        f"{label}:{getattr(record, key)}"
        for key, (_var, label) in _CONTEXT_FIELDS.items()
        if getattr(record, key, None)
    ]


class ContextFilter(logging.Filter):
    """Copies the current session context onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, (var, _label) in _CONTEXT_FIELDS.items():
            setattr(record, key, var.get() or "")
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per line, with context and ``extra`` fields inlined."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.pathname:
            entry.update(module=record.module, file=record.filename, line=record.lineno)
        entry.update(get_context())

        for key, value in vars(record).items():
            if key in _STANDARD_RECORD_KEYS or key in _CONTEXT_FIELDS or key in entry:
                continue
            entry[key] = sanitize_for_json(
                value,
                max_length=_MAX_EXTRA_LENGTH,
                truncate_suffix=f"... (truncated, {len(str(value))} total chars)",
            )

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


class ContextualLogger:
    """Logger wrapper that turns keyword arguments into structured fields.

    ``logger.info("Parsed", protocol="vote", entries=3)`` logs the message
    with ``protocol`` and ``entries`` attached to the record, so the JSON
    formatter writes them as fields.
    """

    def __init__(self, name: str = "deliberation"):
        self.logger = logging.getLogger(name)

    @contextmanager
    def session_context(
        self,
        session_id: str | None = None,
        mode: str | None = None,
        phase: str | None = None,
    ) -> Iterator[str]:
        """Bind session values for the duration of the block; yields the session id."""
        session_id = session_id or generate_session_id()
        values = {"session_id": session_id, "mode": mode, "phase": phase}
        tokens = [
            (var, var.set(values[key]))
            for key, (var, _label) in _CONTEXT_FIELDS.items()
            if values[key]
        ]
        try:
            yield session_id
        finally:
            for var, token in reversed(tokens):
                var.reset(token)

    def _log(
        self,
        level: int,
        message: str,
        args: tuple[object, ...],
        fields: dict[str, object],
        exc_info: bool = False,
    ) -> None:
        # stacklevel 3 points the record at the caller of debug()/info()/...
        self.logger.log(
            level, message, *args, exc_info=exc_info, extra=fields, stacklevel=3
        )

    def debug(self, message: str, *args: object, **fields: object) -> None:
        self._log(logging.DEBUG, message, args, fields)

    def info(self, message: str, *args: object, **fields: object) -> None:
        self._log(logging.INFO, message, args, fields)

    def warning(
        self, message: str, *args: object, exc_info: bool = False, **fields: object
    ) -> None:
        self._log(logging.WARNING, message, args, fields, exc_info=exc_info)

    def error(
        self, message: str, *args: object, exc_info: bool = False, **fields: object
    ) -> None:
        self._log(logging.ERROR, message, args, fields, exc_info=exc_info)

    def exception(self, message: str, *args: object, **fields: object) -> None:
        self._log(logging.ERROR, message, args, fields, exc_info=True)


def get_contextual_logger(name: str = "deliberation") -> ContextualLogger:
    return ContextualLogger(name)
