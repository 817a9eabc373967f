import math
from collections.abc import Mapping
from typing import Any


def _truncate(text: str, max_length: int | None, suffix: str) -> str:
    if max_length and len(text) > max_length:
        return text[:max_length] + suffix
    return text


def sanitize_for_json(
    obj: Any,
    max_length: int | None = None,
    truncate_suffix: str = "... (truncated)",
) -> Any:
    """Convert ``obj`` into something ``json.dumps`` accepts.

    Pydantic models are dumped in JSON mode, non-finite floats become 0.0 and
    anything unknown is stringified. Strings longer than ``max_length`` are
    cut and end with ``truncate_suffix``.
    """

    def convert(value: Any) -> Any:
        if value is None or isinstance(value, (bool, int)):
            return value
        if isinstance(value, float):
            return value if math.isfinite(value) else 0.0
        if isinstance(value, str):
            # Lone surrogates from decoded model output cannot be encoded
            text = value.encode("utf-8", errors="replace").decode("utf-8")
            return _truncate(text, max_length, truncate_suffix)
        if isinstance(value, Mapping):
            return {convert(k): convert(v) for k, v in value.items()}
        if isinstance(value, (list, tuple)):
            return [convert(item) for item in value]
        if hasattr(value, "model_dump"):
            return convert(value.model_dump(mode="json"))
        return _truncate(str(value), max_length, truncate_suffix)

    return convert(obj)
