"""Anonymous labels for a deliberation round."""

import string

from deliberation_core.shared.constants import RESPONSE_LABEL_PREFIX
from deliberation_core.shared.errors import InputError

LabelMap = dict[str, str]

MAX_LABELS = len(string.ascii_uppercase)


def label_for_index(index: int) -> str:
    return f"{RESPONSE_LABEL_PREFIX}{string.ascii_uppercase[index]}"


def create_label_map(models: list[str]) -> LabelMap:
    """Map "Response A", "Response B", ... to models in input order."""
    if len(models) > MAX_LABELS:
        raise InputError(
            f"Cannot label {len(models)} responses, at most {MAX_LABELS} are supported"
        )
    return {label_for_index(i): model for i, model in enumerate(models)}


def resolve_label(label_map: LabelMap, label: str) -> str | None:
    return label_map.get(label)
