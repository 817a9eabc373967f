from datetime import UTC, datetime, timedelta

from deliberation_core.domain.analytics.models import DateRange
from deliberation_core.domain.errors import InvalidDatePresetError
from deliberation_core.shared.constants import DATE_PRESET_DAYS


def is_valid_preset(value: str) -> bool:
    return value in DATE_PRESET_DAYS


def resolve_date_preset(preset: str, now: datetime | None = None) -> datetime | None:
    """Start of the window named by ``preset``, or None for ``all``.

    Raises:
        InvalidDatePresetError: If ``preset`` is not one of 7d, 30d, 90d, all.
    """
    if not is_valid_preset(preset):
        raise InvalidDatePresetError(preset)

    days = DATE_PRESET_DAYS[preset]
    if days is None:
        return None
    reference = now if now is not None else datetime.now(UTC)
    return reference - timedelta(days=days)


def build_date_range(preset: str, now: datetime | None = None) -> DateRange:
    reference = now if now is not None else datetime.now(UTC)
    return DateRange(
        from_=resolve_date_preset(preset, reference),
        to=reference,
        preset=preset,
    )
