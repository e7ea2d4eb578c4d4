"""
Period filtering for reading collections.

Windows are measured back from an injectable "now" so that results are
deterministic under test.
"""

import logging
from datetime import datetime, timezone
from enum import Enum

from glucose_log.domain.reading import Reading
from glucose_log.utils.exceptions import ValidationError
from glucose_log.utils.timezone_utils import (
    MS_PER_DAY,
    day_bounds_ms,
    make_timezone_aware,
    to_epoch_ms,
)

logger = logging.getLogger(__name__)


class Period(str, Enum):
    """Supported period selectors."""

    LAST_3_DAYS = "3days"
    LAST_WEEK = "1week"
    LAST_15_DAYS = "15days"
    LAST_MONTH = "1month"
    LAST_3_MONTHS = "3months"
    CUSTOM = "custom"


PERIOD_DAYS: dict[str, int] = {
    Period.LAST_3_DAYS.value: 3,
    Period.LAST_WEEK.value: 7,
    Period.LAST_15_DAYS.value: 15,
    Period.LAST_MONTH.value: 30,
    Period.LAST_3_MONTHS.value: 90,
}

PERIOD_LABELS: dict[str, str] = {
    Period.LAST_3_DAYS.value: "Last 3 Days",
    Period.LAST_WEEK.value: "Last Week",
    Period.LAST_15_DAYS.value: "Last 15 Days",
    Period.LAST_MONTH.value: "Last Month",
    Period.LAST_3_MONTHS.value: "Last 3 Months",
}


def _period_key(period: Period | str) -> str:
    return period.value if isinstance(period, Period) else str(period)


def filter_readings(
    readings: list[Reading],
    period: Period | str,
    custom_start: str | None = None,
    custom_end: str | None = None,
    now: datetime | None = None,
    timezone_str: str = "UTC",
) -> list[Reading]:
    """
    Select the readings that fall inside a period.

    Rolling periods keep readings with ``timestamp >= now - N days``. The
    custom period keeps readings between ``custom_start`` 00:00:00 and
    ``custom_end`` 23:59:59 inclusive, and returns everything when either date
    is missing. Unknown selectors return everything.

    Args:
        readings: Collection to filter (order is preserved).
        period: Period selector.
        custom_start: First day of a custom range (YYYY-MM-DD).
        custom_end: Last day of a custom range (YYYY-MM-DD).
        now: Reference instant. Defaults to the current time. A naive value
            is read as wall-clock time in ``timezone_str``.
        timezone_str: Timezone of the custom range days and of a naive ``now``.

    Returns:
        Filtered readings.

    Raises:
        ValidationError: If a custom range date cannot be parsed.
    """
    key = _period_key(period)

    if key == Period.CUSTOM.value:
        if not custom_start or not custom_end:
            return list(readings)
        try:
            start_ms, end_ms = day_bounds_ms(custom_start, custom_end, timezone_str)
        except (ValueError, OverflowError) as e:
            raise ValidationError(f"Invalid custom range {custom_start!r} to {custom_end!r}: {e}") from e
        return [r for r in readings if start_ms <= r.timestamp <= end_ms]

    days = PERIOD_DAYS.get(key)
    if days is None:
        logger.debug(f"Unknown period '{key}', returning all readings")
        return list(readings)

    if now is None:
        reference = datetime.now(timezone.utc)
    else:
        reference = make_timezone_aware(now, timezone_str, assume_local=True)
    start_ms = to_epoch_ms(reference) - days * MS_PER_DAY
    return [r for r in readings if r.timestamp >= start_ms]


def period_label(
    period: Period | str, custom_start: str | None = None, custom_end: str | None = None
) -> str:
    """Human-readable description of a period, as printed on the report."""
    key = _period_key(period)
    if key == Period.CUSTOM.value:
        return f"{custom_start or ''} to {custom_end or ''}"
    return PERIOD_LABELS.get(key, "")
