"""
Glucose reading domain models.

This module defines the canonical schema for a blood-glucose measurement,
the draft submitted by the user, and the validated construction path that
turns one into the other.
"""

import re
from collections.abc import Callable
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from glucose_log.utils.exceptions import ValidationError
from glucose_log.utils.timezone_utils import parse_datetime, to_epoch_ms

DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")
TIME_PATTERN = re.compile(r"\d{2}:\d{2}")


class ReadingType(str, Enum):
    """Measurement context chosen at entry time."""

    FASTING = "fasting"
    NORMAL = "normal"


class ReadingStatus(str, Enum):
    """Classification band shown next to each reading in the table view."""

    LOW = "Low"
    NORMAL = "Normal"
    ELEVATED = "Elevated"
    HIGH = "High"


class ReportColor(str, Enum):
    """Color applied to a reading value in the PDF report."""

    RED = "red"
    GREEN = "green"
    YELLOW = "yellow"


class Reading(BaseModel):
    """
    One recorded blood-glucose measurement.

    ``value`` keeps the text as entered; ``timestamp`` is the epoch-millisecond
    instant derived from ``date`` and ``time`` and is the only sort/filter key.
    """

    id: int = Field(description="Creation-time derived identifier")
    date: str = Field(description="Measurement date (YYYY-MM-DD)")
    time: str = Field(description="Measurement time of day (HH:MM)")
    value: str = Field(description="Concentration in mg/dL, as entered")
    type: ReadingType = Field(description="Measurement context")
    timestamp: int = Field(description="Epoch milliseconds of date + time")

    model_config = ConfigDict(use_enum_values=True, coerce_numbers_to_str=True)

    @property
    def numeric_value(self) -> float:
        """Value interpreted as a floating-point number."""
        return float(self.value)

    def to_dict(self) -> dict[str, Any]:
        """Convert reading to its persisted dictionary representation."""
        return self.model_dump()


def _today() -> str:
    return datetime.now().strftime("%Y-%m-%d")


def _now_hhmm() -> str:
    return datetime.now().strftime("%H:%M")


class ReadingDraft(BaseModel):
    """User submission before validation. Defaults match a fresh entry form."""

    date: str = Field(default_factory=_today)
    time: str = Field(default_factory=_now_hhmm)
    value: str | float | int | None = None
    type: ReadingType = ReadingType.FASTING

    model_config = ConfigDict(use_enum_values=True)


def build_reading(
    draft: ReadingDraft, next_id: Callable[[], int], timezone_str: str = "UTC"
) -> Reading:
    """
    Validate a draft and build the stored reading.

    ``next_id`` is only called once the draft has passed validation, so a
    rejected draft never consumes an identifier.

    Args:
        draft: User-submitted reading draft.
        next_id: Source of the identifier to assign.
        timezone_str: Timezone the draft's date and time are expressed in.

    Returns:
        Validated reading with derived timestamp.

    Raises:
        ValidationError: If the value is empty or not numeric, or the date is
            not YYYY-MM-DD, or the time is not HH:MM.
    """
    value = "" if draft.value is None else str(draft.value).strip()
    if not value:
        raise ValidationError("Please enter blood sugar value")

    try:
        float(value)
    except ValueError as e:
        raise ValidationError(f"Blood sugar value must be numeric, got {value!r}") from e

    if not DATE_PATTERN.fullmatch(draft.date) or not TIME_PATTERN.fullmatch(draft.time):
        raise ValidationError(
            f"Invalid date/time {draft.date!r} {draft.time!r}: expected YYYY-MM-DD and HH:MM"
        )

    try:
        measured_at = parse_datetime(draft.date, draft.time, timezone_str)
    except (ValueError, OverflowError) as e:
        raise ValidationError(
            f"Invalid date/time {draft.date!r} {draft.time!r}: {e}"
        ) from e

    return Reading(
        id=next_id(),
        date=draft.date,
        time=draft.time,
        value=value,
        type=draft.type,
        timestamp=to_epoch_ms(measured_at),
    )
