"""
Summary statistics and classification bands for glucose readings.

Two classification policies exist side by side: the status shown in the
readings table and the color used in the PDF report. They are defined
independently and kept as separate functions even where their bands line up.
"""

from decimal import ROUND_HALF_UP, Decimal

import pandas as pd
from pydantic import BaseModel

from glucose_log.domain.reading import Reading, ReadingStatus, ReportColor

LOW_THRESHOLD = 70.0
NORMAL_UPPER = 100.0
HIGH_THRESHOLD = 180.0


class ReadingStats(BaseModel):
    """Average, minimum and maximum over a set of readings."""

    avg: float = 0.0
    min: float = 0.0
    max: float = 0.0
    count: int = 0


def calculate_stats(readings: list[Reading]) -> ReadingStats:
    """
    Compute summary statistics.

    Args:
        readings: Readings to summarize.

    Returns:
        Stats with the mean rounded half up to one decimal place. All zeros when
        ``readings`` is empty.
    """
    if not readings:
        return ReadingStats()

    values = pd.Series([r.numeric_value for r in readings], dtype="float64")
    return ReadingStats(
        avg=float(Decimal(float(values.mean())).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)),
        min=float(values.min()),
        max=float(values.max()),
        count=len(values),
    )


def reading_status(value: float) -> ReadingStatus:
    """Table status: Low below 70, High above 180, Elevated above 100."""
    if value < LOW_THRESHOLD:
        return ReadingStatus.LOW
    if value > HIGH_THRESHOLD:
        return ReadingStatus.HIGH
    if value > NORMAL_UPPER:
        return ReadingStatus.ELEVATED
    return ReadingStatus.NORMAL


def report_color(value: float) -> ReportColor:
    """Report color: red outside 70..180, green for 70..100, yellow otherwise."""
    if value < LOW_THRESHOLD or value > HIGH_THRESHOLD:
        return ReportColor.RED
    if LOW_THRESHOLD <= value <= NORMAL_UPPER:
        return ReportColor.GREEN
    return ReportColor.YELLOW


def format_number(value: float) -> str:
    """Format a value at full precision, without a trailing ``.0`` for whole numbers."""
    text = str(float(value))
    return text[:-2] if text.endswith(".0") else text
