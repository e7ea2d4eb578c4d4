"""Unit tests for period filtering."""

from datetime import datetime

import pytz

from glucose_log.domain.reading import Reading, ReadingType
from glucose_log.services.filtering import Period, filter_readings, period_label
from glucose_log.utils.exceptions import ValidationError
from glucose_log.utils.timezone_utils import MS_PER_DAY, parse_datetime, to_epoch_ms

NOW = datetime(2024, 1, 31, 12, 0, 0, tzinfo=pytz.UTC)


def make_reading(reading_id: int, date: str, time: str, value: str = "100") -> Reading:
    """Build a UTC reading directly, bypassing the store."""
    return Reading(
        id=reading_id,
        date=date,
        time=time,
        value=value,
        type=ReadingType.NORMAL,
        timestamp=to_epoch_ms(parse_datetime(date, time, "UTC")),
    )


def sample_readings() -> list[Reading]:
    """Readings spread over the three months before NOW, newest first."""
    return [
        make_reading(1, "2024-01-31", "08:00"),
        make_reading(2, "2024-01-29", "12:00"),
        make_reading(3, "2024-01-25", "07:30"),
        make_reading(4, "2024-01-20", "09:00"),
        make_reading(5, "2024-01-05", "18:00"),
        make_reading(6, "2023-12-01", "08:00"),
        make_reading(7, "2023-09-01", "08:00"),
    ]


def ids(readings: list[Reading]) -> list[int]:
    """Return reading IDs in order."""
    return [r.id for r in readings]


def test_rolling_periods() -> None:
    """Test each rolling window against a fixed clock."""
    readings = sample_readings()
    expected = {
        Period.LAST_3_DAYS: [1, 2],
        Period.LAST_WEEK: [1, 2, 3],
        Period.LAST_15_DAYS: [1, 2, 3, 4],
        Period.LAST_MONTH: [1, 2, 3, 4, 5],
        Period.LAST_3_MONTHS: [1, 2, 3, 4, 5, 6],
    }

    for period, expected_ids in expected.items():
        result = ids(filter_readings(readings, period, now=NOW))
        if result != expected_ids:
            raise AssertionError(f"{period.value}: expected {expected_ids}, got {result}")


def test_rolling_window_lower_bound_is_inclusive() -> None:
    """Test that a reading exactly N days old is kept."""
    boundary = to_epoch_ms(NOW) - 3 * MS_PER_DAY
    reading = Reading(
        id=1, date="2024-01-28", time="12:00", value="90",
        type=ReadingType.FASTING, timestamp=boundary,
    )
    older = reading.model_copy(update={"id": 2, "timestamp": boundary - 1})

    result = ids(filter_readings([reading, older], "3days", now=NOW))

    if result != [1]:
        raise AssertionError(f"Expected only the boundary reading, got {result}")


def test_period_accepts_plain_strings() -> None:
    """Test that selector strings behave like the enum members."""
    readings = sample_readings()

    by_enum = filter_readings(readings, Period.LAST_WEEK, now=NOW)
    by_string = filter_readings(readings, "1week", now=NOW)

    if ids(by_enum) != ids(by_string):
        raise AssertionError("String and enum selectors disagree")


def test_custom_range_inclusive_on_both_ends() -> None:
    """Test that the custom range covers whole start and end days."""
    readings = [
        make_reading(1, "2024-01-21", "00:00"),
        make_reading(2, "2024-01-20", "23:59"),
        make_reading(3, "2024-01-10", "00:00"),
        make_reading(4, "2024-01-09", "23:59"),
    ]

    result = ids(filter_readings(readings, Period.CUSTOM, "2024-01-10", "2024-01-20", now=NOW))

    if result != [2, 3]:
        raise AssertionError(f"Expected [2, 3], got {result}")


def test_custom_range_end_stops_at_235959() -> None:
    """Test that the last included instant is 23:59:59 on the end day."""
    last_second = to_epoch_ms(parse_datetime("2024-01-20", "23:59:59", "UTC"))
    inside = Reading(
        id=1, date="2024-01-20", time="23:59", value="90",
        type=ReadingType.FASTING, timestamp=last_second,
    )
    outside = inside.model_copy(update={"id": 2, "timestamp": last_second + 1})

    result = ids(filter_readings([inside, outside], "custom", "2024-01-20", "2024-01-20"))

    if result != [1]:
        raise AssertionError(f"Expected [1], got {result}")


def test_custom_range_missing_date_returns_everything() -> None:
    """Test the fallback when only one custom date is provided."""
    readings = sample_readings()

    only_start = filter_readings(readings, Period.CUSTOM, "2024-01-10", None, now=NOW)
    only_end = filter_readings(readings, Period.CUSTOM, None, "2024-01-10", now=NOW)

    if ids(only_start) != ids(readings) or ids(only_end) != ids(readings):
        raise AssertionError("Expected the unfiltered collection when a custom date is missing")


def test_custom_range_invalid_date_raises() -> None:
    """Test that an unparseable custom date is reported."""
    try:
        filter_readings(sample_readings(), Period.CUSTOM, "not-a-date", "2024-01-10")
    except ValidationError:
        pass
    else:
        raise AssertionError("Expected ValidationError for an invalid custom date")


def test_unknown_period_returns_everything() -> None:
    """Test the fallback for unrecognized selectors."""
    readings = sample_readings()

    result = filter_readings(readings, "6weeks", now=NOW)

    if ids(result) != ids(readings):
        raise AssertionError("Expected the unfiltered collection for an unknown selector")


def test_filter_is_idempotent() -> None:
    """Test that filtering twice with the same clock changes nothing."""
    readings = sample_readings()

    for period in Period:
        once = filter_readings(readings, period, "2024-01-01", "2024-01-25", now=NOW)
        twice = filter_readings(once, period, "2024-01-01", "2024-01-25", now=NOW)
        if ids(once) != ids(twice):
            raise AssertionError(f"{period.value}: filtering is not idempotent")


def test_period_labels() -> None:
    """Test the labels printed on the report."""
    expected = {
        "3days": "Last 3 Days",
        "1week": "Last Week",
        "15days": "Last 15 Days",
        "1month": "Last Month",
        "3months": "Last 3 Months",
    }
    for period, label in expected.items():
        if period_label(period) != label:
            raise AssertionError(f"Expected {label!r} for {period}, got {period_label(period)!r}")

    custom = period_label(Period.CUSTOM, "2024-01-01", "2024-01-31")
    if custom != "2024-01-01 to 2024-01-31":
        raise AssertionError(f"Unexpected custom label: {custom!r}")

    if period_label("bogus") != "":
        raise AssertionError("Expected empty label for unknown period")


def test_naive_now_is_read_in_configured_timezone() -> None:
    """Test that a naive reference time is wall-clock time in timezone_str."""
    santiago = pytz.timezone("America/Santiago")
    naive_now = datetime(2024, 1, 31, 12, 0, 0)
    boundary = to_epoch_ms(santiago.localize(naive_now)) - 3 * MS_PER_DAY
    reading = Reading(
        id=1, date="2024-01-28", time="12:00", value="90",
        type=ReadingType.FASTING, timestamp=boundary,
    )
    older = reading.model_copy(update={"id": 2, "timestamp": boundary - 1})

    result = ids(
        filter_readings([reading, older], "3days", now=naive_now, timezone_str="America/Santiago")
    )

    if result != [1]:
        raise AssertionError(f"Expected only the boundary reading, got {result}")
