"""
Calendar helpers for billing periods.

Covers the two date questions the engine asks:
- Where does a period end, given a start, a length and a unit?
- How many times does a weekday fall inside an inclusive date range?

All instants are pinned to UTC. Naive datetimes are read as UTC and
aware ones are converted, so "same calendar day" always means the same
UTC date.
"""
import re
from datetime import date, datetime, time, timedelta, timezone
from enum import Enum
from typing import Union

from dateutil.relativedelta import relativedelta

from .errors import InvalidDate, InvalidPeriodUnit

InstantLike = Union[str, date, datetime]

# YYYY-MM-DDTHH:MM:SS[.fff][Z|±HH:MM]
_ISO_DATETIME = re.compile(
    r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?([Zz]|[+-]\d{2}:\d{2})?"
)


class PeriodUnit(str, Enum):
    """Unit a period length is expressed in."""
    DAY = "day"
    MONTH = "month"
    YEAR = "year"


class Weekday(str, Enum):
    """Weekday names in canonical Monday → Sunday order."""
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @property
    def number(self) -> int:
        """Value matching ``date.weekday()`` (Monday is 0)."""
        return list(Weekday).index(self)


def parse_instant(value: InstantLike) -> datetime:
    """
    Parse an ISO-8601 datetime string, date or datetime into an aware UTC datetime.

    Strings must carry a time of day; date-only text is rejected.
    Raises InvalidDate when the value cannot be read as an instant.
    """
    if isinstance(value, datetime):
        instant = value
    elif isinstance(value, date):
        instant = datetime.combine(value, time())
    elif isinstance(value, str):
        text = value.strip()
        # fromisoformat also reads date-only, basic and week-date forms
        if not _ISO_DATETIME.fullmatch(text):
            raise InvalidDate(f"Invalid date: {value!r}")
        # fromisoformat only learned the Z suffix in 3.11
        if text[-1:] in ("Z", "z"):
            text = text[:-1] + "+00:00"
        try:
            instant = datetime.fromisoformat(text)
        except ValueError:
            raise InvalidDate(f"Invalid date: {value!r}") from None
    else:
        raise InvalidDate(f"Invalid date: {value!r}")

    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def format_instant(value: datetime) -> str:
    """Render an instant as UTC ISO-8601 with milliseconds, e.g. ``2024-02-01T00:00:00.000Z``."""
    instant = parse_instant(value)
    return instant.strftime("%Y-%m-%dT%H:%M:%S") + f".{instant.microsecond // 1000:03d}Z"


def compute_end_date(start: InstantLike, length: int, unit: Union[str, PeriodUnit]) -> datetime:
    """
    Add ``length`` days, months or years to ``start``.

    Month and year steps use relativedelta, which clamps to the last day
    of the target month: Jan 31 + 1 month is Feb 29 in 2024, Feb 29 + 1
    year is Feb 28. Negative lengths move backwards.
    """
    instant = parse_instant(start)

    try:
        unit = PeriodUnit(unit)
    except ValueError:
        raise InvalidPeriodUnit(
            f'Invalid period type {unit!r}. Must be "day", "month", or "year".'
        ) from None

    if unit is PeriodUnit.DAY:
        step = relativedelta(days=length)
    elif unit is PeriodUnit.MONTH:
        step = relativedelta(months=length)
    else:
        step = relativedelta(years=length)

    try:
        return instant + step
    except (OverflowError, ValueError):
        raise InvalidDate(f"Period end date out of range for start {instant.isoformat()}") from None


def count_occurrences(
    start: InstantLike,
    end: InstantLike,
    weekday: Union[str, Weekday],
    exclude_start: bool = False,
) -> int:
    """
    Count calendar dates in ``[start, end]`` that fall on ``weekday``.

    With ``exclude_start`` the range begins the day after ``start``. An
    empty or inverted range counts zero.
    """
    first = parse_instant(start).date()
    last = parse_instant(end).date()
    day = Weekday(weekday)

    if exclude_start:
        first += timedelta(days=1)
    if first > last:
        return 0

    first_hit = first + timedelta(days=(day.number - first.weekday()) % 7)
    if first_hit > last:
        return 0
    return (last - first_hit).days // 7 + 1
