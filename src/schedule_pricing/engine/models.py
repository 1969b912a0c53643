"""
Data models for the schedule pricing engine.

Uses dataclasses for structured, type-safe data representation.
Money is held as Decimal and only turned into floats at the JSON edge.
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Iterator, Mapping, Optional, Union

from .periods import Weekday, format_instant

Number = Union[int, float, str, Decimal]

_WEEKDAY_NAMES = frozenset(day.value for day in Weekday)


def to_decimal(value: Number) -> Decimal:
    """Exact decimal for a price; floats go through their shortest repr."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


@dataclass(frozen=True)
class WeeklySchedule:
    """Which weekdays an item bills on."""
    monday: bool = False
    tuesday: bool = False
    wednesday: bool = False
    thursday: bool = False
    friday: bool = False
    saturday: bool = False
    sunday: bool = False

    @classmethod
    def from_mapping(cls, flags: Mapping) -> 'WeeklySchedule':
        """
        Build from a ``{weekday: bool}`` mapping.

        Keys may be Weekday members or weekday names; missing or ``None``
        flags are inactive, unknown keys are ignored.
        """
        values = {}
        for key, flag in flags.items():
            name = key.value if isinstance(key, Weekday) else str(key).strip().lower()
            if name in _WEEKDAY_NAMES:
                values[name] = bool(flag)
        return cls(**values)

    def active_days(self) -> Iterator[Weekday]:
        """Active weekdays, Monday first."""
        for day in Weekday:
            if getattr(self, day.value):
                yield day


@dataclass
class ItemInput:
    """An item to price: reference, unit price and weekly schedule."""
    reference: str
    unit_price: Decimal
    schedule: WeeklySchedule
    description: Optional[str] = None

    def __post_init__(self):
        self.unit_price = to_decimal(self.unit_price)
        if not isinstance(self.schedule, WeeklySchedule):
            self.schedule = WeeklySchedule.from_mapping(self.schedule)


@dataclass(frozen=True)
class ScheduleEntry:
    """Occurrences and price of one active weekday of an item."""
    day_of_week: Weekday
    count_of_days: int
    schedule_price: Decimal

    def to_dict(self) -> dict:
        return {
            "dayOfWeek": self.day_of_week.value,
            "countOfDays": self.count_of_days,
            "schedulePrice": float(self.schedule_price),
        }


@dataclass
class Item:
    """A priced item with its per-weekday breakdown."""
    reference: str
    unit_price: Decimal
    item_total: Decimal
    schedules: list[ScheduleEntry] = field(default_factory=list)
    description: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "itemReference": self.reference,
            "unitPrice": float(self.unit_price),
            "itemTotal": float(self.item_total),
            "schedules": [entry.to_dict() for entry in self.schedules],
        }


@dataclass
class PricingResult:
    """Complete result of a schedule pricing run."""
    period_start_date: datetime
    period_end_date: datetime
    total_price: Decimal
    items: list[Item] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to the JSON response document."""
        return {
            "periodStartDate": format_instant(self.period_start_date),
            "periodEndDate": format_instant(self.period_end_date),
            "totalPrice": float(self.total_price),
            "items": [item.to_dict() for item in self.items],
        }
