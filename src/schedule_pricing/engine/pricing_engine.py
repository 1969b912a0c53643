"""
Schedule Pricing Engine - prices weekday-scheduled items over a period.

Pipeline for one run:
1. Derive the period end from start + length + unit
2. For each item, count every active weekday inside the period
3. Price each weekday as unit price × occurrences, rounded to cents
4. Total the item, falling back to the unit price when nothing was billed
5. Total all items, rounded to cents

Rounding is half away from zero on exact decimals, applied the same way
at every step.
"""
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable, Union

import structlog

from .errors import InvalidAmount
from .models import Item, ItemInput, Number, PricingResult, ScheduleEntry, to_decimal
from .periods import InstantLike, PeriodUnit, compute_end_date, count_occurrences, parse_instant

log = structlog.get_logger(__name__)

CENT = Decimal("0.01")


def round2(value: Number) -> Decimal:
    """
    Round to 2 decimal places, half away from zero.

    Raises InvalidAmount when the value has too many integer digits for
    the decimal context, or is infinite.
    """
    try:
        return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise InvalidAmount(f"Amount cannot be rounded to cents: {value!r}") from None


def price_schedule(unit_price: Number, occurrences: int) -> Decimal:
    """Price one weekday of one item."""
    return round2(to_decimal(unit_price) * occurrences)


def expand_item(
    item: ItemInput,
    period_start: InstantLike,
    period_end: InstantLike,
    exclude_start: bool = False,
) -> Item:
    """
    Expand an item's weekly schedule into priced weekday entries.

    The item total is the rounded sum of its weekday prices when that sum
    is positive. Otherwise, including when no weekday is active at all,
    the unit price itself is used unrounded.
    """
    schedules = []
    total = Decimal("0")

    for day in item.schedule.active_days():
        count = count_occurrences(period_start, period_end, day, exclude_start)
        entry = ScheduleEntry(
            day_of_week=day,
            count_of_days=count,
            schedule_price=price_schedule(item.unit_price, count),
        )
        schedules.append(entry)
        total += entry.schedule_price

    item_total = round2(total) if total > 0 else item.unit_price

    return Item(
        reference=item.reference,
        unit_price=item.unit_price,
        item_total=item_total,
        schedules=schedules,
        description=item.description,
    )


def total_price(items: Iterable[Item]) -> Decimal:
    """Grand total of item totals, rounded to cents."""
    return round2(sum((item.item_total for item in items), Decimal("0")))


class PricingEngine:
    """
    Stateless pricing engine shared by the direct-input and catalog endpoints.

    A run either returns a complete PricingResult or raises; partial
    results are never produced.
    """

    def run(
        self,
        period_start: InstantLike,
        period_length: int,
        period_unit: Union[str, PeriodUnit],
        items: Iterable[ItemInput],
        exclude_start: bool = False,
    ) -> PricingResult:
        """
        Price every item over the period starting at ``period_start``.

        Args:
            period_start: ISO-8601 string or datetime the period starts at
            period_length: Signed number of period units
            period_unit: "day", "month" or "year"
            items: Items to price, in output order
            exclude_start: Skip the first day of the period when counting

        Returns:
            PricingResult with the period bounds, priced items and total

        Raises:
            InvalidDate, InvalidPeriodUnit, InvalidAmount
        """
        start: datetime = parse_instant(period_start)
        end = compute_end_date(start, period_length, period_unit)

        priced = [expand_item(item, start, end, exclude_start) for item in items]

        result = PricingResult(
            period_start_date=start,
            period_end_date=end,
            total_price=total_price(priced),
            items=priced,
        )
        log.debug(
            "pricing.calculated",
            items=len(priced),
            period_end=end.isoformat(),
            total=str(result.total_price),
        )
        return result
