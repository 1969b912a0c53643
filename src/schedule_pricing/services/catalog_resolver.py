"""
Catalog Resolver - turns product references into priceable items.

Resolution order:
1. One catalog call prices every product in the requested currency
2. One schedule call per product, run concurrently, supplies its
   weekly flags from the "Daily" schedule record

Any failure aborts the whole batch; sibling lookups still in flight are
cancelled and nothing partial is returned.
"""
import asyncio
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Optional

import structlog

from ..engine.models import ItemInput, WeeklySchedule, to_decimal
from .catalog_client import CatalogClient, ResolutionError

log = structlog.get_logger(__name__)

DAILY_SCHEDULE_TYPE = "Daily"


@dataclass(frozen=True)
class ProductLine:
    """A requested product and the currency it is billed in."""
    reference: str
    currency: str


@dataclass(frozen=True)
class _PricedLine:
    reference: str
    description: Optional[str]
    unit_price: Decimal


def _price_line(line: ProductLine, products: dict) -> _PricedLine:
    product = products.get(line.reference)
    if product is None:
        raise ResolutionError(
            f"eSuite product lookup could not find productReference: {line.reference}"
        )

    pricing = next(
        (
            price for price in product.get("pricing") or []
            if isinstance(price, dict) and price.get("currency") == line.currency
        ),
        None,
    )
    if pricing is None:
        raise ResolutionError(
            f"eSuite product lookup could not find currency match for productReference: {line.reference}"
        )

    try:
        unit_price = to_decimal(pricing.get("amount"))
    except (InvalidOperation, TypeError, ValueError):
        raise ResolutionError(
            f"eSuite product lookup returned an invalid {line.currency} amount for productReference: {line.reference}"
        ) from None

    return _PricedLine(
        reference=line.reference,
        description=product.get("name"),
        unit_price=unit_price,
    )


def _daily_schedule(reference: str, records) -> WeeklySchedule:
    if not isinstance(records, list):
        raise ResolutionError(
            f"eSuite product schedule lookup returned undefined for productReference: {reference}"
        )

    daily = []
    for record in records:
        if not isinstance(record, dict) or record.get("scheduleType") != DAILY_SCHEDULE_TYPE:
            continue
        if not record.get("dailySchedule"):
            raise ResolutionError('No daily schedule found for the schedule type "Daily"')
        daily.append(record)

    if not daily:
        raise ResolutionError(
            f"eSuite product schedule lookup returned no daily schedule for productReference: {reference}"
        )
    return WeeklySchedule.from_mapping(daily[0]["dailySchedule"])


async def resolve_items(
    client: CatalogClient,
    lines: list[ProductLine],
    max_concurrency: int = 10,
) -> list[ItemInput]:
    """
    Resolve unit price, description and weekly schedule for each line.

    Returns items in the same order as ``lines``.

    Raises:
        ResolutionError: a product, currency or daily schedule is missing
        TransportError: the catalog could not be reached or read
    """
    products = {}
    for product in await client.fetch_products([line.reference for line in lines]):
        if isinstance(product, dict):
            products.setdefault(product.get("productReference"), product)

    priced = [_price_line(line, products) for line in lines]
    semaphore = asyncio.Semaphore(max(1, max_concurrency))

    async def attach_schedule(line: _PricedLine) -> ItemInput:
        async with semaphore:
            records = await client.fetch_schedules(line.reference)
        return ItemInput(
            reference=line.reference,
            unit_price=line.unit_price,
            schedule=_daily_schedule(line.reference, records),
            description=line.description,
        )

    tasks = [asyncio.ensure_future(attach_schedule(line)) for line in priced]
    try:
        items = await asyncio.gather(*tasks)
    except Exception:
        for task in tasks:
            task.cancel()
        raise

    log.info("catalog.resolved", items=len(items))
    return list(items)
