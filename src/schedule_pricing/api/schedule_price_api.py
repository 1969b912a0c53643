"""
Schedule Price API - direct-input pricing endpoint.

The caller supplies the period, unit prices and weekly schedules; nothing
is looked up.
"""
from typing import Optional

import structlog
from fastapi import APIRouter
from pydantic import BaseModel, field_validator
from pydantic_core import PydanticCustomError

from ..engine import ItemInput, PeriodUnit, PricingError, WeeklySchedule
from ..engine.periods import parse_instant
from .errors import GENERIC_ERROR_MESSAGE, error_response
from .state import engine

log = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/v1", tags=["schedule-price"])


# Pydantic models for API
class ScheduleFlags(BaseModel):
    """Weekdays the item bills on; omitted days are inactive."""
    monday: Optional[bool] = None
    tuesday: Optional[bool] = None
    wednesday: Optional[bool] = None
    thursday: Optional[bool] = None
    friday: Optional[bool] = None
    saturday: Optional[bool] = None
    sunday: Optional[bool] = None


class ScheduleItemRequest(BaseModel):
    itemReference: str
    unitPrice: float
    schedule: ScheduleFlags


class CalculateScheduleRequest(BaseModel):
    """Request model for the direct-input calculation."""
    periodStartDate: str
    periodLength: int
    periodType: PeriodUnit
    excludeCurrentDay: Optional[bool] = None
    items: list[ScheduleItemRequest]

    @field_validator("periodStartDate")
    @classmethod
    def _iso_datetime(cls, value: str) -> str:
        try:
            parse_instant(value)
        except PricingError:
            raise PydanticCustomError("datetime_string", "Invalid datetime string!") from None
        return value


@router.post("/calculate-schedule-price")
async def calculate_schedule_price(req: CalculateScheduleRequest):
    """Price the items over the requested period."""
    items = [
        ItemInput(
            reference=item.itemReference,
            unit_price=item.unitPrice,
            schedule=WeeklySchedule.from_mapping(item.schedule.model_dump()),
        )
        for item in req.items
    ]

    try:
        result = engine.run(
            period_start=req.periodStartDate,
            period_length=req.periodLength,
            period_unit=req.periodType,
            items=items,
            exclude_start=bool(req.excludeCurrentDay),
        )
    except PricingError:
        log.exception("schedule_price.failed")
        return error_response(500, GENERIC_ERROR_MESSAGE)

    log.info("schedule_price.calculated", items=len(result.items), total=str(result.total_price))
    return result.to_dict()
