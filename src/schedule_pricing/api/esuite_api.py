"""
eSuite API - catalog-driven pricing endpoint.

Unit prices and weekly schedules come from the eSuite catalog. The period
always starts now and skips the current day. Billing and customer fields
on the request are accepted but not used for pricing.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from ..config.settings import Settings
from ..engine import PeriodUnit, PricingError
from ..services.catalog_client import TRANSPORT_ERROR_MESSAGE, CatalogClient, ResolutionError, TransportError
from ..services.catalog_resolver import ProductLine, resolve_items
from .errors import error_response
from .state import engine

log = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/v1", tags=["esuite"])


class FrequencyPeriodType(str, Enum):
    DAYS = "Days"
    MONTHS = "Months"
    YEARS = "Years"

    @property
    def unit(self) -> PeriodUnit:
        return {
            FrequencyPeriodType.DAYS: PeriodUnit.DAY,
            FrequencyPeriodType.MONTHS: PeriodUnit.MONTH,
            FrequencyPeriodType.YEARS: PeriodUnit.YEAR,
        }[self]


# Pydantic models for API
class CustomParameter(BaseModel):
    ParameterReference: str
    ParameterName: str
    ParameterValue: str


class ProductReferenceRequest(BaseModel):
    ProductId: Optional[int] = None
    ProductReference: str
    grossAmount: Optional[float] = None
    netAmount: Optional[float] = None
    taxAmount: Optional[float] = None
    Currency: str
    CustomProductParameters: Optional[list[CustomParameter]] = None
    CustomLineItemParameters: Optional[list[CustomParameter]] = None


class AddressRequest(BaseModel):
    HouseName: str
    HouseNumber: str
    Street: str
    TownCity: str
    State: str
    County: str
    PostCode: str
    Country: str
    IsDefault: bool
    DefaultInvoice: bool
    DefaultShipping: bool


class EsuiteCalcRequest(BaseModel):
    """Pricing update request as sent by eSuite."""
    AccountId: Optional[int] = None
    AccountReference: Optional[str] = None
    ClientUserId: Optional[str] = None
    EmailAddress: Optional[str] = None
    PaymentMethod: Optional[str] = None
    Currency: Optional[str] = None
    ServiceId: Optional[int] = None
    ContractReference: Optional[str] = None
    FrequencyUnit: int
    FrequencyPeriod: FrequencyPeriodType
    cartReference: Optional[str] = None
    ProductReferences: list[ProductReferenceRequest]
    Address: Optional[AddressRequest] = None
    CustomSubscriptionParameters: Optional[list[CustomParameter]] = None


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def get_catalog_client(request: Request) -> CatalogClient:
    return request.app.state.catalog_client


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


@router.post("/esuite-calc-schedule-price")
async def esuite_calc_schedule_price(
    req: EsuiteCalcRequest,
    client: CatalogClient = Depends(get_catalog_client),
    settings: Settings = Depends(get_app_settings),
):
    """Resolve catalog prices and schedules, then price each product from now."""
    lines = [ProductLine(reference=p.ProductReference, currency=p.Currency) for p in req.ProductReferences]

    try:
        items = await resolve_items(client, lines, max_concurrency=settings.esuite_max_concurrency)
        result = engine.run(
            period_start=utcnow(),
            period_length=req.FrequencyUnit,
            period_unit=req.FrequencyPeriod.unit,
            items=items,
            exclude_start=True,
        )
    except TransportError:
        log.exception("esuite_calc.transport_failed")
        return error_response(500, TRANSPORT_ERROR_MESSAGE)
    except (ResolutionError, PricingError) as exc:
        log.warning("esuite_calc.failed", error=str(exc))
        return error_response(500, str(exc))

    log.info("esuite_calc.calculated", products=len(result.items), total=str(result.total_price))
    return {
        "productReferences": [
            {
                "productReference": item.reference,
                "grossAmount": float(item.item_total),
                "netAmount": float(item.item_total),
                "taxAmount": 0.0,
                "description": item.description,
            }
            for item in result.items
        ]
    }
