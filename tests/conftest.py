"""Shared fixtures: a fake eSuite catalog served through httpx.MockTransport."""
import asyncio
from urllib.parse import unquote

import httpx
import pytest
from fastapi.testclient import TestClient

from schedule_pricing.api.main import create_app
from schedule_pricing.config.settings import Settings
from schedule_pricing.engine import PricingEngine
from schedule_pricing.services.catalog_client import CatalogClient

ESUITE_HOST = "https://esuite.test"


WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


def daily(*active) -> dict:
    """A "Daily" schedule record with the given weekdays switched on."""
    return {"scheduleType": "Daily", "dailySchedule": {day: day in active for day in WEEKDAYS}}


class FakeCatalog:
    """
    In-memory eSuite catalog.

    ``schedules`` maps a product reference to a list of schedule records,
    ``None`` (served as 204), an httpx.Response, or an exception to raise.
    """

    def __init__(self, products=None, schedules=None, delay: float = 0.0):
        self.products = products if products is not None else []
        self.schedules = schedules if schedules is not None else {}
        self.products_response = None
        self.delay = delay
        self.requests = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        parts = request.url.raw_path.decode("ascii").split("?")[0].split("/")

        if request.url.path == "/api/products":
            if isinstance(self.products_response, Exception):
                raise self.products_response
            if self.products_response is not None:
                return self.products_response
            return httpx.Response(200, json=self.products)

        reference = unquote(parts[3])
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
        finally:
            self.in_flight -= 1

        value = self.schedules.get(reference, [])
        if value is None:
            return httpx.Response(204)
        if isinstance(value, Exception):
            raise value
        if isinstance(value, httpx.Response):
            return value
        return httpx.Response(200, json=value)


@pytest.fixture
def engine():
    return PricingEngine()


@pytest.fixture
def esuite_settings():
    return Settings(
        esuite_api_host=ESUITE_HOST,
        esuite_api_client="client-id",
        esuite_api_password="client-secret",
        esuite_api_version="2",
        rate_limit_enabled=False,
    )


@pytest.fixture
def catalog():
    return FakeCatalog(
        products=[
            {
                "productReference": "DAILY-PAPER",
                "name": "Daily Paper",
                "pricing": [{"currency": "GBP", "amount": 10}, {"currency": "USD", "amount": 12.5}],
            },
            {
                "productReference": "WEEKEND-MAG",
                "name": "Weekend Magazine",
                "pricing": [{"currency": "GBP", "amount": 2.5}],
            },
        ],
        schedules={
            "DAILY-PAPER": [{"scheduleType": "Weekly", "weeklySchedule": {}}, daily("monday")],
            "WEEKEND-MAG": [daily()],
        },
    )


@pytest.fixture
def catalog_client(esuite_settings, catalog):
    return CatalogClient(esuite_settings, transport=httpx.MockTransport(catalog.handler))


@pytest.fixture
def client(esuite_settings, catalog_client):
    return TestClient(create_app(settings=esuite_settings, catalog_client=catalog_client))
