"""
eSuite catalog client - product pricing and schedule lookups.

One client is built per application from Settings and shared by every
request; credentials travel as default headers on the underlying
httpx.AsyncClient.
"""
from typing import Optional
from urllib.parse import quote

import httpx
import structlog

from ..config.settings import Settings

log = structlog.get_logger(__name__)

TRANSPORT_ERROR_MESSAGE = "error calling eSuite API"


class CatalogError(Exception):
    """Base class for catalog lookup failures."""


class ResolutionError(CatalogError):
    """A product, currency or daily schedule could not be resolved."""


class TransportError(CatalogError):
    """The catalog was unreachable or answered with something unusable."""


class CatalogClient:
    """
    Async client for the eSuite product catalog.

    ``transport`` lets tests plug in an httpx.MockTransport.
    """

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        headers = {
            "Content-Type": "application/json",
            "X-ClientId": settings.esuite_api_client,
            "X-ClientPassword": settings.esuite_api_password,
            "X-Version": settings.esuite_api_version,
        }
        self._client = httpx.AsyncClient(
            base_url=settings.esuite_api_host,
            headers=headers,
            timeout=httpx.Timeout(settings.esuite_timeout_seconds),
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def fetch_products(self, references: list[str]) -> list:
        """Fetch product records (name and per-currency pricing) for all references at once."""
        log.info("catalog.fetch_products", references=len(references))
        data = await self._get_json(
            "/api/products", params={"productReferences": references}, empty=[]
        )
        if not isinstance(data, list):
            log.error("catalog.unexpected_payload", path="/api/products", payload_type=type(data).__name__)
            raise TransportError(TRANSPORT_ERROR_MESSAGE)
        return data

    async def fetch_schedules(self, reference: str) -> Optional[list]:
        """Fetch schedule records for one product; ``None`` when the catalog has none."""
        return await self._get_json(f"/api/products/{quote(reference, safe='')}/schedules")

    async def _get_json(self, path: str, params: Optional[dict] = None, empty=None):
        try:
            response = await self._client.get(path, params=params)
        except httpx.HTTPError as exc:
            log.error("catalog.request_failed", path=path, error=str(exc))
            raise TransportError(TRANSPORT_ERROR_MESSAGE) from exc

        if response.status_code == 204:
            return empty
        if response.is_error:
            log.error("catalog.bad_status", path=path, status=response.status_code)
            raise TransportError(TRANSPORT_ERROR_MESSAGE)

        try:
            return response.json()
        except ValueError as exc:
            log.error("catalog.invalid_json", path=path)
            raise TransportError(TRANSPORT_ERROR_MESSAGE) from exc
