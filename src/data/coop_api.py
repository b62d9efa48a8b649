"""Cooperative backend client for property payment setups."""

import logging

import httpx

from src.config import settings
from src.data.payment_setup import PaymentSetupError, parse_payment_setup
from src.models.payments import PaymentSetup

logger = logging.getLogger(__name__)


class CooperativeAPIClient:
    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.coop_api_base_url).rstrip("/")
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport
        self.headers = {"Accept": "application/json"}

    async def _get(self, path: str) -> dict:
        path = path if path.startswith("/") else f"/{path}"
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            resp = await client.get(f"{self.base_url}{path}", headers=self.headers)
            resp.raise_for_status()
            return resp.json()

    async def get_payment_setup(self, property_id: str) -> PaymentSetup | None:
        """Fetch and parse the payment setup for one property.

        Returns None when the backend is unreachable, answers with an error
        status, or reports ``success: false``.
        """
        path = settings.payment_setup_path.format(property_id=property_id)
        try:
            body = await self._get(path)
        except httpx.HTTPStatusError as e:
            logger.warning("Payment setup request failed for %s: %s", property_id, e)
            return None
        except httpx.RequestError as e:
            logger.warning("Payment setup request error for %s: %s", property_id, e)
            return None
        except ValueError as e:
            logger.warning("Payment setup response for %s is not JSON: %s", property_id, e)
            return None

        if not isinstance(body, dict) or not body.get("success"):
            logger.info("Backend returned no payment setup for %s", property_id)
            return None

        data = body.get("data")
        if not data:
            return None

        try:
            return parse_payment_setup(data, property_id=str(property_id))
        except PaymentSetupError as e:
            logger.warning("Failed to parse payment setup for %s: %s", property_id, e)
            return None
