"""Squarespace Commerce API client for fetching orders."""

import logging
from typing import Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from app.config import Settings
from app.errors import UpstreamError
from app.models.order import SquarespaceOrder, SquarespaceOrdersResponse

logger = logging.getLogger(__name__)


class SquarespaceClient:
    """Client for the Squarespace Commerce orders endpoint."""

    def __init__(
        self,
        api_key: str,
        orders_url: str,
        timeout: float = 20.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        if not api_key:
            raise ValueError("SQSPACE_API_KEY must be set in environment variables")
        self.orders_url = orders_url
        self.client = httpx.Client(
            headers={
                "Authorization": f"Bearer {api_key}",
                "Accept": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "SquarespaceClient":
        return cls(
            api_key=settings.sqspace_api_key,
            orders_url=settings.sqspace_orders_url,
            timeout=settings.sqspace_timeout_seconds,
        )

    def close(self) -> None:
        self.client.close()

    def fetch_orders(self) -> list[SquarespaceOrder]:
        """
        Fetch the current order listing in a single GET.

        Returns:
            Orders in the order Squarespace returned them.

        Raises:
            UpstreamError: on connection failure, timeout, non-2xx status, or a
                body that is not a valid orders listing.
        """
        try:
            resp = self.client.get(self.orders_url)
        except httpx.HTTPError as exc:
            logger.error(f"Error making request to Squarespace: {exc}")
            raise UpstreamError("Error validating order") from exc

        if not resp.is_success:
            logger.error(
                f"Request to Squarespace failed with status code {resp.status_code}"
            )
            raise UpstreamError("Error validating order")

        try:
            data = SquarespaceOrdersResponse.model_validate_json(resp.content)
        except PydanticValidationError as exc:
            logger.error(f"Error parsing Squarespace orders JSON: {exc}")
            raise UpstreamError("Error validating order") from exc

        if data.pagination and data.pagination.get("hasNextPage"):
            logger.info("Squarespace returned more orders than fit in one page")

        return data.result
