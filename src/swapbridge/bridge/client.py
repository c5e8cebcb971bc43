"""Rubic bridge aggregator HTTP client.

Thin async wrapper over the Rubic v2 API. Every non-2xx answer becomes a
QuoteProviderError with the status code and raw body. Nothing is retried:
a repeated quote or swap request can duplicate a monetary action and burns
provider rate budget.

API docs: https://docs.rubic.finance/
"""

import logging
from typing import Any, Optional

import httpx

from swapbridge.errors import QuoteProviderError

logger = logging.getLogger(__name__)

RUBIC_API_BASE = "https://api-v2.rubic.exchange/api"

# Extra seconds on top of the provider calculation timeout for the HTTP round trip
TIMEOUT_MARGIN_SEC = 5.0


class RubicClient:
    """Async client for the Rubic aggregator endpoints."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            base_url: API base URL (defaults to the public Rubic API)
            timeout: Lower bound for HTTP timeouts in seconds
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.base_url = (base_url or RUBIC_API_BASE).rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _headers(self) -> dict:
        return {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

    def _timeout_for(self, calculation_timeout: Optional[int]) -> float:
        if calculation_timeout is None:
            return self.timeout
        return max(self.timeout, calculation_timeout + TIMEOUT_MARGIN_SEC)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict] = None,
        json: Optional[dict] = None,
        calculation_timeout: Optional[int] = None,
    ) -> Any:
        """Send a request and return the decoded JSON body (None if empty)."""
        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self._timeout_for(calculation_timeout),
            transport=self._transport,
        ) as client:
            response = await client.request(
                method, path, params=params, json=json, headers=self._headers()
            )

        if not response.is_success:
            logger.warning(f"Rubic API error: {method} {path} -> {response.status_code}")
            raise QuoteProviderError(response.status_code, response.text, endpoint=path)

        if not response.content or not response.content.strip():
            return None
        try:
            return response.json()
        except ValueError:
            raise QuoteProviderError(
                response.status_code, f"Invalid JSON body: {response.text}", endpoint=path
            ) from None

    async def get_chains(self, include_testnets: bool = False) -> list[dict]:
        """GET /info/chains."""
        data = await self._request(
            "GET",
            "/info/chains",
            params={"includeTestnets": "true" if include_testnets else "false"},
        )
        return data or []

    async def quote_best(self, body: dict) -> Any:
        """POST /routes/quoteBest."""
        return await self._request(
            "POST", "/routes/quoteBest", json=body, calculation_timeout=body.get("timeout")
        )

    async def quote_all(self, body: dict) -> Any:
        """POST /routes/quoteAll. May answer with a list or a single object."""
        return await self._request(
            "POST", "/routes/quoteAll", json=body, calculation_timeout=body.get("timeout")
        )

    async def swap(self, body: dict) -> Any:
        """POST /routes/swap. Body shape varies by provider."""
        return await self._request(
            "POST", "/routes/swap", json=body, calculation_timeout=body.get("timeout")
        )

    async def get_status(self, src_tx_hash: str) -> Any:
        """GET /info/status."""
        return await self._request("GET", "/info/status", params={"srcTxHash": str(src_tx_hash)})
