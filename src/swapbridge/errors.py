"""Error taxonomy for the bridge engine.

Generic network and timeout errors (httpx.RequestError and friends) are not
wrapped - they propagate unchanged to the caller.
"""

from typing import Any, Optional


class BridgeError(Exception):
    """Base class for all bridge engine errors."""
    pass


class AddressResolutionError(BridgeError):
    """Raised when no usable wallet address can be found."""

    def __init__(self, network: str, tried_sources: list[str]):
        self.network = network
        self.tried_sources = list(tried_sources)
        tried = ", ".join(self.tried_sources) or "none"
        super().__init__(
            f"Could not resolve a {network} wallet address (tried: {tried})"
        )


class QuoteProviderError(BridgeError):
    """Raised on any non-2xx response from the aggregator API."""

    def __init__(self, status_code: int, body: str, endpoint: str = ""):
        self.status_code = status_code
        self.body = body
        self.endpoint = endpoint
        where = f" {endpoint}" if endpoint else ""
        super().__init__(f"Rubic API error{where} ({status_code}): {body}")


class NoRouteAvailableError(BridgeError):
    """Raised when the aggregator answered successfully but has no route."""

    def __init__(self, detail: str = "No route available", quote_id: Optional[str] = None):
        self.detail = detail
        self.quote_id = quote_id
        suffix = f" (quote {quote_id})" if quote_id else ""
        super().__init__(f"{detail}{suffix}")


class SwapPreparationError(BridgeError):
    """Raised when the provider reports a business error for a swap request."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        quote_id: Optional[str] = None,
        provider: Optional[str] = None,
        raw: Any = None,
    ):
        self.message = message
        self.status_code = status_code
        self.quote_id = quote_id
        self.provider = provider
        self.raw = raw

        parts = [f"Swap preparation failed: {message}"]
        if status_code is not None:
            parts.append(f"status={status_code}")
        if provider:
            parts.append(f"provider={provider}")
        if quote_id:
            parts.append(f"quote={quote_id}")
        super().__init__(" | ".join(parts))


class MalformedTransactionError(BridgeError):
    """Raised when a successful response holds no usable transaction."""

    def __init__(
        self,
        missing_field: str,
        provider: Optional[str] = None,
        raw: Any = None,
        detail: str = "",
    ):
        self.missing_field = missing_field
        self.provider = provider
        self.raw = raw

        message = f"Transaction is missing required field '{missing_field}'"
        if provider:
            message += f" (provider: {provider})"
        if detail:
            message += f": {detail}"
        if raw is not None:
            message += f" | raw response: {raw!r}"
        super().__init__(message)
