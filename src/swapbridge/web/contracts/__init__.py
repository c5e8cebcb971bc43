"""Request and response contracts for the web layer."""

from swapbridge.web.contracts.bridge import (
    BridgeResponse,
    RouteRequestBody,
    SwapPrepareRequest,
)

__all__ = [
    "BridgeResponse",
    "RouteRequestBody",
    "SwapPrepareRequest",
]
