"""Serialization boundary for aggregator requests.

Coercion rules applied to every request body:
- chain names and token addresses are sent as strings, unchanged
- amounts are sent as plain decimal strings ("1000000000000000000", "0.5"),
  never floats and never exponent notation
- slippage is accepted in percent (0.01-50) and sent as a fraction (pct / 100)
- timeout is sent as an int, flags as bools
- the referrer is always stamped and is not configurable
- walletAddress / receiver are omitted when unknown
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Union

from swapbridge.bridge.base import RouteRequest

# Application identifier the aggregator uses for attribution and fee sharing
REFERRER = "swapbridge"


def slippage_to_fraction(slippage_pct: float) -> float:
    """Convert a percentage (1 = 1%) to the fraction the API expects (0.01)."""
    return float(slippage_pct) / 100


def format_amount(amount: Union[str, int, Decimal]) -> str:
    """Format an amount as a plain, non-negative decimal string.

    Raises:
        ValueError: If the amount is a float, not a number, or negative
    """
    if isinstance(amount, (float, bool)):
        raise ValueError(f"Amounts must be decimal strings, got {type(amount).__name__}")
    try:
        value = Decimal(str(amount).strip())
    except InvalidOperation:
        raise ValueError(f"Invalid amount: {amount!r}") from None
    if not value.is_finite() or value < 0:
        raise ValueError(f"Invalid amount: {amount!r}")

    text = format(value, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text or "0"


def serialize_route_request(
    request: RouteRequest,
    wallet_address: Optional[str] = None,
) -> dict[str, Any]:
    """Build the JSON body for /routes/quoteBest and /routes/quoteAll."""
    body: dict[str, Any] = {
        "srcTokenBlockchain": str(request.src_chain),
        "srcTokenAddress": str(request.src_token_address),
        "srcTokenAmount": format_amount(request.src_amount),
        "dstTokenBlockchain": str(request.dst_chain),
        "dstTokenAddress": str(request.dst_token_address),
        "referrer": REFERRER,
        "timeout": int(request.timeout_sec),
        "includeTestnets": bool(request.include_testnets),
        "showFailedRoutes": bool(request.show_failed_routes),
        "slippageTolerance": slippage_to_fraction(request.slippage_pct),
    }

    wallet = wallet_address or request.wallet_address
    if wallet:
        body["walletAddress"] = str(wallet)
    return body


def serialize_swap_request(
    quote_id: str,
    request: RouteRequest,
    from_address: str,
    receiver: Optional[str] = None,
) -> dict[str, Any]:
    """Build the JSON body for /routes/swap.

    The quote id is passed through untouched. The receiver defaults to the
    sender.
    """
    body = serialize_route_request(request, wallet_address=from_address)
    body["id"] = quote_id
    body["fromAddress"] = str(from_address)
    body["receiver"] = str(receiver or from_address)
    return body
