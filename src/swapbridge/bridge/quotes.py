"""Quote service: requests routes from the aggregator and normalizes them.

Responses are tolerated in their variant shapes (list vs single object,
providerType vs provider) rather than rejected.
"""

import logging
from decimal import ROUND_CEILING, Decimal
from typing import Any, Optional

from swapbridge.bridge.base import (
    ChainAsset,
    FeeBreakdown,
    Quote,
    RouteKind,
    RouteRequest,
    RoutingStep,
    SupportedChain,
    to_decimal,
)
from swapbridge.bridge.client import RubicClient
from swapbridge.bridge.serialization import serialize_route_request
from swapbridge.chains import get_wallet_network
from swapbridge.errors import NoRouteAvailableError
from swapbridge.wallet.address import AddressResolver, is_placeholder_address

logger = logging.getLogger(__name__)


def normalize_quote_list(body: Any) -> list[dict]:
    """Normalize a /routes/quoteAll body into a list of route objects.

    - list              -> returned unchanged
    - object with "id"  -> wrapped in a one-element list
    - {"routes": [...]} -> the routes list
    - None, {} or []    -> []
    """
    if body is None:
        return []
    if isinstance(body, list):
        return body
    if isinstance(body, dict):
        if "id" in body:
            return [body]
        routes = body.get("routes")
        if isinstance(routes, list):
            return routes
        if not body:
            return []
    logger.warning(f"Unexpected quote list shape: {type(body).__name__}")
    return []


def _provider_name(data: dict) -> str:
    provider = data.get("providerType") or data.get("provider")
    if not provider:
        routing = data.get("routing") or []
        if routing and isinstance(routing[0], dict):
            provider = routing[0].get("provider")
    return str(provider or "unknown")


def _parse_fees(fees: Optional[dict]) -> FeeBreakdown:
    if not fees:
        return FeeBreakdown()

    gas = fees.get("gasTokenFees") or {}
    provider_fee = gas.get("provider") or {}
    protocol_fee = gas.get("protocol") or {}
    native = gas.get("nativeToken") or {}
    percent = fees.get("percentFees") or {}

    return FeeBreakdown(
        gas_fee_native=to_decimal(provider_fee.get("fixedAmount")),
        gas_fee_usd=to_decimal(provider_fee.get("fixedUsdAmount")),
        percent_fee=to_decimal(percent.get("percent")),
        gas_token_symbol=str(native.get("symbol", "")),
        protocol_fee_native=to_decimal(protocol_fee.get("fixedAmount")),
    )


def _parse_routing(routing: Optional[list]) -> list[RoutingStep]:
    steps = []
    for hop in routing or []:
        if not isinstance(hop, dict):
            continue
        path = [p for p in hop.get("path") or [] if isinstance(p, dict)]
        steps.append(
            RoutingStep(
                provider=str(hop.get("provider", "")),
                type=str(hop.get("type", "")),
                hop_assets=[str(p.get("symbol", "")) for p in path],
                amounts=[str(p.get("amount", "")) for p in path],
            )
        )
    return steps


def _duration_minutes(value: Any) -> Optional[int]:
    """Whole minutes, rounded up (None if missing or invalid)."""
    if value is None:
        return None
    minutes = to_decimal(value, default=Decimal("-1"))
    if not minutes.is_finite() or minutes < 0:
        return None
    return int(minutes.to_integral_value(rounding=ROUND_CEILING))


def _parse_warnings(warnings: Optional[list]) -> list[str]:
    result = []
    for warning in warnings or []:
        if isinstance(warning, dict):
            result.append(str(warning.get("message") or warning.get("type") or warning))
        else:
            result.append(str(warning))
    return result


def normalize_quote(data: dict, request: Optional[RouteRequest] = None) -> Quote:
    """Normalize one Rubic route object into a Quote.

    Raises:
        NoRouteAvailableError: If the route has no id (a failed route)
    """
    quote_id = data.get("id")
    if not quote_id:
        raise NoRouteAvailableError(
            f"Route from {_provider_name(data)} has no quote id: {data.get('error') or data}"
        )

    estimate = data.get("estimate") or {}
    tokens = data.get("tokens") or {}
    src_asset = ChainAsset.from_api(tokens.get("from"))
    dst_asset = ChainAsset.from_api(tokens.get("to"))

    if src_asset and src_asset.amount is not None:
        src_amount = src_asset.amount
    elif request is not None:
        src_amount = to_decimal(request.src_amount)
    else:
        src_amount = Decimal("0")

    price_impact = estimate.get("priceImpact")
    duration = estimate.get("durationInMinutes")
    usd = estimate.get("destinationUsdAmount")

    return Quote(
        quote_id=str(quote_id),
        provider=_provider_name(data),
        route_kind=RouteKind.from_swap_type(data.get("swapType")),
        src_amount=src_amount,
        dst_amount_estimate=to_decimal(estimate.get("destinationTokenAmount")),
        dst_amount_min=to_decimal(estimate.get("destinationTokenMinAmount")),
        duration_minutes=_duration_minutes(duration),
        # Rubic reports price impact as a fraction
        price_impact_pct=to_decimal(price_impact) * 100 if price_impact is not None else None,
        fee_breakdown=_parse_fees(data.get("fees")),
        routing_path=_parse_routing(data.get("routing")),
        warnings=_parse_warnings(data.get("warnings")),
        src_asset=src_asset,
        dst_asset=dst_asset,
        dst_amount_usd=to_decimal(usd) if usd is not None else None,
        approval_address=(data.get("transaction") or {}).get("approvalAddress") or None,
        raw=data,
    )


class QuoteService:
    """Fetches and normalizes routes. No caching: every call goes upstream."""

    def __init__(
        self,
        client: RubicClient,
        resolvers: Optional[dict] = None,
    ):
        """Initialize quote service.

        Args:
            client: Aggregator client
            resolvers: WalletNetwork -> AddressResolver, used to fill in the
                wallet address when the request has none
        """
        self.client = client
        self.resolvers: dict = resolvers or {}

    def _resolve_wallet(self, request: RouteRequest) -> Optional[str]:
        """Resolve the wallet for the source chain.

        Quotes work without a wallet, so a failed resolution only drops the
        field.
        """
        resolver: Optional[AddressResolver] = self.resolvers.get(get_wallet_network(request.src_chain))
        if resolver is None:
            wallet = request.wallet_address
            return None if is_placeholder_address(wallet) else wallet
        wallet = resolver.try_resolve(request.wallet_address)
        if wallet is None:
            logger.warning(
                f"No wallet address for {request.src_chain}, requesting quote without one"
            )
        return wallet

    def _body(self, request: RouteRequest) -> dict:
        return serialize_route_request(request, wallet_address=self._resolve_wallet(request))

    async def get_best_quote(self, request: RouteRequest) -> Quote:
        """Get the best route for a request.

        Raises:
            NoRouteAvailableError: If the aggregator found no route
            QuoteProviderError: On a non-2xx response
        """
        logger.info(
            f"Requesting best quote: {request.src_amount} {request.src_token_address} "
            f"({request.src_chain}) -> {request.dst_token_address} ({request.dst_chain})"
        )
        data = await self.client.quote_best(self._body(request))

        if not data or not isinstance(data, dict):
            raise NoRouteAvailableError(
                f"No route found for {request.src_chain} -> {request.dst_chain}"
            )

        quote = normalize_quote(data, request)
        logger.info(
            f"Best quote from {quote.provider}: {quote.dst_amount_estimate} "
            f"(min {quote.dst_amount_min}, ~{quote.duration_minutes} min)"
        )
        return quote

    async def get_all_quotes(self, request: RouteRequest) -> list[Quote]:
        """Get every available route. An empty list means no route was found.

        Raises:
            QuoteProviderError: On a non-2xx response
        """
        logger.debug(
            f"Requesting all quotes for {request.src_chain} -> {request.dst_chain} "
            f"(slippage: {request.slippage_pct}%)"
        )
        body = await self.client.quote_all(self._body(request))

        quotes = []
        for entry in normalize_quote_list(body):
            if not isinstance(entry, dict):
                logger.warning(f"Skipping malformed route entry: {entry!r}")
                continue
            if not entry.get("id"):
                logger.warning(f"Skipping route without quote id from {_provider_name(entry)}")
                continue
            quotes.append(normalize_quote(entry, request))

        if quotes:
            logger.info(
                f"Got {len(quotes)} route(s) for {request.src_chain} -> {request.dst_chain}"
            )
        else:
            logger.info(f"No routes for {request.src_chain} -> {request.dst_chain}")
        return quotes

    async def get_supported_chains(self, include_testnets: bool = False) -> list[SupportedChain]:
        """List chains the aggregator can route between."""
        data = await self.client.get_chains(include_testnets)
        return [SupportedChain.from_api(chain) for chain in data if isinstance(chain, dict)]
