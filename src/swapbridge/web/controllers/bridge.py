"""Bridge API endpoints.

Quotes and unsigned transactions only. Nothing is signed or broadcast
server-side.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from swapbridge.bridge.aggregator import BridgeAggregator
from swapbridge.bridge.base import RouteRequest
from swapbridge.bridge.factory import create_bridge_aggregator
from swapbridge.bridge.formatting import (
    format_chains,
    format_prepared_transaction,
    format_quote,
    format_quotes,
    format_status,
)
from swapbridge.errors import (
    AddressResolutionError,
    BridgeError,
    MalformedTransactionError,
    NoRouteAvailableError,
    QuoteProviderError,
    SwapPreparationError,
)
from swapbridge.web.contracts.bridge import (
    BridgeResponse,
    RouteRequestBody,
    SwapPrepareRequest,
    chain_to_dict,
    quote_to_dict,
    status_to_dict,
    transaction_to_dict,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bridge", tags=["bridge"])

ERROR_STATUS_CODES = {
    AddressResolutionError: 400,
    QuoteProviderError: 502,
    NoRouteAvailableError: 404,
    SwapPreparationError: 422,
    MalformedTransactionError: 502,
}


def get_aggregator() -> BridgeAggregator:
    """Aggregator dependency (overridden in tests)."""
    return create_bridge_aggregator()


def _http_error(error: BridgeError) -> HTTPException:
    status_code = ERROR_STATUS_CODES.get(type(error), 500)
    logger.warning(f"Bridge request failed ({status_code}): {error}")
    return HTTPException(status_code=status_code, detail=str(error))


def _route_request(body: RouteRequestBody) -> RouteRequest:
    try:
        return body.to_route_request()
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/chains", response_model=BridgeResponse)
async def list_chains(
    include_testnets: bool = Query(False, description="Include testnet chains"),
    aggregator: BridgeAggregator = Depends(get_aggregator),
) -> BridgeResponse:
    """List chains supported for bridging."""
    try:
        chains = await aggregator.get_supported_chains(include_testnets)
    except BridgeError as e:
        raise _http_error(e)

    return BridgeResponse(
        success=True,
        text=format_chains(chains),
        data=[chain_to_dict(c) for c in chains],
    )


@router.post("/quotes/best", response_model=BridgeResponse)
async def best_quote(
    body: RouteRequestBody,
    aggregator: BridgeAggregator = Depends(get_aggregator),
) -> BridgeResponse:
    """Get the best route for a transfer."""
    request = _route_request(body)
    try:
        quote = await aggregator.get_best_quote(request)
    except BridgeError as e:
        raise _http_error(e)

    return BridgeResponse(success=True, text=format_quote(quote, best=True), data=quote_to_dict(quote))


@router.post("/quotes", response_model=BridgeResponse)
async def all_quotes(
    body: RouteRequestBody,
    aggregator: BridgeAggregator = Depends(get_aggregator),
) -> BridgeResponse:
    """Get all routes for a transfer, best output first.

    An empty route list is a successful answer.
    """
    request = _route_request(body)
    try:
        quotes = await aggregator.get_all_quotes(request)
    except BridgeError as e:
        raise _http_error(e)

    return BridgeResponse(
        success=True,
        text=format_quotes(quotes),
        data=[quote_to_dict(q) for q in quotes],
    )


@router.post("/swaps/prepare", response_model=BridgeResponse)
async def prepare_swap(
    body: SwapPrepareRequest,
    aggregator: BridgeAggregator = Depends(get_aggregator),
) -> BridgeResponse:
    """Prepare the unsigned transaction for a quote.

    The client signs and broadcasts the returned payload itself.
    """
    request = _route_request(body)
    try:
        tx = await aggregator.prepare_swap(
            body.quote_id, request, receiver=body.receiver, provider=body.provider
        )
    except BridgeError as e:
        raise _http_error(e)

    return BridgeResponse(
        success=not tx.manual_required,
        text=format_prepared_transaction(tx),
        data=transaction_to_dict(tx),
    )


@router.get("/status/{src_tx_hash}", response_model=BridgeResponse)
async def transfer_status(
    src_tx_hash: str,
    aggregator: BridgeAggregator = Depends(get_aggregator),
) -> BridgeResponse:
    """Get the cross-chain status of a transfer."""
    try:
        status = await aggregator.get_status(src_tx_hash)
    except BridgeError as e:
        raise _http_error(e)

    return BridgeResponse(success=True, text=format_status(status), data=status_to_dict(status))
