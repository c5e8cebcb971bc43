"""Swap preparation: turns an accepted quote into an executable transaction.

Pure request/response orchestration. Nothing is signed or broadcast here.

Error boundary for 2xx bodies: a body is a provider business error when
- it has a truthy "error" field, or
- it has a numeric "statusCode" >= 400, or
- it has "statusCode" or "message" but no transaction container
  ("transaction", "tx", "transactionRequest").
A "statusCode" below 400 next to a transaction container is a success.
"""

import logging
from typing import Any, Optional

from swapbridge.bridge.base import PreparedTransaction, RouteRequest
from swapbridge.bridge.client import RubicClient
from swapbridge.bridge.extractors import (
    TRANSACTION_CONTAINERS,
    TransactionExtractor,
    create_default_extractor,
)
from swapbridge.bridge.serialization import serialize_swap_request
from swapbridge.chains import get_chain_family, get_wallet_network
from swapbridge.errors import AddressResolutionError, NoRouteAvailableError, SwapPreparationError
from swapbridge.wallet.address import AddressResolver, is_placeholder_address

logger = logging.getLogger(__name__)


def _as_status_code(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value)
    return None


def _error_text(value: Any) -> str:
    if isinstance(value, dict):
        return str(value.get("message") or value.get("reason") or value)
    return str(value)


def detect_provider_error(body: Any, quote_id: Optional[str] = None) -> Optional[SwapPreparationError]:
    """Return the business error carried by a 2xx swap body, if any."""
    if not isinstance(body, dict):
        return None

    provider = body.get("providerType") or body.get("provider")
    has_transaction = any(isinstance(body.get(c), dict) for c in TRANSACTION_CONTAINERS)
    status_code = _as_status_code(body.get("statusCode"))

    if body.get("error"):
        error = body["error"]
        code = status_code
        if code is None and isinstance(error, dict):
            code = _as_status_code(error.get("code"))
        return SwapPreparationError(
            _error_text(error), status_code=code, quote_id=quote_id, provider=provider, raw=body
        )

    if status_code is not None and status_code >= 400:
        return SwapPreparationError(
            str(body.get("message") or "Provider returned an error status"),
            status_code=status_code,
            quote_id=quote_id,
            provider=provider,
            raw=body,
        )

    if not has_transaction and ("statusCode" in body or "message" in body):
        return SwapPreparationError(
            str(body.get("message") or f"Unexpected status {body.get('statusCode')}"),
            status_code=status_code,
            quote_id=quote_id,
            provider=provider,
            raw=body,
        )

    return None


def _is_empty(body: Any) -> bool:
    if body is None:
        return True
    if isinstance(body, (dict, list, str)):
        return not body
    return False


class SwapPreparer:
    """Prepares swap transactions for accepted quotes."""

    def __init__(
        self,
        client: RubicClient,
        resolvers: dict,
        extractor: Optional[TransactionExtractor] = None,
    ):
        """Initialize swap preparer.

        Args:
            client: Aggregator client
            resolvers: WalletNetwork -> AddressResolver
            extractor: Transaction extractor (default: known provider strategies)
        """
        self.client = client
        self.resolvers = resolvers
        self.extractor = extractor or create_default_extractor()

    def _resolve_sender(self, request: RouteRequest) -> str:
        network = get_wallet_network(request.src_chain)
        resolver: Optional[AddressResolver] = self.resolvers.get(network)
        if resolver is None:
            if request.wallet_address and not is_placeholder_address(request.wallet_address):
                return request.wallet_address
            raise AddressResolutionError(network.value, ["explicit"] if request.wallet_address else [])
        return resolver.resolve(request.wallet_address)

    def _resolve_receiver(self, request: RouteRequest, receiver: Optional[str]) -> Optional[str]:
        """Replace a placeholder receiver with the destination-chain wallet."""
        if receiver is None or not is_placeholder_address(receiver):
            return receiver

        network = get_wallet_network(request.dst_chain)
        resolver: Optional[AddressResolver] = self.resolvers.get(network)
        if resolver is None:
            raise AddressResolutionError(network.value, ["explicit"])
        return resolver.resolve(receiver)

    async def prepare(
        self,
        quote_id: str,
        request: RouteRequest,
        receiver: Optional[str] = None,
        provider: Optional[str] = None,
    ) -> PreparedTransaction:
        """Prepare the transaction for a quote.

        Args:
            quote_id: Quote id exactly as returned by the quote endpoint
            request: The route parameters the quote was made for
            receiver: Destination address (defaults to the sender; placeholders
                are replaced by the destination-chain wallet)
            provider: Provider of the quote, if known

        Returns:
            PreparedTransaction ready for an external signer

        Raises:
            AddressResolutionError: If no sender or usable receiver is available
            QuoteProviderError: On a non-2xx response
            SwapPreparationError: If the provider reports an error
            NoRouteAvailableError: If the provider returned an empty body
            MalformedTransactionError: If the transaction cannot be extracted
        """
        sender = self._resolve_sender(request)
        receiver = self._resolve_receiver(request, receiver)
        body = serialize_swap_request(quote_id, request, from_address=sender, receiver=receiver)

        logger.info(
            f"Preparing swap for quote {quote_id}: {request.src_chain} -> {request.dst_chain}"
        )
        response = await self.client.swap(body)

        if isinstance(response, dict):
            provider = provider or response.get("providerType") or response.get("provider")
        provider = str(provider or "")

        chain_family = get_chain_family(request.src_chain)

        if provider and self.extractor.requires_manual_construction(provider):
            logger.info(f"Quote {quote_id} via {provider} needs manual construction")
            return self.extractor.extract(
                provider,
                response,
                chain_family=chain_family,
                quote_id=quote_id,
                src_asset=request.src_token_address,
                dst_asset=request.dst_token_address,
            )

        error = detect_provider_error(response, quote_id=quote_id)
        if error is not None:
            logger.warning(str(error))
            raise error

        if _is_empty(response):
            raise NoRouteAvailableError(
                f"Provider returned an empty swap response for {request.src_chain} -> "
                f"{request.dst_chain}",
                quote_id=quote_id,
            )

        prepared = self.extractor.extract(
            provider,
            response,
            chain_family=chain_family,
            quote_id=quote_id,
            src_asset=request.src_token_address,
            dst_asset=request.dst_token_address,
        )
        logger.info(
            f"Prepared {prepared.chain_family.value} transaction for quote {quote_id}"
            + (f" to {prepared.to}" if prepared.to else "")
        )
        return prepared
