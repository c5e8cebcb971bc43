"""Bridge aggregator facade.

Single entry point composing the quote, swap and status services. Every
call is independent; the aggregator holds no per-request state.
"""

import logging
from typing import Optional

from swapbridge.bridge.base import (
    PreparedTransaction,
    Quote,
    RouteRequest,
    SupportedChain,
    TransactionExecutor,
    TransferStatus,
)
from swapbridge.bridge.quotes import QuoteService
from swapbridge.bridge.status import StatusTracker
from swapbridge.bridge.swap import SwapPreparer
from swapbridge.errors import SwapPreparationError

logger = logging.getLogger(__name__)


class BridgeAggregator:
    """Cross-chain routing, swap preparation and transfer tracking."""

    def __init__(
        self,
        quotes: QuoteService,
        swaps: SwapPreparer,
        status: StatusTracker,
    ):
        self.quotes = quotes
        self.swaps = swaps
        self.status = status

    async def get_supported_chains(self, include_testnets: bool = False) -> list[SupportedChain]:
        """List chains supported for bridging."""
        return await self.quotes.get_supported_chains(include_testnets)

    async def get_best_quote(self, request: RouteRequest) -> Quote:
        """Get the best route for a transfer."""
        return await self.quotes.get_best_quote(request)

    async def get_all_quotes(self, request: RouteRequest) -> list[Quote]:
        """Get all routes for a transfer, best output first."""
        quotes = await self.quotes.get_all_quotes(request)
        return sorted(quotes, key=lambda q: q.dst_amount_estimate, reverse=True)

    async def prepare_swap(
        self,
        quote_id: str,
        request: RouteRequest,
        receiver: Optional[str] = None,
        provider: Optional[str] = None,
    ) -> PreparedTransaction:
        """Prepare the executable transaction for a quote."""
        return await self.swaps.prepare(quote_id, request, receiver=receiver, provider=provider)

    async def execute_swap(
        self,
        quote_id: str,
        request: RouteRequest,
        executor: TransactionExecutor,
        receiver: Optional[str] = None,
        provider: Optional[str] = None,
    ) -> tuple[PreparedTransaction, str]:
        """Prepare a swap and hand it to an external executor.

        Returns:
            (prepared transaction, source transaction hash)

        Raises:
            SwapPreparationError: If the provider needs manual construction
        """
        prepared = await self.prepare_swap(quote_id, request, receiver=receiver, provider=provider)
        if prepared.manual_required:
            raise SwapPreparationError(
                prepared.message or "Manual transaction construction required",
                quote_id=quote_id,
                provider=prepared.provider,
            )

        tx_hash = await executor.execute(prepared)
        logger.info(f"Executed swap for quote {quote_id}: {tx_hash}")
        return prepared, tx_hash

    async def get_status(self, src_tx_hash: str) -> TransferStatus:
        """Get the cross-chain status of a transfer."""
        return await self.status.get_status(src_tx_hash)
