"""Bridge request and response contracts."""

from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, Field

from swapbridge.bridge.base import (
    MAX_SLIPPAGE_PCT,
    MAX_TIMEOUT_SEC,
    MIN_SLIPPAGE_PCT,
    MIN_TIMEOUT_SEC,
    PreparedTransaction,
    Quote,
    RouteRequest,
    SupportedChain,
    TransferStatus,
)


def _str(value: Optional[Decimal]) -> Optional[str]:
    return None if value is None else str(value)


class RouteRequestBody(BaseModel):
    """Route parameters for quote and swap requests."""

    src_token_address: str = Field(..., description="Source token contract (native sentinel for coins)")
    src_chain: str = Field(..., description="Source blockchain (e.g., ETH, BSC, SOLANA)")
    src_amount: str = Field(..., description="Amount in token units as a decimal string")
    dst_token_address: str = Field(..., description="Destination token contract")
    dst_chain: str = Field(..., description="Destination blockchain")
    wallet_address: Optional[str] = Field(None, description="Sender wallet (resolved if omitted)")
    slippage_pct: float = Field(
        default=1.0,
        ge=MIN_SLIPPAGE_PCT,
        le=MAX_SLIPPAGE_PCT,
        description="Slippage tolerance in percent",
    )
    include_testnets: bool = Field(default=False)
    show_failed_routes: bool = Field(default=False)
    timeout_sec: int = Field(
        default=30,
        ge=MIN_TIMEOUT_SEC,
        le=MAX_TIMEOUT_SEC,
        description="Provider calculation timeout in seconds",
    )

    def to_route_request(self) -> RouteRequest:
        """Convert to the engine's RouteRequest (raises ValueError if invalid)."""
        return RouteRequest(
            src_token_address=self.src_token_address,
            src_chain=self.src_chain,
            src_amount=self.src_amount,
            dst_token_address=self.dst_token_address,
            dst_chain=self.dst_chain,
            wallet_address=self.wallet_address,
            slippage_pct=self.slippage_pct,
            include_testnets=self.include_testnets,
            show_failed_routes=self.show_failed_routes,
            timeout_sec=self.timeout_sec,
        )


class SwapPrepareRequest(RouteRequestBody):
    """Request to prepare the transaction for an accepted quote."""

    quote_id: str = Field(..., min_length=1, description="Quote id from a quote response")
    receiver: Optional[str] = Field(None, description="Destination address (defaults to sender)")
    provider: Optional[str] = Field(None, description="Provider of the quote, if known")


class BridgeResponse(BaseModel):
    """Envelope for every bridge endpoint."""

    success: bool = Field(..., description="Whether the operation succeeded")
    text: str = Field("", description="Human-readable rendering")
    data: Any = Field(None, description="Structured result")


def chain_to_dict(chain: SupportedChain) -> dict:
    return {
        "name": chain.name,
        "id": chain.id,
        "testnet": chain.testnet,
        "type": chain.type,
        "chain_family": chain.chain_family.value,
        "cross_chain_providers": chain.cross_chain_providers,
        "on_chain_providers": chain.on_chain_providers,
        "proxy_available": chain.proxy_available,
    }


def quote_to_dict(quote: Quote) -> dict:
    fees = quote.fee_breakdown
    return {
        "quote_id": quote.quote_id,
        "provider": quote.provider,
        "route_kind": quote.route_kind.value,
        "src_amount": _str(quote.src_amount),
        "src_symbol": quote.src_asset.symbol if quote.src_asset else None,
        "dst_amount_estimate": _str(quote.dst_amount_estimate),
        "dst_amount_min": _str(quote.dst_amount_min),
        "dst_symbol": quote.dst_asset.symbol if quote.dst_asset else None,
        "dst_amount_usd": _str(quote.dst_amount_usd),
        "duration_minutes": quote.duration_minutes,
        "price_impact_pct": _str(quote.price_impact_pct),
        "fees": {
            "gas_fee_native": _str(fees.gas_fee_native),
            "gas_fee_usd": _str(fees.gas_fee_usd),
            "gas_token_symbol": fees.gas_token_symbol,
            "percent_fee": _str(fees.percent_fee),
            "protocol_fee_native": _str(fees.protocol_fee_native),
        },
        "routing_path": [
            {"provider": step.provider, "type": step.type, "hop_assets": step.hop_assets}
            for step in quote.routing_path
        ],
        "warnings": quote.warnings,
        "approval_address": quote.approval_address,
    }


def transaction_to_dict(tx: PreparedTransaction) -> dict:
    return tx.to_dict()


def status_to_dict(status: TransferStatus) -> dict:
    return {
        "src_tx_hash": status.src_tx_hash,
        "state": status.state.value if status.state else None,
        "raw_status": status.raw_status,
        "is_terminal": status.is_terminal,
        "explanation": status.explanation,
        "dst_tx_hash": status.dst_tx_hash,
        "bridge_name": status.bridge_name,
        "message": status.message,
        "error": status.error,
    }
