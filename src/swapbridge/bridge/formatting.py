"""Human-readable rendering of bridge results."""

from decimal import Decimal
from typing import Optional

from swapbridge.bridge.base import PreparedTransaction, Quote, SupportedChain, TransferStatus


def _amount(value: Optional[Decimal], places: int = 8) -> str:
    if value is None:
        return "n/a"
    text = f"{value:.{places}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text or "0"


def format_chains(chains: list[SupportedChain]) -> str:
    """Render the supported chains list."""
    if not chains:
        return "No supported chains returned."

    lines = [f"Supported chains ({len(chains)}):\n"]
    for chain in chains:
        suffix = " (testnet)" if chain.testnet else ""
        lines.append(
            f"- {chain.name}{suffix}: {chain.chain_family.value}, "
            f"{len(chain.cross_chain_providers)} cross-chain / "
            f"{len(chain.on_chain_providers)} on-chain providers"
        )
    return "\n".join(lines)


def format_quote(quote: Quote, best: bool = False) -> str:
    """Render a single quote."""
    src_symbol = quote.src_asset.symbol if quote.src_asset else ""
    dst_symbol = quote.dst_asset.symbol if quote.dst_asset else ""
    marker = "[BEST] " if best else ""

    lines = [
        f"{marker}{quote.provider} ({quote.route_kind.value})",
        f"   Send: {_amount(quote.src_amount)} {src_symbol}".rstrip(),
        f"   Receive: {_amount(quote.dst_amount_estimate)} {dst_symbol}".rstrip(),
        f"   Minimum: {_amount(quote.dst_amount_min)} {dst_symbol}".rstrip(),
    ]

    if quote.dst_amount_usd is not None:
        lines.append(f"   Value: ${quote.dst_amount_usd:.2f}")
    if quote.duration_minutes is not None:
        lines.append(f"   Time: ~{quote.duration_minutes} min")

    fees = quote.fee_breakdown
    if fees.gas_fee_native or fees.gas_fee_usd:
        gas = f"   Gas fee: {_amount(fees.gas_fee_native)} {fees.gas_token_symbol}".rstrip()
        if fees.gas_fee_usd:
            gas += f" (${fees.gas_fee_usd:.2f})"
        lines.append(gas)
    if fees.percent_fee:
        lines.append(f"   Provider fee: {_amount(fees.percent_fee, 4)}%")
    if quote.price_impact_pct is not None:
        lines.append(f"   Price impact: {quote.price_impact_pct:.2f}%")

    if quote.routing_path:
        hops = " -> ".join(step.provider for step in quote.routing_path if step.provider)
        if hops:
            lines.append(f"   Route: {hops}")
    for warning in quote.warnings:
        lines.append(f"   Warning: {warning}")

    lines.append(f"   Quote ID: {quote.quote_id}")
    return "\n".join(lines)


def format_quotes(quotes: list[Quote]) -> str:
    """Render a list of quotes, first one marked as best."""
    if not quotes:
        return "No available routes found."

    lines = [f"Available routes ({len(quotes)}):\n"]
    for i, quote in enumerate(quotes):
        lines.append(format_quote(quote, best=(i == 0)))
        lines.append("")
    return "\n".join(lines).rstrip()


def format_prepared_transaction(tx: PreparedTransaction) -> str:
    """Render a prepared transaction."""
    if tx.manual_required:
        return f"Manual transaction required\n\n{tx.message}"

    lines = [
        f"Transaction ready ({tx.chain_family.value})",
        f"Provider: {tx.provider or 'unknown'}",
        f"Quote ID: {tx.quote_id}",
    ]
    if tx.to:
        lines.append(f"To: {tx.to}")
    if tx.value:
        lines.append(f"Value: {tx.value}")
    if tx.approval_address:
        lines.append(f"Approve spender first: {tx.approval_address}")
    if tx.data:
        data = tx.data if len(tx.data) <= 66 else f"{tx.data[:42]}...{tx.data[-8:]}"
        lines.append(f"Data: {data}")
    return "\n".join(lines)


def format_status(status: TransferStatus) -> str:
    """Render a transfer status."""
    state = status.state.value if status.state else (status.raw_status or "unknown")
    lines = [
        f"Status: {state.upper()}",
        f"Source tx: {status.src_tx_hash}",
    ]
    if status.dst_tx_hash:
        lines.append(f"Destination tx: {status.dst_tx_hash}")
    if status.bridge_name:
        lines.append(f"Bridge: {status.bridge_name}")
    lines.append("")
    lines.append(status.explanation)
    if status.message:
        lines.append(f"Message: {status.message}")
    if status.error:
        lines.append(f"Error: {status.error}")
    return "\n".join(lines)
