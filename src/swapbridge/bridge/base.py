"""Data model for the bridge aggregation engine."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional

from swapbridge.chains import ChainFamily, family_for_chain_type
from swapbridge.errors import MalformedTransactionError

logger = logging.getLogger(__name__)

# Sentinel token address for a chain's native asset
NATIVE_TOKEN_ADDRESS = "0x0000000000000000000000000000000000000000"

# Request bounds
MIN_SLIPPAGE_PCT = 0.01
MAX_SLIPPAGE_PCT = 50.0
MIN_TIMEOUT_SEC = 5
MAX_TIMEOUT_SEC = 60


def to_decimal(value: Any, default: Decimal = Decimal("0")) -> Decimal:
    """Convert an API number/string to Decimal, falling back to default."""
    if value is None or isinstance(value, bool):
        return default
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return default


class RouteKind(str, Enum):
    """Whether a route stays on one chain or crosses chains."""
    SAME_CHAIN = "same-chain"
    CROSS_CHAIN = "cross-chain"

    @classmethod
    def from_swap_type(cls, swap_type: Optional[str]) -> "RouteKind":
        """Map Rubic's swapType ('on-chain' / 'cross-chain')."""
        if swap_type and swap_type.lower() in ("on-chain", "same-chain", "onchain"):
            return cls.SAME_CHAIN
        return cls.CROSS_CHAIN


class StatusState(str, Enum):
    """Lifecycle of a cross-chain transfer.

    pending -> indexing -> {success | claim | revert | failed | error}
    """
    PENDING = "pending"
    INDEXING = "indexing"
    SUCCESS = "success"
    CLAIM = "claim"      # succeeded, user must claim on destination
    REVERT = "revert"
    FAILED = "failed"
    ERROR = "error"      # outcome unknown, see message/error

    @property
    def is_terminal(self) -> bool:
        return self not in (StatusState.PENDING, StatusState.INDEXING)

    @property
    def is_success(self) -> bool:
        return self in (StatusState.SUCCESS, StatusState.CLAIM)

    @property
    def is_failure(self) -> bool:
        return self in (StatusState.REVERT, StatusState.FAILED)


@dataclass(frozen=True)
class ChainAsset:
    """A token on a specific chain."""

    address: str
    chain: str
    chain_id: Optional[int] = None
    decimals: int = 18
    symbol: str = ""
    name: str = ""
    price_usd: Optional[Decimal] = None
    amount: Optional[Decimal] = None  # set when the asset appears inside a quote

    @property
    def is_native(self) -> bool:
        return self.address.lower() == NATIVE_TOKEN_ADDRESS

    @classmethod
    def from_api(cls, data: Optional[dict]) -> Optional["ChainAsset"]:
        """Build from a Rubic token object (blockchain/blockchainId/price)."""
        if not data:
            return None
        price = data.get("price")
        amount = data.get("amount")
        return cls(
            address=str(data.get("address", "")),
            chain=str(data.get("blockchain", "")),
            chain_id=data.get("blockchainId"),
            decimals=int(data.get("decimals") or 0),
            symbol=str(data.get("symbol", "")),
            name=str(data.get("name", "")),
            price_usd=to_decimal(price) if price is not None else None,
            amount=to_decimal(amount) if amount is not None else None,
        )


@dataclass(frozen=True)
class RouteRequest:
    """A desired transfer. Built per call, never persisted.

    Amounts are decimal strings in token units (e.g. "1.5"), slippage is in
    percent as the caller thinks of it; conversion to the wire format happens
    in swapbridge.bridge.serialization.
    """

    src_token_address: str
    src_chain: str
    src_amount: str
    dst_token_address: str
    dst_chain: str
    wallet_address: Optional[str] = None
    slippage_pct: float = 1.0
    include_testnets: bool = False
    show_failed_routes: bool = False
    timeout_sec: int = 30

    def __post_init__(self):
        if not MIN_SLIPPAGE_PCT <= self.slippage_pct <= MAX_SLIPPAGE_PCT:
            raise ValueError(
                f"slippage_pct must be between {MIN_SLIPPAGE_PCT} and {MAX_SLIPPAGE_PCT}, "
                f"got {self.slippage_pct}"
            )
        if not MIN_TIMEOUT_SEC <= self.timeout_sec <= MAX_TIMEOUT_SEC:
            raise ValueError(
                f"timeout_sec must be between {MIN_TIMEOUT_SEC} and {MAX_TIMEOUT_SEC}, "
                f"got {self.timeout_sec}"
            )
        if isinstance(self.src_amount, float):
            raise ValueError("src_amount must be a decimal string, not a float")
        amount = to_decimal(self.src_amount, default=Decimal("-1"))
        if not amount.is_finite() or amount < 0:
            raise ValueError(f"src_amount must be a non-negative decimal, got {self.src_amount!r}")

    def with_wallet(self, wallet_address: Optional[str]) -> "RouteRequest":
        """Return a copy with the wallet address replaced."""
        return replace(self, wallet_address=wallet_address)


@dataclass
class FeeBreakdown:
    """Fees attached to a quote."""

    gas_fee_native: Decimal = Decimal("0")
    gas_fee_usd: Decimal = Decimal("0")
    percent_fee: Decimal = Decimal("0")
    gas_token_symbol: str = ""
    protocol_fee_native: Decimal = Decimal("0")


@dataclass
class RoutingStep:
    """One hop of a route."""

    provider: str
    type: str = ""
    hop_assets: list[str] = field(default_factory=list)
    amounts: list[str] = field(default_factory=list)


@dataclass
class Quote:
    """A provider's proposed route.

    quote_id is opaque: it is replayed byte-for-byte to the swap endpoint
    and never parsed.
    """

    quote_id: str
    provider: str
    route_kind: RouteKind
    src_amount: Decimal
    dst_amount_estimate: Decimal
    dst_amount_min: Decimal
    duration_minutes: Optional[int]
    price_impact_pct: Optional[Decimal]
    fee_breakdown: FeeBreakdown = field(default_factory=FeeBreakdown)
    routing_path: list[RoutingStep] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    src_asset: Optional[ChainAsset] = None
    dst_asset: Optional[ChainAsset] = None
    dst_amount_usd: Optional[Decimal] = None
    approval_address: Optional[str] = None
    raw: dict = field(default_factory=dict, repr=False)

    @property
    def src_amount_usd(self) -> Optional[Decimal]:
        """USD value of the input, when the source token price is known."""
        if self.src_asset is None or self.src_asset.price_usd is None:
            return None
        return self.src_amount * self.src_asset.price_usd

    @property
    def effective_rate(self) -> Decimal:
        """Destination units received per source unit."""
        if self.src_amount == 0:
            return Decimal("0")
        return self.dst_amount_estimate / self.src_amount


@dataclass
class PreparedTransaction:
    """An executable transaction payload for one accepted quote.

    Construction fails with MalformedTransactionError if a field that the
    chain family requires is missing, unless the provider needs manual
    construction (manual_required=True), in which case only `message` is
    meaningful.
    """

    chain_family: ChainFamily
    quote_id: str
    provider: str = ""
    src_asset: str = ""
    dst_asset: str = ""
    to: Optional[str] = None
    data: Optional[str] = None
    value: Optional[str] = None
    approval_address: Optional[str] = None
    manual_required: bool = False
    message: Optional[str] = None
    raw: Any = field(default=None, repr=False)

    def __post_init__(self):
        if self.manual_required:
            return
        required = {
            ChainFamily.ACCOUNT_BASED: ("to", "data"),
            ChainFamily.OPAQUE_PAYLOAD: ("data",),
            ChainFamily.UTXO_LIKE: ("to",),
        }[self.chain_family]
        for name in required:
            if not getattr(self, name):
                raise MalformedTransactionError(name, provider=self.provider or None, raw=self.raw)

    def to_dict(self) -> dict:
        """Convert to a JSON-friendly dict (without the raw response)."""
        return {
            "chain_family": self.chain_family.value,
            "quote_id": self.quote_id,
            "provider": self.provider,
            "src_asset": self.src_asset,
            "dst_asset": self.dst_asset,
            "to": self.to,
            "data": self.data,
            "value": self.value,
            "approval_address": self.approval_address,
            "manual_required": self.manual_required,
            "message": self.message,
        }


@dataclass
class TransferStatus:
    """Cross-chain status of a transfer, recomputed on every poll.

    state is None when the provider reported a token outside StatusState;
    raw_status always carries what the provider sent.
    """

    src_tx_hash: str
    state: Optional[StatusState]
    raw_status: str
    explanation: str
    dst_tx_hash: Optional[str] = None
    bridge_name: Optional[str] = None
    message: Optional[str] = None
    error: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.state is not None and self.state.is_terminal


@dataclass
class SupportedChain:
    """A chain listed by the aggregator's /info/chains endpoint."""

    name: str
    id: Optional[int]
    testnet: bool = False
    type: str = ""
    cross_chain_providers: list[str] = field(default_factory=list)
    on_chain_providers: list[str] = field(default_factory=list)
    proxy_available: bool = False

    @property
    def chain_family(self) -> ChainFamily:
        return family_for_chain_type(self.type)

    @classmethod
    def from_api(cls, data: dict) -> "SupportedChain":
        providers = data.get("providers") or {}
        return cls(
            name=str(data.get("name", "")),
            id=data.get("id"),
            testnet=bool(data.get("testnet", False)),
            type=str(data.get("type", "")),
            cross_chain_providers=list(providers.get("crossChain") or []),
            on_chain_providers=list(providers.get("onChain") or []),
            proxy_available=bool(data.get("proxyAvailable", False)),
        )


class TransactionExecutor(ABC):
    """Signs and broadcasts a prepared transaction.

    Implemented outside the engine by whatever chain client the host uses.
    """

    @abstractmethod
    async def execute(self, transaction: PreparedTransaction) -> str:
        """Execute the transaction and return the source tx hash."""
        pass
