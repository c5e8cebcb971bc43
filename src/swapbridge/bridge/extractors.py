"""Transaction extraction from provider swap responses.

Providers behind the aggregator put the same fields (target contract,
calldata, value) under different keys and nesting depths. Each provider
gets a strategy: a function from the raw response to a PreparedTransaction.
Providers without a registered strategy use the default one. New providers
are supported by registering a strategy, not by branching inside one.

Strategies never guess. If a mandatory field cannot be found they raise
MalformedTransactionError.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Optional

from swapbridge.bridge.base import PreparedTransaction
from swapbridge.chains import ChainFamily
from swapbridge.errors import MalformedTransactionError

logger = logging.getLogger(__name__)

ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")

# Containers searched for quirky providers, in priority order
TRANSACTION_CONTAINERS = ("transaction", "tx", "transactionRequest")
TARGET_KEYS = ("to", "targetAddress")
DEEP_SCAN_KEYS = ("to", "targetAddress", "contractAddress")
DEEP_SCAN_MAX_DEPTH = 3

# Providers whose responses need probing
QUIRKY_PROVIDERS = ("symbiosis", "rango", "lifi", "xy", "squidrouter", "debridge", "orbiter")

# Deposit-based exchanges: the user sends funds to an address handed out by
# the exchange, there is no calldata to build
MANUAL_CONSTRUCTION_PROVIDERS = ("changenow", "simpleswap", "exolix", "changelly")

MANUAL_CONSTRUCTION_MESSAGE = (
    "{provider} requires manual transaction construction: follow the "
    "provider's deposit instructions instead of executing calldata."
)


@dataclass(frozen=True)
class ExtractionContext:
    """Identifiers carried into every PreparedTransaction."""

    provider: str = ""
    quote_id: str = ""
    src_asset: str = ""
    dst_asset: str = ""


ExtractionStrategy = Callable[[dict, ExtractionContext], PreparedTransaction]


def _non_empty(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def _approval_address(raw: dict) -> Optional[str]:
    for container in TRANSACTION_CONTAINERS:
        section = raw.get(container)
        if isinstance(section, dict) and section.get("approvalAddress"):
            return str(section["approvalAddress"])
    return None


def _transaction_section(raw: dict, context: ExtractionContext) -> dict:
    section = raw.get("transaction")
    if not isinstance(section, dict):
        raise MalformedTransactionError("transaction", provider=context.provider or None, raw=raw)
    return section


def extract_default(raw: dict, context: ExtractionContext) -> PreparedTransaction:
    """Account-based default: `to` and `data` directly on `transaction`."""
    section = _transaction_section(raw, context)

    for name in ("to", "data"):
        if not _non_empty(section.get(name)):
            raise MalformedTransactionError(name, provider=context.provider or None, raw=raw)

    return PreparedTransaction(
        chain_family=ChainFamily.ACCOUNT_BASED,
        quote_id=context.quote_id,
        provider=context.provider,
        src_asset=context.src_asset,
        dst_asset=context.dst_asset,
        to=str(section["to"]),
        data=str(section["data"]),
        value=_non_empty(section.get("value")),
        approval_address=_non_empty(section.get("approvalAddress")),
        raw=raw,
    )


def _first_field(raw: dict, keys: tuple[str, ...]) -> Optional[str]:
    """First non-empty value of `keys` across the transaction containers."""
    for container in TRANSACTION_CONTAINERS:
        section = raw.get(container)
        if not isinstance(section, dict):
            continue
        for key in keys:
            value = _non_empty(section.get(key))
            if value:
                return value
    return None


def deep_scan_address(node: Any, depth: int = 0) -> Optional[str]:
    """Find a 20-byte hex address under a target-like key, depth-limited.

    Depth 0 is the object passed in; nested objects and lists are followed up
    to DEEP_SCAN_MAX_DEPTH levels.
    """
    if depth > DEEP_SCAN_MAX_DEPTH:
        return None

    if isinstance(node, dict):
        for key in DEEP_SCAN_KEYS:
            value = node.get(key)
            if isinstance(value, str) and ADDRESS_RE.match(value):
                return value
        children = node.values()
    elif isinstance(node, list):
        children = node
    else:
        return None

    for child in children:
        if isinstance(child, (dict, list)):
            found = deep_scan_address(child, depth + 1)
            if found:
                return found
    return None


def extract_probing(raw: dict, context: ExtractionContext) -> PreparedTransaction:
    """Strategy for providers that nest or rename the transaction fields."""
    to = _first_field(raw, TARGET_KEYS)
    if to is None:
        to = deep_scan_address(raw)
        if to:
            logger.debug(f"Found target address for {context.provider} by deep scan")
    if to is None:
        raise MalformedTransactionError(
            "to",
            provider=context.provider or None,
            raw=raw,
            detail=f"no target address in {', '.join(TRANSACTION_CONTAINERS)} or nested objects",
        )

    data = _first_field(raw, ("data",))
    if data is None:
        raise MalformedTransactionError(
            "data",
            provider=context.provider or None,
            raw=raw,
            detail=f"no calldata in {', '.join(TRANSACTION_CONTAINERS)}",
        )

    return PreparedTransaction(
        chain_family=ChainFamily.ACCOUNT_BASED,
        quote_id=context.quote_id,
        provider=context.provider,
        src_asset=context.src_asset,
        dst_asset=context.dst_asset,
        to=to,
        data=data,
        value=_first_field(raw, ("value",)),
        approval_address=_approval_address(raw),
        raw=raw,
    )


def extract_opaque_payload(raw: dict, context: ExtractionContext) -> PreparedTransaction:
    """Single-blob chains: return `transaction.data` verbatim.

    The payload (usually base64) is decoded by the caller's chain client.
    """
    section = _transaction_section(raw, context)
    data = section.get("data")
    if not isinstance(data, str) or not data:
        raise MalformedTransactionError("data", provider=context.provider or None, raw=raw)

    return PreparedTransaction(
        chain_family=ChainFamily.OPAQUE_PAYLOAD,
        quote_id=context.quote_id,
        provider=context.provider,
        src_asset=context.src_asset,
        dst_asset=context.dst_asset,
        data=data,
        raw=raw,
    )


def extract_utxo(raw: dict, context: ExtractionContext) -> PreparedTransaction:
    """UTXO chains: deposit address, amount and optional memo."""
    section = _transaction_section(raw, context)
    to = _non_empty(section.get("to") or section.get("depositAddress"))
    if to is None:
        raise MalformedTransactionError("to", provider=context.provider or None, raw=raw)

    return PreparedTransaction(
        chain_family=ChainFamily.UTXO_LIKE,
        quote_id=context.quote_id,
        provider=context.provider,
        src_asset=context.src_asset,
        dst_asset=context.dst_asset,
        to=to,
        data=_non_empty(section.get("data") or section.get("memo")),
        value=_non_empty(section.get("value") or section.get("amount")),
        raw=raw,
    )


class TransactionExtractor:
    """Registry of extraction strategies keyed by provider.

    Lookup is a case-insensitive substring match of the registered key
    against the provider id, so "lifi" matches "LIFI" and "lifi_bridge".
    """

    def __init__(
        self,
        default: ExtractionStrategy = extract_default,
        manual_providers: tuple[str, ...] = MANUAL_CONSTRUCTION_PROVIDERS,
    ):
        self._default = default
        self._strategies: dict[str, ExtractionStrategy] = {}
        self._manual_providers = tuple(p.lower() for p in manual_providers)
        self._family_strategies: dict[ChainFamily, ExtractionStrategy] = {
            ChainFamily.OPAQUE_PAYLOAD: extract_opaque_payload,
            ChainFamily.UTXO_LIKE: extract_utxo,
        }

    def register(self, provider_key: str, strategy: ExtractionStrategy) -> None:
        """Register a strategy for providers whose id contains provider_key."""
        self._strategies[provider_key.lower()] = strategy

    def requires_manual_construction(self, provider_id: str) -> bool:
        """Check if a provider has no programmatic transaction path."""
        provider = (provider_id or "").lower()
        return any(key in provider for key in self._manual_providers)

    def strategy_for(self, provider_id: str) -> ExtractionStrategy:
        """Get the account-based strategy for a provider."""
        provider = (provider_id or "").lower()
        for key, strategy in self._strategies.items():
            if key in provider:
                return strategy
        return self._default

    def manual_result(
        self,
        provider_id: str,
        chain_family: ChainFamily,
        context: ExtractionContext,
        raw: Any = None,
    ) -> PreparedTransaction:
        """Informational result for providers needing manual construction."""
        return PreparedTransaction(
            chain_family=chain_family,
            quote_id=context.quote_id,
            provider=provider_id,
            src_asset=context.src_asset,
            dst_asset=context.dst_asset,
            manual_required=True,
            message=MANUAL_CONSTRUCTION_MESSAGE.format(provider=provider_id),
            raw=raw,
        )

    def extract(
        self,
        provider_id: str,
        raw: dict,
        chain_family: ChainFamily = ChainFamily.ACCOUNT_BASED,
        quote_id: str = "",
        src_asset: str = "",
        dst_asset: str = "",
    ) -> PreparedTransaction:
        """Extract the executable transaction from a swap response.

        Raises:
            MalformedTransactionError: If a mandatory field is missing
        """
        context = ExtractionContext(
            provider=provider_id or "",
            quote_id=quote_id,
            src_asset=src_asset,
            dst_asset=dst_asset,
        )

        if self.requires_manual_construction(provider_id):
            logger.info(f"{provider_id} requires manual transaction construction")
            return self.manual_result(provider_id, chain_family, context, raw)

        if not isinstance(raw, dict):
            raise MalformedTransactionError("transaction", provider=provider_id or None, raw=raw)

        strategy = self._family_strategies.get(chain_family) or self.strategy_for(provider_id)
        return strategy(raw, context)


def create_default_extractor() -> TransactionExtractor:
    """Create an extractor with the probing strategy for known quirky providers."""
    extractor = TransactionExtractor()
    for provider in QUIRKY_PROVIDERS:
        extractor.register(provider, extract_probing)
    return extractor
