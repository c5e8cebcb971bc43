"""Chain classification for the Rubic blockchain identifiers.

Rubic names chains with upper-case identifiers (ETH, BSC, POLYGON, SOLANA,
BITCOIN, ...). What the engine needs from a chain is its *family*, which
decides how a swap transaction is extracted, and the wallet network used to
resolve the sender address.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ChainFamily(str, Enum):
    """How a chain's transactions are structured."""
    ACCOUNT_BASED = "account-based"    # to / data / value calldata (EVM, Tron)
    UTXO_LIKE = "utxo-like"            # deposit address + optional memo
    OPAQUE_PAYLOAD = "opaque-payload"  # single encoded blob (Solana)


class WalletNetwork(str, Enum):
    """Address space a wallet address belongs to."""
    EVM = "evm"
    SOLANA = "solana"
    UTXO = "utxo"


@dataclass(frozen=True)
class ChainProfile:
    """Static facts about a chain known to the aggregator."""

    name: str
    family: ChainFamily
    native_symbol: str
    wallet_network: WalletNetwork = WalletNetwork.EVM


def _evm(name: str, symbol: str) -> ChainProfile:
    return ChainProfile(name=name, family=ChainFamily.ACCOUNT_BASED, native_symbol=symbol)


def _utxo(name: str, symbol: str) -> ChainProfile:
    return ChainProfile(
        name=name,
        family=ChainFamily.UTXO_LIKE,
        native_symbol=symbol,
        wallet_network=WalletNetwork.UTXO,
    )


# ======================
# Chain Profiles
# ======================

CHAINS: dict[str, ChainProfile] = {
    # EVM
    "ETH": _evm("ETH", "ETH"),
    "BSC": _evm("BSC", "BNB"),
    "POLYGON": _evm("POLYGON", "POL"),
    "AVALANCHE": _evm("AVALANCHE", "AVAX"),
    "ARBITRUM": _evm("ARBITRUM", "ETH"),
    "OPTIMISM": _evm("OPTIMISM", "ETH"),
    "BASE": _evm("BASE", "ETH"),
    "FANTOM": _evm("FANTOM", "FTM"),
    "LINEA": _evm("LINEA", "ETH"),
    "ZK_SYNC": _evm("ZK_SYNC", "ETH"),
    "SCROLL": _evm("SCROLL", "ETH"),
    "BLAST": _evm("BLAST", "ETH"),
    "MANTLE": _evm("MANTLE", "MNT"),
    "GNOSIS": _evm("GNOSIS", "XDAI"),
    "CELO": _evm("CELO", "CELO"),
    "MOONBEAM": _evm("MOONBEAM", "GLMR"),
    "CRONOS": _evm("CRONOS", "CRO"),
    "METIS": _evm("METIS", "METIS"),
    "TAIKO": _evm("TAIKO", "ETH"),
    "MODE": _evm("MODE", "ETH"),
    "SONIC": _evm("SONIC", "S"),
    "BERACHAIN": _evm("BERACHAIN", "BERA"),
    "UNICHAIN": _evm("UNICHAIN", "ETH"),
    # Tron uses its own address format but the same to/data transaction shape
    "TRON": _evm("TRON", "TRX"),

    # Single-blob transaction formats
    "SOLANA": ChainProfile(
        name="SOLANA",
        family=ChainFamily.OPAQUE_PAYLOAD,
        native_symbol="SOL",
        wallet_network=WalletNetwork.SOLANA,
    ),

    # UTXO
    "BITCOIN": _utxo("BITCOIN", "BTC"),
    "LITECOIN": _utxo("LITECOIN", "LTC"),
    "DOGECOIN": _utxo("DOGECOIN", "DOGE"),
    "BITCOIN_CASH": _utxo("BITCOIN_CASH", "BCH"),
    "DASH": _utxo("DASH", "DASH"),
    "ZCASH": _utxo("ZCASH", "ZEC"),
}

# Common aliases callers use for Rubic identifiers
CHAIN_ALIASES: dict[str, str] = {
    "ETHEREUM": "ETH",
    "BNB": "BSC",
    "BINANCE_SMART_CHAIN": "BSC",
    "MATIC": "POLYGON",
    "AVAX": "AVALANCHE",
    "ARB": "ARBITRUM",
    "OP": "OPTIMISM",
    "SOL": "SOLANA",
    "BTC": "BITCOIN",
    "LTC": "LITECOIN",
    "DOGE": "DOGECOIN",
    "BCH": "BITCOIN_CASH",
    "TRX": "TRON",
}

# Rubic's /info/chains "type" values
CHAIN_TYPE_FAMILIES: dict[str, ChainFamily] = {
    "EVM": ChainFamily.ACCOUNT_BASED,
    "TRON": ChainFamily.ACCOUNT_BASED,
    "SOLANA": ChainFamily.OPAQUE_PAYLOAD,
    "TON": ChainFamily.OPAQUE_PAYLOAD,
    "BITCOIN": ChainFamily.UTXO_LIKE,
}


def normalize_chain_name(chain: str) -> str:
    """Normalize a user-supplied chain name to a Rubic identifier."""
    key = chain.strip().upper().replace("-", "_").replace(" ", "_")
    return CHAIN_ALIASES.get(key, key)


def get_chain_profile(chain: str) -> Optional[ChainProfile]:
    """Get the profile for a chain, or None if unknown."""
    return CHAINS.get(normalize_chain_name(chain))


def get_chain_family(chain: str) -> ChainFamily:
    """Get the transaction family for a chain.

    Unknown chains default to account-based.
    """
    profile = get_chain_profile(chain)
    return profile.family if profile else ChainFamily.ACCOUNT_BASED


def get_wallet_network(chain: str) -> WalletNetwork:
    """Get the wallet network whose address acts as sender on a chain."""
    profile = get_chain_profile(chain)
    return profile.wallet_network if profile else WalletNetwork.EVM


def family_for_chain_type(chain_type: str) -> ChainFamily:
    """Map a Rubic chain ``type`` value onto a chain family."""
    return CHAIN_TYPE_FAMILIES.get((chain_type or "").upper(), ChainFamily.ACCOUNT_BASED)
