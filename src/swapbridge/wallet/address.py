"""Wallet address resolution with placeholder detection.

Callers (agents in particular) often pass template addresses copied from
examples. Sending funds to one of those would lose them, so a placeholder
is treated exactly like a missing address and the configured wallet is used
instead.

Resolution order:
1. explicit address, unless it is a placeholder
2. pre-configured public address
3. address derived from the configured private key
4. address derived from the configured seed phrase
"""

import logging
import re
from typing import Callable, Optional

from swapbridge.chains import WalletNetwork
from swapbridge.errors import AddressResolutionError
from swapbridge.wallet.base import Credentials
from swapbridge.wallet.keys import (
    evm_address_from_key,
    evm_address_from_mnemonic,
    solana_address_from_key,
    solana_address_from_mnemonic,
)

logger = logging.getLogger(__name__)

# Known "fill-in-the-blank" example addresses (compared lower-cased)
PLACEHOLDER_ADDRESSES = frozenset(
    address.lower()
    for address in (
        "0x0000000000000000000000000000000000000000",
        "0x0000000000000000000000000000000000000001",
        "0x1234567890123456789012345678901234567890",
        "0x1234567890abcdef1234567890abcdef12345678",
        "0xabcdefabcdefabcdefabcdefabcdefabcdefabcd",
        "0x000000000000000000000000000000000000dEaD",
        "0xdeaDbeefdEAdbeefdEadbEEFdeadbeEFdEaDbeeF",
        "0xYourWalletAddress",
        "0xYourAddress",
        "0x...",
        "YOUR_WALLET_ADDRESS",
        "YOUR_ADDRESS",
        "WALLET_ADDRESS",
        "your-wallet-address",
        "11111111111111111111111111111111",
        "YourSolanaAddress",
        "YourSolanaWalletAddress",
    )
)

# <wallet_address>, {address}, [YOUR ADDRESS], ${WALLET}
_TEMPLATE_RE = re.compile(r"^(\$?\{.*\}|<.*>|\[.*\])$")

AddressDeriver = Callable[[str], Optional[str]]

_KEY_DERIVERS: dict[WalletNetwork, AddressDeriver] = {
    WalletNetwork.EVM: evm_address_from_key,
    WalletNetwork.SOLANA: solana_address_from_key,
}

_MNEMONIC_DERIVERS: dict[WalletNetwork, AddressDeriver] = {
    WalletNetwork.EVM: evm_address_from_mnemonic,
    WalletNetwork.SOLANA: solana_address_from_mnemonic,
}


def is_placeholder_address(address: Optional[str]) -> bool:
    """Check if an address is a known example/template value."""
    if address is None:
        return False
    value = address.strip()
    if not value:
        return True
    return value.lower() in PLACEHOLDER_ADDRESSES or bool(_TEMPLATE_RE.match(value))


class AddressResolver:
    """Resolves the wallet address acting as sender/receiver on one network.

    Example:
        resolver = AddressResolver(credentials, WalletNetwork.EVM)
        address = resolver.resolve("0x0000000000000000000000000000000000000001")
        # -> address derived from credentials.evm_private_key
    """

    def __init__(self, credentials: Credentials, network: WalletNetwork = WalletNetwork.EVM):
        self.credentials = credentials
        self.network = network

    def resolve(self, explicit: Optional[str] = None) -> str:
        """Resolve the wallet address to act with.

        Args:
            explicit: Address supplied by the caller, if any

        Returns:
            The resolved address

        Raises:
            AddressResolutionError: If every source failed
        """
        tried: list[str] = []

        if explicit is not None:
            tried.append("explicit")
            if not is_placeholder_address(explicit):
                return explicit
            logger.warning(
                f"Ignoring placeholder {self.network.value} address {explicit!r}, "
                f"falling back to configured wallet"
            )

        tried.append("configured address")
        configured = self.credentials.public_address(self.network)
        if configured and not is_placeholder_address(configured):
            logger.debug(f"Using configured {self.network.value} address")
            return configured.strip()

        deriver = _KEY_DERIVERS.get(self.network)
        private_key = self.credentials.private_key(self.network)
        if deriver and private_key:
            tried.append("private key")
            derived = deriver(private_key)
            if derived:
                logger.debug(f"Derived {self.network.value} address from private key")
                return derived
            logger.warning(f"Configured {self.network.value} private key is not a usable key")

        mnemonic_deriver = _MNEMONIC_DERIVERS.get(self.network)
        if mnemonic_deriver and self.credentials.has_seed_phrase:
            tried.append("seed phrase")
            derived = mnemonic_deriver(self.credentials.seed_phrase)
            if derived:
                logger.debug(f"Derived {self.network.value} address from seed phrase")
                return derived
            logger.warning("Configured seed phrase is not a valid BIP39 mnemonic")

        raise AddressResolutionError(self.network.value, tried)

    def try_resolve(self, explicit: Optional[str] = None) -> Optional[str]:
        """Resolve the address, returning None instead of raising."""
        try:
            return self.resolve(explicit)
        except AddressResolutionError as e:
            logger.debug(str(e))
            return None


def create_resolvers(credentials: Credentials) -> dict[WalletNetwork, AddressResolver]:
    """Create one resolver per wallet network."""
    return {network: AddressResolver(credentials, network) for network in WalletNetwork}
