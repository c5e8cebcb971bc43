"""Wallet credentials passed explicitly into address resolution.

Business logic never reads the environment. ``Settings.get_credentials()``
builds a Credentials value once and it is handed to the resolvers at
construction time, so tests can inject fakes directly.
"""

from dataclasses import dataclass, field
from typing import Optional

from swapbridge.chains import WalletNetwork


@dataclass(frozen=True)
class Credentials:
    """Addresses and key material available to the engine.

    Secret fields are excluded from repr so a Credentials value can be
    logged or printed without leaking keys.
    """

    evm_address: Optional[str] = None
    evm_private_key: Optional[str] = field(default=None, repr=False)
    solana_address: Optional[str] = None
    solana_private_key: Optional[str] = field(default=None, repr=False)
    utxo_address: Optional[str] = None
    seed_phrase: Optional[str] = field(default=None, repr=False)

    def public_address(self, network: WalletNetwork) -> Optional[str]:
        """Get the pre-configured public address for a network."""
        return {
            WalletNetwork.EVM: self.evm_address,
            WalletNetwork.SOLANA: self.solana_address,
            WalletNetwork.UTXO: self.utxo_address,
        }.get(network)

    def private_key(self, network: WalletNetwork) -> Optional[str]:
        """Get the configured private key for a network (UTXO has none)."""
        return {
            WalletNetwork.EVM: self.evm_private_key,
            WalletNetwork.SOLANA: self.solana_private_key,
        }.get(network)

    @property
    def has_seed_phrase(self) -> bool:
        """Check if a plausible BIP39 mnemonic is configured."""
        return bool(self.seed_phrase and len(self.seed_phrase.split()) >= 12)
