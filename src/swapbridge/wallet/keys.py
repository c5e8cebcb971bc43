"""Private key decoding and address derivation.

Keys arrive in several textual formats. Each format has a parser that
returns the decoded bytes or None when the input is not in that format;
parsers are tried in order and the first success wins.
"""

import json
import logging
import re
from typing import Callable, Optional, Sequence

logger = logging.getLogger(__name__)

KeyParser = Callable[[str], Optional[bytes]]

_HEX_RE = re.compile(r"^[0-9a-fA-F]+$")
_BASE58_RE = re.compile(r"^[1-9A-HJ-NP-Za-km-z]+$")
_JSON_ARRAY_RE = re.compile(r"^\[\s*\d+(\s*,\s*\d+)*\s*\]$")

# Derivation paths
EVM_DERIVATION_PATH = "m/44'/60'/0'/0/0"
SOLANA_DERIVATION_PATH = "m/44'/501'/0'/0'"

SECP256K1_ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141


def _decode_hex(value: str, sizes: Sequence[int]) -> Optional[bytes]:
    if len(value) % 2 or not _HEX_RE.match(value):
        return None
    raw = bytes.fromhex(value)
    return raw if len(raw) in sizes else None


def parse_prefixed_hex(value: str, sizes: Sequence[int] = (32,)) -> Optional[bytes]:
    """Parse 0x-prefixed hex."""
    if not value.lower().startswith("0x"):
        return None
    return _decode_hex(value[2:], sizes)


def parse_bare_hex(value: str, sizes: Sequence[int] = (32,)) -> Optional[bytes]:
    """Parse hex without a prefix."""
    return _decode_hex(value, sizes)


def parse_base58(value: str, sizes: Sequence[int] = (64, 32)) -> Optional[bytes]:
    """Parse a base58 string (Phantom / Solflare export format)."""
    if not _BASE58_RE.match(value):
        return None

    import base58

    raw = base58.b58decode(value)
    return raw if len(raw) in sizes else None


def parse_json_array(value: str, sizes: Sequence[int] = (64, 32)) -> Optional[bytes]:
    """Parse a JSON byte array (solana-keygen file format)."""
    if not _JSON_ARRAY_RE.match(value):
        return None
    numbers = json.loads(value)
    if any(n > 255 for n in numbers):
        return None
    raw = bytes(numbers)
    return raw if len(raw) in sizes else None


EVM_KEY_PARSERS: tuple[KeyParser, ...] = (
    parse_prefixed_hex,
    parse_bare_hex,
)

SOLANA_KEY_PARSERS: tuple[KeyParser, ...] = (
    parse_base58,
    parse_json_array,
    lambda value: parse_prefixed_hex(value, sizes=(64, 32)),
    lambda value: parse_bare_hex(value, sizes=(64, 32)),
)


def decode_key(value: str, parsers: Sequence[KeyParser]) -> Optional[bytes]:
    """Run parsers in order and return the first decoded key."""
    value = value.strip()
    if not value:
        return None
    for parser in parsers:
        raw = parser(value)
        if raw is not None:
            return raw
    return None


def is_valid_secp256k1_key(raw: bytes) -> bool:
    """Check that a 32-byte key lies in [1, n - 1]."""
    return 0 < int.from_bytes(raw, "big") < SECP256K1_ORDER


def evm_address_from_key(private_key: str) -> Optional[str]:
    """Derive a checksummed EVM address from a private key string.

    Returns None if the key is not in a recognized format or outside the
    curve order.
    """
    raw = decode_key(private_key, EVM_KEY_PARSERS)
    if raw is None or not is_valid_secp256k1_key(raw):
        return None

    from eth_account import Account

    return Account.from_key(raw).address


def solana_address_from_key(private_key: str) -> Optional[str]:
    """Derive a Solana address from a secret key string.

    Accepts a 64-byte keypair or a 32-byte seed. Returns None if the key is
    not in a recognized format or the keypair halves do not match.
    """
    raw = decode_key(private_key, SOLANA_KEY_PARSERS)
    if raw is None:
        return None

    from solders.keypair import Keypair

    keypair = Keypair.from_seed(raw[:32])
    # 64-byte exports carry the public key in the second half
    if len(raw) == 64 and bytes(keypair.pubkey()) != raw[32:]:
        return None
    return str(keypair.pubkey())


def is_valid_mnemonic(mnemonic: str) -> bool:
    """Check BIP39 words and checksum."""
    from bip_utils import Bip39MnemonicValidator

    return Bip39MnemonicValidator().IsValid(mnemonic)


def evm_address_from_mnemonic(mnemonic: str) -> Optional[str]:
    """Derive the first EVM account (m/44'/60'/0'/0/0) from a mnemonic.

    Returns None if the mnemonic is not a valid BIP39 phrase.
    """
    if not is_valid_mnemonic(mnemonic):
        return None

    from bip_utils import Bip39SeedGenerator, Bip44, Bip44Changes, Bip44Coins

    seed = Bip39SeedGenerator(mnemonic).Generate()
    bip44 = Bip44.FromSeed(seed, Bip44Coins.ETHEREUM)
    account = bip44.Purpose().Coin().Account(0).Change(Bip44Changes.CHAIN_EXT).AddressIndex(0)
    return account.PublicKey().ToAddress()


def solana_address_from_mnemonic(mnemonic: str) -> Optional[str]:
    """Derive the first Solana account (m/44'/501'/0'/0') from a mnemonic.

    Returns None if the mnemonic is not a valid BIP39 phrase.
    """
    if not is_valid_mnemonic(mnemonic):
        return None

    from bip_utils import Bip39SeedGenerator, Bip44, Bip44Changes, Bip44Coins
    from solders.keypair import Keypair

    seed = Bip39SeedGenerator(mnemonic).Generate()
    bip44 = Bip44.FromSeed(seed, Bip44Coins.SOLANA)
    account = bip44.Purpose().Coin().Account(0).Change(Bip44Changes.CHAIN_EXT)
    private_key = account.PrivateKey().Raw().ToBytes()
    return str(Keypair.from_seed(private_key[:32]).pubkey())
