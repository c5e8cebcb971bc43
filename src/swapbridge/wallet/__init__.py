"""Wallet address resolution.

Resolves which address acts as sender/receiver for a swap, from an explicit
value or configured credentials. No signing happens here.
"""

from swapbridge.wallet.address import (
    AddressResolver,
    create_resolvers,
    is_placeholder_address,
)
from swapbridge.wallet.base import Credentials

__all__ = [
    "AddressResolver",
    "Credentials",
    "create_resolvers",
    "is_placeholder_address",
]
