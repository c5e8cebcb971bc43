"""Web boundary layer for non-custodial operations.

Controllers return quotes and unsigned transactions for client-side
signing. This layer never signs or broadcasts.
"""

__all__ = [
    "contracts",
    "controllers",
]
