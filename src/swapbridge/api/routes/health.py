"""Health check endpoints."""

from fastapi import APIRouter

from swapbridge import __version__
from swapbridge.bridge.serialization import REFERRER
from swapbridge.config import get_settings

router = APIRouter()


@router.get("/health")
async def health_check():
    """Basic health check endpoint."""
    return {"status": "healthy", "service": "swapbridge", "version": __version__}


@router.get("/health/detailed")
async def detailed_health():
    """Health check with aggregator and wallet configuration (secrets redacted)."""
    settings = get_settings()
    credentials = settings.get_credentials()
    return {
        "status": "healthy",
        "service": "swapbridge",
        "version": __version__,
        "aggregator": {
            "url": settings.rubic_api_url,
            "referrer": REFERRER,
        },
        "wallets_configured": {
            "evm": bool(credentials.evm_address or credentials.evm_private_key),
            "solana": bool(credentials.solana_address or credentials.solana_private_key),
            "utxo": bool(credentials.utxo_address),
            "seed_phrase": credentials.has_seed_phrase,
        },
        "config": settings.get_safe_dict(),
    }
