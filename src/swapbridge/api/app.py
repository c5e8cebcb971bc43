"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from swapbridge import __version__
from swapbridge.config import get_settings
from swapbridge.wallet.address import create_resolvers

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log the aggregator endpoint and which wallets can act as sender."""
    settings = get_settings()
    resolvers = create_resolvers(settings.get_credentials())
    ready = [network.value for network, resolver in resolvers.items() if resolver.try_resolve()]
    logger.info(f"Swapbridge {__version__} using aggregator {settings.rubic_api_url}")
    if ready:
        logger.info(f"Wallets available for: {', '.join(ready)}")
    else:
        logger.warning("No wallet configured; swaps need an explicit sender address")
    yield


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Swapbridge API",
        description="Cross-chain bridge quotes and swap preparation via Rubic",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.debug else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from swapbridge.api.routes import health
    from swapbridge.web.controllers import bridge

    app.include_router(health.router, tags=["Health"])
    app.include_router(bridge.router, prefix="/api/v1")

    return app


app = create_app()
