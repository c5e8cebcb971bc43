"""HTTP controllers for web API endpoints."""

from swapbridge.web.controllers.bridge import router as bridge_router

__all__ = [
    "bridge_router",
]
