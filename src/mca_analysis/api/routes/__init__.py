"""API routes module."""

from .analysis import router as analysis_router
from .health import router as health_router

__all__ = ["analysis_router", "health_router"]
