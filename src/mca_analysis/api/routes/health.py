"""
Health check endpoints for monitoring.
"""

from fastapi import APIRouter

from ... import __version__
from ...schemas import HealthResponse


router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint.

    The service has no external dependencies, so it is healthy whenever it
    answers.
    """
    return HealthResponse(status="healthy", version=__version__)


@router.get("/ready")
async def readiness_check():
    """
    Readiness check for Kubernetes.
    """
    return {"ready": True}


@router.get("/live")
async def liveness_check():
    """
    Liveness check for Kubernetes.
    """
    return {"alive": True}
