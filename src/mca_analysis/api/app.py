"""
FastAPI application setup.

Configures the main application with:
- CORS middleware
- Exception handlers
- Route registration
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import get_settings
from .routes import analysis_router, health_router

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """
    settings = get_settings()

    app = FastAPI(
        title="MCA Analysis API",
        description="""
        Multiple Correspondence Analysis on categorical observation tables.

        Submit rows of categorical values together with the allowed categories
        per variable, and receive explained variance, observation factor scores
        and per-category weights for each retained component.
        """,
        version=__version__,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.url.path}")
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "detail": str(exc) if settings.api_debug else None,
            }
        )

    app.include_router(health_router)
    app.include_router(analysis_router, prefix="/api/v1")

    return app
