"""
Main entry point for the MCA Analysis API server.
"""

import logging

import uvicorn

from .config import get_settings


def configure_logging() -> None:
    """Configure root logging from settings."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format=settings.log_format,
    )


def run_api():
    """Run the FastAPI server."""
    settings = get_settings()
    configure_logging()

    uvicorn.run(
        "mca_analysis.api:create_app",
        factory=True,
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_debug,
        workers=settings.api_workers if not settings.api_debug else 1,
    )


if __name__ == "__main__":
    run_api()
