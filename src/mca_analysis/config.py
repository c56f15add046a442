"""
Configuration and settings management for the MCA package.

Uses Pydantic settings for environment-based configuration. Every value
can be overridden with an ``MCA_`` prefixed environment variable (or a
``.env`` file), e.g. ``MCA_DEFAULT_SVD_TOLERANCE=1e-6``.

Settings only provide *defaults*. Each analysis call resolves its own
immutable options object, so nothing computed here is shared between calls.
"""

from functools import lru_cache
from typing import Literal
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Package settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="MCA_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Analysis defaults
    default_tolerance: float = 1e-4
    default_epsilon: float = 0.0
    default_svd_tolerance: float = 0.0  # 0 disables the decomposition self-check
    default_svd_solver: Literal["lapack", "arpack"] = "lapack"

    # Logging
    log_level: str = "INFO"
    log_format: str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

    # API Settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_debug: bool = False
    api_workers: int = 1

    @property
    def option_defaults(self) -> dict:
        """Keyword defaults for :class:`~mca_analysis.schemas.MCAOptions`."""
        return {
            "tolerance": self.default_tolerance,
            "epsilon": self.default_epsilon,
            "svd_tolerance": self.default_svd_tolerance,
            "svd_solver": self.default_svd_solver,
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
