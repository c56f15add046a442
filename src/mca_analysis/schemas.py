"""
Pydantic schemas for analysis options and API request/response validation.

``MCAOptions`` is the single configuration structure for an analysis call.
Its defaults reproduce the fullest behaviour (Benzécri correction, Greenacre
adjustment, column factors); simpler historical behaviour is obtained by
switching individual flags off.
"""

from typing import Any, Literal, Optional, Union
from pydantic import BaseModel, Field, ConfigDict, field_validator

from .config import get_settings


# Category values may be booleans, numbers or strings
CategoryValue = Union[bool, int, float, str]


# =============================================================================
# ANALYSIS OPTIONS
# =============================================================================

class MCAOptions(BaseModel):
    """Options controlling correction, trimming and decomposition."""

    benzecri: bool = Field(default=True, description="Apply Benzécri eigenvalue correction")
    greenacre: bool = Field(
        default=True,
        description="Use the Greenacre variance denominator (only when Benzécri correction is applied)",
    )
    tolerance: float = Field(
        default=1e-4, ge=0.0,
        description="Eigenvalue significance threshold, also used for category weight inclusion",
    )
    n_components: Optional[int] = Field(default=None, ge=1, description="Hard cap on retained rank")
    epsilon: float = Field(default=0.0, ge=0.0, description="Convergence parameter for the SVD primitive")
    svd_tolerance: float = Field(
        default=0.0, ge=0.0,
        description="Reconstruction tolerance for the decomposition self-check (0 disables it)",
    )
    svd_solver: Literal["lapack", "arpack"] = Field(default="lapack", description="SVD primitive")
    row_scaling: Literal["inverse_sqrt", "mass"] = Field(
        default="inverse_sqrt",
        description="Row factor scaling: inverse square root of the row mass, or the mass itself",
    )
    column_factors: bool = Field(default=True, description="Compute column coordinates and category weights")

    model_config = ConfigDict(extra="forbid", frozen=True)


def resolve_options(options: Optional[MCAOptions] = None, **overrides: Any) -> MCAOptions:
    """
    Build the effective options for one analysis call.

    Explicit ``options`` win over the environment defaults from
    :func:`~mca_analysis.config.get_settings`; keyword ``overrides`` are
    applied last.
    """
    if options is None:
        values = dict(get_settings().option_defaults)
    else:
        values = options.model_dump()
    values.update(overrides)
    return MCAOptions(**values)


# =============================================================================
# API SCHEMAS
# =============================================================================

class MCARequest(BaseModel):
    """Request to run an analysis on inline data."""
    rows: list[dict[str, Any]] = Field(description="Observation rows, one mapping per observation")
    categories: dict[str, list[CategoryValue]] = Field(description="Allowed categories per variable")
    options: Optional[MCAOptions] = Field(default=None, description="Analysis options")

    model_config = ConfigDict(extra="forbid")

    @field_validator("categories")
    @classmethod
    def categories_distinct(cls, categories):
        # Responses key category weights by str(category), and True == 1 as a dict key
        for name, cats in categories.items():
            if len({str(c) for c in cats}) != len(cats) or len(set(cats)) != len(cats):
                raise ValueError(
                    f"Categories of variable '{name}' must be distinct, also as strings: {cats}"
                )
        return categories


class MCAResponse(BaseModel):
    """Analysis results in JSON-friendly form."""
    explained_variance: list[float]
    eigenvalues: list[float]
    singular_values: list[float]
    rank: int
    n_variables: int
    variables: list[str]
    row_factors: list[list[float]]
    # Category values are rendered as strings since JSON object keys must be strings
    column_factors: Optional[list[dict[str, dict[str, float]]]] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str


class ErrorResponse(BaseModel):
    """Error response schema."""
    error: str
    detail: Optional[str] = None
