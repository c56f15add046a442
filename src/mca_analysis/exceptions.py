"""
Exception types raised by the MCA pipeline.

Input problems derive from ``ValueError`` and decomposition failures from
``RuntimeError`` so callers that only know the builtin types still catch them.
"""

from typing import Optional

import numpy as np


class MCAError(Exception):
    """Base class for all errors raised by this package."""


class MalformedInputError(MCAError, ValueError):
    """The observation rows cannot be analysed (no rows, rows that are not mappings)."""


class MalformedSchemaError(MalformedInputError):
    """The category schema has no variable carrying at least one category."""


class DecompositionIntegrityError(MCAError, RuntimeError):
    """
    The SVD primitive returned an unusable factorization.

    Raised only when the self-check is enabled. Carries the residual matrix
    that was decomposed, the reconstruction (when one could be computed) and
    the tolerance in force, so a defective decomposition can be diagnosed.
    """

    def __init__(self, message: str, expected: np.ndarray,
                 actual: Optional[np.ndarray], tolerance: float):
        super().__init__(message)
        self.expected = expected
        self.actual = actual
        self.tolerance = tolerance
