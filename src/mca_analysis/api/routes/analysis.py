"""
FastAPI routes for running an analysis on inline data.

The computation is synchronous and CPU bound, so it runs in a thread pool
to avoid blocking the async event loop. Nothing is stored between requests.
"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor

from fastapi import APIRouter, HTTPException

from ...exceptions import DecompositionIntegrityError, MalformedInputError
from ...models import fit_mca
from ...schemas import ErrorResponse, MCARequest, MCAResponse
from ...utils import to_response_payload

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Analysis"])

# Thread pool for running CPU-bound analyses
_executor = ThreadPoolExecutor(max_workers=4)


async def _run_in_executor(func, *args, **kwargs):
    """Run a sync function in the thread pool."""
    loop = asyncio.get_event_loop()
    return await loop.run_in_executor(
        _executor,
        lambda: func(*args, **kwargs)
    )


@router.post(
    "/mca",
    response_model=MCAResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def run_mca(request: MCARequest):
    """
    Run Multiple Correspondence Analysis.

    Returns 400 for unusable input (empty schema, no rows) and 500 when the
    SVD self-check rejects the decomposition.
    """
    try:
        result = await _run_in_executor(
            fit_mca, request.rows, request.categories, request.options
        )
    except MalformedInputError as e:
        raise HTTPException(400, str(e))
    except DecompositionIntegrityError as e:
        logger.error(f"Decomposition rejected (tolerance {e.tolerance})")
        raise HTTPException(500, str(e))

    return MCAResponse(**to_response_payload(result))
