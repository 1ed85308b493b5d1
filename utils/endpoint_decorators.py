"""
Decorators for FastAPI endpoint error handling.

Maps column alignment errors onto HTTP responses so endpoint bodies only
deal with the successful path.
"""

import asyncio
import logging
from functools import wraps
from typing import Callable

from fastapi import HTTPException

from utils.validation import (
    ColumnAlignmentError,
    ConfigurationError,
    MeasurementFailure,
    UndoRecordError,
)

DEFAULT_TIMEOUT_SECONDS = 300

logger = logging.getLogger(__name__)


def handle_alignment_errors(func: Callable) -> Callable:
    """
    Decorator for alignment endpoints:
    - processing timeout management
    - standardized error handling

    The decorated coroutine may accept `processing_timeout` as a keyword
    argument; it defaults to DEFAULT_TIMEOUT_SECONDS.
    """
    @wraps(func)
    async def wrapper(*args, **kwargs):
        timeout_seconds = kwargs.get('processing_timeout') or DEFAULT_TIMEOUT_SECONDS

        try:
            return await asyncio.wait_for(func(*args, **kwargs), timeout=timeout_seconds)

        except asyncio.TimeoutError:
            logger.error(f"Column alignment timed out after {timeout_seconds}s")
            raise HTTPException(
                status_code=408,
                detail=f"Column alignment timed out after {timeout_seconds} seconds."
            )
        except (ConfigurationError, ValueError) as e:
            logger.warning(f"Invalid alignment request: {e}")
            raise HTTPException(
                status_code=400,
                detail=f"Invalid request: {str(e)}"
            )
        except MeasurementFailure as e:
            logger.warning(f"Layout measurement failed: {e}")
            raise HTTPException(
                status_code=422,
                detail=f"Layout measurement failed: {str(e)}"
            )
        except UndoRecordError as e:
            logger.error(f"Undo record failure: {e}")
            raise HTTPException(
                status_code=500,
                detail=f"Undo record failure: {str(e)}"
            )
        except HTTPException:
            raise
        except ColumnAlignmentError as e:
            logger.error(f"Column alignment error: {e}")
            raise HTTPException(status_code=500, detail=str(e))
        except Exception as e:
            logger.error(f"Unexpected error during column alignment: {e}")
            logger.exception("Full exception details:")
            raise HTTPException(
                status_code=500,
                detail=f"Internal server error during column alignment: {str(e)}"
            )

    return wrapper
