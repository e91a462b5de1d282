from fastapi import HTTPException

from domain.exceptions import (
    DomainError,
    InvalidInputError,
    NotFoundError,
    PermissionDeniedError,
    RangeNotSatisfiableError,
)
from utils.logger import get_logger

logger = get_logger(__name__)

def to_http_exception(e: Exception) -> HTTPException:
    """
    Map a service exception to the HTTP error the client sees.
    Internal failures are logged here and reported with a generic detail.
    """
    if isinstance(e, RangeNotSatisfiableError):
        return HTTPException(
            status_code=416,
            detail=str(e),
            headers={"Content-Range": f"bytes */{e.size}"},
        )
    if isinstance(e, (NotFoundError, PermissionDeniedError)):
        return HTTPException(status_code=404, detail=str(e) or "Not found")
    if isinstance(e, InvalidInputError):
        return HTTPException(status_code=400, detail=str(e))

    if isinstance(e, DomainError):
        logger.error(f"Service failure: {e}")
    else:
        logger.exception(f"Unexpected error: {e}")
    return HTTPException(status_code=500, detail="Internal server error")
