import logging

from fastapi import HTTPException

from cs2cup.errors import InsufficientDataError, NotFoundError, StateConflictError, TournamentError, ValidationError

logger = logging.getLogger(__name__)


def to_http(exc: TournamentError) -> HTTPException:
    """Map an engine error to the HTTP status the clients expect."""
    if isinstance(exc, NotFoundError):
        status_code = 404
    elif isinstance(exc, StateConflictError):
        status_code = 409
    elif isinstance(exc, (ValidationError, InsufficientDataError)):
        status_code = 400
    else:
        status_code = 500
    logger.warning(f"Rejected ({status_code}): {exc}")
    return HTTPException(status_code=status_code, detail=str(exc))
