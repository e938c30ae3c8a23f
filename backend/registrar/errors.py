"""
Domain errors raised by the crud/service layers.

Routers translate these into HTTP responses: ``NotFoundError`` -> 404,
``DuplicateError`` and ``InvalidTransitionError`` -> 409, any other
``ValueError`` -> 400.
"""
from fastapi import HTTPException, status


class NotFoundError(LookupError):
    """A referenced record does not exist."""


class DuplicateError(ValueError):
    """A uniqueness rule (human ID, section name, one enrollment per term) was violated."""


class InvalidTransitionError(ValueError):
    """An enrollment or record is not in a state that allows the requested change."""


class StaleRecordError(ValueError):
    """The record changed since the caller last read it."""


def to_http_exception(exc: Exception) -> HTTPException:
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, (DuplicateError, InvalidTransitionError, StaleRecordError)):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    if isinstance(exc, ValueError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Something went wrong. Please try again.")
