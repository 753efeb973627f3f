"""Helper utilities shared across API route handlers."""

from fastapi import HTTPException, status

from backoffice.domain.entities import Page
from backoffice.domain.exceptions import (
    ApplicationError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    TransientInfraError,
    ValidationError,
)

_STATUS_BY_ERROR: tuple[tuple[type[ApplicationError], int], ...] = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ForbiddenError, status.HTTP_403_FORBIDDEN),
    (ConflictError, status.HTTP_409_CONFLICT),
    (TransientInfraError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def status_code_for(exc: ApplicationError) -> int:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_400_BAD_REQUEST


def to_http_exception(exc: ApplicationError) -> HTTPException:
    """Return the HTTP error a route should raise for ``exc``."""

    return HTTPException(status_code=status_code_for(exc), detail=exc.to_dict())


def page_meta(page: Page) -> dict[str, int | None]:
    return {
        "total": page.total,
        "last_page": page.last_page,
        "current_page": page.page,
        "per_page": page.per_page,
        "prev": page.prev,
        "next": page.next,
    }
