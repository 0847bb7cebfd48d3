"""Centralized error transformation for API routes.

Maps changelogs errors (domain and infrastructure) to HTTPException responses.
"""

from typing import Any

from fastapi import HTTPException

from changelogs.domain.shared.error import (
    AuthorizationError,
    ChangelogsError,
    ConflictError,
    DomainError,
    InfrastructureError,
    InvalidStateError,
    MalformedIdentityError,
    NotFoundError,
    ValidationError,
)

DOMAIN_ERROR_STATUS_MAP: dict[type[DomainError], int] = {
    NotFoundError: 404,
    ValidationError: 422,
    InvalidStateError: 409,
    ConflictError: 409,
    AuthorizationError: 403,
    MalformedIdentityError: 400,
}


def map_changelogs_error(error: ChangelogsError) -> HTTPException:
    """Map a changelogs error to an HTTPException.

    UnauthenticatedError never reaches here; the app turns it into a
    redirect to the login page.
    """
    detail: dict[str, Any] = {
        "code": error.code,
        "message": error.message,
    }

    if isinstance(error, InfrastructureError):
        return HTTPException(status_code=503, detail=detail)

    if isinstance(error, DomainError):
        # Walk the MRO so subclasses such as DuplicateAccountError inherit their parent's status
        status_code = next(
            (
                DOMAIN_ERROR_STATUS_MAP[cls]
                for cls in type(error).__mro__
                if cls in DOMAIN_ERROR_STATUS_MAP
            ),
            400,
        )
        if isinstance(error, ValidationError) and error.field is not None:
            detail["field"] = error.field
        return HTTPException(status_code=status_code, detail=detail)

    return HTTPException(status_code=500, detail=detail)
