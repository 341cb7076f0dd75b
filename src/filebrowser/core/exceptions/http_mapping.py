"""HTTP status code mapping for exceptions."""

from typing import Dict, Type

from .domain import (
    AlreadyExistsError,
    ChannelClosedError,
    InvalidFormatError,
    InvalidHeaderError,
    InvalidTokenError,
    NotAvailableError,
    NotFoundError,
    ProtectedContentError,
    UnauthorizedError,
    UnidentifiedError,
    UnknownError,
)


HTTP_STATUS_MAP: Dict[Type[Exception], int] = {
    # 400 Bad Request
    InvalidFormatError: 400,
    InvalidHeaderError: 400,

    # 401 Unauthorized
    UnauthorizedError: 401,
    InvalidTokenError: 401,

    # 403 Forbidden
    ProtectedContentError: 403,

    # 404 Not Found
    NotFoundError: 404,

    # 409 Conflict
    AlreadyExistsError: 409,

    # 500 Internal Server Error
    UnknownError: 500,
    UnidentifiedError: 500,

    # 503 Service Unavailable
    NotAvailableError: 503,
    ChannelClosedError: 503,
}


def get_http_status_code(exception: Exception) -> int:
    """Resolve the status code walking the exception's MRO.

    Subclasses without an entry inherit their parent's status, so
    TokenExpiredError answers like InvalidTokenError.
    """
    for klass in type(exception).__mro__:
        if klass in HTTP_STATUS_MAP:
            return HTTP_STATUS_MAP[klass]
    return 500
