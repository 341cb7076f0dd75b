"""Exception hierarchy for filebrowser."""

from .base import (
    FileBrowserError,
    create_error_response,
    get_http_status_code,
)
from .domain import (
    AlreadyExistsError,
    ChannelClosedError,
    InvalidFormatError,
    InvalidHeaderError,
    InvalidTokenError,
    NotAvailableError,
    NotFoundError,
    ProtectedContentError,
    RegexNotMatchError,
    TokenExpiredError,
    TokenNotYetValidError,
    UnauthorizedError,
    UnidentifiedError,
    UnknownError,
)

__all__ = [
    "FileBrowserError",
    "create_error_response",
    "get_http_status_code",
    "AlreadyExistsError",
    "ChannelClosedError",
    "InvalidFormatError",
    "InvalidHeaderError",
    "InvalidTokenError",
    "NotAvailableError",
    "NotFoundError",
    "ProtectedContentError",
    "RegexNotMatchError",
    "TokenExpiredError",
    "TokenNotYetValidError",
    "UnauthorizedError",
    "UnidentifiedError",
    "UnknownError",
]
