"""Base exceptions for filebrowser.

Every error raised by the service inherits from FileBrowserError and carries
a stable error code, so callers on the other side of the wire can branch on
the code instead of the message.
"""

from typing import Any, Dict, Optional


class FileBrowserError(Exception):
    """Base exception for all filebrowser errors.

    Subclasses set ``code`` to the opaque identifier of their error kind.
    """

    code: str = "E001"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        *args,
        **kwargs
    ):
        super().__init__(message, *args, **kwargs)
        self.message = message
        self.error_code = error_code or self.code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.error_code,
            "message": self.message,
            "details": self.details,
            "type": self.__class__.__name__,
        }


def get_http_status_code(exception: Exception) -> int:
    """Get HTTP status code for exception.

    Args:
        exception: The exception instance

    Returns:
        HTTP status code
    """
    from .http_mapping import get_http_status_code as _get_status_code
    return _get_status_code(exception)


def create_error_response(exception: FileBrowserError) -> Dict[str, Any]:
    """Create standardized error response from exception.

    Args:
        exception: The filebrowser exception

    Returns:
        Error response dictionary
    """
    return {"error": exception.to_dict()}
