"""Error kinds raised by the filebrowser domain and its collaborators."""

from .base import FileBrowserError


# Infrastructure
class UnknownError(FileBrowserError):
    """Raised when an infrastructure call fails unexpectedly."""
    code = "E001"


class NotAvailableError(FileBrowserError):
    """Raised when a dependency cannot be reached."""
    code = "E003"


class ChannelClosedError(FileBrowserError):
    """Raised when the broker channel closes before the consumer was cancelled."""
    code = "E012"


# Lookup
class NotFoundError(FileBrowserError):
    """Raised when the requested entity does not exist."""
    code = "E002"


class AlreadyExistsError(FileBrowserError):
    """Raised when an insert would violate a uniqueness rule."""
    code = "E010"


class UnidentifiedError(FileBrowserError):
    """Raised when an operation needs a persisted id the entity lacks."""
    code = "E014"


# Caller identity and authorization
class UnauthorizedError(FileBrowserError):
    """Raised when the caller identity is missing or lacks permission."""
    code = "E004"


class InvalidHeaderError(FileBrowserError):
    """Raised when the caller id header cannot be parsed."""
    code = "E007"


class ProtectedContentError(FileBrowserError):
    """Raised on attempts to mutate content the caller may see but not modify."""
    code = "E013"


# Tokens
class InvalidTokenError(FileBrowserError):
    """Raised when a certificate token is malformed or its signature fails."""
    code = "E005"


class TokenExpiredError(InvalidTokenError):
    """Raised when a certificate token is past its expiry."""
    code = "E015"


class TokenNotYetValidError(InvalidTokenError):
    """Raised when a certificate token is used before its not-before time."""
    code = "E016"


# Validation
class InvalidFormatError(FileBrowserError):
    """Raised when a name, regex or path violates the rules."""
    code = "E006"


class RegexNotMatchError(InvalidFormatError):
    """Raised when a file name does not match the filename rule."""
    code = "E011"
