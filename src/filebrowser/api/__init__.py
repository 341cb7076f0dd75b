"""HTTP surface of the filebrowser service."""

from .exception_handlers import register_exception_handlers
from .routers import certificates_router, directory_router, files_router, profile_router

__all__ = [
    "certificates_router",
    "directory_router",
    "files_router",
    "profile_router",
    "register_exception_handlers",
]
