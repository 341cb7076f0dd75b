"""File entities and protocols."""

from .file import (
    APP,
    CREATED_AT,
    DELETED_AT,
    OWNER_PERMISSIONS,
    REF,
    SERVER_MANAGED_KEYS,
    SIZE,
    UPDATED_AT,
    URL,
    File,
    FileFlags,
    Permission,
    validate_name,
)
from .protocols import FileEventPublisher, FileRepository

__all__ = [
    "APP",
    "CREATED_AT",
    "DELETED_AT",
    "OWNER_PERMISSIONS",
    "REF",
    "SERVER_MANAGED_KEYS",
    "SIZE",
    "UPDATED_AT",
    "URL",
    "File",
    "FileEventPublisher",
    "FileFlags",
    "FileRepository",
    "Permission",
    "validate_name",
]
