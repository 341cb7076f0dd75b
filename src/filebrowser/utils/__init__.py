"""Utilities module for filebrowser."""

from .paths import (
    PATH_SEPARATOR,
    ROOT_PATH,
    base_name,
    has_path_prefix,
    is_root,
    join_path,
    normalize_path,
    path_components,
)
from .timestamps import (
    TIMESTAMP_BASE,
    format_timestamp,
    now_timestamp,
    parse_timestamp,
    unix_now,
)
from .uuid import generate_id, generate_uuid_v7

__all__ = [
    # Paths
    "PATH_SEPARATOR",
    "ROOT_PATH",
    "base_name",
    "has_path_prefix",
    "is_root",
    "join_path",
    "normalize_path",
    "path_components",
    # Timestamps
    "TIMESTAMP_BASE",
    "format_timestamp",
    "now_timestamp",
    "parse_timestamp",
    "unix_now",
    # Ids
    "generate_id",
    "generate_uuid_v7",
]
