"""Directory entities and listing filters."""

from .directory import Directory
from .filters import (
    FileFilter,
    SearchMatch,
    aggregate,
    apply_filters,
    directory_filter,
    prefix_filter,
    regex_filter,
    search_paths,
)
from .protocols import DirectoryRepository

__all__ = [
    "Directory",
    "DirectoryRepository",
    "FileFilter",
    "SearchMatch",
    "aggregate",
    "apply_filters",
    "directory_filter",
    "prefix_filter",
    "regex_filter",
    "search_paths",
]
