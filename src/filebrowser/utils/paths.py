"""Slash-delimited logical paths.

A logical path is a sequence of non-empty segments joined by ``/``. The
root is the empty string. Segments are compared byte for byte; there is no
unicode folding and no percent decoding.
"""

from typing import List

PATH_SEPARATOR = "/"
ROOT_PATH = ""


def path_components(path: str) -> List[str]:
    """Split a path into its non-empty segments."""
    return [segment for segment in path.split(PATH_SEPARATOR) if segment]


def join_path(*segments: str) -> str:
    """Join segments (or partial paths) into a normalized path."""
    components: List[str] = []
    for segment in segments:
        components.extend(path_components(segment))
    return PATH_SEPARATOR.join(components)


def normalize_path(path: str) -> str:
    """Strip outer separators and collapse empty segments.

    >>> normalize_path("//a///b/")
    'a/b'
    >>> normalize_path("/")
    ''
    """
    return PATH_SEPARATOR.join(path_components(path))


def base_name(path: str) -> str:
    """Last segment of the path, or the root for the root."""
    components = path_components(path)
    return components[-1] if components else ROOT_PATH


def is_root(path: str) -> bool:
    return normalize_path(path) == ROOT_PATH


def has_path_prefix(path: str, prefix: str) -> bool:
    """Whether normalized ``path`` starts with normalized ``prefix``.

    Plain string prefix, so ``ab`` starts with ``a``; callers wanting
    segment boundaries compare components instead.
    """
    return normalize_path(path).startswith(normalize_path(prefix))
