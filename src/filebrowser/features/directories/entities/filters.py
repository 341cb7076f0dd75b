"""Directory listing pipeline.

A filter takes ``(path, file)`` and returns ``(path', file')``, or a
``None`` file to drop the entry. Filters run left to right; the directory
filter may surface several files under the same synthetic directory key,
which :func:`aggregate` folds into a single entry.
"""

import re
from dataclasses import dataclass, replace
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from ....core.exceptions import InvalidFormatError
from ....utils.paths import PATH_SEPARATOR, has_path_prefix, normalize_path, path_components
from ....utils.timestamps import format_timestamp, parse_timestamp
from ...files.entities.file import CREATED_AT, SIZE, UPDATED_AT, File, FileFlags

Entry = Tuple[str, Optional[File]]
FileFilter = Callable[[str, File], Entry]

SYNTHETIC_FLAGS = FileFlags.DIRECTORY | FileFlags.BLURRED


@dataclass(frozen=True)
class SearchMatch:
    """A search hit.

    ``start`` and ``end`` index the match in the absolute form of the
    matched path, that is ``"/" + path``.
    """

    path: str
    file: File
    start: int
    end: int


def _compile(pattern: str, flags: int) -> re.Pattern:
    try:
        return re.compile(pattern, flags)
    except re.error as e:
        raise InvalidFormatError(
            f"Invalid pattern: {pattern!r}",
            details={"pattern": pattern, "cause": str(e)},
        ) from e


def regex_filter(pattern: str, flags: int = 0) -> FileFilter:
    """Keep entries whose normalized path matches ``pattern``.

    Raises:
        InvalidFormatError: pattern does not compile
    """
    compiled = _compile(pattern, flags)

    def apply(path: str, file: File) -> Entry:
        path = normalize_path(path)
        return (path, file) if compiled.search(path) else (path, None)

    return apply


def prefix_filter(target: str) -> FileFilter:
    """Keep entries whose normalized path starts with normalized ``target``."""

    def apply(path: str, file: File) -> Entry:
        path = normalize_path(path)
        return (path, file) if has_path_prefix(path, target) else (path, None)

    return apply


def directory_filter(target: str) -> FileFilter:
    """List the children of directory ``target``.

    Entries below a child directory come back as synthetic directory views
    named after the child, with the id cleared.
    """
    parent = path_components(target)
    depth = len(parent)

    def apply(path: str, file: File) -> Entry:
        segments = path_components(path)
        if len(segments) <= depth or segments[:depth] != parent:
            return path, None

        child = segments[depth]
        if len(segments) > depth + 1:
            synthetic = replace(
                file,
                id=None,
                name=child,
                flags=file.flags | SYNTHETIC_FLAGS,
                metadata=dict(file.metadata),
                permissions={},
                protected=True,
            )
            return child, synthetic
        return child, file

    return apply


def apply_filters(entries: Iterable[Tuple[str, File]], filters: Sequence[FileFilter]) -> List[Tuple[str, File]]:
    """Run ``filters`` over every entry, keeping the survivors in order."""
    results = []
    for path, file in entries:
        current: Optional[File] = file
        for file_filter in filters:
            path, current = file_filter(path, current)
            if current is None:
                break
        if current is not None:
            results.append((path, current))
    return results


def search_paths(entries: Iterable[Tuple[str, File]], pattern: str, flags: int = re.IGNORECASE) -> List[SearchMatch]:
    """Match ``pattern`` against the absolute form of every path.

    A match that ends inside the parent directories of a path is a hit on
    the directory it ends in, surfaced as a synthetic directory. Any other
    match is a hit on the file itself. Hits are unique by path, the first
    match wins.

    Raises:
        InvalidFormatError: pattern does not compile
    """
    compiled = _compile(pattern, flags)

    hits: Dict[str, SearchMatch] = {}
    for path, file in entries:
        segments = path_components(path)
        absolute = PATH_SEPARATOR + PATH_SEPARATOR.join(segments)
        parent_end = absolute.rfind(PATH_SEPARATOR)

        for match in compiled.finditer(absolute):
            depth = absolute.count(PATH_SEPARATOR, 0, match.end())
            if depth and match.end() <= parent_end:
                hit_path = PATH_SEPARATOR.join(segments[:depth])
                hit = File(name=segments[depth - 1], flags=SYNTHETIC_FLAGS, protected=True)
            else:
                hit_path = PATH_SEPARATOR.join(segments)
                hit = file

            if hit_path not in hits:
                hits[hit_path] = SearchMatch(path=hit_path, file=hit, start=match.start(), end=match.end())
    return list(hits.values())


def _timestamps(files: List[File], key: str) -> List[int]:
    return [parse_timestamp(file.metadata[key]) for file in files if key in file.metadata]


def aggregate(entries: Iterable[Tuple[str, File]]) -> Dict[str, File]:
    """Fold filtered entries into a ``name -> file`` mapping.

    Synthetic directories collect ``created_at`` (earliest), ``updated_at``
    (latest) and ``size`` (number of files beneath) from the files they
    stand for, and win over a regular file listed under the same name.
    """
    regular: Dict[str, File] = {}
    grouped: Dict[str, List[File]] = {}
    for name, file in entries:
        if file.is_directory and file.id is None:
            grouped.setdefault(name, []).append(file)
        else:
            regular[name] = file

    listing = dict(regular)
    for name, files in grouped.items():
        metadata = {SIZE: str(len(files))}
        created = _timestamps(files, CREATED_AT)
        if created:
            metadata[CREATED_AT] = format_timestamp(min(created))
        updated = _timestamps(files, UPDATED_AT)
        if updated:
            metadata[UPDATED_AT] = format_timestamp(max(updated))

        listing[name] = File(name=name, flags=SYNTHETIC_FLAGS, metadata=metadata, protected=True)
    return listing
