"""Directory domain entity.

A Directory maps normalized logical paths to file ids for one user. Files
are referenced by id only; loading them is left to the file repository.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ....core.exceptions import InvalidFormatError
from ....utils.paths import ROOT_PATH, is_root, join_path, normalize_path, path_components


@dataclass
class Directory:
    """Directory domain entity.

    ``files`` maps path to file id; a file id appears under at most one path.
    """

    user_id: int
    id: Optional[str] = None
    files: Dict[str, str] = field(default_factory=dict)

    def get_available_path(self, path: str) -> str:
        """First free path for ``path``.

        Every segment that collides with an existing key at its level is
        renamed ``"<segment> (n)"`` with n counting from 1, so ``a/b`` lands
        on ``a (1)/b`` when ``a`` is already a file. The last segment also
        avoids names already used as directories, so ``x`` lands on
        ``x (1)`` when ``x/y`` exists.
        """
        segments = path_components(path)
        prefix = ROOT_PATH
        for index, segment in enumerate(segments):
            is_leaf = index == len(segments) - 1
            candidate = segment
            counter = 0
            while self._is_taken(join_path(prefix, candidate), is_leaf):
                counter += 1
                candidate = f"{segment} ({counter})"
            prefix = join_path(prefix, candidate)
        return prefix

    def _is_taken(self, path: str, as_file: bool) -> bool:
        if path in self.files:
            return True
        if not as_file:
            return False
        directory = path + "/"
        return any(key.startswith(directory) for key in self.files)

    def add_file(self, file_id: str, path: str, shared: bool = False) -> str:
        """Place ``file_id`` at ``path`` and return the final path.

        A file already in the directory is moved. ``shared`` stores the
        path as given, the caller guarantees it is unique.
        """
        if is_root(path):
            raise InvalidFormatError("Cannot place a file at the root path", details={"path": path})

        destination = normalize_path(path)
        self.remove_file(file_id)
        if not shared:
            destination = self.get_available_path(destination)

        self.files[destination] = file_id
        return destination

    def remove_file(self, file_id: str) -> bool:
        """Drop every entry pointing at ``file_id``."""
        paths = [path for path, current in self.files.items() if current == file_id]
        for path in paths:
            del self.files[path]
        return bool(paths)

    def file_id_by_path(self, path: str) -> Optional[str]:
        return self.files.get(normalize_path(path))

    def path_of(self, file_id: str) -> Optional[str]:
        for path, current in self.files.items():
            if current == file_id:
                return path
        return None

    def file_ids(self) -> List[str]:
        return list(dict.fromkeys(self.files.values()))
