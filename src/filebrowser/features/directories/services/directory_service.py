"""Directory service.

Orchestrates a user's Directory against the directory and file
repositories: placement, removal, listing and search.
"""

import logging
from typing import Dict, List, Optional, Tuple

from ....core.exceptions import AlreadyExistsError, NotFoundError
from ...files.entities.file import File, Permission
from ...files.entities.protocols import FileRepository
from ..entities.directory import Directory
from ..entities.filters import SearchMatch, aggregate, apply_filters, directory_filter, search_paths
from ..entities.protocols import DirectoryRepository

logger = logging.getLogger(__name__)


class DirectoryService:
    """Service for per-user directory operations."""

    def __init__(self, directories: DirectoryRepository, files: FileRepository):
        self._directories = directories
        self._files = files

    async def create(self, user_id: int) -> Directory:
        """Create the user's empty directory.

        Raises:
            AlreadyExistsError: the user already has one
        """
        if await self._directories.find_by_user(user_id) is not None:
            raise AlreadyExistsError(
                f"Directory for user {user_id} already exists",
                details={"user_id": user_id},
            )

        directory = await self._directories.create(Directory(user_id=user_id))
        logger.info(f"Created directory {directory.id} for user {user_id}")
        return directory

    async def get(self, user_id: int) -> Directory:
        directory = await self._directories.find_by_user(user_id)
        if directory is None:
            raise NotFoundError(f"Directory for user {user_id} not found", details={"user_id": user_id})
        return directory

    async def add_file(self, user_id: int, file_id: str, path: str, shared: bool = False) -> str:
        """Place a file in the user's directory and return its final path."""
        directory = await self.get(user_id)
        final_path = directory.add_file(file_id, path, shared=shared)
        await self._directories.save(directory)

        logger.debug(f"Placed file {file_id} at '{final_path}' for user {user_id}")
        return final_path

    async def remove_file(self, user_id: int, file_id: str) -> bool:
        """Drop a file from the user's directory; silent when absent."""
        directory = await self._directories.find_by_user(user_id)
        if directory is None or not directory.remove_file(file_id):
            return False

        await self._directories.save(directory)
        logger.debug(f"Removed file {file_id} from directory of user {user_id}")
        return True

    async def file_id_by_path(self, user_id: int, path: str) -> Optional[str]:
        directory = await self._directories.find_by_user(user_id)
        if directory is None:
            return None
        return directory.file_id_by_path(path)

    async def list_by_path(self, user_id: int, path: str) -> Dict[str, File]:
        """Children of ``path`` keyed by name, child directories aggregated."""
        entries = await self._entries(user_id)
        return aggregate(apply_filters(entries, [directory_filter(path)]))

    async def search(self, user_id: int, pattern: str) -> List[SearchMatch]:
        """Files and directories whose absolute path matches ``pattern``, case-insensitively."""
        entries = await self._entries(user_id)
        return search_paths(entries, pattern)

    async def delete(self, user_id: int) -> bool:
        deleted = await self._directories.delete(user_id)
        if deleted:
            logger.info(f"Deleted directory of user {user_id}")
        return deleted

    async def _entries(self, user_id: int) -> List[Tuple[str, File]]:
        """Readable files of the directory, redacted for non-owners.

        Entries whose file no longer exists are dropped.
        """
        directory = await self.get(user_id)
        files = await self._files.find_by_ids(directory.file_ids())

        entries = []
        for path, file_id in directory.files.items():
            file = files.get(file_id)
            if file is None or not file.can(user_id, Permission.READ):
                continue
            entries.append((path, file if file.is_owner(user_id) else file.hide_protected(user_id)))
        return entries
