"""User service: profile lookup."""

import logging

from pydantic import ValidationError

from ....core.exceptions import NotFoundError, UnknownError
from ...directories.services.directory_service import DirectoryService
from ...files.services.file_service import FileService
from ..entities.profile import PROFILE_PATH, UserProfile

logger = logging.getLogger(__name__)


class UserService:
    """Service for user profile operations."""

    def __init__(self, directories: DirectoryService, files: FileService):
        self._directories = directories
        self._files = files

    async def get_profile(self, user_id: int) -> UserProfile:
        """Profile stored in the user's profile file.

        Raises:
            NotFoundError: the user has no profile file
        """
        file_id = await self._directories.file_id_by_path(user_id, PROFILE_PATH)
        if file_id is None:
            raise NotFoundError(f"Profile of user {user_id} not found", details={"user_id": user_id})

        file = await self._files.retrieve(user_id, file_id)
        try:
            return UserProfile.model_validate_json(file.data or b"{}")
        except ValidationError as e:
            logger.error(f"Corrupt profile file {file_id} of user {user_id}: {e}")
            raise UnknownError("Corrupt profile", details={"user_id": user_id, "file_id": file_id}) from e
