"""Handles user lifecycle events."""

import logging

from pydantic import ValidationError

from ....core.exceptions import FileBrowserError
from ...directories.services.directory_service import DirectoryService
from ...files.services.file_service import FileService
from ...users.entities.profile import PROFILE_PATH, UserProfile
from ..entities.payloads import EVENT_KIND_CREATED, EVENT_KIND_DELETED, UserEventPayload

logger = logging.getLogger(__name__)


class UserEventHandler:
    """Creates and removes user directories.

    Failures are logged and never raised, the delivery is already
    acknowledged when the handler runs.
    """

    def __init__(self, directories: DirectoryService, files: FileService):
        self._directories = directories
        self._files = files

    async def __call__(self, body: bytes) -> None:
        await self.on_event(body)

    async def on_event(self, body: bytes) -> None:
        try:
            event = UserEventPayload.model_validate_json(body)
        except ValidationError as e:
            logger.error(f"Discarding malformed user event {body!r}: {e}")
            return

        if event.event_kind == EVENT_KIND_CREATED:
            await self.on_user_created(event)
        elif event.event_kind == EVENT_KIND_DELETED:
            await self.on_user_deleted(event)
        else:
            logger.warning(f"Unhandled user event kind '{event.event_kind}'")

    async def on_user_created(self, event: UserEventPayload) -> None:
        logger.info(f"Handling user created event for user {event.user_id}")
        try:
            await self._directories.create(event.user_id)
        except FileBrowserError as e:
            logger.error(f"Failed to create directory for user {event.user_id}: {e}")
            return

        profile = UserProfile(name=event.name, email=event.email)
        try:
            await self._files.create(event.user_id, PROFILE_PATH, profile.model_dump_json().encode("utf-8"))
        except FileBrowserError as e:
            logger.error(f"Failed to create profile file for user {event.user_id}: {e}")

    async def on_user_deleted(self, event: UserEventPayload) -> None:
        logger.info(f"Handling user deleted event for user {event.user_id}")
        try:
            directory = await self._directories.get(event.user_id)
            await self._files.remove_user(event.user_id, directory.file_ids())
            await self._directories.delete(event.user_id)
        except FileBrowserError as e:
            logger.error(f"Failed to remove user {event.user_id}: {e}")
