"""Handles file lifecycle events emitted by peer services."""

import logging
from typing import FrozenSet, Iterable

from pydantic import ValidationError

from ....core.exceptions import FileBrowserError
from ...files.entities.file import APP, REF
from ...files.services.file_service import FileService
from ..entities.payloads import EVENT_KIND_CREATED, EVENT_KIND_DELETED, FileEventPayload

logger = logging.getLogger(__name__)


class FileEventHandler:
    """Mirrors peer files as local records referencing them.

    Events whose issuer is in ``discarded_issuers`` are ignored; the set
    is fixed at construction.
    """

    def __init__(self, files: FileService, discarded_issuers: Iterable[str] = ()):
        self._files = files
        self._discarded: FrozenSet[str] = frozenset(discarded_issuers)

    @property
    def discarded_issuers(self) -> FrozenSet[str]:
        return self._discarded

    async def __call__(self, body: bytes) -> None:
        await self.on_event(body)

    async def on_event(self, body: bytes) -> None:
        try:
            event = FileEventPayload.model_validate_json(body)
        except ValidationError as e:
            logger.error(f"Discarding malformed file event {body!r}: {e}")
            return

        if event.event_issuer in self._discarded:
            logger.debug(f"Discarding file event from issuer '{event.event_issuer}'")
            return

        if event.event_kind == EVENT_KIND_CREATED:
            await self.on_file_created(event)
        elif event.event_kind == EVENT_KIND_DELETED:
            await self.on_file_deleted(event)
        else:
            logger.warning(f"Unhandled file event kind '{event.event_kind}'")

    async def on_file_created(self, event: FileEventPayload) -> None:
        metadata = {APP: event.app_id, REF: event.file_id}
        try:
            if event.file_reference:
                # the local record already exists
                await self._files.update(
                    event.user_id,
                    event.file_reference,
                    name=event.file_name or None,
                    metadata=metadata,
                )
                logger.info(f"Linked file {event.file_reference} to {event.event_issuer} file {event.file_id}")
            else:
                file = await self._files.create(event.user_id, event.file_name, metadata=metadata)
                logger.info(f"Mirrored {event.event_issuer} file {event.file_id} as {file.id}")
        except FileBrowserError as e:
            logger.error(
                f"Failed to mirror file {event.file_id} of issuer '{event.event_issuer}' "
                f"for user {event.user_id}: {e}"
            )

    async def on_file_deleted(self, event: FileEventPayload) -> None:
        try:
            if event.file_reference:
                targets = [event.file_reference]
            else:
                mirrors = await self._files.find_by_reference(event.file_id)
                targets = [file.id for file in mirrors if file.is_owner(event.user_id)]

            for target in targets:
                await self._files.delete(event.user_id, target)
                logger.info(f"Deleted mirror {target} of {event.event_issuer} file {event.file_id}")
        except FileBrowserError as e:
            logger.error(
                f"Failed to delete mirror of file {event.file_id} of issuer '{event.event_issuer}' "
                f"for user {event.user_id}: {e}"
            )
