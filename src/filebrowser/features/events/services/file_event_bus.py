"""Publishes file lifecycle events on the files exchange."""

import logging
from typing import Optional

from ....infrastructure.messaging import RedisEventBus
from ...files.entities.file import APP, REF, File
from ...files.entities.protocols import FileEventPublisher
from ..entities.payloads import EVENT_KIND_CREATED, EVENT_KIND_DELETED, FileEventPayload

logger = logging.getLogger(__name__)


class FileEventBus(FileEventPublisher):
    """File event publisher over the event bus."""

    def __init__(self, bus: RedisEventBus, exchange: str, issuer: str):
        self._bus = bus
        self._exchange = exchange
        self._issuer = issuer

    async def file_created(self, user_id: int, file: File, reference: Optional[str] = None) -> None:
        await self._emit(self._payload(EVENT_KIND_CREATED, user_id, file, reference))

    async def file_deleted(self, user_id: int, file: File) -> None:
        await self._emit(self._payload(EVENT_KIND_DELETED, user_id, file, file.metadata.get(REF)))

    def _payload(self, kind: str, user_id: int, file: File, reference: Optional[str]) -> FileEventPayload:
        return FileEventPayload(
            user_id=user_id,
            app_id=file.metadata.get(APP, ""),
            file_name=file.name,
            file_id=file.id or "",
            file_reference=reference or "",
            event_issuer=self._issuer,
            event_kind=kind,
        )

    async def _emit(self, payload: FileEventPayload) -> None:
        await self._bus.publish(self._exchange, payload.model_dump_json().encode("utf-8"))
        logger.info(f"Emitted file {payload.event_kind} event for file {payload.file_id}")
