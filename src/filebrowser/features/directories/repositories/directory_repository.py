"""Directory repository over the document store.

Persisted shape of the ``directories`` collection::

    {"_id": str, "user_id": int, "files": {"<path>": "<file id>"}}
"""

import logging
from typing import Any, Dict, Optional

from ....core.exceptions import NotFoundError, UnidentifiedError, UnknownError
from ....infrastructure.database import ID_FIELD, DocumentStore
from ..entities.directory import Directory
from ..entities.protocols import DirectoryRepository

logger = logging.getLogger(__name__)

DIRECTORIES_COLLECTION = "directories"


def encode_directory(directory: Directory) -> Dict[str, Any]:
    document = {"user_id": directory.user_id, "files": dict(directory.files)}
    if directory.id is not None:
        document[ID_FIELD] = directory.id
    return document


def decode_directory(document: Dict[str, Any]) -> Directory:
    try:
        return Directory(
            id=document.get(ID_FIELD),
            user_id=int(document["user_id"]),
            files={str(path): str(file_id) for path, file_id in (document.get("files") or {}).items()},
        )
    except (KeyError, TypeError, ValueError) as e:
        logger.error(f"Corrupt directory document {document.get(ID_FIELD)}: {e}")
        raise UnknownError(
            "Corrupt directory document",
            details={"directory_id": document.get(ID_FIELD), "cause": str(e)},
        ) from e


class DocumentDirectoryRepository(DirectoryRepository):
    """Directory repository backed by a DocumentStore."""

    def __init__(self, store: DocumentStore, collection: str = DIRECTORIES_COLLECTION):
        self._store = store
        self._collection = collection

    async def find_by_user(self, user_id: int) -> Optional[Directory]:
        document = await self._store.find_one(self._collection, {"user_id": user_id})
        return decode_directory(document) if document is not None else None

    async def create(self, directory: Directory) -> Directory:
        directory.id = await self._store.insert_one(self._collection, encode_directory(directory))
        logger.debug(f"Created directory {directory.id} for user {directory.user_id}")
        return directory

    async def save(self, directory: Directory) -> Directory:
        if directory.id is None:
            raise UnidentifiedError(
                "Cannot save a directory without id",
                details={"user_id": directory.user_id},
            )

        matched = await self._store.replace_one(
            self._collection, {ID_FIELD: directory.id}, encode_directory(directory)
        )
        if not matched:
            raise NotFoundError(
                f"Directory {directory.id} not found",
                details={"directory_id": directory.id},
            )
        return directory

    async def delete(self, user_id: int) -> bool:
        return await self._store.delete_one(self._collection, {"user_id": user_id})
