"""File repository over the document store.

Persisted shape of the ``files`` collection::

    {"_id": str, "name": str, "flags": int,
     "permissions": {"<uid>": int}, "metadata": {str: str}, "value": base64}
"""

import base64
import binascii
import logging
from typing import Any, Dict, Iterable, List

from ....core.exceptions import NotFoundError, ProtectedContentError, UnidentifiedError, UnknownError
from ....infrastructure.database import ID_FIELD, DocumentStore
from ..entities.file import File, FileFlags, Permission
from ..entities.protocols import FileRepository

logger = logging.getLogger(__name__)

FILES_COLLECTION = "files"

# Bits that only exist on in-memory views
VIEW_FLAGS = FileFlags.BLURRED | FileFlags.DIRECTORY


def encode_file(file: File) -> Dict[str, Any]:
    """Persisted document for ``file``."""
    permissions = {}
    for uid, perms in file.permissions.items():
        stored = perms & ~Permission.BLURRED
        if stored:
            permissions[str(uid)] = int(stored)

    document = {
        "name": file.name,
        "flags": int(file.flags & ~VIEW_FLAGS),
        "permissions": permissions,
        "metadata": dict(file.metadata),
        "value": base64.b64encode(file.data).decode("ascii"),
    }
    if file.id is not None:
        document[ID_FIELD] = file.id
    return document


def decode_file(document: Dict[str, Any]) -> File:
    """Entity for a persisted document."""
    try:
        return File(
            id=document.get(ID_FIELD),
            name=document["name"],
            flags=FileFlags(int(document.get("flags", 0))),
            metadata=dict(document.get("metadata") or {}),
            permissions={
                int(uid): Permission(int(perms))
                for uid, perms in (document.get("permissions") or {}).items()
            },
            data=base64.b64decode(document.get("value") or ""),
        )
    except (KeyError, TypeError, ValueError, binascii.Error) as e:
        logger.error(f"Corrupt file document {document.get(ID_FIELD)}: {e}")
        raise UnknownError(
            "Corrupt file document",
            details={"file_id": document.get(ID_FIELD), "cause": str(e)},
        ) from e


class DocumentFileRepository(FileRepository):
    """File repository backed by a DocumentStore."""

    def __init__(self, store: DocumentStore, collection: str = FILES_COLLECTION):
        self._store = store
        self._collection = collection

    async def find(self, file_id: str) -> File:
        document = await self._store.find_one(self._collection, {ID_FIELD: file_id})
        if document is None:
            raise NotFoundError(f"File {file_id} not found", details={"file_id": file_id})
        return decode_file(document)

    async def find_by_ids(self, file_ids: Iterable[str]) -> Dict[str, File]:
        documents = await self._store.find_by_ids(self._collection, file_ids)
        files = (decode_file(document) for document in documents)
        return {file.id: file for file in files}

    async def find_by_metadata(self, key: str, value: str) -> List[File]:
        documents = await self._store.find_many(self._collection, {"metadata": {key: value}})
        return [decode_file(document) for document in documents]

    async def create(self, file: File) -> File:
        self._check_persistable(file)
        file.id = await self._store.insert_one(self._collection, encode_file(file))
        logger.debug(f"Created file {file.id}")
        return file

    async def save(self, file: File) -> File:
        self._check_persistable(file)
        if file.id is None:
            raise UnidentifiedError("Cannot save a file without id", details={"name": file.name})

        matched = await self._store.replace_one(self._collection, {ID_FIELD: file.id}, encode_file(file))
        if not matched:
            raise NotFoundError(f"File {file.id} not found", details={"file_id": file.id})
        return file

    async def delete(self, file_id: str) -> bool:
        return await self._store.delete_one(self._collection, {ID_FIELD: file_id})

    @staticmethod
    def _check_persistable(file: File) -> None:
        if file.protected:
            raise ProtectedContentError(
                f"File {file.id} is a redacted view and cannot be persisted",
                details={"file_id": file.id},
            )
