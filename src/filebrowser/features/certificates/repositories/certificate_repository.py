"""Certificate repository over the document store.

Persisted shape of the ``certificates`` collection::

    {"_id": str, "file_id": str, "user_id": int,
     "can_read": bool, "can_write": bool, "is_owner": bool, "token": str}
"""

import logging
from typing import Any, Dict, Optional

from ....core.exceptions import NotFoundError, UnidentifiedError, UnknownError
from ....infrastructure.database import ID_FIELD, DocumentStore
from ...files.entities.file import Permission
from ..entities.certificate import Certificate
from ..entities.protocols import CertificateRepository

logger = logging.getLogger(__name__)

CERTIFICATES_COLLECTION = "certificates"


def encode_certificate(certificate: Certificate) -> Dict[str, Any]:
    document = {
        "file_id": certificate.file_id,
        "user_id": certificate.user_id,
        "can_read": certificate.can_read,
        "can_write": certificate.can_write,
        "is_owner": certificate.is_owner,
        "token": certificate.token,
    }
    if certificate.id is not None:
        document[ID_FIELD] = certificate.id
    return document


def decode_certificate(document: Dict[str, Any]) -> Certificate:
    try:
        permissions = Permission.NONE
        if document.get("can_read"):
            permissions |= Permission.READ
        if document.get("can_write"):
            permissions |= Permission.WRITE
        if document.get("is_owner"):
            permissions |= Permission.OWNER

        return Certificate(
            id=document.get(ID_FIELD),
            file_id=document["file_id"],
            user_id=int(document["user_id"]),
            permissions=permissions,
            token=document.get("token"),
        )
    except (KeyError, TypeError, ValueError) as e:
        logger.error(f"Corrupt certificate document {document.get(ID_FIELD)}: {e}")
        raise UnknownError(
            "Corrupt certificate document",
            details={"certificate_id": document.get(ID_FIELD), "cause": str(e)},
        ) from e


class DocumentCertificateRepository(CertificateRepository):
    """Certificate repository backed by a DocumentStore."""

    def __init__(self, store: DocumentStore, collection: str = CERTIFICATES_COLLECTION):
        self._store = store
        self._collection = collection

    async def find(self, certificate_id: str) -> Optional[Certificate]:
        document = await self._store.find_one(self._collection, {ID_FIELD: certificate_id})
        return decode_certificate(document) if document is not None else None

    async def find_by_user_and_file(self, user_id: int, file_id: str) -> Optional[Certificate]:
        document = await self._store.find_one(self._collection, {"user_id": user_id, "file_id": file_id})
        return decode_certificate(document) if document is not None else None

    async def create(self, certificate: Certificate) -> Certificate:
        certificate.id = await self._store.insert_one(self._collection, encode_certificate(certificate))
        return certificate

    async def save(self, certificate: Certificate) -> Certificate:
        if certificate.id is None:
            raise UnidentifiedError(
                "Cannot save a certificate without id",
                details={"file_id": certificate.file_id, "user_id": certificate.user_id},
            )

        matched = await self._store.replace_one(
            self._collection, {ID_FIELD: certificate.id}, encode_certificate(certificate)
        )
        if not matched:
            raise NotFoundError(
                f"Certificate {certificate.id} not found",
                details={"certificate_id": certificate.id},
            )
        return certificate

    async def delete(self, certificate_id: str) -> bool:
        return await self._store.delete_one(self._collection, {ID_FIELD: certificate_id})

    async def delete_by_file(self, file_id: str, user_id: Optional[int] = None) -> int:
        query: Dict[str, Any] = {"file_id": file_id}
        if user_id is not None:
            query["user_id"] = user_id
        return await self._store.delete_many(self._collection, query)
