"""Certificate service.

Hands out file access certificates and keeps the issued ones on record, so
deleting that record revokes the token before it expires.
"""

import logging
from typing import Optional

from ....core.exceptions import InvalidTokenError, UnauthorizedError
from ...files.entities.file import File, Permission
from ...files.entities.protocols import FileRepository
from ..entities.certificate import Certificate
from ..entities.protocols import CertificateRepository
from .certificate_engine import CertificateEngine

logger = logging.getLogger(__name__)


class CertificateService:
    """Service for file access certificates."""

    def __init__(
        self,
        engine: CertificateEngine,
        certificates: CertificateRepository,
        files: FileRepository,
    ):
        self._engine = engine
        self._certificates = certificates
        self._files = files

    async def get(self, user_id: int, file_id: str) -> Certificate:
        """Certificate of ``user_id`` for ``file_id``.

        The stored certificate is reused while its token is still valid and
        its snapshot matches the current permissions; otherwise a fresh one
        replaces it.

        Raises:
            NotFoundError: the file does not exist
            UnauthorizedError: the user holds no permission on the file
        """
        file = await self._files.find(file_id)
        if not file.can(user_id, Permission.READ):
            logger.warning(f"User {user_id} requested a certificate for file {file_id} without access")
            raise UnauthorizedError(
                f"User {user_id} cannot access file {file_id}",
                details={"file_id": file_id, "user_id": user_id},
            )

        current = Certificate.for_file(user_id, file)
        stored = await self._certificates.find_by_user_and_file(user_id, file_id)
        if stored is not None:
            if self._still_valid(stored) and stored.permissions == current.permissions:
                return stored
            await self._certificates.delete(stored.id)

        return await self.issue(user_id, file)

    async def issue(self, user_id: int, file: File) -> Certificate:
        """Persist, sign and store a new certificate."""
        certificate = await self._certificates.create(Certificate.for_file(user_id, file))
        self._engine.sign(certificate)
        await self._certificates.save(certificate)

        logger.info(f"Issued certificate {certificate.id} for user {user_id} on file {file.id}")
        return certificate

    async def parse(self, token: str) -> Certificate:
        """Verify ``token`` and require its certificate to be on record.

        Raises:
            InvalidTokenError: bad token or revoked certificate
        """
        certificate = self._engine.parse(token)
        if await self._certificates.find(certificate.id) is None:
            raise InvalidTokenError(
                "Certificate has been revoked",
                details={"certificate_id": certificate.id},
            )
        return certificate

    async def revoke(self, file_id: str, user_id: Optional[int] = None) -> int:
        """Revoke the certificates of a file, or those of one user on it."""
        revoked = await self._certificates.delete_by_file(file_id, user_id)
        if revoked:
            logger.info(f"Revoked {revoked} certificate(s) on file {file_id}")
        return revoked

    def _still_valid(self, certificate: Certificate) -> bool:
        if not certificate.token:
            return False
        try:
            self._engine.parse(certificate.token)
        except InvalidTokenError:
            return False
        return True
