"""File service.

Every operation resolves the caller's permission on the target file before
touching it:

    create           implicit, the caller becomes owner
    retrieve         read
    update           write
    grant / revoke   owner
    delete           owner
"""

import logging
from typing import Dict, List, Optional

from ....core.exceptions import (
    FileBrowserError,
    NotFoundError,
    ProtectedContentError,
    UnauthorizedError,
)
from ....utils.paths import base_name
from ...certificates.services.certificate_service import CertificateService
from ...directories.services.directory_service import DirectoryService
from ..entities.file import REF, File, Permission
from ..entities.protocols import FileEventPublisher, FileRepository

logger = logging.getLogger(__name__)

GRANTABLE_PERMISSIONS = Permission.READ | Permission.WRITE | Permission.OWNER


class FileService:
    """Service for file operations on behalf of a user."""

    def __init__(
        self,
        files: FileRepository,
        directories: DirectoryService,
        certificates: Optional[CertificateService] = None,
        events: Optional[FileEventPublisher] = None,
    ):
        """Initialize with injected dependencies.

        Args:
            files: File repository implementation
            directories: Directory service used for placement
            certificates: Optional certificate service, revoked on access loss
            events: Optional publisher announcing file lifecycle events
        """
        self._files = files
        self._directories = directories
        self._certificates = certificates
        self._events = events

    async def create(
        self,
        user_id: int,
        path: str,
        data: bytes = b"",
        metadata: Optional[Dict[str, str]] = None,
    ) -> File:
        """Create a file owned by ``user_id`` and place it at ``path``.

        Raises:
            InvalidFormatError: the last path segment is not a valid name
            NotFoundError: the user has no directory
        """
        file = File.create(base_name(path), data=data, metadata=metadata, owner=user_id)
        file = await self._files.create(file)

        try:
            final_path = await self._directories.add_file(user_id, file.id, path)
        except FileBrowserError:
            await self._files.delete(file.id)
            raise

        logger.info(f"User {user_id} created file {file.id} at '{final_path}'")
        if self._events:
            await self._events.file_created(user_id, file, reference=file.metadata.get(REF))
        return file

    async def resolve_target(self, user_id: int, target: str) -> str:
        """File id for ``target``, a path in the user's directory or a file id."""
        file_id = await self._directories.file_id_by_path(user_id, target)
        return file_id if file_id is not None else target

    async def retrieve(self, user_id: int, target: str) -> File:
        """Load a file for reading, redacted unless the caller owns it."""
        file = await self._load(user_id, await self.resolve_target(user_id, target), Permission.READ)
        return file if file.is_owner(user_id) else file.hide_protected(user_id)

    async def update(
        self,
        user_id: int,
        file_id: str,
        name: Optional[str] = None,
        data: Optional[bytes] = None,
        metadata: Optional[Dict[str, str]] = None,
    ) -> File:
        """Update name, payload and client metadata of a file."""
        file = await self._load(user_id, file_id, Permission.WRITE)

        if name is not None and name != file.name:
            file.rename(name)
        if data is not None:
            file.set_data(data)
        if metadata:
            file.merge_metadata(metadata)
        file.touch()

        await self._files.save(file)
        logger.info(f"User {user_id} updated file {file.id}")
        return file if file.is_owner(user_id) else file.hide_protected(user_id)

    async def delete(self, user_id: int, target: str) -> File:
        """Delete a file and remove it from every directory holding it."""
        file = await self._load(user_id, await self.resolve_target(user_id, target), Permission.OWNER)
        await self._destroy(file)

        logger.info(f"User {user_id} deleted file {file.id}")
        if self._events:
            await self._events.file_deleted(user_id, file)
        return file

    async def grant(self, user_id: int, file_id: str, grantee: int, permissions: Permission) -> File:
        """Grant ``permissions`` on a file to ``grantee``.

        A new grantee finds the file in its directory, keyed by file id.
        """
        file = await self._load(user_id, file_id, Permission.OWNER)
        permissions &= GRANTABLE_PERMISSIONS
        if not permissions:
            return file

        if grantee not in file.permissions:
            await self._directories.add_file(grantee, file.id, file.id, shared=True)

        file.grant(grantee, permissions)
        await self._files.save(file)
        await self._revoke_certificates(file.id, grantee)

        logger.info(f"User {user_id} granted {permissions!r} on file {file.id} to user {grantee}")
        return file

    async def revoke(
        self,
        user_id: int,
        file_id: str,
        grantee: int,
        permissions: Optional[Permission] = None,
    ) -> File:
        """Revoke ``permissions`` of ``grantee``, or all of its access when None.

        Raises:
            ProtectedContentError: the file would be left without owner
        """
        file = await self._load(user_id, file_id, Permission.OWNER)

        if permissions is None:
            file.revoke_access(grantee)
        else:
            if permissions & Permission.OWNER and file.owners() == [grantee]:
                raise ProtectedContentError(
                    f"User {grantee} is the last owner of file {file.id}",
                    details={"file_id": file.id, "user_id": grantee},
                )
            file.revoke(grantee, permissions & GRANTABLE_PERMISSIONS)

        await self._files.save(file)
        if grantee not in file.permissions:
            await self._directories.remove_file(grantee, file.id)
        await self._revoke_certificates(file.id, grantee)

        logger.info(f"User {user_id} revoked access of user {grantee} on file {file.id}")
        return file

    async def find_by_reference(self, reference: str) -> List[File]:
        """Files mirroring the external file ``reference``."""
        return await self._files.find_by_metadata(REF, reference)

    async def remove_user(self, user_id: int, file_ids: List[str]) -> None:
        """Detach a user from ``file_ids``.

        Files the user solely owns are deleted, the user loses access to
        the others.
        """
        files = await self._files.find_by_ids(file_ids)
        for file in files.values():
            if file.owners() == [user_id]:
                await self._destroy(file)
                if self._events:
                    await self._events.file_deleted(user_id, file)
                continue

            if file.revoke_access(user_id):
                await self._files.save(file)
                await self._revoke_certificates(file.id, user_id)

        logger.info(f"Removed user {user_id} from {len(files)} file(s)")

    async def _load(self, user_id: int, file_id: str, permission: Permission) -> File:
        file = await self._files.find(file_id)
        if not file.can(user_id, permission):
            logger.warning(f"User {user_id} lacks {permission!r} on file {file_id}")
            raise UnauthorizedError(
                f"User {user_id} is not allowed to perform this action on file {file_id}",
                details={"file_id": file_id, "user_id": user_id},
            )
        return file

    async def _destroy(self, file: File) -> None:
        for uid in file.shared_with():
            await self._directories.remove_file(uid, file.id)
        await self._revoke_certificates(file.id)

        if not await self._files.delete(file.id):
            raise NotFoundError(f"File {file.id} not found", details={"file_id": file.id})

    async def _revoke_certificates(self, file_id: str, user_id: Optional[int] = None) -> None:
        if self._certificates:
            await self._certificates.revoke(file_id, user_id)
