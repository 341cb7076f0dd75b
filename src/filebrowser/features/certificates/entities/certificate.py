"""File access certificate entity.

A certificate snapshots the permissions one user holds on one file. Once
signed its token never changes.
"""

from dataclasses import dataclass
from typing import Optional

from ...files.entities.file import File, Permission

CERTIFICATE_PERMISSIONS = Permission.READ | Permission.WRITE | Permission.OWNER


@dataclass
class Certificate:
    """File access certificate.

    ``id`` is assigned when the certificate is first persisted and becomes
    the ``jti`` claim of the token.
    """

    file_id: str
    user_id: int
    permissions: Permission = Permission.NONE
    id: Optional[str] = None
    issuer: Optional[str] = None
    issued_at: Optional[int] = None
    not_before: Optional[int] = None
    expires_at: Optional[int] = None
    token: Optional[str] = None

    @classmethod
    def for_file(cls, user_id: int, file: File) -> "Certificate":
        """Snapshot of the permissions ``user_id`` holds on ``file``."""
        permissions = file.permissions.get(user_id, Permission.NONE) & CERTIFICATE_PERMISSIONS
        return cls(file_id=file.id, user_id=user_id, permissions=permissions)

    @property
    def is_signed(self) -> bool:
        return self.token is not None

    @property
    def can_read(self) -> bool:
        return bool(self.permissions & Permission.READ)

    @property
    def can_write(self) -> bool:
        return bool(self.permissions & Permission.WRITE)

    @property
    def is_owner(self) -> bool:
        return bool(self.permissions & Permission.OWNER)
