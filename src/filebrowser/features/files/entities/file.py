"""File domain entity.

A File is the metadata-plus-payload aggregate shared between users through
per-user permission sets. The content itself may live in an external
service referenced by the ``url`` or ``ref`` metadata keys.
"""

import re
from dataclasses import dataclass, field, replace
from enum import IntFlag
from typing import Dict, List, Optional

from ....core.exceptions import ProtectedContentError, RegexNotMatchError
from ....utils.timestamps import now_timestamp


class Permission(IntFlag):
    """Per-user permission bits."""
    NONE = 0
    READ = 1
    WRITE = 2
    OWNER = 4
    BLURRED = 8  # view only, never persisted


class FileFlags(IntFlag):
    """File flag bits."""
    NONE = 0
    BLURRED = 0x01
    DIRECTORY = 0x02  # synthesized by directory listings only


# Reserved metadata keys
CREATED_AT = "created_at"
UPDATED_AT = "updated_at"
DELETED_AT = "deleted_at"
SIZE = "size"
APP = "app"
URL = "url"
REF = "ref"

# Keys recomputed by the server whatever the client sends
SERVER_MANAGED_KEYS = frozenset([CREATED_AT, UPDATED_AT, DELETED_AT, SIZE])

OWNER_PERMISSIONS = Permission.OWNER | Permission.READ | Permission.WRITE

FILENAME_PATTERN = re.compile(r"^[^/]+$")


def validate_name(name: str) -> str:
    """Return ``name`` if it is a valid file name.

    Raises:
        RegexNotMatchError: name is empty or holds a path separator
    """
    if not isinstance(name, str) or not FILENAME_PATTERN.match(name):
        raise RegexNotMatchError(
            f"Invalid file name: {name!r}",
            details={"name": name, "pattern": FILENAME_PATTERN.pattern},
        )
    return name


@dataclass
class File:
    """File domain entity.

    ``id`` stays ``None`` until the file is first persisted. ``protected``
    marks a redacted view produced by :meth:`hide_protected`; repositories
    refuse to save it.
    """

    name: str
    id: Optional[str] = None
    flags: FileFlags = FileFlags.NONE
    metadata: Dict[str, str] = field(default_factory=dict)
    permissions: Dict[int, Permission] = field(default_factory=dict)
    data: bytes = b""
    protected: bool = field(default=False, repr=False)

    def __post_init__(self):
        validate_name(self.name)

    @classmethod
    def create(
        cls,
        name: str,
        data: bytes = b"",
        metadata: Optional[Dict[str, str]] = None,
        owner: Optional[int] = None,
    ) -> "File":
        """Build a new file with seeded timestamps.

        When ``owner`` is given that user receives Owner|Read|Write.
        """
        file = cls(name=name, data=data)
        now = now_timestamp()
        file.metadata[CREATED_AT] = now
        file.metadata[UPDATED_AT] = now
        file.metadata[SIZE] = str(len(data))
        if metadata:
            file.merge_metadata(metadata)
        if owner is not None:
            file.permissions[owner] = OWNER_PERMISSIONS
        return file

    @property
    def is_directory(self) -> bool:
        return bool(self.flags & FileFlags.DIRECTORY)

    @property
    def is_blurred(self) -> bool:
        return bool(self.flags & FileFlags.BLURRED)

    def touch(self) -> None:
        """Refresh ``updated_at``."""
        self.metadata[UPDATED_AT] = now_timestamp()

    def rename(self, name: str) -> None:
        self.name = validate_name(name)
        self.touch()

    def set_data(self, data: bytes) -> None:
        self.data = data
        self.metadata[SIZE] = str(len(data))
        self.touch()

    def merge_metadata(self, values: Dict[str, str]) -> None:
        """Merge client metadata, ignoring server managed keys."""
        for key, value in values.items():
            if key in SERVER_MANAGED_KEYS:
                continue
            self.metadata[key] = value
        self.touch()

    def grant(self, user_id: int, permissions: Permission) -> None:
        self.permissions[user_id] = self.permissions.get(user_id, Permission.NONE) | permissions
        self.touch()

    def revoke(self, user_id: int, permissions: Permission) -> None:
        """Clear ``permissions`` for the user, dropping the entry once empty."""
        if user_id not in self.permissions:
            return

        remaining = self.permissions[user_id] & ~permissions
        if remaining:
            self.permissions[user_id] = remaining
        else:
            del self.permissions[user_id]
        self.touch()

    def revoke_access(self, user_id: int) -> bool:
        """Drop every permission of the user.

        Raises:
            ProtectedContentError: the user is the last owner
        """
        if user_id not in self.permissions:
            return False

        if self.owners() == [user_id]:
            raise ProtectedContentError(
                f"User {user_id} is the last owner of file {self.id}",
                details={"file_id": self.id, "user_id": user_id},
            )

        del self.permissions[user_id]
        self.touch()
        return True

    def owners(self) -> List[int]:
        return [uid for uid, perms in self.permissions.items() if perms & Permission.OWNER]

    def shared_with(self) -> List[int]:
        return [uid for uid, perms in self.permissions.items() if perms]

    def permissions_for(self, user_id: int) -> Permission:
        """Effective permissions; Owner implies Read and Write."""
        perms = self.permissions.get(user_id, Permission.NONE)
        if perms & Permission.OWNER:
            perms |= Permission.READ | Permission.WRITE
        return perms

    def can(self, user_id: int, permission: Permission) -> bool:
        return (self.permissions_for(user_id) & permission) == permission

    def is_owner(self, user_id: int) -> bool:
        return bool(self.permissions.get(user_id, Permission.NONE) & Permission.OWNER)

    def hide_protected(self, user_id: int) -> "File":
        """Redacted view for ``user_id``.

        Keeps the permissions of the caller and of every owner, drops the
        rest and marks the copy blurred. The source entity is left untouched.
        """
        visible = {
            uid: perms
            for uid, perms in self.permissions.items()
            if uid == user_id or perms & Permission.OWNER
        }
        return replace(
            self,
            flags=self.flags | FileFlags.BLURRED,
            metadata=dict(self.metadata),
            permissions=visible,
            protected=True,
        )
