"""Request and response models of the HTTP surface.

Binary payloads travel as base64 text.
"""

import base64
import binascii
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from ..core.exceptions import InvalidFormatError
from ..features.certificates.entities import Certificate
from ..features.directories.entities import SearchMatch
from ..features.files.entities import File, Permission


def decode_data(data: Optional[str]) -> Optional[bytes]:
    """Decode a base64 payload, ``None`` passes through."""
    if data is None:
        return None
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidFormatError("Data must be base64 encoded", details={"cause": str(e)}) from e


class PermissionsModel(BaseModel):
    read: bool = False
    write: bool = False
    owner: bool = False

    @classmethod
    def from_permission(cls, permission: Permission) -> "PermissionsModel":
        return cls(
            read=bool(permission & Permission.READ),
            write=bool(permission & Permission.WRITE),
            owner=bool(permission & Permission.OWNER),
        )

    def to_permission(self) -> Permission:
        permission = Permission.NONE
        if self.read:
            permission |= Permission.READ
        if self.write:
            permission |= Permission.WRITE
        if self.owner:
            permission |= Permission.OWNER
        return permission


class MetadataEntry(BaseModel):
    key: str
    value: str


class PermissionEntry(BaseModel):
    uid: int
    permissions: PermissionsModel


def metadata_dict(entries: List[MetadataEntry]) -> Dict[str, str]:
    return {entry.key: entry.value for entry in entries}


class FileDescriptor(BaseModel):
    """File as seen by the caller."""

    id: str = Field("", description="File ID, empty for synthetic directories")
    name: str = Field(..., description="File name")
    flags: int = Field(0, description="Blurred 0x01, Directory 0x02")
    metadata: List[MetadataEntry] = Field(default_factory=list)
    permissions: List[PermissionEntry] = Field(default_factory=list)
    data: str = Field("", description="Base64 encoded payload")

    @classmethod
    def from_entity(cls, file: File) -> "FileDescriptor":
        return cls(
            id=file.id or "",
            name=file.name,
            flags=int(file.flags),
            metadata=[MetadataEntry(key=key, value=value) for key, value in sorted(file.metadata.items())],
            permissions=[
                PermissionEntry(uid=uid, permissions=PermissionsModel.from_permission(perms))
                for uid, perms in sorted(file.permissions.items())
            ],
            data=base64.b64encode(file.data).decode("ascii"),
        )


class CreateFileRequest(BaseModel):
    path: str = Field(..., description="Destination path in the caller's directory")
    data: str = Field("", description="Base64 encoded payload")
    metadata: List[MetadataEntry] = Field(default_factory=list)


class UpdateFileRequest(BaseModel):
    name: Optional[str] = None
    data: Optional[str] = Field(None, description="Base64 encoded payload")
    metadata: List[MetadataEntry] = Field(default_factory=list)


class GrantRequest(BaseModel):
    uid: int = Field(..., description="Grantee user ID")
    permissions: PermissionsModel


class MatchSpan(BaseModel):
    start: int = Field(..., description="Match start in the absolute path")
    end: int = Field(..., description="Match end in the absolute path, exclusive")


class DirectoryListingResponse(BaseModel):
    """Files keyed by child name, or by full path for searches.

    Search results also carry the match span of every hit under ``matches``.
    """

    files: Dict[str, FileDescriptor] = Field(default_factory=dict)
    matches: Dict[str, MatchSpan] = Field(default_factory=dict)

    @classmethod
    def from_entities(cls, files: Dict[str, File]) -> "DirectoryListingResponse":
        return cls(files={key: FileDescriptor.from_entity(file) for key, file in files.items()})

    @classmethod
    def from_matches(cls, matches: List[SearchMatch]) -> "DirectoryListingResponse":
        return cls(
            files={match.path: FileDescriptor.from_entity(match.file) for match in matches},
            matches={match.path: MatchSpan(start=match.start, end=match.end) for match in matches},
        )


class CertificateResponse(BaseModel):
    id: str
    permissions: PermissionsModel
    token: str

    @classmethod
    def from_entity(cls, certificate: Certificate) -> "CertificateResponse":
        return cls(
            id=certificate.id,
            permissions=PermissionsModel.from_permission(certificate.permissions),
            token=certificate.token,
        )
