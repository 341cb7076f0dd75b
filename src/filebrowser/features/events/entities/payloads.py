"""Event wire formats.

User events::

    {"user_id": int32, "event_issuer": str, "event_kind": "created"|"deleted",
     "name": str, "email": str}

File events::

    {"user_id": int32, "app_id": str, "file_name": str, "file_id": str,
     "file_reference": str, "event_issuer": str, "event_kind": "created"|"deleted"}
"""

from pydantic import BaseModel, ConfigDict, Field

EVENT_KIND_CREATED = "created"
EVENT_KIND_DELETED = "deleted"

INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1


class UserEventPayload(BaseModel):
    """User lifecycle event."""

    model_config = ConfigDict(extra="ignore")

    user_id: int = Field(ge=INT32_MIN, le=INT32_MAX)
    event_issuer: str = ""
    event_kind: str
    name: str = ""
    email: str = ""


class FileEventPayload(BaseModel):
    """File lifecycle event.

    ``file_reference`` names the record of the receiving service a file
    event refers to, empty when the sender does not know it.
    """

    model_config = ConfigDict(extra="ignore")

    user_id: int = Field(ge=INT32_MIN, le=INT32_MAX)
    app_id: str = ""
    file_name: str = ""
    file_id: str = ""
    file_reference: str = ""
    event_issuer: str = ""
    event_kind: str
