"""
Configuration for the filebrowser service.

Every option is read from the environment (or a ``.env`` file) through
pydantic-settings, once per process.
"""
import json
import re
from datetime import timedelta
from functools import lru_cache
from typing import Annotated, List, Optional, Union

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|h|m|s)")
_DURATION_UNITS = {"h": 3600.0, "m": 60.0, "s": 1.0, "ms": 0.001}


def parse_duration(value: str) -> timedelta:
    """Parse compact durations such as ``1h30m``, ``45s`` or ``-1h``."""
    text = value.strip()
    sign = -1 if text.startswith("-") else 1
    text = text.lstrip("+-")

    position = 0
    seconds = 0.0
    for match in _DURATION_PART.finditer(text):
        if match.start() != position:
            break
        seconds += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        position = match.end()

    if position == 0 or position != len(text):
        raise ValueError(f"invalid duration: {value!r}")
    return timedelta(seconds=sign * seconds)


class Settings(BaseSettings):
    """Service settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    app_name: str = Field(default="filebrowser")

    # Document store
    database_url: str = Field(description="Document-store connection string")
    database_name: Optional[str] = Field(default=None)
    database_pool_min_size: int = Field(default=1)
    database_pool_max_size: int = Field(default=10)
    database_command_timeout: float = Field(default=30.0)

    # Broker
    redis_url: str = Field(description="Broker connection string")
    users_exchange: str = Field(default="users")
    users_queue: str = Field(default="filebrowser.users")
    files_exchange: str = Field(default="files")
    files_queue: str = Field(default="filebrowser.files")
    consume_events: bool = Field(default=True)

    # Certificates
    token_signing_key: SecretStr = Field(description="Base64 encoded PKCS#8 P-256 private key")
    token_ttl: Optional[timedelta] = Field(default=None)
    token_issuer: str = Field(default="filebrowser")

    # Events
    event_issuer: str = Field(default="filebrowser")
    discarded_issuers: Annotated[List[str], NoDecode] = Field(default_factory=list)

    # Server
    uid_header: str = Field(default="X-Uid")
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8000)
    network: str = Field(default="tcp")

    @field_validator("token_ttl", mode="before")
    @classmethod
    def _parse_token_ttl(cls, value: Union[str, int, float, timedelta, None]):
        if value is None or value == "":
            return None
        if isinstance(value, str):
            text = value.strip()
            unsigned = text.lstrip("+-")
            if unsigned.isdigit():
                return timedelta(seconds=int(text))
            if not unsigned.upper().startswith("P"):
                return parse_duration(text)
        return value

    @field_validator("discarded_issuers", mode="before")
    @classmethod
    def _split_issuers(cls, value: Union[str, List[str], None]):
        if value is None:
            return []
        if isinstance(value, str):
            text = value.strip()
            if text.startswith("["):
                return json.loads(text)
            return [issuer.strip() for issuer in text.split(",") if issuer.strip()]
        return value

    @field_validator("network")
    @classmethod
    def _check_network(cls, value: str) -> str:
        value = value.lower()
        if value not in ("tcp", "unix"):
            raise ValueError("network must be 'tcp' or 'unix'")
        return value

    @property
    def ignored_event_issuers(self) -> frozenset:
        """Issuers whose file events are dropped, this service included."""
        return frozenset([self.event_issuer, *self.discarded_issuers])


@lru_cache
def get_settings() -> Settings:
    return Settings()
