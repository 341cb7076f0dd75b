"""Protocol interfaces for certificate persistence."""

from abc import abstractmethod
from typing import Optional, Protocol, runtime_checkable

from .certificate import Certificate


@runtime_checkable
class CertificateRepository(Protocol):
    """Protocol for certificate persistence operations."""

    @abstractmethod
    async def find(self, certificate_id: str) -> Optional[Certificate]:
        ...

    @abstractmethod
    async def find_by_user_and_file(self, user_id: int, file_id: str) -> Optional[Certificate]:
        ...

    @abstractmethod
    async def create(self, certificate: Certificate) -> Certificate:
        """Persist a new certificate and assign its id."""
        ...

    @abstractmethod
    async def save(self, certificate: Certificate) -> Certificate:
        ...

    @abstractmethod
    async def delete(self, certificate_id: str) -> bool:
        ...

    @abstractmethod
    async def delete_by_file(self, file_id: str, user_id: Optional[int] = None) -> int:
        """Drop the certificates of a file, or of one user on that file."""
        ...
