"""Protocol interfaces for file persistence and event publishing."""

from abc import abstractmethod
from typing import Dict, Iterable, List, Optional, Protocol, runtime_checkable

from .file import File


@runtime_checkable
class FileRepository(Protocol):
    """Protocol for file persistence operations."""

    @abstractmethod
    async def find(self, file_id: str) -> File:
        """Load a file, raising NotFoundError when absent."""
        ...

    @abstractmethod
    async def find_by_ids(self, file_ids: Iterable[str]) -> Dict[str, File]:
        """Load the files that still exist, keyed by id."""
        ...

    @abstractmethod
    async def find_by_metadata(self, key: str, value: str) -> List[File]:
        ...

    @abstractmethod
    async def create(self, file: File) -> File:
        """Persist a new file and assign its id."""
        ...

    @abstractmethod
    async def save(self, file: File) -> File:
        ...

    @abstractmethod
    async def delete(self, file_id: str) -> bool:
        ...


@runtime_checkable
class FileEventPublisher(Protocol):
    """Protocol for announcing file lifecycle events to peer services."""

    @abstractmethod
    async def file_created(self, user_id: int, file: File, reference: Optional[str] = None) -> None:
        ...

    @abstractmethod
    async def file_deleted(self, user_id: int, file: File) -> None:
        ...
