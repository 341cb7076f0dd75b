"""Protocol interfaces for directory persistence."""

from abc import abstractmethod
from typing import Optional, Protocol, runtime_checkable

from .directory import Directory


@runtime_checkable
class DirectoryRepository(Protocol):
    """Protocol for directory persistence operations."""

    @abstractmethod
    async def find_by_user(self, user_id: int) -> Optional[Directory]:
        ...

    @abstractmethod
    async def create(self, directory: Directory) -> Directory:
        ...

    @abstractmethod
    async def save(self, directory: Directory) -> Directory:
        ...

    @abstractmethod
    async def delete(self, user_id: int) -> bool:
        ...
