from .directory_service import DirectoryService

__all__ = ["DirectoryService"]
