from .certificates import router as certificates_router
from .directory import router as directory_router
from .files import router as files_router
from .profile import router as profile_router

__all__ = ["certificates_router", "directory_router", "files_router", "profile_router"]
