"""filebrowser: multi-tenant file metadata and access control service."""

from .__version__ import __version__

__all__ = ["__version__"]
