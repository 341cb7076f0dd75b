"""Version information for filebrowser."""

__version__ = "0.1.0"
