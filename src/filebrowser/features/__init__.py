"""Feature modules of the filebrowser service."""
