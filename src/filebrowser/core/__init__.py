"""Core building blocks shared by every filebrowser feature."""
