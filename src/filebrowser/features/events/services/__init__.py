from .file_event_bus import FileEventBus

__all__ = ["FileEventBus"]
