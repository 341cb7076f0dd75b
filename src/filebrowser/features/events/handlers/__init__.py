from .file_event_handler import FileEventHandler
from .user_event_handler import UserEventHandler

__all__ = ["FileEventHandler", "UserEventHandler"]
