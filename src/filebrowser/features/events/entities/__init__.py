from .payloads import EVENT_KIND_CREATED, EVENT_KIND_DELETED, FileEventPayload, UserEventPayload

__all__ = ["EVENT_KIND_CREATED", "EVENT_KIND_DELETED", "FileEventPayload", "UserEventPayload"]
