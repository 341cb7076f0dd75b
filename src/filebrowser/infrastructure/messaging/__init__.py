"""Event bus implementations."""

from .redis_event_bus import RedisEventBus, EventHandler

__all__ = ["EventHandler", "RedisEventBus"]
