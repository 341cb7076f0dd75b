"""Redis Streams event bus.

An exchange is a stream and a queue is a consumer group reading it, so every
service bound to an exchange receives every event while the instances of
one service share the work of their group.
"""

import asyncio
import json
import logging
import os
import socket
from typing import Any, Awaitable, Callable, Dict, Optional, Set, Union

from redis.asyncio import Redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError, ResponseError
from redis.exceptions import TimeoutError as RedisTimeoutError

from ...core.exceptions import ChannelClosedError, UnknownError

logger = logging.getLogger(__name__)

EventHandler = Callable[[bytes], Awaitable[None]]

BODY_FIELD = "body"


class RedisEventBus:
    """Publish to and consume from Redis streams."""

    def __init__(
        self,
        redis_client: Redis,
        consumer_name: Optional[str] = None,
        block_ms: int = 1000,
        batch_size: int = 10,
        max_len: int = 100000,
    ):
        """Initialize Redis event bus.

        Args:
            redis_client: Async Redis client
            consumer_name: Name of this process inside consumer groups
            block_ms: How long a read waits for new entries
            batch_size: Maximum entries per read
            max_len: Approximate maximum stream length
        """
        self._redis = redis_client
        self._consumer = consumer_name or f"{socket.gethostname()}-{os.getpid()}"
        self._block_ms = block_ms
        self._batch_size = batch_size
        self._max_len = max_len

    @classmethod
    def from_url(cls, url: str, **kwargs) -> "RedisEventBus":
        return cls(Redis.from_url(url), **kwargs)

    async def bind(self, exchange: str, queue: str) -> None:
        """Create the consumer group ``queue`` on stream ``exchange``."""
        try:
            await self._redis.xgroup_create(name=exchange, groupname=queue, id="$", mkstream=True)
            logger.info(f"Bound queue '{queue}' to exchange '{exchange}'")
        except ResponseError as e:
            if "BUSYGROUP" not in str(e):
                logger.error(f"Failed to bind queue '{queue}' to exchange '{exchange}': {e}")
                raise UnknownError(f"Failed to bind queue {queue}: {e}") from e
        except RedisError as e:
            logger.error(f"Failed to bind queue '{queue}' to exchange '{exchange}': {e}")
            raise UnknownError(f"Failed to bind queue {queue}: {e}") from e

    async def publish(self, exchange: str, body: Union[bytes, Dict[str, Any]]) -> str:
        """Append ``body`` to ``exchange`` and return the entry id."""
        if isinstance(body, dict):
            body = json.dumps(body).encode("utf-8")

        try:
            message_id = await self._redis.xadd(
                exchange,
                {BODY_FIELD: body},
                maxlen=self._max_len,
                approximate=True,
            )
        except RedisError as e:
            logger.error(f"Failed to publish to exchange '{exchange}': {e}")
            raise UnknownError(f"Failed to publish event: {e}") from e

        logger.debug(f"Published {message_id!r} to exchange '{exchange}'")
        return message_id.decode() if isinstance(message_id, bytes) else str(message_id)

    async def consume(self, exchange: str, queue: str, handler: EventHandler) -> None:
        """Run ``handler`` on every delivery of ``queue`` until cancelled.

        Entries are acknowledged as soon as they are read and each one is
        handled on its own task. On cancellation, or when the connection
        drops, no new entries are read and the running handlers are awaited.

        Raises:
            asyncio.CancelledError: the consumer was cancelled
            ChannelClosedError: the connection dropped first
            UnknownError: any other broker failure, after the running handlers finish
        """
        tasks: Set[asyncio.Task] = set()
        logger.info(f"Consuming queue '{queue}' on exchange '{exchange}' as '{self._consumer}'")

        try:
            while True:
                response = await self._redis.xreadgroup(
                    queue,
                    self._consumer,
                    {exchange: ">"},
                    count=self._batch_size,
                    block=self._block_ms,
                )
                for _stream, messages in response or []:
                    for message_id, fields in messages:
                        await self._redis.xack(exchange, queue, message_id)

                        body = fields.get(BODY_FIELD.encode()) or fields.get(BODY_FIELD)
                        if body is None:
                            logger.warning(f"Discarding entry {message_id!r} without body on '{exchange}'")
                            continue

                        task = asyncio.create_task(self._dispatch(handler, queue, message_id, body))
                        tasks.add(task)
                        task.add_done_callback(tasks.discard)

        except asyncio.CancelledError:
            logger.info(f"Stopping consumer of queue '{queue}', awaiting {len(tasks)} handler(s)")
            await self._drain(tasks)
            raise

        except (RedisConnectionError, RedisTimeoutError) as e:
            logger.error(f"Channel of queue '{queue}' closed: {e}")
            await self._drain(tasks)
            raise ChannelClosedError(
                f"Channel closed while consuming {queue}",
                details={"exchange": exchange, "queue": queue},
            ) from e

        except RedisError as e:
            logger.error(f"Consumer of queue '{queue}' failed: {e}")
            await self._drain(tasks)
            raise UnknownError(
                f"Consumer of {queue} failed: {e}",
                details={"exchange": exchange, "queue": queue},
            ) from e

    async def close(self) -> None:
        await self._redis.aclose()
        logger.info("Closed event bus connection")

    @staticmethod
    async def _dispatch(handler: EventHandler, queue: str, message_id: Any, body: Union[bytes, str]) -> None:
        if isinstance(body, str):
            body = body.encode("utf-8")
        try:
            await handler(body)
        except Exception as e:
            logger.error(f"Handler failed on entry {message_id!r} of queue '{queue}': {e}")

    @staticmethod
    async def _drain(tasks: Set[asyncio.Task]) -> None:
        if tasks:
            await asyncio.gather(*list(tasks), return_exceptions=True)
