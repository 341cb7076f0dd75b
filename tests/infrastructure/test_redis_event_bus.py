"""Tests for the Redis Streams event bus."""

import asyncio
import json
from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import ResponseError

from filebrowser.core.exceptions import ChannelClosedError, UnknownError
from filebrowser.infrastructure.messaging import RedisEventBus


@pytest.fixture
def redis():
    """Redis client double."""
    return AsyncMock()


@pytest.fixture
def bus(redis):
    return RedisEventBus(redis, consumer_name="worker-1", block_ms=10)


def batch(exchange, *entries):
    return [(exchange.encode(), list(entries))]


class TestBind:
    """Test cases for binding queues."""

    @pytest.mark.asyncio
    async def test_bind_creates_group(self, bus, redis):
        """Test a queue is a consumer group on the exchange stream."""
        await bus.bind("users", "filebrowser.users")

        redis.xgroup_create.assert_awaited_once_with(
            name="users", groupname="filebrowser.users", id="$", mkstream=True
        )

    @pytest.mark.asyncio
    async def test_bind_existing_group(self, bus, redis):
        """Test binding twice is harmless."""
        redis.xgroup_create.side_effect = ResponseError("BUSYGROUP Consumer Group name already exists")

        await bus.bind("users", "filebrowser.users")

    @pytest.mark.asyncio
    async def test_bind_failure(self, bus, redis):
        """Test other broker errors surface as UnknownError."""
        redis.xgroup_create.side_effect = ResponseError("WRONGTYPE")

        with pytest.raises(UnknownError):
            await bus.bind("users", "filebrowser.users")


class TestPublish:
    """Test cases for publishing."""

    @pytest.mark.asyncio
    async def test_publish_bytes(self, bus, redis):
        """Test the body is stored under a single field."""
        redis.xadd.return_value = b"1-0"

        assert await bus.publish("files", b"payload") == "1-0"
        redis.xadd.assert_awaited_once_with("files", {"body": b"payload"}, maxlen=100000, approximate=True)

    @pytest.mark.asyncio
    async def test_publish_dict(self, bus, redis):
        """Test dictionaries are sent as JSON."""
        redis.xadd.return_value = b"1-0"

        await bus.publish("files", {"event_kind": "created"})

        fields = redis.xadd.await_args.args[1]
        assert json.loads(fields["body"]) == {"event_kind": "created"}

    @pytest.mark.asyncio
    async def test_publish_failure(self, bus, redis):
        """Test broker failures surface as UnknownError."""
        redis.xadd.side_effect = RedisConnectionError("down")

        with pytest.raises(UnknownError):
            await bus.publish("files", b"payload")


class TestConsume:
    """Test cases for the consumer loop."""

    @pytest.mark.asyncio
    async def test_cancel_drains_handlers(self, bus, redis):
        """Test cancellation waits for running handlers and re-raises."""
        responses = [batch("users", (b"1-0", {b"body": b"first"}), (b"1-1", {b"other": b"x"}))]
        received = asyncio.Event()

        async def read(*args, **kwargs):
            if responses:
                return responses.pop()
            await asyncio.Event().wait()

        async def handler(body):
            await asyncio.sleep(0.01)
            received.set()

        redis.xreadgroup.side_effect = read
        consumer = asyncio.create_task(bus.consume("users", "filebrowser.users", handler))
        while redis.xack.await_count < 2:
            await asyncio.sleep(0)

        consumer.cancel()
        with pytest.raises(asyncio.CancelledError):
            await consumer

        assert received.is_set()
        redis.xack.assert_any_await("users", "filebrowser.users", b"1-0")
        redis.xack.assert_any_await("users", "filebrowser.users", b"1-1")

    @pytest.mark.asyncio
    async def test_connection_loss_closes_channel(self, bus, redis):
        """Test a dropped connection drains handlers then raises ChannelClosedError."""
        handler = AsyncMock()
        redis.xreadgroup.side_effect = [
            batch("files", (b"1-0", {"body": "text"})),
            RedisConnectionError("gone"),
        ]

        with pytest.raises(ChannelClosedError):
            await bus.consume("files", "filebrowser.files", handler)

        handler.assert_awaited_once_with(b"text")

    @pytest.mark.asyncio
    async def test_broker_error_drains_handlers(self, bus, redis):
        """Test a lost consumer group awaits running handlers then raises UnknownError."""
        finished = []

        async def handler(body):
            await asyncio.sleep(0.05)
            finished.append(body)

        redis.xreadgroup.side_effect = [
            batch("files", (b"1-0", {b"body": b"a"})),
            ResponseError("NOGROUP No such key 'files' or consumer group"),
        ]

        with pytest.raises(UnknownError):
            await bus.consume("files", "filebrowser.files", handler)

        assert finished == [b"a"]

    @pytest.mark.asyncio
    async def test_handler_failure_is_contained(self, bus, redis):
        """Test a failing handler does not stop the consumer."""
        handler = AsyncMock(side_effect=[RuntimeError("boom"), None])
        redis.xreadgroup.side_effect = [
            batch("files", (b"1-0", {b"body": b"a"})),
            batch("files", (b"1-1", {b"body": b"b"})),
            RedisConnectionError("gone"),
        ]

        with pytest.raises(ChannelClosedError):
            await bus.consume("files", "filebrowser.files", handler)

        assert handler.await_count == 2

    @pytest.mark.asyncio
    async def test_close(self, bus, redis):
        """Test closing releases the connection."""
        await bus.close()
        redis.aclose.assert_awaited_once()
