"""FastAPI application factory.

The lifespan opens the document store and the event bus, starts one
consumer per inbound queue and tears everything down in reverse order.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import FastAPI

from .__version__ import __version__
from .api import (
    certificates_router,
    directory_router,
    files_router,
    profile_router,
    register_exception_handlers,
)
from .config.settings import Settings, get_settings
from .container import COLLECTIONS, ServiceContainer
from .features.certificates.services import CertificateEngine
from .infrastructure.database import AsyncpgDocumentStore
from .infrastructure.messaging import RedisEventBus

logger = logging.getLogger(__name__)


def _log_consumer_exit(task: asyncio.Task) -> None:
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        logger.error(f"Event consumer {task.get_name()} stopped: {error}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    logger.info(f"Starting {settings.app_name} {__version__}")

    engine = CertificateEngine.from_encoded_key(
        settings.token_signing_key.get_secret_value(),
        settings.token_issuer,
        settings.token_ttl,
    )

    store = AsyncpgDocumentStore(
        settings.database_url,
        database=settings.database_name,
        command_timeout=settings.database_command_timeout,
        min_size=settings.database_pool_min_size,
        max_size=settings.database_pool_max_size,
    )
    await store.connect()
    bus = RedisEventBus.from_url(settings.redis_url)

    consumers: List[asyncio.Task] = []
    try:
        await store.ensure_collections(COLLECTIONS)
        await bus.bind(settings.users_exchange, settings.users_queue)
        await bus.bind(settings.files_exchange, settings.files_queue)

        container = ServiceContainer.build(settings, store, engine, bus)
        app.state.container = container

        if settings.consume_events:
            consumers = [
                asyncio.create_task(
                    bus.consume(settings.users_exchange, settings.users_queue, container.user_event_handler()),
                    name=settings.users_queue,
                ),
                asyncio.create_task(
                    bus.consume(settings.files_exchange, settings.files_queue, container.file_event_handler()),
                    name=settings.files_queue,
                ),
            ]
            for consumer in consumers:
                consumer.add_done_callback(_log_consumer_exit)

        yield

    finally:
        logger.info(f"Shutting down {settings.app_name}")
        for consumer in consumers:
            consumer.cancel()
        await asyncio.gather(*consumers, return_exceptions=True)

        await bus.close()
        await store.close()


def create_app(settings: Optional[Settings] = None, container: Optional[ServiceContainer] = None) -> FastAPI:
    """Create the application.

    With a ready ``container`` no resources are opened at start-up; tests
    use this to run against in-memory collaborators.
    """
    settings = settings or (container.settings if container else get_settings())

    app = FastAPI(
        title="filebrowser",
        version=__version__,
        lifespan=None if container else lifespan,
    )
    app.state.settings = settings
    if container:
        app.state.container = container

    register_exception_handlers(app)
    app.include_router(directory_router)
    app.include_router(files_router)
    app.include_router(certificates_router)
    app.include_router(profile_router)
    return app
