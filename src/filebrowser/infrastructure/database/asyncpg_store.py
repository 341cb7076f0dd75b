"""PostgreSQL JSONB document store.

Each collection is a table ``(_id text primary key, document jsonb)``;
containment filters run as ``document @> $1::jsonb`` backed by a GIN index.
"""

import asyncio
import json
import logging
import re
from contextlib import asynccontextmanager
from typing import AsyncIterator, Iterable, List, Optional

import asyncpg

from ...core.exceptions import AlreadyExistsError, InvalidFormatError, NotAvailableError, UnknownError
from ...utils.uuid import generate_id
from .document_store import ID_FIELD, Document, DocumentStore

logger = logging.getLogger(__name__)

COLLECTION_NAME = re.compile(r"^[a-z_][a-z0-9_]*$")

INFRASTRUCTURE_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError)


def _table(collection: str) -> str:
    if not COLLECTION_NAME.match(collection):
        raise InvalidFormatError(
            f"Invalid collection name: {collection!r}",
            details={"collection": collection},
        )
    return f'"{collection}"'


def _affected(status: str) -> int:
    """Row count from a command tag such as ``DELETE 3``."""
    try:
        return int(status.rsplit(" ", 1)[-1])
    except (AttributeError, ValueError):
        return 0


class AsyncpgDocumentStore(DocumentStore):
    """Document store on an asyncpg connection pool."""

    def __init__(
        self,
        dsn: str,
        database: Optional[str] = None,
        command_timeout: float = 30.0,
        min_size: int = 1,
        max_size: int = 10,
    ):
        self._dsn = dsn
        self._database = database
        self._command_timeout = command_timeout
        self._min_size = min_size
        self._max_size = max_size
        self._pool: Optional[asyncpg.Pool] = None
        self._lock = asyncio.Lock()

    async def connect(self) -> None:
        """Create the connection pool."""
        if self._pool is not None:
            return

        async with self._lock:
            if self._pool is not None:
                return
            options = {"database": self._database} if self._database else {}
            try:
                self._pool = await asyncpg.create_pool(
                    dsn=self._dsn,
                    min_size=self._min_size,
                    max_size=self._max_size,
                    command_timeout=self._command_timeout,
                    **options,
                )
            except INFRASTRUCTURE_ERRORS as e:
                logger.error(f"Failed to create document store pool: {e}")
                raise NotAvailableError(f"Document store unreachable: {e}") from e

            logger.info(f"Created document store pool: min={self._min_size}, max={self._max_size}")

    async def close(self) -> None:
        if self._pool is not None:
            async with self._lock:
                if self._pool is not None:
                    await self._pool.close()
                    self._pool = None
                    logger.info("Closed document store pool")

    @asynccontextmanager
    async def _connection(self, operation: str, collection: str) -> AsyncIterator[asyncpg.Connection]:
        """Pooled connection; infrastructure failures surface as UnknownError."""
        if self._pool is None:
            raise NotAvailableError("Document store is not connected")

        try:
            async with self._pool.acquire(timeout=self._command_timeout) as conn:
                yield conn
        except asyncpg.UniqueViolationError:
            raise
        except INFRASTRUCTURE_ERRORS as e:
            logger.error(f"Document store {operation} on {collection} failed: {e}")
            raise UnknownError(
                f"Document store {operation} failed",
                details={"collection": collection, "cause": str(e)},
            ) from e

    async def ensure_collections(self, names: Iterable[str]) -> None:
        """Create the table and containment index of every collection."""
        for name in names:
            table = _table(name)
            async with self._connection("ensure", name) as conn:
                await conn.execute(
                    f"CREATE TABLE IF NOT EXISTS {table} ("
                    f"_id text PRIMARY KEY, document jsonb NOT NULL)"
                )
                await conn.execute(
                    f'CREATE INDEX IF NOT EXISTS "{name}_document_idx" '
                    f"ON {table} USING gin (document jsonb_path_ops)"
                )
            logger.debug(f"Ensured collection {name}")

    async def insert_one(self, collection: str, document: Document) -> str:
        table = _table(collection)
        stored = dict(document)
        document_id = stored.setdefault(ID_FIELD, generate_id())

        try:
            async with self._connection("insert", collection) as conn:
                await conn.execute(
                    f"INSERT INTO {table} (_id, document) VALUES ($1, $2::jsonb)",
                    document_id,
                    json.dumps(stored),
                    timeout=self._command_timeout,
                )
        except asyncpg.UniqueViolationError as e:
            raise AlreadyExistsError(
                f"Document {document_id} already exists in {collection}",
                details={"collection": collection, "id": document_id},
            ) from e

        return document_id

    async def find_one(self, collection: str, query: Document) -> Optional[Document]:
        table = _table(collection)
        async with self._connection("find", collection) as conn:
            raw = await conn.fetchval(
                f"SELECT document FROM {table} WHERE document @> $1::jsonb LIMIT 1",
                json.dumps(query),
                timeout=self._command_timeout,
            )
        return json.loads(raw) if raw is not None else None

    async def find_many(self, collection: str, query: Document) -> List[Document]:
        table = _table(collection)
        async with self._connection("find", collection) as conn:
            rows = await conn.fetch(
                f"SELECT document FROM {table} WHERE document @> $1::jsonb",
                json.dumps(query),
                timeout=self._command_timeout,
            )
        return [json.loads(row["document"]) for row in rows]

    async def find_by_ids(self, collection: str, ids: Iterable[str]) -> List[Document]:
        table = _table(collection)
        wanted = list(dict.fromkeys(ids))
        if not wanted:
            return []

        async with self._connection("find", collection) as conn:
            rows = await conn.fetch(
                f"SELECT document FROM {table} WHERE _id = ANY($1::text[])",
                wanted,
                timeout=self._command_timeout,
            )
        return [json.loads(row["document"]) for row in rows]

    async def replace_one(self, collection: str, query: Document, document: Document) -> bool:
        table = _table(collection)
        async with self._connection("replace", collection) as conn:
            status = await conn.execute(
                f"UPDATE {table} SET document = $2::jsonb || jsonb_build_object('_id', _id) "
                f"WHERE _id = (SELECT _id FROM {table} WHERE document @> $1::jsonb LIMIT 1)",
                json.dumps(query),
                json.dumps(document),
                timeout=self._command_timeout,
            )
        return _affected(status) > 0

    async def delete_one(self, collection: str, query: Document) -> bool:
        table = _table(collection)
        async with self._connection("delete", collection) as conn:
            status = await conn.execute(
                f"DELETE FROM {table} "
                f"WHERE _id = (SELECT _id FROM {table} WHERE document @> $1::jsonb LIMIT 1)",
                json.dumps(query),
                timeout=self._command_timeout,
            )
        return _affected(status) > 0

    async def delete_many(self, collection: str, query: Document) -> int:
        table = _table(collection)
        async with self._connection("delete", collection) as conn:
            status = await conn.execute(
                f"DELETE FROM {table} WHERE document @> $1::jsonb",
                json.dumps(query),
                timeout=self._command_timeout,
            )
        return _affected(status)
