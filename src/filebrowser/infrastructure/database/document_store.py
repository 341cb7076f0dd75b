"""Document store contract and its in-memory implementation.

Documents are JSON objects keyed by an opaque ``_id``. Filters are
containment filters: a document matches when the filter is a recursive
subset of it, the same rule PostgreSQL applies for ``jsonb @> jsonb``.
"""

import asyncio
import copy
import logging
from abc import abstractmethod
from typing import Any, Dict, Iterable, List, Optional, Protocol, runtime_checkable

from ...core.exceptions import AlreadyExistsError
from ...utils.uuid import generate_id

logger = logging.getLogger(__name__)

Document = Dict[str, Any]

ID_FIELD = "_id"


def contains(document: Any, query: Any) -> bool:
    """Whether ``query`` is contained in ``document``.

    Objects match key by key, every element of a query array must be
    contained in some element of the document array, scalars compare equal.
    """
    if isinstance(query, dict):
        if not isinstance(document, dict):
            return False
        return all(key in document and contains(document[key], value) for key, value in query.items())
    if isinstance(query, list):
        if not isinstance(document, list):
            return False
        return all(any(contains(item, wanted) for item in document) for wanted in query)
    if isinstance(query, bool) or isinstance(document, bool):
        return type(query) is type(document) and query == document
    return document == query


@runtime_checkable
class DocumentStore(Protocol):
    """Protocol for document persistence."""

    @abstractmethod
    async def insert_one(self, collection: str, document: Document) -> str:
        """Insert a document and return its id, assigning one when absent."""
        ...

    @abstractmethod
    async def find_one(self, collection: str, query: Document) -> Optional[Document]:
        """First document containing ``query``."""
        ...

    @abstractmethod
    async def find_many(self, collection: str, query: Document) -> List[Document]:
        """Every document containing ``query``."""
        ...

    @abstractmethod
    async def find_by_ids(self, collection: str, ids: Iterable[str]) -> List[Document]:
        """Documents whose id is in ``ids``; unknown ids are skipped."""
        ...

    @abstractmethod
    async def replace_one(self, collection: str, query: Document, document: Document) -> bool:
        """Replace the first match, keeping its id. Returns whether one matched."""
        ...

    @abstractmethod
    async def delete_one(self, collection: str, query: Document) -> bool:
        ...

    @abstractmethod
    async def delete_many(self, collection: str, query: Document) -> int:
        ...


class InMemoryDocumentStore(DocumentStore):
    """Document store over dictionaries.

    Documents are deep-copied on the way in and out so callers never share
    state with the store. Data is lost when the process stops.
    """

    def __init__(self):
        self._collections: Dict[str, Dict[str, Document]] = {}
        self._lock = asyncio.Lock()

    def _collection(self, name: str) -> Dict[str, Document]:
        return self._collections.setdefault(name, {})

    async def ensure_collections(self, names: Iterable[str]) -> None:
        for name in names:
            self._collection(name)

    async def insert_one(self, collection: str, document: Document) -> str:
        async with self._lock:
            documents = self._collection(collection)
            stored = copy.deepcopy(document)
            document_id = stored.setdefault(ID_FIELD, generate_id())
            if document_id in documents:
                raise AlreadyExistsError(
                    f"Document {document_id} already exists in {collection}",
                    details={"collection": collection, "id": document_id},
                )
            documents[document_id] = stored
            logger.debug(f"Inserted {document_id} into {collection}")
            return document_id

    async def find_one(self, collection: str, query: Document) -> Optional[Document]:
        for document in self._collection(collection).values():
            if contains(document, query):
                return copy.deepcopy(document)
        return None

    async def find_many(self, collection: str, query: Document) -> List[Document]:
        return [
            copy.deepcopy(document)
            for document in self._collection(collection).values()
            if contains(document, query)
        ]

    async def find_by_ids(self, collection: str, ids: Iterable[str]) -> List[Document]:
        documents = self._collection(collection)
        return [copy.deepcopy(documents[i]) for i in dict.fromkeys(ids) if i in documents]

    async def replace_one(self, collection: str, query: Document, document: Document) -> bool:
        async with self._lock:
            documents = self._collection(collection)
            for document_id, current in documents.items():
                if contains(current, query):
                    replacement = copy.deepcopy(document)
                    replacement[ID_FIELD] = document_id
                    documents[document_id] = replacement
                    return True
            return False

    async def delete_one(self, collection: str, query: Document) -> bool:
        async with self._lock:
            documents = self._collection(collection)
            for document_id, current in documents.items():
                if contains(current, query):
                    del documents[document_id]
                    return True
            return False

    async def delete_many(self, collection: str, query: Document) -> int:
        async with self._lock:
            documents = self._collection(collection)
            matched = [i for i, current in documents.items() if contains(current, query)]
            for document_id in matched:
                del documents[document_id]
            return len(matched)
