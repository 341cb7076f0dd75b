"""Document store implementations."""

from .asyncpg_store import AsyncpgDocumentStore
from .document_store import ID_FIELD, Document, DocumentStore, InMemoryDocumentStore, contains

__all__ = [
    "AsyncpgDocumentStore",
    "Document",
    "DocumentStore",
    "ID_FIELD",
    "InMemoryDocumentStore",
    "contains",
]
