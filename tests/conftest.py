"""Pytest configuration and fixtures for filebrowser tests."""

import base64
from datetime import timedelta
from unittest.mock import AsyncMock

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from filebrowser.config.settings import Settings
from filebrowser.container import ServiceContainer
from filebrowser.features.certificates.repositories import DocumentCertificateRepository
from filebrowser.features.certificates.services import CertificateEngine, CertificateService
from filebrowser.features.directories.repositories import DocumentDirectoryRepository
from filebrowser.features.directories.services import DirectoryService
from filebrowser.features.files.entities import FileEventPublisher
from filebrowser.features.files.repositories import DocumentFileRepository
from filebrowser.features.files.services import FileService
from filebrowser.infrastructure.database import InMemoryDocumentStore


@pytest.fixture(scope="session")
def signing_key():
    """Fresh P-256 key for the test session."""
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture(scope="session")
def encoded_signing_key(signing_key):
    """Signing key as base64 of its PKCS#8 PEM form."""
    pem = signing_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    return base64.b64encode(pem).decode("ascii")


@pytest.fixture
def settings(encoded_signing_key):
    return Settings(
        _env_file=None,
        database_url="postgresql://localhost/filebrowser",
        redis_url="redis://localhost:6379/0",
        token_signing_key=encoded_signing_key,
        token_ttl="1h",
        discarded_issuers=["legacy"],
    )


@pytest.fixture
def store():
    return InMemoryDocumentStore()


@pytest.fixture
def file_repository(store):
    return DocumentFileRepository(store)


@pytest.fixture
def directory_repository(store):
    return DocumentDirectoryRepository(store)


@pytest.fixture
def certificate_repository(store):
    return DocumentCertificateRepository(store)


@pytest.fixture
def engine(signing_key):
    return CertificateEngine(signing_key, issuer="filebrowser", ttl=timedelta(hours=1))


@pytest.fixture
def directory_service(directory_repository, file_repository):
    return DirectoryService(directory_repository, file_repository)


@pytest.fixture
def certificate_service(engine, certificate_repository, file_repository):
    return CertificateService(engine, certificate_repository, file_repository)


@pytest.fixture
def event_publisher():
    """File event publisher double."""
    return AsyncMock(spec=FileEventPublisher)


@pytest.fixture
def file_service(file_repository, directory_service, certificate_service, event_publisher):
    return FileService(
        file_repository,
        directory_service,
        certificates=certificate_service,
        events=event_publisher,
    )


@pytest.fixture
def container(settings, store, engine):
    return ServiceContainer.build(settings, store, engine)
