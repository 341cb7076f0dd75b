"""Wiring of repositories, services and event handlers."""

from dataclasses import dataclass
from typing import Optional

from .config.settings import Settings
from .features.certificates.repositories import CERTIFICATES_COLLECTION, DocumentCertificateRepository
from .features.certificates.services import CertificateEngine, CertificateService
from .features.directories.repositories import DIRECTORIES_COLLECTION, DocumentDirectoryRepository
from .features.directories.services import DirectoryService
from .features.events.handlers import FileEventHandler, UserEventHandler
from .features.events.services import FileEventBus
from .features.files.repositories import FILES_COLLECTION, DocumentFileRepository
from .features.files.services import FileService
from .features.users.services import UserService
from .infrastructure.database import DocumentStore
from .infrastructure.messaging import RedisEventBus

COLLECTIONS = (FILES_COLLECTION, DIRECTORIES_COLLECTION, CERTIFICATES_COLLECTION)


@dataclass
class ServiceContainer:
    """Process wide services, built once at start-up."""

    settings: Settings
    store: DocumentStore
    engine: CertificateEngine
    directories: DirectoryService
    files: FileService
    certificates: CertificateService
    users: UserService
    bus: Optional[RedisEventBus] = None

    @classmethod
    def build(
        cls,
        settings: Settings,
        store: DocumentStore,
        engine: CertificateEngine,
        bus: Optional[RedisEventBus] = None,
    ) -> "ServiceContainer":
        file_repository = DocumentFileRepository(store)
        directories = DirectoryService(DocumentDirectoryRepository(store), file_repository)
        certificates = CertificateService(engine, DocumentCertificateRepository(store), file_repository)
        events = FileEventBus(bus, settings.files_exchange, settings.event_issuer) if bus else None
        files = FileService(file_repository, directories, certificates=certificates, events=events)

        return cls(
            settings=settings,
            store=store,
            engine=engine,
            directories=directories,
            files=files,
            certificates=certificates,
            users=UserService(directories, files),
            bus=bus,
        )

    def user_event_handler(self) -> UserEventHandler:
        return UserEventHandler(self.directories, self.files)

    def file_event_handler(self) -> FileEventHandler:
        return FileEventHandler(self.files, self.settings.ignored_event_issuers)
