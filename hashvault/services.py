"""
Composition root.

The engine, session factory, byte store and collaborator clients are built
once per application and kept in ``app.extensions['hashvault']``. Database
sessions are per request: opened on first use and closed when the app
context is torn down.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from flask import Flask, current_app, g

from hashvault.clients import (
    ContentLookup, ContentServiceClient, HttpIdentityProvider, IdentityProvider, LocalContentClient,
    RepositoryDirectory, RepositoryServiceClient
)
from hashvault.config import Config
from hashvault.core import AccessGate, ObjectStore, ReferenceCoordinator, ReferenceStore
from hashvault.models.base import Base, create_session_factory, make_engine
from hashvault.storage import ByteStore, FilesystemStorage, S3Storage

logger = logging.getLogger(__name__)

EXTENSION_KEY = 'hashvault'


@dataclass
class Services:
    engine: object
    session_factory: object
    byte_store: ByteStore
    identity_provider: IdentityProvider
    repository_directory: RepositoryDirectory
    content_lookup: Optional[ContentLookup] = None

    def dispose(self):
        """Release the byte store and the engine's connection pool"""
        self.byte_store.close()
        self.engine.dispose()


def build_byte_store(config) -> ByteStore:
    """Get storage backend - S3 if configured, otherwise filesystem"""
    s3_bucket = config.get('S3_BUCKET', Config.S3_BUCKET)
    if s3_bucket:
        return S3Storage(bucket=s3_bucket)
    return FilesystemStorage(base_path=config.get('STORAGE_BASE_PATH', Config.STORAGE_BASE_PATH))


def init_services(
    app: Flask,
    byte_store: Optional[ByteStore] = None,
    identity_provider: Optional[IdentityProvider] = None,
    repository_directory: Optional[RepositoryDirectory] = None,
    content_lookup: Optional[ContentLookup] = None
) -> Services:
    """
    Build the shared services for an application and create database tables.

    Any collaborator passed in is used as is; the rest are built from app.config.
    """
    config = app.config
    timeout = config.get('SERVICE_TIMEOUT', Config.SERVICE_TIMEOUT)

    engine = make_engine(config.get('DATABASE_URL', Config.DATABASE_URL))
    Base.metadata.create_all(bind=engine)

    if identity_provider is None:
        identity_provider = HttpIdentityProvider(config.get('AUTH_SERVICE_URL'), timeout=timeout)
    if repository_directory is None:
        repository_directory = RepositoryServiceClient(config.get('REPOSITORY_SERVICE_URL'), timeout=timeout)
    if content_lookup is None and config.get('CONTENT_SERVICE_URL'):
        content_lookup = ContentServiceClient(config['CONTENT_SERVICE_URL'], timeout=timeout)

    services = Services(
        engine=engine,
        session_factory=create_session_factory(engine),
        byte_store=byte_store or build_byte_store(config),
        identity_provider=identity_provider,
        repository_directory=repository_directory,
        content_lookup=content_lookup
    )
    app.extensions[EXTENSION_KEY] = services
    app.teardown_appcontext(close_db)

    logger.info(f"Services ready: database {engine.url.render_as_string(hide_password=True)}, "
                f"storage {type(services.byte_store).__name__}")
    return services


def get_services() -> Services:
    return current_app.extensions[EXTENSION_KEY]


def get_db():
    """Get the database session of the current request."""
    if 'db' not in g:
        g.db = get_services().session_factory()
    return g.db


def close_db(exception=None):
    """Close database session"""
    db = g.pop('db', None)
    if db is not None:
        db.close()


def get_object_store() -> ObjectStore:
    return ObjectStore(get_db(), get_services().byte_store)


def get_access_gate() -> AccessGate:
    return AccessGate(get_services().repository_directory)


def get_coordinator() -> ReferenceCoordinator:
    services = get_services()
    content = services.content_lookup or LocalContentClient(get_object_store())
    return ReferenceCoordinator(ReferenceStore(get_db()), get_access_gate(), content)
