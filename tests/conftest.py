"""
Pytest configuration and shared fixtures.
"""

import tempfile
import shutil
import pytest

from hashvault.app import create_app
from hashvault.core import AccessGate, ObjectStore, ReferenceCoordinator, ReferenceStore
from hashvault.models.base import Base, create_session_factory, make_engine
from hashvault.storage import FilesystemStorage

from fakes import (
    FakeContentLookup, FakeIdentityProvider, FakeRepositoryDirectory,
    OWNER_ID, OTHER_USER_ID, OWNER_TOKEN, OTHER_TOKEN, PUBLIC_REPO_ID, PRIVATE_REPO_ID
)


@pytest.fixture
def temp_dir():
    """Fixture that provides a temporary directory and cleans it up after test"""
    tmp = tempfile.mkdtemp()
    yield tmp
    shutil.rmtree(tmp)


@pytest.fixture
def db():
    """In-memory SQLite session with all tables created"""
    engine = make_engine('sqlite://')
    Base.metadata.create_all(engine)
    session = create_session_factory(engine)()

    yield session

    session.close()
    engine.dispose()


@pytest.fixture
def byte_store(temp_dir):
    return FilesystemStorage(base_path=f"{temp_dir}/objects")


@pytest.fixture
def object_store(db, byte_store):
    return ObjectStore(db, byte_store)


@pytest.fixture
def repository_directory():
    """
    Registry with two repositories owned by OWNER_ID:
    PUBLIC_REPO_ID (public) and PRIVATE_REPO_ID (private).
    """
    directory = FakeRepositoryDirectory()
    directory.add(PUBLIC_REPO_ID, owner=OWNER_ID, visibility='public')
    directory.add(PRIVATE_REPO_ID, owner=OWNER_ID, visibility='private')
    return directory


@pytest.fixture
def identity_provider():
    return FakeIdentityProvider({OWNER_TOKEN: OWNER_ID, OTHER_TOKEN: OTHER_USER_ID})


@pytest.fixture
def content_lookup():
    return FakeContentLookup()


@pytest.fixture
def reference_store(db):
    return ReferenceStore(db)


@pytest.fixture
def access_gate(repository_directory):
    return AccessGate(repository_directory)


@pytest.fixture
def coordinator(reference_store, access_gate, content_lookup):
    return ReferenceCoordinator(reference_store, access_gate, content_lookup)


@pytest.fixture
def app(temp_dir, byte_store, identity_provider, repository_directory):
    """
    Flask app serving both blueprints.

    Uses a SQLite file database, the filesystem byte store and the fake
    collaborators. Commit existence is checked against the app's own
    object store.
    """
    flask_app = create_app(
        config_overrides={
            'TESTING': True,
            'DEBUG': False,
            'DATABASE_URL': f'sqlite:///{temp_dir}/test.db',
            'CONTENT_SERVICE_URL': None,
        },
        byte_store=byte_store,
        identity_provider=identity_provider,
        repository_directory=repository_directory,
    )

    yield flask_app

    flask_app.extensions['hashvault'].dispose()


@pytest.fixture
def client(app):
    """
    Create a Flask test client.

    This fixture provides a test client for making HTTP requests to the Flask app.
    Automatically depends on the 'app' fixture.
    """
    return app.test_client()
