"""
Integration test for the two-service deployment.

This test:
1. Starts the content service on a real HTTP server in a background thread
2. Uploads a blob, tree and commit to it over HTTP
3. Builds a reference service whose commit checks go to the content service
4. Moves main and creates tags through the reference service
"""
import io
import logging
import threading

import pytest
import requests
from werkzeug.serving import make_server

from hashvault.app import create_app
from hashvault.clients import ContentServiceClient
from hashvault.storage import FilesystemStorage

from fakes import OTHER_TOKEN, OWNER_TOKEN, PUBLIC_REPO_ID, auth_headers, make_commit


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def content_service(tmp_path, identity_provider, repository_directory):
    """Run the content service in a background thread and return its base URL"""
    app = create_app(
        config_overrides={
            'TESTING': True,
            'DEBUG': False,
            'DATABASE_URL': f'sqlite:///{tmp_path / "content.db"}',
        },
        components=('content',),
        byte_store=FilesystemStorage(base_path=str(tmp_path / 'objects')),
        identity_provider=identity_provider,
        repository_directory=repository_directory,
    )
    logging.getLogger('werkzeug').setLevel(logging.ERROR)

    server = make_server('127.0.0.1', 0, app, threaded=True)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()

    yield f'http://127.0.0.1:{server.server_port}'

    server.shutdown()
    thread.join(timeout=5)
    app.extensions['hashvault'].dispose()


@pytest.fixture
def reference_client(tmp_path, content_service, identity_provider, repository_directory):
    """Test client of a reference service that asks the content service about commits"""
    app = create_app(
        config_overrides={
            'TESTING': True,
            'DEBUG': False,
            'DATABASE_URL': f'sqlite:///{tmp_path / "references.db"}',
        },
        components=('references',),
        byte_store=FilesystemStorage(base_path=str(tmp_path / 'unused')),
        identity_provider=identity_provider,
        repository_directory=repository_directory,
        content_lookup=ContentServiceClient(content_service, timeout=5),
    )

    yield app.test_client()

    app.extensions['hashvault'].dispose()


# ============================================================================
# Helper Functions
# ============================================================================

def store_snapshot(base_url, files, message='Initial commit', parents=()):
    """
    Upload files, a tree listing them and a commit of that tree.

    Returns:
        commit hash
    """
    entries = []
    for name, content in files.items():
        response = requests.post(
            f'{base_url}/api/content/blobs',
            files={'file': (name, io.BytesIO(content), 'text/plain')},
            data={'repositoryId': PUBLIC_REPO_ID},
            headers=auth_headers(),
            timeout=5
        )
        assert response.status_code == 201, response.text
        entries.append({'mode': '100644', 'type': 'blob', 'hash': response.json()['data']['hash'], 'name': name})

    response = requests.post(f'{base_url}/api/content/trees',
                             json={'entries': entries, 'repositoryId': PUBLIC_REPO_ID},
                             headers=auth_headers(), timeout=5)
    assert response.status_code == 201, response.text
    tree_hash = response.json()['data']['hash']

    response = requests.post(f'{base_url}/api/content/commits',
                             json={'commit': make_commit(tree_hash, parents=parents, message=message),
                                   'repositoryId': PUBLIC_REPO_ID},
                             headers=auth_headers(), timeout=5)
    assert response.status_code == 201, response.text
    return response.json()['data']['hash']


# ============================================================================
# Tests
# ============================================================================

def test_content_service_over_http(content_service):
    commit_hash = store_snapshot(content_service, {'README.md': b'# Hello'})

    client = ContentServiceClient(content_service)
    assert client.commit_exists(commit_hash, token=OWNER_TOKEN) is True
    assert client.commit_exists('0' * 64, token=OWNER_TOKEN) is False


def test_reference_service_checks_content_service(content_service, reference_client):
    first = store_snapshot(content_service, {'README.md': b'# v1'})
    second = store_snapshot(content_service, {'README.md': b'# v2'}, message='Second', parents=[first])

    response = reference_client.put(f'/api/references/main/{PUBLIC_REPO_ID}',
                                    json={'commitHash': first}, headers=auth_headers())
    assert response.status_code == 200, response.get_json()

    response = reference_client.put(f'/api/references/main/{PUBLIC_REPO_ID}',
                                    json={'commitHash': second}, headers=auth_headers())
    assert response.get_json()['data']['commitHash'] == second

    response = reference_client.post(f'/api/references/tags/{PUBLIC_REPO_ID}',
                                     json={'tagName': 'v1', 'commitHash': first}, headers=auth_headers())
    assert response.status_code == 201

    # Never uploaded to the content service
    response = reference_client.post(f'/api/references/tags/{PUBLIC_REPO_ID}',
                                     json={'tagName': 'v2', 'commitHash': 'f' * 64}, headers=auth_headers())
    assert response.status_code == 404

    response = reference_client.get(f'/api/references/main/{PUBLIC_REPO_ID}', headers=auth_headers(OTHER_TOKEN))
    assert response.get_json()['data']['commitHash'] == second


def test_unreachable_content_service(tmp_path, identity_provider, repository_directory):
    app = create_app(
        config_overrides={'TESTING': True, 'DATABASE_URL': f'sqlite:///{tmp_path / "refs.db"}'},
        components=('references',),
        byte_store=FilesystemStorage(base_path=str(tmp_path / 'unused')),
        identity_provider=identity_provider,
        repository_directory=repository_directory,
        # Nothing listens on port 9 (discard) locally
        content_lookup=ContentServiceClient('http://127.0.0.1:9', timeout=1),
    )

    response = app.test_client().put(f'/api/references/main/{PUBLIC_REPO_ID}',
                                     json={'commitHash': 'a' * 64}, headers=auth_headers())

    assert response.status_code == 500
    assert response.get_json()['error']['code'] == 'SERVER_ERROR'
    app.extensions['hashvault'].dispose()
