"""Content service API: blobs, trees and commits addressed by SHA-256 hash"""
import logging

from flask import Blueprint, Response, g, request

from hashvault.core import AccessLevel
from hashvault.core.object_store import parse_commit, parse_tree_entries
from hashvault.core.validation import require_hash, require_id
from hashvault.errors import BadRequestError
from hashvault.models import ContentKind
from hashvault.models.api_schemas import (
    BlobUploadResponse, CommitUploadResponse, CreateCommitRequest, CreateTreeRequest, TreeUploadResponse
)
from hashvault.services import get_access_gate, get_object_store
from hashvault.utils import success_response
from .auth import require_identity

logger = logging.getLogger(__name__)

content_bp = Blueprint('content_api', __name__, url_prefix='/api/content')

STREAM_CHUNK_SIZE = 64 * 1024


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise BadRequestError('Request body required')
    return data


@content_bp.route('/blobs', methods=['POST'])
@require_identity
def upload_blob():
    """
    Upload a blob.

    Expects multipart/form-data with a single file named 'file' and a
    'repositoryId' field. Requires write access to the repository.
    """
    files = request.files.getlist('file')
    if not files:
        raise BadRequestError('No files were uploaded.')
    if len(files) > 1:
        raise BadRequestError('Only single file uploads are supported.')

    repository_id = request.form.get('repositoryId')
    if not repository_id:
        raise BadRequestError('Repository ID is required.')
    require_id(repository_id, 'repository ID')

    upload = files[0]
    if not upload.filename or not upload.mimetype:
        raise BadRequestError('Uploaded file must have a name and content type.')

    get_access_gate().check_access(repository_id, g.identity.user_id, AccessLevel.WRITE, g.token)

    content = upload.read()
    hash = get_object_store().put_blob(content, upload.filename, upload.mimetype,
                                       g.identity.user_id, repository_id)

    response = BlobUploadResponse(
        hash=hash,
        size=len(content),
        original_filename=upload.filename,
        content_type=upload.mimetype
    )
    return success_response('Blob uploaded successfully', response.to_json(), 201)


@content_bp.route('/blobs/<hash>', methods=['GET'])
@require_identity
def download_blob(hash):
    """Stream a blob's raw bytes."""
    require_hash(hash, 'SHA256 hash')
    stream = get_object_store().get_blob(hash)

    def generate():
        try:
            while True:
                chunk = stream.read(STREAM_CHUNK_SIZE)
                if not chunk:
                    break
                yield chunk
        except Exception:
            # Headers are already sent; abort the connection rather than append an error body
            logger.error(f"Stream error during blob download for hash {hash}", exc_info=True)
            raise

    response = Response(
        generate(),
        mimetype='application/octet-stream',
        headers={'Content-Disposition': f'attachment; filename={hash}'}
    )
    # HEAD requests never start the generator
    response.call_on_close(stream.close)
    return response


@content_bp.route('/blobs/repo/<repository_id>', methods=['GET'])
@require_identity
def list_repository_blobs(repository_id):
    """
    List objects uploaded to a repository.

    Query parameters:
        userId: Only list objects uploaded by this user
    """
    require_id(repository_id, 'repository ID')
    uploader_id = request.args.get('userId') or None
    if uploader_id:
        require_id(uploader_id, 'userId query parameter')

    get_access_gate().check_access(repository_id, g.identity.user_id, AccessLevel.READ, g.token)

    objects = get_object_store().list_objects_for_repository(repository_id, uploader_id)
    return success_response('Blobs fetched successfully', [obj.to_json() for obj in objects])


@content_bp.route('/trees', methods=['POST'])
@require_identity
def upload_tree():
    """
    Store a tree.

    Expected JSON body: {"entries": [...], "repositoryId": "..."}
    """
    tree_request = CreateTreeRequest.model_validate(_json_body())
    require_id(tree_request.repository_id, 'repository ID')
    entries = parse_tree_entries(tree_request.entries)

    get_access_gate().check_access(tree_request.repository_id, g.identity.user_id, AccessLevel.WRITE, g.token)

    hash = get_object_store().put_tree(entries, g.identity.user_id, tree_request.repository_id)
    response = TreeUploadResponse(hash=hash, entries_count=len(entries))
    return success_response('Tree stored successfully', response.to_json(), 201)


@content_bp.route('/trees/<hash>', methods=['GET'])
@require_identity
def get_tree(hash):
    tree = get_object_store().get_tree(hash)
    return success_response('Tree fetched successfully', tree.to_json())


@content_bp.route('/commits', methods=['POST'])
@require_identity
def upload_commit():
    """
    Store a commit.

    Expected JSON body: {"commit": {...}, "repositoryId": "..."}
    """
    commit_request = CreateCommitRequest.model_validate(_json_body())
    require_id(commit_request.repository_id, 'repository ID')
    commit = parse_commit(commit_request.commit)

    get_access_gate().check_access(commit_request.repository_id, g.identity.user_id, AccessLevel.WRITE, g.token)

    hash = get_object_store().put_commit(commit, g.identity.user_id, commit_request.repository_id)
    return success_response('Commit stored successfully', CommitUploadResponse(hash=hash).to_json(), 201)


@content_bp.route('/commits/<hash>', methods=['GET', 'HEAD'])
@require_identity
def get_commit(hash):
    """
    Fetch a commit.

    HEAD only reports whether the commit is stored (200 or 404, no body).
    """
    require_hash(hash, 'SHA256 hash')

    if request.method == 'HEAD':
        exists = get_object_store().object_exists(hash, ContentKind.COMMIT)
        return '', 200 if exists else 404

    commit = get_object_store().get_commit(hash)
    return success_response('Commit fetched successfully', commit.to_json())
