"""Reference service API: the main pointer and tags of each repository"""
from flask import Blueprint, g, request

from hashvault.errors import BadRequestError, NotFoundError
from hashvault.models.api_schemas import CreateTagRequest, ReferenceInfo, UpdateMainRequest
from hashvault.services import get_coordinator
from hashvault.utils import success_response
from .auth import require_identity

references_bp = Blueprint('references_api', __name__, url_prefix='/api/references')


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise BadRequestError('Request body required')
    return data


@references_bp.route('/main/<repository_id>', methods=['PUT'])
@require_identity
def update_main(repository_id):
    """
    Move the main pointer. Only the repository owner may do this.

    Expected JSON body: {"commitHash": "..."}
    """
    body = _json_body()
    if not body.get('commitHash'):
        raise BadRequestError('Commit hash is required.')
    update = UpdateMainRequest.model_validate(body)

    main_ref = get_coordinator().update_main_pointer(
        repository_id, g.identity.user_id, update.commit_hash, g.token
    )
    return success_response('Main pointer updated successfully', ReferenceInfo.from_model(main_ref).to_json())


@references_bp.route('/main/<repository_id>', methods=['GET'])
@require_identity
def get_main(repository_id):
    main_ref = get_coordinator().get_main_pointer(repository_id, g.identity.user_id, g.token)
    return success_response('Main pointer fetched successfully', ReferenceInfo.from_model(main_ref).to_json())


@references_bp.route('/tags/<repository_id>', methods=['POST'])
@require_identity
def create_tag(repository_id):
    """
    Create a tag.

    Expected JSON body: {"tagName": "...", "commitHash": "..."}
    """
    body = _json_body()
    if not body.get('tagName'):
        raise BadRequestError('Tag name is required.')
    if not body.get('commitHash'):
        raise BadRequestError('Commit hash is required.')
    tag_request = CreateTagRequest.model_validate(body)

    tag = get_coordinator().create_tag(
        repository_id, g.identity.user_id, tag_request.tag_name, tag_request.commit_hash, g.token
    )
    return success_response('Tag created successfully', ReferenceInfo.from_model(tag).to_json(), 201)


@references_bp.route('/tags/<repository_id>/<tag_name>', methods=['GET'])
@require_identity
def get_tag(repository_id, tag_name):
    tag = get_coordinator().get_tag(repository_id, g.identity.user_id, tag_name, g.token)
    return success_response('Tag fetched successfully', ReferenceInfo.from_model(tag).to_json())


@references_bp.route('/tags/<repository_id>', methods=['GET'])
@require_identity
def list_tags(repository_id):
    tags = get_coordinator().list_tags(repository_id, g.identity.user_id, g.token)
    return success_response('Tags listed successfully', [ReferenceInfo.from_model(tag).to_json() for tag in tags])


@references_bp.route('/tags/<repository_id>/<tag_name>', methods=['DELETE'])
@require_identity
def delete_tag(repository_id, tag_name):
    deleted = get_coordinator().delete_tag(repository_id, g.identity.user_id, tag_name, g.token)
    if not deleted:
        raise NotFoundError(f"Tag '{tag_name}' not found or could not be deleted.")
    return success_response(f"Tag '{tag_name}' deleted successfully")
