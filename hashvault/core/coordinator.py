"""
Main pointer and tag operations.

Every operation runs the same steps, in order, each gating the next:

1. Format validation of ids, hashes and names (no network calls).
2. Authorization through the access gate (write for mutations, read otherwise).
3. For mutations only, confirmation that the target commit is stored.

Nothing is locked across the steps. The existence check is advisory: the
commit could be removed between the check and the write, and concurrent
updates of ``main`` are last-writer-wins. The reference store re-validates
hash format and enforces name uniqueness at write time.
"""
import logging
from typing import List, Optional

from hashvault.clients.content_client import ContentLookup
from hashvault.errors import InternalServerError, NotFoundError, ConflictError
from hashvault.models import Reference, ReferenceKind, MAIN_REFERENCE_NAME
from .access import AccessGate, AccessLevel
from .references import CreateReferencePayload, ReferenceStore
from .validation import require_hash, require_id, require_reference_name

logger = logging.getLogger(__name__)


class ReferenceCoordinator:
    """Runs main pointer and tag operations across the collaborating services."""

    def __init__(self, references: ReferenceStore, access_gate: AccessGate, content: ContentLookup):
        self.references = references
        self.access_gate = access_gate
        self.content = content

    def update_main_pointer(
        self,
        repository_id: str,
        user_id: str,
        commit_hash: str,
        token: Optional[str] = None
    ) -> Reference:
        """
        Point a repository's main reference at a commit, creating it if needed.

        Returns:
            The main reference (the same record on every update)
        """
        self._require_ids(repository_id, user_id)
        require_hash(commit_hash, 'commit hash')

        self.access_gate.check_access(repository_id, user_id, AccessLevel.WRITE, token)
        self._require_commit(commit_hash, token)

        main_ref = self.references.find(repository_id, ReferenceKind.MAIN, MAIN_REFERENCE_NAME)
        if not main_ref:
            try:
                main_ref = self.references.create(CreateReferencePayload(
                    repository_id=repository_id,
                    kind=ReferenceKind.MAIN,
                    name=MAIN_REFERENCE_NAME,
                    commit_hash=commit_hash
                ))
                logger.info(f"Main pointer of repository {repository_id} created at {commit_hash}")
                return main_ref
            except ConflictError:
                # Created by a concurrent request; last writer wins
                logger.info(f"Main pointer of repository {repository_id} was created concurrently")
                main_ref = self.references.find(repository_id, ReferenceKind.MAIN, MAIN_REFERENCE_NAME)

        main_ref = self.references.update_commit_hash(main_ref.id, commit_hash) if main_ref else None
        if not main_ref:
            raise InternalServerError("Failed to update main pointer.")

        logger.info(f"Main pointer of repository {repository_id} now at {commit_hash}")
        return main_ref

    def get_main_pointer(self, repository_id: str, user_id: str, token: Optional[str] = None) -> Reference:
        self._require_ids(repository_id, user_id)

        self.access_gate.check_access(repository_id, user_id, AccessLevel.READ, token)

        main_ref = self.references.find(repository_id, ReferenceKind.MAIN, MAIN_REFERENCE_NAME)
        if not main_ref:
            raise NotFoundError(f"Main pointer not found for repository '{repository_id}'.")
        return main_ref

    def create_tag(
        self,
        repository_id: str,
        user_id: str,
        tag_name: str,
        commit_hash: str,
        token: Optional[str] = None
    ) -> Reference:
        """
        Create a tag. Tags are never moved: reusing a name is a conflict.

        Raises:
            ConflictError: If the tag already exists, whatever commit it points to
        """
        self._require_ids(repository_id, user_id)
        require_reference_name(tag_name, 'Tag name')
        require_hash(commit_hash, 'commit hash')

        self.access_gate.check_access(repository_id, user_id, AccessLevel.WRITE, token)
        self._require_commit(commit_hash, token)

        if self.references.find(repository_id, ReferenceKind.TAG, tag_name):
            raise ConflictError(f"Tag with name '{tag_name}' already exists for repository '{repository_id}'.")

        tag = self.references.create(CreateReferencePayload(
            repository_id=repository_id,
            kind=ReferenceKind.TAG,
            name=tag_name,
            commit_hash=commit_hash
        ))
        logger.info(f"Created tag {tag_name} at {commit_hash} in repository {repository_id}")
        return tag

    def get_tag(self, repository_id: str, user_id: str, tag_name: str, token: Optional[str] = None) -> Reference:
        self._require_ids(repository_id, user_id)
        require_reference_name(tag_name, 'Tag name')

        self.access_gate.check_access(repository_id, user_id, AccessLevel.READ, token)

        return self._find_tag(repository_id, tag_name)

    def list_tags(self, repository_id: str, user_id: str, token: Optional[str] = None) -> List[Reference]:
        self._require_ids(repository_id, user_id)

        self.access_gate.check_access(repository_id, user_id, AccessLevel.READ, token)

        return self.references.list_by_repository(repository_id, ReferenceKind.TAG)

    def delete_tag(self, repository_id: str, user_id: str, tag_name: str, token: Optional[str] = None) -> bool:
        """
        Delete a tag.

        Returns:
            True if the tag was deleted
        """
        self._require_ids(repository_id, user_id)
        require_reference_name(tag_name, 'Tag name')

        self.access_gate.check_access(repository_id, user_id, AccessLevel.WRITE, token)

        tag = self._find_tag(repository_id, tag_name)
        deleted = self.references.delete(tag.id)
        if deleted:
            logger.info(f"Deleted tag {tag_name} from repository {repository_id}")
        return deleted

    def _find_tag(self, repository_id: str, tag_name: str) -> Reference:
        tag = self.references.find(repository_id, ReferenceKind.TAG, tag_name)
        if not tag:
            raise NotFoundError(f"Tag '{tag_name}' not found for repository '{repository_id}'.")
        return tag

    def _require_ids(self, repository_id: str, user_id: str) -> None:
        require_id(repository_id, 'repository ID')
        require_id(user_id, 'user ID')

    def _require_commit(self, commit_hash: str, token: Optional[str]) -> None:
        if not self.content.commit_exists(commit_hash, token):
            raise NotFoundError(f"Commit with hash '{commit_hash}' does not exist in content storage.")
