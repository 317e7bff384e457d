import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from hashvault.errors import BadRequestError, ConflictError
from hashvault.models import Reference, ReferenceKind, MAIN_REFERENCE_NAME
from .validation import require_hash, require_reference_name

logger = logging.getLogger(__name__)


@dataclass
class CreateReferencePayload:
    """Fields of a new reference."""
    repository_id: str
    kind: ReferenceKind
    name: str
    commit_hash: str


class ReferenceStore:
    """
    Persistence of main pointers and tags.

    (repository_id, kind, name) is unique. The database constraint is what
    enforces it, so two racing creators cannot both succeed.
    """

    def __init__(self, db: Session):
        self.db = db

    def create(self, payload: CreateReferencePayload) -> Reference:
        """
        Create a reference.

        Raises:
            BadRequestError: If the name or commit hash is malformed
            ConflictError: If the (repository, kind, name) triple already exists
        """
        require_reference_name(payload.name, 'Reference name')
        require_hash(payload.commit_hash, 'commit hash')
        if payload.kind == ReferenceKind.MAIN and payload.name != MAIN_REFERENCE_NAME:
            raise BadRequestError(f"The main pointer must be named '{MAIN_REFERENCE_NAME}'.")

        ref = Reference(
            repository_id=payload.repository_id,
            kind=payload.kind,
            name=payload.name,
            commit_hash=payload.commit_hash
        )
        self.db.add(ref)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError(
                f"{payload.kind.value.capitalize()} '{payload.name}' already exists "
                f"for repository '{payload.repository_id}'."
            ) from e

        return ref

    def find(self, repository_id: str, kind: ReferenceKind, name: str) -> Optional[Reference]:
        """Get a reference by its unique triple"""
        return self.db.query(Reference).filter(
            Reference.repository_id == repository_id,
            Reference.kind == kind,
            Reference.name == name
        ).first()

    def update_commit_hash(self, ref_id: int, new_hash: str) -> Optional[Reference]:
        """
        Point an existing reference at another commit.

        Returns:
            The updated reference, or None if it no longer exists
        """
        require_hash(new_hash, 'commit hash')
        ref = self.db.query(Reference).filter(Reference.id == ref_id).first()
        if not ref:
            return None

        ref.commit_hash = new_hash
        ref.updated_at = datetime.now(timezone.utc)
        self.db.commit()
        return ref

    def delete(self, ref_id: int) -> bool:
        """
        Delete a reference.

        Returns:
            True if deleted, False if not found
        """
        ref = self.db.query(Reference).filter(Reference.id == ref_id).first()
        if not ref:
            return False

        self.db.delete(ref)
        self.db.commit()
        return True

    def list_by_repository(self, repository_id: str, kind: Optional[ReferenceKind] = None) -> List[Reference]:
        """List references of a repository, optionally of one kind, by name"""
        query = self.db.query(Reference).filter(Reference.repository_id == repository_id)
        if kind is not None:
            query = query.filter(Reference.kind == kind)
        return query.order_by(Reference.name).all()
