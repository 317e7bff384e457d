import io
import json
import logging
from collections.abc import Mapping
from typing import Any, BinaryIO, List, Optional

from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from hashvault.errors import BadRequestError, InternalServerError, NotFoundError
from hashvault.models import StoredObject, ContentKind
from hashvault.models.api_schemas import Commit, ObjectSummary, Tree, TreeEntry
from hashvault.storage import ByteStore, StorageError
from .hashing import hash_blob, serialize_commit, serialize_tree
from .validation import is_valid_hash, require_hash, require_id

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = 'application/json'
TREE_ENTRY_FIELDS = ('mode', 'type', 'hash', 'name')
ENTRY_TYPES = ('blob', 'tree')


def parse_tree_entries(entries: Any) -> List[TreeEntry]:
    """
    Validate raw tree entries.

    Args:
        entries: Sequence of dicts (or TreeEntry objects) with mode, type, hash, name

    Returns:
        List of TreeEntry objects, in the order given

    Raises:
        BadRequestError: Naming the first offending entry
    """
    if not isinstance(entries, (list, tuple)) or len(entries) == 0:
        raise BadRequestError("Tree entries are required and must be a non-empty array.")

    parsed = []
    seen_names = set()
    for index, entry in enumerate(entries):
        raw = entry.to_json() if isinstance(entry, TreeEntry) else entry
        if not isinstance(raw, Mapping):
            raise BadRequestError(f"Tree entry #{index} must be an object.")

        label = raw.get('name') or f"#{index}"
        for field in TREE_ENTRY_FIELDS:
            value = raw.get(field)
            if not value or not isinstance(value, str):
                raise BadRequestError(
                    f"Tree entry '{label}' is missing '{field}'. "
                    f"Each tree entry must have mode, type, hash, and name."
                )
        if raw['type'] not in ENTRY_TYPES:
            raise BadRequestError(f"Invalid entry type: {raw['type']}. Must be 'blob' or 'tree'.")
        if not is_valid_hash(raw['hash']):
            raise BadRequestError(f"Invalid hash format for entry '{label}'.")
        # Duplicate names would make the sorted order depend on submission order
        if raw['name'] in seen_names:
            raise BadRequestError(f"Duplicate entry name '{label}' in tree.")
        seen_names.add(raw['name'])

        parsed.append(TreeEntry(mode=raw['mode'], type=raw['type'], hash=raw['hash'], name=raw['name']))

    return parsed


def parse_commit(commit: Any) -> Commit:
    """
    Validate a raw commit.

    Fields are checked in order (tree, parents, author, committer, message) and
    the first missing or invalid one is named in the error.

    Raises:
        BadRequestError: If a field is missing or malformed
    """
    raw = commit.to_json() if isinstance(commit, Commit) else commit
    if not isinstance(raw, Mapping):
        raise BadRequestError("Commit object is required.")

    tree = raw.get('tree')
    if not tree:
        raise BadRequestError("Commit is missing required field 'tree'.")
    if not is_valid_hash(tree):
        raise BadRequestError("Invalid hash format for commit field 'tree'.")

    parents = raw.get('parents')
    if parents is None:
        raise BadRequestError("Commit is missing required field 'parents'.")
    if not isinstance(parents, (list, tuple)):
        raise BadRequestError("Commit field 'parents' must be an array.")
    for index, parent in enumerate(parents):
        if not is_valid_hash(parent):
            raise BadRequestError(f"Invalid hash format for commit field 'parents[{index}]'.")

    for role in ('author', 'committer'):
        signature = raw.get(role)
        if not isinstance(signature, Mapping):
            raise BadRequestError(f"Commit is missing required field '{role}'.")
        if not signature.get('email') or not isinstance(signature.get('email'), str):
            raise BadRequestError(f"Commit is missing required field '{role}.email'.")
        if signature.get('timestamp') in (None, ''):
            raise BadRequestError(f"Commit is missing required field '{role}.timestamp'.")

    message = raw.get('message')
    if not isinstance(message, str) or not message.strip():
        raise BadRequestError("Commit field 'message' must be a non-empty string.")

    try:
        return Commit.model_validate(raw)
    except ValidationError as e:
        first = e.errors()[0]
        location = '.'.join(str(part) for part in first['loc'])
        raise BadRequestError(f"Invalid commit field '{location}': {first['msg']}.") from e


class ObjectStore:
    """
    Content-addressed storage of blobs, trees and commits.

    Bytes live in a ByteStore under their SHA-256 hash; one StoredObject row
    per hash records kind and provenance. Objects are never updated, only
    created if absent.
    """

    def __init__(self, db: Session, storage: ByteStore):
        self.db = db
        self.storage = storage

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def put_blob(
        self,
        content: bytes,
        filename: Optional[str],
        content_type: Optional[str],
        uploader_id: str,
        repository_id: str
    ) -> str:
        """
        Store raw file content.

        Args:
            content: Binary content
            filename: Original file name, kept as metadata
            content_type: MIME type of the upload
            uploader_id: User uploading the content
            repository_id: Repository the upload belongs to

        Returns:
            SHA-256 hash of the content
        """
        self._require_provenance(uploader_id, repository_id)
        return self._store(content, ContentKind.BLOB, uploader_id, repository_id,
                           original_name=filename, content_type=content_type)

    def put_tree(self, entries: Any, uploader_id: str, repository_id: str) -> str:
        """
        Store a tree.

        Args:
            entries: Tree entries (dicts or TreeEntry objects), in any order

        Returns:
            Hash of the canonical (name-sorted) tree document
        """
        self._require_provenance(uploader_id, repository_id)
        parsed = parse_tree_entries(entries)
        return self._store(serialize_tree(parsed), ContentKind.TREE, uploader_id, repository_id,
                           content_type=JSON_CONTENT_TYPE)

    def put_commit(self, commit: Any, uploader_id: str, repository_id: str) -> str:
        """
        Store a commit.

        The commit's tree and parents are only checked for format; they do not
        have to be stored yet.

        Returns:
            Hash of the canonical commit document
        """
        self._require_provenance(uploader_id, repository_id)
        parsed = parse_commit(commit)
        return self._store(serialize_commit(parsed), ContentKind.COMMIT, uploader_id, repository_id,
                           content_type=JSON_CONTENT_TYPE)

    def _require_provenance(self, uploader_id: str, repository_id: str) -> None:
        require_id(uploader_id, 'uploader ID')
        require_id(repository_id, 'repository ID')

    def _store(
        self,
        content: bytes,
        kind: ContentKind,
        uploader_id: str,
        repository_id: str,
        original_name: Optional[str] = None,
        content_type: Optional[str] = None
    ) -> str:
        hash = hash_blob(content)

        # Content-addressable deduplication
        if self.object_exists(hash):
            logger.info(f"Object {hash} already exists. Skipping upload.")
            return hash

        try:
            size = self.storage.put_stream(hash, io.BytesIO(content))
        except StorageError as e:
            logger.error(f"Failed to store {kind.value} {hash}: {e}")
            raise InternalServerError("Failed to upload content.") from e

        # Metadata only once the bytes are durably stored
        stored = StoredObject(
            hash=hash,
            content_kind=kind,
            byte_size=size,
            storage_key=hash,
            uploader_id=uploader_id,
            repository_id=repository_id,
            original_name=original_name,
            content_type=content_type
        )
        self.db.add(stored)
        try:
            self.db.commit()
        except IntegrityError:
            # A concurrent upload of the same content won the insert; its bytes are identical
            self.db.rollback()
            logger.info(f"Object {hash} was stored concurrently.")
            return hash

        logger.info(f"Stored {kind.value} {hash} ({size} bytes) for repository {repository_id}")
        return hash

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_blob(self, hash: str) -> BinaryIO:
        """
        Open an object's raw content.

        Returns:
            Readable binary stream; the caller must close it
        """
        record = self._get_record(hash)
        return self._open(record)

    def get_tree(self, hash: str) -> Tree:
        """Get a tree by hash"""
        record = self._get_record(hash)
        document = self._read_json(record)

        if not isinstance(document, dict) or not isinstance(document.get('entries'), list):
            raise BadRequestError(f"Object '{hash}' is not a valid tree: missing entries array.")
        try:
            return Tree.model_validate(document)
        except ValidationError as e:
            raise BadRequestError(f"Object '{hash}' is not a valid tree.") from e

    def get_commit(self, hash: str) -> Commit:
        """Get a commit by hash"""
        record = self._get_record(hash)
        if record.content_kind != ContentKind.COMMIT:
            raise BadRequestError(f"Object '{hash}' is a {record.content_kind.value}, not a commit.")

        document = self._read_json(record)
        return parse_commit(document)

    def object_exists(self, hash: str, kind: Optional[ContentKind] = None) -> bool:
        """
        Check whether an object with this hash has been stored.

        Args:
            hash: Object hash
            kind: Only count objects of this kind

        Returns:
            True if exists, False otherwise (including malformed hashes)
        """
        if not is_valid_hash(hash):
            return False

        query = self.db.query(StoredObject.hash).filter(StoredObject.hash == hash)
        if kind is not None:
            query = query.filter(StoredObject.content_kind == kind)
        return query.first() is not None

    def list_objects_for_repository(
        self,
        repository_id: str,
        uploader_id: Optional[str] = None
    ) -> List[ObjectSummary]:
        """
        List objects first uploaded to a repository.

        Args:
            repository_id: Repository to list
            uploader_id: Only include objects uploaded by this user

        Returns:
            Object summaries, oldest first
        """
        require_id(repository_id, 'repository ID')
        query = self.db.query(StoredObject).filter(StoredObject.repository_id == repository_id)
        if uploader_id:
            require_id(uploader_id, 'user ID')
            query = query.filter(StoredObject.uploader_id == uploader_id)

        return [
            ObjectSummary(
                hash=obj.hash,
                size=obj.byte_size,
                content_kind=obj.content_kind.value,
                original_filename=obj.original_name,
                content_type=obj.content_type,
                uploaded_at=obj.created_at,
                uploader_id=obj.uploader_id,
                repository_id=obj.repository_id
            )
            for obj in query.order_by(StoredObject.created_at, StoredObject.hash).all()
        ]

    def _get_record(self, hash: str) -> StoredObject:
        require_hash(hash, 'SHA256 hash')
        record = self.db.query(StoredObject).filter(StoredObject.hash == hash).first()
        if not record:
            raise NotFoundError(f"Object with hash '{hash}' not found.")
        return record

    def _open(self, record: StoredObject) -> BinaryIO:
        try:
            stream = self.storage.get_stream(record.storage_key)
        except StorageError as e:
            logger.error(f"Failed to open object {record.hash}: {e}")
            raise InternalServerError("Failed to open download stream.") from e
        if stream is None:
            logger.error(f"Object {record.hash} has metadata but no content in storage")
            raise InternalServerError(f"Content for object '{record.hash}' is missing from storage.")
        return stream

    def _read_json(self, record: StoredObject) -> Any:
        stream = self._open(record)
        try:
            content = stream.read()
        except (OSError, StorageError) as e:
            logger.error(f"Failed to read object {record.hash}: {e}")
            raise InternalServerError(f"Failed to read object '{record.hash}'.") from e
        finally:
            stream.close()

        try:
            return json.loads(content)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise BadRequestError(f"Object '{record.hash}' does not contain a JSON document.") from e
