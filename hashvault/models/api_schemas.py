"""Pydantic models for objects, collaborator payloads and HTTP bodies.

Field names are snake_case in Python and camelCase on the wire.
"""
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base model with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> Dict[str, Any]:
        """Dump to JSON-compatible primitives using wire field names."""
        return self.model_dump(mode='json', by_alias=True)


# ============================================================================
# Content objects
# ============================================================================

class TreeEntry(ApiModel):
    """A single named entry of a tree, pointing at a blob or a subtree."""

    mode: str
    """File mode (e.g. 100644 for a regular file, 040000 for a directory)"""

    type: Literal['blob', 'tree']
    """Kind of object the entry points to"""

    hash: str
    """SHA-256 hash of the referenced object"""

    name: str
    """File or directory name"""


class Tree(ApiModel):
    """A directory snapshot."""

    entries: List[TreeEntry]
    """Entries, sorted by name"""


class Signature(ApiModel):
    """Who authored or committed a commit, and when."""

    email: str
    timestamp: datetime


class Commit(ApiModel):
    """A snapshot of a tree with its parents, authorship and message."""

    tree: str
    """Hash of the root tree"""

    parents: List[str]
    """Hashes of the parent commits (empty for a root commit)"""

    author: Signature
    committer: Signature
    message: str


class ObjectSummary(ApiModel):
    """Metadata of a stored object, as returned by repository listings."""

    hash: str
    size: int
    content_kind: str
    original_filename: Optional[str] = None
    content_type: Optional[str] = None
    uploaded_at: Optional[datetime] = None
    uploader_id: str
    repository_id: str


# ============================================================================
# Collaborators
# ============================================================================

class RepositoryInfo(ApiModel):
    """Repository metadata as reported by the repository service."""

    id: str = Field(validation_alias=AliasChoices('id', '_id'))
    name: Optional[str] = None
    description: Optional[str] = None
    owner: str
    visibility: Literal['public', 'private'] = 'private'
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Identity(ApiModel):
    """The caller, as resolved by the identity provider."""

    user_id: str = Field(validation_alias=AliasChoices('userId', 'user_id', 'id'))
    email: Optional[str] = None


# ============================================================================
# Content service bodies
# ============================================================================

class CreateTreeRequest(ApiModel):
    """Body of POST /api/content/trees."""

    entries: List[Dict[str, Any]]
    repository_id: str


class CreateCommitRequest(ApiModel):
    """Body of POST /api/content/commits."""

    commit: Dict[str, Any]
    repository_id: str


class BlobUploadResponse(ApiModel):
    hash: str
    size: int
    original_filename: str
    content_type: str


class TreeUploadResponse(ApiModel):
    hash: str
    entries_count: int


class CommitUploadResponse(ApiModel):
    hash: str


# ============================================================================
# Reference service bodies
# ============================================================================

class UpdateMainRequest(ApiModel):
    """Body of PUT /api/references/main/<repositoryId>."""

    commit_hash: str


class CreateTagRequest(ApiModel):
    """Body of POST /api/references/tags/<repositoryId>."""

    tag_name: str
    commit_hash: str


class ReferenceInfo(ApiModel):
    """A main pointer or tag."""

    id: int
    repository_id: str
    kind: Literal['main', 'tag']
    name: str
    commit_hash: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, ref) -> 'ReferenceInfo':
        return cls(
            id=ref.id,
            repository_id=ref.repository_id,
            kind=ref.kind.value,
            name=ref.name,
            commit_hash=ref.commit_hash,
            created_at=ref.created_at,
            updated_at=ref.updated_at,
        )


# ============================================================================
# Envelope
# ============================================================================

class ErrorInfo(ApiModel):
    code: str
    details: Any = None


class ApiResponse(ApiModel):
    """Standard response envelope."""

    success: bool
    message: str
    data: Any = None
    error: Optional[ErrorInfo] = None
