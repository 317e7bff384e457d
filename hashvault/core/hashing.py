"""
Canonical serialization and SHA-256 digests for blobs, trees and commits.

The bytes produced by :func:`serialize_tree` and :func:`serialize_commit` are
exactly what the object store writes, so for every object kind the identity
hash equals ``sha256(stored bytes)``.
"""
import hashlib
import json
import re
from typing import Any, Iterable, Mapping, Union

from hashvault.models.api_schemas import Commit, TreeEntry

HASH_PATTERN = re.compile(r'^[0-9a-f]{64}$')

TreeEntryLike = Union[TreeEntry, Mapping[str, Any]]


def canonical_json(value: Any) -> bytes:
    """Serialize with sorted keys and no insignificant whitespace."""
    return json.dumps(value, sort_keys=True, separators=(',', ':'), ensure_ascii=False).encode('utf-8')


def hash_blob(data: bytes) -> str:
    """SHA-256 of raw bytes, as 64 lowercase hex characters."""
    return hashlib.sha256(data).hexdigest()


def _entry_dict(entry: TreeEntryLike) -> dict:
    if isinstance(entry, TreeEntry):
        return entry.to_json()
    return {
        'mode': entry['mode'],
        'type': entry['type'],
        'hash': entry['hash'],
        'name': entry['name'],
    }


def serialize_tree(entries: Iterable[TreeEntryLike]) -> bytes:
    """
    Serialize tree entries to the stored tree document.

    Entries are sorted by name (ordinal comparison), then type, hash and mode,
    so the same entries serialize identically whatever order they were given in.

    Returns:
        Canonical JSON bytes of ``{"entries": [...]}``
    """
    sorted_entries = sorted(
        (_entry_dict(e) for e in entries),
        key=lambda e: (e['name'], e['type'], e['hash'], e['mode'])
    )
    return canonical_json({'entries': sorted_entries})


def hash_tree(entries: Iterable[TreeEntryLike]) -> str:
    """Hash of the canonical tree document."""
    return hash_blob(serialize_tree(entries))


def serialize_commit(commit: Union[Commit, Mapping[str, Any]]) -> bytes:
    """Canonical JSON bytes of a commit; timestamps become ISO-8601 strings."""
    if not isinstance(commit, Commit):
        commit = Commit.model_validate(commit)
    return canonical_json(commit.to_json())


def hash_commit(commit: Union[Commit, Mapping[str, Any]]) -> str:
    """Hash of the canonical commit document."""
    return hash_blob(serialize_commit(commit))
