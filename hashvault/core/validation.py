"""Format rules for identifiers, hashes and reference names."""
import re
from typing import Any

from hashvault.errors import BadRequestError
from .hashing import HASH_PATTERN

# Repository and user ids are issued by the repository/identity services as
# 24-character hex object ids.
OBJECT_ID_PATTERN = re.compile(r'^[0-9a-fA-F]{24}$')

REFERENCE_NAME_PATTERN = re.compile(r'^[A-Za-z0-9_.-]+$')
MAX_REFERENCE_NAME_LENGTH = 100


def is_valid_id(value: Any) -> bool:
    return isinstance(value, str) and OBJECT_ID_PATTERN.match(value) is not None


def is_valid_hash(value: Any) -> bool:
    return isinstance(value, str) and HASH_PATTERN.match(value) is not None


def is_valid_reference_name(value: Any) -> bool:
    return (
        isinstance(value, str)
        and 0 < len(value) <= MAX_REFERENCE_NAME_LENGTH
        and REFERENCE_NAME_PATTERN.match(value) is not None
    )


def require_id(value: Any, label: str) -> str:
    """Raise BadRequestError unless value is a well-formed identifier."""
    if not is_valid_id(value):
        raise BadRequestError(f"Invalid {label} format.")
    return value


def require_hash(value: Any, label: str = 'hash') -> str:
    """Raise BadRequestError unless value is 64 lowercase hex characters."""
    if not is_valid_hash(value):
        raise BadRequestError(f"Invalid {label} format.")
    return value


def require_reference_name(value: Any, label: str = 'Tag name') -> str:
    """Raise BadRequestError unless value is a usable reference name."""
    if not isinstance(value, str) or not value.strip():
        raise BadRequestError(f"{label} is required.")
    if not is_valid_reference_name(value):
        raise BadRequestError(
            f"'{value}' is not a valid reference name. Use up to {MAX_REFERENCE_NAME_LENGTH} "
            f"letters, digits, '.', '_' or '-'."
        )
    return value
