from .base import Base
from .stored_object import StoredObject, ContentKind
from .reference import Reference, ReferenceKind, MAIN_REFERENCE_NAME

__all__ = ['Base', 'StoredObject', 'ContentKind', 'Reference', 'ReferenceKind', 'MAIN_REFERENCE_NAME']
