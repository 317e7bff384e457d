from .object_store import ObjectStore
from .access import AccessGate, AccessLevel
from .references import ReferenceStore, CreateReferencePayload
from .coordinator import ReferenceCoordinator

__all__ = ['ObjectStore', 'AccessGate', 'AccessLevel', 'ReferenceStore', 'CreateReferencePayload',
           'ReferenceCoordinator']
