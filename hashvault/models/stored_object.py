from sqlalchemy import Column, String, BigInteger, DateTime, Enum, Index
from sqlalchemy.sql import func
import enum
from .base import Base


class ContentKind(enum.Enum):
    """What the stored bytes of an object are"""
    BLOB = "blob"
    TREE = "tree"
    COMMIT = "commit"


class StoredObject(Base):
    """
    Metadata of one content-addressed object.

    Blobs, trees and commits share this record; ``content_kind`` says how the
    bytes in the byte store are to be read. There is exactly one row per hash:
    uploads of identical content collapse onto the first one.
    """
    __tablename__ = 'stored_objects'

    # SHA-256 of the stored bytes
    hash = Column(String(64), primary_key=True)

    content_kind = Column(Enum(ContentKind), nullable=False)

    # Size in bytes
    byte_size = Column(BigInteger, nullable=False)

    # Key under which the byte store holds the content
    storage_key = Column(String(255), nullable=False)

    # Provenance of the first upload
    uploader_id = Column(String(24), nullable=False)
    repository_id = Column(String(24), nullable=False)
    original_name = Column(String(255), nullable=True)
    content_type = Column(String(255), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index('ix_stored_objects_repository_uploader', 'repository_id', 'uploader_id'),
    )

    def __repr__(self):
        return f"<StoredObject(hash='{self.hash[:8]}...', kind={self.content_kind.value}, size={self.byte_size})>"
