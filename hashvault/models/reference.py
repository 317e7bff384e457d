from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, DateTime, Enum, UniqueConstraint
import enum
from .base import Base

MAIN_REFERENCE_NAME = 'main'


class ReferenceKind(enum.Enum):
    """Kind of reference"""
    MAIN = "main"
    TAG = "tag"


class Reference(Base):
    """
    A named pointer to a commit within a repository.

    The main pointer is updated in place; tags never change once created.
    """
    __tablename__ = 'refs'

    id = Column(Integer, primary_key=True, autoincrement=True)

    repository_id = Column(String(24), nullable=False)
    kind = Column(Enum(ReferenceKind), nullable=False)
    name = Column(String(100), nullable=False)  # 'main' for the main pointer, tag name otherwise

    commit_hash = Column(String(64), nullable=False)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc),
                        onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint('repository_id', 'kind', 'name', name='uq_refs_repository_kind_name'),
    )

    def __repr__(self):
        return f"<Reference(kind={self.kind.value}, name='{self.name}', commit='{self.commit_hash[:8]}...')>"

    @property
    def is_main(self):
        return self.kind == ReferenceKind.MAIN

    @property
    def is_tag(self):
        return self.kind == ReferenceKind.TAG
