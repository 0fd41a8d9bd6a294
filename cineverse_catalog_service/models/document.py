"""A single document in a named collection."""
from datetime import UTC, datetime

from sqlalchemy import JSON, Column, DateTime, Index, Integer, String, UniqueConstraint

from cineverse_catalog_service.models.base import Base


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Document(Base):
    """Schemaless document stored under a collection path.

    Collection paths are slash-separated, e.g. ``content`` or
    ``users/{uid}/watchlist``. ``seq`` records insertion order, which is the
    order collections are returned in.
    """
    __tablename__ = 'documents'

    seq = Column(Integer, primary_key=True, autoincrement=True)
    collection = Column(String(255), nullable=False)
    doc_id = Column(String(128), nullable=False)
    data = Column(JSON, nullable=False, default=dict)

    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("collection", "doc_id", name="uq_collection_doc_id"),
        Index("idx_collection_seq", "collection", "seq"),
    )

    def to_dict(self) -> dict:
        """Return the document body with its id."""
        return {**(self.data or {}), "id": self.doc_id}

    def __repr__(self):
        return f"<Document(collection='{self.collection}', doc_id='{self.doc_id}')>"
