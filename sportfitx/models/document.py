"""Document storage model definitions."""

from sqlalchemy import JSON, Column, DateTime, Integer, String, UniqueConstraint, func
from sportfitx.database import Base


class Document(Base):
    """A schemaless JSON document stored in a named collection."""
    __tablename__ = "documents"
    __table_args__ = (UniqueConstraint("collection", "id", name="uq_documents_collection_id"),)

    seq = Column(Integer, primary_key=True, autoincrement=True)
    collection = Column(String(64), nullable=False, index=True)
    id = Column(String(64), nullable=False, index=True)
    body = Column(JSON, nullable=False, default=dict)
    version = Column(Integer, nullable=False, default=0, server_default="0")  # bumped on every write
    created_at = Column(DateTime, server_default=func.now())
