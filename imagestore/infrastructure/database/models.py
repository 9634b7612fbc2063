"""
SQLAlchemy ORM Models for stored files.

Tables:
- file_storage: One row per stored file/image

Domain records (StoredFileRecord) are reconstructed from ORM rows; ORM objects
never leave the repository.
"""

from datetime import datetime
from typing import Optional
import json

from sqlalchemy import BigInteger, DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, declarative_base, mapped_column

Base = declarative_base()


def json_serializer(obj):
    """Serialize object to JSON string."""
    if obj is None:
        return None
    return json.dumps(obj)


def json_deserializer(s):
    """Deserialize JSON string to object."""
    if s is None:
        return None
    return json.loads(s)


class StoredFileORM(Base):
    """
    ORM model for a stored file.

    Attributes:
        id: Opaque identifier (UUID string when generated here)
        model: Logical owner name grouping version configurations
        adapter: Storage adapter tag
        old_file_id: Id of the file this one supersedes
        meta: JSON-encoded free-form metadata
    """
    __tablename__ = "file_storage"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    model: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    adapter: Mapped[str] = mapped_column(String(64), nullable=False, default="Local")
    filename: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    extension: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    mime_type: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    size: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)
    path: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    foreign_key: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    old_file_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    meta: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now)
    modified_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now, onupdate=datetime.now)

    __table_args__ = (
        Index("ix_file_storage_model", "model"),
        Index("ix_file_storage_foreign_key", "foreign_key"),
    )

    def __repr__(self) -> str:
        return f"<StoredFileORM id={self.id} model={self.model} adapter={self.adapter}>"
