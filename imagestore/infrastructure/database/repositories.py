"""
Stored File Repository Implementations.

SQLAlchemy and in-memory implementations of IStoredFileRepository.

Usage:
    engine, session_factory = create_session_factory("sqlite:///:memory:")
    with session_factory() as session:
        repo = SQLAlchemyStoredFileRepository(session)
        stored = repo.add(StoredFileRecord(model="Avatar", adapter="Local"))
        session.commit()
"""

import logging
import uuid
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from sqlalchemy import create_engine, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from imagestore.domain.interfaces import IStoredFileRepository
from imagestore.domain.models import RecordNotFoundError, StoredFileRecord
from imagestore.infrastructure.database.models import (
    Base,
    StoredFileORM,
    json_deserializer,
    json_serializer,
)

logger = logging.getLogger(__name__)


def create_session_factory(database_url: str, echo: bool = False) -> Tuple[Engine, sessionmaker]:
    """
    Create an engine, ensure the schema exists and return a session factory.

    Args:
        database_url: SQLAlchemy URL, e.g. "sqlite:///data/files.db"
        echo: Whether to log SQL statements
    """
    engine = create_engine(database_url, echo=echo)
    Base.metadata.create_all(engine)
    return engine, sessionmaker(bind=engine, expire_on_commit=False)


# ═══════════════════════════════════════════════════════════════════════════════
# SQLAlchemy Stored File Repository
# ═══════════════════════════════════════════════════════════════════════════════


class SQLAlchemyStoredFileRepository(IStoredFileRepository):
    """
    SQLAlchemy implementation of IStoredFileRepository.

    Transaction Boundary:
    - Writes are flushed so they are visible within the session
    - Commit belongs to the caller
    """

    def __init__(self, session: Session):
        self._session = session

    def get(self, record_id: str) -> Optional[StoredFileRecord]:
        if not record_id:
            return None
        orm = self._session.get(StoredFileORM, str(record_id))
        return self._to_domain(orm) if orm else None

    def exists(self, record_id: str) -> bool:
        if not record_id:
            return False
        return self._session.get(StoredFileORM, str(record_id)) is not None

    def add(self, record: StoredFileRecord) -> StoredFileRecord:
        if not record.has_id:
            record = record.with_changes(id=str(uuid.uuid4()))
        if self.exists(record.id):
            raise ValueError(f"Stored file {record.id} already exists")

        orm = StoredFileORM(id=record.id, created_at=datetime.now())
        self._apply(orm, record)
        self._session.add(orm)
        self._session.flush()
        logger.debug(f"Inserted stored file {record.id} ({record.model})")
        return record

    def update(self, record: StoredFileRecord) -> StoredFileRecord:
        orm = self._session.get(StoredFileORM, str(record.id)) if record.has_id else None
        if orm is None:
            raise RecordNotFoundError(f"Stored file {record.id} not found")
        self._apply(orm, record)
        self._session.flush()
        return record

    def delete(self, record_id: str) -> bool:
        orm = self._session.get(StoredFileORM, str(record_id)) if record_id else None
        if orm is None:
            return False
        self._session.delete(orm)
        self._session.flush()
        logger.debug(f"Deleted stored file {record_id}")
        return True

    def find_by_model(self, model: str) -> List[StoredFileRecord]:
        stmt = (
            select(StoredFileORM)
            .where(StoredFileORM.model == model)
            .order_by(StoredFileORM.created_at)
        )
        return [self._to_domain(orm) for orm in self._session.scalars(stmt)]

    @staticmethod
    def _apply(orm: StoredFileORM, record: StoredFileRecord) -> None:
        orm.model = record.model
        orm.adapter = record.adapter
        orm.filename = record.filename
        orm.extension = record.extension
        orm.mime_type = record.mime_type
        orm.size = record.size
        orm.path = record.path
        orm.foreign_key = record.foreign_key
        orm.old_file_id = record.old_file_id
        orm.meta = json_serializer(record.metadata) if record.metadata else None

    @staticmethod
    def _to_domain(orm: StoredFileORM) -> StoredFileRecord:
        return StoredFileRecord(
            id=orm.id,
            model=orm.model,
            adapter=orm.adapter,
            filename=orm.filename,
            extension=orm.extension,
            mime_type=orm.mime_type,
            size=orm.size,
            path=orm.path,
            foreign_key=orm.foreign_key,
            old_file_id=orm.old_file_id,
            metadata=json_deserializer(orm.meta) or {},
        )


# ═══════════════════════════════════════════════════════════════════════════════
# In-Memory Implementation (for testing)
# ═══════════════════════════════════════════════════════════════════════════════


class InMemoryStoredFileRepository(IStoredFileRepository):
    """
    In-memory stored file repository for testing.

    Keeps insertion order so find_by_model is deterministic.
    """

    def __init__(self):
        self._records: Dict[str, StoredFileRecord] = {}

    def get(self, record_id: str) -> Optional[StoredFileRecord]:
        if not record_id:
            return None
        return self._records.get(str(record_id))

    def exists(self, record_id: str) -> bool:
        return bool(record_id) and str(record_id) in self._records

    def add(self, record: StoredFileRecord) -> StoredFileRecord:
        if not record.has_id:
            record = record.with_changes(id=str(uuid.uuid4()))
        if record.id in self._records:
            raise ValueError(f"Stored file {record.id} already exists")
        self._records[record.id] = record
        return record

    def update(self, record: StoredFileRecord) -> StoredFileRecord:
        if not self.exists(record.id):
            raise RecordNotFoundError(f"Stored file {record.id} not found")
        self._records[record.id] = record
        return record

    def delete(self, record_id: str) -> bool:
        if not self.exists(record_id):
            return False
        del self._records[str(record_id)]
        return True

    def find_by_model(self, model: str) -> List[StoredFileRecord]:
        return [r for r in self._records.values() if r.model == model]

    def __len__(self) -> int:
        return len(self._records)
