"""SQLAlchemy-backed record store (SQLite by default, any SQLAlchemy URL works)."""

import uuid
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, Optional

from rich.console import Console
from sqlalchemy import JSON, Column, Date, DateTime, String, create_engine, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from confs_scraper.errors import DuplicateRecordError, RecordNotFoundError, StoreError
from confs_scraper.models import RecordFields, StoredRecord
from confs_scraper.store.base import RecordStore

console = Console()

Base = declarative_base()


class ConferenceRow(Base):
    """Conference table; both identity keys carry unique constraints."""

    __tablename__ = "conferences"

    id = Column(String, primary_key=True, default=lambda: uuid.uuid4().hex)
    name = Column(String, nullable=False, index=True)
    url = Column(String, nullable=False)
    normalized_url = Column(String, unique=True, nullable=False, index=True)
    cfp_url = Column(String)
    normalized_cfp_url = Column(String, unique=True, nullable=True, index=True)
    start_date = Column(Date, index=True)
    end_date = Column(Date)
    cfp_end_date = Column(Date)
    city = Column(String)
    country = Column(String, index=True)
    twitter = Column(String)
    mastodon = Column(String)
    topics = Column(JSON, nullable=False, default=list)
    code_of_conduct = Column(String)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now)


def _to_record(row: ConferenceRow) -> StoredRecord:
    return StoredRecord.model_validate(row, from_attributes=True)


class SQLRecordStore(RecordStore):
    """Record store on a relational database.

    The unique constraints on ``normalized_url`` and ``normalized_cfp_url``
    are what serialize concurrent creates across processes: the losing
    writer gets a ``DuplicateRecordError``.
    """

    def __init__(self, database_url: str = "sqlite:///conferences.db"):
        self.database_url = database_url
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            # One shared connection, otherwise each session sees an empty database
            self._engine = create_engine(
                database_url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        elif database_url.startswith("sqlite"):
            self._engine = create_engine(database_url, connect_args={"check_same_thread": False})
        else:
            self._engine = create_engine(database_url, pool_pre_ping=True)
        self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
        try:
            Base.metadata.create_all(self._engine)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to initialize database: {e}") from e

    @contextmanager
    def get_session(self) -> Iterator[Session]:
        """Session that commits on success and maps driver errors to StoreError."""
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except IntegrityError as e:
            session.rollback()
            raise DuplicateRecordError("identity", str(e.orig)) from e
        except SQLAlchemyError as e:
            session.rollback()
            raise StoreError(str(e)) from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def _find_one(self, column, value: str) -> Optional[StoredRecord]:
        with self.get_session() as session:
            row = session.scalars(select(ConferenceRow).where(column == value)).first()
            return _to_record(row) if row else None

    def find_by_url(self, normalized_url: str) -> Optional[StoredRecord]:
        return self._find_one(ConferenceRow.normalized_url, normalized_url)

    def find_by_cfp_url(self, normalized_cfp_url: str) -> Optional[StoredRecord]:
        return self._find_one(ConferenceRow.normalized_cfp_url, normalized_cfp_url)

    def create(self, record: RecordFields) -> StoredRecord:
        now = datetime.now()
        with self.get_session() as session:
            row = ConferenceRow(**record.model_dump(), created_at=now, updated_at=now)
            session.add(row)
            session.flush()
            return _to_record(row)

    def update(self, record_id: str, record: RecordFields) -> StoredRecord:
        with self.get_session() as session:
            row = session.get(ConferenceRow, record_id)
            if row is None:
                raise RecordNotFoundError(record_id)
            for field, value in record.model_dump().items():
                setattr(row, field, value)
            row.updated_at = datetime.now()
            session.flush()
            return _to_record(row)

    def all(self) -> list[StoredRecord]:
        with self.get_session() as session:
            rows = session.scalars(select(ConferenceRow).order_by(ConferenceRow.created_at))
            return [_to_record(row) for row in rows]

    def count(self) -> int:
        with self.get_session() as session:
            return session.query(ConferenceRow).count()

    def close(self) -> None:
        self._engine.dispose()
