from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, Optional

from sqlalchemy import BigInteger, Column, DateTime, Integer, String, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from scaler.domain.autoscalerState import AutoscalerState
from scaler.domain.errors import StateStoreError
from scaler.domain.state_store import StateStore, StateTransaction
from scaler.infra.keyed_locks import KeyedLocks

logger = logging.getLogger(__name__)

Base = declarative_base()


class ScalerStateDB(Base):
    __tablename__ = "scaler_state"

    instance_key = Column(String, primary_key=True, index=True)
    last_scaling_timestamp = Column(BigInteger, nullable=False, default=0)
    current_size = Column(Integer, nullable=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


def _engine_for(database_url: str) -> Engine:
    if not database_url.startswith("sqlite"):
        return create_engine(database_url, pool_pre_ping=True)

    if database_url in ("sqlite://", "sqlite:///:memory:"):
        # one shared connection, otherwise every session sees an empty database
        return create_engine(database_url, connect_args={"check_same_thread": False}, poolclass=StaticPool)
    return create_engine(database_url, connect_args={"check_same_thread": False})


class _SqlTransaction(StateTransaction):
    def __init__(self, session: Session, instance_key: str, row: ScalerStateDB) -> None:
        self._session = session
        self._key = instance_key
        self._row = row

    def get(self) -> AutoscalerState:
        return AutoscalerState(
            last_scaling_timestamp=self._row.last_scaling_timestamp or 0,
            current_size=self._row.current_size,
        )

    def set(self, timestamp: int, size: int) -> None:
        self._row.last_scaling_timestamp = timestamp
        self._row.current_size = size
        try:
            self._session.commit()
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise StateStoreError(f"Failed to write scaler state for {self._key}") from exc
        logger.debug(f"Stored state for {self._key}: timestamp={timestamp}, size={size}")


class SqlStateStore(StateStore):
    """
    Keeps one row per instance. A transaction locks the row with
    SELECT ... FOR UPDATE (inserting a placeholder when the instance has never
    scaled) and the placeholder disappears again unless `set` commits.
    SQLite ignores FOR UPDATE, so a per-key in-process lock is held as well.
    """

    def __init__(self, database_url: Optional[str] = None, engine: Optional[Engine] = None) -> None:
        if engine is None and database_url is None:
            raise ValueError("SqlStateStore needs a database_url or an engine")
        self.engine: Engine = engine if engine is not None else _engine_for(database_url)
        self._sessions = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        self._locks = KeyedLocks()

    def init_db(self) -> None:
        try:
            Base.metadata.create_all(bind=self.engine)
        except SQLAlchemyError as exc:
            raise StateStoreError("Failed to create scaler state table") from exc

    @staticmethod
    def _lock_row(session: Session, instance_key: str) -> ScalerStateDB:
        row = session.get(ScalerStateDB, instance_key, with_for_update=True)
        if row is not None:
            return row

        row = ScalerStateDB(instance_key=instance_key, last_scaling_timestamp=0)
        session.add(row)
        try:
            session.flush()
        except IntegrityError:
            # another process inserted it first; wait for its lock instead
            session.rollback()
            return SqlStateStore._lock_row(session, instance_key)
        return row

    @contextmanager
    def transaction(self, instance_key: str) -> Iterator[StateTransaction]:
        with self._locks.hold(instance_key):
            session = self._sessions()
            try:
                try:
                    row = self._lock_row(session, instance_key)
                except SQLAlchemyError as exc:
                    raise StateStoreError(f"Failed to read scaler state for {instance_key}") from exc
                yield _SqlTransaction(session, instance_key, row)
            finally:
                session.close()
