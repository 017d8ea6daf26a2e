"""
SQLite Local Store Implementation

DESIGN DECISION: SQLite through the SQLAlchemy ORM is used as the
on-device store because:
1. A single file, no server, ships with Python
2. The ORM session already has the semantics we need: objects are
   staged with add()/delete() and committed together
3. 'sqlite://' gives a throwaway in-memory store for tests and previews

TRADEOFFS:
- One session, one foreground context; not meant for concurrent writers
- No migrations: tables are created on first use
- Amounts are stored as exact decimal text, not REAL

The session autoflushes, so fetch_all() sees staged creates and deletes
before save() is called. Nothing is committed until save().
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable, Optional, Union
from uuid import UUID

import structlog
from sqlalchemy import Column, DateTime, Integer, String, Text, create_engine, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base
from sqlalchemy.pool import StaticPool

from cashmind.config import StoreSettings
from cashmind.models.expense import ExpenseRecord, utc_now
from cashmind.models.user import UserCredential, hash_password
from cashmind.services.store.interface import (
    LocalStoreInterface,
    NotFoundError,
    Record,
    RecordHandle,
    RecordKind,
    SaveResult,
    StoreAction,
    StoreChange,
    StoreError,
    coerce_kind,
)


logger = structlog.get_logger(__name__)

Base = declarative_base()


def is_memory_url(database_url: str) -> bool:
    """True for SQLite URLs that point at an in-memory database."""
    return database_url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in database_url


def _as_utc(value: datetime) -> datetime:
    """SQLite drops tzinfo; everything we write is UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class ExpenseRow(Base):
    __tablename__ = "expenses"

    # Insertion order; breaks ties between equal timestamps
    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(36), unique=True, nullable=False, index=True)
    timestamp = Column(DateTime(timezone=True), nullable=False, index=True)
    amount = Column(Text, nullable=False)
    category = Column(Text, nullable=False, default="")
    notes = Column(Text, nullable=True)

    @classmethod
    def from_record(cls, record: ExpenseRecord) -> "ExpenseRow":
        return cls(
            id=str(record.id),
            timestamp=record.timestamp,
            amount=str(record.amount),
            category=record.category,
            notes=record.notes,
        )

    def to_record(self) -> ExpenseRecord:
        return ExpenseRecord(
            id=UUID(self.id),
            timestamp=_as_utc(self.timestamp),
            amount=Decimal(self.amount),
            category=self.category or "",
            notes=self.notes,
        )


class CredentialRow(Base):
    __tablename__ = "credentials"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(36), unique=True, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    username = Column(Text, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    email = Column(Text, nullable=False, default="")

    @classmethod
    def from_record(cls, record: UserCredential) -> "CredentialRow":
        return cls(
            id=str(record.id),
            created_at=record.created_at,
            username=record.username,
            password_hash=record.password_hash,
            email=record.email,
        )

    def to_record(self) -> UserCredential:
        return UserCredential(
            id=UUID(self.id),
            created_at=_as_utc(self.created_at),
            username=self.username,
            password_hash=self.password_hash,
            email=self.email or "",
        )


_ROW_TYPES = {
    RecordKind.EXPENSE: ExpenseRow,
    RecordKind.CREDENTIAL: CredentialRow,
}


class SQLiteLocalStore(LocalStoreInterface):
    """
    SQLite implementation of the local store.

    One SQLAlchemy session is kept open for the lifetime of the store;
    it is the in-memory context that create() and delete() stage into.
    """

    def __init__(
        self,
        database_url: str = "sqlite://",
        echo: bool = False,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        super().__init__()
        self._clock = clock or utc_now

        engine_kwargs: dict = {
            "echo": echo,
            "connect_args": {"check_same_thread": False},
        }
        if is_memory_url(database_url):
            # Every connection must see the same in-memory database
            engine_kwargs["poolclass"] = StaticPool

        try:
            self._engine = create_engine(database_url, **engine_kwargs)
            Base.metadata.create_all(self._engine)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to open local store at {database_url}: {e}") from e

        self._session = Session(self._engine, expire_on_commit=False)
        self._reset_pending()

    @classmethod
    def from_settings(cls, settings: StoreSettings) -> "SQLiteLocalStore":
        return cls(database_url=settings.database_url, echo=settings.echo_sql)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create(self, kind: Union[RecordKind, str], fields: dict) -> RecordHandle:
        kind = coerce_kind(kind)

        if kind == RecordKind.EXPENSE:
            record = ExpenseRecord(
                timestamp=self._clock(),
                amount=fields.get("amount", Decimal("0")),
                category=fields.get("category") or "",
                notes=fields.get("notes"),
            )
            row = ExpenseRow.from_record(record)
        else:
            record = UserCredential(
                username=fields.get("username", ""),
                password_hash=hash_password(fields.get("password", "")),
                email=fields.get("email") or "",
            )
            row = CredentialRow.from_record(record)

        self._session.add(row)
        self._created += 1
        self._unsaved_ids.add(record.id)
        self._dirty = True
        logger.debug("record_staged", kind=kind.value, record_id=str(record.id))

        self._notify(StoreChange(action=StoreAction.CREATED, kind=kind, record_id=record.id))
        return RecordHandle(kind=kind, id=record.id, record=record)

    def delete(self, handle: RecordHandle) -> None:
        row = self._find_row(handle.kind, handle.id)
        if row is None:
            raise NotFoundError(f"{handle.kind.value} not found: {handle.id}")

        self._session.delete(row)
        self._dirty = True
        if handle.id in self._unsaved_ids:
            # Created and deleted before any save: nets out to nothing
            self._unsaved_ids.discard(handle.id)
            self._created -= 1
        else:
            self._deleted += 1
        logger.debug("record_delete_staged", kind=handle.kind.value, record_id=str(handle.id))

        self._notify(StoreChange(action=StoreAction.DELETED, kind=handle.kind, record_id=handle.id))

    def save(self) -> SaveResult:
        if not self.has_changes:
            return SaveResult(success=True)

        created, deleted = self._created, self._deleted
        try:
            self._session.commit()
        except SQLAlchemyError as e:
            logger.error(
                "store_save_failed",
                error=str(e),
                pending_created=created,
                pending_deleted=deleted,
            )
            self._discard_pending()
            return SaveResult(success=False, error_message=str(e))

        self._reset_pending()
        logger.info("store_saved", created=created, deleted=deleted)

        self._notify(StoreChange(action=StoreAction.SAVED))
        return SaveResult(success=True, created=created, deleted=deleted)

    def rollback(self) -> None:
        if self.has_changes:
            self._discard_pending()

    @property
    def has_changes(self) -> bool:
        return self._dirty

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def fetch_all(self, kind: Union[RecordKind, str]) -> list[Record]:
        kind = coerce_kind(kind)
        row_type = _ROW_TYPES[kind]

        if kind == RecordKind.EXPENSE:
            statement = select(ExpenseRow).order_by(ExpenseRow.timestamp, ExpenseRow.seq)
        else:
            statement = select(CredentialRow).order_by(CredentialRow.seq)

        try:
            rows = self._session.execute(statement).scalars().all()
        except SQLAlchemyError as e:
            logger.error("store_fetch_failed", kind=kind.value, table=row_type.__tablename__, error=str(e))
            return []

        return [row.to_record() for row in rows]

    def close(self) -> None:
        """Close the session and release the database."""
        self._session.close()
        self._engine.dispose()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _find_row(self, kind: RecordKind, record_id: UUID):
        row_type = _ROW_TYPES[coerce_kind(kind)]
        try:
            return self._session.execute(
                select(row_type).where(row_type.id == str(record_id))
            ).scalar_one_or_none()
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to look up {kind.value} {record_id}: {e}") from e

    def _reset_pending(self) -> None:
        self._created = 0
        self._deleted = 0
        self._unsaved_ids: set[UUID] = set()
        self._dirty = False

    def _discard_pending(self) -> None:
        self._session.rollback()
        self._reset_pending()
        self._notify(StoreChange(action=StoreAction.ROLLED_BACK))
