"""
Abstract Local Store Interface

DESIGN DECISION: Consumers depend on this interface, never on a
concrete store. This allows us to:
1. Inject an in-memory store in tests
2. Swap SQLite for another on-device backend later
3. Hand the same store instance to every flow (no global singleton)

The contract mirrors an object context:
- create/delete only stage changes in memory
- save() commits everything staged, atomically
- every change is announced to subscribers
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, Iterable, Optional, Union
from uuid import UUID

import structlog
from pydantic import BaseModel, ConfigDict

from cashmind.models.expense import ExpenseRecord
from cashmind.models.user import UserCredential


logger = structlog.get_logger(__name__)


class RecordKind(str, Enum):
    """The two record kinds the store owns."""
    EXPENSE = "expense"
    CREDENTIAL = "credential"


Record = Union[ExpenseRecord, UserCredential]


class RecordHandle(BaseModel):
    """Reference to a record returned by create() and accepted by delete()."""
    model_config = ConfigDict(frozen=True)

    kind: RecordKind
    id: UUID
    record: Record


class SaveResult(BaseModel):
    """
    Outcome of a save().

    A failed save has already been rolled back; the caller decides
    whether to retry, tell the user, or give up.
    """

    success: bool
    created: int = 0
    deleted: int = 0
    error_message: Optional[str] = None

    @property
    def failed(self) -> bool:
        return not self.success


class StoreAction(str, Enum):
    CREATED = "created"
    DELETED = "deleted"
    SAVED = "saved"
    ROLLED_BACK = "rolled_back"


class StoreChange(BaseModel):
    """Notification sent to subscribers after every mutation."""

    action: StoreAction
    kind: Optional[RecordKind] = None
    record_id: Optional[UUID] = None


StoreListener = Callable[[StoreChange], None]


class LocalStoreInterface(ABC):
    """
    Abstract interface for the on-device store.

    Store mutations are synchronous and happen on a single
    foreground context; implementations need no locking.
    """

    def __init__(self):
        self._listeners: list[StoreListener] = []

    @abstractmethod
    def create(self, kind: Union[RecordKind, str], fields: dict) -> RecordHandle:
        """
        Stage a new record.

        Assigns a fresh identifier (and, for expenses, a creation
        timestamp). Nothing is persisted until save().

        Raises:
            UnknownRecordKindError: If kind is not a RecordKind
        """
        pass

    @abstractmethod
    def fetch_all(self, kind: Union[RecordKind, str]) -> list[Record]:
        """
        Return every record of a kind, staged ones included.

        Expenses are ordered by ascending creation timestamp.
        Storage errors are logged and yield an empty list.
        """
        pass

    @abstractmethod
    def delete(self, handle: RecordHandle) -> None:
        """
        Stage removal of a record; takes effect on next save().

        Raises:
            NotFoundError: If the record does not exist
        """
        pass

    @abstractmethod
    def save(self) -> SaveResult:
        """Commit all staged creates and deletes atomically."""
        pass

    @abstractmethod
    def rollback(self) -> None:
        """Discard all staged creates and deletes."""
        pass

    @property
    @abstractmethod
    def has_changes(self) -> bool:
        """True if there are staged changes not yet saved."""
        pass

    def delete_many(self, handles: Iterable[RecordHandle]) -> int:
        """Stage removal of several records. Returns how many were staged."""
        count = 0
        for handle in handles:
            self.delete(handle)
            count += 1
        return count

    def fetch_expenses(self) -> list[ExpenseRecord]:
        return self.fetch_all(RecordKind.EXPENSE)

    def fetch_credentials(self) -> list[UserCredential]:
        return self.fetch_all(RecordKind.CREDENTIAL)

    def find_credentials(self, username: str) -> list[UserCredential]:
        """All credentials registered under a username (usernames are not unique)."""
        return [c for c in self.fetch_credentials() if c.username == username]

    def handle_for(self, record: Record) -> RecordHandle:
        """Build a handle for a record obtained from fetch_all()."""
        kind = RecordKind.EXPENSE if isinstance(record, ExpenseRecord) else RecordKind.CREDENTIAL
        return RecordHandle(kind=kind, id=record.id, record=record)

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        """
        Register a listener for store changes.

        Returns a function that unregisters it.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, change: StoreChange) -> None:
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception:
                # A broken reader must not undo a mutation that already happened
                logger.exception(
                    "store_listener_failed",
                    action=change.action.value,
                    record_id=str(change.record_id) if change.record_id else None,
                )


def coerce_kind(kind: Union[RecordKind, str]) -> RecordKind:
    """Accept either a RecordKind or its string value."""
    try:
        return RecordKind(kind)
    except ValueError:
        raise UnknownRecordKindError(f"Unknown record kind: {kind!r}")


class StoreError(Exception):
    """Base exception for store operations."""
    pass


class NotFoundError(StoreError):
    """Record not found in the store."""
    pass


class UnknownRecordKindError(StoreError):
    """The store has no collection for the requested kind."""
    pass
