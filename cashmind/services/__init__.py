"""Services package."""

from cashmind.services.store import (
    LocalStoreInterface,
    NotFoundError,
    RecordHandle,
    RecordKind,
    SaveResult,
    SQLiteLocalStore,
    StoreChange,
    StoreError,
    UnknownRecordKindError,
    initialize_store,
)
from cashmind.services.sync import (
    SyncClient,
    SyncClientInterface,
    SyncError,
)

__all__ = [
    # Store services
    "LocalStoreInterface",
    "NotFoundError",
    "RecordHandle",
    "RecordKind",
    "SaveResult",
    "SQLiteLocalStore",
    "StoreChange",
    "StoreError",
    "UnknownRecordKindError",
    "initialize_store",
    # Sync services
    "SyncClient",
    "SyncClientInterface",
    "SyncError",
]
