"""
Local Store Package

Provides the abstract store interface and the SQLite implementation.
Consumers receive a store instance; they never construct one.
"""

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
    StoreListener,
    UnknownRecordKindError,
)
from cashmind.services.store.sqlite_store import SQLiteLocalStore
from cashmind.services.store.bootstrap import initialize_store

__all__ = [
    # Interface
    "LocalStoreInterface",
    "Record",
    "RecordHandle",
    "RecordKind",
    "SaveResult",
    "StoreAction",
    "StoreChange",
    "StoreListener",
    # Exceptions
    "NotFoundError",
    "StoreError",
    "UnknownRecordKindError",
    # SQLite implementation
    "SQLiteLocalStore",
    "initialize_store",
]
