"""Sync client package: authentication, profile and expense backup."""

from cashmind.services.sync.interface import SyncClientInterface, SyncError
from cashmind.services.sync.client import SyncClient

__all__ = [
    "SyncClient",
    "SyncClientInterface",
    "SyncError",
]
