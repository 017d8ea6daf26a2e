"""
Abstract Sync Client Interface

Every operation is a single request/response exchange:
- no retries, no backoff
- no idempotency key (re-sending a snapshot may duplicate remote records)
- failures collapse into False / None; details only reach the log
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from cashmind.models.expense import ExpenseRecord
from cashmind.models.user import UserProfile


class SyncClientInterface(ABC):
    """Abstract interface to the remote API."""

    @abstractmethod
    async def sync_expenses(self, snapshot: Sequence[ExpenseRecord]) -> bool:
        """
        Send a snapshot of expenses to POST /syncExpenses.

        An empty snapshot is still sent.

        Returns:
            True only if the server answered with a 2xx status
        """
        pass

    @abstractmethod
    async def authenticate(self, username: str, password: str) -> bool:
        """POST /authenticate. True only on status 200."""
        pass

    @abstractmethod
    async def sign_up(self, username: str, password: str) -> bool:
        """POST /signup. True only on status 201."""
        pass

    @abstractmethod
    async def fetch_user_profile(self) -> Optional[UserProfile]:
        """GET /userProfile. None on any failure."""
        pass


class SyncError(Exception):
    """Base exception for sync client misconfiguration."""
    pass
