"""
Remote API Sync Client

DESIGN DECISION: The client uses a blocking requests.Session and hands
each call to a worker thread with asyncio.to_thread. Callers await the
result, so only the calling coroutine is suspended while the request
is in flight; the rest of the app keeps running.

Each endpoint is distinguished only by the status it treats as success:
- POST /authenticate   -> 200
- POST /signup         -> 201
- POST /syncExpenses   -> any 2xx
Anything else, including transport and decode errors, is a failure.
"""

import asyncio
from typing import Any, Callable, Optional, Sequence

import requests
import structlog
from pydantic import ValidationError

from cashmind.config import ApiSettings
from cashmind.models.expense import ExpenseRecord
from cashmind.models.user import UserProfile
from cashmind.services.sync.interface import SyncClientInterface, SyncError


logger = structlog.get_logger(__name__)


def _is_success(status: int) -> bool:
    return 200 <= status < 300


class SyncClient(SyncClientInterface):
    """
    requests-based implementation of the remote API client.

    IMPORTANT BOUNDARIES:
    1. No retries: one call, one request
    2. No session or token state: "signed in" lives in the UI
    3. Errors are logged here and never raised to the caller
    """

    def __init__(
        self,
        base_url: str,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        if not base_url.startswith(("http://", "https://")):
            raise SyncError(f"Invalid API base URL: {base_url}")
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({"Accept": "application/json"})

    @classmethod
    def from_settings(cls, settings: ApiSettings) -> "SyncClient":
        return cls(base_url=settings.base_url, timeout=settings.request_timeout_seconds)

    @property
    def base_url(self) -> str:
        return self._base_url

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def sync_expenses(self, snapshot: Sequence[ExpenseRecord]) -> bool:
        """Send the whole snapshot; success on any 2xx."""
        try:
            payload = [record.to_payload() for record in snapshot]
        except (TypeError, ValueError) as e:
            logger.error("sync_encode_failed", error=str(e))
            return False

        status = await asyncio.to_thread(self._post, "/syncExpenses", payload)
        succeeded = status is not None and _is_success(status)
        if succeeded:
            logger.info("sync_succeeded", record_count=len(payload), status=status)
        else:
            logger.warning("sync_failed", record_count=len(payload), status=status)
        return succeeded

    async def authenticate(self, username: str, password: str) -> bool:
        status = await asyncio.to_thread(
            self._post,
            "/authenticate",
            {"username": username, "password": password},
        )
        succeeded = status == 200
        if not succeeded:
            logger.warning("authentication_failed", username=username, status=status)
        return succeeded

    async def sign_up(self, username: str, password: str) -> bool:
        status = await asyncio.to_thread(
            self._post,
            "/signup",
            {"username": username, "password": password},
        )
        succeeded = status == 201
        if not succeeded:
            logger.warning("signup_failed", username=username, status=status)
        return succeeded

    async def fetch_user_profile(self) -> Optional[UserProfile]:
        return await asyncio.to_thread(self._get_profile)

    def close(self) -> None:
        self._session.close()

    # ------------------------------------------------------------------
    # Blocking helpers (run on a worker thread)
    # ------------------------------------------------------------------

    def _url(self, path: str) -> str:
        return f"{self._base_url}{path}"

    def _post(self, path: str, payload: Any) -> Optional[int]:
        """POST a JSON body. Returns the status code, or None if no response."""
        return self._send(
            lambda: self._session.post(self._url(path), json=payload, timeout=self._timeout),
            path,
        )

    def _send(self, call: Callable[[], requests.Response], path: str) -> Optional[int]:
        try:
            response = call()
        except requests.RequestException as e:
            logger.error("request_failed", path=path, error=str(e))
            return None
        except (TypeError, ValueError) as e:
            # requests serializes json= bodies itself
            logger.error("request_encode_failed", path=path, error=str(e))
            return None
        return response.status_code

    def _get_profile(self) -> Optional[UserProfile]:
        path = "/userProfile"
        try:
            response = self._session.get(self._url(path), timeout=self._timeout)
        except requests.RequestException as e:
            logger.error("request_failed", path=path, error=str(e))
            return None

        if not _is_success(response.status_code):
            logger.warning("profile_fetch_failed", status=response.status_code)
            return None

        try:
            return UserProfile.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.error("profile_decode_failed", error=str(e))
            return None
