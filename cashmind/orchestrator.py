"""
Main Orchestrator for CashMind

This module ties together the store, the sync client and the audit
logger, and defines the flows the UI calls:
1. Expenses (add -> save, delete -> save, list, summarize, sync)
2. Authentication (sign in, sign up, sign out, profile)

DESIGN DECISION: Flows receive their store and client as arguments.
create_app_components() builds exactly one of each and hands the same
instances to every flow, so there is no process-wide singleton.
"""

from decimal import Decimal
from typing import Iterable, Optional
from uuid import UUID

import structlog

from cashmind.audit import AuditLogger, configure_logging
from cashmind.config import Settings, get_settings
from cashmind.models.budget import DashboardOverview, SpendingSummary
from cashmind.models.expense import ExpenseRecord
from cashmind.models.user import AuthOutcome, UserProfile
from cashmind.queries import SummaryExecutor
from cashmind.services.store import (
    LocalStoreInterface,
    NotFoundError,
    RecordKind,
    SaveResult,
    SQLiteLocalStore,
    initialize_store,
)
from cashmind.services.sync import SyncClient, SyncClientInterface
from cashmind.validation import (
    SIGN_IN_FAILED,
    SIGN_UP_FAILED_PREFIX,
    parse_amount,
    validate_sign_in,
    validate_sign_up,
)


logger = structlog.get_logger(__name__)


class ExpenseFlow:
    """
    Orchestrates the expense lifecycle.

    Every mutation is followed by an explicit save; the returned
    SaveResult tells the caller whether it stuck.
    """

    def __init__(
        self,
        store: LocalStoreInterface,
        sync_client: SyncClientInterface,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._sync_client = sync_client
        self._audit_logger = audit_logger
        self._summaries = SummaryExecutor(store)

    def list_expenses(self) -> list[ExpenseRecord]:
        """All expenses, oldest first."""
        return self._store.fetch_all(RecordKind.EXPENSE)

    def add_expense(
        self,
        amount_text: str,
        category: str,
        notes: Optional[str] = None,
    ) -> tuple[Optional[ExpenseRecord], Optional[SaveResult]]:
        """
        Create and save an expense from form input.

        Returns:
            (record, save_result)

        A non-numeric amount is silently ignored: (None, None).
        """
        amount = parse_amount(amount_text)
        if amount is None:
            if self._audit_logger:
                self._audit_logger.log_expense_input_ignored(str(amount_text))
            return None, None

        handle = self._store.create(
            RecordKind.EXPENSE,
            {
                "amount": amount,
                "category": category,
                "notes": notes or None,
            },
        )
        result = self._save()

        if result.success and self._audit_logger:
            self._audit_logger.log_expense_created(
                expense_id=handle.id,
                category=handle.record.category,
                amount=str(amount),
            )

        return (handle.record if result.success else None), result

    def delete_expenses(self, expense_ids: Iterable[UUID]) -> SaveResult:
        """
        Delete several expenses and save once.

        Raises:
            NotFoundError: If any id is not in the store (nothing is staged)
        """
        by_id = {record.id: record for record in self.list_expenses()}
        ids = list(expense_ids)

        missing = [expense_id for expense_id in ids if expense_id not in by_id]
        if missing:
            raise NotFoundError(f"Expense not found: {missing[0]}")

        self._store.delete_many(self._store.handle_for(by_id[expense_id]) for expense_id in ids)
        result = self._save()

        if result.success and self._audit_logger:
            for expense_id in ids:
                self._audit_logger.log_expense_deleted(expense_id)

        return result

    def delete_expense(self, expense_id: UUID) -> SaveResult:
        return self.delete_expenses([expense_id])

    async def sync_expenses(self) -> bool:
        """
        Back up the current expenses to the remote API.

        Reads a fresh snapshot at call time. Not retried.
        """
        snapshot = self._store.fetch_all(RecordKind.EXPENSE)
        succeeded = await self._sync_client.sync_expenses(snapshot)

        if self._audit_logger:
            self._audit_logger.log_sync_result(len(snapshot), succeeded)

        return succeeded

    def spending_summary(self) -> SpendingSummary:
        return self._summaries.spending_summary()

    def dashboard_overview(self, monthly_income: Decimal) -> DashboardOverview:
        return self._summaries.dashboard_overview(monthly_income)

    def _save(self) -> SaveResult:
        result = self._store.save()
        if self._audit_logger:
            if result.success:
                self._audit_logger.log_store_saved(result.created, result.deleted)
            else:
                self._audit_logger.log_store_save_failed(result.error_message or "unknown error")
        return result


class AuthFlow:
    """
    Orchestrates sign-in and sign-up.

    CRITICAL: Empty fields are rejected locally; no request is made.
    The authenticated state is returned to the caller and kept only in
    UI state; nothing here remembers who is signed in.
    """

    def __init__(
        self,
        store: LocalStoreInterface,
        sync_client: SyncClientInterface,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._sync_client = sync_client
        self._audit_logger = audit_logger

    async def sign_in(self, username: str, password: str) -> AuthOutcome:
        """Validate locally, then ask POST /authenticate."""
        error = validate_sign_in(username, password)
        if error:
            if self._audit_logger:
                self._audit_logger.log_sign_in(username, succeeded=False, reason="missing fields")
            return AuthOutcome(authenticated=False, error_message=error)

        succeeded = await self._sync_client.authenticate(username, password)

        if self._audit_logger:
            self._audit_logger.log_sign_in(
                username,
                succeeded=succeeded,
                reason=None if succeeded else "rejected by server",
            )

        if not succeeded:
            return AuthOutcome(authenticated=False, error_message=SIGN_IN_FAILED)
        return AuthOutcome(authenticated=True, username=username)

    async def sign_up(self, username: str, password: str, email: str) -> AuthOutcome:
        """
        Create the account locally, then register it remotely.

        The local save decides the outcome; remote registration is
        reported in remote_registered but does not block sign-up.
        """
        error = validate_sign_up(username, password, email)
        if error:
            if self._audit_logger:
                self._audit_logger.log_sign_up(username, succeeded=False, error_message="missing fields")
            return AuthOutcome(authenticated=False, error_message=error)

        handle = self._store.create(
            RecordKind.CREDENTIAL,
            {
                "username": username,
                "password": password,
                "email": email,
            },
        )
        result = self._store.save()
        if result.failed:
            if self._audit_logger:
                self._audit_logger.log_sign_up(
                    username,
                    succeeded=False,
                    credential_id=handle.id,
                    error_message=result.error_message,
                )
            return AuthOutcome(
                authenticated=False,
                error_message=f"{SIGN_UP_FAILED_PREFIX}{result.error_message}",
            )

        remote_registered = await self._sync_client.sign_up(username, password)

        if self._audit_logger:
            self._audit_logger.log_sign_up(
                username,
                succeeded=True,
                credential_id=handle.id,
                remote_registered=remote_registered,
            )

        return AuthOutcome(
            authenticated=True,
            username=username,
            remote_registered=remote_registered,
        )

    def sign_out(self, username: Optional[str] = None) -> AuthOutcome:
        if self._audit_logger:
            self._audit_logger.log_signed_out(username)
        return AuthOutcome(authenticated=False)

    async def fetch_profile(self) -> Optional[UserProfile]:
        return await self._sync_client.fetch_user_profile()


def create_app_components(
    settings: Optional[Settings] = None,
    store: Optional[LocalStoreInterface] = None,
    sync_client: Optional[SyncClientInterface] = None,
    seed_examples: Optional[bool] = None,
) -> tuple[ExpenseFlow, AuthFlow, LocalStoreInterface]:
    """
    Factory function to create all application components.

    Args:
        settings: Settings to build from (defaults to get_settings())
        store: Store to use instead of one built from settings
        sync_client: Client to use instead of one built from settings
        seed_examples: Override StoreSettings.seed_examples

    Returns:
        (expense_flow, auth_flow, store)
    """
    settings = settings or get_settings()
    configure_logging(settings.app.log_level)

    audit_logger = AuditLogger()
    store_settings = settings.store

    if store is None:
        store = SQLiteLocalStore.from_settings(store_settings)
    if sync_client is None:
        sync_client = SyncClient.from_settings(settings.api)

    # Explicit one-time initialization; queries never seed
    should_seed = store_settings.seed_examples if seed_examples is None else seed_examples
    if should_seed:
        seeded = initialize_store(store, audit_logger=audit_logger)
        logger.info("store_initialized", seeded=seeded)

    expense_flow = ExpenseFlow(store, sync_client, audit_logger=audit_logger)
    auth_flow = AuthFlow(store, sync_client, audit_logger=audit_logger)

    return expense_flow, auth_flow, store
