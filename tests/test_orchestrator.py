"""
Integration tests for the expense and auth flows

The store is real (in-memory SQLite); the network is FakeSyncClient.
"""

import asyncio
import pytest
from decimal import Decimal
from uuid import uuid4

from sqlalchemy.exc import SQLAlchemyError

from cashmind.audit import AuditLogger
from cashmind.config import Settings
from cashmind.models.expense import SEED_EXPENSES
from cashmind.orchestrator import AuthFlow, ExpenseFlow, create_app_components
from cashmind.services.store import NotFoundError, RecordKind
from cashmind.validation import (
    SIGN_IN_FAILED,
    SIGN_IN_MISSING_FIELDS,
    SIGN_UP_FAILED_PREFIX,
    SIGN_UP_MISSING_FIELDS,
)


@pytest.fixture
def expense_flow(store, fake_sync_client):
    return ExpenseFlow(store, fake_sync_client, audit_logger=AuditLogger())


@pytest.fixture
def auth_flow(store, fake_sync_client):
    return AuthFlow(store, fake_sync_client, audit_logger=AuditLogger())


class TestExpenseFlow:
    """Tests for adding, deleting and syncing expenses."""

    def test_add_expense(self, expense_flow):
        record, result = expense_flow.add_expense("12.50", "Food", "Lunch")

        assert result.success is True
        assert record.amount == Decimal("12.50")
        assert record.notes == "Lunch"
        assert expense_flow.list_expenses() == [record]

    def test_non_numeric_amount_is_ignored(self, expense_flow, store):
        record, result = expense_flow.add_expense("twelve", "Food")

        assert record is None
        assert result is None
        assert store.has_changes is False
        assert expense_flow.list_expenses() == []

    def test_blank_notes_stored_as_none(self, expense_flow):
        record, _ = expense_flow.add_expense("1", "Food", "")
        assert record.notes is None

    def test_long_category_and_notes_accepted(self, expense_flow):
        record, result = expense_flow.add_expense("10", "C" * 500, "x" * 5000)

        assert result.success is True
        assert record.category == "C" * 500
        assert expense_flow.list_expenses()[0].notes == "x" * 5000

    def test_large_amount_dashboard(self, expense_flow):
        expense_flow.add_expense("1e30", "Food")
        overview = expense_flow.dashboard_overview(Decimal("5000"))
        assert overview.remaining_budget == Decimal("-" + "9" * 26 + "5000")

    def test_failed_save_returns_error(self, expense_flow, store, monkeypatch):
        def broken_commit():
            raise SQLAlchemyError("disk full")

        monkeypatch.setattr(store._session, "commit", broken_commit)
        record, result = expense_flow.add_expense("5", "Food")

        assert record is None
        assert result.failed is True
        assert expense_flow.list_expenses() == []

    def test_delete_expenses(self, expense_flow):
        first, _ = expense_flow.add_expense("1", "Food")
        second, _ = expense_flow.add_expense("2", "Bills")
        third, _ = expense_flow.add_expense("3", "Rent")

        result = expense_flow.delete_expenses([first.id, third.id])

        assert result.deleted == 2
        assert [r.id for r in expense_flow.list_expenses()] == [second.id]

    def test_delete_unknown_id_stages_nothing(self, expense_flow, store):
        record, _ = expense_flow.add_expense("1", "Food")

        with pytest.raises(NotFoundError):
            expense_flow.delete_expenses([record.id, uuid4()])

        assert store.has_changes is False
        assert expense_flow.list_expenses() == [record]

    def test_sync_reads_fresh_snapshot(self, expense_flow, fake_sync_client):
        expense_flow.add_expense("1", "Food")
        asyncio.run(expense_flow.sync_expenses())
        expense_flow.add_expense("2", "Bills")
        assert asyncio.run(expense_flow.sync_expenses()) is True

        assert [len(s) for s in fake_sync_client.synced_snapshots] == [1, 2]

    def test_sync_failure_reported(self, expense_flow, fake_sync_client):
        fake_sync_client.sync_ok = False
        assert asyncio.run(expense_flow.sync_expenses()) is False

    def test_dashboard_overview(self, expense_flow):
        expense_flow.add_expense("100", "Food")
        overview = expense_flow.dashboard_overview(Decimal("5000"))
        assert overview.remaining_budget == Decimal("4900.00")


class TestAuthFlow:
    """Tests for sign-in and sign-up."""

    @pytest.mark.parametrize("username,password", [("", "secret"), ("alice", ""), ("  ", "  ")])
    def test_empty_sign_in_never_calls_network(self, auth_flow, fake_sync_client, username, password):
        outcome = asyncio.run(auth_flow.sign_in(username, password))

        assert outcome.authenticated is False
        assert outcome.error_message == SIGN_IN_MISSING_FIELDS
        assert fake_sync_client.auth_calls == []

    def test_sign_in_success(self, auth_flow):
        outcome = asyncio.run(auth_flow.sign_in("alice", "secret"))
        assert outcome.authenticated is True
        assert outcome.username == "alice"

    def test_sign_in_rejected(self, auth_flow, fake_sync_client):
        fake_sync_client.auth_ok = False
        outcome = asyncio.run(auth_flow.sign_in("alice", "wrong"))

        assert outcome.authenticated is False
        assert outcome.error_message == SIGN_IN_FAILED

    def test_empty_sign_up_never_calls_network(self, auth_flow, fake_sync_client, store):
        outcome = asyncio.run(auth_flow.sign_up("alice", "secret", ""))

        assert outcome.error_message == SIGN_UP_MISSING_FIELDS
        assert fake_sync_client.signup_calls == []
        assert store.fetch_credentials() == []

    def test_sign_up_stores_hashed_credential(self, auth_flow, fake_sync_client, store):
        outcome = asyncio.run(auth_flow.sign_up("alice", "secret", "a@example.com"))

        assert outcome.authenticated is True
        assert outcome.remote_registered is True
        assert fake_sync_client.signup_calls == [("alice", "secret")]

        credential = store.find_credentials("alice")[0]
        assert credential.email == "a@example.com"
        assert credential.verify_password("secret") is True

    def test_sign_up_with_long_username(self, auth_flow, store):
        username = "u" * 600
        outcome = asyncio.run(auth_flow.sign_up(username, "secret", "a@example.com"))

        assert outcome.authenticated is True
        assert store.find_credentials(username)[0].username == username

    def test_sign_up_succeeds_when_remote_rejects(self, auth_flow, fake_sync_client):
        fake_sync_client.signup_ok = False
        outcome = asyncio.run(auth_flow.sign_up("alice", "secret", "a@example.com"))

        assert outcome.authenticated is True
        assert outcome.remote_registered is False

    def test_sign_up_local_failure(self, auth_flow, fake_sync_client, store, monkeypatch):
        def broken_commit():
            raise SQLAlchemyError("disk full")

        monkeypatch.setattr(store._session, "commit", broken_commit)
        outcome = asyncio.run(auth_flow.sign_up("alice", "secret", "a@example.com"))

        assert outcome.authenticated is False
        assert outcome.error_message.startswith(SIGN_UP_FAILED_PREFIX)
        assert "disk full" in outcome.error_message
        assert fake_sync_client.signup_calls == []

    def test_sign_out(self, auth_flow):
        assert auth_flow.sign_out("alice").authenticated is False


class TestCreateAppComponents:
    """Tests for the component factory."""

    def test_seeds_injected_store(self, store, fake_sync_client):
        expense_flow, auth_flow, built_store = create_app_components(
            settings=Settings(),
            store=store,
            sync_client=fake_sync_client,
            seed_examples=True,
        )

        assert built_store is store
        assert len(store.fetch_all(RecordKind.EXPENSE)) == len(SEED_EXPENSES)
        assert isinstance(expense_flow, ExpenseFlow)
        assert isinstance(auth_flow, AuthFlow)

    def test_seeding_can_be_disabled(self, store, fake_sync_client):
        create_app_components(
            settings=Settings(),
            store=store,
            sync_client=fake_sync_client,
            seed_examples=False,
        )
        assert store.fetch_all(RecordKind.EXPENSE) == []

    def test_flows_share_one_store(self, store, fake_sync_client):
        expense_flow, auth_flow, _ = create_app_components(
            settings=Settings(),
            store=store,
            sync_client=fake_sync_client,
            seed_examples=False,
        )
        asyncio.run(auth_flow.sign_up("alice", "secret", "a@example.com"))
        expense_flow.add_expense("3", "Food")

        assert len(store.fetch_credentials()) == 1
        assert len(store.fetch_expenses()) == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
