"""
Store Initialization

Seeding is an explicit startup step, run once by the application
factory. Queries never seed as a side effect.
"""

from typing import Iterable, Optional

import structlog

from cashmind.audit import AuditLogger
from cashmind.models.expense import SEED_EXPENSES, SeedExpense
from cashmind.services.store.interface import LocalStoreInterface, RecordKind


logger = structlog.get_logger(__name__)


def initialize_store(
    store: LocalStoreInterface,
    seeds: Iterable[SeedExpense] = SEED_EXPENSES,
    audit_logger: Optional[AuditLogger] = None,
) -> int:
    """
    Seed example expenses if, and only if, the store has none.

    Idempotent: once any expense exists this is a no-op.

    Returns:
        Number of records seeded (0 if nothing was done or the save failed)
    """
    if store.fetch_all(RecordKind.EXPENSE):
        logger.debug("store_seed_skipped", reason="store not empty")
        return 0

    seeds = list(seeds)
    for seed in seeds:
        store.create(
            RecordKind.EXPENSE,
            {
                "amount": seed.amount,
                "category": seed.category.value,
                "notes": seed.notes,
            },
        )

    result = store.save()
    if result.failed:
        if audit_logger:
            audit_logger.log_store_save_failed(result.error_message or "unknown error")
        return 0

    if audit_logger:
        audit_logger.log_store_seeded(len(seeds))
    return len(seeds)
