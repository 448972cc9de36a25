# Docstring for ar_recon/apply module
"""
apply.py

Turn accepted proposals into store updates.

For every accepted match the transaction becomes completed and paid on the
deposit's date, and the deposit is flagged as matched. Group matches update
each of their transactions with the same deposit date.

Updates are issued one row at a time, in proposal order, through any object
implementing `MatchStore`. There is no batching and no rollback: if the store
fails part-way, the updates already issued stay applied and ApplyMatchesError
reports how far it got. Re-running reconciliation afterwards picks up only
what is still open.

Public API
----------
- MatchUpdate
- MatchStore (protocol)
- ApplyMatchesError
- prepare_match_updates(matches, group_matches=()) -> list[MatchUpdate]
- apply_matches(store, matches, group_matches=()) -> list[MatchUpdate]
"""


from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, Mapping, Protocol

from ..config import APPLIED_STATUS_VALUE
from ..core.models import GroupMatchResult, MatchResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchUpdate:
    """One transaction to mark paid by one deposit."""

    transaction_id: str
    bank_record_id: str
    paid_at: date

    def transaction_fields(self) -> dict[str, Any]:
        return {
            "status": APPLIED_STATUS_VALUE,
            "paid_at": self.paid_at,
            "matched_bank_record_id": self.bank_record_id,
        }


class MatchStore(Protocol):
    """Row-level write access to the transactions and bank_records tables."""

    def update_transaction(self, transaction_id: str, fields: Mapping[str, Any]) -> None:
        ...

    def update_bank_record(self, bank_record_id: str, fields: Mapping[str, Any]) -> None:
        ...


class ApplyMatchesError(RuntimeError):
    """A store update failed; earlier updates were already written."""

    def __init__(self, message: str, applied: list[MatchUpdate], failed: MatchUpdate | str):
        super().__init__(message)
        self.applied = applied
        self.failed = failed


def prepare_match_updates(
    matches: Iterable[MatchResult],
    group_matches: Iterable[GroupMatchResult] = (),
) -> list[MatchUpdate]:
    """Flatten single and group matches into one update per transaction."""
    updates = [
        MatchUpdate(
            transaction_id=match.transaction.id,
            bank_record_id=match.bank_record.id,
            paid_at=match.bank_record.transaction_date,
        )
        for match in matches
    ]
    for group in group_matches:
        for transaction in group.transactions:
            updates.append(
                MatchUpdate(
                    transaction_id=transaction.id,
                    bank_record_id=group.bank_record.id,
                    paid_at=group.bank_record.transaction_date,
                )
            )
    return updates


def apply_matches(
    store: MatchStore,
    matches: Iterable[MatchResult],
    group_matches: Iterable[GroupMatchResult] = (),
) -> list[MatchUpdate]:

    """

    Write accepted matches to the store, one row at a time.

    Transactions are updated first (in proposal order), then each consumed
    deposit is flagged once.

    Returns:
        The transaction updates that were written.

    Raises:
        ApplyMatchesError: on the first failing store call. `applied` holds
            the transaction updates already written; nothing is rolled back.

    """

    updates = prepare_match_updates(matches, group_matches)
    applied: list[MatchUpdate] = []

    for update in updates:
        try:
            store.update_transaction(update.transaction_id, update.transaction_fields())
        except Exception as exc:
            logger.error(
                "Applying matches stopped at transaction %s after %d updates",
                update.transaction_id,
                len(applied),
            )
            raise ApplyMatchesError(
                f"Failed to update transaction {update.transaction_id!r} "
                f"after {len(applied)} of {len(updates)} updates.",
                applied=applied,
                failed=update,
            ) from exc
        applied.append(update)

    # Each deposit once, in first-use order
    record_ids = list(dict.fromkeys(u.bank_record_id for u in updates))
    for record_id in record_ids:
        try:
            store.update_bank_record(record_id, {"is_matched": True})
        except Exception as exc:
            logger.error("Applying matches stopped at deposit %s", record_id)
            raise ApplyMatchesError(
                f"Failed to flag deposit {record_id!r} as matched; "
                f"all {len(applied)} transaction updates were written.",
                applied=applied,
                failed=record_id,
            ) from exc

    logger.info(
        "Applied %d transaction updates across %d deposits", len(applied), len(record_ids)
    )
    return applied
