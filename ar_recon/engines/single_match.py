# Docstring for ar_recon/single_match module
"""
single_match.py

First reconciliation pass: one deposit to one transaction.

For each outstanding transaction (input order) the unmatched deposits are
scanned (input order) and the first deposit that satisfies every rule is
taken:

1) Not already taken by an earlier pair in this run.
2) Exact amount equality (no tolerance).
3) Same year as the order date, when the transaction has one. A stale order
   is never paired with a deposit from another year, even when the amount
   and name agree.
4) The order date is not after the deposit date (an order cannot be paid
   before it was placed).
5) The client's name and the deposit's payer name match (see
   `core.normalizers.names_match`). Transactions without a client name never
   single-match.

This is greedy first-fit, not an optimal assignment: when two transactions
share an amount and a client, the earlier transaction gets the earlier
deposit. No ambiguity warning is raised.

Public API
----------
- outstanding_transactions(transactions) -> list[Transaction]
- unmatched_records(bank_records) -> list[BankRecord]
- is_single_match_candidate(transaction, record) -> bool
- perform_matching(transactions, bank_records) -> list[MatchResult]
- consumed_from_matches(matches, consumed=None) -> ConsumedState
- split_unmatched(transactions, bank_records, consumed) -> (list[Transaction], list[BankRecord])
"""


from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from ..core.models import (
    BankRecord,
    ConsumedState,
    MatchKind,
    MatchResult,
    Transaction,
)
from ..core.normalizers import names_match

logger = logging.getLogger(__name__)


def outstanding_transactions(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Transactions still awaiting payment (not completed/card, no paid_at)."""
    return [t for t in transactions if t.is_outstanding]


def unmatched_records(bank_records: Iterable[BankRecord]) -> list[BankRecord]:
    """Deposits not yet flagged as matched."""
    return [r for r in bank_records if not r.is_matched]


def _order_date_allows(transaction: Transaction, record: BankRecord) -> bool:
    order_date = transaction.order_date
    if order_date is None:
        return True
    if order_date.year != record.transaction_date.year:
        return False
    return order_date <= record.transaction_date


def is_single_match_candidate(transaction: Transaction, record: BankRecord) -> bool:
    """Amount, date-window and name rules for pairing one deposit with one transaction."""
    if transaction.amount != record.amount:
        return False
    if not _order_date_allows(transaction, record):
        return False
    client_name = transaction.client_name
    if not client_name:
        return False
    return names_match(client_name, record.depositor)


def perform_matching(
    transactions: Sequence[Transaction],
    bank_records: Sequence[BankRecord],
) -> list[MatchResult]:

    """

    Pair outstanding transactions with unmatched deposits one-to-one.

    Args:
        transactions:
            Candidate transactions; paid/completed ones are skipped.
        bank_records:
            Candidate deposits; ones flagged is_matched are skipped.

    Returns:
        MatchResult list in transaction order. No transaction or deposit
        appears in more than one result.

    """

    records = unmatched_records(bank_records)
    pending = outstanding_transactions(transactions)

    results: list[MatchResult] = []
    used_record_ids: set[str] = set()

    for transaction in pending:
        for record in records:
            if record.id in used_record_ids:
                continue
            if not is_single_match_candidate(transaction, record):
                continue

            results.append(
                MatchResult(
                    transaction=transaction,
                    bank_record=record,
                    match_kind=MatchKind.EXACT,
                )
            )
            used_record_ids.add(record.id)
            break

    logger.debug(
        "Single match: %d pairs from %d outstanding transactions and %d deposits",
        len(results),
        len(pending),
        len(records),
    )
    return results


def consumed_from_matches(
    matches: Iterable[MatchResult],
    consumed: Optional[ConsumedState] = None,
) -> ConsumedState:
    """Snapshot of the ids claimed by single matches (added to an existing snapshot if given)."""
    state = consumed or ConsumedState()
    for match in matches:
        state = state.with_match(match)
    return state


def split_unmatched(
    transactions: Sequence[Transaction],
    bank_records: Sequence[BankRecord],
    consumed: ConsumedState,
) -> tuple[list[Transaction], list[BankRecord]]:
    """Outstanding transactions and unmatched deposits not claimed in `consumed`."""
    leftover_transactions = [
        t for t in outstanding_transactions(transactions) if not consumed.has_transaction(t)
    ]
    leftover_records = [
        r for r in unmatched_records(bank_records) if not consumed.has_record(r)
    ]
    return leftover_transactions, leftover_records
