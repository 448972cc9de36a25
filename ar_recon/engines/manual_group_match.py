# Docstring for ar_recon/manual_group_match module
"""
manual_group_match.py

Operator-driven split-payment matching for deposits the automatic passes left
unresolved.

The operator picks one unmatched deposit, ticks two or more transactions from
the eligible pool and confirms. The session keeps the running total and the
signed variance (selection total - deposit amount) so the UI can show live
feedback; confirmation only goes through when the variance is exactly zero.
Confirmed groups can be cancelled again before the matches are applied.

Eligible pool for a selected deposit:
  - transactions with no order date, or
  - transactions ordered in the deposit's year, on or before the deposit date.

This is the one place in the engine where a mismatch is reported as an error:
confirming with a non-zero variance raises GroupMatchAmountMismatchError with a
message fit for display.

Public API
----------
- GroupMatchAmountMismatchError
- ManualGroupMatchSession(unmatched_records, unmatched_transactions)
"""


from __future__ import annotations

import logging
from typing import Iterable, Optional

from ..config import MATCHING_CONFIG, UNKNOWN_CLIENT_NAME
from ..core.models import BankRecord, GroupMatchResult, Transaction

logger = logging.getLogger(__name__)


class GroupMatchAmountMismatchError(ValueError):
    """The selected transactions do not add up to the deposit amount."""

    def __init__(self, selection_total: int, deposit_amount: int):
        self.selection_total = selection_total
        self.deposit_amount = deposit_amount
        self.variance = selection_total - deposit_amount
        super().__init__(
            f"Selected total ({selection_total:,}) does not match the deposit amount "
            f"({deposit_amount:,}); variance {self.variance:,}."
        )


def is_eligible_for_record(transaction: Transaction, record: BankRecord) -> bool:
    """Same-year, not-after-deposit rule used to filter the manual pool."""
    order_date = transaction.order_date
    if order_date is None:
        return True
    if order_date.year != record.transaction_date.year:
        return False
    return order_date <= record.transaction_date


class ManualGroupMatchSession:

    """

    State of a manual group-matching session.

    The session owns copies of the unmatched pools; the caller's lists are
    never modified. Accepted groups are available from `group_matches` and
    are what the caller applies at the end.

    """

    def __init__(
        self,
        unmatched_records: Iterable[BankRecord],
        unmatched_transactions: Iterable[Transaction],
        min_group_size: int = MATCHING_CONFIG.min_group_size,
    ):
        if min_group_size < 2:
            raise ValueError(f"min_group_size must be at least 2, got {min_group_size}.")
        self._records: list[BankRecord] = list(unmatched_records)
        self._transactions: list[Transaction] = list(unmatched_transactions)
        self._group_matches: list[GroupMatchResult] = []
        self._selected_record: Optional[BankRecord] = None
        self._selected_ids: set[str] = set()
        self.min_group_size = min_group_size

    # --- Pools -----------------------------------------------------------------

    @property
    def unmatched_records(self) -> list[BankRecord]:
        return list(self._records)

    @property
    def unmatched_transactions(self) -> list[Transaction]:
        return list(self._transactions)

    @property
    def group_matches(self) -> list[GroupMatchResult]:
        return list(self._group_matches)

    # --- Selection -------------------------------------------------------------

    @property
    def selected_record(self) -> Optional[BankRecord]:
        return self._selected_record

    @property
    def selected_transactions(self) -> list[Transaction]:
        """Selected transactions in pool order."""
        return [t for t in self._transactions if t.id in self._selected_ids]

    def select_record(self, record_id: str) -> Optional[BankRecord]:
        """
        Select a deposit, or deselect it if it is already selected.

        Either way the transaction selection is cleared.

        Raises:
            KeyError: if no unmatched deposit has this id.
        """
        record = next((r for r in self._records if r.id == record_id), None)
        if record is None:
            raise KeyError(f"No unmatched deposit with id {record_id!r}")

        self._selected_ids = set()
        if self._selected_record is not None and self._selected_record.id == record_id:
            self._selected_record = None
        else:
            self._selected_record = record
        return self._selected_record

    def eligible_transactions(self) -> list[Transaction]:
        """Pool transactions that may be combined for the selected deposit."""
        if self._selected_record is None:
            return []
        return [
            t for t in self._transactions
            if is_eligible_for_record(t, self._selected_record)
        ]

    def toggle_transaction(self, transaction_id: str) -> bool:
        """
        Add a transaction to the selection, or remove it. Returns True if now selected.

        Raises:
            ValueError: if no deposit is selected.
            KeyError: if the transaction is not in the eligible pool.
        """
        if self._selected_record is None:
            raise ValueError("Select a deposit before selecting transactions.")
        if transaction_id in self._selected_ids:
            self._selected_ids.discard(transaction_id)
            return False
        if not any(t.id == transaction_id for t in self.eligible_transactions()):
            raise KeyError(f"Transaction {transaction_id!r} is not eligible for this deposit")
        self._selected_ids.add(transaction_id)
        return True

    @property
    def selection_total(self) -> int:
        return sum(t.amount for t in self.selected_transactions)

    @property
    def variance(self) -> Optional[int]:
        """Selection total minus deposit amount (negative while short); None with no deposit selected."""
        if self._selected_record is None:
            return None
        return self.selection_total - self._selected_record.amount

    @property
    def can_confirm(self) -> bool:
        return (
            self._selected_record is not None
            and len(self._selected_ids) >= self.min_group_size
            and self.variance == 0
        )

    # --- Confirm / cancel ------------------------------------------------------

    def confirm(self) -> GroupMatchResult:
        """
        Accept the current selection as a group match.

        Raises:
            ValueError: if no deposit is selected or too few transactions are.
            GroupMatchAmountMismatchError: if the selection total differs from
                the deposit amount.
        """
        record = self._selected_record
        if record is None:
            raise ValueError("No deposit selected.")
        if len(self._selected_ids) < self.min_group_size:
            raise ValueError(
                f"Select at least {self.min_group_size} transactions for a group match."
            )
        total = self.selection_total
        if total != record.amount:
            raise GroupMatchAmountMismatchError(total, record.amount)

        selected = self.selected_transactions
        client_name = selected[0].client_name or UNKNOWN_CLIENT_NAME
        group = GroupMatchResult(
            transactions=tuple(selected),
            bank_record=record,
            client_name=client_name,
            total_amount=record.amount,
        )

        self._group_matches.append(group)
        self._records = [r for r in self._records if r.id != record.id]
        self._transactions = [t for t in self._transactions if t.id not in self._selected_ids]
        self._selected_record = None
        self._selected_ids = set()

        logger.info(
            "Manual group match confirmed: deposit %s -> %d transactions (%s)",
            record.id,
            len(selected),
            client_name,
        )
        return group

    def cancel(self, index: int) -> GroupMatchResult:
        """
        Undo an accepted group match, returning its deposit and transactions to the pools.

        Raises:
            IndexError: if there is no accepted group at this index.
        """
        group = self._group_matches.pop(index)
        self._records.append(group.bank_record)
        self._transactions.extend(group.transactions)
        logger.info("Manual group match cancelled: deposit %s", group.bank_record.id)
        return group
