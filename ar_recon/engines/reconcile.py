# Docstring for ar_recon/reconcile module
"""
reconcile.py

Reconciliation pipeline: single match, then group match, then leftovers for
manual review.

    outstanding transactions + unmatched deposits
        -> single_match.perform_matching        (one deposit : one transaction)
        -> group_match.perform_group_matching   (one deposit : many transactions)
        -> ReconciliationResult (proposals + leftovers)
        -> ManualGroupMatchSession               (optional, operator-driven)

The pipeline is a pure function of its inputs. Nothing is written anywhere:
the caller reviews the proposals and applies them with `engines.apply`.
Running it again on the same inputs gives the same result; running it on
inputs where everything is already matched/completed gives no proposals.

Public API
----------
- ReconciliationResult
- run_reconciliation(transactions, bank_records, clients=(), auto_group=None) -> ReconciliationResult
"""


from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from ..config import MATCHING_CONFIG, RECONCILE_CONFIG, MatchingConfig
from ..core.models import (
    BankRecord,
    Client,
    ConsumedState,
    GroupMatchResult,
    MatchResult,
    Transaction,
)
from .group_match import perform_group_matching
from .manual_group_match import ManualGroupMatchSession
from .single_match import consumed_from_matches, perform_matching, split_unmatched

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReconciliationResult:

    """

    Proposed matches of one reconciliation run plus what is still open.

    matches:
        Single (one-to-one) matches.
    group_matches:
        Split-payment matches found automatically.
    unmatched_records / unmatched_transactions:
        Deposits and outstanding transactions no proposal uses.
    consumed:
        Ids used by the proposals.

    """

    matches: list[MatchResult]
    group_matches: list[GroupMatchResult]
    unmatched_records: list[BankRecord]
    unmatched_transactions: list[Transaction]
    consumed: ConsumedState

    @property
    def matched_transaction_count(self) -> int:
        return len(self.matches) + sum(len(g.transactions) for g in self.group_matches)

    @property
    def is_empty(self) -> bool:
        return not self.matches and not self.group_matches

    def manual_session(self) -> ManualGroupMatchSession:
        """Start a manual group-matching session over the leftovers."""
        return ManualGroupMatchSession(self.unmatched_records, self.unmatched_transactions)


def run_reconciliation(
    transactions: Sequence[Transaction],
    bank_records: Sequence[BankRecord],
    clients: Iterable[Client] = (),
    auto_group: Optional[bool] = None,
    cfg: MatchingConfig = MATCHING_CONFIG,
) -> ReconciliationResult:

    """

    Run the matching passes over in-memory records.

    Args:
        transactions:
            Transactions (with joined clients). Non-outstanding ones are ignored.
        bank_records:
            Deposits. Ones already flagged is_matched are ignored.
        clients:
            Optional full client list, for resolving top-level client names.
        auto_group:
            Run the automatic group-match pass. Defaults to
            RECONCILE_CONFIG.auto_group_matching.
        cfg:
            Matching limits for the group pass.

    Returns:
        ReconciliationResult with proposals and leftovers.

    """

    if auto_group is None:
        auto_group = RECONCILE_CONFIG.auto_group_matching

    matches = perform_matching(transactions, bank_records)
    consumed = consumed_from_matches(matches)

    group_matches: list[GroupMatchResult] = []
    if auto_group:
        outcome = perform_group_matching(
            transactions,
            bank_records,
            consumed=consumed,
            clients=clients,
            cfg=cfg,
        )
        group_matches = outcome.results
        consumed = outcome.consumed

    leftover_transactions, leftover_records = split_unmatched(
        transactions, bank_records, consumed
    )

    logger.info(
        "Reconciliation: %d single matches, %d group matches, "
        "%d deposits and %d transactions left unmatched",
        len(matches),
        len(group_matches),
        len(leftover_records),
        len(leftover_transactions),
    )

    return ReconciliationResult(
        matches=matches,
        group_matches=group_matches,
        unmatched_records=leftover_records,
        unmatched_transactions=leftover_transactions,
        consumed=consumed,
    )
