# Docstring for ar_recon/group_match module
"""
group_match.py

Second reconciliation pass: one deposit to several transactions (split payment).

Clients with sub-clients (branches, departments) often settle several orders
with one transfer under the top-level client's name. This pass looks for such
deposits among whatever the single-match pass left over.

Core matching logic
-------------------
1) Eligible transactions
   - outstanding (not completed/card, no paid_at)
   - not already consumed (ConsumedState passed in by the caller)
   - with a client (transactions without one cannot be grouped)

2) Client groups
   - Transactions are grouped by top-level client id (the client's parent id,
     or its own id when it has no parent), in first-seen order.

3) Per deposit (input order, skipping matched/consumed deposits)
   - For each client group with at least two still-available transactions:
       a) Resolve the display name: the top-level client's name when the
          group's first available transaction belongs to a sub-client,
          otherwise that client's own name.
       b) Skip the group unless the display name and the payer name match.
       c) Run the combination search over the group's available
          transactions against the deposit amount.
       d) On a hit, record a GroupMatchResult and move to the next deposit.

Consumption is threaded through an immutable ConsumedState: the caller's
snapshot goes in, an extended snapshot comes out with the results, so the
pass can be re-run or composed with other passes without shared state.

Public API
----------
- GroupMatchOutcome (results, consumed)
- group_by_top_level_client(transactions, tree) -> dict[str, list[Transaction]]
- perform_group_matching(transactions, bank_records, consumed=None, clients=()) -> GroupMatchOutcome
"""


from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from ..config import MATCHING_CONFIG, MatchingConfig
from ..core.models import (
    BankRecord,
    Client,
    ClientTree,
    ConsumedState,
    GroupMatchResult,
    Transaction,
)
from ..core.normalizers import names_match
from .combination_search import find_matching_combination
from .single_match import outstanding_transactions, unmatched_records

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GroupMatchOutcome:
    """Group matches found by one pass and the consumption snapshot after it."""

    results: list[GroupMatchResult]
    consumed: ConsumedState


def group_by_top_level_client(
    transactions: Iterable[Transaction],
    tree: ClientTree,
) -> dict[str, list[Transaction]]:
    """Bucket transactions by top-level client id; transactions without a client are dropped."""
    groups: dict[str, list[Transaction]] = {}
    for transaction in transactions:
        if transaction.client is None:
            continue
        key = tree.top_level_id(transaction.client)
        groups.setdefault(key, []).append(transaction)
    return groups


def perform_group_matching(
    transactions: Sequence[Transaction],
    bank_records: Sequence[BankRecord],
    consumed: Optional[ConsumedState] = None,
    clients: Iterable[Client] = (),
    cfg: MatchingConfig = MATCHING_CONFIG,
) -> GroupMatchOutcome:

    """

    Match deposits to combinations of a client group's transactions.

    Args:
        transactions:
            Candidate transactions (typically all outstanding ones).
        bank_records:
            Candidate deposits.
        consumed:
            Deposits/transactions already claimed by earlier passes, e.g.
            `single_match.consumed_from_matches(matches)`. Never reused.
        clients:
            Optional full client list, used to resolve top-level client
            names. Clients joined onto the transactions are always used.
        cfg:
            Combination cap and minimum group size.

    Returns:
        GroupMatchOutcome with the results (deposit input order) and the
        consumed snapshot extended with every id the results use.

    """

    state = consumed or ConsumedState()
    tree = ClientTree.from_transactions(transactions, clients)

    pending = [
        t for t in outstanding_transactions(transactions) if not state.has_transaction(t)
    ]
    records = [r for r in unmatched_records(bank_records) if not state.has_record(r)]
    groups = group_by_top_level_client(pending, tree)

    results: list[GroupMatchResult] = []

    for record in records:
        if state.has_record(record):
            continue

        for group_transactions in groups.values():
            available = [t for t in group_transactions if not state.has_transaction(t)]
            if len(available) < cfg.min_group_size:
                continue

            display_name = tree.display_name(available[0].client)
            if not names_match(display_name, record.depositor):
                continue

            combination = find_matching_combination(
                available,
                record.amount,
                max_items=cfg.combination_max_items,
                min_size=cfg.min_group_size,
            )
            if combination is None or len(combination) < cfg.min_group_size:
                continue

            group = GroupMatchResult(
                transactions=tuple(combination),
                bank_record=record,
                client_name=display_name,
                total_amount=record.amount,
            )
            results.append(group)
            state = state.with_group(group)
            break

    logger.debug(
        "Group match: %d split payments from %d deposits across %d client groups",
        len(results),
        len(records),
        len(groups),
    )
    return GroupMatchOutcome(results=results, consumed=state)
