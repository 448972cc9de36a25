# Docstring for ar_recon/combination_search module
"""
combination_search.py

Bounded subset-sum search used for split-payment (group) matching.

A client sometimes pays several orders with one transfer. Given the client's
outstanding transactions and a deposit amount, this module looks for two or
more transactions whose amounts add up exactly to the deposit.

Search strategy
---------------
1) Sort candidates by amount, largest first (stable for equal amounts).
   Big amounts are tried first, which tends to reach a solution quickly and
   favors combinations of fewer, larger orders.
2) Keep only the first `max_items` sorted candidates (MATCHING_CONFIG,
   default 10). This bounds the search to 2^10 branches; a solution that
   needs a candidate past the cap is not found.
3) Depth-first backtracking, one include/exclude decision per candidate,
   "include" tried first. A branch stops as soon as its running sum exceeds
   the target (amounts are non-negative, so it can only grow).
4) The first combination with sum == target and at least `min_size` items
   is returned. No attempt is made to find the smallest combination.

Each branch carries its own (index, running_sum, selected_indices) state;
nothing is shared between branches.

Public API
----------
- find_matching_combination(candidates, target, max_items=..., min_size=...)
    -> list[Transaction] | None
"""


from __future__ import annotations

from typing import Optional, Sequence

from ..config import MATCHING_CONFIG
from ..core.models import Transaction


def _search(
    amounts: Sequence[int],
    target: int,
    min_size: int,
    index: int,
    running_sum: int,
    selected: tuple[int, ...],
) -> Optional[tuple[int, ...]]:
    if running_sum == target and len(selected) >= min_size:
        return selected
    if running_sum > target or index >= len(amounts):
        return None

    # Include amounts[index] first, then try without it
    with_current = _search(
        amounts,
        target,
        min_size,
        index + 1,
        running_sum + amounts[index],
        selected + (index,),
    )
    if with_current is not None:
        return with_current

    return _search(amounts, target, min_size, index + 1, running_sum, selected)


def find_matching_combination(
    candidates: Sequence[Transaction],
    target: int,
    max_items: int = MATCHING_CONFIG.combination_max_items,
    min_size: int = MATCHING_CONFIG.min_group_size,
) -> Optional[list[Transaction]]:

    """

    Find transactions whose amounts sum exactly to target.

    Args:
        candidates:
            Transactions to choose from (typically one client group).
        target:
            Deposit amount to reach.
        max_items:
            Only the max_items largest candidates are searched.
        min_size:
            Smallest acceptable combination size.

    Returns:
        The combination (largest amounts first), or None if no combination
        of at least min_size items within the cap sums to target.

    """

    if len(candidates) < min_size:
        return None

    ordered = sorted(candidates, key=lambda t: t.amount, reverse=True)[:max_items]
    amounts = [t.amount for t in ordered]

    # Cheap exit: even everything together falls short
    if sum(amounts) < target:
        return None

    found = _search(amounts, target, min_size, 0, 0, ())
    if found is None:
        return None
    return [ordered[i] for i in found]
