# Docstring for ar_recon/core/pricing module
"""
pricing.py

VAT-aware order pricing.

Transaction amounts are stored VAT-inclusive, because that is what the client
transfers and what reconciliation compares against deposits. These helpers
build that total from the VAT-exclusive base price and recover the base price
for older transactions that were stored without one.

Rounding follows the order form: half-up to the nearest currency unit.

Public API
----------
- with_vat(amount, rate=...) -> int
- base_from_gross(amount, rate=...) -> int
- order_total(base_amount, quantity=1, include_vat=True, ...) -> int
- net_profit(base_amount, cost, rate=...) -> float
"""

from __future__ import annotations

import math
from typing import Optional

from ..config import RECONCILE_CONFIG


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def with_vat(amount: int, rate: float = RECONCILE_CONFIG.vat_rate) -> int:
    """VAT-inclusive amount, e.g. 10000 -> 11000 at 10%."""
    return _round_half_up(amount * (1 + rate))


def base_from_gross(amount: int, rate: float = RECONCILE_CONFIG.vat_rate) -> int:
    """Back out the VAT-exclusive base from a VAT-inclusive amount."""
    return _round_half_up(amount / (1 + rate))


def order_total(
    base_amount: int,
    quantity: int = 1,
    *,
    include_vat: bool = True,
    include_delivery: bool = False,
    delivery_vat: bool = True,
    quick_fee: int = 0,
    quick_vat: bool = True,
    delivery_fee: int = RECONCILE_CONFIG.delivery_fee,
    rate: float = RECONCILE_CONFIG.vat_rate,
) -> int:
    """
    Total amount of an order as stored on the transaction.

    The unit price is VAT-adjusted before it is multiplied by quantity
    (a quantity of 0 counts as 1). Courier and quick-delivery fees are added
    once per order, each with its own VAT switch.
    """
    unit_price = with_vat(base_amount, rate) if include_vat else base_amount
    total = unit_price * (quantity if quantity > 0 else 1)

    if include_delivery:
        total += with_vat(delivery_fee, rate) if delivery_vat else delivery_fee

    if quick_fee > 0:
        total += with_vat(quick_fee, rate) if quick_vat else quick_fee

    return total


def net_profit(
    base_amount: Optional[int],
    cost: Optional[int],
    rate: float = RECONCILE_CONFIG.vat_rate,
) -> float:
    """
    Profit after VAT owed and cost of sales.

    VAT owed = VAT collected - VAT paid on costs, so with a VAT-inclusive
    cost:
        profit = base * (1 - rate) - cost * (1 - rate) / (1 + rate)
    which is base * 0.9 - cost * 9/11 at 10%. Missing base gives 0.
    """
    if not base_amount:
        return 0.0
    cost_net = cost * (1 - rate) / (1 + rate) if cost else 0.0
    return base_amount * (1 - rate) - cost_net
