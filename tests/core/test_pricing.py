from __future__ import annotations

import pytest

from ar_recon.core.pricing import base_from_gross, net_profit, order_total, with_vat


def test_with_vat_and_back() -> None:
    assert with_vat(10000) == 11000
    assert with_vat(1234) == 1357
    assert with_vat(0) == 0
    assert base_from_gross(11000) == 10000
    assert with_vat(10000, rate=0.0) == 10000


def test_order_total_quantity_and_vat() -> None:
    assert order_total(10000) == 11000
    assert order_total(10000, 3) == 33000
    assert order_total(10000, 3, include_vat=False) == 30000
    # Zero quantity counts as one unit
    assert order_total(10000, 0) == 11000


def test_order_total_fees_added_once() -> None:
    assert order_total(10000, 2, include_delivery=True) == 22000 + 4400
    assert order_total(10000, 2, include_delivery=True, delivery_vat=False) == 22000 + 4000
    assert order_total(10000, quick_fee=5000) == 11000 + 5500
    assert order_total(10000, quick_fee=5000, quick_vat=False) == 11000 + 5000
    assert order_total(10000, include_delivery=True, delivery_fee=3000) == 11000 + 3300


def test_net_profit() -> None:
    # 10% VAT: base * 0.9 - cost * 9/11
    assert net_profit(10000, 11000) == pytest.approx(0.0, abs=1e-6)
    assert net_profit(10000, None) == pytest.approx(9000.0)
    assert net_profit(20000, 5500) == pytest.approx(18000 - 4500)
    assert net_profit(None, 5000) == 0.0
    assert net_profit(0, 5000) == 0.0
