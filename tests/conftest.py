from __future__ import annotations

import sys
from datetime import date
from pathlib import Path

import pytest

# tests/ is one level under the repo root
PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from ar_recon.core.models import BankRecord, Client  # noqa: E402


@pytest.fixture
def xyz_clients() -> list[Client]:
    """Top-level client XYZ with two branches."""
    return [
        Client(id="p1", name="XYZ"),
        Client(id="c1", name="XYZ 강남점", parent_id="p1"),
        Client(id="c2", name="XYZ 분당점", parent_id="p1"),
    ]


@pytest.fixture
def deposit_50000() -> BankRecord:
    return BankRecord(
        id="r1",
        transaction_date=date(2024, 3, 10),
        amount=50000,
        depositor="XYZ",
        description="입금 XYZ",
    )
