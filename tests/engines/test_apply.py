from __future__ import annotations

from datetime import date
from typing import Any, Mapping

import pytest

from ar_recon.core.models import BankRecord, GroupMatchResult, MatchResult, Transaction
from ar_recon.engines.apply import ApplyMatchesError, apply_matches, prepare_match_updates


class _RecordingStore:
    def __init__(self, fail_on: str | None = None) -> None:
        self.fail_on = fail_on
        self.transaction_updates: list[tuple[str, dict[str, Any]]] = []
        self.record_updates: list[tuple[str, dict[str, Any]]] = []

    def update_transaction(self, transaction_id: str, fields: Mapping[str, Any]) -> None:
        if transaction_id == self.fail_on:
            raise ConnectionError("store unavailable")
        self.transaction_updates.append((transaction_id, dict(fields)))

    def update_bank_record(self, bank_record_id: str, fields: Mapping[str, Any]) -> None:
        if bank_record_id == self.fail_on:
            raise ConnectionError("store unavailable")
        self.record_updates.append((bank_record_id, dict(fields)))


def _proposals() -> tuple[list[MatchResult], list[GroupMatchResult]]:
    r1 = BankRecord(id="r1", transaction_date=date(2024, 1, 5), amount=50000)
    r2 = BankRecord(id="r2", transaction_date=date(2024, 3, 10), amount=50000)
    t1 = Transaction(id="t1", amount=50000, status="design")
    t2 = Transaction(id="t2", amount=30000, status="production")
    t3 = Transaction(id="t3", amount=20000, status="production")
    matches = [MatchResult(transaction=t1, bank_record=r1)]
    groups = [GroupMatchResult(transactions=(t2, t3), bank_record=r2, client_name="XYZ", total_amount=50000)]
    return matches, groups


def test_prepare_match_updates_flattens_groups() -> None:
    matches, groups = _proposals()

    updates = prepare_match_updates(matches, groups)

    assert [(u.transaction_id, u.bank_record_id, u.paid_at) for u in updates] == [
        ("t1", "r1", date(2024, 1, 5)),
        ("t2", "r2", date(2024, 3, 10)),
        ("t3", "r2", date(2024, 3, 10)),
    ]
    assert updates[0].transaction_fields() == {
        "status": "completed",
        "paid_at": date(2024, 1, 5),
        "matched_bank_record_id": "r1",
    }


def test_apply_matches_writes_transactions_then_deposits_once() -> None:
    matches, groups = _proposals()
    store = _RecordingStore()

    applied = apply_matches(store, matches, groups)

    assert len(applied) == 3
    assert [t_id for t_id, _ in store.transaction_updates] == ["t1", "t2", "t3"]
    assert store.record_updates == [("r1", {"is_matched": True}), ("r2", {"is_matched": True})]


def test_apply_matches_partial_failure_keeps_earlier_writes() -> None:
    matches, groups = _proposals()
    store = _RecordingStore(fail_on="t2")

    with pytest.raises(ApplyMatchesError) as excinfo:
        apply_matches(store, matches, groups)

    err = excinfo.value
    assert [u.transaction_id for u in err.applied] == ["t1"]
    assert err.failed.transaction_id == "t2"
    assert isinstance(err.__cause__, ConnectionError)
    assert [t_id for t_id, _ in store.transaction_updates] == ["t1"]
    assert store.record_updates == []


def test_apply_matches_deposit_failure() -> None:
    matches, groups = _proposals()
    store = _RecordingStore(fail_on="r2")

    with pytest.raises(ApplyMatchesError, match="'r2'") as excinfo:
        apply_matches(store, matches, groups)

    assert len(excinfo.value.applied) == 3
    assert excinfo.value.failed == "r2"
    assert store.record_updates == [("r1", {"is_matched": True})]


def test_apply_nothing() -> None:
    store = _RecordingStore()

    assert apply_matches(store, []) == []
    assert store.transaction_updates == []
    assert store.record_updates == []
