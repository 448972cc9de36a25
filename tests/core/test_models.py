from __future__ import annotations

from dataclasses import FrozenInstanceError
from datetime import date

import pytest

from ar_recon.config import MatchingConfig
from ar_recon.core.models import (
    BankRecord,
    Client,
    ClientTree,
    ConsumedState,
    GroupMatchResult,
    MatchKind,
    MatchResult,
    ParsedBankRecord,
    Transaction,
    TransactionStatus,
)


def test_client_tree_display_name_prefers_parent(xyz_clients: list[Client]) -> None:
    tree = ClientTree(xyz_clients)
    parent, branch, _ = xyz_clients

    assert tree.display_name(branch) == "XYZ"
    assert tree.display_name(parent) == "XYZ"
    assert tree.top_level_id(branch) == "p1"
    assert tree.top_level_id(parent) == "p1"
    assert [c.id for c in tree.children("p1")] == ["c1", "c2"]
    assert len(tree) == 3
    assert "c2" in tree


def test_client_tree_unknown_parent_falls_back_to_own_name() -> None:
    orphan = Client(id="c9", name="Orphan Branch", parent_id="missing")
    tree = ClientTree([orphan])

    assert tree.display_name(orphan) == "Orphan Branch"
    assert tree.top_level_id(orphan) == "missing"


def test_client_tree_rejects_second_level() -> None:
    clients = [
        Client(id="p1", name="Top"),
        Client(id="c1", name="Branch", parent_id="p1"),
        Client(id="g1", name="Sub-branch", parent_id="c1"),
    ]
    with pytest.raises(ValueError, match="Only one level"):
        ClientTree(clients)


def test_client_tree_from_transactions_merges_joined_clients(xyz_clients: list[Client]) -> None:
    parent, branch, _ = xyz_clients
    txn = Transaction(id="t1", amount=1000, client=branch)

    tree = ClientTree.from_transactions([txn], clients=[parent])

    assert tree.get("c1") == branch
    assert tree.display_name(branch) == "XYZ"
    assert tree.get(None) is None


def test_transaction_status_coercion_and_client_id() -> None:
    client = Client(id="c1", name="ABC")
    txn = Transaction(id="t1", amount=50000, status="design", client=client)

    assert txn.status is TransactionStatus.DESIGN
    assert txn.client_id == "c1"
    assert txn.client_name == "ABC"
    assert txn.is_outstanding is True


def test_transaction_invalid_status_raises() -> None:
    with pytest.raises(ValueError):
        Transaction(id="t1", amount=1000, status="shipped")


def test_paid_statuses_are_not_outstanding() -> None:
    completed = Transaction(id="t1", amount=1, status="completed", paid_at=date(2024, 1, 1))
    card = Transaction(id="t2", amount=1, status="card", paid_at=date(2024, 1, 1))

    assert completed.is_outstanding is False
    assert card.is_outstanding is False
    assert TransactionStatus.CARD.is_paid is True
    assert TransactionStatus.PRODUCTION.is_paid is False


def test_mark_paid_returns_copy() -> None:
    txn = Transaction(id="t1", amount=1000, status="production")

    paid = txn.mark_paid(date(2024, 2, 1), "r1")

    assert paid.status is TransactionStatus.COMPLETED
    assert paid.paid_at == date(2024, 2, 1)
    assert paid.matched_bank_record_id == "r1"
    assert txn.status is TransactionStatus.PRODUCTION
    assert txn.paid_at is None


def test_records_are_frozen() -> None:
    record = BankRecord(id="r1", transaction_date=date(2024, 1, 5), amount=100)
    with pytest.raises(FrozenInstanceError):
        record.amount = 200  # type: ignore[misc]


def test_bank_record_from_parsed() -> None:
    parsed = ParsedBankRecord(
        transaction_date=date(2024, 1, 5),
        description="입금 홍길동",
        depositor="홍길동",
        amount=50000,
        balance=1_000_000,
    )
    record = BankRecord.from_parsed("temp-0", parsed)

    assert record.id == "temp-0"
    assert record.depositor == "홍길동"
    assert record.balance == 1_000_000
    assert record.is_matched is False


def test_group_match_result_requires_two_transactions() -> None:
    record = BankRecord(id="r1", transaction_date=date(2024, 1, 5), amount=100)
    single = Transaction(id="t1", amount=100)

    with pytest.raises(ValueError, match="at least 2 transactions, got 0"):
        GroupMatchResult(transactions=[], bank_record=record, client_name="X", total_amount=100)
    with pytest.raises(ValueError, match="at least 2 transactions, got 1"):
        GroupMatchResult(transactions=[single], bank_record=record, client_name="X", total_amount=100)


def test_matching_config_rejects_groups_below_two() -> None:
    with pytest.raises(ValueError, match="min_group_size must be at least 2"):
        MatchingConfig(min_group_size=1)
    with pytest.raises(ValueError, match="combination_max_items"):
        MatchingConfig(combination_max_items=1)
    assert MatchingConfig(min_group_size=3).min_group_size == 3


def test_consumed_state_is_immutable_snapshot() -> None:
    record = BankRecord(id="r1", transaction_date=date(2024, 1, 5), amount=300)
    t1 = Transaction(id="t1", amount=100)
    t2 = Transaction(id="t2", amount=200)
    empty = ConsumedState()

    after_match = empty.with_match(MatchResult(transaction=t1, bank_record=record))
    group = GroupMatchResult(transactions=[t1, t2], bank_record=record, client_name="X", total_amount=300)
    after_group = empty.with_group(group)

    assert empty.record_ids == frozenset()
    assert empty.transaction_ids == frozenset()
    assert after_match.has_record(record) and after_match.has_transaction(t1)
    assert not after_match.has_transaction(t2)
    assert after_group.transaction_ids == frozenset({"t1", "t2"})
    assert isinstance(group.transactions, tuple)
    assert MatchResult(transaction=t1, bank_record=record).match_kind is MatchKind.EXACT
