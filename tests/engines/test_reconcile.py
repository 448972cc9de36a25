from __future__ import annotations

from dataclasses import replace
from datetime import date

from ar_recon.core.models import BankRecord, Client, Transaction
from ar_recon.engines.reconcile import run_reconciliation


def _inputs(xyz_clients: list[Client]) -> tuple[list[Transaction], list[BankRecord]]:
    _, gangnam, bundang = xyz_clients
    abc = Client(id="a1", name="ABC")
    transactions = [
        Transaction(id="t1", amount=50000, status="design", client=abc, order_date=date(2024, 1, 1)),
        Transaction(id="t2", amount=30000, status="production", client=gangnam, order_date=date(2024, 3, 1)),
        Transaction(id="t3", amount=20000, status="production", client=bundang, order_date=date(2024, 3, 2)),
        Transaction(id="t4", amount=12345, status="quote", client=abc, order_date=date(2024, 3, 2)),
        Transaction(
            id="t5", amount=99000, status="completed", client=abc,
            order_date=date(2024, 1, 1), paid_at=date(2024, 1, 3),
        ),
    ]
    deposits = [
        BankRecord(id="r1", transaction_date=date(2024, 1, 5), amount=50000, depositor="ABC 홍길동"),
        BankRecord(id="r2", transaction_date=date(2024, 3, 10), amount=50000, depositor="XYZ"),
        BankRecord(id="r3", transaction_date=date(2024, 3, 11), amount=777, depositor="Stranger"),
    ]
    return transactions, deposits


def test_single_then_group_then_leftovers(xyz_clients: list[Client]) -> None:
    transactions, deposits = _inputs(xyz_clients)

    result = run_reconciliation(transactions, deposits, clients=xyz_clients)

    assert [(m.transaction.id, m.bank_record.id) for m in result.matches] == [("t1", "r1")]
    assert [g.transaction_ids for g in result.group_matches] == [["t2", "t3"]]
    assert result.group_matches[0].bank_record.id == "r2"
    assert [r.id for r in result.unmatched_records] == ["r3"]
    assert [t.id for t in result.unmatched_transactions] == ["t4"]
    assert result.matched_transaction_count == 3
    assert result.is_empty is False


def test_no_record_or_transaction_used_twice(xyz_clients: list[Client]) -> None:
    transactions, deposits = _inputs(xyz_clients)

    result = run_reconciliation(transactions, deposits, clients=xyz_clients)

    record_ids = [m.bank_record.id for m in result.matches] + [g.bank_record.id for g in result.group_matches]
    txn_ids = [m.transaction.id for m in result.matches] + [
        t_id for g in result.group_matches for t_id in g.transaction_ids
    ]
    assert len(record_ids) == len(set(record_ids))
    assert len(txn_ids) == len(set(txn_ids))
    assert result.consumed.record_ids == frozenset(record_ids)
    assert result.consumed.transaction_ids == frozenset(txn_ids)


def test_auto_group_disabled_leaves_split_payment_open(xyz_clients: list[Client]) -> None:
    transactions, deposits = _inputs(xyz_clients)

    result = run_reconciliation(transactions, deposits, clients=xyz_clients, auto_group=False)

    assert result.group_matches == []
    assert [r.id for r in result.unmatched_records] == ["r2", "r3"]
    assert [t.id for t in result.unmatched_transactions] == ["t2", "t3", "t4"]

    session = result.manual_session()
    session.select_record("r2")
    session.toggle_transaction("t2")
    session.toggle_transaction("t3")
    assert session.confirm().transaction_ids == ["t2", "t3"]


def test_rerun_after_applying_is_empty(xyz_clients: list[Client]) -> None:
    transactions, deposits = _inputs(xyz_clients)
    first = run_reconciliation(transactions, deposits, clients=xyz_clients)

    paid: dict[str, Transaction] = {}
    for m in first.matches:
        paid[m.transaction.id] = m.transaction.mark_paid(m.bank_record.transaction_date, m.bank_record.id)
    for g in first.group_matches:
        for t in g.transactions:
            paid[t.id] = t.mark_paid(g.bank_record.transaction_date, g.bank_record.id)
    used = first.consumed.record_ids

    second = run_reconciliation(
        [paid.get(t.id, t) for t in transactions],
        [replace(r, is_matched=r.id in used) for r in deposits],
        clients=xyz_clients,
    )

    assert second.is_empty is True
    assert [r.id for r in second.unmatched_records] == ["r3"]
    assert [t.id for t in second.unmatched_transactions] == ["t4"]


def test_inputs_are_not_modified(xyz_clients: list[Client]) -> None:
    transactions, deposits = _inputs(xyz_clients)
    before = (list(transactions), list(deposits))

    run_reconciliation(transactions, deposits, clients=xyz_clients)

    assert (transactions, deposits) == before
