# Docstring for ar_recon/receivables_summary module
"""
receivables_summary.py

Receivables overview by order status, with overdue orders split out.

An order that is not completed/card and was placed more than
RECONCILE_CONFIG.overdue_days days ago counts as "overdue" instead of its own
status. Orders without an order date are never overdue. Card payments are
counted with completed orders.

Public API
----------
- SUMMARY_BUCKETS
- transactions_to_dataframe(transactions) -> pd.DataFrame
- overdue_transactions(transactions, today, overdue_days=...) -> list[Transaction]
- summarize_receivables(transactions, today, overdue_days=...) -> pd.DataFrame
"""


from __future__ import annotations

from datetime import date
from typing import Iterable

import pandas as pd

from ..config import RECONCILE_CONFIG
from ..core.models import Transaction, TransactionStatus

SUMMARY_BUCKETS = ["quote", "design", "production", "completed", "overdue"]


def _is_overdue(transaction: Transaction, today: date, overdue_days: int) -> bool:
    if transaction.status.is_paid or transaction.order_date is None:
        return False
    return (today - transaction.order_date).days > overdue_days


def transactions_to_dataframe(transactions: Iterable[Transaction]) -> pd.DataFrame:
    """One row per transaction with the columns used by summaries and exports."""
    rows = [
        {
            "id": t.id,
            "client_name": t.client_name,
            "status": t.status.value,
            "amount": t.amount,
            "order_date": t.order_date,
            "paid_at": t.paid_at,
            "description": t.description,
        }
        for t in transactions
    ]
    columns = ["id", "client_name", "status", "amount", "order_date", "paid_at", "description"]
    return pd.DataFrame(rows, columns=columns)


def overdue_transactions(
    transactions: Iterable[Transaction],
    today: date,
    overdue_days: int = RECONCILE_CONFIG.overdue_days,
) -> list[Transaction]:
    return [t for t in transactions if _is_overdue(t, today, overdue_days)]


def summarize_receivables(
    transactions: Iterable[Transaction],
    today: date,
    overdue_days: int = RECONCILE_CONFIG.overdue_days,
) -> pd.DataFrame:

    """

    Count and total amount per bucket.

    Returns:
        DataFrame indexed by bucket (SUMMARY_BUCKETS order, then "total")
        with integer columns `count` and `amount`. Empty buckets are 0.

    """

    transactions = list(transactions)
    df = transactions_to_dataframe(transactions)

    buckets = []
    for t in transactions:
        if _is_overdue(t, today, overdue_days):
            buckets.append("overdue")
        elif t.status in (TransactionStatus.COMPLETED, TransactionStatus.CARD):
            buckets.append("completed")
        else:
            buckets.append(t.status.value)
    df["bucket"] = pd.Series(buckets, index=df.index, dtype="object")

    summary = (
        df.groupby("bucket")["amount"]
        .agg(count="count", amount="sum")
        .reindex(SUMMARY_BUCKETS, fill_value=0)
        .astype("int64")
    )
    summary.loc["total"] = [int(summary["count"].sum()), int(summary["amount"].sum())]
    summary.index.name = "bucket"
    return summary
