# Docstring for ar_recon/core/validators module
"""
validators.py

Shared validation helpers for loaders, cleaners and engines.

The matching engines assume their inputs are already valid (ISO dates, integer
amounts, consistent status/paid_at). These helpers are where that is checked,
at the edges: when store exports are loaded and when callers build records
by hand.

Public API
----------
- coerce_date(value, field_name) -> date | None
- coerce_optional_int(value) -> int | None
- validate_iso_date(value) -> bool
- validate_paid_invariant(transaction) -> None
- is_outstanding(transaction) -> bool
- validate_required_columns(df, required_cols, source_name) -> None
"""

from __future__ import annotations

import re
from datetime import date, datetime
from numbers import Integral, Real
from typing import Any, Iterable

import pandas as pd

from .models import Transaction

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def coerce_date(value: Any, field_name: str = "date") -> date | None:
    """Convert a date/datetime/'YYYY-MM-DD' value to datetime.date; blanks give None."""
    if value is None:
        return None
    if isinstance(value, datetime):
        if pd.isna(value):
            return None
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip() == "":
        return None
    if not isinstance(value, str) and pd.isna(value):
        return None
    if validate_iso_date(value):
        return date.fromisoformat(value)
    try:
        parsed = pd.to_datetime(value, errors="raise")
    except (ValueError, TypeError) as exc:
        raise ValueError(
            f"Invalid {field_name}: {value!r}. Expected a date or YYYY-MM-DD string."
        ) from exc
    if pd.isna(parsed):
        raise ValueError(
            f"Invalid {field_name}: {value!r}. Expected a date or YYYY-MM-DD string."
        )
    return parsed.date()


def coerce_optional_int(value: Any) -> int | None:
    if value is None:
        return None
    if isinstance(value, Integral) and not isinstance(value, bool):
        return int(value)
    if isinstance(value, Real) and not isinstance(value, bool):
        return None if pd.isna(value) else int(value)
    text = str(value).replace(",", "").strip()
    if not text:
        return None
    numeric = pd.to_numeric(text, errors="coerce")
    if pd.isna(numeric):
        return None
    return int(numeric)


def validate_iso_date(value: Any) -> bool:
    """True if value is a real calendar date written as YYYY-MM-DD."""
    if not isinstance(value, str) or not _ISO_DATE.match(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def validate_paid_invariant(transaction: Transaction) -> None:
    """
    Check that paid_at is set exactly when the status is completed/card.

    Raises:
        ValueError: if the transaction breaks the invariant.
    """
    if transaction.status.is_paid and transaction.paid_at is None:
        raise ValueError(
            f"Transaction {transaction.id!r} has status {transaction.status.value!r} "
            "but no paid_at date."
        )
    if not transaction.status.is_paid and transaction.paid_at is not None:
        raise ValueError(
            f"Transaction {transaction.id!r} has paid_at {transaction.paid_at} "
            f"but status {transaction.status.value!r}."
        )


def is_outstanding(transaction: Transaction) -> bool:
    """Eligible for reconciliation: not completed/card and not yet paid."""
    return transaction.is_outstanding


def validate_required_columns(
    df: pd.DataFrame,
    required_cols: Iterable[str],
    source_name: str,
) -> None:
    """
    Ensure that the DataFrame has at least the required columns.

    Raises:
        ValueError: if any required column is missing.
    """
    missing = [col for col in required_cols if col not in df.columns]
    if missing:
        raise ValueError(
            f"{source_name}: missing required columns: {missing}. "
            f"Present columns: {list(df.columns)}"
        )
