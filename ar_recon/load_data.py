# Docstring for ar_recon/load_data module
"""
load_data.py

Input loader utilities for bank statement exports and store table dumps.

This module provides thin, predictable I/O functions that read files into
pandas DataFrames or record objects, with minimal transformation. Cleaning of
statement cells lives in `cleaning.clean_bank_statement`; this module only
reads files and builds records from already-tidy tables.

Design goals
------------
- Separation of concerns: keep file I/O distinct from normalization and matching.
- Repeatability: statement cells are read without a header and as objects, so
  dates and amounts reach the cleaner exactly as the bank wrote them.
- ID safety: store dumps are read with dtype=str so ids keep leading zeros.

Inputs
------
- Bank statement exports (.xlsx from the bank site, or .csv)
- CSV dumps of the `clients` and `transactions` tables
  (clients: id, name, parent_id, ...; transactions: id, client_id, amount,
  status, order_date, paid_at, ...)

Typical usage
-------------

    from ar_recon.load_data import load_bank_records, load_clients_csv, load_transactions_csv

    clients = load_clients_csv("data/clients.csv")
    transactions = load_transactions_csv("data/transactions.csv", clients)
    deposits = load_bank_records("data/statement.xlsx")

Public API
----------
- load_bank_statement_excel(path, sheet_name=0) -> pd.DataFrame
- load_bank_statement_csv(path, encoding="utf-8-sig") -> pd.DataFrame
- load_bank_records(path, id_prefix="temp") -> list[BankRecord]
- load_clients_csv(path) -> list[Client]
- load_transactions_csv(path, clients=()) -> list[Transaction]
"""


from __future__ import annotations

import csv
import warnings
from pathlib import Path
from typing import Iterable, Optional

import pandas as pd

from .config import CLIENT_REQUIRED_COLUMNS, TRANSACTION_REQUIRED_COLUMNS
from .cleaning.clean_bank_statement import clean_bank_statement, to_bank_records
from .core.models import BankRecord, Client, ClientTree, Transaction
from .core.validators import (
    coerce_date,
    coerce_optional_int,
    validate_paid_invariant,
    validate_required_columns,
)


# Read with openpyxl; legacy .xls would need an extra reader
STATEMENT_EXCEL_SUFFIXES = (".xlsx", ".xlsm")


def _existing_path(path: Path | str, label: str) -> Path:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"{label} file not found at: {path}")
    return path


def _optional_text(value: object) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None



# --- Bank statements ---------------------------------------------------------------

def load_bank_statement_excel(
        path: Path | str,
        sheet_name: Optional[str | int] = 0,
) -> pd.DataFrame:

    """

    Load a bank statement Excel export as a raw cell grid.

    Args:
        path:
            Path to the .xlsx file.
        sheet_name:
            Sheet name or index to read (defaults to first sheet).

    Returns:
        DataFrame with positional columns and no header (the title block of
        the export is kept; the cleaner finds the header row).

    """

    path = _existing_path(path, "Bank statement")
    return pd.read_excel(path, sheet_name=sheet_name, header=None, dtype=object)


def load_bank_statement_csv(
        path: Path | str,
        encoding: str = "utf-8-sig",
) -> pd.DataFrame:
    """
    Load a bank statement CSV export as a raw cell grid (no header, all text).

    Title lines above the header are usually shorter than the data rows, so
    the grid is sized to the widest row.
    """
    path = _existing_path(path, "Bank statement")
    with path.open(newline="", encoding=encoding) as handle:
        width = max((len(row) for row in csv.reader(handle)), default=0)
    if width == 0:
        raise ValueError(f"Bank statement file is empty: {path}")
    return pd.read_csv(
        path,
        header=None,
        names=list(range(width)),
        dtype=str,
        encoding=encoding,
        skip_blank_lines=True,
    )


def load_bank_records(path: Path | str, id_prefix: str = "temp") -> list[BankRecord]:
    """Load, clean and id a bank statement export (.csv or .xlsx, by suffix)."""
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix == ".csv":
        raw = load_bank_statement_csv(path)
    elif suffix in STATEMENT_EXCEL_SUFFIXES:
        raw = load_bank_statement_excel(path)
    else:
        raise ValueError(
            f"Unsupported bank statement file type {path.suffix!r}: {path}. "
            "Save the export as .xlsx or .csv."
        )
    return to_bank_records(clean_bank_statement(raw), id_prefix=id_prefix)



# --- Store dumps -------------------------------------------------------------------

def load_clients_csv(path: Path | str) -> list[Client]:

    """

    Load the clients table dump.

    Raises:
        FileNotFoundError: if the file does not exist.
        ValueError: if required columns are missing or the hierarchy is
            deeper than one level.

    """

    path = _existing_path(path, "Clients")
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    validate_required_columns(df, CLIENT_REQUIRED_COLUMNS, source_name="Clients")

    clients = [
        Client(
            id=str(row["id"]).strip(),
            name=str(row["name"]).strip(),
            parent_id=_optional_text(row.get("parent_id")),
            manager_name=_optional_text(row.get("manager_name")),
            contact=_optional_text(row.get("contact")),
            memo=_optional_text(row.get("memo")),
        )
        for row in df.to_dict(orient="records")
    ]

    # Fails fast on sub-clients of sub-clients
    ClientTree(clients)
    return clients


def load_transactions_csv(
        path: Path | str,
        clients: Iterable[Client] = (),
) -> list[Transaction]:

    """

    Load the transactions table dump and join each row to its client.

    Args:
        path:
            CSV with at least id, amount, status.
        clients:
            Clients to join on client_id (unknown ids leave client=None).

    Returns:
        Transactions in file order.

    Raises:
        FileNotFoundError: if the file does not exist.
        ValueError: if required columns are missing, or an amount or date
            cannot be parsed.

    """

    path = _existing_path(path, "Transactions")
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    validate_required_columns(df, TRANSACTION_REQUIRED_COLUMNS, source_name="Transactions")

    clients_by_id = {c.id: c for c in clients}
    transactions: list[Transaction] = []
    inconsistent = 0

    for row in df.to_dict(orient="records"):
        amount = coerce_optional_int(row["amount"])
        if amount is None:
            raise ValueError(f"Transactions: row {row['id']!r} has no valid amount: {row['amount']!r}")

        client_id = _optional_text(row.get("client_id"))
        transaction = Transaction(
            id=str(row["id"]).strip(),
            amount=amount,
            status=str(row["status"]).strip() or "quote",
            client=clients_by_id.get(client_id) if client_id else None,
            client_id=client_id,
            order_date=coerce_date(row.get("order_date"), "order_date"),
            paid_at=coerce_date(row.get("paid_at"), "paid_at"),
            description=_optional_text(row.get("description")),
            item_name=_optional_text(row.get("item_name")),
            base_amount=coerce_optional_int(row.get("base_amount")),
            cost=coerce_optional_int(row.get("cost")),
            matched_bank_record_id=_optional_text(row.get("matched_bank_record_id")),
        )
        try:
            validate_paid_invariant(transaction)
        except ValueError:
            inconsistent += 1
        transactions.append(transaction)

    if inconsistent > 0:
        warnings.warn(
            f"Transactions: {inconsistent} rows have a status/paid_at mismatch and "
            "will not be treated as outstanding.",
            stacklevel=2,
        )

    return transactions
