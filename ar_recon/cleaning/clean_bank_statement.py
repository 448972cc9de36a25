# Docstring for ar_recon/clean_bank_statement module
"""
clean_bank_statement.py

Cleaning and normalization for bank statement exports.

This module takes the raw cell grid of a bank statement export (as read by
`load_data.load_bank_statement_excel` / `load_bank_statement_csv`, without a
header) and turns it into ParsedBankRecord objects for reconciliation.

Only credited rows (deposits) are kept: reconciliation matches incoming
payments, so withdrawals and zero rows are discarded here.

Core transformations
--------------------
1) Header detection
   - Bank exports start with a title block (account number, period, ...).
     The header row is the first of the first `header_scan_rows` rows with a
     cell containing one of `header_keywords` (거래일시, 거래일자, ...).
   - No header row -> ValueError.

2) Column mapping
   - Each canonical column is located by keyword (first header cell that
     contains any keyword of the column's list). Missing optional columns
     are tolerated; a missing date or deposit column is an error.

3) Row normalization
   - Date: Excel serials, datetimes and the text layouts of
     `normalize_bank_date` -> datetime.date. Rows whose date cannot be
     normalized are dropped with a warning.
   - Amounts: thousands separators removed, blank -> 0.
   - Depositor: the sender column when present and non-empty, otherwise
     extracted from the description ('입금 홍길동' -> '홍길동').
   - Description: falls back to the sender column when blank.

Public API
----------
- find_header_row(raw_df, cfg=...) -> int
- map_statement_columns(headers, cfg=...) -> dict[str, int | None]
- clean_bank_statement(raw_df, cfg=...) -> list[ParsedBankRecord]
- to_bank_records(parsed, id_prefix="temp") -> list[BankRecord]
"""


from __future__ import annotations

import logging
import warnings
from datetime import date
from typing import Any, Iterable, Optional, Sequence

import pandas as pd

from ..config import BANK_STATEMENT_CONFIG, BankStatementConfig
from ..core.models import BankRecord, ParsedBankRecord
from ..core.normalizers import (
    extract_depositor,
    normalize_bank_date,
    parse_amount,
)

logger = logging.getLogger(__name__)



# --- Helper functions ------------------------------------------------------------

def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    return bool(pd.isna(value))


def _cell_text(row: Sequence[Any], index: Optional[int]) -> str:
    if index is None or index >= len(row) or _is_blank(row[index]):
        return ""
    return str(row[index]).strip()


def _cell_value(row: Sequence[Any], index: Optional[int]) -> Any:
    if index is None or index >= len(row):
        return None
    return row[index]


def _find_column(headers: Sequence[str], keywords: Iterable[str]) -> Optional[int]:
    keywords = tuple(keywords)
    for position, header in enumerate(headers):
        if any(keyword in header for keyword in keywords):
            return position
    return None



# --- Main cleaning functions ------------------------------------------------------------

def find_header_row(
    raw_df: pd.DataFrame,
    cfg: BankStatementConfig = BANK_STATEMENT_CONFIG,
) -> int:

    """

    Locate the header row of a statement export.

    Returns:
        Positional index of the header row.

    Raises:
        ValueError: if none of the first cfg.header_scan_rows rows looks
            like a header.

    """

    scan = raw_df.head(cfg.header_scan_rows)
    for position, row in enumerate(scan.itertuples(index=False, name=None)):
        for cell in row:
            if _is_blank(cell):
                continue
            text = str(cell)
            if any(keyword in text for keyword in cfg.header_keywords):
                return position

    raise ValueError(
        "Could not find the statement header row in the first "
        f"{cfg.header_scan_rows} rows. Expected a column such as "
        f"{', '.join(cfg.header_keywords[:2])}; check that this is a bank statement export."
    )


def map_statement_columns(
    headers: Sequence[str],
    cfg: BankStatementConfig = BANK_STATEMENT_CONFIG,
) -> dict[str, Optional[int]]:
    """Map canonical statement columns to header positions (None when absent)."""
    return {
        "transaction_date": _find_column(headers, cfg.date_keywords),
        "depositor": _find_column(headers, cfg.depositor_keywords),
        "description": _find_column(headers, cfg.description_keywords),
        "deposit": _find_column(headers, cfg.deposit_keywords),
        "withdraw": _find_column(headers, cfg.withdraw_keywords),
        "balance": _find_column(headers, cfg.balance_keywords),
    }


def clean_bank_statement(
    raw_df: pd.DataFrame,
    cfg: BankStatementConfig = BANK_STATEMENT_CONFIG,
) -> list[ParsedBankRecord]:

    """

    Clean a raw statement grid into deposit records.

    Steps:
    1. Find the header row and map columns by keyword
    2. Skip blank rows and rows without a positive deposit amount
    3. Normalize the date; drop (and warn about) rows with unusable dates
    4. Resolve depositor and description

    Args:
        raw_df:
            Statement cells as loaded with header=None.
        cfg:
            Header and column keywords.

    Returns:
        ParsedBankRecord list in statement order.

    Raises:
        ValueError: if no header row, date column or deposit column is found.

    """

    header_position = find_header_row(raw_df, cfg)
    headers = [
        "" if _is_blank(cell) else str(cell).strip()
        for cell in raw_df.iloc[header_position].tolist()
    ]
    columns = map_statement_columns(headers, cfg)

    if columns["transaction_date"] is None:
        raise ValueError(f"Statement header has no date column. Present columns: {headers}")
    if columns["deposit"] is None:
        raise ValueError(f"Statement header has no deposit column. Present columns: {headers}")

    records: list[ParsedBankRecord] = []
    invalid_dates = 0
    skipped_non_deposits = 0

    data_rows = raw_df.iloc[header_position + 1:]
    for row in data_rows.itertuples(index=False, name=None):
        if all(_is_blank(cell) for cell in row):
            continue

        deposit_amount = parse_amount(_cell_value(row, columns["deposit"]))
        if deposit_amount <= 0:
            skipped_non_deposits += 1
            continue

        iso_date = normalize_bank_date(_cell_value(row, columns["transaction_date"]))
        try:
            transaction_date = date.fromisoformat(iso_date) if iso_date else None
        except ValueError:
            transaction_date = None
        if transaction_date is None:
            invalid_dates += 1
            continue

        depositor_value = _cell_text(row, columns["depositor"])
        description = _cell_text(row, columns["description"])

        balance_value = _cell_value(row, columns["balance"])
        balance = None
        if columns["balance"] is not None:
            balance = parse_amount(balance_value)

        records.append(
            ParsedBankRecord(
                transaction_date=transaction_date,
                description=description or depositor_value,
                depositor=depositor_value or extract_depositor(description, cfg.depositor_patterns),
                amount=deposit_amount,
                balance=balance,
            )
        )

    if invalid_dates > 0:
        warnings.warn(
            f"Bank statement cleaning dropped {invalid_dates} deposit rows with unrecognized dates.",
            stacklevel=2,
        )

    logger.debug(
        "Bank statement: %d deposits kept, %d non-deposit rows skipped",
        len(records),
        skipped_non_deposits,
    )
    return records


def to_bank_records(
    parsed: Iterable[ParsedBankRecord],
    id_prefix: str = "temp",
) -> list[BankRecord]:
    """Give parsed statement lines provisional ids (`temp-0`, `temp-1`, ...)."""
    return [
        BankRecord.from_parsed(f"{id_prefix}-{position}", record)
        for position, record in enumerate(parsed)
    ]
