# Docstring for ar_recon/core/normalizers module
"""
normalizers.py

Shared normalization helpers for name comparison and bank statement cleaning.

Design goals
------------
- Single source of truth for how payer names, statement dates and statement
  amounts are normalized, so the cleaner and the matching engines agree.
- Tolerant name comparison: deposit payer names often carry extra tokens
  ("ABC 홍길동", "(주)ABC") or abbreviate the registered client name.
- Never raise on messy cells: unparsable dates normalize to None and
  unparsable amounts to 0; the cleaner decides what to drop.

Public API
----------
- normalize_name(value) -> str
- names_match(client_name, depositor) -> bool
- normalize_bank_date(value) -> str | None
- parse_amount(value) -> int
- extract_depositor(description, patterns=...) -> str
"""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta
from numbers import Integral, Real
from typing import Any, Iterable

import pandas as pd

from ..config import BANK_STATEMENT_CONFIG


# Excel's day zero for the 1900 date system (accounts for the 1900 leap-year bug)
_EXCEL_EPOCH = date(1899, 12, 30)
# Serial of 9999-12-31, the last date Excel can store
_EXCEL_SERIAL_MAX = 2958465
# Numeric cells in this range are read as YYYYMMDD, not as serials
_COMPACT_NUMBER_RANGE = (10_000_000, 100_000_000)

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_DOTTED_DATETIME = re.compile(r"^\d{4}\.\d{2}\.\d{2}\s+\d{2}:\d{2}:\d{2}$")
_DOTTED_DATE = re.compile(r"^\d{4}\.\d{2}\.\d{2}$")
_SLASHED_DATE = re.compile(r"^\d{4}/\d{2}/\d{2}$")
_COMPACT_DATE = re.compile(r"^\d{8}$")
_LEADING_INT = re.compile(r"^[+-]?\d+")


# --- Names -----------------------------------------------------------------------

def normalize_name(value: Any) -> str:
    """
    Strip whitespace and punctuation and lowercase a name for comparison.

    Letters of any script (Hangul included), digits and underscore are kept.

    Examples:
        'ABC 홍길동'   -> 'abc홍길동'
        '(주) A.B.C'   -> '주abc'
    """
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return ""
    text = re.sub(r"\s+", "", str(value))
    text = re.sub(r"[^\w]", "", text)
    return text.lower()


def names_match(client_name: Any, depositor: Any) -> bool:
    """
    True if either normalized name contains the other.

    Very short names can produce false positives through containment; this
    favors recall and is accepted.
    """
    normalized_client = normalize_name(client_name)
    normalized_depositor = normalize_name(depositor)
    if not normalized_client or not normalized_depositor:
        return False

    return (
        normalized_client in normalized_depositor
        or normalized_depositor in normalized_client
    )



# --- Statement cells -------------------------------------------------------------

def normalize_bank_date(value: Any) -> str | None:
    """
    Normalize a statement date cell to 'YYYY-MM-DD'.

    Handles Excel serial numbers, numeric YYYYMMDD cells, datetime/Timestamp
    cells and the text layouts seen in bank exports:

        '2024-01-05'            -> '2024-01-05'
        '2024.01.05 13:45:10'   -> '2024-01-05'
        '2024.01.05'            -> '2024-01-05'
        '2024/01/05'            -> '2024-01-05'
        '20240105'              -> '2024-01-05'
        20240105                -> '2024-01-05'
        45296                   -> '2024-01-05'  (Excel serial)

    Returns None for empty or unrecognized values.
    """
    if value is None:
        return None
    if isinstance(value, (pd.Timestamp, datetime)):
        if pd.isna(value):
            return None
        return value.strftime("%Y-%m-%d")
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Real) and not isinstance(value, bool):
        if pd.isna(value) or value <= 0:
            return None
        low, high = _COMPACT_NUMBER_RANGE
        if low <= value < high and value == int(value):
            return normalize_bank_date(str(int(value)))
        if value > _EXCEL_SERIAL_MAX:
            return None
        return (_EXCEL_EPOCH + timedelta(days=int(value))).isoformat()

    text = str(value).strip()
    if not text:
        return None

    if _ISO_DATE.match(text):
        return text
    if _DOTTED_DATETIME.match(text):
        return text.split()[0].replace(".", "-")
    if _DOTTED_DATE.match(text):
        return text.replace(".", "-")
    if _SLASHED_DATE.match(text):
        return text.replace("/", "-")
    if _COMPACT_DATE.match(text):
        return f"{text[0:4]}-{text[4:6]}-{text[6:8]}"
    return None


def parse_amount(value: Any) -> int:
    """
    Parse a statement amount cell to an integer.

    Thousands separators are removed; blank or unparsable cells give 0.

        '1,234,000' -> 1234000
        1234000.0   -> 1234000
        ''          -> 0
    """
    if value is None:
        return 0
    if isinstance(value, Integral) and not isinstance(value, bool):
        return int(value)
    if isinstance(value, Real) and not isinstance(value, bool):
        if pd.isna(value):
            return 0
        return int(value)

    text = str(value).replace(",", "").strip()
    match = _LEADING_INT.match(text)
    if match is None:
        return 0
    return int(match.group(0))


def extract_depositor(
    description: Any,
    patterns: Iterable[str] = BANK_STATEMENT_CONFIG.depositor_patterns,
) -> str:
    """
    Pull the payer name out of a statement description.

        '입금 홍길동'      -> '홍길동'
        '타행이체 ABC상사' -> 'ABC상사'

    Falls back to the whole (stripped) description when no pattern matches.
    """
    if description is None or (not isinstance(description, str) and pd.isna(description)):
        return ""
    text = str(description)
    if not text.strip():
        return ""

    for pattern in patterns:
        match = re.search(pattern, text)
        if match:
            return match.group(1).strip()

    return text.strip()
