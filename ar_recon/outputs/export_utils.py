# Docstring for ar_recon/export_utils module
"""
export_utils.py

Tabular views of reconciliation results and Excel export for operator review.

Design goals
------------
- Review-friendly: one sheet per result type, one row per transaction, with
  the deposit shown next to what it pays.
- Safe output: ensure parent directories exist before writing files.
- Consistent engine: always use the openpyxl engine for .xlsx output.

Public API
----------
- matches_to_dataframe(matches) -> pd.DataFrame
- group_matches_to_dataframe(group_matches) -> pd.DataFrame
- bank_records_to_dataframe(records) -> pd.DataFrame
- reconciliation_sheets(result) -> dict[str, pd.DataFrame]
- default_output_path(filename_prefix="reconciliation", out_dir=...) -> Path
- write_multi_sheet_excel(sheets, output_path, *, index=False) -> Path
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Iterable

import pandas as pd

from ..config import BANK_RECORD_COLUMNS, REPORTS_OUTPUTS_DIR
from ..core.models import BankRecord, GroupMatchResult, MatchResult
from ..engines.reconcile import ReconciliationResult
from ..engines.receivables_summary import transactions_to_dataframe


EXCEL_SHEETNAME_LIMIT = 31

MATCH_COLUMNS = [
    "transaction_id",
    "client_name",
    "description",
    "order_date",
    "amount",
    "bank_record_id",
    "deposit_date",
    "depositor",
    "deposit_amount",
    "match_kind",
]

GROUP_MATCH_COLUMNS = [
    "group_no",
    "client_name",
    "bank_record_id",
    "deposit_date",
    "depositor",
    "total_amount",
    "transaction_id",
    "transaction_client_name",
    "description",
    "order_date",
    "amount",
]


def _ensure_parent_dir(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def _timestamped_filename(prefix: str) -> str:
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return f"{prefix}_{stamp}.xlsx"


def _truncate_sheet_name(name: str) -> str:
    return name[:EXCEL_SHEETNAME_LIMIT] if len(name) > EXCEL_SHEETNAME_LIMIT else name


def _dedupe_sheet_names(names: list[str]) -> list[str]:
    """Ensure sheet names are unique after truncation by appending numeric suffixes."""
    seen: dict[str, int] = {}
    deduped: list[str] = []
    for raw_name in names:
        base = _truncate_sheet_name(raw_name)
        if base not in seen:
            seen[base] = 0
            deduped.append(base)
            continue
        seen[base] += 1
        suffix = f"_{seen[base]}"
        trimmed_base = base[: EXCEL_SHEETNAME_LIMIT - len(suffix)]
        deduped.append(f"{trimmed_base}{suffix}")
    return deduped



# --- DataFrame views ---------------------------------------------------------------

def matches_to_dataframe(matches: Iterable[MatchResult]) -> pd.DataFrame:
    rows = [
        {
            "transaction_id": m.transaction.id,
            "client_name": m.transaction.client_name,
            "description": m.transaction.description,
            "order_date": m.transaction.order_date,
            "amount": m.transaction.amount,
            "bank_record_id": m.bank_record.id,
            "deposit_date": m.bank_record.transaction_date,
            "depositor": m.bank_record.depositor,
            "deposit_amount": m.bank_record.amount,
            "match_kind": m.match_kind.value,
        }
        for m in matches
    ]
    return pd.DataFrame(rows, columns=MATCH_COLUMNS)


def group_matches_to_dataframe(group_matches: Iterable[GroupMatchResult]) -> pd.DataFrame:
    """One row per member transaction; group_no ties rows of the same deposit together."""
    rows = []
    for group_no, group in enumerate(group_matches, start=1):
        for t in group.transactions:
            rows.append(
                {
                    "group_no": group_no,
                    "client_name": group.client_name,
                    "bank_record_id": group.bank_record.id,
                    "deposit_date": group.bank_record.transaction_date,
                    "depositor": group.bank_record.depositor,
                    "total_amount": group.total_amount,
                    "transaction_id": t.id,
                    "transaction_client_name": t.client_name,
                    "description": t.description,
                    "order_date": t.order_date,
                    "amount": t.amount,
                }
            )
    return pd.DataFrame(rows, columns=GROUP_MATCH_COLUMNS)


def bank_records_to_dataframe(records: Iterable[BankRecord]) -> pd.DataFrame:
    rows = [
        {
            "id": r.id,
            "transaction_date": r.transaction_date,
            "description": r.description,
            "depositor": r.depositor,
            "amount": r.amount,
            "balance": r.balance,
        }
        for r in records
    ]
    return pd.DataFrame(rows, columns=["id", *BANK_RECORD_COLUMNS])


def reconciliation_sheets(result: ReconciliationResult) -> dict[str, pd.DataFrame]:
    """Sheets of the review workbook, in display order."""
    return {
        "single_matches": matches_to_dataframe(result.matches),
        "group_matches": group_matches_to_dataframe(result.group_matches),
        "unmatched_deposits": bank_records_to_dataframe(result.unmatched_records),
        "open_transactions": transactions_to_dataframe(result.unmatched_transactions),
    }



# --- Excel writers -----------------------------------------------------------------

def default_output_path(
    filename_prefix: str = "reconciliation",
    out_dir: Path | str | None = None,
) -> Path:
    """Timestamped .xlsx path under out_dir (REPORTS_OUTPUTS_DIR by default)."""
    base_dir = Path(out_dir) if out_dir is not None else REPORTS_OUTPUTS_DIR
    return base_dir / _timestamped_filename(filename_prefix)


def write_multi_sheet_excel(
    sheets: dict[str, pd.DataFrame],
    output_path: Path | str,
    *,
    index: bool = False,
) -> Path:
    """
    Write multiple DataFrames to a single Excel workbook and return the path.

    Each dict key becomes a sheet name (truncated to Excel's 31-character limit).
    """
    path = Path(output_path)
    _ensure_parent_dir(path)
    sheet_names = _dedupe_sheet_names(list(sheets.keys()))
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        for name, sheet_name in zip(sheets.keys(), sheet_names):
            sheets[name].to_excel(writer, sheet_name=sheet_name, index=index)
    return path
