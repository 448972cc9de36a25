# Docstring for ar_recon/run_reconciliation module
"""
run_reconciliation.py

Command-line entrypoint: reconcile a bank statement export against the
outstanding transactions and write a review workbook.

    python -m ar_recon.run_reconciliation \\
        --bank-file data/statement.xlsx \\
        --transactions data/transactions.csv \\
        --clients data/clients.csv

The workbook has one sheet per proposal type (single matches, group matches),
the deposits and transactions still open, and a receivables summary. Nothing
is written back to the store; apply accepted proposals with `engines.apply`.
"""


from __future__ import annotations

import argparse
import logging
from datetime import date
from pathlib import Path
from typing import Optional, Sequence

from .config import RECONCILE_CONFIG
from .engines.receivables_summary import summarize_receivables
from .engines.reconcile import run_reconciliation
from .load_data import load_bank_records, load_clients_csv, load_transactions_csv
from .outputs.export_utils import (
    default_output_path,
    reconciliation_sheets,
    write_multi_sheet_excel,
)

logger = logging.getLogger("ar_recon")


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Match bank deposits to outstanding transactions and export proposals for review."
    )
    parser.add_argument("--bank-file", type=Path, required=True, help="Bank statement export (.xlsx or .csv)")
    parser.add_argument("--transactions", type=Path, required=True, help="CSV dump of the transactions table")
    parser.add_argument("--clients", type=Path, default=None, help="CSV dump of the clients table")
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Destination workbook (default: timestamped file under reports/outputs)",
    )
    parser.add_argument(
        "--no-auto-group",
        action="store_true",
        help="Skip automatic split-payment matching (leave leftovers for manual review)",
    )
    parser.add_argument(
        "--today",
        type=date.fromisoformat,
        default=None,
        help="Reference date for the overdue summary (YYYY-MM-DD, default: today)",
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level (DEBUG, INFO, WARNING, ...)")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> Path:
    args = _parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    clients = load_clients_csv(args.clients) if args.clients is not None else []
    transactions = load_transactions_csv(args.transactions, clients)
    deposits = load_bank_records(args.bank_file)
    logger.info(
        "Loaded %d deposits, %d transactions, %d clients",
        len(deposits),
        len(transactions),
        len(clients),
    )

    auto_group = False if args.no_auto_group else RECONCILE_CONFIG.auto_group_matching
    result = run_reconciliation(transactions, deposits, clients=clients, auto_group=auto_group)

    sheets = reconciliation_sheets(result)
    sheets["receivables_summary"] = summarize_receivables(
        transactions, today=args.today or date.today()
    ).reset_index()

    output_path = args.output or default_output_path()
    path = write_multi_sheet_excel(sheets, output_path)
    print(f"Wrote reconciliation review to: {path}")
    return path


if __name__ == "__main__":
    main()
