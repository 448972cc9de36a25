#Docstring for ar_recon/config module
"""
config.py

Central configuration for the deposit reconciliation pipeline.

This module defines the matching limits, pipeline switches, bank statement
column keywords and business parameters used across the project.

It is intentionally the single source of truth for:
- Matching controls (combination search cap, minimum group size)
- Pipeline switches (automatic group matching, overdue threshold)
- Pricing parameters (VAT rate, delivery fee)
- Bank statement header/column keywords used by the cleaning step

Contents
--------
1) Paths and project defaults
   - Default report output folder

2) Matching configuration
   - MATCHING_CONFIG.combination_max_items:
       only the N largest candidates of a client group are searched when
       looking for a split payment (bounds the search to 2^N branches)
   - MATCHING_CONFIG.min_group_size:
       a group match needs at least this many transactions

3) Pipeline configuration
   - RECONCILE_CONFIG (automatic group pass, overdue days, VAT)

4) Bank statement configuration
   - BANK_STATEMENT_CONFIG: header keywords and column keyword lists for
     the KB business account export (and CSV exports of the same layout)

Usage
-----
All other modules import configuration from here. Example:

    from ar_recon.config import MATCHING_CONFIG, RECONCILE_CONFIG
"""


from dataclasses import dataclass, field #create simple classes for configuration
from pathlib import Path #object-oriented filesystem paths instead of strings



# --- Base paths ----------------------------------------------------------------

# ar_recon/ -> project root
BASE_DIR = Path(__file__).resolve().parents[1]

REPORTS_DIR = BASE_DIR / "reports"
REPORTS_OUTPUTS_DIR = REPORTS_DIR / "outputs"



# --- Transaction statuses ------------------------------------------------------

# Statuses that mean "paid". A transaction in one of these must carry paid_at.
PAID_STATUS_VALUES = frozenset({"completed", "card"})

# Status written to a transaction when a deposit is applied to it.
APPLIED_STATUS_VALUE = "completed"

# Client name used for manual group matches whose transactions have no client.
UNKNOWN_CLIENT_NAME = "unknown"



# --- Matching configuration ------------------------------------------------------------

@dataclass(frozen=True)
class MatchingConfig:

    """

    Configuration for matching logic.

    combination_max_items:
        Maximum number of candidates (largest amounts first) the split-payment
        search considers. Candidates past this cap are never tried, so a
        solution that needs them is missed.
    min_group_size:
        Smallest number of transactions a group (split payment) match may have.

    """

    combination_max_items: int = 10
    min_group_size: int = 2

    def __post_init__(self):
        if self.min_group_size < 2:
            raise ValueError(
                "min_group_size must be at least 2 (a group match pays several transactions), "
                f"got {self.min_group_size}."
            )
        if self.combination_max_items < self.min_group_size:
            raise ValueError(
                f"combination_max_items ({self.combination_max_items}) must not be smaller "
                f"than min_group_size ({self.min_group_size})."
            )


MATCHING_CONFIG = MatchingConfig()



# --- Pipeline configuration ------------------------------------------------------------

@dataclass(frozen=True)
class ReconcileConfig:

    """

    Configuration for the reconciliation pipeline and receivables reports.

    auto_group_matching:
        If True, run the automatic group-match pass after single matching.
        If False, leftovers are left for the manual workflow only.
    overdue_days:
        An outstanding order older than this many days counts as overdue.
    vat_rate:
        VAT rate applied to base amounts (0.1 = 10%).
    delivery_fee:
        Flat courier fee added to an order when delivery is included.

    """

    auto_group_matching: bool = True
    overdue_days: int = 30
    vat_rate: float = 0.1
    delivery_fee: int = 4000


RECONCILE_CONFIG = ReconcileConfig()



# --- Bank statement configuration ------------------------------------------------

# IMPORTANT:
# Keywords are matched with "contains" against the header cells of the export,
# in list order. The first header cell containing any keyword wins.

@dataclass(frozen=True)
class BankStatementConfig:

    """

    Layout of a bank statement export.

    header_scan_rows:
        Number of leading rows searched for the header row.
    header_keywords:
        A row containing any of these is treated as the header row.
    *_keywords:
        Keyword lists used to locate each canonical column.
    depositor_patterns:
        Regexes applied to the description when the export has no sender
        column; the first capturing group is the depositor name.

    """

    header_scan_rows: int = 20
    header_keywords: tuple[str, ...] = ("거래일자", "거래일시", "거래일", "일자", "날짜")
    date_keywords: tuple[str, ...] = ("거래일시", "거래일자", "거래일", "일자", "날짜")
    depositor_keywords: tuple[str, ...] = ("보낸분", "받는분", "보낸분/받는분")
    description_keywords: tuple[str, ...] = ("적요", "내용", "거래내용", "내 통장 표시")
    deposit_keywords: tuple[str, ...] = ("입금액(원)", "입금액", "입금", "받은금액")
    withdraw_keywords: tuple[str, ...] = ("출금액(원)", "출금액", "출금", "보낸금액")
    balance_keywords: tuple[str, ...] = ("잔액(원)", "잔액", "거래후잔액")
    depositor_patterns: tuple[str, ...] = field(
        default=(
            r"입금\s*(.+)",
            r"타행이체\s*(.+)",
            r"이체\s*(.+)",
            r"무통장입금\s*(.+)",
        )
    )


BANK_STATEMENT_CONFIG = BankStatementConfig()


# Canonical columns produced by the bank statement cleaner (and used by exports)
BANK_RECORD_COLUMNS = [
    "transaction_date",
    "description",
    "depositor",
    "amount",
    "balance",
]


# Store export columns (CSV dumps of the transactions / clients tables)
TRANSACTION_REQUIRED_COLUMNS = ["id", "amount", "status"]
CLIENT_REQUIRED_COLUMNS = ["id", "name"]
