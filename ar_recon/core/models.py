# Docstring for ar_recon/core/models module
"""
models.py

In-memory record types shared by the loaders, cleaners and matching engines.

All records are frozen dataclasses: the engines read them and return new
result objects, they never modify their inputs. Applying a match (marking a
transaction paid, flagging a deposit as matched) is the caller's job, see
`engines.apply`.

Types
-----
- Client / ClientTree:
    Clients form a two-level hierarchy (top-level client + sub-clients) via
    `parent_id`. ClientTree is built once per run from the flat client list
    and answers "which top-level client does this belong to" and "which name
    should a combined deposit be matched against".
- TransactionStatus:
    quote -> design -> production -> completed | card
- Transaction:
    An order. Amounts are integers in the smallest currency unit.
    paid_at is set exactly when the status is completed/card.
- ParsedBankRecord / BankRecord:
    A credited bank statement line, before and after it has been given an id.
- MatchKind / MatchResult / GroupMatchResult:
    Proposed associations returned by the engines.

Public API
----------
- Client, ClientTree, TransactionStatus, Transaction
- ParsedBankRecord, BankRecord
- MatchKind, MatchResult, GroupMatchResult
- ConsumedState
"""


from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum
from typing import Iterable, Optional

from ..config import PAID_STATUS_VALUES



# --- Clients -------------------------------------------------------------------

@dataclass(frozen=True)
class Client:
    """A customer. Sub-clients point at their top-level client via parent_id."""

    id: str
    name: str
    parent_id: Optional[str] = None
    manager_name: Optional[str] = None
    contact: Optional[str] = None
    memo: Optional[str] = None

    @property
    def is_top_level(self) -> bool:
        return self.parent_id is None



class ClientTree:

    """

    Two-level client hierarchy built from a flat client list.

    Raises:
        ValueError: if a sub-client's parent is itself a sub-client
            (hierarchy deeper than one level).

    A parent_id that does not resolve to a known client is tolerated: the
    client still groups under that id, but its display name falls back to
    its own name.

    """

    def __init__(self, clients: Iterable[Client] = ()):
        self._clients: dict[str, Client] = {}
        self._children: dict[str, list[Client]] = {}

        for client in clients:
            # First occurrence wins; joined rows repeat the same client
            self._clients.setdefault(client.id, client)

        for client in self._clients.values():
            if client.parent_id is None:
                continue
            parent = self._clients.get(client.parent_id)
            if parent is not None and parent.parent_id is not None:
                raise ValueError(
                    f"Client {client.id!r} has parent {parent.id!r}, which is itself a "
                    f"sub-client of {parent.parent_id!r}. Only one level of sub-clients is supported."
                )
            self._children.setdefault(client.parent_id, []).append(client)

    @classmethod
    def from_transactions(
        cls,
        transactions: Iterable["Transaction"],
        clients: Iterable[Client] = (),
    ) -> "ClientTree":
        """Build a tree from an explicit client list plus clients joined onto transactions."""
        joined = [t.client for t in transactions if t.client is not None]
        return cls([*clients, *joined])

    def __contains__(self, client_id: object) -> bool:
        return client_id in self._clients

    def __len__(self) -> int:
        return len(self._clients)

    def get(self, client_id: Optional[str]) -> Optional[Client]:
        if client_id is None:
            return None
        return self._clients.get(client_id)

    def children(self, parent_id: str) -> list[Client]:
        return list(self._children.get(parent_id, []))

    def top_level_id(self, client: Client) -> str:
        return client.parent_id or client.id

    def display_name(self, client: Client) -> str:
        """Name a combined deposit for this client is expected to carry."""
        if client.parent_id is not None:
            parent = self._clients.get(client.parent_id)
            if parent is not None and parent.name:
                return parent.name
        return client.name



# --- Transactions ----------------------------------------------------------------

class TransactionStatus(str, Enum):
    QUOTE = "quote"
    DESIGN = "design"
    PRODUCTION = "production"
    COMPLETED = "completed"
    CARD = "card"

    @property
    def is_paid(self) -> bool:
        return self.value in PAID_STATUS_VALUES


@dataclass(frozen=True)
class Transaction:

    """

    An order placed by a client.

    amount is the VAT-inclusive total in the smallest currency unit;
    base_amount (optional) is the VAT-exclusive price it was built from.

    """

    id: str
    amount: int
    status: TransactionStatus = TransactionStatus.QUOTE
    client: Optional[Client] = None
    client_id: Optional[str] = None
    order_date: Optional[date] = None
    paid_at: Optional[date] = None
    description: Optional[str] = None
    item_name: Optional[str] = None
    base_amount: Optional[int] = None
    cost: Optional[int] = None
    matched_bank_record_id: Optional[str] = None

    def __post_init__(self):
        # Accept plain strings for status ("quote", "completed", ...)
        if not isinstance(self.status, TransactionStatus):
            object.__setattr__(self, "status", TransactionStatus(self.status))
        if self.client_id is None and self.client is not None:
            object.__setattr__(self, "client_id", self.client.id)

    @property
    def client_name(self) -> str:
        if self.client is None:
            return ""
        return self.client.name or ""

    @property
    def is_outstanding(self) -> bool:
        return not self.status.is_paid and self.paid_at is None

    def mark_paid(self, paid_at: date, bank_record_id: Optional[str] = None) -> "Transaction":
        """Return a paid copy of this transaction (the original is left untouched)."""
        return replace(
            self,
            status=TransactionStatus.COMPLETED,
            paid_at=paid_at,
            matched_bank_record_id=bank_record_id,
        )



# --- Bank records ----------------------------------------------------------------

@dataclass(frozen=True)
class ParsedBankRecord:
    """A credited statement line as produced by the bank statement cleaner."""

    transaction_date: date
    description: str
    depositor: str
    amount: int
    balance: Optional[int] = None


@dataclass(frozen=True)
class BankRecord:
    """A deposit available for reconciliation."""

    id: str
    transaction_date: date
    amount: int
    depositor: str = ""
    description: str = ""
    balance: Optional[int] = None
    is_matched: bool = False

    @classmethod
    def from_parsed(cls, record_id: str, parsed: ParsedBankRecord) -> "BankRecord":
        return cls(
            id=record_id,
            transaction_date=parsed.transaction_date,
            amount=parsed.amount,
            depositor=parsed.depositor,
            description=parsed.description,
            balance=parsed.balance,
        )



# --- Match results -----------------------------------------------------------------

class MatchKind(str, Enum):
    EXACT = "exact"
    # Reserved; no engine produces partial matches.
    PARTIAL = "partial"


@dataclass(frozen=True)
class MatchResult:
    """One deposit paired with one transaction."""

    transaction: Transaction
    bank_record: BankRecord
    match_kind: MatchKind = MatchKind.EXACT


@dataclass(frozen=True)
class GroupMatchResult:
    """One deposit paired with two or more transactions of the same client group."""

    transactions: tuple[Transaction, ...]
    bank_record: BankRecord
    client_name: str
    total_amount: int

    def __post_init__(self):
        object.__setattr__(self, "transactions", tuple(self.transactions))
        if len(self.transactions) < 2:
            raise ValueError(
                f"A group match needs at least 2 transactions, got {len(self.transactions)}."
            )

    @property
    def transaction_ids(self) -> list[str]:
        return [t.id for t in self.transactions]



# --- Consumption snapshot ----------------------------------------------------------

@dataclass(frozen=True)
class ConsumedState:

    """

    Ids of deposits and transactions already claimed by earlier passes.

    Immutable: `with_*` methods return a new snapshot, so one pass can hand
    its consumption to the next without sharing a mutable set.

    """

    record_ids: frozenset[str] = field(default_factory=frozenset)
    transaction_ids: frozenset[str] = field(default_factory=frozenset)

    def with_match(self, match: MatchResult) -> "ConsumedState":
        return ConsumedState(
            record_ids=self.record_ids | {match.bank_record.id},
            transaction_ids=self.transaction_ids | {match.transaction.id},
        )

    def with_group(self, group: GroupMatchResult) -> "ConsumedState":
        return ConsumedState(
            record_ids=self.record_ids | {group.bank_record.id},
            transaction_ids=self.transaction_ids | set(group.transaction_ids),
        )

    def has_record(self, record: BankRecord) -> bool:
        return record.id in self.record_ids

    def has_transaction(self, transaction: Transaction) -> bool:
        return transaction.id in self.transaction_ids
