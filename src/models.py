from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"


@dataclass(frozen=True)
class Transaction:
    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Optional[Decimal] = None

    def __repr__(self) -> str:
        return f"Transaction({self.transaction_type.value}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass
class StoredTransaction:
    """Deposit or withdrawal kept around so later disputes can find its amount."""

    transaction_type: TransactionType
    client_id: int
    amount: Decimal
    disputed: bool = False
    charged_back: bool = False


@dataclass(frozen=True)
class AccountDelta:
    """
    Post-state values for an account, computed by the processor.
    Fields left as None are not touched when the delta is applied.
    """

    available: Optional[Decimal] = None
    held: Optional[Decimal] = None
    locked: Optional[bool] = None


@dataclass
class ClientAccount:
    client_id: int
    available: Decimal = Decimal("0")
    held: Decimal = Decimal("0")
    locked: bool = False

    @property
    def total(self) -> Decimal:
        return self.available + self.held

    def apply(self, delta: AccountDelta) -> None:
        if delta.available is not None:
            self.available = delta.available
        if delta.held is not None:
            self.held = delta.held
        if delta.locked is not None:
            self.locked = delta.locked


class ProcessingStats:
    """Counters for tracking processing statistics."""

    def __init__(self):
        self.processed = 0
        self.failed = 0

    def record_success(self):
        self.processed += 1

    def record_failure(self):
        self.failed += 1
