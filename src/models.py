from collections import Counter
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Optional

from amount import ZERO, add, sub


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"

    @property
    def moves_funds(self) -> bool:
        """Deposits and withdrawals carry an amount; the dispute family references one."""
        return self in (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL)


class DisputeState(Enum):
    NORMAL = "normal"
    DISPUTED = "disputed"
    RESOLVED = "resolved"
    CHARGED_BACK = "charged_back"


@dataclass
class Transaction:
    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Optional[Decimal] = None

    def __repr__(self) -> str:
        return f"Transaction({self.transaction_type.value}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass
class LedgerEntry:
    """An accepted deposit or withdrawal. Only dispute_state changes after creation."""

    transaction_id: int
    client_id: int
    amount: Decimal
    kind: TransactionType
    dispute_state: DisputeState = DisputeState.NORMAL


@dataclass
class ClientAccount:
    client_id: int
    available: Decimal = ZERO
    held: Decimal = ZERO
    lock_count: int = 0

    @property
    def total(self) -> Decimal:
        return add(self.available, self.held)

    @property
    def locked(self) -> bool:
        return self.lock_count > 0

    def credit(self, amount: Decimal) -> None:
        self.available = add(self.available, amount)

    def debit(self, amount: Decimal) -> None:
        self.available = sub(self.available, amount)

    def hold(self, amount: Decimal) -> None:
        self.available = sub(self.available, amount)
        self.held = add(self.held, amount)
        self.lock_count += 1

    def release_hold(self, amount: Decimal) -> None:
        self.held = sub(self.held, amount)
        self.available = add(self.available, amount)
        self._unlock()

    def remove_held(self, amount: Decimal) -> None:
        self.held = sub(self.held, amount)
        self._unlock()

    def _unlock(self) -> None:
        self.lock_count = max(self.lock_count - 1, 0)


@dataclass
class ProcessingStats:
    """Counters for tracking processing statistics."""

    processed: int = 0
    rejected: int = 0
    rejections: Counter = field(default_factory=Counter)

    def record_success(self) -> None:
        self.processed += 1

    def record_rejection(self, reason: str) -> None:
        self.rejected += 1
        self.rejections[reason] += 1

    def summary(self) -> str:
        line = f"Processed: {self.processed}, Rejected: {self.rejected}"
        if self.rejections:
            details = ", ".join(f"{reason}={count}" for reason, count in sorted(self.rejections.items()))
            line = f"{line} ({details})"
        return line
