import re
from collections import Counter
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import ClassVar, Dict, Optional, Union

AMOUNT_PRECISION = Decimal("0.0001")
ZERO = Decimal("0.0000")

MAX_CLIENT_ID = 2**16 - 1
MAX_TRANSACTION_ID = 2**32 - 1

AMOUNT_PATTERN = re.compile(r"-?([0-9]+(\.[0-9]*)?|\.[0-9]+)")


def round_amount(value: Decimal) -> Decimal:
    """Round to four fractional digits, half away from zero."""
    return value.quantize(AMOUNT_PRECISION, rounding=ROUND_HALF_UP)


def parse_amount(text: str) -> Decimal:
    """
    Parse a decimal string and round it once to four fractional digits.
    Only plain decimal notation is accepted: no exponent, sign other than "-",
    digit separators or special values. Raises ValueError otherwise.
    """
    text = text.strip()
    if not AMOUNT_PATTERN.fullmatch(text):
        raise ValueError(f"amount {text!r} is not a plain decimal number")
    amount = Decimal(text)
    return round_amount(amount)


def format_amount(value: Decimal) -> str:
    return f"{round_amount(value):f}"


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"

    @property
    def has_amount(self) -> bool:
        """Deposits and withdrawals carry an amount and are retained for later disputes."""
        return self in (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL)


class DisputeStatus(Enum):
    NORMAL = "normal"
    DISPUTED = "disputed"
    RESOLVED = "resolved"
    CHARGED_BACK = "charged_back"

    def next_status(self, action: TransactionType) -> Optional["DisputeStatus"]:
        """Status reached by applying `action`, or None if the transition is not allowed."""
        return DISPUTE_TRANSITIONS.get((self, action))


# Resolved and charged back are terminal.
DISPUTE_TRANSITIONS: Dict[tuple, DisputeStatus] = {
    (DisputeStatus.NORMAL, TransactionType.DISPUTE): DisputeStatus.DISPUTED,
    (DisputeStatus.DISPUTED, TransactionType.RESOLVE): DisputeStatus.RESOLVED,
    (DisputeStatus.DISPUTED, TransactionType.CHARGEBACK): DisputeStatus.CHARGED_BACK,
}


@dataclass(frozen=True)
class Deposit:
    transaction_type: ClassVar[TransactionType] = TransactionType.DEPOSIT
    client_id: int
    transaction_id: int
    amount: Decimal


@dataclass(frozen=True)
class Withdrawal:
    transaction_type: ClassVar[TransactionType] = TransactionType.WITHDRAWAL
    client_id: int
    transaction_id: int
    amount: Decimal


@dataclass(frozen=True)
class Dispute:
    transaction_type: ClassVar[TransactionType] = TransactionType.DISPUTE
    client_id: int
    transaction_id: int


@dataclass(frozen=True)
class Resolve:
    transaction_type: ClassVar[TransactionType] = TransactionType.RESOLVE
    client_id: int
    transaction_id: int


@dataclass(frozen=True)
class Chargeback:
    transaction_type: ClassVar[TransactionType] = TransactionType.CHARGEBACK
    client_id: int
    transaction_id: int


FundsTransaction = Union[Deposit, Withdrawal]
DisputeAction = Union[Dispute, Resolve, Chargeback]
Transaction = Union[Deposit, Withdrawal, Dispute, Resolve, Chargeback]

TRANSACTION_CLASSES = {
    TransactionType.DEPOSIT: Deposit,
    TransactionType.WITHDRAWAL: Withdrawal,
    TransactionType.DISPUTE: Dispute,
    TransactionType.RESOLVE: Resolve,
    TransactionType.CHARGEBACK: Chargeback,
}


@dataclass
class StoredTransaction:
    """A deposit or withdrawal kept for dispute lookups."""

    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Decimal
    status: DisputeStatus = DisputeStatus.NORMAL

    @classmethod
    def from_transaction(cls, transaction: FundsTransaction) -> "StoredTransaction":
        return cls(
            transaction_type=transaction.transaction_type,
            client_id=transaction.client_id,
            transaction_id=transaction.transaction_id,
            amount=transaction.amount,
        )

    def __repr__(self) -> str:
        return (
            f"StoredTransaction({self.transaction_type.value}, client={self.client_id}, "
            f"tx={self.transaction_id}, amount={self.amount}, status={self.status.value})"
        )


@dataclass
class ClientAccount:
    client_id: int
    available: Decimal = ZERO
    held: Decimal = ZERO
    locked: bool = False

    @property
    def total(self) -> Decimal:
        return self.available + self.held

    def credit(self, amount: Decimal) -> None:
        self.available += amount

    def debit(self, amount: Decimal) -> None:
        self.available -= amount

    def hold(self, amount: Decimal) -> None:
        self.available -= amount
        self.held += amount

    def release_hold(self, amount: Decimal) -> None:
        self.held -= amount
        self.available += amount

    def charge_back(self, amount: Decimal) -> None:
        self.held -= amount
        self.locked = True


@dataclass
class ProcessingStats:
    """Counters for a single run."""

    processed: int = 0
    rejected: int = 0
    rejections_by_kind: Counter = field(default_factory=Counter)

    def record_success(self) -> None:
        self.processed += 1

    def record_rejection(self, kind_name: str) -> None:
        self.rejected += 1
        self.rejections_by_kind[kind_name] += 1

    def summary(self) -> str:
        breakdown = ", ".join(f"{name}: {count}" for name, count in sorted(self.rejections_by_kind.items()))
        line = f"Processed: {self.processed}, Rejected: {self.rejected}"
        if breakdown:
            line += f" ({breakdown})"
        return line
