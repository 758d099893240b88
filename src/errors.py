from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional


class TransactionErrorKind(Enum):
    INVALID_TRANSACTION = "invalid_transaction"
    DUPLICATE_TRANSACTION = "duplicate_transaction"
    ACCOUNT_LOCKED = "account_locked"
    NON_POSITIVE_AMOUNT = "non_positive_amount"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    NON_EXISTING_DISPUTE = "non_existing_dispute"
    CLIENT_MISMATCH = "client_mismatch"
    INVALID_DISPUTE = "invalid_dispute"
    INVALID_RESOLVE = "invalid_resolve"
    INVALID_CHARGEBACK = "invalid_chargeback"

    @property
    def is_invalid_transition(self) -> bool:
        return self in (
            TransactionErrorKind.INVALID_DISPUTE,
            TransactionErrorKind.INVALID_RESOLVE,
            TransactionErrorKind.INVALID_CHARGEBACK,
        )


@dataclass(frozen=True)
class TransactionError:
    """
    A rejected row. Returned to the caller, never raised.
    `owner_id` is the client that owns the referenced transaction (client mismatch only).
    """

    kind: TransactionErrorKind
    client_id: Optional[int] = None
    transaction_id: Optional[int] = None
    amount: Optional[Decimal] = None
    owner_id: Optional[int] = None
    detail: Optional[str] = None

    def __str__(self) -> str:
        client, tx = self.client_id, self.transaction_id
        match self.kind:
            case TransactionErrorKind.INVALID_TRANSACTION:
                message = f"transaction '{tx}' formatted incorrectly" if tx is not None else "row formatted incorrectly"
            case TransactionErrorKind.DUPLICATE_TRANSACTION:
                message = f"transaction '{tx}' already exists in the transaction engine"
            case TransactionErrorKind.ACCOUNT_LOCKED:
                message = f"account '{client}' is locked"
            case TransactionErrorKind.NON_POSITIVE_AMOUNT:
                message = (
                    f"client '{client}' tried to deposit/withdraw a non-positive amount "
                    f"'{self.amount}' in transaction '{tx}'"
                )
            case TransactionErrorKind.INSUFFICIENT_FUNDS:
                message = f"client '{client}' has insufficient funds for transaction '{tx}'"
            case TransactionErrorKind.NON_EXISTING_DISPUTE:
                message = f"client '{client}' referred to transaction '{tx}' which doesn't exist"
            case TransactionErrorKind.CLIENT_MISMATCH:
                message = (
                    f"client '{client}' referred to transaction '{tx}' "
                    f"which belongs to client '{self.owner_id}'"
                )
            case TransactionErrorKind.INVALID_DISPUTE:
                message = f"client '{client}' can't dispute transaction '{tx}'"
            case TransactionErrorKind.INVALID_RESOLVE:
                message = f"client '{client}' can't resolve transaction '{tx}'"
            case TransactionErrorKind.INVALID_CHARGEBACK:
                message = f"client '{client}' can't chargeback transaction '{tx}'"
            case _:
                message = self.kind.value
        if self.detail:
            message = f"{message}: {self.detail}"
        return message


class RowFormatError(ValueError):
    """Raised by the decoder when a row cannot be turned into a typed transaction."""

    def __init__(
        self,
        message: str,
        row=None,
        client_id: Optional[int] = None,
        transaction_id: Optional[int] = None,
    ):
        super().__init__(message)
        self.row = row
        self.client_id = client_id
        self.transaction_id = transaction_id


class InputReadError(Exception):
    """The input source could not be opened or read. Fatal for the run."""
