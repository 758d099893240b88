from typing import Optional

from errors import TransactionError, TransactionErrorKind
from ledger import Ledger
from models import (
    Chargeback,
    Deposit,
    Dispute,
    DisputeAction,
    FundsTransaction,
    Resolve,
    Transaction,
    Withdrawal,
)

INVALID_TRANSITION_KINDS = {
    Dispute: TransactionErrorKind.INVALID_DISPUTE,
    Resolve: TransactionErrorKind.INVALID_RESOLVE,
    Chargeback: TransactionErrorKind.INVALID_CHARGEBACK,
}


class TransactionValidator:
    """
    Decides whether a parsed transaction may be applied to the ledger.
    Never mutates state. Structural checks happen earlier, in csv_io.parse_row.
    """

    def __init__(self, ledger: Ledger):
        self._ledger = ledger

    def validate(self, transaction: Transaction) -> Optional[TransactionError]:
        """
        Returns:
            None if the transaction is admissible, otherwise the first failed check.
        """
        match transaction:
            case Deposit() | Withdrawal():
                return self._validate_funds(transaction)
            case Dispute() | Resolve() | Chargeback():
                return self._validate_dispute_action(transaction)
            case _:
                return TransactionError(
                    TransactionErrorKind.INVALID_TRANSACTION,
                    detail=f"unsupported transaction {transaction!r}",
                )

    def _validate_funds(self, transaction: FundsTransaction) -> Optional[TransactionError]:
        client_id = transaction.client_id
        transaction_id = transaction.transaction_id

        if transaction.amount <= 0:
            return TransactionError(
                TransactionErrorKind.NON_POSITIVE_AMOUNT, client_id, transaction_id, amount=transaction.amount
            )

        account = self._ledger.get_account(client_id)
        if account is not None and account.locked:
            return TransactionError(TransactionErrorKind.ACCOUNT_LOCKED, client_id, transaction_id)

        if self._ledger.has_transaction(transaction_id):
            return TransactionError(TransactionErrorKind.DUPLICATE_TRANSACTION, client_id, transaction_id)

        if isinstance(transaction, Withdrawal):
            available = account.available if account is not None else 0
            if available < transaction.amount:
                return TransactionError(
                    TransactionErrorKind.INSUFFICIENT_FUNDS, client_id, transaction_id, amount=transaction.amount
                )

        return None

    def _validate_dispute_action(self, transaction: DisputeAction) -> Optional[TransactionError]:
        client_id = transaction.client_id
        transaction_id = transaction.transaction_id

        original = self._ledger.get_transaction(transaction_id)
        if original is None:
            return TransactionError(TransactionErrorKind.NON_EXISTING_DISPUTE, client_id, transaction_id)

        if original.client_id != client_id:
            return TransactionError(
                TransactionErrorKind.CLIENT_MISMATCH, client_id, transaction_id, owner_id=original.client_id
            )

        if original.status.next_status(transaction.transaction_type) is None:
            return TransactionError(
                INVALID_TRANSITION_KINDS[type(transaction)],
                client_id,
                transaction_id,
                detail=f"transaction is {original.status.value}",
            )

        return None
