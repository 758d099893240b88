import logging
from typing import Optional

from errors import TransactionError
from ledger import Ledger
from models import (
    Chargeback,
    Deposit,
    Dispute,
    DisputeAction,
    Resolve,
    StoredTransaction,
    Transaction,
    TransactionType,
    Withdrawal,
)
from validator import TransactionValidator

logger = logging.getLogger(__name__)


class TransactionProcessor:
    """
    Processes transactions against the ledger.
    Each transaction is validated in full before anything is mutated, so a rejected
    transaction leaves the ledger untouched.
    """

    def __init__(self, ledger: Ledger):
        self._ledger = ledger
        self._validator = TransactionValidator(ledger)

    def process_transaction(self, transaction: Transaction) -> Optional[TransactionError]:
        """
        Process a single transaction.

        Returns:
            None when the transaction was applied, otherwise the reason it was rejected.
        """
        error = self._validator.validate(transaction)
        if error is not None:
            return error

        match transaction:
            case Deposit():
                self._handle_deposit(transaction)
            case Withdrawal():
                self._handle_withdrawal(transaction)
            case Dispute():
                self._handle_dispute(transaction)
            case Resolve():
                self._handle_resolve(transaction)
            case Chargeback():
                self._handle_chargeback(transaction)
        return None

    def _handle_deposit(self, transaction: Deposit) -> None:
        account = self._ledger.get_or_create_account(transaction.client_id)
        account.credit(transaction.amount)
        self._ledger.store_transaction(transaction)

    def _handle_withdrawal(self, transaction: Withdrawal) -> None:
        # validated: the account exists and has enough available funds
        account = self._ledger.get_account(transaction.client_id)
        account.debit(transaction.amount)
        self._ledger.store_transaction(transaction)

    def _handle_dispute(self, transaction: Dispute) -> None:
        original = self._advance(transaction)
        if original.transaction_type == TransactionType.WITHDRAWAL:
            logger.debug(f"Dispute for tx {original.transaction_id}: disputing a withdrawal")
        self._ledger.get_account(original.client_id).hold(original.amount)

    def _handle_resolve(self, transaction: Resolve) -> None:
        original = self._advance(transaction)
        self._ledger.get_account(original.client_id).release_hold(original.amount)

    def _handle_chargeback(self, transaction: Chargeback) -> None:
        original = self._advance(transaction)
        self._ledger.get_account(original.client_id).charge_back(original.amount)
        logger.info(f"Chargeback for tx {original.transaction_id}: account {original.client_id} locked")

    def _advance(self, transaction: DisputeAction) -> StoredTransaction:
        """Move the referenced transaction to its next dispute status."""
        original = self._ledger.get_transaction(transaction.transaction_id)
        original.status = original.status.next_status(transaction.transaction_type)
        return original
