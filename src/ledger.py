from typing import Dict, Optional

from models import ClientAccount, FundsTransaction, StoredTransaction


class Ledger:
    """
    In-memory state for one run.
    Stores client accounts and the deposit/withdrawal history used for dispute lookups.
    Every entry is reachable from its client_id alone, so the ledger can be split per client.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}
        self._transactions: Dict[int, StoredTransaction] = {}

    def get_account(self, client_id: int) -> Optional[ClientAccount]:
        """Existing account, or None if the client has never been seen."""
        return self._accounts.get(client_id)

    def get_or_create_account(self, client_id: int) -> ClientAccount:
        """Get existing account or create new one."""
        if client_id not in self._accounts:
            self._accounts[client_id] = ClientAccount(client_id=client_id)
        return self._accounts[client_id]

    def has_transaction(self, transaction_id: int) -> bool:
        return transaction_id in self._transactions

    def store_transaction(self, transaction: FundsTransaction) -> StoredTransaction:
        """Retain a deposit or withdrawal. Transaction ids are never overwritten."""
        if transaction.transaction_id in self._transactions:
            raise KeyError(f"transaction {transaction.transaction_id} already stored")
        stored = StoredTransaction.from_transaction(transaction)
        self._transactions[transaction.transaction_id] = stored
        return stored

    def get_transaction(self, transaction_id: int) -> Optional[StoredTransaction]:
        """Retrieve stored transaction by ID."""
        return self._transactions.get(transaction_id)

    def get_all_accounts(self) -> Dict[int, ClientAccount]:
        """Return all accounts (for final output)."""
        return dict(self._accounts)

    def __len__(self) -> int:
        return len(self._accounts)
