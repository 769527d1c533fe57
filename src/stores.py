from typing import Dict, Optional

from models import ClientAccount, StoredTransaction


class AccountStore:
    """Client accounts keyed by client id. Accounts are created on first use."""

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}

    def get(self, client_id: int) -> Optional[ClientAccount]:
        """Retrieve account by client ID, or None if it was never created."""
        return self._accounts.get(client_id)

    def get_or_create(self, client_id: int) -> ClientAccount:
        """Get existing account or create new one."""
        if client_id not in self._accounts:
            self._accounts[client_id] = ClientAccount(client_id=client_id)
        return self._accounts[client_id]

    def all(self) -> Dict[int, ClientAccount]:
        """Return all accounts (for final output)."""
        return dict(self._accounts)

    def __len__(self) -> int:
        return len(self._accounts)


class TransactionStore:
    """
    Deposits and withdrawals keyed by transaction ID, kept for dispute lookups.
    Only looked up, never iterated.
    """

    def __init__(self):
        self._transactions: Dict[int, StoredTransaction] = {}

    def put(self, transaction_id: int, record: StoredTransaction) -> None:
        """Store transaction for future dispute lookups, replacing any previous record."""
        self._transactions[transaction_id] = record

    def get(self, transaction_id: int) -> Optional[StoredTransaction]:
        """Retrieve stored transaction by ID."""
        return self._transactions.get(transaction_id)

    def set_disputed(self, transaction_id: int, disputed: bool) -> None:
        """Set or clear the dispute flag. Raises KeyError for unknown IDs."""
        self._transactions[transaction_id].disputed = disputed

    def mark_charged_back(self, transaction_id: int) -> None:
        """Close the dispute for good. Raises KeyError for unknown IDs."""
        record = self._transactions[transaction_id]
        record.disputed = False
        record.charged_back = True

    def __contains__(self, transaction_id: int) -> bool:
        return transaction_id in self._transactions

    def __len__(self) -> int:
        return len(self._transactions)
