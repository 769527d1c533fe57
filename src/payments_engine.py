import logging
from typing import Dict, Iterable, Optional

from csv_io import read_transactions
from errors import InvariantViolation, ProcessingError
from models import AccountDelta, ClientAccount, ProcessingStats, StoredTransaction, Transaction, TransactionType
from stores import AccountStore, TransactionStore
from transaction_processor import TransactionProcessor

logger = logging.getLogger(__name__)


class PaymentsEngine:
    """
    Replays transactions in input order against the account store.

    Each transaction goes through the processor, which produces an AccountDelta
    or rejects it. Accepted deltas are applied to the client's account, then the
    transaction store is updated so later disputes can reference the record.
    Rejected transactions leave both stores untouched.

    Processing is sequential: a dispute must see the deposit it refers to, so
    transactions for the same client can never be reordered.
    """

    def __init__(self, accounts: Optional[AccountStore] = None, transactions: Optional[TransactionStore] = None):
        self._accounts = accounts if accounts is not None else AccountStore()
        self._transactions = transactions if transactions is not None else TransactionStore()
        self._processor = TransactionProcessor()
        self._stats = ProcessingStats()

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def process_file(self, filepath: str) -> Dict[int, ClientAccount]:
        """Process CSV file and return final account states."""
        logger.info(f"Processing transactions from {filepath}")
        with open(filepath, "r", encoding="utf-8-sig", newline="") as f:
            return self.run(read_transactions(f))

    def run(self, transactions: Iterable[Transaction]) -> Dict[int, ClientAccount]:
        """Process every transaction in order and return final account states."""
        for transaction in transactions:
            self.process_transaction(transaction)

        logger.info(f"Processing complete: {self._stats.processed} processed, {self._stats.failed} failed")
        return self._accounts.all()

    def process_transaction(self, transaction: Transaction) -> bool:
        """Process a single transaction. Returns True if it was applied."""
        try:
            delta = self._processor.process(transaction, self._accounts, self._transactions)
        except InvariantViolation as e:
            logger.error(f"Skipping transaction: {e}")
            self._stats.record_failure()
            return False
        except ProcessingError as e:
            logger.info(f"Skipping transaction: {e}")
            self._stats.record_failure()
            return False

        self._apply(transaction, delta)
        self._stats.record_success()
        return True

    def _apply(self, transaction: Transaction, delta: AccountDelta) -> None:
        self._accounts.get_or_create(transaction.client_id).apply(delta)

        match transaction.transaction_type:
            case TransactionType.DEPOSIT | TransactionType.WITHDRAWAL:
                self._transactions.put(
                    transaction.transaction_id,
                    StoredTransaction(
                        transaction_type=transaction.transaction_type,
                        client_id=transaction.client_id,
                        amount=transaction.amount,
                    ),
                )
            case TransactionType.DISPUTE:
                self._transactions.set_disputed(transaction.transaction_id, True)
            case TransactionType.RESOLVE:
                self._transactions.set_disputed(transaction.transaction_id, False)
            case TransactionType.CHARGEBACK:
                self._transactions.mark_charged_back(transaction.transaction_id)
