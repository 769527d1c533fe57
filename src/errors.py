from models import Transaction


class ProcessingError(Exception):
    """
    Base class for per-transaction rejections.
    The engine skips the offending transaction and carries on with the next one.
    """

    reason = "rejected"

    def __init__(self, transaction: Transaction, detail: str = ""):
        self.transaction = transaction
        self.detail = detail
        message = f"{transaction}: {self.reason}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class InvalidAmount(ProcessingError):
    reason = "invalid amount"


class DuplicateTransaction(ProcessingError):
    reason = "transaction id already processed"


class UnknownAccount(ProcessingError):
    reason = "account does not exist"


class AccountLocked(ProcessingError):
    reason = "account is locked"


class InsufficientFunds(ProcessingError):
    reason = "insufficient funds"


class UnknownTransaction(ProcessingError):
    reason = "referenced transaction not found"


class ClientMismatch(ProcessingError):
    reason = "referenced transaction belongs to another client"


class AlreadyDisputed(ProcessingError):
    reason = "transaction already disputed"


class NotDisputed(ProcessingError):
    reason = "transaction is not disputed"


class TransactionSettled(ProcessingError):
    reason = "transaction was charged back"


class InvariantViolation(ProcessingError):
    """A computed balance would go negative. Indicates a bookkeeping defect."""

    reason = "balance invariant violated"
