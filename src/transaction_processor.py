from decimal import Context, Decimal, DivisionByZero, Inexact, InvalidOperation, Overflow, Rounded, localcontext

from errors import (
    AccountLocked,
    AlreadyDisputed,
    ClientMismatch,
    DuplicateTransaction,
    InsufficientFunds,
    InvalidAmount,
    InvariantViolation,
    NotDisputed,
    TransactionSettled,
    UnknownAccount,
    UnknownTransaction,
)
from models import AccountDelta, ClientAccount, StoredTransaction, Transaction, TransactionType
from stores import AccountStore, TransactionStore

MAX_FRACTIONAL_DIGITS = 4
FOUR_PLACES = Decimal("0.0001")
ZERO = Decimal("0")

# Largest total an account may reach: 24 integer + 4 fractional digits, so every
# balance fits the 28-digit precision of the default decimal context.
MAX_BALANCE = Decimal("999999999999999999999999.9999")

# Balance arithmetic must be exact; any rounding is a bookkeeping defect
EXACT_CONTEXT = Context(prec=28, traps=[InvalidOperation, DivisionByZero, Overflow, Inexact, Rounded])
# Used only to detect amounts with extra decimal places, rounding is expected there
AMOUNT_CONTEXT = Context(prec=28)


class TransactionProcessor:
    """
    Turns a transaction into an AccountDelta describing the account's post-state.
    Reads both stores but never mutates them; the engine applies the result.
    Every rejection is raised as a ProcessingError subclass.
    """

    def process(self, transaction: Transaction, accounts: AccountStore, transactions: TransactionStore) -> AccountDelta:
        try:
            with localcontext(EXACT_CONTEXT):
                return self._dispatch(transaction, accounts, transactions)
        except (Inexact, Rounded) as e:
            raise InvariantViolation(transaction, "balance arithmetic would round") from e

    def _dispatch(self, transaction: Transaction, accounts: AccountStore, transactions: TransactionStore) -> AccountDelta:
        match transaction.transaction_type:
            case TransactionType.DEPOSIT:
                return self._handle_deposit(transaction, accounts, transactions)
            case TransactionType.WITHDRAWAL:
                return self._handle_withdrawal(transaction, accounts, transactions)
            case TransactionType.DISPUTE:
                return self._handle_dispute(transaction, accounts, transactions)
            case TransactionType.RESOLVE:
                return self._handle_resolve(transaction, accounts, transactions)
            case TransactionType.CHARGEBACK:
                return self._handle_chargeback(transaction, accounts, transactions)
            case _:
                raise ValueError(f"Unhandled transaction type: {transaction.transaction_type}")

    def _handle_deposit(self, transaction: Transaction, accounts: AccountStore, transactions: TransactionStore) -> AccountDelta:
        amount = self._validate_new_transaction(transaction, transactions)

        # First deposit for a client opens the account with zero balances
        account = accounts.get(transaction.client_id) or ClientAccount(client_id=transaction.client_id)
        if account.locked:
            raise AccountLocked(transaction)
        if amount > MAX_BALANCE - account.total:
            raise InvalidAmount(transaction, f"total would exceed {MAX_BALANCE}")

        return AccountDelta(available=account.available + amount)

    def _handle_withdrawal(self, transaction: Transaction, accounts: AccountStore, transactions: TransactionStore) -> AccountDelta:
        amount = self._validate_new_transaction(transaction, transactions)

        account = self._existing_account(transaction, accounts)
        if account.locked:
            raise AccountLocked(transaction)
        if amount > account.available:
            raise InsufficientFunds(transaction, f"available {account.available}, requested {amount}")

        return AccountDelta(available=account.available - amount)

    def _handle_dispute(self, transaction: Transaction, accounts: AccountStore, transactions: TransactionStore) -> AccountDelta:
        original = self._referenced_transaction(transaction, transactions)

        if original.charged_back:
            raise TransactionSettled(transaction)
        if original.disputed:
            raise AlreadyDisputed(transaction)

        # Withdrawals are disputed the same way as deposits: the amount moves from available to held
        account = self._existing_account(transaction, accounts)
        available = account.available - original.amount
        if available < ZERO:
            raise InvariantViolation(transaction, f"disputing {original.transaction_type.value} would make available {available}")

        return AccountDelta(available=available, held=account.held + original.amount)

    def _handle_resolve(self, transaction: Transaction, accounts: AccountStore, transactions: TransactionStore) -> AccountDelta:
        original = self._disputed_transaction(transaction, transactions)

        account = self._existing_account(transaction, accounts)
        held = account.held - original.amount
        if held < ZERO:
            raise InvariantViolation(transaction, f"held would become {held}")

        return AccountDelta(available=account.available + original.amount, held=held)

    def _handle_chargeback(self, transaction: Transaction, accounts: AccountStore, transactions: TransactionStore) -> AccountDelta:
        original = self._disputed_transaction(transaction, transactions)

        account = self._existing_account(transaction, accounts)
        held = account.held - original.amount
        if held < ZERO:
            raise InvariantViolation(transaction, f"held would become {held}")

        return AccountDelta(held=held, locked=True)

    def _validate_new_transaction(self, transaction: Transaction, transactions: TransactionStore) -> Decimal:
        """Checks shared by deposits and withdrawals. Returns the validated amount."""
        amount = transaction.amount
        if amount is None or not amount.is_finite() or amount <= ZERO:
            raise InvalidAmount(transaction, f"got {amount}")
        if amount > MAX_BALANCE:
            raise InvalidAmount(transaction, f"exceeds {MAX_BALANCE}")
        if amount.quantize(FOUR_PLACES, context=AMOUNT_CONTEXT) != amount:
            raise InvalidAmount(transaction, f"more than {MAX_FRACTIONAL_DIGITS} decimal places")

        if transaction.transaction_id in transactions:
            raise DuplicateTransaction(transaction)

        return amount

    def _existing_account(self, transaction: Transaction, accounts: AccountStore) -> ClientAccount:
        account = accounts.get(transaction.client_id)
        if account is None:
            raise UnknownAccount(transaction)
        return account

    def _referenced_transaction(self, transaction: Transaction, transactions: TransactionStore) -> StoredTransaction:
        original = transactions.get(transaction.transaction_id)

        if original is None:
            raise UnknownTransaction(transaction)

        if original.client_id != transaction.client_id:
            raise ClientMismatch(transaction, f"owned by client {original.client_id}")

        return original

    def _disputed_transaction(self, transaction: Transaction, transactions: TransactionStore) -> StoredTransaction:
        original = self._referenced_transaction(transaction, transactions)

        if not original.disputed:
            raise NotDisputed(transaction)

        return original
