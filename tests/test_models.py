import sys
import os
from dataclasses import FrozenInstanceError
from decimal import Decimal

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from models import Transaction, TransactionType, ClientAccount, AccountDelta, ProcessingStats


class TestTransaction:
    def test_create_deposit(self):
        transaction = Transaction(
            transaction_type=TransactionType.DEPOSIT,
            client_id=1,
            transaction_id=1,
            amount=Decimal("100.0"),
        )
        assert transaction.transaction_type == TransactionType.DEPOSIT
        assert transaction.client_id == 1
        assert transaction.transaction_id == 1
        assert transaction.amount == Decimal("100.0")

    def test_create_dispute_no_amount(self):
        transaction = Transaction(
            transaction_type=TransactionType.DISPUTE,
            client_id=1,
            transaction_id=1,
        )
        assert transaction.amount is None

    def test_is_immutable(self):
        transaction = Transaction(TransactionType.DEPOSIT, client_id=1, transaction_id=1, amount=Decimal("1"))
        with pytest.raises(FrozenInstanceError):
            transaction.amount = Decimal("2")


class TestClientAccount:
    def test_default_values(self):
        account = ClientAccount(client_id=1)
        assert account.available == Decimal("0")
        assert account.held == Decimal("0")
        assert account.locked is False

    def test_total_property(self):
        account = ClientAccount(
            client_id=1,
            available=Decimal("100"),
            held=Decimal("50"),
        )
        assert account.total == Decimal("150")

    def test_apply_assigns_set_fields(self):
        account = ClientAccount(client_id=1, available=Decimal("10"), held=Decimal("5"))
        account.apply(AccountDelta(available=Decimal("3"), held=Decimal("12")))

        assert account.available == Decimal("3")
        assert account.held == Decimal("12")
        assert account.total == Decimal("15")
        assert account.locked is False

    def test_apply_leaves_unset_fields(self):
        account = ClientAccount(client_id=1, available=Decimal("10"), held=Decimal("5"))
        account.apply(AccountDelta(locked=True))

        assert account.available == Decimal("10")
        assert account.held == Decimal("5")
        assert account.locked is True

    def test_apply_empty_delta(self):
        account = ClientAccount(client_id=1, available=Decimal("10"))
        account.apply(AccountDelta())
        assert account == ClientAccount(client_id=1, available=Decimal("10"))


class TestProcessingStats:
    def test_counters(self):
        stats = ProcessingStats()
        stats.record_success()
        stats.record_success()
        stats.record_failure()
        assert stats.processed == 2
        assert stats.failed == 1
