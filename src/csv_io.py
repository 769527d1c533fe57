import csv
import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterator, Optional, TextIO

from models import ClientAccount, Transaction, TransactionType

logger = logging.getLogger(__name__)

MAX_CLIENT_ID = 2**16 - 1
MAX_TRANSACTION_ID = 2**32 - 1
FOUR_PLACES = Decimal("0.0001")
OUTPUT_HEADER = ["client", "available", "held", "total", "locked"]


def read_transactions(stream: TextIO) -> Iterator[Transaction]:
    """
    Lazily parse CSV rows into Transactions.
    Rows that can't be interpreted are logged and skipped. csv.Error from a
    broken file propagates to the caller.
    """
    reader = csv.DictReader(stream)
    for row in reader:
        transaction = parse_csv_row(row)
        if transaction:
            yield transaction


def parse_csv_row(row: Dict[Optional[str], Optional[str]]) -> Optional[Transaction]:
    """Parse CSV row into Transaction."""
    try:
        # Missing trailing columns come back as None, extra ones under a None key
        normalized = {k.strip(): (v or "").strip() for k, v in row.items() if isinstance(k, str)}

        transaction_type = TransactionType(normalized["type"].lower())
        client_id = _parse_id(normalized["client"], MAX_CLIENT_ID)
        transaction_id = _parse_id(normalized["tx"], MAX_TRANSACTION_ID)

        amount = None
        amount_str = normalized.get("amount", "")
        if amount_str:
            amount = Decimal(amount_str)

        return Transaction(
            transaction_type=transaction_type,
            client_id=client_id,
            transaction_id=transaction_id,
            amount=amount,
        )
    except (KeyError, ValueError, InvalidOperation) as e:
        logger.warning(f"Failed to parse row {row}: {e!r}")
        return None


def _parse_id(value: str, maximum: int) -> int:
    if not (value.isascii() and value.isdigit()):
        raise ValueError(f"id {value!r} is not an unsigned integer")
    parsed = int(value)
    if parsed > maximum:
        raise ValueError(f"id {parsed} out of range 0..{maximum}")
    return parsed


def format_amount(value: Decimal) -> str:
    """Format decimal with exactly 4 decimal places."""
    return f"{value.quantize(FOUR_PLACES):f}"


def write_accounts(accounts: Dict[int, ClientAccount], stream: TextIO) -> None:
    """Write one row per account, ordered by client ID."""
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(OUTPUT_HEADER)
    for client_id in sorted(accounts.keys()):
        account = accounts[client_id]
        writer.writerow([
            client_id,
            format_amount(account.available),
            format_amount(account.held),
            format_amount(account.total),
            str(account.locked).lower(),
        ])
