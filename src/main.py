import csv
import logging
import os
import sys

from csv_io import write_accounts
from payments_engine import PaymentsEngine

logger = logging.getLogger(__name__)

INPUT_EXTENSION = ".csv"


def main(argv=None) -> int:
    logging.basicConfig(
        level=logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1:
        print("Usage: payments-engine <input.csv>", file=sys.stderr)
        return 1

    filepath = args[0]
    if os.path.splitext(filepath)[1].lower() != INPUT_EXTENSION:
        print(f"Error: expected a {INPUT_EXTENSION} file, got {filepath}", file=sys.stderr)
        return 1

    engine = PaymentsEngine()
    try:
        accounts = engine.process_file(filepath)
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        logger.error(f"Unable to read {filepath}: {e}")
        return 1

    try:
        write_accounts(accounts, sys.stdout)
        sys.stdout.flush()
    except OSError as e:
        logger.error(f"Unable to write output: {e}")
        return 1

    # Print final processing report to stderr
    print(
        f"Processed: {engine.stats.processed}, "
        f"Failed: {engine.stats.failed}",
        file=sys.stderr
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
