import csv
import logging
import sys
from typing import Optional

from .config import get_settings
from .reader import read_transactions
from .service import LedgerService


logger = logging.getLogger("payments")

OUTPUT_COLUMNS = ["client", "available", "held", "total", "locked"]


def write_accounts(service: LedgerService, stream) -> None:
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(OUTPUT_COLUMNS)
    for row in service.snapshot():
        writer.writerow([row.client, row.available, row.held, row.total, str(row.locked).lower()])


def main(argv: Optional[list[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if not args:
        print("usage: payments-engine <transactions.csv>", file=sys.stderr)
        return 2

    settings = get_settings()
    logging.basicConfig(level=settings.log_level)

    service = LedgerService(config=settings.engine_config())
    try:
        count = service.apply_all(read_transactions(args[0]))
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        print(f"error: cannot read {args[0]}: {e}", file=sys.stderr)
        return 1

    logger.info("Applied %d transactions to %d accounts", count, len(service.storage.accounts))
    write_accounts(service, sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
