import csv
import logging
from os import PathLike
from typing import Iterator, Optional, TextIO, Union

from pydantic import ValidationError

from .models import (
    TX_ID_MAX,
    InvalidAmountError,
    LedgerServiceError,
    Transaction,
    TransactionAdapter,
    TransactionKind,
    parse_amount,
)


logger = logging.getLogger(__name__)

_AMOUNT_KINDS = (TransactionKind.DEPOSIT, TransactionKind.WITHDRAWAL)

_ID_MAX_DIGITS = len(str(TX_ID_MAX))


class InvalidTransactionError(LedgerServiceError):
    pass


def _parse_int(name: str, value: Union[str, int, None]) -> int:
    if isinstance(value, int):
        return value
    text = (value or "").strip()
    if not (text.isascii() and text.isdigit()):
        raise InvalidTransactionError(f"Field {name!r} must be a non-negative integer, got {value!r}")
    text = text.lstrip("0") or "0"
    if len(text) > _ID_MAX_DIGITS:
        raise InvalidTransactionError(f"Field {name!r} is out of range")
    return int(text)


def parse_transaction(
    kind: str,
    client: Union[str, int, None],
    tx: Union[str, int, None],
    amount: Optional[str] = None,
) -> Transaction:
    """Build a typed transaction from raw column values.

    The amount is only read for deposits and withdrawals; for the dispute
    family it is ignored whatever it contains.
    """
    try:
        kind = TransactionKind((kind or "").strip().lower())
    except ValueError:
        raise InvalidTransactionError(f"Unknown transaction type {kind!r}")

    payload = {
        "type": kind.value,
        "user": _parse_int("client", client),
        "tx": _parse_int("tx", tx),
    }
    if kind in _AMOUNT_KINDS:
        text = (amount or "").strip()
        if not text:
            raise InvalidTransactionError(f"A {kind.value} requires an amount")
        try:
            payload["amount"] = parse_amount(text)
        except InvalidAmountError as e:
            raise InvalidTransactionError(str(e)) from e

    try:
        return TransactionAdapter.validate_python(payload)
    except ValidationError as e:
        raise InvalidTransactionError(str(e)) from e


def _iter_rows(stream: TextIO) -> Iterator[Transaction]:
    reader = csv.reader(stream, skipinitialspace=True)
    header = next(reader, None)
    if header is None:
        return
    columns = [name.strip().lower() for name in header]

    for row in reader:
        if not any(cell.strip() for cell in row):
            continue
        values = dict(zip(columns, row))
        try:
            yield parse_transaction(
                values.get("type"),
                values.get("client"),
                values.get("tx"),
                values.get("amount"),
            )
        except InvalidTransactionError as e:
            logger.warning("Skipping line %d: %s", reader.line_num, e)


def read_transactions(source: Union[str, PathLike, TextIO]) -> Iterator[Transaction]:
    """Stream transactions from a CSV path or open text file.

    Rows that do not describe a valid transaction are logged and skipped;
    errors from the file itself propagate.
    """
    if hasattr(source, "read"):
        yield from _iter_rows(source)
        return

    with open(source, newline="", encoding="utf-8") as stream:
        yield from _iter_rows(stream)
