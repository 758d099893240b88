import csv
import logging
import re
from decimal import InvalidOperation
from typing import Dict, Iterable, Iterator, Mapping, Optional, TextIO, Union

from errors import InputReadError, RowFormatError
from models import (
    MAX_CLIENT_ID,
    MAX_TRANSACTION_ID,
    TRANSACTION_CLASSES,
    ClientAccount,
    Transaction,
    TransactionType,
    format_amount,
    parse_amount,
)

logger = logging.getLogger(__name__)

OUTPUT_FIELDS = ["client", "available", "held", "total", "locked"]

ID_PATTERN = re.compile(r"[0-9]+")

Row = Dict[Optional[str], Optional[str]]


def iter_rows(stream: TextIO) -> Iterator[Union[Row, RowFormatError]]:
    """
    Yield raw CSV rows from an open stream, one at a time.
    A line the csv module can't split (e.g. an oversized field) is yielded as a
    RowFormatError and reading carries on with the next line.
    """
    reader = csv.DictReader(stream)
    while True:
        try:
            row = next(reader)
        except StopIteration:
            return
        except csv.Error as e:
            yield RowFormatError(f"unreadable csv line {reader.line_num}: {e}")
            continue
        yield row


def read_rows(filepath: str) -> Iterator[Union[Row, RowFormatError]]:
    """
    Lazily read raw rows from a UTF-8 CSV file (a leading byte order mark is skipped).
    Undecodable bytes become U+FFFD so the row fails parsing on its own.
    Failure to open or read the file is raised as InputReadError.
    """
    try:
        with open(filepath, "r", encoding="utf-8-sig", errors="replace", newline="") as f:
            yield from iter_rows(f)
    except OSError as e:
        raise InputReadError(f"failed to read {filepath}: {e}") from e


def _parse_id(value: str, maximum: int, name: str) -> int:
    if not ID_PATTERN.fullmatch(value):
        raise ValueError(f"{name} {value!r} is not a plain unsigned integer")
    parsed = int(value)
    if not 0 <= parsed <= maximum:
        raise ValueError(f"{name} {parsed} out of range 0..{maximum}")
    return parsed


def parse_row(row: Row) -> Transaction:
    """
    Parse a raw CSV row into a typed transaction.

    Raises:
        RowFormatError: the row is missing fields, has extra fields, has values that
            don't parse, or carries/omits an amount contrary to its type.
    """
    if None in row:
        raise RowFormatError(f"unexpected extra fields {row[None]}", row)

    normalized = {key.strip(): (value or "").strip() for key, value in row.items()}

    client_id = transaction_id = None
    try:
        transaction_type = TransactionType(normalized["type"])
        client_id = _parse_id(normalized["client"], MAX_CLIENT_ID, "client")
        transaction_id = _parse_id(normalized["tx"], MAX_TRANSACTION_ID, "tx")
    except KeyError as e:
        raise RowFormatError(f"missing field {e}", row, client_id, transaction_id) from e
    except ValueError as e:
        raise RowFormatError(str(e), row, client_id, transaction_id) from e

    transaction_class = TRANSACTION_CLASSES[transaction_type]
    amount_str = normalized.get("amount", "")

    if not transaction_type.has_amount:
        if amount_str:
            raise RowFormatError(
                f"{transaction_type.value} must not carry an amount", row, client_id, transaction_id
            )
        return transaction_class(client_id=client_id, transaction_id=transaction_id)

    if not amount_str:
        raise RowFormatError(f"{transaction_type.value} requires an amount", row, client_id, transaction_id)
    try:
        amount = parse_amount(amount_str)
    except (ValueError, InvalidOperation) as e:
        raise RowFormatError(f"invalid amount {amount_str!r}", row, client_id, transaction_id) from e

    return transaction_class(client_id=client_id, transaction_id=transaction_id, amount=amount)


def write_accounts(accounts: Mapping[int, ClientAccount], stream: TextIO) -> None:
    """Write one CSV record per account, ordered by client id."""
    logger.info(f"Writing {len(accounts)} accounts")
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(OUTPUT_FIELDS)
    for client_id in sorted(accounts):
        writer.writerow(account_record(accounts[client_id]))


def account_record(account: ClientAccount) -> Iterable[str]:
    return [
        str(account.client_id),
        format_amount(account.available),
        format_amount(account.held),
        format_amount(account.total),
        str(account.locked).lower(),
    ]
