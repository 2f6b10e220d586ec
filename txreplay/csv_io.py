"""
csv_io.py - Input and output tables

Input format (header row required, whitespace around fields is ignored):

    type,       client, tx, amount
    deposit,    1,      1,  1.0
    withdrawal, 1,      2,  0.5
    dispute,    1,      1,

The amount column may be empty or missing for dispute, resolve and chargeback
rows. A client id of 0 means "unassigned"; each such row receives a fresh
non-zero id from an AccountIdAllocator.

Output format:

    client,available,held,total,locked
    1,0.5,0,0.5,false

Any structural problem in the input raises MalformedRecord before replay
starts. Domain-level problems (unknown references, insufficient funds) are
not detected here.
"""

from __future__ import annotations
from typing import IO, Iterable, Iterator, List, Mapping, Optional, Set, Union
from decimal import Decimal
import csv
import random

from .core import (
    Account, TransactionKind, TransactionRecord,
    ACCOUNT_ID_MAX, AMOUNT_MAX, TX_ID_MAX, UNASSIGNED_ACCOUNT_ID,
    InputError, LedgerError, MalformedRecord,
    format_decimal, to_decimal,
)


INPUT_COLUMNS = ("type", "client", "tx", "amount")
REQUIRED_COLUMNS = ("type", "client", "tx")
OUTPUT_HEADER = ("client", "available", "held", "total", "locked")


# ============================================================================
# ACCOUNT ID FALLBACK
# ============================================================================

class AccountIdAllocator:
    """
    Assigns fresh non-zero account ids to rows whose client id is 0.

    Ids are drawn at random from 1..max_id and never collide with a reserved
    id (every id present in the input) or a previously allocated one.

    Example:
        allocator = AccountIdAllocator(seed=42)
        allocator.reserve([1, 2, 3])
        new_id = allocator.allocate()
    """

    def __init__(self, seed: Optional[int] = None, max_id: int = ACCOUNT_ID_MAX):
        self.max_id = max_id
        self._rng = random.Random(seed)
        self._used: Set[int] = set()

    def reserve(self, ids: Iterable[int]) -> None:
        """Mark ids as taken."""
        self._used.update(i for i in ids if i != UNASSIGNED_ACCOUNT_ID)

    def allocate(self) -> int:
        """
        Return a new unique non-zero id.

        Raises:
            LedgerError: If every id in 1..max_id is taken
        """
        if len(self._used) >= self.max_id:
            raise LedgerError(f"No free account ids left in 1..{self.max_id}")
        while True:
            candidate = self._rng.randint(1, self.max_id)
            if candidate not in self._used:
                self._used.add(candidate)
                return candidate


# ============================================================================
# INPUT
# ============================================================================

def _read_rows(reader) -> Iterator[List[str]]:
    """Yield raw rows, turning csv module errors into MalformedRecord."""
    try:
        yield from reader
    except csv.Error as e:
        raise MalformedRecord(str(e), reader.line_num) from e


def _parse_id(value: str, field: str, max_value: int, line: int) -> int:
    # int() also accepts "1_000" and non-ASCII digits.
    if "_" in value or not value.isascii():
        raise MalformedRecord(f"{field} must be an integer, got {value!r}", line)
    try:
        parsed = int(value)
    except ValueError:
        raise MalformedRecord(f"{field} must be an integer, got {value!r}", line) from None
    if parsed < 0 or parsed > max_value:
        raise MalformedRecord(f"{field} must be in 0..{max_value}, got {parsed}", line)
    return parsed


def _parse_amount(value: str, line: int) -> Decimal:
    if "_" in value or not value.isascii():
        raise MalformedRecord(f"amount must be a number, got {value!r}", line)
    try:
        amount = to_decimal(value)
    except ValueError:
        raise MalformedRecord(f"amount must be a number, got {value!r}", line) from None
    if amount.is_nan() or amount.is_infinite() or amount < 0:
        raise MalformedRecord(f"amount must be finite and non-negative, got {value!r}", line)
    if amount > AMOUNT_MAX:
        raise MalformedRecord(f"amount must be at most {AMOUNT_MAX}, got {value!r}", line)
    return amount


def _parse_row(fields: dict, line: int) -> TransactionRecord:
    raw_kind = fields["type"]
    try:
        kind = TransactionKind(raw_kind)
    except ValueError:
        raise MalformedRecord(f"unknown transaction type {raw_kind!r}", line) from None

    account_id = _parse_id(fields["client"], "client", ACCOUNT_ID_MAX, line)
    tx_id = _parse_id(fields["tx"], "tx", TX_ID_MAX, line)

    amount = None
    raw_amount = fields.get("amount", "")
    if raw_amount:
        amount = _parse_amount(raw_amount, line)
        # Dispute-family rows reference an existing amount; their own is dropped.
        if not kind.carries_amount:
            amount = None

    return TransactionRecord(kind, account_id, tx_id, amount)


def parse_records(
    stream: Union[IO[str], Iterable[str]],
    allocator: Optional[AccountIdAllocator] = None,
) -> List[TransactionRecord]:
    """
    Parse an input table into TransactionRecords in file order.

    Args:
        stream: Open text stream or iterable of lines
        allocator: Id allocator for client 0 rows (a fresh unseeded one by default)

    Returns:
        Records with every account id non-zero

    Raises:
        MalformedRecord: On a missing header, unknown column layout, or a row
            that does not parse
    """
    reader = csv.reader(stream)
    rows = _read_rows(reader)
    header = next(rows, None)
    if header is None:
        raise MalformedRecord("input is empty, expected a header row", 1)
    columns = [name.strip().lower() for name in header]
    missing = [name for name in REQUIRED_COLUMNS if name not in columns]
    if missing:
        raise MalformedRecord(f"missing column(s): {', '.join(missing)}", 1)
    unknown = [name for name in columns if name not in INPUT_COLUMNS]
    if unknown:
        raise MalformedRecord(f"unknown column(s): {', '.join(unknown)}", 1)

    records: List[TransactionRecord] = []
    for row in rows:
        line = reader.line_num
        values = [value.strip() for value in row]
        if not any(values):
            continue
        if len(values) > len(columns):
            raise MalformedRecord(f"expected at most {len(columns)} fields, got {len(values)}", line)
        fields = dict(zip(columns, values))
        for name in REQUIRED_COLUMNS:
            if not fields.get(name):
                raise MalformedRecord(f"missing value for {name}", line)
        records.append(_parse_row(fields, line))

    if any(r.account_id == UNASSIGNED_ACCOUNT_ID for r in records):
        allocator = allocator or AccountIdAllocator()
        allocator.reserve(r.account_id for r in records)
        records = [
            r.with_account_id(allocator.allocate()) if r.account_id == UNASSIGNED_ACCOUNT_ID else r
            for r in records
        ]
    return records


def load_records(path: str, allocator: Optional[AccountIdAllocator] = None) -> List[TransactionRecord]:
    """
    Read and parse the input table at path.

    Raises:
        InputError: If the file cannot be read
        MalformedRecord: If its content does not parse
    """
    try:
        with open(path, newline="", encoding="utf-8-sig") as f:
            return parse_records(f, allocator)
    except UnicodeDecodeError as e:
        raise InputError(f"{path} is not valid text: {e.reason}") from e
    except OSError as e:
        raise InputError(f"cannot read {path}: {e.strerror or e}") from e


# ============================================================================
# OUTPUT
# ============================================================================

def account_row(account: Account) -> List[str]:
    """Serialize an account as output table fields."""
    account_id, available, held, total, locked = account.as_row()
    return [
        str(account_id),
        format_decimal(available),
        format_decimal(held),
        format_decimal(total),
        "true" if locked else "false",
    ]


def write_accounts(accounts: Union[Mapping[int, Account], Iterable[Account]], stream: IO[str]) -> None:
    """
    Write the output table, one row per account sorted by id.

    Args:
        accounts: Account store or any iterable of accounts
        stream: Writable text stream
    """
    if isinstance(accounts, Mapping):
        accounts = accounts.values()
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(OUTPUT_HEADER)
    for account in sorted(accounts, key=lambda a: a.id):
        writer.writerow(account_row(account))
    stream.flush()
