"""
txreplay - Transaction Ledger Replay

Replays an ordered table of deposits, withdrawals, disputes, resolves and
chargebacks into the final balance state of every client account.

Usage:
    from txreplay import TransactionRecord, TransactionKind, replay

    records = [
        TransactionRecord(TransactionKind.DEPOSIT, 1, 1, Decimal("10")),
        TransactionRecord(TransactionKind.DEPOSIT, 1, 2, Decimal("2")),
        TransactionRecord(TransactionKind.DISPUTE, 1, 2),
    ]
    accounts = replay(records)
    # accounts[1] -> Account(1: available=10 held=2 total=12)

    # From a CSV file
    from txreplay import load_records, write_accounts
    write_accounts(replay(load_records("transactions.csv")), sys.stdout)
"""

# Core types
from .core import (
    TransactionKind,
    TransactionStatus,
    TransactionRecord,
    Account,
    AccountStore,
    LedgerError,
    InputError,
    MalformedRecord,
    ReplayAlreadyRun,
    ACCOUNT_ID_MAX,
    TX_ID_MAX,
    AMOUNT_MAX,
    UNASSIGNED_ACCOUNT_ID,
    DEFAULT_TOLERANCE,
    format_decimal,
    to_decimal,
)

# Ledger index
from .ledger_index import LedgerIndex

# State machine
from .engine import (
    process,
    find_account,
    handle_deposit,
    handle_withdrawal,
    handle_dispute,
    handle_resolve,
    handle_chargeback,
    DEFAULT_HANDLERS,
    TransactionHandler,
)

# Replay
from .replay import Replayer, replay

# CSV adapters
from .csv_io import (
    AccountIdAllocator,
    parse_records,
    load_records,
    write_accounts,
    account_row,
    OUTPUT_HEADER,
)

__all__ = [
    # Core
    'TransactionKind', 'TransactionStatus', 'TransactionRecord', 'Account', 'AccountStore',
    'LedgerError', 'InputError', 'MalformedRecord', 'ReplayAlreadyRun',
    'ACCOUNT_ID_MAX', 'TX_ID_MAX', 'AMOUNT_MAX', 'UNASSIGNED_ACCOUNT_ID', 'DEFAULT_TOLERANCE',
    'format_decimal', 'to_decimal',
    # Index
    'LedgerIndex',
    # Engine
    'process', 'find_account',
    'handle_deposit', 'handle_withdrawal', 'handle_dispute', 'handle_resolve', 'handle_chargeback',
    'DEFAULT_HANDLERS', 'TransactionHandler',
    # Replay
    'Replayer', 'replay',
    # CSV
    'AccountIdAllocator', 'parse_records', 'load_records', 'write_accounts', 'account_row',
    'OUTPUT_HEADER',
]

__version__ = '1.0.0'
