"""
builders.py - Record builders for tests

Short constructors for TransactionRecords so scenarios read like the input
table they model:

    [deposit(1, "10"), withdrawal(2, "2"), dispute(2)]
"""

from __future__ import annotations
from decimal import Decimal
from typing import Union

from txreplay import Account, TransactionKind, TransactionRecord


def deposit(tx: int, amount: Union[str, Decimal], client: int = 1) -> TransactionRecord:
    return TransactionRecord(TransactionKind.DEPOSIT, client, tx, Decimal(amount))


def withdrawal(tx: int, amount: Union[str, Decimal], client: int = 1) -> TransactionRecord:
    return TransactionRecord(TransactionKind.WITHDRAWAL, client, tx, Decimal(amount))


def dispute(tx: int, client: int = 1) -> TransactionRecord:
    return TransactionRecord(TransactionKind.DISPUTE, client, tx)


def resolve(tx: int, client: int = 1) -> TransactionRecord:
    return TransactionRecord(TransactionKind.RESOLVE, client, tx)


def chargeback(tx: int, client: int = 1) -> TransactionRecord:
    return TransactionRecord(TransactionKind.CHARGEBACK, client, tx)


def balances(account: Account) -> tuple:
    """(available, held, total, locked) for compact assertions."""
    return (account.available, account.held, account.total, account.locked)


def expect(available: str, held: str, total: str, locked: bool = False) -> tuple:
    return (Decimal(available), Decimal(held), Decimal(total), locked)
