"""
engine.py - Transaction Replay State Machine

Pure functions that apply one TransactionRecord to one Account.

- No handler classes, just functions
- Dict of functions keyed by TransactionKind instead of a class hierarchy
- Invalid events (unknown reference, missing amount, insufficient funds,
  transaction not under dispute) return the account unchanged. Nothing is
  raised and nothing is printed for them.

Dispute rules are asymmetric between deposits and withdrawals:

    kind         dispute           resolve            chargeback
    deposit      available -= a    available += a     total -= a
                 held += a         held -= a          held -= a
    withdrawal   held += a         held -= a          available += a
                                                      total += a
                                                      held -= a

A chargeback always locks the account.
"""

from __future__ import annotations
from dataclasses import replace
from decimal import Decimal
from typing import Callable, Dict, Mapping, Optional

from .core import Account, TransactionKind, TransactionRecord
from .ledger_index import LedgerIndex


# Handler type: (record, account, index) -> Account
TransactionHandler = Callable[[TransactionRecord, Account, LedgerIndex], Account]


def find_account(record: TransactionRecord, accounts: Mapping[int, Account]) -> Account:
    """Return the account owning record, or a fresh zero-balance account."""
    account = accounts.get(record.account_id)
    if account is not None:
        return account
    return Account(record.account_id)


def _disputed_original(record: TransactionRecord, index: LedgerIndex) -> Optional[TransactionRecord]:
    """Referenced transaction if it exists, is under dispute and has an amount."""
    original = index.record(record.tx_id)
    if original is None or not original.is_disputed or original.amount is None:
        return None
    return original


# ============================================================================
# HANDLER FUNCTIONS
# ============================================================================

def handle_deposit(record: TransactionRecord, account: Account, index: LedgerIndex) -> Account:
    """Credit available and total."""
    if record.amount is None:
        return account
    return replace(
        account,
        available=account.available + record.amount,
        total=account.total + record.amount,
    )


def handle_withdrawal(record: TransactionRecord, account: Account, index: LedgerIndex) -> Account:
    """Debit available and total if strictly more than the amount is available."""
    if record.amount is None:
        return account
    # A withdrawal of exactly the available balance is rejected.
    if not account.available > record.amount:
        return account
    return replace(
        account,
        available=account.available - record.amount,
        total=account.total - record.amount,
    )


def handle_dispute(record: TransactionRecord, account: Account, index: LedgerIndex) -> Account:
    """Move the referenced amount into held."""
    original = index.record(record.tx_id)
    if original is None or original.amount is None:
        return account
    amount: Decimal = original.amount

    available = account.available
    if original.kind == TransactionKind.DEPOSIT:
        available -= amount
    return replace(account, available=available, held=account.held + amount)


def handle_resolve(record: TransactionRecord, account: Account, index: LedgerIndex) -> Account:
    """Release held funds of a disputed transaction."""
    original = _disputed_original(record, index)
    if original is None:
        return account
    amount: Decimal = original.amount

    available = account.available
    if original.kind == TransactionKind.DEPOSIT:
        available += amount
    return replace(account, available=available, held=account.held - amount)


def handle_chargeback(record: TransactionRecord, account: Account, index: LedgerIndex) -> Account:
    """Reverse a disputed transaction and lock the account."""
    original = _disputed_original(record, index)
    if original is None:
        return account
    amount: Decimal = original.amount

    available = account.available
    total = account.total
    if original.kind == TransactionKind.DEPOSIT:
        total -= amount
    elif original.kind == TransactionKind.WITHDRAWAL:
        total += amount
        available += amount
    return replace(
        account,
        available=available,
        held=account.held - amount,
        total=total,
        locked=True,
    )


DEFAULT_HANDLERS: Dict[TransactionKind, TransactionHandler] = {
    TransactionKind.DEPOSIT: handle_deposit,
    TransactionKind.WITHDRAWAL: handle_withdrawal,
    TransactionKind.DISPUTE: handle_dispute,
    TransactionKind.RESOLVE: handle_resolve,
    TransactionKind.CHARGEBACK: handle_chargeback,
}


# ============================================================================
# ENTRY POINT
# ============================================================================

def process(
    record: TransactionRecord,
    accounts: Mapping[int, Account],
    index: LedgerIndex,
) -> Account:
    """
    Apply a single record and return the updated owning account.

    Pure: accounts and index are only read. The caller writes the returned
    account back into its store under record.account_id.

    Args:
        record: Event to apply
        accounts: Current account store
        index: LedgerIndex built from the complete input

    Returns:
        The owning account after the event (unchanged if the event is invalid)
    """
    account = find_account(record, accounts)
    handler = DEFAULT_HANDLERS[record.kind]
    return handler(record, account, index)
