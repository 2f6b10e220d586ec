"""
Core types and pure helpers for the transaction replay system.

This module provides the foundational data structures used by every other module:
1. Enums: TransactionKind and TransactionStatus
2. Immutable data structures: TransactionRecord, Account
3. Exceptions: LedgerError and input/replay error types
4. Type aliases: AccountStore
5. Decimal helpers: conversion and canonical formatting

Records and accounts are frozen. State changes produce new values via
dataclasses.replace(), so nothing in this module can mutate shared state.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from decimal import Decimal, ROUND_HALF_EVEN, InvalidOperation, getcontext
from enum import Enum
from typing import Any, Dict, Optional, Tuple


# ============================================================================
# DECIMAL CONTEXT CONFIGURATION
# ============================================================================
#
# Replay arithmetic must be deterministic, so the global context is configured
# once at import time.
#
# PRECONDITION: No other code should modify the global Decimal context.
#
_REPLAY_DECIMAL_CONTEXT = getcontext()
_REPLAY_DECIMAL_CONTEXT.prec = 50
_REPLAY_DECIMAL_CONTEXT.rounding = ROUND_HALF_EVEN


# ============================================================================
# CONSTANTS
# ============================================================================

# Identifier ranges accepted from input (client is 16-bit, tx is 32-bit).
ACCOUNT_ID_MAX = 2**16 - 1
TX_ID_MAX = 2**32 - 1

# Largest accepted amount, roughly the range of a 64-bit float.
AMOUNT_MAX = Decimal("1e308")

# Account id meaning "not assigned yet" in the input table.
UNASSIGNED_ACCOUNT_ID = 0

# Default tolerance for balance invariant checks.
DEFAULT_TOLERANCE = Decimal("1e-9")

ZERO = Decimal("0")


# ============================================================================
# ENUMS
# ============================================================================

class TransactionKind(Enum):
    """
    Type of a ledger event.

    DEPOSIT / WITHDRAWAL carry an amount and are stored in the LedgerIndex.
    DISPUTE / RESOLVE / CHARGEBACK reference an earlier deposit or withdrawal
    by tx_id and carry no amount of their own.
    """
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"

    @property
    def carries_amount(self) -> bool:
        return self in (TransactionKind.DEPOSIT, TransactionKind.WITHDRAWAL)

    @property
    def is_dispute_family(self) -> bool:
        return not self.carries_amount


class TransactionStatus(Enum):
    """Latest known dispute status of a stored deposit or withdrawal."""
    NONE = "none"
    DISPUTED = "disputed"
    RESOLVED = "resolved"
    CHARGED_BACK = "charged_back"


# ============================================================================
# EXCEPTIONS
# ============================================================================

class LedgerError(Exception):
    """Base exception for all replay-related errors."""
    pass


class InputError(LedgerError):
    """Raised when the input table cannot be read."""
    pass


class MalformedRecord(InputError):
    """
    Raised when a row of the input table does not parse into a TransactionRecord.

    Attributes:
        line: 1-based line number of the offending row (None if unknown)
    """

    def __init__(self, message: str, line: Optional[int] = None):
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)


class ReplayAlreadyRun(LedgerError):
    """Raised when a Replayer is asked to replay its input a second time."""
    pass


# ============================================================================
# DECIMAL HELPERS
# ============================================================================

def to_decimal(value: Any) -> Decimal:
    """
    Convert a number or numeric string to Decimal.

    Floats go through str() so that 0.1 becomes Decimal("0.1") rather than
    its binary expansion.

    Raises:
        ValueError: If the value is not numeric
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Expected a number, got {value!r}")
    try:
        return Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError(f"Expected a number, got {value!r}") from None


def format_decimal(d: Decimal) -> str:
    """
    Canonical fixed-point string for a Decimal.

    Decimal("1.50") -> "1.5", Decimal("10.000") -> "10", Decimal("-0") -> "0".
    """
    normalized = d.normalize()
    if normalized.is_zero():
        return "0"
    return format(normalized, "f")


# ============================================================================
# TRANSACTION RECORD
# ============================================================================

@dataclass(frozen=True, slots=True)
class TransactionRecord:
    """
    A single row of the transaction ledger.

    Attributes:
        kind: Event type
        account_id: Owning account (client) id
        tx_id: Transaction id. Dispute-family events reuse the tx_id of the
            deposit or withdrawal they reference.
        amount: Non-negative amount for deposits and withdrawals. Ignored
            (normally None) for dispute-family events.
        status: Dispute status. Only meaningful on stored deposits and
            withdrawals; updated by the LedgerIndex via with_status().
    """
    kind: TransactionKind
    account_id: int
    tx_id: int
    amount: Optional[Decimal] = None
    status: TransactionStatus = TransactionStatus.NONE

    def __post_init__(self):
        if not isinstance(self.kind, TransactionKind):
            object.__setattr__(self, 'kind', TransactionKind(self.kind))
        if self.account_id < 0:
            raise ValueError(f"account_id must be non-negative, got {self.account_id}")
        if self.tx_id < 0:
            raise ValueError(f"tx_id must be non-negative, got {self.tx_id}")
        if self.amount is not None:
            amount = to_decimal(self.amount)
            if amount.is_nan() or amount.is_infinite():
                raise ValueError(f"amount must be finite, got {self.amount}")
            if amount < ZERO:
                raise ValueError(f"amount must be non-negative, got {self.amount}")
            object.__setattr__(self, 'amount', amount)

    @property
    def is_disputed(self) -> bool:
        return self.status == TransactionStatus.DISPUTED

    def with_status(self, status: TransactionStatus) -> TransactionRecord:
        """Return a copy of this record with a new status."""
        return replace(self, status=status)

    def with_account_id(self, account_id: int) -> TransactionRecord:
        """Return a copy of this record owned by a different account."""
        return replace(self, account_id=account_id)

    def __repr__(self) -> str:
        amount = f" {self.amount}" if self.amount is not None else ""
        status = f" [{self.status.value}]" if self.status != TransactionStatus.NONE else ""
        return f"Tx({self.kind.value}{amount}: client={self.account_id} tx={self.tx_id}{status})"


# ============================================================================
# ACCOUNT
# ============================================================================

@dataclass(frozen=True, slots=True)
class Account:
    """
    Balance state of a single client account.

    Attributes:
        id: Account (client) id
        available: Funds usable for withdrawal
        held: Funds frozen pending dispute resolution
        total: Total asset value, normally available + held
        locked: True once a chargeback has been accepted on the account
    """
    id: int
    available: Decimal = ZERO
    held: Decimal = ZERO
    total: Decimal = ZERO
    locked: bool = False

    def __post_init__(self):
        if self.id < 0:
            raise ValueError(f"Account id must be non-negative, got {self.id}")
        for name in ('available', 'held', 'total'):
            value = getattr(self, name)
            if not isinstance(value, Decimal):
                object.__setattr__(self, name, to_decimal(value))

    def is_balanced(self, tolerance: Decimal = DEFAULT_TOLERANCE) -> bool:
        """Check that total == available + held within tolerance."""
        return abs(self.total - (self.available + self.held)) <= tolerance

    def as_row(self) -> Tuple[int, Decimal, Decimal, Decimal, bool]:
        """Return (id, available, held, total, locked) for serialization."""
        return (self.id, self.available, self.held, self.total, self.locked)

    def __repr__(self) -> str:
        lock = " LOCKED" if self.locked else ""
        return (f"Account({self.id}: available={self.available} "
                f"held={self.held} total={self.total}{lock})")


# ============================================================================
# TYPE ALIASES
# ============================================================================

# Mapping from account id to its current state.
AccountStore = Dict[int, Account]
