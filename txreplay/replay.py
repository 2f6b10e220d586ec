"""
replay.py - Stateful replay of a transaction sequence

The Replayer is the only component that mutates state. It owns the account
store and the LedgerIndex:

1. Build the LedgerIndex from the complete input (first pass)
2. Replay every record in original order through engine.process() (second pass)
3. Write each returned account back into the store under its id

Verbose output goes to stderr so that stdout stays free for the output table.
"""

from __future__ import annotations
from decimal import Decimal
from typing import Any, Dict, Iterable, List
import sys

from .core import (
    Account, AccountStore, TransactionRecord,
    DEFAULT_TOLERANCE, ReplayAlreadyRun,
)
from .engine import process
from .ledger_index import LedgerIndex


class Replayer:
    """
    Replays an ordered sequence of TransactionRecords into account balances.

    Thread Safety:
        Not thread-safe. Each thread should use its own Replayer.

    Example:
        replayer = Replayer(records)
        accounts = replayer.run()
        result = replayer.verify_invariants()
    """

    def __init__(self, records: Iterable[TransactionRecord], verbose: bool = False):
        """
        Build the LedgerIndex for records.

        Args:
            records: Transactions in original input order
            verbose: Print progress lines to stderr (default: False)
        """
        self.records: List[TransactionRecord] = list(records)
        self.verbose = verbose
        self.accounts: AccountStore = {}
        # Events that changed their account / left it unchanged. An accepted
        # zero-amount deposit leaves the account unchanged and counts as ignored.
        self.applied_count = 0
        self.ignored_count = 0
        self._has_run = False

        self.index = LedgerIndex.build(self.records)
        if self.verbose:
            print(f"Indexed {len(self.index)} transactions from {len(self.records)} records",
                  file=sys.stderr)

    def run(self) -> AccountStore:
        """
        Replay every record in order.

        Returns:
            The account store, mapping account id to final Account

        Raises:
            ReplayAlreadyRun: If called more than once
        """
        if self._has_run:
            raise ReplayAlreadyRun("Replayer.run() may only be called once per input")
        self._has_run = True

        for record in self.records:
            before = self.accounts.get(record.account_id) or Account(record.account_id)
            account = process(record, self.accounts, self.index)
            self.accounts[account.id] = account
            if account == before:
                self.ignored_count += 1
            else:
                self.applied_count += 1

        if self.verbose:
            print(f"Replayed {len(self.records)} records into {len(self.accounts)} accounts "
                  f"({self.applied_count} applied, {self.ignored_count} ignored)",
                  file=sys.stderr)
        return self.accounts

    def verify_invariants(self, tolerance: Decimal = DEFAULT_TOLERANCE) -> Dict[str, Any]:
        """
        Check total == available + held for every account.

        The check is informational. A withdrawal that is still under dispute
        legitimately leaves available + held above total by its amount.

        Returns:
            Dict with keys:
            - 'valid': bool - True if every account balances
            - 'discrepancies': List[Dict] - account, available, held, total, difference
        """
        discrepancies = []
        for account_id in sorted(self.accounts):
            account = self.accounts[account_id]
            if not account.is_balanced(tolerance):
                discrepancies.append({
                    'account': account_id,
                    'available': account.available,
                    'held': account.held,
                    'total': account.total,
                    'difference': account.available + account.held - account.total,
                })
        return {
            'valid': len(discrepancies) == 0,
            'discrepancies': discrepancies,
        }


def replay(records: Iterable[TransactionRecord], verbose: bool = False) -> AccountStore:
    """Replay records and return the final account store."""
    return Replayer(records, verbose=verbose).run()
