#!/usr/bin/env python3
"""
demo.py - Walkthrough of the replay state machine

Replays a short, hand-written ledger and prints each account after every
event, so the effect of each rule is visible:

  1-3:   Deposits and withdrawals (including a rejected exact withdrawal)
  4-6:   A disputed deposit that is resolved
  7-10:  A disputed withdrawal that is charged back
  11-12: Events that reference nothing and change nothing

Run:
    python demo.py
"""

import sys
from decimal import Decimal

from txreplay import (
    Account, LedgerIndex, Replayer, TransactionKind, TransactionRecord,
    process, write_accounts,
)


def _tx(kind, client, tx, amount=None):
    return TransactionRecord(kind, client, tx, Decimal(amount) if amount is not None else None)


D, W = TransactionKind.DEPOSIT, TransactionKind.WITHDRAWAL
DSP, RES, CB = TransactionKind.DISPUTE, TransactionKind.RESOLVE, TransactionKind.CHARGEBACK

RECORDS = [
    _tx(D, 1, 1, "100"),
    _tx(W, 1, 2, "40"),
    _tx(W, 1, 3, "60"),
    _tx(D, 2, 4, "25"),
    _tx(DSP, 2, 4),
    _tx(RES, 2, 4),
    _tx(D, 3, 5, "10"),
    _tx(W, 3, 6, "4"),
    _tx(DSP, 3, 6),
    _tx(CB, 3, 6),
    _tx(DSP, 1, 999),
    _tx(RES, 2, 5),
]


def main():
    print("=" * 80)
    print("TRANSACTION REPLAY - step by step")
    print("=" * 80)

    index = LedgerIndex.build(RECORDS)
    print(f"\n{index!r}\n")

    accounts = {}
    for step, record in enumerate(RECORDS, start=1):
        before = accounts.get(record.account_id) or Account(record.account_id)
        account = process(record, accounts, index)
        accounts[account.id] = account
        marker = " " if account != before else "-"
        print(f"{step:>2} {marker} {record!r:<45} -> {account!r}")

    print()
    print("Final table:")
    print("-" * 80)
    write_accounts(accounts, sys.stdout)

    replayer = Replayer(RECORDS)
    replayer.run()
    result = replayer.verify_invariants()
    print()
    print(f"Balanced: {result['valid']}")
    for d in result['discrepancies']:
        print(f"  client {d['account']}: available + held exceeds total by {d['difference']}")


if __name__ == "__main__":
    main()
