"""txreplay CLI - replay a transaction table and print final account balances.

Usage:
  txreplay transactions.csv > accounts.csv
  txreplay transactions.csv --verbose
  python -m txreplay transactions.csv
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from txreplay import __version__
from txreplay.core import LedgerError
from txreplay.csv_io import AccountIdAllocator, load_records, write_accounts
from txreplay.replay import Replayer


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="txreplay",
        description="Replay deposits, withdrawals and disputes into per-client balances.",
    )
    parser.add_argument("path", help="input CSV with columns type, client, tx, amount")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="print progress to stderr")
    parser.add_argument("--seed", type=int, default=None,
                        help="seed for ids assigned to rows with client 0")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        records = load_records(args.path, AccountIdAllocator(seed=args.seed))
    except LedgerError as e:
        print(f"Failed to load csv: {e}", file=sys.stderr)
        return 1

    replayer = Replayer(records, verbose=args.verbose)
    accounts = replayer.run()

    try:
        write_accounts(accounts, sys.stdout)
    except OSError as e:
        print(f"Failed to output csv: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
