"""
conftest.py - Shared pytest fixtures for replay tests

Provides common fixtures used across unit, functional and conformance tests:
- Record sequences for the standard deposit / withdrawal dispute scenarios
- Path to the sample input table
- A factory writing CSV text to a temporary file

Record builders live in builders.py.
"""

import pytest
from pathlib import Path
from typing import List

from txreplay import TransactionRecord

from builders import deposit, withdrawal, dispute


DATA_DIR = Path(__file__).parent / "data"


# =============================================================================
# RECORD FIXTURES
# =============================================================================

@pytest.fixture
def disputed_deposit_records() -> List[TransactionRecord]:
    """Deposit 10, deposit 2 (tx 2), dispute tx 2."""
    return [deposit(1, "10"), deposit(2, "2"), dispute(2)]


@pytest.fixture
def disputed_withdrawal_records() -> List[TransactionRecord]:
    """Deposit 10, withdraw 2 (tx 2), dispute tx 2."""
    return [deposit(1, "10"), withdrawal(2, "2"), dispute(2)]


# =============================================================================
# FILE FIXTURES
# =============================================================================

@pytest.fixture
def sample_csv_path() -> Path:
    """Sample input table shipped with the tests."""
    return DATA_DIR / "sample.csv"


@pytest.fixture
def write_csv(tmp_path):
    """Factory writing text to a CSV file under tmp_path and returning its path."""
    written = []

    def _write(text: str) -> Path:
        path = tmp_path / f"input_{len(written)}.csv"
        path.write_text(text)
        written.append(path)
        return path

    return _write
