"""
ledger_index.py - Keyed store of original deposits and withdrawals

The LedgerIndex resolves dispute-family references. It holds exactly one
record per tx_id: the original deposit or withdrawal, with its status updated
as disputes are observed. Dispute, resolve and chargeback events are never
stored.

The index is built in a single pass over the complete input before replay
starts, so a dispute anywhere in the input marks its transaction as DISPUTED
for the whole replay. Resolve and chargeback leave the stored status alone.
"""

from __future__ import annotations
from typing import Dict, Iterable, Iterator, Optional

from .core import TransactionKind, TransactionRecord, TransactionStatus


class LedgerIndex:
    """
    Mapping from tx_id to the original TransactionRecord.

    Example:
        index = LedgerIndex.build(records)
        original = index.record(7)
        if original is not None and original.is_disputed:
            ...
    """

    def __init__(self):
        self._records: Dict[int, TransactionRecord] = {}

    @classmethod
    def build(cls, records: Iterable[TransactionRecord]) -> LedgerIndex:
        """Build an index by observing every record in order."""
        index = cls()
        for record in records:
            index.observe(record)
        return index

    def record(self, tx_id: int) -> Optional[TransactionRecord]:
        """Return the stored deposit/withdrawal for tx_id, or None."""
        return self._records.get(tx_id)

    def upsert(self, record: TransactionRecord) -> None:
        """
        Insert or overwrite the entry for record.tx_id.

        The stored copy always starts with status NONE.

        Raises:
            ValueError: If record is a dispute-family event
        """
        if not record.kind.carries_amount:
            raise ValueError(f"Only deposits and withdrawals are indexed, got {record.kind.value}")
        if record.status != TransactionStatus.NONE:
            record = record.with_status(TransactionStatus.NONE)
        self._records[record.tx_id] = record

    def mark_disputed(self, tx_id: int) -> bool:
        """
        Set the status of tx_id to DISPUTED.

        Returns:
            True if the transaction exists, False if the reference was unknown
            (nothing is inserted in that case).
        """
        original = self._records.get(tx_id)
        if original is None:
            return False
        self._records[tx_id] = original.with_status(TransactionStatus.DISPUTED)
        return True

    def observe(self, record: TransactionRecord) -> None:
        """Apply the build rule for a single input record."""
        if record.kind.carries_amount:
            self.upsert(record)
        elif record.kind == TransactionKind.DISPUTE:
            self.mark_disputed(record.tx_id)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, tx_id: object) -> bool:
        return tx_id in self._records

    def __iter__(self) -> Iterator[TransactionRecord]:
        return iter(self._records.values())

    def __repr__(self) -> str:
        disputed = sum(1 for r in self._records.values() if r.is_disputed)
        return f"LedgerIndex({len(self._records)} transactions, {disputed} disputed)"
