"""Audit ledger: counts every substitution per exact original value."""

from typing import Dict, Iterator, List, Optional, Tuple

from logscrubber.core.models import AuditRecord

_Pending = Tuple[str, str, str, str]


class AuditLedger:
    """
    Keyed by the original text with its case preserved, so "Alice" and
    "alice" are separate rows even though they map to the same identity.
    The replacement stored is the one seen on first encounter.

    Between ``begin_line`` and ``commit``/``discard`` writes are held back,
    so a line whose output is thrown away leaves no trace in the ledger.
    """

    def __init__(self):
        self._entries: Dict[str, AuditRecord] = {}
        self._pending: Optional[List[_Pending]] = None

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[AuditRecord]:
        return iter(self._entries.values())

    def record(self, original: str, replacement: str, kind: str, source: str) -> None:
        if self._pending is not None:
            self._pending.append((original, replacement, kind, source))
            return
        self._apply(original, replacement, kind, source)

    def begin_line(self) -> None:
        self._pending = []

    def commit(self) -> None:
        pending, self._pending = self._pending or [], None
        for original, replacement, kind, source in pending:
            self._apply(original, replacement, kind, source)

    def discard(self) -> None:
        self._pending = None

    def _apply(self, original: str, replacement: str, kind: str, source: str) -> None:
        entry = self._entries.get(original)
        if entry is not None:
            entry.times_replaced += 1
            return

        self._entries[original] = AuditRecord(
            original_value=original,
            new_value=replacement,
            times_replaced=1,
            type=kind,
            source=source,
        )

    def get(self, original: str) -> Optional[AuditRecord]:
        return self._entries.get(original)

    def records(self) -> List[AuditRecord]:
        return list(self._entries.values())

    def total_replacements(self) -> int:
        return sum(entry.times_replaced for entry in self._entries.values())
