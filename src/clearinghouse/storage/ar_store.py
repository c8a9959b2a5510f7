"""In-memory, append-only store of AR records shared across threads."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from clearinghouse.core.models import ARRecord


class ARStore:
    """Append-only AR record collection guarded by a single lock.

    The lock is held only for an append or a snapshot copy, never while a
    payer is being called.
    """

    def __init__(self) -> None:
        self._records: list[ARRecord] = []
        self._lock = threading.Lock()

    def append(self, record: ARRecord) -> None:
        with self._lock:
            self._records.append(record)

    def snapshot(self) -> list[ARRecord]:
        """Copy of the current records; callers never see interior storage."""
        with self._lock:
            return list(self._records)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
