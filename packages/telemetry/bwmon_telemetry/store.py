"""Shared snapshot container guarded by a single mutex."""

from __future__ import annotations

import threading
from dataclasses import replace
from typing import Any, Callable, Mapping

from .models import MetricsSnapshot


class SnapshotStore:
    """Holds the latest merged snapshot.

    Snapshots are immutable, so ``read`` can hand out the current object
    directly: a reader keeps a consistent view even after the sampler
    publishes the next cycle. Writers swap the whole object under the lock.
    """

    def __init__(self, initial: MetricsSnapshot | None = None) -> None:
        self._lock = threading.Lock()
        self._snapshot = initial or MetricsSnapshot()

    def read(self) -> MetricsSnapshot:
        with self._lock:
            return self._snapshot

    def write(self, mutator: Callable[[MetricsSnapshot], MetricsSnapshot]) -> MetricsSnapshot:
        # mutator runs under the lock; it must not do I/O
        with self._lock:
            updated = mutator(self._snapshot)
            self._snapshot = updated
            return updated

    def apply(self, updates: Mapping[str, Any]) -> MetricsSnapshot:
        if not updates:
            return self.read()
        return self.write(lambda current: replace(current, **updates))
