"""
Latest-value report store.

Keeps the most recent Report per device. The map is split into shards,
each behind its own lock, so writes for unrelated devices rarely contend.
"""

import threading
from typing import Optional

from ..models import Report


class ReportStore:
    """In-memory store holding the latest report per device."""

    def __init__(self, shard_count: int = 16):
        if shard_count < 1:
            raise ValueError("shard_count must be at least 1")
        self.shard_count = shard_count
        self._shards: list[dict[str, Report]] = [{} for _ in range(shard_count)]
        self._locks = [threading.Lock() for _ in range(shard_count)]

    def _index(self, device_id: str) -> int:
        return hash(device_id) % self.shard_count

    def ingest(self, report: Report) -> None:
        """Insert or overwrite the entry for report.device_id."""
        i = self._index(report.device_id)
        with self._locks[i]:
            self._shards[i][report.device_id] = report

    def get(self, device_id: str) -> Optional[Report]:
        i = self._index(device_id)
        with self._locks[i]:
            return self._shards[i].get(device_id)

    def snapshot(self) -> list[Report]:
        """
        Every current report, in no particular order.

        Each shard is copied under its own lock, so a single entry is never
        seen half-written; entries from different shards may come from
        slightly different moments.
        """
        reports: list[Report] = []
        for shard, lock in zip(self._shards, self._locks):
            with lock:
                reports.extend(shard.values())
        return reports

    def device_ids(self) -> list[str]:
        return [r.device_id for r in self.snapshot()]

    def __len__(self) -> int:
        total = 0
        for shard, lock in zip(self._shards, self._locks):
            with lock:
                total += len(shard)
        return total
