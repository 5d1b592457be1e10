"""
Tailmon - Report store tests.
"""

import threading

import pytest

from tailmon.central import ReportStore
from tests.conftest import make_report


class TestReportStore:
    """Test ingest and snapshot behaviour."""

    def test_starts_empty(self, store):
        assert len(store) == 0
        assert store.snapshot() == []

    def test_ingest_then_get(self, store):
        report = make_report("alpha")

        store.ingest(report)

        assert store.get("alpha") == report
        assert store.get("beta") is None

    def test_idempotent_overwrite(self, store):
        """Second report for a device replaces the first."""
        store.ingest(make_report("alpha", cpu_usage=10.0))
        store.ingest(make_report("alpha", cpu_usage=75.0, ram_used_mb=4000))

        snapshot = store.snapshot()

        assert len(snapshot) == 1
        assert snapshot[0].cpu_usage == 75.0
        assert snapshot[0].ram_used_mb == 4000

    def test_snapshot_contains_every_device(self, store):
        reports = {name: make_report(name) for name in ("alpha", "beta", "gamma")}
        for report in reports.values():
            store.ingest(report)

        snapshot = store.snapshot()

        assert len(snapshot) == 3
        assert {r.device_id: r for r in snapshot} == reports
        assert sorted(store.device_ids()) == ["alpha", "beta", "gamma"]

    def test_snapshot_is_a_copy(self, store):
        store.ingest(make_report("alpha"))
        snapshot = store.snapshot()

        store.ingest(make_report("beta"))

        assert len(snapshot) == 1
        assert len(store) == 2

    def test_single_shard(self):
        store = ReportStore(shard_count=1)
        store.ingest(make_report("alpha"))
        store.ingest(make_report("beta"))

        assert len(store) == 2

    def test_invalid_shard_count(self):
        with pytest.raises(ValueError):
            ReportStore(shard_count=0)


class TestReportStoreConcurrency:
    """Test concurrent access from many threads."""

    def test_independent_keys(self, store):
        """Concurrent ingests for different devices all land."""
        devices = [f"device-{i}" for i in range(64)]
        barrier = threading.Barrier(len(devices))

        def worker(device_id):
            barrier.wait()
            for n in range(50):
                store.ingest(make_report(device_id, cpu_usage=float(n)))

        threads = [threading.Thread(target=worker, args=(d,)) for d in devices]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        snapshot = {r.device_id: r for r in store.snapshot()}
        assert set(snapshot) == set(devices)
        assert all(r.cpu_usage == 49.0 for r in snapshot.values())

    def test_same_key_one_write_wins(self, store):
        """Concurrent writers to one device leave exactly one of their reports."""
        candidates = [make_report("alpha", cpu_usage=float(i), ram_used_mb=i) for i in range(16)]
        barrier = threading.Barrier(len(candidates))

        def worker(report):
            barrier.wait()
            store.ingest(report)

        threads = [threading.Thread(target=worker, args=(r,)) for r in candidates]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        snapshot = store.snapshot()
        assert len(snapshot) == 1
        assert snapshot[0] in candidates

    def test_reads_during_writes(self, store):
        """Readers never see a report that was not written."""
        written = [make_report("alpha", cpu_usage=float(i), ram_used_mb=i) for i in range(200)]
        store.ingest(written[0])
        seen = []

        def writer():
            for report in written:
                store.ingest(report)

        def reader():
            for _ in range(200):
                seen.extend(store.snapshot())

        threads = [threading.Thread(target=writer), threading.Thread(target=reader)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert all(r in written for r in seen)
        assert all(r.ram_used_mb == int(r.cpu_usage) for r in seen)
