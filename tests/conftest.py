"""Shared fixtures for Tailmon tests."""

import pytest
from fastapi.testclient import TestClient

from tailmon.central import ReportStore, create_app
from tailmon.models import Report


def make_report(device_id: str = "alpha", **overrides) -> Report:
    fields = {
        "device_id": device_id,
        "os_info": "Ubuntu 22.04.3 LTS (Kernel: 6.2.0-39-generic)",
        "cpu_usage": 12.5,
        "ram_used_mb": 2048,
        "ram_total_mb": 8192,
        "last_seen": "2024-05-01T12:00:00+00:00",
    }
    fields.update(overrides)
    return Report(**fields)


@pytest.fixture
def report_factory():
    return make_report


@pytest.fixture
def store():
    return ReportStore()


@pytest.fixture
def client(store):
    """Test client bound to a fresh store."""
    with TestClient(create_app(store)) as test_client:
        yield test_client
