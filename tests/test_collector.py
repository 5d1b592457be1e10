"""
Tailmon - System collector tests.
"""

from datetime import datetime
from types import SimpleNamespace
from unittest.mock import patch

import pytest

from tailmon.edge.collectors import SystemCollector


class TestSystemCollector:
    """Test host sampling with psutil patched out."""

    @pytest.mark.asyncio
    async def test_collect(self):
        memory = SimpleNamespace(used=3 * 1024 * 1024 * 1024, total=8 * 1024 * 1024 * 1024)

        with patch("tailmon.edge.collectors.system.psutil.cpu_percent", return_value=42.5), \
                patch("tailmon.edge.collectors.system.psutil.virtual_memory", return_value=memory):
            report = await SystemCollector(device_id="alpha").collect()

        assert report.device_id == "alpha"
        assert report.cpu_usage == 42.5
        assert report.ram_used_mb == 3072
        assert report.ram_total_mb == 8192
        assert report.os_info

    @pytest.mark.asyncio
    async def test_last_seen_is_iso8601(self):
        memory = SimpleNamespace(used=0, total=0)

        with patch("tailmon.edge.collectors.system.psutil.cpu_percent", return_value=0.0), \
                patch("tailmon.edge.collectors.system.psutil.virtual_memory", return_value=memory):
            report = await SystemCollector(device_id="alpha").collect()

        parsed = datetime.fromisoformat(report.last_seen)
        assert parsed.tzinfo is not None

    def test_default_device_id_is_hostname(self):
        with patch("tailmon.edge.collectors.system.socket.gethostname", return_value="rack-07"):
            assert SystemCollector().device_id == "rack-07"

    def test_os_info_linux(self):
        with patch("tailmon.edge.collectors.system.platform.system", return_value="Linux"), \
                patch("tailmon.edge.collectors.system.platform.release", return_value="6.2.0"), \
                patch(
                    "tailmon.edge.collectors.system.platform.freedesktop_os_release",
                    return_value={"PRETTY_NAME": "Ubuntu 22.04.3 LTS"},
                ):
            assert SystemCollector.os_info() == "Ubuntu 22.04.3 LTS (Kernel: 6.2.0)"

    def test_os_info_linux_without_os_release(self):
        with patch("tailmon.edge.collectors.system.platform.system", return_value="Linux"), \
                patch("tailmon.edge.collectors.system.platform.release", return_value="6.2.0"), \
                patch(
                    "tailmon.edge.collectors.system.platform.freedesktop_os_release",
                    side_effect=OSError,
                ):
            assert SystemCollector.os_info() == "Linux (Kernel: 6.2.0)"
