"""
System Metrics Collector.

Samples CPU, RAM and OS identity into a Report.
"""

import asyncio
import platform
import socket
from datetime import datetime, timezone
from typing import Optional
import psutil

from ...models import Report

BYTES_PER_MB = 1024 * 1024


class SystemCollector:
    """Collects host metrics using psutil."""

    def __init__(self, device_id: Optional[str] = None, cpu_interval: float = 0.1):
        """Initialize the system collector."""
        self.device_id = device_id or socket.gethostname() or "unknown"
        self.cpu_interval = cpu_interval

    async def collect(self) -> Report:
        """Collect a fresh report."""
        # Run blocking psutil calls in thread pool
        loop = asyncio.get_running_loop()

        cpu_usage = await loop.run_in_executor(None, self._collect_cpu)
        ram_used_mb, ram_total_mb = await loop.run_in_executor(None, self._collect_memory)

        return Report(
            device_id=self.device_id,
            os_info=self.os_info(),
            cpu_usage=cpu_usage,
            ram_used_mb=ram_used_mb,
            ram_total_mb=ram_total_mb,
            last_seen=datetime.now(timezone.utc).isoformat(),
        )

    def _collect_cpu(self) -> float:
        """Global CPU usage over a short sampling window."""
        return psutil.cpu_percent(interval=self.cpu_interval)

    def _collect_memory(self) -> tuple[int, int]:
        """Used and total RAM in MB."""
        mem = psutil.virtual_memory()
        return mem.used // BYTES_PER_MB, mem.total // BYTES_PER_MB

    @staticmethod
    def os_info() -> str:
        """Human-readable OS descriptor, e.g. 'Linux 6.1 (Kernel: 6.1.0-13-amd64)'."""
        system = platform.system() or "Unknown"

        if system == "Linux":
            try:
                release = platform.freedesktop_os_release()
                name = release.get("PRETTY_NAME") or release.get("NAME", system)
            except OSError:
                name = system
            return f"{name} (Kernel: {platform.release()})"

        if system == "Darwin":
            return f"macOS {platform.mac_ver()[0] or platform.release()}"

        if system == "Windows":
            return f"Windows {platform.release()} ({platform.version()})"

        return f"{system} {platform.release()}".strip()
