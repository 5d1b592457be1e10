"""
Tailmon Edge Agent - Reporting loop.

Samples the host on a steady cadence and delivers each report to the
collector, backing off progressively while deliveries fail and pausing
for a longer cool-down after a run of failures.
"""

import asyncio
import logging
import signal
import sys
from typing import Optional, Protocol

from ..models import Report
from ..utils import setup_logging
from .config import AgentConfig, BackoffConfig
from .collectors import SystemCollector
from .sender import CollectorSender

logger = logging.getLogger(__name__)


class Collector(Protocol):
    async def collect(self) -> Report: ...


def backoff_delay(failures: int, backoff: Optional[BackoffConfig] = None) -> int:
    """Seconds to wait before the next report given the current failure count."""
    backoff = backoff or BackoffConfig()
    if failures <= 0:
        return backoff.interval
    return min(backoff.interval + backoff.step * failures, backoff.max_wait)


class ReportingAgent:
    """
    Main Edge Agent daemon.

    Runs one sequential loop: collect, send, wait. The loop ends only when
    stop() is called or an iteration bound passed to run() is reached.
    """

    def __init__(
        self,
        config: Optional[AgentConfig] = None,
        collector: Optional[Collector] = None,
        sender: Optional[CollectorSender] = None,
    ):
        """Initialize the Edge Agent."""
        self.config = config or AgentConfig()
        self.collector = collector or SystemCollector()
        self.sender = sender or CollectorSender(
            server_url=self.config.server_url,
            timeout=self.config.request_timeout,
        )

        # State
        self.consecutive_failures = 0
        self.iterations = 0
        self._stop_event = asyncio.Event()

    @property
    def running(self) -> bool:
        return not self._stop_event.is_set()

    async def start(self):
        """Start the Edge Agent and run until stopped."""
        logger.info("Agent starting...")
        logger.info(f"Will send data to collector at: {self.config.server_url}")

        # A session that cannot be built means a broken environment; let it raise
        await self.sender.open()

        loop = asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(sig, self.stop)

        try:
            await self.run()
        finally:
            await self.sender.close()
            logger.info("Edge Agent stopped")

    def stop(self):
        """Signal the loop to finish; pending waits return immediately."""
        if self.running:
            logger.info("Stopping Edge Agent...")
        self._stop_event.set()

    async def run(self, max_iterations: Optional[int] = None):
        """Report repeatedly until stopped or max_iterations is reached."""
        while self.running:
            if max_iterations is not None and self.iterations >= max_iterations:
                break

            wait_time = await self.run_once()
            self.iterations += 1

            logger.info(f"Waiting {wait_time} seconds before next update...")
            await self._sleep(wait_time)

    async def run_once(self) -> int:
        """Run one collect-and-send cycle and return the wait before the next."""
        backoff = self.config.backoff

        if await self._report():
            self.consecutive_failures = 0
        else:
            self.consecutive_failures += 1

            if self.consecutive_failures >= backoff.max_consecutive_failures:
                logger.warning(
                    f"Too many consecutive failures ({self.consecutive_failures}), "
                    f"waiting {backoff.cooldown} seconds before retry..."
                )
                await self._sleep(backoff.cooldown)
                # Failures during the cool-down are not tracked
                self.consecutive_failures = 0

        return backoff_delay(self.consecutive_failures, backoff)

    async def _report(self) -> bool:
        """Collect and deliver one report. Returns True on delivery success."""
        try:
            report = await self.collector.collect()
        except Exception:
            logger.exception("System metrics collection error")
            return False

        logger.info(f"Collected system info for device: {report.device_id}")

        try:
            result = await self.sender.send_report(report)
        except Exception:
            logger.exception("Unexpected error while sending data to collector")
            return False

        if result.success:
            logger.info("Successfully sent data to collector")
            return True

        if result.transport_error:
            logger.error(f"Failed to send data to collector: {result.error}")
        else:
            logger.warning(f"Collector returned error status: {result.status_code}")
        return False

    async def _sleep(self, seconds: float):
        """Sleep that wakes early when the agent is stopped."""
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            pass


def run_agent(config_path: Optional[str] = None):
    """Run the Edge Agent."""
    if config_path:
        config = AgentConfig.from_yaml(config_path)
    else:
        config = AgentConfig.from_env()

    setup_logging(config.log_level, config.log_file)
    agent = ReportingAgent(config)

    try:
        asyncio.run(agent.start())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    config_path = sys.argv[1] if len(sys.argv) > 1 else None
    run_agent(config_path)
