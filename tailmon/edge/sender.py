"""
Collector Sender.

Delivers reports to the central collector over HTTP.
"""

import asyncio
from dataclasses import dataclass
from typing import Optional
import aiohttp
import logging

from ..models import Report

logger = logging.getLogger(__name__)


@dataclass
class SendResult:
    """Result of a send operation."""
    success: bool
    status_code: int = 0
    error: Optional[str] = None

    @property
    def transport_error(self) -> bool:
        """True when no response was received at all."""
        return not self.success and self.status_code == 0


class CollectorSender:
    """
    Sends reports to the collector.

    A single attempt per call; retry pacing is the caller's job.
    """

    def __init__(self, server_url: str, timeout: float = 10):
        """Initialize the sender."""
        self.server_url = server_url
        self.timeout = timeout

        self._session: Optional[aiohttp.ClientSession] = None

    async def open(self) -> aiohttp.ClientSession:
        """Create the HTTP session. Failures here are fatal to the agent."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            self._session = aiohttp.ClientSession(
                timeout=timeout,
                headers=self._get_headers(),
            )
        return self._session

    def _get_headers(self) -> dict:
        """Get request headers."""
        return {
            'Content-Type': 'application/json',
            'User-Agent': 'TailmonAgent/1.0',
        }

    async def send_report(self, report: Report) -> SendResult:
        """POST one report. Never raises for transport problems."""
        try:
            session = await self.open()

            async with session.post(self.server_url, data=report.to_json()) as response:
                if 200 <= response.status < 300:
                    return SendResult(success=True, status_code=response.status)

                error_text = await response.text(errors="replace")
                return SendResult(
                    success=False,
                    status_code=response.status,
                    error=error_text[:500],
                )

        except asyncio.TimeoutError:
            return SendResult(success=False, error=f"Request timeout after {self.timeout}s")
        except aiohttp.ClientError as e:
            return SendResult(success=False, error=str(e) or e.__class__.__name__)

    async def close(self):
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
