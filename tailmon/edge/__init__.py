"""
Tailmon Edge Agent - Lightweight reporting agent for fleet hosts.

Samples CPU, RAM and OS identity on each host and pushes the report
to the central collector.
"""

from .agent import ReportingAgent, backoff_delay, run_agent
from .config import AgentConfig, BackoffConfig
from .sender import CollectorSender, SendResult

__all__ = [
    "ReportingAgent",
    "backoff_delay",
    "run_agent",
    "AgentConfig",
    "BackoffConfig",
    "CollectorSender",
    "SendResult",
]
