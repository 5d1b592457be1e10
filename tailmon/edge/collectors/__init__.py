"""
Tailmon Edge Agent Collectors.

Collectors gather host metrics and return them as Reports.
"""

from .system import SystemCollector

__all__ = [
    "SystemCollector",
]
