"""
Tailmon Central Collector - Latest-value report store and HTTP API.
"""

from .ingest_api import create_app
from .store import ReportStore

__all__ = ["create_app", "ReportStore"]
