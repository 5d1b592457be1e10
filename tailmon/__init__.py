"""
Tailmon - Minimal fleet telemetry.

Edge agents sample host metrics and push them to a central collector,
which keeps the latest report per device in memory.
"""

__version__ = "1.0.0"
