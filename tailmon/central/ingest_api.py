"""
Central Ingest API.

Receives reports from Edge Agents, keeps the latest one per device in
memory and serves them to the dashboard.
"""

import logging
import time
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles

from .. import __version__
from ..models import Report
from .store import ReportStore

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"
ACK_MESSAGE = "Data received"


def create_app(store: Optional[ReportStore] = None) -> FastAPI:
    """Create the FastAPI application."""

    app = FastAPI(
        title="Tailmon Collector",
        description="Receives reports from Edge Agents and serves the latest per device",
        version=__version__,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.store = store if store is not None else ReportStore()

    @app.exception_handler(RequestValidationError)
    async def reject_malformed(request: Request, exc: RequestValidationError):
        """Log and reject bodies that do not decode as a Report."""
        logger.warning(f"Rejected malformed request to {request.url.path}: {len(exc.errors())} error(s)")
        return await request_validation_exception_handler(request, exc)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "timestamp": time.time(),
            "devices": len(app.state.store),
        }

    @app.post("/api/metrics", response_class=PlainTextResponse)
    async def receive_metrics(report: Report):
        """Ingest a report from an edge agent."""
        logger.info(f"Received metrics from device: {report.device_id}")
        logger.info(
            f"OS: {report.os_info}, CPU: {report.cpu_usage:.1f}%, "
            f"RAM: {report.ram_used_mb}/{report.ram_total_mb} MB"
        )
        logger.debug(f"Last seen: {report.last_seen}")

        app.state.store.ingest(report)

        return ACK_MESSAGE

    @app.get("/api/all_metrics", response_model=list[Report])
    async def get_all_metrics():
        """Get the latest report of every known device."""
        return app.state.store.snapshot()

    # Registered last so the API routes above take precedence
    app.mount("/", StaticFiles(directory=STATIC_DIR, html=True), name="static")

    return app


# Run with uvicorn
app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=3000)
