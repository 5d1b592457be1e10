"""Command-line interface for Tailmon."""

from typing import Optional

import httpx
import typer
from rich.console import Console
from rich.table import Table

from .models import Report
from .utils import get_logger, setup_logging

app = typer.Typer(
    name="tailmon",
    help="Minimal fleet telemetry: reporting agent and latest-value collector",
    add_completion=False,
)

console = Console()

DEFAULT_COLLECTOR = "http://127.0.0.1:3000"


def build_status_table(reports: list[Report]) -> Table:
    """Render reports as a table, sorted by device."""
    table = Table(title="Fleet Status")
    table.add_column("Device", style="cyan")
    table.add_column("OS")
    table.add_column("CPU %", justify="right")
    table.add_column("RAM (MB)", justify="right")
    table.add_column("RAM %", justify="right")
    table.add_column("Last Seen", style="dim")

    for report in sorted(reports, key=lambda r: r.device_id):
        cpu_style = "red" if report.cpu_usage > 80 else "yellow" if report.cpu_usage > 60 else "green"
        table.add_row(
            report.device_id,
            report.os_info,
            f"[{cpu_style}]{report.cpu_usage:.1f}[/{cpu_style}]",
            f"{report.ram_used_mb}/{report.ram_total_mb}",
            f"{report.ram_usage_percent:.1f}",
            report.last_seen,
        )

    return table


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", "-h", help="Listen address [default: TAILMON_HOST or 0.0.0.0]"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Listen port [default: TAILMON_PORT or 3000]"),
):
    """Start the collector server."""
    import uvicorn

    from .config import settings

    host = host or settings.host
    port = port or settings.port
    setup_logging(settings.log_level, settings.log_file)
    console.print(f"[bold]Starting collector on {host}:{port}[/bold]")
    console.print("  POST /api/metrics      - Receive metrics from agents")
    console.print("  GET  /api/all_metrics  - Get all stored metrics")
    console.print("  GET  /                 - Dashboard")
    # uvicorn exits the process if the address cannot be bound
    uvicorn.run("tailmon.central.ingest_api:app", host=host, port=port)


@app.command()
def agent(
    config: Optional[str] = typer.Option(None, "--config", "-c", help="YAML config file"),
):
    """Run the reporting agent until interrupted."""
    from .edge import run_agent

    run_agent(config)


@app.command()
def status(
    url: str = typer.Option(DEFAULT_COLLECTOR, "--url", "-u", help="Collector base URL"),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON"),
):
    """Show the latest report of every device."""
    try:
        response = httpx.get(f"{url.rstrip('/')}/api/all_metrics", timeout=10)
        response.raise_for_status()
    except httpx.HTTPError as e:
        get_logger(__name__).error(f"Could not fetch metrics from {url}: {e}")
        raise typer.Exit(1)

    reports = [Report.model_validate(item) for item in response.json()]

    if as_json:
        console.print_json(data=[r.model_dump() for r in reports])
    elif not reports:
        console.print("[yellow]No devices connected.[/yellow]")
    else:
        console.print(build_status_table(reports))


if __name__ == "__main__":
    app()
