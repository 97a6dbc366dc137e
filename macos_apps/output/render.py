"""Output rendering for inventory reports."""

import json
from datetime import datetime, timezone
from io import StringIO

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich import box

from macos_apps.models import AppRecord, InventoryReport, UNKNOWN


def render_human(report: InventoryReport) -> str:
    """
    Render an inventory report in human-readable format using Rich.

    Args:
        report: InventoryReport to render

    Returns:
        Formatted string suitable for terminal display
    """
    output_buffer = StringIO()
    console = Console(file=output_buffer, width=160, force_terminal=True)

    console.print()
    header_text = Text()
    header_text.append("📦 macOS Application Inventory", style="bold cyan")
    console.print(Panel(header_text, border_style="cyan", box=box.ROUNDED))

    host_info = Table.grid(padding=(0, 2))
    host_info.add_column(style="bold cyan", justify="right")
    host_info.add_column(style="white")
    host_info.add_row("Host:", f"[bold]{report.host.hostname}[/bold]")
    host_info.add_row("OS Version:", f"{report.host.os_version} [dim](Build {report.host.build})[/dim]")
    host_info.add_row("Architecture:", report.host.arch)
    host_info.add_row("Inventory Time:", f"[dim]{report.timestamp}[/dim]")
    console.print(Panel(host_info, border_style="blue", box=box.ROUNDED, padding=(0, 1)))
    console.print()

    if not report.apps:
        empty_text = Text()
        empty_text.append("No applications found", style="bold yellow")
        console.print(Panel(empty_text, border_style="yellow", box=box.ROUNDED))
        console.print()
        return output_buffer.getvalue()

    console.print(_apps_table(report.apps))
    console.print()
    console.print(_vendor_summary(report))
    console.print()

    return output_buffer.getvalue()


def render_json(report: InventoryReport) -> str:
    """
    Render an inventory report as JSON.

    Keys are not sorted so additional_info keeps its discovery order.

    Args:
        report: InventoryReport to render

    Returns:
        Indented JSON string
    """
    return json.dumps(report.model_dump(), indent=2)


def format_epoch(epoch: int) -> str:
    """Format seconds since the epoch as an ISO date, "-" for the unknown sentinel."""
    if epoch == 0:
        return "-"
    return datetime.fromtimestamp(epoch, tz=timezone.utc).strftime("%Y-%m-%d %H:%M")


def _apps_table(apps: list[AppRecord]) -> Table:
    table = Table(
        title=f"[bold]{len(apps)} applications[/bold]",
        box=box.SIMPLE_HEAVY,
        show_lines=False,
        header_style="bold magenta"
    )
    table.add_column("Name", style="bold white", overflow="fold")
    table.add_column("Version", style="green")
    table.add_column("Vendor", style="cyan", overflow="fold")
    table.add_column("Last Modified", style="dim")
    table.add_column("Kind", style="dim")
    table.add_column("Location", style="dim", overflow="fold")

    for app in apps:
        vendor_style = "yellow" if app.vendor == UNKNOWN else ""
        table.add_row(
            Text(app.name),
            Text(app.version or "-"),
            Text(app.vendor, style=vendor_style),
            format_epoch(app.last_modified_epoch),
            app.additional_info.get("Kind", UNKNOWN),
            Text(app.location)
        )
    return table


def _vendor_summary(report: InventoryReport) -> Panel:
    summary = Table.grid(padding=(0, 2))
    summary.add_column(style="bold", justify="right")
    summary.add_column()
    for vendor, count in list(report.vendor_summary().items())[:10]:
        summary.add_row(str(count), Text(vendor))
    return Panel(summary, title="[bold]Top Vendors[/bold]", border_style="yellow", box=box.ROUNDED)
