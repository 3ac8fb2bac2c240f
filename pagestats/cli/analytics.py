# ==============================================================================
# Analytics Command
# ==============================================================================
"""
Analytics command for the pagestats CLI.

Displays session-based engagement metrics and page details for a date range.
"""

import json
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from pagestats.cli.shared import (
    BOX_WIDTH,
    C,
    I,
    _box_bottom,
    _box_header,
    _box_line,
    _empty_line,
    _section_header,
)
from pagestats.core.breakdowns import format_average_time
from pagestats.core.date_ranges import DateRange
from pagestats.utils.db import get_analytics_report

FETCH_FAILED_MESSAGE = "analytics fetch failed"


# ==============================================================================
# Helper Functions
# ==============================================================================


def _validate_range(value: Optional[str]) -> Optional[str]:
    """Reject range keys the dashboard does not offer."""
    if value is None:
        return None
    valid = [r.value for r in DateRange]
    if value not in valid:
        raise typer.BadParameter(f"Invalid range: '{value}'. Use one of: {', '.join(valid)}")
    return value


def _print_breakdown(title: str, rows, width: int) -> None:
    print(_section_header(title, width))
    if not rows:
        print(_box_line(f"  {C.DIM}no data{C.RESET}", width))
        return
    for row in rows:
        print(_box_line(f"  {row.name:<26}{row.count:>12,}", width))


# ==============================================================================
# Commands
# ==============================================================================


def show_analytics(
    range_key: Annotated[
        Optional[str],
        typer.Option(
            "--range",
            "-r",
            help="Date range (24h, 7days, 30days, 90days)",
            callback=_validate_range,
        ),
    ] = None,
    top: Annotated[
        int, typer.Option("--top", "-n", min=1, help="Number of page details to display")
    ] = 10,
    json_output: Annotated[
        bool, typer.Option("--json", "-j", help="Output as JSON for scripting")
    ] = False,
) -> None:
    """Show engagement analytics for a date range.

    Sessions are reconstructed from page views: a visitor's views belong to
    the same session until there is a gap of more than 30 minutes.

    Examples:
        pagestats analytics                  # Last 7 days, formatted output
        pagestats analytics --range 30days   # Last 30 days
        pagestats analytics --json           # JSON output for scripting
    """
    report = get_analytics_report(range_key)

    if report is None:
        if json_output:
            print(json.dumps({"success": False, "message": FETCH_FAILED_MESSAGE}))
        else:
            print(f"\n{C.BRIGHT_RED}{I.CROSS} {FETCH_FAILED_MESSAGE.capitalize()}{C.RESET}\n")
        raise typer.Exit(1)

    # JSON output mode
    if json_output:
        print(json.dumps({"success": True, "data": report.to_json_dict()}, indent=2))
        return

    W = BOX_WIDTH
    summary = report.summary
    metrics = report.metrics

    print()
    print(_box_header(f"PAGE ANALYTICS ({report.range})", W))
    print(_empty_line(W))
    print(_box_line(f"  {'Visits (sessions)':<26}{metrics.total_visits:>12,}", W))
    print(_box_line(f"  {'Unique Visitors':<26}{metrics.unique_visitors:>12,}", W))
    print(_box_line(f"  {'Page Views':<26}{metrics.page_views:>12,}", W))
    print(_box_line(f"  {'Avg Time on Page':<26}{metrics.avg_time_on_page:>12}", W))
    print(_box_line(f"  {'Bounce Rate':<26}{metrics.bounce_rate:>11}%", W))
    print(_box_line(f"  {'Single-page Sessions':<26}{summary.single_page_sessions:>12,}", W))
    if report.skipped_events:
        print(
            _box_line(
                f"  {C.BRIGHT_YELLOW}{I.WARN} {report.skipped_events} malformed events skipped{C.RESET}",
                W,
            )
        )
    print(_empty_line(W))

    _print_breakdown("Devices", report.device_stats, W)
    _print_breakdown("Browsers", report.browser_stats, W)
    _print_breakdown("User Activity", report.user_activity, W)
    print(_empty_line(W))
    print(_box_bottom(W))

    if not report.page_details:
        print(f"\n  {C.BRIGHT_YELLOW}{I.WARN} No pages found{C.RESET}\n")
        return

    # Rich table output
    console = Console()
    table = Table(
        title=f"Top Pages since {report.since.strftime('%Y-%m-%d %H:%M')}",
        show_header=True,
        header_style="bold",
    )
    table.add_column("Page", justify="left")
    table.add_column("Views", justify="right")
    table.add_column("Visitors", justify="right")
    table.add_column("Avg Time", justify="right")
    table.add_column("Bounce", justify="right")

    for detail in report.page_details[:top]:
        table.add_row(
            detail.title or str(detail.page_id),
            f"{detail.views:,}",
            f"{detail.unique_visitors:,}",
            format_average_time(detail.avg_time),
            f"{detail.bounce_rate}%",
        )

    print()
    console.print(table)
    print()
