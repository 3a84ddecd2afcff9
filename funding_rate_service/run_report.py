#!/usr/bin/env python3
"""
Funding Report Runner

Runs one aggregation and prints the comparison.

Usage:
    python -m funding_rate_service.run_report              # Rich tables
    python -m funding_rate_service.run_report --json       # Full report as JSON
    python -m funding_rate_service.run_report --top 50     # Show 50 comparison rows
"""

import argparse
import asyncio
import json
from decimal import Decimal
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.table import Table

from funding_rate_service.core.comparison_service import FundingComparisonService
from funding_rate_service.models.comparison import ComparisonEntry
from funding_rate_service.models.report import FundingReport


console = Console()

BAND_STYLES = {
    "high": "bold red",
    "medium": "yellow",
    "low": "green",
    "unavailable": "dim",
}


def _fmt_rate(rate: Optional[Decimal]) -> str:
    return f"{rate:+.6f}%" if rate is not None else "n/a"


def create_sources_table(report: FundingReport) -> Table:
    table = Table(title="Sources", box=box.ROUNDED)
    table.add_column("Exchange", style="cyan", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Contracts", style="magenta", justify="right")
    table.add_column("Latency", style="dim", justify="right")

    for exchange, source in report.sources.items():
        status = source.status.value if source.error is None else f"{source.status.value} ({source.error})"
        table.add_row(exchange, status, str(source.count), f"{source.latency_ms}ms")
    return table


def create_intervals_table(report: FundingReport) -> Table:
    table = Table(title="Funding Intervals", box=box.ROUNDED)
    table.add_column("Interval", style="cyan")
    table.add_column("Contracts", style="magenta", justify="right")
    for interval, count in report.funding_intervals.items():
        table.add_row(interval, str(count))
    return table


def create_comparison_table(entries: List[ComparisonEntry], sources: List[str], fallback: bool) -> Table:
    title = "Top Funding Rates per Source" if fallback else "Funding Rate Comparison"
    table = Table(title=title, box=box.ROUNDED, show_header=True, header_style="bold magenta")
    table.add_column("Symbol", style="white", no_wrap=True)
    for source in sources:
        table.add_column(source.upper(), style="yellow", justify="right")
    table.add_column("Diff", style="cyan", justify="right")
    table.add_column("Band", justify="center")
    table.add_column("Favorable", style="green")

    for entry in entries:
        cells = [entry.symbol]
        for source in sources:
            projection = entry.sources.get(source)
            if projection is None:
                cells.append("-")
            else:
                cells.append(f"{_fmt_rate(projection.funding_rate)} / {projection.funding_interval_hours}h")
        band = entry.band.value
        cells.append(_fmt_rate(entry.differential) if entry.differential is not None else "-")
        cells.append(f"[{BAND_STYLES[band]}]{band}[/{BAND_STYLES[band]}]")
        cells.append(entry.favorable_exchange or "-")
        table.add_row(*cells)
    return table


def print_report(report: FundingReport, top: int) -> None:
    console.print(create_sources_table(report))
    console.print(create_intervals_table(report))

    sources = list(report.sources.keys())
    console.print(create_comparison_table(report.comparison[:top], sources, report.comparison_fallback))

    summary = report.summary
    if summary.rated_contracts:
        console.print(
            f"\nHighest: {summary.highest_funding_rate.exchange} {summary.highest_funding_rate.symbol} "
            f"{_fmt_rate(summary.highest_funding_rate.funding_rate)}"
        )
        console.print(
            f"Lowest:  {summary.lowest_funding_rate.exchange} {summary.lowest_funding_rate.symbol} "
            f"{_fmt_rate(summary.lowest_funding_rate.funding_rate)}"
        )
        console.print(
            f"Average: {_fmt_rate(summary.average_funding_rate)} over {summary.rated_contracts} rated contracts"
        )
    console.print(
        f"\n[dim]Completed in {report.fetch_duration_ms}ms, {report.total_contracts} contracts[/dim]"
    )


async def main() -> None:
    parser = argparse.ArgumentParser(
        description="Fetch funding rates from all configured exchanges and compare them"
    )
    parser.add_argument('--json', action='store_true', help='Print the full report as JSON')
    parser.add_argument('--top', type=int, default=30, help='Comparison rows to show (default: 30)')
    args = parser.parse_args()

    report = await FundingComparisonService().run()

    if args.json:
        print(json.dumps(report.model_dump(mode="json"), indent=2))
    else:
        print_report(report, args.top)


def cli() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    cli()
