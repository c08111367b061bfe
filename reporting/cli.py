#!/usr/bin/env python3
"""
CLI for ranking property snapshots and importing scraped listings.

Usage:
    python -m reporting.cli rank <snapshot_json> [--query QUERY] [--page N] [--page-size N]
    python -m reporting.cli import <listing_json>

Examples:
    # Best matches in Amsterdam under 500k
    python -m reporting.cli rank data/snapshot.json --query "city=Amsterdam&maxPrice=500000"

    # Normalize a scraped listing
    python -m reporting.cli import listings/funda_12345.json
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List

from core.dashboard import DashboardService, DashboardView
from core.ingestion import map_listing_to_property
from core.models import PropertySummary
from core.snapshot import SnapshotError, load_snapshot
from utils.config import Config, configure_logging
from utils.formatting import (
    format_area,
    format_days_on_market,
    format_percent,
    format_price,
    format_price_range,
    format_score,
)


def format_summary_row(rank: int, summary: PropertySummary) -> str:
    """One table line for a ranked summary."""
    if summary.has_analysis:
        investment = format_price_range(summary.investment_low, summary.investment_high)
        budget = f"{summary.budget_status.label} ({format_percent(summary.budget_utilization)})"
    else:
        investment = "-"
        budget = "Nog niet geanalyseerd"

    days = (
        format_days_on_market(summary.days_on_market)
        if summary.days_on_market is not None
        else "-"
    )
    flags = ", ".join(f"{f.label} ({f.severity.label})" for f in summary.top_risk_flags)

    return (
        f"{rank:>3}. [{format_score(summary.match_score):>3}] {summary.tier.label:<16} "
        f"{summary.address}, {summary.city} | {format_price(summary.asking_price)} | "
        f"{format_area(summary.living_area)} | {investment} | {budget} | {days}"
        + (f" | {flags}" if flags else "")
    )


def render_view(view: DashboardView) -> List[str]:
    """Render a dashboard view as text lines."""
    stats = view.stats
    count = f"{stats.filtered} van {stats.total}" if stats.is_filtered else str(stats.total)
    lines = [
        f"{count} woningen · {stats.top_matches} top match{'es' if stats.top_matches != 1 else ''}",
        f"Query: {view.query_string or '(standaard)'}",
        "",
    ]

    offset = (view.page.page - 1) * view.page.page_size
    for i, summary in enumerate(view.page.items, start=offset + 1):
        lines.append(format_summary_row(i, summary))

    lines.append("")
    lines.append(f"Pagina {view.page.page} van {view.page.total_pages}")
    return lines


def cmd_rank(args):
    """Rank the properties of a snapshot under a filter query."""
    config = Config.load()
    try:
        snapshot = load_snapshot(args.snapshot_file)
    except SnapshotError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        scoring = config.scoring_config()
    except ValueError as e:
        print(f"Error: Invalid scoring configuration: {e}", file=sys.stderr)
        return 1

    service = DashboardService(
        scoring,
        default_page_size=config.page_size,
        max_page_size=config.max_page_size,
    )
    view = service.view(
        snapshot.properties,
        snapshot.analyses,
        args.query,
        page=args.page,
        page_size=args.page_size,
    )

    for line in render_view(view):
        print(line)
    return 0


def cmd_import(args):
    """Normalize a scraped listing JSON file and print the property fields."""
    input_path = Path(args.listing_file)

    if not input_path.exists():
        print(f"Error: File not found: {input_path}", file=sys.stderr)
        return 1

    try:
        with open(input_path, "r", encoding="utf-8") as f:
            listing = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        print(f"Error: Invalid JSON: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: Cannot read {input_path}: {e}", file=sys.stderr)
        return 1

    if not isinstance(listing, dict):
        print("Error: Listing must be a JSON object", file=sys.stderr)
        return 1

    imported = map_listing_to_property(listing)
    print(json.dumps(imported.to_dict(), indent=2, ensure_ascii=False))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Property Dashboard - ranking and listing import",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python -m reporting.cli rank data/snapshot.json --query "tier=excellent&sort=price_asc"
    python -m reporting.cli import listings/funda_12345.json
        """,
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Rank command
    rank_parser = subparsers.add_parser(
        "rank",
        help="Rank a snapshot of properties and analyses",
    )
    rank_parser.add_argument("snapshot_file", help="Path to snapshot JSON file")
    rank_parser.add_argument("--query", default="", help="Dashboard query string")
    rank_parser.add_argument("--page", type=int, default=1, help="Page number")
    rank_parser.add_argument("--page-size", type=int, default=None, help="Items per page")
    rank_parser.set_defaults(func=cmd_rank)

    # Import command
    import_parser = subparsers.add_parser(
        "import",
        help="Normalize a scraped listing JSON file",
    )
    import_parser.add_argument("listing_file", help="Path to listing JSON file")
    import_parser.set_defaults(func=cmd_import)

    return parser


def main(argv=None):
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    configure_logging(Config.load().log_level)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
