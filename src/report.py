"""Refund report CLI.

Collects orders for a date window, prints the refund statistics and
optionally writes the refund CSV.

Usage:
    python src/report.py --start 2024-01-01 --end 2024-01-31
    python src/report.py --start 2024-01-01 --end 2024-01-31 --csv refunds.csv
"""

import argparse
import asyncio
import sys
from datetime import date
from pathlib import Path


def _parse_day(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got {value!r}") from exc


async def run_report(start: date, end: date, csv_path: Path | None = None) -> int:
    from analytics.collection import get_collector
    from analytics.domain import analytics
    from analytics.errors import UpstreamError
    from analytics.reporting.aggregation import aggregate
    from analytics.reporting.export import refunds_csv
    from analytics.reporting.loading import load_enriched_orders
    from analytics.window import DateWindow

    window = DateWindow.from_bounds(start, end)
    collector = get_collector()

    with analytics.domain_context():
        try:
            orders = await load_enriched_orders(window, collector)
        except UpstreamError as exc:
            print(f"Failed to collect orders: {exc}", file=sys.stderr)
            return 1
        finally:
            await collector.source.aclose()

        snapshot = aggregate(orders, window.start, window.end)

        print(f"Refund report {window}")
        print(f"  Orders placed:        {snapshot.total_orders}")
        print(f"  Full refunds:         {snapshot.total_refunds}")
        print(f"  Refund rate:          {snapshot.refund_rate:.1f}%")
        print(f"  Avg days to refund:   {snapshot.avg_days_to_refund:.1f}")
        print(f"  Total refunded:       {snapshot.total_refund_amount:.2f}")
        print(f"  Avg refund:           {snapshot.avg_refund_amount:.2f}")

        if csv_path is not None:
            csv_path.write_text(refunds_csv(orders, window), encoding="utf-8")
            print(f"Wrote {csv_path}")

    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(description="Refund Analytics report")
    parser.add_argument("--start", required=True, type=_parse_day, help="First day (YYYY-MM-DD)")
    parser.add_argument("--end", required=True, type=_parse_day, help="Last day (YYYY-MM-DD)")
    parser.add_argument("--csv", type=Path, help="Also write refunds in the window to this CSV file")
    args = parser.parse_args(argv)

    if args.start > args.end:
        parser.error("--start must not be after --end")

    from analytics.domain import analytics

    analytics.init()
    sys.exit(asyncio.run(run_report(args.start, args.end, args.csv)))


if __name__ == "__main__":
    main()
