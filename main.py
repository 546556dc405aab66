"""
NutriSnack: end-to-end analytics pipeline.

Runs the full pipeline from the data store to dashboard-ready outputs and
prints smoke-test summaries.

Usage:
    python main.py            # live store (SUPABASE_URL / SUPABASE_KEY)
    python main.py --demo     # simulated data in memory
"""

import argparse
import datetime as dt
import logging
import sys

from nutrisnack_dashboard import config
from nutrisnack_dashboard.dashboard import get_assistant_context, get_dashboard_view
from nutrisnack_dashboard.loaders import SupabaseStore
from nutrisnack_dashboard.simulator import build_demo_store

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=config.LOG_LEVEL,
    format=config.LOG_FORMAT,
    datefmt=config.LOG_DATEFMT,
)
logger = logging.getLogger(__name__)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="NutriSnack analytics smoke test")
    parser.add_argument("--demo", action="store_true", help="use simulated data instead of the live store")
    parser.add_argument("--as-of", type=dt.date.fromisoformat, default=dt.date.today(),
                        help="reference date (YYYY-MM-DD), defaults to today")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Run the analytics pipeline and print smoke-test outputs."""
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    store = build_demo_store(args.as_of) if args.demo else SupabaseStore()

    print("=" * 70)
    print(f"  {config.BRAND_NAME.upper()}: Sell-out Analytics Dashboard")
    print(f"  Pipeline Smoke Test ({'demo data' if args.demo else 'live store'}, as of {args.as_of})")
    print("=" * 70)

    # ------------------------------------------------------------------
    # 1. Dashboard view
    # ------------------------------------------------------------------
    print("\n[ 1 ] DASHBOARD VIEW")
    print("-" * 40)
    view = get_dashboard_view(store, args.as_of)

    print("\nKPIs:")
    for name, value in view["kpis"].items():
        status = view["kpi_status"].get(name, "")
        shown = "n/a" if value is None else f"{value:,.2f}"
        print(f"  {name:26s} | {shown:>14s} {status}")

    print("\nMarket share by region:")
    for row in view["market_share"]:
        print(f"  {row['region_name']:12s} | {row['own_brand_share_pct']:5.1f}% | ${row['total_market']:,.0f}")

    print("\nWeekly trend (own vs competitors):")
    for row in view["sales_trend"]:
        print(f"  {row['week_start']} | {row['own_revenue']:>12,} | {row['competitor_revenue']:>12,}")

    print("\nTop products:")
    for row in view["top_products"]:
        print(f"  {row['product_name']:32s} | ${row['revenue']:,.0f} | {row['units']} u")

    print(f"\nAlerts: {len(view['alerts'])} | Perfect-store regions: {len(view['perfect_store_scores'])}")

    # ------------------------------------------------------------------
    # 2. Assistant snapshot
    # ------------------------------------------------------------------
    print("\n[ 2 ] ASSISTANT CONTEXT")
    print("-" * 40)
    context = get_assistant_context(store, args.as_of)
    for key, value in context.items():
        size = len(value) if isinstance(value, list) else value
        print(f"  {key:24s} | {size}")

    # ------------------------------------------------------------------
    # 3. Checks
    # ------------------------------------------------------------------
    print("\n[ 3 ] CHECKS")
    print("-" * 40)
    shares_ok = all(0 <= r["own_brand_share_pct"] <= 100 for r in view["market_share"])
    print(f"  [{'PASS' if shares_ok else 'FAIL'}] Region shares within 0-100%")
    top_ok = len(view["top_products"]) <= config.TOP_N_PRODUCTS
    print(f"  [{'PASS' if top_ok else 'FAIL'}] Top products has {len(view['top_products'])} rows")
    weeks = [r["week_start"] for r in view["sales_trend"]]
    sundays_ok = all(dt.date.fromisoformat(w).weekday() == 6 for w in weeks)
    print(f"  [{'PASS' if sundays_ok else 'FAIL'}] All {len(weeks)} trend weeks start on Sunday")

    print("\n" + "=" * 70)
    print("  Pipeline complete.")
    print("=" * 70)
    return 0 if shares_ok and top_ok and sundays_ok else 1


if __name__ == "__main__":
    sys.exit(main())
