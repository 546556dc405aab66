"""
Dashboard-ready output functions.

These are the entry points for the HTTP layer and the assistant. Each refresh
issues its independent store queries in parallel, joins them, then runs the
pure aggregation functions. A failed sub-query contributes an empty result
and the rest of the view is still built.
"""

import datetime as dt
import logging
import math
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable

import pandas as pd

from . import config
from .errors import DashboardError
from .kpis import classify_snapshot, compute_kpi_snapshot
from .loaders import (
    DataStore,
    ShareStrategy,
    fetch_market_share_procedure,
    load_alerts,
    load_channel_names,
    load_channel_rows,
    load_current_revenue,
    load_market_share_rows,
    load_own_product_rows,
    load_perfect_store_scores,
    load_previous_revenue,
    load_prices,
    load_region_names,
    load_trend_rows,
    parse_region_shares,
    select_share_strategy,
)
from .transforms import (
    channel_summary,
    product_sales,
    round_half_up,
    share_by_region,
    top_products,
    weekly_trend,
)

logger = logging.getLogger(__name__)

# name -> (loader, value used when the loader raises)
FetchPlan = dict[str, tuple[Callable[[], Any], Any]]


def fetch_parallel(plan: FetchPlan) -> dict[str, Any]:
    """Run independent loaders concurrently and join their results.

    A loader that raises is logged and replaced by its fallback value; the
    other loaders are unaffected. DashboardError (for example missing
    credentials) is not a data failure and propagates.
    """
    results: dict[str, Any] = {}
    with ThreadPoolExecutor(max_workers=config.FETCH_WORKERS) as pool:
        futures = {name: pool.submit(loader) for name, (loader, _) in plan.items()}
        for name, future in futures.items():
            try:
                results[name] = future.result()
            except DashboardError:
                raise
            except Exception:
                logger.exception("Fetch '%s' failed; continuing with empty result", name)
                results[name] = plan[name][1]
    return results


def _empty_frame() -> pd.DataFrame:
    return pd.DataFrame()


def load_market_share(store: DataStore, today: dt.date) -> pd.DataFrame:
    """Market share by region from the procedure, or from raw view rows.

    Returns
    -------
    DataFrame with columns: region_name, own_brand_share_pct, total_market
    """
    result = fetch_market_share_procedure(store)
    strategy = select_share_strategy(result)

    if strategy is ShareStrategy.PRE_AGGREGATED:
        return parse_region_shares(result)

    shares = share_by_region(load_market_share_rows(store, today))
    return pd.DataFrame({
        "region_name": shares["region_name"],
        "own_brand_share_pct": shares["share_pct"],
        "total_market": shares["total_revenue"],
    })


def _records(df: pd.DataFrame) -> list[dict]:
    """DataFrame rows as JSON-friendly dicts (dates as ISO strings)."""
    if df is None or df.empty:
        return []
    out = df.copy()
    for col in out.columns:
        if out[col].map(lambda v: isinstance(v, dt.date)).any():
            out[col] = out[col].map(lambda v: v.isoformat() if isinstance(v, dt.date) else v)
    return out.to_dict(orient="records")


def get_dashboard_view(store: DataStore, today: dt.date | None = None) -> dict:
    """Full view-model for the dashboard widgets.

    Returns
    -------
    Dict with structure:
    {
        "brand_name": "NutriSnack",
        "as_of": "2026-10-19",
        "kpis": {...KPISnapshot fields...},
        "kpi_status": {"revenue_change_pct": "green", ...},
        "market_share": [{"region_name", "own_brand_share_pct", "total_market"}],
        "perfect_store_scores": [...],
        "alerts": [...],
        "sales_trend": [{"week_start", "own_revenue", "competitor_revenue"}],
        "channel_mix": [{"channel_name", "own_revenue", "total_revenue", "units", "share_pct"}],
        "top_products": [{"product_name", "revenue", "units"}],
        "regions": [...],
        "channels": [...],
    }
    """
    today = today or dt.date.today()

    data = fetch_parallel({
        "market_share": (lambda: load_market_share(store, today), _empty_frame()),
        "perfect_store": (lambda: load_perfect_store_scores(store), []),
        "alerts": (lambda: load_alerts(store, limit=config.DASHBOARD_ALERT_LIMIT), []),
        "current": (lambda: load_current_revenue(store, today), _empty_frame()),
        "previous": (lambda: load_previous_revenue(store, today), _empty_frame()),
        "prices": (lambda: load_prices(store, today), _empty_frame()),
        "trend": (lambda: load_trend_rows(store, today), _empty_frame()),
        "channels_30d": (lambda: load_channel_rows(store, today, days=config.KPI_WINDOW_DAYS), _empty_frame()),
        "products": (lambda: load_own_product_rows(store, today), _empty_frame()),
        "regions": (lambda: load_region_names(store), []),
        "channels": (lambda: load_channel_names(store), []),
    })

    snapshot = compute_kpi_snapshot(data["current"], data["previous"], data["prices"])

    view = {
        "brand_name": config.BRAND_NAME,
        "as_of": today.isoformat(),
        "kpis": snapshot.to_dict(),
        "kpi_status": classify_snapshot(snapshot),
        "market_share": _records(data["market_share"]),
        "perfect_store_scores": [s.model_dump() for s in data["perfect_store"]],
        "alerts": [a.model_dump(mode="json") for a in data["alerts"]],
        "sales_trend": _records(weekly_trend(data["trend"])),
        "channel_mix": _records(channel_summary(data["channels_30d"])),
        "top_products": _records(top_products(product_sales(data["products"]))),
        "regions": data["regions"],
        "channels": data["channels"],
    }
    logger.info(
        "Dashboard view built: %d regions, %d alerts, %d trend weeks",
        len(view["market_share"]),
        len(view["alerts"]),
        len(view["sales_trend"]),
    )
    return view


def _format_pct(value: float) -> str:
    return f"{value:.1f}%"


def _format_money(value: float) -> str:
    return f"${math.floor(value + 0.5):,}"


def get_assistant_context(store: DataStore, today: dt.date | None = None) -> dict:
    """Condensed, self-contained snapshot embedded in the assistant prompt.

    Windows: 30-day market share by region, 7-day channel mix, 30-day
    own-brand top products, 30-day KPIs against the prior 30 days, 90-day
    weekly trend, latest unread alerts. Competitor, region and channel names
    are the static catalogs from config.
    """
    today = today or dt.date.today()

    data = fetch_parallel({
        "share_rows": (lambda: load_market_share_rows(store, today), _empty_frame()),
        "perfect_store": (lambda: load_perfect_store_scores(store), []),
        "alerts": (
            lambda: load_alerts(store, limit=config.ASSISTANT_ALERT_LIMIT, unread_only=True),
            [],
        ),
        "channel_rows": (lambda: load_channel_rows(store, today), _empty_frame()),
        "product_rows": (lambda: load_own_product_rows(store, today), _empty_frame()),
        "current": (lambda: load_current_revenue(store, today), _empty_frame()),
        "previous": (lambda: load_previous_revenue(store, today), _empty_frame()),
        "prices": (lambda: load_prices(store, today), _empty_frame()),
        "trend": (lambda: load_trend_rows(store, today), _empty_frame()),
    })

    shares = share_by_region(data["share_rows"])
    channels = channel_summary(data["channel_rows"])
    products = top_products(product_sales(data["product_rows"]))
    snapshot = compute_kpi_snapshot(data["current"], data["previous"], data["prices"])

    return {
        "kpis": snapshot.to_dict(),
        "market_share_by_region": [
            {
                "region": row.region_name,
                "share": _format_pct(row.share_pct),
                "revenue": _format_money(row.own_revenue),
            }
            for row in shares.itertuples(index=False)
        ],
        "perfect_store_scores": [
            {
                "region": s.region_name,
                "overall": s.overall_score,
                "availability": s.availability_score,
                "price": s.price_score,
                "distribution": s.distribution_score,
            }
            for s in data["perfect_store"]
        ],
        "active_alerts": [
            {
                "type": a.type,
                "severity": a.severity,
                "title": a.title,
                "description": a.description,
            }
            for a in data["alerts"]
        ],
        "sales_by_channel": [
            {
                "channel": row.channel_name,
                "revenue": int(revenue),
                "share": _format_pct(row.share_pct),
            }
            for row, revenue in zip(
                channels.itertuples(index=False), round_half_up(channels["own_revenue"])
            )
        ],
        "top_products": [
            {"name": row.product_name, "revenue": float(row.revenue), "units": int(row.units)}
            for row in products.itertuples(index=False)
        ],
        "weekly_trend": _records(weekly_trend(data["trend"])),
        "brand_name": config.BRAND_NAME,
        "competitors": list(config.COMPETITORS),
        "regions": list(config.REGIONS),
        "channels": list(config.CHANNELS),
    }
