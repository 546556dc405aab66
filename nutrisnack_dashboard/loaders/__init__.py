"""Data-store access for the NutriSnack dashboard."""

from .store import DataStore, InMemoryStore, Query, QueryResult, SupabaseStore
from .sell_out import load_sell_out, load_current_revenue, load_previous_revenue
from .sell_out import load_prices, load_trend_rows, load_channel_rows
from .sell_out import load_own_product_rows, load_market_share_rows
from .reference import ShareStrategy, select_share_strategy
from .reference import fetch_market_share_procedure, parse_region_shares
from .reference import load_perfect_store_scores, load_alerts
from .reference import load_region_names, load_channel_names

__all__ = [
    "DataStore",
    "InMemoryStore",
    "Query",
    "QueryResult",
    "SupabaseStore",
    "load_sell_out",
    "load_current_revenue",
    "load_previous_revenue",
    "load_prices",
    "load_trend_rows",
    "load_channel_rows",
    "load_own_product_rows",
    "load_market_share_rows",
    "ShareStrategy",
    "select_share_strategy",
    "fetch_market_share_procedure",
    "parse_region_shares",
    "load_perfect_store_scores",
    "load_alerts",
    "load_region_names",
    "load_channel_names",
]
