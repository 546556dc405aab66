"""
Loaders for transaction-level sell-out rows.

Each loader issues one windowed select against the sell-out view, validates
the rows into SellOutRecord and returns a DataFrame holding only the selected
columns. A failed query is logged and yields an empty frame with the same
columns, so downstream aggregation degrades to zeros instead of aborting.
"""

import datetime as dt
import logging
from typing import Sequence

import pandas as pd

from .. import config
from ..schemas import MarketShareRow, SellOutRecord
from .store import DataStore, Query
from .utils import prior_window, validate_rows, window_start

logger = logging.getLogger(__name__)


def _records_frame(records: list, columns: Sequence[str]) -> pd.DataFrame:
    if not records:
        return pd.DataFrame(columns=list(columns))
    df = pd.DataFrame([r.model_dump(include=set(columns)) for r in records])
    return df[list(columns)]


def load_sell_out(
    store: DataStore,
    columns: Sequence[str],
    start: str,
    end: str | None = None,
    own_brand_only: bool = False,
    order_by_date: bool = False,
) -> pd.DataFrame:
    """Select validated sell-out rows with ``start <= date < end``.

    Parameters
    ----------
    store : Data store implementing the query contract.
    columns : Columns to select (SellOutRecord field names).
    start : Inclusive ISO lower bound on ``date``.
    end : Exclusive ISO upper bound, or None for open-ended.
    own_brand_only : Restrict to ``is_own_brand = true`` rows.
    order_by_date : Return rows in ascending date order.
    """
    columns = list(columns)
    query = Query(
        table=config.SELL_OUT_VIEW,
        columns=tuple(columns),
        gte={"date": start},
        lt={"date": end} if end else {},
        eq={"is_own_brand": True} if own_brand_only else {},
        order_by="date" if order_by_date else None,
    )
    result = store.select(query)
    if not result.ok:
        logger.warning("Sell-out query failed, using empty set: %s", result.error)
        return pd.DataFrame(columns=columns)

    records = validate_rows(result.data, SellOutRecord, required=columns, source=config.SELL_OUT_VIEW)
    df = _records_frame(records, columns)
    logger.info("Loaded %d sell-out rows (%s -> %s)", len(df), start, end or "today")
    return df


def load_current_revenue(store: DataStore, today: dt.date, days: int = config.KPI_WINDOW_DAYS) -> pd.DataFrame:
    return load_sell_out(store, ["revenue", "is_own_brand"], window_start(today, days))


def load_previous_revenue(store: DataStore, today: dt.date, days: int = config.KPI_WINDOW_DAYS) -> pd.DataFrame:
    start, end = prior_window(today, days)
    return load_sell_out(store, ["revenue", "is_own_brand"], start, end)


def load_prices(store: DataStore, today: dt.date, days: int = config.PRICE_WINDOW_DAYS) -> pd.DataFrame:
    return load_sell_out(store, ["price", "is_own_brand"], window_start(today, days))


def load_trend_rows(store: DataStore, today: dt.date, days: int = config.TREND_WINDOW_DAYS) -> pd.DataFrame:
    return load_sell_out(
        store, ["date", "revenue", "is_own_brand"], window_start(today, days), order_by_date=True
    )


def load_channel_rows(store: DataStore, today: dt.date, days: int = config.CHANNEL_WINDOW_DAYS) -> pd.DataFrame:
    return load_sell_out(
        store, ["channel_name", "revenue", "units", "is_own_brand"], window_start(today, days)
    )


def load_own_product_rows(store: DataStore, today: dt.date, days: int = config.PRODUCT_WINDOW_DAYS) -> pd.DataFrame:
    return load_sell_out(
        store, ["product_name", "revenue", "units"], window_start(today, days), own_brand_only=True
    )


def load_market_share_rows(store: DataStore, today: dt.date, days: int = config.SHARE_WINDOW_DAYS) -> pd.DataFrame:
    """Region rows from the market-share view, with ``total_revenue``
    renamed to ``revenue`` so they feed the region aggregator directly.
    """
    columns = ["region_name", "is_own_brand", "revenue"]
    query = Query(
        table=config.MARKET_SHARE_VIEW,
        gte={"date": window_start(today, days)},
    )
    result = store.select(query)
    if not result.ok:
        logger.warning("Market-share view query failed, using empty set: %s", result.error)
        return pd.DataFrame(columns=columns)

    records = validate_rows(
        result.data, MarketShareRow, required=["region_name", "total_revenue"], source=config.MARKET_SHARE_VIEW
    )
    if not records:
        return pd.DataFrame(columns=columns)

    df = pd.DataFrame([r.model_dump() for r in records]).rename(columns={"total_revenue": "revenue"})
    logger.info("Loaded %d market-share rows", len(df))
    return df[columns]
