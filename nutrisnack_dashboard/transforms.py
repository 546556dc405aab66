"""
Aggregation pipeline: group validated sell-out rows into share-by-region,
channel mix, product sales, top products and the weekly trend series.

All functions are pure. Callers filter rows to the date window and brand flag
beforehand; nothing here re-filters. Empty input gives an empty frame with the
output schema. Groups come out in first-encountered order.
"""

import datetime as dt
import logging

import numpy as np
import pandas as pd

from .config import TOP_N_PRODUCTS

logger = logging.getLogger(__name__)

SHARE_COLUMNS = ["own_revenue", "total_revenue", "share_pct"]
PRODUCT_COLUMNS = ["product_name", "revenue", "units"]
TREND_COLUMNS = ["week_start", "own_revenue", "competitor_revenue"]


def share_pct_series(own: pd.Series, total: pd.Series) -> pd.Series:
    """own / total * 100 rounded to one decimal, 0 where total is 0."""
    total = total.astype(float)
    pct = (own.astype(float) / total.where(total > 0)) * 100
    return pct.fillna(0.0).round(1)


def round_half_up(values: pd.Series) -> pd.Series:
    """Round to the nearest integer, halves away from zero for non-negatives."""
    return np.floor(values.astype(float) + 0.5).astype(int)


def _own_mask(df: pd.DataFrame) -> pd.Series:
    return df["is_own_brand"].astype(bool)


def aggregate_share(df: pd.DataFrame, key: str) -> pd.DataFrame:
    """Fold rows into own/total revenue per ``key``.

    Parameters
    ----------
    df : Rows with columns ``key``, revenue, is_own_brand.
    key : Grouping column (exact, case-sensitive match).

    Returns
    -------
    DataFrame with columns: key, own_revenue, total_revenue, share_pct
    """
    if df.empty:
        return pd.DataFrame(columns=[key, *SHARE_COLUMNS])

    revenue = df["revenue"].astype(float)
    frame = pd.DataFrame({
        key: df[key],
        "own_revenue": revenue.where(_own_mask(df), 0.0),
        "total_revenue": revenue,
    })
    result = frame.groupby(key, sort=False)[["own_revenue", "total_revenue"]].sum().reset_index()
    result["share_pct"] = share_pct_series(result["own_revenue"], result["total_revenue"])
    return result


def share_by_region(df: pd.DataFrame) -> pd.DataFrame:
    """Own-brand share of revenue per region."""
    result = aggregate_share(df, "region_name")
    logger.info("Built share by region with %d rows", len(result))
    return result


def channel_summary(df: pd.DataFrame) -> pd.DataFrame:
    """Own-brand share per channel plus own-brand units sold.

    Returns
    -------
    DataFrame with columns:
        channel_name, own_revenue, total_revenue, units, share_pct
    """
    columns = ["channel_name", "own_revenue", "total_revenue", "units", "share_pct"]
    if df.empty:
        return pd.DataFrame(columns=columns)

    result = aggregate_share(df, "channel_name")
    own_units = (
        df["units"].astype(int).where(_own_mask(df), 0)
        .groupby(df["channel_name"], sort=False).sum()
    )
    result["units"] = result["channel_name"].map(own_units).astype(int)

    logger.info("Built channel summary with %d rows", len(result))
    return result[columns]


def product_sales(df: pd.DataFrame) -> pd.DataFrame:
    """Revenue and units per product. Rows are expected to be own-brand only."""
    if df.empty:
        return pd.DataFrame(columns=PRODUCT_COLUMNS)

    frame = pd.DataFrame({
        "product_name": df["product_name"],
        "revenue": df["revenue"].astype(float),
        "units": df["units"].astype(int),
    })
    return frame.groupby("product_name", sort=False)[["revenue", "units"]].sum().reset_index()


def top_products(products: pd.DataFrame, n: int = TOP_N_PRODUCTS) -> pd.DataFrame:
    """Top ``n`` products by revenue, descending.

    The sort is stable, so products with equal revenue keep their
    first-encountered order.
    """
    if products.empty:
        return pd.DataFrame(columns=PRODUCT_COLUMNS)

    ranked = products.assign(_rank=-products["revenue"].astype(float))
    ranked = ranked.sort_values("_rank", kind="stable").head(n)
    return ranked.drop(columns="_rank").reset_index(drop=True)


def week_start(day: dt.date) -> dt.date:
    """The Sunday on or before ``day``."""
    return day - dt.timedelta(days=(day.weekday() + 1) % 7)


def weekly_trend(df: pd.DataFrame) -> pd.DataFrame:
    """Bucket revenue into Sunday-start weeks, own brand vs competitors.

    Parameters
    ----------
    df : Rows with columns date, revenue, is_own_brand.

    Returns
    -------
    DataFrame with columns week_start (date), own_revenue (int),
    competitor_revenue (int), ascending by week_start.
    """
    if df.empty:
        return pd.DataFrame(columns=TREND_COLUMNS)

    dates = pd.to_datetime(df["date"]).dt.normalize()
    # dayofweek: Monday=0 .. Sunday=6
    starts = dates - pd.to_timedelta((dates.dt.dayofweek + 1) % 7, unit="D")

    own = _own_mask(df)
    revenue = df["revenue"].astype(float)
    frame = pd.DataFrame({
        "week_start": starts,
        "own_revenue": revenue.where(own, 0.0),
        "competitor_revenue": revenue.where(~own, 0.0),
    })

    result = frame.groupby("week_start", sort=True)[["own_revenue", "competitor_revenue"]].sum().reset_index()
    result["week_start"] = result["week_start"].dt.date
    result["own_revenue"] = round_half_up(result["own_revenue"])
    result["competitor_revenue"] = round_half_up(result["competitor_revenue"])

    logger.info("Built weekly trend with %d weeks", len(result))
    return result
