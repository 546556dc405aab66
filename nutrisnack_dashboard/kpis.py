"""
KPI computation functions: pure functions with no side effects.

Provides guarded share/change ratios, the period-over-period KPI snapshot,
and green/amber/red colouring for KPI cards.
"""

import logging
from dataclasses import asdict, dataclass

import pandas as pd

from .config import KPI_REGISTRY

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KPISnapshot:
    """Point-in-time KPIs for the dashboard cards.

    availability_pct and availability_change_pct are None: availability is
    not yet derived from store data.
    """

    total_revenue: float
    revenue_change_pct: float
    market_share_pct: float
    share_change_pct: float
    avg_own_price: float
    price_vs_competition_pct: float
    availability_pct: float | None = None
    availability_change_pct: float | None = None

    def to_dict(self) -> dict:
        return asdict(self)


def calc_share_pct(own: float, total: float) -> float:
    """Return own / total * 100, or 0.0 when total is 0."""
    if not total:
        return 0.0
    return own / total * 100


def calc_change_pct(current: float, previous: float) -> float:
    """Return relative change in percent, or 0.0 when previous is 0."""
    if not previous:
        return 0.0
    return (current - previous) / previous * 100


def _revenue_split(df: pd.DataFrame) -> tuple[float, float]:
    """(own revenue, total revenue) of a window."""
    if df.empty:
        return 0.0, 0.0
    revenue = df["revenue"].astype(float)
    own = revenue[df["is_own_brand"].astype(bool)].sum()
    return float(own), float(revenue.sum())


def _mean_price(prices: pd.Series) -> float:
    if prices.empty:
        return 0.0
    return float(prices.astype(float).mean())


def compute_kpi_snapshot(
    current: pd.DataFrame,
    previous: pd.DataFrame,
    prices: pd.DataFrame,
) -> KPISnapshot:
    """Compute the KPI snapshot from two disjoint windows plus recent prices.

    Parameters
    ----------
    current : revenue, is_own_brand rows of the current window.
    previous : Same columns for the window immediately before it.
    prices : price, is_own_brand rows of the trailing price window.

    Notes
    -----
    share_change_pct is an absolute difference in percentage points;
    revenue_change_pct is relative to the previous own-brand revenue.
    """
    current_own, current_total = _revenue_split(current)
    previous_own, previous_total = _revenue_split(previous)

    current_share = calc_share_pct(current_own, current_total)
    previous_share = calc_share_pct(previous_own, previous_total)

    if prices.empty:
        avg_own, avg_comp = 0.0, 0.0
    else:
        own_mask = prices["is_own_brand"].astype(bool)
        avg_own = _mean_price(prices.loc[own_mask, "price"])
        avg_comp = _mean_price(prices.loc[~own_mask, "price"])

    snapshot = KPISnapshot(
        total_revenue=current_own,
        revenue_change_pct=calc_change_pct(current_own, previous_own),
        market_share_pct=current_share,
        share_change_pct=current_share - previous_share,
        avg_own_price=avg_own,
        price_vs_competition_pct=calc_change_pct(avg_own, avg_comp),
    )
    logger.info(
        "KPI snapshot: revenue=%.0f share=%.1f%% (%+.1f pp)",
        snapshot.total_revenue,
        snapshot.market_share_pct,
        snapshot.share_change_pct,
    )
    return snapshot


def classify_delta(
    value: float | None,
    direction: str,
    amber_band: float = 1.0,
) -> str:
    """Return 'green', 'amber', 'red' or 'grey' for a KPI delta.

    Logic
    -----
    - direction='higher_is_better':
        green  if value >= 0
        amber  if value >= -amber_band
        red    otherwise

    - direction='lower_is_better':
        green  if value <= 0
        amber  if value <= amber_band
        red    otherwise

    None (no data) is grey.
    """
    if value is None or pd.isna(value):
        return "grey"

    if direction == "higher_is_better":
        if value >= 0:
            return "green"
        if value >= -amber_band:
            return "amber"
        return "red"
    else:  # lower_is_better
        if value <= 0:
            return "green"
        if value <= amber_band:
            return "amber"
        return "red"


def classify_snapshot(snapshot: KPISnapshot) -> dict[str, str]:
    """Card colour for each KPI delta in KPI_REGISTRY."""
    values = snapshot.to_dict()
    return {
        kpi_name: classify_delta(
            values.get(kpi_name),
            registry["direction"],
            registry.get("amber_band", 1.0),
        )
        for kpi_name, registry in KPI_REGISTRY.items()
    }
