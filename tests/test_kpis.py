import math

import pandas as pd
import pytest

from nutrisnack_dashboard.kpis import (
    KPISnapshot,
    calc_change_pct,
    calc_share_pct,
    classify_delta,
    classify_snapshot,
    compute_kpi_snapshot,
)


def _revenue(*pairs):
    return pd.DataFrame([{"revenue": r, "is_own_brand": own} for r, own in pairs])


def _prices(*pairs):
    return pd.DataFrame([{"price": p, "is_own_brand": own} for p, own in pairs])


def test_calc_share_pct_guards_zero_total():
    assert calc_share_pct(0, 0) == 0.0
    assert calc_share_pct(100, 400) == 25.0


def test_calc_change_pct_guards_zero_previous():
    assert calc_change_pct(500, 0) == 0.0
    assert calc_change_pct(150, 100) == pytest.approx(50.0)
    assert calc_change_pct(50, 100) == pytest.approx(-50.0)


def test_snapshot_revenue_change_is_zero_when_previous_own_is_zero():
    snapshot = compute_kpi_snapshot(
        current=_revenue((500.0, True), (500.0, False)),
        previous=_revenue((300.0, False)),
        prices=_prices(),
    )
    assert snapshot.total_revenue == 500.0
    assert snapshot.revenue_change_pct == 0.0
    assert math.isfinite(snapshot.revenue_change_pct)


def test_snapshot_share_change_is_percentage_points():
    snapshot = compute_kpi_snapshot(
        current=_revenue((30.0, True), (70.0, False)),
        previous=_revenue((20.0, True), (80.0, False)),
        prices=_prices(),
    )
    assert snapshot.market_share_pct == pytest.approx(30.0)
    assert snapshot.share_change_pct == pytest.approx(10.0)
    assert snapshot.revenue_change_pct == pytest.approx(50.0)


def test_snapshot_price_vs_competition():
    snapshot = compute_kpi_snapshot(
        current=_revenue(),
        previous=_revenue(),
        prices=_prices((110.0, True), (130.0, True), (100.0, False), (100.0, False)),
    )
    assert snapshot.avg_own_price == pytest.approx(120.0)
    assert snapshot.price_vs_competition_pct == pytest.approx(20.0)


def test_snapshot_without_competitor_prices_is_zero():
    snapshot = compute_kpi_snapshot(_revenue(), _revenue(), _prices((99.0, True)))
    assert snapshot.avg_own_price == 99.0
    assert snapshot.price_vs_competition_pct == 0.0


def test_snapshot_of_empty_windows_is_all_zero_and_finite():
    snapshot = compute_kpi_snapshot(pd.DataFrame(), pd.DataFrame(), pd.DataFrame())
    values = snapshot.to_dict()

    for name in ("total_revenue", "revenue_change_pct", "market_share_pct",
                 "share_change_pct", "avg_own_price", "price_vs_competition_pct"):
        assert values[name] == 0.0
    assert values["availability_pct"] is None
    assert values["availability_change_pct"] is None


@pytest.mark.parametrize(
    "value, direction, expected",
    [
        (1.5, "higher_is_better", "green"),
        (-0.5, "higher_is_better", "amber"),
        (-3.0, "higher_is_better", "red"),
        (-2.0, "lower_is_better", "green"),
        (0.5, "lower_is_better", "amber"),
        (4.0, "lower_is_better", "red"),
        (None, "higher_is_better", "grey"),
        (float("nan"), "lower_is_better", "grey"),
    ],
)
def test_classify_delta(value, direction, expected):
    assert classify_delta(value, direction, amber_band=1.0) == expected


def test_classify_snapshot_marks_missing_availability_grey():
    snapshot = KPISnapshot(
        total_revenue=1000.0,
        revenue_change_pct=5.0,
        market_share_pct=20.0,
        share_change_pct=-2.0,
        avg_own_price=100.0,
        price_vs_competition_pct=3.0,
    )
    status = classify_snapshot(snapshot)

    assert status["revenue_change_pct"] == "green"
    assert status["share_change_pct"] == "red"
    assert status["price_vs_competition_pct"] == "amber"
    assert status["availability_change_pct"] == "grey"
