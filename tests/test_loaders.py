import datetime as dt
from unittest.mock import MagicMock

import pandas as pd

from nutrisnack_dashboard import config
from nutrisnack_dashboard.loaders import (
    InMemoryStore,
    Query,
    QueryResult,
    ShareStrategy,
    SupabaseStore,
    load_alerts,
    load_channel_names,
    load_current_revenue,
    load_market_share_rows,
    load_own_product_rows,
    load_perfect_store_scores,
    load_previous_revenue,
    load_region_names,
    load_sell_out,
    load_trend_rows,
    parse_region_shares,
    select_share_strategy,
)
from nutrisnack_dashboard.loaders.utils import prior_window, window_start
from nutrisnack_dashboard.schemas import SellOutRecord
from nutrisnack_dashboard.loaders.utils import validate_rows


def test_window_bounds(today):
    assert window_start(today, 30) == "2026-09-19"
    assert prior_window(today, 30) == ("2026-08-20", "2026-09-19")


def test_in_memory_store_applies_filters_order_and_limit(store):
    result = store.select(Query(
        table=config.SELL_OUT_VIEW,
        columns=("product_name", "revenue"),
        eq={"is_own_brand": True},
        order_by="revenue",
        descending=True,
        limit=2,
    ))
    assert result.ok
    assert result.data == [
        {"product_name": "Barrita", "revenue": 100.0},
        {"product_name": "Barrita", "revenue": 80.0},
    ]


def test_in_memory_store_reports_unknown_table_and_procedure():
    store = InMemoryStore()
    assert not store.select(Query(table="nope")).ok
    assert not store.rpc("missing_proc").ok


def test_validate_rows_drops_malformed_rows(caplog):
    rows = [
        {"revenue": "12.5", "is_own_brand": True},
        {"revenue": None, "is_own_brand": True},
        {"revenue": -3, "is_own_brand": False},
        {"revenue": "abc", "is_own_brand": False},
        {"is_own_brand": True},
    ]
    records = validate_rows(rows, SellOutRecord, required=["revenue", "is_own_brand"], source="test")

    assert [r.revenue for r in records] == [12.5]
    assert "Dropped 4 malformed rows" in caplog.text


def test_load_sell_out_windows(store, today):
    current = load_current_revenue(store, today)
    previous = load_previous_revenue(store, today)

    assert list(current.columns) == ["revenue", "is_own_brand"]
    assert current["revenue"].sum() == 450.0
    assert previous["revenue"].sum() == 200.0


def test_load_own_product_rows_only_returns_own_brand(store, today):
    products = load_own_product_rows(store, today)
    assert set(products["product_name"]) == {"Barrita", "Mix"}


def test_load_trend_rows_ordered_by_date(store, today):
    trend = load_trend_rows(store, today)
    assert list(trend["date"]) == sorted(trend["date"])
    assert isinstance(trend["date"].iloc[0], dt.date)


def test_load_sell_out_failure_returns_empty_frame_with_columns(today):
    failing = MagicMock()
    failing.select.return_value = QueryResult(error="timeout")

    df = load_sell_out(failing, ["price", "is_own_brand"], window_start(today, 7))

    assert df.empty
    assert list(df.columns) == ["price", "is_own_brand"]


def test_load_market_share_rows_renames_total_revenue(store, today):
    rows = load_market_share_rows(store, today)
    assert list(rows.columns) == ["region_name", "is_own_brand", "revenue"]
    assert rows["revenue"].sum() == 450.0


def test_select_share_strategy():
    assert select_share_strategy(QueryResult(data=[])) is ShareStrategy.PRE_AGGREGATED
    assert select_share_strategy(QueryResult(error="boom")) is ShareStrategy.MANUAL


def test_parse_region_shares_drops_out_of_range_rows():
    result = QueryResult(data=[
        {"region_name": "AMBA", "own_brand_share_pct": 22.5, "total_market": 1000},
        {"region_name": "Rosario", "own_brand_share_pct": 140, "total_market": 10},
    ])
    df = parse_region_shares(result)
    assert list(df["region_name"]) == ["AMBA"]


def test_parse_region_shares_rounds_to_one_decimal():
    result = QueryResult(data=[
        {"region_name": "AMBA", "own_brand_share_pct": 31.2467, "total_market": 9000},
    ])
    assert parse_region_shares(result).iloc[0]["own_brand_share_pct"] == 31.2


def test_load_alerts_newest_first_and_unread_filter(store):
    alerts = load_alerts(store, limit=10)
    assert [a.id for a in alerts] == ["a2", "a1", "a3"]

    unread = load_alerts(store, limit=1, unread_only=True)
    assert [a.id for a in unread] == ["a1"]


def test_perfect_store_scores_empty_when_procedure_missing(store):
    assert load_perfect_store_scores(store) == []


def test_perfect_store_scores_pass_through():
    rows = [{"region_id": 1, "region_name": "AMBA", "availability_score": 80,
             "price_score": 70, "distribution_score": 60, "overall_score": 70}]
    store = InMemoryStore(procedures={config.PERFECT_STORE_PROCEDURE: lambda: rows})

    scores = load_perfect_store_scores(store)

    assert len(scores) == 1
    assert scores[0].region_id == "1"
    assert scores[0].overall_score == 70.0


def test_catalog_names(store):
    assert load_region_names(store) == ["AMBA", "Córdoba"]
    assert load_channel_names(store) == ["Kiosco", "Supermercado"]
    assert load_region_names(InMemoryStore()) == []


def test_supabase_store_builds_postgrest_chain():
    client = MagicMock()
    request = client.table.return_value.select.return_value
    request.gte.return_value = request
    request.lt.return_value = request
    request.eq.return_value = request
    request.order.return_value = request
    request.limit.return_value = request
    request.execute.return_value.data = [{"revenue": 1}]

    result = SupabaseStore(client).select(Query(
        table="v_sell_out_detail",
        columns=("revenue", "is_own_brand"),
        gte={"date": "2026-09-19"},
        lt={"date": "2026-10-19"},
        eq={"is_own_brand": True},
        order_by="date",
        limit=5,
    ))

    assert result.ok and result.data == [{"revenue": 1}]
    client.table.assert_called_once_with("v_sell_out_detail")
    client.table.return_value.select.assert_called_once_with("revenue,is_own_brand")
    request.gte.assert_called_once_with("date", "2026-09-19")
    request.lt.assert_called_once_with("date", "2026-10-19")
    request.eq.assert_called_once_with("is_own_brand", True)
    request.order.assert_called_once_with("date", desc=False)
    request.limit.assert_called_once_with(5)


def test_supabase_store_turns_client_errors_into_results():
    client = MagicMock()
    client.table.side_effect = RuntimeError("connection reset")
    client.rpc.return_value.execute.side_effect = RuntimeError("function missing")

    store = SupabaseStore(client)

    select = store.select(Query(table="alerts"))
    rpc = store.rpc(config.MARKET_SHARE_PROCEDURE)

    assert not select.ok and "connection reset" in select.error
    assert not rpc.ok and rpc.data == []
