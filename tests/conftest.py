import datetime as dt
from types import SimpleNamespace

import pandas as pd
import pytest

from nutrisnack_dashboard import config
from nutrisnack_dashboard.loaders import InMemoryStore

# A Monday; the Sunday before is 2026-10-18
TODAY = dt.date(2026, 10, 19)


def sell_out_row(day, region="AMBA", channel="Kiosco", product="Barrita", own=True,
                 units=1, revenue=100.0, price=100.0):
    return {
        "date": day.isoformat() if isinstance(day, dt.date) else day,
        "product_name": product,
        "brand_name": config.BRAND_NAME if own else "Arcor",
        "is_own_brand": own,
        "channel_name": channel,
        "region_name": region,
        "units": units,
        "revenue": revenue,
        "price": price,
    }


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def sell_out_rows():
    d = TODAY - dt.timedelta(days=2)
    old = TODAY - dt.timedelta(days=40)
    return [
        sell_out_row(d, "AMBA", "Kiosco", "Barrita", True, 2, 100.0, 50.0),
        sell_out_row(d, "AMBA", "Kiosco", "Lays", False, 3, 300.0, 100.0),
        sell_out_row(d, "Córdoba", "Supermercado", "Mix", True, 1, 50.0, 50.0),
        sell_out_row(old, "AMBA", "Kiosco", "Barrita", True, 1, 80.0, 80.0),
        sell_out_row(old, "AMBA", "Kiosco", "Lays", False, 1, 120.0, 120.0),
    ]


@pytest.fixture
def alert_rows():
    return [
        {"id": "a1", "type": "stock_break", "severity": "high", "title": "Quiebre",
         "description": "Sin stock", "is_read": False, "created_at": "2026-10-19T08:00:00+00:00"},
        {"id": "a2", "type": "price_alert", "severity": "medium", "title": "Precio",
         "description": "Caro", "is_read": True, "created_at": "2026-10-19T09:00:00+00:00"},
        {"id": "a3", "type": "share_loss", "severity": "low", "title": "Share",
         "description": "Baja", "is_read": False, "created_at": "2026-10-18T09:00:00+00:00"},
    ]


@pytest.fixture
def store(sell_out_rows, alert_rows):
    sell_out = pd.DataFrame(sell_out_rows)
    share_view = (
        sell_out.groupby(["date", "region_name", "is_own_brand"], sort=False)["revenue"]
        .sum().reset_index().rename(columns={"revenue": "total_revenue"})
    )
    return InMemoryStore(
        tables={
            config.SELL_OUT_VIEW: sell_out,
            config.MARKET_SHARE_VIEW: share_view,
            config.ALERTS_TABLE: pd.DataFrame(alert_rows),
            config.REGIONS_TABLE: pd.DataFrame({"name": ["AMBA", "Córdoba"]}),
            config.CHANNELS_TABLE: pd.DataFrame({"name": ["Kiosco", "Supermercado"]}),
        },
    )


class FakeMessages:
    def __init__(self, reply="Hola", error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        content = [SimpleNamespace(type="text", text=self.reply)] if self.reply else []
        return SimpleNamespace(content=content, stop_reason="end_turn")


class FakeAnthropic:
    def __init__(self, reply="Hola", error=None):
        self.messages = FakeMessages(reply, error)


@pytest.fixture
def fake_client():
    return FakeAnthropic("Las ventas en AMBA crecieron.")
