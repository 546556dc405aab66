"""
Simulated data generator for the NutriSnack dashboard.

Generates sell-out lines, alerts and perfect-store scores with realistic
shapes, and wraps them in an InMemoryStore that answers the same queries as
the live store. All values are synthetic.
"""

import datetime as dt

import numpy as np
import pandas as pd

from .config import (
    ALERTS_TABLE,
    BRAND_NAME,
    CHANNELS,
    CHANNELS_TABLE,
    MARKET_SHARE_VIEW,
    PERFECT_STORE_PROCEDURE,
    REGIONS,
    REGIONS_TABLE,
    SELL_OUT_VIEW,
)
from .loaders.store import InMemoryStore

# ---------------------------------------------------------------------------
# Catalog: (product, brand, base price ARS, weekly velocity)
# ---------------------------------------------------------------------------
_PRODUCTS = [
    ("Barrita Cereal Frutilla 25g", BRAND_NAME, 650, 14),
    ("Barrita Proteica Chocolate 40g", BRAND_NAME, 1200, 9),
    ("Mix Frutos Secos 100g", BRAND_NAME, 2100, 6),
    ("Galletas Avena Miel 150g", BRAND_NAME, 1450, 8),
    ("Chips de Garbanzo 80g", BRAND_NAME, 1350, 7),
    ("Lays Clásicas 85g", "PepsiCo (Lays)", 1300, 22),
    ("Cereal Mix Barra 23g", "Arcor", 600, 18),
    ("Oreo 118g", "Mondelez", 1100, 20),
    ("Georgalos Maní Salado 120g", "Georgalos", 950, 11),
]

# Relative market size
_REGION_WEIGHT = {"AMBA": 2.5, "Córdoba": 1.2, "Mendoza": 0.8, "Rosario": 1.0, "Tucumán": 0.6}
_CHANNEL_WEIGHT = {"Supermercado": 2.0, "Autoservicio": 1.0, "Kiosco": 0.6, "Almacén": 0.5}

_ALERTS = [
    ("stock_break", "high", "Quiebre de stock en Kiosco AMBA",
     "Barrita Proteica Chocolate sin stock en 14 kioscos de AMBA."),
    ("price_alert", "medium", "Precio por encima de la competencia",
     "Mix Frutos Secos 18% más caro que el promedio en Córdoba."),
    ("share_loss", "high", "Caída de share en Rosario",
     "Market share bajó 2.1 pp en las últimas 4 semanas."),
    ("opportunity", "low", "Oportunidad en Autoservicio Mendoza",
     "Chips de Garbanzo crecen 25% semana contra semana."),
    ("stock_break", "medium", "Quiebre de stock en Supermercado Tucumán",
     "Galletas Avena Miel con disponibilidad del 61%."),
    ("opportunity", "medium", "Distribución incompleta en Almacén",
     "Barrita Cereal Frutilla presente en 40% de almacenes relevados."),
]


def generate_sell_out(
    today: dt.date,
    days: int = 120,
    seed: int = 42,
) -> pd.DataFrame:
    """Generate daily sell-out lines for the ``days`` before ``today``.

    Returns
    -------
    DataFrame with columns:
        date (ISO string), product_name, brand_name, is_own_brand,
        channel_name, region_name, units, revenue, price
    """
    rng = np.random.default_rng(seed)
    dates = pd.date_range(end=pd.Timestamp(today), periods=days, freq="D")
    rows = []

    for day in dates:
        # Weekends sell more snacks
        day_factor = 1.25 if day.dayofweek >= 5 else 1.0
        for region in REGIONS:
            for channel in CHANNELS:
                scale = _REGION_WEIGHT.get(region, 1.0) * _CHANNEL_WEIGHT.get(channel, 1.0) * day_factor
                for product, brand, base_price, velocity in _PRODUCTS:
                    if rng.random() > 0.35:
                        continue
                    units = int(rng.poisson(velocity * scale / 7 * 3))
                    if units == 0:
                        continue
                    price = round(base_price * rng.uniform(0.92, 1.08), 2)
                    rows.append({
                        "date": day.date().isoformat(),
                        "product_name": product,
                        "brand_name": brand,
                        "is_own_brand": brand == BRAND_NAME,
                        "channel_name": channel,
                        "region_name": region,
                        "units": units,
                        "revenue": round(units * price, 2),
                        "price": price,
                    })

    return pd.DataFrame(rows)


def build_market_share_view(sell_out: pd.DataFrame) -> pd.DataFrame:
    """Daily revenue per region and brand flag, shaped like the store view."""
    grouped = (
        sell_out.groupby(["date", "region_name", "is_own_brand"], sort=False)["revenue"]
        .sum()
        .reset_index()
        .rename(columns={"revenue": "total_revenue"})
    )
    grouped["total_revenue"] = grouped["total_revenue"].round(2)
    return grouped


def generate_alerts(today: dt.date, seed: int = 42) -> pd.DataFrame:
    """Generate recent alerts, newest first, roughly a third already read."""
    rng = np.random.default_rng(seed)
    now = dt.datetime.combine(today, dt.time(9, 0), tzinfo=dt.timezone.utc)
    rows = []

    for i, (alert_type, severity, title, description) in enumerate(_ALERTS):
        rows.append({
            "id": f"alert-{i + 1:03d}",
            "type": alert_type,
            "severity": severity,
            "title": title,
            "description": description,
            "is_read": bool(rng.random() < 0.33),
            "created_at": (now - dt.timedelta(hours=7 * i)).isoformat(),
        })

    return pd.DataFrame(rows)


def generate_perfect_store_scores(seed: int = 42) -> list[dict]:
    """Generate per-region perfect-store scores (0-100)."""
    rng = np.random.default_rng(seed)
    rows = []

    for i, region in enumerate(REGIONS):
        availability = round(float(rng.uniform(65, 92)), 1)
        price = round(float(rng.uniform(55, 88)), 1)
        distribution = round(float(rng.uniform(50, 85)), 1)
        rows.append({
            "region_id": f"region-{i + 1}",
            "region_name": region,
            "availability_score": availability,
            "price_score": price,
            "distribution_score": distribution,
            "overall_score": round((availability + price + distribution) / 3, 1),
        })

    return rows


def build_demo_store(today: dt.date | None = None, seed: int = 42) -> InMemoryStore:
    """InMemoryStore seeded with simulated data.

    Only the perfect-store procedure is registered, so market share by
    region is computed from the view rows.
    """
    today = today or dt.date.today()
    sell_out = generate_sell_out(today, seed=seed)
    scores = generate_perfect_store_scores(seed)

    return InMemoryStore(
        tables={
            SELL_OUT_VIEW: sell_out,
            MARKET_SHARE_VIEW: build_market_share_view(sell_out),
            ALERTS_TABLE: generate_alerts(today, seed),
            REGIONS_TABLE: pd.DataFrame({"id": range(1, len(REGIONS) + 1), "name": REGIONS}),
            CHANNELS_TABLE: pd.DataFrame({"id": range(1, len(CHANNELS) + 1), "name": CHANNELS}),
        },
        procedures={PERFECT_STORE_PROCEDURE: lambda: scores},
    )
