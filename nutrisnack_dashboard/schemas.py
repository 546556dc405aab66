"""
Typed records for rows read from the data store.

Raw rows arrive as untyped dicts. They are parsed into these models at the
ingestion boundary so that missing or malformed values never reach the
aggregation arithmetic.
"""

import datetime as dt
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class SellOutRecord(BaseModel):
    """One point-of-sale transaction line.

    Queries select subsets of columns, so every field has a default; the
    loaders check separately that the selected columns are present.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    date: Optional[dt.date] = None
    product_name: str = ""
    brand_name: str = ""
    is_own_brand: bool = False
    channel_name: str = ""
    region_name: str = ""
    units: int = Field(default=0, ge=0)
    revenue: float = Field(default=0.0, ge=0)
    price: float = 0.0


class MarketShareRow(BaseModel):
    """Row of the market-share view (one brand flag per region and day)."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    date: Optional[dt.date] = None
    region_name: str
    is_own_brand: bool = False
    total_revenue: float = Field(default=0.0, ge=0)


class RegionShareRow(BaseModel):
    """Row returned by the pre-aggregated market-share procedure."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    region_name: str
    own_brand_share_pct: float = Field(ge=0, le=100)
    total_market: float = Field(ge=0)


class PerfectStoreScore(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True, coerce_numbers_to_str=True)

    region_id: str
    region_name: str
    availability_score: float = 0.0
    price_score: float = 0.0
    distribution_score: float = 0.0
    overall_score: float = 0.0


class Alert(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True, coerce_numbers_to_str=True)

    id: str
    type: Literal["stock_break", "price_alert", "share_loss", "opportunity"]
    severity: Literal["low", "medium", "high"]
    title: str
    description: str = ""
    is_read: bool = False
    created_at: dt.datetime
    product_id: Optional[str] = None
    region_id: Optional[str] = None
    point_of_sale_id: Optional[str] = None


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    messages: list[ChatMessage] = Field(min_length=1)
