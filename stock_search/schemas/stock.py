from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime
from typing import List

from stock_search.exceptions import MalformedDataPoint
from stock_search.utils.dates import parse_point_date
from stock_search.utils.money import format_usd_amount


class PricePoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: str
    price: float

    @field_validator('date', mode='before')
    @classmethod
    def _coerce_date(cls, v):
        if v is None:
            return ""
        return str(v).strip()

    def date_value(self) -> datetime:
        """
        Parsed value of `date` used for chronological ordering.

        Raises:
            MalformedDataPoint: if `date` cannot be parsed.
        """
        dt = parse_point_date(self.date)
        if dt is None:
            raise MalformedDataPoint(f"Malformed date in historical data: {self.date!r}")
        return dt


class StockSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    company: str
    current_price: float
    suggestion: str = ""
    historical_data: List[PricePoint] = Field(default_factory=list)

    @property
    def current_price_fmt(self) -> str:
        return format_usd_amount(self.current_price, decimals=2)


class SearchErrorPayload(BaseModel):
    error: str
