from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from datetime import datetime
from app.services.rate_sync import PairStatus


class CamelModel(BaseModel):
    """Serialized with camelCase keys (baseCurrency, updateTime, ...)"""

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True


class ExchangeRateResponse(CamelModel):
    id: int
    base_currency: str
    quote_currency: str
    rate: float
    update_time: datetime


class ExchangeRateView(CamelModel):
    """Single currency pair with a human readable update time"""
    update_time: str  # yyyy/MM/dd HH:mm:ss
    base_currency: str
    quote_currency: str
    rate: float


class PairResultResponse(CamelModel):
    base_currency: str
    quote_currency: str
    status: PairStatus
    rate: float | None = None
    created: bool = False
    reason: str | None = None


class SyncReportResponse(CamelModel):
    started_at: datetime
    finished_at: datetime
    succeeded: int
    failed: int
    skipped: int
    results: list[PairResultResponse]
