from app.schemas.currency import CurrencyCreate, CurrencyUpdate, CurrencyResponse
from app.schemas.exchange_rate import (
    ExchangeRateResponse,
    ExchangeRateView,
    PairResultResponse,
    SyncReportResponse,
)

__all__ = [
    "CurrencyCreate",
    "CurrencyUpdate",
    "CurrencyResponse",
    "ExchangeRateResponse",
    "ExchangeRateView",
    "PairResultResponse",
    "SyncReportResponse",
]
