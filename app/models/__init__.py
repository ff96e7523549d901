from app.models.currency import Currency
from app.models.exchange_rate import ExchangeRate

__all__ = [
    "Currency",
    "ExchangeRate",
]
