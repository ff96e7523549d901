from sqlalchemy import Column, Integer, String, Numeric, DateTime, UniqueConstraint
from app.core.database import Base


class ExchangeRate(Base):
    __tablename__ = "exchange_rates"

    id = Column(Integer, primary_key=True, index=True)

    # Currency pair, ordered: 1 base = rate quote
    base_currency = Column(String(3), nullable=False, index=True)
    quote_currency = Column(String(3), nullable=False)

    rate = Column(Numeric(18, 8), nullable=False)  # mid-market: (bid + ask) / 2
    update_time = Column(DateTime, nullable=False)  # last successful sync

    # One record per ordered currency pair
    __table_args__ = (
        UniqueConstraint('base_currency', 'quote_currency', name='unique_currency_pair'),
    )
