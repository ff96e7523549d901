import logging
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session
from app.models.exchange_rate import ExchangeRate

logger = logging.getLogger(__name__)

UPDATE_TIME_FORMAT = "%Y/%m/%d %H:%M:%S"

# Sample rows for manual testing of the read endpoints
TEST_RATES = [
    ("USD", "EUR", Decimal("0.85")),
    ("EUR", "USD", Decimal("1.18")),
    ("USD", "JPY", Decimal("110.5")),
]


def list_rates(db: Session) -> List[ExchangeRate]:
    return db.query(ExchangeRate).all()


def list_rates_by_base(db: Session, base_currency: str) -> List[ExchangeRate]:
    return db.query(ExchangeRate).filter(ExchangeRate.base_currency == base_currency).all()


def get_rate(db: Session, base_currency: str, quote_currency: str) -> Optional[ExchangeRate]:
    return db.query(ExchangeRate).filter(
        ExchangeRate.base_currency == base_currency,
        ExchangeRate.quote_currency == quote_currency
    ).first()


def upsert_rate(
    db: Session,
    base_currency: str,
    quote_currency: str,
    rate: Decimal,
    update_time: datetime
) -> Tuple[ExchangeRate, bool]:
    """
    Insert the rate for a currency pair, or overwrite rate and update_time of the
    existing row in place. Returns the row and whether it was created.
    """
    record = get_rate(db, base_currency, quote_currency)
    created = record is None

    if created:
        record = ExchangeRate(
            base_currency=base_currency,
            quote_currency=quote_currency,
            rate=rate,
            update_time=update_time
        )
        db.add(record)
        logger.info("Creating new exchange rate record for %s/%s", base_currency, quote_currency)
    else:
        record.rate = rate
        record.update_time = update_time
        logger.info("Updating existing exchange rate record for %s/%s", base_currency, quote_currency)

    db.commit()
    db.refresh(record)
    return record, created


def format_rate(record: ExchangeRate) -> dict:
    return {
        "update_time": record.update_time.strftime(UPDATE_TIME_FORMAT),
        "base_currency": record.base_currency,
        "quote_currency": record.quote_currency,
        "rate": record.rate,
    }


def log_rates(db: Session) -> None:
    rates = list_rates(db)
    for rate in rates:
        logger.info(
            "Rate: %s to %s = %s (updated: %s)",
            rate.base_currency, rate.quote_currency, rate.rate, rate.update_time
        )
    logger.info("Total exchange rates in database: %d", len(rates))


def add_test_data(db: Session, now: Optional[datetime] = None) -> None:
    logger.info("Adding test exchange rate data")
    now = now or datetime.now()
    for base_currency, quote_currency, rate in TEST_RATES:
        upsert_rate(db, base_currency, quote_currency, rate, now)
    log_rates(db)
