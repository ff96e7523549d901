from typing import List, Optional
from sqlalchemy.orm import Session
from app.models.currency import Currency

# Reference data loaded into an empty database on first run
DEFAULT_CURRENCIES = [
    ("USD", "US Dollar"),
    ("EUR", "Euro"),
    ("JPY", "Japanese Yen"),
    ("GBP", "British Pound"),
    ("AUD", "Australian Dollar"),
    ("CAD", "Canadian Dollar"),
    ("CHF", "Swiss Franc"),
    ("CNY", "Chinese Yuan"),
]


def list_currencies(db: Session) -> List[Currency]:
    return db.query(Currency).order_by(Currency.code).all()


def get_currency(db: Session, code: str) -> Optional[Currency]:
    return db.get(Currency, code)


def save_currency(db: Session, code: str, name: str) -> Currency:
    """Create the currency or replace the name of an existing one"""
    currency = db.get(Currency, code)
    if currency is None:
        currency = Currency(code=code, name=name)
        db.add(currency)
    else:
        currency.name = name
    db.commit()
    db.refresh(currency)
    return currency


def delete_currency(db: Session, code: str) -> None:
    """Delete by code. The caller checks the currency exists."""
    db.query(Currency).filter(Currency.code == code).delete()
    db.commit()


def seed_currencies(db: Session) -> int:
    """
    Load the default currencies on first run, i.e. when the table is empty.
    Currencies deleted later are not brought back. Returns how many were added.
    """
    if db.query(Currency).first() is not None:
        return 0
    for code, name in DEFAULT_CURRENCIES:
        db.add(Currency(code=code, name=name))
    db.commit()
    return len(DEFAULT_CURRENCIES)
