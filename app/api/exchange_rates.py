from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session
from typing import List
from app.core.database import get_db
from app.core.dependencies import get_synchronizer
from app.schemas.exchange_rate import ExchangeRateResponse, ExchangeRateView, SyncReportResponse
from app.services.exchange_rates import (
    list_rates,
    list_rates_by_base,
    get_rate,
    format_rate,
    add_test_data,
)
from app.services.rate_sync import RateSynchronizer

router = APIRouter(prefix="/exchange-rates", tags=["Exchange Rate Management"])


@router.get("", response_model=List[ExchangeRateResponse])
def get_exchange_rates(db: Session = Depends(get_db)):
    """Get all exchange rates"""
    return list_rates(db)


@router.get(
    "/{base_currency}",
    response_model=List[ExchangeRateResponse],
    responses={404: {"description": "No exchange rates found for the base currency"}}
)
def get_exchange_rates_by_base_currency(base_currency: str, db: Session = Depends(get_db)):
    """Get all exchange rates for a base currency"""
    rates = list_rates_by_base(db, base_currency)
    if not rates:
        raise HTTPException(status_code=404, detail="No exchange rates found")
    return rates


@router.get(
    "/{base_currency}/{quote_currency}",
    response_model=ExchangeRateView,
    responses={404: {"description": "Exchange rate not found"}}
)
def get_exchange_rate(base_currency: str, quote_currency: str, db: Session = Depends(get_db)):
    """Get the exchange rate between two currencies"""
    rate = get_rate(db, base_currency.upper(), quote_currency.upper())
    if not rate:
        raise HTTPException(status_code=404, detail="Exchange rate not found")
    return format_rate(rate)


@router.post("/sync", response_model=SyncReportResponse)
def sync_exchange_rates(synchronizer: RateSynchronizer = Depends(get_synchronizer)):
    """Synchronize exchange rates with the external quote API and report per-pair outcomes"""
    report = synchronizer.sync()
    return SyncReportResponse.model_validate(report)


@router.post("/test-data")
def create_test_data(db: Session = Depends(get_db)):
    """Add sample exchange rates for manual testing"""
    add_test_data(db)
    return Response(status_code=status.HTTP_200_OK)
