from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
from app.core.database import get_db
from app.schemas.currency import CurrencyCreate, CurrencyUpdate, CurrencyResponse
from app.services.currencies import (
    list_currencies,
    get_currency,
    save_currency,
    delete_currency,
)

router = APIRouter(prefix="/currencies", tags=["Currency Management"])

NOT_FOUND = {404: {"description": "Currency not found"}}


@router.get("", response_model=List[CurrencyResponse])
def get_currencies(db: Session = Depends(get_db)):
    """Get all currencies sorted by code"""
    return list_currencies(db)


@router.get("/{code}", response_model=CurrencyResponse, responses=NOT_FOUND)
def get_currency_by_code(code: str, db: Session = Depends(get_db)):
    """Get a currency by its code (e.g. USD, EUR)"""
    currency = get_currency(db, code)
    if not currency:
        raise HTTPException(status_code=404, detail="Currency not found")
    return currency


@router.post("", response_model=CurrencyResponse, status_code=status.HTTP_201_CREATED)
def create_currency(currency_data: CurrencyCreate, db: Session = Depends(get_db)):
    """Create a currency"""
    return save_currency(db, currency_data.code, currency_data.name)


@router.put("/{code}", response_model=CurrencyResponse, responses=NOT_FOUND)
def update_currency(code: str, currency_update: CurrencyUpdate, db: Session = Depends(get_db)):
    """Update an existing currency. The code in the path overrides the body."""
    if not get_currency(db, code):
        raise HTTPException(status_code=404, detail="Currency not found")
    return save_currency(db, code, currency_update.name)


@router.delete("/{code}", status_code=status.HTTP_204_NO_CONTENT, responses=NOT_FOUND)
def remove_currency(code: str, db: Session = Depends(get_db)):
    """Delete a currency"""
    if not get_currency(db, code):
        raise HTTPException(status_code=404, detail="Currency not found")
    delete_currency(db, code)
    return None
