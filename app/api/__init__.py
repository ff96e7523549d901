from fastapi import APIRouter
from app.api import currencies, exchange_rates

api_router = APIRouter()
api_router.include_router(currencies.router, prefix="/api")
api_router.include_router(exchange_rates.router, prefix="/api")
