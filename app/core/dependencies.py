from functools import lru_cache

from app.core.config import settings
from app.core.database import SessionLocal
from app.services.quote_client import OandaQuoteClient, QuoteClient, StaticQuoteClient
from app.services.rate_sync import LoggingSyncListener, RateSynchronizer


def build_quote_client() -> QuoteClient:
    if settings.RATES_CLIENT == "static":
        return StaticQuoteClient()
    return OandaQuoteClient(settings.RATES_API_URL, timeout=settings.RATES_API_TIMEOUT)


@lru_cache
def get_synchronizer() -> RateSynchronizer:
    """Process-wide synchronizer, shared by the scheduler and the sync endpoint"""
    return RateSynchronizer(
        session_factory=SessionLocal,
        client=build_quote_client(),
        base_currencies=settings.SYNC_BASE_CURRENCIES,
        quote_currencies=settings.SYNC_QUOTE_CURRENCIES,
        listeners=[LoggingSyncListener()],
    )
