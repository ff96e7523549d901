"""Run one exchange rate synchronization outside the web service.

Usage:
    python -m scripts.sync_rates [--static] [--base EUR USD] [--quote USD EUR GBP]
"""

import argparse
import logging
import sys

from app.core.config import settings
from app.core.database import Base, SessionLocal, engine
from app.core.logging_config import configure_logging
import app.models  # noqa: F401
from app.services.quote_client import OandaQuoteClient, StaticQuoteClient
from app.services.rate_sync import LoggingSyncListener, RateSynchronizer

logger = logging.getLogger(__name__)


def main() -> None:
    parser = argparse.ArgumentParser(description="Fetch and store exchange rates")
    parser.add_argument("--base", nargs="+", default=settings.SYNC_BASE_CURRENCIES, help="Base currency codes")
    parser.add_argument("--quote", nargs="+", default=settings.SYNC_QUOTE_CURRENCIES, help="Quote currency codes")
    parser.add_argument("--static", action="store_true", help="Use built-in sample quotes instead of the API")
    args = parser.parse_args()

    configure_logging(settings.LOG_LEVEL)

    if args.static:
        client = StaticQuoteClient()
    else:
        client = OandaQuoteClient(settings.RATES_API_URL, timeout=settings.RATES_API_TIMEOUT)

    Base.metadata.create_all(bind=engine)
    synchronizer = RateSynchronizer(
        SessionLocal, client, args.base, args.quote, listeners=[LoggingSyncListener()]
    )
    report = synchronizer.sync()
    logger.info("Done: %d succeeded, %d failed, %d skipped", report.succeeded, report.failed, report.skipped)
    if report.failed:
        sys.exit(1)


if __name__ == "__main__":
    main()
