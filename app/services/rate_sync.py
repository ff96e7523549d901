"""
Exchange rate synchronization.

For every configured (base, quote) pair with base != quote, the synchronizer
fetches the chart quotes from the first day of the current month until today,
takes the last point of the series, derives the mid-rate

    rate = (average_bid + average_ask) / 2

and upserts it into the exchange_rates table. Pairs are processed
independently: a failing pair is reported in the SyncReport and the batch
goes on with the next one.
"""
import enum
import logging
import threading
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, DecimalException
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.services.exceptions import QuoteParseError, RateSyncError
from app.services.exchange_rates import log_rates, upsert_rate
from app.services.quote_client import QuoteClient, RateQuote

logger = logging.getLogger(__name__)


class PairStatus(str, enum.Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class PairResult:
    base_currency: str
    quote_currency: str
    status: PairStatus
    rate: Optional[Decimal] = None
    created: bool = False
    reason: Optional[str] = None

    @property
    def pair(self) -> str:
        return f"{self.base_currency}/{self.quote_currency}"


@dataclass
class SyncReport:
    started_at: datetime
    finished_at: datetime
    results: List[PairResult] = field(default_factory=list)

    def _count(self, status: PairStatus) -> int:
        return sum(1 for r in self.results if r.status == status)

    @property
    def succeeded(self) -> int:
        return self._count(PairStatus.SUCCESS)

    @property
    def failed(self) -> int:
        return self._count(PairStatus.FAILURE)

    @property
    def skipped(self) -> int:
        return self._count(PairStatus.SKIPPED)


class SyncListener:
    """Receives one event per processed currency pair."""

    def on_pair_result(self, result: PairResult) -> None:
        pass


class LoggingSyncListener(SyncListener):

    def on_pair_result(self, result: PairResult) -> None:
        if result.status == PairStatus.SUCCESS:
            action = "created" if result.created else "updated"
            logger.info("Got rate for %s: %s (%s)", result.pair, result.rate, action)
        elif result.status == PairStatus.SKIPPED:
            logger.warning("No data received for %s: %s", result.pair, result.reason)
        else:
            logger.error("Error updating exchange rate for %s: %s", result.pair, result.reason)


def mid_rate(quote: RateQuote) -> Decimal:
    """Average of the period's average bid and average ask."""
    try:
        bid = Decimal(quote.average_bid)
        ask = Decimal(quote.average_ask)
        if not (bid.is_finite() and ask.is_finite()):
            raise QuoteParseError(f"Non-finite bid/ask {quote.average_bid!r}/{quote.average_ask!r}")
        rate = (bid + ask) / 2
    except (DecimalException, TypeError, ValueError) as e:
        raise QuoteParseError(
            f"Invalid bid/ask {quote.average_bid!r}/{quote.average_ask!r}"
        ) from e

    if rate <= 0:
        raise QuoteParseError(f"Non-positive rate {rate}")
    return rate


class RateSynchronizer:
    """Fetches quotes for the configured pair matrix and upserts mid-rates.

    ``sync`` is serialized with a lock so the scheduler and a manual trigger
    never write the same rows concurrently.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        client: QuoteClient,
        base_currencies: Sequence[str],
        quote_currencies: Sequence[str],
        listeners: Optional[Iterable[SyncListener]] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._session_factory = session_factory
        self._client = client
        self.base_currencies = list(base_currencies)
        self.quote_currencies = list(quote_currencies)
        self._listeners = list(listeners or [])
        self._clock = clock
        self._lock = threading.Lock()

    def add_listener(self, listener: SyncListener) -> None:
        self._listeners.append(listener)

    def pairs(self) -> List[Tuple[str, str]]:
        """Sync universe: bases x quotes without self-pairs, in declared order"""
        return [
            (base, quote)
            for base in self.base_currencies
            for quote in self.quote_currencies
            if base != quote
        ]

    def sync(self) -> SyncReport:
        with self._lock:
            return self._run()

    def _run(self) -> SyncReport:
        started_at = self._clock()
        today = started_at.date()
        first_day_of_month = today.replace(day=1)
        pairs = self.pairs()
        logger.info("Starting exchange rate synchronization for %d pairs", len(pairs))

        report = SyncReport(started_at=started_at, finished_at=started_at)
        with self._session_factory() as db:
            for base_currency, quote_currency in pairs:
                result = self._sync_pair(db, base_currency, quote_currency, first_day_of_month, today)
                report.results.append(result)
                self._emit(result)

            logger.info("Exchange rate synchronization completed. Current rates in database:")
            log_rates(db)

        report.finished_at = self._clock()
        logger.info(
            "Synchronization summary: %d succeeded, %d failed, %d skipped",
            report.succeeded, report.failed, report.skipped
        )
        return report

    def _sync_pair(
        self, db: Session, base_currency: str, quote_currency: str, start_date: date, end_date: date
    ) -> PairResult:
        try:
            quotes = self._client.fetch_quotes(base_currency, quote_currency, start_date, end_date)
            if not quotes:
                return PairResult(base_currency, quote_currency, PairStatus.SKIPPED, reason="no data received")

            # The provider sends the series in ascending close_time order; the
            # ordering is not verified here.
            rate = mid_rate(quotes[-1])
        except RateSyncError as e:
            return PairResult(base_currency, quote_currency, PairStatus.FAILURE, reason=str(e))
        except Exception as e:
            logger.exception("Error calling quote API for %s/%s", base_currency, quote_currency)
            return PairResult(base_currency, quote_currency, PairStatus.FAILURE, reason=f"Unexpected error: {e}")

        try:
            _, created = upsert_rate(db, base_currency, quote_currency, rate, self._clock())
        except SQLAlchemyError as e:
            db.rollback()
            return PairResult(base_currency, quote_currency, PairStatus.FAILURE, reason=f"Database error: {e}")
        except Exception as e:
            db.rollback()
            logger.exception("Error storing exchange rate for %s/%s", base_currency, quote_currency)
            return PairResult(base_currency, quote_currency, PairStatus.FAILURE, reason=f"Unexpected error: {e}")

        return PairResult(base_currency, quote_currency, PairStatus.SUCCESS, rate=rate, created=created)

    def _emit(self, result: PairResult) -> None:
        for listener in self._listeners:
            try:
                listener.on_pair_result(result)
            except Exception:
                logger.exception("Sync listener %r failed for %s", listener, result.pair)
