"""Chart quote API client (OANDA public exchange rates) and an offline stand-in."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, fields
from datetime import date
from typing import Optional

import requests

from app.services.exceptions import QuoteClientError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateQuote:
    """One period of a chart series. Numeric values stay strings as transmitted."""
    base_currency: Optional[str] = None
    quote_currency: Optional[str] = None
    close_time: Optional[str] = None
    average_bid: Optional[str] = None
    average_ask: Optional[str] = None
    high_bid: Optional[str] = None
    high_ask: Optional[str] = None
    low_bid: Optional[str] = None
    low_ask: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "RateQuote":
        # Unknown keys are dropped so new provider fields don't break parsing
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})


def parse_quotes(payload) -> list[RateQuote]:
    """Parse the {"response": [...]} envelope. A missing or empty array means no data."""
    if not isinstance(payload, dict):
        raise QuoteClientError(f"Unexpected response payload: {type(payload).__name__}")

    points = payload.get("response") or []
    if not isinstance(points, list):
        raise QuoteClientError("Unexpected 'response' field: expected a list")

    quotes = []
    for point in points:
        if not isinstance(point, dict):
            raise QuoteClientError("Unexpected quote point: expected an object")
        quotes.append(RateQuote.from_dict(point))
    return quotes


class QuoteClient(ABC):
    """Abstract interface for fetching chart quotes for a currency pair."""

    @abstractmethod
    def fetch_quotes(
        self, base_currency: str, quote_currency: str, start_date: date, end_date: date
    ) -> list[RateQuote]:
        """Fetch the quote series for a currency pair.

        Args:
            base_currency: Base currency code, e.g. "USD".
            quote_currency: Quote currency code, e.g. "EUR".
            start_date: First day of the range (inclusive).
            end_date: Last day of the range (inclusive).

        Returns:
            Quote points in the order the provider returned them; empty when
            the provider has no data for the range.

        Raises:
            QuoteClientError: the provider could not be reached or answered badly.
        """


class OandaQuoteClient(QuoteClient):
    """HTTP client for the OANDA chart endpoint."""

    def __init__(self, base_url: str, timeout: float = 10.0, session: Optional[requests.Session] = None):
        self._base_url = base_url
        self._timeout = timeout
        self._session = session or requests.Session()

    def fetch_quotes(
        self, base_currency: str, quote_currency: str, start_date: date, end_date: date
    ) -> list[RateQuote]:
        params = {
            "base": base_currency,
            "quote": quote_currency,
            "data_type": "chart",
            "start_date": start_date.isoformat(),
            "end_date": end_date.isoformat(),
        }
        logger.info("Calling quote API for %s/%s (%s..%s)", base_currency, quote_currency, start_date, end_date)

        try:
            resp = self._session.get(self._base_url, params=params, timeout=self._timeout)
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as e:
            raise QuoteClientError(f"Quote API request for {base_currency}/{quote_currency} failed: {e}") from e

        quotes = parse_quotes(data)
        logger.info("Received %d quote points for %s/%s", len(quotes), base_currency, quote_currency)
        return quotes


class StaticQuoteClient(QuoteClient):
    """In-memory client for offline runs and tests.

    ``quotes`` maps (base, quote) to a list of RateQuote, or to an exception
    instance that is raised for that pair. Pairs not in the map have no data.
    """

    SAMPLE_RATES = {
        ("EUR", "USD"): "1.08",
        ("EUR", "JPY"): "161.50",
        ("EUR", "GBP"): "0.85",
        ("USD", "EUR"): "0.92",
        ("USD", "JPY"): "149.60",
        ("USD", "GBP"): "0.79",
        ("JPY", "USD"): "0.0067",
        ("JPY", "EUR"): "0.0062",
        ("JPY", "GBP"): "0.0053",
    }

    def __init__(self, quotes: Optional[dict] = None):
        if quotes is None:
            quotes = {
                pair: [RateQuote(base_currency=pair[0], quote_currency=pair[1], average_bid=rate, average_ask=rate)]
                for pair, rate in self.SAMPLE_RATES.items()
            }
        self._quotes = quotes

    def fetch_quotes(
        self, base_currency: str, quote_currency: str, start_date: date, end_date: date
    ) -> list[RateQuote]:
        value = self._quotes.get((base_currency, quote_currency), [])
        if isinstance(value, Exception):
            raise value
        return list(value)
