"""Tests for the exchange rate synchronizer."""

import threading
import time
from datetime import date, datetime
from decimal import Decimal

import pytest

from app.services.exceptions import QuoteClientError, QuoteParseError
from app.services.exchange_rates import get_rate, list_rates, upsert_rate
from app.services.quote_client import QuoteClient, StaticQuoteClient
from app.services.rate_sync import PairStatus, SyncListener, mid_rate


class Clock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


class RecordingClient(QuoteClient):
    def __init__(self, quotes):
        self.quotes = quotes
        self.calls = []

    def fetch_quotes(self, base_currency, quote_currency, start_date, end_date):
        self.calls.append((base_currency, quote_currency, start_date, end_date))
        return list(self.quotes)


class RecordingListener(SyncListener):
    def __init__(self):
        self.events = []

    def on_pair_result(self, result):
        self.events.append(result)


class TestMidRate:
    def test_average_of_bid_and_ask(self, make_quote):
        assert mid_rate(make_quote("0.90", "0.94")) == Decimal("0.92")

    def test_large_rates(self, make_quote):
        assert mid_rate(make_quote("149.50", "149.70")) == Decimal("149.60")

    @pytest.mark.parametrize("bid, ask", [("abc", "0.9"), ("0.9", None), ("NaN", "0.9"), ("0", "0"), ("9e999999", "9e999999")])
    def test_unusable_values(self, make_quote, bid, ask):
        with pytest.raises(QuoteParseError):
            mid_rate(make_quote(bid, ask))


class TestPairs:
    def test_default_matrix_skips_self_pairs(self, make_synchronizer):
        sync = make_synchronizer(
            StaticQuoteClient({}),
            base_currencies=["EUR", "USD", "JPY"],
            quote_currencies=["USD", "EUR", "JPY", "GBP"],
        )
        pairs = sync.pairs()
        assert len(pairs) == 9
        assert pairs[:3] == [("EUR", "USD"), ("EUR", "JPY"), ("EUR", "GBP")]
        assert all(base != quote for base, quote in pairs)


class TestSync:
    def test_creates_row_in_empty_store(self, db, make_synchronizer, make_quote):
        client = StaticQuoteClient({("USD", "EUR"): [make_quote("0.85", "0.87")]})
        report = make_synchronizer(client).sync()

        assert report.succeeded == 1
        assert report.results[0].created is True
        db.expire_all()
        row = get_rate(db, "USD", "EUR")
        assert row is not None
        assert row.rate == Decimal("0.86")

    def test_updates_existing_row_in_place(self, db, make_synchronizer, make_quote):
        t0 = datetime(2026, 10, 1, 9, 0, 0)
        t1 = datetime(2026, 10, 19, 9, 0, 0)
        existing, _ = upsert_rate(db, "USD", "EUR", Decimal("0.80"), t0)
        existing_id = existing.id

        client = StaticQuoteClient({("USD", "EUR"): [make_quote("0.90", "0.92")]})
        report = make_synchronizer(client, clock=Clock(t1)).sync()

        assert report.results[0].created is False
        db.expire_all()
        rows = list_rates(db)
        assert len(rows) == 1
        assert rows[0].id == existing_id
        assert rows[0].rate == Decimal("0.91")
        assert rows[0].update_time == t1

    def test_second_sync_keeps_one_row_per_pair(self, db, make_synchronizer, make_quote):
        client = StaticQuoteClient({("USD", "EUR"): [make_quote("0.85", "0.87")]})
        sync = make_synchronizer(client)
        sync.sync()
        sync.sync()

        db.expire_all()
        assert len(list_rates(db)) == 1

    def test_failing_pair_does_not_abort_batch(self, db, make_synchronizer, make_quote):
        client = StaticQuoteClient({
            ("USD", "EUR"): QuoteClientError("connection refused"),
            ("EUR", "USD"): [make_quote("1.17", "1.19", base="EUR", quote="USD")],
        })
        report = make_synchronizer(
            client, base_currencies=["USD", "EUR"], quote_currencies=["EUR", "USD"]
        ).sync()

        assert [r.status for r in report.results] == [PairStatus.FAILURE, PairStatus.SUCCESS]
        assert "connection refused" in report.results[0].reason
        db.expire_all()
        assert get_rate(db, "USD", "EUR") is None
        assert get_rate(db, "EUR", "USD").rate == Decimal("1.18")

    def test_unparsable_quote_is_a_pair_failure(self, db, make_synchronizer, make_quote):
        client = StaticQuoteClient({
            ("USD", "EUR"): [make_quote("n/a", "0.87")],
            ("USD", "GBP"): [make_quote("0.78", "0.80", quote="GBP")],
        })
        report = make_synchronizer(client, quote_currencies=["EUR", "GBP"]).sync()

        assert report.failed == 1
        assert report.succeeded == 1
        db.expire_all()
        assert get_rate(db, "USD", "GBP").rate == Decimal("0.79")

    def test_overflowing_quote_is_a_pair_failure(self, db, make_synchronizer, make_quote):
        client = StaticQuoteClient({
            ("USD", "EUR"): [make_quote("9e999999", "9e999999")],
            ("USD", "GBP"): [make_quote("0.78", "0.80", quote="GBP")],
        })
        report = make_synchronizer(client, quote_currencies=["EUR", "GBP"]).sync()

        assert [r.status for r in report.results] == [PairStatus.FAILURE, PairStatus.SUCCESS]
        db.expire_all()
        assert get_rate(db, "USD", "EUR") is None
        assert get_rate(db, "USD", "GBP").rate == Decimal("0.79")

    def test_unexpected_client_error_does_not_abort_batch(self, db, make_synchronizer, make_quote):
        client = StaticQuoteClient({
            ("USD", "EUR"): RuntimeError("unexpected"),
            ("USD", "GBP"): [make_quote("0.78", "0.80", quote="GBP")],
        })
        report = make_synchronizer(client, quote_currencies=["EUR", "GBP"]).sync()

        assert [r.status for r in report.results] == [PairStatus.FAILURE, PairStatus.SUCCESS]
        assert "unexpected" in report.results[0].reason
        db.expire_all()
        assert get_rate(db, "USD", "GBP").rate == Decimal("0.79")

    def test_failing_listener_does_not_abort_batch(self, db, make_synchronizer, make_quote):
        class BrokenListener(SyncListener):
            def on_pair_result(self, result):
                raise RuntimeError("listener down")

        recorder = RecordingListener()
        client = StaticQuoteClient({
            ("USD", "EUR"): [make_quote("0.85", "0.87")],
            ("USD", "GBP"): [make_quote("0.78", "0.80", quote="GBP")],
        })
        report = make_synchronizer(
            client, quote_currencies=["EUR", "GBP"], listeners=[BrokenListener(), recorder]
        ).sync()

        assert report.succeeded == 2
        assert len(recorder.events) == 2
        db.expire_all()
        assert get_rate(db, "USD", "GBP").rate == Decimal("0.79")

    def test_empty_series_is_skipped(self, db, make_synchronizer):
        report = make_synchronizer(StaticQuoteClient({("USD", "EUR"): []})).sync()

        assert report.skipped == 1
        assert report.results[0].status == PairStatus.SKIPPED
        db.expire_all()
        assert list_rates(db) == []

    def test_uses_last_point_of_series(self, db, make_synchronizer, make_quote):
        client = StaticQuoteClient({("USD", "EUR"): [
            make_quote("0.80", "0.82", close_time="2026-10-17T00:00:00+00:00"),
            make_quote("0.90", "0.92", close_time="2026-10-18T00:00:00+00:00"),
        ]})
        make_synchronizer(client).sync()

        db.expire_all()
        assert get_rate(db, "USD", "EUR").rate == Decimal("0.91")

    def test_requests_month_to_date_range(self, make_synchronizer, make_quote):
        client = RecordingClient([make_quote("0.85", "0.87")])
        make_synchronizer(client, clock=Clock(datetime(2026, 10, 19, 12, 30))).sync()

        assert client.calls == [("USD", "EUR", date(2026, 10, 1), date(2026, 10, 19))]

    def test_emits_one_event_per_pair_in_order(self, make_synchronizer, make_quote):
        listener = RecordingListener()
        client = StaticQuoteClient({("EUR", "USD"): [make_quote("1.17", "1.19")]})
        make_synchronizer(
            client,
            base_currencies=["EUR", "USD"],
            quote_currencies=["USD", "EUR"],
            listeners=[listener],
        ).sync()

        assert [(e.base_currency, e.quote_currency, e.status) for e in listener.events] == [
            ("EUR", "USD", PairStatus.SUCCESS),
            ("USD", "EUR", PairStatus.SKIPPED),
        ]

    def test_report_timestamps(self, make_synchronizer):
        now = datetime(2026, 10, 19, 8, 0, 0)
        report = make_synchronizer(StaticQuoteClient({}), clock=Clock(now)).sync()
        assert report.started_at == now
        assert report.finished_at == now


class TestSyncLock:
    def test_concurrent_syncs_do_not_overlap(self, make_synchronizer):
        class SlowClient(QuoteClient):
            def __init__(self):
                self.active = 0
                self.max_active = 0
                self.guard = threading.Lock()

            def fetch_quotes(self, base_currency, quote_currency, start_date, end_date):
                with self.guard:
                    self.active += 1
                    self.max_active = max(self.max_active, self.active)
                time.sleep(0.05)
                with self.guard:
                    self.active -= 1
                return []

        client = SlowClient()
        sync = make_synchronizer(client)
        threads = [threading.Thread(target=sync.sync) for _ in range(3)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert client.max_active == 1
