"""Shared test fixtures."""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SYNC_ENABLED"] = "false"
os.environ["SEED_CURRENCIES"] = "false"

from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.core.database import Base, get_db
from app.main import app as fastapi_app
from app.services.currencies import seed_currencies
from app.services.quote_client import RateQuote
from app.services.rate_sync import RateSynchronizer

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db():
    """Provide a session on a fresh in-memory database for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def seeded_db(db):
    seed_currencies(db)
    return db


@pytest.fixture
def client(db):
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    fastapi_app.dependency_overrides[get_db] = override_get_db
    yield TestClient(fastapi_app)
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def make_quote():
    def _make(average_bid, average_ask, base="USD", quote="EUR", close_time="2026-10-19T00:00:00+00:00"):
        return RateQuote(
            base_currency=base,
            quote_currency=quote,
            close_time=close_time,
            average_bid=average_bid,
            average_ask=average_ask,
        )
    return _make


@pytest.fixture
def make_synchronizer(db):
    def _make(client, base_currencies=("USD",), quote_currencies=("EUR",), clock=datetime.now, listeners=None):
        return RateSynchronizer(
            session_factory=TestingSessionLocal,
            client=client,
            base_currencies=base_currencies,
            quote_currencies=quote_currencies,
            listeners=listeners,
            clock=clock,
        )
    return _make


@pytest.fixture
def test_engine():
    """The in-memory engine without pre-created tables; dropped afterwards."""
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session_factory():
    return TestingSessionLocal
