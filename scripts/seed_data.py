"""
Script to load the reference currencies and sample exchange rates into the database
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import logging

from sqlalchemy.orm import Session
from app.core.database import Base, SessionLocal, engine
from app.core.logging_config import configure_logging
import app.models  # noqa: F401
from app.services.currencies import seed_currencies
from app.services.exchange_rates import add_test_data

logger = logging.getLogger(__name__)


def seed_data(with_rates: bool = False):
    Base.metadata.create_all(bind=engine)
    db: Session = SessionLocal()

    try:
        added = seed_currencies(db)
        logger.info("Seeded %d currencies", added)

        if with_rates:
            add_test_data(db)

    except Exception:
        db.rollback()
        logger.exception("Seeding failed")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    configure_logging()
    seed_data(with_rates="--with-rates" in sys.argv[1:])
