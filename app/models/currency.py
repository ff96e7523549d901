from sqlalchemy import Column, String
from app.core.database import Base


class Currency(Base):
    """Currency reference data"""
    __tablename__ = "currencies"

    code = Column(String(3), primary_key=True)  # ISO 4217: USD, EUR, JPY ...
    name = Column(String(100), nullable=False)  # US Dollar, Euro ...
