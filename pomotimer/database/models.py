"""SQLAlchemy ORM models for Pomotimer."""

from datetime import datetime
from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class StoredValue(Base):
    """One JSON-encoded value in the key-value store."""

    __tablename__ = "stored_values"

    key = Column(String(255), primary_key=True)
    value = Column(Text, nullable=False)  # JSON text
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<StoredValue key={self.key!r} updated_at={self.updated_at}>"
