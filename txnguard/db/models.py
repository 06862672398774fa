"""SQLAlchemy ORM models for txnguard state."""

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Float, Index, Integer, String, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class UserProfileDB(Base):
    __tablename__ = "user_profiles"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String, unique=True, index=True)
    usual_transaction_hours: Mapped[list] = mapped_column(JSONB, default=list)
    usual_countries: Mapped[list] = mapped_column(JSONB, default=list)
    average_transaction_amount: Mapped[float] = mapped_column(Float, default=0.0)
    transaction_count: Mapped[int] = mapped_column(BigInteger, default=0)
    high_amount_threshold: Mapped[float] = mapped_column(Float, default=1000.0)
    frequency_count: Mapped[int] = mapped_column(Integer, default=3)
    frequency_window_hours: Mapped[float] = mapped_column(Float, default=24.0)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class TransactionDB(Base):
    __tablename__ = "transactions"
    __table_args__ = (Index("ix_transactions_user_id_timestamp", "user_id", "timestamp"),)

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    transaction_id: Mapped[str] = mapped_column(String, unique=True, index=True)
    user_id: Mapped[str] = mapped_column(String, index=True)
    amount: Mapped[float] = mapped_column(Float)
    receiver_address: Mapped[str] = mapped_column(String)
    country: Mapped[str] = mapped_column(String)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    status: Mapped[str] = mapped_column(String, default="pending")
    risk_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    risk_factors: Mapped[list] = mapped_column(JSONB, default=list)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
