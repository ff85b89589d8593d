"""SQLAlchemy models for tillbook database."""

from datetime import datetime, UTC
from sqlalchemy import (
    CheckConstraint,
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, scoped_session

Base = declarative_base()

# Exactly one of store_id / savings_account_id is set on polymorphic rows
ONE_ACCOUNT_SQL = (
    "(store_id IS NOT NULL AND savings_account_id IS NULL) OR "
    "(store_id IS NULL AND savings_account_id IS NOT NULL)"
)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Store(Base):
    """Store model."""

    __tablename__ = "stores"

    id = Column(Integer, primary_key=True)
    code = Column(String, unique=True, nullable=False)
    branch = Column(String, nullable=False)
    address = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    email = Column(String, nullable=True)
    status = Column(String, default="active", nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    # Relationships
    transactions = relationship("Transaction", back_populates="store")


class SavingsAccount(Base):
    """Savings account model."""

    __tablename__ = "savings_accounts"

    id = Column(Integer, primary_key=True)
    code = Column(String, unique=True, nullable=False)
    name = Column(String, nullable=False)
    account_type = Column(String, nullable=False)
    bank_name = Column(String, nullable=True)
    account_number = Column(String, nullable=True)
    status = Column(String, default="active", nullable=False)
    notes = Column(String, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    # Relationships
    transactions = relationship("Transaction", back_populates="savings_account")


class BalanceEntry(Base):
    """Current balance, one row per store or savings account."""

    __tablename__ = "balance_entries"

    id = Column(Integer, primary_key=True)
    store_id = Column(Integer, ForeignKey("stores.id"), unique=True, nullable=True)
    savings_account_id = Column(Integer, ForeignKey("savings_accounts.id"), unique=True, nullable=True)
    current_balance = Column(Numeric(14, 2), nullable=False)
    last_updated = Column(DateTime, default=_utcnow, nullable=False)

    __table_args__ = (CheckConstraint(ONE_ACCOUNT_SQL, name="ck_balance_one_account"),)


class Transaction(Base):
    """Transaction log model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    store_id = Column(Integer, ForeignKey("stores.id"), nullable=True)
    savings_account_id = Column(Integer, ForeignKey("savings_accounts.id"), nullable=True)
    kind = Column(String, nullable=False)
    category = Column(String, nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    payment_method = Column(String, nullable=False)
    notes = Column(String, nullable=True)
    transaction_date = Column(Date, nullable=False)
    staff_identity = Column(String, nullable=True)
    reference = Column(String, nullable=True, index=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint(ONE_ACCOUNT_SQL, name="ck_transaction_one_account"),
        CheckConstraint("amount > 0", name="ck_transaction_amount_positive"),
    )

    # Relationships
    store = relationship("Store", back_populates="transactions")
    savings_account = relationship("SavingsAccount", back_populates="transactions")


class Transfer(Base):
    """Transfer model linking an outgoing and an incoming transaction."""

    __tablename__ = "transfers"

    id = Column(Integer, primary_key=True)
    reference = Column(String, unique=True, nullable=False)
    from_type = Column(String, nullable=False)
    from_id = Column(Integer, nullable=False)
    to_type = Column(String, nullable=False)
    to_id = Column(Integer, nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    notes = Column(String, nullable=True)
    transaction_date = Column(Date, nullable=False)
    staff_identity = Column(String, nullable=True)
    outgoing_transaction_id = Column(Integer, ForeignKey("transactions.id"), nullable=False)
    incoming_transaction_id = Column(Integer, ForeignKey("transactions.id"), nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    # Relationships
    outgoing_transaction = relationship("Transaction", foreign_keys=[outgoing_transaction_id])
    incoming_transaction = relationship("Transaction", foreign_keys=[incoming_transaction_id])


class CashHistory(Base):
    """Daily snapshot model, one row per account and date."""

    __tablename__ = "cash_history"

    id = Column(Integer, primary_key=True)
    store_id = Column(Integer, ForeignKey("stores.id"), nullable=True)
    savings_account_id = Column(Integer, ForeignKey("savings_accounts.id"), nullable=True)
    date = Column(Date, nullable=False)
    opening_balance = Column(Numeric(14, 2), nullable=False)
    closing_balance = Column(Numeric(14, 2), nullable=False)
    total_income = Column(Numeric(14, 2), nullable=False)
    total_expense = Column(Numeric(14, 2), nullable=False)
    total_transfer = Column(Numeric(14, 2), nullable=False)
    net_change = Column(Numeric(14, 2), nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint(ONE_ACCOUNT_SQL, name="ck_history_one_account"),
        UniqueConstraint("store_id", "date", name="uq_history_store_date"),
        UniqueConstraint("savings_account_id", "date", name="uq_history_savings_date"),
    )


def create_session_factory(database_url: str) -> scoped_session:
    """Create a thread-local SQLAlchemy session registry."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return scoped_session(sessionmaker(bind=engine))
