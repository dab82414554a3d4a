"""SQLAlchemy models for ledgerbook database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    JSON,
    UniqueConstraint,
    CheckConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()

Money = Numeric(14, 2)


def _now() -> datetime:
    return datetime.now(UTC)


class Entry(Base):
    """Flat transaction entry model."""

    __tablename__ = "entries"

    id = Column(Integer, primary_key=True)
    owner = Column(String, nullable=False, index=True)
    transaction_date = Column(Date, nullable=False)
    transaction_type = Column(String, nullable=False)
    book_category = Column(String, nullable=False)
    reference_number = Column(String, nullable=True)
    description = Column(String, nullable=True)

    party_name = Column(String, nullable=True)
    party_type = Column(String, nullable=True)
    party_contact = Column(String, nullable=True)

    category = Column(String, nullable=True)
    product_service_name = Column(String, nullable=True)
    quantity = Column(Numeric(14, 4), nullable=True)
    unit_price = Column(Money, nullable=True)
    discount = Column(Money, default=0, nullable=False)
    tax_rate = Column(Numeric(7, 4), nullable=True)
    amount_before_tax = Column(Money, nullable=True)
    tax_amount = Column(Money, nullable=True)
    total_amount = Column(Money, nullable=False)

    payment_type = Column(String, nullable=True)
    payment_mode = Column(String, nullable=True)
    payment_reference = Column(String, nullable=True)
    bank_name = Column(String, nullable=True)
    bank_account = Column(String, nullable=True)
    amount_paid = Column(Money, nullable=True)
    balance_due = Column(Money, default=0, nullable=False)
    due_date = Column(Date, nullable=True)

    employee_id = Column(String, nullable=True)
    gross_pay = Column(Money, nullable=True)
    allowances = Column(Money, nullable=True)
    deductions = Column(Money, nullable=True)
    net_pay = Column(Money, nullable=True)

    debit_account = Column(String, nullable=True)
    credit_account = Column(String, nullable=True)
    ledger_category = Column(String, nullable=True)
    notes = Column(String, nullable=True)

    journal_entry_id = Column(Integer, ForeignKey("journal_entries.id"), nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)


class JournalEntry(Base):
    """Journal entry header model. Amounts live in the lines."""

    __tablename__ = "journal_entries"

    id = Column(Integer, primary_key=True)
    owner = Column(String, nullable=False, index=True)
    entry_date = Column(Date, nullable=False)
    description = Column(String, nullable=False)
    reference_number = Column(String, nullable=True)
    source_entry_id = Column(Integer, nullable=True, unique=True)
    created_at = Column(DateTime, default=_now, nullable=False)

    # Relationships
    lines = relationship(
        "JournalEntryLine",
        back_populates="journal_entry",
        cascade="all, delete-orphan",
        order_by="JournalEntryLine.id",
    )


class JournalEntryLine(Base):
    """Journal entry line model."""

    __tablename__ = "journal_entry_lines"

    id = Column(Integer, primary_key=True)
    journal_entry_id = Column(Integer, ForeignKey("journal_entries.id"), nullable=False)
    account_type = Column(String, nullable=False)
    account_name = Column(String, nullable=False, default="")
    entry_type = Column(String, nullable=False)
    amount = Column(Money, nullable=False)
    notes = Column(String, nullable=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=True)

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_line_amount_positive"),
        CheckConstraint("entry_type IN ('debit', 'credit')", name="ck_line_entry_type"),
    )

    # Relationships
    journal_entry = relationship("JournalEntry", back_populates="lines")


class Account(Base):
    """Chart-of-accounts model with hierarchical structure."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    owner = Column(String, nullable=True, index=True)
    code = Column(String, nullable=True)
    name = Column(String, nullable=False)
    type = Column(String, nullable=False)
    subtype = Column(String, nullable=True)
    parent_account_id = Column(Integer, ForeignKey("accounts.id"), nullable=True)
    is_system_default = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)

    __table_args__ = (UniqueConstraint("owner", "name", name="uq_account_owner_name"),)

    # Relationships
    parent = relationship("Account", remote_side=[id], backref="children")


class TransactionMapping(Base):
    """Default debit/credit account names per transaction type."""

    __tablename__ = "transaction_mappings"

    id = Column(Integer, primary_key=True)
    transaction_type = Column(String, nullable=False, unique=True)
    debit_account_name = Column(String, nullable=False)
    credit_account_name = Column(String, nullable=False)
    is_system_default = Column(Boolean, default=False, nullable=False)


class Product(Base):
    """Product price list model."""

    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    owner = Column(String, nullable=False, index=True)
    product_name = Column(String, nullable=False)
    unit_price = Column(Money, nullable=False)
    bulk_price = Column(Money, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, onupdate=_now, nullable=False)


class ProfitTarget(Base):
    """Monthly and yearly profit targets."""

    __tablename__ = "profit_targets"

    id = Column(Integer, primary_key=True)
    owner = Column(String, nullable=False)
    target_month = Column(Integer, nullable=False)
    target_year = Column(Integer, nullable=False)
    monthly_target = Column(Money, nullable=False)
    yearly_target = Column(Money, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, onupdate=_now, nullable=False)

    __table_args__ = (
        UniqueConstraint("owner", "target_month", "target_year", name="uq_target_owner_period"),
    )


class RiskFinding(Base):
    """Risk finding model."""

    __tablename__ = "risk_findings"

    id = Column(Integer, primary_key=True)
    owner = Column(String, nullable=False, index=True)
    finding_type = Column(String, nullable=False)
    severity = Column(String, nullable=False)
    title = Column(String, nullable=False)
    description = Column(String, nullable=False)
    recommendations = Column(String, nullable=True)
    status = Column(String, default="open", nullable=False)
    related_entry_id = Column(Integer, nullable=True)
    # "metadata" is reserved on declarative classes
    finding_metadata = Column("metadata", JSON, nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, onupdate=_now, nullable=False)
    resolved_at = Column(DateTime, nullable=True)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
