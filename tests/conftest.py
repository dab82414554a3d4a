"""Shared pytest fixtures for ledgerbook tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest

from ledgerbook.database.factories import create_sqlite_database
from ledgerbook.domain.accounts import AccountService
from ledgerbook.domain.entities import EntrySide, JournalEntry, JournalLine, LineAccountType
from ledgerbook.domain.entry import EntryService
from ledgerbook.domain.journal import JournalService
from ledgerbook.domain.product import ProductService
from ledgerbook.domain.risk import RiskService
from ledgerbook.domain.statements import StatementService
from ledgerbook.domain.target import ProfitTargetService
from ledgerbook.logging_config import configure_logging

OWNER = "alice"


@pytest.fixture(autouse=True)
def quiet_logging():
    """Route logs to the current stderr at WARNING for every test."""
    configure_logging(level="WARNING", format="console")


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def entry_service(temp_db):
    return EntryService(temp_db, OWNER)


@pytest.fixture
def journal_service(temp_db):
    return JournalService(temp_db, OWNER)


@pytest.fixture
def account_service(temp_db):
    return AccountService(temp_db, OWNER)


@pytest.fixture
def statement_service(temp_db):
    return StatementService(temp_db, OWNER)


@pytest.fixture
def risk_service(temp_db):
    return RiskService(temp_db, OWNER)


@pytest.fixture
def product_service(temp_db):
    return ProductService(temp_db, OWNER)


@pytest.fixture
def target_service(temp_db):
    return ProfitTargetService(temp_db, OWNER)


@pytest.fixture
def default_chart(account_service):
    """Seed the default chart of accounts and mappings."""
    account_service.initialize_defaults()
    return account_service


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


def make_line(account_type, side, amount, name="", line_id=1, journal_entry_id=1, account_id=None):
    """Build an in-memory journal line."""
    return JournalLine(
        id=line_id,
        journal_entry_id=journal_entry_id,
        account_type=LineAccountType(account_type),
        account_name=name,
        entry_type=EntrySide(side),
        amount=Decimal(str(amount)),
        account_id=account_id,
    )


def make_journal_entry(entry_id, lines, entry_date=date(2024, 1, 15), description="Entry", reference="REF"):
    """Build an in-memory journal entry from (type, side, amount[, name]) tuples."""
    built = tuple(
        make_line(*spec[:3], name=spec[3] if len(spec) > 3 else "", line_id=entry_id * 100 + i, journal_entry_id=entry_id)
        for i, spec in enumerate(lines)
    )
    return JournalEntry(
        id=entry_id,
        owner=OWNER,
        entry_date=entry_date,
        description=description,
        reference_number=reference,
        lines=built,
    )
