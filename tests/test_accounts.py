"""Tests for the chart of accounts and line classification."""

import pytest

from ledgerbook.domain.accounts import AccountService, build_classifier, infer_account_class
from ledgerbook.domain.books import DEFAULT_CHART, DEFAULT_TRANSACTION_MAPPINGS
from ledgerbook.domain.entities import Account, AccountClass, LineAccountType
from ledgerbook.domain.errors import ConflictError, NotFoundError, ValidationError

from conftest import make_line


def test_initialize_defaults_is_idempotent(account_service):
    """Test seeding the chart twice creates records only once."""
    created = account_service.initialize_defaults()

    assert created == len(DEFAULT_CHART) + len(DEFAULT_TRANSACTION_MAPPINGS)
    assert account_service.initialize_defaults() == 0
    assert len(account_service.list_accounts()) == len(DEFAULT_CHART)
    assert len(account_service.list_transaction_mappings()) == len(DEFAULT_TRANSACTION_MAPPINGS)


def test_defaults_are_shared_between_owners(temp_db, default_chart):
    """Test that system accounts are visible to every owner."""
    other = AccountService(temp_db, "bob")

    cash = other.get_account_by_name("cash")
    assert cash is not None
    assert cash.owner is None
    assert cash.is_system_default
    assert cash.subtype == LineAccountType.CASH


def test_default_tree(default_chart):
    """Test that the default chart nests accounts under their class headers."""
    tree = default_chart.get_account_tree()

    assert [node["name"] for node in tree] == ["Assets", "Liabilities", "Equity", "Income", "Expenses"]
    asset_children = [child["name"] for child in tree[0]["children"]]
    assert asset_children == ["Cash", "Bank", "Accounts Receivable", "Inventory", "Fixed Assets"]
    assert tree[0]["children"][0]["type"] == AccountClass.ASSET


def test_create_account_with_parent(default_chart):
    """Test creating an owner account under a default parent."""
    account_id = default_chart.create_account("Rent Expense", "expense", code="5300", parent_code="5000")

    account = default_chart.get_account(account_id)
    assert account.owner == "alice"
    assert account.type == AccountClass.EXPENSE
    assert account.parent_id == default_chart.get_account_by_name("Expenses").id


def test_create_account_errors(default_chart):
    """Test validation, conflict and missing parent errors."""
    with pytest.raises(ValidationError, match="Account name is required"):
        default_chart.create_account("  ", "asset")
    with pytest.raises(ValidationError, match="Invalid account type"):
        default_chart.create_account("Petty Cash", "cash")
    with pytest.raises(NotFoundError, match="Parent account with code '9999' not found"):
        default_chart.create_account("Petty Cash", "asset", parent_code="9999")

    default_chart.create_account("Petty Cash", "asset")
    with pytest.raises(ConflictError, match="already exists"):
        default_chart.create_account("petty cash", "asset")


def test_owner_account_may_shadow_default(default_chart):
    """Test that an owner can define an account with a default's name."""
    account_id = default_chart.create_account("Cash", "asset", subtype="cash")

    assert default_chart.get_account_by_name("Cash").id == account_id


def test_set_account_type(default_chart):
    """Test retyping an owner account and refusing to retype defaults."""
    default_chart.create_account("Deposits", "asset")

    account = default_chart.set_account_type("Deposits", "liability")
    assert account.type == AccountClass.LIABILITY

    with pytest.raises(ValidationError, match="shared default"):
        default_chart.set_account_type("Cash", "expense")
    with pytest.raises(NotFoundError):
        default_chart.set_account_type("Nowhere", "asset")


def test_classifier_resolution_order():
    """Test account id, then line type, then chart name lookup."""
    accounts = [
        Account(id=1, owner=None, name="Rent", type=AccountClass.EXPENSE),
        Account(id=2, owner="alice", name="Rent", type=AccountClass.LIABILITY),
        Account(id=3, owner="alice", name="Deposits", type=AccountClass.ASSET),
    ]
    classify = build_classifier(accounts)

    assert classify(make_line("other", "debit", 1, name="anything", account_id=3)) == AccountClass.ASSET
    assert classify(make_line("sales", "credit", 1)) == AccountClass.INCOME
    assert classify(make_line("accounts_payable", "credit", 1)) == AccountClass.LIABILITY
    # The owner's account shadows the shared one
    assert classify(make_line("other", "debit", 1, name=" rent ")) == AccountClass.LIABILITY
    assert classify(make_line("other", "debit", 1, name="Mystery")) is None


def test_classifier_never_guesses_from_name():
    """Test that a suggestive name alone does not classify a line."""
    classify = build_classifier([])

    assert classify(make_line("other", "debit", 1, name="Cash in hand")) is None


def test_resolve_account_class(default_chart):
    """Test resolving a line against the stored chart."""
    line = make_line("other", "debit", 1, name="General Expenses")

    assert default_chart.resolve_account_class(line) == AccountClass.EXPENSE


@pytest.mark.parametrize(
    "name,expected",
    [
        ("Petty Cash", AccountClass.ASSET),
        ("Bank Loan", AccountClass.ASSET),
        ("Notes Payable", AccountClass.LIABILITY),
        ("Owner Drawings", AccountClass.EQUITY),
        ("Consulting Revenue", AccountClass.INCOME),
        ("Shipping Cost", AccountClass.EXPENSE),
        ("Miscellaneous", None),
        ("", None),
    ],
)
def test_infer_account_class(name, expected):
    """Test keyword inference, first matching class wins."""
    assert infer_account_class(name) == expected
