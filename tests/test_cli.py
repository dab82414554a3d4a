"""End-to-end tests for the ledgerbook CLI."""

from ledgerbook.cli.main import cli


def _invoke(cli_runner, temp_db, *args, user="alice"):
    return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "--user", user, *args])


def test_help(cli_runner):
    result = cli_runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "Double-entry bookkeeping" in result.output
    for command in ("entry", "journal", "book", "report", "account", "product", "target", "risk"):
        assert command in result.output


def test_journal_workflow(cli_runner, temp_db):
    """Test posting, listing and reporting on journal entries."""
    result = _invoke(cli_runner, temp_db, "account", "init")
    assert result.exit_code == 0
    assert "Initialized default chart of accounts" in result.output

    result = _invoke(cli_runner, temp_db, "account", "init")
    assert "already initialized" in result.output

    result = _invoke(
        cli_runner,
        temp_db,
        "journal",
        "post",
        "--description",
        "Owner investment",
        "--date",
        "2024-01-01",
        "--line",
        "bank:debit:10,000",
        "--line",
        "other:credit:10000:Owner's Capital",
    )
    assert result.exit_code == 0, result.output
    assert "Posted journal entry 1 (2 lines)" in result.output

    result = _invoke(
        cli_runner,
        temp_db,
        "journal",
        "post",
        "--description",
        "Cash sale",
        "--date",
        "2024-01-05",
        "--reference",
        "INV-1",
        "--line",
        "cash:debit:500",
        "--line",
        "sales:credit:500",
    )
    assert result.exit_code == 0, result.output

    result = _invoke(cli_runner, temp_db, "journal", "list")
    assert result.exit_code == 0
    assert "Found 2 journal entry(ies)" in result.output
    assert "INV-1" in result.output

    result = _invoke(cli_runner, temp_db, "journal", "show", "2")
    assert result.exit_code == 0
    assert "Journal entry 2: Cash sale" in result.output
    assert "500.00" in result.output

    result = _invoke(cli_runner, temp_db, "book", "view", "cash")
    assert result.exit_code == 0
    assert "Cash Book" in result.output
    assert "Cash sale" in result.output

    result = _invoke(cli_runner, temp_db, "report", "dashboard")
    assert result.exit_code == 0
    assert "Total Revenue" in result.output
    assert "500.00" in result.output

    result = _invoke(cli_runner, temp_db, "report", "profit-loss")
    assert result.exit_code == 0
    assert "Net Profit" in result.output

    result = _invoke(cli_runner, temp_db, "report", "balance-sheet")
    assert result.exit_code == 0
    assert "Net Income (Retained Earnings)" in result.output
    assert "10,500.00" in result.output
    assert "Balanced: yes" in result.output

    result = _invoke(cli_runner, temp_db, "report", "trial-balance")
    assert result.exit_code == 0
    assert "Owner's Capital" in result.output

    result = _invoke(cli_runner, temp_db, "report", "summary")
    assert result.exit_code == 0


def test_unbalanced_journal_entry_is_rejected(cli_runner, temp_db):
    """Test that an unbalanced entry exits with an error and saves nothing."""
    result = _invoke(
        cli_runner,
        temp_db,
        "journal",
        "post",
        "--description",
        "Cash sale",
        "--line",
        "cash:debit:500",
        "--line",
        "sales:credit:499",
    )

    assert result.exit_code == 1
    assert "Debits and credits must balance" in result.output

    result = _invoke(cli_runner, temp_db, "journal", "list")
    assert "No journal entries found." in result.output


def test_malformed_line_spec(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "journal", "post", "--description", "x", "--line", "cash:debit")

    assert result.exit_code == 1
    assert "Expected TYPE:SIDE:AMOUNT" in result.output


def test_entry_workflow(cli_runner, temp_db):
    """Test recording, posting and listing flat entries."""
    _invoke(cli_runner, temp_db, "account", "init")

    result = _invoke(
        cli_runner,
        temp_db,
        "entry",
        "add",
        "--type",
        "payroll",
        "--date",
        "2024-02-28",
        "--gross-pay",
        "3000",
        "--allowances",
        "200",
        "--deductions",
        "150",
        "--post",
    )
    assert result.exit_code == 0, result.output
    assert "Created entry 1: Payroll 3,050.00 in payroll_book" in result.output
    assert "Posted as journal entry 1" in result.output

    result = _invoke(
        cli_runner,
        temp_db,
        "entry",
        "add",
        "--type",
        "cash_sale",
        "--quantity",
        "4",
        "--unit-price",
        "$25",
        "--tax-rate",
        "10",
    )
    assert result.exit_code == 0, result.output
    assert "110.00 in sales_book" in result.output

    result = _invoke(cli_runner, temp_db, "entry", "post", "2")
    assert result.exit_code == 0, result.output
    assert "Posted entry 2 as journal entry 2" in result.output

    result = _invoke(cli_runner, temp_db, "entry", "post", "2")
    assert result.exit_code == 1
    assert "already posted" in result.output

    result = _invoke(cli_runner, temp_db, "entry", "list", "--book", "payroll_book")
    assert result.exit_code == 0
    assert "Found 1 entry(ies)" in result.output

    result = _invoke(cli_runner, temp_db, "entry", "show", "1")
    assert "Net pay: 3050.00" in result.output

    result = _invoke(cli_runner, temp_db, "book", "view", "sales_book")
    assert result.exit_code == 0
    assert "Sales Book" in result.output

    result = _invoke(cli_runner, temp_db, "report", "profit-loss", "--source", "entries")
    assert "Cash Sale" in result.output
    assert "Payroll" in result.output


def test_entry_add_rejects_bad_amount(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "entry", "add", "--type", "cash_sale", "--quantity", "lots")

    assert result.exit_code == 1
    assert "Invalid quantity" in result.output


def test_post_without_chart_fails(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "entry", "add", "--type", "expense", "--quantity", "1", "--unit-price", "5")
    assert result.exit_code == 0

    result = _invoke(cli_runner, temp_db, "entry", "post", "1")

    assert result.exit_code == 1
    assert "No account mapping" in result.output


def test_entry_add_with_failed_post_stores_nothing(cli_runner, temp_db):
    result = _invoke(
        cli_runner, temp_db, "entry", "add", "--type", "cash_sale", "--quantity", "1", "--unit-price", "100", "--post"
    )

    assert result.exit_code == 1
    assert "No account mapping for transaction type 'cash_sale'" in result.output

    result = _invoke(cli_runner, temp_db, "entry", "list")
    assert "No entries found." in result.output


def test_users_have_separate_books(cli_runner, temp_db):
    """Test that --user scopes every read and write."""
    _invoke(
        cli_runner,
        temp_db,
        "journal",
        "post",
        "--description",
        "Cash sale",
        "--line",
        "cash:debit:10",
        "--line",
        "sales:credit:10",
    )

    result = _invoke(cli_runner, temp_db, "journal", "list", user="bob")
    assert "No journal entries found." in result.output

    result = _invoke(cli_runner, temp_db, "journal", "show", "1", user="bob")
    assert result.exit_code == 1
    assert "not found" in result.output


def test_account_commands(cli_runner, temp_db):
    _invoke(cli_runner, temp_db, "account", "init")

    result = _invoke(cli_runner, temp_db, "account", "create", "Rent Expense", "--type", "expense", "--parent", "5000")
    assert result.exit_code == 0, result.output
    assert "Created account 'Rent Expense'" in result.output

    result = _invoke(cli_runner, temp_db, "account", "create", "Rent Expense", "--type", "expense")
    assert result.exit_code == 1
    assert "already exists" in result.output

    result = _invoke(cli_runner, temp_db, "account", "set-type", "Rent Expense", "liability")
    assert result.exit_code == 0
    assert "is now liability" in result.output

    result = _invoke(cli_runner, temp_db, "account", "list", "--tree")
    assert result.exit_code == 0
    assert "Rent Expense" in result.output

    result = _invoke(cli_runner, temp_db, "account", "mappings")
    assert "cash_sale" in result.output


def test_risk_commands(cli_runner, temp_db):
    """Test integrity checking and finding triage."""
    _invoke(cli_runner, temp_db, "account", "init")
    _invoke(
        cli_runner,
        temp_db,
        "journal",
        "post",
        "--description",
        "Mystery spend",
        "--line",
        "other:debit:100:Mystery",
        "--line",
        "cash:credit:100",
    )

    result = _invoke(cli_runner, temp_db, "report", "balance-sheet")
    assert "Balanced: NO (difference -100.00)" in result.output

    result = _invoke(cli_runner, temp_db, "risk", "check")
    assert result.exit_code == 0
    assert "recorded critical finding 1" in result.output

    result = _invoke(cli_runner, temp_db, "risk", "analyze")
    assert "Created 1 finding(s)" in result.output

    result = _invoke(cli_runner, temp_db, "risk", "list", "--severity", "critical")
    assert "data_integrity" in result.output
    assert "missing_documentation" not in result.output

    result = _invoke(cli_runner, temp_db, "risk", "resolve", "1")
    assert result.exit_code == 0
    result = _invoke(cli_runner, temp_db, "risk", "dismiss", "1")
    assert result.exit_code == 1
    assert "Cannot change finding 1" in result.output


def test_product_and_target_commands(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "product", "add", "Rice 50kg", "--unit-price", "45,000", "--bulk-price", "42000")
    assert result.exit_code == 0, result.output
    assert "Added product 'Rice 50kg'" in result.output

    result = _invoke(cli_runner, temp_db, "product", "list")
    assert "45,000.00" in result.output

    result = _invoke(cli_runner, temp_db, "target", "set", "--month", "3", "--year", "2024", "--monthly", "2000")
    assert result.exit_code == 0, result.output
    assert "Set profit target for 2024-03: 2,000.00" in result.output

    _invoke(
        cli_runner,
        temp_db,
        "journal",
        "post",
        "--description",
        "Sale",
        "--date",
        "2024-03-10",
        "--line",
        "cash:debit:1000",
        "--line",
        "sales:credit:1000",
    )
    result = _invoke(cli_runner, temp_db, "target", "show", "--month", "3", "--year", "2024")
    assert "50.00%" in result.output

    result = _invoke(cli_runner, temp_db, "target", "show", "--month", "4", "--year", "2024")
    assert "No profit target set for 2024-04." in result.output


def test_target_set_rejects_blank_monthly(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "target", "set", "--month", "3", "--year", "2024", "--monthly", " ")

    assert result.exit_code == 1
    assert "Error: Monthly target is required" in result.output
    assert not isinstance(result.exception, TypeError)


def test_target_commands_reject_month_zero(cli_runner, temp_db):
    result = _invoke(cli_runner, temp_db, "target", "set", "--month", "0", "--year", "2024", "--monthly", "100")

    assert result.exit_code == 1
    assert "Target month must be between 1 and 12" in result.output

    result = _invoke(cli_runner, temp_db, "target", "show", "--month", "0", "--year", "2024")
    assert result.exit_code == 1
    assert "Target month must be between 1 and 12" in result.output
