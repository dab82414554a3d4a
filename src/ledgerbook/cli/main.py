"""Main CLI entry point."""

import click
import structlog

from ledgerbook.database.factories import create_sqlite_database
from ledgerbook.logging_config import configure_logging

# Import and register all commands at module level
from ledgerbook.cli.commands import (
    account,
    book,
    entry,
    journal,
    product,
    report,
    risk,
    target,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides LEDGERBOOK_DB_PATH environment variable)",
    envvar="LEDGERBOOK_DB_PATH",
)
@click.option(
    "--user",
    default="default",
    show_default=True,
    help="User whose books to work on",
    envvar="LEDGERBOOK_USER",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar="LEDGERBOOK_LOG_LEVEL",
    help="Log level (logs go to stderr)",
)
@click.option(
    "--log-format",
    type=click.Choice(["console", "json"]),
    default="console",
    show_default=True,
    envvar="LEDGERBOOK_LOG_FORMAT",
    help="Log output format",
)
@click.pass_context
def cli(ctx, db_path: str | None, user: str, log_level: str, log_format: str):
    """Ledgerbook - Double-entry bookkeeping.

    Record transactions as flat entries or balanced journal entries, keep
    books of original entry and derive dashboards, profit & loss statements
    and balance sheets from the journal.
    """
    ctx.ensure_object(dict)
    configure_logging(level=log_level.upper(), format=log_format)
    structlog.contextvars.bind_contextvars(owner=user)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.obj["owner"] = user
        ctx.call_on_close(db.disconnect)


# Register all commands
entry.register_commands(cli)
journal.register_commands(cli)
book.register_commands(cli)
report.register_commands(cli)
account.register_commands(cli)
product.register_commands(cli)
target.register_commands(cli)
risk.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
