"""CLI error handling helpers."""

from decimal import Decimal
from typing import Optional

import click

from ledgerbook.domain.errors import DomainError
from ledgerbook.utils.amount_parser import parse_optional_amount


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def parse_amount_option(ctx: click.Context, label: str, value: Optional[str]) -> Optional[Decimal]:
    """Parse an optional amount option, exiting with an error if it is malformed."""
    try:
        return parse_optional_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)
