"""Risk finding commands."""

import click

from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.domain.entities import FindingStatus, Severity
from ledgerbook.domain.errors import DomainError
from ledgerbook.domain.risk import RiskService


@click.group()
def risk_group():
    """Analyse the books for risks and triage findings."""
    pass


@risk_group.command("analyze")
@click.pass_context
def analyze(ctx):
    """Run the built-in risk checks over the journal."""
    finding_ids = RiskService(ctx.obj["db"], ctx.obj["owner"]).analyze()
    click.echo(f"Created {len(finding_ids)} finding(s)")


@risk_group.command("check")
@click.pass_context
def check(ctx):
    """Check that the balance sheet balances and every line is classified."""
    finding_id = RiskService(ctx.obj["db"], ctx.obj["owner"]).check_integrity()
    if finding_id is None:
        click.echo("Books are consistent: assets equal liabilities plus equity.")
    else:
        click.echo(f"Integrity check failed; recorded critical finding {finding_id}")


@risk_group.command("list")
@click.option("--status", type=click.Choice([s.value for s in FindingStatus]), help="Filter by status")
@click.option(
    "--severity",
    "severities",
    multiple=True,
    type=click.Choice([s.value for s in Severity]),
    help="Filter by severity (repeatable)",
)
@click.pass_context
def list_findings(ctx, status: str | None, severities: tuple[str, ...]):
    """List findings, newest first."""
    findings = RiskService(ctx.obj["db"], ctx.obj["owner"]).list_findings(
        status=status, severities=list(severities)
    )
    if not findings:
        click.echo("No findings.")
        return

    click.echo(f"{'ID':<6} {'Severity':<10} {'Status':<10} {'Type':<22} {'Title':<40}")
    click.echo("-" * 90)
    for f in findings:
        click.echo(f"{f.id:<6} {f.severity.value:<10} {f.status.value:<10} {f.finding_type:<22} {f.title[:40]:<40}")


@risk_group.command("resolve")
@click.argument("finding_id", type=int)
@click.pass_context
def resolve(ctx, finding_id: int):
    """Mark an open finding as resolved."""
    try:
        RiskService(ctx.obj["db"], ctx.obj["owner"]).resolve(finding_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Resolved finding {finding_id}")


@risk_group.command("dismiss")
@click.argument("finding_id", type=int)
@click.pass_context
def dismiss(ctx, finding_id: int):
    """Dismiss an open finding."""
    try:
        RiskService(ctx.obj["db"], ctx.obj["owner"]).dismiss(finding_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Dismissed finding {finding_id}")


def register_commands(cli: click.Group) -> None:
    """Register risk commands with main CLI."""
    cli.add_command(risk_group, name="risk")
