"""Statement reconciliation command."""

import asyncio

import click

from vparecon.cli.error_handling import handle_domain_error
from vparecon.domain.entities import MatchStatus
from vparecon.domain.errors import DomainError
from vparecon.domain.reconciliation import ReconciliationService
from vparecon.domain.statement import StatementParser
from vparecon.events import LoggingEventSink


@click.command("reconcile")
@click.argument("statement_file", type=click.Path(exists=True))
@click.option("--show-unmatched", is_flag=True, help="List transactions with no registrant")
@click.pass_context
def reconcile_statement(ctx, statement_file: str, show_unmatched: bool):
    """Match a payment statement against the registrant registry by VPA."""
    events = LoggingEventSink()
    try:
        parsed = StatementParser(events).parse_file(statement_file)
        service = ReconciliationService(ctx.obj["store"], ctx.obj["config"], events)
        report = asyncio.run(service.reconcile(parsed.transactions))
    except (DomainError, FileNotFoundError) as e:
        handle_domain_error(ctx, e)

    for rejection in parsed.rejected:
        click.echo(f"Skipped row {rejection.row_number}: {rejection.reason}", err=True)

    if report.status is MatchStatus.NO_REGISTRY_DATA:
        click.echo("Error: No registry data. Import registrants before reconciling.", err=True)
        ctx.exit(1)

    click.echo(f"\nReconciliation complete:")
    click.echo(f"  Transactions: {report.total_count}")
    click.echo(f"  Matched: {report.matched_count}")
    click.echo(f"  Unmatched: {report.unmatched_count}")
    if parsed.rejected:
        click.echo(f"  Skipped rows: {len(parsed.rejected)}")

    if show_unmatched:
        unmatched = [t for t in report.transactions if not t.is_matched]
        if unmatched:
            click.echo("\nUnmatched transactions:")
            click.echo("-" * 80)
            for txn in unmatched:
                click.echo(
                    f"{txn.sno:>5s} | {txn.transaction_date:12s} | {txn.amount:>10} | "
                    f"{txn.reference_number:14s} | {txn.customer_vpa}"
                )


def register_commands(cli):
    """Register reconcile command with main CLI."""
    cli.add_command(reconcile_statement)
