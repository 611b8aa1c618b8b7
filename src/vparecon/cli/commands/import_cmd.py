"""Registrant file import command."""

import asyncio

import click

from vparecon.cli.error_handling import handle_domain_error
from vparecon.config import ConflictPolicy
from vparecon.domain.errors import DomainError
from vparecon.domain.registrant_import import RegistrantImportService
from vparecon.events import LoggingEventSink


@click.command("import")
@click.argument("registrant_file", type=click.Path(exists=True))
@click.option(
    "--policy",
    type=click.Choice(["insert_only", "upsert"]),
    help="Conflict policy (defaults to VPARECON_CONFLICT_POLICY, else upsert)",
)
@click.option(
    "--conflict-key",
    help="Unique key for upsert: 'phone,vpa' or 'id' (defaults to phone,vpa)",
)
@click.option("--strict", is_flag=True, help="Write nothing if any row fails validation")
@click.pass_context
def import_registrants(
    ctx, registrant_file: str, policy: str | None, conflict_key: str | None, strict: bool
):
    """Import registrants from a CSV file.

    Header names are matched loosely ('Customer VPA (UPI)', 'customer_vpas'
    and 'VPA' all mean the VPA column). Rows failing validation are reported
    and skipped; valid rows are written in batches. With --strict the first
    invalid row aborts the import before anything is written.
    """
    config = ctx.obj["config"]
    try:
        conflict_policy = (
            ConflictPolicy.parse(policy, conflict_key) if policy is not None else config.conflict_policy
        )
        service = RegistrantImportService(ctx.obj["store"], config, LoggingEventSink())
        result = asyncio.run(service.import_file(registrant_file, policy=conflict_policy, strict=strict))
    except (DomainError, FileNotFoundError) as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nImport complete:")
    click.echo(f"  Accepted: {len(result.accepted)} rows")
    click.echo(f"  Written: {result.written_count} registrants")
    click.echo(f"  Rejected: {len(result.rejected)} rows")
    for rejection in result.rejected:
        click.echo(f"    Row {rejection.row_number}: {rejection.reason}", err=True)
    if result.conflict_count:
        click.echo(f"  Duplicate entries: {result.conflict_count} batch(es)")
    for batch in result.failed_batches:
        click.echo(
            f"    Batch {batch.batch_index + 1} ({batch.size} rows) {batch.status.value}: {batch.error}",
            err=True,
        )
    if result.failed_batches:
        ctx.exit(1)


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_registrants)
