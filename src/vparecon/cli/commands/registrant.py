"""Registrant management commands."""

import asyncio

import click

from vparecon.cli.error_handling import handle_domain_error
from vparecon.domain.bulk_delete import BulkDeleteOrchestrator
from vparecon.domain.entities import DeleteStatus, Registrant
from vparecon.domain.errors import DomainError
from vparecon.domain.registrant import RegistrantService
from vparecon.events import LoggingEventSink


def _format_registrant(registrant: Registrant) -> str:
    return (
        f"ID: {registrant.id:5d} | {registrant.vpa:30s} | "
        f"Phone: {registrant.phone or '-':10s} | "
        f"Route: {registrant.route_no or '-'} | CC: {registrant.cc_no or '-'} | "
        f"{registrant.name or ''}"
    )


@click.group()
def registrant_group():
    """Manage registrants."""
    pass


@registrant_group.command("add")
@click.option("--vpa", required=True, help="Virtual Payment Address, e.g. 9876543210@ybl")
@click.option("--phone", help="10-digit phone number")
@click.option("--cc-no", help="CC number")
@click.option("--route-no", help="Route number")
@click.option("--name", help="Registrant name")
@click.pass_context
def add_registrant(ctx, vpa: str, phone: str | None, cc_no: str | None, route_no: str | None, name: str | None):
    """Add a single registrant.

    Examples:
        vparecon registrant add --vpa 9876543210@ybl --phone 9876543210
        vparecon registrant add --vpa alice@okaxis --route-no R12 --name Alice
    """
    service = RegistrantService(ctx.obj["store"], ctx.obj["config"])
    try:
        registrant = service.add_registrant(
            vpa=vpa, phone=phone, cc_no=cc_no, route_no=route_no, name=name
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created registrant '{registrant.vpa}' (ID: {registrant.id})")


@registrant_group.command("list")
@click.option("--limit", type=int, default=50, show_default=True, help="Rows per page")
@click.option("--offset", type=int, default=0, show_default=True, help="Rows to skip")
@click.pass_context
def list_registrants(ctx, limit: int, offset: int):
    """List registrants, newest first."""
    service = RegistrantService(ctx.obj["store"], ctx.obj["config"])
    try:
        registrants, total = service.list_page(limit=limit, offset=offset)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if total == 0:
        click.echo("No registrants found.")
        return

    click.echo(f"\nRegistrants ({offset + 1}-{offset + len(registrants)} of {total}):")
    click.echo("-" * 100)
    for registrant in registrants:
        click.echo(_format_registrant(registrant))


@registrant_group.command("show")
@click.argument("registrant_id", type=int)
@click.pass_context
def show_registrant(ctx, registrant_id: int):
    """Show a registrant by ID."""
    service = RegistrantService(ctx.obj["store"], ctx.obj["config"])
    try:
        registrant = service.get_registrant(registrant_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"ID:         {registrant.id}")
    click.echo(f"VPA:        {registrant.vpa}")
    click.echo(f"Phone:      {registrant.phone or '-'}")
    click.echo(f"CC No:      {registrant.cc_no or '-'}")
    click.echo(f"Route No:   {registrant.route_no or '-'}")
    click.echo(f"Name:       {registrant.name or '-'}")
    click.echo(f"Inserted:   {registrant.inserted_at}")
    click.echo(f"Updated:    {registrant.updated_at}")


@registrant_group.command("edit")
@click.argument("registrant_id", type=int)
@click.option("--vpa", help="New VPA")
@click.option("--phone", help="New phone number")
@click.option("--cc-no", help="New CC number")
@click.option("--route-no", help="New route number")
@click.option("--name", help="New name")
@click.pass_context
def edit_registrant(
    ctx,
    registrant_id: int,
    vpa: str | None,
    phone: str | None,
    cc_no: str | None,
    route_no: str | None,
    name: str | None,
):
    """Edit fields of a registrant.

    Only the options given are changed.

    Examples:
        vparecon registrant edit 12 --route-no R7
        vparecon registrant edit 12 --vpa alice@ybl --phone 9876543210
    """
    changes = {
        key: value
        for key, value in (
            ("vpa", vpa),
            ("phone", phone),
            ("cc_no", cc_no),
            ("route_no", route_no),
            ("name", name),
        )
        if value is not None
    }
    if not changes:
        click.echo("Error: Nothing to update. Pass at least one field option.", err=True)
        ctx.exit(1)

    service = RegistrantService(ctx.obj["store"], ctx.obj["config"])
    try:
        registrant = service.update_registrant(registrant_id, **changes)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated registrant {registrant.id}")


@registrant_group.command("delete")
@click.argument("registrant_id", type=int)
@click.option("--yes", is_flag=True, help="Skip confirmation prompt")
@click.pass_context
def delete_registrant(ctx, registrant_id: int, yes: bool):
    """Delete a registrant by ID."""
    service = RegistrantService(ctx.obj["store"], ctx.obj["config"])
    try:
        registrant = service.get_registrant(registrant_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not yes and not click.confirm(
        f"Are you sure you want to delete registrant '{registrant.vpa}' (ID: {registrant_id})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_registrant(registrant_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted registrant '{registrant.vpa}'")


@registrant_group.command("bulk-delete")
@click.argument("registrant_ids", nargs=-1, type=int)
@click.option(
    "--ids-file",
    type=click.File("r"),
    help="File with one registrant ID per line (combined with any IDs given as arguments)",
)
@click.option("--verify", is_flag=True, help="Refuse to delete anything if an ID does not exist")
@click.option("--yes", is_flag=True, help="Skip confirmation prompt")
@click.pass_context
def bulk_delete(ctx, registrant_ids: tuple[int, ...], ids_file, verify: bool, yes: bool):
    """Delete many registrants in batches.

    A failing batch does not stop the remaining batches; the summary reports
    how many registrants were actually removed and which batches failed.

    Examples:
        vparecon registrant bulk-delete 3 4 5
        vparecon registrant bulk-delete --ids-file ids.txt --verify --yes
    """
    ids = list(registrant_ids)
    if ids_file is not None:
        for line_number, line in enumerate(ids_file, start=1):
            line = line.strip()
            if not line:
                continue
            if not line.isdigit():
                click.echo(f"Error: Invalid ID '{line}' on line {line_number} of ids file", err=True)
                ctx.exit(1)
            ids.append(int(line))

    try:
        orchestrator = BulkDeleteOrchestrator(ctx.obj["store"], ctx.obj["config"], LoggingEventSink())
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not yes and not click.confirm(f"Are you sure you want to delete {len(set(ids))} registrant(s)?"):
        click.echo("Deletion cancelled.")
        return

    try:
        report = asyncio.run(orchestrator.delete(ids, verify_existence=verify))
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nBulk delete {report.status.value}:")
    click.echo(f"  Requested: {report.total_requested}")
    click.echo(f"  Deleted: {report.deleted_count}")
    if report.failed_batches:
        click.echo(f"  Failed batches: {len(report.failed_batches)}")
        for failure in report.failed_batches:
            click.echo(
                f"    Batch {failure.batch_index + 1} ({len(failure.ids)} ids): {failure.error}",
                err=True,
            )
    if report.status is not DeleteStatus.SUCCESS:
        ctx.exit(1)


def register_commands(cli):
    """Register registrant commands with main CLI."""
    cli.add_command(registrant_group, name="registrant")
