"""Main CLI entry point."""

import click

from vparecon.config import ReconConfig
from vparecon.database.factories import create_sqlite_store
from vparecon.domain.errors import ConfigurationError
from vparecon.cli.error_handling import handle_domain_error
from vparecon.logging_setup import configure_logging

# Import and register all commands at module level
from vparecon.cli.commands import registrant, import_cmd, reconcile


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides VPARECON_DB_PATH environment variable)",
    envvar="VPARECON_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging level (overrides VPARECON_LOG_LEVEL environment variable)",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str | None):
    """vparecon - VPA registry import and payment reconciliation.

    Import registrants from CSV files, reconcile payment statements against
    the registry by VPA, and manage registrants in bulk.
    """
    ctx.ensure_object(dict)

    # Initialize the store only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        configure_logging(log_level)
        try:
            config = ReconConfig.from_env()
        except ConfigurationError as e:
            handle_domain_error(ctx, e)
        store = create_sqlite_store(
            database_path=db_path,
            max_batch_size=max(config.max_import_batch_size, config.max_delete_batch_size),
            max_page_size=config.store_page_size,
        )
        store.connect()
        store.initialize_schema()
        ctx.call_on_close(store.disconnect)
        ctx.obj["store"] = store
        ctx.obj["config"] = config


# Register all commands
registrant.register_commands(cli)
import_cmd.register_commands(cli)
reconcile.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
