"""Main CLI entry point."""

import click
from bizdocs.cli.error_handling import handle_domain_error
from bizdocs.database.factories import create_sqlite_database
from bizdocs.domain.errors import DomainError
from bizdocs.logging_config import configure_logging

# Import and register all commands at module level
from bizdocs.cli.commands import (
    store,
    catalog,
    transaction,
    document,
)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides BIZDOCS_DB_PATH environment variable)",
    envvar="BIZDOCS_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Log level for diagnostics on stderr (overrides BIZDOCS_LOG_LEVEL)",
    envvar="BIZDOCS_LOG_LEVEL",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str | None):
    """Bizdocs - Sales transactions and business documents.

    Record sales with Indonesian tax rules applied and generate sales notes,
    invoices, receipts and other documents as HTML.
    """
    ctx.ensure_object(dict)
    configure_logging(log_level)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None and "db" not in ctx.obj:
        try:
            db = create_sqlite_database(database_path=db_path)
        except DomainError as e:
            handle_domain_error(ctx, e)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
store.register_commands(cli)
catalog.register_commands(cli)
transaction.register_commands(cli)
document.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
