"""Catalog management commands."""

import click
from bizdocs.cli.error_handling import handle_domain_error
from bizdocs.domain.catalog import CatalogService
from bizdocs.domain.entities import UNSET, ItemType
from bizdocs.domain.errors import DomainError, catalog_item_not_found
from bizdocs.utils.amount_parser import parse_price
from bizdocs.utils.currency import format_currency

ITEM_TYPES = [t.value for t in ItemType]


def _parse_price(ctx, price: str):
    try:
        return parse_price(price)
    except ValueError as e:
        click.echo(f"Error: Invalid price format: {e}", err=True)
        ctx.exit(1)


@click.group()
def catalog_group():
    """Manage catalog items and services."""
    pass


@catalog_group.command("add")
@click.argument("code")
@click.argument("name")
@click.option("--price", required=True, help="Unit price (e.g., 150000 or 'Rp 150.000,50')")
@click.option("--type", "item_type", type=click.Choice(ITEM_TYPES, case_sensitive=False), default="item", help="Item type (default: item)")
@click.option("--description", help="Description")
@click.pass_context
def add_item(ctx, code: str, name: str, price: str, item_type: str, description: str | None):
    """Add a catalog item."""
    service = CatalogService(ctx.obj["db"])
    unit_price = _parse_price(ctx, price)

    try:
        item = service.create_item(
            code=code, name=name, item_type=item_type.lower(), unit_price=unit_price, description=description
        )
        click.echo(f"Created catalog item '{item.code}' (ID: {item.id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@catalog_group.command("list")
@click.option("--search", "query", help="Text to look for in code or name")
@click.option("--type", "item_type", type=click.Choice(ITEM_TYPES, case_sensitive=False), help="Only this item type")
@click.option("--limit", type=int, default=20, show_default=True, help="Maximum rows")
@click.option("--offset", type=int, default=0, help="Rows to skip")
@click.pass_context
def list_items(ctx, query: str | None, item_type: str | None, limit: int, offset: int):
    """List catalog items ordered by name."""
    service = CatalogService(ctx.obj["db"])

    try:
        items = service.search_items(
            query=query, item_type=item_type.lower() if item_type else None, limit=limit, offset=offset
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not items:
        click.echo("No catalog items found.")
        return

    click.echo(f"\n{'ID':<6} {'Code':<12} {'Name':<32} {'Type':<8} {'Unit Price':>20}")
    click.echo("-" * 82)
    for item in items:
        name = item.name[:30] + ".." if len(item.name) > 32 else item.name
        click.echo(
            f"{item.id:<6} {item.code:<12} {name:<32} {item.item_type.value:<8} {format_currency(item.unit_price):>20}"
        )


@catalog_group.command("show")
@click.argument("item_id", type=int)
@click.pass_context
def show_item(ctx, item_id: int):
    """Show one catalog item."""
    service = CatalogService(ctx.obj["db"])

    item = service.get_item(item_id)
    if item is None:
        click.echo(f"Error: {catalog_item_not_found(item_id)}", err=True)
        ctx.exit(1)

    click.echo(f"\nCatalog Item (ID: {item.id})")
    click.echo(f"  Code:        {item.code}")
    click.echo(f"  Name:        {item.name}")
    click.echo(f"  Type:        {item.item_type.value}")
    click.echo(f"  Unit Price:  {format_currency(item.unit_price)}")
    if item.description:
        click.echo(f"  Description: {item.description}")


@catalog_group.command("update")
@click.argument("item_id", type=int)
@click.option("--code", help="Item code")
@click.option("--name", help="Item name")
@click.option("--price", help="Unit price")
@click.option("--type", "item_type", type=click.Choice(ITEM_TYPES, case_sensitive=False), help="Item type")
@click.option("--description", help="Description, or empty string to clear")
@click.pass_context
def update_item(ctx, item_id: int, code, name, price, item_type, description):
    """Update a catalog item.

    Updates only the fields that are provided. Existing transactions keep
    the prices they were created with.
    """
    service = CatalogService(ctx.obj["db"])

    try:
        service.update_item(
            item_id,
            code=code if code is not None else UNSET,
            name=name if name is not None else UNSET,
            item_type=item_type.lower() if item_type is not None else UNSET,
            unit_price=_parse_price(ctx, price) if price is not None else UNSET,
            description=description if description is not None else UNSET,
        )
        click.echo(f"Updated catalog item {item_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@catalog_group.command("delete")
@click.argument("item_id", type=int)
@click.option("--force", is_flag=True, help="Skip confirmation prompt")
@click.pass_context
def delete_item(ctx, item_id: int, force: bool):
    """Delete a catalog item that no transaction uses."""
    service = CatalogService(ctx.obj["db"])

    if not force and not click.confirm(f"Delete catalog item {item_id}?"):
        click.echo("Cancelled.")
        return

    try:
        service.delete_item(item_id)
        click.echo(f"Deleted catalog item {item_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register catalog commands with main CLI."""
    cli.add_command(catalog_group, name="catalog")
