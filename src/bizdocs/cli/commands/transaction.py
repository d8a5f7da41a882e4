"""Transaction management commands."""

from dataclasses import asdict

import click
from bizdocs.cli.error_handling import echo_json, handle_domain_error
from bizdocs.domain.catalog import CatalogService
from bizdocs.domain.entities import TransactionPatch, TransactionStatus, UNSET
from bizdocs.domain.errors import DomainError, catalog_item_not_found, transaction_not_found
from bizdocs.domain.pricing import LineItemInput
from bizdocs.domain.transaction import TransactionService
from bizdocs.utils.amount_parser import parse_amount, parse_percentage, parse_price
from bizdocs.utils.currency import format_currency, format_number, format_quantity
from bizdocs.utils.date_parser import PERIODS, get_date_range, parse_date

STATUSES = [s.value for s in TransactionStatus]


def parse_item_option(text: str, catalog_service: CatalogService) -> LineItemInput:
    """Parse ``CATALOG_ID:QTY[:DISCOUNT[:UNIT_PRICE]]`` into a line input.

    The unit price defaults to the catalog price.

    Raises:
        ValueError: If the text is malformed or the catalog item doesn't exist
    """
    parts = text.split(":")
    if len(parts) < 2 or len(parts) > 4:
        raise ValueError(f"Invalid item '{text}'. Expected CATALOG_ID:QTY[:DISCOUNT[:UNIT_PRICE]]")
    try:
        catalog_item_id = int(parts[0])
    except ValueError:
        raise ValueError(f"Invalid catalog item id '{parts[0]}' in '{text}'")

    quantity = parse_amount(parts[1])
    discount = parse_percentage(parts[2]) if len(parts) > 2 and parts[2] else None
    if len(parts) > 3 and parts[3]:
        unit_price = parse_price(parts[3])
    else:
        catalog_item = catalog_service.get_item(catalog_item_id)
        if catalog_item is None:
            raise ValueError(catalog_item_not_found(catalog_item_id))
        unit_price = catalog_item.unit_price

    if discount is None:
        return LineItemInput(catalog_item_id=catalog_item_id, quantity=quantity, unit_price=unit_price)
    return LineItemInput(
        catalog_item_id=catalog_item_id, quantity=quantity, unit_price=unit_price, discount_percentage=discount
    )


def _transaction_service(ctx) -> TransactionService:
    try:
        return TransactionService(ctx.obj["db"])
    except DomainError as e:
        # Malformed BIZDOCS_*_RATE values
        handle_domain_error(ctx, e)


def _parse_date_option(ctx, value: str, label: str):
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def print_transaction(txn, lines) -> None:
    """Print a transaction with its lines and tax breakdown."""
    click.echo(f"\nTransaction {txn.transaction_number} (ID: {txn.id})")
    click.echo(f"  Date:     {txn.transaction_date.date()}")
    click.echo(f"  Status:   {txn.status.value}")
    click.echo(f"  Customer: {txn.customer_name}")
    for label, value in (
        ("Address", txn.customer_address),
        ("Phone", txn.customer_phone),
        ("Email", txn.customer_email),
    ):
        if value:
            click.echo(f"  {label + ':':<9} {value}")

    click.echo(f"\n  {'Code':<12} {'Item':<28} {'Qty':>8} {'Unit Price':>18} {'Disc %':>7} {'Line Total':>18}")
    click.echo("  " + "-" * 96)
    for line in lines:
        click.echo(
            f"  {line.item_code:<12} {line.item_name[:28]:<28} {format_quantity(line.quantity):>8} "
            f"{format_currency(line.unit_price):>18} {format_number(line.discount_percentage):>7} "
            f"{format_currency(line.line_total):>18}"
        )

    click.echo("")
    click.echo(f"  {'Subtotal:':<22} {format_currency(txn.subtotal):>20}")
    if txn.ppn_enabled:
        click.echo(f"  {'PPN:':<22} {format_currency(txn.ppn_amount):>20}")
    if txn.regional_tax_enabled:
        click.echo(f"  {'Regional Tax:':<22} {format_currency(txn.regional_tax_amount):>20}")
    if txn.pph22_enabled:
        click.echo(f"  {'PPh 22 (withheld):':<22} {format_currency(-txn.pph22_amount):>20}")
    if txn.pph23_enabled:
        click.echo(f"  {'PPh 23 (withheld):':<22} {format_currency(-txn.pph23_amount):>20}")
    if txn.stamp_duty_required:
        click.echo(f"  {'Stamp Duty:':<22} {format_currency(txn.stamp_duty_amount):>20}")
    click.echo(f"  {'TOTAL:':<22} {format_currency(txn.total_amount):>20}")
    if txn.notes:
        click.echo(f"\n  Notes: {txn.notes}")


@click.group()
def transaction_group():
    """Manage sales transactions."""
    pass


@transaction_group.command("create")
@click.argument("customer_name")
@click.option(
    "--item",
    "items",
    multiple=True,
    required=True,
    help="Line item as CATALOG_ID:QTY[:DISCOUNT[:UNIT_PRICE]] (repeatable)",
)
@click.option("--address", help="Customer address")
@click.option("--phone", help="Customer phone")
@click.option("--email", help="Customer email")
@click.option("--ppn/--no-ppn", default=True, help="Apply PPN (VAT), on by default")
@click.option("--regional-tax", is_flag=True, help="Apply regional tax")
@click.option("--pph22", is_flag=True, help="Withhold PPh 22")
@click.option("--pph23", is_flag=True, help="Withhold PPh 23")
@click.option("--date", "txn_date", help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')")
@click.option("--notes", help="Notes")
@click.pass_context
def create_transaction(
    ctx,
    customer_name: str,
    items: tuple[str, ...],
    address: str | None,
    phone: str | None,
    email: str | None,
    ppn: bool,
    regional_tax: bool,
    pph22: bool,
    pph23: bool,
    txn_date: str | None,
    notes: str | None,
):
    """Create a draft transaction.

    Examples:
        bizdocs transaction create "PT Maju" --item 1:2
        bizdocs transaction create "PT Maju" --item 1:2:10 --item 3:1::250000 --pph23
    """
    db = ctx.obj["db"]
    service = _transaction_service(ctx)
    catalog_service = CatalogService(db)

    try:
        line_inputs = [parse_item_option(text, catalog_service) for text in items]
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    business_date = _parse_date_option(ctx, txn_date, "date") if txn_date else None

    try:
        txn = service.create_transaction(
            customer_name=customer_name,
            items=line_inputs,
            customer_address=address,
            customer_phone=phone,
            customer_email=email,
            ppn_enabled=ppn,
            regional_tax_enabled=regional_tax,
            pph22_enabled=pph22,
            pph23_enabled=pph23,
            notes=notes,
            transaction_date=business_date,
        )
        click.echo(
            f"Created transaction {txn.transaction_number} (ID: {txn.id}) "
            f"total {format_currency(txn.total_amount)}"
        )
    except DomainError as e:
        handle_domain_error(ctx, e)


@transaction_group.command("show")
@click.argument("transaction_id", type=int)
@click.option("--json", "as_json", is_flag=True, help="Print as JSON")
@click.pass_context
def show_transaction(ctx, transaction_id: int, as_json: bool):
    """Show a transaction with its lines."""
    service = _transaction_service(ctx)

    try:
        txn = service.get_transaction(transaction_id)
        if txn is None:
            click.echo(f"Error: {transaction_not_found(transaction_id)}", err=True)
            ctx.exit(1)
        lines = service.get_transaction_lines(transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if as_json:
        data = asdict(txn)
        data["lines"] = [asdict(line) for line in lines]
        echo_json(data)
        return
    print_transaction(txn, lines)


@transaction_group.command("list")
@click.option("--status", type=click.Choice(STATUSES, case_sensitive=False), help="Only this status")
@click.option("--customer", help="Part of the customer name (case-insensitive)")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'yesterday')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.option("--period", type=click.Choice(PERIODS, case_sensitive=False), help="Named period instead of start/end dates")
@click.option("--limit", type=int, default=20, show_default=True, help="Maximum rows (1-100)")
@click.option("--offset", type=int, default=0, help="Rows to skip")
@click.pass_context
def list_transactions(
    ctx,
    status: str | None,
    customer: str | None,
    start_date: str | None,
    end_date: str | None,
    period: str | None,
    limit: int,
    offset: int,
):
    """List transactions, newest first."""
    service = _transaction_service(ctx)

    if period and (start_date or end_date):
        click.echo("Error: Use either --period or --start-date/--end-date, not both", err=True)
        ctx.exit(1)

    start = end = None
    if period:
        start, end = get_date_range(period)
    if start_date:
        start = _parse_date_option(ctx, start_date, "start date")
    if end_date:
        end = _parse_date_option(ctx, end_date, "end date")

    try:
        transactions = service.get_transaction_history(
            status=status.lower() if status else None,
            customer_name=customer,
            date_from=start,
            date_to=end,
            limit=limit,
            offset=offset,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(f"\n{'ID':<6} {'Number':<16} {'Date':<12} {'Customer':<28} {'Status':<10} {'Total':>20}")
    click.echo("-" * 96)
    for txn in transactions:
        name = txn.customer_name[:26] + ".." if len(txn.customer_name) > 28 else txn.customer_name
        click.echo(
            f"{txn.id:<6} {txn.transaction_number:<16} {str(txn.transaction_date.date()):<12} "
            f"{name:<28} {txn.status.value:<10} {format_currency(txn.total_amount):>20}"
        )


@transaction_group.command("update")
@click.argument("transaction_id", type=int)
@click.option("--customer", help="Customer name")
@click.option("--address", help="Customer address, or empty string to clear")
@click.option("--phone", help="Customer phone, or empty string to clear")
@click.option("--email", help="Customer email, or empty string to clear")
@click.option("--status", type=click.Choice(STATUSES, case_sensitive=False), help="New status")
@click.option("--ppn/--no-ppn", default=None, help="Enable or disable PPN")
@click.option("--regional-tax/--no-regional-tax", default=None, help="Enable or disable regional tax")
@click.option("--pph22/--no-pph22", default=None, help="Enable or disable PPh 22")
@click.option("--pph23/--no-pph23", default=None, help="Enable or disable PPh 23")
@click.option("--date", "txn_date", help="Transaction date")
@click.option("--notes", help="Notes, or empty string to clear")
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: int,
    customer,
    address,
    phone,
    email,
    status,
    ppn,
    regional_tax,
    pph22,
    pph23,
    txn_date,
    notes,
):
    """Update a transaction.

    Updates only the fields that are provided. Changing a tax flag
    recomputes every tax amount from the stored lines.

    Examples:
        bizdocs transaction update 1 --status confirmed
        bizdocs transaction update 1 --no-ppn --pph23
    """
    service = _transaction_service(ctx)

    def supplied(value):
        return UNSET if value is None else value

    patch = TransactionPatch(
        customer_name=supplied(customer),
        customer_address=supplied(address),
        customer_phone=supplied(phone),
        customer_email=supplied(email),
        status=supplied(status.lower() if status else None),
        ppn_enabled=supplied(ppn),
        regional_tax_enabled=supplied(regional_tax),
        pph22_enabled=supplied(pph22),
        pph23_enabled=supplied(pph23),
        notes=supplied(notes),
        transaction_date=_parse_date_option(ctx, txn_date, "date") if txn_date else UNSET,
    )
    if not patch.present():
        click.echo("Error: Nothing to update", err=True)
        ctx.exit(1)

    try:
        txn = service.update_transaction(transaction_id, patch)
        click.echo(f"Updated transaction {txn.transaction_number} total {format_currency(txn.total_amount)}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@transaction_group.command("delete")
@click.argument("transaction_id", type=int)
@click.option("--force", is_flag=True, help="Skip confirmation prompt")
@click.pass_context
def delete_transaction(ctx, transaction_id: int, force: bool):
    """Delete a draft transaction with its lines and documents."""
    service = _transaction_service(ctx)

    if not force and not click.confirm(f"Delete transaction {transaction_id}?"):
        click.echo("Cancelled.")
        return

    try:
        service.delete_transaction(transaction_id)
        click.echo(f"Deleted transaction {transaction_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
