"""Document generation commands."""

from dataclasses import asdict
from pathlib import Path

import click
from bizdocs.cli.error_handling import echo_json, handle_domain_error
from bizdocs.domain.document import DocumentService
from bizdocs.domain.entities import DocumentType
from bizdocs.domain.errors import DomainError, document_not_found
from bizdocs.utils.date_parser import parse_date

DOCUMENT_TYPES = [t.value for t in DocumentType]


@click.group()
def document_group():
    """Generate and view business documents."""
    pass


@document_group.command("generate")
@click.argument("transaction_id", type=int)
@click.argument("document_type", type=click.Choice(DOCUMENT_TYPES, case_sensitive=False))
@click.option("--date", "doc_date", help="Document date (defaults to today)")
@click.option("--recipient", help="Recipient name printed on the document")
@click.option("--notes", help="Additional notes printed on the document")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Also write the HTML to this file")
@click.pass_context
def generate_document(
    ctx,
    transaction_id: int,
    document_type: str,
    doc_date: str | None,
    recipient: str | None,
    notes: str | None,
    output: str | None,
):
    """Generate a document for a transaction.

    Each run creates a new numbered document.

    Examples:
        bizdocs document generate 1 invoice
        bizdocs document generate 1 bast --recipient "Budi" -o bast.html
    """
    service = DocumentService(ctx.obj["db"])

    document_date = None
    if doc_date:
        try:
            document_date = parse_date(doc_date)
        except ValueError as e:
            click.echo(f"Error: Invalid date: {e}", err=True)
            ctx.exit(1)

    try:
        doc = service.generate_document(
            transaction_id=transaction_id,
            document_type=document_type.lower(),
            document_date=document_date,
            recipient_name=recipient,
            custom_notes=notes,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Generated {doc.document_type.value} {doc.document_number} (ID: {doc.id})")
    if output:
        Path(output).write_text(doc.html_content, encoding="utf-8")
        click.echo(f"Wrote {output}")


@document_group.command("list")
@click.argument("transaction_id", type=int)
@click.pass_context
def list_documents(ctx, transaction_id: int):
    """List documents generated for a transaction."""
    service = DocumentService(ctx.obj["db"])

    documents = service.get_documents_by_transaction(transaction_id)
    if not documents:
        click.echo("No documents found.")
        return

    click.echo(f"\n{'ID':<6} {'Number':<18} {'Type':<18} {'Date':<12} {'Recipient'}")
    click.echo("-" * 72)
    for doc in documents:
        click.echo(
            f"{doc.id:<6} {doc.document_number:<18} {doc.document_type.value:<18} "
            f"{str(doc.document_date.date()):<12} {doc.recipient_name or ''}"
        )


@document_group.command("show")
@click.argument("document_id", type=int)
@click.option("--html", "as_html", is_flag=True, help="Print the stored HTML")
@click.option("--json", "as_json", is_flag=True, help="Print as JSON")
@click.pass_context
def show_document(ctx, document_id: int, as_html: bool, as_json: bool):
    """Show a stored document."""
    service = DocumentService(ctx.obj["db"])

    doc = service.get_document(document_id)
    if doc is None:
        click.echo(f"Error: {document_not_found(document_id)}", err=True)
        ctx.exit(1)

    if as_html:
        click.echo(doc.html_content)
        return
    if as_json:
        echo_json(asdict(doc))
        return

    click.echo(f"\nDocument {doc.document_number} (ID: {doc.id})")
    click.echo(f"  Type:        {doc.document_type.value}")
    click.echo(f"  Transaction: {doc.transaction_id}")
    click.echo(f"  Date:        {doc.document_date.date()}")
    if doc.recipient_name:
        click.echo(f"  Recipient:   {doc.recipient_name}")
    if doc.custom_notes:
        click.echo(f"  Notes:       {doc.custom_notes}")


def register_commands(cli):
    """Register document commands with main CLI."""
    cli.add_command(document_group, name="document")
