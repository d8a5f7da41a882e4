"""HTML rendering of business documents.

Rendering is a pure function of its inputs: the same transaction, lines,
store profile, number and date always produce the same HTML.
"""

from dataclasses import dataclass
from datetime import datetime
from html import escape
from typing import Optional, Sequence

from bizdocs.domain.entities import DocumentType, StoreProfile, Transaction, TransactionLine
from bizdocs.domain.tax import percent_label
from bizdocs.utils.currency import format_currency, format_number, format_quantity


@dataclass(frozen=True)
class DocumentStyle:
    """Per-type presentation settings."""

    prefix: str
    title: str
    subtitle: Optional[str] = None
    date_label: str = "Date"
    recipient_label: str = "Recipient"
    customer_label: str = "Customer"
    signatures: tuple[str, ...] = ()
    footer_note: Optional[str] = None


DOCUMENT_STYLES = {
    DocumentType.SALES_NOTE: DocumentStyle(
        prefix="SN",
        title="SALES NOTE",
        customer_label="Sold To",
        signatures=("Seller", "Buyer"),
    ),
    DocumentType.PAYMENT_RECEIPT: DocumentStyle(
        prefix="PR",
        title="PAYMENT RECEIPT",
        date_label="Payment Date",
        recipient_label="Received From",
        customer_label="Paid By",
        signatures=("Received By",),
        footer_note="Payment has been received in full for the items listed above.",
    ),
    DocumentType.INVOICE: DocumentStyle(
        prefix="INV",
        title="INVOICE",
        date_label="Invoice Date",
        customer_label="Bill To",
        signatures=("Authorized Signature",),
    ),
    DocumentType.BAST: DocumentStyle(
        prefix="BAST",
        title="BAST",
        subtitle="Berita Acara Serah Terima (Handover Certificate)",
        date_label="Handover Date",
        recipient_label="Received By",
        customer_label="Second Party",
        signatures=("First Party", "Second Party"),
        footer_note="The goods and/or services listed above have been handed over in good condition.",
    ),
    DocumentType.PURCHASE_ORDER: DocumentStyle(
        prefix="PO",
        title="PURCHASE ORDER",
        date_label="Order Date",
        recipient_label="Attention",
        customer_label="Ordered By",
        signatures=("Ordered By", "Approved By"),
    ),
    DocumentType.TAX_INVOICE: DocumentStyle(
        prefix="TAX",
        title="TAX INVOICE",
        subtitle="Faktur Pajak",
        date_label="Invoice Date",
        customer_label="Taxable Buyer",
        signatures=("Authorized Signature",),
    ),
    DocumentType.PROFORMA_INVOICE: DocumentStyle(
        prefix="PI",
        title="PROFORMA INVOICE",
        date_label="Quote Date",
        customer_label="Prepared For",
        footer_note="This proforma invoice is a quotation and is not a demand for payment.",
    ),
}

_MONTHS = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

_STYLE = (
    "body{font-family:Arial,Helvetica,sans-serif;font-size:13px;color:#222;margin:24px;}"
    "h1{margin:0;font-size:22px;letter-spacing:1px;}"
    ".header{display:flex;justify-content:space-between;border-bottom:2px solid #222;padding-bottom:8px;}"
    ".meta td{padding:2px 8px 2px 0;}"
    "table.items{width:100%;border-collapse:collapse;margin-top:16px;}"
    "table.items th,table.items td{border:1px solid #999;padding:4px 6px;}"
    "table.items th{background:#eee;}"
    ".num{text-align:right;}"
    ".total td{font-weight:bold;border-top:2px solid #222;}"
    ".notes{margin-top:12px;}"
    ".signatures{display:flex;justify-content:space-around;margin-top:48px;}"
    ".signature{text-align:center;width:30%;}"
    ".signature .line{margin-top:56px;border-top:1px solid #222;}"
)


def document_style(document_type: DocumentType) -> DocumentStyle:
    """Look up the presentation settings for a document type."""
    return DOCUMENT_STYLES[DocumentType(document_type)]


def format_document_number(document_type: DocumentType, year: int, sequence: int) -> str:
    """Build a document number such as ``INV-2024-0007``."""
    return f"{document_style(document_type).prefix}-{year}-{sequence:04d}"


@dataclass(frozen=True)
class DocumentContext:
    """Everything a document rendering depends on."""

    document_type: DocumentType
    document_number: str
    document_date: datetime
    store: StoreProfile
    transaction: Transaction
    lines: Sequence[TransactionLine]
    recipient_name: Optional[str] = None
    custom_notes: Optional[str] = None


def _text(value) -> str:
    return escape(str(value), quote=True)


def _multiline(value: str) -> str:
    return "<br>".join(_text(part) for part in value.splitlines())


def _date(value: datetime) -> str:
    # Locale independent
    return f"{value.day:02d} {_MONTHS[value.month - 1]} {value.year}"


def _row(label: str, value: str, css: str = "") -> str:
    class_attr = f' class="{css}"' if css else ""
    return f'<tr{class_attr}><td colspan="5" class="num">{_text(label)}</td><td class="num">{value}</td></tr>'


def _store_block(store: StoreProfile) -> str:
    return (
        '<div class="store">'
        f'<h2 class="store-name">{_text(store.name)}</h2>'
        f"<div>{_multiline(store.address)}</div>"
        f"<div>Phone: {_text(store.phone)}</div>"
        f"<div>Email: {_text(store.email)}</div>"
        f"<div>NPWP: {_text(store.npwp)}</div>"
        "</div>"
    )


def _meta_block(context: DocumentContext, style: DocumentStyle) -> str:
    rows = [
        ("Document No.", _text(context.document_number)),
        (style.date_label, _text(_date(context.document_date))),
        ("Transaction No.", _text(context.transaction.transaction_number)),
    ]
    if context.recipient_name:
        rows.append((style.recipient_label, _text(context.recipient_name)))
    cells = "".join(f"<tr><td>{_text(label)}:</td><td>{value}</td></tr>" for label, value in rows)
    return f'<table class="meta">{cells}</table>'


def _customer_block(transaction: Transaction, style: DocumentStyle) -> str:
    parts = [f"<h3>{_text(style.customer_label)}</h3>", f'<div class="customer-name">{_text(transaction.customer_name)}</div>']
    if transaction.customer_address:
        parts.append(f"<div>{_multiline(transaction.customer_address)}</div>")
    if transaction.customer_phone:
        parts.append(f"<div>Phone: {_text(transaction.customer_phone)}</div>")
    if transaction.customer_email:
        parts.append(f"<div>Email: {_text(transaction.customer_email)}</div>")
    return '<div class="customer">' + "".join(parts) + "</div>"


def _items_table(lines: Sequence[TransactionLine]) -> str:
    header = (
        "<thead><tr><th>Code</th><th>Item</th><th class=\"num\">Qty</th>"
        "<th class=\"num\">Unit Price</th><th class=\"num\">Disc. %</th>"
        "<th class=\"num\">Line Total</th></tr></thead>"
    )
    body = "".join(
        "<tr>"
        f"<td>{_text(line.item_code)}</td>"
        f"<td>{_text(line.item_name)}</td>"
        f'<td class="num">{format_quantity(line.quantity)}</td>'
        f'<td class="num">{format_currency(line.unit_price)}</td>'
        f'<td class="num">{format_number(line.discount_percentage)}</td>'
        f'<td class="num">{format_currency(line.line_total)}</td>'
        "</tr>"
        for line in lines
    )
    return header + f"<tbody>{body}</tbody>"


def _totals(transaction: Transaction) -> str:
    # Labels use the rates stored with the amounts
    rows = [_row("Subtotal", format_currency(transaction.subtotal))]
    if transaction.ppn_enabled:
        rows.append(_row(f"PPN ({percent_label(transaction.ppn_rate)})", format_currency(transaction.ppn_amount)))
    if transaction.regional_tax_enabled:
        rows.append(
            _row(
                f"Regional Tax ({percent_label(transaction.regional_tax_rate)})",
                format_currency(transaction.regional_tax_amount),
            )
        )
    if transaction.pph22_enabled:
        rows.append(
            _row(f"PPh 22 ({percent_label(transaction.pph22_rate)})", format_currency(-transaction.pph22_amount))
        )
    if transaction.pph23_enabled:
        rows.append(
            _row(f"PPh 23 ({percent_label(transaction.pph23_rate)})", format_currency(-transaction.pph23_amount))
        )
    if transaction.stamp_duty_required:
        rows.append(_row("Stamp Duty (Materai)", format_currency(transaction.stamp_duty_amount)))
    rows.append(_row("TOTAL AMOUNT", format_currency(transaction.total_amount), css="total"))
    return "<tfoot>" + "".join(rows) + "</tfoot>"


def _signatures(style: DocumentStyle) -> str:
    if not style.signatures:
        return ""
    blocks = "".join(
        f'<div class="signature"><div>{_text(label)}</div><div class="line"></div></div>'
        for label in style.signatures
    )
    return f'<div class="signatures">{blocks}</div>'


def render_document_html(context: DocumentContext) -> str:
    """Render a complete HTML page for one document.

    Only enabled taxes appear in the totals; withholding taxes are shown as
    deductions. Optional customer fields, notes and the recipient line are
    omitted when empty.
    """
    style = document_style(context.document_type)
    transaction = context.transaction

    subtitle = f'<div class="subtitle">{_text(style.subtitle)}</div>' if style.subtitle else ""
    sections = [
        '<div class="header">',
        _store_block(context.store),
        '<div class="title">',
        f"<h1>{_text(style.title)}</h1>",
        subtitle,
        f'<div class="number">{_text(context.document_number)}</div>',
        _meta_block(context, style),
        "</div>",
        "</div>",
        _customer_block(transaction, style),
        '<table class="items">',
        _items_table(context.lines),
        _totals(transaction),
        "</table>",
    ]
    if transaction.notes:
        sections.append(f'<div class="notes transaction-notes"><strong>Notes:</strong><br>{_multiline(transaction.notes)}</div>')
    if context.custom_notes:
        sections.append(
            f'<div class="notes custom-notes"><strong>Additional Notes:</strong><br>{_multiline(context.custom_notes)}</div>'
        )
    if style.footer_note:
        sections.append(f'<div class="notes footer-note">{_text(style.footer_note)}</div>')
    sections.append(_signatures(style))

    return (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n'
        "<head>\n"
        '<meta charset="utf-8">\n'
        f"<title>{_text(style.title)} {_text(context.document_number)}</title>\n"
        f"<style>{_STYLE}</style>\n"
        "</head>\n"
        "<body>\n"
        + "\n".join(part for part in sections if part)
        + "\n</body>\n</html>\n"
    )
