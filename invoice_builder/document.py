"""Declarative description of the invoice document.

``assemble_document`` turns a record and its totals into a ``Document``: page
setup plus an ordered list of typed sections. Nothing here draws anything;
``invoice_builder.pdf`` renders the description.
"""
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from invoice_builder.models import InvoiceRecord, Totals
from invoice_builder.totals import format_quantity, money, to_number

ATTRIBUTION = "Generated by Invoice Builder"
PLACEHOLDER = "-"
FILE_EXTENSION = ".pdf"
ITEM_COLUMNS = ("Description", "Qty", "Rate", "Amount")


@dataclass(frozen=True)
class PageSetup:
    size: str = "LETTER"
    margin_top: float = 40
    margin_left: float = 40
    margin_right: float = 40
    margin_bottom: float = 60
    font_size: float = 10


@dataclass
class Text:
    text: str
    bold: bool = False
    size: Optional[float] = None


@dataclass
class HeaderSection:
    issuer_lines: List[Text]
    title: str
    metadata_rows: List[Tuple[str, str]]


@dataclass
class RecipientSection:
    heading: str
    lines: List[Text]


@dataclass
class ItemRow:
    description: str
    quantity: float
    rate: float
    amount: float

    def cells(self) -> List[str]:
        return [self.description, format_quantity(self.quantity), money(self.rate), money(self.amount)]


@dataclass
class ItemTableSection:
    columns: Tuple[str, ...]
    rows: List[ItemRow]


@dataclass
class TotalsRow:
    label: str
    value: float
    bold: bool = False


@dataclass
class TotalsSection:
    rows: List[TotalsRow]
    align: str = "right"


@dataclass
class TextBlockSection:
    heading: str
    body: str


@dataclass
class Footer:
    attribution: str = ATTRIBUTION
    size: float = 9
    color: str = "#666666"

    def page_label(self, page: int, page_count: int) -> str:
        return f"Page {page} of {page_count}"


Section = Union[HeaderSection, RecipientSection, ItemTableSection, TotalsSection, TextBlockSection]


@dataclass
class Document:
    title: str
    filename: str
    page: PageSetup = field(default_factory=PageSetup)
    sections: List[Section] = field(default_factory=list)
    footer: Footer = field(default_factory=Footer)

    def section(self, kind):
        for s in self.sections:
            if isinstance(s, kind):
                return s
        return None


class DocumentBuilder:
    def __init__(self, title: str, filename: str, page: Optional[PageSetup] = None):
        self._doc = Document(title=title, filename=filename, page=page or PageSetup())

    def add(self, section: Section) -> "DocumentBuilder":
        self._doc.sections.append(section)
        return self

    def footer(self, footer: Footer) -> "DocumentBuilder":
        self._doc.footer = footer
        return self

    def build(self) -> Document:
        return self._doc


def _or_dash(s: str) -> str:
    return s if (s or "").strip() else PLACEHOLDER


def suggested_filename(record: InvoiceRecord) -> str:
    return f"{record.metadata.invoice_number}{FILE_EXTENSION}"


def header_section(record: InvoiceRecord) -> HeaderSection:
    iss = record.issuer
    meta = record.metadata
    lines = [
        Text(iss.name, bold=True, size=16),
        Text(iss.address_line),
        Text(iss.locality_line),
        Text(f"{iss.phone} • {iss.email}"),
    ]
    if (iss.tax_id or "").strip():
        lines.append(Text(f"EIN: {iss.tax_id}"))
    rows = [
        ("Invoice #", meta.invoice_number),
        ("Issue Date", meta.issue_date),
        ("Due Date", meta.due_date),
        ("Terms", meta.terms),
        ("Reference", _or_dash(meta.reference)),
    ]
    return HeaderSection(issuer_lines=lines, title="INVOICE", metadata_rows=rows)


def recipient_section(record: InvoiceRecord) -> RecipientSection:
    cli = record.client
    return RecipientSection(
        heading="Bill To",
        lines=[
            Text(cli.name, bold=True),
            Text(cli.address_line),
            Text(cli.locality_line),
            Text(_or_dash(cli.email)),
        ],
    )


def item_table_section(record: InvoiceRecord) -> ItemTableSection:
    rows = []
    for it in record.line_items:
        qty = to_number(it.quantity)
        rate = to_number(it.unit_rate)
        rows.append(ItemRow(
            description=_or_dash(it.description),
            quantity=qty,
            rate=rate,
            amount=qty * rate,
        ))
    return ItemTableSection(columns=ITEM_COLUMNS, rows=rows)


def totals_section(record: InvoiceRecord, totals: Totals) -> TotalsSection:
    return TotalsSection(rows=[
        TotalsRow("Subtotal", totals.subtotal),
        TotalsRow("Discount", to_number(record.discount)),
        TotalsRow("Tax", totals.tax),
        TotalsRow("Total", totals.total, bold=True),
    ])


def assemble_document(record: InvoiceRecord, totals: Totals) -> Document:
    builder = DocumentBuilder(
        title=record.metadata.invoice_number or "Invoice",
        filename=suggested_filename(record),
    )
    builder.add(header_section(record))
    builder.add(recipient_section(record))
    builder.add(item_table_section(record))
    builder.add(totals_section(record, totals))
    builder.add(TextBlockSection("Notes", _or_dash(record.notes)))
    builder.add(TextBlockSection("Payment / Remit To", _or_dash(record.payment_instructions)))
    return builder.footer(Footer()).build()
