"""Render a ``Document`` description to PDF bytes with ReportLab."""
import html
import logging
from functools import partial
from io import BytesIO
from typing import List

from reportlab.lib import colors
from reportlab.lib.enums import TA_RIGHT
from reportlab.lib.pagesizes import A4, LETTER
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.pdfgen.canvas import Canvas
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from invoice_builder.document import (
    Document,
    Footer,
    HeaderSection,
    ItemTableSection,
    PageSetup,
    RecipientSection,
    Text,
    TextBlockSection,
    TotalsSection,
)
from invoice_builder.totals import money

logger = logging.getLogger(__name__)

PAGE_SIZES = {"LETTER": LETTER, "A4": A4}
RULE_COLOR = colors.HexColor("#cccccc")

# pdfmake's "lightHorizontalLines": heavier rule under the header row, hairlines between rows.
LIGHT_HORIZONTAL_LINES = [
    ("LINEBELOW", (0, 0), (-1, 0), 1, colors.black),
    ("LINEBELOW", (0, 1), (-1, -1), 0.5, RULE_COLOR),
    ("VALIGN", (0, 0), (-1, -1), "TOP"),
]


class FooterCanvas(Canvas):
    """Canvas that holds pages back until save() so each footer can say "Page X of Y"."""

    def __init__(self, *args, footer: Footer, page: PageSetup, **kwargs):
        Canvas.__init__(self, *args, **kwargs)
        self._saved_page_states = []
        self._footer = footer
        self._page = page

    def showPage(self):
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        page_count = len(self._saved_page_states)
        for state in self._saved_page_states:
            self.__dict__.update(state)
            self._draw_footer(page_count)
            Canvas.showPage(self)
        Canvas.save(self)

    def _draw_footer(self, page_count: int):
        width, _ = self._pagesize
        y = self._page.margin_bottom / 2
        self.saveState()
        self.setFont("Helvetica", self._footer.size)
        self.setFillColor(colors.HexColor(self._footer.color))
        self.drawString(self._page.margin_left, y, self._footer.attribution)
        self.drawRightString(width - self._page.margin_right, y,
                             self._footer.page_label(self._pageNumber, page_count))
        self.restoreState()


def _esc(s: str) -> str:
    return html.escape(s or "", quote=False).replace("\n", "<br/>")


class _Styles:
    def __init__(self, font_size: float):
        sample = getSampleStyleSheet()
        self.normal = ParagraphStyle("InvoiceNormal", parent=sample["Normal"],
                                     fontSize=font_size, leading=font_size * 1.3)
        self.right = ParagraphStyle("InvoiceRight", parent=self.normal, alignment=TA_RIGHT)
        self.title = ParagraphStyle("InvoiceTitle", parent=self.right, fontSize=22, leading=26,
                                    fontName="Helvetica-Bold")

    def text(self, t: Text) -> Paragraph:
        markup = f"<b>{_esc(t.text)}</b>" if t.bold else _esc(t.text)
        if t.size:
            style = ParagraphStyle(f"InvoiceText{t.size}", parent=self.normal,
                                   fontSize=t.size, leading=t.size * 1.25)
            return Paragraph(markup, style)
        return Paragraph(markup, self.normal)


def _header(section: HeaderSection, styles: _Styles, width: float) -> List:
    half = width / 2
    meta = Table(
        [[Paragraph(_esc(k), styles.normal), Paragraph(_esc(v), styles.normal)]
         for k, v in section.metadata_rows],
        colWidths=[(half - 12) / 2] * 2,
    )
    meta.setStyle(TableStyle([
        ("LINEBELOW", (0, 0), (-1, -1), 0.5, RULE_COLOR),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
    ]))
    left = [styles.text(t) for t in section.issuer_lines]
    right = [Paragraph(_esc(section.title), styles.title), Spacer(1, 10), meta]
    outer = Table([[left, right]], colWidths=[half, half])
    outer.setStyle(TableStyle([("VALIGN", (0, 0), (-1, -1), "TOP")]))
    return [outer, Spacer(1, 8)]


def _recipient(section: RecipientSection, styles: _Styles) -> List:
    out = [Paragraph(f"<b>{_esc(section.heading)}</b>", styles.normal), Spacer(1, 6)]
    out.extend(styles.text(t) for t in section.lines)
    out.append(Spacer(1, 10))
    return out


def _items(section: ItemTableSection, styles: _Styles, width: float) -> List:
    data = [[Paragraph(f"<b>{_esc(c)}</b>", styles.normal if i == 0 else styles.right)
             for i, c in enumerate(section.columns)]]
    for row in section.rows:
        desc, qty, rate, amount = row.cells()
        data.append([Paragraph(_esc(desc), styles.normal), qty, rate, amount])
    table = Table(data, repeatRows=1, colWidths=[width - 210, 40, 80, 90])
    table.setStyle(TableStyle(LIGHT_HORIZONTAL_LINES + [
        ("ALIGN", (1, 1), (-1, -1), "RIGHT"),
        ("FONTSIZE", (0, 0), (-1, -1), styles.normal.fontSize),
        ("TOPPADDING", (0, 1), (-1, -1), 4),
        ("BOTTOMPADDING", (0, 1), (-1, -1), 4),
    ]))
    return [table, Spacer(1, 10)]


def _totals(section: TotalsSection, styles: _Styles, width: float) -> List:
    rows = [[r.label, money(r.value)] for r in section.rows]
    inner = Table(rows, colWidths=[130, 90])
    style = [
        ("ALIGN", (1, 0), (1, -1), "RIGHT"),
        ("FONTSIZE", (0, 0), (-1, -1), styles.normal.fontSize),
        ("LINEBELOW", (0, 0), (-1, -2), 0.5, RULE_COLOR),
    ]
    for i, r in enumerate(section.rows):
        if r.bold:
            style.append(("FONTNAME", (0, i), (-1, i), "Helvetica-Bold"))
    inner.setStyle(TableStyle(style))
    if section.align != "right":
        return [inner, Spacer(1, 14)]
    wrap = Table([["", inner]], colWidths=[width - 220, 220])
    wrap.setStyle(TableStyle([
        ("LEFTPADDING", (0, 0), (-1, -1), 0),
        ("RIGHTPADDING", (0, 0), (-1, -1), 0),
    ]))
    return [wrap, Spacer(1, 14)]


def _text_block(section: TextBlockSection, styles: _Styles) -> List:
    return [
        Paragraph(f"<b>{_esc(section.heading)}</b>", styles.normal),
        Spacer(1, 4),
        Paragraph(_esc(section.body), styles.normal),
        Spacer(1, 10),
    ]


def build_story(document: Document, width: float) -> List:
    styles = _Styles(document.page.font_size)
    story = []
    for section in document.sections:
        if isinstance(section, HeaderSection):
            story.extend(_header(section, styles, width))
        elif isinstance(section, RecipientSection):
            story.extend(_recipient(section, styles))
        elif isinstance(section, ItemTableSection):
            story.extend(_items(section, styles, width))
        elif isinstance(section, TotalsSection):
            story.extend(_totals(section, styles, width))
        elif isinstance(section, TextBlockSection):
            story.extend(_text_block(section, styles))
        else:
            raise TypeError(f"Unsupported document section: {type(section).__name__}")
    return story


def render_pdf(document: Document) -> bytes:
    page = document.page
    pagesize = PAGE_SIZES[page.size]
    buf = BytesIO()
    doc = SimpleDocTemplate(
        buf,
        pagesize=pagesize,
        topMargin=page.margin_top,
        leftMargin=page.margin_left,
        rightMargin=page.margin_right,
        bottomMargin=page.margin_bottom,
        title=document.title,
        author="Invoice Builder",
        subject="Invoice",
        creator="Invoice Builder",
    )
    story = build_story(document, doc.width)
    doc.build(story, canvasmaker=partial(FooterCanvas, footer=document.footer, page=page))
    logger.debug("Rendered %s (%d sections)", document.filename, len(document.sections))
    return buf.getvalue()
