"""The "Generate PDF" action."""
import logging
from dataclasses import dataclass
from typing import Callable

from invoice_builder.defaults_store import DefaultsStore
from invoice_builder.document import Document, assemble_document
from invoice_builder.errors import DefaultsStoreError, NoLineItemsError
from invoice_builder.form import FormState
from invoice_builder.models import defaults_from_record
from invoice_builder.pdf import render_pdf

logger = logging.getLogger(__name__)


@dataclass
class GeneratedInvoice:
    filename: str
    document: Document
    content: bytes
    mime: str = "application/pdf"


def persist_defaults(store: DefaultsStore, form: FormState) -> bool:
    """Remember company details and payment instructions; failures are logged, not raised."""
    try:
        store.save(defaults_from_record(form.record))
    except DefaultsStoreError:
        logger.exception("Error saving invoice defaults")
        return False
    return True


def generate_invoice(form: FormState, store: DefaultsStore,
                     render: Callable[[Document], bytes] = render_pdf) -> GeneratedInvoice:
    record = form.record
    if not record.line_items:
        raise NoLineItemsError()

    persist_defaults(store, form)

    document = assemble_document(record, form.totals())
    content = render(document)
    logger.info("Generated %s with %d line items", document.filename, len(record.line_items))
    return GeneratedInvoice(filename=document.filename, document=document, content=content)
