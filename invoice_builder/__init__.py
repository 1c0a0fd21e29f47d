"""Invoice Builder: form state, totals, and PDF export for a single invoice."""
from invoice_builder.errors import NoLineItemsError
from invoice_builder.form import FormState
from invoice_builder.generate import GeneratedInvoice, generate_invoice
from invoice_builder.totals import compute_totals, money

__all__ = [
    "FormState",
    "GeneratedInvoice",
    "NoLineItemsError",
    "compute_totals",
    "generate_invoice",
    "money",
]
