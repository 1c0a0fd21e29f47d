"""
Exceptions and user-facing messages.

User-visible errors must be clear and actionable.
"""


class AppErrors:
    """Centralized actionable error messages."""

    NO_LINE_ITEMS = (
        "Please add at least one line item before generating the PDF."
    )


class InvoiceBuilderError(Exception):
    """Base class for errors raised by invoice_builder."""


class NoLineItemsError(InvoiceBuilderError):
    def __init__(self, message: str = AppErrors.NO_LINE_ITEMS):
        super().__init__(message)


class DefaultsStoreError(InvoiceBuilderError):
    """The defaults file could not be written."""


class UnknownFieldError(InvoiceBuilderError, KeyError):
    def __init__(self, field_id: str):
        super().__init__(field_id)
        self.field_id = field_id

    def __str__(self):
        return f"Unknown form field: {self.field_id}"
