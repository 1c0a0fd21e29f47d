"""Form state for one invoice session.

``FormState`` owns the in-progress ``InvoiceRecord``. Edits go through typed
setters, each of which updates one leaf and marks it touched. Validation is
recomputed from the record on demand, so there is no cached error state to
fall out of sync.
"""
import logging
from dataclasses import replace
from datetime import date
from typing import Any, Callable, Dict, Optional, Set

from invoice_builder import validation as v
from invoice_builder.errors import UnknownFieldError
from invoice_builder.models import (
    InvoiceRecord,
    LineItem,
    PersistedDefaults,
    Totals,
    default_record,
)
from invoice_builder.totals import compute_totals

logger = logging.getLogger(__name__)


class FormState:
    def __init__(self, defaults: Optional[PersistedDefaults] = None,
                 today: Callable[[], date] = date.today):
        self._today = today
        self.record: InvoiceRecord = default_record(today(), defaults)
        self.touched: Set[str] = set()

    # ---- Typed updates ----

    def set_issuer_field(self, name: str, value: str) -> None:
        self._set_attr(self.record.issuer, v.ISSUER_FIELDS, "issuer", name, value)

    def set_client_field(self, name: str, value: str) -> None:
        self._set_attr(self.record.client, v.CLIENT_FIELDS, "client", name, value)

    def set_metadata_field(self, name: str, value: str) -> None:
        self._set_attr(self.record.metadata, v.METADATA_FIELDS, "metadata", name, value)

    def set_line_item_field(self, index: int, name: str, value: Any) -> None:
        field_id = v.item_field_id(index, name)
        if name not in v.LINE_ITEM_FIELDS or not 0 <= index < len(self.record.line_items):
            raise UnknownFieldError(field_id)
        setattr(self.record.line_items[index], name, value)
        self.touched.add(field_id)

    def set_notes(self, value: str) -> None:
        self.record.notes = value
        self.touched.add(v.NOTES)

    def set_payment_instructions(self, value: str) -> None:
        self.record.payment_instructions = value
        self.touched.add(v.PAYMENT_INSTRUCTIONS)

    def set_tax_rate(self, value: Any) -> None:
        self.record.tax_rate = value
        self.touched.add(v.TAX_RATE)

    def set_discount(self, value: Any) -> None:
        self.record.discount = value
        self.touched.add(v.DISCOUNT)

    def set_field(self, field_id: str, value: Any) -> None:
        """Update a field addressed as ``client.email`` or ``line_items[2].quantity``."""
        item = v.parse_item_field_id(field_id)
        if item is not None:
            self.set_line_item_field(item[0], item[1], value)
            return
        section, _, name = field_id.partition(".")
        if section == "issuer" and name:
            self.set_issuer_field(name, value)
        elif section == "client" and name:
            self.set_client_field(name, value)
        elif section == "metadata" and name:
            self.set_metadata_field(name, value)
        elif field_id == v.NOTES:
            self.set_notes(value)
        elif field_id == v.PAYMENT_INSTRUCTIONS:
            self.set_payment_instructions(value)
        elif field_id == v.TAX_RATE:
            self.set_tax_rate(value)
        elif field_id == v.DISCOUNT:
            self.set_discount(value)
        else:
            raise UnknownFieldError(field_id)

    def touch(self, field_id: str) -> None:
        """Mark a field as visited (blur) without changing its value."""
        if field_id not in v.all_field_ids(self.record):
            raise UnknownFieldError(field_id)
        self.touched.add(field_id)

    def _set_attr(self, target, allowed, section, name, value):
        if name not in allowed:
            raise UnknownFieldError(f"{section}.{name}")
        setattr(target, name, value)
        self.touched.add(f"{section}.{name}")

    # ---- Line items ----

    def add_line_item(self) -> LineItem:
        item = LineItem(description="", quantity=1, unit_rate=0)
        self.record.line_items.append(item)
        self.touched.add(v.LINE_ITEMS)
        return item

    def remove_line_item(self, index: int) -> bool:
        items = self.record.line_items
        if not 0 <= index < len(items):
            logger.debug("Ignoring removal of line item %s; %d items present", index, len(items))
            return False
        del items[index]

        # Touched flags follow their rows: drop the removed row, shift later rows up.
        touched = set()
        for field_id in self.touched:
            parsed = v.parse_item_field_id(field_id)
            if parsed is None:
                touched.add(field_id)
            elif parsed[0] < index:
                touched.add(field_id)
            elif parsed[0] > index:
                touched.add(v.item_field_id(parsed[0] - 1, parsed[1]))
        touched.add(v.LINE_ITEMS)
        self.touched = touched
        return True

    # ---- Reset ----

    def reset(self) -> None:
        """Start a new invoice, keeping the company details and payment instructions."""
        issuer = self.record.issuer
        payment = self.record.payment_instructions
        self.record = default_record(self._today())
        self.record.issuer = replace(issuer)
        self.record.payment_instructions = payment
        self.touched = set()

    # ---- Derived state ----

    def totals(self) -> Totals:
        r = self.record
        return compute_totals(r.line_items, r.discount, r.tax_rate)

    def errors(self) -> Dict[str, str]:
        return v.validate_record(self.record)

    def is_valid(self) -> bool:
        return not self.errors()

    def field_status(self, field_id: str) -> v.FieldStatus:
        if field_id not in self.touched:
            return v.FieldStatus.UNTOUCHED
        if field_id in self.errors():
            return v.FieldStatus.INVALID
        return v.FieldStatus.VALID

    def field_statuses(self) -> Dict[str, v.FieldStatus]:
        errors = self.errors()
        statuses = {}
        for field_id in v.all_field_ids(self.record):
            if field_id not in self.touched:
                statuses[field_id] = v.FieldStatus.UNTOUCHED
            elif field_id in errors:
                statuses[field_id] = v.FieldStatus.INVALID
            else:
                statuses[field_id] = v.FieldStatus.VALID
        return statuses

    def visible_errors(self) -> Dict[str, str]:
        return {k: msg for k, msg in self.errors().items() if k in self.touched}
