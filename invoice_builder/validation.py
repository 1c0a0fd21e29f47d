"""Field rules for the invoice form.

Every editable leaf has a field id such as ``client.email`` or
``line_items[2].quantity``. Rules run against the whole record and return a
``{field_id: message}`` map; whether an error is *shown* is decided by the form
(only touched fields surface errors).
"""
import enum
import math
import re
from typing import Any, Callable, Dict, List, Optional, Tuple

from invoice_builder.models import InvoiceRecord

# local@domain.tld
EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

LINE_ITEMS = "line_items"
TAX_RATE = "tax_rate"
DISCOUNT = "discount"
NOTES = "notes"
PAYMENT_INSTRUCTIONS = "payment_instructions"

ISSUER_FIELDS = ("name", "address_line", "locality_line", "phone", "email", "tax_id")
CLIENT_FIELDS = ("name", "address_line", "locality_line", "email")
METADATA_FIELDS = ("invoice_number", "issue_date", "due_date", "terms", "reference")
LINE_ITEM_FIELDS = ("description", "quantity", "unit_rate")

_ITEM_ID_RE = re.compile(r"^line_items\[(\d+)\]\.(\w+)$")


class FieldStatus(enum.Enum):
    UNTOUCHED = "untouched"
    VALID = "touched-valid"
    INVALID = "touched-invalid"


def item_field_id(index: int, name: str) -> str:
    return f"{LINE_ITEMS}[{index}].{name}"


def parse_item_field_id(field_id: str) -> Optional[Tuple[int, str]]:
    m = _ITEM_ID_RE.match(field_id)
    if not m:
        return None
    return int(m.group(1)), m.group(2)


# ---- Rules ----

def _blank(value: Any) -> bool:
    return value is None or not str(value).strip()


def required(message: str) -> Callable[[Any], Optional[str]]:
    def rule(value):
        return message if _blank(value) else None
    return rule


def email(message: str = "Invalid email", *, optional: bool = False,
          required_message: str = "Email is required") -> Callable[[Any], Optional[str]]:
    def rule(value):
        if _blank(value):
            return None if optional else required_message
        return None if EMAIL_RE.match(str(value).strip()) else message
    return rule


def _as_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        if not value.strip():
            return None
        value = value.strip()
    try:
        n = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(n) else n


def minimum(message: str, *, required_message: Optional[str] = None,
            floor: float = 0.0) -> Callable[[Any], Optional[str]]:
    """Numeric lower bound; a missing value fails only when ``required_message`` is set."""
    def rule(value):
        n = _as_number(value)
        if n is None:
            if required_message:
                return required_message
            return None if _blank(value) else message
        return message if n < floor else None
    return rule


ISSUER_RULES = {
    "name": required("Company name is required"),
    "address_line": required("Address is required"),
    "locality_line": required("City, State ZIP is required"),
    "phone": required("Phone is required"),
    "email": email(),
}

CLIENT_RULES = {
    "name": required("Client name is required"),
    "address_line": required("Address is required"),
    "locality_line": required("City, State ZIP is required"),
    "email": email(optional=True),
}

METADATA_RULES = {
    "invoice_number": required("Invoice number is required"),
    "issue_date": required("Issue date is required"),
    "due_date": required("Due date is required"),
    "terms": required("Terms are required"),
}

LINE_ITEM_RULES = {
    "description": required("Description is required"),
    "quantity": minimum("Quantity must be positive", required_message="Quantity is required"),
    "unit_rate": minimum("Rate must be positive", required_message="Rate is required"),
}

TAX_RATE_RULE = minimum("Tax rate must be positive")
DISCOUNT_RULE = minimum("Discount must be positive")
NO_ITEMS_MESSAGE = "At least one item is required"


def validate_record(record: InvoiceRecord) -> Dict[str, str]:
    errors: Dict[str, str] = {}

    def check(field_id, rule, value):
        msg = rule(value)
        if msg:
            errors[field_id] = msg

    for name, rule in ISSUER_RULES.items():
        check(f"issuer.{name}", rule, getattr(record.issuer, name))
    for name, rule in CLIENT_RULES.items():
        check(f"client.{name}", rule, getattr(record.client, name))
    for name, rule in METADATA_RULES.items():
        check(f"metadata.{name}", rule, getattr(record.metadata, name))

    if not record.line_items:
        errors[LINE_ITEMS] = NO_ITEMS_MESSAGE
    for i, item in enumerate(record.line_items):
        for name, rule in LINE_ITEM_RULES.items():
            check(item_field_id(i, name), rule, getattr(item, name))

    check(TAX_RATE, TAX_RATE_RULE, record.tax_rate)
    check(DISCOUNT, DISCOUNT_RULE, record.discount)
    return errors


def all_field_ids(record: InvoiceRecord) -> List[str]:
    ids = [f"issuer.{n}" for n in ISSUER_FIELDS]
    ids += [f"client.{n}" for n in CLIENT_FIELDS]
    ids += [f"metadata.{n}" for n in METADATA_FIELDS]
    ids.append(LINE_ITEMS)
    for i in range(len(record.line_items)):
        ids += [item_field_id(i, n) for n in LINE_ITEM_FIELDS]
    ids += [NOTES, PAYMENT_INSTRUCTIONS, TAX_RATE, DISCOUNT]
    return ids
