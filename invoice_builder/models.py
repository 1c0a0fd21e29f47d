"""Invoice data model: the in-progress record, its parts, and derived totals."""
from dataclasses import asdict, dataclass, field, replace
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

DEFAULT_INVOICE_NUMBER = "INV-0000"
DUE_IN_DAYS = 14
DATE_FORMAT = "%Y-%m-%d"


def as_text(value: Any) -> str:
    """Form text as stored on disk: ``None`` becomes empty, anything else its str()."""
    return "" if value is None else str(value)


@dataclass
class Issuer:
    name: str = ""
    address_line: str = ""
    locality_line: str = ""  # City, State ZIP
    phone: str = ""
    email: str = ""
    tax_id: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {k: as_text(v) for k, v in asdict(self).items()}


@dataclass
class Client:
    name: str = ""
    address_line: str = ""
    locality_line: str = ""
    email: str = ""


@dataclass
class Metadata:
    invoice_number: str = DEFAULT_INVOICE_NUMBER
    issue_date: str = ""  # YYYY-MM-DD
    due_date: str = ""
    terms: str = ""  # Net 15 / Net 30
    reference: str = ""  # Load ID / PO / Ref


@dataclass
class LineItem:
    description: str = ""
    quantity: Any = 1
    unit_rate: Any = 0


@dataclass
class InvoiceRecord:
    issuer: Issuer = field(default_factory=Issuer)
    client: Client = field(default_factory=Client)
    metadata: Metadata = field(default_factory=Metadata)
    line_items: List[LineItem] = field(default_factory=list)
    notes: str = ""
    payment_instructions: str = ""
    tax_rate: Any = 0.0  # 0.07 => 7%
    discount: Any = 0.0  # USD


@dataclass(frozen=True)
class Totals:
    subtotal: float
    after_discount: float
    tax: float
    total: float


@dataclass
class PersistedDefaults:
    issuer: Issuer = field(default_factory=Issuer)
    payment_instructions: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "issuer": self.issuer.to_dict(),
            "payment_instructions": as_text(self.payment_instructions),
        }


def fresh_metadata(today: date) -> Metadata:
    return Metadata(
        invoice_number=DEFAULT_INVOICE_NUMBER,
        issue_date=today.strftime(DATE_FORMAT),
        due_date=(today + timedelta(days=DUE_IN_DAYS)).strftime(DATE_FORMAT),
    )


def default_record(today: date, defaults: Optional[PersistedDefaults] = None) -> InvoiceRecord:
    """Build a blank record, seeding issuer and payment instructions from saved defaults."""
    record = InvoiceRecord(metadata=fresh_metadata(today))
    if defaults is not None:
        record.issuer = replace(defaults.issuer)
        record.payment_instructions = defaults.payment_instructions
    return record


def defaults_from_record(record: InvoiceRecord) -> PersistedDefaults:
    return PersistedDefaults(
        issuer=replace(record.issuer),
        payment_instructions=record.payment_instructions,
    )
