"""Shared fixtures."""
from datetime import date

import pytest

from invoice_builder.defaults_store import DefaultsStore
from invoice_builder.form import FormState
from invoice_builder.models import LineItem

TODAY = date(2026, 3, 2)


@pytest.fixture
def today():
    return lambda: TODAY


@pytest.fixture
def form(today) -> FormState:
    return FormState(today=today)


@pytest.fixture
def filled_form(today) -> FormState:
    f = FormState(today=today)
    f.set_issuer_field("name", "Acme Freight LLC")
    f.set_issuer_field("address_line", "100 Main St")
    f.set_issuer_field("locality_line", "Austin, TX 78701")
    f.set_issuer_field("phone", "512-555-0100")
    f.set_issuer_field("email", "billing@acme.example")
    f.set_client_field("name", "Globex Corp")
    f.set_client_field("address_line", "1 Globex Way")
    f.set_client_field("locality_line", "Springfield, IL 62701")
    f.set_metadata_field("invoice_number", "INV-0042")
    f.set_metadata_field("terms", "Net 15")
    f.record.line_items = [
        LineItem("Linehaul Dallas to Austin", 1, 80),
        LineItem("Detention", 2, 10),
    ]
    f.set_notes("Thanks for your business")
    f.set_payment_instructions("ACH: routing 111000025, account 123456")
    return f


@pytest.fixture
def store(tmp_path) -> DefaultsStore:
    return DefaultsStore(tmp_path / "defaults.json")
