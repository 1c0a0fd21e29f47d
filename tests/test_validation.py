"""Tests for field rules."""
import math

import pytest

from invoice_builder.models import InvoiceRecord, LineItem
from invoice_builder.validation import (
    all_field_ids,
    email,
    minimum,
    parse_item_field_id,
    required,
    validate_record,
)


class TestRules:
    def test_required(self):
        rule = required("X is required")
        assert rule("") == "X is required"
        assert rule("   ") == "X is required"
        assert rule(None) == "X is required"
        assert rule("ok") is None

    @pytest.mark.parametrize("value", ["a@b.co", "first.last+tag@sub.example.com"])
    def test_email_ok(self, value):
        assert email()(value) is None

    @pytest.mark.parametrize("value", ["not-an-email", "a@b", "a b@c.com", "@c.com"])
    def test_email_bad(self, value):
        assert email()(value) == "Invalid email"

    def test_email_required_vs_optional(self):
        assert email()("") == "Email is required"
        assert email(optional=True)("") is None
        assert email(optional=True)("nope") == "Invalid email"

    def test_minimum(self):
        rule = minimum("Must be positive", required_message="Required")
        assert rule(0) is None
        assert rule("2.5") is None
        assert rule(-0.01) == "Must be positive"
        assert rule(None) == "Required"
        assert rule(math.nan) == "Required"
        assert rule("abc") == "Required"

    def test_minimum_optional(self):
        rule = minimum("Must be positive")
        assert rule(None) is None
        assert rule("") is None
        assert rule("abc") == "Must be positive"
        assert rule(-1) == "Must be positive"


class TestValidateRecord:
    def test_blank_record_errors(self):
        errors = validate_record(InvoiceRecord())
        assert errors["issuer.name"] == "Company name is required"
        assert errors["issuer.email"] == "Email is required"
        assert errors["client.locality_line"] == "City, State ZIP is required"
        assert errors["metadata.terms"] == "Terms are required"
        assert errors["line_items"] == "At least one item is required"
        for optional in ("issuer.tax_id", "client.email", "metadata.reference",
                         "notes", "payment_instructions", "tax_rate", "discount"):
            assert optional not in errors

    def test_line_item_rules(self):
        r = InvoiceRecord(line_items=[LineItem("", None, -3)])
        errors = validate_record(r)
        assert errors["line_items[0].description"] == "Description is required"
        assert errors["line_items[0].quantity"] == "Quantity is required"
        assert errors["line_items[0].unit_rate"] == "Rate must be positive"
        assert "line_items" not in errors

    def test_tax_and_discount_have_no_upper_bound(self):
        errors = validate_record(InvoiceRecord(tax_rate=5, discount=1e9))
        assert "tax_rate" not in errors
        assert "discount" not in errors

    def test_negative_tax_and_discount(self):
        errors = validate_record(InvoiceRecord(tax_rate=-0.1, discount=-1))
        assert errors["tax_rate"] == "Tax rate must be positive"
        assert errors["discount"] == "Discount must be positive"


class TestFieldIds:
    def test_parse_item_field_id(self):
        assert parse_item_field_id("line_items[12].unit_rate") == (12, "unit_rate")
        assert parse_item_field_id("client.email") is None

    def test_all_field_ids_include_rows(self):
        ids = all_field_ids(InvoiceRecord(line_items=[LineItem(), LineItem()]))
        assert "line_items[1].description" in ids
        assert "line_items[2].description" not in ids
        assert "issuer.tax_id" in ids
