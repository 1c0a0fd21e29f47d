"""Tests for the persisted defaults store."""
import json
from dataclasses import replace

import pytest

from invoice_builder.defaults_store import STORAGE_KEY, DefaultsStore
from invoice_builder.errors import DefaultsStoreError
from invoice_builder.form import FormState
from invoice_builder.generate import generate_invoice
from invoice_builder.models import Issuer, PersistedDefaults, defaults_from_record


class TestSerialization:
    def test_issuer_to_dict_writes_text(self):
        issuer = Issuer(name="Acme", phone=5125550100, tax_id=None)
        assert issuer.to_dict() == {
            "name": "Acme",
            "address_line": "",
            "locality_line": "",
            "phone": "5125550100",
            "email": "",
            "tax_id": "",
        }

    def test_defaults_to_dict(self):
        d = PersistedDefaults(Issuer(name="Acme"), None).to_dict()
        assert d["issuer"]["name"] == "Acme"
        assert d["payment_instructions"] == ""


class TestLoad:
    def test_missing_file(self, store):
        assert store.load() is None

    def test_missing_key(self, store):
        store.path.write_text(json.dumps({"other": 1}), encoding="utf-8")
        assert store.load() is None

    @pytest.mark.parametrize("content", [
        "{not json",
        "[1, 2]",
        json.dumps({STORAGE_KEY: "a string"}),
        json.dumps({STORAGE_KEY: {"issuer": [], "payment_instructions": ""}}),
        json.dumps({STORAGE_KEY: {"issuer": {"name": 5}, "payment_instructions": ""}}),
        json.dumps({STORAGE_KEY: {"issuer": {}, "payment_instructions": 3}}),
    ])
    def test_malformed_is_absent(self, store, content):
        store.path.write_text(content, encoding="utf-8")
        assert store.load() is None

    def test_partial_issuer(self, store):
        store.path.write_text(json.dumps({
            STORAGE_KEY: {"issuer": {"name": "Acme", "extra": "ignored"}},
        }), encoding="utf-8")
        loaded = store.load()
        assert loaded == PersistedDefaults(Issuer(name="Acme"), "")


class TestSave:
    def test_round_trip_into_new_session(self, store, filled_form, today):
        filled_form.set_issuer_field("tax_id", "12-3456789")
        store.save(defaults_from_record(filled_form.record))

        fresh = FormState(defaults=store.load(), today=today)
        assert fresh.record.issuer == filled_form.record.issuer
        assert fresh.record.payment_instructions == filled_form.record.payment_instructions
        assert fresh.record.client.name == ""
        assert fresh.record.line_items == []
        assert fresh.record.metadata.invoice_number == "INV-0000"
        assert fresh.record.metadata.due_date == "2026-03-16"

    def test_round_trip_with_cleared_field(self, store, filled_form, today):
        filled_form.set_field("issuer.tax_id", None)
        generate_invoice(filled_form, store, render=lambda doc: b"pdf")

        loaded = store.load()
        assert loaded is not None
        assert loaded.issuer == replace(filled_form.record.issuer, tax_id="")
        assert loaded.payment_instructions == filled_form.record.payment_instructions

        data = json.loads(store.path.read_text(encoding="utf-8"))
        assert data[STORAGE_KEY]["issuer"]["tax_id"] == ""

    def test_null_values_read_as_empty(self, store):
        store.path.write_text(json.dumps({
            STORAGE_KEY: {"issuer": {"name": "Acme", "tax_id": None}, "payment_instructions": None},
        }), encoding="utf-8")
        assert store.load() == PersistedDefaults(Issuer(name="Acme"), "")

    def test_overwrites_previous_value(self, store):
        store.save(PersistedDefaults(Issuer(name="Old"), "old"))
        store.save(PersistedDefaults(Issuer(name="New"), "new"))
        assert store.load() == PersistedDefaults(Issuer(name="New"), "new")

    def test_keeps_other_keys(self, store):
        store.path.write_text(json.dumps({"theme": "dark"}), encoding="utf-8")
        store.save(PersistedDefaults(Issuer(name="Acme"), ""))
        data = json.loads(store.path.read_text(encoding="utf-8"))
        assert data["theme"] == "dark"
        assert data[STORAGE_KEY]["issuer"]["name"] == "Acme"

    def test_replaces_corrupt_file(self, store):
        store.path.write_text("{{{", encoding="utf-8")
        store.save(PersistedDefaults(Issuer(name="Acme"), "x"))
        assert store.load().payment_instructions == "x"

    def test_creates_parent_dirs(self, tmp_path):
        store = DefaultsStore(tmp_path / "a" / "b" / "defaults.json")
        store.save(PersistedDefaults())
        assert store.path.exists()

    def test_write_failure_raises_store_error(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        store = DefaultsStore(blocker / "defaults.json")
        with pytest.raises(DefaultsStoreError):
            store.save(PersistedDefaults())
