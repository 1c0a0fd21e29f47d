# invoicer.py — Streamlit front end
# Invoice form with live totals, PDF export, and remembered company/payment defaults

from datetime import date, datetime
from pathlib import Path
from typing import Any, Callable, Optional

import streamlit as st

from invoice_builder import FormState, NoLineItemsError, generate_invoice, money
from invoice_builder.config import Settings, load_settings
from invoice_builder.defaults_store import DefaultsStore
from invoice_builder.logging_config import configure_logging
from invoice_builder.models import DATE_FORMAT
from invoice_builder.totals import to_number

WIDGET_PREFIX = "fld:"

# ---- Setup (once per process) ----

@st.cache_resource
def get_settings() -> Settings:
    settings = load_settings()
    configure_logging(settings.log_level)
    return settings

# ---- Persistence ----

@st.cache_resource
def get_store(path: str) -> DefaultsStore:
    return DefaultsStore(Path(path))

def ensure_session(store: DefaultsStore):
    if "form" not in st.session_state:
        st.session_state.form = FormState(defaults=store.load())
    if "generated" not in st.session_state:
        st.session_state.generated = None

# ---- Widget <-> form wiring ----

def _key(field_id: str) -> str:
    return WIDGET_PREFIX + field_id

def _seed(field_id: str, value: Any) -> str:
    key = _key(field_id)
    if key not in st.session_state:
        st.session_state[key] = value
    return key

def _clear_widgets():
    for k in list(st.session_state.keys()):
        if isinstance(k, str) and k.startswith(WIDGET_PREFIX):
            del st.session_state[k]

def _commit(field_id: str, convert: Optional[Callable[[Any], Any]] = None):
    value = st.session_state[_key(field_id)]
    if convert is not None:
        value = convert(value)
    st.session_state.form.set_field(field_id, value)
    st.session_state.generated = None

def _show_error(field_id: str):
    msg = st.session_state.form.visible_errors().get(field_id)
    if msg:
        st.caption(f":red[{msg}]")

def text_field(label: str, field_id: str, value: str, area: bool = False):
    key = _seed(field_id, value)
    widget = st.text_area if area else st.text_input
    widget(label, key=key, on_change=_commit, args=(field_id,))
    _show_error(field_id)

def date_field(label: str, field_id: str, value: str):
    try:
        seeded = datetime.strptime(value, DATE_FORMAT).date() if value else None
    except ValueError:
        seeded = None
    key = _seed(field_id, seeded)
    st.date_input(label, key=key, format="YYYY-MM-DD", on_change=_commit,
                  args=(field_id, lambda d: d.strftime(DATE_FORMAT) if isinstance(d, date) else ""))
    _show_error(field_id)

def number_field(label: str, field_id: str, value: Any, scale: float = 1.0, step: float = 1.0):
    key = _seed(field_id, to_number(value) * scale)
    st.number_input(label, key=key, min_value=0.0, step=step, on_change=_commit,
                    args=(field_id, lambda n: (n or 0.0) / scale))
    _show_error(field_id)

# ---- Actions ----

def _add_item():
    st.session_state.form.add_line_item()
    st.session_state.generated = None

def _remove_item(index: int):
    st.session_state.form.remove_line_item(index)
    # Row widgets are keyed by position; re-seed them from the form.
    _clear_widgets()
    st.session_state.generated = None

def _clear_form():
    st.session_state.form.reset()
    _clear_widgets()
    st.session_state.generated = None

# ---- Sections ----

def company_section(form: FormState):
    iss = form.record.issuer
    st.subheader("Company")
    text_field("Company Name", "issuer.name", iss.name)
    text_field("Address line 1", "issuer.address_line", iss.address_line)
    text_field("City, State ZIP", "issuer.locality_line", iss.locality_line)
    c1, c2 = st.columns(2)
    with c1:
        text_field("Phone", "issuer.phone", iss.phone)
    with c2:
        text_field("Email", "issuer.email", iss.email)
    text_field("EIN (optional)", "issuer.tax_id", iss.tax_id)

def client_section(form: FormState):
    cli = form.record.client
    st.subheader("Bill To")
    text_field("Client Name", "client.name", cli.name)
    text_field("Address line 1", "client.address_line", cli.address_line)
    text_field("City, State ZIP", "client.locality_line", cli.locality_line)
    text_field("Email (optional)", "client.email", cli.email)

def details_section(form: FormState):
    meta = form.record.metadata
    st.subheader("Invoice Details")
    c1, c2 = st.columns(2)
    with c1:
        text_field("Invoice #", "metadata.invoice_number", meta.invoice_number)
        date_field("Issue Date", "metadata.issue_date", meta.issue_date)
        text_field("Terms", "metadata.terms", meta.terms)
    with c2:
        text_field("Reference (Load ID / PO)", "metadata.reference", meta.reference)
        date_field("Due Date", "metadata.due_date", meta.due_date)

def items_section(form: FormState):
    st.subheader("Line Items")
    for i, it in enumerate(form.record.line_items):
        cA, cB, cC, cD, cE = st.columns([4, 1, 2, 2, 1])
        with cA:
            text_field("Description", f"line_items[{i}].description", it.description)
        with cB:
            number_field("Qty", f"line_items[{i}].quantity", it.quantity)
        with cC:
            number_field("Rate", f"line_items[{i}].unit_rate", it.unit_rate, step=0.01)
        cD.write("Amount")
        cD.write(money(to_number(it.quantity) * to_number(it.unit_rate)))
        cE.button("Remove", key=f"rm_{i}", on_click=_remove_item, args=(i,))
    _show_error("line_items")
    st.button("Add line item", key="add_item", on_click=_add_item)

def totals_section(form: FormState):
    st.subheader("Totals")
    c1, c2 = st.columns(2)
    with c1:
        number_field("Tax Rate (%)", "tax_rate", form.record.tax_rate, scale=100.0, step=0.5)
    with c2:
        number_field("Discount ($)", "discount", form.record.discount, step=1.0)
    t = form.totals()
    st.write(f"Subtotal: {money(t.subtotal)}")
    st.write(f"Discount: {money(form.record.discount)}")
    st.write(f"Tax: {money(t.tax)}")
    st.write(f"**Total: {money(t.total)}**")

def notes_section(form: FormState):
    st.subheader("Notes & Payment")
    text_field("Notes", "notes", form.record.notes, area=True)
    text_field("Payment / Remit To", "payment_instructions", form.record.payment_instructions, area=True)

# ---- Main ----

def main():
    st.set_page_config(page_title="Invoice Builder", layout="centered")
    settings = get_settings()
    store = get_store(str(settings.defaults_path))
    ensure_session(store)
    form = st.session_state.form

    st.title("Invoice Builder")
    st.caption("No DB • Fill fields • Generate PDF")

    c_clear, c_gen = st.columns(2)
    c_clear.button("Clear Form", key="clear_form", on_click=_clear_form)
    if c_gen.button("Generate PDF", key="generate"):
        try:
            st.session_state.generated = generate_invoice(form, store)
        except NoLineItemsError as e:
            st.session_state.generated = None
            st.warning(str(e))

    generated = st.session_state.generated
    if generated is not None:
        st.download_button("Download PDF", data=generated.content,
                           file_name=generated.filename, mime=generated.mime)

    company_section(form)
    client_section(form)
    details_section(form)
    items_section(form)
    totals_section(form)
    notes_section(form)

if __name__ == "__main__":
    main()
