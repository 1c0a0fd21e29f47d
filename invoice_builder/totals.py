"""Money math for the invoice: line amounts, totals, and display formatting."""
import math
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Any, Iterable

from invoice_builder.models import LineItem, Totals

DEC_QUANT = Decimal("0.01")


def to_number(x: Any) -> float:
    """Coerce a form value to a finite float; anything else counts as 0."""
    if isinstance(x, bool) or x is None:
        return 0.0
    try:
        n = float(str(x).strip()) if isinstance(x, str) else float(x)
    except (TypeError, ValueError):
        return 0.0
    return n if math.isfinite(n) else 0.0


def line_amount(item: LineItem) -> float:
    return to_number(item.quantity) * to_number(item.unit_rate)


def compute_totals(items: Iterable[LineItem], discount: Any, tax_rate: Any) -> Totals:
    # Discount comes off before tax; tax is charged on the discounted balance.
    subtotal = sum((line_amount(it) for it in items), 0.0)
    after_discount = max(0.0, subtotal - to_number(discount))
    tax = after_discount * to_number(tax_rate)
    total = after_discount + tax
    return Totals(subtotal=subtotal, after_discount=after_discount, tax=tax, total=total)


def money(n: Any) -> str:
    """Format as en-US dollars, e.g. ``$1,234.50``."""
    raw = Decimal(str(to_number(n)))
    with localcontext() as ctx:
        # Enough digits for every whole-dollar digit plus cents.
        ctx.prec = max(28, raw.adjusted() + 4)
        value = raw.quantize(DEC_QUANT, rounding=ROUND_HALF_UP)
        sign = "-" if value < 0 else ""
        return f"{sign}${abs(value):,.2f}"


def format_quantity(qty: Any) -> str:
    n = to_number(qty)
    if n.is_integer():
        return str(int(n))
    return f"{n:.4f}".rstrip("0").rstrip(".")
