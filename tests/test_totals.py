"""Tests for the calculation engine and money formatting."""
import math

import pytest

from invoice_builder.models import LineItem
from invoice_builder.totals import compute_totals, format_quantity, line_amount, money, to_number


class TestComputeTotals:
    def test_discount_before_tax(self):
        items = [LineItem("A", 1, 60), LineItem("B", 2, 20)]
        t = compute_totals(items, discount=10, tax_rate=0.07)
        assert t.subtotal == pytest.approx(100.0)
        assert t.after_discount == pytest.approx(90.0)
        assert t.tax == pytest.approx(6.30)
        assert t.total == pytest.approx(96.30)

    def test_subtotal_is_sum_of_line_amounts(self):
        items = [LineItem("A", 3, 12.5), LineItem("B", 0.5, 40), LineItem("C", 0, 999)]
        t = compute_totals(items, 0, 0)
        assert t.subtotal == pytest.approx(sum(line_amount(i) for i in items))
        assert t.subtotal == pytest.approx(57.5)

    def test_bad_inputs_count_as_zero(self):
        items = [
            LineItem("nan", math.nan, 10),
            LineItem("inf", 1, math.inf),
            LineItem("text", "abc", 5),
            LineItem("none", None, 5),
            LineItem("string number", "2", "3.5"),
        ]
        t = compute_totals(items, discount="oops", tax_rate=None)
        assert t.subtotal == pytest.approx(7.0)
        assert t.total == pytest.approx(7.0)

    def test_after_discount_never_negative(self):
        t = compute_totals([LineItem("A", 1, 50)], discount=500, tax_rate=0.1)
        assert t.after_discount == 0
        assert t.tax == 0
        assert t.total == 0

    def test_empty_items(self):
        t = compute_totals([], 0, 0.07)
        assert (t.subtotal, t.after_discount, t.tax, t.total) == (0, 0, 0, 0)

    def test_recomputation_is_stable(self):
        items = [LineItem("A", 1.1, 3.3)]
        assert compute_totals(items, 1, 0.2) == compute_totals(items, 1, 0.2)


class TestFormatting:
    @pytest.mark.parametrize("value, expected", [
        (0, "$0.00"),
        (1234.5, "$1,234.50"),
        (96.3, "$96.30"),
        (0.005, "$0.01"),
        (-5, "-$5.00"),
        (math.nan, "$0.00"),
    ])
    def test_money(self, value, expected):
        assert money(value) == expected

    def test_money_beyond_default_decimal_precision(self):
        assert money(1e27) == "$1" + ",000" * 9 + ".00"
        assert money(-1e30) == "-$1" + ",000" * 10 + ".00"
        assert money(1e26 * 0.07).endswith(".00")

    def test_totals_with_huge_discount_format(self):
        t = compute_totals([LineItem("A", 1, 1e26)], discount=1e27, tax_rate=3)
        assert money(t.total) == "$0.00"
        assert money(t.subtotal) == "$100" + ",000" * 8 + ".00"

    def test_format_quantity(self):
        assert format_quantity(2.0) == "2"
        assert format_quantity(1.25) == "1.25"
        assert format_quantity("x") == "0"

    def test_to_number(self):
        assert to_number(" 4.5 ") == 4.5
        assert to_number(True) == 0.0
        assert to_number(-math.inf) == 0.0
