from decimal import Decimal

import pytest

from expense_categorizer.models.transaction import CategoryBuckets, ClassifiedEntry, Placement
from expense_categorizer.reports.builder import ReportBuilder, recompute_totals
from expense_categorizer.utils.exceptions import ConfigurationError


def bucket(*items):
    buckets = CategoryBuckets()
    for main, sub, description, amount in items:
        buckets.add(Placement(main, sub, ClassifiedEntry(description, Decimal(amount))))
    return buckets


def test_layout_is_lock_step_with_blank_padding(simple_categories):
    buckets = bucket(
        ("Expenses", "Groceries", "Walmart ", "-10.00"),
        ("Expenses", "Groceries", "Costco ", "-20.00"),
        ("Expenses", "Coffee", "Coffee ", "-3.5"),
    )

    table = ReportBuilder().build(buckets, simple_categories)

    assert table == [
        ["Expenses", "Groceries", "", "Coffee", "", "Cafes", "", "Gifts", ""],
        ["", "Description", "Amount", "Description", "Amount", "Description", "Amount", "Description", "Amount"],
        ["", "Walmart ", "$ -10.00", "Coffee ", "$ -3.50", "", "", "", ""],
        ["", "Costco ", "$ -20.00", "", "", "", "", "", ""],
        ["Total", "", "$ -30.00", "", "$ -3.50", "", "$ -", "", "$ -"],
    ]


def test_empty_buckets_give_headers_and_totals_only(simple_categories):
    table = ReportBuilder().build(CategoryBuckets(), simple_categories)

    assert len(table) == 3
    assert table[-1] == ["Total", "", "$ -", "", "$ -", "", "$ -", "", "$ -"]


def test_totals_that_cancel_out_render_as_dash(simple_categories):
    buckets = bucket(
        ("Expenses", "Groceries", "Purchase ", "-12.34"),
        ("Expenses", "Groceries", "Refund ", "12.34"),
    )

    table = ReportBuilder().build(buckets, simple_categories)

    assert table[-1][2] == "$ -"


def test_totals_are_exact_sums(simple_categories):
    buckets = bucket(
        ("Expenses", "Coffee", "a", "0.10"),
        ("Expenses", "Coffee", "b", "0.20"),
    )

    table = ReportBuilder().build(buckets, simple_categories)

    assert table[-1][4] == "$ 0.30"


def test_only_report_category_columns_are_rendered(simple_categories):
    buckets = bucket(("Income", "Salary", "Payroll ", "1000.00"))

    table = ReportBuilder().build(buckets, simple_categories)

    assert "Salary" not in table[0]
    assert len(table) == 3


def test_rows_all_have_the_same_width(default_categories):
    buckets = bucket(
        ("Expenses", "Pets", "Vet ", "-80.00"),
        ("Expenses", "Trips", "Hotel ", "-200.00"),
        ("Expenses", "Trips", "Flight ", "-300.00"),
    )

    table = ReportBuilder().build(buckets, default_categories)

    widths = {len(row) for row in table}
    assert widths == {1 + 2 * len(default_categories["Expenses"])}


def test_missing_report_category_is_a_configuration_error():
    with pytest.raises(ConfigurationError):
        ReportBuilder().build(CategoryBuckets(), {"Income": {"Salary": ["payroll"]}})


def test_custom_report_category(simple_categories):
    table = ReportBuilder("Income").build(
        bucket(("Income", "Salary", "Payroll ", "1000")), simple_categories
    )

    assert table[0] == ["Income", "Salary", ""]
    assert table[2] == ["", "Payroll ", "$ 1000.00"]
    assert table[-1] == ["Total", "", "$ 1000.00"]


def test_recompute_totals_reads_current_body(simple_categories):
    table = ReportBuilder().build(
        bucket(("Expenses", "Groceries", "Walmart ", "-54.30")), simple_categories
    )
    table[2][2] = "$ 27.15"
    table.insert(len(table) - 1, ["", "", "", "Latte", "$ 4.00", "", "", "", ""])

    assert recompute_totals(table) is table
    assert table[-1] == ["Total", "", "$ 27.15", "", "$ 4.00", "", "$ -", "", "$ -"]
