from decimal import Decimal

import pytest
from openpyxl import load_workbook

from expense_categorizer.config import CategorizerConfig
from expense_categorizer.reports.csv_writer import to_csv_text, write_csv
from expense_categorizer.reports.excel_generator import ExcelReportGenerator
from expense_categorizer.utils.exceptions import ReportGenerationError

TABLE = [
    ["Expenses", "Groceries", "", "Gifts", ""],
    ["", "Description", "Amount", "Description", "Amount"],
    ["", "Dinner, wine", "$ -54.30", "", ""],
    ["Total", "", "$ -54.30", "", "$ -"],
]


def test_csv_text_quotes_cells_with_commas():
    assert to_csv_text(TABLE).split("\n") == [
        "Expenses,Groceries,,Gifts,",
        ",Description,Amount,Description,Amount",
        ',"Dinner, wine",$ -54.30,,',
        "Total,,$ -54.30,,$ -",
    ]


def test_csv_text_stringifies_other_cells():
    assert to_csv_text([["", Decimal("1.50"), 3]]) == ",1.50,3"


def test_write_csv_creates_parent_directories(tmp_path):
    path = tmp_path / "out" / "report.csv"

    assert write_csv(TABLE, path) == path
    assert path.read_text(encoding="utf-8") == to_csv_text(TABLE)


def test_write_csv_failure_is_wrapped(tmp_path):
    with pytest.raises(ReportGenerationError):
        write_csv(TABLE, tmp_path)


def test_excel_report(tmp_path):
    path = tmp_path / "report.xlsx"
    config = CategorizerConfig()
    config.output.excel_sheet_name = "March"

    ExcelReportGenerator(config).generate_report(TABLE, path)

    ws = load_workbook(path)["March"]
    assert ws["A1"].value == "Expenses"
    assert ws["B1"].value == "Groceries"
    assert ws["D1"].value == "Gifts"
    assert ws["B2"].value == "Description"
    assert ws["C3"].value == "$ -54.30"
    assert ws["A4"].value == "Total"
    assert ws["E4"].value == "$ -"
    assert {str(r) for r in ws.merged_cells.ranges} == {"B1:C1", "D1:E1"}
    assert ws["A1"].font.bold
    assert ws["A4"].font.bold
