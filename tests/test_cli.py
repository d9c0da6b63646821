import json
import logging

import pytest
from click.testing import CliRunner

from expense_categorizer.cli import main
from expense_categorizer.config import load_config

from .conftest import TRANSACTIONS_HEADER

SHARED_HEADER = "Date,Expense,Description,Total,Brandon"


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def store(tmp_path):
    return tmp_path / "store"


@pytest.fixture
def walmart_file(tmp_path, walmart_csv):
    path = tmp_path / "bank.csv"
    path.write_text(walmart_csv)
    return path


def run_categorize(runner, store, *args, input=None):
    return runner.invoke(main, ["categorize", *args, "--store", str(store)], input=input)


def test_non_interactive_writes_report(runner, store, tmp_path, walmart_file):
    out = tmp_path / "out.csv"

    result = run_categorize(runner, store, str(walmart_file), "--non-interactive", "-o", str(out))

    assert result.exit_code == 0, result.output
    lines = out.read_text().split("\n")
    assert lines[0].startswith("Expenses,Living Expenses,,Groceries,")
    assert lines[2].startswith(",,,Walmart ,$ -54.30,")
    assert lines[-1].startswith("Total,,$ -,,$ -54.30,")


def test_interactive_prompt_files_unmatched(runner, store, tmp_path):
    bank = tmp_path / "bank.csv"
    bank.write_text(f"{TRANSACTIONS_HEADER}\n2024-01-02,Mystery Shop,,Debit,-12.00,\n")
    out = tmp_path / "out.csv"

    result = run_categorize(runner, store, str(bank), "-o", str(out), input="Gifts\n")

    assert result.exit_code == 0, result.output
    assert "No category found for" in result.output
    text = out.read_text()
    assert "Mystery Shop ,$ -12.00" in text
    assert "$ -12.00" in text.split("\n")[-1]


def test_shared_file_is_reconciled(runner, store, tmp_path, walmart_file):
    shared = tmp_path / "shared.csv"
    shared.write_text(f"{SHARED_HEADER}\n2024-01-05,groceries,split groceries,54.30,27.15\n")
    out = tmp_path / "out.csv"

    result = run_categorize(
        runner, store, str(walmart_file), str(shared), "--non-interactive", "-o", str(out)
    )

    assert result.exit_code == 0, result.output
    lines = out.read_text().split("\n")
    assert len(lines) == 4
    assert "split groceries,$ 27.15" in lines[2]
    assert "$ -54.30" in lines[-1]


def test_recompute_totals_flag(runner, store, tmp_path, walmart_file):
    shared = tmp_path / "shared.csv"
    shared.write_text(f"{SHARED_HEADER}\n2024-01-05,groceries,split groceries,54.30,27.15\n")
    out = tmp_path / "out.csv"

    result = run_categorize(
        runner,
        store,
        str(walmart_file),
        str(shared),
        "--non-interactive",
        "--recompute-totals",
        "-o",
        str(out),
    )

    assert result.exit_code == 0, result.output
    assert out.read_text().split("\n")[-1].startswith("Total,,$ -,,$ 27.15,")


def test_excel_output(runner, store, tmp_path, walmart_file):
    excel = tmp_path / "report.xlsx"

    result = run_categorize(
        runner,
        store,
        str(walmart_file),
        "--non-interactive",
        "-o",
        str(tmp_path / "out.csv"),
        "--excel",
        str(excel),
    )

    assert result.exit_code == 0, result.output
    assert excel.exists()


def test_empty_input_exits_with_error(runner, store, tmp_path):
    bank = tmp_path / "empty.csv"
    bank.write_text("\n\n")

    result = run_categorize(runner, store, str(bank), "--non-interactive")

    assert result.exit_code == 1
    assert "CSV file is empty" in result.output


def test_missing_input_is_a_usage_error(runner):
    result = runner.invoke(main, ["categorize"])

    assert result.exit_code == 2


def test_categories_file_option(runner, store, tmp_path, walmart_file):
    cats = tmp_path / "cats.json"
    cats.write_text(json.dumps({"Expenses": {"Treats": ["walmart"]}}))
    out = tmp_path / "out.csv"

    result = run_categorize(
        runner, store, str(walmart_file), "--categories", str(cats), "--non-interactive", "-o", str(out)
    )

    assert result.exit_code == 0, result.output
    assert out.read_text().split("\n")[0] == "Expenses,Treats,"


def test_unknown_category_list_exits_with_error(runner, store, walmart_file):
    result = run_categorize(runner, store, str(walmart_file), "--category-list", "ghost")

    assert result.exit_code == 1


def test_parse_command(runner, walmart_file):
    result = runner.invoke(main, ["parse", str(walmart_file)])

    assert result.exit_code == 0, result.output
    assert "Total transactions: 1" in result.output


def test_init_config(runner, tmp_path):
    path = tmp_path / "config.yaml"

    result = runner.invoke(main, ["init-config", "-o", str(path)])

    assert result.exit_code == 0, result.output
    assert load_config(path).matching.report_category == "Expenses"


def test_lists_lifecycle(runner, store, tmp_path, walmart_file):
    cats = tmp_path / "cats.yaml"
    cats.write_text("Expenses:\n  Treats: [walmart]\n")
    lists = ["lists", "--store", str(store)]

    result = runner.invoke(main, [*lists, "save", "home", str(cats), "--default"])
    assert result.exit_code == 0, result.output
    assert "Saved category list: home" in result.output

    result = runner.invoke(main, [*lists, "list"])
    assert result.exit_code == 0, result.output
    assert "home" in result.output

    result = runner.invoke(main, [*lists, "show", "home"])
    assert result.exit_code == 0, result.output
    assert "Treats" in result.output

    # The saved default is picked up when no taxonomy is named
    out = tmp_path / "out.csv"
    result = run_categorize(runner, store, str(walmart_file), "--non-interactive", "-o", str(out))
    assert result.exit_code == 0, result.output
    assert out.read_text().split("\n")[0] == "Expenses,Treats,"

    result = runner.invoke(main, [*lists, "delete", "home"])
    assert result.exit_code == 0, result.output

    result = runner.invoke(main, [*lists, "delete", "home"])
    assert result.exit_code == 1

    result = runner.invoke(main, [*lists, "show", "home"])
    assert result.exit_code == 1


def test_configured_logging_is_applied(runner, store, tmp_path, walmart_file):
    config = tmp_path / "config.yaml"
    config.write_text("logging:\n  level: warning\n  format: '%(levelname)s|%(message)s'\n")
    args = [str(walmart_file), "-c", str(config), "--non-interactive", "-o", str(tmp_path / "out.csv")]

    result = run_categorize(runner, store, *args)

    assert result.exit_code == 0, result.output
    package_logger = logging.getLogger("expense_categorizer")
    assert package_logger.level == logging.WARNING
    assert package_logger.handlers[0].formatter._fmt == "%(levelname)s|%(message)s"

    result = run_categorize(runner, store, *args, "-v")

    assert result.exit_code == 0, result.output
    assert package_logger.level == logging.DEBUG


def test_unknown_logging_level_exits_with_error(runner, store, tmp_path, walmart_file):
    config = tmp_path / "config.yaml"
    config.write_text("logging:\n  level: chatty\n")

    result = run_categorize(runner, store, str(walmart_file), "-c", str(config), "--non-interactive")

    assert result.exit_code == 1
    assert "Unknown logging level" in result.output


def test_parse_with_invalid_config_exits_with_error(runner, tmp_path, walmart_file):
    config = tmp_path / "config.yaml"
    config.write_text("- not\n- a mapping\n")

    result = runner.invoke(main, ["parse", str(walmart_file), "-c", str(config)])

    assert result.exit_code == 1
    assert "Configuration root must be a mapping" in result.output
