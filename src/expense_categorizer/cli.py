"""
Command-line interface for the expense categorizer.
"""

from datetime import datetime
from pathlib import Path
from typing import Optional
import logging
import sys

import click
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from .config import CategorizerConfig, generate_default_config, load_categories, load_config
from .matching.categorizer import categorize
from .matching.resolvers import console_resolver, no_op_resolver
from .matching.rules import build_split_rules
from .models.transaction import Categories, ReportTable
from .parsers.csv_parser import TransactionCsvParser
from .reconciliation.reconciler import SharedExpenseReconciler
from .reports.builder import recompute_totals
from .reports.csv_writer import write_csv
from .reports.excel_generator import ExcelReportGenerator
from .storage.category_lists import CategoryListStore
from .utils.exceptions import CategorizerError, ConfigurationError
from .utils.logging_config import setup_logging

console = Console()

DEFAULT_STORE = Path("categories")


@click.group()
@click.version_option(version="0.1.0")
def main():
    """Categorize bank transactions into an expense report."""
    pass


@main.command("categorize")
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument(
    "shared_file",
    required=False,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-c",
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file (YAML)",
)
@click.option(
    "--categories",
    "categories_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Category taxonomy file (JSON or YAML)",
)
@click.option("--category-list", help="Name of a saved category list to use")
@click.option(
    "--store",
    type=click.Path(file_okay=False, path_type=Path),
    default=DEFAULT_STORE,
    show_default=True,
    help="Directory of saved category lists",
)
@click.option("-o", "--output", type=click.Path(path_type=Path), help="Output CSV file path")
@click.option("--excel", type=click.Path(path_type=Path), help="Also write an Excel report")
@click.option(
    "--non-interactive",
    is_flag=True,
    help="Skip unmatched transactions instead of prompting",
)
@click.option(
    "--recompute-totals",
    "recompute_totals_flag",
    is_flag=True,
    help="Recompute the totals row after reconciling shared expenses",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
def categorize_command(
    input_file: Path,
    shared_file: Optional[Path],
    config: Optional[Path],
    categories_file: Optional[Path],
    category_list: Optional[str],
    store: Path,
    output: Optional[Path],
    excel: Optional[Path],
    non_interactive: bool,
    recompute_totals_flag: bool,
    verbose: bool,
):
    """
    Categorize a bank CSV export and optionally reconcile shared expenses.

    INPUT_FILE: Path to the bank transactions CSV
    SHARED_FILE: Optional path to the shared expenses CSV
    """
    try:
        recon_config = load_config(config)
        setup_logging(
            logging.DEBUG if verbose else recon_config.logging.level,
            log_format=recon_config.logging.format,
        )
        categories = _select_categories(recon_config, categories_file, category_list, store)

        parser = TransactionCsvParser(recon_config)
        shared = []

        # Spinner is closed before the resolver can prompt
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            task = progress.add_task("Parsing transactions CSV...", total=None)
            transactions = parser.parse_file(input_file)
            progress.update(task, completed=True)

            if shared_file:
                task = progress.add_task("Parsing shared expenses CSV...", total=None)
                shared = parser.parse_shared_file(shared_file)
                progress.update(task, completed=True)

        resolver = no_op_resolver if non_interactive else console_resolver
        table = categorize(
            transactions,
            categories,
            resolver,
            split_rules=build_split_rules(recon_config),
            report_category=recon_config.matching.report_category,
            skip_marker=recon_config.matching.skip_marker,
        )

        if shared_file:
            reconciler = SharedExpenseReconciler(recon_config.reconciliation.amount_tolerance)
            table = reconciler.reconcile(table, shared)
            if recompute_totals_flag or recon_config.reconciliation.recompute_totals:
                recompute_totals(table)

        if output is None:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            output = Path(recon_config.output.csv_filename_template.format(timestamp=timestamp))

        write_csv(table, output)
        if excel:
            ExcelReportGenerator(recon_config).generate_report(table, excel)

        _display_report(table)
        console.print(f"\n[green]CSV output written to {output}[/green]")
        if excel:
            console.print(f"[green]Excel report written to {excel}[/green]")

    except CategorizerError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        if verbose:
            console.print_exception()
        sys.exit(1)


@main.command("parse")
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument(
    "shared_file",
    required=False,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option("-c", "--config", type=click.Path(exists=True, path_type=Path))
def parse_command(input_file: Path, shared_file: Optional[Path], config: Optional[Path]):
    """
    Parse CSV files and display what was read, without categorizing.

    INPUT_FILE: Path to the bank transactions CSV
    SHARED_FILE: Optional path to the shared expenses CSV
    """
    try:
        recon_config = load_config(config)
        parser = TransactionCsvParser(recon_config)
        transactions = parser.parse_file(input_file)

        table = Table(title=f"Transactions: {input_file.name}")
        table.add_column("Date")
        table.add_column("Description")
        table.add_column("Sub-Description")
        table.add_column("Type")
        table.add_column("Amount", justify="right")
        table.add_column("Balance", justify="right")

        for txn in transactions[:20]:  # Show first 20
            table.add_row(
                txn.date,
                txn.description,
                txn.sub_description,
                txn.type,
                f"{txn.amount:,.2f}",
                f"{txn.balance:,.2f}" if txn.balance is not None else "-",
            )

        console.print(table)

        if len(transactions) > 20:
            console.print(f"\n... and {len(transactions) - 20} more transactions")

        summary = parser.get_file_summary(transactions)
        console.print(f"\nTotal transactions: {summary['row_count']}")
        console.print(
            f"Date range: {summary['date_range']['start'] or '-'} to "
            f"{summary['date_range']['end'] or '-'}"
        )
        console.print(
            f"Debits: {summary['totals']['debit_count']} "
            f"({summary['totals']['total_debits']:,.2f}), "
            f"Credits: {summary['totals']['credit_count']} "
            f"({summary['totals']['total_credits']:,.2f})"
        )

        if shared_file:
            shared = parser.parse_shared_file(shared_file)
            console.print(f"Shared transactions: {len(shared)}")

    except CategorizerError as e:
        console.print(f"[red]Error parsing file: {escape(str(e))}[/red]")
        sys.exit(1)


@main.command("init-config")
@click.option(
    "-o", "--output", type=click.Path(path_type=Path), default=Path("config.yaml")
)
def init_config(output: Path):
    """Generate a sample configuration file."""
    generate_default_config(output)
    console.print(f"[green]Configuration file generated: {output}[/green]")


@main.group("lists")
@click.option(
    "--store",
    type=click.Path(file_okay=False, path_type=Path),
    default=DEFAULT_STORE,
    show_default=True,
    help="Directory of saved category lists",
)
@click.pass_context
def lists(ctx: click.Context, store: Path):
    """Manage saved category lists."""
    ctx.obj = CategoryListStore(store)


@lists.command("list")
@click.pass_obj
def lists_list(store: CategoryListStore):
    """Show all saved category lists."""
    table = Table(title="Category Lists")
    table.add_column("Name", style="cyan")
    table.add_column("Main Categories")
    table.add_column("Default", justify="center")
    table.add_column("Updated")

    try:
        for category_list in store.list_all():
            table.add_row(
                category_list.name,
                ", ".join(category_list.categories.keys()),
                "*" if category_list.is_default else "",
                category_list.updated_at.strftime("%Y-%m-%d %H:%M"),
            )
    except CategorizerError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)

    console.print(table)


@lists.command("show")
@click.argument("name")
@click.pass_obj
def lists_show(store: CategoryListStore, name: str):
    """Show the taxonomy of a saved list."""
    category_list = store.get(name)
    if category_list is None:
        console.print(f"[red]Category list '{name}' not found[/red]")
        sys.exit(1)

    _display_categories(category_list.categories, title=category_list.name)


@lists.command("save")
@click.argument("name")
@click.argument("categories_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--default", "is_default", is_flag=True, help="Make this the default list")
@click.pass_obj
def lists_save(store: CategoryListStore, name: str, categories_file: Path, is_default: bool):
    """Save a taxonomy file (JSON or YAML) under NAME, replacing any existing list."""
    try:
        categories = load_categories(categories_file)
        if store.get(name) is None:
            store.create(name, categories, is_default=is_default)
        else:
            store.update(name, categories=categories, is_default=is_default or None)
    except CategorizerError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)

    console.print(f"[green]Saved category list: {name}[/green]")


@lists.command("delete")
@click.argument("name")
@click.pass_obj
def lists_delete(store: CategoryListStore, name: str):
    """Delete a saved list."""
    try:
        store.delete(name)
    except CategorizerError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)

    console.print(f"[green]Deleted category list: {name}[/green]")


def _select_categories(
    config: CategorizerConfig,
    categories_file: Optional[Path],
    category_list: Optional[str],
    store: Path,
) -> Categories:
    """Pick the taxonomy: named list, then file, then saved default, then config."""
    list_store = CategoryListStore(store)

    if category_list:
        saved = list_store.get(category_list)
        if saved is None:
            raise ConfigurationError(f"Category list '{category_list}' not found in {store}")
        return saved.categories

    if categories_file:
        return load_categories(categories_file)

    default = list_store.get_default()
    if default is not None:
        return default.categories

    return config.categories


def _display_report(table_rows: ReportTable) -> None:
    """Display the report table in console."""
    if not table_rows:
        return

    width = max(len(row) for row in table_rows)
    table = Table(title="Categorized Expenses", show_header=False, show_lines=False)
    for _ in range(width):
        table.add_column()

    for index, row in enumerate(table_rows):
        cells = [str(cell) for cell in row] + [""] * (width - len(row))
        style = "bold cyan" if index < 2 or index == len(table_rows) - 1 else None
        table.add_row(*cells, style=style)

    console.print(table)


def _display_categories(categories: Categories, title: str) -> None:
    """Display a taxonomy in console."""
    table = Table(title=title)
    table.add_column("Main", style="cyan")
    table.add_column("Sub-Category")
    table.add_column("Keywords")

    for main, subs in categories.items():
        for sub, keywords in subs.items():
            table.add_row(main, sub, ", ".join(keywords) or "-")

    console.print(table)


if __name__ == "__main__":
    main()
