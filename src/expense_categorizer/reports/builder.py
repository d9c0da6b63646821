"""
Category report table assembly.
Lays classified entries out as a spreadsheet-shaped table with one
Description/Amount column pair per sub-category and a totals row.
"""

from decimal import Decimal
import logging

from ..models.transaction import Categories, CategoryBuckets, OutputRow, ReportTable
from ..utils.exceptions import ConfigurationError
from ..utils.text import format_currency, format_total, parse_currency_cell

logger = logging.getLogger(__name__)

HEADER_ROWS = 2
TOTAL_LABEL = "Total"


class ReportBuilder:
    """
    Builds the report table for one main category.

    Layout:
        row 0: [main, sub1, "", sub2, "", ...]
        row 1: ["", "Description", "Amount", ...]
        body:  ["", desc, "$ x.xx", ...] in lock-step across sub-categories
        last:  ["Total", "", "$ x.xx" | "$ -", ...]

    Only the report category's sub-categories become columns. Entries
    bucketed under other main categories (e.g. Income) are not rendered.
    """

    def __init__(self, report_category: str = "Expenses"):
        self.report_category = report_category

    def build(self, buckets: CategoryBuckets, categories: Categories) -> ReportTable:
        """
        Render classified buckets into a report table.

        Args:
            buckets: Classified entries
            categories: Taxonomy; column order follows its sub-category order

        Returns:
            New report table

        Raises:
            ConfigurationError: If the taxonomy lacks the report category
        """
        if self.report_category not in categories:
            raise ConfigurationError(
                f"Category taxonomy has no '{self.report_category}' main category"
            )

        subcategories = list(categories[self.report_category].keys())
        columns = [buckets.entries(self.report_category, sub) for sub in subcategories]

        header: OutputRow = [self.report_category]
        subheader: OutputRow = [""]
        for sub in subcategories:
            header.extend([sub, ""])
            subheader.extend(["Description", "Amount"])

        table: ReportTable = [header, subheader]

        body_rows = max((len(entries) for entries in columns), default=0)
        for index in range(body_rows):
            row: OutputRow = [""]
            for entries in columns:
                if index < len(entries):
                    entry = entries[index]
                    row.extend([entry.description, format_currency(entry.amount)])
                else:
                    row.extend(["", ""])
            table.append(row)

        totals: OutputRow = [TOTAL_LABEL]
        for entries in columns:
            total = sum((entry.amount for entry in entries), Decimal("0"))
            totals.extend(["", format_total(total)])
        table.append(totals)

        unrendered = [main for main in buckets if main != self.report_category]
        if unrendered:
            logger.debug(f"Categories not rendered in report: {unrendered}")

        logger.info(
            f"Built report: {len(subcategories)} sub-categories, {body_rows} body rows"
        )
        return table


def recompute_totals(table: ReportTable) -> ReportTable:
    """
    Rewrite the totals row from the body amounts currently in the table.

    Reconciliation inserts and overwrites rows without touching the totals;
    this pass brings the totals back in line. Mutates and returns the table.
    """
    if len(table) <= HEADER_ROWS:
        return table

    totals_row = table[-1]
    for column in range(2, len(totals_row), 2):
        total = Decimal("0")
        for row in table[HEADER_ROWS:-1]:
            if column < len(row):
                amount = parse_currency_cell(row[column])
                if amount is not None:
                    total += amount
        totals_row[column] = format_total(total)

    return table
