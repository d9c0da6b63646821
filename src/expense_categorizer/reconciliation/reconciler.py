"""
Shared-expense reconciliation.
Merges externally tracked shared expenses into a built report table by
matching amounts, or appends them under their hinted category.
"""

from decimal import Decimal
from typing import Iterable, Optional
import logging

from ..models.transaction import OutputRow, ReportTable, SharedTransaction
from ..utils.text import format_currency, parse_currency_cell

logger = logging.getLogger(__name__)

HEADER_ROWS = 2
FIRST_CATEGORY_COLUMN = 1


class SharedExpenseReconciler:
    """
    Rewrites a report table in place with shared-expense shares.

    For each shared transaction, in order:
    - the first body Amount cell strictly closer than the tolerance to
      ``total`` gets the shared description and ``brandon`` share, so a
      difference of exactly one cent is not a match at the default 0.01.
      Amounts are compared by magnitude: the bank export records expenses
      as negatives, the shared sheet as positive totals;
    - otherwise a new row carrying the share is inserted just before the
      totals row, under the column whose header equals the ``expense``
      hint (case-insensitive), or the first category column.

    The totals row is left as-is. Running this twice over the same table
    with the same input is not idempotent.
    """

    def __init__(self, tolerance: Decimal = Decimal("0.01")):
        """
        Initialize the reconciler.

        Args:
            tolerance: Amounts strictly closer than this are a match
        """
        self.tolerance = tolerance

    def reconcile(
        self, report: ReportTable, shared: Iterable[SharedTransaction]
    ) -> ReportTable:
        """
        Merge shared transactions into the report table.

        Args:
            report: Report table, mutated in place
            shared: Shared transactions in input order

        Returns:
            The same report table
        """
        if not report:
            return report

        header = report[0]
        column_index = self._column_index(header)
        # Rows inserted below are not candidates for later matches
        body_rows = report[HEADER_ROWS:-1]

        matched = 0
        inserted = 0
        for txn in shared:
            if self._overwrite_match(body_rows, txn):
                matched += 1
                continue

            target = column_index.get(txn.expense.lower(), FIRST_CATEGORY_COLUMN)
            report.insert(len(report) - 1, self._new_row(header, target, txn))
            inserted += 1
            logger.debug(
                f"No amount match for '{txn.description}' ({txn.total}); "
                f"added under column {target}"
            )

        logger.info(f"Reconciled shared expenses: {matched} matched, {inserted} added")
        return report

    @staticmethod
    def _column_index(header: OutputRow) -> dict[str, int]:
        """Map lower-cased sub-category names to their Description column."""
        index: dict[str, int] = {}
        for col in range(FIRST_CATEGORY_COLUMN, len(header), 2):
            name = header[col]
            if isinstance(name, str):
                index[name.lower()] = col
        return index

    def _overwrite_match(self, body_rows: list[OutputRow], txn: SharedTransaction) -> bool:
        for row in body_rows:
            for col in range(FIRST_CATEGORY_COLUMN + 1, len(row), 2):
                if not isinstance(row[col], str):
                    continue
                amount = parse_currency_cell(row[col])
                if amount is None:
                    continue
                if abs(abs(amount) - abs(txn.total)) < self.tolerance:
                    logger.debug(f"Matched '{txn.description}' to '{row[col - 1]}' ({row[col]})")
                    row[col - 1] = txn.description
                    row[col] = format_currency(txn.brandon)
                    return True
        return False

    @staticmethod
    def _new_row(header: OutputRow, target: int, txn: SharedTransaction) -> OutputRow:
        row: OutputRow = [""]
        for col in range(FIRST_CATEGORY_COLUMN, len(header), 2):
            if col == target:
                row.extend([txn.description, format_currency(txn.brandon)])
            else:
                row.extend(["", ""])
        return row


def reconcile(
    report: ReportTable,
    shared: Iterable[SharedTransaction],
    tolerance: Optional[Decimal] = None,
) -> ReportTable:
    """
    Merge shared transactions into a report table (mutates and returns it).

    Args:
        report: Report table built by categorize()
        shared: Parsed shared transactions
        tolerance: Amount match tolerance, default 0.01
    """
    reconciler = SharedExpenseReconciler() if tolerance is None else SharedExpenseReconciler(tolerance)
    return reconciler.reconcile(report, shared)
