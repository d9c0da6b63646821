"""
Keyword categorization of bank transactions.
Classifies each transaction into a (main, sub) category pair and builds
the category report.
"""

from typing import Iterable, Optional
import logging

from ..models.transaction import (
    Categories,
    CategoryBuckets,
    ClassifiedEntry,
    Placement,
    ReportTable,
    Transaction,
)
from ..reports.builder import ReportBuilder
from ..utils.text import normalize
from .resolvers import Resolver
from .rules import SplitRule, build_split_rules

logger = logging.getLogger(__name__)


class CategoryMatcher:
    """
    Classifies transactions against a two-level keyword taxonomy.

    Matching order, first hit wins:
    1. split rules, in list order
    2. keyword search, main categories then sub-categories in taxonomy order
    3. the resolver, for anything left (see assign())
    """

    def __init__(
        self,
        categories: Categories,
        split_rules: Optional[list[SplitRule]] = None,
        resolver: Optional[Resolver] = None,
        report_category: str = "Expenses",
        skip_marker: str = "date=",
    ):
        """
        Initialize the matcher.

        Args:
            categories: Taxonomy; read, never modified
            split_rules: Pre-match rules; None uses the configured defaults
            resolver: Callback for unmatched transactions; None drops them
            report_category: Main category the resolver's answers file into
            skip_marker: Descriptions containing this are internal records
                and are dropped instead of resolved
        """
        self.categories = categories
        self.split_rules = build_split_rules() if split_rules is None else split_rules
        self.resolver = resolver
        self.report_category = report_category
        self.skip_marker = skip_marker
        self._keywords = self._compile_keywords(categories)

    @staticmethod
    def _compile_keywords(categories: Categories) -> list[tuple[str, str, list[str]]]:
        compiled = []
        for main, subs in categories.items():
            for sub, keywords in subs.items():
                normalized = [normalize(k) for k in keywords]
                # A keyword that normalizes to "" would match every transaction
                compiled.append((main, sub, [k for k in normalized if k]))
        return compiled

    def classify(self, txn: Transaction) -> list[Placement]:
        """
        Classify a transaction by split rules and keywords only.

        Args:
            txn: Transaction to classify

        Returns:
            Placements for the transaction; empty if nothing matched
        """
        for rule in self.split_rules:
            if rule.applies(txn):
                return rule.split(txn)

        search_text = normalize(txn.search_text)
        for main, sub, keywords in self._keywords:
            if any(keyword in search_text for keyword in keywords):
                entry = ClassifiedEntry(description=txn.display_description, amount=txn.amount)
                return [Placement(main_category=main, sub_category=sub, entry=entry)]

        return []

    def assign(self, txn: Transaction) -> list[Placement]:
        """
        Classify a transaction, falling back to the resolver.

        Returns:
            Placements for the transaction; empty if it was dropped
        """
        placements = self.classify(txn)
        if placements:
            return placements

        if self.skip_marker and self.skip_marker in txn.description:
            logger.debug(f"Skipping internal record: '{txn.description}'")
            return []

        if self.resolver is None:
            logger.warning(f"No category for '{txn.search_text}'. Transaction skipped.")
            return []

        answer = (self.resolver(txn.search_text) or "").strip()
        if answer and answer in self.categories.get(self.report_category, {}):
            entry = ClassifiedEntry(description=txn.display_description, amount=txn.amount)
            return [Placement(main_category=self.report_category, sub_category=answer, entry=entry)]

        logger.warning(f'Unknown category input: "{answer}". Transaction skipped.')
        return []

    def categorize_into_buckets(self, transactions: Iterable[Transaction]) -> CategoryBuckets:
        """
        Classify a batch of transactions into a fresh bucket set.

        Args:
            transactions: Transactions in file order

        Returns:
            Entries grouped by main and sub-category, in arrival order
        """
        buckets = CategoryBuckets()
        total = 0
        dropped = 0

        for txn in transactions:
            total += 1
            placements = self.assign(txn)
            if not placements:
                dropped += 1
            for placement in placements:
                buckets.add(placement)

        logger.info(
            f"Categorized {total - dropped} of {total} transactions "
            f"({buckets.count()} entries, {dropped} dropped)"
        )
        return buckets


def categorize(
    transactions: Iterable[Transaction],
    categories: Categories,
    resolver: Optional[Resolver] = None,
    *,
    split_rules: Optional[list[SplitRule]] = None,
    report_category: str = "Expenses",
    skip_marker: str = "date=",
) -> ReportTable:
    """
    Categorize transactions and build the category report table.

    Args:
        transactions: Parsed bank transactions
        categories: Taxonomy to match against
        resolver: Callback for unmatched transactions (None drops them)
        split_rules: Pre-match rules; None uses the configured defaults
        report_category: Main category rendered as report columns
        skip_marker: Descriptions containing this are dropped unresolved

    Returns:
        Report table: two header rows, body rows, totals row
    """
    matcher = CategoryMatcher(
        categories,
        split_rules=split_rules,
        resolver=resolver,
        report_category=report_category,
        skip_marker=skip_marker,
    )
    buckets = matcher.categorize_into_buckets(transactions)
    return ReportBuilder(report_category).build(buckets, categories)
