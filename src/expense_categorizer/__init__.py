"""Keyword categorization of bank CSV exports into expense reports."""

from .matching.categorizer import CategoryMatcher, categorize
from .parsers.csv_parser import parse_shared, parse_transactions, parse_transactions_lenient
from .reconciliation.reconciler import SharedExpenseReconciler, reconcile

__version__ = "0.1.0"

__all__ = [
    "CategoryMatcher",
    "SharedExpenseReconciler",
    "categorize",
    "parse_shared",
    "parse_transactions",
    "parse_transactions_lenient",
    "reconcile",
]
