"""Data models for categorization."""

from .transaction import (
    Categories,
    Cell,
    OutputRow,
    ReportTable,
    Transaction,
    SharedTransaction,
    ClassifiedEntry,
    Placement,
    CategoryBuckets,
)

__all__ = [
    "Categories",
    "Cell",
    "OutputRow",
    "ReportTable",
    "Transaction",
    "SharedTransaction",
    "ClassifiedEntry",
    "Placement",
    "CategoryBuckets",
]
