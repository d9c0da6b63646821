"""Data models for categorization inputs, buckets and the report table."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Union


# Taxonomy: main category -> sub-category -> keywords, in insertion order
Categories = dict[str, dict[str, list[str]]]

Cell = Union[str, Decimal, int, float]
OutputRow = list[Cell]
ReportTable = list[OutputRow]


@dataclass(frozen=True)
class Transaction:
    """
    One row of a bank CSV export.

    The amount sign follows the bank's convention: negative values are
    money out. ``balance`` is None when the column is missing or unparsable,
    which is distinct from a zero balance.
    """

    date: str
    description: str
    sub_description: str
    type: str
    amount: Decimal
    balance: Optional[Decimal] = None

    @property
    def search_text(self) -> str:
        """Raw text the keyword search runs against (before normalization)."""
        return f"{self.sub_description} {self.description}"

    @property
    def display_description(self) -> str:
        """Description written into the report cell."""
        return f"{self.description} {self.sub_description}"


@dataclass(frozen=True)
class SharedTransaction:
    """
    A shared expense tracked outside the bank export.

    ``total`` is the full amount expected to appear in the report;
    ``brandon`` is this party's share, which replaces it on reconciliation.
    ``expense`` is a lower-cased category hint.
    """

    description: str
    total: Decimal
    brandon: Decimal
    expense: str
    date: str = ""


@dataclass(frozen=True)
class ClassifiedEntry:
    """A description/amount pair filed under a sub-category."""

    description: str
    amount: Decimal


@dataclass(frozen=True)
class Placement:
    """Where a classified entry goes in the bucket set."""

    main_category: str
    sub_category: str
    entry: ClassifiedEntry


class CategoryBuckets(dict):
    """
    Classified entries keyed by main category, then sub-category.

    Built fresh for each categorization run.
    """

    def add(self, placement: Placement) -> None:
        """File a placement, creating its buckets on first use."""
        subs = self.setdefault(placement.main_category, {})
        subs.setdefault(placement.sub_category, []).append(placement.entry)

    def entries(self, main_category: str, sub_category: str) -> list[ClassifiedEntry]:
        """Entries for a sub-category, or an empty list."""
        return self.get(main_category, {}).get(sub_category, [])

    def count(self) -> int:
        """Total number of entries across all buckets."""
        return sum(len(entries) for subs in self.values() for entries in subs.values())
