"""Parsers for bank and shared-expense CSV exports."""

from .csv_parser import (
    TransactionCsvParser,
    parse_transactions,
    parse_transactions_lenient,
    parse_shared,
)

__all__ = [
    "TransactionCsvParser",
    "parse_transactions",
    "parse_transactions_lenient",
    "parse_shared",
]
