"""Utility modules."""

from .exceptions import (
    CategorizerError,
    EmptyInputError,
    CsvParseError,
    ConfigurationError,
    ReportGenerationError,
    CategoryListError,
    CategoryListNotFoundError,
    DuplicateCategoryListError,
)
from .logging_config import setup_logging
from .text import normalize, parse_decimal, parse_currency_cell, format_currency, format_total

__all__ = [
    "CategorizerError",
    "EmptyInputError",
    "CsvParseError",
    "ConfigurationError",
    "ReportGenerationError",
    "CategoryListError",
    "CategoryListNotFoundError",
    "DuplicateCategoryListError",
    "setup_logging",
    "normalize",
    "parse_decimal",
    "parse_currency_cell",
    "format_currency",
    "format_total",
]
