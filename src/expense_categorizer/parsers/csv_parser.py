"""
Bank CSV and shared-expense CSV parsers.
Converts raw export text into Transaction and SharedTransaction records.
"""

from decimal import Decimal
from pathlib import Path
from typing import Optional
import logging

import pandas as pd

from ..config import CategorizerConfig
from ..models.transaction import SharedTransaction, Transaction
from ..utils.exceptions import CsvParseError, EmptyInputError
from ..utils.text import parse_decimal

logger = logging.getLogger(__name__)

# Header names are matched case-insensitively
DATE_COLUMN = "date"
DESCRIPTION_COLUMN = "description"
SUB_DESCRIPTION_COLUMN = "sub-description"
TYPE_COLUMN = "type of transaction"
AMOUNT_COLUMN = "amount"
BALANCE_COLUMN = "balance"

# Shared-expense files are positional: date, expense, description, total, brandon
SHARED_COLUMNS = ("date", "expense", "description", "total", "brandon")


def _content_lines(text: str) -> list[str]:
    """Split into trimmed lines, dropping blank ones."""
    return [line.strip() for line in text.split("\n") if line.strip()]


def _strip_quotes(value: str) -> str:
    """Drop one leading and one trailing double quote, if present."""
    if value.startswith('"'):
        value = value[1:]
    if value.endswith('"'):
        value = value[:-1]
    return value


def _split_fields(line: str) -> list[str]:
    # No quoted-comma support: every comma is a delimiter
    return [_strip_quotes(field.strip()) for field in line.split(",")]


def _row_to_transaction(headers: list[str], values: list[str]) -> Transaction:
    row: dict[str, str] = {}
    for index, key in enumerate(headers):
        row[key] = values[index] if index < len(values) else ""

    amount = parse_decimal(row.get(AMOUNT_COLUMN))
    return Transaction(
        date=row.get(DATE_COLUMN, ""),
        description=row.get(DESCRIPTION_COLUMN, ""),
        sub_description=row.get(SUB_DESCRIPTION_COLUMN, ""),
        type=row.get(TYPE_COLUMN, ""),
        amount=amount if amount is not None else Decimal("0"),
        balance=parse_decimal(row.get(BALANCE_COLUMN)),
    )


def parse_transactions(text: str) -> list[Transaction]:
    """
    Parse a bank CSV export into transactions.

    The first non-blank line is the header; columns are located by name,
    so their order in the file does not matter. Malformed amounts become
    zero and malformed balances become None rather than failing the row.

    Args:
        text: Raw CSV text

    Returns:
        One transaction per data line, in file order

    Raises:
        EmptyInputError: If the text has no non-blank lines
    """
    lines = _content_lines(text)
    if not lines:
        raise EmptyInputError("CSV file is empty")

    headers = [field.lower() for field in _split_fields(lines[0])]
    logger.debug(f"Transaction CSV headers: {headers}")

    transactions = [_row_to_transaction(headers, _split_fields(line)) for line in lines[1:]]
    logger.debug(f"Parsed {len(transactions)} transactions")
    return transactions


def parse_transactions_lenient(text: str) -> list[Transaction]:
    """Same as parse_transactions, but empty input yields an empty list."""
    try:
        return parse_transactions(text)
    except EmptyInputError:
        logger.debug("Transaction CSV is empty, returning no transactions")
        return []


def parse_shared(text: str) -> list[SharedTransaction]:
    """
    Parse a shared-expense CSV.

    The header line is skipped; remaining lines are read positionally as
    date, expense, description, total, brandon. Header-only or empty input
    yields an empty list.
    """
    lines = _content_lines(text)
    if len(lines) <= 1:
        return []

    shared: list[SharedTransaction] = []
    for line in lines[1:]:
        values = _split_fields(line)
        values += [""] * (len(SHARED_COLUMNS) - len(values))
        date, expense, description, total, brandon = values[: len(SHARED_COLUMNS)]

        shared.append(
            SharedTransaction(
                description=description,
                total=parse_decimal(total) or Decimal("0"),
                brandon=parse_decimal(brandon) or Decimal("0"),
                expense=expense.lower(),
                date=date,
            )
        )

    logger.debug(f"Parsed {len(shared)} shared transactions")
    return shared


class TransactionCsvParser:
    """
    File-level parser for bank and shared-expense exports.

    Reads files with the configured encoding and applies strict or lenient
    empty-file handling according to configuration.
    """

    def __init__(self, config: Optional[CategorizerConfig] = None):
        """
        Initialize the parser with configuration.

        Args:
            config: Application configuration object
        """
        self.config = config or CategorizerConfig()

    def _read_text(self, file_path: Path) -> str:
        encoding = self.config.input.encoding
        try:
            with open(file_path, "r", encoding=encoding) as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read CSV file: {e}")
            raise CsvParseError(f"Failed to read CSV file {file_path}: {e}") from e

    def parse_file(self, file_path: Path) -> list[Transaction]:
        """
        Parse a bank CSV export file.

        Raises:
            CsvParseError: If the file cannot be read
            EmptyInputError: If the file is empty and strict parsing is on
        """
        logger.info(f"Parsing transaction CSV file: {file_path}")
        text = self._read_text(file_path)

        if self.config.input.strict:
            transactions = parse_transactions(text)
        else:
            transactions = parse_transactions_lenient(text)

        logger.info(f"Extracted {len(transactions)} transactions from {file_path.name}")
        return transactions

    def parse_shared_file(self, file_path: Path) -> list[SharedTransaction]:
        """Parse a shared-expense CSV file."""
        logger.info(f"Parsing shared expense CSV file: {file_path}")
        shared = parse_shared(self._read_text(file_path))
        logger.info(f"Extracted {len(shared)} shared transactions from {file_path.name}")
        return shared

    def get_file_summary(self, transactions: list[Transaction]) -> dict:
        """
        Summarize parsed transactions.

        Args:
            transactions: Parsed transactions

        Returns:
            Dictionary with row count, date range, debit/credit totals and
            the distinct transaction types
        """
        if not transactions:
            return {
                "row_count": 0,
                "date_range": {"start": None, "end": None},
                "totals": {
                    "debit_count": 0,
                    "credit_count": 0,
                    "total_debits": 0.0,
                    "total_credits": 0.0,
                },
                "types": [],
            }

        df = pd.DataFrame(
            {
                "date": [t.date for t in transactions],
                "type": [t.type for t in transactions],
                "amount": [float(t.amount) for t in transactions],
            }
        )

        dates = pd.to_datetime(df["date"], errors="coerce", format="mixed").dropna()
        debits = df.loc[df["amount"] < 0, "amount"]
        credits = df.loc[df["amount"] > 0, "amount"]

        return {
            "row_count": len(df),
            "date_range": {
                "start": dates.min().date().isoformat() if len(dates) > 0 else None,
                "end": dates.max().date().isoformat() if len(dates) > 0 else None,
            },
            "totals": {
                "debit_count": int(len(debits)),
                "credit_count": int(len(credits)),
                "total_debits": round(float(debits.sum()), 2),
                "total_credits": round(float(credits.sum()), 2),
            },
            "types": [t for t in df["type"].unique().tolist() if t],
        }
