"""Shared fixtures for the expense categorizer tests."""

from __future__ import annotations

import copy
import logging

import pytest

from expense_categorizer.config import DEFAULT_CATEGORIES

TRANSACTIONS_HEADER = "Date,Description,Sub-Description,Type of Transaction,Amount,Balance"


@pytest.fixture
def default_categories() -> dict:
    """A private copy of the built-in taxonomy."""
    return copy.deepcopy(DEFAULT_CATEGORIES)


@pytest.fixture
def simple_categories() -> dict:
    """Small taxonomy with predictable keyword overlap."""
    return {
        "Income": {
            "Salary": ["payroll"],
        },
        "Expenses": {
            "Groceries": ["walmart", "costco"],
            "Coffee": ["coffee"],
            "Cafes": ["coffee shop"],
            "Gifts": [],
        },
    }


@pytest.fixture
def walmart_csv() -> str:
    return f"{TRANSACTIONS_HEADER}\n2024-01-01,Walmart,,Debit,-54.30,1000.00\n"


@pytest.fixture
def recording_resolver():
    """Resolver that records every prompt and answers from a queue."""

    class RecordingResolver:
        def __init__(self) -> None:
            self.calls: list[str] = []
            self.answers: list[str] = []

        def __call__(self, description: str) -> str:
            self.calls.append(description)
            return self.answers.pop(0) if self.answers else ""

    return RecordingResolver()


@pytest.fixture(autouse=True)
def _propagate_package_logs():
    """Keep package records reaching caplog even after setup_logging ran."""
    logger = logging.getLogger("expense_categorizer")
    handlers = list(logger.handlers)
    level = logger.level
    yield
    logger.handlers = handlers
    logger.setLevel(level)
    logger.propagate = True
