"""
Pre-match split rules.
A split rule runs before keyword search and can turn one bank line into
several report entries, e.g. a bundled internet/phone bill.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional
import logging

from ..config import CategorizerConfig, SplitRuleConfig
from ..models.transaction import ClassifiedEntry, Placement, Transaction
from ..utils.text import normalize

logger = logging.getLogger(__name__)


class SplitRule(ABC):
    """Abstract base class for pre-match rules."""

    name: str = "split_rule"

    @abstractmethod
    def applies(self, txn: Transaction) -> bool:
        """
        Check whether this rule handles the transaction.

        Args:
            txn: Transaction to test

        Returns:
            True if split() should be used instead of keyword search
        """
        pass

    @abstractmethod
    def split(self, txn: Transaction) -> list[Placement]:
        """
        Produce the entries this transaction is filed as.

        Args:
            txn: Transaction accepted by applies()

        Returns:
            Placements to add to the bucket set
        """
        pass


class KeywordAmountSplitRule(SplitRule):
    """
    Splits a transaction whose sub-description contains a keyword and whose
    amount is exactly a given value.

    Allocations are (main, sub, description, amount) tuples; an allocation
    with amount None takes the remainder after the fixed allocations.
    """

    def __init__(
        self,
        name: str,
        keyword: str,
        amount: Decimal,
        allocations: list[tuple[str, str, str, Optional[Decimal]]],
    ):
        self.name = name
        self.keyword = normalize(keyword)
        self.amount = amount
        self.allocations = allocations

    def applies(self, txn: Transaction) -> bool:
        if txn.amount != self.amount:
            return False
        return self.keyword in normalize(txn.sub_description)

    def split(self, txn: Transaction) -> list[Placement]:
        fixed = sum(
            (amount for _, _, _, amount in self.allocations if amount is not None),
            Decimal("0"),
        )
        remainder = txn.amount - fixed

        placements = []
        for main, sub, description, amount in self.allocations:
            entry = ClassifiedEntry(
                description=description,
                amount=amount if amount is not None else remainder,
            )
            placements.append(Placement(main_category=main, sub_category=sub, entry=entry))

        logger.debug(f"Rule {self.name} split '{txn.display_description}' into {len(placements)}")
        return placements

    @classmethod
    def from_config(cls, rule: SplitRuleConfig) -> "KeywordAmountSplitRule":
        """Build a rule from its configuration block."""
        return cls(
            name=rule.name,
            keyword=rule.keyword,
            amount=rule.amount,
            allocations=[
                (a.main_category, a.sub_category, a.description, a.amount)
                for a in rule.allocations
            ],
        )


def build_split_rules(config: Optional[CategorizerConfig] = None) -> list[SplitRule]:
    """
    Build the ordered split-rule list from configuration.

    Args:
        config: Application configuration; defaults include the
            virgin plus bundle rule

    Returns:
        Enabled rules in configuration order
    """
    config = config or CategorizerConfig()
    rules: list[SplitRule] = []
    for rule in config.split_rules:
        if not rule.enabled:
            continue
        rules.append(KeywordAmountSplitRule.from_config(rule))
        logger.debug(f"Loaded split rule: {rule.name}")
    return rules
