"""Resolvers for transactions that no keyword matched."""

from typing import Callable, Mapping, Optional
import logging

import click

logger = logging.getLogger(__name__)

# Takes "<sub-description> <description>", returns a sub-category label
Resolver = Callable[[str], Optional[str]]


def no_op_resolver(description: str) -> str:
    """Never resolves; for contexts without an interactive user."""
    return ""


def console_resolver(description: str) -> str:
    """Ask on the console which sub-category a transaction belongs to."""
    return click.prompt(
        f'No category found for: "{description}". Please enter a category',
        default="",
        show_default=False,
    )


def mapping_resolver(answers: Mapping[str, str], default: str = "") -> Resolver:
    """
    Build a resolver that answers from a fixed mapping.

    Args:
        answers: Search text to sub-category label
        default: Label returned for anything not in the mapping
    """

    def resolve(description: str) -> str:
        answer = answers.get(description, default)
        logger.debug(f"Resolved '{description}' to '{answer}'")
        return answer

    return resolve
