"""Text and currency helpers shared by the matcher, report and reconciler."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, getcontext, localcontext
from typing import Optional
import re

_NON_WORD = re.compile(r"[^\w\s]", re.ASCII)
_WHITESPACE = re.compile(r"\s+")
_NON_NUMERIC = re.compile(r"[^\d.\-]+")

CENT = Decimal("0.01")


def normalize(text: str) -> str:
    """
    Canonicalize a description or keyword for substring matching.

    Lower-cases, drops punctuation, collapses whitespace runs and trims,
    so "Tim Hortons #12" and "tim  hortons 12" compare equal.
    """
    text = _NON_WORD.sub("", text.lower())
    return _WHITESPACE.sub(" ", text).strip()


def parse_decimal(value: Optional[str]) -> Optional[Decimal]:
    """
    Parse a finite decimal, returning None for blank or malformed input.

    Values too large to round to cents within the decimal context precision
    are treated as malformed.
    """
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    try:
        number = Decimal(value)
    except InvalidOperation:
        return None
    if not number.is_finite():
        return None
    # quantize(CENT) needs the integer digits plus two decimals to fit
    if number.adjusted() >= getcontext().prec - 2:
        return None
    return number


def parse_currency_cell(cell) -> Optional[Decimal]:
    """
    Read an amount back out of a rendered report cell.

    Everything except digits, "." and "-" is stripped first, so "$ -54.30"
    reads as -54.30 and "$ -" (an empty total) reads as nothing.
    """
    if isinstance(cell, Decimal):
        return cell
    if isinstance(cell, (int, float)) and not isinstance(cell, bool):
        return parse_decimal(str(cell))
    if not isinstance(cell, str):
        return None
    return parse_decimal(_NON_NUMERIC.sub("", cell))


def format_currency(amount: Decimal) -> str:
    """Render an amount as a report cell, e.g. ``$ -54.30``."""
    with localcontext() as ctx:
        # Column totals can outgrow the precision of their bounded entries
        ctx.prec = max(ctx.prec, amount.adjusted() + 3)
        return f"$ {amount.quantize(CENT, rounding=ROUND_HALF_UP)}"


def format_total(total: Decimal) -> str:
    """Render a column total; an exact zero renders as ``$ -``."""
    if total == 0:
        return "$ -"
    return format_currency(total)
