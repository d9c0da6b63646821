"""CSV serialization of report tables."""

from pathlib import Path
import logging

from ..models.transaction import Cell, ReportTable
from ..utils.exceptions import ReportGenerationError

logger = logging.getLogger(__name__)


def _format_cell(cell: Cell) -> str:
    if isinstance(cell, str):
        return f'"{cell}"' if "," in cell else cell
    return str(cell)


def to_csv_text(table: ReportTable) -> str:
    """
    Serialize a report table to CSV text.

    Cells are joined with commas; string cells containing a comma are
    wrapped in double quotes. Rows are separated by newlines.
    """
    return "\n".join(",".join(_format_cell(cell) for cell in row) for row in table)


def write_csv(table: ReportTable, output_path: Path) -> Path:
    """
    Write a report table to a CSV file.

    Raises:
        ReportGenerationError: If the file cannot be written
    """
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(to_csv_text(table))
    except OSError as e:
        raise ReportGenerationError(f"Failed to write CSV report {output_path}: {e}") from e

    logger.info(f"CSV report saved: {output_path}")
    return output_path
