"""
Excel export for category report tables.
Writes the report table to a single formatted worksheet.
"""

from decimal import Decimal
from pathlib import Path
from typing import Optional
import logging

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from ..config import CategorizerConfig
from ..models.transaction import ReportTable
from ..utils.exceptions import ReportGenerationError

logger = logging.getLogger(__name__)

# Style definitions
HEADER_FILL = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
HEADER_FONT = Font(color="FFFFFF", bold=True)
SUBHEADER_FILL = PatternFill(start_color="D9E1F2", end_color="D9E1F2", fill_type="solid")
SUBHEADER_FONT = Font(bold=True)
TOTAL_FILL = PatternFill(start_color="FFEB9C", end_color="FFEB9C", fill_type="solid")
TOTAL_FONT = Font(bold=True)
THIN_BORDER = Border(
    left=Side(style="thin"),
    right=Side(style="thin"),
    top=Side(style="thin"),
    bottom=Side(style="thin"),
)


class ExcelReportGenerator:
    """Generates an Excel workbook from a report table."""

    def __init__(self, config: Optional[CategorizerConfig] = None):
        """
        Initialize the report generator.

        Args:
            config: Application configuration
        """
        self.config = config or CategorizerConfig()
        self.sheet_name = self.config.output.excel_sheet_name

    def generate_report(self, table: ReportTable, output_path: Path) -> Path:
        """
        Write the report table to an Excel file.

        Args:
            table: Report table (headers, body, totals)
            output_path: Path for output file

        Returns:
            Path to generated report

        Raises:
            ReportGenerationError: If the workbook cannot be saved
        """
        logger.info(f"Generating Excel report: {output_path}")

        wb = Workbook()
        ws = wb.active
        ws.title = self.sheet_name

        for row_num, row in enumerate(table, start=1):
            for col, value in enumerate(row, start=1):
                if isinstance(value, Decimal):
                    value = float(value)
                cell = ws.cell(row=row_num, column=col, value=value)
                cell.border = THIN_BORDER

        self._style_rows(ws, table)
        self._merge_category_headers(ws, table)
        self._auto_fit_columns(ws)

        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            wb.save(output_path)
        except OSError as e:
            raise ReportGenerationError(f"Failed to save Excel report {output_path}: {e}") from e

        logger.info(f"Report saved: {output_path}")
        return output_path

    def _style_rows(self, ws: Worksheet, table: ReportTable) -> None:
        """Highlight the two header rows and the totals row."""
        if not table:
            return

        width = max(len(row) for row in table)
        styled = [(1, HEADER_FILL, HEADER_FONT)]
        if len(table) > 1:
            styled.append((2, SUBHEADER_FILL, SUBHEADER_FONT))
        if len(table) > 2:
            styled.append((len(table), TOTAL_FILL, TOTAL_FONT))

        for row_num, fill, font in styled:
            for col in range(1, width + 1):
                cell = ws.cell(row=row_num, column=col)
                cell.fill = fill
                cell.font = font

    def _merge_category_headers(self, ws: Worksheet, table: ReportTable) -> None:
        """Span each sub-category name over its Description/Amount pair."""
        if not table:
            return

        header = table[0]
        for col in range(2, len(header) + 1, 2):
            if col + 1 > len(header):
                break
            ws.merge_cells(start_row=1, start_column=col, end_row=1, end_column=col + 1)
            ws.cell(row=1, column=col).alignment = Alignment(horizontal="center")

    def _auto_fit_columns(self, ws: Worksheet) -> None:
        """Auto-fit column widths based on content."""
        for column_cells in ws.columns:
            max_length = 0
            column = get_column_letter(column_cells[0].column)

            for cell in column_cells:
                if cell.value is not None:
                    max_length = max(max_length, len(str(cell.value)))

            ws.column_dimensions[column].width = min(max_length + 2, 50)
