"""Report table assembly and export."""

from .builder import ReportBuilder, recompute_totals
from .csv_writer import to_csv_text, write_csv
from .excel_generator import ExcelReportGenerator

__all__ = [
    "ReportBuilder",
    "recompute_totals",
    "to_csv_text",
    "write_csv",
    "ExcelReportGenerator",
]
