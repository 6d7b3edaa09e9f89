"""
mt940_converter/services/export_service.py

Spreadsheet sink: writes formatter rows into an in-memory .xlsx workbook.
"""
import io
import logging
from typing import Dict, Sequence

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from mt940_converter.utils.formatters import SPREADSHEET_COLUMNS, Cell, SpreadsheetColumn

logger = logging.getLogger(__name__)

SHEET_TITLE = "Transactions"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def build_workbook(
    rows: Sequence[Dict[str, Cell]],
    columns: Sequence[SpreadsheetColumn] = SPREADSHEET_COLUMNS,
) -> bytes:
    """Return .xlsx bytes with a bold header row and one row per dict."""
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE

    for col_idx, column in enumerate(columns, start=1):
        cell = ws.cell(row=1, column=col_idx, value=column.header)
        cell.font = Font(bold=True)
        ws.column_dimensions[get_column_letter(col_idx)].width = column.width

    for row in rows:
        ws.append([row.get(column.key) for column in columns])

    buffer = io.BytesIO()
    wb.save(buffer)
    logger.debug("Built workbook with %d row(s)", len(rows))
    return buffer.getvalue()
