"""Spreadsheet sink: writes a PlanSheet as an .xlsx workbook (openpyxl)."""
import io
import logging

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font
from openpyxl.utils import get_column_letter

from nutriplan.logic.export.errors import SheetGenerationError
from nutriplan.logic.export.tabular import PlanSheet

logger = logging.getLogger(__name__)

SHEET_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def write_sheet_xlsx(sheet: PlanSheet) -> bytes:
    """One worksheet named `sheet.sheet_name`, rows in order, column widths in characters."""
    try:
        wb = Workbook()
        ws = wb.active
        ws.title = sheet.sheet_name
        for row in sheet.rows:
            ws.append(row)
        for idx, width in enumerate(sheet.column_widths, start=1):
            ws.column_dimensions[get_column_letter(idx)].width = width
        for cell in ws[1]:
            cell.font = Font(bold=True)
        for row in ws.iter_rows(min_row=2):
            for cell in row:
                cell.alignment = Alignment(wrap_text=True, vertical="top")
        out = io.BytesIO()
        wb.save(out)
    except Exception as e:
        logger.exception("Workbook generation failed for %s", sheet.filename)
        raise SheetGenerationError() from e
    return out.getvalue()
