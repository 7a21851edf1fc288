import io
import unittest
from datetime import date
from unittest import mock

from openpyxl import load_workbook

from nutriplan.infra.sheet_utils import write_sheet_xlsx
from nutriplan.logic.export.errors import SheetGenerationError
from nutriplan.logic.export.tabular import build_sheet
from nutriplan.tests.support import make_plan


def _open(content):
    return load_workbook(io.BytesIO(content)).active


class TestTabularExport(unittest.TestCase):
    def setUp(self):
        self.plan = make_plan(("LUNES", "DESAYUNO", "Eggs"))

    def test_rows_and_placeholders(self):
        sheet = build_sheet(self.plan, on=date(2026, 1, 2))
        self.assertEqual(sheet.header, ["Día", "Desayuno", "Colación", "Almuerzo", "Colación", "Cena"])
        self.assertEqual(len(sheet.rows), 8)
        self.assertEqual(sheet.rows[1], ["Lunes", "Eggs", "", "", "", ""])
        self.assertEqual(sheet.rows[7], ["Domingo", "", "", "", "", ""])
        self.assertEqual(sheet.column_widths, [12, 25, 25, 25, 25, 25])
        self.assertEqual(sheet.sheet_name, "Plan Nutricional")
        self.assertEqual(sheet.filename, "Plan_de_Pérdida_de_Peso_2026-01-02.xlsx")

    def test_uppercase_variant(self):
        sheet = build_sheet(self.plan, uppercase=True)
        self.assertEqual(sheet.header[0], "DÍA")
        self.assertEqual(sheet.rows[1][0], "LUNES")
        self.assertEqual(sheet.rows[3][0], "MIÉRCOLES")

    def test_workbook_cells(self):
        ws = _open(write_sheet_xlsx(build_sheet(self.plan)))
        self.assertEqual(ws.title, "Plan Nutricional")
        self.assertEqual([c.value for c in ws[1]], ["Día", "Desayuno", "Colación", "Almuerzo", "Colación", "Cena"])
        self.assertEqual(ws["A2"].value, "Lunes")
        self.assertEqual(ws["B2"].value, "Eggs")
        self.assertFalse(ws["C2"].value)
        self.assertEqual(ws.max_row, 8)

    def test_workbook_applies_widths_and_sheet_name(self):
        sheet = build_sheet(self.plan)
        ws = _open(write_sheet_xlsx(sheet))
        self.assertEqual([ws.column_dimensions[col].width for col in "ABCDEF"], [12, 25, 25, 25, 25, 25])

        custom = _open(write_sheet_xlsx(sheet._replace(column_widths=[5, 6, 7, 8, 9, 10], sheet_name="Semana 1")))
        self.assertEqual(custom.title, "Semana 1")
        self.assertEqual(custom.column_dimensions["A"].width, 5)
        self.assertEqual(custom.column_dimensions["F"].width, 10)

    def test_workbook_failure_raises_export_error(self):
        with mock.patch("nutriplan.infra.sheet_utils.Workbook", side_effect=RuntimeError("disk")):
            with self.assertRaises(SheetGenerationError) as ctx:
                write_sheet_xlsx(build_sheet(self.plan))
        self.assertEqual(ctx.exception.kind, "sheet")


if __name__ == "__main__":
    unittest.main()
