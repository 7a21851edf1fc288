"""Spreadsheet export: the weekly grid as a header row plus one row per day."""
from datetime import date
from typing import List, NamedTuple, Optional

from nutriplan.domain.NutritionalPlan import NutritionalPlan
from nutriplan.logic.export.grid_walk import meal_header, walk_grid
from nutriplan.utilities.constants import (
    MEALS_PER_DAY, SHEET_DAY_COLUMN_WIDTH, SHEET_MEAL_COLUMN_WIDTH, SHEET_NAME
)
from nutriplan.utilities.formatting import export_filename


class PlanSheet(NamedTuple):
    rows: List[List[str]]
    column_widths: List[int]
    sheet_name: str
    filename: str

    @property
    def header(self) -> List[str]:
        return self.rows[0]


def build_sheet(plan: NutritionalPlan, on: Optional[date] = None, uppercase: bool = False,
                ext: str = "xlsx") -> PlanSheet:
    """Tabular rendition of the plan grid. Empty slots become empty strings."""
    header = meal_header()
    rows = [header]
    for day_cells in walk_grid(plan.meal_entries, placeholder=""):
        rows.append([day_cells.day.label, *day_cells.cells])
    if uppercase:
        rows[0] = [h.upper() for h in header]
        for row in rows[1:]:
            row[0] = row[0].upper()
    widths = [SHEET_DAY_COLUMN_WIDTH] + [SHEET_MEAL_COLUMN_WIDTH] * MEALS_PER_DAY
    return PlanSheet(rows, widths, SHEET_NAME, export_filename(plan.name, ext, on=on))


__all__ = ["PlanSheet", "build_sheet"]
