"""Shared traversal used by every exporter: days outer, meals inner, enum order."""
from typing import Iterator, List, NamedTuple, Sequence

from nutriplan.domain.MealEntry import MealEntry
from nutriplan.domain.Slots import DAYS, MEAL_TYPES, DayOfWeek, MealSlotKey, MealType
from nutriplan.logic.grid.plan_grid import resolve


class DayCells(NamedTuple):
    day: DayOfWeek
    cells: List[str]

    def filled(self):
        """(meal_type, text) pairs for the non-blank cells of the day."""
        return [(mt, text) for mt, text in zip(MEAL_TYPES, self.cells) if text.strip()]


def walk_grid(meals: Sequence[MealEntry], placeholder: str = "") -> Iterator[DayCells]:
    for day in DAYS:
        cells = []
        for meal_type in MEAL_TYPES:
            text = resolve(meals, MealSlotKey(day, meal_type))
            cells.append(text if text else placeholder)
        yield DayCells(day, cells)


def meal_header(day_column: str = "Día") -> List[str]:
    return [day_column, *(mt.label for mt in MEAL_TYPES)]


__all__ = ["DayCells", "walk_grid", "meal_header", "MealType"]
