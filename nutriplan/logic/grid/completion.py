"""Plan completion metric: how much of the 35-slot week is filled in."""
from typing import NamedTuple, Sequence

from nutriplan.domain.MealEntry import MealEntry
from nutriplan.utilities.constants import TOTAL_MEAL_SLOTS

__all__ = ["CompletionMetric", "completion"]


class CompletionMetric(NamedTuple):
    count: int
    total: int
    fraction: float
    percentage: int

    @property
    def is_complete(self) -> bool:
        return self.count >= self.total


def completion(meals: Sequence[MealEntry], count_blank: bool = True) -> CompletionMetric:
    """Completion of a plan's week.

    With count_blank (the default) every stored entry counts, blank or not.
    Otherwise only distinct slots carrying a non-blank description count.
    The count is clamped to [0, 35] so the percentage stays within [0, 100].
    """
    if count_blank:
        count = len(meals)
    else:
        count = len({m.slot for m in meals if (m.meal_description or "").strip()})
    count = max(0, min(count, TOTAL_MEAL_SLOTS))
    fraction = count / TOTAL_MEAL_SLOTS
    return CompletionMetric(count, TOTAL_MEAL_SLOTS, fraction, round(100 * count / TOTAL_MEAL_SLOTS))
