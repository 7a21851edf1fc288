"""Weekly plan grid: resolves the 7x5 (day, meal) slots of a plan's meal entries.

The grid is a pure view over a snapshot of entries. In edit mode it owns no
state: values are read and written through callbacks supplied by the caller
(usually a MealDraft bound to the edit form).
"""
import logging
from collections import Counter
from typing import Callable, Dict, Iterable, Iterator, List, Mapping, NamedTuple, Optional, Sequence

from nutriplan.domain.MealEntry import MealEntry
from nutriplan.domain.Slots import DAYS, MEAL_TYPES, DayOfWeek, MealSlotKey, MealType
from nutriplan.utilities.constants import EMPTY_SLOT_PLACEHOLDER

logger = logging.getLogger(__name__)

FORM_FIELD_PREFIX = "meal"

__all__ = ["resolve", "find_duplicate_slots", "GridCell", "GridRow", "PlanGrid", "MealDraft",
           "form_field_name"]


def resolve(meals: Sequence[MealEntry], slot: MealSlotKey) -> str:
    """Description of the first entry occupying `slot`, or "" when the slot is empty.

    Duplicates are tolerated: the first match in input order wins and a warning is logged.
    """
    found = None
    extra = 0
    for entry in meals:
        if entry.slot != slot:
            continue
        if found is None:
            found = entry
        else:
            extra += 1
    if found is None:
        return ""
    if extra:
        logger.warning("Slot %s has %d duplicate entries; using the first one", slot, extra)
    return found.meal_description or ""


def find_duplicate_slots(meals: Iterable) -> List[MealSlotKey]:
    """Slots that appear more than once, in first-seen order.

    Accepts MealEntry objects or anything exposing `.slot`.
    """
    counts = Counter(m.slot for m in meals)
    return [slot for slot, n in counts.items() if n > 1]


class GridCell(NamedTuple):
    slot: MealSlotKey
    meal_type: MealType
    description: str

    @property
    def is_empty(self) -> bool:
        return not self.description.strip()

    @property
    def display(self) -> str:
        return self.description if self.description else EMPTY_SLOT_PLACEHOLDER


class GridRow(NamedTuple):
    day: DayOfWeek
    cells: List[GridCell]


class PlanGrid:
    def __init__(self, meals: Optional[Sequence[MealEntry]] = None, edit_mode: bool = False,
                 get_value: Optional[Callable[[DayOfWeek, MealType], str]] = None,
                 on_change: Optional[Callable[[DayOfWeek, MealType, str], None]] = None):
        if edit_mode and get_value is None:
            raise ValueError("edit mode needs a value getter")
        self.meals = list(meals or [])
        self.edit_mode = edit_mode
        self._get_value = get_value
        self._on_change = on_change

    @classmethod
    def for_draft(cls, draft: "MealDraft") -> "PlanGrid":
        return cls(edit_mode=True, get_value=draft.get, on_change=draft.set)

    def description(self, day: DayOfWeek, meal_type: MealType) -> str:
        if self.edit_mode:
            return self._get_value(day, meal_type) or ""
        return resolve(self.meals, MealSlotKey(day, meal_type))

    def display(self, day: DayOfWeek, meal_type: MealType) -> str:
        return self.description(day, meal_type) or EMPTY_SLOT_PLACEHOLDER

    def change(self, day: DayOfWeek, meal_type: MealType, value: str):
        # read mode never writes
        if self.edit_mode and self._on_change is not None:
            self._on_change(day, meal_type, value)

    def rows(self) -> Iterator[GridRow]:
        for day in DAYS:
            cells = [GridCell(MealSlotKey(day, mt), mt, self.description(day, mt)) for mt in MEAL_TYPES]
            yield GridRow(day, cells)

    @property
    def meal_types(self):
        return MEAL_TYPES


def form_field_name(day: DayOfWeek, meal_type: MealType) -> str:
    """Name of the edit-form textarea bound to one slot, e.g. `meal__LUNES__DESAYUNO`."""
    return f"{FORM_FIELD_PREFIX}__{day.value}__{meal_type.value}"


class MealDraft:
    """Editable day -> meal -> text store owned by the edit page."""

    def __init__(self, values: Optional[Mapping] = None):
        self._values: Dict[DayOfWeek, Dict[MealType, str]] = {day: {} for day in DAYS}
        for day, meals in (values or {}).items():
            for meal_type, text in (meals or {}).items():
                self.set(DayOfWeek(day), MealType(meal_type), text)

    @classmethod
    def from_entries(cls, entries: Sequence[MealEntry]) -> "MealDraft":
        draft = cls()
        for slot in MealSlotKey.all():
            text = resolve(entries, slot)
            if text:
                draft.set(slot.day, slot.meal_type, text)
        return draft

    @classmethod
    def from_form(cls, form: Mapping[str, str]) -> "MealDraft":
        draft = cls()
        for slot in MealSlotKey.all():
            value = form.get(form_field_name(slot.day, slot.meal_type))
            if value:
                draft.set(slot.day, slot.meal_type, value)
        return draft

    def get(self, day: DayOfWeek, meal_type: MealType) -> str:
        return self._values[DayOfWeek(day)].get(MealType(meal_type), "")

    def set(self, day: DayOfWeek, meal_type: MealType, value: Optional[str]):
        self._values[DayOfWeek(day)][MealType(meal_type)] = value or ""

    def to_payload(self) -> Dict[str, Dict[str, str]]:
        """`{day: {meal: text}}` with trimmed text; blank slots and days are dropped."""
        payload = {}
        for day in DAYS:
            meals = {mt.value: self.get(day, mt).strip() for mt in MEAL_TYPES if self.get(day, mt).strip()}
            if meals:
                payload[day.value] = meals
        return payload

    def __len__(self) -> int:
        return sum(1 for day in DAYS for mt in MEAL_TYPES if self.get(day, mt).strip())
