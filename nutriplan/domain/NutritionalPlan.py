"""NutritionalPlan domain entity: plan metadata, nutrition targets and its weekly meal entries."""
import logging
from datetime import date, datetime
from enum import Enum
from typing import List, Optional
from uuid import uuid4

from nutriplan.domain.MealEntry import MealEntry

logger = logging.getLogger(__name__)

TARGET_FIELDS = ("daily_calories", "protein_grams", "carbs_grams", "fat_grams", "fiber_grams", "water_liters")


class PlanStatus(str, Enum):
    BORRADOR = "BORRADOR"
    ACTIVO = "ACTIVO"
    PAUSADO = "PAUSADO"
    COMPLETADO = "COMPLETADO"
    CANCELADO = "CANCELADO"

    @property
    def label(self) -> str:
        return self.value.capitalize()


def _parse_date(value) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        logger.warning("Ignoring unparseable plan date %r", value)
        return None


class NutritionalPlan:
    def __init__(self, name: str = "", description: Optional[str] = None, id: Optional[str] = None,
                 customer_id: Optional[str] = None, status: PlanStatus = PlanStatus.ACTIVO,
                 start_date: Optional[date] = None, end_date: Optional[date] = None,
                 daily_calories: Optional[float] = None, protein_grams: Optional[float] = None,
                 carbs_grams: Optional[float] = None, fat_grams: Optional[float] = None,
                 fiber_grams: Optional[float] = None, water_liters: Optional[float] = None,
                 notes: Optional[str] = None, meal_entries: Optional[List[MealEntry]] = None,
                 created_at: Optional[str] = None, updated_at: Optional[str] = None):
        self.id = id or str(uuid4())
        self.name = name
        self.description = description
        self.customer_id = customer_id
        self.status = PlanStatus(status) if status else PlanStatus.ACTIVO
        self.start_date = _parse_date(start_date)
        self.end_date = _parse_date(end_date)
        self.daily_calories = daily_calories
        self.protein_grams = protein_grams
        self.carbs_grams = carbs_grams
        self.fat_grams = fat_grams
        self.fiber_grams = fiber_grams
        self.water_liters = water_liters
        self.notes = notes
        self.meal_entries = meal_entries[:] if meal_entries else []
        now = datetime.now().isoformat()
        self.created_at = created_at or now
        self.updated_at = updated_at or self.created_at

    def __str__(self) -> str:
        return f"{self.name} ({self.status.label}) - {len(self.meal_entries)} meals"

    __repr__ = __str__

    def has_targets(self) -> bool:
        return any(getattr(self, f) for f in TARGET_FIELDS)

    def replace_entries(self, entries: List[MealEntry]):
        '''Swap the whole weekly grid; entries are re-owned by this plan.'''
        for entry in entries:
            entry.nutritional_plan_id = self.id
        self.meal_entries = list(entries)

    def touch(self):
        self.updated_at = datetime.now().isoformat()

    @staticmethod
    def from_dict(data) -> "NutritionalPlan":
        '''Creates a plan from a stored dictionary. Malformed meal entries are skipped.'''
        d = dict(data) if isinstance(data, dict) else {}
        entries = []
        for raw in d.get("meal_entries") or []:
            try:
                entries.append(MealEntry.from_dict(raw))
            except (ValueError, TypeError) as e:
                logger.warning("Skipping malformed meal entry in plan %s: %s", d.get("id"), e)
        allowed = {"id", "name", "description", "customer_id", "status", "start_date", "end_date",
                   "notes", "created_at", "updated_at", *TARGET_FIELDS}
        filtered = {k: v for k, v in d.items() if k in allowed}
        return NutritionalPlan(meal_entries=entries, **filtered)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "customer_id": self.customer_id,
            "status": self.status.value,
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
            **{f: getattr(self, f) for f in TARGET_FIELDS},
            "notes": self.notes,
            "meal_entries": [m.to_dict() for m in self.meal_entries],
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
