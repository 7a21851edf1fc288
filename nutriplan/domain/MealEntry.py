"""MealEntry domain entity: one populated cell of a plan's weekly grid plus optional nutrition facts."""
from datetime import datetime
from typing import Optional
from uuid import uuid4

from nutriplan.domain.Slots import DayOfWeek, MealType, MealSlotKey

NUTRITION_FIELDS = ("calories", "protein_grams", "carbs_grams", "fat_grams", "fiber_grams")
TEXT_FIELDS = ("portion_size", "preparation_notes")


class MealEntry:
    def __init__(self, day_of_week: DayOfWeek, meal_type: MealType, meal_description: str = "",
                 id: Optional[str] = None, nutritional_plan_id: Optional[str] = None,
                 calories: Optional[float] = None, protein_grams: Optional[float] = None,
                 carbs_grams: Optional[float] = None, fat_grams: Optional[float] = None,
                 fiber_grams: Optional[float] = None, portion_size: Optional[str] = None,
                 preparation_notes: Optional[str] = None,
                 created_at: Optional[str] = None, updated_at: Optional[str] = None):
        self.id = id or str(uuid4())
        self.day_of_week = DayOfWeek(day_of_week)
        self.meal_type = MealType(meal_type)
        self.meal_description = meal_description or ""
        self.nutritional_plan_id = nutritional_plan_id
        self.calories = calories
        self.protein_grams = protein_grams
        self.carbs_grams = carbs_grams
        self.fat_grams = fat_grams
        self.fiber_grams = fiber_grams
        self.portion_size = portion_size
        self.preparation_notes = preparation_notes
        now = datetime.now().isoformat()
        self.created_at = created_at or now
        self.updated_at = updated_at or self.created_at

    @property
    def slot(self) -> MealSlotKey:
        return MealSlotKey(self.day_of_week, self.meal_type)

    def __str__(self) -> str:
        return f"{self.day_of_week.label} / {self.meal_type.label}: {self.meal_description}"

    __repr__ = __str__

    def copy_for(self, plan_id: str) -> "MealEntry":
        '''Return a fresh entry (new id) with the same content, owned by another plan.'''
        data = self.to_dict()
        for key in ("id", "created_at", "updated_at"):
            data.pop(key)
        data["nutritional_plan_id"] = plan_id
        return MealEntry.from_dict(data)

    @staticmethod
    def from_dict(data) -> "MealEntry":
        '''Creates a MealEntry from a dictionary. Ignores unknown keys; raises ValueError for
        day/meal values outside the enumerations.'''
        d = dict(data) if isinstance(data, dict) else {}
        allowed = {"id", "day_of_week", "meal_type", "meal_description", "nutritional_plan_id",
                   "created_at", "updated_at", *NUTRITION_FIELDS, *TEXT_FIELDS}
        filtered = {k: v for k, v in d.items() if k in allowed}
        if "day_of_week" not in filtered or "meal_type" not in filtered:
            raise ValueError("meal entry needs day_of_week and meal_type")
        return MealEntry(**filtered)

    def to_dict(self):
        return {
            "id": self.id,
            "day_of_week": self.day_of_week.value,
            "meal_type": self.meal_type.value,
            "meal_description": self.meal_description,
            "nutritional_plan_id": self.nutritional_plan_id,
            "calories": self.calories,
            "protein_grams": self.protein_grams,
            "carbs_grams": self.carbs_grams,
            "fat_grams": self.fat_grams,
            "fiber_grams": self.fiber_grams,
            "portion_size": self.portion_size,
            "preparation_notes": self.preparation_notes,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
