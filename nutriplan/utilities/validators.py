"""
Input validation schemas using Pydantic for better data integrity.

Error messages are user-facing; the API error handler returns the first one
as the `error` field of the response.
"""
from datetime import date
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from nutriplan.domain.AppSettings import THEME_PALETTES
from nutriplan.domain.Customer import ActivityLevel, Gender, Goal
from nutriplan.domain.MealEntry import MealEntry
from nutriplan.domain.NutritionalPlan import PlanStatus
from nutriplan.domain.Slots import DayOfWeek, MealSlotKey, MealType

_VALID_DAYS = {d.value for d in DayOfWeek}
_VALID_MEALS = {m.value for m in MealType}


def _blank_to_none(v):
    if isinstance(v, str) and not v.strip():
        return None
    return v


def _strip(v):
    return v.strip() if isinstance(v, str) else v


class CustomerFields(BaseModel):
    """Optional customer attributes shared by create and update."""
    email: Optional[str] = Field(None, max_length=200)
    cell_phone: Optional[str] = Field(None, max_length=30)
    gender: Optional[Gender] = None
    birth_date: Optional[date] = None
    weight: Optional[float] = Field(None, gt=0, le=500)
    height: Optional[float] = Field(None, gt=0, le=3)
    body_fat_percentage: Optional[float] = Field(None, ge=0, le=100)
    activity_level: Optional[ActivityLevel] = None
    goal: Optional[Goal] = None
    daily_calorie_target: Optional[int] = Field(None, ge=0, le=10000)
    allergies: Optional[str] = None
    medical_conditions: Optional[str] = None
    medications: Optional[str] = None
    dietary_restrictions: Optional[str] = None
    notes: Optional[str] = None

    @field_validator('email', 'cell_phone', 'gender', 'birth_date', 'weight', 'height', 'body_fat_percentage',
                     'activity_level', 'goal', 'daily_calorie_target', 'allergies', 'medical_conditions',
                     'medications', 'dietary_restrictions', 'notes', mode='before')
    @classmethod
    def empty_as_missing(cls, v):
        """Form posts send empty strings for untouched inputs."""
        return _strip(_blank_to_none(v))


class CustomerInput(CustomerFields):
    id_card: Optional[str] = Field(None, validate_default=True)
    first_name: Optional[str] = Field(None, validate_default=True)
    last_name: Optional[str] = Field(None, validate_default=True)

    @field_validator('id_card')
    @classmethod
    def require_id_card(cls, v):
        if not isinstance(v, str) or not v.strip():
            raise ValueError('La cédula es requerida')
        return v.strip()

    @field_validator('first_name')
    @classmethod
    def require_first_name(cls, v):
        if not isinstance(v, str) or not v.strip():
            raise ValueError('El nombre es requerido')
        return v.strip()

    @field_validator('last_name')
    @classmethod
    def require_last_name(cls, v):
        if not isinstance(v, str) or not v.strip():
            raise ValueError('El apellido es requerido')
        return v.strip()


class CustomerUpdate(CustomerFields):
    """Partial update: only fields present in the payload are applied."""
    id_card: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    @field_validator('id_card')
    @classmethod
    def id_card_not_blank(cls, v):
        if v is None or not v.strip():
            raise ValueError('La cédula no puede estar vacía')
        return v.strip()

    @field_validator('first_name')
    @classmethod
    def first_name_not_blank(cls, v):
        if v is None or not v.strip():
            raise ValueError('El nombre no puede estar vacío')
        return v.strip()

    @field_validator('last_name')
    @classmethod
    def last_name_not_blank(cls, v):
        if v is None or not v.strip():
            raise ValueError('El apellido no puede estar vacío')
        return v.strip()


class MealEntryInput(BaseModel):
    """Schema for one meal entry with optional nutrition facts."""
    day_of_week: DayOfWeek
    meal_type: MealType
    meal_description: str = ""
    calories: Optional[float] = Field(None, ge=0)
    protein_grams: Optional[float] = Field(None, ge=0)
    carbs_grams: Optional[float] = Field(None, ge=0)
    fat_grams: Optional[float] = Field(None, ge=0)
    fiber_grams: Optional[float] = Field(None, ge=0)
    portion_size: Optional[str] = None
    preparation_notes: Optional[str] = None

    @model_validator(mode='after')
    def description_not_blank(self):
        if not self.meal_description.strip():
            raise ValueError(f'Meal description cannot be empty for {self.day_of_week.value} - {self.meal_type.value}')
        self.meal_description = self.meal_description.strip()
        return self

    def to_entry(self) -> MealEntry:
        return MealEntry(**self.model_dump())


def meals_mapping_to_entries(meals: Dict[str, Any]) -> List[MealEntry]:
    """Validate a `{day: {meal: description}}` mapping and turn it into entries (grid order kept)."""
    entries = []
    for day, meal_types in meals.items():
        if day not in _VALID_DAYS:
            raise ValueError(f'Invalid day of week: {day}')
        if not meal_types:
            continue
        if not isinstance(meal_types, dict):
            raise ValueError(f'Invalid meals for {day}')
        for meal_type, description in meal_types.items():
            if meal_type not in _VALID_MEALS:
                raise ValueError(f'Invalid meal type: {meal_type}')
            if not isinstance(description, str) or not description.strip():
                raise ValueError(f'Meal description cannot be empty for {day} - {meal_type}')
            entries.append(MealEntry(day, meal_type, description.strip()))
    return entries


class PlanFields(BaseModel):
    description: Optional[str] = None
    status: Optional[PlanStatus] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    daily_calories: Optional[float] = Field(None, ge=0, le=10000)
    protein_grams: Optional[float] = Field(None, ge=0)
    carbs_grams: Optional[float] = Field(None, ge=0)
    fat_grams: Optional[float] = Field(None, ge=0)
    fiber_grams: Optional[float] = Field(None, ge=0)
    water_liters: Optional[float] = Field(None, ge=0, le=20)
    notes: Optional[str] = None
    meals: Optional[Dict[str, Any]] = None
    meal_entries: Optional[List[MealEntryInput]] = None

    @field_validator('description', 'status', 'start_date', 'end_date', 'daily_calories', 'protein_grams',
                     'carbs_grams', 'fat_grams', 'fiber_grams', 'water_liters', 'notes', mode='before')
    @classmethod
    def empty_as_missing(cls, v):
        return _strip(_blank_to_none(v))

    @field_validator('meals')
    @classmethod
    def validate_meals(cls, v):
        if v is not None:
            meals_mapping_to_entries(v)
        return v

    @field_validator('meal_entries')
    @classmethod
    def no_duplicate_slots(cls, v):
        if v:
            seen = set()
            for item in v:
                slot = MealSlotKey(item.day_of_week, item.meal_type)
                if slot in seen:
                    raise ValueError(f'Duplicate meal entry for {slot.day.value} - {slot.meal_type.value}')
                seen.add(slot)
        return v

    @model_validator(mode='after')
    def dates_in_order(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError('La fecha de fin debe ser posterior a la fecha de inicio')
        return self

    def has_meals(self) -> bool:
        return self.meals is not None or self.meal_entries is not None

    def entries(self) -> List[MealEntry]:
        """Entries from `meal_entries` when given, otherwise from the `meals` mapping."""
        if self.meal_entries is not None:
            return [m.to_entry() for m in self.meal_entries]
        return meals_mapping_to_entries(self.meals or {})

    def plan_attributes(self) -> Dict[str, Any]:
        """Set plan attributes (everything but the meals)."""
        return self.model_dump(exclude_unset=True, exclude={'meals', 'meal_entries'})


class PlanInput(PlanFields):
    customer_id: Optional[str] = Field(None, validate_default=True)
    name: Optional[str] = Field(None, validate_default=True)

    @field_validator('customer_id')
    @classmethod
    def require_customer(cls, v):
        if not isinstance(v, str) or not v.strip():
            raise ValueError('El cliente es requerido')
        return v.strip()

    @field_validator('name')
    @classmethod
    def require_name(cls, v):
        if not isinstance(v, str) or not v.strip():
            raise ValueError('El nombre del plan es requerido')
        return v.strip()


class PlanUpdate(PlanFields):
    name: Optional[str] = None

    @field_validator('name')
    @classmethod
    def name_not_blank(cls, v):
        if v is None or not v.strip():
            raise ValueError('Plan name cannot be empty')
        return v.strip()


class PlanCopyInput(BaseModel):
    name: Optional[str] = None
    customer_id: Optional[str] = None

    @field_validator('name', 'customer_id', mode='before')
    @classmethod
    def empty_as_missing(cls, v):
        return _strip(_blank_to_none(v))


class SettingsInput(BaseModel):
    theme: Optional[str] = None
    completion_counts_blank: Optional[bool] = None

    @field_validator('theme')
    @classmethod
    def known_theme(cls, v):
        if v is not None and v not in THEME_PALETTES:
            raise ValueError(f'Unknown theme palette: {v}')
        return v
