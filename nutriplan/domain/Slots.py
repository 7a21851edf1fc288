"""Weekly grid coordinates: day of week, meal type and the (day, meal) slot key."""
from enum import Enum
from typing import Iterator, NamedTuple


class DayOfWeek(str, Enum):
    LUNES = "LUNES"
    MARTES = "MARTES"
    MIERCOLES = "MIERCOLES"
    JUEVES = "JUEVES"
    VIERNES = "VIERNES"
    SABADO = "SABADO"
    DOMINGO = "DOMINGO"

    @property
    def label(self) -> str:
        return _DAY_LABELS[self]


class MealType(str, Enum):
    DESAYUNO = "DESAYUNO"
    COLACION_1 = "COLACION_1"
    ALMUERZO = "ALMUERZO"
    COLACION_2 = "COLACION_2"
    CENA = "CENA"

    @property
    def label(self) -> str:
        return _MEAL_LABELS[self]

    @property
    def css_class(self) -> str:
        return _MEAL_CSS[self]


_DAY_LABELS = {
    DayOfWeek.LUNES: "Lunes",
    DayOfWeek.MARTES: "Martes",
    DayOfWeek.MIERCOLES: "Miércoles",
    DayOfWeek.JUEVES: "Jueves",
    DayOfWeek.VIERNES: "Viernes",
    DayOfWeek.SABADO: "Sábado",
    DayOfWeek.DOMINGO: "Domingo",
}

_MEAL_LABELS = {
    MealType.DESAYUNO: "Desayuno",
    MealType.COLACION_1: "Colación",
    MealType.ALMUERZO: "Almuerzo",
    MealType.COLACION_2: "Colación",
    MealType.CENA: "Cena",
}

_MEAL_CSS = {
    MealType.DESAYUNO: "meal-breakfast",
    MealType.COLACION_1: "meal-snack",
    MealType.ALMUERZO: "meal-lunch",
    MealType.COLACION_2: "meal-snack",
    MealType.CENA: "meal-dinner",
}

# Enum declaration order is the display order everywhere
DAYS = tuple(DayOfWeek)
MEAL_TYPES = tuple(MealType)


class MealSlotKey(NamedTuple):
    """One cell of the 7x5 weekly grid."""
    day: DayOfWeek
    meal_type: MealType

    @classmethod
    def of(cls, day, meal_type) -> "MealSlotKey":
        '''Build a key from enum members or their raw string values (raises ValueError on unknown values).'''
        return cls(DayOfWeek(day), MealType(meal_type))

    @classmethod
    def all(cls) -> Iterator["MealSlotKey"]:
        '''Yield the 35 slots day-outer, meal-inner.'''
        for day in DAYS:
            for meal_type in MEAL_TYPES:
                yield cls(day, meal_type)

    def __str__(self) -> str:
        return f"{self.day.value}/{self.meal_type.value}"


__all__ = ["DayOfWeek", "MealType", "MealSlotKey", "DAYS", "MEAL_TYPES"]
