"""Customer domain entity: identity, contact, physical and medical data, with BMI (IMC) derived from weight/height."""
from datetime import date, datetime
from enum import Enum
from typing import Optional
from uuid import uuid4


class Gender(str, Enum):
    MASCULINO = "MASCULINO"
    FEMENINO = "FEMENINO"
    OTRO = "OTRO"


class ActivityLevel(str, Enum):
    SEDENTARIO = "SEDENTARIO"
    LIGERO = "LIGERO"
    MODERADO = "MODERADO"
    ACTIVO = "ACTIVO"
    MUY_ACTIVO = "MUY_ACTIVO"


class Goal(str, Enum):
    PERDER_PESO = "PERDER_PESO"
    MANTENER_PESO = "MANTENER_PESO"
    GANAR_PESO = "GANAR_PESO"
    GANAR_MUSCULO = "GANAR_MUSCULO"
    MEJORAR_SALUD = "MEJORAR_SALUD"


GENDER_LABELS = {
    Gender.MASCULINO: "Masculino",
    Gender.FEMENINO: "Femenino",
    Gender.OTRO: "Otro",
}

ACTIVITY_LABELS = {
    ActivityLevel.SEDENTARIO: "Sedentario",
    ActivityLevel.LIGERO: "Ligero (1-3 días/sem)",
    ActivityLevel.MODERADO: "Moderado (3-5 días/sem)",
    ActivityLevel.ACTIVO: "Activo (6-7 días/sem)",
    ActivityLevel.MUY_ACTIVO: "Muy activo",
}

GOAL_LABELS = {
    Goal.PERDER_PESO: "Perder peso",
    Goal.MANTENER_PESO: "Mantener peso",
    Goal.GANAR_PESO: "Ganar peso",
    Goal.GANAR_MUSCULO: "Ganar músculo",
    Goal.MEJORAR_SALUD: "Mejorar salud",
}

MEDICAL_FIELDS = ("allergies", "dietary_restrictions", "medical_conditions", "medications")


def compute_imc(weight: Optional[float], height: Optional[float]) -> Optional[float]:
    """Body-mass index: weight (kg) / height (m) squared, rounded to 2 decimals.

    Returns None when either measure is missing or not positive.
    """
    if not weight or not height or weight <= 0 or height <= 0:
        return None
    return round(weight / (height * height), 2)


def _enum_or_none(enum_cls, value):
    if value in (None, ""):
        return None
    return enum_cls(value)


def _parse_birth_date(value) -> Optional[date]:
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


class Customer:
    def __init__(self, id_card: str = "", first_name: str = "", last_name: str = "",
                 id: Optional[str] = None, email: Optional[str] = None, cell_phone: Optional[str] = None,
                 gender: Optional[Gender] = None, birth_date: Optional[date] = None,
                 weight: Optional[float] = None, height: Optional[float] = None,
                 body_fat_percentage: Optional[float] = None,
                 activity_level: Optional[ActivityLevel] = None, goal: Optional[Goal] = None,
                 daily_calorie_target: Optional[int] = None,
                 allergies: Optional[str] = None, medical_conditions: Optional[str] = None,
                 medications: Optional[str] = None, dietary_restrictions: Optional[str] = None,
                 notes: Optional[str] = None, imc: Optional[float] = None,
                 created_at: Optional[str] = None, updated_at: Optional[str] = None):
        self.id = id or str(uuid4())
        self.id_card = id_card
        self.first_name = first_name
        self.last_name = last_name
        self.email = email
        self.cell_phone = cell_phone
        self.gender = _enum_or_none(Gender, gender)
        self.birth_date = _parse_birth_date(birth_date)
        self.weight = weight
        self.height = height
        self.body_fat_percentage = body_fat_percentage
        self.activity_level = _enum_or_none(ActivityLevel, activity_level)
        self.goal = _enum_or_none(Goal, goal)
        self.daily_calorie_target = daily_calorie_target
        self.allergies = allergies
        self.medical_conditions = medical_conditions
        self.medications = medications
        self.dietary_restrictions = dietary_restrictions
        self.notes = notes
        # a stored value wins only when no measures are available to derive it
        self.imc = compute_imc(weight, height) if weight and height else imc
        now = datetime.now().isoformat()
        self.created_at = created_at or now
        self.updated_at = updated_at or self.created_at

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def age(self) -> Optional[int]:
        if not self.birth_date:
            return None
        today = date.today()
        years = today.year - self.birth_date.year
        if (today.month, today.day) < (self.birth_date.month, self.birth_date.day):
            years -= 1
        return years

    def has_medical_info(self) -> bool:
        return any(getattr(self, f) for f in MEDICAL_FIELDS)

    def refresh_imc(self):
        self.imc = compute_imc(self.weight, self.height)

    def touch(self):
        self.updated_at = datetime.now().isoformat()

    def __str__(self) -> str:
        return f"{self.full_name} ({self.id_card})"

    __repr__ = __str__

    @staticmethod
    def from_dict(data) -> "Customer":
        '''Creates a Customer from a dictionary. Ignores unknown keys.'''
        d = dict(data) if isinstance(data, dict) else {}
        allowed = {"id", "id_card", "first_name", "last_name", "email", "cell_phone", "gender",
                   "birth_date", "weight", "height", "body_fat_percentage", "activity_level", "goal",
                   "daily_calorie_target", "notes", "imc", "created_at", "updated_at", *MEDICAL_FIELDS}
        return Customer(**{k: v for k, v in d.items() if k in allowed})

    def to_dict(self):
        return {
            "id": self.id,
            "id_card": self.id_card,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "cell_phone": self.cell_phone,
            "gender": self.gender.value if self.gender else None,
            "birth_date": self.birth_date.isoformat() if self.birth_date else None,
            "age": self.age,
            "weight": self.weight,
            "height": self.height,
            "imc": self.imc,
            "body_fat_percentage": self.body_fat_percentage,
            "activity_level": self.activity_level.value if self.activity_level else None,
            "goal": self.goal.value if self.goal else None,
            "daily_calorie_target": self.daily_calorie_target,
            "allergies": self.allergies,
            "medical_conditions": self.medical_conditions,
            "medications": self.medications,
            "dietary_restrictions": self.dietary_restrictions,
            "notes": self.notes,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
