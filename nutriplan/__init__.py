"""NutriPlan: customer profiles and weekly nutritional meal plans for nutritionists."""

__version__ = "1.0.0"
