"""Shared fixtures: a temporary data directory and small builders for plans and customers."""
import shutil
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from nutriplan.domain.Customer import Customer
from nutriplan.domain.MealEntry import MealEntry
from nutriplan.domain.NutritionalPlan import NutritionalPlan
from nutriplan.infra import paths


def make_entries(*triples):
    """MealEntry list from (day, meal_type, description) tuples."""
    return [MealEntry(day, meal, text) for day, meal, text in triples]


def make_plan(*triples, **kwargs):
    kwargs.setdefault("name", "Plan de Pérdida de Peso")
    plan = NutritionalPlan(**kwargs)
    plan.replace_entries(make_entries(*triples))
    return plan


def make_customer(**kwargs):
    defaults = dict(id_card="1712345678", first_name="Ana", last_name="Torres", cell_phone="0991234567")
    defaults.update(kwargs)
    return Customer(**defaults)


class TempDataTestCase(unittest.TestCase):
    """Points every repository at JSON files inside a fresh temp directory."""

    def setUp(self):
        self.data_dir = Path(tempfile.mkdtemp(prefix="nutriplan_test_"))
        self.addCleanup(shutil.rmtree, self.data_dir, ignore_errors=True)
        for name, filename in (("CUSTOMERS_FILE", "customers.json"), ("PLANS_FILE", "plans.json"),
                               ("SETTINGS_FILE", "settings.json")):
            patcher = mock.patch.object(paths, name, self.data_dir / filename)
            patcher.start()
            self.addCleanup(patcher.stop)
