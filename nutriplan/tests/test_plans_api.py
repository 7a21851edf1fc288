import unittest
from fastapi.testclient import TestClient

from nutriplan.api.api_run import app
from nutriplan.tests.support import TempDataTestCase


class TestPlansAPI(TempDataTestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def setUp(self):
        super().setUp()
        resp = self.client.post("/api/customers", json={"id_card": "1712345678", "first_name": "Ana",
                                                        "last_name": "Torres"})
        self.customer_id = resp.json()["data"]["id"]

    def _create(self, **overrides):
        payload = {"customer_id": self.customer_id, "name": "  Plan de Pérdida de Peso ",
                   "meals": {"LUNES": {"DESAYUNO": " Eggs ", "CENA": "Sopa"}, "MARTES": {"ALMUERZO": "Arroz"}}}
        payload.update(overrides)
        return self.client.post("/api/plans", json=payload)

    def test_create_with_meals_mapping(self):
        resp = self._create()
        self.assertEqual(resp.status_code, 201, resp.text)
        data = resp.json()["data"]
        self.assertEqual(data["name"], "Plan de Pérdida de Peso")
        self.assertEqual(data["status"], "ACTIVO")
        self.assertEqual(data["customer"]["id"], self.customer_id)
        self.assertEqual(len(data["meal_entries"]), 3)
        self.assertEqual(data["meal_entries"][0]["meal_description"], "Eggs")
        self.assertTrue(all(m["nutritional_plan_id"] == data["id"] for m in data["meal_entries"]))
        self.assertEqual(data["completion"], {"count": 3, "total": 35, "percentage": 9})

    def test_customer_required_and_must_exist(self):
        resp = self._create(customer_id="")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "El cliente es requerido")
        resp = self._create(customer_id="ghost")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json(), {"success": False, "error": "Cliente no encontrado", "code": "NOT_FOUND"})

    def test_name_required(self):
        resp = self._create(name=" ")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "El nombre del plan es requerido")

    def test_invalid_meals(self):
        cases = [
            ({"FUNDAY": {"DESAYUNO": "x"}}, "Invalid day of week: FUNDAY"),
            ({"LUNES": {"BRUNCH": "x"}}, "Invalid meal type: BRUNCH"),
            ({"LUNES": {"CENA": "  "}}, "Meal description cannot be empty for LUNES - CENA"),
        ]
        for meals, message in cases:
            with self.subTest(message=message):
                resp = self._create(meals=meals)
                self.assertEqual(resp.status_code, 400)
                self.assertEqual(resp.json()["error"], message)

    def test_meal_entries_list_rejects_duplicate_slots(self):
        entries = [{"day_of_week": "LUNES", "meal_type": "DESAYUNO", "meal_description": "Eggs", "calories": 250},
                   {"day_of_week": "LUNES", "meal_type": "DESAYUNO", "meal_description": "Toast"}]
        resp = self._create(meals=None, meal_entries=entries)
        self.assertEqual(resp.status_code, 400)
        self.assertIn("Duplicate meal entry for LUNES - DESAYUNO", resp.json()["error"])

        resp = self._create(meals=None, meal_entries=entries[:1])
        self.assertEqual(resp.status_code, 201, resp.text)
        self.assertEqual(resp.json()["data"]["meal_entries"][0]["calories"], 250)

    def test_update_replaces_meals_only_when_given(self):
        plan = self._create().json()["data"]
        resp = self.client.put(f"/api/plans/{plan['id']}", json={"description": "Nueva"})
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(len(resp.json()["data"]["meal_entries"]), 3)

        resp = self.client.put(f"/api/plans/{plan['id']}", json={"meals": {"DOMINGO": {"CENA": "Pescado"}}})
        entries = resp.json()["data"]["meal_entries"]
        self.assertEqual([(m["day_of_week"], m["meal_type"]) for m in entries], [("DOMINGO", "CENA")])
        self.assertEqual(resp.json()["data"]["description"], "Nueva")

        resp = self.client.put(f"/api/plans/{plan['id']}", json={"name": ""})
        self.assertEqual(resp.json()["error"], "Plan name cannot be empty")

    def test_get_list_and_delete(self):
        plan = self._create().json()["data"]
        self.assertEqual(self.client.get(f"/api/plans/{plan['id']}").status_code, 200)
        listed = self.client.get(f"/api/plans?customer_id={self.customer_id}").json()["data"]
        self.assertEqual([p["id"] for p in listed], [plan["id"]])
        self.assertEqual(self.client.get("/api/plans?customer_id=other").json()["data"], [])
        self.assertEqual(self.client.delete(f"/api/plans/{plan['id']}").status_code, 200)
        resp = self.client.get(f"/api/plans/{plan['id']}")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["error"], "Plan nutricional no encontrado")

    def test_copy_plan(self):
        plan = self._create(status="PAUSADO").json()["data"]
        resp = self.client.post(f"/api/plans/{plan['id']}/copy")
        self.assertEqual(resp.status_code, 201, resp.text)
        clone = resp.json()["data"]
        self.assertNotEqual(clone["id"], plan["id"])
        self.assertEqual(clone["name"], "Plan de Pérdida de Peso (Copia)")
        self.assertEqual(clone["status"], "ACTIVO")
        self.assertEqual(len(clone["meal_entries"]), 3)
        self.assertTrue(all(m["nutritional_plan_id"] == clone["id"] for m in clone["meal_entries"]))

        other = self.client.post("/api/customers", json={"id_card": "2", "first_name": "Luis",
                                                         "last_name": "Paz"}).json()["data"]
        resp = self.client.post(f"/api/plans/{plan['id']}/copy", json={"name": "Para Luis", "customer_id": other["id"]})
        self.assertEqual(resp.json()["data"]["customer_id"], other["id"])
        self.assertEqual(resp.json()["data"]["name"], "Para Luis")
        self.assertEqual(self.client.post("/api/plans/ghost/copy").status_code, 404)


if __name__ == "__main__":
    unittest.main()
