import unittest
from fastapi.testclient import TestClient

from nutriplan.api.api_run import app
from nutriplan.infra.Plan_Repository import PlanRepository
from nutriplan.tests.support import TempDataTestCase

ANA = {"id_card": "1712345678", "first_name": "Ana", "last_name": "Torres",
       "cell_phone": "0991234567", "weight": 70, "height": 1.75}


class TestCustomersAPI(TempDataTestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def _create(self, **overrides):
        payload = dict(ANA, **overrides)
        resp = self.client.post("/api/customers", json=payload)
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()["data"]

    def test_create_computes_imc(self):
        data = self._create()
        self.assertEqual(data["imc"], 22.86)
        self.assertEqual(data["nutritional_plans"], [])

    def test_required_fields(self):
        for field, message in (("id_card", "La cédula es requerida"), ("first_name", "El nombre es requerido"),
                               ("last_name", "El apellido es requerido")):
            with self.subTest(field=field):
                payload = dict(ANA)
                payload[field] = "   "
                resp = self.client.post("/api/customers", json=payload)
                self.assertEqual(resp.status_code, 400)
                self.assertEqual(resp.json(), {"success": False, "error": message, "code": "VALIDATION_ERROR"})

    def test_duplicate_id_card(self):
        self._create()
        resp = self.client.post("/api/customers", json=dict(ANA, first_name="Otra"))
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "Ya existe un cliente con esta cédula")

    def test_search_needs_two_characters(self):
        self._create()
        self._create(id_card="0102030405", first_name="Luis", last_name="Paz")
        self.assertEqual(len(self.client.get("/api/customers?search=t").json()["data"]), 2)
        found = self.client.get("/api/customers?search=tor").json()["data"]
        self.assertEqual([c["first_name"] for c in found], ["Ana"])
        by_card = self.client.get("/api/customers?search=0102").json()["data"]
        self.assertEqual([c["first_name"] for c in by_card], ["Luis"])

    def test_get_unknown(self):
        resp = self.client.get("/api/customers/does-not-exist")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["code"], "NOT_FOUND")
        self.assertEqual(resp.json()["error"], "Cliente no encontrado")

    def test_update_recomputes_imc_and_checks_id_card(self):
        ana = self._create()
        luis = self._create(id_card="0102030405", first_name="Luis")
        resp = self.client.put(f"/api/customers/{ana['id']}", json={"weight": 80})
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json()["data"]["imc"], 26.12)
        self.assertEqual(resp.json()["data"]["first_name"], "Ana")

        same_card = self.client.put(f"/api/customers/{ana['id']}", json={"id_card": ANA["id_card"]})
        self.assertEqual(same_card.status_code, 200)
        clash = self.client.put(f"/api/customers/{ana['id']}", json={"id_card": luis["id_card"]})
        self.assertEqual(clash.status_code, 400)
        self.assertEqual(clash.json()["error"], "Ya existe otro cliente con esta cédula")
        blank = self.client.put(f"/api/customers/{ana['id']}", json={"first_name": ""})
        self.assertEqual(blank.json()["error"], "El nombre no puede estar vacío")

    def test_delete_cascades_to_plans(self):
        ana = self._create()
        plan = self.client.post("/api/plans", json={"customer_id": ana["id"], "name": "Plan A"})
        self.assertEqual(plan.status_code, 201, plan.text)
        resp = self.client.delete(f"/api/customers/{ana['id']}")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(PlanRepository().list(), [])
        self.assertEqual(self.client.delete(f"/api/customers/{ana['id']}").status_code, 404)


if __name__ == "__main__":
    unittest.main()
