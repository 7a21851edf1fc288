import unittest
from fastapi.testclient import TestClient

from nutriplan.api.api_run import app
from nutriplan.infra.Customer_Repository import CustomerRepository
from nutriplan.infra.Plan_Repository import PlanRepository
from nutriplan.tests.support import TempDataTestCase, make_customer, make_plan


class TestPages(TempDataTestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def setUp(self):
        super().setUp()
        self.customer = CustomerRepository().create(make_customer(weight=70, height=1.75))
        self.plan = make_plan(("LUNES", "DESAYUNO", "Avena con frutas"), customer_id=self.customer.id)
        PlanRepository().save(self.plan)

    def test_plans_list(self):
        resp = self.client.get("/")
        self.assertEqual(resp.status_code, 200)
        self.assertIn("Plan de Pérdida de Peso", resp.text)
        self.assertIn("Ana Torres", resp.text)

    def test_plan_detail_shows_grid(self):
        resp = self.client.get(f"/plans/{self.plan.id}")
        self.assertEqual(resp.status_code, 200)
        body = resp.text
        self.assertIn('id="plan-grid-container"', body)
        self.assertIn("Avena con frutas", body)
        self.assertIn("3% completo (1 de 35 comidas)", body)
        self.assertIn("share/whatsapp?variant=listing", body)

    def test_pdf_share_button_downloads_before_opening_link(self):
        body = self.client.get(f"/plans/{self.plan.id}").text
        self.assertIn(f'data-share-pdf="/plans/{self.plan.id}/share/whatsapp?variant=attachment"', body)
        self.assertIn(f'href="/plans/{self.plan.id}/export/pdf"', body)
        self.assertIn("/static/share.js", body)

        script = self.client.get("/static/share.js")
        self.assertEqual(script.status_code, 200)
        text = script.text
        self.assertIn("[data-share-pdf]", text)
        # the wa.me link is opened only after the PDF blob is saved
        self.assertLess(text.index("fetch(link.pdf_url)"), text.index("window.open(link.url"))
        self.assertLess(text.index("save(blob, name)"), text.index("window.open(link.url"))

    def test_plan_detail_without_phone_disables_share(self):
        customer = CustomerRepository().get(self.customer.id)
        customer.cell_phone = ""
        CustomerRepository().update(customer)
        body = self.client.get(f"/plans/{self.plan.id}").text
        self.assertNotIn("share/whatsapp?variant=listing", body)
        self.assertIn("El cliente no tiene teléfono registrado", body)

    def test_plan_detail_not_found(self):
        resp = self.client.get("/plans/ghost")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json().get("detail"), "Plan not found")

    def test_edit_form_round_trip(self):
        edit = self.client.get(f"/plans/{self.plan.id}/edit")
        self.assertEqual(edit.status_code, 200)
        self.assertIn('name="meal__LUNES__DESAYUNO"', edit.text)

        form = {"name": "Plan editado", "status": "PAUSADO",
                "meal__LUNES__DESAYUNO": "  ", "meal__VIERNES__CENA": "Pescado al vapor"}
        resp = self.client.post(f"/plans/{self.plan.id}/edit", data=form, follow_redirects=False)
        self.assertEqual(resp.status_code, 303)
        self.assertEqual(resp.headers["location"], f"/plans/{self.plan.id}?notice=updated")
        saved = PlanRepository().get(self.plan.id)
        self.assertEqual(saved.name, "Plan editado")
        self.assertEqual([(m.day_of_week.value, m.meal_type.value) for m in saved.meal_entries],
                         [("VIERNES", "CENA")])

    def test_new_plan_form_validation(self):
        resp = self.client.post("/plans/new", data={"customer_id": self.customer.id, "name": ""})
        self.assertEqual(resp.status_code, 400)
        self.assertIn("El nombre del plan es requerido", resp.text)

    def test_copy_from_page(self):
        resp = self.client.post(f"/plans/{self.plan.id}/copy", data={"name": ""}, follow_redirects=False)
        self.assertEqual(resp.status_code, 303)
        self.assertEqual(len(PlanRepository().list()), 2)

    def test_customer_pages(self):
        listing = self.client.get("/customers?search=ana")
        self.assertIn("Ana Torres", listing.text)
        detail = self.client.get(f"/customers/{self.customer.id}")
        self.assertEqual(detail.status_code, 200)
        self.assertIn("22.86", detail.text)

        resp = self.client.post("/customers/new", data={"id_card": "1712345678", "first_name": "Otra",
                                                        "last_name": "Persona"})
        self.assertEqual(resp.status_code, 400)
        self.assertIn("Ya existe un cliente con esta cédula", resp.text)

    def test_delete_customer_from_page(self):
        resp = self.client.post(f"/customers/{self.customer.id}/delete", follow_redirects=False)
        self.assertEqual(resp.status_code, 303)
        self.assertIsNone(CustomerRepository().get(self.customer.id))
        self.assertEqual(PlanRepository().list(), [])


if __name__ == "__main__":
    unittest.main()
