import io
import unittest
from unittest import mock
from urllib.parse import unquote

from fastapi.testclient import TestClient
from openpyxl import load_workbook

from nutriplan.api.api_run import app
from nutriplan.events import web_observers
from nutriplan.infra import pdf_utils
from nutriplan.infra.Customer_Repository import CustomerRepository
from nutriplan.infra.Plan_Repository import PlanRepository
from nutriplan.tests.support import TempDataTestCase, make_customer, make_plan


class TestExportsAPI(TempDataTestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)
        web_observers.start()

    def setUp(self):
        super().setUp()
        self.customer = CustomerRepository().create(make_customer())
        self.plan = make_plan(("LUNES", "DESAYUNO", "Eggs & toast"), ("MIERCOLES", "CENA", "Sopa de verduras"),
                              customer_id=self.customer.id)
        PlanRepository().save(self.plan)

    def _latest_event(self):
        events = web_observers.get_events()["events"]
        return events[-1] if events else None

    def test_sheet_download(self):
        resp = self.client.get(f"/plans/{self.plan.id}/export/sheet")
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.headers["content-type"],
                         "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet")
        disposition = resp.headers["content-disposition"]
        self.assertIn("filename*=UTF-8''Plan_de_P%C3%A9rdida_de_Peso_", disposition)
        self.assertIn(".xlsx", disposition)
        ws = load_workbook(io.BytesIO(resp.content)).active
        self.assertEqual(ws.title, "Plan Nutricional")
        self.assertEqual([c.value for c in ws[1]], ["Día", "Desayuno", "Colación", "Almuerzo", "Colación", "Cena"])
        self.assertEqual((ws["A2"].value, ws["B2"].value), ("Lunes", "Eggs & toast"))
        self.assertEqual(ws["F4"].value, "Sopa de verduras")
        self.assertEqual(ws.column_dimensions["B"].width, 25)
        event = self._latest_event()
        self.assertEqual((event["type"], event["kind"]), ("export.succeeded", "sheet"))
        self.assertEqual(event["message"], "Plan exportado exitosamente")

    def test_sheet_uppercase_labels(self):
        resp = self.client.get(f"/plans/{self.plan.id}/export/sheet?uppercase=true")
        ws = load_workbook(io.BytesIO(resp.content)).active
        self.assertEqual([c.value for c in ws[1]], ["DÍA", "DESAYUNO", "COLACIÓN", "ALMUERZO", "COLACIÓN", "CENA"])
        self.assertEqual(ws["A4"].value, "MIÉRCOLES")

    def test_pdf_download(self):
        resp = self.client.get(f"/plans/{self.plan.id}/export/pdf")
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.headers["content-type"], "application/pdf")
        self.assertTrue(resp.content.startswith(b"%PDF"))
        self.assertIn("_Ana_Torres_", unquote(resp.headers["content-disposition"]))

    def test_pdf_failure_is_reported(self):
        with mock.patch("nutriplan.api.routes.exports.render_pdf", side_effect=RuntimeError("boom")):
            resp = self.client.get(f"/plans/{self.plan.id}/export/pdf")
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"success": False, "error": "Error al exportar el PDF", "code": "EXPORT_ERROR"})
        event = self._latest_event()
        self.assertEqual((event["type"], event["level"]), ("export.failed", "error"))
        # the guard is released after a failure
        self.assertEqual(self.client.get(f"/plans/{self.plan.id}/export/pdf").status_code, 200)

    def test_image_download(self):
        resp = self.client.get(f"/plans/{self.plan.id}/export/image")
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.headers["content-type"], "image/png")
        self.assertTrue(resp.content.startswith(b"\x89PNG"))

    def test_image_missing_target(self):
        resp = self.client.get(f"/plans/{self.plan.id}/export/image?target=nowhere")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["code"], "NOT_FOUND")
        event = self._latest_event()
        self.assertEqual((event["type"], event["kind"]), ("export.failed", "image"))

    def test_unknown_plan(self):
        for path in ("export/sheet", "export/pdf", "export/image", "share/whatsapp"):
            with self.subTest(path=path):
                resp = self.client.get(f"/plans/ghost/{path}")
                self.assertEqual(resp.status_code, 404)
                self.assertEqual(resp.json()["error"], "Plan nutricional no encontrado")

    def test_whatsapp_listing(self):
        resp = self.client.get(f"/plans/{self.plan.id}/share/whatsapp")
        self.assertEqual(resp.status_code, 200)
        data = resp.json()["data"]
        self.assertEqual(data["phone"], "593991234567")
        self.assertTrue(data["url"].startswith("https://wa.me/593991234567?text="))
        self.assertIn("*LUNES*\n• Desayuno: Eggs & toast", data["message"])
        self.assertNotIn("pdf_url", data)

    def test_whatsapp_attachment_delivers_pdf(self):
        with mock.patch("nutriplan.api.routes.exports.render_pdf", wraps=pdf_utils.render_pdf) as render:
            resp = self.client.get(f"/plans/{self.plan.id}/share/whatsapp?variant=attachment")
            data = resp.json()["data"]
            self.assertEqual(data["variant"], "attachment")
            self.assertIn("formato PDF", data["message"])
            self.assertTrue(data["url"].startswith("https://wa.me/593991234567?text="))
            # the link step renders nothing; the PDF comes from the url it hands out
            render.assert_not_called()

            pdf = self.client.get(data["pdf_url"])
            self.assertEqual(render.call_count, 1)
        self.assertEqual(pdf.status_code, 200)
        self.assertEqual(pdf.headers["content-type"], "application/pdf")
        self.assertTrue(pdf.content.startswith(b"%PDF"))
        self.assertIn("attachment;", pdf.headers["content-disposition"])

    def test_whatsapp_redirect(self):
        resp = self.client.get(f"/plans/{self.plan.id}/share/whatsapp?redirect=1", follow_redirects=False)
        self.assertEqual(resp.status_code, 303)
        self.assertTrue(resp.headers["location"].startswith("https://wa.me/593991234567?text="))

    def test_whatsapp_missing_phone(self):
        customer = CustomerRepository().get(self.customer.id)
        customer.cell_phone = None
        CustomerRepository().update(customer)
        with mock.patch("nutriplan.api.routes.exports.render_pdf") as render:
            resp = self.client.get(f"/plans/{self.plan.id}/share/whatsapp?variant=attachment")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "El cliente no tiene número de teléfono registrado")
        render.assert_not_called()

    def test_notifications_cursor(self):
        cursor = web_observers.get_events()["next_cursor"]
        self.client.get(f"/plans/{self.plan.id}/export/sheet")
        feed = self.client.get(f"/api/notifications?since={cursor}").json()
        self.assertEqual([e["type"] for e in feed["events"]], ["export.succeeded"])
        self.assertEqual(feed["next_cursor"], feed["events"][-1]["id"])
        again = self.client.get(f"/api/notifications?since={feed['next_cursor']}").json()
        self.assertEqual(again["events"], [])


if __name__ == "__main__":
    unittest.main()
