from django.test import TestCase
from rest_framework.test import APIClient

from .models import User


class AccountsApiTests(TestCase):

    def setUp(self):
        self.client = APIClient()

    def test_health_is_public(self):
        resp = self.client.get("/api/health/")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"status": "ok"})

    def test_request_id_header(self):
        resp = self.client.get("/api/health/")
        self.assertTrue(resp["X-Request-ID"])
        resp = self.client.get("/api/health/", HTTP_X_REQUEST_ID="trace-42")
        self.assertEqual(resp["X-Request-ID"], "trace-42")

    def test_me(self):
        self.assertIn(self.client.get("/api/me/").status_code, (401, 403))
        user = User.objects.create_user(username="reg", password="x", first_name="Rita", last_name="Moss",
                                        role=User.Role.REGISTRAR)
        self.client.force_authenticate(user)
        resp = self.client.get("/api/me/")
        self.assertEqual(resp.json()["role"], "REGISTRAR")
        self.assertEqual(resp.json()["name"], "Rita Moss")
