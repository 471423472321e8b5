import json

from django.test import TestCase, Client
from django.urls import reverse

from authentication.models import User
from authentication.tests.helpers import DEFAULT_PASSWORD, make_user
from authentication.tokens import verify_token


class LoginEndpointTests(TestCase):
    def setUp(self):
        self.client = Client()
        self.url = reverse("authentication:login")
        self.user = make_user("alice@example.com", name="Alice")

    def _post_json(self, payload: dict):
        return self.client.post(self.url, data=json.dumps(payload), content_type="application/json")

    def test_login_success_returns_token_and_user(self):
        response = self._post_json({"email": "alice@example.com", "password": DEFAULT_PASSWORD})

        self.assertEqual(response.status_code, 200, response.content)
        data = response.json()
        self.assertEqual(data["user"], {
            "id": self.user.pk,
            "email": "alice@example.com",
            "name": "Alice",
            "role": User.ROLE_USER,
        })
        claims = verify_token(data["token"])
        self.assertEqual(claims["id"], self.user.pk)
        self.assertEqual(claims["email"], "alice@example.com")
        self.assertEqual(claims["role"], "user")

    def test_login_email_is_case_insensitive(self):
        response = self._post_json({"email": "  ALICE@example.com ", "password": DEFAULT_PASSWORD})
        self.assertEqual(response.status_code, 200, response.content)

    def test_login_wrong_password(self):
        response = self._post_json({"email": "alice@example.com", "password": "nope"})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"error": "Invalid credentials"})

    def test_login_unknown_email_gives_same_error(self):
        response = self._post_json({"email": "ghost@example.com", "password": DEFAULT_PASSWORD})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"error": "Invalid credentials"})

    def test_login_missing_or_blank_fields_are_invalid_credentials(self):
        for payload in ({"email": "alice@example.com"}, {"email": "", "password": ""}, {"password": DEFAULT_PASSWORD}, {}):
            response = self._post_json(payload)
            self.assertEqual(response.status_code, 401, payload)
            self.assertEqual(response.json(), {"error": "Invalid credentials"})

    def test_login_invalid_json_returns_400(self):
        response = self.client.post(self.url, data="not-a-json{", content_type="application/json")
        self.assertEqual(response.status_code, 400, response.content)
        self.assertIn("error", response.json())

    def test_password_is_stored_hashed(self):
        self.assertNotEqual(self.user.password, DEFAULT_PASSWORD)
        self.assertTrue(self.user.check_password(DEFAULT_PASSWORD))


class MeEndpointTests(TestCase):
    def setUp(self):
        self.user = make_user("bob@example.com")
        self.url = reverse("authentication:me")

    def _login(self):
        response = self.client.post(
            reverse("authentication:login"),
            data=json.dumps({"email": "bob@example.com", "password": DEFAULT_PASSWORD}),
            content_type="application/json",
        )
        return response.json()["token"]

    def test_me_with_token(self):
        token = self._login()
        response = self.client.get(self.url, HTTP_AUTHORIZATION=f"Bearer {token}")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["email"], "bob@example.com")

    def test_me_without_token(self):
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"error": "Unauthorized"})

    def test_me_with_garbage_token(self):
        response = self.client.get(self.url, HTTP_AUTHORIZATION="Bearer not.a.jwt")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"error": "Unauthorized"})

    def test_me_with_wrong_scheme(self):
        token = self._login()
        response = self.client.get(self.url, HTTP_AUTHORIZATION=f"Token {token}")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"error": "Unauthorized"})

    def test_me_for_deleted_user(self):
        token = self._login()
        self.user.delete()
        response = self.client.get(self.url, HTTP_AUTHORIZATION=f"Bearer {token}")
        self.assertEqual(response.status_code, 401)
