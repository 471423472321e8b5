from django.core.management import CommandError, call_command
from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APITestCase

from authentication import service
from authentication.models import User
from authentication.tests.helpers import authenticate, make_user
from utils.errors import Conflict, Forbidden


class RegisterEndpointTests(APITestCase):
    def setUp(self):
        self.admin = make_user("admin@example.com", role=User.ROLE_ADMIN)
        self.user = make_user("user@example.com")
        self.url = reverse("authentication:register")

    def test_admin_can_register_user(self):
        authenticate(self.client, self.admin)
        response = self.client.post(
            self.url,
            {"email": "New@Example.com", "password": "secret123", "name": "Newbie"},
            format="json",
        )

        self.assertEqual(response.status_code, 201, response.content)
        self.assertEqual(response.json()["email"], "new@example.com")
        self.assertEqual(response.json()["role"], "user")
        created = User.objects.get(email="new@example.com")
        self.assertEqual(created.created_by, self.admin)
        self.assertNotEqual(created.password, "secret123")
        self.assertTrue(created.check_password("secret123"))

    def test_non_admin_gets_403(self):
        authenticate(self.client, self.user)
        response = self.client.post(self.url, {"email": "x@example.com", "password": "pw"}, format="json")
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json(), {"error": "Admin access required"})
        self.assertFalse(User.objects.filter(email="x@example.com").exists())

    def test_anonymous_gets_401(self):
        response = self.client.post(self.url, {"email": "x@example.com", "password": "pw"}, format="json")
        self.assertEqual(response.status_code, 401)

    def test_duplicate_email_returns_400(self):
        authenticate(self.client, self.admin)
        response = self.client.post(self.url, {"email": "USER@example.com", "password": "pw"}, format="json")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "User already exists"})

    def test_invalid_role_returns_400(self):
        authenticate(self.client, self.admin)
        response = self.client.post(
            self.url, {"email": "r@example.com", "password": "pw", "role": "root"}, format="json"
        )
        self.assertEqual(response.status_code, 400)
        self.assertTrue(response.json()["error"].startswith("role"))


class RegisterServiceTests(TestCase):
    def setUp(self):
        self.admin = make_user("admin@example.com", role=User.ROLE_ADMIN)

    def test_register_requires_admin(self):
        user = make_user("plain@example.com")
        with self.assertRaises(Forbidden):
            service.register(user, "other@example.com", "pw")

    def test_register_conflict(self):
        service.register(self.admin, "dup@example.com", "pw")
        with self.assertRaises(Conflict):
            service.register(self.admin, "dup@example.com", "pw2")


class EnsureAdminCommandTests(TestCase):
    def test_creates_admin(self):
        call_command("ensure_admin", "--email", "Root@Example.com", "--password", "pw", "--name", "Root")
        user = User.objects.get(email="root@example.com")
        self.assertTrue(user.is_admin)
        self.assertTrue(user.check_password("pw"))

    def test_promotes_existing_user(self):
        make_user("promote@example.com")
        call_command("ensure_admin", "--email", "promote@example.com")
        self.assertTrue(User.objects.get(email="promote@example.com").is_admin)

    def test_missing_user_without_password_fails(self):
        with self.assertRaises(CommandError):
            call_command("ensure_admin", "--email", "ghost@example.com")
