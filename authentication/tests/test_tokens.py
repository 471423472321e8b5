from datetime import timedelta

from django.test import TestCase, override_settings
from jose import jwt

from authentication.tests.helpers import make_user
from authentication.tokens import create_access_token, verify_token
from utils.errors import Unauthorized


class TokenTests(TestCase):
    def setUp(self):
        self.user = make_user("token@example.com", role="admin")

    def test_round_trip_claims(self):
        claims = verify_token(create_access_token(self.user))
        self.assertEqual(claims["id"], self.user.pk)
        self.assertEqual(claims["email"], "token@example.com")
        self.assertEqual(claims["role"], "admin")
        self.assertEqual(claims["exp"] - claims["iat"], 7 * 24 * 3600)

    def test_expired_token_is_rejected(self):
        token = create_access_token(self.user, expires_delta=timedelta(seconds=-5))
        with self.assertRaises(Unauthorized):
            verify_token(token)

    def test_token_signed_with_other_secret_is_rejected(self):
        token = create_access_token(self.user)
        with override_settings(JWT_SECRET="another-secret"):
            with self.assertRaises(Unauthorized):
                verify_token(token)

    def test_token_without_id_is_rejected(self):
        from django.conf import settings

        token = jwt.encode({"email": "token@example.com"}, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
        with self.assertRaises(Unauthorized):
            verify_token(token)

    def test_empty_token_is_rejected(self):
        with self.assertRaises(Unauthorized):
            verify_token("")
