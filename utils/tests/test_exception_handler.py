from django.test import SimpleTestCase
from rest_framework.exceptions import NotAuthenticated, ValidationError

from utils.errors import Conflict, Forbidden, Unauthorized
from utils.exception_handler import api_exception_handler


class ExceptionHandlerTests(SimpleTestCase):
    def _handle(self, exc):
        return api_exception_handler(exc, {"view": None})

    def test_authentication_failures_share_one_body(self):
        for exc in (NotAuthenticated(), Unauthorized(), Unauthorized("token expired")):
            response = self._handle(exc)
            self.assertEqual(response.status_code, 401)
            self.assertEqual(response.data, {"error": "Unauthorized"})

    def test_taxonomy_errors_keep_their_status(self):
        self.assertEqual(self._handle(Forbidden("Not a member of this group")).status_code, 403)
        response = self._handle(Conflict())
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data, {"error": "User already exists"})

    def test_validation_errors_are_flattened(self):
        response = self._handle(ValidationError({"email": ["Enter a valid email address."]}))
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data, {"error": "email: Enter a valid email address."})

    def test_non_field_errors_have_no_prefix(self):
        response = self._handle(ValidationError({"non_field_errors": ["Broken."]}))
        self.assertEqual(response.data, {"error": "Broken."})

    def test_unexpected_exception_is_500(self):
        with self.assertLogs("utils.exception_handler", level="ERROR"):
            response = self._handle(KeyError("boom"))
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.data, {"error": "Internal server error"})
