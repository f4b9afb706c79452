import json
import unittest

from tests.base import run
from workforce.exceptions import (
    ConflictError, EmailDeliveryError, EmailNotConfiguredError, NotFoundError, PermissionDeniedError,
    ValidationError, WorkforceError, handle_workforce_error,
)


class TestDomainErrors(unittest.TestCase):

    def test_status_codes(self):
        expected = {
            ValidationError: 400,
            ConflictError: 400,
            NotFoundError: 404,
            PermissionDeniedError: 403,
            EmailDeliveryError: 500,
            EmailNotConfiguredError: 500,
        }
        for error_class, status_code in expected.items():
            self.assertEqual(error_class.status_code, status_code, error_class.__name__)

    def test_every_error_is_documented(self):
        for error_class in WorkforceError.__subclasses__():
            self.assertTrue((error_class.__doc__ or "").strip(), error_class.__name__)

    def test_error_body(self):
        response = run(handle_workforce_error(None, EmailDeliveryError("Failed to send email: timeout")))
        self.assertEqual(response.status_code, 500)
        self.assertEqual(json.loads(response.body), {
            "error": "Failed to send email: timeout",
            "detail": "Failed to send email: timeout",
        })


if __name__ == "__main__":
    unittest.main()
