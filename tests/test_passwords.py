import unittest

from workforce.auth import create_access_token, decode_access_token, hash_password, verify_password
from workforce.exceptions import ValidationError
from workforce.services.email import is_demo_email
from workforce.services.passwords import (
    generate_secure_password, password_problems, validate_password_strength,
)
from workforce.config import get_settings

DEMO = get_settings().demo_email_domain


class TestPasswords(unittest.TestCase):

    def test_generated_passwords_are_strong(self):
        for _ in range(20):
            password = generate_secure_password()
            self.assertEqual(len(password), 12)
            self.assertEqual(password_problems(password), [])
            self.assertTrue(any(ch in "!@#$%&*" for ch in password))
        with self.assertRaises(ValueError):
            generate_secure_password(6)

    def test_strength_rules(self):
        self.assertEqual(password_problems("Secret123"), [])
        self.assertEqual(password_problems("short1A"), ["Password must be at least 8 characters long"])
        self.assertIn("Password must contain at least one uppercase letter", password_problems("secret123"))
        self.assertIn("Password must contain at least one number", password_problems("SecretSecret"))
        with self.assertRaises(ValidationError):
            validate_password_strength("password")

    def test_hashing(self):
        hashed = hash_password("Secret123")
        self.assertTrue(verify_password("Secret123", hashed))
        self.assertFalse(verify_password("Secret124", hashed))
        self.assertFalse(verify_password("Secret123", "not-a-hash"))

    def test_tokens(self):
        self.assertEqual(decode_access_token(create_access_token(42)), 42)
        self.assertIsNone(decode_access_token("garbage"))


class TestDemoEmails(unittest.TestCase):

    def test_detection(self):
        self.assertTrue(is_demo_email(f"John.Smith@{DEMO.upper()}"))
        self.assertFalse(is_demo_email("john@example.com"))


if __name__ == "__main__":
    unittest.main()
