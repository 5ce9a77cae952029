"""
Unit tests for the log processors.
"""

import unittest

from sigaa_scraper.logging import redact_secrets


class TestRedactSecrets(unittest.TestCase):
    def test_password_is_masked(self) -> None:
        event = redact_secrets(None, "info", {"event": "login", "username": "aluno", "password": "x"})
        self.assertEqual(event["password"], "***")
        self.assertEqual(event["username"], "aluno")

    def test_other_keys_untouched(self) -> None:
        event = {"event": "class_started", "class_title": "IA"}
        self.assertEqual(redact_secrets(None, "info", dict(event)), event)


if __name__ == "__main__":
    unittest.main()
