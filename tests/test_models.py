"""
Unit tests for the data models, the caller payload and the placeholder set.
"""

import os
import unittest
from unittest.mock import patch

from pydantic import ValidationError

from sigaa_scraper.config import PortalConfig
from sigaa_scraper.fallback import MOCK_CLASSES, MOCK_TASKS, mock_result
from sigaa_scraper.models import AssignmentRecord, ClassListing, Credentials, DataSource, ScrapeResult


class TestModels(unittest.TestCase):
    def test_blank_class_title_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            ClassListing(title="   ")

    def test_password_hidden_in_repr(self) -> None:
        credentials = Credentials(username="aluno", password="segredo")
        self.assertNotIn("segredo", repr(credentials))
        self.assertEqual(credentials.password.get_secret_value(), "segredo")

    def test_payload_shape(self) -> None:
        result = ScrapeResult(
            classes=[ClassListing(code="CK0001", title="UM")],
            tasks=[AssignmentRecord(class_code="CK0001", class_title="UM", title="Lista")],
        )
        payload = result.to_payload()

        self.assertEqual(set(payload), {"success", "classes", "tasks", "source", "message"})
        self.assertTrue(payload["success"])
        self.assertEqual(payload["source"], "realScraping")
        self.assertEqual(payload["tasks"][0]["class_title"], "UM")


class TestMockResult(unittest.TestCase):
    def test_fixed_placeholder_set(self) -> None:
        result = mock_result("login failed")

        self.assertEqual(result.source, DataSource.MOCK_DATA)
        self.assertEqual(result.classes, list(MOCK_CLASSES))
        self.assertEqual(result.tasks, list(MOCK_TASKS))
        self.assertIn("login failed", result.message)

    def test_every_task_references_a_mock_class(self) -> None:
        titles = {c.title for c in MOCK_CLASSES}
        for task in MOCK_TASKS:
            self.assertIn(task.class_title, titles)

    def test_results_do_not_share_state(self) -> None:
        first = mock_result()
        first.classes[0].title = "ALTERADO"
        self.assertNotEqual(mock_result().classes[0].title, "ALTERADO")


class TestConfig(unittest.TestCase):
    def test_derived_urls(self) -> None:
        config = PortalConfig(sigaa_url="https://sigaa.example.edu")
        self.assertEqual(config.login_url, "https://sigaa.example.edu/sigaa/verTelaLogin.do")
        self.assertEqual(config.home_url, "https://sigaa.example.edu/sigaa/verPortalDiscente.do")

    def test_environment_overrides(self) -> None:
        with patch.dict(os.environ, {"SIGAA_USER": "aluno", "RUN_TIMEOUT_SECONDS": "30"}):
            config = PortalConfig()
        self.assertEqual(config.sigaa_user, "aluno")
        self.assertEqual(config.run_timeout_seconds, 30)


if __name__ == "__main__":
    unittest.main()
