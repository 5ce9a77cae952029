"""
Unit tests for the diagnostic artifact tree.

Layout contract:
- <root>/<run-id>/tarefas/<n>_<class>/tarefas_info.json
- one tarefa_<m>_<title>/ per assignment with info.json, and
  descricao.html + descricao.txt only when a description exists
- write failures surface as PersistenceError
"""

import json
import tempfile
import unittest
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

from playwright.async_api import Error as PlaywrightError

from sigaa_scraper.errors import PersistenceError
from sigaa_scraper.models import AssignmentRecord, ClassListing
from sigaa_scraper.persistence import ArtifactStore, render_info, safe_name

LISTING = ClassListing(code="CK0245", title="CK0245 - PROG MÓVEL")


def _records() -> list[AssignmentRecord]:
    return [
        AssignmentRecord(
            class_code="CK0245",
            class_title=LISTING.title,
            title="Lista 1",
            submission_window="até 10/12/2023",
            body_html="<p>Resolver</p>",
            body_text="Resolver",
        ),
        AssignmentRecord(
            class_code="CK0245",
            class_title=LISTING.title,
            title="Trabalho final: relatório",
        ),
    ]


class TestSafeName(unittest.TestCase):
    def test_non_alphanumerics_become_underscores(self) -> None:
        self.assertEqual(safe_name("CK0245 - PROG"), "CK0245___PROG")

    def test_limit(self) -> None:
        self.assertEqual(safe_name("abcdef", 3), "abc")


class TestArtifactStore(unittest.TestCase):
    def test_assignment_layout(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            store = ArtifactStore(d, run_id="run1")
            class_dir = store.class_dir(1, LISTING)
            self.assertEqual(class_dir, Path(d) / "run1" / "tarefas" / "1_CK0245___PROG_M_VEL")

            written = store.write_assignments(class_dir, _records())

            self.assertEqual(
                [p.name for p in written],
                ["tarefa_1_Lista_1", "tarefa_2_Trabalho_final__relat_rio"],
            )
            first, second = written
            self.assertEqual((first / "descricao.html").read_text(encoding="utf-8"), "<p>Resolver</p>")
            self.assertEqual((first / "descricao.txt").read_text(encoding="utf-8"), "Resolver")
            self.assertTrue((second / "info.json").exists())
            self.assertFalse((second / "descricao.html").exists())

            info = json.loads((first / "info.json").read_text(encoding="utf-8"))
            self.assertEqual(info["title"], "Lista 1")
            self.assertEqual(info["class_code"], "CK0245")

            summary = json.loads((class_dir / "tarefas_info.json").read_text(encoding="utf-8"))
            self.assertEqual(len(summary), 2)

    def test_info_json_matches_render_info(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            store = ArtifactStore(d, run_id="run1")
            record = _records()[0]
            task_dir = store.write_assignments(store.class_dir(1, LISTING), [record])[0]
            self.assertEqual(
                (task_dir / "info.json").read_text(encoding="utf-8"), render_info(record)
            )

    def test_snapshots(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            store = ArtifactStore(d, run_id="run1")
            listing_page = store.write_listing_page("<html>turmas</html>")
            snapshot = store.write_class_snapshot(store.class_dir(2, LISTING), "<html>tarefas</html>")
            self.assertEqual(listing_page.name, "pagina_disciplinas.html")
            self.assertEqual(snapshot.read_text(encoding="utf-8"), "<html>tarefas</html>")

    def test_write_failure_raises_persistence_error(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            store = ArtifactStore(d, run_id="run1")
            blocker = Path(d) / "blocker"
            blocker.write_text("not a directory", encoding="utf-8")
            with self.assertRaises(PersistenceError):
                store.write_class_snapshot(blocker / "class", "<html></html>")


class TestScreenshot(unittest.IsolatedAsyncioTestCase):
    async def test_screenshot_written_through_page(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            store = ArtifactStore(d, run_id="run1")
            page = MagicMock()
            page.screenshot = AsyncMock()
            path = store.run_dir / "login_page.png"

            self.assertEqual(await store.screenshot(page, path), path)
            page.screenshot.assert_awaited_once_with(path=str(path))

    async def test_screenshot_failure_is_swallowed(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            store = ArtifactStore(d, run_id="run1")
            page = MagicMock()
            page.screenshot = AsyncMock(side_effect=PlaywrightError("target closed"))

            self.assertIsNone(await store.screenshot(page, store.run_dir / "x.png"))


if __name__ == "__main__":
    unittest.main()
