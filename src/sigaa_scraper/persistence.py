"""Diagnostic artifact tree for a scrape run.

Layout under ``<artifacts_dir>/<run-id>/``:
  login_page.png, after_login.png, pagina_disciplinas.html
  tarefas/<n>_<class>/pagina_tarefas.html, tarefas_info.json, *.png
  tarefas/<n>_<class>/tarefa_<m>_<title>/info.json, descricao.html, descricao.txt

This tree is for debugging only; callers get their data from ScrapeResult.
"""

import json
import re
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

from playwright.async_api import Error as PlaywrightError

from sigaa_scraper.errors import PersistenceError
from sigaa_scraper.logging import get_logger
from sigaa_scraper.models import AssignmentRecord, ClassListing

if TYPE_CHECKING:
    from playwright.async_api import Page

log = get_logger(__name__)

_UNSAFE_RE = re.compile(r"[^a-z0-9]", re.IGNORECASE)


def safe_name(text: str, limit: int | None = None) -> str:
    """File-system safe version of a title: every non-alphanumeric becomes ``_``."""
    cleaned = _UNSAFE_RE.sub("_", text)
    return cleaned[:limit] if limit else cleaned


def render_info(record: AssignmentRecord) -> str:
    """Stable JSON rendering of one assignment (``info.json``)."""
    return json.dumps(record.model_dump(mode="json"), indent=2, ensure_ascii=False)


class ArtifactStore:
    """Writes screenshots, HTML snapshots and assignment JSON for one run."""

    def __init__(self, root: str | Path, run_id: str | None = None) -> None:
        run_id = run_id or datetime.now().strftime("%Y%m%d-%H%M%S")
        self.run_dir = Path(root) / run_id
        self.tasks_dir = self.run_dir / "tarefas"
        try:
            self.run_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PersistenceError(f"Could not create run directory {self.run_dir}: {e}") from e
        log.info("artifact_store_initialized", run_dir=str(self.run_dir))

    def _write(self, path: Path, content: str) -> Path:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise PersistenceError(f"Could not write {path}: {e}") from e
        return path

    def class_dir(self, index: int, listing: ClassListing) -> Path:
        """Directory of the ``index``-th class (1-based)."""
        return self.tasks_dir / f"{index}_{safe_name(listing.title)}"

    def write_listing_page(self, html: str) -> Path:
        return self._write(self.run_dir / "pagina_disciplinas.html", html)

    def write_class_snapshot(self, class_dir: Path, html: str) -> Path:
        return self._write(class_dir / "pagina_tarefas.html", html)

    def write_assignments(
        self, class_dir: Path, records: list[AssignmentRecord]
    ) -> list[Path]:
        """Write the class summary and one directory per assignment.

        Returns:
            The assignment directories, in record order.
        """
        summary = [record.model_dump(mode="json") for record in records]
        self._write(
            class_dir / "tarefas_info.json",
            json.dumps(summary, indent=2, ensure_ascii=False),
        )

        written: list[Path] = []
        for position, record in enumerate(records, start=1):
            task_dir = class_dir / f"tarefa_{position}_{safe_name(record.title, 50)}"
            self._write(task_dir / "info.json", render_info(record))
            if record.body_html:
                self._write(task_dir / "descricao.html", record.body_html)
                self._write(task_dir / "descricao.txt", record.body_text)
            written.append(task_dir)

        log.info("assignments_saved", class_dir=str(class_dir), count=len(written))
        return written

    async def screenshot(self, page: "Page", path: Path) -> Path | None:
        """Best-effort screenshot; failures are logged and swallowed."""
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            await page.screenshot(path=str(path))
        except (PlaywrightError, OSError) as e:
            log.warning("screenshot_failed", path=str(path), error=str(e))
            return None
        return path
