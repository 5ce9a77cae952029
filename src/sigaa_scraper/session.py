"""Playwright browser session lifecycle for the SIGAA portal.

``open_session`` acquires a browser process and an isolated context for one
run; ``close_session`` tears everything down on every exit path. The
SessionManager persists the context storage state so a later run can reuse
portal cookies while they are fresh.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from pathlib import Path
from typing import TYPE_CHECKING

from playwright.async_api import Error as PlaywrightError, async_playwright

from sigaa_scraper.config import PortalConfig
from sigaa_scraper.errors import LaunchError
from sigaa_scraper.logging import get_logger
from sigaa_scraper.persistence import ArtifactStore
from sigaa_scraper.utils import configure_page_for_scraping

if TYPE_CHECKING:
    from playwright.async_api import Browser, BrowserContext, Page, Playwright

logger = get_logger(__name__)

VIEWPORT = {"width": 1366, "height": 768}


class SessionManager:
    """Manages Playwright storage state persistence and validation.

    Saves browser storage state (cookies, localStorage) to disk and restores
    it on subsequent runs while it is younger than ``max_session_age_hours``.
    """

    def __init__(self, state_file: str, max_session_age_hours: int = 12) -> None:
        self.state_file = Path(state_file)
        self.max_session_age_hours = max_session_age_hours

    def is_session_valid(self) -> bool:
        """Check if a saved session exists and is still fresh.

        Returns:
            True if session file exists and is younger than max_session_age_hours.
        """
        if not self.state_file.exists():
            logger.debug("session_check", result="missing", reason="file_not_found")
            return False

        file_mtime = datetime.fromtimestamp(self.state_file.stat().st_mtime)
        age = datetime.now() - file_mtime
        max_age = timedelta(hours=self.max_session_age_hours)

        if age > max_age:
            logger.info(
                "session_check",
                result="expired",
                age_hours=age.total_seconds() / 3600,
                max_hours=self.max_session_age_hours,
            )
            return False

        logger.debug(
            "session_check",
            result="valid",
            age_hours=age.total_seconds() / 3600,
        )
        return True

    def context_options(self) -> dict:
        """Keyword arguments for ``browser.new_context``, restoring state if valid."""
        if self.is_session_valid():
            logger.info("context_restored", state_file=str(self.state_file))
            return {"storage_state": str(self.state_file)}
        return {}

    async def save_session(self, context: "BrowserContext") -> None:
        """Save browser context storage state to disk.

        Args:
            context: Playwright BrowserContext with active session.
        """
        self.state_file.parent.mkdir(parents=True, exist_ok=True)
        await context.storage_state(path=str(self.state_file))
        logger.info("session_saved", path=str(self.state_file))

    def clear_session(self) -> None:
        """Delete saved session state file."""
        if self.state_file.exists():
            self.state_file.unlink()
            logger.info("session_cleared", path=str(self.state_file))
        else:
            logger.debug("session_clear_skipped", reason="file_not_found")


@dataclass
class RunState:
    """Mutable state scoped to a single scrape run."""

    store: ArtifactStore
    activities_menu_expanded: bool = False


@dataclass
class PortalSession:
    """Browser, context and page owned by one run."""

    playwright: "Playwright"
    browser: "Browser"
    context: "BrowserContext"
    page: "Page"
    run: RunState
    manager: SessionManager
    closed: bool = field(default=False, init=False)

    async def save_state(self) -> None:
        """Persist storage state; failures are logged, never raised."""
        try:
            await self.manager.save_session(self.context)
        except (PlaywrightError, OSError) as e:
            logger.warning("session_save_failed", error=str(e))


async def open_session(config: PortalConfig) -> PortalSession:
    """Launch Chromium and open an isolated context with one page.

    Raises:
        LaunchError: The browser executable is missing or fails to start.
        PersistenceError: The run directory cannot be created.

    Anything failing after the launch closes the browser before propagating.
    """
    executable = config.browser_executable
    if executable and not Path(executable).exists():
        raise LaunchError(f"Chromium executable not found: {executable}")

    playwright = await async_playwright().start()
    try:
        browser = await playwright.chromium.launch(
            headless=config.headless,
            executable_path=executable or None,
        )
    except PlaywrightError as e:
        await playwright.stop()
        logger.error("browser_launch_failed", error=str(e), executable=executable)
        raise LaunchError(f"Could not launch Chromium: {e}") from e

    manager = SessionManager(config.state_file, config.max_session_age_hours)
    try:
        context = await browser.new_context(
            user_agent=config.user_agent,
            viewport=VIEWPORT,
            bypass_csp=True,
            java_script_enabled=True,
            **manager.context_options(),
        )
        context.set_default_timeout(config.navigation_timeout_ms)
        page = await context.new_page()
        await configure_page_for_scraping(page, timeout_ms=config.navigation_timeout_ms)
        run = RunState(store=ArtifactStore(config.artifacts_dir))
    except BaseException as e:
        logger.error("session_setup_failed", error=str(e), type=type(e).__name__)
        await _shutdown(browser, playwright)
        raise

    logger.info(
        "session_opened",
        headless=config.headless,
        run_dir=str(run.store.run_dir),
    )
    return PortalSession(
        playwright=playwright,
        browser=browser,
        context=context,
        page=page,
        run=run,
        manager=manager,
    )


async def _shutdown(browser: "Browser", playwright: "Playwright") -> None:
    """Close a browser whose session never finished opening."""
    for step, close in (("browser", browser.close), ("playwright", playwright.stop)):
        try:
            await close()
        except PlaywrightError as e:
            logger.warning("session_close_failed", step=step, error=str(e))


async def close_session(session: PortalSession) -> None:
    """Close context, browser and driver. Safe to call more than once."""
    if session.closed:
        return
    session.closed = True

    for step, close in (
        ("context", session.context.close),
        ("browser", session.browser.close),
        ("playwright", session.playwright.stop),
    ):
        try:
            await close()
        except PlaywrightError as e:
            logger.warning("session_close_failed", step=step, error=str(e))
    logger.info("session_closed")
