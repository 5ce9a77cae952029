"""Portal scrape run: login, class enumeration and per-class extraction.

``scrape_portal`` is the invocation contract used by the calling service. It
always returns a well-formed ScrapeResult: real data tagged ``realScraping``,
or the placeholder set tagged ``mockData`` when the run as a whole fails.

Per-class state machine (``PortalScraper.process_class``):
  entering -> at_class_page -> expanding_assignments_menu
    -> on_assignments_page -> extracted | not_found
  any step -> failed (logged, screenshot, next class)
"""

import asyncio
import contextlib
import signal
from collections.abc import Callable, Iterator
from datetime import datetime
from pathlib import Path

from playwright.async_api import Error as PlaywrightError

from sigaa_scraper.config import PortalConfig, get_config
from sigaa_scraper.errors import (
    AuthenticationFailure,
    ExtractionMiss,
    PersistenceError,
    ScrapingError,
)
from sigaa_scraper.fallback import mock_result
from sigaa_scraper.logging import get_logger
from sigaa_scraper.login import login
from sigaa_scraper.models import (
    ClassListing,
    ClassReport,
    ClassState,
    Credentials,
    DataSource,
    ScrapeResult,
)
from sigaa_scraper.pages.class_page import ClassPage
from sigaa_scraper.pages.portal import PortalHomePage
from sigaa_scraper.session import PortalSession, close_session, open_session

log = get_logger(__name__)

# Whole-run failures that are answered with mock data instead of an exception
FALLBACK_ERRORS: tuple[type[BaseException], ...] = (
    ScrapingError,
    PlaywrightError,
    asyncio.TimeoutError,
)


class PortalScraper:
    """Drives one authenticated session through every enrolled class."""

    def __init__(
        self,
        session: PortalSession,
        config: PortalConfig,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.session = session
        self.config = config
        self.clock = clock
        self.store = session.run.store
        self.home = PortalHomePage(session.page, config, self.store)
        self.class_page = ClassPage(session.page, config, session.run)

    async def collect(self, credentials: Credentials) -> ScrapeResult:
        """Log in and extract every class with its assignments.

        Raises:
            AuthenticationFailure: No login marker was found after submitting.
            NavigationTimeout: The login page could not be loaded.
        """
        result = await login(self.session, credentials, self.config)
        if not result.success:
            raise AuthenticationFailure(
                "Login could not be verified: wrong credentials or changed portal layout",
                current_url=result.current_url,
                page_excerpt=result.page_excerpt,
            )

        await self.home.open_class_listing()
        listings = await self.home.enumerate_classes()

        reports: list[ClassReport] = []
        for index, listing in enumerate(listings, start=1):
            reports.append(await self.process_class(index, listing))

        tasks = [task for report in reports for task in report.assignments]
        log.info(
            "scrape_completed",
            classes=len(listings),
            tasks=len(tasks),
            failed=sum(1 for r in reports if r.state is ClassState.FAILED),
        )
        return ScrapeResult(
            classes=listings,
            tasks=tasks,
            reports=reports,
            source=DataSource.REAL_SCRAPING,
            message=None if listings else "No classes found on the student portal",
            run_dir=str(self.store.run_dir),
        )

    def _advance(self, report: ClassReport, state: ClassState) -> None:
        report.state = state
        log.debug("class_state", class_title=report.listing.title, state=state.value)

    def _persist(self, write: Callable[..., object], *args: object) -> None:
        try:
            write(*args)
        except PersistenceError as e:
            log.error("artifact_write_failed", error=str(e))

    async def process_class(self, index: int, listing: ClassListing) -> ClassReport:
        """Visit one class and extract its assignments.

        Never raises for failures local to the class; the returned report
        holds the terminal state.
        """
        page = self.session.page
        class_dir: Path = self.store.class_dir(index, listing)
        report = ClassReport(listing=listing)
        log.info("class_started", position=index, class_title=listing.title)

        try:
            report.strategy = await self.class_page.enter(listing)
            if report.strategy is None:
                self._advance(report, ClassState.FAILED)
                report.error = "class link not found"
                log.warning("class_entry_failed", class_title=listing.title)
                await self.store.screenshot(page, class_dir / "erro_acesso.png")
                return report
        except Exception as e:
            self._advance(report, ClassState.FAILED)
            report.error = str(e)
            log.error("class_entry_error", class_title=listing.title, error=str(e))
            await self.store.screenshot(page, class_dir / "erro_acesso.png")
            return report

        try:
            self._advance(report, ClassState.AT_CLASS_PAGE)
            self._advance(report, ClassState.EXPANDING_ASSIGNMENTS_MENU)
            await self.class_page.expand_activities_menu()
            await self.class_page.open_assignments()

            self._advance(report, ClassState.ON_ASSIGNMENTS_PAGE)
            html = await self.class_page.snapshot()
            self._persist(self.store.write_class_snapshot, class_dir, html)

            report.assignments = self.class_page.extract(html, listing, self.clock())
            self._advance(report, ClassState.EXTRACTED)
            self._persist(self.store.write_assignments, class_dir, report.assignments)
        except ExtractionMiss as miss:
            self._advance(report, ClassState.NOT_FOUND)
            log.info("class_assignments_not_found", class_title=listing.title, reason=str(miss))
        except Exception as e:
            self._advance(report, ClassState.FAILED)
            report.error = str(e)
            log.error(
                "class_failed",
                class_title=listing.title,
                error=str(e),
                type=type(e).__name__,
            )
            await self.store.screenshot(page, class_dir / "erro_tarefas.png")

        await self.home.return_home()
        return report


@contextlib.contextmanager
def cancel_on_signals(task: asyncio.Task) -> Iterator[None]:
    """Turn SIGINT/SIGTERM into a cancellation of ``task`` while inside the block.

    Silently does nothing where the loop cannot install signal handlers
    (Windows, non-main threads).
    """
    loop = asyncio.get_running_loop()
    installed: list[signal.Signals] = []
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, task.cancel)
        except (NotImplementedError, RuntimeError, ValueError):
            continue
        installed.append(sig)
    try:
        yield
    finally:
        for sig in installed:
            loop.remove_signal_handler(sig)


async def _run(credentials: Credentials, config: PortalConfig) -> ScrapeResult:
    session = await open_session(config)
    try:
        with cancel_on_signals(asyncio.current_task()):
            return await PortalScraper(session, config).collect(credentials)
    except asyncio.CancelledError:
        log.warning("scrape_interrupted")
        await session.save_state()
        raise
    finally:
        await close_session(session)


async def scrape_portal(
    username: str,
    password: str,
    *,
    config: PortalConfig | None = None,
    allow_mock: bool = True,
) -> ScrapeResult:
    """Scrape classes and assignments for one student.

    Args:
        username: Portal login.
        password: Portal password; used for this call only.
        config: Settings, defaults to the environment-loaded singleton.
        allow_mock: When False, whole-run failures are raised instead of
            being replaced by placeholder data.

    Returns:
        Real data (``source=realScraping``) or the placeholder set
        (``source=mockData``).

    Raises:
        pydantic.ValidationError: Empty username or password.
    """
    config = config or get_config()
    credentials = Credentials(username=username, password=password)

    log.info("scrape_started", username=credentials.username)
    try:
        return await asyncio.wait_for(
            _run(credentials, config), timeout=config.run_timeout_seconds
        )
    except FALLBACK_ERRORS as e:
        reason = str(e) or type(e).__name__
        log.error("scrape_failed", error=reason, type=type(e).__name__)
        if not allow_mock:
            raise
        log.warning("mock_data_substituted")
        return mock_result(reason)
