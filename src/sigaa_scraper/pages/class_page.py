"""ClassPage - a single class's virtual room and its assignments ("Tarefas").

Navigation inside a class:
  div.rich-panelbar-header.itemMenuHeaderAtividades -> collapsible "Atividades" menu
    div.itemMenu / a "Tarefas"                      -> assignments listing

The "Atividades" panel keeps its expanded state across class visits, so it
is expanded at most once per run (``RunState.activities_menu_expanded``).
"""

from collections.abc import Awaitable, Callable
from datetime import datetime

from playwright.async_api import Error as PlaywrightError, Page, TimeoutError as PlaywrightTimeoutError

from sigaa_scraper.assignments import parse_assignments_page
from sigaa_scraper.config import PortalConfig
from sigaa_scraper.logging import get_logger
from sigaa_scraper.models import AssignmentRecord, ClassListing
from sigaa_scraper.session import RunState
from sigaa_scraper.utils import click_and_settle

log = get_logger(__name__)

EntryStrategy = Callable[[Page, ClassListing, int], Awaitable[bool]]

DETAIL_ICONS = 'img[src*="detalhes"], img[alt*="detalhes"], img[title*="detalhe"]'


async def by_exact_title(page: Page, listing: ClassListing, timeout_ms: int) -> bool:
    target = page.get_by_text(listing.title, exact=True)
    if await target.count() == 0:
        return False
    await click_and_settle(page, target.first, timeout_ms)
    return True


async def by_course_code(page: Page, listing: ClassListing, timeout_ms: int) -> bool:
    if not listing.code:
        return False
    target = page.locator(f'a:has-text("{listing.code}"), td:has-text("{listing.code}")')
    if await target.count() == 0:
        return False
    await click_and_settle(page, target.first, timeout_ms)
    return True


async def by_detail_icon(page: Page, listing: ClassListing, timeout_ms: int) -> bool:
    icons = page.locator(DETAIL_ICONS)
    for i in range(await icons.count()):
        icon = icons.nth(i)
        row_text = await icon.locator("xpath=ancestor::tr[1]").text_content() or ""
        if listing.title in row_text or (listing.code and listing.code in row_text):
            await click_and_settle(page, icon, timeout_ms)
            return True
    return False


ENTRY_STRATEGIES: tuple[EntryStrategy, ...] = (
    by_exact_title,
    by_course_code,
    by_detail_icon,
)


class ClassPage:
    """Operations on one class, from the portal listing to its assignments."""

    ACTIVITIES_HEADER = (
        "div.rich-panelbar-header.itemMenuHeaderAtividades, "
        'div[id="rich-panelbar-header-3"], '
        'div[role="button"]:has-text("Atividades")'
    )
    ASSIGNMENTS_LINKS = (
        'div.itemMenu:has-text("Tarefas")',
        'a:has-text("Tarefas")',
        'a[href*="tarefa"]',
        'a[onclick*="tarefa"]',
    )

    def __init__(self, page: Page, config: PortalConfig, run: RunState) -> None:
        self.page = page
        self.config = config
        self.run = run

    async def enter(self, listing: ClassListing) -> str | None:
        """Open the class page using the first entry strategy that works.

        Returns:
            Name of the successful strategy, or None if every one failed.
        """
        for strategy in ENTRY_STRATEGIES:
            try:
                entered = await strategy(self.page, listing, self.config.entry_timeout_ms)
            except PlaywrightError as e:
                log.debug(
                    "entry_strategy_error",
                    strategy=strategy.__name__,
                    class_title=listing.title,
                    error=str(e),
                )
                continue
            if entered:
                log.info("class_entered", strategy=strategy.__name__, class_title=listing.title)
                return strategy.__name__
        return None

    async def expand_activities_menu(self) -> bool:
        """Expand the "Atividades" panel once per run.

        Returns:
            True if a click was issued during this call.
        """
        if self.run.activities_menu_expanded:
            log.debug("activities_menu_skip", reason="already_expanded")
            return False

        header = self.page.locator(self.ACTIVITIES_HEADER).first
        if await header.count() == 0:
            log.debug("activities_menu_missing", url=self.page.url)
            return False

        clicked = False
        if await header.get_attribute("aria-expanded") != "true":
            await header.click()
            await self.page.wait_for_timeout(1000)
            clicked = True
        self.run.activities_menu_expanded = True
        log.info("activities_menu_expanded", clicked=clicked)
        return clicked

    async def open_assignments(self) -> bool:
        """Navigate to the class's assignments listing.

        Tries the visible "Tarefas" menu entries first and falls back to the
        direct listing URL.

        Returns:
            True if a menu entry was clicked, False if the direct URL was used.
        """
        combined = ", ".join(self.ASSIGNMENTS_LINKS[:2])
        try:
            await self.page.wait_for_selector(
                combined, state="attached", timeout=self.config.entry_timeout_ms
            )
        except PlaywrightTimeoutError:
            log.debug("assignments_link_wait_timeout")

        for selector in self.ASSIGNMENTS_LINKS:
            link = self.page.locator(selector).filter(has_text="Tarefa").first
            if await link.count() == 0 or not await link.is_visible():
                continue
            try:
                await click_and_settle(
                    self.page,
                    link,
                    self.config.navigation_timeout_ms,
                    wait_until="domcontentloaded",
                )
            except PlaywrightError as e:
                log.debug("assignments_link_failed", selector=selector, error=str(e))
                continue
            log.info("assignments_opened", selector=selector)
            return True

        log.warning("assignments_link_missing", fallback=self.config.assignments_url)
        try:
            await self.page.goto(
                self.config.assignments_url, timeout=self.config.navigation_timeout_ms
            )
        except PlaywrightError as e:
            log.warning("assignments_direct_url_failed", error=str(e))
        return False

    async def snapshot(self) -> str:
        return await self.page.content()

    def extract(
        self, html: str, listing: ClassListing, now: datetime | None = None
    ) -> list[AssignmentRecord]:
        """Parse the assignments page; raises ExtractionMiss when nothing is listed."""
        return parse_assignments_page(html, listing, now)
