"""PortalHomePage - the student portal ("Portal do Discente") after login.

Lists the enrolled classes of the semester and is the page every class visit
returns to. Entry points tried to reach the class listing, in order:
  a "Turmas" link, a "Portal do Discente" link, an "Ensino" link.
When none is present the current page is assumed to be the listing.
"""

from playwright.async_api import Error as PlaywrightError, Page

from sigaa_scraper.config import PortalConfig
from sigaa_scraper.errors import PersistenceError
from sigaa_scraper.logging import get_logger
from sigaa_scraper.models import ClassListing
from sigaa_scraper.persistence import ArtifactStore
from sigaa_scraper.strategies import enumerate_classes
from sigaa_scraper.utils import click_and_settle

log = get_logger(__name__)


class PortalHomePage:
    """Student portal home with the semester's class table."""

    LISTING_LINKS = (
        'a:has-text("Turmas")',
        'a:has-text("Portal do Discente")',
        'a:has-text("Ensino")',
    )

    def __init__(self, page: Page, config: PortalConfig, store: ArtifactStore) -> None:
        self.page = page
        self.config = config
        self.store = store

    async def open_class_listing(self) -> str | None:
        """Follow the first available link towards the class listing.

        Returns:
            The selector that was clicked, or None if the page was kept as is.
        """
        for selector in self.LISTING_LINKS:
            link = self.page.locator(selector).first
            if await link.count() == 0:
                continue
            try:
                await click_and_settle(self.page, link, self.config.navigation_timeout_ms)
            except PlaywrightError as e:
                log.debug("class_listing_link_failed", selector=selector, error=str(e))
                continue
            log.info("class_listing_opened", selector=selector, url=self.page.url)
            return selector

        log.info("class_listing_link_missing", url=self.page.url)
        return None

    async def enumerate_classes(self) -> list[ClassListing]:
        """Snapshot the listing page and run the class strategies over it."""
        html = await self.page.content()
        try:
            self.store.write_listing_page(html)
        except PersistenceError as e:
            log.error("artifact_write_failed", error=str(e))
        _, listings = enumerate_classes(html)
        for position, listing in enumerate(listings, start=1):
            log.debug("class_listed", position=position, title=listing.title)
        return listings

    async def return_home(self) -> bool:
        """Navigate back to the portal home, trying the alternate URL second.

        Returns:
            False when neither URL could be loaded; the run continues anyway.
        """
        for url in (self.config.home_url, self.config.alternate_home_url):
            try:
                await self.page.goto(
                    url,
                    wait_until="domcontentloaded",
                    timeout=self.config.navigation_timeout_ms,
                )
            except PlaywrightError as e:
                log.warning("return_home_failed", url=url, error=str(e))
                continue
            log.debug("returned_home", url=self.page.url)
            return True
        return False
