"""Shared page helpers: resource blocking, default timeouts, log forwarding and clicks."""

from playwright.async_api import (
    ConsoleMessage,
    Error as PlaywrightError,
    Locator,
    Page,
    Route,
    TimeoutError as PlaywrightTimeoutError,
)

from sigaa_scraper.logging import get_logger

log = get_logger(__name__)

# Images and stylesheets stay: screenshots are part of the diagnostics.
BLOCKED_RESOURCE_TYPES: frozenset[str] = frozenset({"media", "font"})


async def configure_page_for_scraping(page: Page, *, timeout_ms: int = 30000) -> None:
    """Set up a Playwright page for scraping the portal.

    Blocks media and fonts, applies default timeouts, and forwards the
    page's console messages and uncaught errors to the log.

    Args:
        page: Playwright Page instance.
        timeout_ms: Default timeout for actions and navigations.
    """

    async def _block_resources(route: Route) -> None:
        if route.request.resource_type in BLOCKED_RESOURCE_TYPES:
            await route.abort()
        else:
            await route.continue_()

    def _on_console(message: ConsoleMessage) -> None:
        log.debug("page_console", type=message.type, text=message.text)

    def _on_page_error(error: PlaywrightError) -> None:
        log.debug("page_error", error=str(error))

    await page.route("**/*", _block_resources)
    page.on("console", _on_console)
    page.on("pageerror", _on_page_error)
    page.set_default_timeout(timeout_ms)
    page.set_default_navigation_timeout(timeout_ms)


async def page_text(page: Page) -> str:
    """Visible text of the page body, empty when the page has none yet."""
    try:
        return await page.inner_text("body", timeout=5000)
    except PlaywrightError as e:
        log.debug("page_text_unavailable", error=str(e))
        return ""


async def click_and_settle(
    page: Page, target: Locator, timeout_ms: int, wait_until: str = "networkidle"
) -> None:
    """Click ``target`` and wait for the navigation it triggers.

    A navigation that never comes is tolerated, JSF pages often re-render in
    place. A click that fails raises.
    """
    clicked = False
    try:
        async with page.expect_navigation(wait_until=wait_until, timeout=timeout_ms):
            await target.click(timeout=timeout_ms)
            clicked = True
    except PlaywrightTimeoutError:
        if not clicked:
            raise
        log.debug("navigation_wait_timeout", url=page.url)
