"""SIGAA login flow.

The portal gives no structured success signal, so success is inferred from
login markers in the visible page text (see ``predicates``). An announcement
interstitial ("Continuar >>") may appear after submitting the form and is
dismissed before the markers are checked.
"""

import asyncio
from typing import TYPE_CHECKING

from playwright.async_api import Error as PlaywrightError, TimeoutError as PlaywrightTimeoutError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_fixed

from sigaa_scraper.config import PortalConfig
from sigaa_scraper.errors import NavigationTimeout
from sigaa_scraper.logging import get_logger
from sigaa_scraper.models import Credentials, LoginResult
from sigaa_scraper.predicates import is_announcement_page, is_logged_in
from sigaa_scraper.utils import page_text

if TYPE_CHECKING:
    from playwright.async_api import Page

    from sigaa_scraper.session import PortalSession

log = get_logger(__name__)

CONTINUE_BUTTON = 'input[value="Continuar >>"]'
MARKER_POLL_SECONDS = 0.5
EXCERPT_CHARS = 500


@retry(
    stop=stop_after_attempt(2),
    wait=wait_fixed(5),
    retry=retry_if_exception_type(NavigationTimeout),
    reraise=True,
)
async def open_login_page(page: "Page", config: PortalConfig) -> None:
    """Load the login form, retrying once on a navigation timeout."""
    try:
        await page.goto(
            config.login_url,
            wait_until="domcontentloaded",
            timeout=config.navigation_timeout_ms,
        )
    except PlaywrightTimeoutError as e:
        log.warning("login_page_timeout", url=config.login_url)
        raise NavigationTimeout(f"Login page did not load: {e}") from e
    log.info("login_page_loaded", url=config.login_url)


async def dismiss_announcement(page: "Page", config: PortalConfig) -> bool:
    """Click through the post-login announcement page if it is showing.

    Returns:
        True if the interstitial was found and dismissed.
    """
    if not is_announcement_page(page.url, await page_text(page)):
        return False

    button = page.locator(CONTINUE_BUTTON)
    if await button.count() == 0:
        log.debug("announcement_without_continue", url=page.url)
        return False

    log.info("announcement_detected", url=page.url)
    try:
        async with page.expect_navigation(
            wait_until="domcontentloaded", timeout=config.entry_timeout_ms
        ):
            await button.first.click()
    except PlaywrightTimeoutError:
        log.debug("announcement_navigation_timeout")
    except PlaywrightError as e:
        log.warning("announcement_dismiss_failed", error=str(e))
        return False
    return True


async def wait_for_login_markers(page: "Page", timeout_ms: int) -> tuple[bool, str]:
    """Poll the page text until a login marker shows up or time runs out.

    Returns:
        (marker found, last page text seen)
    """
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout_ms / 1000
    while True:
        text = await page_text(page)
        if is_logged_in(text):
            return True, text
        if loop.time() >= deadline:
            return False, text
        await asyncio.sleep(MARKER_POLL_SECONDS)


async def login(
    session: "PortalSession", credentials: Credentials, config: PortalConfig
) -> LoginResult:
    """Submit credentials to the portal and verify the session is ready.

    Raises:
        NavigationTimeout: The login page itself could not be loaded.
    """
    page = session.page
    store = session.run.store

    log.info("login_started", username=credentials.username)
    await open_login_page(page, config)
    await store.screenshot(page, store.run_dir / "login_page.png")

    await page.fill(config.username_selector, credentials.username)
    await page.fill(config.password_selector, credentials.password.get_secret_value())

    try:
        async with page.expect_navigation(
            wait_until="domcontentloaded", timeout=config.navigation_timeout_ms
        ):
            await page.click(config.submit_selector)
    except PlaywrightTimeoutError:
        log.warning("login_navigation_timeout", url=page.url)

    await dismiss_announcement(page, config)

    success, text = await wait_for_login_markers(page, config.login_timeout_ms)
    await store.screenshot(page, store.run_dir / "after_login.png")

    if not success:
        log.error("login_failed", url=page.url)
        return LoginResult(
            success=False,
            current_url=page.url,
            page_excerpt=" ".join(text.split())[:EXCERPT_CHARS],
        )

    log.info("login_succeeded", url=page.url)
    return LoginResult(success=True, current_url=page.url)
