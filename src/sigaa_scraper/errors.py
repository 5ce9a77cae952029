"""Error hierarchy for portal scraping failures.

Transient failures (navigation timeouts) may be retried with tenacity;
permanent failures (browser launch, authentication) end the run and make the
caller fall back to mock data. ExtractionMiss and PersistenceError are local
to a single class and never abort the run.

Example usage with tenacity:
    @retry(retry=retry_if_exception_type(TransientError), stop=stop_after_attempt(2))
    async def open_login_page(page):
        ...
"""


class ScrapingError(Exception):
    """Base exception for all scraping errors."""

    pass


class TransientError(ScrapingError):
    """Temporary failure that may succeed on retry."""

    pass


class NavigationTimeout(TransientError):
    """A single navigation or selector wait exceeded its timeout.

    Logged and continued on a best-effort basis, retried only where a
    retry policy is attached (opening the login page).
    """

    pass


class PermanentError(ScrapingError):
    """Failure that won't succeed on retry."""

    pass


class LaunchError(PermanentError):
    """The browser executable could not be located or launched.

    Environment problem, never retried.
    """

    pass


class AuthenticationFailure(PermanentError):
    """No post-login marker was found on the page after submitting credentials.

    Wrong credentials and portal layout drift look the same from the outside,
    so the page URL and a text excerpt are kept for diagnosis.
    """

    def __init__(
        self, message: str, *, current_url: str = "", page_excerpt: str = ""
    ) -> None:
        super().__init__(message)
        self.current_url = current_url
        self.page_excerpt = page_excerpt


class ExtractionMiss(ScrapingError):
    """A class has no assignments table, or the portal says nothing was found.

    Terminal "not found" state for that class, not a failure of the run.
    """

    pass


class PersistenceError(ScrapingError):
    """Writing an artifact to disk failed."""

    pass
