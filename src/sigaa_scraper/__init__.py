"""SIGAA student portal scraper.

Logs into the portal with a headless browser, enumerates the enrolled
classes, extracts each class's assignments and returns them as a
ScrapeResult, falling back to placeholder data when the run fails.
"""

from sigaa_scraper.errors import (
    AuthenticationFailure,
    ExtractionMiss,
    LaunchError,
    NavigationTimeout,
    PersistenceError,
    ScrapingError,
)
from sigaa_scraper.models import (
    AssignmentRecord,
    ClassListing,
    ClassState,
    DataSource,
    ScrapeResult,
)
from sigaa_scraper.scraper import PortalScraper, scrape_portal

__all__ = [
    "scrape_portal",
    "PortalScraper",
    "ScrapeResult",
    "ClassListing",
    "AssignmentRecord",
    "ClassState",
    "DataSource",
    "ScrapingError",
    "LaunchError",
    "AuthenticationFailure",
    "NavigationTimeout",
    "ExtractionMiss",
    "PersistenceError",
]
