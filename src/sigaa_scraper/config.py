"""Scraper configuration loaded from environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings


class PortalConfig(BaseSettings):
    """Portal scraper configuration loaded from environment variables.

    Settings are loaded from environment variables with sensible defaults.
    For local development, create a .env file in the project root.
    """

    # SIGAA settings (browser-only portal, no API exists)
    sigaa_url: str = Field(
        default="https://si3.ufc.br",
        description="SIGAA portal origin",
    )
    login_path: str = Field(
        default="/sigaa/verTelaLogin.do",
        description="Path of the login form",
    )
    portal_home_path: str = Field(
        default="/sigaa/verPortalDiscente.do",
        description="Student portal home (class listing)",
    )
    portal_alternate_path: str = Field(
        default="/sigaa/portais/discente/discente.jsf",
        description="Alternate student portal URL used when the home path fails",
    )
    assignments_path: str = Field(
        default="/sigaa/ava/tarefas/participante/listar.jsf",
        description="Direct assignments listing, last resort when no menu link works",
    )
    sigaa_user: str = Field(
        default="",
        description="SIGAA username, used by the debugging script only",
    )
    sigaa_pass: str = Field(
        default="",
        description="SIGAA password, used by the debugging script only",
    )

    # Login form selectors (override for different SIGAA layouts)
    username_selector: str = Field(
        default='input[name="user.login"]',
        description="CSS selector for username input on login page",
    )
    password_selector: str = Field(
        default='input[name="user.senha"]',
        description="CSS selector for password input on login page",
    )
    submit_selector: str = Field(
        default='input[type="submit"][value="Entrar"]',
        description="CSS selector for login submit button",
    )

    # Browser
    headless: bool = Field(default=True, description="Run Chromium headless")
    browser_executable: str | None = Field(
        default=None,
        description="Explicit Chromium executable (e.g. a serverless build)",
    )
    user_agent: str = Field(
        default=(
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
        ),
        description="User agent of the browser context",
    )

    # Paths
    artifacts_dir: str = Field(
        default="data/downloads",
        description="Root directory for screenshots, HTML snapshots and JSON",
    )
    state_file: str = Field(
        default="data/state/sigaa_session.json",
        description="Playwright storage state saved on interrupt",
    )

    # Session settings
    max_session_age_hours: int = Field(
        default=12,
        description="Maximum age of a saved session before it is ignored",
    )

    # Timeouts
    navigation_timeout_ms: int = Field(
        default=30000, description="Timeout for page loads"
    )
    entry_timeout_ms: int = Field(
        default=10000, description="Timeout for navigation after clicking a class"
    )
    login_timeout_ms: int = Field(
        default=20000, description="How long to wait for a post-login marker"
    )
    run_timeout_seconds: float = Field(
        default=240, description="Upper bound for a whole scrape"
    )

    # Logging
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format (for production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    model_config = {
        "env_prefix": "",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @property
    def login_url(self) -> str:
        return f"{self.sigaa_url}{self.login_path}"

    @property
    def home_url(self) -> str:
        return f"{self.sigaa_url}{self.portal_home_path}"

    @property
    def alternate_home_url(self) -> str:
        return f"{self.sigaa_url}{self.portal_alternate_path}"

    @property
    def assignments_url(self) -> str:
        return f"{self.sigaa_url}{self.assignments_path}"


# Singleton pattern
_config: PortalConfig | None = None


def get_config() -> PortalConfig:
    """Get the scraper configuration singleton.

    Returns:
        PortalConfig: Scraper configuration instance
    """
    global _config
    if _config is None:
        _config = PortalConfig()
    return _config
