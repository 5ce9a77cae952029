"""Pydantic models for portal scrape data.

All data structures use Pydantic v2 for validation, serialization, and type safety.
"""

from datetime import date
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, SecretStr, field_validator


class Credentials(BaseModel):
    """Portal login passed by value into a scrape and discarded afterwards."""

    username: str = Field(min_length=1)
    password: SecretStr

    @field_validator("password")
    @classmethod
    def _password_not_empty(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value():
            raise ValueError("password must not be empty")
        return value


class ScheduleSlot(BaseModel):
    """One weekly meeting of a class, decoded from a SIGAA schedule code."""

    weekday: int  # 2 = Monday ... 7 = Saturday, portal numbering
    start: str  # "08:00"
    end: str  # "10:00"


class ClassListing(BaseModel):
    """One enrolled course section found on the student portal."""

    code: str | None = None  # "CK0245", or the best identifier the strategy saw
    title: str
    instructor: str | None = None
    location: str | None = None  # "Bloco 952, Sala 01"
    schedule: list[ScheduleSlot] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("class title must not be empty")
        return value


class AssignmentRecord(BaseModel):
    """A single assignment row pair from a class's "Tarefas" table."""

    class_code: str | None = None
    class_title: str
    title: str
    submission_window: str = ""  # "01/12/2023 00:00 a 10/12/2023 23:59"
    due_date: date | None = None  # None when the window text is unparseable
    body_html: str = ""
    body_text: str = ""
    is_past_due: bool = False
    has_submission_link: bool = False
    view_url: str | None = None
    submit_url: str | None = None


class LoginResult(BaseModel):
    success: bool
    current_url: str = ""
    page_excerpt: str = ""  # visible text sample, only filled on failure


class ClassState(str, Enum):
    """States of the per-class extraction state machine."""

    ENTERING = "entering"
    AT_CLASS_PAGE = "at_class_page"
    EXPANDING_ASSIGNMENTS_MENU = "expanding_assignments_menu"
    ON_ASSIGNMENTS_PAGE = "on_assignments_page"
    EXTRACTED = "extracted"
    NOT_FOUND = "not_found"
    FAILED = "failed"


class ClassReport(BaseModel):
    """Outcome of visiting one class."""

    listing: ClassListing
    state: ClassState = ClassState.ENTERING
    strategy: str | None = None  # entry strategy that reached the class page
    assignments: list[AssignmentRecord] = Field(default_factory=list)
    error: str | None = None


class DataSource(str, Enum):
    """Provenance flag of a scrape result."""

    REAL_SCRAPING = "realScraping"
    MOCK_DATA = "mockData"


class ScrapeResult(BaseModel):
    """Terminal artifact of a run, returned to the caller."""

    classes: list[ClassListing] = Field(default_factory=list)
    tasks: list[AssignmentRecord] = Field(default_factory=list)
    reports: list[ClassReport] = Field(default_factory=list)
    source: DataSource = DataSource.REAL_SCRAPING
    message: str | None = None
    run_dir: str | None = None

    @property
    def is_mock(self) -> bool:
        return self.source is DataSource.MOCK_DATA

    def assignments_by_class(self) -> dict[str, list[AssignmentRecord]]:
        """Group tasks under their class title, keeping class order."""
        grouped: dict[str, list[AssignmentRecord]] = {
            listing.title: [] for listing in self.classes
        }
        for task in self.tasks:
            grouped.setdefault(task.class_title, []).append(task)
        return grouped

    def to_payload(self) -> dict[str, Any]:
        """Shape handed to the calling service: ``{success, classes, tasks, source, message}``."""
        return {
            "success": True,
            "classes": [c.model_dump(mode="json") for c in self.classes],
            "tasks": [t.model_dump(mode="json") for t in self.tasks],
            "source": self.source.value,
            "message": self.message,
        }
