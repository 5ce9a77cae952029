"""Placeholder dataset returned when a real scrape fails.

Results built here carry ``source = mockData``; consumers must check the
provenance flag before treating any of it as the student's real schedule.
"""

from datetime import date

from sigaa_scraper.models import (
    AssignmentRecord,
    ClassListing,
    DataSource,
    ScheduleSlot,
    ScrapeResult,
)

MOCK_MESSAGE = "Real scraping failed; placeholder data was loaded as a fallback."

MOCK_CLASSES: tuple[ClassListing, ...] = (
    ClassListing(
        code="CK0245",
        title="PROGRAMAÇÃO PARA DISPOSITIVOS MÓVEIS",
        instructor="JOSÉ ANTONIO FERNANDES DE MACÊDO",
        location="Bloco 952, Sala 01",
        schedule=[ScheduleSlot(weekday=2, start="08:00", end="10:00")],
    ),
    ClassListing(
        code="CK0215",
        title="PROJETO DE PESQUISA CIENTÍFICA",
        instructor="MARIA VIVIANE DE MENEZES",
        location="Bloco 910, Sala 04",
        schedule=[ScheduleSlot(weekday=3, start="14:00", end="16:00")],
    ),
    ClassListing(
        code="CK0197",
        title="INTELIGÊNCIA ARTIFICIAL",
        instructor="FERNANDO ANTONIO MOTA TRINTA",
        location="Bloco 952, Sala 05",
        schedule=[ScheduleSlot(weekday=5, start="10:00", end="12:00")],
    ),
)

MOCK_TASKS: tuple[AssignmentRecord, ...] = (
    AssignmentRecord(
        class_code="CK0245",
        class_title="PROGRAMAÇÃO PARA DISPOSITIVOS MÓVEIS",
        title="Projeto Final - App Flutter",
        submission_window="01/11/2023 00:00 a 10/12/2023 23:59",
        due_date=date(2023, 12, 10),
        body_text="Desenvolver um aplicativo com Flutter utilizando Firebase",
        is_past_due=True,
    ),
    AssignmentRecord(
        class_code="CK0197",
        class_title="INTELIGÊNCIA ARTIFICIAL",
        title="Implementação de Algoritmo Genético",
        submission_window="01/11/2023 00:00 a 30/11/2023 23:59",
        due_date=date(2023, 11, 30),
        body_text=(
            "Implementar um algoritmo genético para resolver o problema "
            "do caixeiro viajante"
        ),
        is_past_due=True,
    ),
    AssignmentRecord(
        class_code="CK0215",
        class_title="PROJETO DE PESQUISA CIENTÍFICA",
        title="Entrega do Artigo Final",
        submission_window="01/11/2023 00:00 a 20/12/2023 23:59",
        due_date=date(2023, 12, 20),
        body_text="Artigo científico no formato SBC",
        is_past_due=True,
    ),
)


def mock_result(reason: str | None = None) -> ScrapeResult:
    """Fresh copy of the placeholder dataset, tagged as mock data."""
    message = MOCK_MESSAGE if not reason else f"{MOCK_MESSAGE} Cause: {reason}"
    return ScrapeResult(
        classes=[c.model_copy(deep=True) for c in MOCK_CLASSES],
        tasks=[t.model_copy(deep=True) for t in MOCK_TASKS],
        source=DataSource.MOCK_DATA,
        message=message,
    )
