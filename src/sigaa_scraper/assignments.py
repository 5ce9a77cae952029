"""Parsing of a class's assignments ("Tarefas") page.

DOM structure of the listing:
  table.listing
    tbody
      tr -> td title, td submission window, ..., a[title="Visualizar tarefa"],
            a[title="Enviar tarefa"]
      tr -> td.first with the description HTML
      (pairs repeat)

Rows come in pairs; a trailing row without its description partner is
dropped.
"""

from datetime import datetime

from bs4 import BeautifulSoup, Tag

from sigaa_scraper.dates import is_past_due, parse_due_date
from sigaa_scraper.errors import ExtractionMiss
from sigaa_scraper.logging import get_logger
from sigaa_scraper.models import AssignmentRecord, ClassListing
from sigaa_scraper.predicates import has_no_items_marker

log = get_logger(__name__)

ASSIGNMENTS_TABLE = "table.listing"
VIEW_LINK = 'a[title="Visualizar tarefa"]'
SUBMIT_LINK = 'a[title="Enviar tarefa"]'
DESCRIPTION_CELL = "td.first"

UNTITLED = "Sem título"


def html_to_text(html: str) -> str:
    """Visible text of an HTML fragment with whitespace collapsed."""
    if not html:
        return ""
    return " ".join(BeautifulSoup(html, "html.parser").get_text(" ").split())


def _href(row: Tag, selector: str) -> str | None:
    link = row.select_one(selector)
    if link is None:
        return None
    return link.get("href")


def _record(
    title_row: Tag, description_row: Tag, listing: ClassListing, now: datetime
) -> AssignmentRecord | None:
    cells = title_row.find_all("td")
    if len(cells) < 2:
        return None

    title = " ".join(cells[0].get_text(" ").split()) or UNTITLED
    window = " ".join(cells[1].get_text(" ").split())

    description = description_row.select_one(DESCRIPTION_CELL)
    body_html = description.decode_contents().strip() if description else ""

    return AssignmentRecord(
        class_code=listing.code,
        class_title=listing.title,
        title=title,
        submission_window=window,
        due_date=parse_due_date(window),
        body_html=body_html,
        body_text=html_to_text(body_html),
        is_past_due=is_past_due(window, now),
        has_submission_link=title_row.select_one(SUBMIT_LINK) is not None,
        view_url=_href(title_row, VIEW_LINK),
        submit_url=_href(title_row, SUBMIT_LINK),
    )


def parse_assignments_page(
    html: str, listing: ClassListing, now: datetime | None = None
) -> list[AssignmentRecord]:
    """Extract the assignments of ``listing`` from an assignments page.

    Raises:
        ExtractionMiss: The page says no items were found, or has no
            assignments table at all.
    """
    now = now or datetime.now()
    soup = BeautifulSoup(html, "html.parser")
    page_text = soup.get_text(" ")

    if has_no_items_marker(page_text):
        raise ExtractionMiss(f"No assignments listed for {listing.title}")

    table = soup.select_one(ASSIGNMENTS_TABLE)
    if table is None:
        raise ExtractionMiss(f"Assignments table not found for {listing.title}")

    body = table.find("tbody") or table
    rows = body.find_all("tr", recursive=False)
    if len(rows) % 2:
        log.debug("assignment_row_unpaired", class_title=listing.title, rows=len(rows))

    records: list[AssignmentRecord] = []
    for title_row, description_row in zip(rows[0::2], rows[1::2]):
        record = _record(title_row, description_row, listing, now)
        if record is not None:
            records.append(record)

    log.info(
        "assignments_parsed",
        class_title=listing.title,
        rows=len(rows),
        assignments=len(records),
        open=sum(1 for r in records if not r.is_past_due),
    )
    return records
