"""Class enumeration strategies over a snapshot of the student portal.

The portal has no stable markup contract, so classes are found by an ordered
list of pure extractors. Each takes the parsed page and returns a non-empty
list of ClassListing or None. ``enumerate_classes`` takes the first extractor
that produces something; results of different extractors are never merged.

Page layout seen on the portal home ("Turmas do Semestre"):
  table
    tr
      td.descricao -> form > a (class title, JSF onclick)
      td.info      -> location ("Bloco 952, Sala 01")
      td.info      -> schedule code ("24M12")
"""

import re
from collections.abc import Callable

from bs4 import BeautifulSoup, Tag

from sigaa_scraper.logging import get_logger
from sigaa_scraper.models import ClassListing
from sigaa_scraper.timetable import parse_schedule_code

log = get_logger(__name__)

ClassStrategy = Callable[[BeautifulSoup], list[ClassListing] | None]

COURSE_CODE_RE = re.compile(r"\b([A-Z]{2,3}\d{4,6})\b")
# "RUS0081 - MATEMATICA COMPUTACIONAL"
COURSE_TITLE_RE = re.compile(r"^([A-Z]{2,3}\d{4,6})\s+[-–]\s+.+")
SCHEDULE_CODE_RE = re.compile(r"\b[2-7]+[MTN][1-6]+\b")


def _text(node: Tag | None) -> str:
    if node is None:
        return ""
    return " ".join(node.get_text(" ").split())


def parse_course_code(text: str) -> str | None:
    """Extract a course code such as ``CK0245`` from a title or cell."""
    match = COURSE_CODE_RE.search(text or "")
    return match.group(1) if match else None


def _listing(title: str, code: str | None = None, **fields) -> ClassListing | None:
    title = " ".join(title.split())
    if not title:
        return None
    return ClassListing(code=code or parse_course_code(title), title=title, **fields)


def _row_details(row: Tag | None) -> dict:
    """Location, schedule and instructor from the info cells of a class row."""
    if row is None:
        return {}

    details: dict = {}
    infos = [_text(td) for td in row.select("td.info")]
    for info in infos:
        if SCHEDULE_CODE_RE.search(info):
            details.setdefault("schedule", parse_schedule_code(info))
        elif info:
            details.setdefault("location", info)

    instructor = row.select_one(".docente, td.professor")
    if instructor is not None and _text(instructor):
        details["instructor"] = _text(instructor)
    return details


def structured_rows(soup: BeautifulSoup) -> list[ClassListing] | None:
    """Portal class table: ``td.descricao`` anchors or "detalhes" links."""
    anchors = soup.select('td.descricao a, table.listagem td a[onclick*="detalhes"]')
    listings = []
    for anchor in anchors:
        listing = _listing(_text(anchor), **_row_details(anchor.find_parent("tr")))
        if listing is not None:
            listings.append(listing)
    return listings or None


def detail_links(soup: BeautifulSoup) -> list[ClassListing] | None:
    """Links pointing at a class page (``turma.jsf``)."""
    listings = []
    for anchor in soup.select('td a[href*="turma.jsf"]'):
        listing = _listing(_text(anchor), **_row_details(anchor.find_parent("tr")))
        if listing is not None:
            listings.append(listing)
    return listings or None


def course_code_anchors(soup: BeautifulSoup) -> list[ClassListing] | None:
    """Any anchor whose text reads ``CODE - NAME``."""
    listings = []
    for anchor in soup.find_all("a"):
        text = _text(anchor)
        match = COURSE_TITLE_RE.match(text)
        if match:
            listings.append(ClassListing(code=match.group(1), title=text))
    return listings or None


def generic_table_rows(soup: BeautifulSoup) -> list[ClassListing] | None:
    """Every table row with two or more cells: code cell, then name cell."""
    rows = soup.select("table tr")[1:]
    listings = []
    for row in rows:
        cells = row.find_all("td", recursive=False)
        if len(cells) < 2:
            continue
        name_cell = cells[1]
        link = name_cell.find("a")
        title = _text(link) if link is not None else _text(name_cell)
        code = _text(cells[0]) or None
        listing = _listing(title, code=code)
        if listing is not None:
            listings.append(listing)
    return listings or None


def page_text_patterns(soup: BeautifulSoup) -> list[ClassListing] | None:
    """Last resort: lines of page text that carry a course code."""
    body = soup.body or soup
    listings = []
    for line in body.get_text("\n").splitlines():
        line = " ".join(line.split())
        if len(line) > 5 and COURSE_CODE_RE.search(line):
            listings.append(ClassListing(code=parse_course_code(line), title=line))
    return listings or None


CLASS_STRATEGIES: tuple[ClassStrategy, ...] = (
    structured_rows,
    detail_links,
    course_code_anchors,
    generic_table_rows,
    page_text_patterns,
)


def dedupe_by_title(listings: list[ClassListing]) -> list[ClassListing]:
    """Drop repeated titles, keeping the first occurrence and its position."""
    seen: set[str] = set()
    unique: list[ClassListing] = []
    for listing in listings:
        if listing.title in seen:
            continue
        seen.add(listing.title)
        unique.append(listing)
    return unique


def enumerate_classes(
    html: str, strategies: tuple[ClassStrategy, ...] = CLASS_STRATEGIES
) -> tuple[str | None, list[ClassListing]]:
    """Run ``strategies`` in order over ``html`` and keep the first hit.

    Returns:
        (name of the winning strategy, deduplicated listings); (None, [])
        when no strategy found anything.
    """
    soup = BeautifulSoup(html, "html.parser")
    for strategy in strategies:
        found = strategy(soup)
        if found:
            listings = dedupe_by_title(found)
            log.info(
                "classes_enumerated",
                strategy=strategy.__name__,
                found=len(found),
                unique=len(listings),
            )
            return strategy.__name__, listings
        log.debug("class_strategy_empty", strategy=strategy.__name__)

    log.warning("classes_not_found", strategies=len(strategies))
    return None, []
