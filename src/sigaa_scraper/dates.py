"""Due-date parsing for free-text submission windows.

SIGAA shows windows such as ``"01/12/2023 00:00 a 10/12/2023 23:59"`` or
``"até 10/12/2023"``. The deadline is the last date introduced by
"a", "até" or "until".
"""

import re
from datetime import date, datetime, time

from sigaa_scraper.logging import get_logger

log = get_logger(__name__)

_DEADLINE_RE = re.compile(
    r"(?:\ba|até|ate|until)\s+(\d{2})/(\d{2})/(\d{4})",
    re.IGNORECASE,
)

END_OF_DAY = time(23, 59, 59)


def parse_due_date(window: str) -> date | None:
    """Return the deadline date of a submission window, or None."""
    matches = _DEADLINE_RE.findall(window or "")
    if not matches:
        return None
    day, month, year = matches[-1]
    try:
        return date(int(year), int(month), int(day))
    except ValueError:
        return None


def due_instant(due: date) -> datetime:
    """Last second of the due day, naive local time."""
    return datetime.combine(due, END_OF_DAY)


def is_past_due(window: str, now: datetime | None = None) -> bool:
    """True when the window's deadline (end of day) is before ``now``.

    Unparseable windows count as not overdue; a warning is logged so the
    unknown deadline is visible.
    """
    due = parse_due_date(window)
    if due is None:
        if window:
            log.warning("due_date_unparseable", window=window)
        return False
    now = now or datetime.now()
    return due_instant(due) < now
