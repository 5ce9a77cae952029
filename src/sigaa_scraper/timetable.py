"""Decoding of SIGAA schedule codes such as ``"24M12"`` or ``"35T34 6N12"``.

A code is ``<weekdays><shift><slots>``: weekdays use the portal numbering
(2 = Monday ... 7 = Saturday), the shift is M (morning), T (afternoon) or
N (night), and slots index the one-hour periods of that shift.
"""

import re

from sigaa_scraper.models import ScheduleSlot

_CODE_RE = re.compile(r"\b([2-7]+)([MTN])([1-6]+)\b")

# UFC one-hour periods per shift: slot -> (start, end)
SHIFT_SLOTS: dict[str, dict[str, tuple[str, str]]] = {
    "M": {
        "1": ("08:00", "09:00"),
        "2": ("09:00", "10:00"),
        "3": ("10:00", "11:00"),
        "4": ("11:00", "12:00"),
        "5": ("12:00", "13:00"),
        "6": ("13:00", "14:00"),
    },
    "T": {
        "1": ("13:30", "14:30"),
        "2": ("14:30", "15:30"),
        "3": ("15:30", "16:30"),
        "4": ("16:30", "17:30"),
        "5": ("17:30", "18:30"),
        "6": ("18:30", "19:30"),
    },
    "N": {
        "1": ("18:00", "19:00"),
        "2": ("19:00", "20:00"),
        "3": ("20:00", "21:00"),
        "4": ("21:00", "22:00"),
    },
}


def parse_schedule_code(text: str | None) -> list[ScheduleSlot]:
    """Decode every schedule group found in ``text``.

    Unknown slots are skipped; text without a code yields an empty list.
    """
    if not text:
        return []

    slots: list[ScheduleSlot] = []
    for days, shift, periods in _CODE_RE.findall(text):
        table = SHIFT_SLOTS[shift]
        known = [table[p] for p in periods if p in table]
        if not known:
            continue
        start, end = known[0][0], known[-1][1]
        for day in days:
            slots.append(ScheduleSlot(weekday=int(day), start=start, end=end))
    return slots
