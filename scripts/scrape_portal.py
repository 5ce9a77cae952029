"""Scrape classes and assignments from SIGAA and print them as JSON or a table.

Debugging CLI around ``sigaa_scraper.scrape_portal``. Credentials come from
SIGAA_USER / SIGAA_PASS in the environment or .env.

Run with: python scripts/scrape_portal.py
Debug:    python scripts/scrape_portal.py --headed
Table:    python scripts/scrape_portal.py --table
To file:  python scripts/scrape_portal.py --output data/sigaa.json
Strict:   python scripts/scrape_portal.py --no-fallback

Exit codes:
  0 = success (JSON or table on stdout, or file written with --output)
  1 = error (message on stderr)
  2 = placeholder data returned because the real scrape failed
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

from sigaa_scraper.config import get_config  # noqa: E402
from sigaa_scraper.logging import setup_logging  # noqa: E402
from sigaa_scraper.models import ScrapeResult  # noqa: E402
from sigaa_scraper.scraper import scrape_portal  # noqa: E402

_DAY_NAMES = {2: "Mon", 3: "Tue", 4: "Wed", 5: "Thu", 6: "Fri", 7: "Sat"}


def _parse_args() -> argparse.Namespace:
    """Parse CLI arguments using argparse."""
    parser = argparse.ArgumentParser(
        description="Get classes and assignments from SIGAA as JSON or table.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--headed",
        action="store_true",
        help="Launch browser in headed mode (visible window).",
    )
    parser.add_argument(
        "--table",
        action="store_true",
        help="Output a human-readable table to stdout.",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Write the JSON payload to this file instead of stdout.",
    )
    parser.add_argument(
        "--no-fallback",
        action="store_true",
        help="Fail instead of returning placeholder data.",
    )
    return parser.parse_args()


def _format_table(result: ScrapeResult) -> str:
    """Format classes and their assignments as a human-readable table.

    Columns: Class | Schedule | Assignment | Window | Status
    """
    if not result.classes:
        return "(no classes found)"

    headers = ["Class", "Schedule", "Assignment", "Window", "Status"]
    rows = []
    grouped = result.assignments_by_class()
    for listing in result.classes:
        schedule = " ".join(
            f"{_DAY_NAMES.get(s.weekday, s.weekday)} {s.start}-{s.end}"
            for s in listing.schedule
        ) or "-"
        tasks = grouped.get(listing.title) or [None]
        for task in tasks:
            rows.append(
                [
                    listing.code or listing.title,
                    schedule,
                    task.title if task else "-",
                    task.submission_window if task else "-",
                    ("past due" if task.is_past_due else "open") if task else "-",
                ]
            )

    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))

    header_line = " | ".join(h.ljust(widths[i]) for i, h in enumerate(headers))
    separator = "-+-".join("-" * w for w in widths)
    row_lines = [
        " | ".join(cell.ljust(widths[i]) for i, cell in enumerate(row)) for row in rows
    ]
    return "\n".join([header_line, separator, *row_lines])


async def main(args: argparse.Namespace) -> int:
    config = get_config()
    setup_logging(json_output=config.log_json, log_level=config.log_level)
    if args.headed:
        config.headless = False

    if not config.sigaa_user or not config.sigaa_pass:
        print("ERROR: SIGAA_USER and SIGAA_PASS must be set (.env)", file=sys.stderr)
        return 1

    result = await scrape_portal(
        config.sigaa_user,
        config.sigaa_pass,
        config=config,
        allow_mock=not args.no_fallback,
    )

    if args.table:
        print(_format_table(result))
    else:
        payload = json.dumps(result.to_payload(), indent=2, ensure_ascii=False)
        if args.output:
            output_file = Path(args.output)
            output_file.parent.mkdir(parents=True, exist_ok=True)
            output_file.write_text(payload, encoding="utf-8")
            print(f"Wrote {len(result.classes)} classes -> {output_file}", file=sys.stderr)
        else:
            print(payload)

    if result.is_mock:
        print(f"WARNING: {result.message}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    args = _parse_args()
    try:
        sys.exit(asyncio.run(main(args)))
    except Exception as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)
