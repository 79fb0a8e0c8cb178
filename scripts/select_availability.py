"""Interactively pick availability on a When2Meet event and submit it.

Reads the event grid, prints the selection menu, parses your answer,
shows what it resolved to, and after confirmation signs in and marks the
slots.

Run with: python scripts/select_availability.py https://www.when2meet.com/?12345-AbCdE
Debug:    python scripts/select_availability.py URL --headed
Zone:     python scripts/select_availability.py URL --timezone Europe/Zurich
Preview:  python scripts/select_availability.py URL --dry-run

Exit codes:
  0 = success (or nothing selected / submission declined)
  1 = error (message on stderr)
"""

import argparse
import asyncio
import getpass
import os
import sys

from dotenv import load_dotenv

load_dotenv()

# Add project root to path for src imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from src.when2meet.config import get_config  # noqa: E402
from src.when2meet.logging import setup_logging  # noqa: E402
from src.when2meet.pages.availability import mark_availability  # noqa: E402
from src.when2meet.pages.event import fetch_event  # noqa: E402
from src.when2meet.prompt import compile_prompt  # noqa: E402
from src.when2meet.selection import parse_selection  # noqa: E402
from src.when2meet.timeutil import resolve_timezone  # noqa: E402


def _log(msg: str) -> None:
    """Write diagnostic messages to stderr so stdout stays clean for the menu."""
    print(msg, file=sys.stderr)


def _parse_args() -> argparse.Namespace:
    """Parse CLI arguments using argparse."""
    parser = argparse.ArgumentParser(
        description="Select and submit your availability on a When2Meet event.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("url", help="When2Meet event URL.")
    parser.add_argument(
        "--headed",
        action="store_true",
        help="Launch browser in headed mode (visible window).",
    )
    parser.add_argument(
        "--timezone",
        type=str,
        default=None,
        help="IANA zone for dates and periods (default: TIMEZONE or host zone).",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Stop after showing the parsed selection; never sign in.",
    )
    return parser.parse_args()


def _ask(question: str) -> str:
    return input(question).strip()


async def main(args: argparse.Namespace) -> int:
    config = get_config()
    if args.headed:
        config = config.model_copy(update={"headless": False})
    setup_logging(json_output=config.log_json, log_level=config.log_level)
    tz = resolve_timezone(args.timezone or config.timezone)

    _log("Fetching event details...")
    details = await fetch_event(args.url, config, tz)
    _log(f"Event: {details.name}")
    _log(f"Dates: {details.date_range}")

    menu, lookup = compile_prompt(details.days, details.name, tz)
    print(menu)

    answer = _ask("Your selections: ")
    result = parse_selection(answer, details.days, lookup, tz)
    if not result.timestamps:
        print("No time slots were selected. Please try again with valid selections.")
        return 0

    print("\nSelected time slots:")
    for line in result.readable:
        print(f"  {line}")
    print("\nRaw timestamps selected:")
    print(", ".join(str(ts) for ts in result.timestamps))

    if args.dry_run:
        return 0
    if _ask("\nDo you want to mark these times on When2Meet? (yes/no): ").lower() != "yes":
        return 0

    user_name = _ask("Enter your name for When2Meet: ")
    password = None
    if _ask("Do you need a password? (yes/no): ").lower() == "yes":
        password = getpass.getpass("Enter your password: ")

    _log("Marking your availability on When2Meet...")
    mark = await mark_availability(args.url, user_name, password, result.timestamps, config)

    print(f"\nMarked {mark.marked_count} slots as available")
    if mark.failures:
        print(f"Failed to mark {len(mark.failures)} slots:")
        for failure in mark.failures:
            print(f"  {failure.timestamp}: {failure.message}")
    print(f"You can see the results at: {mark.result_url or args.url}")
    return 0


if __name__ == "__main__":
    args = _parse_args()
    try:
        sys.exit(asyncio.run(main(args)))
    except KeyboardInterrupt:
        sys.exit(1)
    except Exception as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)
