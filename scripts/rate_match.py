#!/usr/bin/env python3
"""
Apply GlickoTR rating updates for confirmed matches.

Rate one match:
    python scripts/rate_match.py 42

Rate several matches (each in its own transaction):
    python scripts/rate_match.py 42 43 44

Dry run (compute and print, but roll back):
    python scripts/rate_match.py 42 --dry-run
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Add src to path so this script can be run directly
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from glickotr.config import settings
from glickotr.db import get_session
from glickotr.services import RatingUpdateError, RatingUpdateService

logging.basicConfig(
    level=settings.log_level,
    format=settings.log_format,
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Apply rating updates for confirmed matches.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "match_ids",
        nargs="+",
        type=int,
        help="IDs of the matches to rate.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Compute updates but do not write to the database.",
    )
    return parser


def main() -> int:
    args = _build_parser().parse_args()
    service = RatingUpdateService.from_settings()

    failures = 0
    for match_id in args.match_ids:
        try:
            with get_session() as session:
                result = service.apply_match(session, match_id)
                if args.dry_run:
                    session.rollback()
        except RatingUpdateError as exc:
            logger.error("Match %s not rated: %s", match_id, exc)
            failures += 1
            continue

        if result is None:
            print(f"Match {match_id}: skipped")
            continue

        a_after, b_after = result.update.as_pair()
        print(
            f"Match {match_id}: games {result.games_a}-{result.games_b}  "
            f"weight={result.update.weight:.2f}  "
            f"A {result.update.player_a_before.rating:.1f} -> {a_after.rating:.1f} (RD {a_after.deviation:.1f})  "
            f"B {result.update.player_b_before.rating:.1f} -> {b_after.rating:.1f} (RD {b_after.deviation:.1f})"
            + ("  (dry run, rolled back)" if args.dry_run else "")
        )

    return 1 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
