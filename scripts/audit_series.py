#!/usr/bin/env python3
"""
Print a continuity audit for one series.

Shows the series overview (books, counts, open notes) followed by every
pending violation, grouped by category.

Run with: python scripts/audit_series.py <series_id> [--all]
"""

import argparse
import asyncio
import os
import sys
from collections import defaultdict

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
load_dotenv()

from canonkeeper.database import AsyncSessionLocal, engine
from canonkeeper.errors import NotFound
from canonkeeper.schemas import ViolationStatus
from canonkeeper.services.continuity_engine import ContinuityEngine


async def audit(series_id: str, include_reviewed: bool) -> int:
    continuity = ContinuityEngine(AsyncSessionLocal)
    try:
        overview = await continuity.get_series_overview(series_id)
    except NotFound as e:
        print(e.message)
        return 1

    series = overview.series
    print(f"\n{'='*60}")
    print(f"{series.title} ({series.genre}) - {series.series_status.value}")
    print(f"{'='*60}\n")
    print(f"Books: {len(overview.books)}/{series.target_book_count}   "
          f"Characters: {overview.character_count}   World elements: {overview.world_element_count}")
    print(f"Active arcs: {overview.active_arc_count}   Total words: {overview.total_word_count:,}")

    for book in overview.books:
        window = ""
        if book.timeline_start is not None or book.timeline_end is not None:
            window = f"  [{book.timeline_start if book.timeline_start is not None else '?'}"
            window += f" - {book.timeline_end if book.timeline_end is not None else '?'}]"
        print(f"  Book {book.book_number}: {book.title} ({book.status.value}){window}")

    if overview.continuity_notes:
        print("\nOpen notes:")
        for note in overview.continuity_notes:
            print(f"  ({note.priority.value}) {note.title}")

    status = None if include_reviewed else ViolationStatus.pending
    violations = await continuity.list_violations(series_id, status)
    print(f"\nViolations ({'all' if include_reviewed else 'pending'}): {len(violations)}")
    grouped = defaultdict(list)
    for v in violations:
        grouped[v.category.value].append(v)
    for category, items in sorted(grouped.items()):
        print(f"\n  {category}:")
        for v in items:
            where = f" (Book {v.book_number})" if v.book_number else ""
            print(f"    - [{v.status.value}] {v.description}{where}")
    return 0


async def main() -> int:
    parser = argparse.ArgumentParser(description="Continuity audit for a series")
    parser.add_argument("series_id")
    parser.add_argument("--all", action="store_true", help="include acknowledged and resolved violations")
    args = parser.parse_args()
    try:
        return await audit(args.series_id, args.all)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
