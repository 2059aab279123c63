#!/usr/bin/env python3
"""
Recompute every professor's average rating from approved professor reviews.

Usage:
    python scripts/recompute_ratings.py
"""

import asyncio
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from app.core.database import AsyncSessionLocal, close_db  # noqa: E402
from app.services.rating_aggregator import rating_aggregator  # noqa: E402


async def main() -> int:
    try:
        async with AsyncSessionLocal() as db:
            updated = await rating_aggregator.recompute_all(db)
            await db.commit()
    finally:
        await close_db()

    print(f"Recomputed ratings for {updated} professor(s)")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
