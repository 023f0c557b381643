"""
Rebuild the advisory running totals (user_points_total) from live sums.

Usage:
    python -m scripts.ops.recalc_totals

AICODE-NOTE: Levels never read user_points_total, so drift there is only
visible to other consumers. This resets it to the sum of daily_points rows.
"""

import asyncio
import logging
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from tortoise import Tortoise

from dayscore.database.config import TORTOISE_ORM
from dayscore.storage import points_repo


async def recalculate_totals() -> int:
    """Reset every cached total to its live sum. Returns how many drifted."""
    drifted = 0
    owner_ids = await points_repo.get_owner_ids()
    print(f"Found {len(owner_ids)} users with points")

    for owner_id in owner_ids:
        live = sum(await points_repo.get_daily_totals(owner_id))
        cached = await points_repo.get_cached_total(owner_id)

        if cached != live:
            drifted += 1
            print(f"  {owner_id}: cached {cached} -> live {live}")
        await points_repo.set_cached_total(owner_id, live)

    return drifted


async def main() -> None:
    await Tortoise.init(config=TORTOISE_ORM)
    try:
        drifted = await recalculate_totals()
    finally:
        await Tortoise.close_connections()
    print(f"\nDone! {drifted} cached totals corrected.")


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    asyncio.run(main())
