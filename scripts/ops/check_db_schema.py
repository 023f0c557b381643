"""
Check that the database schema matches the DayScore models.

Usage:
    python -m scripts.ops.check_db_schema

AICODE-NOTE: Run after deploys to catch missing aerich migrations before
event writes start failing with OperationalError.
"""

import asyncio
import logging
import sys
from datetime import date
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from tortoise import Tortoise
from tortoise.exceptions import IntegrityError

from dayscore.database.config import TORTOISE_ORM
from dayscore.database.models import DailyContent, DailyPoints, PointsTotalCache

CHECK_OWNER_ID = "__schema_check__"


async def check_table_exists(model, table_name: str) -> tuple[bool, str]:
    """Check that a table exists and every column can be selected."""
    try:
        await model.all().limit(1)
        return True, f"✅ Table '{table_name}' exists and is accessible"
    except Exception as e:
        return False, f"❌ Table '{table_name}' error: {e}"


async def check_version_columns() -> tuple[bool, str]:
    """Conditional writes need the version column on both day tables."""
    try:
        await DailyContent.all().limit(1).values("id", "version")
        await DailyPoints.all().limit(1).values("id", "version")
        return True, "✅ Version columns exist"
    except Exception as e:
        return False, f"❌ Version columns error: {e}"


async def check_unique_day_constraint() -> tuple[bool, str]:
    """A second row for the same (owner, bucket) must be rejected."""
    bucket = date(1970, 1, 1)
    try:
        await DailyPoints.filter(owner_id=CHECK_OWNER_ID).delete()
        await DailyPoints.create(owner_id=CHECK_OWNER_ID, bucket=bucket)
        try:
            await DailyPoints.create(owner_id=CHECK_OWNER_ID, bucket=bucket)
        except IntegrityError:
            return True, "✅ Unique (owner_id, bucket) constraint enforced"
        return False, "❌ Duplicate (owner_id, bucket) row was accepted"
    except Exception as e:
        return False, f"❌ Unique constraint check error: {e}"
    finally:
        await DailyPoints.filter(owner_id=CHECK_OWNER_ID).delete()


async def run_checks() -> list[tuple[str, bool, str]]:
    """Run every check against the current connection."""
    checks = [
        ("DailyContent table", check_table_exists(DailyContent, "daily_content")),
        ("DailyPoints table", check_table_exists(DailyPoints, "daily_points")),
        ("PointsTotalCache table", check_table_exists(PointsTotalCache, "user_points_total")),
        ("Version columns", check_version_columns()),
        ("Unique day constraint", check_unique_day_constraint()),
    ]
    results = []
    for name, check in checks:
        success, message = await check
        results.append((name, success, message))
    return results


async def main() -> int:
    print("🔍 Checking DayScore schema...")

    await Tortoise.init(config=TORTOISE_ORM)
    try:
        results = await run_checks()
    finally:
        await Tortoise.close_connections()

    for name, _, message in results:
        print(f"  {name}: {message}")

    failed = [name for name, success, _ in results if not success]
    if not failed:
        print("✅ Schema matches the models.")
        return 0

    print(f"❌ {len(failed)} check(s) failed: {', '.join(failed)}")
    print("💡 Apply pending migrations with `aerich upgrade` (see `aerich history`).")
    return 1


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    sys.exit(asyncio.run(main()))
