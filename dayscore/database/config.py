"""
Database configuration (Tortoise ORM).
Supports SQLite (dev) and PostgreSQL (production).
"""

import logging
from typing import Any

from dayscore.config import config

logger = logging.getLogger(__name__)

MODEL_MODULES = ["dayscore.database.models", "aerich.models"]


def normalize_db_url(url: str) -> str:
    """
    Tortoise only understands the 'postgres://' scheme, but Railway/Render
    and most docs hand out 'postgresql://' URLs.
    """
    if url.startswith("postgresql://"):
        return "postgres://" + url[len("postgresql://"):]
    return url


def build_tortoise_config(db_url: str | None = None) -> dict[str, Any]:
    """
    Tortoise config dict for the app, aerich and the ops scripts.

    Args:
        db_url: Connection URL (default: config.database_url)
    """
    url = normalize_db_url(db_url or config.database_url)
    logger.info(f"Database URL scheme: {url.split('://')[0] if '://' in url else 'unknown'}")

    return {
        "connections": {"default": url},
        "apps": {
            "models": {
                "models": MODEL_MODULES,
                "default_connection": "default",
            },
        },
        # Timestamps are stored as UTC; buckets are resolved separately
        "use_tz": True,
        "timezone": "UTC",
    }


TORTOISE_ORM = build_tortoise_config()
