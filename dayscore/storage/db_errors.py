"""
Translate Tortoise/driver failures into DayScore errors.

- unique violation -> ConflictError (another writer created the row first)
- anything else from the ORM or the connection -> PersistenceError
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from tortoise.exceptions import BaseORMException, IntegrityError

from dayscore.core.errors import ConflictError, PersistenceError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def db_errors(action: str) -> AsyncIterator[None]:
    """Wrap one storage call; `action` names it in error messages."""
    try:
        yield
    except IntegrityError as e:
        raise ConflictError(
            f"Concurrent write while trying to {action}", details={"action": action}
        ) from e
    except (BaseORMException, OSError) as e:
        logger.error(f"Storage failure while trying to {action}: {e}")
        raise PersistenceError(
            f"Storage unavailable while trying to {action}", details={"action": action}
        ) from e
