"""Input checks shared by use-cases. Run before any storage access."""

from dayscore.core.errors import ValidationError

MAX_OWNER_ID_LENGTH = 64


def validate_owner_id(owner_id: str) -> str:
    """Owner ids come from the auth service; only their shape is checked here."""
    if not isinstance(owner_id, str) or not owner_id.strip():
        raise ValidationError("owner_id must be a non-empty string")
    if len(owner_id) > MAX_OWNER_ID_LENGTH:
        raise ValidationError(
            f"owner_id longer than {MAX_OWNER_ID_LENGTH} characters",
            details={"length": len(owner_id)},
        )
    return owner_id


def validate_limit(limit: int) -> int:
    if not isinstance(limit, int) or isinstance(limit, bool) or limit < 0:
        raise ValidationError("limit must be a non-negative integer", details={"limit": limit})
    return limit
