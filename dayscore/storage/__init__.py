"""Storage layer - thin CRUD repositories without business logic."""

from . import content_repo, points_repo

__all__ = ["content_repo", "points_repo"]
