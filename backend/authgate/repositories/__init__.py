"""Persistence layer for principals."""

from __future__ import annotations

from authgate.repositories.base import BaseRepository, SortKey, apply_sorting, parse_sort_tokens
from authgate.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "SortKey",
    "apply_sorting",
    "parse_sort_tokens",
    "UserRepository",
]
