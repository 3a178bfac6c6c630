"""
Abstract Unit of Work contracts.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from authgate.repositories.user import UserRepository


class UnitOfWork(ABC):
    """
    Transactional boundary of one use-case.

    Repositories exposed by a unit of work share its session; leaving the
    ``with`` block commits on success and rolls back on error (read-only
    implementations always roll back).
    """

    users: UserRepository

    @abstractmethod
    def __enter__(self) -> UnitOfWork: ...
    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> None: ...
    @abstractmethod
    def commit(self) -> None: ...
    @abstractmethod
    def rollback(self) -> None: ...
