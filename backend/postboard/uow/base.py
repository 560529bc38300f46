"""Transaction boundary contract the services depend on."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from postboard.repositories import (
        CommentRepository,
        PostRepository,
        RefreshTokenRepository,
        UserRepository,
    )


class UnitOfWork(ABC):
    """
    One use case, one transaction.

    Repositories reached through the unit of work share its session, so
    everything a service does inside ``with uow:`` commits or rolls back
    together.
    """

    users: UserRepository
    refresh_tokens: RefreshTokenRepository
    posts: PostRepository
    comments: CommentRepository

    @abstractmethod
    def __enter__(self) -> UnitOfWork: ...

    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> None: ...

    @abstractmethod
    def commit(self) -> None: ...

    @abstractmethod
    def rollback(self) -> None: ...
