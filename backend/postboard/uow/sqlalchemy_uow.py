"""Units of work over the Flask-SQLAlchemy scoped session."""

from __future__ import annotations

from sqlalchemy import event
from sqlalchemy.orm import Session

from postboard.core.extensions import db
from postboard.repositories import (
    CommentRepository,
    PostRepository,
    RefreshTokenRepository,
    UserRepository,
)
from postboard.uow.base import UnitOfWork


class _SessionRepositories(UnitOfWork):
    """Bind every repository to one session so they share a transaction."""

    def __init__(self, session: Session | None = None) -> None:
        self.session = db.session if session is None else session
        self.users = UserRepository(session=self.session)
        self.refresh_tokens = RefreshTokenRepository(session=self.session)
        self.posts = PostRepository(session=self.session)
        self.comments = CommentRepository(session=self.session)

    def rollback(self) -> None:
        self.session.rollback()


class SQLAlchemyUnitOfWork(_SessionRepositories):
    """Commit on a clean exit; roll back on an exception or a failed commit."""

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            self.rollback()
            return
        try:
            self.commit()
        except Exception:
            self.rollback()
            raise

    def commit(self) -> None:
        self.session.commit()


def _refuse_writes(session, flush_context, instances) -> None:
    if session.new or session.dirty or session.deleted:
        raise RuntimeError("Read-only unit of work cannot flush pending changes.")


class SQLAlchemyReadOnlyUnitOfWork(_SessionRepositories):
    """
    Query-only scope.

    A ``before_flush`` hook rejects pending ORM changes while the block
    runs, the session is always rolled back on exit, and :meth:`commit`
    raises.
    """

    def __enter__(self) -> SQLAlchemyReadOnlyUnitOfWork:
        event.listen(self.session, "before_flush", _refuse_writes)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            self.session.rollback()
        finally:
            if event.contains(self.session, "before_flush", _refuse_writes):
                event.remove(self.session, "before_flush", _refuse_writes)

    def commit(self) -> None:
        raise RuntimeError("Read-only unit of work cannot commit.")
