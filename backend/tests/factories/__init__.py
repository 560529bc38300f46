"""factory_boy base wired to whatever session the ``session`` fixture binds."""

from __future__ import annotations

import factory

_bound = None


def bind_session(session) -> None:
    global _bound
    _bound = session


def _current_session():
    if _bound is None:
        raise RuntimeError("No session bound for factories; request the 'session' fixture.")
    return _bound


class BaseFactory(factory.alchemy.SQLAlchemyModelFactory):
    class Meta:
        abstract = True
        sqlalchemy_session_factory = _current_session
        sqlalchemy_session_persistence = "commit"
