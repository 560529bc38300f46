"""
Persistence-only repository base (SQLAlchemy 2 ``select`` style).

A repository stages and queries rows; it never commits and never decides
who may touch a row. Three per-model whitelists keep request data away
from protected columns such as ``owner_id`` or ``password_hash``:
sortable keys, equality-filterable keys and updatable keys.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Generic, TypeVar, cast

from sqlalchemy import Select, select
from sqlalchemy.orm import InstrumentedAttribute, Session

from postboard.core.extensions import db

E = TypeVar("E")

Columns = Mapping[str, InstrumentedAttribute[Any]]


def parse_sort_tokens(raw: Iterable[str]) -> list[tuple[str, bool]]:
    """
    ``["-created_at", "title"]`` -> ``[("created_at", True), ("title", False)]``.

    A leading ``-`` means descending; blank names are dropped.
    """
    out: list[tuple[str, bool]] = []
    for token in raw:
        desc = token.startswith("-")
        name = token.lstrip("-").strip() if desc else token.strip()
        if name:
            out.append((name, desc))
    return out


class BaseRepository(Generic[E]):
    """Repository over one mapped ``model``; subclasses set it and the whitelists."""

    model: type[E]

    def __init__(self, session: Session | None = None) -> None:
        # None -> resolve db.session lazily, at call time
        self._session = session

    @property
    def session(self) -> Session:
        return self._session if self._session is not None else cast(Session, db.session)

    def _pk_attr(self) -> InstrumentedAttribute[Any]:
        return self.model.id  # type: ignore[attr-defined]

    def _sortable_fields(self) -> Columns:
        return {}

    def _filterable_fields(self) -> Columns:
        return {}

    def _updatable_fields(self) -> set[str]:
        return set()

    def _where(self, stmt: Select[Any], filters: Mapping[str, Any] | None) -> Select[Any]:
        columns = self._filterable_fields()
        for key, value in (filters or {}).items():
            if key in columns and value is not None:
                stmt = stmt.where(columns[key] == value)
        return stmt

    def _order(self, stmt: Select[Any], tokens: Iterable[str]) -> Select[Any]:
        columns = self._sortable_fields()
        for name, desc in parse_sort_tokens(tokens):
            if name in columns:
                stmt = stmt.order_by(columns[name].desc() if desc else columns[name].asc())
        # primary-key tiebreaker: equal sort keys still list in a stable order
        return stmt.order_by(self._pk_attr().asc())

    def add(self, instance: E) -> E:
        """Stage ``instance`` and flush so its primary key is assigned."""
        self.session.add(instance)
        self.session.flush()
        return instance

    def get(self, entity_id: Any) -> E | None:
        return self.session.get(self.model, entity_id)

    def update(self, instance: E, **fields: Any) -> E:
        """
        Assign whitelisted attributes and flush.

        :raises ValueError: If any key is outside :meth:`_updatable_fields`;
            nothing is assigned in that case.
        """
        rejected = sorted(set(fields) - self._updatable_fields())
        if rejected:
            raise ValueError(f"Fields not updatable: {rejected}")
        for key, value in fields.items():
            setattr(instance, key, value)
        self.session.flush()
        return instance

    def delete(self, instance: E) -> None:
        self.session.delete(instance)
        self.session.flush()

    def list(
        self,
        *,
        filters: Mapping[str, Any] | None = None,
        sort: Iterable[str] | None = None,
    ) -> list[E]:
        """Rows matching the whitelisted equality ``filters``, ordered by ``sort``."""
        stmt = self._order(self._where(select(self.model), filters), sort or ())
        return list(self.session.scalars(stmt))
