"""Comment repository."""

from __future__ import annotations

from postboard.models.comment import Comment
from postboard.repositories.base import BaseRepository


class CommentRepository(BaseRepository[Comment]):
    """Persistence-only repository for :class:`Comment`."""

    model = Comment

    def _sortable_fields(self):
        return {"id": Comment.id, "created_at": Comment.created_at}

    def _filterable_fields(self):
        return {"post_id": Comment.post_id, "owner_id": Comment.owner_id}

    def _updatable_fields(self):
        return {"content", "author"}

    def list_for_post(self, post_id: int) -> list[Comment]:
        """Return the comments attached to ``post_id`` in creation order."""
        return self.list(filters={"post_id": post_id}, sort=["created_at"])
