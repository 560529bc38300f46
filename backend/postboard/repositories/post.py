"""Post repository."""

from __future__ import annotations

from postboard.models.post import Post
from postboard.repositories.base import BaseRepository


class PostRepository(BaseRepository[Post]):
    """Persistence-only repository for :class:`Post`."""

    model = Post

    def _sortable_fields(self):
        return {"id": Post.id, "created_at": Post.created_at, "title": Post.title}

    def _filterable_fields(self):
        return {"sender_id": Post.sender_id, "owner_id": Post.owner_id}

    def _updatable_fields(self):
        # owner_id is fixed at creation
        return {"title", "sender_id"}

    def list_posts(self, *, sender_id: str | None = None) -> list[Post]:
        """List posts, optionally narrowed to one ``sender_id``."""
        return self.list(filters={"sender_id": sender_id}, sort=["created_at"])
