# postboard/services/comments/service.py
from __future__ import annotations

import logging

from postboard.models.comment import Comment
from postboard.repositories.comment import CommentRepository
from postboard.services._shared.base import BaseService
from postboard.services._shared.errors import NotFoundError, UnauthenticatedError
from postboard.services.comments.dto import CommentCreateIn, CommentOut, CommentUpdateIn

log = logging.getLogger(__name__)

FORBIDDEN_UPDATE = "Forbidden - You can only update your own comments"
FORBIDDEN_DELETE = "Forbidden - You can only delete your own comments"


class CommentService(BaseService):
    """Application service for comments attached to posts."""

    def list_for_post(self, post_id: int) -> list[CommentOut]:
        """Comments of ``post_id``; an unknown post simply has none."""
        with self.ro_uow() as uow:
            return [self._to_out(c) for c in uow.comments.list_for_post(post_id)]

    def get(self, comment_id: int) -> CommentOut:
        with self.ro_uow() as uow:
            return self._to_out(self._load(uow.comments, comment_id))

    def create(self, post_id: int, dto: CommentCreateIn) -> CommentOut:
        """
        Attach a comment owned by the current actor to ``post_id``.

        :raises UnauthenticatedError: If the context carries no actor.
        :raises NotFoundError: If the post does not exist.
        """
        if self.ctx.actor_id is None:
            raise UnauthenticatedError()
        with self.rw_uow() as uow:
            if uow.posts.get(post_id) is None:
                raise NotFoundError("Post", post_id)
            comment = Comment(
                post_id=post_id,
                content=dto.content,
                author=dto.author,
                owner_id=self.ctx.actor_id,
            )
            uow.comments.add(comment)
            out = self._to_out(comment)
        log.info(
            "Comment created",
            extra={"user_id": self.ctx.actor_id, "post_id": post_id, "comment_id": out.id},
        )
        return out

    def update(self, comment_id: int, dto: CommentUpdateIn) -> CommentOut:
        """
        :raises NotFoundError: Unknown comment.
        :raises AuthorizationError: Actor is not the owner.
        """
        with self.rw_uow() as uow:
            repo: CommentRepository = uow.comments
            comment = self._load(repo, comment_id)
            self.ensure_owner(comment.owner_id, msg=FORBIDDEN_UPDATE)
            fields = {k: v for k, v in (("content", dto.content), ("author", dto.author)) if v is not None}
            if fields:
                repo.update(comment, **fields)
            return self._to_out(comment)

    def delete(self, comment_id: int) -> None:
        with self.rw_uow() as uow:
            repo: CommentRepository = uow.comments
            comment = self._load(repo, comment_id)
            self.ensure_owner(comment.owner_id, msg=FORBIDDEN_DELETE)
            repo.delete(comment)
        log.info("Comment deleted", extra={"user_id": self.ctx.actor_id, "comment_id": comment_id})

    # ------------------------------------------------------------------ #

    @staticmethod
    def _load(repo: CommentRepository, comment_id: int) -> Comment:
        comment = repo.get(comment_id)
        if comment is None:
            raise NotFoundError("Comment", comment_id)
        return comment

    @staticmethod
    def _to_out(comment: Comment) -> CommentOut:
        return CommentOut(
            id=comment.id,
            post_id=comment.post_id,
            content=comment.content,
            author=comment.author,
            owner_id=comment.owner_id,
            created_at=comment.created_at,
        )
