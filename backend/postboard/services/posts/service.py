# postboard/services/posts/service.py
from __future__ import annotations

import logging

from postboard.models.post import Post
from postboard.repositories.post import PostRepository
from postboard.services._shared.base import BaseService
from postboard.services._shared.errors import NotFoundError, UnauthenticatedError
from postboard.services.posts.dto import PostCreateIn, PostOut, PostUpdateIn

log = logging.getLogger(__name__)

FORBIDDEN_UPDATE = "Forbidden - You can only update your own posts"
FORBIDDEN_DELETE = "Forbidden - You can only delete your own posts"


class PostService(BaseService):
    """
    Application service for posts.

    Reads are public. Create stamps ``owner_id`` from the context actor;
    update/delete load the post first (404) and then check ownership (403).
    """

    def list_posts(self, sender_id: str | None = None) -> list[PostOut]:
        with self.ro_uow() as uow:
            repo: PostRepository = uow.posts
            return [self._to_out(p) for p in repo.list_posts(sender_id=sender_id)]

    def get(self, post_id: int) -> PostOut:
        """
        :raises NotFoundError: If the post does not exist.
        """
        with self.ro_uow() as uow:
            return self._to_out(self._load(uow.posts, post_id))

    def create(self, dto: PostCreateIn) -> PostOut:
        """
        Create a post owned by the current actor.

        :raises UnauthenticatedError: If the context carries no actor.
        """
        if self.ctx.actor_id is None:
            raise UnauthenticatedError()
        with self.rw_uow() as uow:
            post = Post(title=dto.title, sender_id=dto.sender_id, owner_id=self.ctx.actor_id)
            uow.posts.add(post)
            out = self._to_out(post)
        log.info("Post created", extra={"user_id": self.ctx.actor_id, "post_id": out.id})
        return out

    def update(self, post_id: int, dto: PostUpdateIn) -> PostOut:
        """
        Update title/sender of an owned post.

        :raises NotFoundError: Unknown post.
        :raises AuthorizationError: Actor is not the owner.
        """
        with self.rw_uow() as uow:
            repo: PostRepository = uow.posts
            post = self._load(repo, post_id)
            self.ensure_owner(post.owner_id, msg=FORBIDDEN_UPDATE)
            fields = {k: v for k, v in (("title", dto.title), ("sender_id", dto.sender_id)) if v is not None}
            if fields:
                repo.update(post, **fields)
            return self._to_out(post)

    def delete(self, post_id: int) -> PostOut:
        """
        Delete an owned post (its comments go with it).

        :returns: The deleted post.
        """
        with self.rw_uow() as uow:
            repo: PostRepository = uow.posts
            post = self._load(repo, post_id)
            self.ensure_owner(post.owner_id, msg=FORBIDDEN_DELETE)
            out = self._to_out(post)
            repo.delete(post)
        log.info("Post deleted", extra={"user_id": self.ctx.actor_id, "post_id": post_id})
        return out

    # ------------------------------------------------------------------ #

    @staticmethod
    def _load(repo: PostRepository, post_id: int) -> Post:
        post = repo.get(post_id)
        if post is None:
            raise NotFoundError("Post", post_id)
        return post

    @staticmethod
    def _to_out(post: Post) -> PostOut:
        return PostOut(
            id=post.id,
            title=post.title,
            sender_id=post.sender_id,
            owner_id=post.owner_id,
            created_at=post.created_at,
            updated_at=post.updated_at,
        )
