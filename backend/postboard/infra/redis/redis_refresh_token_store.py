# comments in English; reST docstrings
from __future__ import annotations

import logging
from dataclasses import dataclass

import redis  # type: ignore[import-untyped]

from postboard.services._shared.ports import RefreshTokenStore, RotationResult, generate_jti

log = logging.getLogger(__name__)


def _s(member: bytes | str) -> str:
    return member.decode() if isinstance(member, bytes | bytearray) else str(member)


@dataclass(slots=True)
class RedisRefreshTokenStore(RefreshTokenStore):
    """
    Redis-backed session registry: one Redis set per user.

    Rotation uses WATCH/MULTI/EXEC (optimistic locking) on the user's set so
    that the membership check and the swap commit together or not at all.
    Concurrent rotations of *different* members of the same set simply retry
    and both succeed; two rotations of the *same* member cannot both see it.

    :param r: A Redis client (already connected).
    :param max_retries: Upper bound on optimistic-lock retries per rotation.
    """

    r: redis.Redis
    max_retries: int = 32

    # -------------------- helpers --------------------

    @staticmethod
    def _ku(user_id: str) -> str:
        return f"rt:u:{user_id}"

    # -------------------- API ------------------------

    def new_jti(self) -> str:
        return generate_jti()

    def add(self, user_id: str, jti: str) -> None:
        self.r.sadd(self._ku(user_id), jti)

    def rotate(self, user_id: str, old_jti: str, new_jti: str) -> RotationResult:
        """
        Atomically consume ``old_jti`` and insert ``new_jti``.

        The set key is watched; if another client touches it between the
        membership read and EXEC the transaction aborts and is retried with a
        fresh read.
        """
        key = self._ku(user_id)
        for _ in range(self.max_retries):
            try:
                with self.r.pipeline() as p:
                    p.watch(key)
                    if not p.sismember(key, old_jti):
                        p.unwatch()
                        return RotationResult.NOT_FOUND
                    p.multi()
                    p.srem(key, old_jti)
                    p.sadd(key, new_jti)
                    p.execute()
                    return RotationResult.OK
            except redis.WatchError:
                # Concurrent modification detected; re-read and retry
                continue
        log.error("Refresh rotation retries exhausted", extra={"user_id": user_id})
        raise RuntimeError("Could not rotate refresh token under contention.")

    def remove(self, user_id: str, jti: str) -> bool:
        return bool(self.r.srem(self._ku(user_id), jti))

    def revoke_all(self, user_id: str) -> int:
        key = self._ku(user_id)
        with self.r.pipeline(transaction=True) as p:
            p.scard(key)
            p.delete(key)
            count, _ = p.execute()
        return int(count)

    def contains(self, user_id: str, jti: str) -> bool:
        return bool(self.r.sismember(self._ku(user_id), jti))

    def list_jtis(self, user_id: str) -> list[str]:
        return sorted(_s(m) for m in self.r.smembers(self._ku(user_id)))
