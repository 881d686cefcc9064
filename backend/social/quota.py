"""Daily posting quota.

The number of posts a user may create per UTC calendar day depends only on
the size of their friend list:

    0 friends      -> posting disabled
    1 friend       -> 1 post
    2..10 friends  -> 2 posts
    > 10 friends   -> unlimited

The quota is never stored. Every check recounts the user's posts for the
current day, so deleting a post frees a slot again.
"""
from __future__ import annotations

import datetime as dt
import functools
from dataclasses import dataclass
from typing import Optional, Protocol

from .constants import PLATEAU_DAILY_POSTS, SINGLE_POST_FRIENDS, UNLIMITED_FRIENDS_ABOVE

NO_FRIENDS = "NO_FRIENDS"
LIMIT_REACHED = "LIMIT_REACHED"


@functools.total_ordering
class PostLimit:
    """Either a finite number of posts per day or ``UNBOUNDED``."""

    __slots__ = ("_count",)

    UNBOUNDED: "PostLimit"

    def __init__(self, count: Optional[int]) -> None:
        if count is not None and count < 0:
            raise ValueError("post limit cannot be negative")
        self._count = count

    @classmethod
    def finite(cls, count: int) -> "PostLimit":
        return cls(count)

    @property
    def count(self) -> Optional[int]:
        return self._count

    @property
    def is_unbounded(self) -> bool:
        return self._count is None

    def allows(self, posts_today: int) -> bool:
        return self.is_unbounded or posts_today < self._count

    def remaining(self, posts_today: int) -> Optional[int]:
        if self.is_unbounded:
            return None
        return max(self._count - posts_today, 0)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, PostLimit):
            return self._count == other._count
        if isinstance(other, int) and not isinstance(other, bool):
            return self._count == other
        return NotImplemented

    def __lt__(self, other: object) -> bool:
        if isinstance(other, int) and not isinstance(other, bool):
            other = PostLimit(other)
        if not isinstance(other, PostLimit):
            return NotImplemented
        if self.is_unbounded:
            return False
        return other.is_unbounded or self._count < other._count

    def __hash__(self) -> int:
        return hash(self._count)

    def __repr__(self) -> str:
        if self.is_unbounded:
            return "PostLimit.UNBOUNDED"
        return f"PostLimit({self._count})"


PostLimit.UNBOUNDED = PostLimit(None)


class PostQuotaError(Exception):
    """A post was refused by the daily quota."""

    kind = ""

    def __init__(self, message: str, limit: Optional[PostLimit] = None) -> None:
        super().__init__(message)
        self.limit = limit


class NoFriendsError(PostQuotaError):
    kind = NO_FRIENDS

    def __init__(self) -> None:
        super().__init__("You have no friends yet, posting is disabled.", PostLimit.finite(0))


class DailyLimitReachedError(PostQuotaError):
    kind = LIMIT_REACHED

    def __init__(self, limit: PostLimit) -> None:
        super().__init__(
            f"Post limit reached. You can only post {limit.count} time(s) today.",
            limit,
        )


class PostHistory(Protocol):
    """Read access the quota needs from the user/post store."""

    def friend_count(self, username: str) -> int:
        ...

    def posts_on_date(self, username: str, day: dt.date) -> int:
        ...


@dataclass(frozen=True)
class QuotaStatus:
    friend_count: int
    limit: PostLimit
    posts_today: int

    @property
    def can_post(self) -> bool:
        return self.limit.allows(self.posts_today)

    @property
    def remaining(self) -> Optional[int]:
        return self.limit.remaining(self.posts_today)

    def as_dict(self) -> dict:
        return {
            "friendCount": self.friend_count,
            "limit": self.limit.count,
            "postsToday": self.posts_today,
            "remaining": self.remaining,
            "canPost": self.can_post,
        }


def compute_post_limit(friend_count: int) -> PostLimit:
    if friend_count < 0:
        raise ValueError(f"friend count cannot be negative: {friend_count}")
    if friend_count > UNLIMITED_FRIENDS_ABOVE:
        return PostLimit.UNBOUNDED
    if friend_count <= SINGLE_POST_FRIENDS:
        return PostLimit.finite(friend_count)
    return PostLimit.finite(PLATEAU_DAILY_POSTS)


def utc_day(now: dt.datetime) -> dt.date:
    """Calendar day of ``now`` in UTC. Naive datetimes are taken as UTC."""
    if now.tzinfo is None:
        return now.date()
    return now.astimezone(dt.timezone.utc).date()


def quota_status(username: str, store: PostHistory, now: dt.datetime) -> QuotaStatus:
    friend_count = store.friend_count(username)
    return QuotaStatus(
        friend_count=friend_count,
        limit=compute_post_limit(friend_count),
        posts_today=store.posts_on_date(username, utc_day(now)),
    )


def enforce_quota(username: str, store: PostHistory, now: dt.datetime) -> QuotaStatus:
    """Return the quota status if ``username`` may post now, raise otherwise.

    Raises :class:`NoFriendsError` when the user has no friends and
    :class:`DailyLimitReachedError` when today's posts already use up a
    finite limit. Read-only: the caller records the post afterwards.
    """
    status = quota_status(username, store, now)
    if status.limit == 0:
        raise NoFriendsError()
    if not status.can_post:
        raise DailyLimitReachedError(status.limit)
    return status
