from __future__ import annotations

import logging
from typing import List

from django.db import transaction

from social.models import User

logger = logging.getLogger(__name__)


class FriendshipError(ValueError):
    pass


def add_friend(me: User, other: User) -> None:
    """Make ``me`` and ``other`` friends of each other.

    The relation is symmetrical, so a single add writes both directions.
    """

    if me.pk == other.pk:
        raise FriendshipError("Cannot add yourself as a friend")

    with transaction.atomic():
        if me.is_friend_of(other):
            raise FriendshipError("Already friends")
        me.friends.add(other)

    logger.info("%s added %s as a friend", me.username, other.username)


def remove_friend(me: User, other: User) -> None:
    with transaction.atomic():
        if not me.is_friend_of(other):
            raise FriendshipError("Not friends")
        me.friends.remove(other)

    logger.info("%s removed %s from friends", me.username, other.username)


def friend_names(user: User) -> List[str]:
    return list(user.friends.order_by("username").values_list("username", flat=True))


def suggested_usernames(exclude: str | None = None) -> List[str]:
    """All registered usernames except ``exclude`` ("People you may know")."""

    qs = User.objects.filter(is_active=True).order_by("username")
    if exclude:
        qs = qs.exclude(username=exclude)
    return list(qs.values_list("username", flat=True))
