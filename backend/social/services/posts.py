from __future__ import annotations

import datetime as dt
import logging
from typing import Any, Dict, Optional

from django.core.files.uploadedfile import UploadedFile
from django.db import transaction
from django.utils import timezone

from social.models import Comment, Like, Post, Share, User
from social.quota import QuotaStatus, enforce_quota, quota_status
from social.store import DatabasePostHistory

logger = logging.getLogger(__name__)

_history = DatabasePostHistory()


def check_quota(user: User, now: Optional[dt.datetime] = None) -> QuotaStatus:
    """Raise a PostQuotaError if ``user`` may not post right now."""

    return enforce_quota(user.username, _history, now or timezone.now())


def get_quota_status(user: User, now: Optional[dt.datetime] = None) -> QuotaStatus:
    return quota_status(user.username, _history, now or timezone.now())


def create_post(
    user: User,
    file: UploadedFile,
    comment: str = "",
    now: Optional[dt.datetime] = None,
) -> Post:
    """Check the daily quota and store the post in one transaction.

    The owner row is locked first, so concurrent posts of the same user are
    serialized and cannot both pass the check for the last free slot.
    """

    now = now or timezone.now()

    with transaction.atomic():
        User.objects.select_for_update().only("pk").get(pk=user.pk)
        status = check_quota(user, now)

        post = Post.objects.create(
            author=user,
            file=file,
            media_type=Post.media_type_for(getattr(file, "content_type", None), file.name),
            comment=comment,
            created_at=now,
        )

    logger.info(
        "New post %s by %s (%s of %s today)",
        post.pk,
        user.username,
        status.posts_today + 1,
        "unlimited" if status.limit.is_unbounded else status.limit.count,
    )
    return post


def delete_post(post: Post, user: User) -> None:
    if post.author_id != user.pk:
        raise PermissionError("You can only delete your own posts.")

    post_id = post.pk
    post.delete()
    logger.info("Post %s deleted by %s", post_id, user.username)


def toggle_like(post: Post, user: User) -> bool:
    """Like the post, or unlike it if already liked. Returns the new state."""

    like, created = Like.objects.get_or_create(user=user, post=post)
    if not created:
        like.delete()

    logger.info("%s %s post %s", user.username, "liked" if created else "unliked", post.pk)
    return created


def add_comment(post: Post, user: User, text: str) -> Comment:
    c = Comment.objects.create(post=post, author=user, text=text)
    logger.info("%s commented on post %s", user.username, post.pk)
    return c


def share_post(post: Post, user: User) -> Share:
    share = Share.objects.create(post=post, user=user)
    logger.info("%s shared post %s", user.username, post.pk)
    return share


def feed_queryset():
    return (
        Post.objects
        .select_related("author")
        .prefetch_related("likes__user", "comments__author", "shares")
        .order_by("-created_at", "-id")
    )


def _iso(value: dt.datetime) -> str:
    return value.astimezone(dt.timezone.utc).isoformat().replace("+00:00", "Z")


def comment_payload(c: Comment) -> Dict[str, Any]:
    return {
        "id": c.pk,
        "user": c.author.username,
        "text": c.text,
        "createdAt": _iso(c.created_at),
    }


def post_payload(post: Post) -> Dict[str, Any]:
    """JSON shape of a post as the feed client renders it."""

    return {
        "id": post.pk,
        "username": post.author.username,
        "fileUrl": post.file.url if post.file else None,
        "type": post.media_type,
        "comment": post.comment,
        "likes": [like.user.username for like in post.likes.all()],
        "comments": [comment_payload(c) for c in post.comments.all()],
        "shares": len(post.shares.all()),
        "createdAt": _iso(post.created_at),
    }
