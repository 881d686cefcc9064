from __future__ import annotations

from typing import Any, Dict

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.db import transaction
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from social.consumers import FEED_GROUP
from social.models import Post


def broadcast(payload: Dict[str, Any]) -> None:
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return

    async_to_sync(channel_layer.group_send)(
        FEED_GROUP,
        {
            "type": "notify",
            "payload": payload,
        },
    )


@receiver(post_save, sender=Post)
def post_created_notify(sender, instance: Post, created: bool, **kwargs: Any) -> None:
    """Tell connected feeds about a new post once it is committed."""

    if not created:
        return

    payload = {
        "type": "post_created",
        "post_id": instance.pk,
        "username": instance.author.username,
    }
    transaction.on_commit(lambda: broadcast(payload))


@receiver(post_delete, sender=Post)
def post_deleted_notify(sender, instance: Post, **kwargs: Any) -> None:
    payload = {
        "type": "post_deleted",
        "post_id": instance.pk,
        "username": instance.author.username,
    }
    transaction.on_commit(lambda: broadcast(payload))
