# social/models.py
import mimetypes

from django.conf import settings
from django.contrib.auth.models import AbstractUser
from django.db import models
from django.db.models.signals import post_delete
from django.dispatch import receiver
from django.utils import timezone


class User(AbstractUser):
    # Friendship is symmetric: adding B to A's friends also adds A to B's.
    friends = models.ManyToManyField(
        "self",
        symmetrical=True,
        blank=True,
        verbose_name="Friends",
    )

    def __str__(self):
        return self.username

    @property
    def friend_count(self):
        return self.friends.count()

    def is_friend_of(self, other):
        return self.friends.filter(pk=other.pk).exists()


class Post(models.Model):
    TYPE_IMAGE = "image"
    TYPE_VIDEO = "video"
    TYPE_CHOICES = [(TYPE_IMAGE, "Image"), (TYPE_VIDEO, "Video")]

    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="posts",
        verbose_name="Author",
    )
    file = models.FileField("Media", upload_to="posts/")
    media_type = models.CharField(max_length=8, choices=TYPE_CHOICES, default=TYPE_IMAGE)
    comment = models.TextField("Caption", blank=True)
    # Set once at creation, never updated. The daily quota counts posts by this field.
    created_at = models.DateTimeField("Created", default=timezone.now, db_index=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"{self.author}: {self.comment[:30]}"

    @staticmethod
    def media_type_for(content_type, filename=""):
        if not content_type:
            content_type, _ = mimetypes.guess_type(filename)
        if content_type and content_type.startswith("video"):
            return Post.TYPE_VIDEO
        return Post.TYPE_IMAGE

    def delete(self, *args, **kwargs):
        """Remove the media file from storage together with the row."""
        storage = self.file.storage
        name = self.file.name
        super().delete(*args, **kwargs)
        if name:
            storage.delete(name)


class Like(models.Model):
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="likes",
        verbose_name="User",
    )
    post = models.ForeignKey(
        Post,
        on_delete=models.CASCADE,
        related_name="likes",
        verbose_name="Post",
    )
    created_at = models.DateTimeField("Liked", auto_now_add=True)

    class Meta:
        unique_together = ("user", "post")

    def __str__(self):
        return f"Like({self.user} -> {self.post_id})"


class Comment(models.Model):
    post = models.ForeignKey(
        Post,
        on_delete=models.CASCADE,
        related_name="comments",
        verbose_name="Post",
    )
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="comments",
        verbose_name="Author",
    )
    text = models.TextField("Text")
    created_at = models.DateTimeField("Created", auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]

    def __str__(self):
        return f"Comment by {self.author} on post {self.post_id}"


class Share(models.Model):
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="shares",
        verbose_name="User",
    )
    post = models.ForeignKey(
        Post,
        on_delete=models.CASCADE,
        related_name="shares",
        verbose_name="Post",
    )
    created_at = models.DateTimeField("Shared", auto_now_add=True)

    def __str__(self):
        return f"Share({self.user} -> {self.post_id})"


@receiver(post_delete, sender=Post)
def delete_post_file(sender, instance, **kwargs):
    """Clean up the media file on bulk or cascade deletes, which skip Post.delete()."""
    if instance.file:
        instance.file.delete(False)
