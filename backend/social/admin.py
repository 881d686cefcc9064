from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import Comment, Like, Post, Share, User


# ========= Users =========

@admin.register(User)
class UserAdmin(BaseUserAdmin):
    fieldsets = BaseUserAdmin.fieldsets + (
        ("Social", {"fields": ("friends",)}),
    )
    filter_horizontal = BaseUserAdmin.filter_horizontal + ("friends",)

    list_display = ("username", "friends_total", "is_staff", "is_superuser")
    search_fields = ("username", "email")

    def friends_total(self, obj):
        return obj.friends.count()

    friends_total.short_description = "Friends"


# ========= Posts =========

@admin.register(Post)
class PostAdmin(admin.ModelAdmin):
    list_display = ("id", "author", "media_type", "short_comment", "created_at")
    list_filter = ("created_at", "media_type")
    search_fields = ("comment", "author__username")

    def short_comment(self, obj):
        return (obj.comment[:50] + "…") if len(obj.comment) > 50 else obj.comment

    short_comment.short_description = "Caption"


@admin.register(Comment)
class CommentAdmin(admin.ModelAdmin):
    list_display = ("id", "post", "author", "created_at")
    search_fields = ("text", "author__username")


# ========= Reactions =========

@admin.register(Like)
class LikeAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "post", "created_at")
    search_fields = ("user__username",)


@admin.register(Share)
class ShareAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "post", "created_at")
    search_fields = ("user__username",)
