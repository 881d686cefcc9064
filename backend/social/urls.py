from django.urls import path

from .views import (
    add_comment,
    add_friend,
    create_post,
    delete_post,
    friends_list,
    login_view,
    posts_list,
    quota_view,
    register_view,
    remove_friend,
    share_post,
    toggle_like,
    users_list,
)

urlpatterns = [
    path("register", register_view, name="register"),
    path("login", login_view, name="login"),

    path("add-friend", add_friend, name="add_friend"),
    path("remove-friend", remove_friend, name="remove_friend"),
    path("friends/<str:username>", friends_list, name="friends_list"),
    path("users", users_list, name="users_list"),

    path("post", create_post, name="create_post"),
    path("post/<int:pk>", delete_post, name="delete_post"),
    path("posts", posts_list, name="posts_list"),
    path("quota/<str:username>", quota_view, name="quota"),

    path("like", toggle_like, name="toggle_like"),
    path("comment", add_comment, name="add_comment"),
    path("share", share_post, name="share_post"),
]
