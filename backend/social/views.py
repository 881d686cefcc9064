from __future__ import annotations

import functools
import json
import logging
from typing import Any, Dict

from django.contrib.auth import login
from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from .forms import CommentForm, LoginForm, PostForm, RegisterForm
from .models import Post, User
from .quota import PostQuotaError
from .services import friends as friend_service
from .services import posts as post_service

logger = logging.getLogger(__name__)


class ApiError(Exception):
    def __init__(self, message: str, status: int = 400) -> None:
        super().__init__(message)
        self.status = status


def _error(msg: str, status: int = 400, **extra: Any) -> JsonResponse:
    return JsonResponse({"success": False, "error": msg, **extra}, status=status)


def _first_error(form) -> str:
    for errors in form.errors.values():
        if errors:
            return str(errors[0])
    return "Invalid request"


def _payload(request: HttpRequest) -> Dict[str, Any]:
    """Request fields from a JSON body or from form data."""

    if request.content_type == "application/json":
        if not request.body:
            return {}
        try:
            data = json.loads(request.body)
        except ValueError as exc:
            raise ApiError("Malformed JSON body") from exc
        if not isinstance(data, dict):
            raise ApiError("JSON body must be an object")
        return data
    return request.POST.dict()


def _get_user(username: Any) -> User | None:
    if not username or not isinstance(username, str):
        return None
    return User.objects.filter(username=username).first()


# Ids are stored in a signed 64-bit column
MAX_POST_ID = 2 ** 63 - 1


def _post_id(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ApiError("Invalid post id") from exc


def _find_post(pk: int) -> Post | None:
    if not 0 < pk <= MAX_POST_ID:
        return None
    return Post.objects.filter(pk=pk).first()


def json_api(view):
    """Exempt from CSRF and turn ApiError into a JSON error answer."""

    @csrf_exempt
    @functools.wraps(view)
    def wrapper(request, *args, **kwargs):
        try:
            return view(request, *args, **kwargs)
        except ApiError as exc:
            return _error(str(exc), status=exc.status)

    return wrapper


# ========= Accounts =========

@json_api
@require_POST
def register_view(request):
    form = RegisterForm(_payload(request))
    if not form.is_valid():
        return _error(_first_error(form))

    user = form.save()
    logger.info("User registered: %s", user.username)
    return JsonResponse({"success": True, "message": "User registered successfully"})


@json_api
@require_POST
def login_view(request):
    form = LoginForm(_payload(request), request=request)
    if not form.is_valid():
        return _error("Invalid credentials")

    user = form.get_user()
    login(request, user)
    logger.info("User logged in: %s", user.username)
    return JsonResponse({
        "success": True,
        "message": "Logged in successfully",
        "username": user.username,
    })


# ========= Friends =========

@json_api
@require_POST
def add_friend(request):
    data = _payload(request)
    me = _get_user(data.get("username"))
    other = _get_user(data.get("friendName"))
    if me is None or other is None:
        return _error("User or friend not found")

    try:
        friend_service.add_friend(me, other)
    except friend_service.FriendshipError as exc:
        return _error(str(exc))

    return JsonResponse({"success": True, "message": "Friend added successfully"})


@json_api
@require_POST
def remove_friend(request):
    data = _payload(request)
    me = _get_user(data.get("username"))
    other = _get_user(data.get("friendName"))
    if me is None or other is None:
        return _error("User or friend not found")

    try:
        friend_service.remove_friend(me, other)
    except friend_service.FriendshipError as exc:
        return _error(str(exc))

    return JsonResponse({"success": True, "message": "Friend removed successfully"})


@require_GET
def friends_list(request, username: str):
    user = _get_user(username)
    if user is None:
        return _error("User not found")
    return JsonResponse({"friends": friend_service.friend_names(user)})


@require_GET
def users_list(request):
    current = (request.GET.get("username") or "").strip()
    return JsonResponse({"users": friend_service.suggested_usernames(exclude=current)})


# ========= Posts =========

@json_api
@require_POST
def create_post(request):
    user = _get_user(request.POST.get("username"))
    if user is None:
        logger.error("Post attempt by unknown user: %s", request.POST.get("username"))
        return _error("User not found")

    # Quota before upload validation, so a denied user gets the quota answer
    try:
        post_service.check_quota(user)
    except PostQuotaError as exc:
        logger.warning("Post limit reached for %s: %s", user.username, exc)
        return _error(str(exc), status=403, kind=exc.kind, limit=exc.limit.count)

    form = PostForm(request.POST, request.FILES)
    if not form.is_valid():
        return _error(_first_error(form))

    try:
        post = post_service.create_post(
            user,
            form.cleaned_data["file"],
            comment=form.cleaned_data["comment"],
        )
    except PostQuotaError as exc:
        # Lost a race with a concurrent post of the same user
        logger.warning("Post limit reached for %s: %s", user.username, exc)
        return _error(str(exc), status=403, kind=exc.kind, limit=exc.limit.count)

    return JsonResponse({"success": True, "post": post_service.post_payload(post)})


@require_GET
def posts_list(request):
    posts = post_service.feed_queryset()
    return JsonResponse({"posts": [post_service.post_payload(p) for p in posts]})


@json_api
@require_http_methods(["DELETE", "POST"])
def delete_post(request, pk: int):
    post = _find_post(pk)
    if post is None:
        logger.error("Post %s not found for deletion", pk)
        return _error("Post not found", status=404)

    user = _get_user(_payload(request).get("username"))
    if user is None or post.author_id != user.pk:
        logger.warning(
            "Unauthorized delete attempt on post %s by %s (owner %s)",
            pk,
            user.username if user else None,
            post.author.username,
        )
        return _error("Unauthorized: You can only delete your own posts.", status=403)

    post_service.delete_post(post, user)
    return JsonResponse({"success": True, "message": "Post deleted successfully"})


@require_GET
def quota_view(request, username: str):
    """Server-side quota hint for the client UI. Enforcement stays in create_post."""

    user = _get_user(username)
    if user is None:
        return _error("User not found")
    return JsonResponse(post_service.get_quota_status(user).as_dict())


# ========= Reactions =========

def _post_and_user(data: Dict[str, Any]):
    post = _find_post(_post_id(data.get("postId")))
    if post is None:
        raise ApiError("Post not found", status=404)
    user = _get_user(data.get("username"))
    if user is None:
        raise ApiError("User not found")
    return post, user


@json_api
@require_POST
def toggle_like(request):
    post, user = _post_and_user(_payload(request))
    liked = post_service.toggle_like(post, user)
    return JsonResponse({
        "success": True,
        "liked": liked,
        "message": "Post liked" if liked else "Post unliked",
        "likes": post.likes.count(),
    })


@json_api
@require_POST
def add_comment(request):
    data = _payload(request)
    post, user = _post_and_user(data)

    form = CommentForm(data)
    if not form.is_valid():
        return _error(_first_error(form))

    c = post_service.add_comment(post, user, form.cleaned_data["text"])
    return JsonResponse({
        "success": True,
        "message": "Comment added",
        "comment": post_service.comment_payload(c),
    })


@json_api
@require_POST
def share_post(request):
    post, user = _post_and_user(_payload(request))
    post_service.share_post(post, user)
    return JsonResponse({"success": True, "message": "Post shared"})
