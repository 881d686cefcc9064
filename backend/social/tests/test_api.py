import datetime as dt
import json

import pytest
from django.utils import timezone

from social.models import Comment, Like, Post, Share, User

pytestmark = pytest.mark.django_db


def post_json(client, url, data):
    return client.post(url, data=json.dumps(data), content_type="application/json")


def upload(client, username, file, comment="hello"):
    data = {"username": username, "comment": comment}
    if file is not None:
        data["file"] = file
    return client.post("/api/post", data)


# ========= Accounts =========

def test_register_and_login(client):
    resp = post_json(client, "/api/register", {"username": "alice", "password": "pw"})
    assert resp.status_code == 200
    assert resp.json()["success"] is True

    user = User.objects.get(username="alice")
    assert user.check_password("pw")

    resp = post_json(client, "/api/login", {"username": "alice", "password": "pw"})
    assert resp.status_code == 200
    assert resp.json()["username"] == "alice"
    assert client.session.get("_auth_user_id") == str(user.pk)


def test_register_duplicate_user(client, make_user):
    make_user("alice")
    resp = post_json(client, "/api/register", {"username": "alice", "password": "pw"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "User already exists"


def test_login_with_wrong_password(client, make_user):
    make_user("alice", password="right")
    resp = post_json(client, "/api/login", {"username": "alice", "password": "wrong"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid credentials"


def test_malformed_json_body(client):
    resp = client.post("/api/register", data="{not json", content_type="application/json")
    assert resp.status_code == 400
    assert resp.json()["error"] == "Malformed JSON body"


# ========= Friends =========

def test_add_friend_is_symmetric(client, make_user):
    make_user("alice")
    make_user("bob")

    resp = post_json(client, "/api/add-friend", {"username": "alice", "friendName": "bob"})
    assert resp.status_code == 200

    assert client.get("/api/friends/alice").json() == {"friends": ["bob"]}
    assert client.get("/api/friends/bob").json() == {"friends": ["alice"]}


@pytest.mark.parametrize(
    "friend_name, error",
    [
        ("alice", "Cannot add yourself as a friend"),
        ("bob", "Already friends"),
        ("nobody", "User or friend not found"),
    ],
)
def test_add_friend_rejections(client, make_user, friend_name, error):
    make_user("alice", friends=["bob"])
    resp = post_json(client, "/api/add-friend", {"username": "alice", "friendName": friend_name})
    assert resp.status_code == 400
    assert resp.json()["error"] == error


def test_remove_friend(client, make_user):
    make_user("alice", friends=["bob"])

    resp = post_json(client, "/api/remove-friend", {"username": "bob", "friendName": "alice"})
    assert resp.status_code == 200
    assert client.get("/api/friends/alice").json() == {"friends": []}

    resp = post_json(client, "/api/remove-friend", {"username": "bob", "friendName": "alice"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Not friends"


def test_friends_of_unknown_user(client):
    resp = client.get("/api/friends/ghost")
    assert resp.status_code == 400


def test_users_list_excludes_caller(client, make_user):
    for name in ("carol", "alice", "bob"):
        make_user(name)
    assert client.get("/api/users?username=alice").json() == {"users": ["bob", "carol"]}


# ========= Posting quota =========

def test_friendless_user_cannot_post(client, make_user, image_upload):
    make_user("alice")
    resp = upload(client, "alice", image_upload())
    assert resp.status_code == 403
    body = resp.json()
    assert body["kind"] == "NO_FRIENDS"
    assert body["limit"] == 0
    assert Post.objects.count() == 0


def test_quota_checked_before_file(client, make_user):
    make_user("alice")
    resp = upload(client, "alice", None)
    assert resp.status_code == 403


def test_missing_file(client, make_user):
    make_user("alice", friends=["bob"])
    resp = upload(client, "alice", None)
    assert resp.status_code == 400
    assert resp.json()["error"] == "No file uploaded"


def test_unsupported_upload_type(client, make_user, image_upload):
    make_user("alice", friends=["bob"])
    resp = upload(client, "alice", image_upload("notes.txt", "text/plain"))
    assert resp.status_code == 400


def test_unknown_user_cannot_post(client, image_upload):
    resp = upload(client, "ghost", image_upload())
    assert resp.status_code == 400
    assert resp.json()["error"] == "User not found"


def test_two_friends_limit_then_delete_frees_a_slot(client, make_user, image_upload):
    make_user("alice", friends=["bob", "carol"])

    first = upload(client, "alice", image_upload())
    second = upload(client, "alice", image_upload("clip.mp4", "video/mp4"))
    assert first.status_code == 200
    assert second.status_code == 200
    assert second.json()["post"]["type"] == "video"

    third = upload(client, "alice", image_upload())
    assert third.status_code == 403
    assert third.json()["kind"] == "LIMIT_REACHED"
    assert third.json()["limit"] == 2
    assert "2 time(s)" in third.json()["error"]

    post_id = first.json()["post"]["id"]
    resp = client.delete(
        f"/api/post/{post_id}",
        data=json.dumps({"username": "alice"}),
        content_type="application/json",
    )
    assert resp.status_code == 200

    assert upload(client, "alice", image_upload()).status_code == 200


def test_posts_from_yesterday_do_not_count(client, make_user, image_upload):
    alice = make_user("alice", friends=["bob"])
    Post.objects.create(
        author=alice,
        file=image_upload(),
        created_at=timezone.now() - dt.timedelta(days=1),
    )

    resp = upload(client, "alice", image_upload())
    assert resp.status_code == 200


def test_many_friends_post_without_limit(client, make_user, image_upload):
    make_user("alice", friends=[f"friend{i}" for i in range(11)])
    for _ in range(4):
        assert upload(client, "alice", image_upload()).status_code == 200

    quota = client.get("/api/quota/alice").json()
    assert quota["limit"] is None
    assert quota["canPost"] is True
    assert quota["postsToday"] == 4


def test_quota_hint(client, make_user, image_upload):
    make_user("alice", friends=["bob"])
    assert client.get("/api/quota/alice").json() == {
        "friendCount": 1,
        "limit": 1,
        "postsToday": 0,
        "remaining": 1,
        "canPost": True,
    }

    upload(client, "alice", image_upload())
    quota = client.get("/api/quota/alice").json()
    assert quota["remaining"] == 0
    assert quota["canPost"] is False


# ========= Feed =========

def test_post_payload_and_feed_order(client, make_user, image_upload):
    make_user("alice", friends=["bob", "carol"])
    older = upload(client, "alice", image_upload(), comment="first").json()["post"]
    newer = upload(client, "alice", image_upload(), comment="second").json()["post"]

    assert newer["username"] == "alice"
    assert newer["comment"] == "second"
    assert newer["type"] == "image"
    assert newer["fileUrl"].startswith("/uploads/posts/")
    assert newer["likes"] == []
    assert newer["comments"] == []
    assert newer["createdAt"].endswith("Z")

    posts = client.get("/api/posts").json()["posts"]
    assert [p["id"] for p in posts] == [newer["id"], older["id"]]


def test_like_toggles(client, make_user, image_upload):
    make_user("alice", friends=["bob"])
    post_id = upload(client, "alice", image_upload()).json()["post"]["id"]

    resp = post_json(client, "/api/like", {"username": "bob", "postId": post_id})
    assert resp.json()["liked"] is True
    assert resp.json()["likes"] == 1

    feed = client.get("/api/posts").json()["posts"]
    assert feed[0]["likes"] == ["bob"]

    resp = post_json(client, "/api/like", {"username": "bob", "postId": post_id})
    assert resp.json()["liked"] is False
    assert Like.objects.count() == 0


def test_like_missing_post(client, make_user):
    make_user("alice")
    resp = post_json(client, "/api/like", {"username": "alice", "postId": 999})
    assert resp.status_code == 404
    assert resp.json()["error"] == "Post not found"


def test_comment(client, make_user, image_upload):
    make_user("alice", friends=["bob"])
    post_id = upload(client, "alice", image_upload()).json()["post"]["id"]

    resp = post_json(client, "/api/comment", {"username": "bob", "postId": post_id, "text": " nice "})
    assert resp.status_code == 200
    assert resp.json()["comment"]["text"] == "nice"

    feed = client.get("/api/posts").json()["posts"]
    assert [(c["user"], c["text"]) for c in feed[0]["comments"]] == [("bob", "nice")]


def test_empty_comment(client, make_user, image_upload):
    make_user("alice", friends=["bob"])
    post_id = upload(client, "alice", image_upload()).json()["post"]["id"]

    resp = post_json(client, "/api/comment", {"username": "bob", "postId": post_id, "text": "   "})
    assert resp.status_code == 400
    assert Comment.objects.count() == 0


def test_share(client, make_user, image_upload):
    make_user("alice", friends=["bob"])
    post_id = upload(client, "alice", image_upload()).json()["post"]["id"]

    resp = post_json(client, "/api/share", {"username": "bob", "postId": post_id})
    assert resp.status_code == 200
    assert Share.objects.filter(post_id=post_id).count() == 1
    assert client.get("/api/posts").json()["posts"][0]["shares"] == 1


def test_only_owner_can_delete(client, make_user, image_upload):
    make_user("alice", friends=["bob"])
    post_id = upload(client, "alice", image_upload()).json()["post"]["id"]

    resp = client.delete(
        f"/api/post/{post_id}",
        data=json.dumps({"username": "bob"}),
        content_type="application/json",
    )
    assert resp.status_code == 403
    assert Post.objects.filter(pk=post_id).exists()


def test_delete_missing_post(client):
    resp = client.delete(
        "/api/post/404",
        data=json.dumps({"username": "alice"}),
        content_type="application/json",
    )
    assert resp.status_code == 404


def test_post_ids_beyond_64_bits_are_not_found(client, make_user):
    make_user("alice")

    resp = post_json(client, "/api/like", {"username": "alice", "postId": 10 ** 30})
    assert resp.status_code == 404
    assert resp.json()["error"] == "Post not found"

    resp = client.delete(
        f"/api/post/{10 ** 30}",
        data=json.dumps({"username": "alice"}),
        content_type="application/json",
    )
    assert resp.status_code == 404
