import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from social.models import User


@pytest.fixture(autouse=True)
def media_root(settings, tmp_path):
    settings.MEDIA_ROOT = tmp_path / "uploads"
    return settings.MEDIA_ROOT


@pytest.fixture
def make_user(db):
    def _make(username, password="secret", friends=()):
        user = User.objects.create_user(username=username, password=password)
        for name in friends:
            other = User.objects.filter(username=name).first() or User.objects.create_user(
                username=name, password=password
            )
            user.friends.add(other)
        return user

    return _make


@pytest.fixture
def image_upload():
    def _upload(name="photo.jpg", content_type="image/jpeg"):
        return SimpleUploadedFile(name, b"\xff\xd8\xff\xe0fake-jpeg", content_type=content_type)

    return _upload
