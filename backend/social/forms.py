from __future__ import annotations

# social/forms.py
from typing import Any

from django import forms
from django.contrib.auth import authenticate

from .constants import (
    ALLOWED_MEDIA_PREFIXES,
    COMMENT_TEXT_MAX_LENGTH,
    MAX_UPLOAD_SIZE_MB,
    POST_TEXT_MAX_LENGTH,
)
from .models import Post, User


class RegisterForm(forms.Form):
    username = forms.CharField(max_length=150)
    password = forms.CharField(strip=False)

    def clean_username(self) -> str:
        username = (self.cleaned_data.get("username") or "").strip()
        if User.objects.filter(username=username).exists():
            raise forms.ValidationError("User already exists")
        return username

    def save(self) -> User:
        return User.objects.create_user(
            username=self.cleaned_data["username"],
            password=self.cleaned_data["password"],
        )


class LoginForm(forms.Form):
    username = forms.CharField(max_length=150)
    password = forms.CharField(strip=False)

    def __init__(self, *args: Any, request=None, **kwargs: Any) -> None:
        self.request = request
        self.user_cache = None
        super().__init__(*args, **kwargs)

    def clean(self) -> dict:
        cleaned = super().clean()
        username = cleaned.get("username")
        password = cleaned.get("password")
        if username and password:
            self.user_cache = authenticate(self.request, username=username, password=password)
        if self.user_cache is None:
            raise forms.ValidationError("Invalid credentials")
        return cleaned

    def get_user(self) -> User:
        return self.user_cache


class PostForm(forms.ModelForm):
    class Meta:
        model = Post
        fields = ("comment", "file")
        error_messages = {"file": {"required": "No file uploaded"}}

    def clean_comment(self) -> str:
        text = (self.cleaned_data.get("comment") or "").strip()
        if len(text) > POST_TEXT_MAX_LENGTH:
            raise forms.ValidationError(
                f"Caption is too long (max {POST_TEXT_MAX_LENGTH} characters)."
            )
        return text

    def clean_file(self):
        f = self.cleaned_data["file"]
        if f.size > MAX_UPLOAD_SIZE_MB * 1024 * 1024:
            raise forms.ValidationError(f"File '{f.name}' exceeds {MAX_UPLOAD_SIZE_MB}MB.")

        content_type = getattr(f, "content_type", "") or ""
        if not content_type.startswith(ALLOWED_MEDIA_PREFIXES):
            raise forms.ValidationError("Only image and video uploads are supported.")
        return f


class CommentForm(forms.Form):
    text = forms.CharField(
        max_length=COMMENT_TEXT_MAX_LENGTH,
        error_messages={"required": "Comment text is empty"},
    )
