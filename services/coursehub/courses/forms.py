from __future__ import annotations

import re

from django import forms
from django.conf import settings

from .services.identity import min_secret_length

_USERNAME_RE = re.compile(r"^[A-Za-z0-9_]+$")


def _min_username_length() -> int:
    raw = int(getattr(settings, "COURSEHUB_MIN_USERNAME_LENGTH", 3) or 0)
    return raw if raw > 0 else 3


class LoginForm(forms.Form):
    username = forms.CharField(
        max_length=100,
        widget=forms.TextInput(attrs={"autocomplete": "username"}),
    )
    password = forms.CharField(widget=forms.PasswordInput(attrs={"autocomplete": "current-password"}))

    def clean_username(self):
        return (self.cleaned_data.get("username") or "").strip().lower()


class SignupForm(forms.Form):
    username = forms.CharField(
        max_length=100,
        widget=forms.TextInput(attrs={"autocomplete": "username", "placeholder": "Letters, digits, underscores"}),
    )
    password = forms.CharField(
        widget=forms.PasswordInput(attrs={"autocomplete": "new-password", "placeholder": "At least 6 characters"}),
    )
    confirm_password = forms.CharField(
        widget=forms.PasswordInput(attrs={"autocomplete": "new-password", "placeholder": "Repeat password"}),
    )

    def clean_username(self):
        username = (self.cleaned_data.get("username") or "").strip()
        if len(username) < _min_username_length():
            raise forms.ValidationError(f"Username must be at least {_min_username_length()} characters.")
        if not _USERNAME_RE.match(username):
            raise forms.ValidationError("Username may only contain letters, digits and underscores.")
        return username.lower()

    def clean_password(self):
        password = self.cleaned_data.get("password") or ""
        if len(password) < min_secret_length():
            raise forms.ValidationError(f"Password must be at least {min_secret_length()} characters.")
        return password

    def clean(self):
        cleaned = super().clean()
        password = cleaned.get("password")
        confirm = cleaned.get("confirm_password")
        if password and confirm is not None and password != confirm:
            self.add_error("confirm_password", "The two passwords do not match.")
        return cleaned
