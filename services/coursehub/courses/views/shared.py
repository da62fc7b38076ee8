"""Shared helpers for screen views."""

from __future__ import annotations

from django.http import HttpResponse


def apply_no_store(response: HttpResponse, *, private: bool = True) -> HttpResponse:
    """Keep account/profile screens out of browser and proxy caches."""
    response["Cache-Control"] = "private, no-store" if private else "no-store"
    response["Pragma"] = "no-cache"
    return response


def viewer_profile(request):
    """The gate has already resolved the profile for any screen it lets through."""
    return getattr(request, "profile", None)
