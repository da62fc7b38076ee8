"""User activation screen (admins only)."""

import logging
from urllib.parse import urlencode

from django.db import DatabaseError
from django.shortcuts import redirect, render
from django.views.decorators.http import require_POST

from ..models import Profile
from ..services.profiles import list_profiles, set_profile_flags
from .shared import apply_no_store

logger = logging.getLogger(__name__)


def _with_notice(path: str, notice: str) -> str:
    return f"{path}?{urlencode({'notice': notice})}"


def admin_users(request):
    notice = (request.GET.get("notice") or "").strip()[:200]
    try:
        profiles = list(list_profiles())
    except DatabaseError:
        logger.exception("admin_user_list_failed")
        response = render(
            request,
            "courses/admin_users.html",
            {"error": "Could not load the user list.", "notice": notice},
            status=503,
        )
        return apply_no_store(response)

    pending = [p for p in profiles if not p.is_active]
    active = [p for p in profiles if p.is_active]
    response = render(
        request,
        "courses/admin_users.html",
        {
            "error": "",
            "notice": notice,
            "total": len(profiles),
            "pending_profiles": pending,
            "active_profiles": active,
        },
    )
    return apply_no_store(response)


_FLAG_VALUES = {"1": True, "0": False}


def _toggle(request, user_id: int, flag: str):
    # The form posts the target value, not a flip.
    value = _FLAG_VALUES.get((request.POST.get("value") or "").strip())
    if value is None:
        return redirect(_with_notice("/admin", "Invalid request."))
    profile = Profile.objects.filter(user_id=user_id).first()
    if profile is None:
        return redirect(_with_notice("/admin", "User not found."))
    try:
        changed = set_profile_flags(user_id, **{flag: value})
    except DatabaseError:
        logger.exception("admin_toggle_failed user_id=%s flag=%s", user_id, flag)
        return redirect(_with_notice("/admin", "Update failed, please try again."))
    logger.info(
        "admin_toggle actor=%s user_id=%s flag=%s value=%s changed=%s",
        getattr(request.profile, "user_id", None),
        user_id,
        flag,
        value,
        changed,
    )
    return redirect("/admin")


@require_POST
def admin_toggle_active(request, user_id: int):
    return _toggle(request, user_id, "is_active")


@require_POST
def admin_toggle_admin(request, user_id: int):
    return _toggle(request, user_id, "is_admin")


__all__ = [
    "admin_toggle_active",
    "admin_toggle_admin",
    "admin_users",
]
