"""Template context processors for Course Hub."""

from django.conf import settings


def product(_request):
    name = (getattr(settings, "COURSEHUB_PRODUCT_NAME", "Course Hub") or "").strip() or "Course Hub"
    return {"product_name": name}


def navigation(request):
    """Header links: courses for active learners, admin for admins."""
    profile = getattr(request, "profile", None)
    if profile is None:
        return {"nav_profile": None, "nav_show_courses": False, "nav_show_admin": False}
    return {
        "nav_profile": profile,
        "nav_show_courses": bool(profile.is_active),
        "nav_show_admin": bool(profile.is_admin),
    }
