"""Top-level URL map for the Course Hub Django service.

Plain-language map:
- `/login`, `/signup`, `/pending` are the account flow.
- `/courses` + `/courses/<slug>` are the course pages (active learners only).
- `/admin` is the in-app user activation screen (admins only).
- `/site-admin/` is the Django admin surface for operators.
Every path that is not listed here is redirected by the access gate.
"""

from django.conf import settings
from django.contrib import admin
from django.urls import path, re_path
from django.views.static import serve

from courses import views

urlpatterns = [
    path("site-admin/", admin.site.urls),

    # Health endpoint for reverse proxy and uptime checks.
    path("healthz", views.healthz),

    # Account flow.
    path("login", views.login_view),
    path("signup", views.signup_view),
    path("pending", views.pending_view),
    path("logout", views.logout_view),

    # Course pages. Slugs keep CJK characters, so match any single path segment.
    path("courses", views.course_list),
    path("courses/<str:slug>", views.course_detail),

    # User activation.
    path("admin", views.admin_users),
    path("admin/users/<int:user_id>/toggle-active", views.admin_toggle_active),
    path("admin/users/<int:user_id>/toggle-admin", views.admin_toggle_admin),
]

# Public course assets written by sync_course_pages (default filesystem storage).
if settings.MEDIA_URL.startswith("/"):
    urlpatterns.append(
        re_path(
            r"^%s(?P<path>.*)$" % settings.MEDIA_URL.lstrip("/"),
            serve,
            {"document_root": settings.MEDIA_ROOT},
        )
    )
