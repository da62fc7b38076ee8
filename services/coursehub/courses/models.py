"""Data model for Course Hub.

- `Profile` carries the two access flags for one identity (Django user).
- `CoursePage` is one synced Markdown document, addressed by slug.

Profiles are created lazily on first sign-in and only ever mutated by an
admin (flag toggles). Course pages are only written by `sync_course_pages`.
"""

from django.conf import settings
from django.db import models


class Profile(models.Model):
    """Activation/admin flags for one identity.

    The primary key *is* the identity id, so there can never be two profiles
    for one user; the second insert of a racing first sign-in fails on it.
    """

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        primary_key=True,
        related_name="course_profile",
    )
    username = models.CharField(max_length=150, unique=True)
    is_active = models.BooleanField(default=False)
    is_admin = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-user_id"]
        indexes = [
            models.Index(fields=["is_active"], name="courses_prof_active_idx"),
        ]

    def __str__(self) -> str:
        return f"@{self.username}"


class CoursePage(models.Model):
    """A course document synced from the content tree.

    `slug` is derived from the source file name and is the upsert key.
    `title` keeps the raw file name (lesson prefix included).
    """

    slug = models.CharField(max_length=255, unique=True)
    title = models.CharField(max_length=255)
    sort_order = models.IntegerField(default=0)
    md_content = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["sort_order", "id"]
        indexes = [
            models.Index(fields=["sort_order"], name="courses_page_order_idx"),
        ]

    def __str__(self) -> str:
        return self.title
