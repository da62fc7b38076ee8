"""Course list + detail screens (active learners only)."""

import logging

from django.db import DatabaseError
from django.shortcuts import render

from ..models import CoursePage
from ..services.markdown_content import render_markdown_to_safe_html

logger = logging.getLogger(__name__)


def course_list(request):
    try:
        pages = list(
            CoursePage.objects.defer("md_content").order_by("sort_order", "id")
        )
    except DatabaseError:
        logger.exception("course_list_failed")
        return render(
            request,
            "courses/course_list.html",
            {"pages": [], "error": "Could not load the course list."},
            status=503,
        )
    return render(request, "courses/course_list.html", {"pages": pages, "error": ""})


def course_detail(request, slug: str):
    page = CoursePage.objects.filter(slug=slug).first()
    if page is None:
        return render(request, "courses/course_not_found.html", {"slug": slug}, status=404)
    return render(
        request,
        "courses/course_detail.html",
        {
            "page": page,
            "content_html": render_markdown_to_safe_html(page.md_content),
        },
    )


__all__ = [
    "course_detail",
    "course_list",
]
