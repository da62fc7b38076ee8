"""Operational endpoints outside the access table."""

from django.http import HttpResponse


def healthz(request):
    return HttpResponse("ok", content_type="text/plain")


__all__ = ["healthz"]
