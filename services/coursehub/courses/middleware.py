"""Access gate middleware.

This is the single access-control boundary for every screen:

- Django auth supplies the session (`request.user`).
- The viewer's profile is resolved (and lazily created) on each request, so
  an admin's flag flip takes effect on the learner's next page load.
- The decision table in `services.access` picks render vs redirect.

Views behind the gate can rely on `request.profile` being set and on the
viewer being allowed to see them.
"""

import logging

from django.conf import settings
from django.shortcuts import redirect, render

from .services import identity
from .services.access import AccessController, DecisionKind, classify_path
from .views.shared import apply_no_store

logger = logging.getLogger(__name__)

_GATE_SKIP_PREFIXES = ("/site-admin/",)
_GATE_SKIP_EXACT = {"/healthz", "/logout"}


def _gate_skip_prefixes() -> tuple[str, ...]:
    """Static and media URL prefixes follow settings; only local paths can be skipped."""
    prefixes = list(_GATE_SKIP_PREFIXES)
    for url in (settings.STATIC_URL, settings.MEDIA_URL):
        url = (url or "").strip()
        if url.startswith("/") and url != "/":
            prefixes.append(url if url.endswith("/") else f"{url}/")
    return tuple(prefixes)


class AccessGateMiddleware:
    """Attach `request.identity_session` + `request.profile`, then gate the screen."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.identity_session = None
        request.profile = None
        path = (getattr(request, "path", "") or "").strip()
        if path in _GATE_SKIP_EXACT or any(path.startswith(prefix) for prefix in _gate_skip_prefixes()):
            return self.get_response(request)

        controller = AccessController()
        controller.session_changed(identity.get_session(request))
        controller.resolve()
        request.identity_session = controller.session
        request.profile = controller.profile

        screen = classify_path(path)
        decision = controller.route(screen)
        if decision.kind is DecisionKind.RENDER:
            return self.get_response(request)
        if decision.kind is DecisionKind.REDIRECT:
            return redirect(decision.location)
        if decision.kind is DecisionKind.LOADING:
            response = render(request, "courses/loading.html", {})
            return apply_no_store(response)

        logger.warning(
            "access_gate_profile_error user_id=%s path=%s",
            getattr(controller.session, "user_id", None),
            path,
        )
        response = render(request, "courses/profile_error.html", {"error": decision.message}, status=503)
        return apply_no_store(response)
