"""Account screens: login, signup, pending activation, sign-out.

The access gate has already decided the viewer may see these screens, so the
views only handle the form flow itself.
"""

import logging

from django.shortcuts import redirect, render
from django.views.decorators.http import require_POST

from ..forms import LoginForm, SignupForm
from ..services import identity
from ..services.identity import IdentityErrorKind
from .shared import apply_no_store, viewer_profile

logger = logging.getLogger(__name__)

_SIGNUP_ERROR_MESSAGES = {
    IdentityErrorKind.ALREADY_REGISTERED: "That username is already taken.",
    IdentityErrorKind.INVALID_CONTACT: "That username cannot be used.",
    IdentityErrorKind.WEAK_SECRET: "Password is too short.",
}


def login_view(request):
    error = ""
    form = LoginForm(request.POST or None)
    if request.method == "POST" and form.is_valid():
        result = identity.sign_in(
            request,
            identity.username_to_contact(form.cleaned_data["username"]),
            form.cleaned_data["password"],
        )
        if result.ok:
            # The gate sends inactive accounts on to /pending.
            return redirect("/courses")
        error = "Invalid username or password."

    response = render(request, "courses/login.html", {"form": form, "error": error})
    return apply_no_store(response)


def signup_view(request):
    error = ""
    form = SignupForm(request.POST or None)
    if request.method == "POST" and form.is_valid():
        username = form.cleaned_data["username"]
        try:
            result = identity.sign_up(
                request,
                identity.username_to_contact(username),
                form.cleaned_data["password"],
                metadata={"username": username},
            )
        except Exception:
            logger.exception("signup_failed username=%s", username)
            error = "Sign-up failed. Please try again later."
        else:
            if result.ok:
                return redirect("/pending")
            error = _SIGNUP_ERROR_MESSAGES.get(result.error.kind, result.error.message)

    response = render(request, "courses/signup.html", {"form": form, "error": error})
    return apply_no_store(response)


def pending_view(request):
    profile = viewer_profile(request)
    response = render(
        request,
        "courses/pending.html",
        {"username": getattr(profile, "username", "")},
    )
    return apply_no_store(response)


@require_POST
def logout_view(request):
    identity.sign_out(request)
    return redirect("/login")


__all__ = [
    "login_view",
    "logout_view",
    "pending_view",
    "signup_view",
]
