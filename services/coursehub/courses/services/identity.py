"""Identity gateway over Django auth.

The rest of the app only sees `Session` snapshots and `IdentityError` kinds;
it never looks at `User` rows or error message text directly.

A learner's username is mapped to an email-shaped contact address
(`<username>@<COURSEHUB_CONTACT_DOMAIN>`) because identities are keyed by
contact. Stripping the domain suffix recovers the username.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field

from django.conf import settings
from django.contrib.auth import authenticate, get_user_model
from django.contrib.auth import login as auth_login
from django.contrib.auth import logout as auth_logout
from django.contrib.auth.signals import user_logged_in, user_logged_out
from django.core.exceptions import ValidationError
from django.core.validators import validate_email
from django.db import IntegrityError, transaction

logger = logging.getLogger(__name__)


class IdentityErrorKind(enum.Enum):
    ALREADY_REGISTERED = "already_registered"
    INVALID_CREDENTIALS = "invalid_credentials"
    INVALID_CONTACT = "invalid_contact"
    WEAK_SECRET = "weak_secret"


@dataclass(frozen=True)
class IdentityError:
    kind: IdentityErrorKind
    message: str = ""


@dataclass(frozen=True)
class Session:
    """Read-only snapshot of an authenticated identity."""

    user_id: int
    email: str
    display_name: str = ""
    session_key: str = ""


@dataclass(frozen=True)
class AuthResult:
    session: Session | None = None
    error: IdentityError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class _Subscription:
    callback: object
    receivers: list = field(default_factory=list)

    def unsubscribe(self) -> None:
        for signal, receiver in self.receivers:
            signal.disconnect(receiver)
        self.receivers.clear()


def _contact_domain() -> str:
    configured = (getattr(settings, "COURSEHUB_CONTACT_DOMAIN", "gzdlab.com") or "").strip().lstrip("@")
    return configured or "gzdlab.com"


def min_secret_length() -> int:
    raw = int(getattr(settings, "COURSEHUB_MIN_SECRET_LENGTH", 6) or 0)
    return raw if raw > 0 else 6


def username_to_contact(username: str) -> str:
    return f"{(username or '').lower().strip()}@{_contact_domain()}"


def contact_to_username(contact: str) -> str:
    return (contact or "").replace(f"@{_contact_domain()}", "")


def session_for_user(user, *, session_key: str = "") -> Session:
    return Session(
        user_id=int(user.pk),
        email=(user.email or "").strip(),
        display_name=(user.first_name or "").strip(),
        session_key=session_key or "",
    )


def register_identity(contact: str, secret: str, metadata: dict | None = None) -> tuple[object | None, IdentityError | None]:
    """Create an identity without signing it in (administrative path)."""
    contact = (contact or "").strip().lower()
    try:
        validate_email(contact)
    except ValidationError:
        return None, IdentityError(IdentityErrorKind.INVALID_CONTACT, "Contact address is not valid.")
    if len(secret or "") < min_secret_length():
        return None, IdentityError(
            IdentityErrorKind.WEAK_SECRET,
            f"Password must be at least {min_secret_length()} characters.",
        )

    display_name = str((metadata or {}).get("username") or "").strip()
    User = get_user_model()
    if User.objects.filter(username=contact).exists():
        return None, IdentityError(IdentityErrorKind.ALREADY_REGISTERED, "User already registered.")
    try:
        with transaction.atomic():
            user = User.objects.create_user(
                username=contact,
                email=contact,
                password=secret,
                first_name=display_name[:150],
            )
    except IntegrityError:
        return None, IdentityError(IdentityErrorKind.ALREADY_REGISTERED, "User already registered.")
    logger.info("identity_registered user_id=%s", user.pk)
    return user, None


def sign_up(request, contact: str, secret: str, metadata: dict | None = None) -> AuthResult:
    user, error = register_identity(contact, secret, metadata)
    if error is not None:
        return AuthResult(error=error)
    auth_login(request, user, backend="django.contrib.auth.backends.ModelBackend")
    return AuthResult(session=session_for_user(user, session_key=request.session.session_key or ""))


def sign_in(request, contact: str, secret: str) -> AuthResult:
    contact = (contact or "").strip().lower()
    user = authenticate(request, username=contact, password=secret)
    if user is None:
        return AuthResult(error=IdentityError(IdentityErrorKind.INVALID_CREDENTIALS, "Invalid username or password."))
    auth_login(request, user)
    return AuthResult(session=session_for_user(user, session_key=request.session.session_key or ""))


def get_session(request) -> Session | None:
    user = getattr(request, "user", None)
    if user is None or not user.is_authenticated:
        return None
    session = getattr(request, "session", None)
    return session_for_user(user, session_key=getattr(session, "session_key", "") or "")


def sign_out(request) -> None:
    auth_logout(request)
    # Drop any remaining keys so the next visitor starts from an empty session.
    request.session.flush()


def on_session_change(callback) -> _Subscription:
    """Call `callback(request, session_or_none)` on every sign-in and sign-out.

    Returns a subscription; call `.unsubscribe()` to stop receiving updates.
    """
    subscription = _Subscription(callback=callback)

    def _on_login(sender, request, user, **kwargs):
        session_key = getattr(getattr(request, "session", None), "session_key", "") or ""
        callback(request, session_for_user(user, session_key=session_key))

    def _on_logout(sender, request, user, **kwargs):
        callback(request, None)

    user_logged_in.connect(_on_login, weak=False)
    user_logged_out.connect(_on_logout, weak=False)
    subscription.receivers.extend([(user_logged_in, _on_login), (user_logged_out, _on_logout)])
    return subscription
