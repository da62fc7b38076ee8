"""Profile lookup, lazy creation, and admin flag updates."""

from __future__ import annotations

import enum
import logging

from django.db import DatabaseError, IntegrityError, transaction

from ..models import Profile
from .identity import Session, contact_to_username

logger = logging.getLogger(__name__)


class ProfileErrorKind(enum.Enum):
    LOOKUP_FAILED = "lookup_failed"
    CREATE_FAILED = "create_failed"
    CONFLICT = "conflict"


class ProfileResolutionError(Exception):
    """Profile state could not be established; callers must fail closed."""

    def __init__(self, kind: ProfileErrorKind, message: str = ""):
        super().__init__(message or kind.value)
        self.kind = kind


def fallback_username(session: Session) -> str:
    """Display name, else the contact's local part, else `user<id>`."""
    name = (session.display_name or "").strip() or contact_to_username(session.email).strip()
    return name or f"user{session.user_id}"


def resolve_profile(session: Session) -> Profile:
    """Return the profile for `session`, creating an inactive one on first sight.

    Only a missing row triggers creation. Any other store failure raises
    `ProfileResolutionError`; flags are never guessed.
    """
    try:
        return Profile.objects.get(user_id=session.user_id)
    except Profile.DoesNotExist:
        pass
    except DatabaseError as exc:
        logger.error("profile_lookup_failed user_id=%s error=%s", session.user_id, exc)
        raise ProfileResolutionError(ProfileErrorKind.LOOKUP_FAILED, "Could not load your profile.") from exc

    username = fallback_username(session)
    try:
        with transaction.atomic():
            profile = Profile.objects.create(
                user_id=session.user_id,
                username=username,
                is_active=False,
                is_admin=False,
            )
    except IntegrityError as exc:
        # A concurrent first sign-in may have inserted the row already.
        try:
            existing = Profile.objects.filter(user_id=session.user_id).first()
        except DatabaseError as lookup_exc:
            logger.error("profile_lookup_failed user_id=%s error=%s", session.user_id, lookup_exc)
            raise ProfileResolutionError(ProfileErrorKind.LOOKUP_FAILED, "Could not load your profile.") from lookup_exc
        if existing is not None:
            logger.info("profile_create_raced user_id=%s", session.user_id)
            return existing
        logger.error("profile_create_conflict user_id=%s username=%s", session.user_id, username)
        raise ProfileResolutionError(ProfileErrorKind.CONFLICT, "Could not create your profile.") from exc
    except DatabaseError as exc:
        logger.error("profile_create_failed user_id=%s error=%s", session.user_id, exc)
        raise ProfileResolutionError(ProfileErrorKind.CREATE_FAILED, "Could not create your profile.") from exc

    logger.info("profile_created user_id=%s username=%s", session.user_id, username)
    return profile


def list_profiles():
    return Profile.objects.order_by("-created_at", "-user_id")


def set_profile_flags(user_id: int, *, is_active: bool | None = None, is_admin: bool | None = None) -> int:
    """Update flags by identity id. Returns the number of rows changed."""
    changes = {}
    if is_active is not None:
        changes["is_active"] = bool(is_active)
    if is_admin is not None:
        changes["is_admin"] = bool(is_admin)
    if not changes:
        return 0
    return Profile.objects.filter(user_id=user_id).update(**changes)
