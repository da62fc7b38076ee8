"""Screen access decisions.

Precedence is fixed: authentication first, then activation, then role.

| session | active | admin | Login | Signup | Pending | Courses | Admin  | Unknown |
|---------|--------|-------|-------|--------|---------|---------|--------|---------|
| no      |   -    |   -   | show  | show   | Login   | Login   | Login  | Login   |
| yes     | no     |   -   | Pend. | Pend.  | show    | Pend.   | Pend.  | Pend.   |
| yes     | yes    | no    | Cour. | Pend.  | Cour.   | show    | Cour.  | Cour.   |
| yes     | yes    | yes   | Cour. | Pend.  | Cour.   | show    | show   | Cour.   |

Before the table can be consulted for a signed-in user, the profile must be
resolved. Until then the controller is *loading* and routes nowhere; if
resolution fails it is in *error* and routes nowhere either (fail closed).
"""

from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass

from .identity import Session
from .profiles import ProfileResolutionError, resolve_profile

logger = logging.getLogger(__name__)


class Screen(enum.Enum):
    LOGIN = "login"
    SIGNUP = "signup"
    PENDING = "pending"
    COURSE_LIST = "course_list"
    COURSE_DETAIL = "course_detail"
    ADMIN = "admin"
    UNKNOWN = "unknown"


SCREEN_PATHS = {
    Screen.LOGIN: "/login",
    Screen.SIGNUP: "/signup",
    Screen.PENDING: "/pending",
    Screen.COURSE_LIST: "/courses",
    Screen.ADMIN: "/admin",
}

_COURSE_DETAIL_RE = re.compile(r"^/courses/[^/]+$")
_ADMIN_RE = re.compile(r"^/admin(?:/users/\d+/toggle-(?:active|admin))?$")
_EXACT_SCREENS = {path: screen for screen, path in SCREEN_PATHS.items()}


def classify_path(path: str) -> Screen:
    path = path or "/"
    screen = _EXACT_SCREENS.get(path)
    if screen is not None:
        return screen
    if _COURSE_DETAIL_RE.match(path):
        return Screen.COURSE_DETAIL
    if _ADMIN_RE.match(path):
        return Screen.ADMIN
    return Screen.UNKNOWN


class DecisionKind(enum.Enum):
    RENDER = "render"
    REDIRECT = "redirect"
    LOADING = "loading"
    ERROR = "error"


@dataclass(frozen=True)
class Decision:
    kind: DecisionKind
    screen: Screen | None = None
    message: str = ""

    @classmethod
    def render(cls, screen: Screen) -> "Decision":
        return cls(DecisionKind.RENDER, screen)

    @classmethod
    def redirect_to(cls, screen: Screen) -> "Decision":
        return cls(DecisionKind.REDIRECT, screen)

    @property
    def location(self) -> str:
        return SCREEN_PATHS.get(self.screen, "")


def decide(has_session: bool, is_active: bool, is_admin: bool, screen: Screen) -> Decision:
    if not has_session:
        if screen in (Screen.LOGIN, Screen.SIGNUP):
            return Decision.render(screen)
        return Decision.redirect_to(Screen.LOGIN)

    if not is_active:
        if screen is Screen.PENDING:
            return Decision.render(screen)
        return Decision.redirect_to(Screen.PENDING)

    if screen is Screen.SIGNUP:
        return Decision.redirect_to(Screen.PENDING)
    if screen in (Screen.COURSE_LIST, Screen.COURSE_DETAIL):
        return Decision.render(screen)
    if screen is Screen.ADMIN and is_admin:
        return Decision.render(screen)
    return Decision.redirect_to(Screen.COURSE_LIST)


class Phase(enum.Enum):
    SIGNED_OUT = "signed_out"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


class AccessController:
    """Session + profile state for one viewer, passed explicitly to the gate.

    Every session notification replaces the previous snapshot and bumps a
    generation counter; resolution results carrying an older generation are
    dropped so a slow lookup can never apply flags to a newer session.
    """

    def __init__(self, resolver=resolve_profile):
        self.resolver = resolver
        self.session: Session | None = None
        self.profile = None
        self.error: ProfileResolutionError | None = None
        self.phase = Phase.SIGNED_OUT
        self.generation = 0

    def session_changed(self, session: Session | None) -> int:
        self.generation += 1
        self.session = session
        self.profile = None
        self.error = None
        self.phase = Phase.LOADING if session is not None else Phase.SIGNED_OUT
        return self.generation

    def _is_current(self, generation: int) -> bool:
        if generation != self.generation or self.session is None:
            logger.debug("stale_profile_resolution generation=%s current=%s", generation, self.generation)
            return False
        return True

    def profile_resolved(self, generation: int, profile) -> bool:
        if not self._is_current(generation):
            return False
        self.profile = profile
        self.phase = Phase.READY
        return True

    def profile_failed(self, generation: int, error: ProfileResolutionError) -> bool:
        if not self._is_current(generation):
            return False
        self.error = error
        self.phase = Phase.ERROR
        return True

    def resolve(self) -> None:
        """Resolve the profile for the current session snapshot."""
        if self.session is None:
            return
        generation = self.generation
        try:
            profile = self.resolver(self.session)
        except ProfileResolutionError as exc:
            self.profile_failed(generation, exc)
        else:
            self.profile_resolved(generation, profile)

    def route(self, screen: Screen) -> Decision:
        if self.phase is Phase.LOADING:
            return Decision(DecisionKind.LOADING)
        if self.phase is Phase.ERROR:
            return Decision(DecisionKind.ERROR, message=str(self.error or ""))
        profile = self.profile if self.phase is Phase.READY else None
        return decide(
            has_session=self.phase is Phase.READY,
            is_active=bool(profile is not None and profile.is_active),
            is_admin=bool(profile is not None and profile.is_admin),
            screen=screen,
        )
