"""Session-change hooks.

Sign-in and sign-out are the only moments a viewer's session snapshot is
replaced; log them so access problems can be traced per identity.
"""

from __future__ import annotations

import logging

from .services.identity import on_session_change

logger = logging.getLogger(__name__)


def _log_session_change(request, session) -> None:
    if session is None:
        logger.info("session_ended")
    else:
        logger.info("session_started user_id=%s", session.user_id)


session_log_subscription = on_session_change(_log_session_change)
