"""Batch account creation from a plain-text accounts file.

File format, one account per line:

    # comment lines start with '#'
    alice  secret123
    bob,hunter22

Fields are separated by whitespace and/or commas. Usernames must match
`[A-Za-z0-9_]+`; passwords must meet the minimum length. Bad lines are
logged and skipped, the rest are still imported.
"""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass, field
from pathlib import Path

from .identity import (
    IdentityErrorKind,
    min_secret_length,
    register_identity,
    session_for_user,
    username_to_contact,
)
from .profiles import resolve_profile, set_profile_flags

logger = logging.getLogger(__name__)

USERNAME_RE = re.compile(r"^[A-Za-z0-9_]+$")
_FIELD_SPLIT_RE = re.compile(r"[\s,]+")


class AccountLineError(ValueError):
    def __init__(self, line_number: int, message: str):
        super().__init__(f"line {line_number}: {message}")
        self.line_number = line_number


@dataclass(frozen=True)
class AccountEntry:
    line_number: int
    username: str
    password: str


@dataclass
class ImportReport:
    created: int = 0
    skipped: int = 0
    failed: int = 0
    invalid: int = 0
    errors: list[str] = field(default_factory=list)


def parse_account_line(line: str, line_number: int) -> AccountEntry | None:
    """Return an entry, None for blank/comment lines, or raise AccountLineError."""
    stripped = (line or "").strip()
    if not stripped or stripped.startswith("#"):
        return None

    parts = [p for p in _FIELD_SPLIT_RE.split(stripped) if p]
    if len(parts) < 2:
        raise AccountLineError(line_number, "expected '<username> <password>'")

    username, password = parts[0], parts[1]
    if not USERNAME_RE.match(username):
        raise AccountLineError(line_number, f"username '{username}' may only contain letters, digits and underscores")
    if len(password) < min_secret_length():
        raise AccountLineError(
            line_number,
            f"password for '{username}' must be at least {min_secret_length()} characters",
        )
    return AccountEntry(line_number=line_number, username=username.lower(), password=password)


def parse_account_lines(lines, report: ImportReport) -> list[AccountEntry]:
    entries = []
    for line_number, line in enumerate(lines, start=1):
        try:
            entry = parse_account_line(line, line_number)
        except AccountLineError as exc:
            logger.warning("account_line_skipped %s", exc)
            report.invalid += 1
            report.errors.append(str(exc))
            continue
        if entry is not None:
            entries.append(entry)
    return entries


def create_account(entry: AccountEntry, *, activate: bool = True) -> str:
    """Create one account. Returns "created", "exists" or "failed"."""
    user, error = register_identity(
        username_to_contact(entry.username),
        entry.password,
        metadata={"username": entry.username},
    )
    if error is not None:
        if error.kind is IdentityErrorKind.ALREADY_REGISTERED:
            logger.info("account_exists username=%s", entry.username)
            return "exists"
        logger.error("account_create_failed username=%s kind=%s", entry.username, error.kind.value)
        return "failed"

    if activate:
        try:
            profile = resolve_profile(session_for_user(user))
            set_profile_flags(profile.user_id, is_active=True)
        except Exception as exc:
            # The identity exists either way; an admin can still activate it by hand.
            logger.warning("account_activate_failed username=%s error=%s", entry.username, exc)
    logger.info("account_created username=%s active=%s", entry.username, activate)
    return "created"


def import_accounts(path, *, activate: bool = True, delay_seconds: float = 0.0) -> ImportReport:
    report = ImportReport()
    lines = Path(path).read_text(encoding="utf-8").splitlines()
    entries = parse_account_lines(lines, report)

    for position, entry in enumerate(entries):
        if position and delay_seconds > 0:
            time.sleep(delay_seconds)
        outcome = create_account(entry, activate=activate)
        if outcome == "created":
            report.created += 1
        elif outcome == "exists":
            report.skipped += 1
        else:
            report.failed += 1
    return report
