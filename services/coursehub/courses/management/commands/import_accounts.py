"""Create learner accounts in bulk from an accounts file.

Usage examples:
  python manage.py import_accounts
  python manage.py import_accounts --file ./account.txt --no-activate

Each line holds `<username> <password>` (space, tab or comma separated);
lines starting with '#' are ignored. Imported accounts are activated unless
--no-activate is given.
"""

from __future__ import annotations

from pathlib import Path

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from courses.services.account_import import import_accounts


class Command(BaseCommand):
    help = "Create learner accounts from a username/password file."

    def add_arguments(self, parser):
        parser.add_argument(
            "--file",
            default=None,
            help="Accounts file (default: COURSEHUB_ACCOUNTS_FILE).",
        )
        parser.add_argument(
            "--no-activate",
            action="store_true",
            help="Leave imported accounts awaiting admin activation.",
        )
        parser.add_argument(
            "--delay",
            type=float,
            default=None,
            help="Seconds to wait between accounts (default: COURSEHUB_IMPORT_DELAY_SECONDS).",
        )

    def handle(self, *args, **opts):
        key = (getattr(settings, "COURSEHUB_SERVICE_ROLE_KEY", "") or "").strip()
        if not key:
            raise CommandError(
                "COURSEHUB_SERVICE_ROLE_KEY is not set. Add it to the credentials file "
                f"({getattr(settings, 'CREDENTIALS_FILE', '.env.local')})."
            )

        path = Path(opts.get("file") or settings.COURSEHUB_ACCOUNTS_FILE)
        if not path.is_file():
            raise CommandError(f"Accounts file not found: {path}")

        delay = opts.get("delay")
        if delay is None:
            delay = float(getattr(settings, "COURSEHUB_IMPORT_DELAY_SECONDS", 0.1) or 0)
        activate = not bool(opts.get("no_activate"))

        self.stdout.write(f"Accounts file: {path}")
        report = import_accounts(path, activate=activate, delay_seconds=max(float(delay), 0.0))

        for error in report.errors:
            self.stderr.write(self.style.WARNING(f"Skipped {error}"))
        self.stdout.write(
            self.style.SUCCESS(
                f"Import complete: {report.created} created, {report.skipped} already existed, "
                f"{report.failed} failed, {report.invalid} invalid lines."
            )
        )
