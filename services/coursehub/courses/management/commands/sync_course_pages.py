"""Sync Markdown course pages (and their assets) into the database.

Usage examples:
  python manage.py sync_course_pages
  python manage.py sync_course_pages --content-root ./notebook --bucket course-assets

Layout of the content root:
  notebook/第一课-开场白.md
  notebook/02-tools.md
  notebook/image/diagram.png   (referenced as ![...](image/diagram.png))
  notebook/file/starter.zip    (referenced as [...](file/starter.zip))
"""

from __future__ import annotations

from pathlib import Path

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from courses.services.assets import AssetUploader
from courses.services.content_sync import scan_documents, sync_content_tree
from courses.services.object_storage import ObjectStorage, ObjectStorageError


def _key_preview(key: str) -> str:
    if len(key) > 16:
        return f"{key[:8]}...{key[-8:]}"
    return f"{key[:4]}...{key[-4:]}"


class Command(BaseCommand):
    help = "Sync Markdown files from the content root into course pages, uploading referenced assets."

    def add_arguments(self, parser):
        parser.add_argument(
            "--content-root",
            default=None,
            help="Directory to scan (default: COURSEHUB_CONTENT_ROOT).",
        )
        parser.add_argument(
            "--bucket",
            default=None,
            help="Storage bucket for images/files (default: COURSEHUB_STORAGE_BUCKET).",
        )

    def handle(self, *args, **opts):
        key = (getattr(settings, "COURSEHUB_SERVICE_ROLE_KEY", "") or "").strip()
        if not key:
            raise CommandError(
                "COURSEHUB_SERVICE_ROLE_KEY is not set. Add it to the credentials file "
                f"({getattr(settings, 'CREDENTIALS_FILE', '.env.local')})."
            )

        content_root = Path(opts.get("content_root") or settings.COURSEHUB_CONTENT_ROOT)
        bucket = (opts.get("bucket") or settings.COURSEHUB_STORAGE_BUCKET or "").strip()
        if not bucket:
            raise CommandError("Storage bucket name is empty.")

        self.stdout.write(f"Content root: {content_root}")
        self.stdout.write(f"Storage bucket: {bucket}")
        self.stdout.write(f"Service key: {_key_preview(key)} (length {len(key)})")

        storage = ObjectStorage()
        try:
            buckets = storage.list_buckets()
        except ObjectStorageError as exc:
            raise CommandError(f"Could not list storage buckets: {exc}") from exc
        if bucket not in buckets:
            raise CommandError(
                f"Bucket '{bucket}' does not exist. Create it (a public top-level folder of the "
                "media storage) before syncing."
            )
        self.stdout.write(self.style.SUCCESS(f"Bucket '{bucket}' is ready."))

        if not scan_documents(content_root):
            self.stdout.write(self.style.WARNING("No Markdown files found."))
            return

        report = sync_content_tree(content_root, AssetUploader(bucket, storage=storage))

        for slug, sort_order in report.pages:
            self.stdout.write(f"Synced: {slug} (order {sort_order})")
        for name, error in report.failures:
            self.stderr.write(self.style.ERROR(f"Failed: {name}: {error}"))

        summary = (
            f"Sync complete: {report.succeeded} succeeded, {report.failed} failed, "
            f"{report.assets_uploaded} assets uploaded."
        )
        if report.failed:
            self.stdout.write(self.style.WARNING(summary))
        else:
            self.stdout.write(self.style.SUCCESS(summary))
