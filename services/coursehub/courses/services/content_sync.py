"""Sync a local Markdown tree into `CoursePage` rows.

Plain-language flow for one run:
1. Walk the content root (skipping `image/` and `file/` asset folders) and
   collect every `.md` file.
2. Sort candidates by lesson number.
3. For each document, in order: read it, derive slug/title/order, upload its
   referenced assets and rewrite the links, then upsert by slug.

Documents are processed one at a time. A failing document is logged and
counted; it never stops the run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from django.utils import timezone

from ..models import CoursePage
from .assets import AssetUploader
from .markdown_rewriter import rewrite_markdown
from .slugs import extract_sort_order, generate_slug

logger = logging.getLogger(__name__)

ASSET_DIR_NAMES = frozenset({"image", "file"})
DOCUMENT_SUFFIX = ".md"


@dataclass(frozen=True)
class SourceDocument:
    path: Path
    relative_path: str
    name: str


@dataclass
class SyncReport:
    succeeded: int = 0
    failed: int = 0
    assets_uploaded: int = 0
    failures: list[tuple[str, str]] = field(default_factory=list)
    pages: list[tuple[str, int]] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.succeeded + self.failed


def scan_documents(root, _prefix: str = "") -> list[SourceDocument]:
    """Collect Markdown documents under `root` in discovery order.

    Entries are visited in name order so discovery order is stable across
    filesystems.
    """
    root = Path(root)
    if not root.is_dir():
        return []

    documents = []
    for entry in sorted(root.iterdir(), key=lambda p: p.name):
        relative = f"{_prefix}/{entry.name}" if _prefix else entry.name
        if entry.is_dir():
            if entry.name in ASSET_DIR_NAMES:
                continue
            documents.extend(scan_documents(entry, relative))
        elif entry.suffix.lower() == DOCUMENT_SUFFIX:
            documents.append(SourceDocument(path=entry, relative_path=relative, name=entry.stem))
    return documents


def order_documents(documents: list[SourceDocument]) -> list[SourceDocument]:
    """Sort by lesson number, comparing every candidate at discovery index 0.

    Unnumbered documents therefore all compare as order 1, and the stable sort
    keeps them in discovery order relative to each other and to lesson 1.
    """
    return sorted(documents, key=lambda doc: extract_sort_order(doc.name, 0))


def upsert_course_page(*, slug: str, title: str, sort_order: int, md_content: str) -> CoursePage:
    page, created = CoursePage.objects.update_or_create(
        slug=slug,
        defaults={
            "title": title,
            "sort_order": sort_order,
            "md_content": md_content,
            "updated_at": timezone.now(),
        },
    )
    logger.debug("course_page_upserted slug=%s created=%s", slug, created)
    return page


def sync_document(document: SourceDocument, index: int, content_root: Path, uploader: AssetUploader) -> CoursePage:
    text = document.path.read_text(encoding="utf-8")
    slug = generate_slug(document.name)
    sort_order = extract_sort_order(document.name, index)
    md_content = rewrite_markdown(text, content_root, uploader)
    return upsert_course_page(
        slug=slug,
        title=document.name,
        sort_order=sort_order,
        md_content=md_content,
    )


def sync_content_tree(content_root, uploader: AssetUploader) -> SyncReport:
    content_root = Path(content_root)
    report = SyncReport()
    documents = order_documents(scan_documents(content_root))

    for index, document in enumerate(documents):
        try:
            page = sync_document(document, index, content_root, uploader)
        except Exception as exc:
            logger.error("course_sync_failed name=%s error=%s", document.name, exc)
            report.failed += 1
            report.failures.append((document.name, str(exc)))
            continue
        logger.info("course_synced name=%s slug=%s order=%s", document.name, page.slug, page.sort_order)
        report.succeeded += 1
        report.pages.append((page.slug, page.sort_order))

    report.assets_uploaded = uploader.uploaded_count
    return report
