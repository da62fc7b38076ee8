"""Rewrite local asset references in course Markdown to public URLs.

Two reference shapes are recognised, each with an optional quoted title:

    ![alt](image/diagram.png "Diagram")
    [slides](file/week1.pdf)

The text is tokenized once, left to right. Each matched span is replaced in
place by the same shape pointing at the uploaded asset (the title is
dropped); spans whose asset cannot be uploaded are copied through unchanged.
Reference-style links and HTML `<img>` tags are not touched.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

ASSET_REFERENCE_RE = re.compile(
    r'(?P<image>!\[(?P<alt>[^\]]*)\]\((?P<image_path>image/[^)\s]+)(?:\s+"[^"]*")?\))'
    r'|(?P<file>\[(?P<text>[^\]]*)\]\((?P<file_path>file/[^)\s]+)(?:\s+"[^"]*")?\))'
)


@dataclass(frozen=True)
class AssetReference:
    start: int
    end: int
    kind: str  # "image" | "file"
    label: str
    relative_path: str

    def render(self, url: str) -> str:
        prefix = "!" if self.kind == "image" else ""
        return f"{prefix}[{self.label}]({url})"


def find_asset_references(content: str) -> list[AssetReference]:
    references = []
    for match in ASSET_REFERENCE_RE.finditer(content):
        if match.group("image") is not None:
            kind, label, rel = "image", match.group("alt"), match.group("image_path")
        else:
            kind, label, rel = "file", match.group("text"), match.group("file_path")
        references.append(AssetReference(match.start(), match.end(), kind, label, rel))
    return references


def _local_asset_path(base_dir: Path, relative_path: str) -> Path | None:
    """Resolve `relative_path` under `base_dir`; None if it escapes the root."""
    root = base_dir.resolve()
    candidate = (root / relative_path).resolve()
    if candidate != root and root not in candidate.parents:
        return None
    return candidate


def rewrite_markdown(content: str, base_dir, uploader) -> str:
    references = find_asset_references(content)
    if not references:
        return content

    logger.info("asset_references_found count=%s", len(references))
    base_dir = Path(base_dir)
    pieces = []
    cursor = 0
    for ref in references:
        pieces.append(content[cursor:ref.start])
        cursor = ref.end
        original = content[ref.start:ref.end]

        local_path = _local_asset_path(base_dir, ref.relative_path)
        if local_path is None:
            logger.warning("asset_outside_content_root path=%s", ref.relative_path)
            pieces.append(original)
            continue

        # Storage keeps the authored layout: image/x.png, file/y.gz.
        url = uploader.upload(local_path, ref.relative_path)
        pieces.append(ref.render(url) if url else original)

    pieces.append(content[cursor:])
    return "".join(pieces)
