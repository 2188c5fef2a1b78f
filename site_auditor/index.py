"""
Project index builder for site_auditor.

One pass over the tree records which images exist, where images are
referenced, and every directory. The index is returned only once the pass
is complete, so checks never see a partial view.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING

from site_auditor.config import DEFAULT_CONFIG, get_exclude, normalize_extensions
from site_auditor.errors import ReadFailure
from site_auditor.loader import load
from site_auditor.locator import LineCursor, element_line, line_at
from site_auditor.models import ImageReference, ProjectIndex
from site_auditor.utils import has_marker, is_local_reference, reference_basename, should_exclude
from site_auditor.walker import ensure_directory, walk_tree

if TYPE_CHECKING:
    from typing import Any, Iterator

    from site_auditor.loader import SourceFile

logger = logging.getLogger(__name__)

CSS_URL_RE = re.compile(r"""url\(\s*(['"]?)([^'")\s]+)\1\s*\)""", re.IGNORECASE)
QUOTED_RE = re.compile(r"""(["'`])([^"'`\r\n]+)\1""")

SCRIPT_EXTENSIONS = frozenset({".js", ".jsx", ".ts", ".tsx"})


class ProjectIndexBuilder:
    """Build a ProjectIndex for one scan."""

    def __init__(self, config: dict[str, Any] | None = None) -> None:
        self.config = config or DEFAULT_CONFIG
        extensions = self.config.get("extensions", {})
        self.image_extensions = normalize_extensions(extensions.get("images", []))
        self.reference_extensions = normalize_extensions(extensions.get("references", []))
        self.exclude = get_exclude(self.config)
        self.ignore_marker = self.config.get("ignore_marker", "") or ""

    def build(self, root: Path) -> ProjectIndex:
        """
        Walk ``root`` once and collect project-wide facts.

        Args:
            root: Project directory.

        Returns:
            The completed index.

        Raises:
            DirectoryNotFound: If ``root`` does not exist.
        """
        root = ensure_directory(root)
        index = ProjectIndex()

        for current, _dirs, files in walk_tree(root, self.exclude):
            index.all_directories.append(str(current))
            for filename in files:
                filepath = current / filename
                if should_exclude(filepath, self.exclude):
                    continue
                suffix = filepath.suffix.lower()
                if suffix in self.image_extensions:
                    index.add_image(filename, str(filepath))
                if suffix in self.reference_extensions:
                    self._index_references(filepath, index)

        logger.debug(
            "Indexed %d image names, %d referenced names, %d directories",
            len(index.existing_images),
            len(index.referenced_images),
            len(index.all_directories),
        )
        return index

    def _index_references(self, filepath: Path, index: ProjectIndex) -> None:
        try:
            source = load(filepath)
        except ReadFailure as e:
            logger.debug("Skipping %s while indexing images: %s", filepath, e)
            return

        for src, line in self.image_references(source):
            if has_marker(source.line_text(line), self.ignore_marker):
                continue
            name = reference_basename(src)
            index.add_reference(name, ImageReference(str(filepath), line))

    def image_references(self, source: SourceFile) -> Iterator[tuple[str, int | None]]:
        """
        Yield (reference, line) for every local image reference in a file.

        Covers <img src>, CSS url(...) values (stylesheets and inline styles)
        and, in scripts, quoted string literals naming an image file.
        """
        cursor = LineCursor(source.text)
        for img in source.document.find_all("img"):
            src = (img.get("src") or "").strip()
            if not src:
                continue
            line = element_line(cursor, img, src)
            if self._is_local_image(src):
                yield src, line

        for match in CSS_URL_RE.finditer(source.text):
            src = match.group(2)
            if self._is_local_image(src):
                yield src, line_at(source.text, match.start(2))

        if source.suffix in SCRIPT_EXTENSIONS:
            for match in QUOTED_RE.finditer(source.text):
                src = match.group(2)
                if self._is_local_image(src):
                    yield src, line_at(source.text, match.start(2))

    def _is_local_image(self, src: str) -> bool:
        if not is_local_reference(src):
            return False
        name = reference_basename(src)
        return Path(name).suffix.lower() in self.image_extensions
