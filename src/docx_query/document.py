"""
Document facade: one object exposing every query over a .docx file.
"""

from __future__ import annotations

import io
from collections.abc import Iterable
from pathlib import Path
from typing import Any, BinaryIO

from .comments import CommentOptions, deduplicate_references, get_comments
from .docx_host import DocxHost, HeadingDetectionConfig
from .extractor import ExtractOptions, resolve_and_extract
from .host import RangeHandle
from .outline import OutlineOptions, build_flat_outline, build_outline
from .package import DocxPackage
from .pages import get_page_content, get_page_stats, get_page_text
from .resolver import LocatorResolver
from .textboxes import TextBoxOptions, get_text_boxes
from .types import (
    AnnotationRecord,
    DocumentOutline,
    DuplicateGroup,
    ExtractionResult,
    OutlineNode,
    PageInfo,
    PageStats,
    RangeLocator,
    TextBoxInfo,
    locator_from_dict,
)


class Document:
    """Read-only query interface over a Word document.

    Example:
        >>> doc = Document("report.docx")
        >>> print(serialize_markdown(doc.outline()))
        >>> result = doc.get_range_content({"type": "heading", "text": "Scope"})
        >>> result.metadata.paragraph_count
        3
    """

    def __init__(
        self,
        source: str | Path | bytes | BinaryIO | DocxPackage,
        detection: HeadingDetectionConfig | None = None,
    ) -> None:
        """Open a document.

        Args:
            source: Path, raw bytes, binary stream, or an opened DocxPackage
            detection: Heading detection settings

        Raises:
            ValidationError: If the source is not a valid .docx package
        """
        if isinstance(source, DocxPackage):
            package = source
        elif isinstance(source, bytes):
            package = DocxPackage.open(io.BytesIO(source))
        else:
            package = DocxPackage.open(source)
        self._package = package
        self._host = DocxHost.from_package(package, detection)

    @classmethod
    def from_host(cls, host: DocxHost) -> Document:
        """Wrap an existing host (e.g. one built with DocxHost.from_xml)."""
        doc = cls.__new__(cls)
        doc._package = None
        doc._host = host
        return doc

    @property
    def host(self) -> DocxHost:
        return self._host

    @property
    def source_path(self) -> Path | None:
        return self._package.source_path if self._package is not None else None

    @property
    def paragraph_count(self) -> int:
        return self._host.paragraph_count

    @property
    def section_count(self) -> int:
        return self._host.section_count

    @property
    def page_count(self) -> int:
        return self._host.page_count

    # ------------------------------------------------------------------
    # Outline
    # ------------------------------------------------------------------

    def outline(self, options: OutlineOptions | None = None) -> DocumentOutline:
        """Build the heading outline of the document."""
        options = options or OutlineOptions()
        return build_outline(self._host.list_headings(options.include_format), options)

    def outline_flat(self, options: OutlineOptions | None = None) -> list[OutlineNode]:
        """Build the heading outline as a flat list."""
        options = options or OutlineOptions()
        return build_flat_outline(self._host.list_headings(options.include_format), options)

    # ------------------------------------------------------------------
    # Ranges and pages
    # ------------------------------------------------------------------

    @staticmethod
    def _as_locator(locator: RangeLocator | dict[str, Any]) -> RangeLocator:
        if isinstance(locator, dict):
            return locator_from_dict(locator)
        return locator

    def resolve(self, locator: RangeLocator | dict[str, Any]) -> RangeHandle:
        """Resolve a locator (dataclass or tagged dict) to a range."""
        return LocatorResolver(self._host).resolve(self._as_locator(locator))

    def get_range_content(
        self,
        locator: RangeLocator | dict[str, Any],
        options: ExtractOptions | None = None,
    ) -> ExtractionResult:
        """Resolve a locator and extract the content of the range."""
        return resolve_and_extract(self._host, self._as_locator(locator), options)

    def get_page_content(
        self, page_number: int, options: ExtractOptions | None = None
    ) -> PageInfo:
        """Extract the content of a page (1-based)."""
        return get_page_content(self._host, page_number, options)

    def get_page_text(self, page_number: int) -> str:
        return get_page_text(self._host, page_number)

    def get_page_stats(self, page_number: int) -> PageStats:
        return get_page_stats(self._host, page_number)

    # ------------------------------------------------------------------
    # Comments and text boxes
    # ------------------------------------------------------------------

    def get_comments(self, options: CommentOptions | None = None) -> list[AnnotationRecord]:
        return get_comments(self._host, options)

    def find_duplicate_references(
        self, records: Iterable[AnnotationRecord] | None = None
    ) -> list[DuplicateGroup]:
        """Group comments anchored to identical text.

        Args:
            records: Records to group; defaults to all comments of the document
        """
        if records is None:
            records = self.get_comments()
        return deduplicate_references(records)

    def get_text_boxes(self, options: TextBoxOptions | None = None) -> list[TextBoxInfo]:
        return get_text_boxes(self._host, options)

    def __repr__(self) -> str:
        source = self.source_path or "<memory>"
        return f"<Document {source}: {self.paragraph_count} paragraphs>"
