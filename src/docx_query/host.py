"""
Capability interface between the query components and a loaded document.

The outline builder, locator resolver and content extractor only talk to a
document through ``DocumentHost``. ``DocxHost`` is the implementation backed
by the package XML; tests may supply any object with the same shape.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from lxml import etree

if TYPE_CHECKING:
    from .models import ContentControl, Paragraph, Table
    from .types import HeadingRecord


@dataclass(frozen=True)
class RangeHandle:
    """A contiguous span of body blocks.

    ``start`` and ``end`` are inclusive positions in the body block sequence
    (every paragraph and table in document order, table cells included). A
    range taken from a content control also carries the control's
    w:sdtContent as ``fragment`` and only blocks inside it belong to the
    range; for an inline control the range is a single paragraph and only
    the fragment's content belongs to it.

    A range with ``start > end`` is empty.
    """

    start: int
    end: int
    fragment: etree._Element | None = None

    @property
    def is_empty(self) -> bool:
        return self.start > self.end

    def expand_to(self, other: RangeHandle) -> RangeHandle:
        """Return the smallest whole-block range covering both ranges."""
        if self.is_empty:
            return RangeHandle(other.start, other.end)
        if other.is_empty:
            return RangeHandle(self.start, self.end)
        return RangeHandle(min(self.start, other.start), max(self.end, other.end))


@dataclass(frozen=True)
class SectionHandle:
    """A document section: the blocks up to and including its closing sectPr.

    Attributes:
        index: Section index (0-based)
        start: First block position
        end: Last block position (``start - 1`` for an empty section)
        properties: The w:sectPr element closing the section, if any
    """

    index: int
    start: int
    end: int
    properties: etree._Element | None = None


class DocumentHost(Protocol):
    """What the query components need from a document."""

    @property
    def paragraph_count(self) -> int: ...

    @property
    def section_count(self) -> int: ...

    def list_headings(self, include_format: bool = False) -> list[HeadingRecord]: ...

    def find_bookmark(self, name: str) -> RangeHandle | None: ...

    def list_paragraphs(self, scope: RangeHandle | None = None) -> list[Paragraph]: ...

    def list_tables(self, scope: RangeHandle | None = None) -> list[Table]: ...

    def list_content_controls(
        self, scope: RangeHandle | None = None
    ) -> list[ContentControl]: ...

    def get_section(self, index: int) -> SectionHandle: ...

    def range_of(
        self, handle: Paragraph | Table | ContentControl | SectionHandle
    ) -> RangeHandle: ...

    def range_text(self, rng: RangeHandle) -> str: ...
