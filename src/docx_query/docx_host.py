"""
Document host backed by the WordprocessingML parts of a .docx package.

The body is flattened once into a sequence of blocks: every paragraph and
table in document order, including those inside table cells, content
controls and custom XML wrappers. A table comes right before the blocks in
its cells. Text boxes are not part of the sequence. Every range, section
and page is a span of that sequence.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from lxml import etree

from .constants import (
    COMMENTS_EXTENDED_PART,
    COMMENTS_PART,
    DOCUMENT_PART,
    STYLES_PART,
    mc,
    w,
    w15,
)
from .errors import OutOfRangeError, ValidationError
from .host import RangeHandle, SectionHandle
from .models import Comment, CommentAnchor, ContentControl, Paragraph, Table, TextBox
from .package import DocxPackage
from .types import HeadingRecord
from .xml_utils import block_text, is_inside, on_off, val

logger = logging.getLogger(__name__)

_BLOCK_TAGS = (w("p"), w("tbl"))


@dataclass
class HeadingDetectionConfig:
    """Configuration for heading detection.

    Attributes:
        detect_outline_level: Also treat paragraphs carrying w:outlineLvl as
            headings (level = outline level + 1)
        include_empty: Keep heading paragraphs whose text is empty
    """

    detect_outline_level: bool = False
    include_empty: bool = True


def _parse(xml: str | bytes | None, part_name: str) -> etree._Element | None:
    if xml is None:
        return None
    data = xml.encode("utf-8") if isinstance(xml, str) else xml
    try:
        return etree.fromstring(data)
    except etree.XMLSyntaxError as e:
        raise ValidationError(f"Malformed XML in {part_name}: {e}") from e


def _parse_style_names(styles: etree._Element | None) -> dict[str, str]:
    """Map style ids to display names.

    Built-in styles store lowercase names ("heading 1"); they are shown with
    a leading capital as Word does.
    """
    if styles is None:
        return {}
    names = {}
    for style in styles.iter(w("style")):
        style_id = style.get(w("styleId"))
        name = val(style, "name")
        if style_id and name:
            names[style_id] = name[:1].upper() + name[1:]
    return names


def _is_descendant(elem: etree._Element, ancestor: etree._Element) -> bool:
    return any(parent is ancestor for parent in elem.iterancestors())


class DocxHost:
    """Read-only query host over a parsed document.

    Example:
        >>> host = DocxHost.from_package(DocxPackage.open("report.docx"))
        >>> host.paragraph_count
        42
    """

    def __init__(
        self,
        document: etree._Element,
        styles: etree._Element | None = None,
        comments: etree._Element | None = None,
        comments_extended: etree._Element | None = None,
        relationships: dict[str, str] | None = None,
        detection: HeadingDetectionConfig | None = None,
    ):
        """Initialize the host from parsed parts.

        Args:
            document: Root of word/document.xml
            styles: Root of word/styles.xml, for style display names
            comments: Root of word/comments.xml
            comments_extended: Root of word/commentsExtended.xml
            relationships: Relationship id -> target of the document part
            detection: Heading detection settings

        Raises:
            ValidationError: If the document part has no body
        """
        body = document.find(w("body"))
        if body is None:
            raise ValidationError("Document part has no w:body element")

        self._root = document
        self._body = body
        self._style_names = _parse_style_names(styles)
        self._comments_root = comments
        self._comments_extended_root = comments_extended
        self._relationships = relationships or {}
        self._detection = detection or HeadingDetectionConfig()

        self._blocks = [
            elem
            for elem in body.iter(*_BLOCK_TAGS)
            if not is_inside(elem, w("txbxContent"), stop=body)
        ]
        self._block_index = {elem: pos for pos, elem in enumerate(self._blocks)}

        self._paragraphs: list[Paragraph] = []
        self._tables: list[Table] = []
        self._items: list[Paragraph | Table] = []
        for elem in self._blocks:
            if elem.tag == w("p"):
                item = Paragraph(
                    elem, len(self._paragraphs), self._style_names, self._relationships
                )
                self._paragraphs.append(item)
            else:
                item = Table(elem, len(self._tables))
                self._tables.append(item)
            self._items.append(item)

        self._controls: list[ContentControl] = []
        self._control_positions: list[int | None] = []
        for sdt in body.iter(w("sdt")):
            if is_inside(sdt, w("txbxContent"), stop=body):
                continue
            control = ContentControl(sdt, len(self._controls))
            self._controls.append(control)
            position = self._first_block_in(sdt, forward=True)
            if position is None:
                position = self._position(sdt)
            self._control_positions.append(position)

        self._sections = self._build_sections()
        self._pages = self._build_pages()

        logger.debug(
            "Loaded document: %d blocks, %d paragraphs, %d tables, %d sections, %d pages",
            len(self._blocks),
            len(self._paragraphs),
            len(self._tables),
            len(self._sections),
            len(self._pages),
        )

    @classmethod
    def from_package(
        cls, package: DocxPackage, detection: HeadingDetectionConfig | None = None
    ) -> DocxHost:
        """Build a host from an opened package."""
        return cls(
            package.get_part(DOCUMENT_PART),
            styles=package.get_part(STYLES_PART),
            comments=package.get_part(COMMENTS_PART),
            comments_extended=package.get_part(COMMENTS_EXTENDED_PART),
            relationships=package.get_relationships(),
            detection=detection,
        )

    @classmethod
    def from_xml(
        cls,
        document_xml: str | bytes,
        styles_xml: str | bytes | None = None,
        comments_xml: str | bytes | None = None,
        comments_extended_xml: str | bytes | None = None,
        relationships: dict[str, str] | None = None,
        detection: HeadingDetectionConfig | None = None,
    ) -> DocxHost:
        """Build a host from XML strings of the individual parts.

        Raises:
            ValidationError: If a part is not well-formed XML
        """
        return cls(
            _parse(document_xml, DOCUMENT_PART),
            styles=_parse(styles_xml, STYLES_PART),
            comments=_parse(comments_xml, COMMENTS_PART),
            comments_extended=_parse(comments_extended_xml, COMMENTS_EXTENDED_PART),
            relationships=relationships,
            detection=detection,
        )

    # ------------------------------------------------------------------
    # Block sequence
    # ------------------------------------------------------------------

    def _first_block_in(self, elem: etree._Element, forward: bool) -> int | None:
        positions = [
            self._block_index[e] for e in elem.iter(*_BLOCK_TAGS) if e in self._block_index
        ]
        if not positions:
            return None
        return positions[0] if forward else positions[-1]

    def _adjacent_block(self, elem: etree._Element, forward: bool) -> int | None:
        node = elem
        while node is not None and node is not self._body:
            for sibling in node.itersiblings(preceding=not forward):
                position = self._first_block_in(sibling, forward)
                if position is not None:
                    return position
            node = node.getparent()
        return None

    def _position(self, elem: etree._Element, forward: bool = True) -> int | None:
        """Find the block holding ``elem``.

        Markers between blocks (e.g. a body-level bookmarkStart) resolve to the
        next block when ``forward`` is set, otherwise to the previous one, and
        fall back to the other direction at the ends of the document. A marker
        held by a table but outside its cells resolves backwards to the last
        block of the table.
        """
        node = elem
        while node is not None:
            position = self._block_index.get(node)
            if position is not None:
                if not forward and node.tag == w("tbl"):
                    return self._first_block_in(node, forward=False)
                return position
            node = node.getparent()

        position = self._adjacent_block(elem, forward)
        if position is None:
            position = self._adjacent_block(elem, not forward)
        return position

    def _is_inline(self, rng: RangeHandle) -> bool:
        return rng.fragment is not None and self._first_block_in(rng.fragment, True) is None

    def _scope_items(self, scope: RangeHandle) -> list[Paragraph | Table]:
        if scope.is_empty:
            return []
        items = self._items[max(scope.start, 0) : scope.end + 1]
        if scope.fragment is not None:
            items = [item for item in items if _is_descendant(item.element, scope.fragment)]
        return items

    @staticmethod
    def _outermost(items: list[Paragraph | Table]) -> list[Paragraph | Table]:
        """Drop items nested in a table that is itself among ``items``."""
        elements = {item.element for item in items}
        return [
            item
            for item in items
            if not any(ancestor in elements for ancestor in item.element.iterancestors(w("tbl")))
        ]

    # ------------------------------------------------------------------
    # DocumentHost
    # ------------------------------------------------------------------

    @property
    def paragraph_count(self) -> int:
        return len(self._paragraphs)

    @property
    def section_count(self) -> int:
        return len(self._sections)

    def list_headings(self, include_format: bool = False) -> list[HeadingRecord]:
        """Scan paragraphs, table cells included, for headings in document order.

        Args:
            include_format: Attach a formatting snapshot to each record

        Returns:
            One HeadingRecord per heading paragraph, text stripped
        """
        headings = []
        for paragraph in self._paragraphs:
            level = paragraph.get_heading_level(self._detection.detect_outline_level)
            if level is None:
                continue
            text = paragraph.text.strip()
            if not text and not self._detection.include_empty:
                continue
            headings.append(
                HeadingRecord(
                    text=text,
                    level=level,
                    sequence_index=paragraph.index,
                    style=paragraph.style or "",
                    format=paragraph.format_snapshot() if include_format else None,
                )
            )
        logger.debug("Found %d headings in %d paragraphs", len(headings), len(self._paragraphs))
        return headings

    @property
    def bookmark_names(self) -> list[str]:
        """Names of the bookmarks in the body, in document order."""
        return [
            start.get(w("name"))
            for start in self._body.iter(w("bookmarkStart"))
            if start.get(w("name"))
        ]

    def find_bookmark(self, name: str) -> RangeHandle | None:
        """Find the blocks spanned by a bookmark.

        Returns:
            The range from the block holding bookmarkStart to the block holding
            the matching bookmarkEnd, or None if no bookmark has that name
        """
        for start in self._body.iter(w("bookmarkStart")):
            if start.get(w("name")) != name:
                continue

            bookmark_id = start.get(w("id"))
            end = None
            for elem in self._body.iter(w("bookmarkEnd")):
                if elem.get(w("id")) == bookmark_id:
                    end = elem
                    break

            first = self._position(start, forward=True)
            if first is None:
                return RangeHandle(0, -1)
            last = self._position(end, forward=False) if end is not None else first
            if last is None or last < first:
                last = first
            return RangeHandle(first, last)
        return None

    def list_paragraphs(self, scope: RangeHandle | None = None) -> list[Paragraph]:
        """List paragraphs, optionally limited to a range.

        Without a scope every paragraph is listed, table cells included; this
        is the sequence paragraph indices refer to. Within a range, paragraphs
        of a table that lies in the range are part of that table and are not
        listed. An inline content-control range lists its containing
        paragraph.
        """
        if scope is None:
            return list(self._paragraphs)
        if self._is_inline(scope):
            item = self._items[scope.start]
            return [item] if isinstance(item, Paragraph) else []
        items = self._outermost(self._scope_items(scope))
        return [item for item in items if isinstance(item, Paragraph)]

    def list_tables(self, scope: RangeHandle | None = None) -> list[Table]:
        """List tables, optionally limited to a range.

        Tables nested in a listed table are part of it and are not listed.
        """
        if scope is None:
            return [item for item in self._outermost(self._items) if isinstance(item, Table)]
        if self._is_inline(scope):
            return []
        items = self._outermost(self._scope_items(scope))
        return [item for item in items if isinstance(item, Table)]

    def list_content_controls(self, scope: RangeHandle | None = None) -> list[ContentControl]:
        """List content controls in document order, optionally limited to a range.

        A control belongs to a range when its first block lies inside it; for a
        range taken from a control, only the controls nested in it belong.
        """
        if scope is None:
            return list(self._controls)
        if scope.fragment is not None:
            return [c for c in self._controls if _is_descendant(c.element, scope.fragment)]
        return [
            control
            for control, position in zip(self._controls, self._control_positions)
            if position is not None and scope.start <= position <= scope.end
        ]

    def get_section(self, index: int) -> SectionHandle:
        """Get a section by index.

        Raises:
            ValidationError: If index is negative
            OutOfRangeError: If index is past the last section
        """
        if index < 0:
            raise ValidationError(f"Section index must be non-negative, got {index}")
        if index >= len(self._sections):
            raise OutOfRangeError("section", index, len(self._sections))
        return self._sections[index]

    def range_of(self, handle: Paragraph | Table | ContentControl | SectionHandle) -> RangeHandle:
        """Get the range covered by a paragraph, table, content control or section."""
        if isinstance(handle, SectionHandle):
            return RangeHandle(handle.start, handle.end)

        if isinstance(handle, ContentControl):
            content = handle.content
            position = self._position(handle.element)
            if content is None:
                return RangeHandle(position or 0, (position or 0) - 1)
            first = self._first_block_in(content, forward=True)
            if first is not None:
                last = self._first_block_in(content, forward=False)
                return RangeHandle(first, last, fragment=content)
            if position is None:
                return RangeHandle(0, -1, fragment=content)
            return RangeHandle(position, position, fragment=content)

        position = self._position(handle.element)
        if position is None:
            return RangeHandle(0, -1)
        if isinstance(handle, Table):
            return RangeHandle(position, self._first_block_in(handle.element, forward=False))
        return RangeHandle(position, position)

    def range_text(self, rng: RangeHandle) -> str:
        """Get the text of a range, one line per paragraph or table row."""
        if rng.is_empty:
            return ""
        if self._is_inline(rng):
            return block_text(rng.fragment)
        return "\n".join(item.text for item in self._outermost(self._scope_items(rng)))

    # ------------------------------------------------------------------
    # Sections and pages
    # ------------------------------------------------------------------

    def _build_sections(self) -> list[SectionHandle]:
        sections = []
        start = 0
        for position, elem in enumerate(self._blocks):
            if elem.tag != w("p"):
                continue
            sect_pr = elem.find(f"{w('pPr')}/{w('sectPr')}")
            if sect_pr is not None:
                sections.append(SectionHandle(len(sections), start, position, sect_pr))
                start = position + 1
        final = self._body.find(w("sectPr"))
        sections.append(SectionHandle(len(sections), start, len(self._blocks) - 1, final))
        return sections

    def _page_break_position(self, position: int, elem: etree._Element) -> int | None:
        """Find where a page break in a block makes the next page start.

        A break preceded by text in the same paragraph starts the next page at
        the following block; otherwise the page starts at this block. Tables
        carry no breaks of their own; their cell paragraphs are scanned.
        """
        if elem.tag != w("p"):
            return None
        if on_off(elem.find(w("pPr")), "pageBreakBefore"):
            return position

        seen_text = False
        for marker in elem.iter(w("t"), w("br"), w("lastRenderedPageBreak")):
            if is_inside(marker, w("txbxContent"), stop=elem):
                continue
            if marker.tag == w("t"):
                seen_text = seen_text or bool(marker.text)
                continue
            if marker.tag == w("br") and marker.get(w("type")) != "page":
                continue
            return position + 1 if seen_text else position
        return None

    def _build_pages(self) -> list[RangeHandle]:
        starts = [0]
        for position, elem in enumerate(self._blocks):
            page_start = self._page_break_position(position, elem)
            if page_start is None:
                continue
            if 0 < page_start < len(self._blocks) and page_start > starts[-1]:
                starts.append(page_start)
        ends = [start - 1 for start in starts[1:]] + [len(self._blocks) - 1]
        return [RangeHandle(start, end) for start, end in zip(starts, ends)]

    @property
    def page_count(self) -> int:
        """Number of pages, as delimited by page breaks Word recorded in the file."""
        return len(self._pages)

    def get_page(self, index: int) -> RangeHandle:
        """Get the range of a page by 0-based index.

        Raises:
            ValidationError: If index is negative
            OutOfRangeError: If index is past the last page
        """
        if index < 0:
            raise ValidationError(f"Page index must be non-negative, got {index}")
        if index >= len(self._pages):
            raise OutOfRangeError("page", index, len(self._pages))
        return self._pages[index]

    # ------------------------------------------------------------------
    # Comments and text boxes
    # ------------------------------------------------------------------

    def paragraph_for(self, elem: etree._Element | None) -> Paragraph | None:
        """Wrap a w:p element, reusing the block paragraph when it is one."""
        if elem is None:
            return None
        position = self._block_index.get(elem)
        if position is not None:
            return self._items[position]
        return Paragraph(elem, -1, self._style_names, self._relationships)

    def _build_comment_anchors(self) -> dict[str, CommentAnchor]:
        """Collect the text between each commentRangeStart/commentRangeEnd pair."""
        anchors: dict[str, CommentAnchor] = {}
        open_ranges: dict[str, list[str]] = {}

        for elem in self._body.iter():
            if elem.tag == w("commentRangeStart"):
                comment_id = elem.get(w("id"), "")
                if not comment_id:
                    continue
                paragraph = next((p for p in elem.iterancestors(w("p"))), None)
                anchors[comment_id] = CommentAnchor(text="", start_paragraph=paragraph)
                open_ranges[comment_id] = []
            elif elem.tag == w("commentRangeEnd"):
                comment_id = elem.get(w("id"), "")
                parts = open_ranges.pop(comment_id, None)
                if parts is not None:
                    anchors[comment_id].text = "".join(parts).rstrip("\n")
            elif not open_ranges:
                continue
            elif elem.tag == w("p"):
                for parts in open_ranges.values():
                    if parts:
                        parts.append("\n")
            elif elem.tag == w("t") and elem.text:
                if is_inside(elem, w("txbxContent"), stop=self._body):
                    continue
                for parts in open_ranges.values():
                    parts.append(elem.text)

        return anchors

    @property
    def comments(self) -> list[Comment]:
        """All comments in comments.xml order, with anchors and threading data."""
        if self._comments_root is None:
            return []

        extended: dict[str, etree._Element] = {}
        if self._comments_extended_root is not None:
            for comment_ex in self._comments_extended_root.iter(w15("commentEx")):
                para_id = comment_ex.get(w15("paraId"))
                if para_id:
                    extended[para_id] = comment_ex

        anchors = self._build_comment_anchors()
        return [
            Comment(elem, anchors.get(elem.get(w("id"), "")), extended)
            for elem in self._comments_root.iter(w("comment"))
        ]

    @property
    def text_boxes(self) -> list[TextBox]:
        """Text boxes in the body, skipping the VML copies kept for old readers."""
        boxes: list[TextBox] = []
        for content in self._body.iter(w("txbxContent")):
            if is_inside(content, mc("Fallback"), stop=self._body):
                continue
            boxes.append(TextBox(content, len(boxes)))
        return boxes
