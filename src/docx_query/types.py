"""
Core types for the docx_query content-model layer.

This module defines the data structures exchanged between the outline
builder, the locator resolver, the content extractor and the comment
deduplicator. None of them persist beyond a single query call.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, ClassVar

from .errors import ValidationError


def _compact(value: Any) -> Any:
    """Convert dataclasses, enums and containers into plain data, dropping None fields."""
    if isinstance(value, Enum):
        return value.value
    if hasattr(value, "__dataclass_fields__"):
        result = {}
        for f in fields(value):
            item = getattr(value, f.name)
            if item is None:
                continue
            result[f.name] = _compact(item)
        return result
    if isinstance(value, dict):
        return {k: _compact(v) for k, v in value.items() if v is not None}
    if isinstance(value, (list, tuple)):
        return [_compact(item) for item in value]
    return value


# ============================================================================
# Outline
# ============================================================================


@dataclass(frozen=True)
class FormatSnapshot:
    """Character and paragraph formatting of a heading.

    Attributes:
        font: Font name of the first text run
        font_size: Font size in points
        bold: Whether the run is bold
        italic: Whether the run is italic
        color: Hex color (e.g. "2F5496")
        alignment: Paragraph alignment (left, centered, right, justified)
    """

    font: str | None = None
    font_size: float | None = None
    bold: bool | None = None
    italic: bool | None = None
    color: str | None = None
    alignment: str | None = None


@dataclass(frozen=True)
class HeadingRecord:
    """A heading paragraph detected by the host scan.

    Attributes:
        text: Heading text, stripped of surrounding whitespace
        level: Heading level (1-9)
        sequence_index: Index of the paragraph within the document body
        style: Style name the level was derived from
        format: Formatting snapshot, only present when requested from the host
    """

    text: str
    level: int
    sequence_index: int
    style: str = ""
    format: FormatSnapshot | None = None


@dataclass
class OutlineNode:
    """One heading in an outline tree.

    Nodes are owned by the tree that contains them; there are no parent
    pointers.
    """

    id: str
    text: str
    level: int
    style: str
    sequence_index: int
    children: list[OutlineNode] = field(default_factory=list)
    format: FormatSnapshot | None = None

    def to_dict(self) -> dict[str, Any]:
        return _compact(self)


@dataclass
class DocumentOutline:
    """Hierarchical outline of a document's headings.

    Attributes:
        nodes: Root nodes in document order
        total_headings: Number of nodes reachable from the roots
        max_depth: Highest heading level present (0 when empty)
        level_counts: Number of headings per level present
    """

    nodes: list[OutlineNode] = field(default_factory=list)
    total_headings: int = 0
    max_depth: int = 0
    level_counts: dict[int, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return _compact(self)

    def iter_nodes(self):
        """Yield every node depth-first in document order."""
        stack = list(reversed(self.nodes))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


# ============================================================================
# Locators
# ============================================================================


@dataclass(frozen=True)
class BookmarkLocator:
    """Locate a range by bookmark name."""

    locator_type: ClassVar[str] = "bookmark"

    name: str


@dataclass(frozen=True)
class HeadingLocator:
    """Locate a heading paragraph by text substring and/or level.

    ``index`` selects among the matches in document order (default 0).
    """

    locator_type: ClassVar[str] = "heading"

    text: str | None = None
    level: int | None = None
    index: int | None = None


@dataclass(frozen=True)
class ParagraphLocator:
    """Locate the paragraphs ``start_index`` through ``end_index`` (inclusive)."""

    locator_type: ClassVar[str] = "paragraph"

    start_index: int
    end_index: int | None = None


@dataclass(frozen=True)
class SectionLocator:
    """Locate the body of a document section."""

    locator_type: ClassVar[str] = "section"

    index: int


@dataclass(frozen=True)
class ContentControlLocator:
    """Locate a content control by title substring and/or exact tag."""

    locator_type: ClassVar[str] = "contentControl"

    title: str | None = None
    tag: str | None = None
    index: int | None = None


RangeLocator = (
    BookmarkLocator | HeadingLocator | ParagraphLocator | SectionLocator | ContentControlLocator
)

_LOCATOR_CLASSES: dict[str, type] = {
    "bookmark": BookmarkLocator,
    "heading": HeadingLocator,
    "paragraph": ParagraphLocator,
    "section": SectionLocator,
    "contentcontrol": ContentControlLocator,
    "content_control": ContentControlLocator,
}

# camelCase keys accepted from exported tool payloads
_LOCATOR_KEY_ALIASES = {
    "startIndex": "start_index",
    "endIndex": "end_index",
}


def locator_from_dict(data: dict[str, Any]) -> RangeLocator:
    """Build a locator from its tagged-dictionary form.

    Args:
        data: Mapping with a ``type`` key (bookmark, heading, paragraph,
            section, contentControl) plus the fields of that locator.
            Both snake_case and camelCase field names are accepted.

    Returns:
        The corresponding locator dataclass

    Raises:
        ValidationError: If the type is unknown or fields do not fit it

    Example:
        >>> locator_from_dict({"type": "paragraph", "startIndex": 2})
        ParagraphLocator(start_index=2, end_index=None)
    """
    if not isinstance(data, dict):
        raise ValidationError(f"Locator must be a mapping, got {type(data).__name__}")

    locator_type = str(data.get("type", "")).strip()
    cls = _LOCATOR_CLASSES.get(locator_type.lower())
    if cls is None:
        raise ValidationError(
            f"Unsupported locator type: {locator_type!r}",
            errors=[f"expected one of: {', '.join(sorted(set(_LOCATOR_CLASSES)))}"],
        )

    kwargs = {
        _LOCATOR_KEY_ALIASES.get(key, key): value for key, value in data.items() if key != "type"
    }
    allowed = {f.name for f in fields(cls)}
    unknown = sorted(set(kwargs) - allowed)
    if unknown:
        raise ValidationError(
            f"Unknown field(s) for {locator_type} locator: {', '.join(unknown)}",
            errors=unknown,
        )

    try:
        return cls(**kwargs)
    except TypeError as e:
        raise ValidationError(f"Invalid {locator_type} locator: {e}") from e


# ============================================================================
# Content Elements
# ============================================================================


class ElementType(Enum):
    """Types of content elements produced by extraction."""

    PARAGRAPH = "Paragraph"
    TABLE = "Table"
    IMAGE = "Image"
    INLINE_PICTURE = "InlinePicture"
    CONTENT_CONTROL = "ContentControl"


@dataclass
class BaseElement:
    """Fields shared by every content element.

    ``id`` is synthesized from the element's position within one extraction
    call; it is not a persistent identity.
    """

    id: str
    text: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data = _compact(self)
        return {"id": data.pop("id"), "type": data.pop("type"), **data}


@dataclass
class ParagraphElement(BaseElement):
    """A paragraph; secondary fields are only filled with detailed metadata."""

    type: ElementType = field(default=ElementType.PARAGRAPH, init=False)
    style: str | None = None
    alignment: str | None = None
    first_line_indent: float | None = None
    left_indent: float | None = None
    right_indent: float | None = None
    line_spacing: float | None = None
    space_after: float | None = None
    space_before: float | None = None
    is_list_item: bool | None = None
    list_level: int | None = None


@dataclass
class TableCellInfo:
    """One cell of an extracted table grid."""

    text: str
    row_index: int
    column_index: int
    width: float | None = None


@dataclass
class TableElement(BaseElement):
    """A table emitted as a whole unit with its cell grid."""

    type: ElementType = field(default=ElementType.TABLE, init=False)
    row_count: int = 0
    column_count: int = 0
    cells: list[list[TableCellInfo]] = field(default_factory=list)


@dataclass
class ImageElement(BaseElement):
    """A floating (anchored) picture."""

    type: ElementType = field(default=ElementType.IMAGE, init=False)
    width: float | None = None
    height: float | None = None
    alt_text: str | None = None
    hyperlink: str | None = None


@dataclass
class InlinePictureElement(BaseElement):
    """A picture placed inline with paragraph text."""

    type: ElementType = field(default=ElementType.INLINE_PICTURE, init=False)
    width: float | None = None
    height: float | None = None
    alt_text: str | None = None
    hyperlink: str | None = None


@dataclass
class ContentControlElement(BaseElement):
    """A structured document tag (content control)."""

    type: ElementType = field(default=ElementType.CONTENT_CONTROL, init=False)
    title: str | None = None
    tag: str | None = None
    control_type: str | None = None
    cannot_delete: bool | None = None
    cannot_edit: bool | None = None
    placeholder_text: str | None = None


ContentElement = (
    ParagraphElement | TableElement | ImageElement | InlinePictureElement | ContentControlElement
)


@dataclass
class ExtractionMetadata:
    """Aggregate statistics over the emitted element set."""

    locator_type: str | None = None
    character_count: int = 0
    paragraph_count: int = 0
    table_count: int = 0
    image_count: int = 0
    content_control_count: int = 0
    is_empty: bool = True


@dataclass
class ExtractionResult:
    """Typed content of a resolved range."""

    text: str
    elements: list[ContentElement] = field(default_factory=list)
    metadata: ExtractionMetadata = field(default_factory=ExtractionMetadata)

    def to_dict(self) -> dict[str, Any]:
        return {
            "text": self.text,
            "elements": [element.to_dict() for element in self.elements],
            "metadata": _compact(self.metadata),
        }


@dataclass
class PageInfo:
    """Content of one page.

    Attributes:
        index: Page index (0-based)
        elements: Content elements on the page
        text: Page text, None when text was excluded
    """

    index: int
    elements: list[ContentElement] = field(default_factory=list)
    text: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "index": self.index,
            "elements": [element.to_dict() for element in self.elements],
        }
        if self.text is not None:
            data["text"] = self.text
        return data


@dataclass
class PageStats:
    """Element counts for one page."""

    page_index: int
    element_count: int = 0
    character_count: int = 0
    paragraph_count: int = 0
    table_count: int = 0
    image_count: int = 0
    content_control_count: int = 0


# ============================================================================
# Text Boxes
# ============================================================================


@dataclass
class TextBoxInfo:
    """A text box shape and its contents."""

    id: str
    name: str | None = None
    text: str | None = None
    width: float | None = None
    height: float | None = None
    paragraphs: list[ParagraphElement] | None = None

    def to_dict(self) -> dict[str, Any]:
        data = _compact(self)
        if self.paragraphs is not None:
            data["paragraphs"] = [p.to_dict() for p in self.paragraphs]
        return data


# ============================================================================
# Comments
# ============================================================================


@dataclass(frozen=True)
class CommentReplyRecord:
    """A reply threaded under a comment."""

    id: str
    content: str
    author_name: str | None = None
    created_date: str | None = None


@dataclass(frozen=True)
class AnnotationRecord:
    """A comment together with a hash of the text it is anchored to.

    Attributes:
        id: Comment id
        content: Comment text (possibly truncated)
        anchor_text_hash: Hash of the full anchor text, None without anchor text
        anchor_text_length: Length of the full anchor text
        anchor_text: Anchor text (possibly truncated)
        resolved: Whether the comment thread is marked done
        author_name: Author, only with detailed metadata
        author_initials: Author initials, only with detailed metadata
        created_date: ISO timestamp, only with detailed metadata
        style: Style name of the paragraph holding the anchor start
        replies: Replies in document order, None when not requested
    """

    id: str
    content: str
    anchor_text_hash: str | None = None
    anchor_text_length: int = 0
    anchor_text: str | None = None
    resolved: bool = False
    author_name: str | None = None
    author_initials: str | None = None
    created_date: str | None = None
    style: str | None = None
    replies: tuple[CommentReplyRecord, ...] | None = None

    def to_dict(self) -> dict[str, Any]:
        return _compact(self)


@dataclass
class DuplicateGroup:
    """Comments anchored to identical text."""

    text_hash: str
    text: str
    count: int
    comments: list[AnnotationRecord] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "text_hash": self.text_hash,
            "text": self.text,
            "count": self.count,
            "comments": [comment.to_dict() for comment in self.comments],
        }
