"""
docx_query - Read-only queries over the content model of Word documents.

This package builds heading outlines, resolves locators (bookmark, heading,
paragraph span, section, content control) to content ranges, extracts typed
content from those ranges, and groups comments anchored to identical text.

Example:
    >>> from docx_query import Document, serialize_markdown
    >>> doc = Document("contract.docx")
    >>> print(serialize_markdown(doc.outline()))
    >>> result = doc.get_range_content({"type": "bookmark", "name": "Payment"})
    >>> result.metadata.paragraph_count
"""

__version__ = "0.1.0"
__all__ = [
    "Document",
    "DocxPackage",
    "DocxHost",
    "HeadingDetectionConfig",
    "DocumentHost",
    "RangeHandle",
    "SectionHandle",
    "from_python_docx",
    "DocxQueryError",
    "ValidationError",
    "NotFoundError",
    "OutOfRangeError",
    # Outline
    "OutlineOptions",
    "build_outline",
    "build_flat_outline",
    "serialize_markdown",
    "serialize_json",
    "serialize_yaml",
    "HeadingRecord",
    "FormatSnapshot",
    "OutlineNode",
    "DocumentOutline",
    # Locators
    "LocatorResolver",
    "load_locator_file",
    "locator_from_dict",
    "BookmarkLocator",
    "HeadingLocator",
    "ParagraphLocator",
    "SectionLocator",
    "ContentControlLocator",
    "RangeLocator",
    # Extraction
    "ContentExtractor",
    "ExtractOptions",
    "resolve_and_extract",
    "ElementType",
    "ParagraphElement",
    "TableElement",
    "TableCellInfo",
    "ImageElement",
    "InlinePictureElement",
    "ContentControlElement",
    "ExtractionMetadata",
    "ExtractionResult",
    "PageInfo",
    "PageStats",
    # Comments and text boxes
    "CommentOptions",
    "get_comments",
    "deduplicate_references",
    "text_hash",
    "AnnotationRecord",
    "CommentReplyRecord",
    "DuplicateGroup",
    "TextBoxOptions",
    "TextBoxInfo",
]

# Import comment retrieval and deduplication
from .comments import CommentOptions, deduplicate_references, get_comments, text_hash

# Import compatibility helpers (python-docx integration)
from .compat import from_python_docx

# Import document class and hosts
from .document import Document
from .docx_host import DocxHost, HeadingDetectionConfig
from .errors import DocxQueryError, NotFoundError, OutOfRangeError, ValidationError

# Import extraction
from .extractor import ContentExtractor, ExtractOptions, resolve_and_extract
from .host import DocumentHost, RangeHandle, SectionHandle

# Import outline building
from .outline import (
    OutlineOptions,
    build_flat_outline,
    build_outline,
    serialize_json,
    serialize_markdown,
    serialize_yaml,
)

# Import package class
from .package import DocxPackage

# Import locator resolution
from .resolver import LocatorResolver, load_locator_file
from .textboxes import TextBoxOptions

# Import result types
from .types import (
    AnnotationRecord,
    BookmarkLocator,
    CommentReplyRecord,
    ContentControlElement,
    ContentControlLocator,
    DocumentOutline,
    DuplicateGroup,
    ElementType,
    ExtractionMetadata,
    ExtractionResult,
    FormatSnapshot,
    HeadingLocator,
    HeadingRecord,
    ImageElement,
    InlinePictureElement,
    OutlineNode,
    PageInfo,
    PageStats,
    ParagraphElement,
    ParagraphLocator,
    RangeLocator,
    SectionLocator,
    TableCellInfo,
    TableElement,
    TextBoxInfo,
    locator_from_dict,
)
