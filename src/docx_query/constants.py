"""
Centralized constants for OOXML namespaces and unit conversions.

Import namespace URLs and tag helpers from here rather than spelling them out
in each module.
"""

# =============================================================================
# Word Processing Namespaces
# =============================================================================

# Main WordprocessingML namespace (Word 2007+)
WORD_NAMESPACE = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"

# Word version-specific namespaces
W14_NAMESPACE = "http://schemas.microsoft.com/office/word/2010/wordml"  # Word 2010
W15_NAMESPACE = "http://schemas.microsoft.com/office/word/2012/wordml"  # Word 2012


# =============================================================================
# DrawingML and VML Namespaces
# =============================================================================

A_NAMESPACE = "http://schemas.openxmlformats.org/drawingml/2006/main"
PIC_NAMESPACE = "http://schemas.openxmlformats.org/drawingml/2006/picture"
WP_NAMESPACE = "http://schemas.openxmlformats.org/drawingml/2006/wordprocessingDrawing"
VML_NAMESPACE = "urn:schemas-microsoft-com:vml"


# =============================================================================
# Package and Relationship Namespaces
# =============================================================================

PACKAGE_RELATIONSHIPS_NAMESPACE = "http://schemas.openxmlformats.org/package/2006/relationships"
OFFICE_RELATIONSHIPS_NAMESPACE = (
    "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
)
MC_NAMESPACE = "http://schemas.openxmlformats.org/markup-compatibility/2006"


# =============================================================================
# Package Part Names
# =============================================================================

DOCUMENT_PART = "word/document.xml"
STYLES_PART = "word/styles.xml"
COMMENTS_PART = "word/comments.xml"
COMMENTS_EXTENDED_PART = "word/commentsExtended.xml"
DOCUMENT_RELS_PART = "word/_rels/document.xml.rels"


# =============================================================================
# Units and Markers
# =============================================================================

# English Metric Units per point (DrawingML extents)
EMU_PER_POINT = 12700

# Twentieths of a point (paragraph indents, spacing, cell widths)
TWIPS_PER_POINT = 20

# Line spacing in w:spacing/@w:line is expressed in 240ths of a line for "auto"
AUTO_LINE_UNITS = 240

# Appended to any text field cut down by max_text_length
ELLIPSIS = "..."

# Highest heading level Word supports
MAX_HEADING_LEVEL = 9


# =============================================================================
# Helper Functions
# =============================================================================


def w(tag: str) -> str:
    """Create a fully qualified Word namespace tag.

    Args:
        tag: Tag name without namespace prefix (e.g., "p", "r", "t")

    Returns:
        Fully qualified tag (e.g., "{http://...wordprocessingml/2006/main}p")

    Example:
        >>> w("p")
        '{http://schemas.openxmlformats.org/wordprocessingml/2006/main}p'
    """
    return f"{{{WORD_NAMESPACE}}}{tag}"


def w14(tag: str) -> str:
    """Create a fully qualified Word 2010 namespace tag."""
    return f"{{{W14_NAMESPACE}}}{tag}"


def w15(tag: str) -> str:
    """Create a fully qualified Word 2012 namespace tag."""
    return f"{{{W15_NAMESPACE}}}{tag}"


def a(tag: str) -> str:
    """Create a fully qualified DrawingML main namespace tag."""
    return f"{{{A_NAMESPACE}}}{tag}"


def pic(tag: str) -> str:
    """Create a fully qualified DrawingML picture namespace tag."""
    return f"{{{PIC_NAMESPACE}}}{tag}"


def wp(tag: str) -> str:
    """Create a fully qualified Word Processing Drawing namespace tag.

    Args:
        tag: Tag name without namespace prefix (e.g., "inline", "extent")

    Returns:
        Fully qualified tag with WP drawing namespace
    """
    return f"{{{WP_NAMESPACE}}}{tag}"


def r(tag: str) -> str:
    """Create a fully qualified Office Relationships namespace tag."""
    return f"{{{OFFICE_RELATIONSHIPS_NAMESPACE}}}{tag}"


def mc(tag: str) -> str:
    """Create a fully qualified Markup Compatibility namespace tag."""
    return f"{{{MC_NAMESPACE}}}{tag}"
