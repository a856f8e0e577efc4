"""
Page content retrieval.

A .docx file carries no layout, so pages are the spans between the page
breaks stored in the file: explicit breaks (w:br w:type="page"), paragraphs
with w:pageBreakBefore, and the w:lastRenderedPageBreak markers Word writes
where it last broke pages.
"""

from __future__ import annotations

import logging

from .docx_host import DocxHost
from .errors import OutOfRangeError, ValidationError
from .extractor import ContentExtractor, ExtractOptions
from .types import PageInfo, PageStats

logger = logging.getLogger(__name__)


def _page_index(host: DocxHost, page_number: int) -> int:
    if page_number < 1:
        raise ValidationError(f"Page number must be >= 1, got {page_number}")
    if page_number > host.page_count:
        raise OutOfRangeError("page", page_number - 1, host.page_count)
    return page_number - 1


def get_page_content(
    host: DocxHost, page_number: int, options: ExtractOptions | None = None
) -> PageInfo:
    """Extract the content of one page.

    Args:
        host: Document host
        page_number: 1-based page number
        options: Extraction options, as for range content

    Returns:
        PageInfo with the 0-based page index, elements (ids prefixed
        ``page{N}``) and text (None when text is excluded)

    Raises:
        ValidationError: If page_number is below 1
        OutOfRangeError: If page_number is past the last page
    """
    options = options or ExtractOptions()
    index = _page_index(host, page_number)
    result = ContentExtractor(host).extract(
        host.get_page(index), options, locator_type="page", id_prefix=f"page{page_number}"
    )
    logger.debug("Page %d: %d elements", page_number, len(result.elements))
    return PageInfo(
        index=index,
        elements=result.elements,
        text=result.text if options.include_text else None,
    )


def get_page_text(host: DocxHost, page_number: int) -> str:
    """Get the plain text of one page (1-based)."""
    index = _page_index(host, page_number)
    return host.range_text(host.get_page(index))


def get_page_stats(host: DocxHost, page_number: int) -> PageStats:
    """Count the elements and characters on one page (1-based)."""
    page = get_page_content(host, page_number)
    stats = PageStats(
        page_index=page.index,
        element_count=len(page.elements),
        character_count=len(page.text or ""),
    )
    for element in page.elements:
        match element.type.value:
            case "Paragraph":
                stats.paragraph_count += 1
            case "Table":
                stats.table_count += 1
            case "Image" | "InlinePicture":
                stats.image_count += 1
            case "ContentControl":
                stats.content_control_count += 1
    return stats
