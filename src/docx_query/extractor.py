"""
Content extraction: typed element lists and statistics for a resolved range.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable
from dataclasses import dataclass
from functools import partial
from typing import Any

from .constants import ELLIPSIS
from .errors import ValidationError
from .host import DocumentHost, RangeHandle
from .models import ContentControl, Paragraph, Picture, Table
from .resolver import LocatorResolver
from .types import (
    ContentControlElement,
    ContentElement,
    ElementType,
    ExtractionMetadata,
    ExtractionResult,
    ImageElement,
    InlinePictureElement,
    ParagraphElement,
    RangeLocator,
    TableCellInfo,
    TableElement,
)
from .xml_utils import read_field

logger = logging.getLogger(__name__)

_PARAGRAPH_DETAIL_FIELDS = (
    "style",
    "alignment",
    "first_line_indent",
    "left_indent",
    "right_indent",
    "line_spacing",
    "space_after",
    "space_before",
    "is_list_item",
    "list_level",
)


@dataclass
class ExtractOptions:
    """What to include in an extraction.

    Attributes:
        include_text: Fill element text fields and the aggregate text
        include_images: Emit pictures found in paragraphs
        include_tables: Emit tables with their cell grids
        include_content_controls: Emit content controls
        detailed_metadata: Fill secondary fields (style, indents, locks, ...)
        max_text_length: Truncate each element text to this many characters
            and append "..."
    """

    include_text: bool = True
    include_images: bool = True
    include_tables: bool = True
    include_content_controls: bool = True
    detailed_metadata: bool = False
    max_text_length: int | None = None

    def validate(self) -> None:
        if self.max_text_length is not None and self.max_text_length < 1:
            raise ValidationError(f"max_text_length must be >= 1, got {self.max_text_length}")


def truncate(text: str, max_length: int | None) -> str:
    """Cut text to ``max_length`` characters plus an ellipsis marker.

    Example:
        >>> truncate("abcdef", 3)
        'abc...'
    """
    if max_length and len(text) > max_length:
        return text[:max_length] + ELLIPSIS
    return text


class ContentExtractor:
    """Walks a range and produces typed content elements.

    Elements are emitted per kind: each paragraph followed by its pictures,
    then tables, then content controls, each kind in document order. Element
    ids count up from 0 across kinds within one call, so they only identify
    elements within that call's result.
    """

    def __init__(self, host: DocumentHost) -> None:
        self._host = host

    def extract(
        self,
        rng: RangeHandle,
        options: ExtractOptions | None = None,
        locator_type: str | None = None,
        id_prefix: str = "range",
    ) -> ExtractionResult:
        """Extract the content of a range.

        Args:
            rng: The range to walk
            options: Inclusion, detail and truncation options
            locator_type: Recorded in the metadata
            id_prefix: Prefix for synthesized element ids

        Returns:
            ExtractionResult with the aggregate text, elements and statistics
        """
        options = options or ExtractOptions()
        options.validate()

        metadata = ExtractionMetadata(locator_type=locator_type)
        if rng.is_empty:
            return ExtractionResult(text="", elements=[], metadata=metadata)

        counter = itertools.count()
        elements: list[ContentElement] = []
        character_count = 0

        for paragraph in self._host.list_paragraphs(rng):
            elements.append(
                self.paragraph_element(paragraph, f"{id_prefix}-para-{next(counter)}", options)
            )
            character_count += len(paragraph.text)
            if options.include_images:
                for picture in paragraph.pictures:
                    elements.append(
                        self._picture_element(picture, f"{id_prefix}-img-{next(counter)}")
                    )

        if options.include_tables:
            for table in self._host.list_tables(rng):
                elements.append(
                    self._table_element(table, f"{id_prefix}-table-{next(counter)}", options)
                )
                character_count += len(table.text)

        if options.include_content_controls:
            for control in self._host.list_content_controls(rng):
                elements.append(
                    self._control_element(control, f"{id_prefix}-ctrl-{next(counter)}", options)
                )

        metadata.character_count = character_count
        metadata.is_empty = not elements
        for element in elements:
            match element.type:
                case ElementType.PARAGRAPH:
                    metadata.paragraph_count += 1
                case ElementType.TABLE:
                    metadata.table_count += 1
                case ElementType.IMAGE | ElementType.INLINE_PICTURE:
                    metadata.image_count += 1
                case ElementType.CONTENT_CONTROL:
                    metadata.content_control_count += 1

        text = self._host.range_text(rng) if options.include_text else ""
        logger.debug(
            "Extracted %d elements (%d paragraphs, %d tables, %d images, %d controls)",
            len(elements),
            metadata.paragraph_count,
            metadata.table_count,
            metadata.image_count,
            metadata.content_control_count,
        )
        return ExtractionResult(text=text, elements=elements, metadata=metadata)

    # ------------------------------------------------------------------
    # Element builders
    # ------------------------------------------------------------------

    @staticmethod
    def _secondary(element_id: str, name: str, getter: Callable[[], Any]) -> Any:
        """Read a secondary field, degrading to None when it cannot be read."""
        return read_field(element_id, name, getter, logger)

    def paragraph_element(
        self, paragraph: Paragraph, element_id: str, options: ExtractOptions
    ) -> ParagraphElement:
        """Build the element for one paragraph; text box listings reuse it."""
        text = paragraph.text if options.include_text else None
        element = ParagraphElement(
            id=element_id,
            text=truncate(text, options.max_text_length) if text is not None else None,
        )
        if options.detailed_metadata:
            for name in _PARAGRAPH_DETAIL_FIELDS:
                value = self._secondary(element_id, name, partial(getattr, paragraph, name))
                setattr(element, name, value)
        return element

    def _picture_element(
        self, picture: Picture, element_id: str
    ) -> ImageElement | InlinePictureElement:
        cls = InlinePictureElement if picture.is_inline else ImageElement
        return cls(
            id=element_id,
            width=self._secondary(element_id, "width", partial(getattr, picture, "width")),
            height=self._secondary(element_id, "height", partial(getattr, picture, "height")),
            alt_text=picture.alt_text,
            hyperlink=picture.hyperlink,
        )

    def _table_element(
        self, table: Table, element_id: str, options: ExtractOptions
    ) -> TableElement:
        element = TableElement(
            id=element_id,
            row_count=table.row_count,
            column_count=table.column_count,
        )
        if not options.include_text:
            return element
        for row in table.rows:
            cells = []
            for cell in row:
                info = TableCellInfo(
                    text=truncate(cell.text, options.max_text_length),
                    row_index=cell.row_index,
                    column_index=cell.col_index,
                )
                if options.detailed_metadata:
                    width = partial(getattr, cell, "width")
                    info.width = self._secondary(element_id, "cell width", width)
                cells.append(info)
            element.cells.append(cells)
        return element

    def _control_element(
        self, control: ContentControl, element_id: str, options: ExtractOptions
    ) -> ContentControlElement:
        element = ContentControlElement(
            id=element_id,
            text=truncate(control.text, options.max_text_length) if options.include_text else None,
            title=control.title,
            tag=control.tag,
            control_type=control.control_type,
        )
        if options.detailed_metadata:
            for name in ("cannot_delete", "cannot_edit", "placeholder_text"):
                value = self._secondary(element_id, name, partial(getattr, control, name))
                setattr(element, name, value)
        return element


def resolve_and_extract(
    host: DocumentHost, locator: RangeLocator, options: ExtractOptions | None = None
) -> ExtractionResult:
    """Resolve a locator and extract the content of the resulting range.

    Example:
        >>> result = resolve_and_extract(host, ParagraphLocator(0, 1))
        >>> result.metadata.paragraph_count
        2
    """
    rng = LocatorResolver(host).resolve(locator)
    return ContentExtractor(host).extract(rng, options, locator_type=locator.locator_type)
