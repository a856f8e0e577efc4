"""
Text box enumeration.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .docx_host import DocxHost
from .errors import ValidationError
from .extractor import ContentExtractor, ExtractOptions, truncate
from .types import TextBoxInfo

logger = logging.getLogger(__name__)


@dataclass
class TextBoxOptions:
    """Options for text box retrieval.

    Attributes:
        include_text: Report each text box's text
        include_paragraphs: Report each text box's paragraphs as elements
        detailed_metadata: Fill paragraph secondary fields
        max_text_length: Truncate text fields
    """

    include_text: bool = True
    include_paragraphs: bool = False
    detailed_metadata: bool = False
    max_text_length: int | None = None

    def validate(self) -> None:
        if self.max_text_length is not None and self.max_text_length < 1:
            raise ValidationError(f"max_text_length must be >= 1, got {self.max_text_length}")


def get_text_boxes(host: DocxHost, options: TextBoxOptions | None = None) -> list[TextBoxInfo]:
    """List the text boxes in the document body, in document order.

    Args:
        host: Document host
        options: Retrieval options

    Returns:
        One TextBoxInfo per text box, with ids ``textbox-0``, ``textbox-1``, ...
    """
    options = options or TextBoxOptions()
    options.validate()

    extractor = ContentExtractor(host)
    paragraph_options = ExtractOptions(
        detailed_metadata=options.detailed_metadata,
        max_text_length=options.max_text_length,
    )

    boxes = []
    for box in host.text_boxes:
        info = TextBoxInfo(id=box.id, name=box.name, width=box.width, height=box.height)
        if options.include_text:
            info.text = truncate(box.text, options.max_text_length)
        if options.include_paragraphs:
            info.paragraphs = [
                extractor.paragraph_element(
                    host.paragraph_for(p), f"{box.id}-para-{i}", paragraph_options
                )
                for i, p in enumerate(box.paragraphs)
            ]
        boxes.append(info)

    logger.debug("Found %d text boxes", len(boxes))
    return boxes
