"""
Paragraph wrapper class for read access to paragraph elements.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from lxml import etree

from docx_query.constants import AUTO_LINE_UNITS, MAX_HEADING_LEVEL, WORD_NAMESPACE, w
from docx_query.types import FormatSnapshot
from docx_query.xml_utils import is_inside, on_off, read_field, run_text, twips_to_points, val

if TYPE_CHECKING:
    from docx_query.models.image import Picture

logger = logging.getLogger(__name__)

# "Heading 1", "heading1", "标题 1" (Chinese builds of Word)
HEADING_STYLE_PATTERN = re.compile(r"^(heading|标题)\s*(\d)$", re.IGNORECASE)

_ALIGNMENTS = {
    "left": "Left",
    "start": "Left",
    "center": "Centered",
    "right": "Right",
    "end": "Right",
    "both": "Justified",
    "distribute": "Justified",
}


def heading_level_from_style(style: str | None) -> int | None:
    """Determine heading level from a style id or name.

    Args:
        style: Style id ("Heading2") or display name ("heading 2")

    Returns:
        Heading level (1-9) or None if the style is not a heading style
    """
    if not style:
        return None
    match = HEADING_STYLE_PATTERN.match(style.strip())
    if not match:
        return None
    level = int(match.group(2))
    if 1 <= level <= MAX_HEADING_LEVEL:
        return level
    return None


class Paragraph:
    """Wrapper around a w:p (paragraph) element.

    Provides read-only access to text, style and layout properties. Style
    ids are mapped to display names through ``style_names`` when given.
    """

    def __init__(
        self,
        element: etree._Element,
        index: int,
        style_names: dict[str, str] | None = None,
        relationships: dict[str, str] | None = None,
    ):
        """Initialize Paragraph wrapper.

        Args:
            element: The w:p XML element to wrap
            index: Position of the paragraph in the body paragraph sequence
            style_names: Mapping of style id to style display name
            relationships: Mapping of relationship id to target (for hyperlinks)
        """
        if element.tag != f"{{{WORD_NAMESPACE}}}p":
            raise ValueError(f"Expected w:p element, got {element.tag}")
        self._element = element
        self._index = index
        self._style_names = style_names or {}
        self._relationships = relationships or {}

    @property
    def element(self) -> etree._Element:
        """Get the underlying XML element."""
        return self._element

    @property
    def index(self) -> int:
        """Get the paragraph index within the body."""
        return self._index

    @property
    def _ppr(self) -> etree._Element | None:
        return self._element.find(w("pPr"))

    @property
    def text(self) -> str:
        """Get the visible text of the paragraph.

        Tracked deletions and text inside embedded text boxes are skipped.
        """
        return run_text(self._element)

    @property
    def style_id(self) -> str | None:
        """Get the paragraph style id (e.g. 'Heading1'), or None."""
        return val(self._ppr, "pStyle")

    @property
    def style(self) -> str | None:
        """Get the paragraph style display name, falling back to the style id."""
        style_id = self.style_id
        if style_id is None:
            return None
        return self._style_names.get(style_id, style_id)

    def get_heading_level(self, use_outline_level: bool = False) -> int | None:
        """Get the heading level if this is a heading paragraph.

        Args:
            use_outline_level: Also treat w:outlineLvl as a heading marker

        Returns:
            Heading level (1-9) or None if not a heading
        """
        level = heading_level_from_style(self.style) or heading_level_from_style(self.style_id)
        if level is not None:
            return level
        if use_outline_level:
            outline = val(self._ppr, "outlineLvl")
            if outline is not None and outline.isdigit() and int(outline) < MAX_HEADING_LEVEL:
                return int(outline) + 1
        return None

    @property
    def alignment(self) -> str | None:
        """Get the paragraph alignment (Left, Centered, Right, Justified)."""
        jc = val(self._ppr, "jc")
        if jc is None:
            return None
        return _ALIGNMENTS.get(jc, jc)

    @property
    def first_line_indent(self) -> float | None:
        """First line indent in points; negative for hanging indents."""
        ind = self._ppr.find(w("ind")) if self._ppr is not None else None
        if ind is None:
            return None
        hanging = ind.get(w("hanging"))
        if hanging is not None:
            return -twips_to_points(hanging)
        return twips_to_points(ind.get(w("firstLine")))

    @property
    def left_indent(self) -> float | None:
        ind = self._ppr.find(w("ind")) if self._ppr is not None else None
        if ind is None:
            return None
        return twips_to_points(ind.get(w("left"), ind.get(w("start"))))

    @property
    def right_indent(self) -> float | None:
        ind = self._ppr.find(w("ind")) if self._ppr is not None else None
        if ind is None:
            return None
        return twips_to_points(ind.get(w("right"), ind.get(w("end"))))

    @property
    def line_spacing(self) -> float | None:
        """Line spacing in points.

        Exact and at-least rules store twips; the auto rule stores 240ths of a
        line, reported relative to a 12 point single line.
        """
        spacing = self._ppr.find(w("spacing")) if self._ppr is not None else None
        if spacing is None or spacing.get(w("line")) is None:
            return None
        line = int(spacing.get(w("line")))
        if spacing.get(w("lineRule")) in ("exact", "atLeast"):
            return twips_to_points(str(line))
        return line / AUTO_LINE_UNITS * 12

    @property
    def space_before(self) -> float | None:
        return twips_to_points(val(self._ppr, "spacing", "before"))

    @property
    def space_after(self) -> float | None:
        return twips_to_points(val(self._ppr, "spacing", "after"))

    @property
    def is_list_item(self) -> bool:
        """Check if the paragraph carries list numbering."""
        if self._ppr is None:
            return False
        num_pr = self._ppr.find(w("numPr"))
        return num_pr is not None and val(num_pr, "numId") not in (None, "0")

    @property
    def list_level(self) -> int | None:
        """Get the list level (0-based) for list items."""
        if not self.is_list_item:
            return None
        ilvl = val(self._ppr.find(w("numPr")), "ilvl")
        return int(ilvl) if ilvl is not None else 0

    @property
    def pictures(self) -> list[Picture]:
        """Get the pictures drawn in this paragraph, in document order.

        Drawings inside embedded text boxes and non-picture drawings (shapes,
        charts) are skipped.
        """
        from docx_query.models.image import Picture

        pictures = []
        for drawing in self._element.iter(w("drawing")):
            if is_inside(drawing, w("txbxContent"), stop=self._element):
                continue
            picture = Picture(drawing, self._relationships)
            if picture.is_picture:
                pictures.append(picture)
        return pictures

    def format_snapshot(self) -> FormatSnapshot:
        """Capture the formatting of the first run carrying text.

        A malformed value (e.g. a w:sz of "11pt") is logged and left as None.
        """
        rpr = None
        for run in self._element.iter(w("r")):
            if run.find(w("t")) is not None:
                rpr = run.find(w("rPr"))
                break

        font = None
        font_size = None
        color = None
        if rpr is not None:
            fonts = rpr.find(w("rFonts"))
            if fonts is not None:
                font = fonts.get(w("ascii")) or fonts.get(w("hAnsi"))
            size = val(rpr, "sz")
            if size is not None:
                font_size = read_field(
                    f"paragraph {self._index}", "font_size", lambda: int(size) / 2, logger
                )
            color = val(rpr, "color")

        return FormatSnapshot(
            font=font,
            font_size=font_size,
            bold=on_off(rpr, "b"),
            italic=on_off(rpr, "i"),
            color=color,
            alignment=self.alignment,
        )

    def __repr__(self) -> str:
        text = self.text
        preview = text[:40] + "..." if len(text) > 40 else text
        return f"<Paragraph[{self._index}] style={self.style!r}: {preview!r}>"
