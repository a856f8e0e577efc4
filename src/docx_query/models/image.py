"""
Picture wrapper for w:drawing elements.
"""

from __future__ import annotations

from lxml import etree

from docx_query.constants import a, pic, r, wp
from docx_query.xml_utils import emu_to_points


class Picture:
    """Wrapper around a w:drawing element holding a picture.

    Inline drawings (wp:inline) flow with the text; anchored drawings
    (wp:anchor) float and are reported as plain images.
    """

    def __init__(self, drawing: etree._Element, relationships: dict[str, str] | None = None):
        self._drawing = drawing
        self._relationships = relationships or {}
        self._container = drawing.find(wp("inline"))
        if self._container is None:
            self._container = drawing.find(wp("anchor"))

    @property
    def element(self) -> etree._Element:
        return self._drawing

    @property
    def is_inline(self) -> bool:
        return self._container is not None and self._container.tag == wp("inline")

    @property
    def is_picture(self) -> bool:
        """Check that the drawing holds a picture (not a shape or chart)."""
        if self._container is None:
            return False
        return next(self._container.iter(pic("pic")), None) is not None

    @property
    def _doc_pr(self) -> etree._Element | None:
        if self._container is None:
            return None
        return self._container.find(wp("docPr"))

    @property
    def width(self) -> float | None:
        """Width in points, from wp:extent."""
        extent = self._container.find(wp("extent")) if self._container is not None else None
        return emu_to_points(extent.get("cx")) if extent is not None else None

    @property
    def height(self) -> float | None:
        """Height in points, from wp:extent."""
        extent = self._container.find(wp("extent")) if self._container is not None else None
        return emu_to_points(extent.get("cy")) if extent is not None else None

    @property
    def name(self) -> str | None:
        doc_pr = self._doc_pr
        return doc_pr.get("name") if doc_pr is not None else None

    @property
    def alt_text(self) -> str | None:
        """Alt text title, falling back to the description."""
        doc_pr = self._doc_pr
        if doc_pr is None:
            return None
        return doc_pr.get("title") or doc_pr.get("descr") or None

    @property
    def hyperlink(self) -> str | None:
        """Target of a hyperlink attached to the picture, if any."""
        doc_pr = self._doc_pr
        if doc_pr is None:
            return None
        click = doc_pr.find(a("hlinkClick"))
        if click is None:
            return None
        rel_id = click.get(r("id"))
        if not rel_id:
            return None
        return self._relationships.get(rel_id)

    def __repr__(self) -> str:
        kind = "inline" if self.is_inline else "floating"
        return f"<Picture {kind} {self.width}x{self.height}pt alt={self.alt_text!r}>"
