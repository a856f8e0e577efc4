"""
Text box wrapper for w:txbxContent containers.

Text boxes come in two flavours: DrawingML shapes (wps:txbx inside a
wp:anchor or wp:inline drawing) and legacy VML shapes (v:textbox inside
v:shape). Both hold their paragraphs in a w:txbxContent element.
"""

from __future__ import annotations

import re

from lxml import etree

from docx_query.constants import VML_NAMESPACE, w, wp
from docx_query.xml_utils import block_text, emu_to_points, is_inside

_VML_SIZE = re.compile(r"(width|height)\s*:\s*([\d.]+)pt")


class TextBox:
    """Wrapper around a w:txbxContent element."""

    def __init__(self, content: etree._Element, index: int = 0):
        if content.tag != w("txbxContent"):
            raise ValueError(f"Expected w:txbxContent element, got {content.tag}")
        self._content = content
        self._index = index
        self._drawing = self._find_drawing_container()
        self._vml_shape = None if self._drawing is not None else self._find_vml_shape()

    def _find_drawing_container(self) -> etree._Element | None:
        for ancestor in self._content.iterancestors():
            if ancestor.tag in (wp("anchor"), wp("inline")):
                return ancestor
            if ancestor.tag == w("drawing"):
                return None
        return None

    def _find_vml_shape(self) -> etree._Element | None:
        for ancestor in self._content.iterancestors():
            if ancestor.tag == f"{{{VML_NAMESPACE}}}shape":
                return ancestor
            if ancestor.tag == w("pict"):
                return None
        return None

    @property
    def element(self) -> etree._Element:
        return self._content

    @property
    def index(self) -> int:
        return self._index

    @property
    def id(self) -> str:
        return f"textbox-{self._index}"

    @property
    def name(self) -> str | None:
        """Shape name from wp:docPr, or the VML shape id."""
        if self._drawing is not None:
            doc_pr = self._drawing.find(wp("docPr"))
            return doc_pr.get("name") if doc_pr is not None else None
        if self._vml_shape is not None:
            return self._vml_shape.get("id")
        return None

    def _size(self, dimension: str) -> float | None:
        if self._drawing is not None:
            extent = self._drawing.find(wp("extent"))
            if extent is None:
                return None
            return emu_to_points(extent.get("cx" if dimension == "width" else "cy"))
        if self._vml_shape is not None:
            style = self._vml_shape.get("style", "")
            for name, value in _VML_SIZE.findall(style):
                if name == dimension:
                    return float(value)
        return None

    @property
    def width(self) -> float | None:
        """Shape width in points."""
        return self._size("width")

    @property
    def height(self) -> float | None:
        """Shape height in points."""
        return self._size("height")

    @property
    def paragraphs(self) -> list[etree._Element]:
        """Paragraphs of this text box, excluding those of nested text boxes."""
        return [
            p
            for p in self._content.iter(w("p"))
            if not is_inside(p, w("txbxContent"), stop=self._content)
        ]

    @property
    def text(self) -> str:
        return block_text(self._content)

    def __repr__(self) -> str:
        return f"<TextBox {self.id} name={self.name!r}>"
