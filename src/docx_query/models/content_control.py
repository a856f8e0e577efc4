"""
Content control (structured document tag) wrapper.
"""

from __future__ import annotations

from lxml import etree

from docx_query.constants import w, w14, w15
from docx_query.xml_utils import block_text, run_text, val

# sdtPr child element -> control type name, checked in order
_CONTROL_TYPES = (
    (w("text"), "PlainText"),
    (w("richText"), "RichText"),
    (w("picture"), "Picture"),
    (w("comboBox"), "ComboBox"),
    (w("dropDownList"), "DropDownList"),
    (w("date"), "DatePicker"),
    (w14("checkbox"), "CheckBox"),
    (w("docPartObj"), "BuildingBlockGallery"),
    (w("group"), "Group"),
    (w15("repeatingSection"), "RepeatingSection"),
)

_BLOCK_TAGS = (w("p"), w("tbl"), w("tr"), w("tc"))


class ContentControl:
    """Wrapper around a w:sdt element.

    Block-level controls wrap whole paragraphs or tables; inline controls
    wrap runs inside a paragraph.
    """

    def __init__(self, element: etree._Element, index: int = 0):
        if element.tag != w("sdt"):
            raise ValueError(f"Expected w:sdt element, got {element.tag}")
        self._element = element
        self._index = index

    @property
    def element(self) -> etree._Element:
        return self._element

    @property
    def index(self) -> int:
        return self._index

    @property
    def _sdt_pr(self) -> etree._Element | None:
        return self._element.find(w("sdtPr"))

    @property
    def content(self) -> etree._Element | None:
        """Get the w:sdtContent element."""
        return self._element.find(w("sdtContent"))

    @property
    def title(self) -> str | None:
        """The control title (w:alias)."""
        return val(self._sdt_pr, "alias")

    @property
    def tag(self) -> str | None:
        return val(self._sdt_pr, "tag")

    @property
    def control_type(self) -> str:
        """Get the control type name; controls without a type element are rich text."""
        sdt_pr = self._sdt_pr
        if sdt_pr is not None:
            for tag, name in _CONTROL_TYPES:
                if sdt_pr.find(tag) is not None:
                    return name
        return "RichText"

    @property
    def is_block(self) -> bool:
        content = self.content
        if content is None:
            return False
        return any(child.tag in _BLOCK_TAGS for child in content)

    @property
    def _lock(self) -> str | None:
        return val(self._sdt_pr, "lock")

    @property
    def cannot_delete(self) -> bool:
        return self._lock in ("sdtLocked", "sdtContentLocked")

    @property
    def cannot_edit(self) -> bool:
        return self._lock in ("contentLocked", "sdtContentLocked")

    @property
    def showing_placeholder(self) -> bool:
        sdt_pr = self._sdt_pr
        return sdt_pr is not None and sdt_pr.find(w("showingPlcHdr")) is not None

    @property
    def text(self) -> str:
        """Get the control's text, one line per paragraph for block controls."""
        content = self.content
        if content is None:
            return ""
        if self.is_block:
            return block_text(content)
        return run_text(content)

    @property
    def placeholder_text(self) -> str | None:
        """Placeholder text, when the control is still showing its placeholder."""
        if not self.showing_placeholder:
            return None
        return self.text

    def __repr__(self) -> str:
        return f"<ContentControl[{self._index}] {self.control_type} title={self.title!r}>"
