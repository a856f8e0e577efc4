"""
Comment wrapper class for document comments.

Gives read access to a w:comment element together with the text it is
anchored to and its threading data from commentsExtended.xml.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from lxml import etree

from docx_query.constants import w, w14, w15
from docx_query.xml_utils import block_text


@dataclass
class CommentAnchor:
    """The document text a comment applies to.

    Attributes:
        text: Text between commentRangeStart and commentRangeEnd
        start_paragraph: The w:p element holding the range start, if found
    """

    text: str
    start_paragraph: etree._Element | None = None


class Comment:
    """Wrapper around a w:comment element.

    Example:
        >>> for comment in host.comments:
        ...     print(f"{comment.author}: {comment.text}")
        ...     if comment.is_resolved:
        ...         print("  [RESOLVED]")
    """

    def __init__(
        self,
        element: etree._Element,
        anchor: CommentAnchor | None = None,
        extended: dict[str, etree._Element] | None = None,
    ):
        """Initialize Comment wrapper.

        Args:
            element: The w:comment XML element
            anchor: Anchor information from the document body
            extended: w15:commentEx elements keyed by w15:paraId
        """
        self._element = element
        self._anchor = anchor
        self._extended = extended or {}

    @property
    def element(self) -> etree._Element:
        return self._element

    @property
    def id(self) -> str:
        return self._element.get(w("id"), "")

    @property
    def author(self) -> str:
        """Get the comment author, or empty string if not set."""
        return self._element.get(w("author"), "")

    @property
    def initials(self) -> str | None:
        return self._element.get(w("initials"))

    @property
    def date(self) -> datetime | None:
        """Get the comment date/time.

        Returns:
            datetime object or None if not present/parseable
        """
        date_str = self._element.get(w("date"))
        if not date_str:
            return None
        try:
            # OOXML uses ISO 8601, with a trailing Z for UTC
            return datetime.fromisoformat(date_str.replace("Z", "+00:00"))
        except ValueError:
            return None

    @property
    def text(self) -> str:
        """Get the comment text, one line per comment paragraph."""
        return block_text(self._element)

    @property
    def anchor(self) -> CommentAnchor | None:
        return self._anchor

    @property
    def para_id(self) -> str | None:
        """Get the w14:paraId of the last paragraph in this comment.

        commentsExtended.xml links resolution state and reply threading
        through this id.
        """
        paragraphs = self._element.findall(f".//{w('p')}")
        if not paragraphs:
            return None
        return paragraphs[-1].get(w14("paraId"))

    def _comment_ex(self) -> etree._Element | None:
        para_id = self.para_id
        if not para_id:
            return None
        return self._extended.get(para_id)

    @property
    def is_resolved(self) -> bool:
        """Check if this comment is marked as done."""
        comment_ex = self._comment_ex()
        if comment_ex is None:
            return False
        return comment_ex.get(w15("done")) in ("1", "true")

    @property
    def parent_para_id(self) -> str | None:
        """Get the paraId of the comment this one replies to, if it is a reply."""
        comment_ex = self._comment_ex()
        if comment_ex is None:
            return None
        return comment_ex.get(w15("paraIdParent"))

    @property
    def is_reply(self) -> bool:
        return self.parent_para_id is not None

    def __repr__(self) -> str:
        preview = self.text[:30] + "..." if len(self.text) > 30 else self.text
        return f"<Comment {self.id} by {self.author!r}: {preview!r}>"
