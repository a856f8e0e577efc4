"""
Document model classes for docx_query.

These classes provide read-only wrappers around OOXML elements.
"""

from docx_query.models.comment import Comment, CommentAnchor
from docx_query.models.content_control import ContentControl
from docx_query.models.image import Picture
from docx_query.models.paragraph import Paragraph
from docx_query.models.table import Table, TableCell
from docx_query.models.text_box import TextBox

__all__ = [
    "Comment",
    "CommentAnchor",
    "ContentControl",
    "Paragraph",
    "Picture",
    "Table",
    "TableCell",
    "TextBox",
]
