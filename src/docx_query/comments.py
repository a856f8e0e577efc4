"""
Comment retrieval and duplicate-reference detection.

Comments are reported with a hash of the text they are anchored to, so that
comments pointing at identical text can be grouped.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from .docx_host import DocxHost
from .errors import ValidationError
from .extractor import truncate
from .models import Comment
from .types import AnnotationRecord, CommentReplyRecord, DuplicateGroup

logger = logging.getLogger(__name__)


def text_hash(text: str) -> str:
    """Hash text into a short hex string.

    A 32-bit rolling hash (h * 31 + c over UTF-16 code units, wrapped to a
    signed 32-bit integer) rendered as the hex of its absolute value. The
    output matches hashes produced by the Office add-in exporter.

    Example:
        >>> text_hash("a")
        '61'
    """
    h = 0
    data = text.encode("utf-16-le", "surrogatepass")
    for i in range(0, len(data), 2):
        code = data[i] | (data[i + 1] << 8)
        h = ((h << 5) - h + code) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return format(abs(h), "x")


@dataclass
class CommentOptions:
    """Options for comment retrieval.

    Attributes:
        include_resolved: Include comments marked as done
        include_replies: Attach replies to their parent comments
        include_associated_text: Report the anchor text and its hash
        detailed_metadata: Report author, initials and date
        max_text_length: Truncate comment content and anchor text
    """

    include_resolved: bool = True
    include_replies: bool = True
    include_associated_text: bool = True
    detailed_metadata: bool = False
    max_text_length: int | None = None

    def validate(self) -> None:
        if self.max_text_length is not None and self.max_text_length < 1:
            raise ValidationError(f"max_text_length must be >= 1, got {self.max_text_length}")


def _created_date(comment: Comment) -> str | None:
    date = comment.date
    return date.isoformat() if date is not None else None


def _reply_record(reply: Comment, options: CommentOptions) -> CommentReplyRecord:
    return CommentReplyRecord(
        id=reply.id,
        content=truncate(reply.text, options.max_text_length),
        author_name=(reply.author or None) if options.detailed_metadata else None,
        created_date=_created_date(reply) if options.detailed_metadata else None,
    )


def get_comments(host: DocxHost, options: CommentOptions | None = None) -> list[AnnotationRecord]:
    """Build annotation records for the document's comments.

    Replies are attached to the comment they answer and are not listed at the
    top level. The anchor hash is computed over the full anchor text, before
    any truncation.

    Args:
        host: Document host
        options: Retrieval options

    Returns:
        One AnnotationRecord per top-level comment, in comments.xml order
    """
    options = options or CommentOptions()
    options.validate()

    comments = host.comments
    replies_by_parent: dict[str, list[Comment]] = {}
    for comment in comments:
        parent = comment.parent_para_id
        if parent is not None:
            replies_by_parent.setdefault(parent, []).append(comment)

    records = []
    for comment in comments:
        if comment.is_reply:
            continue
        if comment.is_resolved and not options.include_resolved:
            continue

        anchor_text = None
        anchor_hash = None
        anchor_length = 0
        style = None
        if options.include_associated_text and comment.anchor is not None:
            full_text = comment.anchor.text
            anchor_hash = text_hash(full_text)
            anchor_length = len(full_text)
            anchor_text = truncate(full_text, options.max_text_length)
            paragraph = host.paragraph_for(comment.anchor.start_paragraph)
            style = paragraph.style if paragraph is not None else None

        replies = None
        if options.include_replies:
            replies = tuple(
                _reply_record(reply, options)
                for reply in replies_by_parent.get(comment.para_id or "", [])
            )

        detailed = options.detailed_metadata
        records.append(
            AnnotationRecord(
                id=comment.id,
                content=truncate(comment.text, options.max_text_length),
                anchor_text_hash=anchor_hash,
                anchor_text_length=anchor_length,
                anchor_text=anchor_text,
                resolved=comment.is_resolved,
                author_name=(comment.author or None) if detailed else None,
                author_initials=comment.initials if detailed else None,
                created_date=_created_date(comment) if detailed else None,
                style=style,
                replies=replies,
            )
        )

    logger.debug("Collected %d comments (%d total incl. replies)", len(records), len(comments))
    return records


def deduplicate_references(records: Iterable[AnnotationRecord]) -> list[DuplicateGroup]:
    """Group comments anchored to identical text.

    Records without an anchor hash or with empty anchor text are skipped.
    Groups keep the order in which their hash first occurs, members keep
    input order, and only groups with two or more members are returned.

    Example:
        >>> groups = deduplicate_references(get_comments(host))
        >>> [(g.text, g.count) for g in groups]
        [('Acme Corp', 2)]
    """
    by_hash: dict[str, list[AnnotationRecord]] = {}
    for record in records:
        if not record.anchor_text_hash or not record.anchor_text:
            continue
        by_hash.setdefault(record.anchor_text_hash, []).append(record)

    groups = [
        DuplicateGroup(
            text_hash=text_hash_value,
            text=members[0].anchor_text,
            count=len(members),
            comments=members,
        )
        for text_hash_value, members in by_hash.items()
        if len(members) >= 2
    ]
    logger.debug("Found %d duplicate reference groups", len(groups))
    return groups
