"""
Outline building and serialization.

Turns the flat, leveled heading list reported by a document host into a
hierarchical outline, and writes outlines out as Markdown, JSON or YAML.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass

import yaml

from .constants import MAX_HEADING_LEVEL
from .errors import ValidationError
from .types import DocumentOutline, HeadingRecord, OutlineNode

logger = logging.getLogger(__name__)


# ============================================================================
# Options
# ============================================================================


@dataclass
class OutlineOptions:
    """Filtering options for outline building.

    Attributes:
        max_depth: Keep headings with level <= max_depth (None or 0: no limit)
        specific_levels: Keep only these levels; takes precedence over max_depth
        include_format: Carry each heading's format snapshot onto its node
    """

    max_depth: int | None = None
    specific_levels: Iterable[int] | None = None
    include_format: bool = False

    def validate(self) -> None:
        """Check option values.

        Raises:
            ValidationError: If max_depth is negative or a level is outside 1-9
        """
        errors = []
        if self.max_depth is not None and self.max_depth < 0:
            errors.append(f"max_depth must be >= 1, got {self.max_depth}")
        if self.specific_levels is not None:
            levels = set(self.specific_levels)
            if not levels:
                errors.append("specific_levels must not be empty")
            bad = sorted(level for level in levels if not 1 <= level <= MAX_HEADING_LEVEL)
            if bad:
                errors.append(f"specific_levels must be within 1-{MAX_HEADING_LEVEL}, got {bad}")
        if errors:
            raise ValidationError("Invalid outline options", errors=errors)

    def accepts(self, level: int) -> bool:
        """Check whether a heading level passes the filter."""
        if self.specific_levels is not None:
            return level in set(self.specific_levels)
        if self.max_depth:
            return level <= self.max_depth
        return True


def _validate_heading(heading: HeadingRecord) -> None:
    if not 1 <= heading.level <= MAX_HEADING_LEVEL:
        raise ValidationError(
            f"Heading level must be within 1-{MAX_HEADING_LEVEL}, got {heading.level} "
            f"for {heading.text!r}"
        )
    if heading.sequence_index < 0:
        raise ValidationError(
            f"Heading sequence index must be non-negative, got {heading.sequence_index}"
        )


def _filtered_nodes(
    headings: Iterable[HeadingRecord], options: OutlineOptions | None
) -> list[OutlineNode]:
    options = options or OutlineOptions()
    options.validate()

    nodes = []
    for heading in headings:
        _validate_heading(heading)
        if not options.accepts(heading.level):
            continue
        nodes.append(
            OutlineNode(
                id=f"heading-{heading.sequence_index}",
                text=heading.text,
                level=heading.level,
                style=heading.style,
                sequence_index=heading.sequence_index,
                format=heading.format if options.include_format else None,
            )
        )
    return nodes


# ============================================================================
# Building
# ============================================================================


def build_outline(
    headings: Iterable[HeadingRecord], options: OutlineOptions | None = None
) -> DocumentOutline:
    """Build a heading tree.

    Each heading becomes a child of the nearest preceding heading with a
    smaller level. Level gaps nest directly (a level 3 heading right after a
    level 1 heading is its child) and equal levels are siblings.

    Args:
        headings: Heading records in document order
        options: Filtering options; excluded headings neither appear nor
            act as parents

    Returns:
        DocumentOutline with root nodes and statistics

    Raises:
        ValidationError: If a heading or option is malformed
    """
    roots: list[OutlineNode] = []
    level_counts: dict[int, int] = {}
    stack: list[tuple[int, OutlineNode]] = []

    nodes = _filtered_nodes(headings, options)
    for node in nodes:
        while stack and stack[-1][0] >= node.level:
            stack.pop()
        if stack:
            stack[-1][1].children.append(node)
        else:
            roots.append(node)
        stack.append((node.level, node))
        level_counts[node.level] = level_counts.get(node.level, 0) + 1

    outline = DocumentOutline(
        nodes=roots,
        total_headings=len(nodes),
        max_depth=max(level_counts, default=0),
        level_counts=dict(sorted(level_counts.items())),
    )
    logger.debug(
        "Built outline: %d headings, %d roots, max depth %d",
        outline.total_headings,
        len(roots),
        outline.max_depth,
    )
    return outline


def build_flat_outline(
    headings: Iterable[HeadingRecord], options: OutlineOptions | None = None
) -> list[OutlineNode]:
    """Build the outline as a flat list in document order (no children)."""
    return _filtered_nodes(headings, options)


# ============================================================================
# Serialization
# ============================================================================


class _MarkdownWriter:
    """Internal writer for Markdown outline output."""

    def __init__(self, outline: DocumentOutline, indent: bool) -> None:
        self.outline = outline
        self.indent = indent
        self.lines: list[str] = []

    def write(self) -> str:
        for node in self.outline.nodes:
            self._write_node(node, 0)
        return "\n".join(self.lines)

    def _write_node(self, node: OutlineNode, depth: int) -> None:
        prefix = "  " * depth if self.indent else ""
        self.lines.append(f"{prefix}{'#' * node.level} {node.text}")
        for child in node.children:
            self._write_node(child, depth + 1)


def serialize_markdown(outline: DocumentOutline, indent: bool = False) -> str:
    """Write an outline as Markdown headings, depth-first in document order.

    Args:
        outline: The outline to write
        indent: Indent nested headings by two spaces per tree depth

    Returns:
        One "#"-prefixed line per heading; "" for an empty outline

    Example:
        >>> serialize_markdown(outline)
        '# Intro\\n## Scope'
    """
    return _MarkdownWriter(outline, indent).write()


def serialize_json(outline: DocumentOutline) -> str:
    """Write an outline as pretty-printed JSON."""
    return json.dumps(outline.to_dict(), indent=2, ensure_ascii=False)


def serialize_yaml(outline: DocumentOutline) -> str:
    """Write an outline as YAML (same structure as the JSON form)."""
    return yaml.safe_dump(
        outline.to_dict(), sort_keys=False, allow_unicode=True, default_flow_style=False
    )
