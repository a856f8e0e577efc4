"""
Locator resolution: map a locator description to a concrete content range.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import yaml

from .errors import NotFoundError, OutOfRangeError, ValidationError
from .host import DocumentHost, RangeHandle
from .types import (
    BookmarkLocator,
    ContentControlLocator,
    HeadingLocator,
    ParagraphLocator,
    RangeLocator,
    SectionLocator,
    locator_from_dict,
)

logger = logging.getLogger(__name__)


def _check_non_negative(name: str, value: int | None) -> None:
    if value is not None and value < 0:
        raise ValidationError(f"{name} must be non-negative, got {value}")


class LocatorResolver:
    """Resolves locators against a document host.

    All "n-th match" selection follows document order, so resolving the same
    locator twice against an unchanged document gives the same range. Out of
    range indices are reported, never clamped.

    Example:
        >>> resolver = LocatorResolver(host)
        >>> rng = resolver.resolve(HeadingLocator(text="Scope", level=2))
    """

    def __init__(self, host: DocumentHost) -> None:
        self._host = host

    def resolve(self, locator: RangeLocator) -> RangeHandle:
        """Resolve a locator to a range.

        Raises:
            ValidationError: If the locator is malformed
            NotFoundError: If a bookmark, heading or content control lookup fails
            OutOfRangeError: If a paragraph or section index is out of bounds
        """
        match locator:
            case BookmarkLocator():
                return self._resolve_bookmark(locator)
            case HeadingLocator():
                return self._resolve_heading(locator)
            case ParagraphLocator():
                return self._resolve_paragraphs(locator)
            case SectionLocator():
                return self._resolve_section(locator)
            case ContentControlLocator():
                return self._resolve_content_control(locator)
            case _:
                raise ValidationError(f"Unsupported locator: {locator!r}")

    def _resolve_bookmark(self, locator: BookmarkLocator) -> RangeHandle:
        if not locator.name:
            raise ValidationError("Bookmark name must not be empty")
        rng = self._host.find_bookmark(locator.name)
        if rng is None:
            raise NotFoundError("bookmark", {"name": locator.name})
        logger.debug("Resolved bookmark %r to blocks %d-%d", locator.name, rng.start, rng.end)
        return rng

    def _resolve_heading(self, locator: HeadingLocator) -> RangeHandle:
        _check_non_negative("Heading index", locator.index)
        if locator.level is not None and locator.level < 1:
            raise ValidationError(f"Heading level must be >= 1, got {locator.level}")

        matches = [
            heading
            for heading in self._host.list_headings()
            if (locator.text is None or locator.text in heading.text.strip())
            and (locator.level is None or heading.level == locator.level)
        ]

        index = locator.index or 0
        if index >= len(matches):
            raise NotFoundError(
                "heading",
                {"text": locator.text, "level": locator.level, "index": locator.index},
                match_count=len(matches),
            )

        heading = matches[index]
        paragraph = self._host.list_paragraphs()[heading.sequence_index]
        logger.debug(
            "Resolved heading locator to paragraph %d (%r)", heading.sequence_index, heading.text
        )
        return self._host.range_of(paragraph)

    def _resolve_paragraphs(self, locator: ParagraphLocator) -> RangeHandle:
        _check_non_negative("Start paragraph index", locator.start_index)
        _check_non_negative("End paragraph index", locator.end_index)

        count = self._host.paragraph_count
        if locator.start_index >= count:
            raise OutOfRangeError("paragraph", locator.start_index, count)

        end_index = locator.start_index if locator.end_index is None else locator.end_index
        if end_index < locator.start_index:
            raise OutOfRangeError("paragraph", end_index, count, lower=locator.start_index)
        if end_index >= count:
            raise OutOfRangeError("paragraph", end_index, count)

        paragraphs = self._host.list_paragraphs()
        first = self._host.range_of(paragraphs[locator.start_index])
        last = self._host.range_of(paragraphs[end_index])
        logger.debug("Resolved paragraphs %d-%d", locator.start_index, end_index)
        return first.expand_to(last)

    def _resolve_section(self, locator: SectionLocator) -> RangeHandle:
        _check_non_negative("Section index", locator.index)
        count = self._host.section_count
        if locator.index >= count:
            raise OutOfRangeError("section", locator.index, count)
        return self._host.range_of(self._host.get_section(locator.index))

    def _resolve_content_control(self, locator: ContentControlLocator) -> RangeHandle:
        _check_non_negative("Content control index", locator.index)

        matches = [
            control
            for control in self._host.list_content_controls()
            if (locator.title is None or locator.title in (control.title or ""))
            and (locator.tag is None or control.tag == locator.tag)
        ]

        index = locator.index or 0
        if index >= len(matches):
            raise NotFoundError(
                "content control",
                {"title": locator.title, "tag": locator.tag, "index": locator.index},
                match_count=len(matches),
            )

        control = matches[index]
        logger.debug("Resolved content control %r (tag=%r)", control.title, control.tag)
        return self._host.range_of(control)


def load_locator_file(path: str | Path) -> RangeLocator:
    """Load a locator from a YAML or JSON file.

    The file holds either the locator mapping itself or a mapping with a
    ``locator`` key.

    Example YAML file:
        ```yaml
        locator:
          type: heading
          text: Introduction
          level: 1
        ```

    Raises:
        ValidationError: If the file cannot be parsed or has invalid format
        FileNotFoundError: If the file does not exist
    """
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Locator file not found: {path}")

    try:
        with open(file_path, encoding="utf-8") as f:
            if file_path.suffix.lower() == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValidationError(f"Failed to parse YAML file: {e}") from e
    except json.JSONDecodeError as e:
        raise ValidationError(f"Failed to parse JSON file: {e}") from e

    if isinstance(data, dict) and "locator" in data:
        data = data["locator"]
    if not isinstance(data, dict):
        raise ValidationError("Locator file must contain a dictionary/object")
    return locator_from_dict(data)
