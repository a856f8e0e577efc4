"""
Small helpers for reading WordprocessingML with lxml.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from lxml import etree

from .constants import EMU_PER_POINT, TWIPS_PER_POINT, w

_TEXT_TAGS = (w("t"), w("tab"), w("br"), w("cr"), w("noBreakHyphen"))

# Errors raised by malformed attribute values when reading secondary fields
FIELD_ERRORS = (ValueError, TypeError, AttributeError, KeyError)


def val(parent: etree._Element | None, path: str, attr: str = "val") -> str | None:
    """Read a w:-namespaced attribute from a child element.

    Args:
        parent: Element to search from (None is tolerated)
        path: Child tag name without prefix, e.g. "pStyle"
        attr: Attribute name without prefix

    Returns:
        The attribute value, or None if the element or attribute is missing
    """
    if parent is None:
        return None
    child = parent.find(w(path))
    if child is None:
        return None
    return child.get(w(attr))


def on_off(parent: etree._Element | None, path: str) -> bool | None:
    """Read an OOXML on/off property (e.g. w:b), honoring w:val="0"/"false"."""
    if parent is None:
        return None
    child = parent.find(w(path))
    if child is None:
        return None
    value = child.get(w("val"))
    return value not in ("0", "false", "off")


def twips_to_points(value: str | None) -> float | None:
    """Convert a twips attribute value to points."""
    if value is None:
        return None
    return int(value) / TWIPS_PER_POINT


def emu_to_points(value: str | None) -> float | None:
    """Convert an EMU attribute value to points."""
    if value is None:
        return None
    return int(value) / EMU_PER_POINT


def is_inside(elem: etree._Element, tag: str, stop: etree._Element | None = None) -> bool:
    """Check whether an ancestor of ``elem`` (below ``stop``) has the given tag."""
    for ancestor in elem.iterancestors():
        if ancestor is stop:
            return False
        if ancestor.tag == tag:
            return True
    return False


def run_text(container: etree._Element) -> str:
    """Extract visible text from a container.

    Text inside nested text boxes and tracked deletions (w:delText) is not
    included. Tabs and breaks are rendered as "\\t" and "\\n".
    """
    parts: list[str] = []
    txbx = w("txbxContent")
    for elem in container.iter(*_TEXT_TAGS):
        if is_inside(elem, txbx, stop=container):
            continue
        if elem.tag == w("t"):
            parts.append(elem.text or "")
        elif elem.tag == w("tab"):
            parts.append("\t")
        elif elem.tag == w("noBreakHyphen"):
            parts.append("-")
        elif elem.tag == w("br") and elem.get(w("type")) not in ("page", "column"):
            parts.append("\n")
        elif elem.tag == w("cr"):
            parts.append("\n")
    return "".join(parts)


def block_text(container: etree._Element) -> str:
    """Extract text from a block container, one line per paragraph."""
    paragraphs = [
        p for p in container.iter(w("p")) if not is_inside(p, w("txbxContent"), stop=container)
    ]
    if not paragraphs:
        return run_text(container)
    return "\n".join(run_text(p) for p in paragraphs)


def read_field(
    owner: str, name: str, getter: Callable[[], Any], log: logging.Logger
) -> Any:
    """Read a secondary field, degrading to None when it cannot be read.

    Args:
        owner: What the field belongs to, for the warning (e.g. "range-para-0")
        name: Field name
        getter: Reads the field
        log: Logger that receives the warning

    Returns:
        The field value, or None if reading it raised one of FIELD_ERRORS
    """
    try:
        return getter()
    except FIELD_ERRORS as e:
        log.warning("Could not read %s of %s: %s", name, owner, e)
        return None
