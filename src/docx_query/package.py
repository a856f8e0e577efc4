"""
DocxPackage class for read access to a Word document ZIP structure.

This module keeps ZIP handling separate from the XML queries: the package
reads every part into memory once and hands out parsed lxml trees.
"""

import io
import logging
import zipfile
from pathlib import Path
from typing import BinaryIO

from lxml import etree

from .constants import DOCUMENT_PART, DOCUMENT_RELS_PART, PACKAGE_RELATIONSHIPS_NAMESPACE
from .errors import ValidationError

logger = logging.getLogger(__name__)


class DocxPackage:
    """Read-only view of an OOXML package.

    Example:
        >>> pkg = DocxPackage.open("document.docx")
        >>> body = pkg.get_part("word/document.xml")
    """

    def __init__(self, parts: dict[str, bytes], source_path: Path | None = None) -> None:
        """Initialize package with already-read part contents.

        Use the class methods `open()` or `from_bytes()` instead of
        calling this constructor directly.

        Args:
            parts: Mapping of part name to raw bytes
            source_path: Original source file path, if any

        Raises:
            ValidationError: If the package has no main document part
        """
        if DOCUMENT_PART not in parts:
            raise ValidationError(f"Package is missing {DOCUMENT_PART}")
        self._parts = parts
        self._source_path = source_path

    @classmethod
    def open(cls, source: str | Path | BinaryIO) -> "DocxPackage":
        """Open an OOXML package from a file path or file-like object.

        Args:
            source: Path to .docx file or file-like object containing it

        Returns:
            DocxPackage instance holding the package parts

        Raises:
            ValidationError: If the source is missing or not a valid ZIP file
        """
        source_path: Path | None = None

        if isinstance(source, str | Path):
            source_path = Path(source)
            if not source_path.exists():
                raise ValidationError(f"Document not found: {source_path}")
            zip_source: Path | BinaryIO = source_path
        else:
            zip_source = source

        if not zipfile.is_zipfile(zip_source):
            raise ValidationError("Source must be a valid .docx (ZIP) file")

        # Reset stream position if it was checked by is_zipfile
        if hasattr(zip_source, "seek"):
            zip_source.seek(0)

        try:
            with zipfile.ZipFile(zip_source, "r") as zip_ref:
                parts = {name: zip_ref.read(name) for name in zip_ref.namelist()}
        except (zipfile.BadZipFile, OSError) as e:
            raise ValidationError(f"Failed to read .docx file: {e}") from e

        logger.debug("Read %d parts from %s", len(parts), source_path or "stream")
        return cls(parts, source_path)

    @classmethod
    def from_bytes(cls, data: bytes) -> "DocxPackage":
        """Open an OOXML package from bytes."""
        return cls.open(io.BytesIO(data))

    @property
    def source_path(self) -> Path | None:
        """Get the original source file path, if available."""
        return self._source_path

    @property
    def part_names(self) -> list[str]:
        return sorted(self._parts)

    def part_exists(self, part_name: str) -> bool:
        return part_name in self._parts

    def get_part(self, part_name: str) -> etree._Element | None:
        """Get a package part as a parsed XML element.

        Args:
            part_name: Relative path within the package (e.g., "word/document.xml")

        Returns:
            Parsed XML root element, or None if the part doesn't exist

        Raises:
            ValidationError: If the part is not well-formed XML
        """
        data = self._parts.get(part_name)
        if data is None:
            return None
        try:
            return etree.fromstring(data)
        except etree.XMLSyntaxError as e:
            raise ValidationError(f"Malformed XML in {part_name}: {e}") from e

    def get_relationships(self, rels_part: str = DOCUMENT_RELS_PART) -> dict[str, str]:
        """Map relationship ids to their targets.

        Args:
            rels_part: The .rels part to read

        Returns:
            Dict of rId -> Target (empty if the part is missing)
        """
        root = self.get_part(rels_part)
        if root is None:
            return {}
        return {
            rel.get("Id"): rel.get("Target", "")
            for rel in root.iter(f"{{{PACKAGE_RELATIONSHIPS_NAMESPACE}}}Relationship")
            if rel.get("Id")
        }
