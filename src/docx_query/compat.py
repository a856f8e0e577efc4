"""
Compatibility helpers for integrating with python-docx.
"""

from __future__ import annotations

import io
from typing import Any

from .docx_host import HeadingDetectionConfig
from .document import Document


def from_python_docx(
    python_docx_doc: Any, detection: HeadingDetectionConfig | None = None
) -> Document:
    """Create a queryable Document from a python-docx Document.

    This lets documents built or edited with python-docx be queried without
    saving them to disk first.

    Args:
        python_docx_doc: A python-docx Document object
        detection: Heading detection settings

    Returns:
        A docx_query Document over the same content

    Raises:
        ImportError: If python-docx is not installed (with helpful message)
        TypeError: If the input is not a python-docx Document

    Example:
        >>> from docx import Document as PythonDocxDocument
        >>> from docx_query.compat import from_python_docx
        >>>
        >>> py_doc = PythonDocxDocument()
        >>> py_doc.add_heading("Contract", 1)
        >>> py_doc.add_paragraph("Payment terms: 30 days")
        >>>
        >>> doc = from_python_docx(py_doc)
        >>> [node.text for node in doc.outline().nodes]
        ['Contract']
    """
    try:
        from docx.document import Document as PythonDocxDocType
    except ImportError as e:
        raise ImportError(
            "python-docx is required for from_python_docx(). "
            "Install it with: pip install python-docx"
        ) from e

    if not isinstance(python_docx_doc, PythonDocxDocType):
        raise TypeError(
            f"Expected python-docx Document, got {type(python_docx_doc).__name__}. "
            "Pass a Document object created with: from docx import Document"
        )

    buffer = io.BytesIO()
    python_docx_doc.save(buffer)
    buffer.seek(0)
    return Document(buffer, detection=detection)
