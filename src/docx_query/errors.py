"""
Custom exception classes for the docx_query package.

Every error raised by the query layer derives from DocxQueryError so callers
can catch the whole family at once, while the three concrete kinds stay
distinguishable for user-facing messages.
"""

from typing import Any


class DocxQueryError(Exception):
    """Base exception for all docx_query errors."""

    pass


class ValidationError(DocxQueryError):
    """Raised when caller input or the document package is malformed.

    This can occur when:
    - A locator or option carries a negative index or an empty required field
    - A heading record has a level outside 1-9
    - The source is not a valid .docx package

    Attributes:
        errors: List of specific validation error messages (optional)
    """

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        self.errors = errors or []
        super().__init__(message)


class NotFoundError(DocxQueryError):
    """Raised when a named or keyed lookup yields no match.

    Attributes:
        kind: What was being looked up (e.g. "bookmark", "heading")
        criteria: The search criteria, echoed back in the message
        match_count: How many candidates matched before index selection
    """

    def __init__(
        self,
        kind: str,
        criteria: dict[str, Any] | None = None,
        match_count: int | None = None,
    ) -> None:
        self.kind = kind
        self.criteria = {k: v for k, v in (criteria or {}).items() if v is not None}
        self.match_count = match_count
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format an error message echoing the search criteria."""
        msg = f"No matching {self.kind} found"
        if self.criteria:
            parts = ", ".join(f"{key}={value!r}" for key, value in self.criteria.items())
            msg += f" for {parts}"
        if self.match_count:
            msg += f" ({self.match_count} candidate(s) matched before index selection)"
        return msg


class OutOfRangeError(DocxQueryError):
    """Raised when a numeric index falls outside a known bound.

    Attributes:
        kind: What the index addresses (e.g. "paragraph", "section", "page")
        index: The offending index
        bound: The exclusive upper bound (the collection size)
        lower: The smallest valid index (e.g. the start of a span)
    """

    def __init__(self, kind: str, index: int, bound: int, lower: int = 0) -> None:
        self.kind = kind
        self.index = index
        self.bound = bound
        self.lower = lower
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format an error message including the valid bound."""
        if self.bound == 0:
            return (
                f"{self.kind.capitalize()} index {self.index} out of range: "
                f"document has no {self.kind}s"
            )
        return (
            f"{self.kind.capitalize()} index {self.index} out of range "
            f"(valid: {self.lower}-{self.bound - 1}, total {self.bound})"
        )
