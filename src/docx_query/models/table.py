"""
Table wrapper classes for read access to table elements.
"""

from lxml import etree

from docx_query.constants import WORD_NAMESPACE, w
from docx_query.xml_utils import block_text, twips_to_points


class TableCell:
    """Wrapper around a w:tc (table cell) element."""

    def __init__(self, element: etree._Element, row_index: int, col_index: int):
        """Initialize TableCell wrapper.

        Args:
            element: The w:tc XML element to wrap
            row_index: 0-based row index in table
            col_index: 0-based column index in row
        """
        if element.tag != f"{{{WORD_NAMESPACE}}}tc":
            raise ValueError(f"Expected w:tc element, got {element.tag}")
        self._element = element
        self._row_index = row_index
        self._col_index = col_index

    @property
    def element(self) -> etree._Element:
        return self._element

    @property
    def row_index(self) -> int:
        return self._row_index

    @property
    def col_index(self) -> int:
        return self._col_index

    @property
    def text(self) -> str:
        """Get the cell text, one line per paragraph."""
        return block_text(self._element)

    @property
    def width(self) -> float | None:
        """Cell width in points, when given in twips (w:type="dxa")."""
        tc_pr = self._element.find(w("tcPr"))
        if tc_pr is None:
            return None
        tc_w = tc_pr.find(w("tcW"))
        if tc_w is None or tc_w.get(w("type"), "dxa") != "dxa":
            return None
        return twips_to_points(tc_w.get(w("w")))

    def __repr__(self) -> str:
        text_preview = self.text[:30] + "..." if len(self.text) > 30 else self.text
        return f"<TableCell[{self._row_index},{self._col_index}]: {text_preview!r}>"


class Table:
    """Wrapper around a w:tbl (table) element."""

    def __init__(self, element: etree._Element, index: int = 0):
        if element.tag != f"{{{WORD_NAMESPACE}}}tbl":
            raise ValueError(f"Expected w:tbl element, got {element.tag}")
        self._element = element
        self._index = index

    @property
    def element(self) -> etree._Element:
        return self._element

    @property
    def index(self) -> int:
        return self._index

    @property
    def rows(self) -> list[list[TableCell]]:
        """Get the cell grid, row by row."""
        grid = []
        for row_index, tr in enumerate(self._element.findall(w("tr"))):
            grid.append(
                [
                    TableCell(tc, row_index, col_index)
                    for col_index, tc in enumerate(tr.findall(w("tc")))
                ]
            )
        return grid

    @property
    def row_count(self) -> int:
        return len(self._element.findall(w("tr")))

    @property
    def column_count(self) -> int:
        """Column count from the table grid, falling back to the widest row."""
        grid = self._element.find(w("tblGrid"))
        if grid is not None:
            columns = grid.findall(w("gridCol"))
            if columns:
                return len(columns)
        rows = self._element.findall(w("tr"))
        return max((len(tr.findall(w("tc"))) for tr in rows), default=0)

    @property
    def text(self) -> str:
        """Table text: cells separated by tabs, rows by newlines."""
        return "\n".join("\t".join(cell.text for cell in row) for row in self.rows)

    def __repr__(self) -> str:
        return f"<Table[{self._index}] {self.row_count}x{self.column_count}>"
