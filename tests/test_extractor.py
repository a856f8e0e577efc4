"""
Tests for content extraction.

These tests verify:
- Element emission order and synthesized ids
- Inclusion switches for text, images, tables and content controls
- Per-element truncation and aggregate statistics
- Detailed metadata and degradation of unreadable secondary fields
"""

import logging

import pytest

from docx_query import (
    ContentControlLocator,
    ContentExtractor,
    DocxHost,
    ElementType,
    ExtractOptions,
    ImageElement,
    InlinePictureElement,
    ParagraphLocator,
    RangeHandle,
    TableElement,
    ValidationError,
    resolve_and_extract,
)

WORD_NS = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"
NAMESPACES = (
    f'xmlns:w="{WORD_NS}" '
    'xmlns:wp="http://schemas.openxmlformats.org/drawingml/2006/wordprocessingDrawing" '
    'xmlns:a="http://schemas.openxmlformats.org/drawingml/2006/main" '
    'xmlns:pic="http://schemas.openxmlformats.org/drawingml/2006/picture" '
    'xmlns:r="http://schemas.openxmlformats.org/officeDocument/2006/relationships"'
)

INLINE_PICTURE = """<w:r><w:drawing><wp:inline>
  <wp:extent cx="914400" cy="457200"/>
  <wp:docPr id="1" name="Picture 1" descr="Logo"><a:hlinkClick r:id="rId5"/></wp:docPr>
  <a:graphic><a:graphicData><pic:pic/></a:graphicData></a:graphic>
</wp:inline></w:drawing></w:r>"""

FLOATING_PICTURE = """<w:r><w:drawing><wp:anchor>
  <wp:extent cx="1270000" cy="1270000"/>
  <wp:docPr id="2" name="Picture 2" title="Chart"/>
  <a:graphic><a:graphicData><pic:pic/></a:graphicData></a:graphic>
</wp:anchor></w:drawing></w:r>"""

# Paragraphs: 0 "Intro", 1 "Figure:" + pictures, 2 "L" and 3 "R" in a table,
# 4 "Click here" in a control, 5 "Last"
DOCUMENT_XML = f"""<w:document {NAMESPACES}>
  <w:body>
    <w:p>
      <w:pPr>
        <w:pStyle w:val="Quote"/>
        <w:spacing w:before="240" w:after="120"/>
        <w:ind w:left="720"/>
        <w:jc w:val="center"/>
      </w:pPr>
      <w:r><w:t>Intro</w:t></w:r>
    </w:p>
    <w:p>
      <w:r><w:t>Figure:</w:t></w:r>
      {INLINE_PICTURE}
      {FLOATING_PICTURE}
    </w:p>
    <w:tbl>
      <w:tr>
        <w:tc>
          <w:tcPr><w:tcW w:w="2880" w:type="dxa"/></w:tcPr>
          <w:p><w:r><w:t>L</w:t></w:r></w:p>
        </w:tc>
        <w:tc><w:p><w:r><w:t>R</w:t></w:r></w:p></w:tc>
      </w:tr>
    </w:tbl>
    <w:sdt>
      <w:sdtPr>
        <w:alias w:val="Clause"/>
        <w:tag w:val="c1"/>
        <w:lock w:val="sdtLocked"/>
        <w:showingPlcHdr/>
        <w:text/>
      </w:sdtPr>
      <w:sdtContent>
        <w:p><w:r><w:t>Click here</w:t></w:r></w:p>
      </w:sdtContent>
    </w:sdt>
    <w:p><w:r><w:t>Last</w:t></w:r></w:p>
  </w:body>
</w:document>"""

RELATIONSHIPS = {"rId5": "https://example.com"}


def make_document(*paragraph_xml: str) -> str:
    return f'<w:document {NAMESPACES}><w:body>{"".join(paragraph_xml)}</w:body></w:document>'


@pytest.fixture
def host():
    return DocxHost.from_xml(DOCUMENT_XML, relationships=RELATIONSHIPS)


def extract_all(host, options=None):
    return resolve_and_extract(host, ParagraphLocator(start_index=0, end_index=5), options)


class TestElementOrder:
    """Tests for emission order and ids."""

    def test_ids_and_kinds(self, host):
        """Paragraphs (with their pictures) come first, then tables, then controls."""
        result = extract_all(host)

        assert [element.id for element in result.elements] == [
            "range-para-0",
            "range-para-1",
            "range-img-2",
            "range-img-3",
            "range-para-4",
            "range-para-5",
            "range-table-6",
            "range-ctrl-7",
        ]

    def test_metadata_counts(self, host):
        metadata = extract_all(host).metadata

        assert metadata.locator_type == "paragraph"
        assert metadata.paragraph_count == 4
        assert metadata.image_count == 2
        assert metadata.table_count == 1
        assert metadata.content_control_count == 1
        assert metadata.is_empty is False

    def test_character_count(self, host):
        """Character count sums the text of emitted paragraphs and tables."""
        metadata = extract_all(host).metadata

        assert metadata.character_count == len("Intro" "Figure:" "Click here" "Last" "L\tR")

    def test_aggregate_text(self, host):
        result = extract_all(host)

        assert result.text == "Intro\nFigure:\nL\tR\nClick here\nLast"

    def test_empty_range(self, host):
        result = ContentExtractor(host).extract(RangeHandle(0, -1))

        assert result.text == ""
        assert result.elements == []
        assert result.metadata.is_empty is True
        assert result.metadata.character_count == 0


class TestPictures:
    """Tests for picture elements."""

    def test_inline_and_floating(self, host):
        result = extract_all(host)
        inline, floating = result.elements[2], result.elements[3]

        assert isinstance(inline, InlinePictureElement)
        assert inline.type == ElementType.INLINE_PICTURE
        assert inline.width == 72.0
        assert inline.height == 36.0
        assert inline.alt_text == "Logo"
        assert inline.hyperlink == "https://example.com"

        assert isinstance(floating, ImageElement)
        assert floating.width == 100.0
        assert floating.alt_text == "Chart"
        assert floating.hyperlink is None

    def test_images_excluded(self, host):
        result = extract_all(host, ExtractOptions(include_images=False))

        assert result.metadata.image_count == 0
        assert not any(
            element.type in (ElementType.IMAGE, ElementType.INLINE_PICTURE)
            for element in result.elements
        )

    def test_non_picture_drawings_skipped(self):
        shape = (
            "<w:p><w:r><w:drawing><wp:anchor><wp:extent cx='1' cy='1'/>"
            "<wp:docPr id='3' name='Shape'/></wp:anchor></w:drawing></w:r></w:p>"
        )
        host = DocxHost.from_xml(make_document(shape))

        result = ContentExtractor(host).extract(RangeHandle(0, 0))
        assert result.metadata.image_count == 0


class TestInclusionOptions:
    """Tests for the inclusion switches."""

    def test_tables_excluded(self, host):
        result = extract_all(host, ExtractOptions(include_tables=False))

        assert result.metadata.table_count == 0
        assert not any(isinstance(element, TableElement) for element in result.elements)
        assert result.metadata.character_count == len("Intro" "Figure:" "Click here" "Last")

    def test_controls_excluded(self, host):
        result = extract_all(host, ExtractOptions(include_content_controls=False))

        assert result.metadata.content_control_count == 0
        assert result.elements[-1].type == ElementType.TABLE

    def test_text_excluded(self, host):
        """Without text, structure is kept but text fields are empty."""
        result = extract_all(host, ExtractOptions(include_text=False))

        assert result.text == ""
        assert result.elements[0].text is None
        table = next(e for e in result.elements if isinstance(e, TableElement))
        assert table.row_count == 1
        assert table.column_count == 2
        assert table.cells == []

    def test_table_cells(self, host):
        table = next(e for e in extract_all(host).elements if isinstance(e, TableElement))

        assert [[cell.text for cell in row] for row in table.cells] == [["L", "R"]]
        assert table.cells[0][1].row_index == 0
        assert table.cells[0][1].column_index == 1
        assert table.cells[0][0].width is None


class TestTruncation:
    """Tests for max_text_length."""

    def test_long_paragraph_truncated(self):
        host = DocxHost.from_xml(make_document(f"<w:p><w:r><w:t>{'x' * 300}</w:t></w:r></w:p>"))

        result = resolve_and_extract(
            host, ParagraphLocator(start_index=0), ExtractOptions(max_text_length=100)
        )

        element = result.elements[0]
        assert len(element.text) == 103
        assert element.text.endswith("...")
        assert result.metadata.character_count == 300
        assert len(result.text) == 300

    def test_short_text_untouched(self, host):
        result = extract_all(host, ExtractOptions(max_text_length=5))

        assert result.elements[0].text == "Intro"
        assert result.elements[1].text == "Figur..."

    def test_invalid_max_length(self, host):
        with pytest.raises(ValidationError):
            extract_all(host, ExtractOptions(max_text_length=0))


class TestDetailedMetadata:
    """Tests for secondary fields."""

    def test_paragraph_details(self, host):
        element = extract_all(host, ExtractOptions(detailed_metadata=True)).elements[0]

        assert element.style == "Quote"
        assert element.alignment == "Centered"
        assert element.left_indent == 36.0
        assert element.space_before == 12.0
        assert element.space_after == 6.0
        assert element.is_list_item is False
        assert element.list_level is None

    def test_details_absent_by_default(self, host):
        element = extract_all(host).elements[0]

        assert element.style is None
        assert element.alignment is None
        assert "style" not in element.to_dict()

    def test_table_cell_width(self, host):
        result = extract_all(host, ExtractOptions(detailed_metadata=True))
        table = next(e for e in result.elements if isinstance(e, TableElement))

        assert table.cells[0][0].width == 144.0
        assert table.cells[0][1].width is None

    def test_control_details(self, host):
        control = extract_all(host, ExtractOptions(detailed_metadata=True)).elements[-1]

        assert control.title == "Clause"
        assert control.tag == "c1"
        assert control.control_type == "PlainText"
        assert control.cannot_delete is True
        assert control.cannot_edit is False
        assert control.placeholder_text == "Click here"

    def test_unreadable_field_degrades_to_none(self, caplog):
        """A malformed attribute nulls that field and logs a warning."""
        paragraph = (
            '<w:p><w:pPr><w:ind w:left="abc"/><w:jc w:val="right"/></w:pPr>'
            "<w:r><w:t>Odd</w:t></w:r></w:p>"
        )
        host = DocxHost.from_xml(make_document(paragraph))

        with caplog.at_level(logging.WARNING, logger="docx_query.extractor"):
            result = resolve_and_extract(
                host, ParagraphLocator(start_index=0), ExtractOptions(detailed_metadata=True)
            )

        element = result.elements[0]
        assert element.left_indent is None
        assert element.alignment == "Right"
        assert element.text == "Odd"
        assert "left_indent" in caplog.text


class TestControlRanges:
    """Tests for extraction over content control ranges."""

    def test_block_control_range(self, host):
        """A control's own range lists its content, not the control itself."""
        result = resolve_and_extract(host, ContentControlLocator(title="Clause"))

        assert result.metadata.locator_type == "contentControl"
        assert [e.text for e in result.elements] == ["Click here"]
        assert result.metadata.content_control_count == 0
        assert result.text == "Click here"

    def test_control_in_table_cell(self):
        """A control inside a cell yields its own paragraphs, not the table."""
        cell_control = (
            "<w:tbl><w:tr><w:tc><w:sdt>"
            '<w:sdtPr><w:tag w:val="name"/></w:sdtPr>'
            "<w:sdtContent><w:p><w:r><w:t>Jane Doe</w:t></w:r></w:p></w:sdtContent>"
            "</w:sdt></w:tc></w:tr></w:tbl>"
        )
        host = DocxHost.from_xml(make_document(cell_control))

        result = resolve_and_extract(host, ContentControlLocator(tag="name"))

        assert result.text == "Jane Doe"
        assert [(e.id, e.text) for e in result.elements] == [("range-para-0", "Jane Doe")]
        assert result.metadata.paragraph_count == 1
        assert result.metadata.table_count == 0
        assert result.metadata.character_count == len("Jane Doe")
        assert result.metadata.is_empty is False

    def test_control_wrapping_table_row(self):
        row_control = (
            "<w:tbl>"
            "<w:tr><w:tc><w:p><w:r><w:t>Item</w:t></w:r></w:p></w:tc></w:tr>"
            '<w:sdt><w:sdtPr><w:tag w:val="row"/></w:sdtPr><w:sdtContent>'
            "<w:tr><w:tc><w:p><w:r><w:t>Qty</w:t></w:r></w:p></w:tc>"
            "<w:tc><w:p><w:r><w:t>12</w:t></w:r></w:p></w:tc></w:tr>"
            "</w:sdtContent></w:sdt>"
            "</w:tbl>"
        )
        host = DocxHost.from_xml(make_document(row_control))

        result = resolve_and_extract(host, ContentControlLocator(tag="row"))

        assert [e.text for e in result.elements] == ["Qty", "12"]
        assert result.metadata.table_count == 0
        assert result.text == "Qty\n12"


class TestTableCellRanges:
    """Tests for ranges that start or end inside a table."""

    def test_span_of_cell_paragraphs(self, host):
        result = resolve_and_extract(host, ParagraphLocator(start_index=2, end_index=3))

        assert [e.text for e in result.elements] == ["L", "R"]
        assert result.metadata.table_count == 0
        assert result.metadata.character_count == 2

    def test_span_from_cell_to_body(self, host):
        """Paragraphs of a table outside the range are listed one by one."""
        result = resolve_and_extract(host, ParagraphLocator(start_index=3, end_index=5))

        assert [e.text for e in result.elements] == ["R", "Click here", "Last", "Click here"]
        assert [e.type for e in result.elements][-1] == ElementType.CONTENT_CONTROL


class TestSerialization:
    """Tests for dictionary output."""

    def test_element_dict(self, host):
        data = extract_all(host).to_dict()
        first = data["elements"][0]

        assert list(first)[:2] == ["id", "type"]
        assert first["type"] == "Paragraph"
        assert first["text"] == "Intro"
        assert all(value is not None for value in first.values())
        assert data["metadata"]["paragraph_count"] == 4
