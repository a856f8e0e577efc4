"""
Tests for locator resolution.

These tests verify:
- Bookmark, heading, paragraph, section and content control locators
- Match selection by index in document order
- NotFound / OutOfRange / Validation errors
- Locator parsing from dictionaries and YAML/JSON files
"""

import json

import pytest

from docx_query import (
    BookmarkLocator,
    ContentControlLocator,
    DocxHost,
    HeadingLocator,
    LocatorResolver,
    NotFoundError,
    OutOfRangeError,
    ParagraphLocator,
    RangeHandle,
    SectionLocator,
    ValidationError,
    load_locator_file,
    locator_from_dict,
)

WORD_NS = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"

# Blocks: 0 "Ch A", 1 "Body A", 2 "More A" (closes section 0), 3 "Ch B",
# 4 table, 5-8 its cells "a" to "d", 9 "Signed" (block control),
# 10 "End " + inline date control. Paragraph indices skip the table: "a" is
# paragraph 4 and "End " is paragraph 9.
DOCUMENT_XML = f"""<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<w:document xmlns:w="{WORD_NS}">
  <w:body>
    <w:p>
      <w:pPr><w:pStyle w:val="Heading1"/></w:pPr>
      <w:r><w:t>Ch A</w:t></w:r>
    </w:p>
    <w:p>
      <w:bookmarkStart w:id="0" w:name="Terms"/>
      <w:r><w:t>Body A</w:t></w:r>
    </w:p>
    <w:p>
      <w:pPr><w:sectPr/></w:pPr>
      <w:r><w:t>More A</w:t></w:r>
      <w:bookmarkEnd w:id="0"/>
    </w:p>
    <w:bookmarkStart w:id="1" w:name="Gap"/>
    <w:p>
      <w:pPr><w:pStyle w:val="Heading1"/></w:pPr>
      <w:r><w:t>Ch B</w:t></w:r>
    </w:p>
    <w:bookmarkEnd w:id="1"/>
    <w:tbl>
      <w:tblGrid><w:gridCol w:w="2880"/><w:gridCol w:w="2880"/></w:tblGrid>
      <w:tr>
        <w:tc><w:p><w:r><w:t>a</w:t></w:r></w:p></w:tc>
        <w:tc><w:p><w:r><w:t>b</w:t></w:r></w:p></w:tc>
      </w:tr>
      <w:tr>
        <w:tc><w:p><w:r><w:t>c</w:t></w:r></w:p></w:tc>
        <w:tc><w:p><w:r><w:t>d</w:t></w:r></w:p></w:tc>
      </w:tr>
    </w:tbl>
    <w:sdt>
      <w:sdtPr><w:alias w:val="Signature"/><w:tag w:val="sig"/></w:sdtPr>
      <w:sdtContent>
        <w:p><w:r><w:t>Signed</w:t></w:r></w:p>
      </w:sdtContent>
    </w:sdt>
    <w:p>
      <w:r><w:t xml:space="preserve">End </w:t></w:r>
      <w:sdt>
        <w:sdtPr><w:alias w:val="Date"/><w:tag w:val="date"/><w:date/></w:sdtPr>
        <w:sdtContent><w:r><w:t>2024-01-01</w:t></w:r></w:sdtContent>
      </w:sdt>
    </w:p>
    <w:sectPr/>
  </w:body>
</w:document>"""


def make_simple_document(count: int) -> str:
    """Create a document with paragraphs P0..P{count-1}."""
    body = "".join(f"<w:p><w:r><w:t>P{i}</w:t></w:r></w:p>" for i in range(count))
    return f'<w:document xmlns:w="{WORD_NS}"><w:body>{body}</w:body></w:document>'


@pytest.fixture
def host():
    return DocxHost.from_xml(DOCUMENT_XML)


@pytest.fixture
def resolver(host):
    return LocatorResolver(host)


class TestBookmarkLocator:
    """Tests for bookmark resolution."""

    def test_bookmark_spans_start_to_end_blocks(self, host, resolver):
        rng = resolver.resolve(BookmarkLocator(name="Terms"))

        assert (rng.start, rng.end) == (1, 2)
        assert host.range_text(rng) == "Body A\nMore A"

    def test_bookmark_between_blocks(self, host, resolver):
        """Body-level bookmark markers snap to the blocks they enclose."""
        rng = resolver.resolve(BookmarkLocator(name="Gap"))

        assert host.range_text(rng) == "Ch B"

    def test_bookmark_names(self, host):
        assert host.bookmark_names == ["Terms", "Gap"]

    def test_missing_bookmark(self, resolver):
        with pytest.raises(NotFoundError, match="Missing") as exc_info:
            resolver.resolve(BookmarkLocator(name="Missing"))

        assert exc_info.value.kind == "bookmark"
        assert exc_info.value.criteria == {"name": "Missing"}

    def test_empty_bookmark_name(self, resolver):
        with pytest.raises(ValidationError):
            resolver.resolve(BookmarkLocator(name=""))


class TestHeadingLocator:
    """Tests for heading resolution."""

    def test_substring_match_selects_by_index(self, host, resolver):
        """index selects among matches in document order."""
        rng = resolver.resolve(HeadingLocator(text="Ch", index=1))

        assert host.range_text(rng) == "Ch B"

    def test_first_match_by_default(self, host, resolver):
        rng = resolver.resolve(HeadingLocator(text="Ch"))

        assert host.range_text(rng) == "Ch A"
        assert (rng.start, rng.end) == (0, 0)

    def test_index_past_matches(self, resolver):
        """Selecting past the last match reports how many matched."""
        with pytest.raises(NotFoundError) as exc_info:
            resolver.resolve(HeadingLocator(text="Ch", index=2))

        assert exc_info.value.match_count == 2
        assert "2 candidate(s)" in str(exc_info.value)

    def test_level_only(self, host, resolver):
        rng = resolver.resolve(HeadingLocator(level=1, index=1))

        assert host.range_text(rng) == "Ch B"

    def test_level_filters_matches(self, resolver):
        with pytest.raises(NotFoundError) as exc_info:
            resolver.resolve(HeadingLocator(text="Ch", level=2))

        assert exc_info.value.match_count == 0

    def test_text_not_found(self, resolver):
        with pytest.raises(NotFoundError, match="Appendix"):
            resolver.resolve(HeadingLocator(text="Appendix"))

    def test_negative_index_rejected(self, resolver):
        with pytest.raises(ValidationError):
            resolver.resolve(HeadingLocator(text="Ch", index=-1))

    def test_level_below_one_rejected(self, resolver):
        with pytest.raises(ValidationError):
            resolver.resolve(HeadingLocator(level=0))


class TestParagraphLocator:
    """Tests for paragraph span resolution."""

    def test_span_covers_paragraphs(self):
        host = DocxHost.from_xml(make_simple_document(3))
        rng = LocatorResolver(host).resolve(ParagraphLocator(start_index=0, end_index=1))

        assert host.range_text(rng) == "P0\nP1"

    def test_single_paragraph(self):
        host = DocxHost.from_xml(make_simple_document(3))
        rng = LocatorResolver(host).resolve(ParagraphLocator(start_index=2))

        assert host.range_text(rng) == "P2"

    def test_start_out_of_range(self):
        host = DocxHost.from_xml(make_simple_document(3))

        with pytest.raises(OutOfRangeError) as exc_info:
            LocatorResolver(host).resolve(ParagraphLocator(start_index=5))

        assert exc_info.value.kind == "paragraph"
        assert exc_info.value.index == 5
        assert exc_info.value.bound == 3

    def test_end_out_of_range(self):
        host = DocxHost.from_xml(make_simple_document(3))

        with pytest.raises(OutOfRangeError):
            LocatorResolver(host).resolve(ParagraphLocator(start_index=0, end_index=3))

    def test_end_before_start(self):
        """The message names the start of the span as the lower bound."""
        host = DocxHost.from_xml(make_simple_document(3))

        with pytest.raises(OutOfRangeError, match=r"valid: 2-2") as exc_info:
            LocatorResolver(host).resolve(ParagraphLocator(start_index=2, end_index=1))

        assert exc_info.value.index == 1
        assert exc_info.value.lower == 2

    def test_negative_start_rejected(self):
        host = DocxHost.from_xml(make_simple_document(3))

        with pytest.raises(ValidationError):
            LocatorResolver(host).resolve(ParagraphLocator(start_index=-1))

    def test_empty_document(self):
        host = DocxHost.from_xml(make_simple_document(0))

        with pytest.raises(OutOfRangeError, match="no paragraphs"):
            LocatorResolver(host).resolve(ParagraphLocator(start_index=0))

    def test_span_includes_blocks_between_paragraphs(self, host, resolver):
        """A paragraph span covers tables and controls lying between its ends."""
        rng = resolver.resolve(ParagraphLocator(start_index=3, end_index=8))

        assert (rng.start, rng.end) == (3, 9)
        assert len(host.list_tables(rng)) == 1
        assert [c.title for c in host.list_content_controls(rng)] == ["Signature"]
        assert host.range_text(rng) == "Ch B\na\tb\nc\td\nSigned"


class TestTableCellParagraphs:
    """Tests for paragraphs inside table cells."""

    def test_cell_paragraphs_are_indexed(self, host):
        paragraphs = host.list_paragraphs()

        assert host.paragraph_count == 10
        assert [p.text for p in paragraphs[3:9]] == ["Ch B", "a", "b", "c", "d", "Signed"]
        assert [p.index for p in paragraphs] == list(range(10))

    def test_span_inside_table(self, host, resolver):
        """A span of cell paragraphs lists them without their table."""
        rng = resolver.resolve(ParagraphLocator(start_index=5, end_index=6))

        assert host.range_text(rng) == "b\nc"
        assert [p.text for p in host.list_paragraphs(rng)] == ["b", "c"]
        assert host.list_tables(rng) == []

    def test_paragraphs_of_listed_table_are_not_repeated(self, host, resolver):
        rng = resolver.resolve(SectionLocator(index=1))

        assert [p.text for p in host.list_paragraphs(rng)] == ["Ch B", "Signed", "End 2024-01-01"]

    def test_heading_in_table_cell(self):
        doc = (
            f'<w:document xmlns:w="{WORD_NS}"><w:body>'
            "<w:p><w:r><w:t>Before</w:t></w:r></w:p>"
            '<w:tbl><w:tr><w:tc><w:p><w:pPr><w:pStyle w:val="Heading1"/></w:pPr>'
            "<w:r><w:t>Cell heading</w:t></w:r></w:p></w:tc></w:tr></w:tbl>"
            "<w:p><w:r><w:t>After</w:t></w:r></w:p>"
            "</w:body></w:document>"
        )
        host = DocxHost.from_xml(doc)

        rng = LocatorResolver(host).resolve(HeadingLocator(text="Cell"))

        assert host.paragraph_count == 3
        assert host.range_text(rng) == "Cell heading"
        assert host.list_tables(rng) == []

    def test_bookmark_ending_inside_table(self):
        """A bookmarkEnd held by the table covers the table's cells."""
        doc = (
            f'<w:document xmlns:w="{WORD_NS}"><w:body>'
            '<w:p><w:bookmarkStart w:id="0" w:name="Grid"/><w:r><w:t>Top</w:t></w:r></w:p>'
            "<w:tbl><w:tr><w:tc><w:p><w:r><w:t>x</w:t></w:r></w:p></w:tc></w:tr>"
            '<w:bookmarkEnd w:id="0"/></w:tbl>'
            "<w:p><w:r><w:t>Bottom</w:t></w:r></w:p>"
            "</w:body></w:document>"
        )
        host = DocxHost.from_xml(doc)

        rng = LocatorResolver(host).resolve(BookmarkLocator(name="Grid"))

        assert (rng.start, rng.end) == (0, 2)
        assert host.range_text(rng) == "Top\nx"

    def test_control_in_table_cell(self):
        doc = (
            f'<w:document xmlns:w="{WORD_NS}"><w:body>'
            "<w:tbl><w:tr><w:tc><w:sdt>"
            '<w:sdtPr><w:tag w:val="name"/></w:sdtPr>'
            "<w:sdtContent><w:p><w:r><w:t>Jane Doe</w:t></w:r></w:p></w:sdtContent>"
            "</w:sdt></w:tc></w:tr></w:tbl>"
            "</w:body></w:document>"
        )
        host = DocxHost.from_xml(doc)

        rng = LocatorResolver(host).resolve(ContentControlLocator(tag="name"))

        assert host.range_text(rng) == "Jane Doe"
        assert [p.text for p in host.list_paragraphs(rng)] == ["Jane Doe"]
        assert host.list_tables(rng) == []


class TestSectionLocator:
    """Tests for section resolution."""

    def test_section_count(self, host):
        assert host.section_count == 2

    def test_first_section(self, host, resolver):
        rng = resolver.resolve(SectionLocator(index=0))

        assert host.range_text(rng) == "Ch A\nBody A\nMore A"

    def test_last_section(self, host, resolver):
        rng = resolver.resolve(SectionLocator(index=1))

        assert host.range_text(rng) == "Ch B\na\tb\nc\td\nSigned\nEnd 2024-01-01"

    def test_section_out_of_range(self, resolver):
        with pytest.raises(OutOfRangeError, match="valid: 0-1"):
            resolver.resolve(SectionLocator(index=2))

    def test_negative_section_rejected(self, resolver):
        with pytest.raises(ValidationError):
            resolver.resolve(SectionLocator(index=-1))

    def test_document_without_section_breaks(self):
        host = DocxHost.from_xml(make_simple_document(2))

        assert host.section_count == 1
        rng = LocatorResolver(host).resolve(SectionLocator(index=0))
        assert host.range_text(rng) == "P0\nP1"


class TestContentControlLocator:
    """Tests for content control resolution."""

    def test_block_control_by_title(self, host, resolver):
        rng = resolver.resolve(ContentControlLocator(title="Sign"))

        assert (rng.start, rng.end) == (9, 9)
        assert host.range_text(rng) == "Signed"

    def test_inline_control_by_tag(self, host, resolver):
        """An inline control's text is only the control content."""
        rng = resolver.resolve(ContentControlLocator(tag="date"))

        assert host.range_text(rng) == "2024-01-01"
        assert [p.text for p in host.list_paragraphs(rng)] == ["End 2024-01-01"]
        assert host.list_tables(rng) == []

    def test_tag_must_match_exactly(self, resolver):
        with pytest.raises(NotFoundError):
            resolver.resolve(ContentControlLocator(tag="da"))

    def test_title_and_tag_combined(self, resolver):
        with pytest.raises(NotFoundError) as exc_info:
            resolver.resolve(ContentControlLocator(title="Signature", tag="date"))

        assert exc_info.value.kind == "content control"

    def test_no_match(self, resolver):
        with pytest.raises(NotFoundError, match="Nope"):
            resolver.resolve(ContentControlLocator(title="Nope"))


class TestResolverMisc:
    """Tests for unsupported input and range helpers."""

    def test_unsupported_locator(self, resolver):
        with pytest.raises(ValidationError, match="Unsupported"):
            resolver.resolve("heading")

    def test_expand_to(self):
        rng = RangeHandle(3, 4).expand_to(RangeHandle(1, 2))

        assert (rng.start, rng.end) == (1, 4)

    def test_expand_empty(self):
        rng = RangeHandle(0, -1).expand_to(RangeHandle(2, 3))

        assert (rng.start, rng.end) == (2, 3)
        assert RangeHandle(0, -1).is_empty


class TestLocatorFromDict:
    """Tests for tagged-dictionary locators."""

    def test_heading(self):
        locator = locator_from_dict({"type": "heading", "text": "Intro", "level": 1})

        assert locator == HeadingLocator(text="Intro", level=1)

    def test_paragraph_camel_case(self):
        locator = locator_from_dict({"type": "paragraph", "startIndex": 2, "endIndex": 4})

        assert locator == ParagraphLocator(start_index=2, end_index=4)

    def test_content_control_type_spellings(self):
        for tag in ("contentControl", "content_control", "ContentControl"):
            assert locator_from_dict({"type": tag, "tag": "x"}) == ContentControlLocator(tag="x")

    def test_unknown_type(self):
        with pytest.raises(ValidationError, match="Unsupported locator type"):
            locator_from_dict({"type": "page", "index": 1})

    def test_unknown_field(self):
        with pytest.raises(ValidationError) as exc_info:
            locator_from_dict({"type": "bookmark", "name": "A", "color": "red"})

        assert exc_info.value.errors == ["color"]

    def test_missing_required_field(self):
        with pytest.raises(ValidationError):
            locator_from_dict({"type": "section"})

    def test_not_a_mapping(self):
        with pytest.raises(ValidationError):
            locator_from_dict(["heading"])


class TestLoadLocatorFile:
    """Tests for YAML/JSON locator files."""

    def test_yaml_with_locator_key(self, tmp_path):
        path = tmp_path / "locator.yaml"
        path.write_text("locator:\n  type: heading\n  text: Introduction\n  level: 1\n")

        assert load_locator_file(path) == HeadingLocator(text="Introduction", level=1)

    def test_bare_yaml(self, tmp_path):
        path = tmp_path / "locator.yml"
        path.write_text("type: section\nindex: 2\n")

        assert load_locator_file(path) == SectionLocator(index=2)

    def test_json(self, tmp_path):
        path = tmp_path / "locator.json"
        path.write_text(json.dumps({"type": "bookmark", "name": "Terms"}))

        assert load_locator_file(str(path)) == BookmarkLocator(name="Terms")

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_locator_file(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("type: [unclosed\n")

        with pytest.raises(ValidationError, match="YAML"):
            load_locator_file(path)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")

        with pytest.raises(ValidationError, match="JSON"):
            load_locator_file(path)

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- heading\n")

        with pytest.raises(ValidationError, match="dictionary"):
            load_locator_file(path)
