"""Command-line interface for docx-query.

Provides read-only commands for inspecting the structure and content of Word
documents from the terminal.
"""

import json
import logging
from dataclasses import asdict
from enum import Enum
from pathlib import Path
from typing import Annotated, Any

import typer
import yaml

from . import __version__
from .comments import CommentOptions
from .document import Document
from .errors import DocxQueryError, ValidationError
from .extractor import ExtractOptions
from .outline import OutlineOptions, serialize_json, serialize_markdown, serialize_yaml
from .resolver import load_locator_file
from .textboxes import TextBoxOptions
from .types import (
    BookmarkLocator,
    ContentControlLocator,
    HeadingLocator,
    ParagraphLocator,
    RangeLocator,
    SectionLocator,
)

app = typer.Typer(
    name="docx-query",
    help="Query the outline and content of Word documents from the command line.",
    no_args_is_help=True,
)


class OutputFormat(str, Enum):
    yaml = "yaml"
    json = "json"


class OutlineFormat(str, Enum):
    markdown = "markdown"
    json = "json"
    yaml = "yaml"


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"docx-query version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", help="Log debug output to stderr.")
    ] = False,
) -> None:
    """Query the outline and content of Word documents from the command line."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


def _emit(data: Any, output_format: OutputFormat) -> None:
    if output_format == OutputFormat.json:
        typer.echo(json.dumps(data, indent=2, ensure_ascii=False))
    else:
        typer.echo(
            yaml.safe_dump(data, sort_keys=False, allow_unicode=True).rstrip("\n")
        )


def _fail(error: Exception) -> None:
    typer.echo(f"Error: {error}", err=True)
    raise typer.Exit(1)


FileArgument = Annotated[Path, typer.Argument(help="Path to the .docx file")]
FormatOption = Annotated[
    OutputFormat, typer.Option("--format", "-f", help="Output format.")
]


@app.command()
def outline(
    file: FileArgument,
    output_format: Annotated[
        OutlineFormat, typer.Option("--format", "-f", help="Output format.")
    ] = OutlineFormat.markdown,
    max_depth: Annotated[
        int | None, typer.Option("--max-depth", "-d", help="Deepest heading level to show")
    ] = None,
    levels: Annotated[
        list[int] | None,
        typer.Option("--level", "-l", help="Only show this heading level (repeatable)"),
    ] = None,
    include_format: Annotated[
        bool, typer.Option("--include-format", help="Include heading formatting")
    ] = False,
    indent: Annotated[
        bool, typer.Option("--indent", help="Indent nested Markdown headings")
    ] = False,
) -> None:
    """Show the heading outline of a document."""
    try:
        doc = Document(file)
        options = OutlineOptions(
            max_depth=max_depth,
            specific_levels=set(levels) if levels else None,
            include_format=include_format,
        )
        result = doc.outline(options)
        if output_format == OutlineFormat.markdown:
            typer.echo(serialize_markdown(result, indent=indent))
        elif output_format == OutlineFormat.json:
            typer.echo(serialize_json(result))
        else:
            typer.echo(serialize_yaml(result).rstrip("\n"))
    except DocxQueryError as e:
        _fail(e)


def _parse_paragraph_span(value: str) -> ParagraphLocator:
    start, _, end = value.partition(":")
    try:
        return ParagraphLocator(
            start_index=int(start), end_index=int(end) if end else None
        )
    except ValueError as e:
        raise ValidationError(f"Invalid paragraph span {value!r}, expected START[:END]") from e


def _build_locator(
    bookmark: str | None,
    heading: str | None,
    level: int | None,
    index: int | None,
    paragraphs: str | None,
    section: int | None,
    control_title: str | None,
    control_tag: str | None,
    locator_file: Path | None,
) -> RangeLocator:
    candidates: list[RangeLocator] = []
    if bookmark is not None:
        candidates.append(BookmarkLocator(name=bookmark))
    controls_given = control_title is not None or control_tag is not None
    if heading is not None or (level is not None and not controls_given):
        candidates.append(HeadingLocator(text=heading, level=level, index=index))
    if paragraphs is not None:
        candidates.append(_parse_paragraph_span(paragraphs))
    if section is not None:
        candidates.append(SectionLocator(index=section))
    if controls_given:
        candidates.append(
            ContentControlLocator(title=control_title, tag=control_tag, index=index)
        )
    if locator_file is not None:
        candidates.append(load_locator_file(locator_file))

    if len(candidates) != 1:
        raise ValidationError(
            "Specify exactly one of --bookmark, --heading/--level, --paragraphs, "
            "--section, --control-title/--control-tag or --locator-file"
        )

    locator = candidates[0]
    if locator_file is not None and (level is not None or index is not None):
        raise ValidationError("--level and --index cannot be combined with --locator-file")
    if level is not None and not isinstance(locator, HeadingLocator):
        raise ValidationError("--level only applies to heading locators")
    if index is not None and not isinstance(locator, (HeadingLocator, ContentControlLocator)):
        raise ValidationError(
            "--index only applies to --heading/--level and --control-title/--control-tag"
        )
    return locator


@app.command("range")
def range_content(
    file: FileArgument,
    bookmark: Annotated[str | None, typer.Option("--bookmark", help="Bookmark name")] = None,
    heading: Annotated[
        str | None, typer.Option("--heading", help="Heading text (substring)")
    ] = None,
    level: Annotated[int | None, typer.Option("--level", help="Heading level")] = None,
    index: Annotated[
        int | None, typer.Option("--index", help="Which match to use (0-based)")
    ] = None,
    paragraphs: Annotated[
        str | None, typer.Option("--paragraphs", help="Paragraph span START[:END]")
    ] = None,
    section: Annotated[int | None, typer.Option("--section", help="Section index")] = None,
    control_title: Annotated[
        str | None, typer.Option("--control-title", help="Content control title (substring)")
    ] = None,
    control_tag: Annotated[
        str | None, typer.Option("--control-tag", help="Content control tag")
    ] = None,
    locator_file: Annotated[
        Path | None, typer.Option("--locator-file", help="YAML/JSON file holding a locator")
    ] = None,
    text: Annotated[bool, typer.Option("--text/--no-text", help="Include text")] = True,
    images: Annotated[bool, typer.Option("--images/--no-images", help="Include images")] = True,
    tables: Annotated[bool, typer.Option("--tables/--no-tables", help="Include tables")] = True,
    controls: Annotated[
        bool, typer.Option("--controls/--no-controls", help="Include content controls")
    ] = True,
    max_text_length: Annotated[
        int | None, typer.Option("--max-text-length", help="Truncate element text")
    ] = None,
    detailed: Annotated[bool, typer.Option("--detailed", help="Include detailed metadata")] = False,
    output_format: FormatOption = OutputFormat.yaml,
) -> None:
    """Show the content of a bookmark, heading, paragraph span, section or control."""
    try:
        locator = _build_locator(
            bookmark,
            heading,
            level,
            index,
            paragraphs,
            section,
            control_title,
            control_tag,
            locator_file,
        )
        options = ExtractOptions(
            include_text=text,
            include_images=images,
            include_tables=tables,
            include_content_controls=controls,
            detailed_metadata=detailed,
            max_text_length=max_text_length,
        )
        result = Document(file).get_range_content(locator, options)
        _emit(result.to_dict(), output_format)
    except (DocxQueryError, FileNotFoundError) as e:
        _fail(e)


@app.command()
def page(
    file: FileArgument,
    number: Annotated[int, typer.Argument(help="Page number (1-based)")],
    stats: Annotated[bool, typer.Option("--stats", help="Show counts only")] = False,
    max_text_length: Annotated[
        int | None, typer.Option("--max-text-length", help="Truncate element text")
    ] = None,
    detailed: Annotated[bool, typer.Option("--detailed", help="Include detailed metadata")] = False,
    output_format: FormatOption = OutputFormat.yaml,
) -> None:
    """Show the content of one page, as delimited by page breaks in the file."""
    try:
        doc = Document(file)
        if stats:
            data = asdict(doc.get_page_stats(number))
        else:
            options = ExtractOptions(detailed_metadata=detailed, max_text_length=max_text_length)
            data = doc.get_page_content(number, options).to_dict()
        _emit(data, output_format)
    except DocxQueryError as e:
        _fail(e)


@app.command()
def comments(
    file: FileArgument,
    duplicates: Annotated[
        bool, typer.Option("--duplicates", help="Only show comments sharing anchor text")
    ] = False,
    resolved: Annotated[
        bool, typer.Option("--resolved/--no-resolved", help="Include resolved comments")
    ] = True,
    replies: Annotated[bool, typer.Option("--replies/--no-replies", help="Include replies")] = True,
    detailed: Annotated[bool, typer.Option("--detailed", help="Include author and date")] = False,
    max_text_length: Annotated[
        int | None, typer.Option("--max-text-length", help="Truncate comment text")
    ] = None,
    output_format: FormatOption = OutputFormat.yaml,
) -> None:
    """List comments, or groups of comments anchored to identical text."""
    try:
        doc = Document(file)
        options = CommentOptions(
            include_resolved=resolved,
            include_replies=replies,
            detailed_metadata=detailed,
            max_text_length=max_text_length,
        )
        records = doc.get_comments(options)
        if duplicates:
            data = [group.to_dict() for group in doc.find_duplicate_references(records)]
        else:
            data = [record.to_dict() for record in records]
        _emit(data, output_format)
    except DocxQueryError as e:
        _fail(e)


@app.command()
def textboxes(
    file: FileArgument,
    paragraphs: Annotated[
        bool, typer.Option("--paragraphs", help="Include paragraph elements")
    ] = False,
    detailed: Annotated[bool, typer.Option("--detailed", help="Include detailed metadata")] = False,
    output_format: FormatOption = OutputFormat.yaml,
) -> None:
    """List the text boxes of a document."""
    try:
        doc = Document(file)
        options = TextBoxOptions(include_paragraphs=paragraphs, detailed_metadata=detailed)
        _emit([box.to_dict() for box in doc.get_text_boxes(options)], output_format)
    except DocxQueryError as e:
        _fail(e)


@app.command()
def info(file: FileArgument) -> None:
    """Show document information."""
    try:
        doc = Document(file)
        host = doc.host
        typer.echo(f"File: {file}")
        typer.echo(f"Paragraphs: {doc.paragraph_count}")
        typer.echo(f"Tables: {len(host.list_tables())}")
        typer.echo(f"Sections: {doc.section_count}")
        typer.echo(f"Pages: {doc.page_count}")
        typer.echo(f"Headings: {len(host.list_headings())}")
        typer.echo(f"Bookmarks: {len(host.bookmark_names)}")
        typer.echo(f"Content controls: {len(host.list_content_controls())}")
        typer.echo(f"Comments: {len(host.comments)}")
        typer.echo(f"Text boxes: {len(host.text_boxes)}")
    except DocxQueryError as e:
        _fail(e)


if __name__ == "__main__":
    app()
