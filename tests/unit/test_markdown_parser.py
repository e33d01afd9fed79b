#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_markdown_parser.py
"""Unit tests for Markdown to ADF conversion.

Tests cover:
- Headings, paragraphs, quotes and rules
- Bullet, ordered and task lists, including nested task lists
- Fenced code and CSV fences
- Tables, embedded HTML tables and CSV imports
- Expand blocks
- Images with and without uploads
- The macro-wrap path

"""

from pathlib import Path

import pytest

from doc2conf.adf.nodes import (
    Blockquote,
    BulletList,
    CodeBlock,
    Expand,
    Extension,
    Heading,
    ListItem,
    MediaSingle,
    OrderedList,
    Paragraph,
    Rule,
    Table,
    TableCell,
    TableHeader,
    TaskItem,
    TaskList,
    Text,
)
from doc2conf.exceptions import InvalidOptionsError
from doc2conf.options.conversion import ConversionOptions
from doc2conf.options.csv import CsvOptions
from doc2conf.parsers.macro import MacroWrapConverter
from doc2conf.parsers.markdown import MarkdownToAdfConverter


def _parse(source: str, **options):
    return MarkdownToAdfConverter(ConversionOptions(**options)).parse(source)


def _text(nodes) -> str:
    return "".join(node.text for node in nodes if isinstance(node, Text))


@pytest.mark.unit
class TestMarkdownBlocks:
    """Tests for simple block conversion."""

    def test_headings(self) -> None:
        """Test heading levels."""
        doc = _parse("# h1\n\n## h2")

        assert [type(node) for node in doc.content] == [Heading, Heading]
        assert [node.level for node in doc.content] == [1, 2]
        assert _text(doc.content[0].content) == "h1"

    def test_paragraph_with_marks(self) -> None:
        """Test that paragraph text is resolved inline."""
        doc = _parse("Some **bold** text")

        paragraph = doc.content[0]
        assert isinstance(paragraph, Paragraph)
        assert _text(paragraph.content) == "Some bold text"

    def test_blockquote(self) -> None:
        """Test block quotes holding paragraphs."""
        doc = _parse("> quoted words")

        quote = doc.content[0]
        assert isinstance(quote, Blockquote)
        assert _text(quote.content[0].content) == "quoted words"

    def test_thematic_break(self) -> None:
        """Test horizontal rules."""
        doc = _parse("before\n\n***\n\nafter")
        assert isinstance(doc.content[1], Rule)

    def test_raw_html_other_than_tables_is_dropped(self) -> None:
        """Test that non-table HTML blocks produce nothing."""
        doc = _parse("<div>\nhidden\n</div>\n\nkept")
        assert len(doc.content) == 1
        assert _text(doc.content[0].content) == "kept"

    def test_toc_macro_prepended(self) -> None:
        """Test the table of contents option."""
        doc = _parse("# Title", generate_toc=True)

        assert isinstance(doc.content[0], Extension)
        assert doc.content[0].extension_key == "toc"
        assert isinstance(doc.content[1], Heading)

    def test_wrong_options_type(self) -> None:
        """Test that foreign options classes are rejected."""
        with pytest.raises(InvalidOptionsError):
            MarkdownToAdfConverter(CsvOptions())  # type: ignore[arg-type]


@pytest.mark.unit
class TestMarkdownLists:
    """Tests for bullet, ordered and task lists."""

    def test_bullet_list(self) -> None:
        """Test a simple bullet list."""
        doc = _parse("- one\n- two")

        bullets = doc.content[0]
        assert isinstance(bullets, BulletList)
        assert [_text(item.content[0].content) for item in bullets.content] == ["one", "two"]

    def test_ordered_list_start(self) -> None:
        """Test that a non-default start number is kept."""
        doc = _parse("3. three\n4. four")

        ordered = doc.content[0]
        assert isinstance(ordered, OrderedList)
        assert ordered.order == 3

    def test_ordered_list_default_start_omitted(self) -> None:
        """Test that lists starting at 1 carry no order."""
        assert _parse("1. one\n2. two").content[0].order is None

    def test_task_list(self) -> None:
        """Test checkbox items becoming a task list."""
        doc = _parse("- [ ] A\n- [x] B")

        tasks = doc.content[0]
        assert isinstance(tasks, TaskList)
        assert [item.state for item in tasks.content] == ["TODO", "DONE"]
        assert [_text(item.content) for item in tasks.content] == ["A", "B"]

    def test_task_whole_text_emphasis(self) -> None:
        """Test that a task text made of one emphasis span keeps the mark."""
        doc = _parse("- [ ] **urgent**")

        item = doc.content[0].content[0]
        assert item.content[0].text == "urgent"
        assert item.content[0].marks[0].type == "strong"

    def test_task_partial_emphasis_stays_plain(self) -> None:
        """Test that mixed formatting inside a task is kept as plain text."""
        doc = _parse("- [ ] **a** and _b_")

        item = doc.content[0].content[0]
        assert item.content == (Text(text="**a** and _b_"),)

    def test_positional_local_ids(self) -> None:
        """Test positional ids: items first, then the list."""
        doc = _parse("- [ ] A\n- [x] B", local_ids="positional")

        tasks = doc.content[0]
        assert [item.local_id for item in tasks.content] == ["task-00000001", "task-00000002"]
        assert tasks.local_id == "task-00000003"

    def test_random_local_ids_are_unique(self) -> None:
        """Test that random ids differ within a document."""
        doc = _parse("- [ ] A\n- [ ] B\n- [ ] C")

        ids = [item.local_id for item in doc.content[0].content]
        assert len(set(ids)) == 3
        assert all(local_id.startswith("task-") for local_id in ids)

    def test_nested_numbered_task_list_in_bullet_item(self) -> None:
        """Test a numbered checkbox list nested inside an ordinary bullet item."""
        doc = _parse("- Parent\n  1. [ ] first\n  2. [x] second")

        item = doc.content[0].content[0]
        assert isinstance(item, ListItem)
        assert [type(node) for node in item.content] == [Paragraph, TaskList]
        assert _text(item.content[0].content) == "Parent"
        nested = item.content[1]
        assert [task.state for task in nested.content] == ["TODO", "DONE"]
        assert [_text(task.content) for task in nested.content] == ["first", "second"]

    def test_mixed_bulleted_and_numbered_nested_tasks(self) -> None:
        """Test that bulleted and numbered checkbox lines merge in source order."""
        doc = _parse("- Parent\n  - [ ] a\n  1. [x] b\n  - [ ] c")

        item = doc.content[0].content[0]
        assert [type(node) for node in item.content] == [Paragraph, TaskList]
        nested = item.content[1]
        assert [_text(task.content) for task in nested.content] == ["a", "b", "c"]
        assert [task.state for task in nested.content] == ["TODO", "DONE", "TODO"]

    def test_nested_blocks_keep_source_order(self) -> None:
        """Test that a block before the nested tasks stays before them."""
        doc = _parse("- Parent\n\n  > note first\n\n  - [ ] task after\n")

        item = doc.content[0].content[0]
        assert [type(node) for node in item.content] == [Paragraph, Blockquote, TaskList]
        assert _text(item.content[2].content[0].content) == "task after"

    def test_nested_task_list_in_task_item(self) -> None:
        """Test that task lists nest inside task lists."""
        doc = _parse("- [ ] outer\n  - [x] inner")

        tasks = doc.content[0]
        assert isinstance(tasks.content[0], TaskItem)
        assert isinstance(tasks.content[1], TaskList)
        assert tasks.content[1].content[0].state == "DONE"

    def test_nested_plain_list(self) -> None:
        """Test an ordinary nested list."""
        doc = _parse("- a\n  - b")

        item = doc.content[0].content[0]
        assert isinstance(item.content[0], Paragraph)
        assert isinstance(item.content[1], BulletList)


@pytest.mark.unit
class TestMarkdownCode:
    """Tests for fenced code blocks."""

    def test_code_block_language(self) -> None:
        """Test that the first info word is the language."""
        doc = _parse('```python title="x"\nprint(1)\n```')

        code = doc.content[0]
        assert isinstance(code, CodeBlock)
        assert code.language == "python"
        assert code.code == "print(1)"

    def test_code_block_without_language(self) -> None:
        """Test a fence without info."""
        code = _parse("```\nplain\n```").content[0]
        assert code.language is None

    def test_csv_fence_becomes_table(self) -> None:
        """Test that csv fences are parsed into tables."""
        doc = _parse("```csv\nh1,h2\nv1,v2\n```")

        table = doc.content[0]
        assert isinstance(table, Table)
        assert len(table.content) == 2

    def test_csv_fence_options(self) -> None:
        """Test options in the csv fence info string."""
        doc = _parse("```csv;delimiter=|;no-header\na|b\n```")

        table = doc.content[0]
        assert len(table.content) == 2
        assert len(table.content[0].content) == 2


@pytest.mark.unit
class TestMarkdownTables:
    """Tests for pipe tables, embedded HTML tables and CSV imports."""

    def test_pipe_table(self) -> None:
        """Test header and body rows of a pipe table."""
        doc = _parse("| a | b |\n|---|---|\n| 1 | 2 |")

        table = doc.content[0]
        assert isinstance(table, Table)
        assert all(isinstance(cell, TableHeader) for cell in table.content[0].content)
        assert all(type(cell) is TableCell for cell in table.content[1].content)
        assert _text(table.content[1].content[0].content[0].content) == "1"

    def test_embedded_html_table(self) -> None:
        """Test that an HTML table block is converted."""
        doc = _parse("<table><tr><th>H</th></tr><tr><td>V</td></tr></table>")

        table = doc.content[0]
        assert isinstance(table, Table)
        assert isinstance(table.content[0].content[0], TableHeader)
        assert _text(table.content[1].content[0].content[0].content) == "V"

    def test_csv_import(self, csv_file: Path) -> None:
        """Test that a csv image reference imports the file as a table."""
        doc = _parse("![csv](data.csv)", base_path=str(csv_file.parent))

        table = doc.content[0]
        assert isinstance(table, Table)
        assert len(table.content) == 3

    def test_image_with_csv_target(self, csv_file: Path) -> None:
        """Test that an ordinary image pointing at a csv file is imported."""
        doc = _parse("![stock](data.csv)", base_path=str(csv_file.parent))
        assert isinstance(doc.content[0], Table)

    def test_missing_csv_import_is_dropped(self, tmp_path: Path) -> None:
        """Test that an unreadable import produces no block."""
        doc = _parse("![csv](missing.csv)", base_path=str(tmp_path))
        assert doc.content == ()


@pytest.mark.unit
class TestMarkdownExpand:
    """Tests for the expand block syntax."""

    def test_expand_with_title(self) -> None:
        """Test an expand block with a title line."""
        doc = _parse(":::expand Details\nHidden text\n:::")

        expand = doc.content[0]
        assert isinstance(expand, Expand)
        assert expand.title == "Details"
        assert _text(expand.content[0].content) == "Hidden text"

    def test_expand_without_title(self) -> None:
        """Test the default expand title."""
        doc = _parse(":::expand Hidden text :::")

        expand = doc.content[0]
        assert expand.title == "Expand"
        assert _text(expand.content[0].content) == "Hidden text"

    def test_unterminated_expand_is_a_paragraph(self) -> None:
        """Test that an unterminated block stays ordinary text."""
        doc = _parse(":::expand never closed")
        assert isinstance(doc.content[0], Paragraph)


@pytest.mark.unit
class TestMarkdownImages:
    """Tests for images and uploads."""

    def test_external_image(self) -> None:
        """Test an image without uploads."""
        single = _parse("![logo](logo.png)").content[0]

        assert isinstance(single, MediaSingle)
        assert single.content[0].media_type == "external"
        assert single.content[0].url == "logo.png"

    def test_uploaded_image(self, tmp_path: Path, recording_uploader) -> None:
        """Test that local images are uploaded and referenced by asset id."""
        options = ConversionOptions(upload_images=True, space_key="DOCS", base_path=str(tmp_path))
        doc = MarkdownToAdfConverter(options, uploader=recording_uploader).parse("![logo](logo.png)")

        media = doc.content[0].content[0]
        assert media.media_type == "file"
        assert media.id == "att1"
        assert media.file_name == "logo.png"
        assert media.collection == "contentId"
        assert recording_uploader.calls[0][0] == "DOCS"
        assert recording_uploader.calls[0][1].name == "logo.png"

    def test_remote_image_not_uploaded(self, recording_uploader) -> None:
        """Test that remote images are never uploaded."""
        options = ConversionOptions(upload_images=True)
        doc = MarkdownToAdfConverter(options, uploader=recording_uploader).parse("![x](https://example.com/x.png)")

        assert recording_uploader.calls == []
        assert doc.content[0].content[0].url == "https://example.com/x.png"

    def test_failed_upload_falls_back(self, failing_uploader, caplog) -> None:
        """Test that an upload failure keeps an external reference."""
        options = ConversionOptions(upload_images=True)
        doc = MarkdownToAdfConverter(options, uploader=failing_uploader).parse("![logo](logo.png)")

        media = doc.content[0].content[0]
        assert media.media_type == "external"
        assert media.url == "logo.png"
        assert "Image upload failed" in caplog.text


@pytest.mark.unit
class TestMacroWrap:
    """Tests for wrapping the whole source in one macro."""

    def test_markdown_macro_body_is_trimmed_source(self) -> None:
        """Test that the markdown macro receives the trimmed source verbatim."""
        source = "\n  # Title\n\n- [ ] task\n\n"
        doc = MacroWrapConverter(ConversionOptions(macro_format="markdown")).parse(source)

        macro = doc.content[0]
        assert isinstance(macro, Extension)
        assert macro.extension_key == "markdown"
        assert macro.content[0].text == source.strip()

    def test_html_macro_renders_markdown(self) -> None:
        """Test that the html macro receives rendered HTML."""
        doc = MacroWrapConverter(ConversionOptions(macro_format="html")).parse("# Title")

        macro = doc.content[0]
        assert macro.extension_key == "html"
        assert "<h1>Title</h1>" in macro.content[0].text

    def test_default_is_markdown(self) -> None:
        """Test the default macro kind."""
        assert MacroWrapConverter().parse("x").content[0].extension_key == "markdown"
