#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_serialization.py
"""Unit tests for ADF wire serialization."""

import json

import pytest

from doc2conf.adf.builder import macro_extension
from doc2conf.adf.nodes import (
    CodeBlock,
    Document,
    Heading,
    Mark,
    Media,
    MediaSingle,
    OrderedList,
    Paragraph,
    TableCell,
    TaskItem,
    TaskList,
    Text,
    UnknownNode,
)
from doc2conf.adf.serialization import adf_to_dict, adf_to_json, dict_to_adf, json_to_adf
from doc2conf.exceptions import ValidationError


@pytest.mark.unit
class TestAdfToDict:
    """Tests for the node to dict direction."""

    def test_document_envelope(self) -> None:
        """Test the document keys."""
        assert adf_to_dict(Document()) == {"type": "doc", "version": 1, "content": []}

    def test_text_marks(self) -> None:
        """Test that marks are listed in order and attrs omitted when empty."""
        node = Text(text="x", marks=[Mark(type="strong"), Mark(type="link", attrs={"href": "https://e.com"})])
        assert adf_to_dict(node) == {
            "type": "text",
            "text": "x",
            "marks": [{"type": "strong"}, {"type": "link", "attrs": {"href": "https://e.com"}}],
        }

    def test_unset_attrs_are_dropped(self) -> None:
        """Test that None attributes do not appear on the wire."""
        assert "attrs" not in adf_to_dict(CodeBlock(content=[Text(text="x")]))
        assert "attrs" not in adf_to_dict(OrderedList())
        assert adf_to_dict(Heading(level=3))["attrs"] == {"level": 3}

    def test_task_attrs(self) -> None:
        """Test task list and task item attributes."""
        tasks = TaskList(local_id="list-1", content=[TaskItem(local_id="item-1", state="DONE")])
        data = adf_to_dict(tasks)

        assert data["attrs"] == {"localId": "list-1"}
        assert data["content"][0]["attrs"] == {"localId": "item-1", "state": "DONE"}

    def test_cells_always_carry_spans(self) -> None:
        """Test that cells keep colspan and rowspan even at 1."""
        data = adf_to_dict(TableCell(content=[Paragraph()]))
        assert data["attrs"] == {"colspan": 1, "rowspan": 1}

    def test_media_file_name_key(self) -> None:
        """Test the wire name of the media file name."""
        media = Media(media_type="file", id="att1", collection="contentId", file_name="logo.png")
        data = adf_to_dict(MediaSingle(content=[media]))

        assert data["attrs"] == {"layout": "center"}
        assert data["content"][0] == {
            "type": "media",
            "attrs": {"type": "file", "id": "att1", "collection": "contentId", "__fileName": "logo.png"},
        }

    def test_extension(self) -> None:
        """Test extension attributes and text body."""
        data = adf_to_dict(macro_extension("markdown", "# x"))

        assert data["attrs"] == {
            "extensionType": "com.atlassian.confluence.macro.core",
            "extensionKey": "markdown",
            "parameters": {"macroParams": {}},
        }
        assert data["content"] == [{"type": "text", "text": "# x"}]

    def test_non_node_rejected(self) -> None:
        """Test that plain objects cannot be serialized."""
        with pytest.raises(ValidationError):
            adf_to_dict({"type": "doc"})  # type: ignore[arg-type]

    def test_json_keeps_unicode(self) -> None:
        """Test that JSON output is not ASCII-escaped."""
        result = adf_to_json(Document(content=[Paragraph(content=[Text(text="✓ done")])]))
        assert "✓ done" in result
        assert json.loads(result)["type"] == "doc"


@pytest.mark.unit
class TestDictToAdf:
    """Tests for the dict to node direction."""

    def test_known_nodes(self) -> None:
        """Test that known types map to their classes."""
        data = {
            "type": "doc",
            "version": 1,
            "content": [
                {"type": "heading", "attrs": {"level": 2}, "content": [{"type": "text", "text": "T"}]},
                {"type": "taskList", "attrs": {"localId": "l"}, "content": [
                    {"type": "taskItem", "attrs": {"localId": "i", "state": "DONE"}, "content": []},
                ]},
            ],
        }
        doc = dict_to_adf(data)

        assert isinstance(doc, Document)
        assert doc.content[0] == Heading(level=2, content=[Text(text="T")])
        assert doc.content[1].content[0].done

    def test_wire_dict_is_preserved(self) -> None:
        """Test that serializing a parsed dict gives the same dict back."""
        data = {
            "type": "doc",
            "version": 1,
            "content": [
                {
                    "type": "paragraph",
                    "content": [
                        {"type": "text", "text": "a", "marks": [{"type": "em"}]},
                        {"type": "status", "attrs": {"text": "OK", "color": "green"}},
                    ],
                }
            ],
        }
        assert adf_to_dict(dict_to_adf(data)) == data

    def test_unknown_type_is_kept(self) -> None:
        """Test that unmodelled types survive with their attrs and children."""
        data = {
            "type": "layoutSection",
            "attrs": {"width": 2},
            "content": [{"type": "paragraph", "content": [{"type": "text", "text": "c"}]}],
        }
        node = dict_to_adf(data)

        assert isinstance(node, UnknownNode)
        assert node.node_type == "layoutSection"
        assert node.attrs == {"width": 2}
        assert adf_to_dict(node) == data

    @pytest.mark.parametrize(
        "data",
        [
            [],
            {"content": []},
            {"type": 3},
            {"type": "paragraph", "attrs": "x"},
            {"type": "paragraph", "content": "text"},
            {"type": "heading", "attrs": {"level": "two"}},
        ],
    )
    def test_malformed_input(self, data) -> None:
        """Test that malformed wire data raises ValidationError."""
        with pytest.raises(ValidationError):
            dict_to_adf(data)

    def test_json_to_adf(self) -> None:
        """Test parsing from JSON text."""
        doc = json_to_adf('{"type": "doc", "version": 1, "content": []}')
        assert doc == Document()

    def test_invalid_json(self) -> None:
        """Test that unparsable JSON raises ValidationError."""
        with pytest.raises(ValidationError, match="Invalid ADF JSON"):
            json_to_adf("{not json")
