"""Tests for BlockTransformer: one raw record to one AST node."""

import pytest
from conftest import make_block

from notionast.config import NastConfig
from notionast.converter.block_transformer import (
    BlockTransformer,
    group_list_items,
    supported_types,
)
from notionast.models import (
    AliasNode,
    CodeNode,
    ColumnNode,
    EquationNode,
    HeadingNode,
    ListItemNode,
    MediaNode,
    Node,
    NodeType,
    PageNode,
    RawBlockRecord,
    StyledRun,
    TableNode,
    TextNode,
    ToDoNode,
    UnsupportedNode,
    WarningCode,
)

BLOCK_ID = "0eeee000-cccc-bbbb-aaaa-123450000000"
TARGET_NO_DASH = "1fffff00ccccbbbbaaaa123450000000"
TARGET_DASH = "1fffff00-cccc-bbbb-aaaa-123450000000"
SIGNED_URL = "https://s3.us-west-2.amazonaws.com/secure.notion-static.com/abc/img.png"


def record(block_type, **kwargs):
    return RawBlockRecord.from_dict(make_block(BLOCK_ID, block_type, **kwargs))


def list_item(block_id, ordered=False):
    return ListItemNode(id=block_id, type=NodeType.LIST_ITEM, ordered=ordered)


# =========================================================================
# Text-like blocks
# =========================================================================


class TestTextBlocks:
    def test_text(self, transformer):
        node = transformer.transform(record("text", title=[["Hi", [["b"]]]]))
        assert isinstance(node, TextNode)
        assert node.type is NodeType.TEXT
        assert node.id == BLOCK_ID
        assert node.title[0].text == "Hi"

    def test_text_without_title(self, transformer):
        node = transformer.transform(record("text"))
        assert node.title == ()

    @pytest.mark.parametrize(
        "block_type, level",
        [("header", 1), ("sub_header", 2), ("sub_sub_header", 3)],
    )
    def test_headings(self, transformer, block_type, level):
        node = transformer.transform(record(block_type, title=[["H"]]))
        assert isinstance(node, HeadingNode)
        assert node.level == level

    def test_quote_and_toggle(self, transformer):
        assert transformer.transform(record("quote")).type is NodeType.QUOTE
        assert transformer.transform(record("toggle")).type is NodeType.TOGGLE

    def test_block_color_resolved(self, transformer):
        node = transformer.transform(record("text", format={"block_color": "red"}))
        assert node.color == "color-red"

    def test_no_block_color(self, transformer):
        assert transformer.transform(record("text")).color is None

    def test_times_carried(self, transformer):
        node = transformer.transform(record("text", created_time=1, last_edited_time=2))
        assert (node.created_time, node.last_edited_time) == (1, 2)


class TestToDo:
    def test_checked_yes(self, transformer):
        node = transformer.transform(record("to_do", properties={"checked": [["Yes"]]}))
        assert isinstance(node, ToDoNode)
        assert node.checked is True

    def test_checked_absent(self, transformer):
        assert transformer.transform(record("to_do")).checked is False

    def test_checked_no(self, transformer):
        node = transformer.transform(record("to_do", properties={"checked": [["No"]]}))
        assert node.checked is False


class TestCalloutAndPage:
    def test_callout_emoji_icon(self, transformer):
        node = transformer.transform(record("callout", format={"page_icon": "💡"}))
        assert node.icon == "💡"

    def test_callout_signed_icon_rewritten(self, transformer):
        node = transformer.transform(record("callout", format={"page_icon": SIGNED_URL}))
        assert node.icon.startswith("https://www.notion.so/signed/")
        assert node.icon.endswith(f"table=block&id={BLOCK_ID}")

    def test_root_page(self, transformer):
        child = TextNode(id="c", type=NodeType.TEXT)
        node = transformer.transform(
            record("page", title=[["Home"]], format={"page_cover": "/images/c.png"}),
            (child,),
            is_root=True,
        )
        assert isinstance(node, PageNode)
        assert node.type is NodeType.PAGE
        assert node.children == (child,)
        assert node.cover == "https://www.notion.so/images/c.png"
        assert node.uri == "https://www.notion.so/0eeee000ccccbbbbaaaa123450000000"

    def test_nested_page_is_embedded(self, transformer):
        child = TextNode(id="c", type=NodeType.TEXT)
        node = transformer.transform(record("page", title=[["Sub"]]), (child,))
        assert node.type is NodeType.EMBEDDED_PAGE
        assert node.children == ()

    def test_nested_page_expanded(self):
        transformer = BlockTransformer(NastConfig(expand_subpages=True))
        node = transformer.transform(record("page"))
        assert node.type is NodeType.PAGE


# =========================================================================
# Alias
# =========================================================================


class TestAlias:
    def test_target_id(self, transformer):
        node = transformer.transform(record("alias", format={"alias_pointer": {"id": TARGET_NO_DASH}}))
        assert isinstance(node, AliasNode)
        assert node.target_id == TARGET_DASH

    def test_no_color_or_icon(self, transformer):
        node = transformer.transform(
            record("alias", format={"block_color": "red", "page_icon": "💡"})
        )
        assert node.color is None
        assert node.target_id == ""

    def test_children_dropped(self, transformer):
        child = TextNode(id="c", type=NodeType.TEXT)
        assert transformer.transform(record("alias"), (child,)).children == ()


# =========================================================================
# Code, equation, columns
# =========================================================================


class TestCodeAndEquation:
    def test_code_language(self, transformer):
        node = transformer.transform(
            record("code", title=[["x = 1"]], properties={"language": [["Python"]]})
        )
        assert isinstance(node, CodeNode)
        assert node.language == "Python"

    def test_code_default_language(self, transformer):
        assert transformer.transform(record("code")).language == "Plain Text"

    def test_code_wrap(self, transformer):
        assert transformer.transform(record("code", format={"code_wrap": True})).wrap is True

    def test_equation(self, transformer):
        node = transformer.transform(record("equation", title=[["E=mc^2"]]))
        assert isinstance(node, EquationNode)
        assert node.latex == "E=mc^2"

    def test_column_ratio(self, transformer):
        node = transformer.transform(record("column", format={"column_ratio": 0.25}))
        assert isinstance(node, ColumnNode)
        assert node.ratio == 0.25

    def test_column_without_ratio(self, transformer):
        assert transformer.transform(record("column")).ratio is None

    @pytest.mark.parametrize("block_type", ["divider", "table_of_contents", "breadcrumb", "column_list"])
    def test_bare_types(self, transformer, block_type):
        node = transformer.transform(record(block_type))
        assert type(node) is Node
        assert node.type.value == block_type


# =========================================================================
# Media
# =========================================================================


class TestMedia:
    def test_image_signed_display_source_with_width(self, transformer):
        node = transformer.transform(
            record("image", format={"display_source": SIGNED_URL, "block_width": 640})
        )
        assert isinstance(node, MediaNode)
        assert node.width == 640
        assert node.url.startswith("https://www.notion.so/signed/")
        assert node.url.endswith(f"?width=640&table=block&id={BLOCK_ID}")

    def test_image_relative_source(self, transformer):
        node = transformer.transform(record("image", properties={"source": [["/images/x.png"]]}))
        assert node.url == "https://www.notion.so/images/x.png"

    def test_image_caption(self, transformer):
        node = transformer.transform(record("image", properties={"caption": [["Cap"]]}))
        assert node.caption == (StyledRun("Cap"),)

    def test_video(self, transformer):
        node = transformer.transform(
            record("video", properties={"source": [["https://youtu.be/x"]]})
        )
        assert node.type is NodeType.VIDEO
        assert node.url == "https://youtu.be/x"

    def test_audio(self, transformer):
        assert transformer.transform(record("audio")).type is NodeType.AUDIO

    @pytest.mark.parametrize("block_type", ["embed", "figma", "tweet", "pdf"])
    def test_embeds(self, transformer, block_type):
        assert transformer.transform(record(block_type)).type is NodeType.EMBED

    def test_file(self, transformer):
        node = transformer.transform(
            record(
                "file",
                title=[["report.pdf"]],
                properties={"source": [[SIGNED_URL]], "size": [["1.2MB"]]},
            )
        )
        assert node.type is NodeType.FILE
        assert node.size == "1.2MB"
        assert node.url.endswith(f"?table=block&id={BLOCK_ID}")

    def test_bookmark(self, transformer):
        node = transformer.transform(
            record(
                "bookmark",
                title=[["Example"]],
                properties={"link": [["https://example.com"]], "description": [["Desc"]]},
                format={"bookmark_icon": "https://example.com/i.png"},
            )
        )
        assert node.url == "https://example.com"
        assert node.description == (StyledRun("Desc"),)
        assert node.icon == "https://example.com/i.png"


# =========================================================================
# Tables
# =========================================================================


class TestTable:
    def _row(self, transformer, block_id, properties):
        row = RawBlockRecord.from_dict(make_block(block_id, "table_row", properties=properties))
        return transformer.transform(row)

    def test_rows_aligned_to_column_order(self, transformer):
        row = self._row(transformer, "r1", {"a": [["A"]], "b": [["B"]]})
        table = transformer.transform(
            record("table", format={"table_block_column_order": ["b", "a"]}),
            (row,),
        )
        assert isinstance(table, TableNode)
        aligned = table.children[0]
        assert aligned.column_ids == ("b", "a")
        assert [cell[0].text for cell in aligned.cells] == ["B", "A"]

    def test_missing_cell_padded(self, transformer):
        row = self._row(transformer, "r1", {"a": [["A"]]})
        table = transformer.transform(
            record("table", format={"table_block_column_order": ["a", "b"]}),
            (row,),
        )
        assert table.children[0].cells[1] == ()

    def test_header_flags(self, transformer):
        table = transformer.transform(
            record("table", format={"table_block_column_header": True})
        )
        assert table.has_column_header is True
        assert table.has_row_header is False

    def test_column_order_inferred_from_rows(self, transformer):
        first = self._row(transformer, "r1", {"x": [["1"]]})
        second = self._row(transformer, "r2", {"y": [["2"]], "x": [["3"]]})
        table = transformer.transform(record("table"), (first, second))
        assert table.column_order == ("x", "y")


# =========================================================================
# Unsupported types
# =========================================================================


class TestUnsupported:
    def test_unknown_type(self, transformer):
        node = transformer.transform(record("collection_view"))
        assert isinstance(node, UnsupportedNode)
        assert node.type is NodeType.UNSUPPORTED
        assert node.raw_type == "collection_view"

    def test_exactly_one_warning(self, transformer):
        transformer.transform(record("collection_view"))
        assert len(transformer.warnings) == 1
        warning = transformer.warnings[0]
        assert warning.code == WarningCode.UNSUPPORTED_BLOCK_TYPE
        assert warning.context == {"block_id": BLOCK_ID, "block_type": "collection_view"}

    def test_children_kept(self, transformer):
        child = TextNode(id="c", type=NodeType.TEXT)
        node = transformer.transform(record("collection_view"), (child,))
        assert node.children == (child,)

    def test_supported_types(self):
        types = supported_types()
        assert "text" in types
        assert "collection_view" not in types


# =========================================================================
# List grouping
# =========================================================================


class TestGroupListItems:
    def test_consecutive_items_grouped(self):
        text = TextNode(id="t", type=NodeType.TEXT)
        grouped = group_list_items((
            list_item("a"), list_item("b"), text, list_item("c", ordered=True),
        ))
        assert [node.type for node in grouped] == [
            NodeType.BULLETED_LIST, NodeType.TEXT, NodeType.NUMBERED_LIST,
        ]
        assert [child.id for child in grouped[0].children] == ["a", "b"]

    def test_kind_change_splits_group(self):
        grouped = group_list_items((list_item("a"), list_item("b", ordered=True)))
        assert len(grouped) == 2

    def test_container_is_synthetic(self):
        (container,) = group_list_items((list_item("a"),))
        assert container.id == ""
        assert container.color is None

    def test_transform_groups_children(self, transformer):
        bullet = transformer.transform(
            RawBlockRecord.from_dict(make_block("b1", "bulleted_list", title=[["one"]]))
        )
        page = transformer.transform(record("page"), (bullet,), is_root=True)
        assert page.children[0].type is NodeType.BULLETED_LIST
        assert page.children[0].children == (bullet,)


class TestMetrics:
    def test_blocks_transformed_counted(self, metrics):
        transformer = BlockTransformer(NastConfig(metrics=metrics))
        transformer.transform(record("text"))
        assert metrics.increments == [{
            "name": "notionast.blocks_transformed_total",
            "value": 1,
            "tags": {"type": "text"},
        }]
