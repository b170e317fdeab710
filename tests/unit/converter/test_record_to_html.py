"""End-to-end tests for RecordToHtmlConverter."""

import json

import pytest
from conftest import make_block, make_records

from notionast import RecordToHtmlConverter, render_records
from notionast.config import NastConfig
from notionast.errors import CyclicStructureError, MissingRecordError
from notionast.models import NodeType, RenderResult, WarningCode

ROOT_ID = "0eeee000-cccc-bbbb-aaaa-123450000000"
HEADING_ID = "1eeee000-cccc-bbbb-aaaa-123450000000"
HEADING_ANCHOR = "1eeee000ccccbbbbaaaa123450000000"


def sample_records():
    return make_records(
        make_block(
            ROOT_ID, "page", title=[["Home"]],
            content=["toc", HEADING_ID, "p", "li1", "li2", "todo", "odd", "link"],
        ),
        make_block("toc", "table_of_contents"),
        make_block(HEADING_ID, "header", title=[["Intro"]]),
        make_block(
            "p", "text",
            title=[["Hello ", [["b"]]], ["there", [["z"]]]],
            format={"block_color": "blue_background"},
        ),
        make_block("li1", "bulleted_list", title=[["one"]]),
        make_block("li2", "bulleted_list", title=[["two"]]),
        make_block("todo", "to_do", title=[["task"]], properties={"checked": [["Yes"]]}),
        make_block("odd", "collection_view"),
        make_block(
            "link", "text",
            title=[["jump", [["a", f"https://www.notion.so/Home-x#{HEADING_ANCHOR}"]]]],
        ),
    )


@pytest.fixture
def converter(config):
    return RecordToHtmlConverter(config)


class TestConvert:
    def test_result_shape(self, converter):
        result = converter.convert(ROOT_ID, sample_records())
        assert isinstance(result, RenderResult)
        assert result.ast.type is NodeType.PAGE
        assert result.html.startswith('<article class="block block--page">')

    def test_content(self, converter):
        html = converter.convert(ROOT_ID, sample_records()).html
        assert "<h1><span>Intro</span></h1>" in html
        assert '<div class="block block--text background-blue"><p><span><strong>Hello </strong>there</span></p></div>' in html
        assert "<ul><li" in html
        assert "disabled checked" in html
        assert "<!-- unsupported: collection_view -->" in html

    def test_local_links_resolve_to_block_wrappers(self, converter):
        html = converter.convert(ROOT_ID, sample_records()).html
        assert f'<a href="#{HEADING_ANCHOR}">jump</a>' in html
        assert f'<div id="{HEADING_ANCHOR}">' in html

    def test_table_of_contents(self, converter):
        html = converter.convert(ROOT_ID, sample_records()).html
        assert f'<a href="#{HEADING_ANCHOR}"><span>Intro</span></a>' in html

    def test_warnings_from_both_stages(self, converter):
        warnings = converter.convert(ROOT_ID, sample_records()).warnings
        assert [w.code for w in warnings] == [
            WarningCode.UNSUPPORTED_BLOCK_TYPE,
            WarningCode.UNSUPPORTED_MARKER,
        ]

    def test_converter_reusable(self, converter):
        first = converter.convert(ROOT_ID, sample_records())
        second = converter.convert(ROOT_ID, sample_records())
        assert first.html == second.html
        assert len(second.warnings) == len(first.warnings)

    def test_no_dash_root_id(self, converter):
        result = converter.convert(ROOT_ID.replace("-", ""), sample_records())
        assert result.ast.id == ROOT_ID

    def test_missing_root(self, converter):
        with pytest.raises(MissingRecordError):
            converter.convert("nope", sample_records())

    def test_cycle_aborts(self, converter):
        records = make_records(
            make_block("A", "page", content=["B"]),
            make_block("B", "text", content=["A"]),
        )
        with pytest.raises(CyclicStructureError):
            converter.convert("A", records)

    def test_build_ast_only(self, converter):
        root, warnings = converter.build_ast(ROOT_ID, sample_records())
        assert root.id == ROOT_ID
        assert [w.code for w in warnings] == [WarningCode.UNSUPPORTED_BLOCK_TYPE]

    def test_render_records_shortcut(self):
        html = render_records(ROOT_ID, sample_records(), config=NastConfig(highlight_code=False))
        assert "<span>Home</span>" in html


class TestDeepNesting:
    @pytest.mark.parametrize("block_type", ["text", "bulleted_list", "toggle", "header"])
    def test_long_chain_renders(self, converter, block_type):
        blocks = [make_block(ROOT_ID, "page", title=[["Home"]], content=["b0"])]
        for i in range(1000):
            blocks.append(make_block(f"b{i}", block_type, title=[[f"level {i}"]], content=[f"b{i + 1}"]))
        result = converter.convert(ROOT_ID, make_records(*blocks))
        assert "level 63" in result.html
        assert "level 64" not in result.html
        assert [w.code for w in result.warnings] == [WarningCode.DEPTH_LIMIT_EXCEEDED]


class TestDebugDump:
    def test_ast_dumped_to_stderr(self, capsys):
        converter = RecordToHtmlConverter(NastConfig(debug_dump_ast=True, highlight_code=False))
        converter.convert(ROOT_ID, sample_records())
        err = capsys.readouterr().err
        assert "[notionast] Assembled AST:" in err
        dumped = err.split("[notionast] Assembled AST:", 1)[1]
        payload, _ = json.JSONDecoder().raw_decode(dumped.lstrip())
        assert payload["id"] == ROOT_ID
        assert payload["type"] == "page"

    def test_no_dump_by_default(self, converter, capsys):
        converter.convert(ROOT_ID, sample_records())
        assert "Assembled AST" not in capsys.readouterr().err
