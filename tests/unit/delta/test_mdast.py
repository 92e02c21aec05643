"""
Unit tests for the markdown-it to node tree adapter.

These tests pin down the shape of the tree the converter relies on: node types,
type-specific fields, task checkboxes, table alignment and cell sources.
"""

import pytest

from delta.mdast import Node, create_parser, parse_markdown


def _only_child(node: Node) -> Node:
    assert node.children is not None
    assert len(node.children) == 1, f"expected one child, got {[c.type for c in node.children]}"
    return node.children[0]


class TestBlocks:
    def test_empty_document(self):
        tree = parse_markdown("")
        assert tree.type == "root"
        assert tree.children == ()

    def test_heading_depth(self):
        heading = _only_child(parse_markdown("### Deep"))
        assert heading.type == "heading"
        assert heading.depth == 3
        assert _only_child(heading) == Node("text", value="Deep")

    def test_paragraphs_are_siblings(self):
        tree = parse_markdown("one\n\ntwo")
        assert [child.type for child in tree.children] == ["paragraph", "paragraph"]

    def test_fenced_code_keeps_lines_and_language(self):
        code = _only_child(parse_markdown("```python\nx = 1\ny = 2\n```"))
        assert code.type == "code"
        assert code.value == "x = 1\ny = 2"
        assert code.lang == "python"

    def test_indented_code_block(self):
        code = _only_child(parse_markdown("    indented"))
        assert code.type == "code"
        assert code.value == "indented"
        assert code.lang is None

    def test_blockquote_contains_paragraph(self):
        quote = _only_child(parse_markdown("> quoted"))
        assert quote.type == "blockquote"
        assert _only_child(quote).type == "paragraph"

    def test_horizontal_rule(self):
        assert _only_child(parse_markdown("***")).type == "thematicBreak"

    def test_html_block_keeps_raw_value(self):
        html = _only_child(parse_markdown("<div>hi</div>"))
        assert html.type == "html"
        assert "<div>hi</div>" in html.value


class TestLists:
    def test_bullet_list(self):
        lst = _only_child(parse_markdown("- a\n- b"))
        assert lst.type == "list"
        assert lst.ordered is False
        assert [item.type for item in lst.children] == ["listItem", "listItem"]
        assert all(item.checked is None for item in lst.children)

    def test_ordered_list_start(self):
        lst = _only_child(parse_markdown("3. a\n4. b"))
        assert lst.ordered is True
        assert lst.start == 3

    def test_ordered_list_default_start(self):
        assert _only_child(parse_markdown("1. a")).start == 1

    def test_nested_list_is_item_child(self):
        lst = _only_child(parse_markdown("- a\n  - b"))
        item = lst.children[0]
        assert [child.type for child in item.children] == ["paragraph", "list"]

    def test_task_items_are_checked(self):
        lst = _only_child(parse_markdown("- [x] done\n- [ ] todo\n- plain"))
        done, todo, plain = lst.children
        assert done.checked is True
        assert todo.checked is False
        assert plain.checked is None

    def test_checkbox_marker_is_removed_from_text(self):
        lst = _only_child(parse_markdown("- [x] done"))
        paragraph = lst.children[0].children[0]
        assert paragraph.children == (Node("text", value="done"),)


class TestInline:
    def test_soft_break_becomes_space(self):
        paragraph = _only_child(parse_markdown("Line1\nLine2"))
        assert paragraph.children == (Node("text", value="Line1 Line2"),)

    def test_hard_break(self):
        paragraph = _only_child(parse_markdown("Line1  \nLine2"))
        assert [child.type for child in paragraph.children] == ["text", "break", "text"]

    def test_inline_formats(self):
        paragraph = _only_child(parse_markdown("**b** *i* ~~s~~ `c`"))
        types = [child.type for child in paragraph.children if child.type != "text"]
        assert types == ["strong", "emphasis", "delete", "inlineCode"]

    def test_no_empty_text_around_delimiters(self):
        paragraph = _only_child(parse_markdown("**a**"))
        assert [child.type for child in paragraph.children] == ["strong"]
        assert paragraph.children[0].children == (Node("text", value="a"),)

    def test_inline_code_value(self):
        paragraph = _only_child(parse_markdown("`x + y`"))
        assert paragraph.children == (Node("inlineCode", value="x + y"),)

    def test_link_url_and_children(self):
        link = _only_child(_only_child(parse_markdown('[site](https://example.com "Title")')))
        assert link.type == "link"
        assert link.url == "https://example.com"
        assert link.title == "Title"
        assert link.children == (Node("text", value="site"),)

    def test_image_url_and_alt(self):
        image = _only_child(_only_child(parse_markdown("![A *logo*](https://example.com/l.png)")))
        assert image.type == "image"
        assert image.url == "https://example.com/l.png"
        assert image.alt == "A logo"
        assert image.children is None

    def test_image_without_alt(self):
        image = _only_child(_only_child(parse_markdown("![](https://example.com/l.png)")))
        assert image.alt is None

    def test_br_tag_becomes_break(self):
        for tag in ("<br>", "<br/>", "<br />", "<BR>"):
            paragraph = _only_child(parse_markdown(f"a{tag}b"))
            assert [child.type for child in paragraph.children] == ["text", "break", "text"], tag

    def test_other_inline_html(self):
        paragraph = _only_child(parse_markdown("a <span>b</span>"))
        html_values = [child.value for child in paragraph.children if child.type == "html"]
        assert html_values == ["<span>", "</span>"]


class TestTables:
    TABLE = "| a | b | c |\n|:--|:-:|--:|\n| 1 | 2 | 3 |\n| 4 | 5 | 6 |"

    def test_rows_are_flattened(self):
        table = _only_child(parse_markdown(self.TABLE))
        assert table.type == "table"
        assert [row.type for row in table.children] == ["tableRow"] * 3
        assert all(len(row.children) == 3 for row in table.children)

    def test_alignment(self):
        table = _only_child(parse_markdown(self.TABLE))
        assert table.align == ("left", "center", "right")

    def test_no_alignment(self):
        table = _only_child(parse_markdown("| a |\n|---|\n| 1 |"))
        assert table.align == (None,)

    def test_cell_source_and_children(self):
        table = _only_child(parse_markdown("| **a** |\n|---|\n| x<br>y |"))
        header_cell = table.children[0].children[0]
        body_cell = table.children[1].children[0]
        assert header_cell.type == "tableCell"
        assert header_cell.source == "**a**"
        assert header_cell.children[0].type == "strong"
        assert body_cell.source == "x<br>y"
        assert [child.type for child in body_cell.children] == ["text", "break", "text"]


class TestParserConfiguration:
    @pytest.fixture
    def md(self):
        return create_parser()

    def test_tables_enabled(self, md):
        tokens = md.parse("| a |\n|---|\n| b |")
        assert any(token.type == "table_open" for token in tokens)

    def test_strikethrough_enabled(self, md):
        tokens = md.parse("~~x~~")
        inline = next(token for token in tokens if token.type == "inline")
        assert any(child.type == "s_open" for child in inline.children)

    def test_shared_parser_instance(self, md):
        assert parse_markdown("# a", md) == parse_markdown("# a")
