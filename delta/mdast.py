"""
Markdown parsing and the node tree consumed by the delta converter.

markdown-it-py produces a flat token stream; `SyntaxTreeNode` nests it. This
module reshapes that nesting into a small, immutable tree of typed `Node`
objects (paragraph, heading, list, listItem, code, blockquote, thematicBreak,
table, tableRow, tableCell, image, link, strong, emphasis, delete, inlineCode,
text, break, html) so the converter never has to know about markdown-it's
open/close token pairs or its `inline` wrapper nodes.

Example:
    >>> tree = parse_markdown("# Hello *world*")
    >>> tree.children[0].type, tree.children[0].depth
    ('heading', 1)
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace

from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode
from mdit_py_plugins.tasklists import tasklists_plugin

logger = logging.getLogger(__name__)

# Raw HTML line breaks that split a table cell into several lines
LINE_BREAK_PATTERN = re.compile(r"<br\s*/?>", re.IGNORECASE)

# Checkbox markup emitted by mdit_py_plugins.tasklists
TASK_CHECKBOX_CLASS = 'class="task-list-item-checkbox"'
TASK_CHECKED_ATTR = 'checked="checked"'

ALIGN_PATTERN = re.compile(r"text-align\s*:\s*(left|center|right)")


@dataclass(frozen=True)
class Node:
    """
    One node of the parsed document.

    ``children`` is a tuple for container nodes and ``None`` for leaves. Only the
    fields relevant to ``type`` are set; the rest stay ``None``.
    """

    type: str
    children: tuple[Node, ...] | None = None
    value: str | None = None
    depth: int | None = None
    ordered: bool | None = None
    start: int | None = None
    checked: bool | None = None
    align: tuple[str | None, ...] | None = None
    url: str | None = None
    title: str | None = None
    alt: str | None = None
    lang: str | None = None
    source: str | None = None


def create_parser() -> MarkdownIt:
    """CommonMark with GFM tables, strikethrough and task list checkboxes."""
    return MarkdownIt("commonmark").enable("table").enable("strikethrough").use(tasklists_plugin)


def parse_markdown(markdown_text: str, md: MarkdownIt | None = None) -> Node:
    """Parse Markdown text into a ``root`` node."""
    md = md or create_parser()
    tokens = md.parse(markdown_text)
    return from_syntax_tree(SyntaxTreeNode(tokens))


def from_syntax_tree(root: SyntaxTreeNode) -> Node:
    """Convert a markdown-it ``SyntaxTreeNode`` root into a ``root`` node."""
    return Node("root", children=_convert_children(root.children))


def _convert_children(nodes: list[SyntaxTreeNode]) -> tuple[Node, ...]:
    converted: list[Node] = []
    for node in nodes:
        converted.extend(_convert_node(node))
    return _merge_adjacent_text(converted)


def _convert_node(node: SyntaxTreeNode) -> list[Node]:
    """Map one markdown-it node to zero or more tree nodes."""
    node_type = node.type

    # markdown-it wraps the inline content of every block in an "inline" node
    if node_type == "inline":
        return list(_convert_children(node.children))

    if node_type == "paragraph":
        return [Node("paragraph", children=_convert_children(node.children))]
    elif node_type == "heading":
        return [Node("heading", children=_convert_children(node.children), depth=_heading_depth(node.tag))]
    elif node_type in ("bullet_list", "ordered_list"):
        return [_convert_list(node)]
    elif node_type == "list_item":
        return [_convert_list_item(node)]
    elif node_type in ("fence", "code_block"):
        info = (node.info or "").strip()
        return [Node("code", value=_strip_final_newline(node.content), lang=info.split()[0] if info else None)]
    elif node_type == "blockquote":
        return [Node("blockquote", children=_convert_children(node.children))]
    elif node_type == "hr":
        return [Node("thematicBreak")]
    elif node_type == "table":
        return [_convert_table(node)]
    elif node_type == "html_block":
        return [Node("html", value=node.content)]
    elif node_type == "text":
        return [Node("text", value=node.content)]
    elif node_type == "softbreak":
        # Soft line breaks render as spaces
        return [Node("text", value=" ")]
    elif node_type == "hardbreak":
        return [Node("break")]
    elif node_type == "strong":
        return [Node("strong", children=_convert_children(node.children))]
    elif node_type == "em":
        return [Node("emphasis", children=_convert_children(node.children))]
    elif node_type == "s":
        return [Node("delete", children=_convert_children(node.children))]
    elif node_type == "code_inline":
        return [Node("inlineCode", value=node.content)]
    elif node_type == "link":
        return [
            Node(
                "link",
                children=_convert_children(node.children),
                url=_attr(node, "href"),
                title=_attr(node, "title"),
            )
        ]
    elif node_type == "image":
        return [
            Node(
                "image",
                url=_attr(node, "src"),
                title=_attr(node, "title"),
                alt=_plain_text(node) or None,
            )
        ]
    elif node_type == "html_inline":
        return [_convert_html_inline(node.content)]

    logger.debug(f"Passing through unmapped markdown-it node: type={node_type}")
    return [Node(node_type, value=node.content or None)]


def _convert_html_inline(content: str) -> Node:
    if LINE_BREAK_PATTERN.fullmatch(content.strip()):
        return Node("break", value=content)
    if TASK_CHECKBOX_CLASS in content:
        return Node("checkbox", checked=TASK_CHECKED_ATTR in content)
    return Node("html", value=content)


def _convert_list(node: SyntaxTreeNode) -> Node:
    ordered = node.type == "ordered_list"
    start = None
    if ordered:
        raw_start = _attr(node, "start")
        start = int(raw_start) if raw_start and raw_start.isdigit() else 1
    return Node("list", children=_convert_children(node.children), ordered=ordered, start=start)


def _convert_list_item(node: SyntaxTreeNode) -> Node:
    """
    Build a listItem, lifting a task-list checkbox into ``checked``.

    The tasklists plugin prepends an ``<input>`` html_inline token to the first
    paragraph and leaves a single leading space on the text that follows it.
    """
    children = list(_convert_children(node.children))
    checked = None

    if children and children[0].type == "paragraph" and children[0].children:
        inline = list(children[0].children)
        if inline[0].type == "checkbox":
            checked = inline.pop(0).checked
            if inline and inline[0].type == "text" and inline[0].value and inline[0].value.startswith(" "):
                inline[0] = replace(inline[0], value=inline[0].value[1:])
            inline = [child for child in inline if not (child.type == "text" and not child.value)]
            children[0] = replace(children[0], children=tuple(inline))

    return Node("listItem", children=tuple(children), checked=checked)


def _convert_table(node: SyntaxTreeNode) -> Node:
    """Flatten thead/tbody into rows and read column alignment from the first row."""
    rows: list[Node] = []
    align: tuple[str | None, ...] = ()

    for section in node.children:
        section_rows = section.children if section.type in ("thead", "tbody") else [section]
        for row in section_rows:
            if row.type != "tr":
                logger.warning(f"Unexpected node inside table: type={row.type}")
                continue
            cells = tuple(_convert_table_cell(cell) for cell in row.children)
            if not rows:
                align = tuple(_cell_alignment(cell) for cell in row.children)
            rows.append(Node("tableRow", children=cells))

    return Node("table", children=tuple(rows), align=align)


def _convert_table_cell(node: SyntaxTreeNode) -> Node:
    source = "".join(child.content for child in node.children if child.type == "inline")
    return Node("tableCell", children=_convert_children(node.children), source=source)


def _cell_alignment(node: SyntaxTreeNode) -> str | None:
    style = _attr(node, "style")
    if not style:
        return None
    match = ALIGN_PATTERN.search(style)
    return match.group(1) if match else None


def _merge_adjacent_text(nodes: list[Node]) -> tuple[Node, ...]:
    """
    Join consecutive text nodes, so soft breaks fold into the surrounding text.

    markdown-it leaves empty text tokens where emphasis delimiters were consumed;
    those are dropped.
    """
    merged: list[Node] = []
    for node in nodes:
        if node.type == "text" and not node.value:
            continue
        if node.type == "text" and merged and merged[-1].type == "text":
            merged[-1] = replace(merged[-1], value=(merged[-1].value or "") + (node.value or ""))
        else:
            merged.append(node)
    return tuple(merged)


def _plain_text(node: SyntaxTreeNode) -> str:
    """Flatten an image's alt-text children the way markdown-it renders alt attributes."""
    if not node.children:
        return node.content or ""
    parts = []
    for child in node.children:
        if child.type in ("text", "code_inline"):
            parts.append(child.content)
        elif child.type in ("softbreak", "hardbreak"):
            parts.append("\n")
        elif child.children:
            parts.append(_plain_text(child))
    return "".join(parts)


def _heading_depth(tag: str) -> int:
    # "h1" .. "h6"
    if len(tag) == 2 and tag[1].isdigit():
        return int(tag[1])
    return 1


def _strip_final_newline(content: str) -> str:
    return content[:-1] if content.endswith("\n") else content


def _attr(node: SyntaxTreeNode, name: str) -> str | None:
    value = node.attrs.get(name)
    return None if value is None else str(value)
