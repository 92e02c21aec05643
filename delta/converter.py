"""
Markdown to Quill Delta Converter

This module provides the `MarkdownToDeltaConverter` class that translates Markdown
into an ordered list of delta insert operations: headings, paragraphs, lists
(with nesting and task checkboxes), code blocks, blockquotes, dividers, images,
inline formatting and tables with addressable cells.

The converter walks the parsed tree depth-first. Block formatting is attached to
the newline that terminates each line; inline formatting is accumulated from the
ancestors of each text run and flattened onto it.

Example:
    >>> converter = MarkdownToDeltaConverter()
    >>> converter.convert("# Hello\n\nThis is **bold** text.")
    [{'insert': 'Hello'}, {'insert': '\\n', 'attributes': {'header': 1}}, {'insert': '\\n'},
     {'insert': 'This is '}, {'insert': 'bold', 'attributes': {'bold': True}},
     {'insert': ' text.'}, {'insert': '\\n'}]

See Also:
    - `delta/mdast.py` for the node tree built from markdown-it tokens
    - `delta/tables.py` for table cell addressing
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from core.config import ConverterOptions
from core.errors import NestingDepthError, TableIdGeneratorError
from core.utils import tree_depth, validate_markdown_text
from delta.formatting import (
    divider_embed,
    image_embed,
    inline_attributes_for,
    leaf_text,
    list_line_attributes,
    merge_attributes,
)
from delta.mdast import Node, create_parser, parse_markdown
from delta.ops import Op, make_op, newline_op
from delta.tables import (
    cell_identity,
    cell_line_attributes,
    column_placeholders,
    count_line_breaks,
    resolve_alignment,
    split_cell_source,
    tag_cell_lines,
)

logger = logging.getLogger(__name__)

# Blocks separated by one bare newline when they follow each other.
# thematicBreak is excluded: it already terminates its own line.
BLOCK_TYPES = frozenset({"paragraph", "code", "heading", "blockquote", "list", "table"})


class MarkdownToDeltaConverter:
    """
    Converts Markdown text into delta insert operations.

    A converter holds only its options and parser, so the same instance can be
    reused for any number of documents; each `convert()` call builds a fresh
    op list. The only state shared between calls is the injected table id
    generator.

    Attributes:
        options: Conversion settings (`ConverterOptions`).
        md: The markdown-it parser instance.

    Example:
        >>> ids = iter(["r1", "r2"])
        >>> converter = MarkdownToDeltaConverter(table_id_generator=lambda: next(ids))
        >>> ops = converter.convert("| A |\n|---|\n| B |")
        >>> ops[1]
        {'insert': 'A'}
    """

    def __init__(self, options: ConverterOptions | None = None, **overrides: Any) -> None:
        """Initialize with explicit options, keyword overrides, or both."""
        base = options or ConverterOptions()
        self.options = base.with_overrides(**overrides) if overrides else base
        self.md = create_parser()

    def convert(self, markdown_text: str) -> list[Op]:
        """
        Convert Markdown text to a list of insert operations.

        Args:
            markdown_text: The Markdown string to convert.

        Returns:
            Ops in document order. Every line ends with a newline op carrying
            that line's block attributes.

        Raises:
            ValidationError: If ``markdown_text`` is not a string.
            NestingDepthError: If ``max_depth`` is configured and exceeded.
            TableIdGeneratorError: If the table id generator fails.
        """
        validate_markdown_text(markdown_text)
        tree = parse_markdown(markdown_text, self.md)
        return self.convert_tree(tree)

    def convert_tree(self, root: Node) -> list[Op]:
        """Convert an already parsed ``root`` node."""
        if self.options.max_depth is not None:
            depth = tree_depth(root)
            if depth > self.options.max_depth:
                raise NestingDepthError(depth, self.options.max_depth)

        ops = self.convert_children(None, root, {})
        self._trace(f"Converted document: {len(ops)} ops")
        return ops

    def convert_children(
        self, parent: Node | None, node: Node, attributes: Mapping[str, Any], indent: int = 0
    ) -> list[Op]:
        """
        Convert every child of ``node`` in order.

        ``parent`` is the parent of ``node`` (``None`` at the document root) and
        decides whether paragraphs terminate their own line. A bare newline is
        inserted between two consecutive block-level siblings.
        """
        ops: list[Op] = []
        previous_type: str | None = None

        for child in node.children or ():
            if child.type in BLOCK_TYPES and previous_type in BLOCK_TYPES:
                ops.append(newline_op())
            ops.extend(self._convert_node(parent, child, attributes, indent))
            previous_type = child.type

        return ops

    def _convert_node(
        self, parent: Node | None, node: Node, attributes: Mapping[str, Any], indent: int
    ) -> list[Op]:
        """Dispatch a single node by type."""
        self._trace(f"Node: type={node.type}, indent={indent}, attributes={dict(attributes)}")
        node_type = node.type

        if node_type == "paragraph":
            ops = self.convert_children(node, node, attributes, indent)
            if parent is None:
                ops.append(newline_op())
            return ops
        elif node_type == "heading":
            ops = self.convert_children(node, node, attributes, indent)
            ops.append(newline_op({"header": node.depth or 1}))
            return ops
        elif node_type == "blockquote":
            ops = self.convert_children(node, node, attributes, indent)
            ops.append(newline_op({"blockquote": True}))
            return ops
        elif node_type == "code":
            return self._convert_code(node)
        elif node_type == "thematicBreak":
            return [divider_embed(), newline_op()]
        elif node_type == "list":
            return self.convert_list(node, indent)
        elif node_type == "table":
            return self.convert_table(node, indent)
        elif node_type == "image":
            return [image_embed(node, attributes)]
        elif node_type == "break":
            return [newline_op()]

        new_attributes = inline_attributes_for(node)
        if new_attributes is not None:
            return self.inline_format(parent, node, attributes, new_attributes)

        return self._convert_unknown(node, attributes)

    def inline_format(
        self,
        parent: Node | None,
        node: Node,
        attributes: Mapping[str, Any],
        new_attributes: Mapping[str, Any],
    ) -> list[Op]:
        """
        Accumulate ``new_attributes`` onto the inherited ones for an inline node.

        Nodes with children recurse with the merged attributes as their new base,
        so ``***~~x~~***`` flattens into one op carrying bold, italic and strike.
        A leaf with text emits one op; anything else emits nothing.
        """
        merged = merge_attributes(attributes, new_attributes)

        if node.children:
            return self.convert_children(parent, node, merged)

        text = leaf_text(node)
        if text is None:
            return []
        return [make_op(text, merged)]

    def _convert_code(self, node: Node) -> list[Op]:
        """One text op plus one ``code-block`` newline per source line."""
        ops: list[Op] = []
        for line in (node.value or "").split("\n"):
            if line:
                ops.append(make_op(line))
            ops.append(newline_op({"code-block": True}))
        return ops

    def _convert_unknown(self, node: Node, attributes: Mapping[str, Any]) -> list[Op]:
        """Soft failure: keep the raw value of an unrecognized node, if it has one."""
        text = leaf_text(node)
        if text is None:
            logger.warning(f"Dropping unrecognized node type without a value: {node.type}")
            return []
        logger.warning(f"Inserting raw value for unrecognized node type: {node.type}")
        return [make_op(text, attributes)]

    # ------------------------------------------------------------------
    # Lists
    # ------------------------------------------------------------------

    def convert_list(self, node: Node, indent: int = 0) -> list[Op]:
        """Convert every item of a list at the given indent level."""
        ops: list[Op] = []
        for item in node.children or ():
            if item.type != "listItem":
                logger.warning(f"Unexpected node inside list: type={item.type}")
                ops.extend(self._convert_unknown(item, {}))
                continue
            ops.extend(self.convert_list_item(node, item, indent))
        return ops

    def convert_list_item(self, list_node: Node, item: Node, indent: int = 0) -> list[Op]:
        """
        Convert one list item.

        Nested lists recurse one indent level deeper and emit no terminator of
        their own. Every other child is followed by a newline carrying the
        item's list type (and ``indent`` when nested).
        """
        ops: list[Op] = []
        for child in item.children or ():
            if child.type == "list":
                ops.extend(self.convert_list(child, indent + 1))
                continue
            ops.extend(self._convert_node(list_node, child, {}, indent))
            ops.append(newline_op(list_line_attributes(list_node, item, indent)))
        return ops

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    def convert_table(self, node: Node, indent: int = 0) -> list[Op]:
        """
        Convert a table into column placeholders followed by cell lines.

        The placeholder count comes from the first row. The header row is
        treated like any other row.
        """
        rows = [row for row in node.children or () if row.type == "tableRow"]
        if not rows:
            logger.warning("Table has no rows, skipping")
            return []

        column_count = len(rows[0].children or ())
        ops = column_placeholders(column_count, self.options.table_column_width)

        for row_number, row in enumerate(rows):
            cells = row.children or ()
            if len(cells) != column_count:
                logger.warning(f"Table row {row_number} has {len(cells)} cells, expected {column_count}")

            row_id = self._next_row_id()
            self._trace(f"Table row {row_number}: id={row_id}, cells={len(cells)}")
            for cell_index, cell in enumerate(cells, start=1):
                ops.extend(self._convert_table_cell(node, cell, row_id, cell_index, indent))

        return ops

    def _convert_table_cell(self, table: Node, cell: Node, row_id: str, cell_index: int, indent: int) -> list[Op]:
        identity = cell_identity(row_id, cell_index)
        alignment = resolve_alignment(table.align, cell_index)

        line_breaks = count_line_breaks(cell)
        if not line_breaks:
            ops = self.convert_children(table, cell, {}, indent)
            ops.append(newline_op(cell_line_attributes(identity, alignment)))
            return ops

        fragments = split_cell_source(cell.source or "")
        if len(fragments) != line_breaks + 1:
            # Some markers sit in code spans or escapes; split on the parsed breaks only
            self._trace(f"Cell {identity['cell']}: {len(fragments) - 1} markers, {line_breaks} breaks")
            ops = self.convert_children(table, cell, {}, indent)
            ops.append(newline_op())
            return tag_cell_lines(ops, identity, alignment)

        # Multi-line cell: each fragment is converted as a document of its own
        ops = []
        for fragment in fragments:
            fragment_ops = self.convert(fragment) if fragment else []
            if not fragment_ops:
                fragment_ops = [newline_op()]
            ops.extend(tag_cell_lines(fragment_ops, identity, alignment))
        self._trace(f"Multi-line cell {identity['cell']}: {len(ops)} ops")
        return ops

    def _next_row_id(self) -> str:
        try:
            row_id = self.options.table_id_generator()
        except Exception as e:
            raise TableIdGeneratorError(str(e) or type(e).__name__) from e
        if not isinstance(row_id, str) or not row_id:
            raise TableIdGeneratorError(f"expected a non-empty string, got {row_id!r}")
        return row_id

    def _trace(self, message: str) -> None:
        if self.options.debug:
            logger.debug(message)
