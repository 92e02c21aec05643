"""
Insert operations and helpers for reading op sequences.

An op is a plain dict, ``{"insert": str | dict, "attributes": dict}``, with the
``attributes`` key left out when there is nothing to format. Block formatting
lives on the newline that ends a line; inline formatting lives on the text runs.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any

Op = dict[str, Any]

NEWLINE = "\n"

INLINE_ATTRIBUTES = frozenset({"bold", "italic", "strike", "code", "link", "alt"})
BLOCK_ATTRIBUTES = frozenset(
    {"header", "blockquote", "list", "indent", "code-block", "table-cell-line", "table-col", "align"}
)


def make_op(insert: str | dict, attributes: Mapping[str, Any] | None = None) -> Op:
    """Build an op, copying ``attributes`` and omitting them when empty."""
    op: Op = {"insert": insert}
    if attributes:
        op["attributes"] = dict(attributes)
    return op


def newline_op(attributes: Mapping[str, Any] | None = None) -> Op:
    """A line terminator, optionally carrying block attributes."""
    return make_op(NEWLINE, attributes)


def is_newline(op: Op) -> bool:
    return op.get("insert") == NEWLINE


def is_embed(op: Op) -> bool:
    return isinstance(op.get("insert"), dict)


def delta_to_text(ops: list[Op], embed_placeholder: str = "") -> str:
    """Concatenate the text inserts; embeds become ``embed_placeholder``."""
    return "".join(op["insert"] if isinstance(op["insert"], str) else embed_placeholder for op in ops)


def iter_lines(ops: list[Op]) -> Iterator[tuple[list[Op], dict[str, Any]]]:
    """
    Group ops into lines.

    Yields ``(content_ops, block_attributes)`` for every newline-terminated line.
    Trailing content without a terminating newline is yielded with empty block
    attributes.
    """
    content: list[Op] = []
    for op in ops:
        if is_newline(op):
            yield content, dict(op.get("attributes", {}))
            content = []
        else:
            content.append(op)
    if content:
        yield content, {}
