"""
Markdown to Quill Delta Package

This package converts Markdown into delta insert operations for rich-text editors.
"""

from typing import Any

from delta.converter import BLOCK_TYPES, MarkdownToDeltaConverter
from delta.mdast import Node, create_parser, parse_markdown
from delta.ops import BLOCK_ATTRIBUTES, INLINE_ATTRIBUTES, Op, delta_to_text, iter_lines


def convert(markdown_text: str, **options: Any) -> list[Op]:
    """Convert Markdown text to delta ops with a one-off converter."""
    return MarkdownToDeltaConverter(**options).convert(markdown_text)


__all__ = [
    "BLOCK_ATTRIBUTES",
    "BLOCK_TYPES",
    "convert",
    "create_parser",
    "delta_to_text",
    "INLINE_ATTRIBUTES",
    "iter_lines",
    "MarkdownToDeltaConverter",
    "Node",
    "Op",
    "parse_markdown",
]
