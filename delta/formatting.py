"""
Attribute building blocks shared by the converter.

Formatting context flows down the tree as a mapping of attributes. Nothing here
mutates the mapping it is given: every merge returns a new dict, so sibling
subtrees never see each other's formatting.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from delta.mdast import Node
from delta.ops import Op, make_op

# Inline node type -> attributes it adds (link is resolved per node)
INLINE_FORMATS: dict[str, dict[str, Any]] = {
    "strong": {"bold": True},
    "emphasis": {"italic": True},
    "delete": {"strike": True},
    "inlineCode": {"code": True},
    "text": {},
}

LIST_ORDERED = "ordered"
LIST_CHECKED = "checked"
LIST_UNCHECKED = "unchecked"
LIST_BULLET = "bullet"


def merge_attributes(inherited: Mapping[str, Any], new_attributes: Mapping[str, Any] | None) -> dict[str, Any]:
    """Union of two attribute mappings; keys from ``new_attributes`` win."""
    merged = dict(inherited)
    if new_attributes:
        merged.update(new_attributes)
    return merged


def inline_attributes_for(node: Node) -> dict[str, Any] | None:
    """Attributes an inline node contributes, or ``None`` if the type is not an inline format."""
    if node.type == "link":
        return {"link": node.url} if node.url else {}
    formats = INLINE_FORMATS.get(node.type)
    return dict(formats) if formats is not None else None


def leaf_text(node: Node) -> str | None:
    """The literal text a leaf carries, if it is a non-empty string."""
    if isinstance(node.value, str) and node.value:
        return node.value
    return None


def embed_format(
    attributes: Mapping[str, Any], embed_value: dict[str, Any], extra_attributes: Mapping[str, Any] | None = None
) -> Op:
    """Exactly one embed op carrying inherited plus extra attributes."""
    return make_op(dict(embed_value), merge_attributes(attributes, extra_attributes))


def image_embed(node: Node, attributes: Mapping[str, Any]) -> Op:
    extra = {"alt": node.alt} if node.alt else None
    return embed_format(attributes, {"image": node.url or ""}, extra)


def divider_embed() -> Op:
    return embed_format({}, {"divider": True})


def list_line_attributes(list_node: Node, item: Node, indent: int) -> dict[str, Any]:
    """
    Block attributes for the newline that ends a list line.

    Priority: ordered list, then checked task, then unchecked task, then bullet.
    ``indent`` is only present for nested lists.
    """
    if list_node.ordered:
        list_type = LIST_ORDERED
    elif item.checked is True:
        list_type = LIST_CHECKED
    elif item.checked is False:
        list_type = LIST_UNCHECKED
    else:
        list_type = LIST_BULLET

    attributes: dict[str, Any] = {"list": list_type}
    if indent > 0:
        attributes["indent"] = indent
    return attributes
