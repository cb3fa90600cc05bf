"""Whitespace normalization for table scaffolding.

Markdown converters indent table markup, leaving whitespace-only text between
`<table>`, `<thead>`, `<tr>` and friends. Component frameworks treat any text
child of those elements as invalid content, so it is removed here. Text
inside cells, and whitespace between inline elements anywhere else, is left
alone: there it separates words.

Any Unicode whitespace counts, including a non-breaking space: the framework
rejects `&nbsp;` between rows just as it rejects a newline.
"""

from __future__ import annotations

from typing import Any

from .constants import TABLE_STRUCTURE_TAGS


def is_whitespace_text(node: Any) -> bool:
    return node.name == "#text" and not node.data.strip()


def strip_table_whitespace(node: Any, *, structural_tags: frozenset[str] = TABLE_STRUCTURE_TAGS) -> list[Any]:
    """Return the children of `node` to render.

    For a structural table tag, whitespace-only direct text children are
    omitted. Any other node's children are returned unchanged. Descendants are
    not touched; the renderer applies this again as it recurses.
    """
    children = node.children
    if node.name not in structural_tags:
        return list(children)
    return [child for child in children if not is_whitespace_text(child)]
