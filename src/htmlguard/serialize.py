"""HTML serialization for rendered trees.

`to_html` writes a `RenderNode` tree back to markup so the pipeline can be run
again on its own output. Framework prop names are mapped back to HTML
attribute names and the style object is written back as CSS. Output is
compact: whitespace between inline elements is significant, so nothing is
pretty-printed.
"""

from __future__ import annotations

from typing import Any

from .constants import VOID_ELEMENTS
from .node import RenderNode
from .policy import DEFAULT_RENDER_POLICY, RenderPolicy
from .style import serialize_style


def _escape_text(text: str | None) -> str:
    if not text:
        return ""
    return str(text).replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def _escape_attr_value(value: str) -> str:
    return value.replace("&", "&amp;").replace('"', "&quot;")


def serialize_start_tag(name: str, attrs: dict[str, str] | None) -> str:
    parts: list[str] = ["<", name]
    for key, value in (attrs or {}).items():
        if value == "":
            parts.extend([" ", key, '=""'])
            continue
        parts.extend([" ", key, '="', _escape_attr_value(value), '"'])
    parts.append(">")
    return "".join(parts)


def serialize_end_tag(name: str) -> str:
    return f"</{name}>"


class _EndTag:
    __slots__ = ("html",)

    def __init__(self, html: str) -> None:
        self.html = html


def props_to_attrs(props: dict[str, Any], policy: RenderPolicy = DEFAULT_RENDER_POLICY) -> dict[str, str]:
    """Map framework props back to HTML attributes."""
    reverse = {prop: attr for attr, prop in policy.attribute_renames.items()}
    attrs: dict[str, str] = {}
    for key, value in props.items():
        name = reverse.get(key, key)
        if isinstance(value, dict):
            css = serialize_style(value)
            if not css:
                continue
            attrs[name] = css
        else:
            attrs[name] = str(value)
    return attrs


def to_html(node: RenderNode | str | list[Any] | None, *, policy: RenderPolicy = DEFAULT_RENDER_POLICY) -> str:
    """Convert a rendered node (or list of nodes) to an HTML string."""
    if node is None:
        return ""
    parts: list[str] = []
    # Items are nodes to open, or already-built end tags (pushed as `_EndTag`).
    stack: list[Any] = list(reversed(node)) if isinstance(node, list) else [node]
    while stack:
        current = stack.pop()
        if current is None:
            continue
        if isinstance(current, _EndTag):
            parts.append(current.html)
            continue
        if isinstance(current, str):
            parts.append(_escape_text(current))
            continue
        parts.append(serialize_start_tag(current.tag, props_to_attrs(current.props, policy)))
        if current.tag in VOID_ELEMENTS:
            continue
        stack.append(_EndTag(serialize_end_tag(current.tag)))
        stack.extend(reversed(current.children))
    return "".join(parts)
