"""The render-ready output tree.

Parsed input is a justhtml node tree (see `htmlguard.parser`). `RenderNode`
is the only type that leaves the renderer: attributes are already decided and
renamed for the component framework, and text children are plain strings.
"""

from __future__ import annotations

from typing import Any


class RenderNode:
    """An element in the render-ready output tree.

    `props` uses the component framework's attribute names (`className`,
    camel-cased `style` dict). Children are `RenderNode` or `str`.
    """

    __slots__ = ("children", "props", "tag")

    def __init__(self, tag: str, props: dict[str, Any] | None = None, children: list[Any] | None = None) -> None:
        self.tag = tag
        self.props = props if props is not None else {}
        self.children = children if children is not None else []

    def to_text(self) -> str:
        parts: list[str] = []
        stack: list[Any] = [self]
        while stack:
            node = stack.pop()
            if isinstance(node, str):
                parts.append(node)
                continue
            stack.extend(reversed(node.children))
        return "".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready representation of the subtree."""
        props: dict[str, Any] = {}
        for key, value in self.props.items():
            props[key] = dict(value) if isinstance(value, dict) else value
        return {
            "type": self.tag,
            "props": props,
            "children": [c if isinstance(c, str) else c.to_dict() for c in self.children],
        }

    def find_all(self, tag: str) -> list[RenderNode]:
        """Return descendant elements (including self) named `tag`, in document order."""
        found: list[RenderNode] = []
        stack: list[Any] = [self]
        while stack:
            node = stack.pop()
            if isinstance(node, str):
                continue
            if node.tag == tag:
                found.append(node)
            stack.extend(reversed(node.children))
        return found

    def find(self, tag: str) -> RenderNode | None:
        matches = self.find_all(tag)
        return matches[0] if matches else None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RenderNode):
            return NotImplemented
        return self.tag == other.tag and self.props == other.props and self.children == other.children

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"RenderNode({self.tag!r}, {self.props!r}, children={len(self.children)})"
