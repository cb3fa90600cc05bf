"""Tree renderer: justhtml node tree (allow-list filtered) -> render-ready tree.

This is the composition root of the value-level pass. For every element it:

1. drops whitespace-only text children of structural table tags,
2. maps every attribute (URL policy, style sanitizer, renames),
3. hardens `rel` on anchors that open a new browsing context,
4. recurses into the remaining children in source order.

Nothing here raises for content reasons. Unsafe values disappear; the
`report` callback (if given) is told about each omission. Rendering is a
pure function of the input tree: identical input gives identical output.
"""

from __future__ import annotations

import logging
from typing import Any, cast

from .attrs import map_attributes
from .errors import ReportCallback
from .links import enforce_rel
from .node import RenderNode
from .parser import parse_fragment
from .policy import DEFAULT_RENDER_POLICY, RenderPolicy
from .sanitize import DEFAULT_POLICY, SanitizationPolicy, sanitize
from .tables import strip_table_whitespace

logger = logging.getLogger(__name__)


def _text_content(node: Any) -> str:
    """Concatenate descendant text in document order (iterative)."""
    parts: list[str] = []
    stack: list[Any] = [node]
    while stack:
        current = stack.pop()
        name = current.name
        if name == "#text":
            parts.append(current.data or "")
        elif not name.startswith("#") or name == "#document-fragment":
            stack.extend(reversed(current.children or []))
    return "".join(parts)


def _bind_report(report: ReportCallback | None, bound: Any) -> ReportCallback | None:
    if report is None:
        return None

    def _report(msg: str, *, node: Any | None = None) -> None:
        report(msg, node=node if node is not None else bound)

    return _report


class Renderer:
    """Render parsed nodes under one `RenderPolicy`.

    Instances hold no per-call state and can be shared between threads.
    """

    __slots__ = ("policy", "report")

    def __init__(self, policy: RenderPolicy = DEFAULT_RENDER_POLICY, report: ReportCallback | None = None) -> None:
        self.policy = policy
        self.report = report

    def render(self, node: Any) -> RenderNode | str | None:
        name = getattr(node, "name", None)
        if name is None:
            msg = f"Cannot render object of type {type(node).__name__}"
            raise TypeError(msg)
        if name == "#document-fragment":
            return self.wrap(self.render_children(node, depth=0))
        return self._render_node(node, depth=1)

    def wrap(self, children: list[Any]) -> RenderNode:
        props: dict[str, Any] = {}
        if self.policy.wrapper_class:
            props[self.policy.attribute_renames.get("class", "class")] = self.policy.wrapper_class
        return RenderNode(self.policy.wrapper_tag, props, children)

    def render_children(self, node: Any, *, depth: int) -> list[Any]:
        out: list[Any] = []
        for child in strip_table_whitespace(node, structural_tags=self.policy.structural_table_tags):
            rendered = self._render_node(child, depth=depth + 1)
            if rendered is None:
                continue
            if isinstance(rendered, list):
                out.extend(rendered)
            else:
                out.append(rendered)
        return out

    def _render_node(self, node: Any, *, depth: int) -> RenderNode | str | list[Any] | None:
        name = node.name
        if name == "#text":
            return node.data or ""
        if name == "#comment" or name == "!doctype":
            return None
        if name == "#document-fragment":
            # A nested fragment contributes its children in place.
            return self.render_children(node, depth=depth - 1)

        if depth > self.policy.max_depth:
            logger.warning("element nesting deeper than %d; flattening <%s> to text", self.policy.max_depth, name)
            if self.report is not None:
                self.report(f"Nesting deeper than {self.policy.max_depth} flattened to text", node=node)
            text = _text_content(node)
            return text or None

        report = _bind_report(self.report, node)
        props = map_attributes(name, node.attrs, policy=self.policy, report=report)
        element = RenderNode(name, props, self.render_children(node, depth=depth))
        if name == "a":
            enforce_rel(element, tokens=self.policy.force_link_rel, report=report)
        return element


def render(
    node: Any,
    *,
    policy: RenderPolicy = DEFAULT_RENDER_POLICY,
    report: ReportCallback | None = None,
) -> RenderNode | str | None:
    """Render a parsed node.

    - A `DocumentFragment` renders to the wrapper element holding its children.
    - An element renders to a `RenderNode`.
    - A text node renders to its string, unchanged.
    - A comment renders to None.
    """
    return Renderer(policy, report).render(node)


def render_html(
    html: str | None,
    *,
    policy: RenderPolicy = DEFAULT_RENDER_POLICY,
    sanitize_policy: SanitizationPolicy | None = DEFAULT_POLICY,
    report: ReportCallback | None = None,
) -> RenderNode:
    """Parse, allow-list and render an HTML fragment.

    Pass `sanitize_policy=None` when the markup has already been through an
    allow-list sanitizer. Empty input renders to an empty wrapper element.
    HTML5 parse errors are forwarded to `report` before any omission messages.
    """
    root = parse_fragment(html, report=report)
    if sanitize_policy is not None:
        root = sanitize(root, policy=sanitize_policy, report=report)
    return cast(RenderNode, Renderer(policy, report).render(root))
