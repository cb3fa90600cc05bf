"""First-pass allow-list sanitizer.

This is the coarse stage that runs before rendering: it decides which tags and
attribute names are admissible at all. It never looks at attribute values;
value-level policy (URLs, inline styles, `rel` hardening) belongs to the
renderer's pass, and this stage hands values through exactly as authored.

The pass is a list of justhtml transforms applied to the parsed tree:

- `Decide` keeps allowed tags, unwraps other tags (children kept) or drops
  them with their subtree when `strip_disallowed_tags` is False.
- Tags in `drop_content_tags` (script, style, ...) are dropped with content.
- `EditAttrs` removes event handlers (`on*`) and `srcdoc` unconditionally and
  keeps attributes matching `allowed_attributes[tag]` or
  `allowed_attributes["*"]`; entries may be glob patterns such as `data-*`.
- `DropComments` removes comments when `drop_comments` is set.
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Mapping
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from typing import Any

from justhtml.transforms import (
    Decide,
    DecideAction,
    DropComments,
    EditAttrs,
    apply_compiled_transforms,
    compile_transforms,
)

from .errors import ReportCallback

logger = logging.getLogger(__name__)

# Never admissible, whatever the allow-list says.
ALWAYS_DROPPED_ATTR_PATTERNS = ("on*", "srcdoc")


@dataclass(frozen=True, slots=True)
class SanitizationPolicy:
    """An allow-list driven policy for the first sanitization pass.

    Tag and attribute names are compared ASCII-lowercased, so SVG spellings
    such as `viewBox` match an allow-list entry `viewbox`.
    """

    allowed_tags: Collection[str]
    allowed_attributes: Mapping[str, Collection[str]]

    drop_comments: bool = True

    # If True, disallowed elements are removed but their children are kept
    # (except for tags in `drop_content_tags`).
    strip_disallowed_tags: bool = True

    # Dangerous containers whose text payload should not be preserved.
    drop_content_tags: Collection[str] = field(
        default_factory=lambda: {"script", "style", "iframe", "object", "embed", "noscript", "template"}
    )

    def __post_init__(self) -> None:
        # Normalize to sets so the sanitizer can do fast membership checks.
        object.__setattr__(self, "allowed_tags", {str(t).lower() for t in self.allowed_tags})
        normalized_attrs: dict[str, frozenset[str]] = {}
        for tag, attrs in self.allowed_attributes.items():
            normalized_attrs[str(tag).lower()] = frozenset(str(a).lower() for a in attrs)
        object.__setattr__(self, "allowed_attributes", normalized_attrs)
        object.__setattr__(self, "drop_content_tags", {str(t).lower() for t in self.drop_content_tags})

    def is_attribute_allowed(self, tag: str, name: str) -> bool:
        tag = tag.lower()
        name = name.lower()
        if any(fnmatchcase(name, pattern) for pattern in ALWAYS_DROPPED_ATTR_PATTERNS):
            return False
        for key in (tag, "*"):
            for pattern in self.allowed_attributes.get(key, ()):
                if fnmatchcase(name, pattern):
                    return True
        return False

    def decide(self, tag: str) -> DecideAction:
        """Return the structural action for an element named `tag`."""
        tag = tag.lower()
        if tag in self.allowed_tags:
            return DecideAction.KEEP
        if tag in self.drop_content_tags or not self.strip_disallowed_tags:
            return DecideAction.DROP
        return DecideAction.UNWRAP


_SVG_PRESENTATION = [
    "fill",
    "stroke",
    "stroke-width",
    "stroke-linecap",
    "stroke-linejoin",
    "opacity",
    "transform",
]

DEFAULT_POLICY: SanitizationPolicy = SanitizationPolicy(
    allowed_tags=[
        # Structure
        "p",
        "div",
        "span",
        "section",
        "article",
        "aside",
        "figure",
        "figcaption",
        "details",
        "summary",
        # Headings
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        # Lists
        "ul",
        "ol",
        "li",
        "dl",
        "dt",
        "dd",
        # Text formatting
        "b",
        "strong",
        "i",
        "em",
        "u",
        "s",
        "del",
        "ins",
        "sub",
        "sup",
        "small",
        "mark",
        "abbr",
        "kbd",
        # Quotes/code
        "blockquote",
        "code",
        "pre",
        # Line breaks
        "br",
        "hr",
        # Links and images
        "a",
        "img",
        # Tables
        "table",
        "caption",
        "thead",
        "tbody",
        "tfoot",
        "tr",
        "th",
        "td",
        "colgroup",
        "col",
        # Inline SVG icons
        "svg",
        "g",
        "path",
        "circle",
        "rect",
        "line",
        "polyline",
    ],
    allowed_attributes={
        "*": ["class", "id", "data-*", "aria-*"],
        "a": ["href", "name", "target", "title"],
        "img": ["src", "srcset", "alt", "title", "width", "height", "style", "loading"],
        "abbr": ["title"],
        "ol": ["start"],
        "th": ["colspan", "rowspan", "align", "scope"],
        "td": ["colspan", "rowspan", "align"],
        "col": ["span"],
        "colgroup": ["span"],
        "svg": ["xmlns", "viewbox", "width", "height", "role", *_SVG_PRESENTATION],
        "g": _SVG_PRESENTATION,
        "path": ["d", *_SVG_PRESENTATION],
        "circle": ["cx", "cy", "r", *_SVG_PRESENTATION],
        "rect": ["x", "y", "width", "height", "rx", "ry", *_SVG_PRESENTATION],
        "line": ["x1", "y1", "x2", "y2", *_SVG_PRESENTATION],
        "polyline": ["points", *_SVG_PRESENTATION],
    },
)


def build_transforms(policy: SanitizationPolicy, report: ReportCallback | None = None) -> list[Any]:
    """Return the justhtml transform list that applies `policy`."""

    def _decide(node: Any) -> DecideAction:
        name = node.name
        if name.startswith("#") or name == "!doctype":
            return DecideAction.KEEP
        action = policy.decide(name)
        if action is DecideAction.KEEP:
            return action
        tag = name.lower()
        reason = "dropped content" if tag in policy.drop_content_tags else "not allowed"
        logger.debug("%s <%s> (%s)", action.value, tag, reason)
        if report is not None:
            report(f"Unsafe tag '{tag}' ({reason})", node=node)
        return action

    def _allowed_attrs(node: Any) -> dict[str, str | None] | None:
        attrs = node.attrs
        if not attrs:
            return None
        out: dict[str, str | None] = {}
        for name, value in attrs.items():
            key = name.strip()
            if key and policy.is_attribute_allowed(node.name, key):
                out[key] = value
                continue
            logger.debug("dropping attribute %r on <%s>", name, node.name)
            if report is not None:
                report(f"Unsafe attribute '{name}' (not allowed)", node=node)
        if len(out) == len(attrs):
            return None
        return out

    transforms: list[Any] = [
        Decide("*", _decide),
        EditAttrs("*", _allowed_attrs),
    ]
    if policy.drop_comments:
        transforms.append(DropComments())
    return transforms


def sanitize(
    node: Any,
    *,
    policy: SanitizationPolicy = DEFAULT_POLICY,
    report: ReportCallback | None = None,
) -> Any:
    """Apply `policy` to a parsed justhtml tree in place and return it.

    Only the descendants of `node` are filtered: pass the fragment root
    returned by `parse_fragment`. justhtml walks the tree with an explicit
    stack, so arbitrarily deep input is safe.
    """
    apply_compiled_transforms(node, compile_transforms(build_transforms(policy, report)))
    return node
