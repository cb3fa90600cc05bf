"""Render policy: configuration for the value-level pass."""

from __future__ import annotations

from collections.abc import Collection, Mapping
from dataclasses import dataclass, field

from .constants import SVG_PRESENTATION_ATTRIBUTES, TABLE_STRUCTURE_TAGS
from .urls import DEFAULT_URL_RULES, HREF, SRC, UrlRule

# Rendering recurses twice per nesting level; stay well below the default
# interpreter recursion limit of 1000 frames.
MAX_DEPTH_LIMIT = 400


@dataclass(frozen=True, slots=True)
class RenderPolicy:
    """Configuration for attribute mapping and tree rendering.

    - `url_rules`: role -> UrlRule used by the URL policy engine.
    - `url_attribute_roles`: attribute name -> URL role (`href`/`src`).
      `srcset` is handled separately, candidate by candidate, as `src`.
    - `attribute_renames`: attribute name -> framework prop name.
    - `verbatim_attributes`: hyphenated names that are never renamed, in
      addition to any `data-*`/`aria-*` attribute.
    - `structural_table_tags`: tags whose whitespace-only text children are
      removed before rendering.
    - `force_link_rel`: tokens guaranteed in `rel` on `target="_blank"` anchors.
    - `wrapper_tag`/`wrapper_class`: element wrapping a rendered fragment.
    - `max_depth`: element nesting ceiling; deeper subtrees are flattened to text.
    """

    url_rules: Mapping[str, UrlRule] = field(default_factory=lambda: dict(DEFAULT_URL_RULES))
    url_attribute_roles: Mapping[str, str] = field(
        default_factory=lambda: {"href": HREF, "xlink:href": HREF, "src": SRC, "poster": SRC}
    )
    attribute_renames: Mapping[str, str] = field(default_factory=lambda: {"class": "className"})
    verbatim_attributes: Collection[str] = field(default_factory=lambda: SVG_PRESENTATION_ATTRIBUTES)
    structural_table_tags: Collection[str] = field(default_factory=lambda: TABLE_STRUCTURE_TAGS)
    force_link_rel: Collection[str] = ("noopener", "noreferrer")
    wrapper_tag: str = "div"
    wrapper_class: str | None = "markdown-content"
    max_depth: int = 256

    def __post_init__(self) -> None:
        if SRC not in self.url_rules:
            msg = f"No URL rule for role {SRC!r} (needed for srcset)"
            raise ValueError(msg)
        for role in self.url_attribute_roles.values():
            if role not in self.url_rules:
                msg = f"No URL rule for role {role!r}"
                raise ValueError(msg)
        if not 1 <= self.max_depth <= MAX_DEPTH_LIMIT:
            msg = f"max_depth must be between 1 and {MAX_DEPTH_LIMIT}"
            raise ValueError(msg)

        # Accept lists/tuples from user code, normalize for internal use.
        object.__setattr__(self, "url_rules", dict(self.url_rules))
        object.__setattr__(
            self,
            "url_attribute_roles",
            {str(k).lower(): str(v) for k, v in self.url_attribute_roles.items()},
        )
        object.__setattr__(
            self,
            "attribute_renames",
            {str(k).lower(): str(v) for k, v in self.attribute_renames.items()},
        )
        object.__setattr__(self, "verbatim_attributes", frozenset(str(a).lower() for a in self.verbatim_attributes))
        object.__setattr__(
            self,
            "structural_table_tags",
            frozenset(str(t).lower() for t in self.structural_table_tags),
        )
        # Keep the caller's token order; drop blanks and duplicates.
        tokens = [str(t).strip().lower() for t in self.force_link_rel]
        object.__setattr__(self, "force_link_rel", tuple(dict.fromkeys(t for t in tokens if t)))


DEFAULT_RENDER_POLICY = RenderPolicy()
