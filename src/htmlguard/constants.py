"""HTML element and attribute constants.

Frozensets throughout: the code only needs membership tests.

References:
    - https://html.spec.whatwg.org/multipage/syntax.html#void-elements
"""

# HTML5 void elements (no closing tag, never have children)
VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

# Structural table tags: direct whitespace-only text children carry no meaning.
TABLE_STRUCTURE_TAGS = frozenset({"table", "thead", "tbody", "tfoot", "tr", "colgroup"})

# SVG presentation attributes the component framework renders back in
# hyphen-case; they must never be camel-cased by attribute mapping.
SVG_PRESENTATION_ATTRIBUTES = frozenset(
    {
        "clip-path",
        "clip-rule",
        "color-interpolation",
        "dominant-baseline",
        "fill-opacity",
        "fill-rule",
        "flood-color",
        "flood-opacity",
        "font-family",
        "font-size",
        "font-weight",
        "marker-end",
        "marker-mid",
        "marker-start",
        "shape-rendering",
        "stop-color",
        "stop-opacity",
        "stroke-dasharray",
        "stroke-dashoffset",
        "stroke-linecap",
        "stroke-linejoin",
        "stroke-miterlimit",
        "stroke-opacity",
        "stroke-width",
        "text-anchor",
        "text-rendering",
        "vector-effect",
    }
)
