"""Inline style sanitizer.

Turns a `style` attribute string into an ordered list of declarations with
camel-cased property names, ready to be handed to the component framework as a
style object. This is deliberately not a CSS parser: declarations are split
on `;` and then on the first `:` only, so values such as
`url(https://example.com/bg.png)` keep their colons.

Declarations are discarded when:
- the property or the value is empty after trimming,
- there is no `:` at all (`"width"`),
- the value contains a legacy injection vector: `expression(` (IE dynamic
  properties) or a `javascript:`/`vbscript:` URL.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from .errors import ReportCallback

logger = logging.getLogger(__name__)

_CSS_COMMENT_RE = re.compile(r"/\*.*?\*/", re.DOTALL)
_CSS_ESCAPE_RE = re.compile(r"\\([0-9a-fA-F]{1,6})\s?|\\(.)", re.DOTALL)
_CSS_DANGEROUS_RE = re.compile(r"expression\s*\(|javascript\s*:|vbscript\s*:", re.IGNORECASE)
_HYPHEN_CHAR_RE = re.compile(r"-([a-z0-9])")
_UPPER_CHAR_RE = re.compile(r"[A-Z]")


@dataclass(frozen=True, slots=True)
class StyleDeclaration:
    property: str
    value: str


def _unescape_css(value: str) -> str:
    def _replace(match: re.Match[str]) -> str:
        hex_digits, literal = match.group(1), match.group(2)
        if hex_digits is None:
            return literal
        codepoint = int(hex_digits, 16)
        if codepoint == 0 or codepoint > 0x10FFFF or 0xD800 <= codepoint <= 0xDFFF:
            return "\ufffd"
        return chr(codepoint)

    return _CSS_ESCAPE_RE.sub(_replace, value)


def is_dangerous_value(value: str) -> bool:
    """Return True if a declaration value carries a script-capable pattern."""
    decoded = _unescape_css(_CSS_COMMENT_RE.sub("", value))
    return _CSS_DANGEROUS_RE.search(decoded) is not None


def camel_case_property(name: str) -> str:
    """Convert a hyphen-case CSS property to the framework's camel-case form.

    `border-radius` -> `borderRadius`, `-webkit-transition` -> `WebkitTransition`,
    `-ms-transform` -> `msTransform`. Custom properties (`--accent`) and names
    without a hyphen are returned unchanged.
    """
    if name.startswith("--") or "-" not in name:
        return name
    if name.startswith("-ms-"):
        name = name[1:]
    return _HYPHEN_CHAR_RE.sub(lambda m: m.group(1).upper(), name)


def hyphenate_property(name: str) -> str:
    """Inverse of `camel_case_property`."""
    if name.startswith("--"):
        return name
    out = _UPPER_CHAR_RE.sub(lambda m: "-" + m.group(0).lower(), name)
    if out.startswith("ms-"):
        out = "-" + out
    return out


def parse_style(value: str | None) -> list[StyleDeclaration]:
    """Split a style string into trimmed, non-empty declarations (no safety checks)."""
    declarations: list[StyleDeclaration] = []
    if not value:
        return declarations
    for segment in value.split(";"):
        prop, sep, val = segment.partition(":")
        if not sep:
            continue
        prop = prop.strip()
        val = val.strip()
        if not prop or not val:
            continue
        declarations.append(StyleDeclaration(prop, val))
    return declarations


def sanitize_style(value: str | None, *, report: ReportCallback | None = None) -> list[StyleDeclaration]:
    """Return the safe declarations of `value` in source order, camel-cased."""
    out: list[StyleDeclaration] = []
    for declaration in parse_style(value):
        if is_dangerous_value(declaration.value):
            logger.debug("dropping unsafe style declaration %r", declaration.property)
            if report is not None:
                report(f"Unsafe inline style declaration '{declaration.property}'")
            continue
        prop = declaration.property
        if not prop.startswith("--"):
            prop = prop.lower()
        out.append(StyleDeclaration(camel_case_property(prop), declaration.value))
    return out


def style_to_dict(declarations: list[StyleDeclaration]) -> dict[str, str]:
    """Build the framework style object; a repeated property keeps its last value."""
    return {d.property: d.value for d in declarations}


def serialize_style(style: dict[str, str]) -> str:
    """Write a camel-cased style object back as a CSS declaration list."""
    return "; ".join(f"{hyphenate_property(prop)}: {value}" for prop, value in style.items())
