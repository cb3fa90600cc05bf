"""URL policy engine.

Classifies the value of a URL-valued attribute and accepts or rejects it
according to the attribute's role:

- `href` is a user-initiated navigation: http, https, mailto and tel are
  accepted, as are fragments and relative references.
- `src` passively loads a resource: only http and https, plus relative
  references.

Decisions are made purely from the string. The verdict never rewrites the
value; `Allowed.value` is exactly what was passed in.
"""

from __future__ import annotations

import re
from collections.abc import Collection, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from urllib.parse import urlsplit

HREF = "href"
SRC = "src"

# Rejected for every role, whatever a rule says.
DANGEROUS_SCHEMES = frozenset({"javascript", "vbscript", "data"})

# Browsers drop tab/newline anywhere in a URL and leading/trailing C0
# controls and spaces before they look for the scheme.
_URL_IGNORED_CHARS_RE = re.compile(r"[\t\n\r]")
_SCHEME_RE = re.compile(r"^([a-zA-Z][a-zA-Z0-9+.\-]*):")


@dataclass(frozen=True, slots=True)
class Allowed:
    value: str


@dataclass(frozen=True, slots=True)
class Rejected:
    reason: str


UrlVerdict = Allowed | Rejected


@dataclass(frozen=True, slots=True)
class UrlRule:
    """Rule for one URL role (e.g. `href`, `src`)."""

    # Allow relative URLs (/path, ./path, ../path, bare path, ?query).
    allow_relative: bool = True

    # Allow same-document fragments (#foo).
    allow_fragment: bool = True

    # Allow protocol-relative URLs (//example.com). They inherit the page's
    # scheme and point at an arbitrary host.
    allow_protocol_relative: bool = False

    # Allow absolute URLs with these schemes (lowercase), e.g. {"https"}.
    # If empty, all absolute URLs with a scheme are disallowed.
    allowed_schemes: Collection[str] = field(default_factory=set)

    # If provided, absolute URLs are allowed only if the parsed host is in this
    # allowlist.
    allowed_hosts: Collection[str] | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "allowed_schemes", {str(s).lower() for s in self.allowed_schemes})
        if self.allowed_hosts is not None:
            object.__setattr__(self, "allowed_hosts", {str(h).lower() for h in self.allowed_hosts})


# Shared default for `evaluate`; copy it before extending.
DEFAULT_URL_RULES: Mapping[str, UrlRule] = MappingProxyType(
    {
        HREF: UrlRule(allowed_schemes=["http", "https", "mailto", "tel"]),
        SRC: UrlRule(allowed_schemes=["http", "https"], allow_fragment=False),
    }
)


def _normalize_for_scheme_check(value: str) -> str:
    value = _URL_IGNORED_CHARS_RE.sub("", value)
    return value.lstrip("".join(chr(c) for c in range(0x21))).rstrip()


def url_scheme(value: str) -> str | None:
    """Return the lowercase scheme of `value`, or None for scheme-less references.

    Only a leading `scheme:` prefix counts: the text before the first `:` must
    be a valid scheme token and contain no `/`, `?` or `#`. A `:` later in the
    string (a port, a colon in a path) does not make a scheme.
    """
    match = _SCHEME_RE.match(_normalize_for_scheme_check(value))
    if match is None:
        return None
    return match.group(1).lower()


def evaluate(role: str, value: str | None, *, rules: Mapping[str, UrlRule] = DEFAULT_URL_RULES) -> UrlVerdict:
    """Return the verdict for a URL-valued attribute in the given role."""
    rule = rules.get(role)
    if rule is None:
        msg = f"Unknown URL role: {role!r}"
        raise ValueError(msg)

    if value is None:
        return Rejected("missing")

    normalized = _normalize_for_scheme_check(value)
    if not normalized:
        return Rejected("empty")

    if normalized.startswith(("//", "\\\\", "/\\", "\\/")):
        if not rule.allow_protocol_relative:
            return Rejected("protocol-relative")
        return _check_host(rule, "https:" + normalized.replace("\\", "/"), value)

    scheme = url_scheme(normalized)
    if scheme is not None:
        if scheme in DANGEROUS_SCHEMES:
            return Rejected(f"dangerous scheme '{scheme}'")
        if scheme not in rule.allowed_schemes:
            return Rejected(f"scheme '{scheme}' not allowed")
        if scheme in {"http", "https"}:
            return _check_host(rule, normalized, value)
        return Allowed(value)

    if normalized.startswith("#"):
        return Allowed(value) if rule.allow_fragment else Rejected("fragment")

    # Root-relative, dot-relative, bare path or query-only reference.
    return Allowed(value) if rule.allow_relative else Rejected("relative")


def _check_host(rule: UrlRule, absolute: str, original: str) -> UrlVerdict:
    if rule.allowed_hosts is None:
        return Allowed(original)
    try:
        host = urlsplit(absolute).hostname
    except ValueError:
        return Rejected("unparseable host")
    if host is None or host.lower() not in rule.allowed_hosts:
        return Rejected(f"host '{host}' not allowed")
    return Allowed(original)


def evaluate_srcset(value: str | None, *, rules: Mapping[str, UrlRule] = DEFAULT_URL_RULES) -> UrlVerdict:
    """Evaluate every candidate of a `srcset` list under the `src` role.

    The attribute is only kept when every candidate URL is allowed.
    """
    if value is None or not value.strip():
        return Rejected("empty")
    for candidate in value.split(","):
        candidate = candidate.strip()
        if not candidate:
            return Rejected("empty candidate")
        url = candidate.split()[0]
        verdict = evaluate(SRC, url, rules=rules)
        if isinstance(verdict, Rejected):
            return verdict
    return Allowed(value)
