"""Attribute mapping for the component framework.

`map_attribute` decides, per (tag, attribute, value), whether an attribute is
kept as-is, kept under a new name, or dropped:

- `class` is renamed to the framework's class-list prop (`className`).
- `style` becomes a camel-cased style object; no safe declaration -> dropped.
- URL-valued attributes (`href`, `src`, ...) go through the URL policy
  engine; a rejected URL drops the attribute, an allowed one keeps the
  original string.
- Hyphenated attributes (SVG presentation attributes, `data-*`, `aria-*`)
  are kept verbatim: the framework renders them back in hyphen-case.
- Everything else passes through unchanged. Tag/attribute admissibility is
  the allow-list stage's job, not this module's.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .errors import ReportCallback
from .policy import DEFAULT_RENDER_POLICY, RenderPolicy
from .style import sanitize_style, style_to_dict
from .urls import Rejected, evaluate, evaluate_srcset

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Keep:
    value: Any


@dataclass(frozen=True, slots=True)
class KeepRenamed:
    name: str
    value: Any


@dataclass(frozen=True, slots=True)
class Drop:
    reason: str = ""


AttributeDecision = Keep | KeepRenamed | Drop


def is_verbatim_attribute(name: str, policy: RenderPolicy = DEFAULT_RENDER_POLICY) -> bool:
    return name.startswith(("data-", "aria-")) or name in policy.verbatim_attributes


def map_attribute(
    tag: str,
    name: str,
    value: str | None,
    *,
    policy: RenderPolicy = DEFAULT_RENDER_POLICY,
    report: ReportCallback | None = None,
) -> AttributeDecision:
    """Decide what happens to one attribute of a `tag` element."""
    key = name.lower()
    value = "" if value is None else value

    if key == "style":
        declarations = sanitize_style(value, report=report)
        if not declarations:
            return Drop("no safe declarations")
        return Keep(style_to_dict(declarations))

    if key == "srcset":
        verdict = evaluate_srcset(value, rules=policy.url_rules)
    else:
        role = policy.url_attribute_roles.get(key)
        verdict = evaluate(role, value, rules=policy.url_rules) if role is not None else None

    if verdict is not None:
        if isinstance(verdict, Rejected):
            logger.debug("dropping %s on <%s>: %s", name, tag, verdict.reason)
            if report is not None:
                report(f"Unsafe URL in attribute '{name}' ({verdict.reason})")
            return Drop(verdict.reason)
        return Keep(verdict.value)

    if is_verbatim_attribute(key, policy):
        return Keep(value)

    renamed = policy.attribute_renames.get(key)
    if renamed is not None and renamed != name:
        return KeepRenamed(renamed, value)
    return Keep(value)


def map_attributes(
    tag: str,
    attrs: Mapping[str, str | None],
    *,
    policy: RenderPolicy = DEFAULT_RENDER_POLICY,
    report: ReportCallback | None = None,
) -> dict[str, Any]:
    """Apply `map_attribute` to every attribute, preserving source order."""
    props: dict[str, Any] = {}
    for name, value in attrs.items():
        if not name or not name.strip():
            continue
        decision = map_attribute(tag, name, value, policy=policy, report=report)
        if isinstance(decision, Drop):
            continue
        if isinstance(decision, KeepRenamed):
            props[decision.name] = decision.value
        else:
            props[name] = decision.value
    return props
