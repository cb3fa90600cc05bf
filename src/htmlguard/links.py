"""Link hardening for new-tab anchors.

An anchor opened with `target="_blank"` gets a `window.opener` handle on the
page that opened it unless `rel` carries `noopener`/`noreferrer`. An
allow-list cannot see that combination, so it is enforced here, on the
already-mapped anchor.
"""

from __future__ import annotations

from collections.abc import Collection

from .errors import ReportCallback
from .node import RenderNode

FORCED_REL_TOKENS = ("noopener", "noreferrer")


def opens_new_context(node: RenderNode) -> bool:
    target = node.props.get("target")
    return isinstance(target, str) and target.strip().lower() == "_blank"


def merge_rel_tokens(existing: str | None, tokens: Collection[str]) -> str:
    """Merge `tokens` into a `rel` value without removing existing tokens."""
    merged: list[str] = []
    seen: set[str] = set()
    for tok in (existing or "").split():
        key = tok.lower()
        if key not in seen:
            seen.add(key)
            merged.append(tok)
    for tok in tokens:
        if tok not in seen:
            seen.add(tok)
            merged.append(tok)
    return " ".join(merged)


def enforce_rel(
    node: RenderNode,
    *,
    tokens: Collection[str] = FORCED_REL_TOKENS,
    report: ReportCallback | None = None,
) -> RenderNode:
    """Ensure a `target="_blank"` anchor's `rel` includes every token.

    Anchors without `target="_blank"` are returned untouched; no `rel` is
    synthesized for them. The node is updated in place and returned.
    """
    if not tokens or not opens_new_context(node):
        return node

    existing = node.props.get("rel")
    merged = merge_rel_tokens(existing if isinstance(existing, str) else None, tokens)
    if merged != existing:
        node.props["rel"] = merged
        if report is not None:
            report(f"Merged tokens into attribute 'rel' on <{node.tag}>", node=node)
    return node
