"""Fragment parser: HTML string -> justhtml node tree.

Parsing is delegated to justhtml's HTML5 tree builder in fragment mode, with
a `<div>` as the context element. That gives the full HTML5 recovery rules:
optional end tags, self-closing syntax (`<a/>` is an ordinary start tag outside
foreign content), raw-text elements and SVG attribute case adjustment
(`viewBox`).

The returned root is a justhtml `DocumentFragment`; its descendants are
justhtml `Element`, `Text` and `Comment` nodes. Parse problems never raise.
They are logged at DEBUG and forwarded to `report` when one is given.
"""

from __future__ import annotations

import logging
from typing import Any

from justhtml import JustHTML
from justhtml.parser.context import FragmentContext

from .errors import ReportCallback

logger = logging.getLogger(__name__)

# Markdown output lands inside a block container.
FRAGMENT_CONTEXT = "div"


def parse_fragment(html: str | None, *, report: ReportCallback | None = None) -> Any:
    """Parse an HTML fragment into a justhtml `DocumentFragment`."""
    doc = JustHTML(
        html or "",
        sanitize=False,
        fragment_context=FragmentContext(FRAGMENT_CONTEXT),
        collect_errors=True,
    )
    for err in doc.errors:
        logger.debug("parse error %s", err)
        if report is not None:
            report(f"Parse error {err}", node=None)
    return doc.root
