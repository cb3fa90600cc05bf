from .attrs import Drop, Keep, KeepRenamed, map_attribute, map_attributes
from .links import enforce_rel
from .node import RenderNode
from .parser import parse_fragment
from .policy import DEFAULT_RENDER_POLICY, RenderPolicy
from .render import Renderer, render, render_html
from .sanitize import DEFAULT_POLICY, SanitizationPolicy, build_transforms, sanitize
from .serialize import to_html
from .style import StyleDeclaration, sanitize_style
from .tables import strip_table_whitespace
from .urls import DEFAULT_URL_RULES, Allowed, Rejected, UrlRule
from .urls import evaluate as evaluate_url

__all__ = [
    "DEFAULT_POLICY",
    "DEFAULT_RENDER_POLICY",
    "DEFAULT_URL_RULES",
    "Allowed",
    "Drop",
    "Keep",
    "KeepRenamed",
    "Rejected",
    "RenderNode",
    "RenderPolicy",
    "Renderer",
    "SanitizationPolicy",
    "StyleDeclaration",
    "UrlRule",
    "build_transforms",
    "enforce_rel",
    "evaluate_url",
    "map_attribute",
    "map_attributes",
    "parse_fragment",
    "render",
    "render_html",
    "sanitize",
    "sanitize_style",
    "strip_table_whitespace",
    "to_html",
]
