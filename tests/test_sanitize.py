from __future__ import annotations

import unittest

from justhtml import DocumentFragment, Element, Text
from justhtml.transforms import Decide, DecideAction, DropComments, EditAttrs

from htmlguard.parser import parse_fragment
from htmlguard.render import _text_content
from htmlguard.sanitize import DEFAULT_POLICY, SanitizationPolicy, build_transforms, sanitize


def _clean(html: str, **kwargs):
    return sanitize(parse_fragment(html), **kwargs)


def _names(node) -> list[str]:
    return [child.name for child in node.children]


class TestSanitizePlumbing(unittest.TestCase):
    def test_policy_normalizes_inputs(self) -> None:
        policy = SanitizationPolicy(
            allowed_tags=["DIV"],
            allowed_attributes={"*": ["ID"], "div": ["Data-*"]},
            drop_content_tags=["SCRIPT"],
        )
        assert policy.allowed_tags == {"div"}
        assert policy.allowed_attributes == {"*": frozenset({"id"}), "div": frozenset({"data-*"})}
        assert policy.drop_content_tags == {"script"}

    def test_attribute_patterns(self) -> None:
        policy = SanitizationPolicy(allowed_tags=["div"], allowed_attributes={"*": ["data-*", "x?z"]})
        assert policy.is_attribute_allowed("div", "data-x")
        assert policy.is_attribute_allowed("div", "data-")
        assert not policy.is_attribute_allowed("div", "aria-x")
        assert policy.is_attribute_allowed("div", "xyz")
        assert not policy.is_attribute_allowed("div", "xz")

    def test_event_handlers_and_srcdoc_never_allowed(self) -> None:
        policy = SanitizationPolicy(allowed_tags=["div"], allowed_attributes={"*": ["*"]})
        assert policy.is_attribute_allowed("div", "title")
        assert not policy.is_attribute_allowed("div", "onclick")
        assert not policy.is_attribute_allowed("div", "ONCLICK")
        assert not policy.is_attribute_allowed("div", "srcdoc")

    def test_decide(self) -> None:
        policy = SanitizationPolicy(allowed_tags=["p"], allowed_attributes={})
        assert policy.decide("p") is DecideAction.KEEP
        assert policy.decide("P") is DecideAction.KEEP
        assert policy.decide("script") is DecideAction.DROP
        assert policy.decide("blink") is DecideAction.UNWRAP

    def test_build_transforms(self) -> None:
        transforms = build_transforms(DEFAULT_POLICY)
        assert [type(t) for t in transforms] == [Decide, EditAttrs, DropComments]
        keep_comments = SanitizationPolicy(allowed_tags=["p"], allowed_attributes={}, drop_comments=False)
        assert [type(t) for t in build_transforms(keep_comments)] == [Decide, EditAttrs]

    def test_filters_in_place(self) -> None:
        root = parse_fragment('<div onclick="x()"><script>x()</script>text</div>')
        out = sanitize(root)
        assert out is root
        div = root.children[0]
        assert div.attrs == {}
        assert _names(div) == ["#text"]

    def test_constructed_tree(self) -> None:
        root = DocumentFragment()
        p = Element("p", {"class": "x", "onclick": "y"}, "html")
        p.append_child(Text("a"))
        root.append_child(p)
        sanitize(root)
        assert _names(root) == ["p"]
        assert p.attrs == {"class": "x"}


class TestDefaultPolicy(unittest.TestCase):
    def test_script_dropped_with_content(self) -> None:
        out = _clean('<p>Safe</p><script>alert("XSS")</script>')
        assert _names(out) == ["p"]
        assert _text_content(out) == "Safe"

    def test_dangerous_containers_dropped(self) -> None:
        out = _clean("<iframe src=x>inner</iframe><style>p{}</style><object>o</object>ok")
        assert _text_content(out) == "ok"

    def test_unknown_tags_unwrapped(self) -> None:
        out = _clean("<custom-box><p>kept</p></custom-box><font>t</font>")
        assert _names(out) == ["p", "#text"]

    def test_unwrapped_children_are_filtered(self) -> None:
        out = _clean('<blink><span onclick="x" class="c">a</span><script>b</script></blink>')
        assert _names(out) == ["span"]
        assert out.children[0].attrs == {"class": "c"}

    def test_event_handlers_dropped(self) -> None:
        out = _clean('<div onclick="alert(1)">Click</div><span onmouseover="x">Hover</span>')
        assert out.children[0].attrs == {}
        assert out.children[1].attrs == {}

    def test_rel_dropped(self) -> None:
        out = _clean('<a href="/x" rel="nofollow" target="_blank">x</a>')
        assert out.children[0].attrs == {"href": "/x", "target": "_blank"}

    def test_values_are_not_touched(self) -> None:
        out = _clean('<a href="javascript:alert(1)" title="t">x</a><img src="x" style="width: expression(1)">')
        assert out.children[0].attrs["href"] == "javascript:alert(1)"
        assert out.children[1].attrs["style"] == "width: expression(1)"

    def test_comments_dropped(self) -> None:
        out = _clean("a<!-- hidden -->b")
        assert "#comment" not in _names(out)
        assert _text_content(out) == "ab"

    def test_blog_attributes_kept(self) -> None:
        out = _clean(
            '<pre data-language="typescript" class="language-ts"><code class="language-ts">x</code></pre>'
            '<div data-alert-type="warning">Caution!</div>'
            '<h2 id="my-section" class="heading">Section</h2>'
            '<a name="bookmark" aria-label="Go home" title="T">a</a>'
        )
        pre, alert, heading, anchor = out.children
        assert pre.attrs == {"data-language": "typescript", "class": "language-ts"}
        assert alert.attrs == {"data-alert-type": "warning"}
        assert heading.attrs == {"id": "my-section", "class": "heading"}
        assert anchor.attrs == {"name": "bookmark", "aria-label": "Go home", "title": "T"}

    def test_svg_icon_kept_with_attribute_case(self) -> None:
        out = _clean(
            '<svg class="icon" viewBox="0 0 24 24" fill="none" onload="x()">'
            '<path d="M5 12h14" stroke-width="2" stroke-linecap="round" onload="x()"/></svg>'
        )
        svg = out.children[0]
        assert svg.attrs == {"class": "icon", "viewBox": "0 0 24 24", "fill": "none"}
        assert svg.children[0].attrs == {"d": "M5 12h14", "stroke-width": "2", "stroke-linecap": "round"}

    def test_table_attributes(self) -> None:
        out = _clean('<table><tr><td colspan="2" bgcolor="red">x</td></tr></table>')
        td = out.children[0].children[0].children[0].children[0]
        assert td.name == "td"
        assert td.attrs == {"colspan": "2"}


class TestPolicyOptions(unittest.TestCase):
    def test_strip_disallowed_tags_false_drops_subtree(self) -> None:
        policy = SanitizationPolicy(
            allowed_tags=["p"],
            allowed_attributes={},
            strip_disallowed_tags=False,
        )
        out = _clean("<p>a</p><section><p>b</p></section>", policy=policy)
        assert _text_content(out) == "a"

    def test_keep_comments(self) -> None:
        policy = SanitizationPolicy(allowed_tags=["p"], allowed_attributes={}, drop_comments=False)
        out = _clean("<!--c--><p>x</p>", policy=policy)
        assert _names(out) == ["#comment", "p"]

    def test_report_messages(self) -> None:
        messages: list[str] = []

        def report(msg: str, *, node: object | None = None) -> None:
            messages.append(msg)

        _clean('<script>x</script><blink onclick="y">z</blink><p onclick="y">t</p>', report=report)
        assert messages == [
            "Unsafe tag 'script' (dropped content)",
            "Unsafe tag 'blink' (not allowed)",
            "Unsafe attribute 'onclick' (not allowed)",
        ]

    def test_default_policy_has_no_rel(self) -> None:
        assert not DEFAULT_POLICY.is_attribute_allowed("a", "rel")
        assert DEFAULT_POLICY.is_attribute_allowed("a", "href")
        assert DEFAULT_POLICY.is_attribute_allowed("img", "srcset")
        assert DEFAULT_POLICY.is_attribute_allowed("svg", "viewBox")


if __name__ == "__main__":
    unittest.main()
