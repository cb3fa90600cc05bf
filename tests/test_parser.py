from __future__ import annotations

import unittest

from htmlguard.parser import parse_fragment
from htmlguard.render import _text_content


def _names(node) -> list[str]:
    return [child.name for child in node.children]


class TestParseFragment(unittest.TestCase):
    def test_empty_input(self) -> None:
        for html in ["", None]:
            root = parse_fragment(html)
            assert root.name == "#document-fragment"
            assert root.children == []

    def test_siblings_and_nesting(self) -> None:
        root = parse_fragment("<h1>Title</h1><p>One <strong>two</strong></p>")
        assert _names(root) == ["h1", "p"]
        p = root.children[1]
        assert _names(p) == ["#text", "strong"]
        assert p.children[0].data == "One "

    def test_character_references_decoded(self) -> None:
        root = parse_fragment("<p>a &amp; b &lt;c&gt;</p>")
        assert root.children[0].children[0].data == "a & b <c>"

    def test_attributes_first_occurrence_wins(self) -> None:
        root = parse_fragment('<img src=a.png alt ALT2="x" src="b.png">')
        img = root.children[0]
        assert img.attrs["src"] == "a.png"
        assert img.attrs["alt2"] == "x"
        assert "alt" in img.attrs

    def test_void_elements_take_no_children(self) -> None:
        root = parse_fragment("<p>a<br>b<img src=x>c</p>")
        p = root.children[0]
        assert _names(p) == ["#text", "br", "#text", "img", "#text"]
        assert p.children[1].children == []

    def test_self_closing_syntax_in_svg(self) -> None:
        root = parse_fragment('<svg><path d="M0 0"/><circle r="1"/></svg>')
        svg = root.children[0]
        assert _names(svg) == ["path", "circle"]

    def test_self_closing_slash_ignored_on_html_elements(self) -> None:
        root = parse_fragment('<a href="/x" target="_blank"/>Read more')
        assert _names(root) == ["a"]
        assert _text_content(root.children[0]) == "Read more"

        root = parse_fragment("<div/>inside</div>after")
        assert _names(root) == ["div", "#text"]
        assert _text_content(root.children[0]) == "inside"

    def test_svg_attribute_case_adjusted(self) -> None:
        root = parse_fragment('<svg viewBox="0 0 24 24" preserveAspectRatio="none"><path d="M0"/></svg>')
        assert root.children[0].attrs == {"viewBox": "0 0 24 24", "preserveAspectRatio": "none"}
        # Outside svg the HTML spelling is kept.
        root = parse_fragment('<div viewBox="1"></div>')
        assert root.children[0].attrs == {"viewbox": "1"}

    def test_implied_paragraph_end(self) -> None:
        root = parse_fragment("<p>one<p>two<div>three</div>")
        assert _names(root) == ["p", "p", "div"]

    def test_implied_list_item_end(self) -> None:
        root = parse_fragment("<ul><li>a<li>b</ul>")
        ul = root.children[0]
        assert _names(ul) == ["li", "li"]

    def test_implied_table_sections(self) -> None:
        root = parse_fragment("<table><tr><td>a<td>b<tr><td>c</table>")
        table = root.children[0]
        assert _names(table) == ["tbody"]
        tbody = table.children[0]
        assert _names(tbody) == ["tr", "tr"]
        assert _names(tbody.children[0]) == ["td", "td"]
        assert _names(tbody.children[1]) == ["td"]

    def test_raw_text_elements(self) -> None:
        root = parse_fragment('<script>if (a < b) { x("<b>") }</script><textarea><p>t</p></textarea>')
        script, textarea = root.children
        assert _names(script) == ["#text"]
        assert "<b>" in script.children[0].data
        assert _names(textarea) == ["#text"]
        assert textarea.children[0].data == "<p>t</p>"

    def test_comments_kept_as_nodes(self) -> None:
        root = parse_fragment("a<!-- note -->b")
        assert _names(root) == ["#text", "#comment", "#text"]
        assert root.children[1].data == " note "

    def test_stray_end_tag_reported(self) -> None:
        messages: list[str] = []

        def report(msg: str, *, node: object | None = None) -> None:
            messages.append(msg)

        root = parse_fragment("<div>x</span></div>", report=report)
        assert _names(root) == ["div"]
        assert messages
        assert all(msg.startswith("Parse error ") for msg in messages)

    def test_clean_input_reports_nothing(self) -> None:
        messages: list[str] = []

        def report(msg: str, *, node: object | None = None) -> None:
            messages.append(msg)

        parse_fragment("<p>One <em>two</em></p><ul><li>a</li></ul>", report=report)
        assert messages == []

    def test_deep_nesting(self) -> None:
        depth = 1000
        root = parse_fragment("<div>" * depth + "x" + "</div>" * depth)
        node = root
        levels = 0
        while node.children and node.children[0].name == "div":
            node = node.children[0]
            levels += 1
        assert levels == depth
        assert _text_content(root) == "x"


if __name__ == "__main__":
    unittest.main()
