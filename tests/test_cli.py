from __future__ import annotations

import io
import json
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest import mock

from htmlguard.__main__ import main


def _run(argv: list[str], stdin: str = "") -> tuple[int, str, str]:
    out = io.StringIO()
    err = io.StringIO()
    with mock.patch("sys.stdin", io.StringIO(stdin)), redirect_stdout(out), redirect_stderr(err):
        try:
            code = main(argv)
        except SystemExit as exc:
            code = exc.code if isinstance(exc.code, int) else 1
    return code, out.getvalue(), err.getvalue()


class TestCli(unittest.TestCase):
    def test_html_from_stdin(self) -> None:
        code, out, _ = _run([], stdin='<p onclick="x">Hi <a href="javascript:x">there</a></p>')
        assert code == 0
        assert out == '<div class="markdown-content"><p>Hi <a>there</a></p></div>\n'

    def test_json_output(self) -> None:
        code, out, _ = _run(["--format", "json"], stdin='<span class="c">x</span>')
        assert code == 0
        data = json.loads(out)
        assert data == {
            "type": "div",
            "props": {"className": "markdown-content"},
            "children": [{"type": "span", "props": {"className": "c"}, "children": ["x"]}],
        }

    def test_file_input(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "post.html")
            with open(path, "w", encoding="utf-8") as f:
                f.write("<h1>Title</h1>")
            code, out, _ = _run([path])
        assert code == 0
        assert out == '<div class="markdown-content"><h1>Title</h1></div>\n'

    def test_missing_file(self) -> None:
        code, out, err = _run(["/nonexistent/post.html"])
        assert code == 1
        assert out == ""
        assert "cannot read" in err

    def test_usage_error(self) -> None:
        code, _, err = _run(["--format", "xml"])
        assert code == 2
        assert "invalid choice" in err

    def test_report_flag(self) -> None:
        code, _, err = _run(["--report"], stdin="<script>x</script><p>ok</p>")
        assert code == 0
        assert "htmlguard: Unsafe tag 'script' (dropped content)" in err

    def test_report_flag_shows_parse_errors(self) -> None:
        code, out, err = _run(["--report"], stdin="<p>x</span></p>")
        assert code == 0
        assert out == '<div class="markdown-content"><p>x</p></div>\n'
        assert "htmlguard: Parse error " in err

    def test_no_sanitize(self) -> None:
        code, out, _ = _run(["--no-sanitize"], stdin='<a rel="nofollow" target="_blank">x</a>')
        assert code == 0
        assert 'rel="nofollow noopener noreferrer"' in out


if __name__ == "__main__":
    unittest.main()
