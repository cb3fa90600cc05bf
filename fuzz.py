#!/usr/bin/env python3
"""
Random fuzzer for the htmlguard render pipeline.
Generates hostile/malformed fragments and checks the safety properties of the
rendered tree, not just that nothing crashes.
"""

import argparse
import random
import string
import sys
import time
import traceback

from htmlguard import render_html
from htmlguard.node import RenderNode
from htmlguard.style import is_dangerous_value
from htmlguard.urls import DANGEROUS_SCHEMES, url_scheme

TAGS = [
    "div", "span", "p", "a", "img", "table", "thead", "tbody", "tr", "td", "th",
    "ul", "ol", "li", "pre", "code", "blockquote", "h1", "h2", "em", "strong",
    "svg", "path", "g", "script", "style", "iframe", "object", "form", "input",
]

URL_ATTRIBUTES = ["href", "src", "xlink:href", "poster", "srcset"]

SCHEMES = ["javascript", "vbscript", "data", "http", "https", "mailto", "tel", "ftp", "file", "sms"]

CSS_PROPERTIES = ["width", "color", "background", "background-image", "-webkit-transition", "--accent", "behavior"]


def random_string(min_len=0, max_len=12):
    """Generate random ASCII string."""
    length = random.randint(min_len, max_len)
    return "".join(random.choices(string.ascii_letters + string.digits, k=length))


def obfuscate_scheme(scheme):
    """Mix case and sprinkle characters browsers ignore in a scheme."""
    out = []
    for ch in scheme:
        out.append(ch.upper() if random.random() < 0.3 else ch)
        if random.random() < 0.1:
            out.append(random.choice(["\t", "\n", "\r"]))
    prefix = "".join(random.choices([" ", "\x01", "\x1f", ""], k=random.randint(0, 3)))
    return prefix + "".join(out)


def fuzz_url():
    """Generate a URL value, often with a hostile scheme."""
    variants = [
        lambda: f"{obfuscate_scheme(random.choice(SCHEMES))}:{random_string()}",
        lambda: f"{obfuscate_scheme(random.choice(SCHEMES))}://{random_string(1)}.com/{random_string()}",
        lambda: f"//{random_string(1)}.com",
        lambda: f"/{random_string()}",
        lambda: f"#{random_string()}",
        lambda: f"java&#x09;script:{random_string()}",
        lambda: f"&#106;avascript:{random_string()}",
        lambda: "",
        lambda: f"{random_string()}:{random.randint(1, 65535)}",
    ]
    return random.choice(variants)()


def fuzz_css_value():
    """Generate a CSS value, often with an injection vector."""
    variants = [
        lambda: f"{random.randint(0, 500)}px",
        lambda: "expression(alert(1))",
        lambda: "EXPRESSION (alert(1))",
        lambda: "url(javascript:alert(1))",
        lambda: "url(java/**/script:alert(1))",
        lambda: "url(\\6a avascript:alert(1))",
        lambda: "url(vbscript:msgbox(1))",
        lambda: f"url(https://{random_string(1)}.com/a.png)",
        lambda: random_string(),
    ]
    return random.choice(variants)()


def fuzz_style():
    parts = []
    for _ in range(random.randint(0, 5)):
        choice = random.random()
        if choice < 0.1:
            parts.append(random_string())
        elif choice < 0.2:
            parts.append(f":{fuzz_css_value()}")
        else:
            parts.append(f"{random.choice(CSS_PROPERTIES)}:{fuzz_css_value()}")
    return ";".join(parts)


def fuzz_attribute():
    choice = random.random()
    if choice < 0.4:
        return f'{random.choice(URL_ATTRIBUTES)}="{fuzz_url()}"'
    if choice < 0.6:
        return f'style="{fuzz_style()}"'
    if choice < 0.75:
        return f'target="{random.choice(["_blank", "_BLANK", " _blank ", "_self"])}"'
    if choice < 0.85:
        return f'rel="{random.choice(["", "nofollow", "NOOPENER", "noopener noopener"])}"'
    if choice < 0.95:
        return f'{random.choice(["onclick", "onerror", "srcdoc"])}="alert(1)"'
    return f'class="{random_string()}"'


def fuzz_open_tag():
    tag = random.choice(TAGS)
    attrs = " ".join(fuzz_attribute() for _ in range(random.randint(0, 4)))
    return f"<{tag} {attrs}>" if attrs else f"<{tag}>"


def fuzz_close_tag():
    return f"</{random.choice(TAGS)}>"


def fuzz_text():
    return random.choice([random_string(1), " ", "\n  ", "&amp;", "&lt;script&gt;", "\u00a0"])


def fuzz_broken_table():
    ws = random.choice(["\n", "  ", "\n\t"])
    variants = [
        f"<table>{ws}<tr>{ws}<td>a</td>{ws}</tr>{ws}</table>",
        f"<table>{ws}<thead>{ws}<tr><th>h{ws}<tbody>{ws}<tr><td>x",
        f"<table><tr><td>a<td>b<tr><td>c</table>",
        f"</td></tr><table>{ws}</tbody>",
    ]
    return random.choice(variants)


def fuzz_deeply_nested():
    """Generate very deeply nested structures."""
    depth = random.randint(100, 1000)
    tag = random.choice(["div", "span", "b", "a", "blockquote"])
    variants = [
        f"<{tag}>" * depth + "content" + f"</{tag}>" * depth,
        f'<a href="javascript:x()">' * depth + "deep",
        f"<{tag}>" * depth + "content" + f"</{tag}>" * (depth // 2),
    ]
    return random.choice(variants)


def generate_fuzzed_html():
    """Generate a random fragment."""
    parts = []
    for _ in range(random.randint(1, 20)):
        element_type = random.choices(
            [fuzz_open_tag, fuzz_close_tag, fuzz_text, fuzz_broken_table, fuzz_deeply_nested],
            weights=[30, 15, 20, 5, 1],
        )[0]
        parts.append(element_type())
    return "".join(parts)


def check_tree(tree):
    """Return a list of safety violations found in a rendered tree."""
    violations = []
    stack = [tree]
    while stack:
        node = stack.pop()
        if isinstance(node, str):
            continue
        if not isinstance(node, RenderNode):
            violations.append(f"unexpected node type {type(node).__name__}")
            continue
        for name, value in node.props.items():
            lower = name.lower()
            if lower.startswith("on") or lower == "srcdoc":
                violations.append(f"<{node.tag}> kept {name}")
            if lower in URL_ATTRIBUTES and isinstance(value, str):
                candidates = [c.split()[0] for c in value.split(",") if c.strip()] if lower == "srcset" else [value]
                for url in candidates:
                    if url_scheme(url) in DANGEROUS_SCHEMES:
                        violations.append(f"<{node.tag}> kept {name}={value!r}")
            if name == "style" and isinstance(value, dict):
                for prop, css in value.items():
                    if is_dangerous_value(css):
                        violations.append(f"<{node.tag}> kept style {prop}={css!r}")
        if node.tag == "a":
            target = node.props.get("target")
            if isinstance(target, str) and target.strip().lower() == "_blank":
                tokens = {t.lower() for t in str(node.props.get("rel", "")).split()}
                if not {"noopener", "noreferrer"} <= tokens:
                    violations.append(f"<a target=_blank> has rel={node.props.get('rel')!r}")
        if node.tag in {"script", "style", "iframe", "object"}:
            violations.append(f"<{node.tag}> survived")
        stack.extend(node.children)
    return violations


def run_fuzzer(num_tests, seed=None, verbose=False, save_failures=False):
    """Run the fuzzer against the render pipeline."""
    if seed is not None:
        random.seed(seed)

    crashes = []
    unsafe = []
    hangs = []
    successes = 0

    print(f"Fuzzing htmlguard with {num_tests} test cases...")
    start_time = time.time()

    for i in range(num_tests):
        html = generate_fuzzed_html()

        if verbose and i % 100 == 0:
            print(f"  Test {i}/{num_tests}...")

        try:
            start = time.perf_counter()
            tree = render_html(html)
            elapsed = time.perf_counter() - start
        except Exception as e:
            crashes.append({"test_num": i, "html": html, "error": str(e), "traceback": traceback.format_exc()})
            if verbose:
                print(f"  CRASH: Test {i}: {e}")
            continue

        violations = check_tree(tree)
        if violations:
            unsafe.append({"test_num": i, "html": html, "violations": violations})
            if verbose:
                print(f"  UNSAFE: Test {i}: {violations[0]}")
        elif elapsed > 5.0:
            hangs.append({"test_num": i, "html": html, "time": elapsed})
            if verbose:
                print(f"  HANG: Test {i} took {elapsed:.2f}s")
        else:
            successes += 1

    elapsed_total = time.time() - start_time

    print(f"\n{'=' * 60}")
    print("FUZZING RESULTS: htmlguard")
    print(f"{'=' * 60}")
    print(f"Total tests:    {num_tests}")
    print(f"Successes:      {successes}")
    print(f"Crashes:        {len(crashes)}")
    print(f"Unsafe output:  {len(unsafe)}")
    print(f"Hangs (>5s):    {len(hangs)}")
    print(f"Total time:     {elapsed_total:.2f}s")

    for crash in crashes[:10]:
        print(f"\nCRASH #{crash['test_num']}:")
        print(f"  HTML: {crash['html'][:200]!r}...")
        print(f"  Error: {crash['error']}")
    for case in unsafe[:10]:
        print(f"\nUNSAFE #{case['test_num']}:")
        print(f"  HTML: {case['html'][:200]!r}...")
        for violation in case["violations"][:5]:
            print(f"  - {violation}")

    if save_failures and (crashes or unsafe or hangs):
        filename = f"fuzz_failures_{int(time.time())}.txt"
        with open(filename, "w", encoding="utf-8") as f:
            f.write(f"Seed: {seed}\n\n")
            for crash in crashes:
                f.write(f"=== CRASH #{crash['test_num']} ===\nHTML:\n{crash['html']}\n")
                f.write(f"Traceback:\n{crash['traceback']}\n\n")
            for case in unsafe:
                f.write(f"=== UNSAFE #{case['test_num']} ===\nHTML:\n{case['html']}\n")
                f.write("\n".join(case["violations"]) + "\n\n")
            for hang in hangs:
                f.write(f"=== HANG #{hang['test_num']} ({hang['time']:.2f}s) ===\nHTML:\n{hang['html']}\n\n")
        print(f"\nFailures saved to {filename}")

    return not crashes and not unsafe and not hangs


def main():
    parser = argparse.ArgumentParser(description="Fuzz the htmlguard render pipeline with hostile input")
    parser.add_argument(
        "--num-tests", "-n",
        type=int,
        default=1000,
        help="Number of test cases to generate (default: 1000)",
    )
    parser.add_argument(
        "--seed", "-s",
        type=int,
        default=None,
        help="Random seed for reproducibility",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "--save-failures",
        action="store_true",
        help="Save failures to a file",
    )
    parser.add_argument(
        "--sample",
        type=int,
        metavar="N",
        help="Just print N sample fuzzed fragments (no rendering)",
    )

    args = parser.parse_args()

    if args.sample:
        if args.seed is not None:
            random.seed(args.seed)
        for i in range(args.sample):
            print(f"=== Sample {i + 1} ===")
            print(generate_fuzzed_html())
            print()
        return

    success = run_fuzzer(args.num_tests, seed=args.seed, verbose=args.verbose, save_failures=args.save_failures)
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
