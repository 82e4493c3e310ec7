"""
Seeded random markup checks.

Generates well-terminated but irregular HTML (unclosed and stray tags,
duplicate attributes, doctypes in odd places) and checks that parsing never
fails and that query results keep their guarantees.
"""

import random
import string
import unittest

from htmlfilter import Filter, HtmlFilter, TagNode, parse, to_html

TAGS = ["div", "span", "p", "a", "b", "i", "ul", "li", "table", "td", "section", "X-Custom"]
VOID_TAGS = ["br", "img", "hr", "input", "meta"]
ATTRIBUTES = ["id", "class", "href", "title", "data-x", "disabled", "hidden"]
WORDS = ["alpha", "beta", "gamma", "delta", "x", "y", "hello world"]

SEEDS = range(40)


def random_word(rng):
    return rng.choice(WORDS)


def fuzz_attribute(rng):
    name = rng.choice(ATTRIBUTES)
    style = rng.randint(0, 5)
    if style == 0:
        return f" {name}"
    value = random_word(rng)
    if style == 1:
        return f' {name}="{value} \'q\'"'
    if style == 2:
        return f" {name}='{value} \"q\"'"
    if style == 3:
        return f" {name} = \"{value}\""
    if style == 4:
        return f" {name}=a\"b'{value.replace(' ', '-')}"
    return f" {name}={value.replace(' ', '-')}"


def fuzz_open_tag(rng):
    attrs = "".join(fuzz_attribute(rng) for _ in range(rng.randint(0, 3)))
    closing = "/" if rng.random() < 0.1 else ""
    return f"<{rng.choice(TAGS)}{attrs}{closing}>"


def fuzz_close_tag(rng, open_names):
    if open_names and rng.random() < 0.8:
        return f"</{open_names.pop()}>"
    return f"</{rng.choice(TAGS)}>"


def fuzz_text(rng):
    parts = [random_word(rng) for _ in range(rng.randint(1, 3))]
    if rng.random() < 0.2:
        parts.append(" < ")
    if rng.random() < 0.2:
        parts.append("\n")
    return " ".join(parts)


def fuzz_comment(rng):
    return f"<!--{random_word(rng)}-->"


def generate_fuzzed_html(rng, length=60):
    out = []
    if rng.random() < 0.5:
        out.append("<!DOCTYPE html>")
    open_names = []
    for _ in range(length):
        roll = rng.random()
        if roll < 0.3:
            tag = fuzz_open_tag(rng)
            out.append(tag)
            if not tag.endswith("/>"):
                open_names.append(tag[1:].split(" ", 1)[0].rstrip(">"))
        elif roll < 0.5:
            out.append(fuzz_close_tag(rng, open_names))
        elif roll < 0.6:
            out.append(f"<{rng.choice(VOID_TAGS)}>")
        elif roll < 0.9:
            out.append(fuzz_text(rng))
        elif roll < 0.97:
            out.append(fuzz_comment(rng))
        else:
            out.append(rng.choice(["<!DOCTYPE html>", "<?pi x?>", "</>"]))
    return "".join(out)


def random_filter(rng):
    f = Filter()
    roll = rng.randint(0, 3)
    if roll == 0:
        f = f.tag_name(rng.choice(TAGS + VOID_TAGS))
    elif roll == 1:
        f = f.attribute_name(rng.choice(ATTRIBUTES))
    elif roll == 2:
        f = f.text_contains(rng.choice(["a", "gamma", "world", "<"]))
    else:
        f = f.tag_name(rng.choice(TAGS)).attribute_name(rng.choice(ATTRIBUTES))
    return f


def contains_node(tree, target):
    return any(node is target for node in tree.walk())


class TestFuzz(unittest.TestCase):
    def test_well_terminated_markup_always_parses(self):
        for seed in SEEDS:
            html = generate_fuzzed_html(random.Random(seed))
            doc = HtmlFilter(html, collect_errors=True)
            assert all(error.line is not None for error in doc.errors), html

    def test_round_trip(self):
        for seed in SEEDS:
            doc = parse(generate_fuzzed_html(random.Random(seed)))
            assert parse(to_html(doc)) == doc

    def test_query_guarantees(self):
        for seed in SEEDS:
            rng = random.Random(seed)
            doc = parse(generate_fuzzed_html(rng))
            order = {id(node): index for index, node in enumerate(doc.walk())}
            for _ in range(5):
                f = random_filter(rng)
                result = doc.filter(f)

                # Results are outermost: none sits inside another.
                for node in result:
                    for other in result:
                        if other is not node:
                            assert not contains_node(node, other)

                positions = [order[id(node)] for node in result]
                assert positions == sorted(positions)

                assert result.filter(f) == result
                found = doc.find(f)
                if len(result):
                    assert found == result[0]
                else:
                    assert found is None

                for node in result:
                    if isinstance(node, TagNode) and f.name is not None:
                        assert node.name == f.name

    def test_generated_markup_uses_every_construct(self):
        html = "".join(generate_fuzzed_html(random.Random(seed)) for seed in SEEDS)
        for fragment in ("<!--", "</", "/>", "<!DOCTYPE", " < "):
            assert fragment in html
        assert set(html) <= set(string.printable)


if __name__ == "__main__":
    unittest.main()
