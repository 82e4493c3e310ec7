"""Query behaviour: matching, outermost results, document order and node-kind toggles."""

import unittest

from htmlfilter import (
    EMPTY,
    Collection,
    Comment,
    Doctype,
    Filter,
    HtmlFilter,
    TagNode,
    Text,
    filter_html,
    find_html,
    matches,
    parse,
)
from htmlfilter.node import make_tag


class TestScenarios(unittest.TestCase):
    def test_filter_list_items(self):
        doc = parse("<ul><li>a</li><li>b</li></ul>")
        result = filter_html(doc, Filter().tag_name("li"))
        assert isinstance(result, Collection)
        assert [node.name for node in result] == ["li", "li"]
        assert [node.text for node in result] == ["a", "b"]

    def test_find_link(self):
        doc = parse('<a href="/x">t</a>')
        link = find_html(doc, Filter().tag_name("a"))
        assert isinstance(link, TagNode)
        assert link.tag.find_attr_value("href") == "/x"
        assert link.child == Text("t")

    def test_auto_closed_element_is_found(self):
        div = find_html(parse("<div>"), Filter().tag_name("div"))
        assert div.name == "div"
        assert div.child is EMPTY

    def test_void_element_is_found(self):
        img = find_html(parse('<img src="x">'), Filter().tag_name("img"))
        assert img.tag.self_closing
        assert img.child is EMPTY


class TestMatching(unittest.TestCase):
    def test_tag_constraints_never_match_text(self):
        assert not matches(Text("a"), Filter().tag_name("a"))
        assert not matches(Text("a"), Filter().attribute_name("a"))

    def test_text_contains_matches_tags_and_text(self):
        f = Filter().text_contains("ell")
        assert matches(Text("hello"), f)
        assert matches(make_tag("p", None, Text("hello")), f)
        assert not matches(make_tag("p", None, Comment("hello")), f)

    def test_comments_and_doctypes_need_an_unconstrained_filter(self):
        assert matches(Comment("x"), Filter())
        assert matches(Doctype("DOCTYPE html"), Filter())
        assert not matches(Comment("x"), Filter().text_contains("x"))
        assert not matches(Comment("x"), Filter().comments(False))
        assert not matches(Doctype("DOCTYPE html"), Filter().doctype(False))

    def test_containers_never_match(self):
        assert not matches(parse("<p></p>"), Filter())
        assert not matches(Collection((Text("a"),)), Filter())
        assert not matches(EMPTY, Filter())

    def test_attribute_value_matching(self):
        doc = parse('<a rel="external" href="/1">1</a><a href="/2">2</a><a rel="nofollow">3</a>')
        result = doc.filter(Filter().tag_name("a").attribute_value("rel", "external"))
        assert [node.text for node in result] == ["1"]
        result = doc.filter(Filter().attribute_name("rel"))
        assert [node.text for node in result] == ["1", "3"]


class TestResultShape(unittest.TestCase):
    def test_results_do_not_overlap(self):
        doc = parse("<div><div>inner</div></div><div>second</div>")
        result = doc.filter(Filter().tag_name("div"))
        assert len(result) == 2
        assert [node.text for node in result] == ["inner", "second"]
        assert result[0].children[0].name == "div"

    def test_text_match_reports_outermost_element(self):
        doc = parse("<ul><li>a</li><li>b</li></ul>")
        result = doc.filter(Filter().text_contains("b"))
        assert len(result) == 1
        assert result[0].name == "ul"

    def test_text_nodes_match_on_their_own(self):
        doc = parse("hi <b>x</b> there")
        assert list(doc.filter(Filter().text_contains("hi"))) == [Text("hi ")]

    def test_results_are_in_document_order(self):
        doc = parse("<p id=1><span id=2></span></p><span id=3></span><p id=4></p>")
        result = doc.filter(Filter().attribute_name("id"))
        assert [node.attrs["id"] for node in result] == ["1", "3", "4"]

    def test_empty_filter_returns_top_level_nodes(self):
        doc = parse("<!DOCTYPE html><p>x</p><!--c-->")
        assert list(doc.filter(Filter())) == list(doc.children)

    def test_results_share_the_parsed_subtrees(self):
        doc = parse("<ul><li>a</li></ul>")
        li = doc.find(Filter().tag_name("li"))
        assert li is doc.children[0].child


class TestFindVersusFilter(unittest.TestCase):
    def test_find_is_first_filter_result(self):
        doc = parse("<p>one</p><p>two</p><div><p>three</p></div>")
        for f in (Filter().tag_name("p"), Filter().text_contains("t"), Filter().tag_name("div"), Filter()):
            result = doc.filter(f)
            assert doc.find(f) == result[0]

    def test_not_found(self):
        doc = parse("<p>x</p>")
        assert doc.find(Filter().tag_name("table")) is None
        assert len(doc.filter(Filter().tag_name("table"))) == 0

    def test_empty_match_is_distinguishable_from_not_found(self):
        found = parse("<div></div>").find(Filter().tag_name("div"))
        assert found is not None
        assert found.child is EMPTY

    def test_html_filter_entry_point(self):
        parsed = HtmlFilter("<p>a</p><p>b</p>")
        assert parsed.find(Filter().tag_name("p")).text == "a"
        assert len(parsed.filter(Filter().tag_name("p"))) == 2


class TestIdempotence(unittest.TestCase):
    def test_filtering_a_result_again_changes_nothing(self):
        doc = parse('<div class="x"><p>a</p></div><p>b<span>c</span></p>')
        for f in (Filter().tag_name("p"), Filter().text_contains("c"), Filter().attribute_name("class")):
            once = doc.filter(f)
            assert once.filter(f) == once


class TestNodeKindToggles(unittest.TestCase):
    def test_dropping_text_inside_results(self):
        doc = parse("<p>a<b>c</b><!--x--></p>")
        result = doc.find(Filter().tag_name("p").text(False))
        assert result == make_tag("p", None, make_tag("b"), Comment("x"))

    def test_dropping_comments_inside_results(self):
        doc = parse("<p>a<!--x-->b</p>")
        result = doc.find(Filter().tag_name("p").comments(False))
        assert result == make_tag("p", None, Text("a"), Text("b"))

    def test_dropped_kinds_are_not_reported(self):
        doc = parse("<!DOCTYPE html><!--c--><p>x</p>tail")
        result = doc.filter(Filter().doctype(False).comments(False).text(False))
        assert list(result) == [make_tag("p")]

    def test_parsed_tree_is_untouched(self):
        doc = parse("<p>a<!--x--></p>")
        doc.filter(Filter().comments(False))
        assert doc.children[0].children == (Text("a"), Comment("x"))


if __name__ == "__main__":
    unittest.main()
