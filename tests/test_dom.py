"""Unit tests for the document model and selector engine."""

import dataclasses

import pytest

from transaction.dom import (
    parse,
    parse_attributes,
    get_attribute,
    compile_selector,
    iter_elements,
    query_selector,
    query_selector_all,
)
from transaction.errors import ParseError

from conftest import HOME_HTML, KEY


class TestParse:
    """Tests for parse()."""

    def test_root_element(self):
        """The root is synthetic and keeps the untouched source."""
        root = parse(HOME_HTML)
        assert root.tag == "root"
        assert root.attributes == {}
        assert root.raw_source == HOME_HTML
        assert [child.tag for child in root.children] == ["html"]

    def test_nested_children(self):
        """Paired tags are parsed recursively."""
        root = parse('<div id="a"><span>hi</span><img src="x.png"/></div>')
        div = root.children[0]
        assert div.tag == "div"
        assert [child.tag for child in div.children] == ["span", "img"]
        assert div.children[0].text_content == "hi"
        assert div.children[0].children == ()
        assert div.children[1].attributes == {"src": "x.png"}

    def test_raw_source_of_element(self):
        """Each element keeps the exact markup it matched."""
        root = parse('<p class="x">text</p>')
        assert root.children[0].raw_source == '<p class="x">text</p>'
        assert root.children[0].text_content == "text"

    def test_empty_markup_fails(self):
        """No element at all is a parse error."""
        with pytest.raises(ParseError):
            parse("")

    def test_text_only_fails(self):
        """Plain text is a parse error."""
        with pytest.raises(ParseError):
            parse("just some text")

    def test_doctype_and_comments_only_fails(self):
        """Elements inside comments do not count."""
        with pytest.raises(ParseError):
            parse("<!DOCTYPE html>\n<!-- <p>hidden</p> -->")

    def test_comments_are_stripped(self):
        """Commented-out elements never reach the tree."""
        root = parse("<div><!-- <span>gone</span> --><b>kept</b></div>")
        assert [child.tag for child in root.children[0].children] == ["b"]

    def test_text_content_child_is_leaf(self):
        """Content that holds no element leaves the parent without children."""
        root = parse("<script>var a = 1 < 2;</script>")
        assert root.children[0].children == ()
        assert root.children[0].text_content == "var a = 1 < 2;"

    def test_elements_are_frozen(self):
        """Parsed elements cannot be reassigned."""
        root = parse("<p>x</p>")
        with pytest.raises(dataclasses.FrozenInstanceError):
            root.children[0].tag = "div"

    def test_attributes_are_read_only(self):
        """Attribute maps cannot be changed after parsing."""
        root = parse('<meta name="a" content="b"/>')
        meta = root.children[0]
        with pytest.raises(TypeError):
            meta.attributes["content"] = "c"
        with pytest.raises(TypeError):
            root.attributes["id"] = "x"
        assert meta.attributes == {"name": "a", "content": "b"}


class TestAttributes:
    """Tests for attribute scanning and lookup."""

    def test_parse_attributes(self):
        """Quoted values and bare names are both read."""
        attributes = parse_attributes(''' id="a" data-x='b' disabled''')
        assert attributes == {"id": "a", "data-x": "b", "disabled": ""}

    def test_base64_value(self):
        """Values may contain base64 punctuation."""
        attributes = parse_attributes(f' name="k" content="{KEY}"')
        assert attributes["content"] == KEY

    def test_empty_value_reads_as_absent(self):
        """get_attribute treats an empty value like a missing one."""
        element = parse("<input disabled/>").children[0]
        assert get_attribute(element, "disabled") is None
        assert get_attribute(element, "missing") is None
        assert element.get_attribute("disabled") is None


class TestSelectors:
    """Tests for compile_selector and the two query functions."""

    NESTED = '<g id="outer"><g id="inner"/></g><p>x</p>'
    MIXED = '<ul data-role="item"><li data-role="item">one</li><li>two</li></ul><p data-role="item-x">three</p>'

    def test_query_selector_all_visits_children_of_matches(self):
        """A matching container does not hide matching descendants."""
        root = parse(self.NESTED)
        matches = query_selector_all(root, "g")
        assert [el.attributes["id"] for el in matches] == ["outer", "inner"]

    def test_query_selector_stops_at_first_match(self):
        """query_selector returns the matching parent, not its child."""
        root = parse(self.NESTED)
        match = query_selector(root, "g")
        assert match is root.children[0]
        assert match.attributes["id"] == "outer"

    def test_wildcard_with_attribute(self):
        """``*`` matches any tag; equality filter is exact."""
        root = parse(self.MIXED)
        matches = query_selector_all(root, "*[data-role=item]")
        assert [el.tag for el in matches] == ["ul", "li"]
        assert query_selector(root, "*[data-role=item]").tag == "ul"

    def test_prefix_operator(self):
        """``^=`` tests a prefix."""
        root = parse(self.MIXED)
        matches = query_selector_all(root, "*[data-role^=item]")
        assert [el.tag for el in matches] == ["ul", "li", "p"]

    def test_quoted_attribute_value(self):
        """Single and double quotes around the value are accepted."""
        root = parse(HOME_HTML)
        for selector in (
            "meta[name=twitter-site-verification]",
            "meta[name='twitter-site-verification']",
            'meta[name="twitter-site-verification"]',
        ):
            assert query_selector(root, selector).attributes["content"] == KEY

    def test_tag_match_is_case_insensitive(self):
        """Tag names compare without case."""
        root = parse('<SVG id="a"></SVG>')
        assert query_selector(root, "svg") is not None
        assert query_selector(root, "Svg") is not None

    def test_star_matches_every_element(self):
        """``*`` includes the synthetic root."""
        root = parse(self.NESTED)
        assert len(query_selector_all(root, "*")) == len(list(iter_elements(root)))
        assert query_selector(root, "*") is root

    @pytest.mark.parametrize("selector", ["div > p", "div.cls", "#id", "p[", "[id=a]", "g[id*=out]", "g:first-child"])
    def test_unrecognized_selector_matches_nothing(self, selector):
        """Unsupported syntax is not an error, it just never matches."""
        root = parse(self.NESTED)
        assert query_selector_all(root, selector) == []
        assert query_selector(root, selector) is None
        assert compile_selector(selector)(root.children[0]) is False

    def test_element_methods_delegate(self):
        """Element methods behave like the module functions."""
        root = parse(self.NESTED)
        outer = root.children[0]
        assert outer.query_selector("g") is outer
        assert [el.attributes["id"] for el in outer.query_selector_all("g")] == ["outer", "inner"]

    def test_iter_elements_preorder(self):
        """Walk order is parent first, then children left to right."""
        root = parse('<a><b/><c><d/></c></a><e/>')
        assert [el.tag for el in iter_elements(root)] == ["root", "a", "b", "c", "d", "e"]
