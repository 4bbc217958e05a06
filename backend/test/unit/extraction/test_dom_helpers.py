"""
文档查询辅助函数与策略链测试
"""

import pytest
import sys
import os
from unittest.mock import Mock
from bs4 import BeautifulSoup

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '../../../')))

from src.appstore.domain.extraction.dom import (
    attr_of, body_text, canonical_url, closest, document_title, first_attr,
    first_text, parse_json_ld, select_text, unique_parents
)
from src.appstore.domain.extraction.strategy_chain import first_match


def soup(html):
    return BeautifulSoup(html, 'html.parser')


class TestQueryHelpers:

    def test_select_text_concatenates_matches(self):
        doc = soup('<p class="a">one</p><p class="a">two</p>')
        assert select_text(doc, '.a') == "onetwo"

    def test_first_text_strips(self):
        doc = soup('<h1>  Title </h1><h1>Other</h1>')
        assert first_text(doc, 'h1') == "Title"

    def test_missing_nodes_yield_empty_string(self):
        doc = soup('<div></div>')
        assert first_text(doc, 'h1') == ""
        assert first_attr(doc, 'a', 'href') == ""
        assert select_text(None, 'p') == ""
        assert canonical_url(doc) == ""
        assert document_title(doc) == ""

    def test_multi_valued_attribute_is_joined(self):
        doc = soup('<span class="tw-border tw-rounded-xl">Ad</span>')
        assert attr_of(doc.span, 'class') == "tw-border tw-rounded-xl"

    def test_canonical_url(self):
        doc = soup('<link rel="canonical" href="https://apps.shopify.com/categories/x?page=2">')
        assert canonical_url(doc) == "https://apps.shopify.com/categories/x?page=2"

    def test_closest_includes_self(self):
        doc = soup('<section id="s"><div id="d" class="card"><a>x</a></div></section>')
        assert closest(doc.a, 'section')['id'] == "s"
        assert closest(doc.find(id="d"), '.card')['id'] == "d"
        assert closest(doc.a, 'article') is None

    def test_unique_parents_preserves_order(self):
        doc = soup('<div id="one"><p>a</p><p>b</p></div><div id="two"><p>c</p></div>')
        parents = unique_parents(doc.select('p'))
        assert [p['id'] for p in parents] == ["one", "two"]

    def test_body_text_falls_back_to_fragment(self):
        assert "No results" in body_text(soup('<div>No results</div>'))
        assert body_text(soup('<html><head><title>T</title></head><body>B</body></html>')) == "B"


class TestParseJsonLd:

    def test_object(self):
        doc = soup('<script type="application/ld+json">{"aggregateRating": {"ratingValue": 4.7}}</script>')
        assert parse_json_ld(doc) == {"aggregateRating": {"ratingValue": 4.7}}

    @pytest.mark.parametrize("payload", ["{not json", "[1, 2]", "", "null"])
    def test_malformed_or_non_object_is_empty(self, payload):
        doc = soup(f'<script type="application/ld+json">{payload}</script>')
        assert parse_json_ld(doc) == {}

    def test_missing_block(self):
        assert parse_json_ld(soup('<p>x</p>')) == {}


class TestFirstMatch:

    def test_first_truthy_result_wins(self):
        later = Mock(return_value="late")
        result = first_match([lambda d: None, lambda d: "", lambda d: "hit", later], "doc", default="x")

        assert result == "hit"
        later.assert_not_called()

    def test_default_when_exhausted(self):
        assert first_match([lambda d: None, lambda d: []], "doc", default=[]) == []
        assert first_match([], "doc", default=0) == 0

    def test_arguments_are_forwarded(self):
        strategy = Mock(return_value=5)
        assert first_match([strategy], "a", "b", default=0) == 5
        strategy.assert_called_once_with("a", "b")
