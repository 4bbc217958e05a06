"""
URL 规范化与去重测试
"""

import pytest
import sys
import os

from hypothesis import given, strategies as st, settings

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '../../../')))

from src.appstore.domain.extraction.url_normalizer import (
    absolute_url, category_handle_from_url, dedup_by_handle, handle_from_url,
    page_from_url, query_param, set_query_param
)
from src.appstore.domain.value_objects.app_summary import AppSummary

slugs = st.from_regex(r'[a-z0-9]+(-[a-z0-9]+){0,4}', fullmatch=True)
queries = st.from_regex(r'[a-z_]{1,10}=[a-z0-9]{1,10}', fullmatch=True)


class TestAbsoluteUrl:

    @pytest.mark.parametrize("raw,expected", [
        ("/klaviyo", "https://apps.shopify.com/klaviyo"),
        ("klaviyo", "https://apps.shopify.com/klaviyo"),
        ("https://example.com/a", "https://example.com/a"),
        ("  /partners/acme ", "https://apps.shopify.com/partners/acme"),
        ("", ""),
        (None, ""),
    ])
    def test_absolute(self, raw, expected):
        assert absolute_url(raw) == expected

    def test_custom_base(self):
        assert absolute_url("/x", "http://localhost:8080/") == "http://localhost:8080/x"


class TestHandles:

    @pytest.mark.parametrize("url,expected", [
        ("https://apps.shopify.com/klaviyo-email-marketing", "klaviyo-email-marketing"),
        ("https://apps.shopify.com/klaviyo-email-marketing/", "klaviyo-email-marketing"),
        ("https://apps.shopify.com/klaviyo?surface_type=search", "klaviyo"),
        ("https://apps.shopify.com/", ""),
        ("", ""),
    ])
    def test_handle_from_url(self, url, expected):
        assert handle_from_url(url) == expected

    def test_category_handle(self):
        assert category_handle_from_url("https://apps.shopify.com/categories/marketing/all") == "marketing"
        assert category_handle_from_url("https://apps.shopify.com/") == ""

    @settings(max_examples=100, deadline=None)
    @given(slug=slugs, query=queries)
    def test_handle_ignores_query_string(self, slug, query):
        assert handle_from_url(f"https://apps.shopify.com/{slug}?{query}") == slug


class TestQueryParams:

    def test_page_from_url(self):
        assert page_from_url("https://apps.shopify.com/categories/x?page=4") == 4
        assert page_from_url("https://apps.shopify.com/categories/x") == 1
        assert page_from_url("https://apps.shopify.com/categories/x?page=abc") == 1
        assert page_from_url("") == 1

    def test_query_param(self):
        assert query_param("/search?q=seo&page=2", "q") == "seo"
        assert query_param("/search?q=seo", "page") is None

    def test_set_replaces_in_place(self):
        assert set_query_param("/search?q=seo&page=1&st=x", "page", "3") == "/search?q=seo&page=3&st=x"

    def test_set_appends_when_missing(self):
        assert set_query_param("https://apps.shopify.com/search?q=seo", "page", "2") == \
            "https://apps.shopify.com/search?q=seo&page=2"


class TestDedupByHandle:

    def test_last_seen_wins_at_first_position(self):
        first = AppSummary(name="Klaviyo", url="https://apps.shopify.com/klaviyo?a=1", handle="klaviyo")
        other = AppSummary(name="Judge.me", url="https://apps.shopify.com/judgeme", handle="judgeme")
        last = AppSummary(name="Klaviyo Email", url="https://apps.shopify.com/klaviyo?a=2", handle="klaviyo")

        assert dedup_by_handle([first, other, last]) == [last, other]

    def test_empty(self):
        assert dedup_by_handle([]) == []

    @settings(max_examples=100, deadline=None)
    @given(handles=st.lists(slugs, max_size=20))
    def test_handles_are_unique_and_last_wins(self, handles):
        items = [AppSummary(name=str(i), url=f"https://apps.shopify.com/{h}", handle=h) for i, h in enumerate(handles)]
        result = dedup_by_handle(items)

        assert [item.handle for item in result] == list(dict.fromkeys(handles))
        for item in result:
            last_index = max(i for i, h in enumerate(handles) if h == item.handle)
            assert item.name == str(last_index)
