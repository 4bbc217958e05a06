"""
站点地图链接发现测试
"""

import sys
import os
from bs4 import BeautifulSoup

from hypothesis import given, strategies as st, settings

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '../../../')))

from src.appstore.domain.extraction.url_listing_parser import (
    APP_URL_IGNORE_PATHS, parse_app_urls, parse_category_urls, parse_developer_urls
)
from src.appstore.domain.value_objects.app_summary import AppSummary

SITEMAP = """
<html><body>
    <a href="https://apps.shopify.com/klaviyo-email-marketing">Klaviyo</a>
    <a href="https://apps.shopify.com/judgeme">Judge.me</a>
    <a href="https://apps.shopify.com/klaviyo-email-marketing?surface=sitemap">Klaviyo Email</a>
    <a href="https://apps.shopify.com/partners/klaviyo">Klaviyo partner</a>
    <a href="https://apps.shopify.com/categories/marketing/all">Marketing</a>
    <a href="https://apps.shopify.com/categories/marketing">Marketing hub</a>
    <a href="https://apps.shopify.com/compare/klaviyo-vs-omnisend">Compare</a>
    <a href="https://apps.shopify.com/?auth=1">Log in</a>
    <a href="https://example.com/not-store">Elsewhere</a>
    <a href="/relative-app">Relative</a>
    <a>No href</a>
</body></html>
"""


def soup(html):
    return BeautifulSoup(html, 'html.parser')


class TestUrlListing:

    def test_app_urls(self):
        listing = parse_app_urls(soup(SITEMAP))

        assert listing.total == 2
        assert listing.urls == [
            AppSummary(name="Klaviyo Email",
                       url="https://apps.shopify.com/klaviyo-email-marketing?surface=sitemap",
                       handle="klaviyo-email-marketing"),
            AppSummary(name="Judge.me", url="https://apps.shopify.com/judgeme", handle="judgeme"),
        ]

    def test_category_urls(self):
        listing = parse_category_urls(soup(SITEMAP))

        assert listing.total == 1
        assert listing.urls == [
            AppSummary(name="Marketing", url="https://apps.shopify.com/categories/marketing/all", handle="marketing")
        ]

    def test_developer_urls(self):
        listing = parse_developer_urls(soup(SITEMAP))

        assert [summary.handle for summary in listing.urls] == ["klaviyo"]

    def test_empty_document(self):
        listing = parse_app_urls(soup(""))
        assert listing.total == 0
        assert listing.urls == []

    @settings(max_examples=50, deadline=None)
    @given(path=st.sampled_from(APP_URL_IGNORE_PATHS), slug=st.from_regex(r'[a-z]{1,10}', fullmatch=True))
    def test_ignored_paths_never_listed(self, path, slug):
        doc = soup(f'<a href="https://apps.shopify.com{path}/{slug}">x</a>')
        assert parse_app_urls(doc).urls == []
