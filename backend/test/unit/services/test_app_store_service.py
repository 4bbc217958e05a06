"""
AppStoreService 的 pytest 测试套件

测试目标：
- URL 构造与请求头；
- 非 200 状态码转换为 FetchError，describe_error 映射响应码；
- 搜索页局部片段：内联、二次请求、两者都没有时的空结果；
- 批量详情抓取保持输入顺序并传播失败。
"""

import json
import pytest
import sys
import os
import requests_mock
from unittest.mock import Mock, call

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '../../../')))

from src import create_app_store_service
from src.appstore.domain.demand_interface.i_http_client import IHttpClient
from src.appstore.domain.exceptions import FetchError
from src.appstore.domain.value_objects.fetch_result import FetchResult
from src.appstore.domain.value_objects.pagination_info import PaginationInfo
from src.appstore.domain.value_objects.search_result import SearchResult
from src.appstore.infrastructure.app_store_parser_impl import AppStoreParserImpl
from src.appstore.infrastructure.html_parser_impl import HtmlParserImpl
from src.appstore.services.app_store_service import (
    AppStoreService, SEARCH_FRAME_NAME, check_response_status, describe_error
)
from src.shared.config import AppStoreSettings

SEARCH_CARD = (
    '<div data-app-card-name-value="Acme SEO" '
    'data-app-card-app-link-value="https://apps.shopify.com/acme-seo?surface_intra_position=2&amp;surface_type=search">'
    '</div>'
)


def ok(url, html):
    return FetchResult(url=url, html=html, status=200)


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def http_client():
    return Mock(spec=IHttpClient)


@pytest.fixture
def settings():
    return AppStoreSettings(fetch_timeout=7, max_concurrency=2)


@pytest.fixture
def service(http_client, settings):
    return AppStoreService(http_client, HtmlParserImpl(), AppStoreParserImpl(), settings)


# ============================================================================
# 状态码校验与错误映射
# ============================================================================

class TestErrorHandling:

    def test_check_response_status_passes_200(self):
        result = ok("u", "<html></html>")
        assert check_response_status(result, "u") is result

    def test_check_response_status_raises(self):
        with pytest.raises(FetchError) as exc_info:
            check_response_status(FetchResult(url="u", html="", status=404), "https://apps.shopify.com/x")

        assert exc_info.value.status == 404
        assert exc_info.value.message == "Failed to fetch https://apps.shopify.com/x. Status: 404"

    def test_check_response_status_without_url(self):
        with pytest.raises(FetchError) as exc_info:
            check_response_status(FetchResult(url="u", html="", status=500))
        assert exc_info.value.message == "Request failed with status: 500"

    @pytest.mark.parametrize("exc,expected", [
        (FetchError("not found", 404), ("not found", 404)),
        (FetchError("network down", 0), ("network down", 500)),
        (ValueError("bad input"), ("bad input", 500)),
        (RuntimeError(), ("Unknown error", 500)),
    ])
    def test_describe_error(self, exc, expected):
        assert describe_error(exc) == expected

    def test_non_200_raises_fetch_error(self, service, http_client):
        http_client.fetch.return_value = FetchResult(url="u", html="", status=503)

        with pytest.raises(FetchError) as exc_info:
            service.get_app_detail("acme")
        assert exc_info.value.status == 503

    def test_network_failure_raises_fetch_error(self, service, http_client):
        http_client.fetch.return_value = FetchResult(url="u", html="", status=0, error_message="Timeout: 7s")

        with pytest.raises(FetchError) as exc_info:
            service.get_developer("acme")
        assert exc_info.value.status == 0
        assert "Timeout" in exc_info.value.message
        assert describe_error(exc_info.value)[1] == 500


# ============================================================================
# URL 构造与页面操作
# ============================================================================

class TestPageOperations:

    def test_urls(self, service):
        assert service.sitemap_url() == "https://apps.shopify.com/sitemap"
        assert service.app_url("acme") == "https://apps.shopify.com/acme"
        assert service.reviews_url("acme", 2) == "https://apps.shopify.com/acme/reviews?page=2"
        assert service.category_url("marketing", 3) == "https://apps.shopify.com/categories/marketing?page=3"
        assert service.developer_url("acme") == "https://apps.shopify.com/partners/acme"
        assert service.search_url("seo apps & more", 1) == \
            "https://apps.shopify.com/search?q=seo%20apps%20%26%20more&page=1"
        assert service.autocomplete_url("seo") == \
            "https://apps.shopify.com/search/autocomplete?v=3&q=seo&st_source=autocomplete"

    def test_custom_base_url(self, http_client):
        service = AppStoreService(http_client, HtmlParserImpl(), AppStoreParserImpl(),
                                  AppStoreSettings(base_url="localhost:8080/"))
        assert service.app_url("acme") == "https://localhost:8080/acme"

    def test_get_app_detail(self, service, http_client):
        http_client.fetch.return_value = ok("u", '<div id="adp-hero"><h1>Acme</h1></div>')

        detail = service.get_app_detail("acme")

        assert detail.title == "Acme"
        http_client.fetch.assert_called_once_with("https://apps.shopify.com/acme", headers=None, timeout=7)

    def test_get_app_reviews(self, service, http_client):
        http_client.fetch.return_value = ok("u", """
            <div data-merchant-review>
                <div class="reviewer-name">Shop</div>
                <div class="review-content">Nice and simple to use.</div>
            </div>
        """)

        page = service.get_app_reviews("acme", 4)

        assert len(page.reviews) == 1
        assert http_client.fetch.call_args.args[0] == "https://apps.shopify.com/acme/reviews?page=4"

    def test_get_category(self, service, http_client):
        http_client.fetch.return_value = ok("u", "<h1>Marketing</h1>")

        assert service.get_category("marketing").name == "Marketing"
        assert http_client.fetch.call_args.args[0] == "https://apps.shopify.com/categories/marketing?page=1"

    def test_get_developer(self, service, http_client):
        http_client.fetch.return_value = ok("u", "<h1>Acme Inc</h1>")

        assert service.get_developer("acme").name == "Acme Inc"
        assert http_client.fetch.call_args.args[0] == "https://apps.shopify.com/partners/acme"

    def test_sitemap_listings(self, service, http_client):
        http_client.fetch.return_value = ok("u", """
            <a href="https://apps.shopify.com/acme">Acme</a>
            <a href="https://apps.shopify.com/partners/acme-inc">Acme Inc</a>
            <a href="https://apps.shopify.com/categories/marketing/all">Marketing</a>
        """)

        assert [s.handle for s in service.get_app_list().urls] == ["acme"]
        assert [s.handle for s in service.get_developer_list().urls] == ["acme-inc"]
        assert [s.handle for s in service.get_category_list().urls] == ["marketing"]
        assert all(c.args[0] == "https://apps.shopify.com/sitemap" for c in http_client.fetch.call_args_list)


# ============================================================================
# 批量详情
# ============================================================================

class TestGetAppDetails:

    def test_keeps_input_order(self, service, http_client):
        def fetch(url, headers=None, timeout=None):
            return ok(url, f"<h1>{url.rsplit('/', 1)[1]}</h1>")
        http_client.fetch.side_effect = fetch

        details = service.get_app_details(["c", "a", "b", "d"])

        assert [d.title for d in details] == ["c", "a", "b", "d"]
        assert http_client.fetch.call_count == 4

    def test_empty_handles(self, service, http_client):
        assert service.get_app_details([]) == []
        http_client.fetch.assert_not_called()

    def test_failure_propagates(self, service, http_client):
        def fetch(url, headers=None, timeout=None):
            status = 404 if url.endswith("/missing") else 200
            return FetchResult(url=url, html="<h1>x</h1>", status=status)
        http_client.fetch.side_effect = fetch

        with pytest.raises(FetchError) as exc_info:
            service.get_app_details(["ok", "missing"])
        assert exc_info.value.status == 404

    def test_zero_concurrency_still_runs(self, http_client):
        http_client.fetch.side_effect = lambda url, headers=None, timeout=None: ok(url, "<h1>x</h1>")
        service = AppStoreService(http_client, HtmlParserImpl(), AppStoreParserImpl(),
                                  AppStoreSettings(max_concurrency=0))

        assert [d.title for d in service.get_app_details(["a", "b"])] == ["x", "x"]


# ============================================================================
# 自定义应用商店根地址
# ============================================================================

class TestCustomStore:
    """根地址来自配置时，链接过滤与相对链接补全都使用该地址"""

    BASE_URL = "https://apps.example.test"

    @pytest.fixture
    def store_service(self):
        return create_app_store_service(AppStoreSettings(base_url=self.BASE_URL))

    def test_sitemap_filtered_by_configured_host(self, store_service):
        sitemap = """
            <a href="https://apps.example.test/acme">Acme</a>
            <a href="https://apps.example.test/partners/acme-inc">Acme Inc</a>
            <a href="https://apps.shopify.com/other">Other</a>
        """
        with requests_mock.Mocker() as m:
            m.get(f"{self.BASE_URL}/sitemap", text=sitemap)
            apps = store_service.get_app_list()
            developers = store_service.get_developer_list()

        assert [s.url for s in apps.urls] == ["https://apps.example.test/acme"]
        assert [s.handle for s in developers.urls] == ["acme-inc"]

    def test_category_cards_absolutized_against_configured_host(self, store_service):
        page = '<div data-app-card-name-value="Acme" data-app-card-app-link-value="/acme"></div>'
        with requests_mock.Mocker() as m:
            m.get(f"{self.BASE_URL}/categories/marketing", text=page)
            category = store_service.get_category("marketing")

        assert category.apps[0].url == "https://apps.example.test/acme"
        assert category.apps[0].handle == "acme"

    def test_app_detail_links_absolutized_against_configured_host(self, store_service):
        page = """
            <div id="adp-hero"><h1>Acme</h1></div>
            <div data-accordion-target="wrapper">
                <div class="tw-flex tw-justify-between"><a href="/categories/marketing">Marketing</a></div>
            </div>
        """
        with requests_mock.Mocker() as m:
            m.get(f"{self.BASE_URL}/acme", text=page)
            detail = store_service.get_app_detail("acme")

        assert [c.url for c in detail.categories] == ["https://apps.example.test/categories/marketing"]

    def test_review_app_url_absolutized_against_configured_host(self, store_service):
        page = """
            <div id="arp-reviews"><h1><a href="/acme">Acme</a></h1></div>
            <div data-merchant-review>
                <div class="tw-text-heading-xs tw-text-fg-primary">Jane</div>
                <p>Great app, works well.</p>
            </div>
        """
        with requests_mock.Mocker() as m:
            m.get(f"{self.BASE_URL}/acme/reviews", text=page)
            reviews = store_service.get_app_reviews("acme").reviews

        assert [r.app_url for r in reviews] == ["https://apps.example.test/acme"]


# ============================================================================
# 搜索与局部片段
# ============================================================================

class TestSearch:

    def test_inline_fragment(self, service, http_client):
        http_client.fetch.return_value = ok(
            "u", f'<html><body><turbo-frame id="search_page">{SEARCH_CARD}</turbo-frame></body></html>'
        )

        result = service.search("seo", 1)

        assert [app.handle for app in result.apps] == ["acme-seo"]
        assert result.has_results is True
        http_client.fetch.assert_called_once()
        url = http_client.fetch.call_args.args[0]
        headers = http_client.fetch.call_args.kwargs['headers']
        assert url == "https://apps.shopify.com/search?q=seo&page=1"
        assert headers['Turbo-Frame'] == SEARCH_FRAME_NAME
        assert headers['Accept-Language'] == 'en-US,en;q=0.5'
        assert 'User-Agent' in headers

    def test_lazy_fragment_second_fetch(self, service, http_client):
        http_client.fetch.side_effect = [
            ok("u", '<turbo-frame id="search_page" src="/search?q=seo&amp;page=1" loading="lazy"></turbo-frame>'),
            ok("u", SEARCH_CARD + '<nav aria-label="pagination"><a aria-label="Page 4">4</a></nav>'),
        ]

        result = service.search("seo", 3)

        assert http_client.fetch.call_count == 2
        second = http_client.fetch.call_args_list[1]
        assert second.args[0] == "https://apps.shopify.com/search?q=seo&page=3"
        assert second.kwargs['timeout'] == 7
        assert second.kwargs['headers']['Turbo-Frame'] == SEARCH_FRAME_NAME
        assert result.query == "seo"
        assert result.pagination == PaginationInfo(has_next_page=False, total_pages=4, current_page=3)

    def test_no_fragment_returns_empty_result(self, service, http_client):
        http_client.fetch.return_value = ok("u", "<html><body><p>maintenance</p></body></html>")

        result = service.search("seo", 4)

        assert result == SearchResult.empty("seo", 4)
        assert result.pagination == PaginationInfo(False, 1, 4)
        assert result.total_count == 0
        assert result.has_results is False
        http_client.fetch.assert_called_once()

    def test_fragment_fetch_failure(self, service, http_client):
        http_client.fetch.side_effect = [
            ok("u", '<turbo-frame id="search_page" src="/search?q=seo"></turbo-frame>'),
            FetchResult(url="u", html="", status=500),
        ]

        with pytest.raises(FetchError) as exc_info:
            service.search("seo", 2)
        assert exc_info.value.status == 500

    def test_initial_fetch_failure(self, service, http_client):
        http_client.fetch.return_value = FetchResult(url="u", html="", status=429)

        with pytest.raises(FetchError):
            service.search("seo")

    def test_autocomplete_decodes_json(self, service, http_client):
        payload = {"searches": [{"name": "seo"}], "apps": [{"handle": "acme-seo"}]}
        http_client.fetch.return_value = ok("u", json.dumps(payload))

        assert service.search_autocomplete("seo") == payload
        assert http_client.fetch.call_args == call(
            "https://apps.shopify.com/search/autocomplete?v=3&q=seo&st_source=autocomplete",
            headers=service._search_headers(),
            timeout=7
        )
