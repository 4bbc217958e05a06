"""
URL 发现：站点地图中的应用 / 分类 / 开发者链接

纯链接过滤函数，不做抓取：
- 应用链接用路径黑名单排除非应用页面；
- 分类、开发者链接用路径白名单；
- 只保留应用商店域名下的链接，按 handle 去重（后出现者覆盖，位置不变）。
"""

from typing import Callable, List, Tuple
from bs4 import BeautifulSoup

from .dom import attr_of, select_all
from .url_normalizer import APP_STORE_HOST, category_handle_from_url, dedup_by_handle, handle_from_url
from ..value_objects.app_summary import AppSummary, UrlListing

APP_URL_IGNORE_PATHS = [
    "/partners",
    "/partner",
    "/built-in-features",
    "/compare",
    "/categories",
    "/collections",
    "/stories",
    "/store-create",
    "/app-groups",
    "/sitemap",
    "/?auth=1",
]

CATEGORY_URL_PATHS = ["/categories/"]
CATEGORY_URL_SUFFIX = "/all"

DEVELOPER_URL_PATHS = ["/partners/"]


def _anchors(doc: BeautifulSoup) -> List[Tuple[str, str]]:
    """(href, 锚文本)，忽略没有 href 的链接"""
    anchors = []
    for a in select_all(doc, 'a'):
        href = attr_of(a, 'href')
        if href:
            anchors.append((href, a.get_text().strip()))
    return anchors


def _build_listing(doc: BeautifulSoup, accept: Callable[[str], bool],
                   handle_of: Callable[[str], str], store_host: str) -> UrlListing:
    summaries = [
        AppSummary(name=text, url=href, handle=handle_of(href))
        for href, text in _anchors(doc)
        if accept(href) and store_host in href
    ]
    urls = dedup_by_handle(summaries)
    return UrlListing(total=len(urls), urls=urls)


def parse_app_urls(doc: BeautifulSoup, store_host: str = APP_STORE_HOST) -> UrlListing:
    return _build_listing(
        doc,
        lambda url: not any(path in url for path in APP_URL_IGNORE_PATHS),
        handle_from_url,
        store_host
    )


def parse_category_urls(doc: BeautifulSoup, store_host: str = APP_STORE_HOST) -> UrlListing:
    return _build_listing(
        doc,
        lambda url: any(path in url and CATEGORY_URL_SUFFIX in url for path in CATEGORY_URL_PATHS),
        category_handle_from_url,
        store_host
    )


def parse_developer_urls(doc: BeautifulSoup, store_host: str = APP_STORE_HOST) -> UrlListing:
    return _build_listing(
        doc,
        lambda url: any(path in url for path in DEVELOPER_URL_PATHS),
        handle_from_url,
        store_host
    )
