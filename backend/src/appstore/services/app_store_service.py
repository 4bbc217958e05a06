"""
模块职责（应用层）
- 编排一次完整的页面抓取：构造应用商店 URL -> 抓取 -> 校验状态码 -> 解析 -> 返回值对象；
- 搜索页额外负责局部片段（partial page）的解析：内联片段直接解析，懒加载片段二次请求；
- 批量详情抓取在线程池中并发执行，并发数由配置限制。

设计要点
- 应用层只做编排，不承载字段提取规则（这些在 extraction 包中实现）；
- 非 200 状态码统一转换为 FetchError，这是唯一跨越提取边界的异常；
- 二次请求与首次请求使用相同的超时，不单独重试。
"""

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

from ..domain.demand_interface.i_html_parser import IHtmlParser
from ..domain.demand_interface.i_http_client import IHttpClient
from ..domain.domain_service.i_app_store_parser import IAppStoreParser
from ..domain.exceptions import FetchError
from ..domain.extraction.fragment import find_fragment_source, find_inline_fragment, fragment_url
from ..domain.value_objects.app_detail import AppDetail
from ..domain.value_objects.app_summary import UrlListing
from ..domain.value_objects.category_detail import CategoryDetail
from ..domain.value_objects.developer_detail import DeveloperDetail
from ..domain.value_objects.fetch_result import FetchResult
from ..domain.value_objects.review import ReviewPage
from ..domain.value_objects.search_result import SearchResult
from src.shared.config import AppStoreSettings

error_logger = logging.getLogger('infrastructure.error')

SEARCH_FRAME_NAME = "search_page"

SEARCH_HEADERS = {
    'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8',
    'Accept-Language': 'en-US,en;q=0.5',
    'Turbo-Frame': SEARCH_FRAME_NAME,
}


def check_response_status(result: FetchResult, url: Optional[str] = None) -> FetchResult:
    """状态码不是 200 时抛出 FetchError，携带上游状态码"""
    if result.status != 200:
        if url:
            message = f"Failed to fetch {url}. Status: {result.status}"
        else:
            message = f"Request failed with status: {result.status}"
        if result.error_message:
            message = f"{message} ({result.error_message})"
        raise FetchError(message, result.status)
    return result


def describe_error(exc: Exception) -> Tuple[str, int]:
    """
    异常 -> (错误信息, 响应码)
    FetchError 保留上游状态码（网络层失败的 0 映射为 500），其他异常一律 500
    """
    if isinstance(exc, FetchError):
        return exc.message, exc.status or 500
    return str(exc) or "Unknown error", 500


class AppStoreService:
    """
    应用服务 - 应用商店页面抓取与解析
    职责：
    - 为每种页面类型构造规范 URL；
    - 通过 HTTP 客户端抓取并校验状态码；
    - 把文档交给页面解析领域服务，返回结构化记录。
    """

    def __init__(
        self,
        http_client: IHttpClient,
        html_parser: IHtmlParser,
        parser: IAppStoreParser,
        settings: Optional[AppStoreSettings] = None
    ):
        """
        构造函数注入依赖

        参数:
            http_client: HTTP客户端
            html_parser: HTML -> 文档
            parser: 页面解析领域服务
            settings: 抓取配置 (可选，缺省使用默认配置)
        """
        self._http = http_client
        self._html = html_parser
        self._parser = parser
        self._settings = settings or AppStoreSettings()

    # ==================== URL 构造 ====================

    @property
    def base_url(self) -> str:
        return self._settings.base_url

    def sitemap_url(self) -> str:
        return f"{self.base_url}/sitemap"

    def app_url(self, handle: str) -> str:
        return f"{self.base_url}/{handle}"

    def reviews_url(self, handle: str, page: int = 1) -> str:
        return f"{self.base_url}/{handle}/reviews?page={page}"

    def category_url(self, handle: str, page: int = 1) -> str:
        return f"{self.base_url}/categories/{handle}?page={page}"

    def developer_url(self, handle: str) -> str:
        return f"{self.base_url}/partners/{handle}"

    def search_url(self, keyword: str, page: int = 1) -> str:
        return f"{self.base_url}/search?q={quote(keyword, safe='')}&page={page}"

    def autocomplete_url(self, keyword: str) -> str:
        return f"{self.base_url}/search/autocomplete?v=3&q={quote(keyword, safe='')}&st_source=autocomplete"

    # ==================== 抓取 ====================

    def _fetch(self, url: str, headers: Optional[Dict[str, str]] = None) -> FetchResult:
        result = self._http.fetch(url, headers=headers, timeout=self._settings.fetch_timeout)
        try:
            return check_response_status(result, url)
        except FetchError as e:
            error_logger.error(
                f"AppStore fetch failed: {e.message}",
                extra={'url': url, 'status': e.status, 'component': 'AppStoreService'}
            )
            raise

    def _fetch_document(self, url: str, headers: Optional[Dict[str, str]] = None):
        return self._html.parse(self._fetch(url, headers).html)

    # ==================== 站点地图 ====================

    def get_app_list(self) -> UrlListing:
        return self._parser.parse_app_urls(self._fetch_document(self.sitemap_url()))

    def get_category_list(self) -> UrlListing:
        return self._parser.parse_category_urls(self._fetch_document(self.sitemap_url()))

    def get_developer_list(self) -> UrlListing:
        return self._parser.parse_developer_urls(self._fetch_document(self.sitemap_url()))

    # ==================== 页面 ====================

    def get_app_detail(self, handle: str) -> AppDetail:
        return self._parser.parse_app_detail(self._fetch_document(self.app_url(handle)))

    def get_app_details(self, handles: List[str]) -> List[AppDetail]:
        """
        并发抓取多个应用详情
        并发数不超过 max_concurrency，结果顺序与 handles 一致；
        任一 handle 失败时其 FetchError 向上传播
        """
        if not handles:
            return []
        workers = min(self._settings.max_concurrency, len(handles))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(executor.map(self.get_app_detail, handles))

    def get_app_reviews(self, handle: str, page: int = 1) -> ReviewPage:
        return self._parser.parse_reviews(self._fetch_document(self.reviews_url(handle, page)))

    def get_category(self, handle: str, page: int = 1) -> CategoryDetail:
        return self._parser.parse_category(self._fetch_document(self.category_url(handle, page)))

    def get_developer(self, handle: str) -> DeveloperDetail:
        return self._parser.parse_developer(self._fetch_document(self.developer_url(handle)))

    # ==================== 搜索 ====================

    def _search_headers(self) -> Dict[str, str]:
        return {**SEARCH_HEADERS, 'User-Agent': self._settings.user_agent}

    def search_autocomplete(self, keyword: str) -> Any:
        """自动补全接口返回 JSON，原样解码返回"""
        result = self._fetch(self.autocomplete_url(keyword), self._search_headers())
        return json.loads(result.html)

    def search(self, keyword: str, page: int = 1) -> SearchResult:
        """
        搜索应用

        1. 首次响应内联了结果片段：直接解析片段；
        2. 只有懒加载片段引用：改写 page 参数后二次请求片段地址；
        3. 两者都没有：返回空结果（保留请求的页码）。
        """
        url = self.search_url(keyword, page)
        doc = self._fetch_document(url, self._search_headers())

        inline = find_inline_fragment(doc, SEARCH_FRAME_NAME)
        if inline is not None:
            return self._parser.parse_search_results(self._html.parse(inline), keyword, page)

        src = find_fragment_source(doc)
        if src:
            frame_url = fragment_url(src, page, self.base_url)
            frame_doc = self._fetch_document(frame_url, self._search_headers())
            return self._parser.parse_search_results(frame_doc, keyword, page)

        return SearchResult.empty(keyword, page)
