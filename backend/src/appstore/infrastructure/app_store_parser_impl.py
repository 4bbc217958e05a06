from bs4 import BeautifulSoup

from ..domain.domain_service.i_app_store_parser import IAppStoreParser
from ..domain.extraction.app_detail_parser import parse_app_detail
from ..domain.extraction.category_parser import parse_category
from ..domain.extraction.developer_parser import parse_developer
from ..domain.extraction.review_list_parser import parse_reviews
from ..domain.extraction.search_parser import parse_search_results
from ..domain.extraction.url_listing_parser import parse_app_urls, parse_category_urls, parse_developer_urls
from ..domain.extraction.url_normalizer import APP_STORE_BASE_URL, host_of
from ..domain.value_objects.app_detail import AppDetail
from ..domain.value_objects.app_summary import UrlListing
from ..domain.value_objects.category_detail import CategoryDetail
from ..domain.value_objects.developer_detail import DeveloperDetail
from ..domain.value_objects.review import ReviewPage
from ..domain.value_objects.search_result import SearchResult


class AppStoreParserImpl(IAppStoreParser):
    """
    页面解析领域服务实现
    每个方法直接委托给 extraction 包中对应的纯函数解析器，
    只额外携带应用商店根地址：相对链接按它补全，链接过滤按它的域名。
    """

    def __init__(self, base_url: str = APP_STORE_BASE_URL):
        self._base_url = base_url.rstrip('/')
        self._store_host = host_of(self._base_url)

    def parse_app_detail(self, doc: BeautifulSoup) -> AppDetail:
        return parse_app_detail(doc, self._base_url)

    def parse_reviews(self, doc: BeautifulSoup) -> ReviewPage:
        return parse_reviews(doc, self._base_url)

    def parse_category(self, doc: BeautifulSoup) -> CategoryDetail:
        return parse_category(doc, self._base_url)

    def parse_search_results(self, doc: BeautifulSoup, query: str, page: int = 1) -> SearchResult:
        return parse_search_results(doc, query, page, self._base_url)

    def parse_developer(self, doc: BeautifulSoup) -> DeveloperDetail:
        return parse_developer(doc, self._store_host)

    def parse_app_urls(self, doc: BeautifulSoup) -> UrlListing:
        return parse_app_urls(doc, self._store_host)

    def parse_category_urls(self, doc: BeautifulSoup) -> UrlListing:
        return parse_category_urls(doc, self._store_host)

    def parse_developer_urls(self, doc: BeautifulSoup) -> UrlListing:
        return parse_developer_urls(doc, self._store_host)
