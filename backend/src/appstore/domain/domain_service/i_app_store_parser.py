"""
页面解析领域服务接口
每种页面类型一个解析方法，全部为纯函数：(document, context?) -> 实体
无状态、不做网络请求、字段缺失时返回空值而不是抛异常
"""

from abc import ABC, abstractmethod
from bs4 import BeautifulSoup

from ..value_objects.app_detail import AppDetail
from ..value_objects.app_summary import UrlListing
from ..value_objects.category_detail import CategoryDetail
from ..value_objects.developer_detail import DeveloperDetail
from ..value_objects.review import ReviewPage
from ..value_objects.search_result import SearchResult


class IAppStoreParser(ABC):

    @abstractmethod
    def parse_app_detail(self, doc: BeautifulSoup) -> AppDetail:
        """应用详情页 -> AppDetail"""
        pass

    @abstractmethod
    def parse_reviews(self, doc: BeautifulSoup) -> ReviewPage:
        """评论列表页 -> 评论 + 分页 + 星级统计"""
        pass

    @abstractmethod
    def parse_category(self, doc: BeautifulSoup) -> CategoryDetail:
        """分类页 -> CategoryDetail（页面层级由 canonical URL 推导）"""
        pass

    @abstractmethod
    def parse_search_results(self, doc: BeautifulSoup, query: str, page: int = 1) -> SearchResult:
        """
        搜索结果片段 -> SearchResult
        query 用于标记结果，page 为调用方请求的页码（优先于页面中的页码）
        """
        pass

    @abstractmethod
    def parse_developer(self, doc: BeautifulSoup) -> DeveloperDetail:
        """开发者（partner）页 -> DeveloperDetail"""
        pass

    @abstractmethod
    def parse_app_urls(self, doc: BeautifulSoup) -> UrlListing:
        """站点地图 -> 应用链接"""
        pass

    @abstractmethod
    def parse_category_urls(self, doc: BeautifulSoup) -> UrlListing:
        """站点地图 -> 分类链接"""
        pass

    @abstractmethod
    def parse_developer_urls(self, doc: BeautifulSoup) -> UrlListing:
        """站点地图 -> 开发者链接"""
        pass
