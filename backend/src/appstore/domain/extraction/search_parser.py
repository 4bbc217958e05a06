from typing import List
from bs4 import BeautifulSoup

from .card_fields import extract_listing_apps, is_search_sponsored
from .count_fields import extract_search_total_count
from .dom import body_text
from .pagination import extract_search_pagination
from .url_normalizer import APP_STORE_BASE_URL
from ..value_objects.listing_app import ListingApp
from ..value_objects.search_result import SearchResult

NO_RESULTS_PHRASES = ("No results", "didn't find any", "Try different keywords")


def has_results(doc: BeautifulSoup, apps: List[ListingApp]) -> bool:
    """宽松判断：有卡片，或者正文里没有任何"无结果"提示语"""
    if apps:
        return True
    text = body_text(doc)
    return not any(phrase in text for phrase in NO_RESULTS_PHRASES)


def parse_search_results(doc: BeautifulSoup, query: str, page: int = 1,
                         base_url: str = APP_STORE_BASE_URL) -> SearchResult:
    apps = extract_listing_apps(doc, is_search_sponsored, base_url)
    return SearchResult(
        query=query,
        total_count=extract_search_total_count(doc),
        apps=apps,
        pagination=extract_search_pagination(doc, page),
        has_results=has_results(doc, apps)
    )
