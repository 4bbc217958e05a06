"""
分类页解析

页面层级只由 canonical URL 最后一段中的连字符数量决定：
    sales-channels                                   -> topic      (0-1 个)
    sales-channels-selling-in-person                 -> secondary  (2 个)
    sales-channels-selling-in-person-sku-and-barcodes -> tertiary  (3 个及以上)
"""

from bs4 import BeautifulSoup

from .card_fields import extract_listing_apps, is_category_sponsored
from .count_fields import extract_category_app_count
from .dom import canonical_url, document_title, first_text, meta_content
from .pagination import extract_category_pagination
from .strategy_chain import first_match
from .text_normalizer import clean_text
from .url_normalizer import APP_STORE_BASE_URL
from ..value_objects.category_detail import CategoryDetail, PageType


def page_type_from_url(url: str) -> PageType:
    parts = [part for part in url.split('/') if part]
    last_part = parts[-1].split('?')[0] if parts else ""
    hyphen_count = last_part.count('-')

    if hyphen_count <= 1:
        return PageType.TOPIC
    if hyphen_count == 2:
        return PageType.SECONDARY
    return PageType.TERTIARY


def _name_from_title(doc: BeautifulSoup) -> str:
    # "Best Marketing Apps For Shopify | ..." -> "Marketing Shopify"
    return clean_text(document_title(doc).split('|')[0].replace("Best", "", 1).replace("Apps For", "", 1))


def extract_category_name(doc: BeautifulSoup) -> str:
    return first_match([lambda d: first_text(d, 'h1'), _name_from_title], doc, default="")


def extract_category_description(doc: BeautifulSoup) -> str:
    return first_match([
        lambda d: meta_content(d, 'meta[name="description"]'),
        lambda d: meta_content(d, 'meta[property="og:description"]'),
    ], doc, default="")


def parse_category(doc: BeautifulSoup, base_url: str = APP_STORE_BASE_URL) -> CategoryDetail:
    return CategoryDetail(
        name=extract_category_name(doc),
        description=extract_category_description(doc),
        app_count=extract_category_app_count(doc),
        apps=extract_listing_apps(doc, is_category_sponsored, base_url),
        pagination=extract_category_pagination(doc),
        page_type=page_type_from_url(canonical_url(doc))
    )
