"""
计数区块提取器：分类应用数、搜索结果总数、开发者应用数、评论星级统计
"""

import re
from typing import List, Optional
from bs4 import BeautifulSoup

from .dom import body_text, document_title, first_text, select_all, select_first, select_text
from .strategy_chain import first_match
from .text_normalizer import parse_count
from ..value_objects.review import RatingCount

_CATEGORY_COUNT_RE = re.compile(r'(\d+)\s+apps?', re.IGNORECASE)
_SEARCH_COUNT_RE = re.compile(r'(\d+(?:,\d+)*)\s*apps?', re.IGNORECASE)
_TITLE_SEARCH_COUNT_RE = re.compile(r'(\d+(?:,\d+)*)\s+apps?', re.IGNORECASE)
_NUMBER_RE = re.compile(r'\b\d+\b')
_DIGITS_RE = re.compile(r'\d+')

SEARCH_COUNT_SELECTORS = [
    '[data-testid="app-count"]',
    '#app-count',
    '.tw-text-body-lg:-soup-contains("apps")',
    'span:-soup-contains("apps")',
    '.search-results-count',
]

# 开发者页正文中合理的应用数量区间
DEVELOPER_APP_COUNT_RANGE = range(1, 100)


def _match_count(pattern: re.Pattern, text: str) -> int:
    match = pattern.search(text)
    return parse_count(match.group(1)) if match else 0


def extract_category_app_count(doc: BeautifulSoup) -> int:
    """形如 "230 apps" 的文本；页面上找不到时从 <title> 中找"""
    text = first_match([
        lambda d: select_text(d, '#app-count span'),
        lambda d: select_text(d, 'span:-soup-contains("apps")'),
        lambda d: select_text(d, '.tw-text-body-lg:-soup-contains("apps")'),
    ], doc, default="")
    return _match_count(_CATEGORY_COUNT_RE, text) or _match_count(_CATEGORY_COUNT_RE, document_title(doc))


def _search_count_from_selectors(doc: BeautifulSoup) -> Optional[int]:
    for selector in SEARCH_COUNT_SELECTORS:
        count = _match_count(_SEARCH_COUNT_RE, first_text(doc, selector))
        if count:
            return count
    return None


def extract_search_total_count(doc: BeautifulSoup) -> int:
    return first_match([
        _search_count_from_selectors,
        lambda d: _match_count(_TITLE_SEARCH_COUNT_RE, document_title(d)),
    ], doc, default=0)


def _developer_count_from_title(doc: BeautifulSoup) -> Optional[int]:
    match = _DIGITS_RE.search(document_title(doc))
    return int(match.group(0)) if match else None


def _developer_count_from_body(doc: BeautifulSoup) -> Optional[int]:
    for number in _NUMBER_RE.findall(body_text(doc)):
        if int(number) in DEVELOPER_APP_COUNT_RANGE:
            return int(number)
    return None


def extract_developer_app_count(doc: BeautifulSoup) -> int:
    return first_match([_developer_count_from_title, _developer_count_from_body], doc, default=0)


def extract_rating_counts(doc: BeautifulSoup) -> List[RatingCount]:
    """评论页的星级统计，例如 [("5 stars", 1234), ("4 stars", 56)]"""
    counts = []
    for item in select_all(select_first(doc, '.app-reviews-metrics'), '.tw-text-body-md ul li'):
        counts.append(RatingCount(
            label=select_text(item, '.tw-mr-2xs'),
            count=parse_count(select_text(item, 'a'))
        ))
    return counts
