"""
分页控件解析

无跨调用状态：每个文档独立解析。
- 找不到分页控件 -> PaginationInfo(False, 1, 1)
- has_next_page: 存在 "下一页" 控件（rel=next 或 aria-label 含 Next）
- total_pages: 所有 "Page N" 标签中的最大值；一个都没有但有下一页时取 current_page + 1（下界估计）
- current_page: 评论页读 "Current Page N" 标记；分类页读 canonical URL 的 page 参数；
  搜索页调用方请求的页码优先
"""

import re
from typing import List, Optional
from bs4 import BeautifulSoup, Tag

from .dom import attr_of, canonical_url, select_all, select_first
from .url_normalizer import page_from_url
from ..value_objects.pagination_info import PaginationInfo

PAGINATION_SELECTOR = '[aria-label="pagination"]'
NEXT_CONTROL_SELECTOR = 'a[rel="next"], a[aria-label*="Next"], button[aria-label*="Next"]'
PAGE_CONTROL_SELECTOR = 'a[aria-label*="Page"], button[aria-label*="Page"]'
CURRENT_PAGE_SELECTOR = 'a[aria-label*="Current Page"], button[aria-label*="Current Page"]'

# 分类页与搜索页只认 rel=next 链接与 <a> 页码
LISTING_NEXT_SELECTOR = 'a[rel="next"]'
LISTING_PAGE_SELECTOR = 'a[aria-label*="Page"]'

_PAGE_LABEL_RE = re.compile(r'Page (\d+)')


def find_pagination_block(doc: BeautifulSoup) -> Optional[Tag]:
    return select_first(doc, PAGINATION_SELECTOR)


def _page_numbers(block: Tag, selector: str) -> List[int]:
    numbers = []
    for el in select_all(block, selector):
        match = _PAGE_LABEL_RE.search(attr_of(el, 'aria-label'))
        if match:
            numbers.append(int(match.group(1)))
    return numbers


def _build(block: Tag, current_page: int, next_selector: str, page_selector: str) -> PaginationInfo:
    has_next_page = select_first(block, next_selector) is not None
    page_numbers = _page_numbers(block, page_selector)

    if page_numbers:
        total_pages = max(page_numbers)
    elif has_next_page:
        total_pages = current_page + 1
    else:
        total_pages = 1

    return PaginationInfo(has_next_page=has_next_page, total_pages=total_pages, current_page=current_page)


def _current_page_from_marker(block: Tag) -> int:
    numbers = _page_numbers(block, CURRENT_PAGE_SELECTOR)
    return numbers[0] if numbers else 1


def extract_pagination(doc: BeautifulSoup) -> PaginationInfo:
    """评论列表等通用分页：当前页来自 "Current Page N" 标记"""
    block = find_pagination_block(doc)
    if block is None:
        return PaginationInfo()
    return _build(block, _current_page_from_marker(block), NEXT_CONTROL_SELECTOR, PAGE_CONTROL_SELECTOR)


def extract_category_pagination(doc: BeautifulSoup) -> PaginationInfo:
    block = find_pagination_block(doc)
    if block is None:
        return PaginationInfo()
    current_page = page_from_url(canonical_url(doc))
    return _build(block, current_page, LISTING_NEXT_SELECTOR, LISTING_PAGE_SELECTOR)


def extract_search_pagination(doc: BeautifulSoup, requested_page: int = 1) -> PaginationInfo:
    block = find_pagination_block(doc)
    if block is None:
        return PaginationInfo()
    # 响应中回显的页码可能与请求不一致，以调用方请求为准
    current_page = requested_page if requested_page > 1 else page_from_url(canonical_url(doc))
    return _build(block, current_page, LISTING_NEXT_SELECTOR, LISTING_PAGE_SELECTOR)
