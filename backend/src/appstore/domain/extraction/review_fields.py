"""
评论容器的字段提取器

应用身份（URL/名称）在页头解析一次，以不可变的 AppIdentity 显式传入每个评论容器；
评论人、星级、日期、地区、使用时长、正文、评论ID 各自走独立的回退链。
"""

import re
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Tuple
from bs4 import BeautifulSoup, Tag

from .dom import attr_of, canonical_url, closest, document_title, first_attr, first_text, select_all, select_first, select_text
from .strategy_chain import first_match
from .text_normalizer import clean_text, looks_like_date
from .url_normalizer import APP_STORE_BASE_URL, absolute_url, handle_from_url
from ..value_objects.review import AppIdentity

REVIEW_CONTAINER_SELECTOR = '[data-merchant-review], [data-review-content-id]'

# 星级图标的矢量路径特征：实心星以 "M8 0.75C" 开头，空心星带有内部镂空段
FILLED_STAR_PATH = "M8 0.75C"
EMPTY_STAR_CUTOUT = "ZM8.00001 2.695L"
DEFAULT_RATING = 5

_RATING_LABEL_RE = re.compile(r'(\d+(\.\d+)?)\s*out of\s*\d+')
_LOCATION_RE = re.compile(r'^[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*(?:,\s*[A-Z]{2})?$')
_USAGE_RE = re.compile(r'using|days?|months?|years?|app|since|ago', re.IGNORECASE)

REVIEW_DATE_SELECTORS = [
    '.tw-text-body-xs.tw-text-fg-tertiary',
    '.tw-text-fg-tertiary',
    '.review-date',
    '[data-test-id="review-date"]',
    'time[datetime]',
]

REVIEWER_INFO_SELECTORS = [
    '.tw-space-y-1.md\\:tw-space-y-2.tw-text-fg-tertiary.tw-text-body-xs',
    '.reviewer-info',
    '[data-test-id="reviewer-info"]',
    '.tw-text-fg-tertiary .tw-text-body-xs',
]

REVIEW_CONTENT_SELECTORS = [
    '[data-truncate-review] p',
    '.tw-text-body-md.tw-text-fg-secondary p',
    '.tw-text-body-md p',
    '.review-content',
    '[data-test-id="review-content"]',
    'p',
]

MIN_REVIEW_CONTENT_LENGTH = 10


# ==================== 应用身份 ====================

def extract_app_identity(doc: BeautifulSoup, base_url: str = APP_STORE_BASE_URL) -> AppIdentity:
    url = first_match([
        lambda d: first_attr(d, '#arp-reviews h1 a', 'href'),
        lambda d: first_attr(d, 'h1 a', 'href'),
        canonical_url,
    ], doc, default="")
    url = absolute_url(url, base_url)

    name = first_match([
        lambda d: select_text(d, '#arp-reviews h1 a'),
        lambda d: select_text(d, 'h1 a'),
        lambda d: document_title(d).split('|')[0].strip(),
    ], doc, default="")

    # 从 URL 的 handle 还原名称，例如 product-reviews -> Product Reviews
    if not name and url:
        name = re.sub(r'\b\w', lambda m: m.group(0).upper(), handle_from_url(url).replace('-', ' '))

    return AppIdentity(url=url, name=name)


# ==================== 评论人 ====================

def _reviewer_from_heading(review: Tag) -> str:
    return clean_text(select_text(review, '.tw-text-heading-xs.tw-text-fg-primary'))


def _reviewer_from_first_heading(review: Tag) -> str:
    return clean_text(first_text(review, '.tw-text-heading-xs'))


def _reviewer_from_class(review: Tag) -> str:
    return clean_text(first_text(review, '.reviewer-name'))


def _reviewer_from_title_attr(review: Tag) -> str:
    return clean_text(first_attr(review, '[title]', 'title'))


def _reviewer_from_first_text_element(review: Tag) -> str:
    el = select_first(review, '.tw-text-fg-primary, .reviewer-name, [data-test-id="reviewer-name"]')
    if el is None:
        return ""
    return clean_text(el.get_text() or attr_of(el, 'title'))


REVIEWER_STRATEGIES = [
    _reviewer_from_heading,
    _reviewer_from_first_heading,
    _reviewer_from_class,
    _reviewer_from_title_attr,
    _reviewer_from_first_text_element,
]


def extract_reviewer(review: Tag) -> str:
    return first_match(REVIEWER_STRATEGIES, review, default="")


# ==================== 星级 ====================

def _count_filled_stars(svgs: List[Tag]) -> int:
    filled = 0
    for svg in svgs:
        path_data = first_attr(svg, 'path', 'd')
        if FILLED_STAR_PATH in path_data and EMPTY_STAR_CUTOUT not in path_data:
            filled += 1
    return filled


def _stars_container(review: Tag) -> List[Tag]:
    return select_all(review, '[aria-label*="out of"], [role="img"][aria-label*="star"]')


def _rating_from_label(review: Tag) -> Optional[int]:
    containers = _stars_container(review)
    if not containers:
        return None
    match = _RATING_LABEL_RE.search(attr_of(containers[0], 'aria-label'))
    if not match:
        return None
    # 四舍五入："4.5 out of 5" -> 5
    return int(Decimal(match.group(1)).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def _rating_from_container_stars(review: Tag) -> Optional[int]:
    svgs = []
    for container in _stars_container(review):
        svgs.extend(select_all(container, 'svg'))
    return _count_filled_stars(svgs) or None


def _rating_from_star_icons(review: Tag) -> Optional[int]:
    svgs = select_all(review, 'svg[viewBox*="0 0 16 15"], svg[viewBox*="0 0 24 24"]')
    return _count_filled_stars(svgs) or None


RATING_STRATEGIES = [
    _rating_from_label,
    _rating_from_container_stars,
    _rating_from_star_icons,
]


def extract_review_rating(review: Tag) -> int:
    """aria-label "X out of Y" -> 统计实心星图标 -> 默认 5 星"""
    return first_match(RATING_STRATEGIES, review, default=DEFAULT_RATING)


# ==================== 日期 / 地区 / 使用时长 ====================

def extract_review_date_text(review: Tag) -> str:
    """第一个看起来像日期的文本，例如 "March 31, 2025" 或 "3 days ago" """
    for selector in REVIEW_DATE_SELECTORS:
        for el in select_all(review, selector):
            text = clean_text(el.get_text() or attr_of(el, 'datetime'))
            if looks_like_date(text):
                return text
    return ""


def _location_and_usage_from_info_block(review: Tag, reviewer: str, review_date: str) -> Tuple[str, str]:
    location = ""
    usage_time = ""

    for selector in REVIEWER_INFO_SELECTORS:
        containers = select_all(review, selector)
        if not containers:
            continue

        info_elements = []
        for container in containers:
            info_elements.extend(select_all(container, 'div, span'))

        for index, el in enumerate(info_elements):
            text = clean_text(el.get_text())
            if not text or text in review_date or text == reviewer:
                continue

            # 第二个元素或形如 "City, ST" 的文本视为地区
            if index == 1 or _LOCATION_RE.match(text):
                if not _USAGE_RE.search(text):
                    location = text
            elif _USAGE_RE.search(text):
                usage_time = text
            elif location and index > 1:
                usage_time = text

        if location or usage_time:
            break

    return location, usage_time


def _location_and_usage_from_meta(review: Tag, reviewer: str, review_date: str,
                                  location: str, usage_time: str) -> Tuple[str, str]:
    for el in select_all(review, '.tw-text-fg-tertiary, .reviewer-meta, [data-test-id*="reviewer"]'):
        text = clean_text(el.get_text())
        if not text or text in review_date or text == reviewer:
            continue
        if not location and _LOCATION_RE.match(text):
            location = text
        elif not usage_time and _USAGE_RE.search(text):
            usage_time = text
    return location, usage_time


def extract_location_and_usage(review: Tag, reviewer: str, review_date: str) -> Tuple[str, str]:
    """
    地区与使用时长

    返回:
        (reviewer_location, reviewer_latest_used_date)，找不到时为空字符串
    """
    location, usage_time = _location_and_usage_from_info_block(review, reviewer, review_date)
    if not location or not usage_time:
        location, usage_time = _location_and_usage_from_meta(review, reviewer, review_date, location, usage_time)
    return location, usage_time


# ==================== 正文 / 评论ID ====================

def extract_review_content(review: Tag) -> str:
    for selector in REVIEW_CONTENT_SELECTORS:
        content = clean_text(first_text(review, selector))
        if len(content) > MIN_REVIEW_CONTENT_LENGTH:
            return content
    return ""


def _review_id_on_container(review: Tag) -> str:
    return attr_of(review, 'data-review-id')


def _review_id_in_subtree(review: Tag) -> str:
    return first_attr(review, '[data-review-id]', 'data-review-id')


def _review_id_in_ancestors(review: Tag) -> str:
    return attr_of(closest(review, '[data-review-id]'), 'data-review-id')


def extract_review_id(review: Tag) -> str:
    return first_match([
        _review_id_on_container,
        _review_id_in_subtree,
        _review_id_in_ancestors,
    ], review, default="")
