"""
应用卡片字段提取器（分类页、搜索页、开发者页共用）

赞助标记从不依赖单一信号：链接参数、所在区块标题、广告徽标样式取析取。
"""

import re
from typing import Callable, List, Optional
from bs4 import BeautifulSoup, Tag

from .dom import attr_of, closest, first_attr, first_text, select_all, select_first
from .url_normalizer import APP_STORE_BASE_URL, absolute_url, handle_from_url
from ..value_objects.developer_detail import DeveloperApp, SocialLink
from ..value_objects.listing_app import ListingApp

APP_CARD_SELECTOR = '[data-app-card-target="wrapper"], [data-app-card-name-value]'
DEVELOPER_APP_CARD_SELECTOR = '[data-app-card-name-value], [data-test-id*="app"], .app-card, .listing-card'
SOCIAL_LINK_SELECTOR = (
    'a[href*="twitter.com"], a[href*="facebook.com"], a[href*="linkedin.com"], '
    'a[href*="instagram.com"], a[title*="social"], [data-test-id*="social"]'
)

# (host 片段, 标题关键字, 平台名)
SOCIAL_PLATFORMS = [
    ("twitter.com", "Twitter", "Twitter"),
    ("facebook.com", "Facebook", "Facebook"),
    ("linkedin.com", "LinkedIn", "LinkedIn"),
    ("instagram.com", "Instagram", "Instagram"),
]
DEFAULT_SOCIAL_PLATFORM = "Social"

_RATING_NUMBER_RE = re.compile(r'[\d.]+')

SponsorCheck = Callable[[Tag, str], bool]


# ==================== 卡片通用字段 ====================

def card_name(card: Tag) -> str:
    return attr_of(card, 'data-app-card-name-value') or first_text(card, 'h3, h4, .app-name')


def card_link(card: Tag) -> str:
    """data-app-card-app-link-value 上携带了广告/位置等追踪参数"""
    return attr_of(card, 'data-app-card-app-link-value')


def card_url(card: Tag) -> str:
    return card_link(card) or first_attr(card, 'a', 'href')


def is_built_for_shopify(card: Tag) -> bool:
    return (
        select_first(card, '.built-for-shopify-badge') is not None
        or select_first(card, '[class*="built-for-shopify"]') is not None
    )


def _section_has_heading(card: Tag, predicate: Callable[[str], bool]) -> bool:
    section = closest(card, 'section')
    if section is None:
        return False
    return any(predicate(h2.get_text()) for h2 in select_all(section, 'h2'))


# ==================== 赞助判断 ====================

def is_category_sponsored(card: Tag, link: str) -> bool:
    return (
        "surface_detail=category-ads" in link
        or "ot=" in link
        or _section_has_heading(card, lambda text: "Sponsored apps" in text)
    )


def _has_ad_badge(card: Tag) -> bool:
    for span in select_all(card, 'span'):
        classes = span.get('class') or []
        if span.get_text().strip() == "Ad" and "tw-border" in classes and "tw-rounded-xl" in classes:
            return True
    return False


def is_search_sponsored(card: Tag, link: str) -> bool:
    if (
        "surface_type=search_ad" in link
        or "ot=" in link
        or ("surface_type=search" in link and "surface_intra_position=1" in link)
    ):
        return True

    if _has_ad_badge(card):
        return True

    # "Best match" 区块中的第一个位置也是推广位
    return (
        "surface_intra_position=1" in link
        and _section_has_heading(card, lambda text: "best match" in text.lower())
    )


def extract_listing_apps(doc: BeautifulSoup, sponsor_check: SponsorCheck,
                         base_url: str = APP_STORE_BASE_URL) -> List[ListingApp]:
    """
    按 DOM 顺序提取应用卡片

    参数:
        doc: 分类页或搜索结果片段
        sponsor_check: 页面类型对应的赞助判断函数
        base_url: 相对链接补全所用的应用商店根地址

    返回:
        ListingApp 列表，position 从 1 开始，只对有名称和链接的卡片计数
    """
    apps: List[ListingApp] = []
    for card in select_all(doc, APP_CARD_SELECTOR):
        name = card_name(card)
        url = card_url(card)
        if not name or not url:
            continue

        apps.append(ListingApp(
            name=name,
            url=absolute_url(url, base_url),
            position=len(apps) + 1,
            handle=handle_from_url(url),
            is_sponsored=sponsor_check(card, card_link(card)),
            is_built_for_shopify=is_built_for_shopify(card)
        ))
    return apps


# ==================== 开发者页 ====================

def _developer_card_rating(card: Tag) -> Optional[float]:
    text = first_text(card, '[data-test-id="app-rating"], .app-rating, .rating')
    if not text:
        return None
    match = _RATING_NUMBER_RE.search(text)
    try:
        return float(match.group(0)) if match else 0.0
    except ValueError:
        return 0.0


def _developer_app_from_card(card: Tag) -> Optional[DeveloperApp]:
    name = (
        attr_of(card, 'data-app-card-name-value')
        or first_text(card, '[data-test-id="app-name"], .app-name, h3, h4, .app-title')
        or first_text(card, 'a')
    )
    url = (
        card_link(card)
        or first_attr(card, 'a', 'href')
        or first_attr(card, '[data-test-id="app-link"]', 'href')
    )
    if not name or not url:
        return None

    category = (
        first_text(card, '[data-test-id="app-category"], .app-category')
        or first_text(card, '.category, [data-category]')
    )
    return DeveloperApp(name=name, url=url, category=category, rating=_developer_card_rating(card))


def extract_developer_apps(doc: BeautifulSoup, store_host: str) -> List[DeveloperApp]:
    """
    两轮聚合开发者的应用：
    1. 显式的应用卡片；
    2. 任何指向应用商店域名的链接。
    两轮结果按 URL 去重，先出现的保留。
    """
    apps: List[DeveloperApp] = []

    def add(app: Optional[DeveloperApp]):
        if app is not None and not any(existing.url == app.url for existing in apps):
            apps.append(app)

    for card in select_all(doc, DEVELOPER_APP_CARD_SELECTOR):
        add(_developer_app_from_card(card))

    for link in select_all(doc, f'a[href*="{store_host}"]'):
        name = link.get_text().strip()
        url = attr_of(link, 'href')
        if name and url:
            add(DeveloperApp(name=name, url=url))

    return apps


def classify_social_platform(href: str, title: str) -> str:
    for host, keyword, platform in SOCIAL_PLATFORMS:
        if host in href or keyword in title:
            return platform
    return title or DEFAULT_SOCIAL_PLATFORM


def extract_social_links(doc: BeautifulSoup) -> List[SocialLink]:
    links = []
    for el in select_all(doc, SOCIAL_LINK_SELECTOR):
        href = attr_of(el, 'href')
        if not href:
            continue
        title = attr_of(el, 'title') or first_attr(el, 'svg', 'aria-label')
        links.append(SocialLink(platform=classify_social_platform(href, title), url=href))
    return links
