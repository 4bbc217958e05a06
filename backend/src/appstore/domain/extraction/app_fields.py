"""
应用详情页的字段提取器

每个字段是一条策略链（见 strategy_chain.first_match）：
- 优先读取 JSON-LD 结构化数据；
- 然后依次尝试 data-* 属性 -> 语义类名 -> 标题文本锚点 -> 通用兜底；
- 全部落空返回字段的空默认值。
"""

import re
from typing import List, Optional
from bs4 import BeautifulSoup, Tag

from .dom import (
    attr_of, child_elements, closest, first_attr, first_text, meta_content,
    parse_json_ld, select_all, select_first, select_text, unique_elements, unique_parents
)
from .strategy_chain import first_match
from .text_normalizer import clean_price, parse_count
from .url_normalizer import APP_STORE_BASE_URL, absolute_url
from ..value_objects.app_detail import CategoryRef, DeveloperRef, PricingPlan

HERO_SELECTOR = '#adp-hero'
DEVELOPER_SECTION_SELECTOR = '#adp-developer'

_LANGUAGE_SPLIT_RE = re.compile(r',|\band\b')
_KNOWN_LANGUAGE_RE = re.compile(
    r'English|French|German|Spanish|Italian|Portuguese|Dutch|Chinese|Japanese|Korean|Russian',
    re.IGNORECASE
)
_LANGUAGE_LIST_RE = re.compile(r'[A-Za-z]+(, [A-Za-z]+)+')
_REVIEW_COUNT_RE = re.compile(r'\(([\d,]+)\)')

LANGUAGE_SECTION_SELECTORS = [
    '[data-test-id="languages"]',
    '.tw-text-fg-secondary:-soup-contains("Languages")',
    '.languages-section',
    '#adp-developer .tw-grid',
    '.app-details-languages',
]

CATEGORY_LABEL_SELECTORS = [
    'p:-soup-contains("Categories")',
    '[data-test-id="categories"]',
    '.categories-section',
    '.app-categories',
    'h2:-soup-contains("Categories")',
    'h3:-soup-contains("Categories")',
    'h4:-soup-contains("Categories")',
    'h5:-soup-contains("Categories")',
    'h6:-soup-contains("Categories")',
]

BREADCRUMB_SKIP_NAMES = ("Apps", "Home")


# ==================== 标题 / Logo / 描述 ====================

def extract_title(doc: BeautifulSoup) -> str:
    return first_match([
        lambda d: select_text(select_first(d, HERO_SELECTOR), 'h1'),
        lambda d: first_text(d, 'h1'),
    ], doc, default="")


def extract_logo(doc: BeautifulSoup) -> str:
    return first_match([
        lambda d: first_attr(select_first(d, HERO_SELECTOR), 'img', 'src'),
        lambda d: meta_content(d, 'meta[property="og:image"]'),
    ], doc, default="")


def extract_description(doc: BeautifulSoup) -> str:
    return first_match([
        lambda d: select_text(d, '#app-details'),
        lambda d: select_text(d, '[data-test-id="app-description"]'),
        lambda d: meta_content(d, 'meta[name="description"]'),
        lambda d: first_text(d, '.tw-text-body-md.tw-text-fg-secondary'),
    ], doc, default="")


# ==================== 评分 / 评论数 / 价格 ====================

def _json_scalar(value) -> str:
    # 4.0 输出为 "4"，与页面上显示的评分一致
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value)


def _rating_from_json_ld(doc: BeautifulSoup) -> Optional[str]:
    aggregate = parse_json_ld(doc).get('aggregateRating')
    if not isinstance(aggregate, dict):
        return None
    value = aggregate.get('ratingValue')
    if value is None or value == "":
        return None
    return _json_scalar(value)


def extract_rating(doc: BeautifulSoup) -> str:
    """JSON-LD 评分优先，否则返回 hero 区域的原始文本（可能为空）"""
    return first_match([
        _rating_from_json_ld,
        lambda d: first_text(select_first(d, HERO_SELECTOR), 'dd span.tw-text-fg-secondary'),
        lambda d: first_text(d, '.tw-text-fg-secondary:-soup-contains("star")'),
    ], doc, default="")


def _review_count_from_text(text: str) -> int:
    match = _REVIEW_COUNT_RE.search(text)
    return parse_count(match.group(1)) if match else 0


def extract_review_count(doc: BeautifulSoup) -> int:
    return first_match([
        lambda d: _review_count_from_text(
            first_text(d, 'a[data-test-id="reviews_link"], a#reviews-link, a[href*="#adp-reviews"]')
        ),
        lambda d: _review_count_from_text(
            select_text(d, '.tw-border-r.tw-border-r-stroke-secondary a[href*="#adp-reviews"]')
        ),
    ], doc, default=0)


def extract_pricing(doc: BeautifulSoup) -> str:
    def from_hero(d):
        dl = select_first(select_first(d, HERO_SELECTOR), 'dl')
        return first_text(dl, 'dd')

    return first_match([
        from_hero,
        lambda d: select_text(d, '[data-test-id*="pricing"]'),
        lambda d: meta_content(d, 'meta[property="twitter:data1"]'),
    ], doc, default="")


def _pricing_plan(card: Tag) -> PricingPlan:
    heading_children = child_elements(select_all(card, '[data-pricing-component-target="cardHeading"]'))
    named_children = child_elements(select_all(card, '[data-pricing-component-target="cardHeading"], .plan-name'))

    name = (named_children[0].get_text().strip() if named_children else "") \
        or first_text(card, '.plan-name, h3, h4')
    price = (heading_children[1].get_text().strip() if len(heading_children) > 1 else "") \
        or first_text(card, '.plan-price, .price')
    description = select_text(card, '[data-test-id="additional-charges"]') \
        or select_text(card, '.plan-description, .pricing-description')

    feature_lists = select_all(card, '[data-test-id="features"] ul, .features ul, ul[data-test-id="features"]')
    features = [li.get_text().strip() for li in child_elements(feature_lists)]

    return PricingPlan(
        name=name,
        price=clean_price(price),
        description=description,
        features=[feature for feature in features if feature]
    )


def extract_pricing_plans(doc: BeautifulSoup) -> List[PricingPlan]:
    """价格方案卡片，保持 DOM 顺序"""
    cards = []
    for section in select_all(doc, '#adp-pricing, [data-test-id="pricing-section"]'):
        cards.extend(select_all(section, '.app-details-pricing-plan-card, [data-test-id="pricing-plan"]'))
    return [_pricing_plan(card) for card in unique_elements(cards)]


# ==================== 语言 ====================

def _languages_from_json_ld(doc: BeautifulSoup) -> Optional[List[str]]:
    in_language = parse_json_ld(doc).get('inLanguage')
    if isinstance(in_language, list):
        return [str(lang) for lang in in_language if lang]
    if isinstance(in_language, str) and in_language:
        return [in_language]
    return None


def _split_languages(text: str) -> List[str]:
    languages = [re.sub(r'\s+', ' ', lang.strip()) for lang in _LANGUAGE_SPLIT_RE.split(text)]
    return [lang for lang in languages if 0 < len(lang) < 30]


def _languages_from_label(doc: BeautifulSoup) -> Optional[List[str]]:
    for container in select_all(doc, '.tw-flex.tw-flex-col'):
        labels = select_all(container, 'p:-soup-contains("Languages")')
        if not labels:
            continue
        content = []
        for parent in unique_parents(labels):
            content.extend(select_all(parent, '.tw-col-span-full.sm\\:tw-col-span-3 p'))
        if content:
            languages = _split_languages(content[0].get_text().strip())
            if languages:
                return languages
    return None


def _languages_from_sections(doc: BeautifulSoup) -> Optional[List[str]]:
    for selector in LANGUAGE_SECTION_SELECTORS:
        text = select_text(doc, selector)
        if not text:
            continue
        for pattern in (_KNOWN_LANGUAGE_RE, _LANGUAGE_LIST_RE):
            match = pattern.search(text)
            if not match:
                continue
            languages = [lang.strip() for lang in match.group(0).split(',')]
            if languages and all(1 < len(lang) < 20 for lang in languages):
                return languages
    return None


def _languages_from_grids(doc: BeautifulSoup) -> Optional[List[str]]:
    for grid in select_all(doc, '.tw-grid'):
        text = select_text(grid, '.tw-text-fg-secondary.tw-text-body-md')
        if not text or ',' not in text:
            continue
        items = [item.strip() for item in text.split(',')]
        likely = [item for item in items if 0 < len(item) < 20]
        if len(likely) == len(items) and len(items) > 1:
            return likely
    return None


LANGUAGE_STRATEGIES = [
    _languages_from_json_ld,
    _languages_from_label,
    _languages_from_sections,
    _languages_from_grids,
]


def extract_languages(doc: BeautifulSoup) -> List[str]:
    return first_match(LANGUAGE_STRATEGIES, doc, default=[])


# ==================== Works with ====================

def _list_items(container: Tag, selector: str) -> List[str]:
    # 去掉结尾的逗号
    items = [re.sub(r',$', '', li.get_text().strip()) for li in select_all(container, selector)]
    return [item for item in items if item]


def _works_with_from_label(doc: BeautifulSoup) -> Optional[List[str]]:
    items: List[str] = []
    for parent in unique_parents(select_all(doc, 'p:-soup-contains("Works with")')):
        items.extend(_list_items(parent, 'ul li'))
    return items or None


def _works_with_from_grids(doc: BeautifulSoup) -> Optional[List[str]]:
    for grid in select_all(doc, '.tw-grid'):
        if select_first(grid, 'p:-soup-contains("Works with")') is None:
            continue
        items = _list_items(grid, 'li')
        if items:
            return items
    return None


def extract_works_with(doc: BeautifulSoup) -> List[str]:
    return first_match([_works_with_from_label, _works_with_from_grids], doc, default=[])


# ==================== 分类 ====================

def _collect_categories(links: List[Tag], categories: List[CategoryRef], base_url: str) -> List[CategoryRef]:
    """按名称去重追加分类链接"""
    for a in links:
        name = a.get_text().strip()
        url = attr_of(a, 'href')
        if name and url and not any(cat.name == name for cat in categories):
            categories.append(CategoryRef(name=name, url=absolute_url(url, base_url)))
    return categories


def _categories_from_accordion(doc: BeautifulSoup, base_url: str) -> Optional[List[CategoryRef]]:
    links = select_all(
        doc, '[data-accordion-target="wrapper"] .tw-flex.tw-justify-between a[href*="/categories/"]'
    )
    return _collect_categories(links, [], base_url) or None


def _categories_from_labels(doc: BeautifulSoup, base_url: str) -> Optional[List[CategoryRef]]:
    for selector in CATEGORY_LABEL_SELECTORS:
        for label in select_all(doc, selector):
            parent = closest(label, '.tw-grid, .category-container, .tw-flex-col')
            if parent is None:
                continue

            links = select_all(
                parent, '.tw-flex.tw-justify-between a, .category-links a, [data-test-id="category-link"]'
            )
            categories = _collect_categories(links, [], base_url)
            if categories:
                return categories

            categories = _collect_categories(select_all(parent, 'a[href*="/categories/"]'), [], base_url)
            if categories:
                return categories
    return None


def _categories_from_breadcrumb(doc: BeautifulSoup, base_url: str) -> Optional[List[CategoryRef]]:
    categories = []
    for a in select_all(doc, '.breadcrumb a, .nav-breadcrumb a, [data-test-id="breadcrumb"] a'):
        name = a.get_text().strip()
        url = attr_of(a, 'href')
        if name and url and name not in BREADCRUMB_SKIP_NAMES:
            categories.append(CategoryRef(name=name, url=absolute_url(url, base_url)))
    return categories or None


def _categories_from_grid_label(doc: BeautifulSoup, base_url: str) -> Optional[List[CategoryRef]]:
    categories: List[CategoryRef] = []
    for label in select_all(doc, 'p:-soup-contains("Categories")'):
        grid = closest(label, '.tw-grid')
        if grid is None:
            continue
        links = select_all(grid, '.tw-flex.tw-justify-between a[href*="/categories/"]')
        _collect_categories(links, categories, base_url)
        if categories:
            return categories
    return None


CATEGORY_STRATEGIES = [
    _categories_from_accordion,
    _categories_from_labels,
    _categories_from_breadcrumb,
    _categories_from_grid_label,
]


def extract_categories(doc: BeautifulSoup, base_url: str = APP_STORE_BASE_URL) -> List[CategoryRef]:
    return first_match(CATEGORY_STRATEGIES, doc, base_url, default=[])


# ==================== 开发者 / 上线日期 ====================

def _developer_grid(doc: BeautifulSoup) -> Optional[Tag]:
    grids = select_all(select_first(doc, DEVELOPER_SECTION_SELECTOR), '.tw-grid')
    return grids[1] if len(grids) > 1 else None


def extract_developer(doc: BeautifulSoup, base_url: str = APP_STORE_BASE_URL) -> DeveloperRef:
    grid = _developer_grid(doc)

    name = first_match([
        lambda d: first_text(grid, 'a'),
        lambda d: select_text(d, '[data-test-id="developer-name"]'),
        lambda d: first_text(d, '.tw-text-body-md a'),
        lambda d: meta_content(d, 'meta[property="twitter:site"]').replace('@', ''),
    ], doc, default="")

    url = first_match([
        lambda d: first_attr(grid, 'a', 'href'),
        lambda d: first_attr(d, '[data-test-id="developer-name"] a', 'href'),
        lambda d: first_attr(d, '.tw-text-body-md a', 'href'),
    ], doc, default="")

    address = first_match([
        lambda d: select_text(grid, 'p.tw-text-fg-tertiary.tw-text-body-md'),
        lambda d: select_text(d, '[data-test-id="developer-location"]'),
    ], doc, default="")

    return DeveloperRef(name=name, address=address, url=absolute_url(url, base_url))


def _launched_from_developer_grid(doc: BeautifulSoup) -> Optional[str]:
    grids = select_all(select_first(doc, DEVELOPER_SECTION_SELECTOR), '.tw-grid')
    if not grids:
        return None
    text = select_text(grids[-1], '.tw-text-fg-secondary.tw-text-body-md')
    return text.split('·')[0].strip()


def _launched_from_label(doc: BeautifulSoup) -> Optional[str]:
    for label in select_all(doc, 'p:-soup-contains("Launched")'):
        sibling = label.find_next_sibling('p')
        if sibling is not None:
            text = sibling.get_text().split('·')[0].strip()
            if text:
                return text
    return None


def extract_launched_text(doc: BeautifulSoup) -> str:
    """上线日期原文，例如 "March 4, 2021"；由页面解析器转成 ISO 日期"""
    return first_match([_launched_from_developer_grid, _launched_from_label], doc, default="")
