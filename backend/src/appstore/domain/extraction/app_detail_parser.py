from bs4 import BeautifulSoup

from .app_fields import (
    extract_categories, extract_description, extract_developer, extract_languages,
    extract_launched_text, extract_logo, extract_pricing, extract_pricing_plans,
    extract_rating, extract_review_count, extract_title, extract_works_with
)
from .text_normalizer import parse_date
from .url_normalizer import APP_STORE_BASE_URL
from ..value_objects.app_detail import AppDetail


def parse_app_detail(doc: BeautifulSoup, base_url: str = APP_STORE_BASE_URL) -> AppDetail:
    """
    应用详情页 -> AppDetail

    hero 区块（标题/logo/评分/价格）、开发者区块与语言、分类、Works with、
    上线日期等字段提取器组合成一条记录；任何字段缺失都只会得到默认值。
    相对的分类、开发者链接按 base_url 补全。
    """
    launched = extract_launched_text(doc)

    return AppDetail(
        title=extract_title(doc),
        description=extract_description(doc),
        logo=extract_logo(doc),
        rating=extract_rating(doc),
        review_count=extract_review_count(doc),
        developer=extract_developer(doc, base_url),
        languages=extract_languages(doc),
        categories=extract_categories(doc, base_url),
        works_with=extract_works_with(doc),
        pricing=extract_pricing(doc),
        pricings=extract_pricing_plans(doc),
        launched_date=parse_date(launched) if launched else None
    )
