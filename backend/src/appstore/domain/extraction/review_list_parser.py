from typing import List, Optional
from bs4 import BeautifulSoup, Tag

from .count_fields import extract_rating_counts
from .dom import select_all
from .pagination import extract_pagination
from .review_fields import (
    REVIEW_CONTAINER_SELECTOR, extract_app_identity, extract_location_and_usage,
    extract_review_content, extract_review_date_text, extract_review_id,
    extract_review_rating, extract_reviewer
)
from .text_normalizer import parse_date
from .url_normalizer import APP_STORE_BASE_URL
from ..value_objects.review import AppIdentity, Review, ReviewPage

UNKNOWN_APP_NAME = "Unknown App"


def parse_review_container(review: Tag, app: AppIdentity) -> Optional[Review]:
    """
    解析单个评论容器
    清理后评论人或正文为空时不产出评论（返回 None）
    """
    reviewer = extract_reviewer(review)
    content = extract_review_content(review)
    if not reviewer or not content:
        return None

    review_date = extract_review_date_text(review)
    location, usage_time = extract_location_and_usage(review, reviewer, review_date)

    return Review(
        app_url=app.url,
        app_name=app.name or UNKNOWN_APP_NAME,
        reviewer=reviewer,
        review_created_date=parse_date(review_date),
        reviewer_location=location,
        rating=extract_review_rating(review),
        reviewer_latest_used_date=usage_time,
        review_content=content,
        review_id=extract_review_id(review)
    )


def extract_reviews(doc: BeautifulSoup, base_url: str = APP_STORE_BASE_URL) -> List[Review]:
    # 应用身份只解析一次，显式传给每个评论容器
    app = extract_app_identity(doc, base_url)

    reviews = []
    for container in select_all(doc, REVIEW_CONTAINER_SELECTOR):
        review = parse_review_container(container, app)
        if review is not None:
            reviews.append(review)
    return reviews


def parse_reviews(doc: BeautifulSoup, base_url: str = APP_STORE_BASE_URL) -> ReviewPage:
    return ReviewPage(
        reviews=extract_reviews(doc, base_url),
        pagination=extract_pagination(doc),
        summary=extract_rating_counts(doc)
    )
