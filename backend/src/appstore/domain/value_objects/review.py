from dataclasses import dataclass, field
from typing import List

from .pagination_info import PaginationInfo


@dataclass(frozen=True)
class AppIdentity:
    """评论页头部解析出的应用身份，所有评论共享"""
    url: str = ""
    name: str = ""


@dataclass(frozen=True)
class Review:
    app_url: str
    app_name: str
    reviewer: str
    review_created_date: str
    reviewer_location: str
    rating: int
    reviewer_latest_used_date: str
    review_content: str
    review_id: str = ""


@dataclass(frozen=True)
class RatingCount:
    label: str
    count: int = 0


@dataclass(frozen=True)
class ReviewPage:
    reviews: List[Review] = field(default_factory=list)
    pagination: PaginationInfo = field(default_factory=PaginationInfo)
    summary: List[RatingCount] = field(default_factory=list)
