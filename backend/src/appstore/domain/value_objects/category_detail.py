from dataclasses import dataclass, field
from enum import Enum
from typing import List

from .listing_app import ListingApp
from .pagination_info import PaginationInfo


class PageType(Enum):
    TOPIC = "topic"
    SECONDARY = "secondary"
    TERTIARY = "tertiary"


@dataclass(frozen=True)
class CategoryDetail:
    name: str = ""
    description: str = ""
    app_count: int = 0
    apps: List[ListingApp] = field(default_factory=list)
    pagination: PaginationInfo = field(default_factory=PaginationInfo)
    page_type: PageType = PageType.TOPIC
