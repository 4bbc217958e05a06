from dataclasses import dataclass, field
from typing import List

from .listing_app import ListingApp
from .pagination_info import PaginationInfo


@dataclass(frozen=True)
class SearchResult:
    query: str
    total_count: int = 0
    apps: List[ListingApp] = field(default_factory=list)
    pagination: PaginationInfo = field(default_factory=PaginationInfo)
    has_results: bool = False

    @classmethod
    def empty(cls, query: str, page: int = 1) -> "SearchResult":
        """既没有内联片段也没有片段地址时返回的标准空结果"""
        return cls(
            query=query,
            total_count=0,
            apps=[],
            pagination=PaginationInfo(has_next_page=False, total_pages=1, current_page=page),
            has_results=False
        )
