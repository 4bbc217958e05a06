from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ListingApp:
    """分类页与搜索页共用的应用卡片"""
    name: str
    url: str
    position: int
    handle: Optional[str] = None
    is_sponsored: bool = False
    is_built_for_shopify: bool = False
