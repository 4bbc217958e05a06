from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class AppSummary:
    name: str
    url: str
    handle: str


@dataclass(frozen=True)
class UrlListing:
    total: int = 0
    urls: List[AppSummary] = field(default_factory=list)
