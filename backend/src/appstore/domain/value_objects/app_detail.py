from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class DeveloperRef:
    name: str = ""
    address: str = ""
    url: str = ""


@dataclass(frozen=True)
class CategoryRef:
    name: str
    url: str


@dataclass(frozen=True)
class PricingPlan:
    name: str = ""
    price: str = "0"
    description: str = ""
    features: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class AppDetail:
    title: str = ""
    description: str = ""
    logo: str = ""
    rating: str = ""
    review_count: int = 0
    developer: DeveloperRef = field(default_factory=DeveloperRef)
    languages: List[str] = field(default_factory=list)
    categories: List[CategoryRef] = field(default_factory=list)
    works_with: List[str] = field(default_factory=list)
    pricing: str = ""
    pricings: List[PricingPlan] = field(default_factory=list)
    launched_date: Optional[str] = None
